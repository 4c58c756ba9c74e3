import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx

from ..models import AgentStep
from .api import AgentApiClient, AgentApiError

logger = logging.getLogger(__name__)

GREETING = (
    "Hi, I am {name}. I can break down your goals, crunch quick numbers, and "
    "suggest concrete next steps. What should we work on?"
)
GREETING_SUGGESTIONS = [
    "Plan my afternoon to finish two tasks",
    "Draft a friendly follow-up email",
    "Help me estimate a monthly budget",
]
ERROR_REPLY = (
    "I ran into a glitch while thinking. Try again in a moment or rephrase your request."
)

SAMPLE_PROMPTS = [
    "Help me plan a focused 30-minute workout that alternates cardio and strength.",
    "I need three marketing ideas for a zero-waste coffee brand.",
    "Summarize our conversation so far in bullet points.",
    "Solve: If I invest $150 monthly at 5% annual interest, what's the balance after 3 years?",
]


def greeting(assistant_name: str) -> str:
    return GREETING.format(name=assistant_name)


def create_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class ConversationMessage:
    """A message as shown in the UI: content plus display-only extras."""

    role: str
    content: str
    id: str = field(default_factory=create_id)
    steps: List[AgentStep] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    @classmethod
    def from_reply(cls, payload: Dict[str, Any]) -> "ConversationMessage":
        steps = [
            AgentStep(title=str(s.get("title", "")), content=str(s.get("content", "")))
            for s in payload.get("steps") or []
            if isinstance(s, dict)
        ]
        return cls(
            role="assistant",
            content=payload["content"],
            steps=steps,
            suggestions=[str(s) for s in payload.get("suggestions") or []],
        )

    def to_wire(self) -> Dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class ChatSession:
    """UI conversation state.

    Two pieces of state drive the UI: the message list and ``pending``, which
    is True while a request is in flight. Idle -> Submitting on ``begin``,
    back to Idle on ``complete`` or ``fail``.
    """

    assistant_name: str = "Radius"
    messages: List[ConversationMessage] = field(default_factory=list)
    pending: bool = False
    draft: str = ""

    def __post_init__(self) -> None:
        if not self.messages:
            self.messages.append(
                ConversationMessage(
                    role="assistant",
                    content=greeting(self.assistant_name),
                    suggestions=list(GREETING_SUGGESTIONS),
                )
            )

    def select_prompt(self, prompt: str) -> None:
        """Put a sample prompt in the composer; ignored while a request is pending."""
        if self.pending:
            return
        self.draft = prompt

    def begin(self, text: str) -> Optional[List[Dict[str, str]]]:
        """Start a turn. Returns the conversation to send, or None if nothing to do."""
        text = text.strip()
        if not text or self.pending:
            return None

        self.messages.append(ConversationMessage(role="user", content=text))
        self.draft = ""
        self.pending = True
        return [m.to_wire() for m in self.messages]

    def complete(self, payload: Dict[str, Any]) -> ConversationMessage:
        message = ConversationMessage.from_reply(payload)
        self.messages.append(message)
        self.pending = False
        return message

    def fail(self, error: Exception) -> ConversationMessage:
        logger.error("Chat request failed: %s", error)
        message = ConversationMessage(role="assistant", content=ERROR_REPLY)
        self.messages.append(message)
        self.pending = False
        return message

    def resolve(self, client: AgentApiClient) -> Optional[ConversationMessage]:
        """Send the pending turn and record the outcome. No-op when idle."""
        if not self.pending:
            return None
        try:
            payload = client.send([m.to_wire() for m in self.messages])
            return self.complete(payload)
        except (AgentApiError, httpx.HTTPError, ValueError) as e:
            return self.fail(e)
        except Exception as e:
            logger.exception("Unexpected error while waiting for the agent: %s", e)
            return self.fail(e)

    def submit(self, text: str, client: AgentApiClient) -> Optional[ConversationMessage]:
        """Run one full turn against ``client``; returns the appended assistant message."""
        if self.begin(text) is None:
            return None
        return self.resolve(client)
