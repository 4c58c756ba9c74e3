from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Literal

from pydantic import BaseModel, Field

Role = Literal["system", "user", "assistant"]


class Intent(str, Enum):
    """Category assigned to a user message; selects the response generator."""

    MATH = "math"
    PLAN = "plan"
    BRAINSTORM = "brainstorm"
    SUMMARIZE = "summarize"
    PRIORITIZE = "prioritize"
    INSIGHT = "insight"


@dataclass(frozen=True)
class Message:
    """A single chat message."""

    role: str
    content: str


@dataclass(frozen=True)
class AgentStep:
    """Human-readable trace entry explaining which heuristic fired."""

    title: str
    content: str


@dataclass(frozen=True)
class AgentReply:
    """Assistant reply returned by the agent for one request."""

    content: str
    steps: List[AgentStep] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    role: str = "assistant"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Wire schemas for POST /api/chat


class ChatMessage(BaseModel):
    role: Role
    content: str

    def to_message(self) -> Message:
        return Message(role=self.role, content=self.content)


class ChatRequest(BaseModel):
    messages: List[ChatMessage] = Field(min_length=1)


class ChatStep(BaseModel):
    title: str
    content: str


class ChatReply(BaseModel):
    role: Literal["assistant"] = "assistant"
    content: str
    steps: List[ChatStep] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str
