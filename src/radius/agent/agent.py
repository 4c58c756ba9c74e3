import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..models import AgentReply, AgentStep, Intent, Message
from ..settings import get_settings
from .classifier import classify_intent
from .expression import calculate_expression
from .generators import (
    KNOWLEDGE_BASE,
    KnowledgeEntry,
    brainstorm_ideas,
    build_plan,
    match_knowledge,
    prioritize_tasks,
    summarize_conversation,
)

logger = logging.getLogger(__name__)


IDLE_REPLY = "I'm ready whenever you are."
IDLE_SUGGESTIONS = [
    "Give me a goal with a tight deadline",
    "Ask me to condense a long message",
    "Share tasks and I will prioritise them",
]

REFLECTIVE_PROMPT = (
    "- Reflect your objective in one sentence to confirm I understood it correctly.\n"
    "- Identify one blocker or variable that worries you.\n"
    "- Ask for a concrete artefact: plan, outline, script, calculation, or critique."
)

FOLLOW_UP_SUGGESTIONS: Dict[Intent, List[str]] = {
    Intent.MATH: [
        "Compare this result with another scenario",
        "Ask me to turn the numbers into a short explanation",
        "Create a table of outcomes with different variables",
    ],
    Intent.PLAN: [
        "Request a 7-day timeline for the plan",
        "Ask for the single most important milestone",
        "Turn the plan into calendar-friendly blocks",
    ],
    Intent.BRAINSTORM: [
        "Narrow ideas down to one standout concept",
        "Turn this concept into a user journey",
        "Draft a 3-sentence pitch for the top idea",
    ],
    Intent.SUMMARIZE: [
        "Extract action items from the summary",
        "Highlight risks or open questions",
        "Refine the summary for a stakeholder update",
    ],
    Intent.PRIORITIZE: [
        "Group tasks by effort versus impact",
        "Schedule the top task with a realistic time slot",
        "Delegate or defer the lowest priorities",
    ],
    Intent.INSIGHT: [
        "Ask me to dive deeper into one takeaway",
        "Layer in real constraints (time, budget, audience)",
        "Convert this into an actionable checklist",
    ],
}

# Generators that only need the latest user text, with the step describing them.
_TEXT_HANDLERS: Dict[Intent, Tuple[Callable[[str], str], AgentStep]] = {
    Intent.MATH: (
        calculate_expression,
        AgentStep("Tool", "Evaluated arithmetic expression using the safe math parser."),
    ),
    Intent.PLAN: (
        build_plan,
        AgentStep(
            "Method", "Expanded request into a structured plan with five sequenced actions."
        ),
    ),
    Intent.BRAINSTORM: (
        brainstorm_ideas,
        AgentStep(
            "Method", "Generated four contrasting idea angles to encourage divergent thinking."
        ),
    ),
    Intent.PRIORITIZE: (
        prioritize_tasks,
        AgentStep(
            "Method",
            "Ranked supplied tasks based on urgency and impact heuristics "
            "to highlight what to do first.",
        ),
    ),
}


def follow_up_suggestions(intent: Intent) -> List[str]:
    return list(FOLLOW_UP_SUGGESTIONS[intent])


def latest_user_message(messages: Sequence[Message]) -> Optional[Message]:
    for message in reversed(messages):
        if message.role == "user":
            return message
    return None


class RadiusAgentService:
    """Rule-based agent: classifies the latest user message and builds a reply.

    Holds only read-only configuration, so one instance can serve any number
    of concurrent requests.
    """

    def __init__(
        self,
        assistant_name: str = "Radius",
        knowledge_base: Sequence[KnowledgeEntry] = KNOWLEDGE_BASE,
    ) -> None:
        self._assistant_name = assistant_name
        self._knowledge_base = tuple(knowledge_base)

    def idle_reply(self) -> AgentReply:
        return AgentReply(
            content=IDLE_REPLY,
            steps=[AgentStep("Status", "No user input detected, so I am idling.")],
            suggestions=list(IDLE_SUGGESTIONS),
        )

    def _respond(
        self, intent: Intent, user_text: str, messages: Sequence[Message]
    ) -> Tuple[str, AgentStep]:
        """Run the generator for ``intent`` and describe what it did."""
        if intent in _TEXT_HANDLERS:
            generator, step = _TEXT_HANDLERS[intent]
            return generator(user_text), step

        if intent is Intent.SUMMARIZE:
            return (
                summarize_conversation(messages, assistant_name=self._assistant_name),
                AgentStep(
                    "Method", "Compressed the last exchanges into a concise bullet-point recap."
                ),
            )

        insight = match_knowledge(user_text, self._knowledge_base)
        if insight:
            return insight, AgentStep(
                "Knowledge",
                "Matched the topic against the curated playbook and surfaced relevant tactics.",
            )
        return REFLECTIVE_PROMPT, AgentStep(
            "Fallback",
            "No direct tool matched, so I offered a structured prompt to refine the conversation.",
        )

    def run_agent(self, messages: Sequence[Message]) -> AgentReply:
        """Produce one reply for the conversation ``messages``.

        Args:
            messages: Full history, oldest first.

        Returns:
            AgentReply: Content plus the steps taken and follow-up suggestions.
        """
        last = latest_user_message(messages)
        if last is None:
            logger.info("No user message in history; returning idle reply")
            return self.idle_reply()

        user_text = last.content.strip()
        intent = classify_intent(user_text)
        logger.info("Detected intent: %s", intent.value)
        logger.debug("User message: %s", user_text[:200])

        steps = [
            AgentStep("Intent Detection", f"Input suggests a **{intent.value}** style response.")
        ]
        content, step = self._respond(intent, user_text, messages)
        steps.append(step)
        logger.info("Intent %s handled by %s", intent.value, step.title)

        steps.append(AgentStep("Next Move", "Suggested follow-up paths to continue the session."))
        return AgentReply(
            content=content,
            steps=steps,
            suggestions=follow_up_suggestions(intent),
        )


_SERVICE: Optional[RadiusAgentService] = None


def get_agent_service() -> RadiusAgentService:
    """Return the shared agent service, built from settings on first use."""
    global _SERVICE
    if _SERVICE is None:
        _SERVICE = RadiusAgentService(assistant_name=get_settings().assistant_name)
    return _SERVICE


def run_agent(messages: Sequence[Message]) -> AgentReply:
    return get_agent_service().run_agent(messages)


__all__ = [
    "RadiusAgentService",
    "follow_up_suggestions",
    "get_agent_service",
    "latest_user_message",
    "run_agent",
]
