"""Response generators for each intent.

Every function here is pure and deterministic: the same input always yields
the same text, and nothing outside the arguments is read or modified.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..models import Message

SUMMARY_WINDOW = 6
MIN_TASK_LENGTH = 5

NOTHING_TO_SUMMARIZE = "We've just started chatting, so there's nothing to summarise yet."
NO_TASKS_MESSAGE = (
    "Please provide a list of tasks separated by commas or new lines so I can rank them."
)


@dataclass(frozen=True)
class KnowledgeEntry:
    """Canned advice returned when any of its triggers matches."""

    triggers: Tuple[re.Pattern, ...]
    response: str


KNOWLEDGE_BASE: Tuple[KnowledgeEntry, ...] = (
    KnowledgeEntry(
        triggers=(re.compile(r"productivity|focus|deep work", re.IGNORECASE),),
        response=(
            "- Alternate 50 minutes of focus with 10-minute resets.\n"
            "- Decide the single critical output before you start.\n"
            "- Park distracting ideas in an inbox so you can return without losing flow."
        ),
    ),
    KnowledgeEntry(
        triggers=(re.compile(r"marketing|campaign|launch", re.IGNORECASE),),
        response=(
            "- Anchor on one memorable story per audience segment.\n"
            "- Repurpose high-performing assets into quick experiments on new channels.\n"
            "- Blend a fast feedback metric (CTR) with a slower health metric "
            "(share of conversation)."
        ),
    ),
    KnowledgeEntry(
        triggers=(re.compile(r"learning|study|exam", re.IGNORECASE),),
        response=(
            "- Begin with a spaced repetition sweep to surface weak spots.\n"
            "- Convert theories into applied micro-projects within 24 hours.\n"
            "- Teach the concept back to someone (or your notes) in plain language."
        ),
    ),
)

_PLAN_STEPS = (
    'Clarify the true objective and define a measurable finish line for "{goal}".',
    "List the constraints (time, budget, collaborators) so we can work within them.",
    "Break the work into 3-5 atomic actions that can each be completed in one sitting.",
    "Sequence the actions by impact and dependency, then block time for the first step.",
    "Create a feedback hook: what evidence will tell us we can adjust or stop?",
)

_BRAINSTORM_ANGLES = (
    "Unexpected partnerships or audiences",
    "Moments in the customer journey you can delight",
    "Small experiments you can ship this week",
    "Signals that prove the idea is working",
)

_TASK_SEPARATORS = re.compile(r"\n|,|;")
_URGENT = re.compile(r"today|urgent|now|soon|asap", re.IGNORECASE)
_HIGH_IMPACT = re.compile(r"launch|client|revenue|milestone|deadline", re.IGNORECASE)
_MEDIUM_IMPACT = re.compile(r"review|prep|draft", re.IGNORECASE)


def _numbered(lines: Sequence[str]) -> str:
    return "\n".join(f"{index}. {line}" for index, line in enumerate(lines, 1))


def build_plan(goal: str) -> str:
    goal = goal.strip()
    return _numbered([step.format(goal=goal) for step in _PLAN_STEPS])


def brainstorm_ideas(topic: str) -> str:
    topic = topic.strip()
    return _numbered(
        [
            f'{angle}, specifically for "{topic}". Think about what would feel '
            "refreshing compared to the status quo."
            for angle in _BRAINSTORM_ANGLES
        ]
    )


def summarize_conversation(history: Sequence[Message], assistant_name: str = "Radius") -> str:
    """Recap the last few non-system messages as bullets, oldest first."""
    recent = [m for m in history if m.role != "system"][-SUMMARY_WINDOW:]
    if not recent:
        return NOTHING_TO_SUMMARIZE

    lines = ["Here's what we covered recently:"]
    for message in recent:
        speaker = assistant_name if message.role == "assistant" else "You"
        content = " ".join(message.content.split())
        lines.append(f"- {speaker}: {content}")
    return "\n".join(lines)


def score_task(task: str) -> int:
    """Priority score: ``2 * urgency + impact``."""
    urgency = 3 if _URGENT.search(task) else 1
    if _HIGH_IMPACT.search(task):
        impact = 3
    elif _MEDIUM_IMPACT.search(task):
        impact = 2
    else:
        impact = 1
    return urgency * 2 + impact


def rank_tasks(text: str) -> List[Tuple[str, int]]:
    """Split ``text`` into tasks and rank them by score, highest first.

    Ties keep the order in which the tasks were given.
    """
    tasks = [part.strip() for part in _TASK_SEPARATORS.split(text)]
    tasks = [task for task in tasks if len(task) >= MIN_TASK_LENGTH]
    scored = [(task, score_task(task)) for task in tasks]
    return sorted(scored, key=lambda item: item[1], reverse=True)


def prioritize_tasks(text: str) -> str:
    ranked = rank_tasks(text)
    if not ranked:
        return NO_TASKS_MESSAGE
    return _numbered([f"{task} (priority score {score})" for task, score in ranked])


def match_knowledge(
    text: str, knowledge_base: Sequence[KnowledgeEntry] = KNOWLEDGE_BASE
) -> Optional[str]:
    for entry in knowledge_base:
        if any(trigger.search(text) for trigger in entry.triggers):
            return entry.response
    return None
