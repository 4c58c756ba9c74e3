import re
from typing import List, Tuple

from ..models import Intent

# A number, a binary operator, then another number (parentheses and a sign allowed between).
# Matches only start at the first digit of a number, so long digit runs are scanned once.
_ARITHMETIC = r"(?<![\d.,])\d[\d.,]*[\s)]*[-+*/%^][\s(]*(?:[-+][\s(]*)?\d"

# Checked in order; the first pattern that matches decides the intent.
INTENT_RULES: List[Tuple[re.Pattern, Intent]] = [
    (re.compile(_ARITHMETIC), Intent.MATH),
    (re.compile(r"plan|schedule|roadmap|steps|strategy", re.IGNORECASE), Intent.PLAN),
    (re.compile(r"idea|ideas|brainstorm|creative|names?", re.IGNORECASE), Intent.BRAINSTORM),
    (re.compile(r"summarise|summarize|recap|tl;dr", re.IGNORECASE), Intent.SUMMARIZE),
    (
        re.compile(r"prioriti[sz]e|ranking|order.*tasks|what to do first", re.IGNORECASE),
        Intent.PRIORITIZE,
    ),
]


def classify_intent(text: str) -> Intent:
    """Return the intent of the first rule matching ``text``, else ``Intent.INSIGHT``."""
    for pattern, intent in INTENT_RULES:
        if pattern.search(text):
            return intent
    return Intent.INSIGHT
