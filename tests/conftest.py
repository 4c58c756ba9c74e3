import sys
from pathlib import Path

import pytest


_root = Path(__file__).resolve().parents[1]
_src = _root / "src"
if _src.exists() and str(_src) not in sys.path:
    sys.path.insert(0, str(_src))

from radius.models import Message  # noqa: E402


@pytest.fixture
def conversation() -> list[Message]:
    """Eight-message history with a system prompt at the start."""
    return [
        Message("system", "You are Radius."),
        Message("user", "first question"),
        Message("assistant", "first answer"),
        Message("user", "second   question\nwith newline"),
        Message("assistant", "second answer"),
        Message("user", "third question"),
        Message("assistant", "third answer"),
        Message("user", "Summarize our conversation so far"),
    ]
