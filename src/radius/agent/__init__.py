from __future__ import annotations

"""Agent package for the Radius rule-based chat assistant.

This package exposes a service-style interface for the agent while keeping
the classifier, the arithmetic evaluator and the response generators in
separate modules.
"""

from .agent import (
    RadiusAgentService,
    get_agent_service,
    run_agent,
)
from .classifier import classify_intent

__all__ = [
    "RadiusAgentService",
    "classify_intent",
    "get_agent_service",
    "run_agent",
]
