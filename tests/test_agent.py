import re

import pytest

from radius.agent.agent import (
    FOLLOW_UP_SUGGESTIONS,
    IDLE_REPLY,
    REFLECTIVE_PROMPT,
    RadiusAgentService,
    latest_user_message,
    run_agent,
)
from radius.agent.generators import KnowledgeEntry
from radius.models import AgentStep, Intent, Message


@pytest.fixture
def service() -> RadiusAgentService:
    return RadiusAgentService()


def _titles(steps: list[AgentStep]) -> list[str]:
    return [s.title for s in steps]


def test_idle_reply_without_user_message(service: RadiusAgentService) -> None:
    """No user message yields the idle reply with exactly three suggestions."""
    for history in ([], [Message("assistant", "Hi there")]):
        reply = service.run_agent(history)
        assert reply.role == "assistant"
        assert reply.content == IDLE_REPLY
        assert len(reply.suggestions) == 3
        assert _titles(reply.steps) == ["Status"]


def test_latest_user_message_scans_from_end() -> None:
    history = [Message("user", "old"), Message("assistant", "a"), Message("user", "new")]
    assert latest_user_message(history) == Message("user", "new")
    assert latest_user_message([Message("assistant", "a")]) is None


def test_plan_request(service: RadiusAgentService) -> None:
    """A planning request gets a five-item numbered plan."""
    reply = service.run_agent([Message("user", "Help me plan a focused 30-minute workout")])
    assert "**plan**" in reply.steps[0].content
    assert len(re.findall(r"^\d\. ", reply.content, re.MULTILINE)) == 5
    assert _titles(reply.steps) == ["Intent Detection", "Method", "Next Move"]
    assert reply.suggestions == FOLLOW_UP_SUGGESTIONS[Intent.PLAN]


def test_math_request(service: RadiusAgentService) -> None:
    """Arithmetic is evaluated and reported with the Tool step."""
    reply = service.run_agent([Message("user", "2+2")])
    assert "4" in reply.content
    assert _titles(reply.steps) == ["Intent Detection", "Tool", "Next Move"]
    assert reply.suggestions == FOLLOW_UP_SUGGESTIONS[Intent.MATH]


def test_uses_latest_user_message_only(service: RadiusAgentService) -> None:
    history = [
        Message("user", "2+2"),
        Message("assistant", "The expression 2+2 evaluates to **4**."),
        Message("user", "brainstorm names for a bakery"),
    ]
    reply = service.run_agent(history)
    assert "**brainstorm**" in reply.steps[0].content
    assert reply.content.startswith("1. Unexpected partnerships")


def test_summarize_uses_full_history(
    service: RadiusAgentService, conversation: list[Message]
) -> None:
    reply = service.run_agent(conversation)
    assert reply.content.startswith("Here's what we covered recently:")
    assert "- Radius: third answer" in reply.content
    assert reply.steps[1].content.startswith("Compressed the last exchanges")


def test_prioritize_request(service: RadiusAgentService) -> None:
    reply = service.run_agent(
        [Message("user", "Prioritize these:\nDraft email\nLaunch campaign today")]
    )
    assert reply.content.startswith("1. Launch campaign today (priority score 9)")
    assert reply.suggestions == FOLLOW_UP_SUGGESTIONS[Intent.PRIORITIZE]


def test_whitespace_only_message_does_not_raise(service: RadiusAgentService) -> None:
    reply = service.run_agent([Message("user", "   ")])
    assert reply.content == REFLECTIVE_PROMPT


def test_insight_knowledge_match(service: RadiusAgentService) -> None:
    reply = service.run_agent([Message("user", "How do I get better at deep work?")])
    assert _titles(reply.steps) == ["Intent Detection", "Knowledge", "Next Move"]
    assert reply.content.startswith("- Alternate 50 minutes")


def test_insight_fallback(service: RadiusAgentService) -> None:
    reply = service.run_agent([Message("user", "Tell me something about the weather")])
    assert reply.content == REFLECTIVE_PROMPT
    assert _titles(reply.steps) == ["Intent Detection", "Fallback", "Next Move"]
    assert reply.suggestions == FOLLOW_UP_SUGGESTIONS[Intent.INSIGHT]


def test_custom_knowledge_base() -> None:
    service = RadiusAgentService(
        knowledge_base=[KnowledgeEntry(triggers=(re.compile("garden"),), response="- Water early.")]
    )
    reply = service.run_agent([Message("user", "any garden advice")])
    assert reply.content == "- Water early."


def test_assistant_name_used_in_summary() -> None:
    service = RadiusAgentService(assistant_name="Compass")
    reply = service.run_agent(
        [Message("user", "hello"), Message("assistant", "hi"), Message("user", "recap")]
    )
    assert "- Compass: hi" in reply.content


def test_reply_serializes_to_wire_shape() -> None:
    """to_dict produces the HTTP response body shape."""
    body = run_agent([Message("user", "2+2")]).to_dict()
    assert set(body) == {"role", "content", "steps", "suggestions"}
    assert body["role"] == "assistant"
    assert body["steps"][0] == {
        "title": "Intent Detection",
        "content": "Input suggests a **math** style response.",
    }


def test_suggestions_are_copies(service: RadiusAgentService) -> None:
    reply = service.run_agent([Message("user", "2+2")])
    reply.suggestions.append("extra")
    assert len(FOLLOW_UP_SUGGESTIONS[Intent.MATH]) == 3
