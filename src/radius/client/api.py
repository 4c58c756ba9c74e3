"""HTTP client for the Radius chat endpoint."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)

CHAT_PATH = "/api/chat"


class AgentApiError(Exception):
    """The chat endpoint did not return a usable reply."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class AgentApiClient:
    """Posts conversations to ``/api/chat``.

    Requests have no timeout and are never retried; a failure surfaces to the
    caller as :class:`AgentApiError` or :class:`httpx.HTTPError`.
    """

    def __init__(self, base_url: str, transport: httpx.BaseTransport | None = None) -> None:
        self._client = httpx.Client(base_url=base_url, timeout=None, transport=transport)

    def send(self, messages: list[dict[str, str]]) -> dict[str, Any]:
        """Send the conversation and return the decoded assistant reply.

        Args:
            messages: ``[{"role": ..., "content": ...}, ...]`` oldest first.

        Returns:
            Reply dict with role, content, steps and suggestions.
        """
        logger.info("Posting %d messages to %s", len(messages), CHAT_PATH)
        response = self._client.post(CHAT_PATH, json={"messages": messages})

        if not response.is_success:
            raise AgentApiError(
                f"Failed to reach the agent ({response.status_code}): {response.text}",
                status_code=response.status_code,
            )

        payload = response.json()
        if not isinstance(payload, dict) or not isinstance(payload.get("content"), str):
            raise AgentApiError("Agent reply is missing its content")
        return payload

    def close(self) -> None:
        self._client.close()
