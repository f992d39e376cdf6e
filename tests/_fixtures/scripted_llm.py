"""Scripted model replies for exercising the workflow steps offline."""

from __future__ import annotations

from typing import Callable, List, Optional

from projectzipper.llm.gateway import AssistGateway
from projectzipper.llm.runner import LLMRequest, LLMRunner


class ScriptedReplies:
    """Runner callable that returns (or raises) queued replies in order."""

    def __init__(self, *replies: object) -> None:
        self.replies: List[object] = list(replies)
        self.requests: List[LLMRequest] = []

    def __call__(self, request: LLMRequest) -> str:
        self.requests.append(request)
        if not self.replies:
            raise AssertionError(f"Unexpected model call #{len(self.requests)}")
        reply = self.replies.pop(0)
        if isinstance(reply, BaseException):
            raise reply
        return reply  # type: ignore[return-value]

    @property
    def prompts(self) -> List[str]:
        return [request.prompt for request in self.requests]


def gateway_factory(
    script: ScriptedReplies | None = None,
    *,
    available: bool = True,
) -> Callable[[Optional[str]], Optional[AssistGateway]]:
    """Return a gateway factory backed by ``script`` (or always unavailable)."""
    credentials: List[Optional[str]] = []

    def factory(credential: Optional[str] = None) -> Optional[AssistGateway]:
        credentials.append(credential)
        if not available or script is None:
            return None
        runner = LLMRunner(api_key="test-key", base_url=None, runner=script)
        return AssistGateway(runner)

    factory.credentials = credentials  # type: ignore[attr-defined]
    return factory


__all__ = ["ScriptedReplies", "gateway_factory"]
