from __future__ import annotations

import logging

import pytest

from projectzipper.models import PipelineState, ProjectFile


@pytest.fixture(autouse=True)
def _isolate_model_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ambient API keys on the developer machine out of the tests."""
    for key in ("PROJECTZIPPER_API_KEY", "GEMINI_API_KEY", "API_KEY"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_cli_logging():
    """Drop handlers bound to captured streams once a CLI test finishes."""
    yield
    logger = logging.getLogger("projectzipper")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.propagate = True


@pytest.fixture
def sample_state() -> PipelineState:
    return PipelineState(
        full_project_content="### `a.txt`\n```\nhello\n```",
        files=[ProjectFile("a.txt", "hello")],
    )
