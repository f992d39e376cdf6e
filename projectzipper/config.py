"""Configuration loading for projectzipper (.projectzipper.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .models import StepType, WorkflowStepConfig
from .prompting.constants import default_workflow_steps, step_definition

CONFIG_FILENAME = ".projectzipper.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LLMConfig:
    """Model service settings from .projectzipper.yml."""

    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    request_timeout: Optional[float] = None


@dataclass
class ProjectZipperConfig:
    """Represents the high-level settings defined in .projectzipper.yml."""

    root: Path
    llm: LLMConfig = field(default_factory=LLMConfig)
    steps: List[WorkflowStepConfig] = field(default_factory=default_workflow_steps)
    refactor_prompt: Optional[str] = None


def load_config(config_path: Path) -> ProjectZipperConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(Path(config_path))
    root = config_file.parent.resolve()

    if not config_file.exists():
        return ProjectZipperConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    llm_data = _as_dict(data.get("llm"))
    llm = LLMConfig(
        model=_as_str(llm_data.get("model")),
        base_url=_as_str(llm_data.get("base_url")),
        api_key=_as_str(llm_data.get("api_key")),
        temperature=_as_float(llm_data.get("temperature")),
        max_tokens=_as_int(llm_data.get("max_tokens")),
        request_timeout=_as_float(llm_data.get("request_timeout")),
    )

    workflow_data = _as_dict(data.get("workflow"))
    if "steps" in workflow_data:
        steps = _parse_steps(workflow_data.get("steps"), root)
    else:
        steps = default_workflow_steps()

    refactor_data = _as_dict(data.get("refactor"))
    refactor_prompt = _read_prompt(refactor_data, root) if refactor_data else None

    return ProjectZipperConfig(root=root, llm=llm, steps=steps, refactor_prompt=refactor_prompt)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _parse_steps(value: Any, root: Path) -> List[WorkflowStepConfig]:
    if value is None:
        return []
    if not isinstance(value, Sequence) or isinstance(value, str):
        raise ConfigError("workflow.steps must be a list of step mappings")

    steps: List[WorkflowStepConfig] = []
    for index, raw in enumerate(value):
        if isinstance(raw, str):
            raw = {"type": raw}
        if not isinstance(raw, dict):
            raise ConfigError(f"workflow.steps[{index}] must be a mapping")
        type_name = _as_str(raw.get("type"))
        try:
            step_type = StepType((type_name or "").upper())
        except ValueError as exc:
            raise ConfigError(f"workflow.steps[{index}] has unknown type {type_name!r}") from exc

        definition = step_definition(step_type)
        prompt = _read_prompt(raw, root) or definition.prompt
        enabled = _as_bool(raw.get("enabled"))
        steps.append(
            WorkflowStepConfig(
                id=_as_str(raw.get("id")) or f"{step_type.value.lower()}-{index + 1}",
                type=step_type,
                name=_as_str(raw.get("name")) or definition.name,
                prompt=prompt,
                enabled=True if enabled is None else enabled,
            )
        )
    return steps


def _read_prompt(data: Dict[str, Any], root: Path) -> Optional[str]:
    inline = data.get("prompt")
    if isinstance(inline, str) and inline.strip():
        return inline
    prompt_file = _as_str(data.get("prompt_file"))
    if not prompt_file:
        return None
    path = (root / prompt_file).expanduser()
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read prompt file {path}: {exc}") from exc


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return str(value).lower()
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None


__all__ = ["CONFIG_FILENAME", "ConfigError", "LLMConfig", "ProjectZipperConfig", "load_config"]
