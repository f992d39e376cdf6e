"""CLI entrypoints for projectzipper commands."""

from __future__ import annotations

import argparse
import functools
import json
import sys
from pathlib import Path
from typing import List, Sequence

from .config import ConfigError, load_config
from .ingest import IngestError, read_input_paths
from .llm.gateway import get_gateway
from .logging import configure_logging
from .models import PipelineResult, ProjectFile, StepType, WorkflowStepConfig
from .orchestrator import Orchestrator, PipelineError
from .prompting.constants import CODE_REFACTORING_PROMPT
from .refactor import RefactorError, refactor_code


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_model_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=".",
        help="Path to .projectzipper.yml or the directory containing it (defaults to current directory).",
    )
    parser.add_argument(
        "--api-key",
        default=None,
        help="Model API key; overrides the configuration file and environment.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="projectzipper",
        description="Turn pasted project text or archives into a structured file tree.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write detailed logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    run_parser = subparsers.add_parser(
        "run",
        help="Extract files from text or uploads and run the workflow steps.",
    )
    _add_verbose_option(run_parser, suppress_default=True)
    _add_model_options(run_parser)
    run_parser.add_argument(
        "inputs",
        nargs="*",
        help="Text, markdown or zip files to process (reads stdin when omitted).",
    )
    run_parser.add_argument(
        "--text",
        default=None,
        help="Process this text instead of input files.",
    )
    run_parser.add_argument(
        "--skip",
        action="append",
        default=[],
        choices=[step.value for step in StepType],
        type=str.upper,
        help="Disable a workflow step for this run (repeatable).",
    )
    run_parser.add_argument(
        "--output-dir",
        default=None,
        help="Write the resulting project tree into this directory.",
    )
    run_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON.",
    )

    steps_parser = subparsers.add_parser(
        "steps",
        help="List the configured workflow steps.",
    )
    _add_verbose_option(steps_parser, suppress_default=True)
    steps_parser.add_argument(
        "--config",
        default=".",
        help="Path to .projectzipper.yml or the directory containing it.",
    )

    refactor_parser = subparsers.add_parser(
        "refactor",
        help="Refactor a single source file with the model.",
    )
    _add_verbose_option(refactor_parser, suppress_default=True)
    _add_model_options(refactor_parser)
    refactor_parser.add_argument("file", help="Path of the file to refactor.")

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument(
        "--config",
        default=".",
        help="Path to .projectzipper.yml or the directory containing it.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for projectzipper commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    try:
        config = load_config(Path(args.config))
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "run":
        steps = _apply_skips(config.steps, args.skip)
        orchestrator = Orchestrator(config=config, progress=_progress_printer(args))
        try:
            if args.text is not None:
                source: object = args.text
            elif args.inputs:
                source = read_input_paths([Path(item) for item in args.inputs])
            else:
                source = sys.stdin.read()
            result = orchestrator.run(source, steps, credential=args.api_key)  # type: ignore[arg-type]
        except (IngestError, PipelineError) as exc:
            parser.exit(1, f"projectzipper run failed: {exc}\nRun with --verbose for more details.\n")
        if args.output_dir:
            try:
                written = write_project(result.files, Path(args.output_dir))
            except ValueError as exc:
                parser.exit(1, f"{exc}\n")
            print(
                f"Wrote {len(written)} file(s) to {_relativize(Path(args.output_dir))}",
                file=sys.stderr if args.json else sys.stdout,
            )
        _print_result(result, as_json=bool(args.json))
    elif args.command == "steps":
        for index, step in enumerate(config.steps, start=1):
            state = "enabled" if step.enabled else "disabled"
            print(f"{index}. {step.name} [{step.type.value}] ({state})")
    elif args.command == "refactor":
        path = Path(args.file)
        try:
            code = path.read_text(encoding="utf-8")
        except OSError as exc:
            parser.exit(1, f"Unable to read {path}: {exc}\n")
        try:
            refactored = refactor_code(
                code,
                config.refactor_prompt or CODE_REFACTORING_PROMPT,
                credential=args.api_key,
                gateway_factory=functools.partial(get_gateway, config=config.llm),
            )
        except RefactorError as exc:
            parser.exit(1, f"{exc}\n")
        print(refactored)
    elif args.command == "serve":  # pragma: no cover - integration path
        from .service import run_service

        run_service(host=args.host, port=args.port, config=config)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def write_project(files: Sequence[ProjectFile], output_dir: Path) -> List[Path]:
    """Write ``files`` below ``output_dir``, refusing paths that escape it."""
    root = output_dir.expanduser().resolve()
    targets: List[tuple[Path, str]] = []
    for item in files:
        target = (root / item.path).resolve()
        if root not in target.parents:
            raise ValueError(f"Refusing to write {item.path!r} outside {root}")
        targets.append((target, item.content))

    written: List[Path] = []
    for target, content in targets:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
        written.append(target)
    return written


def _apply_skips(steps: Sequence[WorkflowStepConfig], skipped: Sequence[str]) -> List[WorkflowStepConfig]:
    if not skipped:
        return list(steps)
    blocked = {StepType(value) for value in skipped}
    return [
        WorkflowStepConfig(
            id=step.id,
            type=step.type,
            name=step.name,
            prompt=step.prompt,
            enabled=step.enabled and step.type not in blocked,
        )
        for step in steps
    ]


def _progress_printer(args: argparse.Namespace):
    if args.json:
        return None

    def _print(message: str) -> None:
        print(message, file=sys.stderr)

    return _print


def _print_result(result: PipelineResult, *, as_json: bool) -> None:
    if as_json:
        payload = {
            "files": [item.to_dict() for item in result.files],
            "notes": result.notes,
        }
        print(json.dumps(payload, indent=2))
        return
    print(f"Extracted {len(result.files)} file(s):")
    for item in result.files:
        print(f"  {item.path} ({len(item.content)} chars)")
    if result.notes:
        print("")
        print("Documentation notes:")
        print(result.notes)


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
