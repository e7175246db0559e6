"""Entry point: validates input, dispatches the request, writes artifacts."""

import argparse
import logging
import sys
from pathlib import Path

from rtlforge.agents.generator import HdlGenerator
from rtlforge.config import get_config, resolve_path
from rtlforge.deliverables import all_ids, default_ids
from rtlforge.errors import ConfigurationError, ForgeError
from rtlforge.graph import process_request
from rtlforge.llm import GeminiClient
from rtlforge.logging_setup import setup_logging
from rtlforge.state import HDL_LANGUAGES, MODES, GenerationRequest
from rtlforge.utils.formatter import render_summary, write_artifacts
from rtlforge.utils.progress import run_with_progress
from rtlforge.utils.session import loading_messages, require_description

log = logging.getLogger(__name__)


def _deliverable_list(value: str) -> tuple[str, ...]:
    ids = tuple(d.strip() for d in value.split(",") if d.strip())
    unknown = [d for d in ids if d not in all_ids()]
    if unknown:
        raise argparse.ArgumentTypeError(
            f"unknown deliverable(s): {', '.join(unknown)}. Choose from: {', '.join(all_ids())}"
        )
    return ids


def build_parser() -> argparse.ArgumentParser:
    defaults = get_config().get("defaults", {})
    parser = argparse.ArgumentParser(
        prog="rtlforge",
        description="Generate RTL, testbenches and reports from a circuit description.",
    )
    parser.add_argument("description", nargs="*", help="Design description (read from stdin if omitted).")
    parser.add_argument("--mode", choices=MODES, default=defaults.get("operation_mode", "generate"))
    parser.add_argument("--hdl", choices=HDL_LANGUAGES, default=defaults.get("hdl_language", "Verilog"))
    parser.add_argument(
        "--deliverables",
        type=_deliverable_list,
        default=tuple(default_ids()),
        help="Comma-separated deliverable ids (default: %(default)s).",
    )
    parser.add_argument("--protocol", default=defaults.get("protocol", "None"))
    parser.add_argument("--architecture", default=defaults.get("architecture", "None"))
    parser.add_argument("--simulator", default=defaults.get("simulation_tool", "ModelSim"))
    parser.add_argument("--thinking", action="store_true", help="Enable extended reasoning (slower).")
    parser.add_argument("--output-dir", type=Path, default=None)
    return parser


def run(request: GenerationRequest, output_dir: Path, generator: HdlGenerator | None = None) -> dict[str, Path]:
    """Run one request and write its artifacts.

    Args:
        request: The frozen submission.
        output_dir: Directory for the generated files.
        generator: Injected generator. None builds one from config.
    """
    if generator is None:
        generator = HdlGenerator(GeminiClient.from_config())

    log.info("Processing %s request (%d deliverable(s))", request.mode, len(request.deliverables))
    result = run_with_progress(
        lambda: process_request(generator, request),
        loading_messages(request.mode),
        log.info,
        interval=get_config().get("loading_interval_seconds", 2.5),
    )
    written = write_artifacts(result, output_dir)

    print(render_summary(result, written))
    for path in written.values():
        print(f"[RTLForge] Output written to: {path}")
    return written


def main(argv: list[str] | None = None) -> int:
    """CLI entry point — accepts the description as arguments or from stdin."""
    setup_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.description:
        raw = " ".join(args.description)
    else:
        print("Enter your design description (Ctrl+D / Ctrl+Z to submit):")
        raw = sys.stdin.read()

    try:
        description = require_description(raw)
    except ValueError as exc:
        parser.error(str(exc))

    request = GenerationRequest(
        mode=args.mode,
        description=description,
        hdl_language=args.hdl,
        deliverables=args.deliverables,
        protocol=args.protocol,
        architecture=args.architecture,
        simulation_tool=args.simulator,
        thinking_mode=args.thinking,
    )
    output_dir = args.output_dir or resolve_path(get_config().get("output_dir", "./output"))

    try:
        run(request, output_dir)
    except ConfigurationError as exc:
        print(f"[RTLForge] Configuration error: {exc}", file=sys.stderr)
        return 2
    except ForgeError as exc:
        print(f"[RTLForge] Failed to generate content. {exc}", file=sys.stderr)
        return 1
    except OSError as exc:
        log.error("Could not write artifacts to %s: %s", output_dir, exc)
        print(f"[RTLForge] Could not write output to {output_dir}: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
