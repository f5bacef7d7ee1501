"""CLI entrypoints for techscan commands."""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any

from .config import ConfigError, TechScanConfig, load_config
from .logging import configure_logging
from .orchestrator import ANALYSIS_DEPTHS, AnalysisOrchestrator, OrchestrationError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _add_repository_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "repository_url",
        help="GitHub repository URL (https://github.com/<owner>/<repo>) or <owner>/<repo>.",
    )
    parser.add_argument(
        "--token",
        help="GitHub token; defaults to the environment variable named in the config (GITHUB_TOKEN).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to .techscan.yml or the directory holding it (defaults to current directory).",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Write the JSON report to this file instead of stdout.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="techscan",
        description="Explore a GitHub repository, inventory its technology stack and report gaps.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Run exploration, technology analysis and gap analysis.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    _add_repository_options(analyze_parser)
    analyze_parser.add_argument(
        "--user-id",
        default="cli",
        help="Identifier recorded in the report metadata.",
    )
    analyze_parser.add_argument(
        "--depth",
        choices=ANALYSIS_DEPTHS,
        default=None,
        help="Analysis depth recorded in the report (defaults to the configured depth).",
    )
    analyze_parser.add_argument(
        "--focus",
        nargs="+",
        default=None,
        metavar="AREA",
        help="Focus areas recorded in the report.",
    )

    explore_parser = subparsers.add_parser(
        "explore",
        help="Fetch repository metadata and key files only.",
    )
    _add_verbose_option(explore_parser, suppress_default=True)
    _add_repository_options(explore_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP analysis service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to listen on.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for techscan commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    try:
        config = load_config(args.config or Path.cwd())
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    token = args.token or os.environ.get(config.github.token_env)
    if not token:
        parser.exit(
            1,
            f"A GitHub token is required: pass --token or set {config.github.token_env}.\n",
        )

    orchestrator = _build_orchestrator(args, config, token)

    if args.command == "analyze":
        try:
            report = orchestrator.orchestrate()
        except OrchestrationError as exc:
            parser.exit(1, f"techscan analyze failed: {exc}\nRun with --verbose for more details.\n")
        _emit(report, args.output)
        summary = report["summary"]
        print(
            f"{summary['total_technologies_detected']} technologies, "
            f"{summary['total_gaps_identified']} gap categories, "
            f"{summary['high_priority_recommendations']} high-priority recommendations",
            file=sys.stderr,
        )
    elif args.command == "explore":
        try:
            exploration = orchestrator.explore_only()
        except OrchestrationError as exc:
            parser.exit(1, f"techscan explore failed: {exc}\nRun with --verbose for more details.\n")
        _emit(exploration.to_dict(), args.output)
        print(
            f"{exploration.total_files_scanned} files scanned, {len(exploration.files)} key files fetched",
            file=sys.stderr,
        )
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _build_orchestrator(
    args: argparse.Namespace, config: TechScanConfig, token: str
) -> AnalysisOrchestrator:
    depth = getattr(args, "depth", None) or config.analysis.depth
    focus = getattr(args, "focus", None)
    return AnalysisOrchestrator(
        token,
        args.repository_url,
        getattr(args, "user_id", "cli"),
        depth,
        focus if focus is not None else config.analysis.focus_areas,
        **config.orchestrator_options(),
    )


def _emit(payload: Any, output: Path | None) -> None:
    text = json.dumps(payload, indent=2)
    if output is None:
        print(text)
        return
    output.write_text(text + "\n", encoding="utf-8")


if __name__ == "__main__":
    main(sys.argv[1:])
