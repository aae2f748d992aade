"""CLI entrypoints for graphcov commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .config import ConfigError
from .coverage import coverage_to_dict
from .inventory import InventoryError
from .loader import GraphDataError
from .logging import configure_logging
from .orchestrator import CoverageRunner
from .plan import PlanError
from .repo import RepoError


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


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="graphcov",
        description="Compute approximate amount of code successfully analyzed into graph data.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log output to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    coverage_parser = subparsers.add_parser(
        "coverage",
        help="Print per-language coverage of the repository as JSON.",
    )
    _add_verbose_option(coverage_parser, suppress_default=True)
    coverage_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path inside the repository (defaults to current directory).",
    )
    coverage_parser.add_argument(
        "--commit",
        default=None,
        help="Commit whose build data should be used (defaults to HEAD).",
    )
    coverage_parser.add_argument(
        "--build-data-dir",
        default=None,
        help="Directory holding build data, relative to the repository root.",
    )

    serve_parser = subparsers.add_parser(
        "serve",
        help="Run the HTTP service exposing coverage computation.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for graphcov commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)

    if args.command == "coverage":
        runner = CoverageRunner()
        try:
            report = runner.run(
                args.path,
                commit_id=args.commit,
                build_data_dir=args.build_data_dir,
            )
        except FileNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except (ConfigError, RepoError, PlanError, GraphDataError, InventoryError) as exc:
            parser.exit(1, f"graphcov coverage failed: {exc}\n")
        print(json.dumps(coverage_to_dict(report), indent=2))
    elif args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


if __name__ == "__main__":
    main(sys.argv[1:])
