"""Command-line interface for mdsel-claude."""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import sys
from collections.abc import Sequence
from pathlib import Path

from mdselclaude import __version__
from mdselclaude.config import Config, load_config
from mdselclaude.errors import ConfigurationError
from mdselclaude.executor import ExecutionResult, MdselExecutor
from mdselclaude.gate import HookOutput, HookStyle, WordCountGate, render, run_hook
from mdselclaude.logging import get_logger, setup_logging

log = get_logger("cli")


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="mdsel-claude",
        description="Expose the mdsel Markdown selector CLI to coding agents",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v verbose, -vv trace)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Log errors only",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Extra config file applied above system/user/project config",
    )
    parser.add_argument(
        "--project-root",
        help="Directory whose .mdsel/config.yaml should be loaded",
    )

    subparsers = parser.add_subparsers(dest="mode", help="Operating mode")

    subparsers.add_parser("serve", help="Run the MCP server on stdio (default)")

    hook_parser = subparsers.add_parser(
        "hook",
        help="Evaluate one hook payload from stdin and print the reply",
    )
    hook_parser.add_argument(
        "--style",
        choices=[style.value for style in HookStyle],
        default=HookStyle.CLAUDE.value,
        help="Reply envelope format (default: claude)",
    )

    index_parser = subparsers.add_parser("index", help="Run `mdsel index` directly")
    index_parser.add_argument("files", nargs="+", help="Markdown files to index")
    index_parser.add_argument("--timeout", type=float, help="Timeout in seconds")

    select_parser = subparsers.add_parser("select", help="Run `mdsel select` directly")
    select_parser.add_argument("selector", help="Selector, e.g. heading:h2[0]")
    select_parser.add_argument("files", nargs="+", help="Markdown files to select from")
    select_parser.add_argument("--timeout", type=float, help="Timeout in seconds")

    return parser


def _load(parsed: argparse.Namespace) -> Config:
    config = load_config(project_root=parsed.project_root, config_file=parsed.config)
    if parsed.quiet:
        config.logging = dataclasses.replace(config.logging, verbose=0)
    elif parsed.verbose:
        # -v maps to verbose(3), -vv and beyond to trace(4)
        config.logging = dataclasses.replace(config.logging, verbose=min(2 + parsed.verbose, 4))
    setup_logging(config.logging)
    return config


def _run_hook(parsed: argparse.Namespace) -> int:
    """Hook mode always answers and always exits 0."""
    try:
        config = _load(parsed)
        gate = WordCountGate(config.gate)
    except ConfigurationError as e:
        log.warning("Invalid configuration, using gate defaults: %s", e)
        gate = WordCountGate()

    try:
        return run_hook(gate, style=parsed.style)
    except Exception:
        log.exception("Hook failed; continuing without advisory")
        sys.stdout.write(render(HookOutput(), parsed.style) + "\n")
        return 0


def _write_result(result: ExecutionResult) -> int:
    sys.stdout.write(result.stdout)
    sys.stdout.flush()
    sys.stderr.write(result.stderr)
    sys.stderr.flush()
    return result.exit_code if result.exit_code is not None else 1


def _run_direct(parsed: argparse.Namespace, config: Config) -> int:
    executor = MdselExecutor(config.executor)
    options = None
    if parsed.timeout is not None:
        options = dataclasses.replace(executor.default_options, timeout=parsed.timeout)

    if parsed.mode == "index":
        result = asyncio.run(executor.index(parsed.files, options))
    else:
        result = asyncio.run(executor.select(parsed.selector, parsed.files, options))
    return _write_result(result)


def run_cli(args: Sequence[str]) -> int:
    """Run the CLI with the given arguments."""
    parser = create_parser()
    parsed = parser.parse_args(args)
    mode = parsed.mode or "serve"

    if mode == "hook":
        return _run_hook(parsed)

    try:
        config = _load(parsed)
    except ConfigurationError as e:
        print(f"mdsel-claude: {e}", file=sys.stderr)
        return 2

    if mode in ("index", "select"):
        try:
            return _run_direct(parsed, config)
        except ValueError as e:
            print(f"mdsel-claude: {e}", file=sys.stderr)
            return 2

    from mdselclaude.server import MdselServer

    asyncio.run(MdselServer(config).start())
    return 0

