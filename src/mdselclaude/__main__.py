"""Entry point for mdsel-claude.

Usage:
    python -m mdselclaude            # MCP server on stdio
    python -m mdselclaude hook < payload.json
    python -m mdselclaude select 'heading:h2[0]' README.md
"""

import sys


def main() -> int:
    """Main entry point for the mdsel-claude CLI."""
    from mdselclaude.cli import run_cli

    return run_cli(sys.argv[1:])


if __name__ == "__main__":
    sys.exit(main())
