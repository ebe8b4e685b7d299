from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import ConfigError, default_config_path, load_config, settings_from_config
from .run import run_owners

EPILOG = """\
examples:
  git-owners foo.py                  Blame a single file
  git-owners foo.py bar.py           Blame multiple files
  git-owners src/                    Blame all files in a directory
  git-owners "**/*.py"               Blame all Python files (glob pattern)
  git-owners -v src/                 Show all contributors with percentages
  git-owners --gh src/               Output GitHub usernames (for PR reviewers)
  git-owners --gh --only-name src/   Output just the username (for scripts)
"""


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="git-owners",
        description="Find out who is responsible for a file or folder.",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("patterns", nargs="+", metavar="TARGET", help="Files, folders, or glob patterns to analyze.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show detailed breakdown by contributor.")
    parser.add_argument("--gh", action="store_true", help="Output GitHub usernames instead of git author names.")
    parser.add_argument("--only-name", action="store_true", help="Only output the name (for use in scripts).")
    parser.add_argument("--json", action="store_true", help="Print the full ranking as JSON.")
    parser.add_argument("--jobs", type=int, default=None, help="Parallel git blame jobs.")
    parser.add_argument("--timeout", type=int, default=None, help="Per-file git blame timeout in seconds.")
    parser.add_argument("--config", type=Path, default=None, help="Path to config.json (default: ~/.config/git-owners/config.json).")
    parser.add_argument("--no-color", action="store_true", help="Disable colored output.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    args = _build_parser().parse_args(argv)

    config_path = args.config if args.config is not None else default_config_path()
    try:
        config = load_config(config_path)
        settings = settings_from_config(
            config,
            {
                "jobs": args.jobs,
                "blame_timeout_s": args.timeout,
                "color": False if args.no_color else None,
            },
        )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return run_owners(args=args, settings=settings)


if __name__ == "__main__":
    raise SystemExit(main())
