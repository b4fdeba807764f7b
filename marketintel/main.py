"""Command-line entry point.

Usage:
    # One run in the mode configured in .env (default: test)
    python -m marketintel

    # One run labelled as production
    python -m marketintel --mode production

    # Keep running and collect once a day (SCHEDULE_CRON)
    python -m marketintel --schedule

    # First-time setup: directories, .env template, git repo
    python -m marketintel --init
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

import structlog
from pydantic import ValidationError

from marketintel.config import Settings, get_settings
from marketintel.core.logging import configure_logging
from marketintel.engine import IntelEngine
from marketintel.publishers.git_publisher import GitPublisher

logger = structlog.get_logger("marketintel")

ENV_TEMPLATE = """\
# Market intel collector configuration

# Mode: 'test' or 'production' (shown in the report header)
MODE=test

# GitHub publishing (optional)
# Set to 'true' (with GITHUB_OWNER) to enable automatic GitHub publishing
GITHUB_ENABLED=false
GITHUB_OWNER=your-github-username
GITHUB_REPO=your-repo-name
GITHUB_BRANCH=main

# Seconds to wait after every request
REQUEST_DELAY_SECONDS=2

# Daily run time for --schedule (crontab, UTC)
SCHEDULE_CRON=0 6 * * *

LOG_LEVEL=INFO
"""


def init_workspace(settings: Settings, env_path: Optional[Path] = None) -> bool:
    """Create working directories, an .env template and the git repo.

    Returns:
        True if the .env template was written, False if it already existed
    """
    for directory in (settings.reports_dir, settings.logs_dir):
        directory.mkdir(parents=True, exist_ok=True)

    env_path = env_path or settings.REPO_ROOT / ".env"
    created = False
    if not env_path.exists():
        env_path.write_text(ENV_TEMPLATE, encoding="utf-8")
        logger.info("env_template_created", path=str(env_path), hint="Edit .env with your settings")
        created = True
    else:
        logger.info("env_file_exists", path=str(env_path))

    publisher = GitPublisher(settings)
    if publisher.is_configured():
        publisher.init_repo()

    return created


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="marketintel",
        description="Collect Pinterest/Etsy market signals into a daily report.",
    )
    parser.add_argument(
        "--mode",
        choices=["test", "production"],
        help="Override MODE from the environment",
    )
    parser.add_argument(
        "--schedule",
        action="store_true",
        help="Run daily according to SCHEDULE_CRON instead of once",
    )
    parser.add_argument(
        "--init",
        action="store_true",
        help="Create directories, an .env template and the git repo, then exit",
    )
    parser.add_argument("--log-level", help="Override LOG_LEVEL")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the collector and return a process exit code."""
    args = build_parser().parse_args(argv)

    overrides = {}
    if args.mode:
        overrides["MODE"] = args.mode
    if args.log_level:
        overrides["LOG_LEVEL"] = args.log_level

    try:
        settings = get_settings(**overrides)
    except ValidationError as e:
        configure_logging()
        logger.error("invalid_configuration", error=str(e))
        return 2

    configure_logging(settings.LOG_LEVEL)

    if args.init:
        init_workspace(settings)
        return 0

    if args.schedule:
        from marketintel.scheduler import IntelScheduler

        try:
            asyncio.run(IntelScheduler(settings).serve_forever())
        except KeyboardInterrupt:
            logger.info("scheduler_interrupted")
        return 0

    try:
        result = asyncio.run(IntelEngine(settings).run())
    except Exception as e:
        logger.error("engine_failed", error=str(e), exc_info=True)
        return 1

    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
