"""Git publisher for daily reports.

Writes the report into the working tree and, when GitHub publishing is
configured, commits and pushes it. Any failure on the remote path falls
back to a plain local save so a run never loses its report.
"""

import subprocess
from dataclasses import dataclass
from datetime import date, datetime, timezone
from pathlib import Path
from typing import List, Optional

import structlog
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from marketintel.config import Settings
from marketintel.core.exceptions import PublishError

logger = structlog.get_logger(__name__)


@dataclass
class PublishResult:
    """Outcome of publishing one report."""

    success: bool
    published: bool
    url: Optional[str] = None
    local_path: Optional[Path] = None
    reason: Optional[str] = None


class GitRunner:
    """Thin wrapper around the git CLI for one working tree."""

    def __init__(self, repo_root: Path):
        self.repo_root = Path(repo_root)

    def run(self, *args: str) -> str:
        """Run a git command and return its stdout.

        Raises:
            PublishError: If git is missing or exits non-zero
        """
        step = args[0] if args else "git"
        try:
            completed = subprocess.run(
                ["git", *args],
                cwd=self.repo_root,
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as e:
            raise PublishError(step, str(e)) from e

        if completed.returncode != 0:
            message = completed.stderr.strip() or f"exit code {completed.returncode}"
            raise PublishError(step, message)
        return completed.stdout

    def is_repo(self) -> bool:
        try:
            return self.run("rev-parse", "--is-inside-work-tree").strip() == "true"
        except PublishError:
            return False

    def status(self) -> List[str]:
        """Changed paths as ``git status --porcelain`` lines."""
        return [line for line in self.run("status", "--porcelain").splitlines() if line.strip()]

    def add_all(self) -> None:
        self.run("add", ".")

    def commit(self, message: str) -> None:
        self.run("commit", "-m", message)

    def push(self, remote: str, branch: str) -> None:
        self.run("push", remote, branch)

    def init(self) -> None:
        self.run("init")

    def add_remote(self, name: str, url: str) -> None:
        self.run("remote", "add", name, url)


def _log_push_retry(retry_state: RetryCallState) -> None:
    logger.warning(
        "git_push_retry",
        attempt=retry_state.attempt_number,
        error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


class GitPublisher:
    """Publishes reports to a GitHub repository, or saves them locally.

    The remote path is chosen once per publish by ``is_configured()``.
    """

    def __init__(self, settings: Settings, git: Optional[GitRunner] = None):
        """Initialize publisher.

        Args:
            settings: Process settings (GitHub owner/repo/branch, paths)
            git: Git runner; defaults to the CLI in ``REPO_ROOT``
        """
        self.settings = settings
        self.git = git or GitRunner(settings.REPO_ROOT)
        self.logger = logger.bind(publisher="github")

    def is_configured(self) -> bool:
        """Check if GitHub publishing is configured for this run."""
        if not self.settings.GITHUB_ENABLED:
            self.logger.warning(
                "github_publishing_disabled", hint="Set GITHUB_ENABLED=true to enable"
            )
            return False

        if not self.settings.GITHUB_OWNER:
            self.logger.warning(
                "github_owner_missing", hint="Set GITHUB_OWNER in .env"
            )
            return False

        return True

    def publish(self, content: str, filename: str, day: Optional[date] = None) -> PublishResult:
        """Save a report and publish it when GitHub is configured.

        Args:
            content: Rendered report text
            filename: Report file name
            day: Run date for the commit message (defaults to today, UTC)

        Returns:
            PublishResult

        Raises:
            OSError: If even the local fallback cannot be written
        """
        if not self.is_configured():
            self.logger.info("saving_locally_only")
            return self.save_local(content, filename)

        day = day or datetime.now(timezone.utc).date()
        try:
            return self._publish_remote(content, filename, day)
        except (PublishError, OSError) as e:
            self.logger.error("github_publish_failed", error=str(e))
            self.logger.info("falling_back_to_local_save")
            return self.save_local(content, filename)

    def _publish_remote(self, content: str, filename: str, day: date) -> PublishResult:
        reports_dir = self.settings.github_reports_dir
        reports_dir.mkdir(parents=True, exist_ok=True)

        file_path = reports_dir / filename
        file_path.write_text(content, encoding="utf-8")
        self.logger.info("report_saved", path=str(file_path))

        if not self.git.status():
            self.logger.info("no_changes_to_commit")
            return PublishResult(success=True, published=False, reason="no-changes")

        self.git.add_all()
        self.git.commit(self.settings.commit_message(day.isoformat()))
        self._push()

        branch = self.settings.GITHUB_BRANCH
        repo_url = self.settings.github_repo_url
        self.logger.info("published_to_github", repo=repo_url)

        return PublishResult(
            success=True,
            published=True,
            url=f"{repo_url}/blob/{branch}/{self.settings.GITHUB_REPORTS_PATH}/{filename}",
        )

    def _push(self) -> None:
        """Push the branch, retrying transient failures."""
        retrying = Retrying(
            stop=stop_after_attempt(max(1, self.settings.MAX_RETRIES)),
            wait=wait_exponential(multiplier=1, min=2, max=30),
            retry=retry_if_exception_type(PublishError),
            before_sleep=_log_push_retry,
            reraise=True,
        )
        for attempt in retrying:
            with attempt:
                self.git.push("origin", self.settings.GITHUB_BRANCH)

    def save_local(self, content: str, filename: str) -> PublishResult:
        """Save a report to the local reports directory only.

        Raises:
            OSError: If the directory or file cannot be written
        """
        local_dir = self.settings.reports_dir
        local_dir.mkdir(parents=True, exist_ok=True)

        file_path = local_dir / filename
        file_path.write_text(content, encoding="utf-8")
        self.logger.info("report_saved_locally", path=str(file_path))

        return PublishResult(success=True, published=False, local_path=file_path)

    def init_repo(self) -> bool:
        """Initialize the working tree as a git repo with a GitHub origin.

        Returns:
            True if the repo exists or was created, False on git failure
        """
        if self.git.is_repo():
            return True

        try:
            self.logger.info("initializing_git_repository", path=str(self.git.repo_root))
            self.git.init()
            self.git.add_remote("origin", f"{self.settings.github_repo_url}.git")
            return True
        except PublishError as e:
            self.logger.error("git_init_failed", error=str(e))
            return False
