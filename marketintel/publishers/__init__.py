"""Report publishers."""

from .git_publisher import GitPublisher, GitRunner, PublishResult

__all__ = ["GitPublisher", "GitRunner", "PublishResult"]
