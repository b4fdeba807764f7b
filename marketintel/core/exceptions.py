"""Custom exception classes for the collector."""


class IntelBotError(Exception):
    """Base exception for all collector errors."""

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(self.message)


class ScraperError(IntelBotError):
    """Raised when a scraper cannot fetch or parse a page."""

    def __init__(self, platform: str, message: str):
        self.platform = platform
        super().__init__(f"Scraper error for {platform}: {message}")


class PublishError(IntelBotError):
    """Raised when a git step of the remote publish path fails."""

    def __init__(self, step: str, message: str):
        self.step = step
        super().__init__(f"Publish step '{step}' failed: {message}")


class ReportError(IntelBotError):
    """Raised when a report cannot be rendered."""
