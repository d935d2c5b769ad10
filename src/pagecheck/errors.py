"""Error types raised by pagecheck."""

from pathlib import Path


class PagecheckError(Exception):
    """Base class for pagecheck errors."""


class ConfigError(PagecheckError):
    """Raised when configuration values are invalid."""


class ViewportError(PagecheckError):
    """Raised when a viewport spec cannot be resolved."""


class ReportSourceError(PagecheckError):
    """Raised when a prior JSON report cannot be read."""

    def __init__(self, path: Path, cause: Exception | None = None) -> None:
        self.path = path
        self.cause = cause

        message = f"Cannot load report from {path}"
        if cause:
            message += f": {cause}"
        else:
            message += ": file not found. Run 'pagecheck run' first."

        super().__init__(message)
