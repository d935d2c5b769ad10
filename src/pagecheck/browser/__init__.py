"""Browser driver and DOM helpers."""

from . import dom
from .session import BrowserSession

__all__ = ["BrowserSession", "dom"]
