"""leitner: Leitner-box spaced repetition scheduler with an HTTP API."""

from leitner.consts import VERSION

__version__ = VERSION
