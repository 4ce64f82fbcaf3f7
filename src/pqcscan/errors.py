"""Exceptions raised by the analysis core."""

from __future__ import annotations


class PqcScanError(ValueError):
    """Base class for analysis failures."""


class MalformedLiteralError(PqcScanError):
    """An import path literal could not be decoded.

    Raised out of :func:`pqcscan.matcher.analyze`; the file that carried the
    literal produces no diagnostics at all.
    """

    def __init__(self, literal: str, reason: str) -> None:
        super().__init__(f"failed to analyze package {literal}: {reason}")
        self.literal = literal
        self.reason = reason
