"""
Internal Exceptions for Response Decoding.

Decoding never lets an error reach the caller: every malformation is a
degradation. These exceptions are raised inside a single stage and turned
into "no match" by the strategy base class, which then hands over to the
next stage.

Exception Hierarchy:
    DecodeError (base)
    ├── ParseFailure
    ├── ValidationFailure
    └── PatternLibraryError

PatternLibraryError is the only one that escapes, and only while building
pattern tables (bad regex, unreadable table file), never during decode().

Usage:
    from decoding.exceptions import ParseFailure, ValidationFailure

    try:
        data = parse_object(text, stage="boundary_scanner")
    except ParseFailure as e:
        logger.debug("No object: %s", e)
"""

from __future__ import annotations

from typing import Iterable, Optional


# =============================================================================
# BASE EXCEPTION
# =============================================================================


class DecodeError(Exception):
    """
    Base exception for all decoding errors.

    Attributes:
        message: Human-readable error description
        details: Additional technical details (optional)
    """

    def __init__(
        self,
        message: str = "A decoding error occurred",
        details: Optional[str] = None,
    ):
        self.message = message
        self.details = details

        full_message = message
        if details:
            full_message = f"{message} | Details: {details}"

        super().__init__(full_message)


# =============================================================================
# STAGE FAILURES
# =============================================================================


class ParseFailure(DecodeError):
    """
    Raised when a stage could not produce an object from its input.

    Attributes:
        stage: Name of the stage that failed
    """

    def __init__(
        self,
        stage: str,
        message: str = "No parsable object",
        details: Optional[str] = None,
    ):
        self.stage = stage
        super().__init__(f"[{stage}] {message}", details)


class ValidationFailure(DecodeError):
    """
    Raised when an object was parsed but carries no recognized string field.

    Attributes:
        stage: Name of the stage that failed
        keys: Keys present on the rejected object
    """

    def __init__(self, stage: str, keys: Iterable[str] = ()):
        self.stage = stage
        self.keys = list(keys)
        shown = ", ".join(self.keys[:10]) or "none"
        super().__init__(
            f"[{stage}] Object has no recognized string field",
            details=f"keys: {shown}",
        )


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class PatternLibraryError(DecodeError):
    """
    Raised when pattern tables cannot be built.

    Attributes:
        pattern: Offending regex source (optional)
        path: Table file that failed to load (optional)
    """

    def __init__(
        self,
        message: str = "Invalid pattern table",
        pattern: Optional[str] = None,
        path: Optional[str] = None,
        details: Optional[str] = None,
    ):
        self.pattern = pattern
        self.path = path
        if path:
            message = f"{message} [{path}]"
        elif pattern:
            message = f"{message}: {pattern!r}"
        super().__init__(message, details)
