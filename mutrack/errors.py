"""Exception types for mutrack."""

from __future__ import annotations


class MutrackError(Exception):
    """Base class for recoverable, input-dependent failures."""


class ConfigError(MutrackError):
    """The configuration file is invalid."""


class MutationDirectoryError(MutrackError):
    """A mutation directory could not be read or written."""


class CodingError(AssertionError):
    """
    An internal invariant was broken.

    Raised when a record reaches an ActionTracker for a different action.
    This signals a bug in the routing code, not bad input, so it is not a
    MutrackError and nothing in this package catches it.
    """
