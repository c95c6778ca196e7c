from __future__ import annotations


class WineGameError(Exception):
    """Base class for errors raised by the wine options game."""


class InputValidationError(WineGameError, ValueError):
    """The selected label photo was rejected before processing."""


class ExtractionError(WineGameError):
    """Wine details could not be read from the label photo."""


class InvalidStepError(WineGameError, RuntimeError):
    """An action was attempted from a step that does not allow it."""


class GroupNotFoundError(WineGameError, LookupError):
    """No active group challenge matches the given code."""


class GroupFullError(WineGameError):
    """The group challenge already has its maximum number of members."""
