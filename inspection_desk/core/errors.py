"""Exceptions raised by the inspection desk core."""


class InspectionDeskError(Exception):
    """Base class for errors raised by this package."""


class EditorStateError(InspectionDeskError):
    """An edit operation was attempted while no draft is open for editing."""


class UnknownEntityError(InspectionDeskError, KeyError):
    """An area or item id does not exist in the current draft."""


class SuggestionConfigError(InspectionDeskError):
    """The text-suggestion service is missing its credential or is switched off."""
