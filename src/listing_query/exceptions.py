"""Listing query exceptions."""

from __future__ import annotations


class ListingError(Exception):
    """Root exception for the listing-query toolkit."""


class ListingValidationError(ListingError):
    """Raised when caller input cannot be compiled.

    Carries structured errors: ``{parameter_or_field: [messages]}``.
    """

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        super().__init__(str(self.errors))


class InvalidParameterError(ListingValidationError):
    """Raised for malformed pagination, filter or order input."""

    def __init__(self, parameter: str, message: str) -> None:
        self.parameter = parameter
        super().__init__({parameter: [message]})


class InvalidFilterValueError(ListingValidationError):
    """Raised when a filter value fails parsing or its field validator."""

    def __init__(self, field: str, message: str = "Missing or invalid value") -> None:
        self.field = field
        super().__init__({field: [message]})


class AdapterStateError(ListingError):
    """Raised when a single-use adapter is reused after ``execute()``."""


class BackendError(ListingError):
    """Base class for failures of the underlying store."""


class BackendUnavailableError(BackendError):
    """Raised when the store cannot be reached."""


class BackendQueryError(BackendError):
    """Raised when the store rejects or fails to run the compiled query."""
