"""modresolve exception hierarchy.

All public exceptions inherit from ModResolveError, giving callers a single
base class to catch when they want to handle any modresolve-specific failure
without swallowing unrelated errors.
"""


class ModResolveError(Exception):
    """Base exception for all modresolve errors."""


class ReferenceNotFoundError(ModResolveError):
    """Raised when a remote lookup yields no usable candidate.

    An empty result list and a first candidate without a value are
    both reported this way.
    """

    def __init__(self, reference: object) -> None:
        super().__init__(f"reference not found: {reference}")
        self.reference = reference


class LookupServiceError(ModResolveError):
    """Raised when the remote metadata lookup itself fails.

    Covers network failures, HTTP error statuses, timeouts and
    responses that cannot be decoded into lookup results.
    """


class StateError(ModResolveError):
    """Raised when a state snapshot or rules file cannot be loaded.

    Covers missing files, YAML/JSON syntax errors and documents whose
    structure does not match the expected layout.
    """


class ConfigError(ModResolveError):
    """Raised for invalid resolver configuration values or files."""
