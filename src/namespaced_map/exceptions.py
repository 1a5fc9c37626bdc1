"""Custom exceptions for the namespaced_map package."""

from __future__ import annotations


class NamespacedMapError(Exception):
    """Base exception for all namespaced map errors."""


class InvalidArgumentError(NamespacedMapError, ValueError):
    """Raised before any store call when an argument is ``None`` or malformed."""

    def __init__(self, argument: str, message: str = "must not be None") -> None:
        self.argument = argument
        super().__init__(f"Invalid argument '{argument}': {message}")


class StoreUnavailableError(NamespacedMapError):
    """Raised when the backing store cannot be reached or a call to it fails."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        msg = f"Store unavailable during '{operation}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
