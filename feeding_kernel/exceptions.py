"""Project-wide exception types."""

from __future__ import annotations

from typing import Any, Optional


class FeedingKernelError(Exception):
    """Base exception for all kernel inference errors."""

    def __init__(self, message: str, *, species_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.species_id = species_id

    def with_species(self, species_id: str) -> "FeedingKernelError":
        """Attach a species identifier unless one is already set."""
        if self.species_id is None:
            self.species_id = species_id
        return self

    def __str__(self) -> str:
        message = super().__str__()
        if self.species_id is not None:
            return f"[{self.species_id}] {message}"
        return message


class DataError(FeedingKernelError):
    """Raised when a per-species sample is empty, missing or malformed."""


class SchemaError(DataError):
    """Raised when an observation table lacks required columns."""


class ComputationError(FeedingKernelError):
    """Raised when the normalized density is non-positive for a parameter set."""

    def __init__(self, message: str, *, params: Any = None, species_id: Optional[str] = None) -> None:
        if params is not None:
            message = f"{message} (params={tuple(params)})"
        super().__init__(message, species_id=species_id)
        self.params = tuple(params) if params is not None else None


class OptimizationError(FeedingKernelError):
    """Raised when the optimizer fails to converge or hits a degenerate region."""


class ConfigError(FeedingKernelError):
    """Raised when configuration is missing or malformed."""


class ConfigValidationError(ConfigError):
    """Raised when validation fails for supplied configuration."""
