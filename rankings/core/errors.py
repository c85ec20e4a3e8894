"""Error taxonomy for the ranking ingest pipeline."""

from __future__ import annotations


class RankingsError(Exception):
    """Base class for errors surfaced to callers as ``{"error": message}``."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class AuthorizationError(RankingsError):
    """Caller could not be authorized. Raised before any run record exists."""

    def __init__(self, message: str, status_code: int = 401):
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(RankingsError):
    """A required setting for the requested pipeline is missing."""


class SourceFetchError(RankingsError):
    """One source could not be fetched or parsed. Never fatal to a run."""

    status_code = 502

    def __init__(self, source: str, message: str):
        super().__init__(message)
        self.source = source

    def __str__(self) -> str:
        return f"{self.source}: {self.message}"


class PersistenceError(RankingsError):
    """The ranking store rejected the upsert; fatal to the invocation."""
