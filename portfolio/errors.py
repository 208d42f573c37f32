"""Error kinds raised by the case study domain and storage layers."""
from __future__ import annotations


class PortfolioError(Exception):
    """Base class for every error this package raises on purpose."""


class InvalidEntityError(PortfolioError, ValueError):
    """Raised when a case study cannot be constructed from the given data."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class NotFoundError(PortfolioError):
    """A lookup that must succeed found nothing."""

    def __init__(self, message: str, code: str = "not_found", status: int = 404) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.status = status

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "status": self.status}


class PersistenceError(PortfolioError):
    """The storage layer failed to read or write."""


class SlugConflictError(PersistenceError):
    """Another record already owns the slug."""


class InvalidMediaError(PortfolioError, ValueError):
    """An uploaded image was rejected; ``code`` names the reason."""

    def __init__(self, code: str, info: dict | None = None) -> None:
        super().__init__(code)
        self.code = code
        self.info = info or {}
