from dataclasses import dataclass
from typing import Any

from fastapi import HTTPException


class CatalogSyncError(Exception):
    """Base class for every error raised by the sync core."""


class ConfigurationError(CatalogSyncError):
    """Required Shopify credentials are missing."""


class RemoteCatalogError(CatalogSyncError):
    """The Shopify API could not be reached or answered with a failure status."""


class RemoteCatalogDecodeError(RemoteCatalogError):
    """The Shopify API answered, but the body is not a usable products payload."""


class RecordNormalizationError(CatalogSyncError):
    """A single raw product record cannot be coerced into a local product."""


class SyncError(CatalogSyncError):
    pass


@dataclass
class ApiError:
    error: str
    message: str
    details: Any | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "error": self.error,
            "message": self.message,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class AppHTTPException(HTTPException):
    def __init__(self, status_code: int, error: ApiError):
        super().__init__(status_code=status_code, detail=error.to_dict())
