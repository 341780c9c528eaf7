"""
Catalog exceptions.

A missing category or a malformed record is never an error in this package:
those are normal "no results" states. Exceptions are reserved for a snapshot
that cannot be read at all and for a query that makes no sense.
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """
    Base exception for the catalog package.

    Usage:
        raise CatalogError("Catalog file not found", "CATALOG_NOT_FOUND")
        raise InvalidQueryError("page must be >= 1", details={"page": 0})

    Error Codes:
        - CATALOG_NOT_FOUND
        - CATALOG_INVALID
        - INVALID_QUERY
    """

    default_code = "CATALOG_ERROR"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to a dictionary for logging or a JSON response."""
        error_dict: Dict[str, Any] = {
            "error": True,
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            error_dict["details"] = self.details
        return error_dict


class CatalogLoadError(CatalogError):
    """Snapshot file is missing or is not valid catalog JSON."""

    default_code = "CATALOG_INVALID"


class InvalidQueryError(CatalogError):
    """FilterQuery with impossible paging or price bounds."""

    default_code = "INVALID_QUERY"
