"""
Error types raised by the notification feed collaborators.

Storage backends, the remote API client and identity providers raise these;
the notification store catches them at its public boundary and degrades to
a safe default (empty list, unchanged state, dropped update).
"""

from typing import Optional, Dict, Any
from enum import Enum
from datetime import datetime, timezone
import uuid


class ErrorCode(str, Enum):
    """Standardized error codes for the notification feed."""

    # Durable store
    STORAGE_ERROR = "STO_001"
    SERIALIZATION_ERROR = "STO_002"

    # External services
    EXTERNAL_SERVICE_ERROR = "EXT_001"

    # Identity
    IDENTITY_ERROR = "IDN_001"


class PawfeedError(Exception):
    """
    Base exception for the notification feed.

    Usage:
        raise PawfeedError(
            code=ErrorCode.STORAGE_ERROR,
            detail="Redis unavailable",
        )
    """

    def __init__(
        self,
        code: ErrorCode,
        detail: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.code = code
        self.detail = detail
        self.context = context or {}
        self.trace_id = str(uuid.uuid4())[:12]
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(f"{code.value}: {detail}")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for logs and error tracking context."""
        return {
            "code": self.code.value,
            "detail": self.detail,
            "trace_id": self.trace_id,
            "timestamp": self.timestamp,
            **self.context,
        }


class StorageError(PawfeedError):
    """Durable store unavailable or operation failed."""

    def __init__(self, key: str, detail: str):
        super().__init__(
            code=ErrorCode.STORAGE_ERROR,
            detail=f"Storage error for key {key!r}: {detail}",
            context={"key": key},
        )


class SerializationError(PawfeedError):
    """Stored value could not be decoded or encoded."""

    def __init__(self, key: str, detail: str):
        super().__init__(
            code=ErrorCode.SERIALIZATION_ERROR,
            detail=f"Invalid payload for key {key!r}: {detail}",
            context={"key": key},
        )


class RemoteServiceError(PawfeedError):
    """Remote notifications API failed."""

    def __init__(self, detail: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(
            code=ErrorCode.EXTERNAL_SERVICE_ERROR,
            detail=f"Notifications API error: {detail}",
            context={"status_code": status_code},
        )


class IdentityError(PawfeedError):
    """Identity provider failed to resolve the current user."""

    def __init__(self, detail: str):
        super().__init__(
            code=ErrorCode.IDENTITY_ERROR,
            detail=detail,
        )
