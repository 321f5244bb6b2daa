from .bases import CanonicalModel
from .https import (
    RelayTransferPayload,
    RelayTransferRequest,
    RelaySuccessResponse,
    RelayErrorResponse,
)

__all__ = [
    "CanonicalModel",
    "RelayTransferPayload",
    "RelayTransferRequest",
    "RelaySuccessResponse",
    "RelayErrorResponse",
]
