"""
Exception and Error Definitions Module

Defines the closed error taxonomy of a gasless transfer attempt. Every
failure raised by a wallet, the token contract or the relayer is mapped to
exactly one of these classes at the boundary where it happens, and the
``TransferOrchestrator`` turns them into a terminal ``Failed`` state.

Exception Hierarchy:
    TransferError (root, tagged with ErrorKind)
    ├── MissingInputError
    ├── InvalidRecipientError
    ├── InvalidAmountError
    ├── WalletUnavailableError
    ├── AccessDeniedError
    ├── MetadataUnavailableError
    ├── SignatureDeniedError
    ├── RelayerRejectedError
    ├── NetworkError
    └── UnknownFailureError
    ConfigurationError
    InvalidTransition
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """
    Tag carried by every ``TransferError``.

    The value is the stable, user-facing name of the failure kind.
    """
    MISSING_INPUT = "MissingInput"
    INVALID_RECIPIENT = "InvalidRecipient"
    INVALID_AMOUNT = "InvalidAmount"
    WALLET_UNAVAILABLE = "WalletUnavailable"
    ACCESS_DENIED = "AccessDenied"
    METADATA_UNAVAILABLE = "MetadataUnavailable"
    SIGNATURE_DENIED = "SignatureDenied"
    RELAYER_REJECTED = "RelayerRejected"
    NETWORK_ERROR = "NetworkError"
    UNKNOWN_FAILURE = "UnknownFailure"


class TransferError(Exception):
    """
    Root exception class for all failures of a transfer attempt.

    Attributes:
        kind: The ``ErrorKind`` tag of the failure.
        message: Human-readable message suitable for display.
    """
    kind: ErrorKind = ErrorKind.UNKNOWN_FAILURE
    default_message: str = "Unknown error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingInputError(TransferError):
    """Raised when the recipient or the amount was not entered."""
    kind = ErrorKind.MISSING_INPUT
    default_message = "Please enter recipient and amount"


class InvalidRecipientError(TransferError):
    """Raised when the recipient is empty or not an EVM address."""
    kind = ErrorKind.INVALID_RECIPIENT
    default_message = "Invalid recipient address"


class InvalidAmountError(TransferError):
    """
    Raised when the amount is not a non-negative decimal number, or needs
    more precision than the token's decimals allow.
    """
    kind = ErrorKind.INVALID_AMOUNT
    default_message = "Invalid amount"


class WalletUnavailableError(TransferError):
    """Raised when no wallet-capable agent is configured."""
    kind = ErrorKind.WALLET_UNAVAILABLE
    default_message = "No wallet available"


class AccessDeniedError(TransferError):
    """Raised when the holder refuses (or the wallet fails) account access."""
    kind = ErrorKind.ACCESS_DENIED
    default_message = "Wallet access denied"


class MetadataUnavailableError(TransferError):
    """Raised when the token name or decimals cannot be read."""
    kind = ErrorKind.METADATA_UNAVAILABLE
    default_message = "Token metadata unavailable"


class SignatureDeniedError(TransferError):
    """Raised when the holder rejects the signature request or the wallet fails to sign."""
    kind = ErrorKind.SIGNATURE_DENIED
    default_message = "Signature request was rejected"


class RelayerRejectedError(TransferError):
    """
    Raised when the relayer answers with a non-success HTTP status.

    Attributes:
        status_code: HTTP status returned by the relayer.
    """
    kind = ErrorKind.RELAYER_REJECTED
    default_message = "Relayer rejected the authorization"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class NetworkError(TransferError):
    """Raised when the relayer cannot be reached (connection error, timeout)."""
    kind = ErrorKind.NETWORK_ERROR
    default_message = "Could not reach the relayer"


class UnknownFailureError(TransferError):
    """Catch-all carrying the message of an unexpected failure."""
    kind = ErrorKind.UNKNOWN_FAILURE


class ConfigurationError(Exception):
    """
    Raised when configuration is missing or invalid.

    This includes scenarios such as:
    - Missing required environment variables
    - Malformed token address or relayer URL
    """
    pass


class InvalidTransition(Exception):
    """
    Raised when the flow state machine is asked for a transition that is not
    allowed from the current state, including starting a new attempt while
    one is still in flight.

    Attributes:
        current_state: State the machine was in
        target_state: State that was requested
    """

    def __init__(self, current_state, target_state):
        self.current_state = current_state
        self.target_state = target_state
        super().__init__(
            f"Invalid transition from {getattr(current_state, 'value', current_state)} "
            f"to {getattr(target_state, 'value', target_state)}"
        )
