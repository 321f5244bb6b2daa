from .exceptions import (
    ErrorKind,
    TransferError,
    MissingInputError,
    InvalidRecipientError,
    InvalidAmountError,
    WalletUnavailableError,
    AccessDeniedError,
    MetadataUnavailableError,
    SignatureDeniedError,
    RelayerRejectedError,
    NetworkError,
    UnknownFailureError,
    ConfigurationError,
    InvalidTransition,
)
from .states import FlowState, FlowSnapshot, transition, is_terminal, is_in_flight
from .timers import Clock, SystemClock

__all__ = [
    "ErrorKind",
    "TransferError",
    "MissingInputError",
    "InvalidRecipientError",
    "InvalidAmountError",
    "WalletUnavailableError",
    "AccessDeniedError",
    "MetadataUnavailableError",
    "SignatureDeniedError",
    "RelayerRejectedError",
    "NetworkError",
    "UnknownFailureError",
    "ConfigurationError",
    "InvalidTransition",
    "FlowState",
    "FlowSnapshot",
    "transition",
    "is_terminal",
    "is_in_flight",
    "Clock",
    "SystemClock",
]
