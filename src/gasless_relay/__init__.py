"""
gasless_relay - gasless ERC-3009 token transfers through a relayer.

The holder signs a ``TransferWithAuthorization`` message off-chain; a relayer
pays the network fee and executes the transfer.
"""

from .config import GaslessConfig
from .clients import RelayerClient
from .engine.builder import AuthorizationBuilder
from .engine.orchestrator import TransferOrchestrator
from .engine.events import EventBus, StateChangedEvent, BalanceUpdatedEvent, BalanceRefreshFailedEvent
from .engine.states import FlowState, FlowSnapshot
from .engine.exceptions import ErrorKind, TransferError
from .evm import LocalAccountWallet, RpcWallet, Web3TokenReader, get_explorer_url

__all__ = [
    "GaslessConfig",
    "RelayerClient",
    "AuthorizationBuilder",
    "TransferOrchestrator",
    "EventBus",
    "StateChangedEvent",
    "BalanceUpdatedEvent",
    "BalanceRefreshFailedEvent",
    "FlowState",
    "FlowSnapshot",
    "ErrorKind",
    "TransferError",
    "LocalAccountWallet",
    "RpcWallet",
    "Web3TokenReader",
    "get_explorer_url",
]
