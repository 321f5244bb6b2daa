from .standards import (
    EIP712Domain,
    TransferWithAuthorizationMessage,
    ERC3009TypedData,
    TRANSFER_WITH_AUTHORIZATION_TYPES,
    build_full_message,
)
from .schemas import EVMECDSASignature, ERC3009Authorization
from .constants import (
    amount_to_value,
    value_to_amount,
    format_balance,
    generate_nonce,
    get_chain_config,
    get_explorer_url,
)
from .token import TokenReader, Web3TokenReader
from .wallets import WalletProvider, LocalAccountWallet, RpcWallet

__all__ = [
    "EIP712Domain",
    "TransferWithAuthorizationMessage",
    "ERC3009TypedData",
    "TRANSFER_WITH_AUTHORIZATION_TYPES",
    "build_full_message",
    "EVMECDSASignature",
    "ERC3009Authorization",
    "amount_to_value",
    "value_to_amount",
    "format_balance",
    "generate_nonce",
    "get_chain_config",
    "get_explorer_url",
    "TokenReader",
    "Web3TokenReader",
    "WalletProvider",
    "LocalAccountWallet",
    "RpcWallet",
]
