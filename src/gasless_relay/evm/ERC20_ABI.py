"""
ERC20 read-only ABI fragments

Minimal ABI definitions for the token reads the client performs: the
balance of the holder and the metadata bound into the signing domain.

Usage:
    from .ERC20_ABI import get_token_reader_abi

    contract = w3.eth.contract(address=token_address, abi=get_token_reader_abi())
    name = await contract.functions.name().call()
"""

from typing import Dict, Any, List


def get_balance_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for querying a token balance.

    Returns:
        List[Dict[str, Any]]: ABI for balanceOf function
    """
    return [
        {
            "name": "balanceOf",
            "type": "function",
            "stateMutability": "view",
            "inputs": [{"name": "account", "type": "address"}],
            "outputs": [{"name": "", "type": "uint256"}],
        }
    ]


def get_metadata_abi() -> List[Dict[str, Any]]:
    """
    Get ABI for ERC20 `name()` and `decimals()`.

    Returns:
        List[Dict[str, Any]]: ABI for the two metadata getters.
    """
    return [
        {
            "name": "name",
            "type": "function",
            "stateMutability": "view",
            "inputs": [],
            "outputs": [{"name": "", "type": "string"}],
        },
        {
            "name": "decimals",
            "type": "function",
            "stateMutability": "view",
            "inputs": [],
            "outputs": [{"name": "", "type": "uint8"}],
        },
    ]


def get_token_reader_abi() -> List[Dict[str, Any]]:
    """Combined ABI used by ``Web3TokenReader``."""
    return get_metadata_abi() + get_balance_abi()
