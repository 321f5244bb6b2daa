"""
EVM Chain Configuration and Unit Helpers

Provides the network table used for explorer links, the canonical
human-amount <-> smallest-unit conversions, and the anti-replay nonce source.
"""

import re
import secrets
from decimal import Decimal
from typing import Dict, Optional, Union

from pydantic import BaseModel, Field

from ..engine.exceptions import InvalidAmountError


class EvmChainConfig(BaseModel):
    """EVM network entry used for presentation helpers."""
    caip2: str
    chain_id: int
    name: str = Field(..., description="Human-readable network name")
    public_rpc_url: str = Field(..., description="Public RPC endpoint")
    explorer_url: str = Field(..., description="Block explorer base URL")


_EVM_CHAINS_DATA: Dict[int, Dict[str, str]] = {
    14: {
        "name": "Flare Mainnet",
        "public_rpc_url": "https://flare-api.flare.network/ext/C/rpc",
        "explorer_url": "https://flare-explorer.flare.network",
    },
    114: {
        "name": "Flare Testnet Coston2",
        "public_rpc_url": "https://coston2-api.flare.network/ext/C/rpc",
        "explorer_url": "https://coston2-explorer.flare.network",
    },
}

#: Explorer used for chain ids missing from the table.
DEFAULT_EXPLORER_URL: str = "https://flare-explorer.flare.network"

#: Byte length of an ERC-3009 nonce.
NONCE_BYTES: int = 32

_AMOUNT_PATTERN = re.compile(r"^(\d+(\.\d*)?|\.\d+)$", re.ASCII)


def get_chain_config(chain_id: int) -> Optional[EvmChainConfig]:
    """Return the configuration for ``chain_id`` or ``None`` if unknown."""
    data = _EVM_CHAINS_DATA.get(int(chain_id))
    if data is None:
        return None
    return EvmChainConfig(caip2=f"eip155:{int(chain_id)}", chain_id=int(chain_id), **data)


def get_explorer_url(chain_id: Optional[int], tx_hash: str) -> str:
    """
    Build the explorer link for a transaction.

    Unknown (or missing) chain ids fall back to ``DEFAULT_EXPLORER_URL``.

    Example:
        get_explorer_url(114, "0xdead")
        # 'https://coston2-explorer.flare.network/tx/0xdead'
    """
    config = get_chain_config(chain_id) if chain_id is not None else None
    base = config.explorer_url if config else DEFAULT_EXPLORER_URL
    return f"{base}/tx/{tx_hash}"


def generate_nonce() -> str:
    """Return a fresh bytes32 nonce (0x-prefixed hex) from the OS CSPRNG."""
    return "0x" + secrets.token_bytes(NONCE_BYTES).hex()


def amount_to_value(*, amount: Union[str, int, Decimal], decimals: int) -> int:
    """Convert a human-readable token `amount` into smallest-unit integer `value`.

    The conversion is exact: the decimal string is split into integer and
    fractional digits and scaled with integer arithmetic, so no floating-point
    or context-rounded intermediate is involved.

    Args:
        amount: Human-readable amount (e.g. "1.5"). Accepts str/int/Decimal.
        decimals: Token decimals (e.g. 6).

    Returns:
        int: Smallest-unit integer value.

    Raises:
        InvalidAmountError: If the amount is not a non-negative decimal number
            or needs more than ``decimals`` fractional digits.
    """
    if not isinstance(decimals, int) or isinstance(decimals, bool) or decimals < 0:
        raise ValueError("decimals must be a non-negative int")

    if isinstance(amount, Decimal):
        if not amount.is_finite():
            raise InvalidAmountError(f"Invalid amount: {amount!r}")
        text = format(amount, "f")
    elif isinstance(amount, int) and not isinstance(amount, bool):
        text = str(amount)
    elif isinstance(amount, str):
        text = amount.strip()
    else:
        raise InvalidAmountError(f"Invalid amount: {amount!r}")

    if text.startswith("-"):
        raise InvalidAmountError("amount must be non-negative")
    if not _AMOUNT_PATTERN.match(text):
        raise InvalidAmountError(f"Invalid amount: {amount!r}")

    int_part, _, frac_part = text.partition(".")
    significant_frac = frac_part.rstrip("0")
    if len(significant_frac) > decimals:
        raise InvalidAmountError(
            f"amount {amount!r} is not representable with decimals={decimals} "
            f"(would create fractional smallest units)"
        )

    scaled_frac = significant_frac.ljust(decimals, "0")
    return int(int_part or "0") * 10 ** decimals + int(scaled_frac or "0")


def value_to_amount(*, value: Union[int, str], decimals: int) -> str:
    """Convert a smallest-unit integer `value` into a human-readable decimal string.

    Trailing fractional zeros are dropped and whole amounts carry no decimal
    point, so ``amount_to_value`` followed by ``value_to_amount`` gives back any
    amount written in that normalised form ("1.5" -> 1500000 -> "1.5").

    Raises:
        ValueError: If inputs are invalid.
    """
    if not isinstance(decimals, int) or isinstance(decimals, bool) or decimals < 0:
        raise ValueError("decimals must be a non-negative int")

    try:
        int_value = int(value)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid value: {value!r}") from e

    if int_value < 0:
        raise ValueError("value must be non-negative")

    whole, frac = divmod(int_value, 10 ** decimals)
    frac_text = str(frac).rjust(decimals, "0").rstrip("0") if decimals else ""
    return f"{whole}.{frac_text}" if frac_text else str(whole)


def format_balance(*, value: Union[int, str], decimals: int) -> str:
    """Display form of a balance: like ``value_to_amount`` but whole amounts keep ".0".

    Example:
        format_balance(value=5_000_000, decimals=6)  # '5.0'
        format_balance(value=1_500_000, decimals=6)  # '1.5'
    """
    amount = value_to_amount(value=value, decimals=decimals)
    return amount if "." in amount else f"{amount}.0"
