"""
Client configuration.

``GaslessConfig`` is passed explicitly to the orchestrator and builder; the
environment is read only by ``GaslessConfig.from_env``.

Environment Variables:
    - GASLESS_TOKEN_ADDRESS: Token contract address (required)
    - GASLESS_RELAYER_URL: Relayer base URL (required)
    - GASLESS_RPC_URL: JSON-RPC endpoint for token reads (optional)
    - GASLESS_BALANCE_REFRESH_DELAY: Seconds to wait before re-reading the
      balance after a successful submission (optional, default 3)
"""

import os
from typing import Optional

import dotenv
from eth_utils import is_address, to_checksum_address
from pydantic import BaseModel, Field, ValidationError, field_validator

from .engine.exceptions import ConfigurationError


class GaslessConfig(BaseModel):
    """Deployment-specific settings of the gasless transfer client."""
    token_address: str = Field(..., description="Token contract address (EIP-712 verifyingContract)")
    relayer_url: str = Field(..., description="Relayer base URL")
    rpc_url: Optional[str] = Field(None, description="JSON-RPC endpoint for token reads")
    domain_version: str = Field("1", description="EIP-712 domain version")
    validity_seconds: int = Field(3600, gt=0, description="Authorization lifetime in seconds")
    balance_refresh_delay: float = Field(3.0, ge=0, description="Delay before the post-submit balance read")
    request_timeout: float = Field(30.0, gt=0, description="Relayer request timeout in seconds")

    @field_validator("token_address")
    @classmethod
    def _check_token_address(cls, value: str) -> str:
        if not is_address(value):
            raise ValueError(f"Invalid token address: {value}")
        return to_checksum_address(value)

    @field_validator("relayer_url")
    @classmethod
    def _check_relayer_url(cls, value: str) -> str:
        if not value.startswith(("http://", "https://")):
            raise ValueError(f"Relayer URL must be http(s): {value}")
        return value.rstrip("/")

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "GaslessConfig":
        """
        Load configuration from environment variables (and a ``.env`` file).

        Raises:
            ConfigurationError: If a required variable is missing or invalid.
        """
        dotenv.load_dotenv(env_file)

        token_address = os.getenv("GASLESS_TOKEN_ADDRESS")
        if not token_address:
            raise ConfigurationError("GASLESS_TOKEN_ADDRESS environment variable is required")

        relayer_url = os.getenv("GASLESS_RELAYER_URL")
        if not relayer_url:
            raise ConfigurationError(
                "GASLESS_RELAYER_URL environment variable is required. "
                "Example: http://localhost:3000"
            )

        values = {
            "token_address": token_address,
            "relayer_url": relayer_url,
            "rpc_url": os.getenv("GASLESS_RPC_URL") or None,
        }
        delay = os.getenv("GASLESS_BALANCE_REFRESH_DELAY")
        if delay:
            values["balance_refresh_delay"] = delay

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e
