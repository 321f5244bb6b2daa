"""
Token contract collaborator

Read-only access to the value-bearing token: display name and decimals for
the signing domain, and balances for display. ``Web3TokenReader`` talks to
the contract through ``AsyncWeb3``; tests substitute any object implementing
``TokenReader``.
"""

from typing import Optional, Protocol

from web3 import AsyncWeb3

from .ERC20_ABI import get_token_reader_abi


class TokenReader(Protocol):
    """The three token reads the client depends on."""

    async def name(self) -> str:
        ...

    async def decimals(self) -> int:
        ...

    async def balance_of(self, address: str) -> int:
        ...


class Web3TokenReader:
    """
    ``TokenReader`` backed by an ERC20 contract over JSON-RPC.

    Example:
        reader = Web3TokenReader.from_rpc_url(
            "https://coston2-api.flare.network/ext/C/rpc",
            "0xC1A5B41512496B80903D1f32d6dEa3a73212E71F",
        )
        decimals = await reader.decimals()
    """

    def __init__(self, w3: AsyncWeb3, token_address: str):
        self._w3 = w3
        self.token_address = AsyncWeb3.to_checksum_address(token_address)
        self._contract = w3.eth.contract(address=self.token_address, abi=get_token_reader_abi())

    @classmethod
    def from_rpc_url(
        cls,
        rpc_url: str,
        token_address: str,
        request_timeout: Optional[int] = 60,
    ) -> "Web3TokenReader":
        w3 = AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(
            rpc_url,
            request_kwargs={"timeout": request_timeout}
        ))
        return cls(w3, token_address)

    async def name(self) -> str:
        return str(await self._contract.functions.name().call())

    async def decimals(self) -> int:
        return int(await self._contract.functions.decimals().call())

    async def balance_of(self, address: str) -> int:
        checksum = AsyncWeb3.to_checksum_address(address)
        return int(await self._contract.functions.balanceOf(checksum).call())
