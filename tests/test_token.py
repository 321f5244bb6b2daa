"""
Web3TokenReader against a stubbed contract object.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest

from gasless_relay.evm.ERC20_ABI import get_token_reader_abi
from gasless_relay.evm.token import Web3TokenReader

from test_mocks import MOCK_HOLDER_ADDRESS, MOCK_TOKEN_ADDRESS, MOCK_TOKEN_NAME


def make_reader(name=MOCK_TOKEN_NAME, decimals=6, balance=1_500_000):
    contract = Mock()
    contract.functions.name.return_value.call = AsyncMock(return_value=name)
    contract.functions.decimals.return_value.call = AsyncMock(return_value=decimals)
    contract.functions.balanceOf.return_value.call = AsyncMock(return_value=balance)
    w3 = SimpleNamespace(eth=SimpleNamespace(contract=Mock(return_value=contract)))
    return Web3TokenReader(w3, MOCK_TOKEN_ADDRESS.lower()), w3, contract


@pytest.mark.asyncio
async def test_reads_metadata_and_balance():
    reader, w3, contract = make_reader()

    assert await reader.name() == MOCK_TOKEN_NAME
    assert await reader.decimals() == 6
    assert await reader.balance_of(MOCK_HOLDER_ADDRESS.lower()) == 1_500_000

    contract.functions.balanceOf.assert_called_once_with(MOCK_HOLDER_ADDRESS)
    w3.eth.contract.assert_called_once_with(address=MOCK_TOKEN_ADDRESS, abi=get_token_reader_abi())


def test_abi_covers_the_three_reads():
    names = {entry["name"] for entry in get_token_reader_abi()}
    assert names == {"name", "decimals", "balanceOf"}
