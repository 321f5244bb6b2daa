import asyncio
import logging
import os
import sys

from gasless_relay import (
    FlowState,
    GaslessConfig,
    LocalAccountWallet,
    RelayerClient,
    StateChangedEvent,
    TransferOrchestrator,
    Web3TokenReader,
)
from gasless_relay.evm import get_chain_config

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

config = GaslessConfig.from_env()
chain_id = int(os.getenv("GASLESS_CHAIN_ID", "114"))
wallet = LocalAccountWallet(os.environ["GASLESS_HOLDER_KEY"], chain_id=chain_id)
reader = Web3TokenReader.from_rpc_url(config.rpc_url or get_chain_config(chain_id).public_rpc_url, config.token_address)


async def main(recipient: str, amount: str):
    async with RelayerClient(config.relayer_url, timeout=config.request_timeout) as relayer:
        orchestrator = TransferOrchestrator(config, wallet=wallet, token=reader, relayer=relayer)

        @orchestrator.event_bus.on(StateChangedEvent)
        async def show_status(event):
            print(f"[{event.state.value}] {event.status}")

        print("Connected:", await orchestrator.connect(), "balance:", orchestrator.snapshot.balance)
        snapshot = await orchestrator.send(recipient, amount)
        if snapshot.state is FlowState.SUCCEEDED:
            print("View on explorer:", snapshot.explorer_url)
            await orchestrator.wait_for_background()
            print("Balance:", orchestrator.snapshot.balance)
        return snapshot


if __name__ == "__main__":
    asyncio.run(main(sys.argv[1], sys.argv[2] if len(sys.argv) > 2 else "1"))
