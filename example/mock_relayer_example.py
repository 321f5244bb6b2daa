import logging
import os

from gasless_relay.servers import MockRelayerServer

logging.basicConfig(level=logging.INFO)

app = MockRelayerServer(
    token_name=os.getenv("GASLESS_TOKEN_NAME", "USD₮0"),
    token_address=os.environ["GASLESS_TOKEN_ADDRESS"],
    chain_id=int(os.getenv("GASLESS_CHAIN_ID", "114")),
    title="Mock gasless relayer",
)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="localhost", port=3000, log_level="info")
