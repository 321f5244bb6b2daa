"""
Mock relayer server - FastAPI implementation of the relayer contract.

Accepts ``POST /relay-transfer`` exactly as a production relayer would and
performs the checks the token contract would perform on
``transferWithAuthorization`` (validity window, EIP-712 signature, nonce
reuse), then answers with a deterministic fake ``txHash``. Nothing is
submitted on-chain; it exists for local development and end-to-end tests.
"""

import logging
from typing import Dict, Optional, Set, Tuple

from eth_account import Account
from eth_account.messages import encode_typed_data
from eth_utils import keccak, to_checksum_address, to_hex
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..clients.relayer_client import RELAY_TRANSFER_PATH
from ..engine.timers import Clock, SystemClock
from ..evm.standards import EIP712Domain, ERC3009TypedData
from ..schemas.https import RelayTransferRequest

logger = logging.getLogger(__name__)


class MockRelayerServer(FastAPI):
    """FastAPI relayer stand-in bound to one token deployment."""

    def __init__(
        self,
        token_name: str,
        token_address: str,
        chain_id: int,
        domain_version: str = "1",
        clock: Optional[Clock] = None,
        **fastapi_kwargs
    ):
        """Initialize the mock relayer.

        Args:
            token_name: Token display name (EIP-712 domain ``name``)
            token_address: Token contract (EIP-712 ``verifyingContract``)
            chain_id: Network the relayer submits to
            domain_version: EIP-712 domain ``version``
            clock: Time source for the validity window check
            **fastapi_kwargs: FastAPI arguments (title, version, etc.)
        """
        super().__init__(**fastapi_kwargs)
        self.domain = EIP712Domain(
            name=token_name,
            version=domain_version,
            chainId=int(chain_id),
            verifyingContract=to_checksum_address(token_address),
        )
        self.clock = clock or SystemClock()
        self.used_nonces: Set[Tuple[str, str]] = set()
        self.relayed: Dict[str, RelayTransferRequest] = {}

        self.add_exception_handler(RequestValidationError, self._validation_error_handler)
        self._setup_relay_endpoint(RELAY_TRANSFER_PATH)

    @staticmethod
    async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": "malformed relay request"})

    def _recover_signer(self, relay_request: RelayTransferRequest) -> str:
        typed_data = ERC3009TypedData(domain=self.domain, message=relay_request.payload.to_message())
        signable = encode_typed_data(full_message=typed_data.to_dict())
        return Account.recover_message(
            signable,
            vrs=(relay_request.v, int(relay_request.r, 16), int(relay_request.s, 16)),
        )

    def check(self, relay_request: RelayTransferRequest) -> Optional[str]:
        """Return the rejection reason for ``relay_request``, or ``None`` if it would execute."""
        payload = relay_request.payload
        now = self.clock.now()
        if now < payload.validAfter:
            return "authorization is not yet valid"
        if now >= payload.validBefore:
            return "authorization is expired"

        try:
            recovered = self._recover_signer(relay_request)
        except Exception as e:
            logger.info("Signature recovery failed: %s", e)
            return "invalid signature"
        if recovered.lower() != payload.authorizer.lower():
            return "invalid signature"

        if (payload.authorizer.lower(), payload.nonce.lower()) in self.used_nonces:
            return "nonce already used"
        return None

    def _setup_relay_endpoint(self, path: str) -> None:
        """Setup the relay endpoint.

        Args:
            path: Endpoint path (default: /relay-transfer)
        """
        @self.post(path)
        async def relay_transfer(relay_request: RelayTransferRequest):
            """Verify the signed authorization and return a transaction reference."""
            reason = self.check(relay_request)
            if reason is not None:
                logger.info("Rejecting authorization from %s: %s", relay_request.payload.authorizer, reason)
                return JSONResponse(status_code=400, content={"error": reason})

            payload = relay_request.payload
            self.used_nonces.add((payload.authorizer.lower(), payload.nonce.lower()))
            tx_hash = to_hex(keccak(text=relay_request.to_canonical_json()))
            self.relayed[tx_hash] = relay_request
            return JSONResponse(status_code=200, content={"txHash": tx_hash})
