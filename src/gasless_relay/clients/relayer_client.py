"""
Relayer HTTP client

Submits a signed ERC-3009 authorization to the relayer, which pays the
network fee and executes ``transferWithAuthorization`` on the holder's
behalf. Transport failures and non-success answers are mapped to the tagged
errors of ``engine.exceptions``.
"""

import logging

import httpx
from pydantic import ValidationError

from ..engine.exceptions import NetworkError, RelayerRejectedError, UnknownFailureError
from ..schemas.https import RelayErrorResponse, RelaySuccessResponse, RelayTransferRequest

logger = logging.getLogger(__name__)

RELAY_TRANSFER_PATH = "/relay-transfer"


class RelayerClient(httpx.AsyncClient):
    """
    ``httpx.AsyncClient`` bound to one relayer base URL.

    Fully compatible with httpx.AsyncClient and usable as an async context
    manager. No retry is attempted: every failure is surfaced and a new
    attempt must start from a fresh authorization.

    Usage:
        ```python
        async with RelayerClient("https://relayer.example.com") as relayer:
            response = await relayer.relay_transfer(request)
            print(response.tx_hash)
        ```
    """

    def __init__(self, base_url: str, *, timeout: float = 30.0, **kwargs):
        """
        Args:
            base_url: Relayer base URL, without the endpoint path.
            timeout: Request timeout in seconds.
            **kwargs: All standard httpx.AsyncClient arguments (transport, headers, ...).
        """
        super().__init__(base_url=base_url.rstrip("/"), timeout=timeout, **kwargs)

    async def relay_transfer(self, request: RelayTransferRequest) -> RelaySuccessResponse:
        """
        POST the signed authorization to ``/relay-transfer``.

        Returns:
            Parsed success body carrying ``txHash``.

        Raises:
            NetworkError: The relayer could not be reached or timed out.
            RelayerRejectedError: Non-success status; message is the relayer's ``error``.
            UnknownFailureError: Success status without a usable ``txHash``.
        """
        try:
            response = await self.post(RELAY_TRANSFER_PATH, json=request.to_json_body())
        except httpx.TransportError as e:
            logger.warning("Relayer unreachable: %s", e)
            raise NetworkError(f"Could not reach the relayer: {e}") from e

        if not response.is_success:
            message = self._error_message(response)
            logger.warning("Relayer rejected authorization (HTTP %s): %s", response.status_code, message)
            raise RelayerRejectedError(message, status_code=response.status_code)

        try:
            return RelaySuccessResponse.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise UnknownFailureError(f"Malformed relayer response: {e}") from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Extract the relayer's ``error`` string, falling back to the HTTP status."""
        try:
            body = RelayErrorResponse.model_validate(response.json())
        except (ValueError, ValidationError):
            body = None
        if body is not None and body.error:
            return body.error
        return f"Relayer returned HTTP {response.status_code}"
