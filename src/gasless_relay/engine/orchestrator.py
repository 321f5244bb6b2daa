"""
Transfer Orchestrator

Drives one gasless-transfer attempt from user intent to a terminal outcome:

    1. validate intent (no wallet interaction)
    2. connect: request accounts, read signer and network
    3. prepare: re-read the network, build domain and authorization
    4. sign: structured signature from the wallet
    5. submit: one POST to the relayer
    6. schedule the delayed balance refresh

Every failure is converted into the terminal ``Failed`` state; nothing is
retried. A new attempt always starts from ``Idle`` with a fresh nonce.
"""

import asyncio
import logging
from typing import Awaitable, Optional, Set

from ..clients.relayer_client import RelayerClient
from ..config import GaslessConfig
from ..evm.constants import format_balance, get_explorer_url
from ..evm.schemas import ERC3009Authorization, EVMECDSASignature
from ..evm.standards import EIP712Domain
from ..evm.token import TokenReader
from ..evm.wallets import WalletProvider
from ..schemas.https import RelayTransferRequest
from .builder import AuthorizationBuilder
from .events import (
    BalanceRefreshFailedEvent,
    BalanceUpdatedEvent,
    EventBus,
    StateChangedEvent,
)
from .exceptions import (
    AccessDeniedError,
    InvalidTransition,
    MissingInputError,
    SignatureDeniedError,
    TransferError,
    UnknownFailureError,
    WalletUnavailableError,
)
from .states import STATUS_TEXT, FlowSnapshot, FlowState, is_in_flight, is_terminal, transition
from .timers import Clock, SystemClock

logger = logging.getLogger(__name__)


class TransferOrchestrator:
    """
    Owner of the flow state of gasless transfers.

    Only one attempt may run at a time: calling ``send`` while an attempt is
    in flight raises ``InvalidTransition``. All other failures end the attempt
    in ``Failed`` and are reported through the returned ``FlowSnapshot``.

    Args:
        config: Deployment settings (token address, relayer URL, delays).
        wallet: Key-holding agent, or ``None`` when no wallet is available.
        token: Token contract reader.
        relayer: Relayer HTTP client.
        builder: Authorization builder (created from ``config`` when omitted).
        clock: Time source for the validity window and the refresh delay.
        event_bus: Receives ``StateChangedEvent`` and balance events.

    Example:
        async with RelayerClient(config.relayer_url) as relayer:
            orchestrator = TransferOrchestrator(
                config, wallet=wallet, token=reader, relayer=relayer,
            )
            snapshot = await orchestrator.send("0xRecipient", "1.5")
            if snapshot.state is FlowState.SUCCEEDED:
                print(snapshot.explorer_url)
    """

    def __init__(
        self,
        config: GaslessConfig,
        *,
        wallet: Optional[WalletProvider],
        token: TokenReader,
        relayer: RelayerClient,
        builder: Optional[AuthorizationBuilder] = None,
        clock: Optional[Clock] = None,
        event_bus: Optional[EventBus] = None,
    ):
        self.config = config
        self._wallet = wallet
        self._token = token
        self._relayer = relayer
        self._clock = clock or SystemClock()
        self.builder = builder or AuthorizationBuilder(
            token,
            config.token_address,
            domain_version=config.domain_version,
            validity_seconds=config.validity_seconds,
            clock=self._clock,
        )
        self.event_bus = event_bus or EventBus()

        self._state = FlowState.IDLE
        self._status = ""
        self._tx_hash: Optional[str] = None
        self._error: Optional[TransferError] = None
        self._signer: Optional[str] = None
        self._chain_id: Optional[int] = None
        self._balance: Optional[str] = None
        self._background: Set[asyncio.Task] = set()
        self._attempt_active = False

    # =========================================================================
    # Flow state
    # =========================================================================

    @property
    def state(self) -> FlowState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._attempt_active or is_in_flight(self._state)

    @property
    def snapshot(self) -> FlowSnapshot:
        return FlowSnapshot(
            state=self._state,
            status=self._status,
            tx_hash=self._tx_hash,
            error_kind=self._error.kind if self._error else None,
            error_message=self._error.message if self._error else None,
            signer=self._signer,
            chain_id=self._chain_id,
            balance=self._balance,
            explorer_url=get_explorer_url(self._chain_id, self._tx_hash) if self._tx_hash else None,
            attempt_active=self._attempt_active,
        )

    async def _move(self, target: FlowState, status: Optional[str] = None) -> None:
        previous = self._state
        self._state = transition(previous, target)
        self._status = STATUS_TEXT[target] if status is None else status
        logger.info("Transfer flow %s -> %s", previous.value, target.value)
        await self.event_bus.dispatch(StateChangedEvent(
            previous=previous,
            state=target,
            status=self._status,
            tx_hash=self._tx_hash,
            error_kind=self._error.kind if self._error else None,
        ))

    async def _fail(self, error: TransferError) -> None:
        if is_terminal(self._state):
            logger.warning("Ignoring %s after the attempt ended in %s", error.kind.value, self._state.value)
            return
        self._error = error
        await self._move(FlowState.FAILED, status=error.message)

    # =========================================================================
    # Public operations
    # =========================================================================

    async def send(self, recipient: str, amount: str) -> FlowSnapshot:
        """
        Run one gasless-transfer attempt.

        Args:
            recipient: Recipient address as entered.
            amount: Decimal amount string as entered (e.g. ``"1.5"``).

        Returns:
            Snapshot in ``Succeeded`` or ``Failed``.

        Raises:
            InvalidTransition: If an attempt is already in flight.
        """
        if self.is_busy:
            raise InvalidTransition(self._state, FlowState.CONNECTING_WALLET)
        # claimed before the first await; validation and the reset to Idle
        # both yield while the state is not yet in flight
        self._attempt_active = True
        try:
            if is_terminal(self._state):
                self._tx_hash = None
                self._error = None
                await self._move(FlowState.IDLE)

            try:
                await self._run(recipient, amount)
            except TransferError as e:
                logger.info("Transfer failed (%s): %s", e.kind.value, e.message)
                await self._fail(e)
            except Exception as e:
                logger.exception("Unexpected failure during transfer")
                await self._fail(UnknownFailureError(str(e) or type(e).__name__))
        finally:
            self._attempt_active = False
        return self.snapshot

    async def connect(self) -> str:
        """
        Connect the wallet outside of a transfer and load the balance.

        Flow state is not changed.

        Returns:
            The active signer address.

        Raises:
            WalletUnavailableError: No wallet configured.
            AccessDeniedError: Account access refused.
        """
        if self._wallet is None:
            raise WalletUnavailableError()
        signer = await self._connect_wallet(self._wallet)
        await self.refresh_balance(signer)
        return signer

    async def refresh_balance(self, address: Optional[str] = None) -> Optional[str]:
        """
        Read and store the formatted balance of ``address`` (default: the signer).

        Failures are logged and published as ``BalanceRefreshFailedEvent``;
        they never touch the flow state.
        """
        address = address or self._signer
        if not address:
            return None
        try:
            raw_balance = await self._token.balance_of(address)
            decimals = int(await self._token.decimals())
            balance = format_balance(value=raw_balance, decimals=decimals)
        except Exception as e:
            logger.warning("Failed to load balance for %s: %s", address, e)
            await self.event_bus.dispatch(BalanceRefreshFailedEvent(address=address, error_message=str(e)))
            return None

        self._balance = balance
        await self.event_bus.dispatch(BalanceUpdatedEvent(address=address, balance=balance))
        return balance

    def schedule_balance_refresh(self, address: Optional[str] = None) -> asyncio.Task:
        """
        Start the delayed balance read owned by this orchestrator.

        The task sleeps ``config.balance_refresh_delay`` on the injected clock,
        then reads once. It is not cancelled by later attempts.
        """
        return self._spawn(self._delayed_refresh(address or self._signer, self.config.balance_refresh_delay))

    async def wait_for_background(self) -> None:
        """Wait until every scheduled balance read has finished."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # =========================================================================
    # Steps
    # =========================================================================

    async def _run(self, recipient: str, amount: str) -> None:
        wallet = self._wallet
        if wallet is None:
            raise WalletUnavailableError("Please install or configure a wallet")
        if not recipient or not str(recipient).strip() or amount is None or not str(amount).strip():
            raise MissingInputError()
        await self.builder.validate_intent(recipient, amount)

        await self._move(FlowState.CONNECTING_WALLET)
        previous_signer = self._signer
        signer = await self._connect_wallet(wallet)
        if signer != previous_signer:
            self._spawn(self.refresh_balance(signer))

        await self._move(FlowState.PREPARING_AUTHORIZATION)
        # The domain must carry the network selected right now, not the one
        # seen while connecting.
        chain_id = int(await wallet.active_network())
        self._chain_id = chain_id
        domain, authorization = await self.builder.build(
            authorizer=signer,
            recipient=recipient,
            amount=amount,
            chain_id=chain_id,
        )

        await self._move(FlowState.AWAITING_SIGNATURE)
        signature = await self._request_signature(wallet, domain, authorization)

        await self._move(FlowState.SUBMITTING_TO_RELAYER)
        response = await self._relayer.relay_transfer(
            RelayTransferRequest.from_signed(authorization, signature)
        )

        self._tx_hash = response.tx_hash
        await self._move(FlowState.SUCCEEDED, status=f"Transaction submitted: {response.tx_hash}")
        self.schedule_balance_refresh(signer)

    async def _connect_wallet(self, wallet: WalletProvider) -> str:
        try:
            accounts = await wallet.request_accounts()
        except AccessDeniedError:
            raise
        except Exception as e:
            raise AccessDeniedError(str(e) or None) from e
        if not accounts:
            raise AccessDeniedError("Wallet returned no accounts")

        signer = await wallet.active_signer()
        chain_id = int(await wallet.active_network())
        self._signer = signer
        self._chain_id = chain_id
        return signer

    async def _request_signature(
        self,
        wallet: WalletProvider,
        domain: EIP712Domain,
        authorization: ERC3009Authorization,
    ) -> EVMECDSASignature:
        try:
            raw_signature = await wallet.sign_structured(
                domain.to_dict(),
                self.builder.type_schema(),
                authorization.to_message().to_dict(),
            )
        except SignatureDeniedError:
            raise
        except Exception as e:
            raise SignatureDeniedError(str(e) or None) from e

        try:
            return EVMECDSASignature.from_raw(raw_signature)
        except (TypeError, ValueError) as e:
            raise SignatureDeniedError(f"Wallet returned an invalid signature: {e}") from e

    async def _delayed_refresh(self, address: Optional[str], delay: float) -> None:
        await self._clock.sleep(delay)
        await self.refresh_balance(address)

    def _spawn(self, coro: Awaitable[None]) -> asyncio.Task:
        task = asyncio.ensure_future(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return task
