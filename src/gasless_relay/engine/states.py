"""
Transfer flow state machine.

An explicit enumerated state plus a pure transition function; the
orchestrator is the only caller and holds the current state.

    Idle -> ConnectingWallet -> PreparingAuthorization -> AwaitingSignature
         -> SubmittingToRelayer -> Succeeded
    every non-terminal state -> Failed
    Succeeded | Failed -> Idle   (start of the next attempt)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Optional

from .exceptions import ErrorKind, InvalidTransition


class FlowState(str, Enum):
    """States of one gasless-transfer attempt."""
    IDLE = "Idle"
    CONNECTING_WALLET = "ConnectingWallet"
    PREPARING_AUTHORIZATION = "PreparingAuthorization"
    AWAITING_SIGNATURE = "AwaitingSignature"
    SUBMITTING_TO_RELAYER = "SubmittingToRelayer"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


_ALLOWED: Dict[FlowState, FrozenSet[FlowState]] = {
    FlowState.IDLE: frozenset({FlowState.CONNECTING_WALLET, FlowState.FAILED}),
    FlowState.CONNECTING_WALLET: frozenset({FlowState.PREPARING_AUTHORIZATION, FlowState.FAILED}),
    FlowState.PREPARING_AUTHORIZATION: frozenset({FlowState.AWAITING_SIGNATURE, FlowState.FAILED}),
    FlowState.AWAITING_SIGNATURE: frozenset({FlowState.SUBMITTING_TO_RELAYER, FlowState.FAILED}),
    FlowState.SUBMITTING_TO_RELAYER: frozenset({FlowState.SUCCEEDED, FlowState.FAILED}),
    FlowState.SUCCEEDED: frozenset({FlowState.IDLE}),
    FlowState.FAILED: frozenset({FlowState.IDLE}),
}

STATUS_TEXT: Dict[FlowState, str] = {
    FlowState.IDLE: "",
    FlowState.CONNECTING_WALLET: "Connecting to wallet...",
    FlowState.PREPARING_AUTHORIZATION: "Preparing authorization...",
    FlowState.AWAITING_SIGNATURE: "Waiting for signature in wallet...",
    FlowState.SUBMITTING_TO_RELAYER: "Sending to relayer...",
    FlowState.SUCCEEDED: "Transaction submitted",
    FlowState.FAILED: "Transaction failed",
}


def transition(current: FlowState, target: FlowState) -> FlowState:
    """
    Return ``target`` if the move from ``current`` is allowed.

    Raises:
        InvalidTransition: For any move outside the table above.
    """
    if target not in _ALLOWED[current]:
        raise InvalidTransition(current, target)
    return target


def is_terminal(state: FlowState) -> bool:
    return state in (FlowState.SUCCEEDED, FlowState.FAILED)


def is_in_flight(state: FlowState) -> bool:
    """True while an attempt is running; new attempts are refused."""
    return not is_terminal(state) and state is not FlowState.IDLE


@dataclass(frozen=True)
class FlowSnapshot:
    """
    Client-visible view of the orchestrator.

    Attributes:
        state: Current ``FlowState``.
        status: Display text for the current state.
        tx_hash: Transaction reference returned by the relayer, if any.
        error_kind: Tag of the failure when ``state`` is ``Failed``.
        error_message: User-displayable failure message.
        signer: Signer resolved during the last wallet read.
        chain_id: Network id resolved during the last wallet read.
        balance: Last formatted balance read.
        explorer_url: Link to ``tx_hash`` on the network's explorer.
        attempt_active: An attempt has been accepted and has not returned yet,
            including the validation steps that run while still ``Idle``.
    """
    state: FlowState = FlowState.IDLE
    status: str = ""
    tx_hash: Optional[str] = None
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None
    signer: Optional[str] = None
    chain_id: Optional[int] = None
    balance: Optional[str] = None
    explorer_url: Optional[str] = None
    attempt_active: bool = False

    @property
    def is_busy(self) -> bool:
        return self.attempt_active or is_in_flight(self.state)
