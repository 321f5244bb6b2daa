"""
Typed flow events and the hook dispatcher.

The orchestrator publishes an event for every state transition and every
balance read. Hooks observe them (display, logging, metrics); they can not
influence the flow, and a failing hook is logged and ignored.
"""

import asyncio
import inspect
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from .exceptions import ErrorKind
from .states import FlowState

logger = logging.getLogger(__name__)


# ==================== Base Event ====================

class BaseEvent(ABC):
    """Base class for all events in the system."""

    @abstractmethod
    def __repr__(self) -> str:
        """String representation of the event."""
        pass


# ==================== Flow Events ====================

class StateChangedEvent(BaseModel, BaseEvent):
    """The orchestrator moved to a new state."""
    previous: FlowState
    state: FlowState
    status: str
    tx_hash: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    model_config = ConfigDict(frozen=True)

    def __repr__(self) -> str:
        return f"StateChangedEvent({self.previous.value} -> {self.state.value})"


class BalanceUpdatedEvent(BaseModel, BaseEvent):
    """A balance read completed."""
    address: str
    balance: str

    model_config = ConfigDict(frozen=True)

    def __repr__(self) -> str:
        return f"BalanceUpdatedEvent(address={self.address}, balance={self.balance})"


class BalanceRefreshFailedEvent(BaseModel, BaseEvent):
    """A balance read failed; flow state is untouched."""
    address: str
    error_message: str

    model_config = ConfigDict(frozen=True)

    def __repr__(self) -> str:
        return f"BalanceRefreshFailedEvent(address={self.address}, error={self.error_message})"


# ==================== Event Bus ====================

EventHookFunc = Callable[[BaseEvent], Awaitable[None]]


class EventBus:
    """Dispatcher running registered hooks for published events."""

    def __init__(self) -> None:
        self._hooks: Dict[type, List[EventHookFunc]] = {}

    def hook(self, event_class: type, hook_func: EventHookFunc) -> None:
        """
        Register a hook for the given event class.

        Args:
            event_class: The event class to hook into.
            hook_func: Coroutine function called with the event.

        Raises:
            TypeError: If hook_func is not a coroutine function.
        """
        if not inspect.iscoroutinefunction(hook_func):
            raise TypeError(f"Hook must be a coroutine function, got {type(hook_func).__name__}")

        self._hooks.setdefault(event_class, []).append(hook_func)

    def on(self, event_class: type) -> Callable[[EventHookFunc], EventHookFunc]:
        """Decorator form of ``hook``.

        Example:
            @bus.on(StateChangedEvent)
            async def show(event):
                print(event.status)
        """
        def decorator(hook_func: EventHookFunc) -> EventHookFunc:
            self.hook(event_class, hook_func)
            return hook_func
        return decorator

    async def dispatch(self, event: BaseEvent) -> None:
        """
        Run all hooks registered for ``type(event)`` concurrently.

        Hook exceptions are logged, never raised.
        """
        hooks = self._hooks.get(type(event), [])
        if not hooks:
            return

        results = await asyncio.gather(*(hook(event) for hook in hooks), return_exceptions=True)
        for hook_func, result in zip(hooks, results):
            if isinstance(result, Exception):
                logger.warning(
                    "Hook %s failed for %r: %s",
                    getattr(hook_func, "__name__", hook_func), event, result,
                )
