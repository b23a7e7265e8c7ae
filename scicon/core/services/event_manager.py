"""
event_manager.py
----------------
Publish/subscribe bus the engine uses to notify the host.

The simulation never presents text or switches screens itself. Hosts that
want to react to a boss warning, a wave change or the end of a run subscribe
to the matching event type.
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Type

from scicon.core.debug.debug_logger import DebugLogger


# ===========================================================
# Event Definitions
# ===========================================================

@dataclass(frozen=True)
class BaseEvent:
    """Base class for all events."""
    pass


@dataclass(frozen=True)
class WaveStartedEvent(BaseEvent):
    wave: int


@dataclass(frozen=True)
class BossWarningEvent(BaseEvent):
    """A checkpoint was reached; the boss arrives after the countdown."""
    boss: str
    frames: int


@dataclass(frozen=True)
class BossSpawnedEvent(BaseEvent):
    boss: str
    wave: int


@dataclass(frozen=True)
class BossDefeatedEvent(BaseEvent):
    boss: str
    wave: int


@dataclass(frozen=True)
class PlayerHitEvent(BaseEvent):
    lives: int


@dataclass(frozen=True)
class PowerupCollectedEvent(BaseEvent):
    powerup: str


@dataclass(frozen=True)
class RunEndedEvent(BaseEvent):
    """Lives exhausted; the engine stopped updating."""
    score: int
    wave: int


# ===========================================================
# Event Manager
# ===========================================================

class EventManager:
    """Central event dispatcher using pub-sub pattern."""

    def __init__(self):
        self._subscribers: Dict[Type[BaseEvent], List[Callable]] = {}

    def subscribe(self, event_type: Type[BaseEvent], callback: Callable) -> None:
        """
        Register a callback for an event type.

        Args:
            event_type: Event class to listen for
            callback: Function called with the event instance
        """
        callbacks = self._subscribers.setdefault(event_type, [])
        if callback in callbacks:
            return
        callbacks.append(callback)
        DebugLogger.system(
            f"Subscribed '{getattr(callback, '__name__', repr(callback))}' to '{event_type.__name__}'",
            category="event_manager"
        )

    def unsubscribe(self, event_type: Type[BaseEvent], callback: Callable) -> None:
        callbacks = self._subscribers.get(event_type, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def dispatch(self, event: BaseEvent) -> None:
        """
        Send event to all registered callbacks.

        A failing subscriber is logged and skipped; it never aborts the tick.
        """
        for callback in list(self._subscribers.get(type(event), ())):
            try:
                callback(event)
            except Exception as e:
                callback_name = getattr(callback, '__name__', repr(callback))
                DebugLogger.warn(f"Error in event callback {callback_name}: {e}")

    def get_subscriber_count(self, event_type: Type[BaseEvent] = None) -> int:
        if event_type:
            return len(self._subscribers.get(event_type, []))
        return sum(len(subs) for subs in self._subscribers.values())
