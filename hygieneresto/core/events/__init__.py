"""Event bus module for in-process communication."""

from hygieneresto.core.events.bus import EventBus, HandlerFailure
from hygieneresto.core.events.types import EventTypes

__all__ = ["EventBus", "EventTypes", "HandlerFailure"]
