"""
Event system for the Concentration engine.

Engines publish round events here; adapters and the async API subscribe.
"""

from concentration.events.emitter import (
    EventCondition,
    EventEmitter,
    EventBus,
    EventPriority,
    EngineEventType,
)

__all__ = ["EventCondition", "EventEmitter", "EventBus", "EventPriority", "EngineEventType"]
