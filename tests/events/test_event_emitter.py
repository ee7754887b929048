"""
Tests for the round event emitter.
"""

import threading
from unittest.mock import MagicMock

import pytest

from concentration.events import EventBus, EventEmitter, EngineEventType, EventPriority
from concentration.memory.transitions import StateTransitionEngine


@pytest.fixture
def round_state():
    return StateTransitionEngine.new_round([], generation=4, layout="XYXY")


def test_round_events_are_stamped_with_their_round(round_state):
    emitter = EventEmitter()
    matched = MagicMock()
    emitter.on(EngineEventType.PAIR_MATCHED, matched)

    payload = emitter.emit(
        EngineEventType.PAIR_MATCHED, {"positions": [0, 2]}, state=round_state
    )

    matched.assert_called_once_with(payload)
    assert payload["game_id"] == round_state.id
    assert payload["generation"] == 4
    assert payload["positions"] == [0, 2]
    assert isinstance(payload["timestamp"], float)


def test_event_data_wins_over_stamp(round_state):
    payload = EventEmitter().emit(
        EngineEventType.ROUND_WON, {"timestamp": 1.5}, state=round_state
    )
    assert payload["timestamp"] == 1.5


def test_events_without_round_pass_through_unchanged():
    emitter = EventEmitter()
    seen = MagicMock()
    emitter.on(EngineEventType.ENGINE_SHUTDOWN, seen)

    data = {"timestamp": 10.0}
    emitter.emit(EngineEventType.ENGINE_SHUTDOWN, data)

    seen.assert_called_once_with(data)
    assert "game_id" not in data


def test_enum_and_name_address_the_same_subscribers():
    emitter = EventEmitter()
    revealed = MagicMock()
    emitter.on(EngineEventType.CARD_REVEALED, revealed)

    emitter.emit("CARD_REVEALED", {"position": 1})
    emitter.emit(EngineEventType.CARD_REVEALED, {"position": 3})

    assert [c.args[0]["position"] for c in revealed.call_args_list] == [1, 3]
    assert emitter.listener_count("CARD_REVEALED") == 1


def test_condition_filters_other_rounds(round_state):
    emitter = EventEmitter()
    other_round = StateTransitionEngine.new_round([], layout="XYXY")
    won = MagicMock()
    emitter.on(
        EngineEventType.ROUND_WON,
        won,
        condition=lambda data: data["game_id"] == round_state.id,
    )

    emitter.emit(EngineEventType.ROUND_WON, {"move_count": 5}, state=other_round)
    emitter.emit(EngineEventType.ROUND_WON, {"move_count": 2}, state=round_state)

    won.assert_called_once()
    assert won.call_args[0][0]["move_count"] == 2


def test_unsubscribe_removes_only_that_subscription():
    emitter = EventEmitter()
    render = MagicMock()

    first = emitter.on(EngineEventType.STATE_CHANGED, render)
    emitter.on(EngineEventType.STATE_CHANGED, render)
    assert emitter.listener_count(EngineEventType.STATE_CHANGED) == 2

    first()
    first()
    assert emitter.listener_count(EngineEventType.STATE_CHANGED) == 1

    emitter.emit(EngineEventType.STATE_CHANGED, {})
    render.assert_called_once()


def test_priority_order_with_ties_in_subscription_order():
    emitter = EventEmitter()
    calls = []

    emitter.on(EngineEventType.TIMER_TICK, lambda d: calls.append("clock"))
    emitter.on(EngineEventType.TIMER_TICK, lambda d: calls.append("log"), EventPriority.LOW)
    emitter.on(
        EngineEventType.TIMER_TICK, lambda d: calls.append("render"), EventPriority.HIGH
    )
    emitter.on(EngineEventType.TIMER_TICK, lambda d: calls.append("status"))
    emitter.on(
        EngineEventType.TIMER_TICK, lambda d: calls.append("audit"), EventPriority.CRITICAL
    )

    emitter.emit(EngineEventType.TIMER_TICK, {"elapsed_seconds": 1})

    assert calls == ["audit", "render", "clock", "status", "log"]


def test_failing_handler_is_logged_and_skipped(caplog):
    emitter = EventEmitter()
    after = MagicMock()
    emitter.on(EngineEventType.CARD_HIDDEN, MagicMock(side_effect=ValueError("bad draw")))
    emitter.on(EngineEventType.CARD_HIDDEN, after)

    emitter.emit(EngineEventType.CARD_HIDDEN, {"position": 0})

    after.assert_called_once()
    assert "Error in event handler for CARD_HIDDEN" in caplog.text


def test_failing_condition_is_logged_and_skipped():
    emitter = EventEmitter()
    after = MagicMock()
    emitter.on(
        EngineEventType.ROUND_DEALT, MagicMock(), condition=lambda data: data["missing"]
    )
    emitter.on(EngineEventType.ROUND_DEALT, after)

    emitter.emit(EngineEventType.ROUND_DEALT, {"pairs": 8})
    after.assert_called_once()


def test_handler_can_unsubscribe_while_handling():
    emitter = EventEmitter()
    starts = []

    def first_start_only(data):
        starts.append(data["position"])
        unsubscribe()

    unsubscribe = emitter.on(EngineEventType.ROUND_STARTED, first_start_only)
    emitter.emit(EngineEventType.ROUND_STARTED, {"position": 3})
    emitter.emit(EngineEventType.ROUND_STARTED, {"position": 5})

    assert starts == [3]


def test_event_bus_singleton():
    bus = EventBus.get_instance()
    assert bus is EventBus.get_instance()
    assert isinstance(bus, EventEmitter)


def test_concurrent_emits_reach_every_handler(round_state):
    emitter = EventEmitter()
    ticks = []
    lock = threading.Lock()

    def record(data):
        with lock:
            ticks.append(data["elapsed_seconds"])

    emitter.on(EngineEventType.TIMER_TICK, record)

    threads = [
        threading.Thread(
            target=emitter.emit,
            args=(EngineEventType.TIMER_TICK, {"elapsed_seconds": i}),
            kwargs={"state": round_state},
        )
        for i in range(10)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(ticks) == list(range(10))
