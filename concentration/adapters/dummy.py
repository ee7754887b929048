"""
Recording adapter for tests and headless simulations.
"""

from typing import List, Dict, Any, Union
from enum import Enum

from concentration.adapters.base import PlatformAdapter


def _name(event_type: Union[str, Enum]) -> str:
    return event_type.name if isinstance(event_type, Enum) else event_type


class DummyAdapter(PlatformAdapter):
    """
    Adapter that keeps every board it is shown instead of drawing it.

    Tests inspect `rendered_states` to follow the board from deal to win, and
    `events` to check which milestones were announced and in what order.
    """

    def __init__(self, verbose: bool = False):
        """
        Args:
            verbose: Print a one-line board and each milestone to stdout
        """
        self.verbose = verbose
        self.initialized = False
        self.shut_down = False

        # (event name, payload) in announcement order
        self.events = []
        # Board views in render order
        self.rendered_states = []

    async def initialize(self) -> None:
        self.initialized = True

    async def shutdown(self) -> None:
        self.shut_down = True

    async def render_game_state(self, state: Dict[str, Any]) -> None:
        self.rendered_states.append(state)

        if self.verbose:
            faces = " ".join(
                str(card["symbol"]) if card["face_up"] else "??"
                for card in state.get("cards", [])
            )
            print(f"[{state.get('status')}] {faces} moves={state.get('moves')}")

    async def notify_game_event(
        self, event_type: Union[str, Enum], data: Dict[str, Any]
    ) -> None:
        name = _name(event_type)
        self.events.append((name, data))

        if self.verbose:
            print(f"Event: {name}")
            for key, value in data.items():
                print(f"  {key}: {value}")

    @property
    def last_state(self) -> Dict[str, Any]:
        """The board as last drawn, or an empty dict before the first render."""
        return self.rendered_states[-1] if self.rendered_states else {}

    def get_events_by_type(self, event_type: Union[str, Enum]) -> List[Dict[str, Any]]:
        """Payloads of every announced event of one type, oldest first."""
        name = _name(event_type)
        return [data for typ, data in self.events if typ == name]

    def clear(self) -> None:
        """Forget recorded boards and events."""
        self.events.clear()
        self.rendered_states.clear()
