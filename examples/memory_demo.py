#!/usr/bin/env python3
"""
Example demonstrating the memory game on the console.

Play interactively by typing card numbers, or pass --auto to watch a player
with perfect recall clear the board.
"""

import asyncio
import argparse
import logging
import random

from concentration.adapters import CLIAdapter
from concentration.api import MemoryGame
from concentration.memory.constants import DEFAULT_SYMBOLS
from concentration.memory.state import GameStatus, InvalidPosition


class RecallPlayer:
    """Picks cards remembering every symbol it has seen."""

    def __init__(self, seed=None):
        self.seen = {}
        self.rng = random.Random(seed)

    def observe(self, state):
        for card in state.cards:
            if card.is_face_up:
                self.seen[card.position] = card.symbol_id

    def pick(self, state):
        hidden = [card.position for card in state.cards if card.is_hidden]

        if state.selection:
            first = state.selection[0]
            symbol = state.cards[first].symbol_id
            for position in hidden:
                if self.seen.get(position) == symbol:
                    return position
        else:
            by_symbol = {}
            for position in hidden:
                if position in self.seen:
                    by_symbol.setdefault(self.seen[position], []).append(position)
            for positions in by_symbol.values():
                if len(positions) == 2:
                    return positions[0]

        unknown = [position for position in hidden if position not in self.seen]
        return self.rng.choice(unknown or hidden)


async def play_auto(game, args):
    player = RecallPlayer(args.seed)
    while (await game.get_state()).status is not GameStatus.WON:
        state = await game.get_state()
        if state.is_resolving:
            await asyncio.sleep(0.05)
            continue
        position = player.pick(state)
        await game.select_card(position)
        player.observe(await game.get_state())
        await asyncio.sleep(args.pause)


async def play_interactive(game, adapter):
    while (await game.get_state()).status is not GameStatus.WON:
        if (await game.get_state()).is_resolving:
            await asyncio.sleep(0.05)
            continue
        position = await adapter.prompt_selection()
        if position is None:
            continue
        try:
            await game.select_card(position)
        except InvalidPosition as e:
            print(e)


async def main():
    parser = argparse.ArgumentParser(description="Play the memory game.")
    parser.add_argument(
        "-p",
        "--pairs",
        type=int,
        default=len(DEFAULT_SYMBOLS),
        help=f"number of pairs, 2-{len(DEFAULT_SYMBOLS)} (default: {len(DEFAULT_SYMBOLS)})",
    )
    parser.add_argument(
        "-a", "--auto", action="store_true", help="let a recall player take the turns"
    )
    parser.add_argument("--seed", type=int, default=None, help="shuffle seed")
    parser.add_argument(
        "--pause", type=float, default=0.3, help="seconds between automatic picks"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not 2 <= args.pairs <= len(DEFAULT_SYMBOLS):
        parser.error(f"--pairs must be between 2 and {len(DEFAULT_SYMBOLS)}")

    adapter = CLIAdapter()
    config = {"symbols": DEFAULT_SYMBOLS[: args.pairs], "seed": args.seed}
    if args.auto:
        config.update({"match_delay": 0.2, "mismatch_delay": 0.4})

    game = MemoryGame(adapter=adapter, config=config)
    await game.initialize()

    try:
        if args.auto:
            await play_auto(game, args)
        else:
            await play_interactive(game, adapter)
        await game.wait_for_win(timeout=5.0)
    finally:
        await game.shutdown()


if __name__ == "__main__":
    asyncio.run(main())
