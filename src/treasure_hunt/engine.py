from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .models import Adventurer, Instruction, World

logger = logging.getLogger(__name__)

RoundListener = Callable[[int, World], None]


@dataclass
class SimulationReport:
    """Counters gathered while a world was run to quiescence."""

    rounds: int = 0
    instructions: int = 0
    moves: int = 0
    blocked: int = 0
    collected: int = 0


class SimulationEngine:
    """Turn-based engine draining every adventurer's instruction queue.

    A round gives each adventurer with pending instructions exactly one
    instruction, in declaration order. Advances are checked against the live
    positions of the other adventurers, so an adventurer that already moved
    this round has freed its old cell and holds its new one. The engine never
    raises for a world built by :func:`treasure_hunt.codec.parse_map`.
    """

    def __init__(self, on_round: Optional[RoundListener] = None) -> None:
        self._on_round = on_round
        self._report = SimulationReport()

    @property
    def report(self) -> SimulationReport:
        """Counters since the last :meth:`run_to_completion` (or construction)."""
        return self._report

    def run_to_completion(self, world: World) -> SimulationReport:
        """Play rounds until no adventurer has instructions left.

        Every round consumes at least one instruction, so the loop ends after
        as many rounds as the longest queue.

        Returns:
            Counters for this run.
        """
        self._report = SimulationReport()
        logger.info(
            "Starting treasure hunt with %d adventurer(s) and %d pending instruction(s)",
            len(world.adventurers),
            world.pending_instructions,
        )
        while not world.is_quiescent:
            self.play_round(world)

        report = self._report
        logger.info(
            "Treasure hunt finished after %d round(s): %d move(s), %d blocked, %d treasure(s) collected",
            report.rounds,
            report.moves,
            report.blocked,
            report.collected,
        )
        return report

    def play_round(self, world: World) -> int:
        """Apply one instruction for each adventurer that still has some.

        Returns:
            The number of instructions executed this round.
        """
        executed = 0
        for adventurer in world.adventurers:
            if not adventurer.has_pending:
                continue
            self.apply(world, adventurer, adventurer.next_instruction())
            executed += 1

        if executed:
            self._report.rounds += 1
            self._report.instructions += executed
            logger.debug("Round %d executed %d instruction(s)", self._report.rounds, executed)
            if self._on_round is not None:
                self._on_round(self._report.rounds, world)
        return executed

    def apply(self, world: World, adventurer: Adventurer, instruction: Instruction) -> bool:
        """Execute a single instruction for ``adventurer``.

        Turns always succeed. Returns False only for a blocked advance.
        """
        if instruction is Instruction.TURN_LEFT:
            adventurer.orientation = adventurer.orientation.turned_left()
            return True
        if instruction is Instruction.TURN_RIGHT:
            adventurer.orientation = adventurer.orientation.turned_right()
            return True
        return self.try_advance(world, adventurer)

    def try_advance(self, world: World, adventurer: Adventurer) -> bool:
        """Attempt to move ``adventurer`` one cell forward.

        The move is rejected if the target is out of bounds, a mountain, or
        held by another adventurer; a rejected move leaves the adventurer
        untouched and is not an error.

        Returns:
            True if movement occurred; False if blocked.
        """
        dx, dy = adventurer.orientation.displacement()
        target = adventurer.position.moved(dx, dy)

        if world.is_blocked(target, mover=adventurer):
            logger.debug(
                "Blocked movement for %s: target (%d,%d) is not free", adventurer.name, target.x, target.y
            )
            self._report.blocked += 1
            return False

        logger.debug(
            "Adventurer %s moves from (%d,%d) to (%d,%d)",
            adventurer.name,
            adventurer.position.x,
            adventurer.position.y,
            target.x,
            target.y,
        )
        adventurer.position = target
        self._report.moves += 1

        if world.treasures.take(target):
            adventurer.treasures += 1
            self._report.collected += 1
            logger.debug(
                "Adventurer %s collected a treasure at (%d,%d); %d left there",
                adventurer.name,
                target.x,
                target.y,
                world.treasures.count_at(target),
            )
        return True


def run_to_completion(world: World) -> World:
    """Run ``world`` to quiescence with a default engine and return it."""
    SimulationEngine().run_to_completion(world)
    return world


__all__ = [
    "SimulationEngine",
    "SimulationReport",
    "RoundListener",
    "run_to_completion",
]
