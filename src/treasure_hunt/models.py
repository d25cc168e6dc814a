from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Deque, Dict, Iterable, Iterator, List, Optional, Set, Tuple

from .geometry import Dimension, Position


class Orientation(Enum):
    """Cardinal direction an adventurer faces.

    Values are the letters used by the map text format. The clockwise cycle is
    NORTH -> EAST -> SOUTH -> WEST -> NORTH.
    """

    NORTH = "N"
    EAST = "E"
    SOUTH = "S"
    WEST = "W"

    @classmethod
    def from_letter(cls, letter: str) -> "Orientation":
        for member in cls:
            if member.value == letter:
                return member
        raise ValueError(f"Invalid orientation letter: {letter!r}")

    def turned_right(self) -> "Orientation":
        if self is Orientation.NORTH:
            return Orientation.EAST
        if self is Orientation.EAST:
            return Orientation.SOUTH
        if self is Orientation.SOUTH:
            return Orientation.WEST
        return Orientation.NORTH

    def turned_left(self) -> "Orientation":
        if self is Orientation.NORTH:
            return Orientation.WEST
        if self is Orientation.WEST:
            return Orientation.SOUTH
        if self is Orientation.SOUTH:
            return Orientation.EAST
        return Orientation.NORTH

    def displacement(self) -> Tuple[int, int]:
        """Return the unit (dx, dy) step for this orientation; y grows southwards."""
        if self is Orientation.NORTH:
            return (0, -1)
        if self is Orientation.EAST:
            return (1, 0)
        if self is Orientation.SOUTH:
            return (0, 1)
        return (-1, 0)


class Instruction(Enum):
    ADVANCE = "A"
    TURN_LEFT = "G"
    TURN_RIGHT = "D"

    @classmethod
    def from_letter(cls, letter: str) -> "Instruction":
        for member in cls:
            if member.value == letter:
                return member
        raise ValueError(f"{letter} is not a valid instruction")


@dataclass(frozen=True)
class Mountain:
    position: Position


class TreasureMap:
    """Treasure multiset stored as position -> remaining unit count.

    Positions keep the order in which they were first added, which is the
    order the serializer writes them in. A position whose stack reaches zero
    is dropped.
    """

    __slots__ = ("_stacks",)

    def __init__(self, stacks: Optional[Iterable[Tuple[Position, int]]] = None) -> None:
        self._stacks: Dict[Position, int] = {}
        for position, count in stacks or ():
            self.add(position, count)

    def add(self, position: Position, count: int = 1) -> None:
        if count < 0:
            raise ValueError("Treasure count must not be negative")
        if count == 0:
            return
        self._stacks[position] = self._stacks.get(position, 0) + count

    def count_at(self, position: Position) -> int:
        return self._stacks.get(position, 0)

    def take(self, position: Position) -> bool:
        """Remove one unit from the stack at ``position``.

        Returns False when there is nothing to take there.
        """
        remaining = self._stacks.get(position, 0)
        if remaining == 0:
            return False
        if remaining == 1:
            del self._stacks[position]
        else:
            self._stacks[position] = remaining - 1
        return True

    @property
    def total(self) -> int:
        return sum(self._stacks.values())

    def __iter__(self) -> Iterator[Tuple[Position, int]]:
        return iter(list(self._stacks.items()))

    def __len__(self) -> int:
        return len(self._stacks)

    def __bool__(self) -> bool:
        return bool(self._stacks)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TreasureMap):
            return NotImplemented
        return self._stacks == other._stacks

    def __repr__(self) -> str:
        return f"TreasureMap({list(self._stacks.items())!r})"


@dataclass
class Adventurer:
    """A named explorer draining its own FIFO instruction queue."""

    name: str
    position: Position
    orientation: Orientation
    instructions: Deque[Instruction] = field(default_factory=deque)
    treasures: int = 0

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Adventurer name must not be empty")
        if self.treasures < 0:
            raise ValueError("Collected treasure count must not be negative")
        if not isinstance(self.instructions, deque):
            self.instructions = deque(self.instructions)

    @property
    def has_pending(self) -> bool:
        return bool(self.instructions)

    def next_instruction(self) -> Instruction:
        """Dequeue the next instruction. Raises IndexError when the queue is empty."""
        return self.instructions.popleft()


@dataclass
class World:
    """The whole game board: one mutable aggregate owning every entity.

    Adventurers act in list order, which is their declaration order in the
    map text.
    """

    dimension: Dimension
    mountains: List[Mountain] = field(default_factory=list)
    treasures: TreasureMap = field(default_factory=TreasureMap)
    adventurers: List[Adventurer] = field(default_factory=list)

    @property
    def is_quiescent(self) -> bool:
        return not any(adventurer.has_pending for adventurer in self.adventurers)

    @property
    def pending_instructions(self) -> int:
        return sum(len(adventurer.instructions) for adventurer in self.adventurers)

    def mountain_positions(self) -> Set[Position]:
        return {mountain.position for mountain in self.mountains}

    def is_blocked(self, position: Position, mover: Optional[Adventurer] = None) -> bool:
        """Return True if no adventurer may step onto ``position``.

        Blocked cells are out of bounds, mountains, or cells currently held by
        an adventurer other than ``mover``. Uses live positions, so adventurers
        that already moved this round are seen at their new cell.
        """
        if not self.dimension.contains(position):
            return True
        if position in self.mountain_positions():
            return True
        return any(
            adventurer is not mover and adventurer.position == position
            for adventurer in self.adventurers
        )


__all__ = [
    "Orientation",
    "Instruction",
    "Mountain",
    "TreasureMap",
    "Adventurer",
    "World",
]
