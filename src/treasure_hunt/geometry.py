from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    x: int
    y: int

    def moved(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)

    def __str__(self) -> str:
        return f"{self.x} - {self.y}"


@dataclass(frozen=True)
class Dimension:
    """Grid extent. Every in-bounds position satisfies 0 <= x < width, 0 <= y < height."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Dimension sides must be positive")

    def contains(self, position: Position) -> bool:
        """Check if a position is within the grid bounds.

        This method never raises and is the preferred way to guard any
        movement or placement.
        """
        return 0 <= position.x < self.width and 0 <= position.y < self.height


__all__ = ["Position", "Dimension"]
