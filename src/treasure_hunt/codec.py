from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Union

from .errors import MapInitializationError
from .geometry import Dimension, Position
from .models import Adventurer, Instruction, Mountain, Orientation, TreasureMap, World

logger = logging.getLogger(__name__)

COMMENT_MARKER = "#"
FIELD_SEPARATOR = "-"

DIMENSION_TAG = "C"
MOUNTAIN_TAG = "M"
TREASURE_TAG = "T"
ADVENTURER_TAG = "A"

DIMENSION_HEADER = "# {C comme Carte} - {Nb. de case en largeur} - {Nb. de case en hauteur}"
MOUNTAIN_HEADER = "# {M comme Montagne} - {Axe horizontal} - {Axe vertical}"
TREASURE_HEADER = "# {T comme Trésor} - {Axe horizontal} - {Axe vertical} - {Nb. de trésors restants}"
ADVENTURER_HEADER = (
    "# {A comme Aventurier} - {Nom de l’aventurier} - {Axe horizontal} - {Axe vertical} "
    "- {Orientation} - {Nb. trésors ramassés}"
)

# A minus sign glued to a digit, right after a field separator (or at line start).
_NEGATIVE_NUMBER = re.compile(r"(?:^|-)\s*-\d")
_NUMBER = re.compile(r"\d+", re.ASCII)


def parse_map(lines: Iterable[str]) -> World:
    """Build a validated :class:`World` from the lines of a map description.

    Blank lines and ``#`` comments are ignored. The first remaining line
    declares the dimension; the rest are grouped by tag and built in
    declaration order. Any violation aborts the whole parse.

    Raises:
        MapInitializationError: on the first malformed or inconsistent line.
    """
    data_lines = [line.strip() for line in lines if _is_data_line(line)]
    if not data_lines:
        raise MapInitializationError("No data was provided")

    dimension = _parse_dimension(data_lines[0])
    groups = _group_lines(data_lines[1:])

    mountains = [_parse_mountain(line, dimension) for line in groups[MOUNTAIN_TAG]]
    adventurers = [_parse_adventurer(line, dimension) for line in groups[ADVENTURER_TAG]]
    _verify_no_overlap(mountains, adventurers)

    treasures = TreasureMap()
    for line in groups[TREASURE_TAG]:
        position, count = _parse_treasure(line, dimension)
        treasures.add(position, count)

    logger.debug(
        "Parsed %dx%d map: %d mountain(s), %d treasure unit(s), %d adventurer(s)",
        dimension.width,
        dimension.height,
        len(mountains),
        treasures.total,
        len(adventurers),
    )
    return World(dimension=dimension, mountains=mountains, treasures=treasures, adventurers=adventurers)


def serialize_map(world: World) -> str:
    """Render a world back to the map text format.

    Sections come in the order dimension, mountains, treasures, adventurers,
    each preceded by its column comment. Empty sections are left out and the
    result has no trailing newline.
    """
    out: List[str] = [DIMENSION_HEADER, _join(DIMENSION_TAG, world.dimension.width, world.dimension.height)]

    if world.mountains:
        out.append(MOUNTAIN_HEADER)
        out.extend(_join(MOUNTAIN_TAG, m.position.x, m.position.y) for m in world.mountains)

    if world.treasures:
        out.append(TREASURE_HEADER)
        out.extend(_join(TREASURE_TAG, pos.x, pos.y, count) for pos, count in world.treasures)

    if world.adventurers:
        out.append(ADVENTURER_HEADER)
        out.extend(
            _join(ADVENTURER_TAG, a.name, a.position.x, a.position.y, a.orientation.value, a.treasures)
            for a in world.adventurers
        )

    return "\n".join(out)


def read_map(path: Union[str, Path]) -> World:
    """Parse the map stored in a UTF-8 text file."""
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    logger.debug("Read map description from %s", path)
    return parse_map(text.splitlines())


def write_map(world: World, path: Union[str, Path]) -> None:
    """Serialize ``world`` into a UTF-8 text file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(serialize_map(world), encoding="utf-8")
    logger.debug("Wrote map to %s", path)


# ------------------------ Line helpers ------------------------

def _is_data_line(line: str) -> bool:
    stripped = line.strip()
    return bool(stripped) and not stripped.startswith(COMMENT_MARKER)


def _join(*fields: object) -> str:
    return f" {FIELD_SEPARATOR} ".join(str(f) for f in fields)


def _split_fields(line: str) -> List[str]:
    """Split a data line on the field separator, trimming every field.

    Raises MapInitializationError if the line holds a negative number.
    """
    if _NEGATIVE_NUMBER.search(line):
        raise MapInitializationError(f"Unauthorized negative number at line: {line}")
    return [part.strip() for part in line.split(FIELD_SEPARATOR)]


def _fields_for(line: str, expected: int, entity_type: str) -> List[str]:
    fields = _split_fields(line)
    if len(fields) > expected:
        raise MapInitializationError(f"Too many arguments in a {entity_type} line: {line}")
    if len(fields) < expected:
        raise MapInitializationError(f"Not enough arguments in a {entity_type} line: {line}")
    return fields


def _parse_int(value: str, label: str, line: str) -> int:
    if not _NUMBER.fullmatch(value):
        raise MapInitializationError(f"Invalid {label} {value!r} at line: {line}")
    return int(value)


def _parse_position(x: str, y: str, line: str) -> Position:
    return Position(_parse_int(x, "x coordinate", line), _parse_int(y, "y coordinate", line))


def _group_lines(lines: Sequence[str]) -> Dict[str, List[str]]:
    groups: Dict[str, List[str]] = {MOUNTAIN_TAG: [], TREASURE_TAG: [], ADVENTURER_TAG: []}
    for line in lines:
        tag = line.split(FIELD_SEPARATOR, 1)[0].strip()
        if tag == DIMENSION_TAG:
            raise MapInitializationError(f"Map dimension declared more than once: {line}")
        if tag not in groups:
            raise MapInitializationError(f"Unknown entity type {tag!r} at line: {line}")
        groups[tag].append(line)
    return groups


# ------------------------ Validation ------------------------

def _verify_in_dimension(position: Position, dimension: Dimension, entity_type: str) -> None:
    if not dimension.contains(position):
        raise MapInitializationError(
            f"{entity_type} at position {position} is out of map's bounds."
        )


def _verify_no_overlap(mountains: Sequence[Mountain], adventurers: Sequence[Adventurer]) -> None:
    seen = set()
    solid = [m.position for m in mountains] + [a.position for a in adventurers]
    for position in solid:
        if position in seen:
            raise MapInitializationError(f"Entities are overlapping at position {position}")
        seen.add(position)


# ------------------------ Entity builders ------------------------

def _parse_dimension(line: str) -> Dimension:
    fields = _fields_for(line, 3, "map")
    if fields[0] != DIMENSION_TAG:
        raise MapInitializationError("First line does not contain map initialization")
    width = _parse_int(fields[1], "map width", line)
    height = _parse_int(fields[2], "map height", line)
    if width == 0 or height == 0:
        raise MapInitializationError(f"Map dimension must be positive: {line}")
    return Dimension(width, height)


def _parse_mountain(line: str, dimension: Dimension) -> Mountain:
    fields = _fields_for(line, 3, "mountain")
    position = _parse_position(fields[1], fields[2], line)
    _verify_in_dimension(position, dimension, "Mountain")
    return Mountain(position)


def _parse_treasure(line: str, dimension: Dimension):
    fields = _fields_for(line, 4, "treasure")
    position = _parse_position(fields[1], fields[2], line)
    _verify_in_dimension(position, dimension, "Treasure")
    return position, _parse_int(fields[3], "treasure count", line)


def _parse_adventurer(line: str, dimension: Dimension) -> Adventurer:
    fields = _fields_for(line, 6, "adventurer")
    name = fields[1]
    if not name:
        raise MapInitializationError(f"Adventurer name is missing at line: {line}")

    position = _parse_position(fields[2], fields[3], line)
    _verify_in_dimension(position, dimension, "Adventurer")

    try:
        orientation = Orientation.from_letter(fields[4])
    except ValueError:
        raise MapInitializationError(f"Orientation character is invalid: {fields[4]!r}") from None

    # A serialized map carries the collected count where instructions would be.
    if _NUMBER.fullmatch(fields[5]):
        return Adventurer(name=name, position=position, orientation=orientation, treasures=int(fields[5]))

    instructions = []
    for letter in fields[5]:
        try:
            instructions.append(Instruction.from_letter(letter))
        except ValueError:
            raise MapInitializationError(f"{letter} is not a valid instruction") from None

    return Adventurer(name=name, position=position, orientation=orientation, instructions=instructions)


__all__ = [
    "parse_map",
    "serialize_map",
    "read_map",
    "write_map",
]
