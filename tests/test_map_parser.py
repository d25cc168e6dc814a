import pytest

from treasure_hunt.codec import parse_map
from treasure_hunt.errors import MapInitializationError, TreasureHuntError
from treasure_hunt.geometry import Dimension, Position
from treasure_hunt.models import Adventurer, Instruction, Mountain, Orientation


@pytest.mark.parametrize(
    "line,width,height",
    [("C - 3  - 5", 3, 5), ("C - 7 - 2", 7, 2), ("C - 8 - 8 ", 8, 8), ("C-4-6", 4, 6)],
)
def test_dimension_line(line, width, height):
    world = parse_map([line])
    assert world.dimension == Dimension(width, height)
    assert world.mountains == []
    assert not world.treasures
    assert world.adventurers == []


@pytest.mark.parametrize("lines", [[], [""], ["   ", "\t"], ["# only a comment"]])
def test_no_data_fails(lines):
    with pytest.raises(MapInitializationError, match="No data"):
        parse_map(lines)


@pytest.mark.parametrize(
    "lines",
    [
        ["# {C comme Carte} - {Nb. de case en largeur} - {Nb. de case en hauteur}", "C - 5 - 4"],
        ["C - 5 - 4", "# {M comme Montagne} - {Axe horizontal} - {Axe vertical}"],
        ["", "C - 5 - 4", "   ", ""],
    ],
)
def test_comments_and_blank_lines_are_ignored(lines):
    assert parse_map(lines).dimension == Dimension(5, 4)


def test_trailing_newlines_are_tolerated():
    world = parse_map(["C - 5 - 4\n", "M - 1 - 0\n"])
    assert world.mountains == [Mountain(Position(1, 0))]


@pytest.mark.parametrize("lines", [["M - 1 - 1", "C - 5 - 4"], ["X - 5 - 4"]])
def test_first_line_must_be_dimension(lines):
    with pytest.raises(MapInitializationError, match="map initialization"):
        parse_map(lines)


@pytest.mark.parametrize("lines", [["C - 5"], ["C - 5 - 4 - 3"]])
def test_dimension_field_count(lines):
    with pytest.raises(MapInitializationError, match="map line"):
        parse_map(lines)


@pytest.mark.parametrize("lines", [["C - 0 - 4"], ["C - 5 - X"]])
def test_dimension_must_be_positive_integers(lines):
    with pytest.raises(MapInitializationError):
        parse_map(lines)


def test_second_dimension_line_fails():
    with pytest.raises(MapInitializationError, match="more than once"):
        parse_map(["C - 5 - 4", "C - 3 - 3"])


def test_unknown_entity_tag_fails():
    with pytest.raises(MapInitializationError, match="Unknown entity type"):
        parse_map(["C - 5 - 4", " Sophie - 4 - 4 - E - A"])


@pytest.mark.parametrize(
    "lines,expected",
    [
        (["C - 5 - 4", "M - 1 - 0"], [Mountain(Position(1, 0))]),
        (["C - 5 - 4", "M - 1 - 0", "M - 2 - 1"], [Mountain(Position(1, 0)), Mountain(Position(2, 1))]),
    ],
)
def test_mountains(lines, expected):
    assert parse_map(lines).mountains == expected


@pytest.mark.parametrize(
    "lines,message",
    [
        (["C - 5 - 4", "M - 1 - 0 - 2"], "Too many arguments in a mountain line"),
        (["C - 5 - 4", "M - 1"], "Not enough arguments in a mountain line"),
    ],
)
def test_mountain_wrong_format(lines, message):
    with pytest.raises(MapInitializationError, match=message):
        parse_map(lines)


def test_treasures_are_stacked_per_position():
    world = parse_map(["C - 5 - 4", "T - 1 - 0 - 1", "T - 1 - 3 - 2", "T - 1 - 0 - 2"])
    assert list(world.treasures) == [(Position(1, 0), 3), (Position(1, 3), 2)]


def test_treasure_with_zero_count_is_a_noop():
    world = parse_map(["C - 5 - 4", "T - 1 - 3 - 0"])
    assert world.treasures.total == 0
    assert len(world.treasures) == 0


@pytest.mark.parametrize(
    "lines,message",
    [
        (["C - 5 - 4", "T - 1 - 0 - 2 - 4"], "Too many arguments in a treasure line"),
        (["C - 5 - 4", "T - X - 1"], "Not enough arguments in a treasure line"),
        (["C - 5 - 4", "T - X - 1 - 1"], "Invalid x coordinate"),
        (["C - 5 - 4", "T - 1 - 1 - many"], "Invalid treasure count"),
    ],
)
def test_treasure_wrong_format(lines, message):
    with pytest.raises(MapInitializationError, match=message):
        parse_map(lines)


def test_adventurers_keep_declaration_order():
    world = parse_map(
        [
            "C - 5 - 4",
            "A - Lara - 1 - 1 - E - AADADAGGA",
            "M - 0 - 0",
            "A - Indiana - 2 - 3 - S - AADADA",
        ]
    )
    lara, indiana = world.adventurers
    assert lara == Adventurer(
        "Lara",
        Position(1, 1),
        Orientation.EAST,
        [Instruction.from_letter(c) for c in "AADADAGGA"],
    )
    assert indiana.name == "Indiana"
    assert indiana.position == Position(2, 3)
    assert indiana.orientation is Orientation.SOUTH
    assert len(indiana.instructions) == 6


def test_adventurer_without_instructions():
    world = parse_map(["C - 5 - 4", "A - Lara - 1 - 1 - N - "])
    assert not world.adventurers[0].has_pending


def test_serialized_adventurer_line_is_read_as_collected_count():
    world = parse_map(["C - 5 - 4", "A - Lara - 0 - 3 - S - 3"])
    lara = world.adventurers[0]
    assert lara.treasures == 3
    assert not lara.has_pending


@pytest.mark.parametrize(
    "lines,message",
    [
        (["C - 5 - 4", "A - 1 - 0 - 2"], "Not enough arguments in a adventurer line"),
        (["C - 5 - 4", "A - X - 1"], "Not enough arguments in a adventurer line"),
        (["C - 5 - 4", "A - Lara - 1 - 1 - E - A - A"], "Too many arguments in a adventurer line"),
        (["C - 5 - 4", "A -  - 1 - 1 - E - A"], "name is missing"),
    ],
)
def test_adventurer_wrong_format(lines, message):
    with pytest.raises(MapInitializationError, match=message):
        parse_map(lines)


@pytest.mark.parametrize("letter", ["n", "X", "NE", ""])
def test_invalid_orientation(letter):
    with pytest.raises(MapInitializationError, match="Orientation"):
        parse_map(["C - 5 - 4", f"A - Lara - 1 - 1 - {letter} - A"])


@pytest.mark.parametrize("instructions,bad", [("P", "P"), ("LU", "L"), ("AAGx", "x"), ("A1", "1")])
def test_invalid_instructions_name_the_character(instructions, bad):
    with pytest.raises(MapInitializationError, match=f"^{bad} is not a valid instruction"):
        parse_map(["C - 5 - 4", f"A - Lara - 1 - 1 - E - {instructions}"])


@pytest.mark.parametrize(
    "lines,entity",
    [
        (["C - 5 - 4", "M - 5 - 10"], "Mountain at position 5 - 10"),
        (["C - 5 - 4", "M - 5 - 0"], "Mountain at position 5 - 0"),
        (["C - 5 - 4", "T - 0 - 4 - 1"], "Treasure at position 0 - 4"),
        (["C - 5 - 4", "A - Lior - 5 - 4 - E - A"], "Adventurer at position 5 - 4"),
    ],
)
def test_out_of_bounds_entities(lines, entity):
    with pytest.raises(MapInitializationError, match=f"{entity} is out of map's bounds"):
        parse_map(lines)


def test_last_row_and_column_are_in_bounds():
    world = parse_map(["C - 5 - 4", "M - 4 - 3", "T - 4 - 0 - 1", "A - Lara - 0 - 3 - N - A"])
    assert world.mountains[0].position == Position(4, 3)


@pytest.mark.parametrize(
    "line",
    ["T - -5 - 4 - 1", "M - 1 - -1", "A - Lara - 1 - -2 - E - A", "T - 1 - 1 - -3"],
)
def test_negative_numbers_are_rejected(line):
    with pytest.raises(MapInitializationError, match="negative number"):
        parse_map(["C - 5 - 4", line])


def test_negative_dimension_is_rejected():
    with pytest.raises(MapInitializationError, match="negative number"):
        parse_map(["C - -5 - 4"])


@pytest.mark.parametrize(
    "lines",
    [
        ["C - 5 - 4", "A - Sophie - 1 - 1 - E - A", "A - Lara - 1 - 1 - E - A"],
        ["C - 5 - 4", "M - 2 - 2", "A - Lara - 2 - 2 - E - A"],
        ["C - 5 - 4", "M - 2 - 2", "M - 2 - 2"],
    ],
)
def test_overlapping_solid_entities_fail(lines):
    with pytest.raises(MapInitializationError, match="overlapping"):
        parse_map(lines)


def test_treasures_may_share_cells_with_anything():
    world = parse_map(
        ["C - 5 - 4", "M - 1 - 1", "T - 1 - 1 - 1", "A - Lara - 2 - 2 - E - A", "T - 2 - 2 - 4"]
    )
    assert world.treasures.count_at(Position(1, 1)) == 1
    assert world.treasures.count_at(Position(2, 2)) == 4


def test_sample_map(sample_lines):
    world = parse_map(sample_lines)

    assert world.dimension == Dimension(5, 4)
    assert world.mountains == [Mountain(Position(1, 1))]
    assert list(world.treasures) == [(Position(2, 2), 2)]
    assert len(world.adventurers) == 1
    lara = world.adventurers[0]
    assert (lara.name, lara.position, lara.orientation) == ("Lara", Position(3, 3), Orientation.EAST)
    assert len(lara.instructions) == 9
    assert lara.treasures == 0


def test_map_errors_share_the_domain_base_class():
    with pytest.raises(TreasureHuntError):
        parse_map(["C - 5 - 4", "Q - 1 - 1"])


@pytest.mark.parametrize(
    "line,message",
    [
        ("M - 1 -  - 2", "Too many arguments in a mountain line"),
        ("T - 1 -  - 2", "Invalid y coordinate"),
        ("A -  - 1 - 1 - E - A", "name is missing"),
    ],
)
def test_empty_field_before_a_number_is_not_a_negative_number(line, message):
    with pytest.raises(MapInitializationError, match=message) as excinfo:
        parse_map(["C - 5 - 4", line])
    assert "negative" not in str(excinfo.value)
