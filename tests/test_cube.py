import pytest

from pyrubik.cube import Cube
from pyrubik.enums import Axis, Direction, Face, Reorientation
from pyrubik.error import (
    InvalidColorScanException, InvalidDimensionException,
    InvalidMoveTokenException, InvalidTurnException
)

SOLVED_COLORS = "W" * 9 + "O" * 9 + "G" * 9 + "R" * 9 + "B" * 9 + "Y" * 9

def all_orientations(cube: Cube):
    """ Yields the cube held in each of its 24 orientations """
    for steps in [[], [Reorientation.ROLL], [Reorientation.ROLL], [Reorientation.ROLL],
                  [Reorientation.ROLL, Reorientation.ROTATE, Reorientation.ROLL],
                  [Reorientation.ROLL, Reorientation.ROLL]]:
        for kind in steps:
            cube.rotate_cube(kind)
        for _ in range(4):
            yield cube
            cube.rotate_cube(Reorientation.ROTATE)

@pytest.mark.parametrize("N", [2, 3, 4, 5])
def test_new_cube_is_solved(N):
    cube = Cube(N)
    assert cube.is_solved()
    assert cube.get_cube_string() == "".join(letter * N * N for letter in "ULFRBD")
    assert cube.get_cube_string(is_color=True) == "".join(color * N * N for color in "WOGRBY")

def test_dump():
    lines = Cube(3).dump().splitlines()
    assert len(lines) == 9
    assert lines[0] == "    UUU"
    assert lines[3] == "LLL FFF RRR BBB"
    assert lines[8] == "    DDD"
    assert Cube(2).dump(is_color=True).splitlines()[2] == "OO GG RR BB"

@pytest.mark.parametrize("side_length", [0, 1, -3, 2.5, "3", True, None])
def test_invalid_dimension(side_length):
    with pytest.raises(InvalidDimensionException):
        Cube(side_length)

def test_single_move_unsolves():
    for move in "ULFRBD":
        cube = Cube(3)
        cube.parse(move)
        assert not cube.is_solved()

def test_face_turn_moves_stickers():
    cube = Cube(3)
    cube.parse("R")
    assert [cube.get_piece_char(Face.FRONT, i, 2) for i in range(3)] == ['D', 'D', 'D']
    assert [cube.get_piece_char(Face.TOP, i, 2) for i in range(3)] == ['F', 'F', 'F']
    assert [cube.get_piece_char(Face.BACK, i, 0) for i in range(3)] == ['U', 'U', 'U']
    assert [cube.get_piece_char(Face.BOTTOM, i, 2) for i in range(3)] == ['B', 'B', 'B']

    cube = Cube(3)
    cube.parse("U")
    assert [cube.get_piece_char(Face.FRONT, 0, j) for j in range(3)] == ['R', 'R', 'R']
    assert [cube.get_piece_char(Face.LEFT, 0, j) for j in range(3)] == ['F', 'F', 'F']

@pytest.mark.parametrize("moves, times", [
    ("R U R' U'", 6),
    ("R", 4),
    ("F2", 2),
    ("R U", 105),
])
def test_move_order(moves, times):
    cube = Cube(3)
    for i in range(times):
        assert not cube.is_solved() or i == 0
        cube.parse(moves)
    assert cube.is_solved()

@pytest.mark.parametrize("N, moves", [
    (2, "R L'"),
    (2, "U u"),
    (3, "R X L'"),
    (3, "R r L'"),
    (3, "U Y D'"),
    (3, "F Z B'"),
    (4, "R r l' L'"),
    (4, "U u d' D'"),
    (4, "F f b' B'"),
    (5, "U u Y d' D'"),
])
def test_layers_make_whole_cube_turn(N, moves):
    cube = Cube(N)
    cube.parse(moves)
    assert cube.is_solved()
    assert cube.get_cube_string() != Cube(N).get_cube_string()

@pytest.mark.parametrize("N", [2, 3, 4, 5])
def test_inverse_restores(N):
    moves = "R U' f2 X L d' Y B2 l Z' D r' F b2 u"
    cube = Cube(N)
    cube.parse(moves)
    cube.inverse(moves)
    assert cube.get_cube_string() == Cube(N).get_cube_string()

def test_whole_cube_turns_keep_solved():
    seen = set()
    for cube in all_orientations(Cube(3)):
        assert cube.is_solved()
        seen.add(cube.get_cube_string())
    assert len(seen) == 24

def test_whole_cube_turn_cycles():
    cube = Cube(3)
    for _ in range(4):
        cube.rotate_cube(Reorientation.ROTATE)
    assert cube.get_cube_string() == Cube(3).get_cube_string()

    cube.rotate_cube(Reorientation.ROTATE)
    assert cube.get_mapped_face_char(Face.FRONT) == 'R'
    assert cube.get_piece_char(Face.FRONT, 1, 1) == 'R'

    cube = Cube(3)
    cube.rotate_cube(Reorientation.ROLL)
    assert cube.get_mapped_face_char(Face.FRONT) == 'U'
    assert cube.get_mapped_face_char(Face.TOP) == 'B'
    assert cube.get_mapped_face_char(Face.BOTTOM) == 'F'

@pytest.mark.parametrize("kinds", [
    [Reorientation.ROTATE],
    [Reorientation.ROLL],
    [Reorientation.ROLL, Reorientation.ROTATE, Reorientation.ROTATE],
])
def test_recorded_moves_replay_on_unturned_cube(kinds):
    moves = "R U' F2 l X b' D Z"
    turned, home = Cube(3), Cube(3)
    for kind in kinds:
        turned.rotate_cube(kind)
    recorded = []
    turned.parse(moves, output_movelist=recorded)

    home.parse(" ".join(recorded))
    for kind in kinds:
        home.rotate_cube(kind)
    assert home.get_cube_string() == turned.get_cube_string()

def test_recorded_middle_slice_on_even_cube():
    cube = Cube(4)
    recorded = []
    cube.turn('X', 1, recorded)
    assert recorded == ['X']

    cube.rotate_cube(Reorientation.ROTATE)
    with pytest.raises(InvalidTurnException):
        cube.turn('X', 1, recorded)

def test_bad_token_leaves_cube_untouched():
    cube = Cube(3)
    with pytest.raises(InvalidMoveTokenException):
        cube.parse("R U Q F")
    with pytest.raises(InvalidMoveTokenException):
        cube.parse("R '")
    assert cube.is_solved()
    assert cube.get_cube_string() == Cube(3).get_cube_string()

def test_bad_turns():
    cube = Cube(3)
    with pytest.raises(InvalidTurnException):
        cube.turn('Q', 1)
    with pytest.raises(InvalidTurnException):
        cube.rotate_slice(Axis.X, Direction.CW, 3)

def test_slice_on_outer_layer_turns_face():
    cube, other = Cube(2), Cube(2)
    cube.parse("r")
    other.parse("L'")
    assert cube.get_cube_string() == other.get_cube_string()

def test_color_scan():
    cube = Cube.from_simple_string(SOLVED_COLORS)
    assert cube.N == 3
    assert cube.is_solved()
    assert cube.get_cube_string() == Cube(3).get_cube_string()

    custom = SOLVED_COLORS.translate(str.maketrans("WOGRBY", "abcdef"))
    cube = Cube.from_simple_string(custom)
    cube.parse("R")
    assert cube.get_piece_char(Face.FRONT, 0, 2, True) == 'f'

def test_color_scan_round_trip_odd():
    cube = Cube(3)
    cube.scramble(seed=7)
    scan = cube.get_cube_string(is_color=True)
    scanned = Cube.from_simple_string(scan)
    assert scanned.get_cube_string(is_color=True) == scan
    assert scanned.get_cube_string() == cube.get_cube_string()

@pytest.mark.parametrize("N", [2, 4, 6])
def test_color_scan_round_trip_even(N):
    cube = Cube(N)
    cube.scramble(seed=N)
    scan = cube.get_cube_string(is_color=True)
    scanned = Cube.from_simple_string(scan)
    assert scanned.N == N
    assert scanned.get_cube_string(is_color=True) == scan
    assert not scanned.is_solved()

    scanned.inverse(Cube(N).scramble(seed=N))
    assert scanned.is_solved()

def test_invalid_scans():
    with pytest.raises(InvalidColorScanException):
        Cube.from_simple_string("W" * 10)
    with pytest.raises(InvalidColorScanException):
        Cube.from_simple_string(SOLVED_COLORS[:-1])
    with pytest.raises(InvalidColorScanException):
        Cube(3, colors=SOLVED_COLORS[:-9])
    with pytest.raises(InvalidColorScanException):
        Cube.from_simple_string("W" * 54)
    with pytest.raises(InvalidColorScanException):
        Cube.from_simple_string("X" + SOLVED_COLORS[1:])
    with pytest.raises(InvalidColorScanException):
        Cube.from_simple_string("W" * 24)

    # right face sticker next to up and front repeats the left color, so
    # no corner names the right face
    scan = list("".join(color * 16 for color in "WOGRBY"))
    scan[3 * 16] = 'O'
    with pytest.raises(InvalidColorScanException) as error:
        Cube.from_simple_string(scan)
    assert "No corner holds" in error.value.message

def test_scramble_is_seeded():
    first, second = Cube(3), Cube(3)
    scramble = first.scramble(seed=42)
    assert second.scramble(seed=42) == scramble
    assert len(scramble.split()) == 20
    assert all(move[0] in "ULFRBD" for move in scramble.split())
    assert first.get_cube_string() == second.get_cube_string()

    cube = Cube(3)
    cube.parse(scramble)
    assert cube.get_cube_string() == first.get_cube_string()

def test_matrix_is_the_cube():
    cube = Cube(3)
    matrix = cube.get_matrix()
    assert len(matrix) == 6
    assert matrix[Face.FRONT.value].shape == (3, 3)

    matrix[Face.FRONT.value][0, 0] = 'U'
    assert cube.get_cube_string()[18] == 'U'
    assert not cube.is_solved()

def test_copy_is_independent():
    cube = Cube(3)
    other = cube.copy()
    other.parse("R")
    assert cube.is_solved()
    assert not other.is_solved()

def test_parse_args():
    cube = Cube.parse_args(["-n", "4", "-c", "R u"])
    assert cube.N == 4
    assert not cube.is_solved()

    cube = Cube.parse_args(["--colors", SOLVED_COLORS])
    assert cube.N == 3
    assert cube.is_solved()
