from copy import deepcopy
from typing import Callable, Iterator, Optional

from pyrubik.cube import Cube
from pyrubik.enums import Face, FaceEdge, Reorientation
from pyrubik.error import ImpossibleScrambleException
from pyrubik.utils import Phase, SolvePipeline, compress_moves

__doc__ = """
Functions for solving a 3x3 layer by layer, up layer first.
Each phase works in order, building off the results of the
previous one, and never breaks what an earlier phase solved.
Every phase reads its target colors from the centers, and the
moves it returns are written for the cube as it was handed in,
no matter how the phase turned the whole cube while working.
"""

# bounds every repair loop, a solvable cube needs far fewer rounds
MAX_ATTEMPTS = 64

SIDE_FACES = [Face.LEFT, Face.FRONT, Face.RIGHT, Face.BACK]
CORNER_PIECES = [(0, 0), (0, 2), (2, 0), (2, 2)]

# (face, sticker) holding the up color -> (up slot to keep free, fix)
UP_CROSS_TRIGGERS = [
    (Face.FRONT, FaceEdge.LEFT, FaceEdge.LEFT, "L'"),
    (Face.FRONT, FaceEdge.RIGHT, FaceEdge.RIGHT, "R"),
    (Face.BOTTOM, FaceEdge.UP, FaceEdge.DOWN, "F2"),
    (Face.FRONT, FaceEdge.UP, FaceEdge.DOWN, "F"),
    (Face.FRONT, FaceEdge.DOWN, FaceEdge.DOWN, "F"),
]

# side face whose up edge is still wrong -> fix
UP_CROSS_SWAPS = [
    (Face.LEFT, "F L U L' U2 F' U"),
    (Face.RIGHT, "F' R' U' R U2 F U'"),
    (Face.BACK, "F2 U2 F2 U2 F2"),
]

UP_CORNER_EXTRACT = "R' D' R"

# side face and the down sticker next to it
DOWN_EDGES = [
    (Face.FRONT, FaceEdge.UP),
    (Face.LEFT, FaceEdge.LEFT),
    (Face.BACK, FaceEdge.DOWN),
    (Face.RIGHT, FaceEdge.RIGHT),
]

SECOND_LAYER_LEFT_INSERT = "D L D' L' D' F' D F"
SECOND_LAYER_RIGHT_INSERT = "D' R' D R D F D' F'"
SECOND_LAYER_EXTRACT = "R' D R D F D' F'"

DOWN_CROSS_L_SHAPE = "F D L D' L' F'"
DOWN_CROSS_I_SHAPE = "F L D L' D' F'"
DOWN_CROSS_ADJACENT_SWAP = "L D L' D L D2 L' D"
DOWN_CROSS_OPPOSITE_SWAP = "L D L' D L D2 L' D' L D L' D L D2 L'"

# front-left-down corner first, then going around as ROTATE would bring them to it
DOWN_CORNERS = [
    ((Face.FRONT, 2, 0), (Face.LEFT, 2, 2), (Face.BOTTOM, 0, 0)),
    ((Face.RIGHT, 2, 0), (Face.FRONT, 2, 2), (Face.BOTTOM, 0, 2)),
    ((Face.BACK, 2, 0), (Face.RIGHT, 2, 2), (Face.BOTTOM, 2, 2)),
    ((Face.LEFT, 2, 0), (Face.BACK, 2, 2), (Face.BOTTOM, 2, 0)),
]

DOWN_CORNER_CYCLE = "D L D' R' D L' D' R"
DOWN_CORNER_TWIST = "L' U' L U L' U' L U"

def repeat_until(done: Callable[[], bool], goal: str) -> Iterator[int]:
    """
    Yields until done() holds, failing if it takes too many rounds.
    """
    for attempt in range(MAX_ATTEMPTS):
        if done():
            return
        yield attempt
    if not done():
        raise ImpossibleScrambleException(f"Could not {goal}, the cube can't be solved.")

def run_to_fixpoint(scan: Callable[[], bool], goal: str) -> None:
    """
    Calls scan() until a full scan doesn't apply any moves.
    """
    for _ in range(MAX_ATTEMPTS):
        if not scan():
            return
    raise ImpossibleScrambleException(f"Could not {goal}, the cube can't be solved.")

def center(cube: Cube, face: Face) -> str:
    return cube.get_piece_char(face, 1, 1)

def is_cross_oriented(cube: Cube, face: Face) -> bool:
    return all(
        cube.get_piece_char(face, *edge.value) == center(cube, face)
        for edge in FaceEdge
    )

def is_corners_oriented(cube: Cube, face: Face) -> bool:
    return all(
        cube.get_piece_char(face, *corner) == center(cube, face)
        for corner in CORNER_PIECES
    )

def get_cross_match_count(cube: Cube, edge: FaceEdge) -> int:
    """
    Counts the side faces whose given edge sticker matches their center.
    """
    return sum(
        cube.get_piece_char(face, *edge.value) == center(cube, face)
        for face in SIDE_FACES
    )

def turn_to_best_match(cube: Cube, move: str, edge: FaceEdge, moves: list[str]) -> None:
    """
    Turns a layer to the position matching the most side faces.
    """
    best_count, best_turns = -1, 0
    for i in range(4):
        count = get_cross_match_count(cube, edge)
        if count > best_count:
            best_count, best_turns = count, i
        cube.turn(move, 1)
    cube.turn(move, best_turns, moves)

# Step 1: Up Cross
def is_up_cross_solved(cube: Cube) -> bool:
    return is_cross_oriented(cube, Face.TOP) and get_cross_match_count(cube, FaceEdge.UP) == 4

def insert_up_cross_edge(cube: Cube, moves: list[str]) -> bool:
    """
    Runs through the triggers once, bringing up every edge
    it finds with the up color. Returns if anything moved.
    """
    up = center(cube, Face.TOP)
    applied = False
    for face, edge, slot, alg in UP_CROSS_TRIGGERS:
        if cube.get_piece_char(face, *edge.value) != up:
            continue
        for _ in range(3):
            if cube.get_piece_char(Face.TOP, *slot.value) != up:
                break
            cube.turn('U', 1, moves)
        cube.parse(alg, output_movelist=moves)
        applied = True
    return applied

def solve_up_cross(cube: Cube) -> list[str]:
    """
    Solves the cross on the up face.
    Strategy:
        - Bring every edge with the up color up, oriented, looking
          at it from each side of the cube in turn.
        - Turn the up face to match as many side centers as possible.
        - Swap the remaining edges, keeping the front edge wrong.
    """

    moves = []
    for _ in repeat_until(lambda: is_cross_oriented(cube, Face.TOP), "orient the up cross"):
        run_to_fixpoint(lambda: insert_up_cross_edge(cube, moves), "orient the up cross")
        cube.rotate_cube(Reorientation.ROTATE)

    turn_to_best_match(cube, 'U', FaceEdge.UP, moves)

    for _ in repeat_until(lambda: get_cross_match_count(cube, FaceEdge.UP) == 4, "permute the up cross"):
        for _ in repeat_until(
            lambda: cube.get_piece_char(Face.FRONT, 0, 1) != center(cube, Face.FRONT), "find a wrong up edge"
        ):
            cube.rotate_cube(Reorientation.ROTATE)
        for face, alg in UP_CROSS_SWAPS:
            if cube.get_piece_char(face, 0, 1) != center(cube, face):
                cube.parse(alg, output_movelist=moves)
                break

    return compress_moves(moves)

# Step 2: Up Corners
def is_up_corners_solved(cube: Cube) -> bool:
    up = center(cube, Face.TOP)
    return all(
        cube.get_piece_char(Face.TOP, *corner) == up
        for corner in CORNER_PIECES
    ) and all(
        cube.get_piece_char(face, 0, 0) == center(cube, face)
        for face in SIDE_FACES
    )

def find_up_corner_insert(cube: Cube) -> Optional[str]:
    """
    Returns the moves bringing the down-front-right corner up
    into the up-front-right slot, if it belongs there.
    """
    up, front, right = center(cube, Face.TOP), center(cube, Face.FRONT), center(cube, Face.RIGHT)
    front_sticker = cube.get_piece_char(Face.FRONT, 2, 2)
    right_sticker = cube.get_piece_char(Face.RIGHT, 2, 0)
    down_sticker = cube.get_piece_char(Face.BOTTOM, 0, 2)
    cases = [
        (front_sticker == up and right_sticker == right, "F D F'"),
        (right_sticker == up and front_sticker == front, "R' D' R"),
        (down_sticker == up and front_sticker == right and right_sticker == front, "F D' F' R' D2 R"),
    ]
    return next((alg for matched, alg in cases if matched), None)

def solve_up_corners(cube: Cube) -> list[str]:
    """
    Solves the corners of the up layer, assuming the up cross is solved.
    Strategy:
        - Turn the down layer until the corner for the front-right
          slot is under it, and insert it.
        - If the corner in the front-right slot is wrong, take
          it out into the down layer, otherwise look at the next slot.
    """

    moves = []
    up = center(cube, Face.TOP)
    for _ in repeat_until(lambda: is_up_corners_solved(cube), "solve the up corners"):
        for _ in range(4):
            if (alg := find_up_corner_insert(cube)) is not None:
                cube.parse(alg, output_movelist=moves)
                break
            cube.turn('D', 1, moves)

        right = center(cube, Face.RIGHT)
        if (
            (cube.get_piece_char(Face.TOP, 2, 2) == up and cube.get_piece_char(Face.RIGHT, 0, 0) != right)
            or cube.get_piece_char(Face.FRONT, 0, 2) == up
            or cube.get_piece_char(Face.RIGHT, 0, 0) == up
        ):
            cube.parse(UP_CORNER_EXTRACT, output_movelist=moves)
        else:
            cube.rotate_cube(Reorientation.ROTATE)

    return compress_moves(moves)

# Step 3: Second Layer
def is_second_layer_solved(cube: Cube) -> bool:
    return all(
        cube.get_piece_char(face, 1, 0) == center(cube, face) and
        cube.get_piece_char(face, 1, 2) == center(cube, face)
        for face in SIDE_FACES
    )

def insert_second_layer_edge(cube: Cube, moves: list[str]) -> bool:
    """
    Finds a down layer edge belonging next to the front center,
    turns it under the front and inserts it left or right.
    """
    front, left, down = center(cube, Face.FRONT), center(cube, Face.LEFT), center(cube, Face.BOTTOM)
    for turns, (face, edge) in enumerate(DOWN_EDGES):
        down_sticker = cube.get_piece_char(Face.BOTTOM, *edge.value)
        if cube.get_piece_char(face, 2, 1) == front and down_sticker != down:
            cube.turn('D', turns, moves)
            if down_sticker == left:
                cube.parse(SECOND_LAYER_LEFT_INSERT, output_movelist=moves)
            else:
                cube.parse(SECOND_LAYER_RIGHT_INSERT, output_movelist=moves)
            return True
    return False

def extract_second_layer_edge(cube: Cube, moves: list[str]) -> bool:
    """
    Takes a wrong front-right edge out into the down layer,
    after parking a down colored edge under the left face.
    """
    front, right, down = center(cube, Face.FRONT), center(cube, Face.RIGHT), center(cube, Face.BOTTOM)
    front_sticker = cube.get_piece_char(Face.FRONT, 1, 2)
    right_sticker = cube.get_piece_char(Face.RIGHT, 1, 0)
    if (front_sticker == front and right_sticker == right) or down in (front_sticker, right_sticker):
        return False
    for _ in range(3):
        if cube.get_piece_char(Face.BOTTOM, 1, 0) == down or cube.get_piece_char(Face.LEFT, 2, 1) == down:
            break
        cube.turn('D', 1, moves)
    cube.parse(SECOND_LAYER_EXTRACT, output_movelist=moves)
    return True

def solve_second_layer(cube: Cube) -> list[str]:
    """
    Completes the first two layers by solving the middle edges.
    Assumes the up layer is already solved.
    """

    moves = []
    for _ in repeat_until(lambda: is_second_layer_solved(cube), "solve the second layer"):
        for _ in range(4):
            run_to_fixpoint(lambda: insert_second_layer_edge(cube, moves), "insert the second layer edges")
            cube.rotate_cube(Reorientation.ROTATE)

        for _ in range(4):
            if extract_second_layer_edge(cube, moves):
                break
            cube.rotate_cube(Reorientation.ROTATE)

    return compress_moves(moves)

# Step 4: Down Cross
def is_down_cross_solved(cube: Cube) -> bool:
    return is_cross_oriented(cube, Face.BOTTOM) and get_cross_match_count(cube, FaceEdge.DOWN) == 4

def find_down_cross_flip(cube: Cube) -> Optional[str]:
    down = center(cube, Face.BOTTOM)
    front_edge = cube.get_piece_char(Face.BOTTOM, 0, 1) != down
    cases = [
        (front_edge and cube.get_piece_char(Face.BOTTOM, 1, 0) != down, DOWN_CROSS_L_SHAPE),
        (front_edge and cube.get_piece_char(Face.BOTTOM, 2, 1) != down, DOWN_CROSS_I_SHAPE),
    ]
    return next((alg for matched, alg in cases if matched), None)

def solve_down_cross(cube: Cube) -> list[str]:
    """
    Solves the cross on the down face, keeping the first two layers.
    Strategy:
        - Flip the edges by recognizing "L" and "I" shapes.
        - Turn the down face to match as many side centers as possible.
        - Swap two adjacent or two opposite edges if needed.
    """

    moves = []
    for _ in repeat_until(lambda: is_cross_oriented(cube, Face.BOTTOM), "orient the down cross"):
        if (alg := find_down_cross_flip(cube)) is not None:
            cube.parse(alg, output_movelist=moves)
        cube.rotate_cube(Reorientation.ROTATE)

    turn_to_best_match(cube, 'D', FaceEdge.DOWN, moves)

    def is_wrong(face: Face) -> bool:
        return cube.get_piece_char(face, 2, 1) != center(cube, face)

    if get_cross_match_count(cube, FaceEdge.DOWN) < 4:
        for _ in range(3):
            if is_wrong(Face.FRONT) and (is_wrong(Face.RIGHT) or is_wrong(Face.BACK)):
                break
            cube.rotate_cube(Reorientation.ROTATE)

        if is_wrong(Face.RIGHT):
            cube.parse(DOWN_CROSS_ADJACENT_SWAP, output_movelist=moves)
        else:
            cube.parse(DOWN_CROSS_OPPOSITE_SWAP, output_movelist=moves)

    if get_cross_match_count(cube, FaceEdge.DOWN) != 4:
        raise ImpossibleScrambleException("Edge parity detected, the down cross can't be solved.")

    return compress_moves(moves)

# Step 5: Down Corners
def is_down_corner_matched(cube: Cube, corner=DOWN_CORNERS[0]) -> bool:
    """
    Determines if a down corner is in the right place, ignoring its twist.
    """
    return (
        {cube.get_piece_char(*sticker) for sticker in corner}
        == {center(cube, face) for face, _, _ in corner}
    )

def get_down_corner_match_count(cube: Cube) -> int:
    return sum(is_down_corner_matched(cube, corner) for corner in DOWN_CORNERS)

def is_down_corners_solved(cube: Cube) -> bool:
    return get_down_corner_match_count(cube) == 4 and is_corners_oriented(cube, Face.BOTTOM)

def solve_down_corners(cube: Cube) -> list[str]:
    """
    Permutes, then twists the down corners, solving the cube.
    """

    moves = []
    for _ in repeat_until(lambda: get_down_corner_match_count(cube) == 4, "permute the down corners"):
        for _ in range(3):
            if is_down_corner_matched(cube):
                break
            cube.rotate_cube(Reorientation.ROTATE)
        cube.parse(DOWN_CORNER_CYCLE, output_movelist=moves)

    down = center(cube, Face.BOTTOM)
    for _ in repeat_until(lambda: is_corners_oriented(cube, Face.BOTTOM), "twist the down corners"):
        for _ in range(3):
            if cube.get_piece_char(Face.BOTTOM, 0, 0) != down:
                break
            cube.turn('D', 1, moves)
        cube.parse(DOWN_CORNER_TWIST, output_movelist=moves)

    for _ in range(3):
        if cube.get_piece_char(Face.FRONT, 2, 0) == center(cube, Face.FRONT):
            break
        cube.turn('D', 1, moves)

    return compress_moves(moves)

# Orientation search
ORIENTATION_CHECKPOINTS: list[Callable[[Cube], bool]] = [
    lambda cube: is_cross_oriented(cube, Face.TOP),
    lambda cube: get_cross_match_count(cube, FaceEdge.UP) == 4,
    is_up_corners_solved,
    is_second_layer_solved,
    lambda cube: is_cross_oriented(cube, Face.BOTTOM),
    lambda cube: get_cross_match_count(cube, FaceEdge.DOWN) == 4,
    lambda cube: get_down_corner_match_count(cube) == 4,
    lambda cube: is_corners_oriented(cube, Face.BOTTOM),
]

# whole cube turns bringing each face to the top in turn: U, B, D, F, L, R
POLE_STEPS = [
    [],
    [Reorientation.ROLL],
    [Reorientation.ROLL],
    [Reorientation.ROLL],
    [Reorientation.ROLL, Reorientation.ROTATE, Reorientation.ROLL],
    [Reorientation.ROLL, Reorientation.ROLL],
]

def get_orientation_score(cube: Cube) -> int:
    """
    Counts how far the cube already is into the solve, each checkpoint
    only counting if all the ones before it hold.
    """
    score = 0
    for checkpoint in ORIENTATION_CHECKPOINTS:
        if not checkpoint(cube):
            break
        score += 1
    return score

def find_best_orientation(cube: Cube) -> list[str]:
    """
    Turns the whole cube to the first of its 24 orientations that
    is furthest into the solve. Whole cube turns cost no moves.
    """

    probe = deepcopy(cube)
    path, best_path, best_score = [], [], -1
    for steps in POLE_STEPS:
        for kind in steps:
            probe.rotate_cube(kind)
            path.append(kind)
        for _ in range(4):
            if (score := get_orientation_score(probe)) > best_score:
                best_score, best_path = score, path.copy()
            probe.rotate_cube(Reorientation.ROTATE)
            path.append(Reorientation.ROTATE)

    for kind in best_path:
        cube.rotate_cube(kind)
    return []

PIPELINE_3x3 = SolvePipeline(
    Phase(is_up_cross_solved, solve_up_cross),
    Phase(is_up_corners_solved, solve_up_corners),
    Phase(is_second_layer_solved, solve_second_layer),
    Phase(is_down_cross_solved, solve_down_cross),
    Phase(is_down_corners_solved, solve_down_corners),
    prepare=find_best_orientation,
)

if __name__ == "__main__":
    PIPELINE_3x3.set_debug(True)
    cube = Cube.parse_args()
    assert cube.N == 3
    print(cube)
    moves = PIPELINE_3x3(cube)
    print(moves)
