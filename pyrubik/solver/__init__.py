from copy import deepcopy

from pyrubik.cube import Cube
from pyrubik.enums import Face
from pyrubik.error import InvalidDimensionException
from pyrubik.solver.solver3x3 import PIPELINE_3x3
from pyrubik.utils import compress_moves, relabel_moves

def solve(cube: Cube, mutate_original: bool = False) -> str:
    """
    Returns the moves solving the cube, to be replayed with cube.parse().
    The cube itself is left alone unless mutate_original is set,
    in which case it ends up solved (possibly turned as a whole).
    """

    if cube.N != 3:
        raise InvalidDimensionException(f"Can only solve a 3x3, not a {cube.N}x{cube.N}")

    # the solver writes moves for the faces as labelled before any whole
    # cube turns, the caller holds the cube in its own orientation
    frame = {cube.get_mapped_face_char(face): face.letter for face in list(Face)}
    if not mutate_original:
        cube = deepcopy(cube)
    moves = relabel_moves(PIPELINE_3x3(cube), frame)
    return " ".join(compress_moves(moves))
