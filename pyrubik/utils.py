from __future__ import annotations
import re
from typing import Callable, NamedTuple, Optional, Union, TYPE_CHECKING

from pyrubik.error import InvalidMoveTokenException

if TYPE_CHECKING:
    from pyrubik.cube import Cube

FACE_LETTERS = "ULFRBD"
SLICE_LETTERS = "ulfrbd"
MIDDLE_LETTERS = "XYZ"
MOVE_LETTERS = FACE_LETTERS + SLICE_LETTERS + MIDDLE_LETTERS

SUFFIX_DISTS = {"": 1, "'": 3, "i": 3, "2": 2}
TOKEN_PATTERN = re.compile(r"\s*([ULFRBDulfrbdXYZ])(['i2]?)")

class Phase(NamedTuple):
    """ A solving stage: a pure completion check and the repair that makes it hold. """
    is_solved: Callable[[Cube], bool]
    solve: Callable[[Cube], list[str]]

class SolvePipeline:
    def __init__(self, *phases: Phase, prepare: Optional[Callable[[Cube], list[str]]] = None, debug: bool = False):
        self.__phases = phases
        self.__prepare = prepare
        self.__debug = debug
    def set_debug(self, debug: bool):
        self.__debug = debug
    def __call__(self, cube: Cube) -> list[str]:
        moves = []
        if self.__prepare is not None:
            moves += self.__prepare(cube)
        for phase in self.__phases:
            if not phase.is_solved(cube):
                moves += phase.solve(cube)
            if self.__debug:
                print(f"{phase.solve.__name__}: ")
                print(cube)
        return compress_moves(moves)

def split_moves(moves: str) -> list[str]:
    """
    Splits a move string into normalized tokens, validating the whole string.
    Tokens may be separated by whitespace or written back to back.
    >>> split_moves("R Ui F2")
    ['R', "U'", 'F2']
    >>> split_moves("RU'")
    ['R', "U'"]
    """

    tokens = []
    moves = moves.rstrip()
    pos = 0
    while pos < len(moves):
        token = TOKEN_PATTERN.match(moves, pos)
        if token is None:
            rest = moves[pos:]
            bad_pos = pos + len(rest) - len(rest.lstrip())
            raise InvalidMoveTokenException(
                f"Invalid move token {moves[bad_pos]!r} at position {bad_pos} of {moves!r}"
            )
        letter, suffix = token.groups()
        tokens.append(get_final_move(letter, SUFFIX_DISTS[suffix]))
        pos = token.end()
    return tokens

def get_move(side: str, dist: int) -> list[str]:
    """
    Returns the move turning the given side 'dist' quarter turns clockwise.
    >>> get_move('R', -1)
    ["R'"]
    >>> get_move('U', 4)
    []
    """

    dist %= 4
    if dist == 0:
        return []
    return [get_final_move(side, dist)]

def get_root_move(move: str) -> str:
    """
    Gets the "root move" (the letter) from a given move
    """
    return move[0]

def get_dist(move: str) -> int:
    """
    Returns the clockwise distance of a move
    """
    return 3 if move[-1] in "'i" else 2 if move[-1] == '2' else 1

def get_final_move(move: str, dist: int) -> str:
    """
    Gets the final representation of the move given root and distance
    """
    addon = ['', '', '2', "'"][dist % 4]
    return f"{move}{addon}"

def clean_moves(moves: list[str]) -> list[str]:
    """
    Merges runs of moves with the same root into a single move, in one pass.
    >>> clean_moves(['R', 'R', 'R'])
    ["R'"]
    >>> clean_moves(['u', 'u'])
    ['u2']
    >>> clean_moves(['F', 'F2', 'F'])
    []
    """

    new_moves = []
    prev_root = None
    prev_move_dist = 0
    for move in moves:
        root = get_root_move(move)
        if root == prev_root:
            prev_move_dist += get_dist(move)
        else:
            if prev_root is not None:
                new_moves.extend(get_move(prev_root, prev_move_dist))
            prev_move_dist = get_dist(move)
            prev_root = root
    if prev_root is not None:
        new_moves.extend(get_move(prev_root, prev_move_dist))
    return new_moves

def compress_moves(moves: Union[str, list[str]]) -> Union[str, list[str]]:
    """
    Cleans moves until the sequence stops getting shorter, since a
    cancellation can leave two moves of the same root next to each other.
    Returns the same kind (string or list) it was given.
    >>> compress_moves("U R R' U")
    'U2'
    """

    prev_moves = split_moves(moves) if isinstance(moves, str) else list(moves)
    comp_moves = clean_moves(prev_moves)
    while len(comp_moves) < len(prev_moves):
        prev_moves = comp_moves
        comp_moves = clean_moves(prev_moves)
    return " ".join(comp_moves) if isinstance(moves, str) else comp_moves

def reverse_moves(moves: list[str]) -> list[str]:
    """
    Reverses a list of moves and outputs the moves to get
    back to the original position.

    >>> reverse_moves(['R', 'U'])
    ["U'", "R'"]
    """

    return [
        get_final_move(get_root_move(move), -get_dist(move))
        for move in reversed(moves)
    ]

def relabel_moves(moves: list[str], frame: dict[str, str]) -> list[str]:
    """
    Renames the face (and one-layer slice) letters of moves, e.g. to replay
    moves recorded against one orientation on a cube held in another.
    Middle slices are left as they are.
    """

    relabeled = []
    for move in moves:
        root = get_root_move(move)
        if root in FACE_LETTERS:
            root = frame[root]
        elif root in SLICE_LETTERS:
            root = frame[root.upper()].lower()
        relabeled.append(root + move[1:])
    return relabeled
