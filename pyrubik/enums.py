from __future__ import annotations
from enum import Enum

FACE_CHARS = "ULFRBD"

class Face(Enum):
    """
    Enums for faces, representing the different sides of the cube.
    These numbers must be as they are: they index the list of face
    arrays, the color scan and the cube string, all of which are
    laid out as up, left, front, right, back, down.
    """
    TOP = 0
    LEFT = 1
    FRONT = 2
    RIGHT = 3
    BACK = 4
    BOTTOM = 5

    @property
    def letter(self) -> str:
        return FACE_CHARS[self.value]

    @property
    def opposite(self) -> Face:
        return Face.from_letter("DRBLFU"[self.value])

    @staticmethod
    def from_letter(letter: str) -> Face:
        return Face(FACE_CHARS.index(letter.upper()))

class Axis(Enum):
    """
    Rotation axes. Depths along an axis are counted from the
    left face (X), the top face (Y) or the back face (Z).
    """
    X = 0
    Y = 1
    Z = 2

class Direction(Enum):
    CW = 0
    CCW = 1

    def flipped(self) -> Direction:
        return Direction.CCW if self == Direction.CW else Direction.CW

class Reorientation(Enum):
    """
    Whole cube turns:
        ROTATE: about the up-down axis, the right face comes to the front
        ROLL: about the left-right axis, the top face comes to the front
    """
    ROTATE = 0
    ROLL = 1

class Corner(Enum):
    """ Corners of a face grid, used as the starting point of a strip """
    UL = 0
    UR = 1
    DR = 2
    DL = 3

    @property
    def is_top(self) -> bool:
        return self in (Corner.UL, Corner.UR)

    @property
    def is_left(self) -> bool:
        return self in (Corner.UL, Corner.DL)

    def coords(self, N: int) -> tuple[int, int]:
        return (0 if self.is_top else N - 1, 0 if self.is_left else N - 1)

class FaceEdge(Enum):
    """ (row, col) of the edge pieces of a 3x3 face """
    LEFT = (1, 0)
    DOWN = (2, 1)
    RIGHT = (1, 2)
    UP = (0, 1)
