from __future__ import annotations
import random
import argparse
from math import isqrt
from copy import deepcopy
from typing import NamedTuple, Optional, Sequence

import numpy as np
from pynterface import Background

from pyrubik.enums import Axis, Corner, Direction, Face, FACE_CHARS, Reorientation
from pyrubik.error import InvalidColorScanException, InvalidDimensionException, InvalidTurnException
from pyrubik.utils import (
    FACE_LETTERS, SLICE_LETTERS, MIDDLE_LETTERS,
    get_dist, get_move, get_root_move, reverse_moves, split_moves
)

DEFAULT_COLORS = "WOGRBY"

class SliceInfo(NamedTuple):
    face: Face
    start: Corner     # corner the strip starts from at depth 0
    step: int         # index increases or decreases along the strip
    is_row: bool      # strip runs along a row or a column

# For each axis, the four faces around it, in the order a clockwise
# turn pulls stickers: the first face takes the second face's strip.
SLICE_TABLE: dict[Axis, tuple[SliceInfo, ...]] = {
    Axis.X: (
        SliceInfo(Face.TOP, Corner.UL, 1, False),
        SliceInfo(Face.FRONT, Corner.UL, 1, False),
        SliceInfo(Face.BOTTOM, Corner.UL, 1, False),
        SliceInfo(Face.BACK, Corner.DR, -1, False),
    ),
    Axis.Y: (
        SliceInfo(Face.LEFT, Corner.UL, 1, True),
        SliceInfo(Face.FRONT, Corner.UL, 1, True),
        SliceInfo(Face.RIGHT, Corner.UL, 1, True),
        SliceInfo(Face.BACK, Corner.UL, 1, True),
    ),
    Axis.Z: (
        SliceInfo(Face.TOP, Corner.UR, -1, True),
        SliceInfo(Face.LEFT, Corner.UL, 1, False),
        SliceInfo(Face.BOTTOM, Corner.DL, 1, True),
        SliceInfo(Face.RIGHT, Corner.DR, -1, False),
    ),
}

FACE_AXES = {
    Face.TOP: Axis.Y, Face.BOTTOM: Axis.Y,
    Face.LEFT: Axis.X, Face.RIGHT: Axis.X,
    Face.FRONT: Axis.Z, Face.BACK: Axis.Z
}

# faces at depth 0 and depth N-1 of each axis
AXIS_END_FACES = {
    Axis.X: (Face.LEFT, Face.RIGHT),
    Axis.Y: (Face.TOP, Face.BOTTOM),
    Axis.Z: (Face.BACK, Face.FRONT)
}

# faces whose clockwise turn runs their axis counter-clockwise
REVERSED_FACES = (Face.LEFT, Face.BOTTOM, Face.BACK)

# middle slices: the face whose sense they turn in, and the face their depth is counted from
MIDDLE_SLICES = {
    'X': (Face.RIGHT, Face.LEFT),
    'Y': (Face.TOP, Face.TOP),
    'Z': (Face.FRONT, Face.BACK)
}

# the three stickers of each corner, up-left-front first
CORNER_FACETS = (
    ((Face.TOP, Corner.DL), (Face.LEFT, Corner.UR), (Face.FRONT, Corner.UL)),
    ((Face.TOP, Corner.DR), (Face.FRONT, Corner.UR), (Face.RIGHT, Corner.UL)),
    ((Face.TOP, Corner.UR), (Face.RIGHT, Corner.UR), (Face.BACK, Corner.UL)),
    ((Face.TOP, Corner.UL), (Face.BACK, Corner.UR), (Face.LEFT, Corner.UL)),
    ((Face.BOTTOM, Corner.UL), (Face.LEFT, Corner.DR), (Face.FRONT, Corner.DL)),
    ((Face.BOTTOM, Corner.UR), (Face.FRONT, Corner.DR), (Face.RIGHT, Corner.DL)),
    ((Face.BOTTOM, Corner.DR), (Face.RIGHT, Corner.DR), (Face.BACK, Corner.DL)),
    ((Face.BOTTOM, Corner.DL), (Face.BACK, Corner.DR), (Face.LEFT, Corner.DL)),
)

COLOR_BACKGROUNDS = {
    'W': "WHITE",
    'G': "GREEN",
    'R': "RED",
    'B': "BLUE",
    'Y': "YELLOW"
}

class Cube():

    """
    Stores a cube as a list of six arrays of shape (n, n),
    where 'n' is the side length of the cube, in the order:
    up, left, front, right, back, down.

    Each sticker holds the letter of the face it started on
    (its identity), and colors are only looked up when asked for.
    The faces are laid out as the unfolded net:

          U
        L F R B
          D

    so that the bottom row of the up face touches the top row of the
    front face, the top row of the down face touches the bottom row of
    the front face, and the back face is read as seen from behind.

       0  1  2
    0 [ ][ ][ ]
    1 [ ][ ][ ]
    2 [ ][ ][ ]
    """

    @staticmethod
    def build_parser() -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser()
        parser.add_argument("-n", "--side-length", help="the side length of the cube", type=int, default=3)
        parser.add_argument("-r", "--random-scramble", help="initialize the cube with a random scramble", action="store_true")
        parser.add_argument("-c", "--custom-scramble", help="initialize the cube with your own scramble", type=str)
        parser.add_argument("-p", "--print-scramble", help="print the scramble of the cube", action="store_true")
        parser.add_argument("--colors", help="initialize the cube from a flattened color scan", type=str)
        return parser

    @staticmethod
    def from_args(args: argparse.Namespace) -> Cube:
        if args.colors:
            cube = Cube.from_simple_string(args.colors)
        else:
            cube = Cube(side_length=args.side_length)

        if args.custom_scramble:
            cube.parse(args.custom_scramble)
        elif args.random_scramble:
            scramble = cube.scramble()
            if args.print_scramble:
                print(scramble.split())
        return cube

    @staticmethod
    def parse_args(argv: Optional[list[str]] = None) -> Cube:
        return Cube.from_args(Cube.build_parser().parse_args(argv))

    @staticmethod
    def from_simple_string(cube_string: Sequence[str]) -> Cube:
        """
        Returns the cube scanned in the following format (2x2 shown):

        "abcdefghijklmnopqrstuvwx"

              a b
              c d
          e f i j m n q r
          g h k l o p s t
              u v
              w x
        """

        N = isqrt(len(cube_string) // 6)
        if N < 2 or 6 * N * N != len(cube_string):
            raise InvalidColorScanException(
                f"Scan of invalid length {len(cube_string)} (must be N**2*6 where N >= 2 is an int)"
            )
        return Cube(side_length=N, colors=cube_string)

    def __init__(self, side_length: int = 3, colors: Optional[Sequence[str]] = None):
        if not isinstance(side_length, int) or isinstance(side_length, bool) or side_length < 2:
            raise InvalidDimensionException(f"Invalid side length {side_length!r} (must be an int >= 2)")
        self.N = side_length
        self._face_mappings = list(FACE_CHARS)
        if colors is None:
            self._colors = list(DEFAULT_COLORS)
            self._cube = [
                np.full((side_length, side_length), face.letter)
                for face in list(Face)
            ]
        else:
            self.__load_colors(list(colors))

    def __load_colors(self, colors: list[str]) -> None:
        piece_num = self.N ** 2
        if len(colors) != 6 * piece_num:
            raise InvalidColorScanException(
                f"Scan has {len(colors)} stickers, a cube of side length {self.N} has {6 * piece_num}"
            )
        faces = [
            np.array(colors[i * piece_num:(i + 1) * piece_num], dtype=object).reshape(self.N, self.N)
            for i in range(6)
        ]

        if self.N % 2:
            mapping = [face[self.N // 2, self.N // 2] for face in faces]
        else:
            mapping = self.__map_corner_colors(faces)
        if len(set(mapping)) != 6:
            raise InvalidColorScanException(f"Scan does not have six distinct face colors: {mapping}")
        if unknown := {*colors} - {*mapping}:
            raise InvalidColorScanException(f"Scan has colors that belong to no face: {sorted(map(str, unknown))}")

        self._colors = mapping
        self._cube = [
            np.array([[FACE_CHARS[mapping.index(c)] for c in row] for row in face])
            for face in faces
        ]

    def __map_corner_colors(self, faces: list[np.ndarray]) -> list[str]:
        """
        Deduces the face colors of a cube with no fixed centers.
        The up-left-front corner names the up, left and front colors,
        then every other face color is the new color on the corner
        holding the two known colors around it:
            right: next to front and up
            back: next to right and up
            down: next to back and left
        """

        corners = [
            [faces[face.value][corner.coords(self.N)] for face, corner in facets]
            for facets in CORNER_FACETS
        ]
        mapping = list(corners[0])
        if len(set(mapping)) != 3:
            raise InvalidColorScanException(f"Up-left-front corner has repeated colors: {mapping}")

        for i in range(3, 6):
            neighbours = {mapping[i - 1], mapping[0] if i < 5 else mapping[1]}
            for colors in corners:
                new_colors = [c for c in colors if c not in mapping]
                if len(new_colors) == 1 and {*colors} - {*new_colors} == neighbours:
                    mapping.append(new_colors[0])
                    break
            else:
                raise InvalidColorScanException(
                    f"No corner holds {sorted(map(str, neighbours))} and a new color"
                )
        return mapping

    def __str__(self):

        def get_ansii(color: str) -> str:
            match color:
                case 'O':
                    return Background.RGB((255, 165, 0)) + '  '
                case other if other in COLOR_BACKGROUNDS:
                    return getattr(Background, f"{COLOR_BACKGROUNDS[other]}_BRIGHT") + '  '
                case other:
                    return f"{Background.RESET_BACKGROUND}{str(other)[:1]} "

        output = "\n "
        for i in range(self.N):
            output += '  ' * self.N
            for j in range(self.N):
                output += get_ansii(self.get_piece_char(Face.TOP, i, j, True))
            output += f"{Background.RESET_BACKGROUND}\n "

        for i in range(self.N):
            for face in [Face.LEFT, Face.FRONT, Face.RIGHT, Face.BACK]:
                for j in range(self.N):
                    output += get_ansii(self.get_piece_char(face, i, j, True))
            output += f"{Background.RESET_BACKGROUND}\n "

        for i in range(self.N):
            output += '  ' * self.N
            for j in range(self.N):
                output += get_ansii(self.get_piece_char(Face.BOTTOM, i, j, True))
            output += f"{Background.RESET_BACKGROUND}\n "

        return output

    def dump(self, is_color: bool = False) -> str:
        """
        Returns the net of the cube as plain text, one character per sticker:

             UUU
             UUU
             UUU
        LLL FFF RRR BBB
        LLL FFF RRR BBB
        LLL FFF RRR BBB
             DDD
             DDD
             DDD
        """

        def face_row(face: Face, i: int) -> str:
            return "".join(self.get_piece_char(face, i, j, is_color) for j in range(self.N))

        indent = ' ' * (self.N + 1)
        lines = [indent + face_row(Face.TOP, i) for i in range(self.N)]
        lines += [
            " ".join(face_row(face, i) for face in [Face.LEFT, Face.FRONT, Face.RIGHT, Face.BACK])
            for i in range(self.N)
        ]
        lines += [indent + face_row(Face.BOTTOM, i) for i in range(self.N)]
        return "\n".join(lines)

    def get_cube_string(self, is_color: bool = False) -> str:
        """
        Returns every sticker, face by face (up, left, front,
        right, back, down), each face row by row.
        """

        return "".join(
            self.get_piece_char(face, i, j, is_color)
            for face in list(Face)
            for i in range(self.N)
            for j in range(self.N)
        )

    def get_matrix(self) -> list[np.ndarray]:
        """ Returns the mutable array of the cube """
        return self._cube

    def get_piece_char(self, face: Face, row: int, col: int, is_color: bool = False) -> str:
        piece = str(self._cube[face.value][row, col])
        if is_color:
            return self.face_char_to_color(piece)
        return piece

    def get_mapped_face_char(self, face: Face) -> str:
        """ Returns the identity of the face currently at the given position """
        return self._face_mappings[face.value]

    def face_char_to_color(self, face_char: str) -> str:
        return str(self._colors[FACE_CHARS.index(face_char)])

    def copy(self) -> Cube:
        return deepcopy(self)

    def is_solved(self) -> bool:
        return all(
            (face == face[0, 0]).all()
            for face in self._cube
        )

    def scramble(self, move_count: int = 20, seed: Optional[int] = None) -> str:
        """
        Applies random turns to the cube and returns them.
        Only outer faces are turned on a 3x3, bigger and smaller
        cubes also get turns of the slices next to the faces.
        """

        rng = random.Random(seed)
        letters = FACE_LETTERS if self.N == 3 else FACE_LETTERS + SLICE_LETTERS
        scramble = " ".join(
            rng.choice(letters) + rng.choice(['', "'"])
            for _ in range(move_count)
        )
        self.parse(scramble)
        return scramble

    def parse(self, moves: str, output_movelist: Optional[list[str]] = None):
        """
        Parses a string of moves and applies them. The whole string is
        checked before anything is turned, so a bad token leaves the
        cube untouched.
        """
        for m in split_moves(moves):
            self.turn(get_root_move(m), get_dist(m), output_movelist)

    def inverse(self, moves: str, output_movelist: Optional[list[str]] = None):
        """ Undoes a string of moves, applying its reverse. """
        for m in reverse_moves(split_moves(moves)):
            self.turn(get_root_move(m), get_dist(m), output_movelist)

    def turn(self, move: str, dist: int, movelist: Optional[list[str]] = None) -> None:
        """
        Turns the cube depending on the given measure.
        Arguments:
            move: a face, slice or middle slice letter
            dist: number of clockwise turns
            movelist: if given, gets the move as it would be written
                      for the cube before any whole cube turns
        """
        dist %= 4
        direction = Direction.CCW if dist == 3 else Direction.CW
        times = 1 if dist == 3 else dist

        if move in FACE_LETTERS:
            for _ in range(times):
                self.rotate_face(Face.from_letter(move), direction)
        elif move in SLICE_LETTERS:
            face = Face.from_letter(move)
            depth = 1 if face in (Face.TOP, Face.LEFT, Face.BACK) else self.N - 2
            if face in REVERSED_FACES:
                direction = direction.flipped()
            for _ in range(times):
                self.rotate_slice(FACE_AXES[face], direction, depth)
        elif move in MIDDLE_LETTERS:
            for _ in range(times):
                self.rotate_slice(Axis(MIDDLE_LETTERS.index(move)), direction, self.N // 2)
        else:
            raise InvalidTurnException(f"Cannot turn {move!r}")

        if movelist is not None:
            movelist.extend(self.__get_home_move(move, dist))

    def __get_home_move(self, move: str, dist: int) -> list[str]:
        """
        Writes a move made on the reoriented cube as the move
        making the same turn on the cube before it was reoriented.
        """

        if move in FACE_LETTERS:
            return get_move(self.get_mapped_face_char(Face.from_letter(move)), dist)
        if move in SLICE_LETTERS:
            return get_move(self.get_mapped_face_char(Face.from_letter(move)).lower(), dist)

        sense, origin = (Face.from_letter(self.get_mapped_face_char(f)) for f in MIDDLE_SLICES[move])
        for letter, (home_sense, home_origin) in MIDDLE_SLICES.items():
            if sense in (home_sense, home_sense.opposite):
                if origin != home_origin and self.N % 2 == 0:
                    raise InvalidTurnException(
                        f"Cannot write {move!r} for the unturned cube, its middle slice differs on an even cube"
                    )
                return get_move(letter, dist if sense == home_sense else -dist)
        raise InvalidTurnException(f"Cannot turn {move!r}")

    def rotate_face(self, face: Face, direction: Direction = Direction.CW, face_only: bool = False) -> None:
        """
        Turns a face a quarter turn, along with the strips of
        its four neighbours touching it.
        Arguments:
            face: the face to turn
            direction: clockwise when looking at the face
            face_only: only turn the stickers on the face itself
        """

        self._cube[face.value] = np.rot90(
            self._cube[face.value], -1 if direction == Direction.CW else 1
        )
        if face_only:
            return

        depth = self.N - 1 if face in (Face.FRONT, Face.RIGHT, Face.BOTTOM) else 0
        if face in REVERSED_FACES:
            direction = direction.flipped()
        self.__cycle_strips(FACE_AXES[face], direction, depth)

    def rotate_slice(self, axis: Axis, direction: Direction, depth: int) -> None:
        """
        Turns the layer at the given depth of an axis a quarter turn.
        The direction is the one of the right face (X), the up face (Y)
        or the front face (Z). A depth landing on an outer layer also
        turns the face there, so that the cube stays a real cube.
        """

        if not 0 <= depth < self.N:
            raise InvalidTurnException(f"Cannot turn depth {depth} of a cube of side length {self.N}")
        self.__cycle_strips(axis, direction, depth)
        for end_depth, face in zip((0, self.N - 1), AXIS_END_FACES[axis]):
            if depth == end_depth:
                self.rotate_face(
                    face, direction.flipped() if face in REVERSED_FACES else direction, face_only=True
                )

    def __get_strip(self, info: SliceInfo, depth: int) -> tuple[np.ndarray, np.ndarray]:
        """ Returns the (rows, cols) indices of a face's strip at the given depth """
        steps = np.arange(self.N) * info.step
        start_row, start_col = info.start.coords(self.N)
        if info.is_row:
            row = depth if info.start.is_top else self.N - 1 - depth
            return np.full(self.N, row), start_col + steps
        col = depth if info.start.is_left else self.N - 1 - depth
        return start_row + steps, np.full(self.N, col)

    def __cycle_strips(self, axis: Axis, direction: Direction, depth: int) -> None:
        """
        Moves the strips at a depth around the four faces of an axis.
           X: front -> up -> back -> down
           Y: front -> left -> back -> right
           Z: left -> up -> right -> down
        (clockwise, counter-clockwise runs the other way)
        """

        table = SLICE_TABLE[axis]
        strips = [self.__get_strip(info, depth) for info in table]
        values = [
            self._cube[info.face.value][strip].copy()
            for info, strip in zip(table, strips)
        ]
        shift = 1 if direction == Direction.CW else -1
        for i, (info, strip) in enumerate(zip(table, strips)):
            self._cube[info.face.value][strip] = values[(i + shift) % 4]

    def rotate_cube(self, kind: Reorientation) -> None:
        """
        Turns the whole cube, only changing which face is where.
            ROTATE: left <- front <- right <- back <- left
            ROLL: back <- down <- front <- up <- back
        """

        if kind == Reorientation.ROTATE:
            fixed_faces = (Face.TOP, Face.BOTTOM)
            side_faces = (Face.LEFT, Face.FRONT, Face.RIGHT, Face.BACK)
        else:
            fixed_faces = (Face.LEFT, Face.RIGHT)
            side_faces = (Face.BACK, Face.BOTTOM, Face.FRONT, Face.TOP)

        self.rotate_face(fixed_faces[0], Direction.CW, face_only=True)

        grids = [self._cube[f.value] for f in side_faces]
        mappings = [self._face_mappings[f.value] for f in side_faces]
        for i, face in enumerate(side_faces):
            self._cube[face.value] = grids[(i + 1) % 4]
            self._face_mappings[face.value] = mappings[(i + 1) % 4]

        # the back face is read from behind, so it's upside down next to up and down
        if kind == Reorientation.ROLL:
            for face in (Face.TOP, Face.BACK):
                self._cube[face.value] = np.rot90(self._cube[face.value], 2)

        self.rotate_face(fixed_faces[1], Direction.CCW, face_only=True)

def demo():
    cube = Cube.parse_args()
    print(cube)

if __name__ == "__main__":
    demo()
