__version__ = "0.1.0"
__author__ = "pyrubik contributors"

from pyrubik.cube import Cube
from pyrubik.solver import solve
