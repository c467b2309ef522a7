from pyrubik.cube import Cube
from pyrubik.solver import solve
from pyrubik.solver.solver3x3 import PIPELINE_3x3

def main(argv=None):
    parser = Cube.build_parser()
    parser.add_argument("--debug", help="print the cube after every solving phase", action="store_true")
    args = parser.parse_args(argv)

    cube = Cube.from_args(args)
    if cube.N != 3:
        parser.error("only 3x3 cubes can be solved")
    print(cube)
    if args.custom_scramble:
        print("Scramble undone:")
        cube.inverse(args.custom_scramble)
        print(cube)
        cube.parse(args.custom_scramble)

    PIPELINE_3x3.set_debug(args.debug)
    moves = solve(cube)
    print(f"Solution: {moves}")
    cube.parse(moves)
    print(cube)

if __name__ == "__main__":
    main()
