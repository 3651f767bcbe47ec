import argparse
import sys
import os
import logging

# Ensure project root is in path so we can import 'maze_stepper' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_stepper.algo.base import PROGRESS, COMPLETE, SOLVED
from maze_stepper.core.grid import InvalidDimensionError
from maze_stepper.core.session import new_session


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def build_maze(session, algo: str, logger):
    if algo == "open":
        logger.info(f"Filling open {session.grid.rows}x{session.grid.cols} maze...")
        session.fill_open_maze()
        return

    logger.info(f"Carving {session.grid.rows}x{session.grid.cols} maze...")
    count = 0
    while session.generation_step() != COMPLETE:
        count += 1
    logger.info(f"Carving complete after {count} steps. End: {session.end}")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Maze Stepper: step-by-step maze generation and solving")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Generate Command
    gen_parser = subparsers.add_parser("generate", help="Generate a new maze")
    gen_parser.add_argument("--rows", type=int, default=21, help="Maze Rows")
    gen_parser.add_argument("--cols", type=int, default=41, help="Maze Columns")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    gen_parser.add_argument("--algo", type=str, default="carve", choices=["carve", "open"], help="Generation Algorithm")

    # Solve Command
    solve_parser = subparsers.add_parser("solve", help="Generate and solve a maze")
    solve_parser.add_argument("--rows", type=int, default=21, help="Maze Rows")
    solve_parser.add_argument("--cols", type=int, default=41, help="Maze Columns")
    solve_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    solve_parser.add_argument("--generator", type=str, default="carve", choices=["carve", "open"], help="Generation Algorithm")
    solve_parser.add_argument("--algo", type=str, default="frontier", choices=["frontier", "wall"], help="Solver algorithm")
    solve_parser.add_argument("--max-steps", type=int, default=None, help="Wall follower iteration cap")

    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger("maze_stepper")

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")

    try:
        session = new_session(args.rows, args.cols, seed=args.seed)
    except InvalidDimensionError as e:
        logger.error(str(e))
        return 2

    if args.command == "generate":
        build_maze(session, args.algo, logger)
        print(session.render_text(show_path=False))
        logger.info(f"Metrics: {session.metrics_snapshot().as_dict()}")
        return 0

    if args.command == "solve":
        build_maze(session, args.generator, logger)

        logger.info(f"Solving with {args.algo.upper()} from {session.start} to {session.end}...")
        if args.algo == "wall":
            status = session.solve_with_wall_follower(max_steps=args.max_steps)
        else:
            count = 0
            while True:
                status = session.solver_step()
                count += 1
                if status != PROGRESS:
                    break
                if count % 1000 == 0:
                    logger.debug(f"Expanded: {len(session.visited())}")

        print(session.render_text())
        if status == SOLVED:
            logger.info(f"{status}. Path Length: {len(session.solution_path())}")
        else:
            logger.warning(f"{status}. No solution found.")
        logger.info(f"Metrics: {session.metrics_snapshot().as_dict()}")
        return 0 if status == SOLVED else 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
