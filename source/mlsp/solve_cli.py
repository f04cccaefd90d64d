#!/usr/bin/env python3
import argparse
import logging
import os
import sys
import time

from .config import DATA_DIR, DEFAULT_TIME_LIMIT, OUTPUT_DIR, RESULTS_DIR
from .errors import MLSPError, SolverError
from .instance_io import (
    failed_result,
    read_instance,
    save_solution_to_json,
    solution_to_result,
    write_solution,
)
from .MILP.mlsp_model import solve_instance
from .solvers import SOLVER_CHOICES, get_solver_display_name, solver_from_index

logger = logging.getLogger(__name__)


def output_filename(solver_choice, filename):
    """Report file name derived from the instance file name"""
    return f"{get_solver_display_name(solver_choice)}-Sol-{os.path.basename(filename)}"


def instance_name(filename):
    return os.path.splitext(os.path.basename(filename))[0]


def solve_file(filename, solver_choice, time_limit=DEFAULT_TIME_LIMIT,
               data_dir=DATA_DIR, output_dir=OUTPUT_DIR, results_dir=RESULTS_DIR, silent=False):
    """
    Solve one instance file with one backend, write the report and update the json summary.

    Returns:
        the Solution

    Raises:
        InputFormatError: the instance cannot be read
        SolverError: the backend gave no solution (the json summary records the failure)
    """
    instance = read_instance(os.path.join(data_dir, filename))
    solver_name = get_solver_display_name(solver_choice)

    start = time.time()
    try:
        solution = solve_instance(instance, solver_choice, time_limit=time_limit)
    except SolverError:
        save_solution_to_json(instance_name(filename), {solver_name: failed_result(time.time() - start)},
                              output_dir=results_dir, silent=silent)
        raise

    write_solution(solution, os.path.join(output_dir, output_filename(solver_choice, filename)))
    save_solution_to_json(instance_name(filename), {solver_name: solution_to_result(solution)},
                          output_dir=results_dir, silent=silent)
    return solution


def solve_single_solver(filename, solver_index, time_limit, data_dir, output_dir, results_dir):
    solver_choice = solver_from_index(solver_index)
    solver_name = get_solver_display_name(solver_choice)
    print(f"The solution is outputted to file: {output_filename(solver_choice, filename)}")

    solution = solve_file(filename, solver_choice, time_limit, data_dir, output_dir, results_dir)

    print("Everything worked fine.")
    print(f"Model: {solver_name}")
    print(f"Objective: {solution.objective}, Optimal: {solution.optimal}")


def solve_all_solvers(filename, time_limit, data_dir, output_dir, results_dir):
    """
    Solve one instance with every backend; a failing backend does not stop the others.
    """
    success_count = 0
    for solver_choice in SOLVER_CHOICES:
        solver_name = get_solver_display_name(solver_choice)
        try:
            solution = solve_file(filename, solver_choice, time_limit, data_dir, output_dir,
                                  results_dir, silent=True)
        except SolverError as e:
            logger.error(f"{solver_name}: {e}")
            print(f"No solution found. Model: {solver_name}")
            continue
        success_count += 1
        print(f"Model: {solver_name}  Objective: {solution.objective}, Optimal: {solution.optimal}")

    print(f"Instance {filename} completed. {success_count}/{len(SOLVER_CHOICES)} solvers found solutions.")
    return success_count


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="MILP solver for the Multi-League Sports Scheduling Problem",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  mlsp-solve -i 4-2-5-A.txt                 # Solve data/4-2-5-A.txt with CBC
  mlsp-solve -i 4-2-5-A.txt -solver 4       # Solve with z3
  mlsp-solve -i 4-2-5-A.txt -a              # Solve with all solvers

Available solvers:
  1: CBC (PULP_CBC_CMD)
  2: SCIP (SCIP_PY)
  3: HiGHS (HiGHS)
  4: Z3 (z3 Optimize)
        """
    )
    parser.add_argument('-i', '--instance', help='Instance file name inside the data directory')
    parser.add_argument('-solver', '--solver', type=int, default=1,
                        help='Solver choice (1: CBC, 2: SCIP, 3: HiGHS, 4: Z3)')
    parser.add_argument('-a', '--all', action='store_true', help='Solve the instance with all solvers')
    parser.add_argument('-t', '--time-limit', type=int, default=DEFAULT_TIME_LIMIT,
                        help=f'Time limit in seconds (default: {DEFAULT_TIME_LIMIT})')
    parser.add_argument('--data-dir', default=DATA_DIR, help='Directory holding the instances')
    parser.add_argument('--output-dir', default=OUTPUT_DIR, help='Directory for the solution reports')
    parser.add_argument('--results-dir', default=RESULTS_DIR, help='Directory for the json summaries')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s: %(message)s')

    filename = args.instance
    if filename is None:
        print("From what file should the data be read?")
        filename = input().strip()

    try:
        if args.all:
            solve_all_solvers(filename, args.time_limit, args.data_dir, args.output_dir, args.results_dir)
        else:
            solve_single_solver(filename, args.solver, args.time_limit, args.data_dir,
                                args.output_dir, args.results_dir)
    except (MLSPError, ValueError) as e:
        logger.error(str(e))
        print("No solution found.")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
