"""
Registry of optimizer backends, indexed like the command line -solver flag.
"""
from .MILP.pulp_optimizer import PulpOptimizer
from .SMT.z3_optimizer import Z3Optimizer

SOLVER_CHOICES = ["PULP_CBC_CMD", "SCIP_PY", "HiGHS", "Z3"]

# Map solver names to short names
SOLVER_MAP = {
    "PULP_CBC_CMD": "CBC",
    "SCIP_PY": "SCIP",
    "HiGHS": "HiGHS",
    "Z3": "Z3",
}


def get_solver_display_name(solver_choice):
    return SOLVER_MAP.get(solver_choice, solver_choice)


def solver_from_index(solver_index):
    """Solver name for a 1-based index (1: CBC, 2: SCIP, 3: HiGHS, 4: Z3)"""
    if solver_index < 1 or solver_index > len(SOLVER_CHOICES):
        raise ValueError(f"Invalid solver index {solver_index}. Must be 1-{len(SOLVER_CHOICES)}")
    return SOLVER_CHOICES[solver_index - 1]


def optimizer_factory(solver_choice="PULP_CBC_CMD"):
    """
    Callable that opens a new optimizer session for the chosen backend.
    """
    if solver_choice == "Z3":
        return Z3Optimizer
    if solver_choice not in SOLVER_CHOICES:
        raise ValueError(f"Unknown solver {solver_choice}, choose from {SOLVER_CHOICES}")
    return lambda: PulpOptimizer(solver_choice)
