import logging

from pulp import (
    HiGHS,
    LpMinimize,
    LpProblem,
    LpStatus,
    LpStatusInfeasible,
    LpStatusNotSolved,
    LpStatusOptimal,
    LpStatusUnbounded,
    LpVariable,
    PULP_CBC_CMD,
    PulpSolverError,
    SCIP_PY,
    constants,
    lpSum,
    value,
)

from ..optimizer import Optimizer, SolveResult, SolveStatus, VarType

logger = logging.getLogger(__name__)

#single core sequential solvers, built on demand so a missing
#optional backend (pyscipopt, highspy) only matters when it is chosen
SOLVERS = {
    "PULP_CBC_CMD": lambda time_limit: PULP_CBC_CMD(msg=False, threads=1, timeLimit=time_limit),
    "SCIP_PY": lambda time_limit: SCIP_PY(msg=False, timeLimit=time_limit),
    "HiGHS": lambda time_limit: HiGHS(msg=False, threads=1, timeLimit=time_limit),
}

CATEGORIES = {
    VarType.BINARY: "Binary",
    VarType.INTEGER: "Integer",
    VarType.CONTINUOUS: "Continuous",
}


class PulpOptimizer(Optimizer):
    """
    Optimizer session backed by a PuLP LpProblem and one of the PuLP solvers.
    """

    def __init__(self, solver_choice="PULP_CBC_CMD", problem_name="MLSP"):
        super().__init__()
        if solver_choice not in SOLVERS:
            raise ValueError(f"Unknown PuLP solver {solver_choice}, choose from {sorted(SOLVERS)}")
        self.solver_choice = solver_choice
        self.name = solver_choice
        self.model = LpProblem(problem_name, LpMinimize)
        self.variables = {}

    def _add_variable(self, name, var_type, low, up):
        self.variables[name] = LpVariable(name, lowBound=low, upBound=up, cat=CATEGORIES[var_type])

    def _expr(self, coefficients):
        return lpSum(coef * self.variables[var] for var, coef in coefficients.items() if coef)

    def _minimize(self, coefficients):
        self.model.setObjective(self._expr(coefficients))

    def _add_constraint(self, coefficients, sense, rhs, name):
        expr = self._expr(coefficients)
        if sense == "==":
            self.model += (expr == rhs), name
        elif sense == ">=":
            self.model += (expr >= rhs), name
        else:
            self.model += (expr <= rhs), name

    def solve(self, time_limit=None, cancel_token=None):
        if cancel_token is not None and cancel_token.cancelled:
            return SolveResult(SolveStatus.CANCELLED, message="cancelled before the solve started")

        solver = SOLVERS[self.solver_choice](time_limit)
        try:
            self.model.solve(solver)
        except PulpSolverError as e:
            logger.error(f"{self.solver_choice} failed: {e}")
            return SolveResult(SolveStatus.ERROR, message=str(e))

        # the external process cannot be interrupted, the token is honoured afterwards
        if cancel_token is not None and cancel_token.cancelled:
            return SolveResult(SolveStatus.CANCELLED, message="cancelled while solving")

        status = self._status()
        logger.debug(f"{self.solver_choice} returned {LpStatus[self.model.status]} -> {status.value}")
        if not status.has_solution:
            return SolveResult(status, message=LpStatus[self.model.status])

        values = {name: var.varValue for name, var in self.variables.items()}
        return SolveResult(status, objective=value(self.model.objective), values=values)

    def _status(self):
        status = self.model.status
        if status == LpStatusOptimal:
            if self.model.sol_status == constants.LpSolutionIntegerFeasible:
                return SolveStatus.FEASIBLE
            return SolveStatus.OPTIMAL
        if status == LpStatusInfeasible:
            return SolveStatus.INFEASIBLE
        if status == LpStatusUnbounded:
            return SolveStatus.UNBOUNDED
        if status == LpStatusNotSolved:
            #stopped on the time limit, values are read back even without an incumbent
            if self.model.sol_status == constants.LpSolutionIntegerFeasible:
                return SolveStatus.FEASIBLE
            return SolveStatus.TIME_LIMIT
        return SolveStatus.ERROR

    def close(self):
        self.model = None
        self.variables = {}
