import logging
from fractions import Fraction

from z3 import (
    Context,
    Int,
    IntVal,
    Optimize,
    Real,
    RealVal,
    is_int_value,
    is_rational_value,
    sat,
    set_param,
    Z3Exception,
    unsat,
)

from ..optimizer import Optimizer, SolveResult, SolveStatus, VarType

logger = logging.getLogger(__name__)


def _numeral(coef, ctx):
    # keep integer coefficients integral so integer models stay in linear integer arithmetic
    if float(coef).is_integer():
        return int(coef)
    return RealVal(str(Fraction(coef).limit_denominator()), ctx)


def _as_float(val):
    if is_int_value(val):
        return float(val.as_long())
    if is_rational_value(val):
        return float(val.as_fraction())
    return None


class Z3Optimizer(Optimizer):
    """
    Optimizer session backed by z3's Optimize (MaxSMT / OMT engine).

    Every session owns a private z3 Context so it can be interrupted and
    released without touching other sessions.
    """
    name = "Z3"

    def __init__(self):
        super().__init__()
        # using only 1 core
        set_param("parallel.enable", False)
        set_param("parallel.threads.max", 1)
        set_param("sat.threads", 1)

        self.ctx = Context()
        self.solver = Optimize(ctx=self.ctx)
        self.variables = {}
        self.objective = None

    def _add_variable(self, name, var_type, low, up):
        if var_type == VarType.CONTINUOUS:
            var = Real(name, self.ctx)
        else:
            var = Int(name, self.ctx)
        if low is not None:
            self.solver.add(var >= _numeral(low, self.ctx))
        if up is not None:
            self.solver.add(var <= _numeral(up, self.ctx))
        self.variables[name] = var

    def _expr(self, coefficients):
        expr = IntVal(0, self.ctx)
        for var, coef in coefficients.items():
            if coef:
                expr = expr + _numeral(coef, self.ctx) * self.variables[var]
        return expr

    def _minimize(self, coefficients):
        self.objective = self._expr(coefficients)

    def _add_constraint(self, coefficients, sense, rhs, name):
        expr = self._expr(coefficients)
        rhs = _numeral(rhs, self.ctx)
        if sense == "==":
            self.solver.add(expr == rhs)
        elif sense == ">=":
            self.solver.add(expr >= rhs)
        else:
            self.solver.add(expr <= rhs)

    def solve(self, time_limit=None, cancel_token=None):
        if cancel_token is not None and cancel_token.cancelled:
            return SolveResult(SolveStatus.CANCELLED, message="cancelled before the solve started")

        handle = None
        if self.objective is not None:
            handle = self.solver.minimize(self.objective)
        if time_limit is not None:
            self.solver.set("timeout", max(1, int(time_limit * 1000)))

        interrupt = self.ctx.interrupt
        if cancel_token is not None:
            cancel_token.register(interrupt)
        try:
            result_check = self.solver.check()
        finally:
            if cancel_token is not None:
                cancel_token.unregister(interrupt)

        if result_check == sat:
            if handle is not None and "oo" in str(handle.value()):
                return SolveResult(SolveStatus.UNBOUNDED, message=str(handle.value()))
            return self._result(SolveStatus.OPTIMAL)
        if result_check == unsat:
            return SolveResult(SolveStatus.INFEASIBLE)

        reason = self.solver.reason_unknown()
        logger.debug(f"z3 returned unknown: {reason}")
        if cancel_token is not None and cancel_token.cancelled:
            return SolveResult(SolveStatus.CANCELLED, message=reason)
        if "timeout" in reason or "canceled" in reason:
            #best model found so far, if any
            try:
                has_model = len(self.solver.model()) > 0
            except Z3Exception:
                has_model = False
            if has_model:
                return self._result(SolveStatus.FEASIBLE)
            return SolveResult(SolveStatus.TIME_LIMIT, message=reason)
        return SolveResult(SolveStatus.ERROR, message=reason)

    def _result(self, status):
        model = self.solver.model()
        values = {
            name: _as_float(model.eval(var, model_completion=True))
            for name, var in self.variables.items()
        }
        objective = None
        if self.objective is not None:
            objective = _as_float(model.eval(self.objective, model_completion=True))
        return SolveResult(status, objective=objective, values=values)

    def close(self):
        self.solver = None
        self.variables = {}
        self.objective = None
        self.ctx = None
