"""
Backend independent optimizer contract.

A model is declared with named variables, one linear objective to minimize and
linear constraints whose coefficients map variable names to numbers. Backends
live in mlsp.MILP (PuLP) and mlsp.SMT (z3).
"""
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum


class VarType(Enum):
    BINARY = "Binary"
    INTEGER = "Integer"
    CONTINUOUS = "Continuous"


class SolveStatus(Enum):
    OPTIMAL = "Optimal"
    FEASIBLE = "Feasible"           # stopped early with an incumbent
    INFEASIBLE = "Infeasible"
    UNBOUNDED = "Unbounded"
    TIME_LIMIT = "Time limit"       # stopped early without an incumbent
    CANCELLED = "Cancelled"
    ERROR = "Error"

    @property
    def has_solution(self):
        return self in (SolveStatus.OPTIMAL, SolveStatus.FEASIBLE)


SENSES = ("==", ">=", "<=")


@dataclass(frozen=True)
class SolveResult:
    status: SolveStatus
    objective: float = None
    values: dict = field(default_factory=dict)
    message: str = ""


class CancellationToken:
    """
    Flag that asks a running solve to stop.

    cancel() may be called from another thread; backends register a callback
    to interrupt their native solver.
    """

    def __init__(self):
        self._event = threading.Event()
        self._callbacks = []
        self._lock = threading.Lock()

    @property
    def cancelled(self):
        return self._event.is_set()

    def cancel(self):
        with self._lock:
            self._event.set()
            callbacks = list(self._callbacks)
        for callback in callbacks:
            callback()

    def register(self, callback):
        with self._lock:
            self._callbacks.append(callback)

    def unregister(self, callback):
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)


class Optimizer(ABC):
    """
    One optimizer session. Use it as a context manager so native resources
    are released on every exit path.
    """
    name = "optimizer"

    def __init__(self):
        self.var_types = {}

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def add_variable(self, name, var_type, low=0, up=None):
        if name in self.var_types:
            raise ValueError(f"Variable {name} declared twice")
        if var_type == VarType.BINARY:
            low, up = 0, 1
        self.var_types[name] = var_type
        self._add_variable(name, var_type, low, up)
        return name

    def minimize(self, coefficients):
        self._check_names(coefficients)
        self._minimize(coefficients)

    def add_constraint(self, coefficients, sense, rhs, name=None):
        if sense not in SENSES:
            raise ValueError(f"Unknown constraint sense {sense!r}")
        self._check_names(coefficients)
        self._add_constraint(coefficients, sense, rhs, name)

    def _check_names(self, coefficients):
        for var in coefficients:
            if var not in self.var_types:
                raise KeyError(f"Unknown variable {var}")

    @abstractmethod
    def _add_variable(self, name, var_type, low, up):
        ...

    @abstractmethod
    def _minimize(self, coefficients):
        ...

    @abstractmethod
    def _add_constraint(self, coefficients, sense, rhs, name):
        ...

    @abstractmethod
    def solve(self, time_limit=None, cancel_token=None):
        """
        Run the solver once and block until it stops.

        Args:
            time_limit: seconds, None for no limit
            cancel_token: optional CancellationToken

        Returns:
            SolveResult
        """

    def close(self):
        pass
