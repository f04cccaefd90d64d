"""
Exceptions raised by the MLSP tools.

Every failure is raised where it is detected and reaches the caller as one
of the classes below; nothing is printed and skipped.
"""


class MLSPError(Exception):
    """Base class for all MLSP errors"""


class InputFormatError(MLSPError):
    """A malformed or missing instance file, HAPset file or Instance"""


class GenerationConstraintError(MLSPError):
    """The generator parameters cannot produce a valid instance"""


class UnsupportedLeagueSizeError(GenerationConstraintError):
    """There is no HAPset for the requested league size"""

    def __init__(self, league_size, supported=()):
        self.league_size = league_size
        self.supported = tuple(supported)
        sizes = ", ".join(str(s) for s in self.supported)
        super().__init__(f"No HAPset for league size {league_size} (supported: {sizes})")


class SolverError(MLSPError):
    """The optimizer did not return a usable solution"""

    def __init__(self, status, message=None, backend=None):
        self.status = status
        self.backend = backend
        text = f"Solver finished with status {status}"
        if backend:
            text += f" ({backend})"
        if message:
            text += f": {message}"
        super().__init__(text)
