from __future__ import annotations


class UbvffError(RuntimeError):
    """Base class for every decode/assembly failure."""


class TruncatedStreamError(UbvffError):
    pass


class FormatValidationError(UbvffError):
    pass


class NamingError(UbvffError):
    pass


class NameTooLongError(NamingError):
    pass


class EmitterStateError(UbvffError):
    def __init__(self, operation: str, state) -> None:
        super().__init__(f"state error : in {operation}: {state.name}")
        self.operation = operation
        self.state = state


class AssemblyRejected(FormatValidationError):
    def __init__(self, reason: str, path: str) -> None:
        super().__init__(f"skip.{reason}: {path}")
        self.reason = reason
        self.path = path
