from __future__ import annotations


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InsufficientBalanceError(DomainError):
    """Raised when a leave or personal holiday request exceeds the remaining balance."""

    def __init__(self, message: str, *, requested: float, available: float):
        super().__init__(message)
        self.requested = requested
        self.available = available

    @property
    def shortfall(self) -> float:
        return max(self.requested - self.available, 0)


class ConflictError(DomainError):
    """Raised on duplicate keys or overlapping date ranges."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""


class ComputationSkipped(DomainError):
    """Per-employee payroll failure. Collected by the generator, not propagated."""

    def __init__(self, *, employee_id: int, employee_name: str, reason: str):
        super().__init__(f"{employee_name}: {reason}")
        self.employee_id = employee_id
        self.employee_name = employee_name
        self.reason = reason

    def as_dict(self) -> dict:
        return {"employee_id": self.employee_id, "employee": self.employee_name, "error": self.reason}
