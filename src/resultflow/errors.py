"""Exception hierarchy for resultflow.

Only local-contract violations are raised. Expected domain failures travel as
the ``error`` payload of a :class:`~resultflow.result.Failure` and are never
thrown.
"""

from __future__ import annotations

from typing import Any


class ResultFlowError(Exception):
    """Base exception for all resultflow errors."""

    def __init__(self, message: str | None, *, hint: str | None = None) -> None:
        """Initialize with an optional actionable hint."""
        self.hint = hint
        super().__init__(str(message) if message is not None else "None")

    def __str__(self) -> str:
        """Return the message followed by the hint, when present."""
        msg = super().__str__()
        return f"{msg}. {self.hint}" if self.hint else msg


class UnwrapOnFailureError(ResultFlowError):
    """``unwrap_value()`` was called on a Failure."""

    def __init__(
        self,
        message: str = "Failure objects do not have value",
        *,
        error: Any = None,
        types: tuple[Any, ...] = (),
        hint: str | None = None,
    ) -> None:
        self.error = error
        self.types = types
        super().__init__(message, hint=hint)


class UnwrapOnSuccessError(ResultFlowError):
    """``unwrap_error()`` was called on a Success."""


class ContractViolationError(ResultFlowError):
    """Something that must produce a Result returned another value.

    Raised at the boundary where the value was produced: ``Service.call`` for
    a service's ``run`` and ``and_then``/``catch`` for chaining callbacks.
    """

    def __init__(
        self, message: str, *, returned: Any = None, hint: str | None = None
    ) -> None:
        self.returned = returned
        super().__init__(message, hint=hint)


class ServiceNotImplementedError(ResultFlowError, NotImplementedError):
    """A Service subclass did not override ``run``."""


class ConfigurationError(ResultFlowError):
    """Invalid or unresolvable configuration."""


HINTS = {
    "unwrap_on_failure": (
        "Check is_success() first, use value_or(default), or branch with "
        "on_success()/on_failure()"
    ),
    "unwrap_on_success": "Check is_failure() before calling unwrap_error()",
    "chain_contract": (
        "Chaining callbacks must return Success(...) or Failure(...); "
        "pass strict=False to allow plain values"
    ),
    "service_contract": "Return self.success(...) or self.failure(...) from run()",
}
