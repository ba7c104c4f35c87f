"""Service base class: a unit of work that always answers with a Result.

Subclasses take their inputs in ``__init__`` and do the work in ``run``::

    class ValidateAge(Service):
        def __init__(self, age: int | None) -> None:
            self.age = age

        def run(self) -> Result:
            if self.age is None:
                return self.failure("No age given", "missing")
            return self.check(lambda: self.age >= 18, "too_young", value=self.age)

    ValidateAge.call(21).on_success(lambda age, _tag: admit(age))
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from resultflow.errors import (
    HINTS,
    ContractViolationError,
    ServiceNotImplementedError,
)
from resultflow.result import Failure, Success, is_result

if TYPE_CHECKING:
    from collections.abc import Callable

    from resultflow.result import Result, Tag

log = logging.getLogger(__name__)

_UNSET: Any = object()


class Service:
    """Base class for services returning ``Success`` or ``Failure``."""

    @classmethod
    def call(cls, *args: Any, **kwargs: Any) -> Result:
        """Instantiate the service with the given arguments and run it.

        Raises:
            ContractViolationError: ``run`` returned something other than a
                Result.
            ServiceNotImplementedError: The subclass never overrode ``run``.
        """
        result = cls(*args, **kwargs).run()
        if not is_result(result):
            raise ContractViolationError(
                "Services must return a Result",
                returned=result,
                hint=HINTS["service_contract"],
            )
        log.debug("%s.call -> %s", cls.__name__, result)
        return result

    def run(self) -> Result:
        """Do the service's work. Must be overridden."""
        raise ServiceNotImplementedError(
            f"Services must implement run() ({type(self).__name__})"
        )

    # --- Factories for use inside run() ---

    def success(self, value: Any = None, *types: Tag) -> Success[Any]:
        """Build a Success carrying ``value`` and ``types``."""
        return Success(value, types)

    def failure(self, error: Any = None, *types: Tag) -> Failure[Any]:
        """Build a Failure carrying ``error`` and ``types``."""
        return Failure(error, types)

    def result(self, condition: object, value: Any = None, *types: Tag) -> Result:
        """Return a Success when ``condition`` is truthy, else a Failure.

        Both variants carry the same ``value`` and ``types``.
        """
        return Success(value, types) if condition else Failure(value, types)

    def check(
        self, predicate: Callable[[], Any], *types: Tag, value: Any = _UNSET
    ) -> Result:
        """Evaluate ``predicate`` and wrap its truthiness in a Result.

        The payload is ``value`` when given, otherwise whatever the predicate
        returned.
        """
        outcome = predicate()
        payload = outcome if value is _UNSET else value
        return self.result(outcome, payload, *types)

    def attempt(
        self,
        fn: Callable[[], Any],
        *types: Tag,
        catch: type[BaseException] | tuple[type[BaseException], ...] = Exception,
    ) -> Result:
        """Run ``fn``; an exception matching ``catch`` becomes a Failure.

        Exceptions outside ``catch`` propagate unchanged.
        """
        try:
            return Success(fn(), types)
        except catch as exc:
            log.debug("%s.attempt caught %r", type(self).__name__, exc)
            return Failure(exc, types)
