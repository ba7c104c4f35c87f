"""Success and Failure: the two variants of a Result.

A Result is an in-process control-flow value. Expected failure travels as the
``error`` payload of a ``Failure`` instead of an exception, and callers branch
on it with two families of operations:

- Reactive callbacks (``on_success`` / ``on_failure``) run side effects and
  return the same instance. At most one reactive callback fires per
  instance, so a chain of them reads as a prioritized match list::

      (
          UpdateUser.call(user=user, name=name)
          .on_success(lambda v, _tag: render(v), "created")
          .on_success(lambda v, _tag: render_ok(v))
          .on_failure(lambda e, tag: report(e, tag), "not_found", "forbidden")
          .on_failure(lambda e, _tag: report_unknown(e))
      )

- Chaining (``and_then`` / ``catch``) replaces the Result with whatever the
  callback returns. A Failure skips every ``and_then`` until a ``catch``
  recovers it::

      fetch(1).and_then(parse).and_then(store).catch(fallback)

Types (tags) are optional labels used to route reactive callbacks without
looking at the payload.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable
import dataclasses
import logging
import typing
from typing import TYPE_CHECKING, Any, ClassVar, Self

from resultflow._handled import HandledCell
from resultflow.config import get_config
from resultflow.errors import (
    HINTS,
    ContractViolationError,
    UnwrapOnFailureError,
    UnwrapOnSuccessError,
)

if TYPE_CHECKING:
    from collections.abc import Callable

log = logging.getLogger(__name__)

T = typing.TypeVar("T")
E = typing.TypeVar("E")

Tag = Hashable


def _normalize_types(types: Iterable[Tag] | Tag | None) -> tuple[Tag, ...]:
    # A bare str is one tag, not a sequence of characters.
    if types is None:
        return ()
    if isinstance(types, (str, bytes)) or not isinstance(types, Iterable):
        return (types,)
    return tuple(types)


class _ResultBase:
    """Behaviour shared by both variants: tag matching and reactive dispatch."""

    __slots__ = ()

    _SUCCESS: ClassVar[bool]
    types: tuple[Tag, ...]
    _handled: HandledCell

    def is_success(self) -> bool:
        """Return True for Success."""
        return self._SUCCESS

    def is_failure(self) -> bool:
        """Return True for Failure."""
        return not self._SUCCESS

    @property
    def handled(self) -> bool:
        """Whether a reactive callback already fired on this instance."""
        return self._handled.is_set

    if TYPE_CHECKING:

        def _payload(self) -> Any: ...

    def matched_types(
        self, target_types: tuple[Tag, ...], *, unhandled: bool = False
    ) -> tuple[Tag, ...] | None:
        """Return the tags selected by ``target_types``, or None on no match.

        An empty ``target_types`` matches anything and selects this result's
        own types. Otherwise the selection is the intersection, in the order
        given by ``target_types``. ``unhandled=True`` forces a match even when
        the intersection is empty. Tags are compared with ``==``, so
        unhashable tags match like any other.
        """
        if not target_types:
            return self.types
        common: list[Tag] = []
        for tag in target_types:
            if tag in self.types and tag not in common:
                common.append(tag)
        if common or unhandled:
            return tuple(common)
        return None

    def _dispatch(
        self,
        callback: Callable[[Any, Tag | None], object],
        target_types: tuple[Tag, ...],
        unhandled: bool,
    ) -> None:
        if self._handled.is_set:
            return
        matched = self.matched_types(target_types, unhandled=unhandled)
        if matched is None:
            return
        log_dispatch = get_config().log_dispatch
        if not self._handled.claim():
            return
        tag = matched[0] if matched else None
        if log_dispatch:
            log.debug("Dispatching %s to %r (tag=%r)", self, callback, tag)
        callback(self._payload(), tag)

    def on_success(
        self,
        callback: Callable[[Any, Tag | None], object],
        /,
        *target_types: Tag,
        unhandled: bool = False,
    ) -> Self:
        """Run ``callback(value, tag)`` if this is an unhandled, matching Success.

        Returns:
            This same instance, so further reactive calls can be chained.
        """
        if self._SUCCESS:
            self._dispatch(callback, target_types, unhandled)
        return self

    def on_failure(
        self,
        callback: Callable[[Any, Tag | None], object],
        /,
        *target_types: Tag,
        unhandled: bool = False,
    ) -> Self:
        """Run ``callback(error, tag)`` if this is an unhandled, matching Failure.

        Returns:
            This same instance, so further reactive calls can be chained.
        """
        if not self._SUCCESS:
            self._dispatch(callback, target_types, unhandled)
        return self

    def fold(
        self,
        on_success: Callable[[Any, tuple[Tag, ...]], T],
        on_failure: Callable[[Any, tuple[Tag, ...]], T],
    ) -> T:
        """Collapse the result by calling exactly one of the two functions."""
        if self._SUCCESS:
            return on_success(self._payload(), self.types)
        return on_failure(self._payload(), self.types)

    def __str__(self) -> str:
        name = type(self).__name__
        payload = self._payload()
        return f"{name}()" if payload is None else f"{name}({payload!r})"


def _resolve_strict(strict: bool | None) -> bool:
    return get_config().strict_chaining if strict is None else strict


def _ensure_result(returned: Any, *, step: str, strict: bool) -> Any:
    if strict and not is_result(returned):
        raise ContractViolationError(
            f"{step}() callback must return a Result, "
            f"got {type(returned).__name__}: {returned!r}",
            returned=returned,
            hint=HINTS["chain_contract"],
        )
    return returned


@dataclasses.dataclass(frozen=True, slots=True)
class Success[T](_ResultBase):
    """A successful operation carrying ``value``."""

    _SUCCESS: ClassVar[bool] = True

    value: T = None  # type: ignore[assignment]
    types: tuple[Tag, ...] = ()
    _handled: HandledCell = dataclasses.field(
        default_factory=HandledCell, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "types", _normalize_types(self.types))

    @property
    def error(self) -> None:
        """Successful operations have no error."""
        return None

    def _payload(self) -> T:
        return self.value

    def unwrap_value(self) -> T:
        """Return the value."""
        return self.value

    def unwrap_error(self) -> typing.NoReturn:
        """Raise: a Success has no error."""
        raise UnwrapOnSuccessError(
            f"Success objects do not have error (got {self})",
            hint=HINTS["unwrap_on_success"],
        )

    def value_or(self, default: Any) -> T:  # noqa: ARG002
        """Return the value; ``default`` is ignored."""
        return self.value

    def and_then[U, F](
        self,
        callback: Callable[[T, tuple[Tag, ...]], Success[U] | Failure[F]],
        /,
        *,
        strict: bool | None = None,
    ) -> Success[U] | Failure[F]:
        """Return ``callback(value, types)``.

        Raises:
            ContractViolationError: The callback returned a non-Result while
                strict chaining is enabled.
            ConfigurationError: ``strict`` was left unset and the active
                configuration is invalid. The callback is not called.
        """
        strict = _resolve_strict(strict)
        return _ensure_result(
            callback(self.value, self.types), step="and_then", strict=strict
        )

    def catch(
        self,
        callback: Callable[[Any, tuple[Tag, ...]], Any],  # noqa: ARG002
        /,
        *,
        strict: bool | None = None,  # noqa: ARG002
    ) -> Self:
        """Nothing to recover; returns this instance."""
        return self

    or_else = catch


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[E](_ResultBase):
    """A failed operation carrying ``error``."""

    _SUCCESS: ClassVar[bool] = False

    error: E = None  # type: ignore[assignment]
    types: tuple[Tag, ...] = ()
    _handled: HandledCell = dataclasses.field(
        default_factory=HandledCell, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "types", _normalize_types(self.types))

    @property
    def value(self) -> None:
        """Failed operations have no value."""
        return None

    def _payload(self) -> E:
        return self.error

    def unwrap_value(self) -> typing.NoReturn:
        """Raise: a Failure has no value."""
        raise UnwrapOnFailureError(
            f"Failure objects do not have value (got {self})",
            error=self.error,
            types=self.types,
            hint=HINTS["unwrap_on_failure"],
        )

    def unwrap_error(self) -> E:
        """Return the error."""
        return self.error

    def value_or[D](self, default: D) -> D:
        """Return ``default``."""
        return default

    def and_then(
        self,
        callback: Callable[[Any, tuple[Tag, ...]], Any],  # noqa: ARG002
        /,
        *,
        strict: bool | None = None,  # noqa: ARG002
    ) -> Self:
        """Short-circuit: returns this instance without calling ``callback``."""
        return self

    def catch[U, F](
        self,
        callback: Callable[[E, tuple[Tag, ...]], Success[U] | Failure[F]],
        /,
        *,
        strict: bool | None = None,
    ) -> Success[U] | Failure[F]:
        """Return ``callback(error, types)``.

        Raises:
            ContractViolationError: The callback returned a non-Result while
                strict chaining is enabled.
            ConfigurationError: ``strict`` was left unset and the active
                configuration is invalid. The callback is not called.
        """
        strict = _resolve_strict(strict)
        return _ensure_result(
            callback(self.error, self.types), step="catch", strict=strict
        )

    or_else = catch


Result = Success[T] | Failure[E]

RESULT_TYPES: tuple[type, ...] = (Success, Failure)


def is_result(obj: object) -> bool:
    """Return True for ``Success`` and ``Failure`` instances."""
    return isinstance(obj, RESULT_TYPES)
