"""Configuration schema and resolution.

Precedence is defaults < ``.env`` file < ``RESULTFLOW_*`` environment
variables < explicit overrides. Validation happens once, at the pydantic
``Settings`` wall; everything downstream receives an immutable
``FrozenConfig``.
"""

from __future__ import annotations

from contextlib import contextmanager
import contextvars
from dataclasses import dataclass
from functools import cache
import logging
import os
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from resultflow.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping

log = logging.getLogger(__name__)

ENV_PREFIX = "RESULTFLOW_"

_DOTENV_LOADED = False


class Settings(BaseModel):
    """Single source of truth for configuration fields and defaults."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    #: Reject chaining callbacks that return something other than a Result.
    strict_chaining: bool = Field(default=True)
    #: Emit DEBUG records whenever a reactive callback fires.
    log_dispatch: bool = Field(default=False)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable runtime configuration."""

    strict_chaining: bool = True
    log_dispatch: bool = False


_AMBIENT: contextvars.ContextVar[FrozenConfig | None] = contextvars.ContextVar(
    "resultflow_ambient_config", default=None
)


def _load_dotenv_once() -> None:
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    load_dotenv(override=False)
    _DOTENV_LOADED = True


def load_env() -> dict[str, str]:
    """Read ``RESULTFLOW_*`` variables for fields known to ``Settings``.

    Values stay as strings; pydantic coerces them (``"0"``, ``"false"``,
    ``"no"`` and ``"off"`` are all false).
    """
    out: dict[str, str] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            out[field_name] = value
    return out


def resolve_config(overrides: Mapping[str, Any] | None = None) -> FrozenConfig:
    """Resolve configuration from all sources into a ``FrozenConfig``.

    Raises:
        ConfigurationError: If a value fails validation or an override names
            an unknown field.
    """
    _load_dotenv_once()
    merged: dict[str, Any] = {**load_env(), **(overrides or {})}
    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(part) for part in err.get("loc", ())) or "<root>"
        raise ConfigurationError(
            f"Configuration validation failed for {field!r}: {err.get('msg')}",
            hint=f"Check {ENV_PREFIX}{field.upper()} or the override passed for it",
        ) from e
    return FrozenConfig(**settings.model_dump())


@cache
def _resolved_default() -> FrozenConfig:
    cfg = resolve_config()
    log.debug("Resolved configuration: %s", cfg)
    return cfg


def get_config() -> FrozenConfig:
    """Return the active configuration.

    The innermost ``config_scope`` wins; otherwise the process-wide
    configuration is resolved once and cached.
    """
    ambient = _AMBIENT.get()
    if ambient is not None:
        return ambient
    return _resolved_default()


def reset_config() -> None:
    """Forget the cached process-wide configuration."""
    global _DOTENV_LOADED
    _resolved_default.cache_clear()
    _DOTENV_LOADED = False


@contextmanager
def config_scope(
    cfg_or_overrides: Mapping[str, Any] | FrozenConfig | None = None,
    **overrides: Any,
) -> Generator[FrozenConfig]:
    """Run a block with a specific configuration.

    Safe across threads and asyncio tasks since the scope lives in a
    ``ContextVar``.

    Example:
        with config_scope(strict_chaining=False):
            Success(1).and_then(lambda v, _types: v + 1)  # returns 2
    """
    if isinstance(cfg_or_overrides, FrozenConfig):
        cfg = cfg_or_overrides
    else:
        cfg = resolve_config({**(cfg_or_overrides or {}), **overrides})
    token = _AMBIENT.set(cfg)
    try:
        yield cfg
    finally:
        _AMBIENT.reset(token)
