"""resultflow: expected failure as a value, not an exception.

Public API:
    - Success / Failure: the two Result variants
    - Result: type alias for ``Success | Failure``
    - Service: base class whose ``call`` always returns a Result
    - resolve_config / config_scope: runtime configuration
"""

from __future__ import annotations

import logging

from resultflow.config import (
    FrozenConfig,
    Settings,
    config_scope,
    get_config,
    reset_config,
    resolve_config,
)
from resultflow.errors import (
    ConfigurationError,
    ContractViolationError,
    ResultFlowError,
    ServiceNotImplementedError,
    UnwrapOnFailureError,
    UnwrapOnSuccessError,
)
from resultflow.result import Failure, Result, Success, is_result
from resultflow.service import Service

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("resultflow")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("resultflow").addHandler(logging.NullHandler())

__all__ = [  # noqa: RUF022
    # Results
    "Success",
    "Failure",
    "Result",
    "is_result",
    # Services
    "Service",
    # Errors
    "ResultFlowError",
    "UnwrapOnFailureError",
    "UnwrapOnSuccessError",
    "ContractViolationError",
    "ServiceNotImplementedError",
    "ConfigurationError",
    # Configuration
    "Settings",
    "FrozenConfig",
    "resolve_config",
    "get_config",
    "reset_config",
    "config_scope",
]
