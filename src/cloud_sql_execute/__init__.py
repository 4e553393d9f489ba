"""Execute SQL statements on Cloud SQL instances through the Admin API."""

__version__ = "1.0.0"

from .admin_client import CloudSQLAdmin
from .cli import main
from .environment import ENV_VARS, build_environment, get_env_bool, get_env_int, get_env_value
from .errors import (
    CloudSqlExecuteError,
    ConfigurationError,
    MissingUserError,
    MultipleAuthMethodsError,
    ProjectResolutionError,
    TransportError,
)
from .formatter import format_response, log_metadata
from .options import (
    AuthMethod,
    AuthMode,
    RawOptions,
    ResolvedOptions,
    merge_options,
    validate_auth,
)
from .request_builder import MASK, build_payload, redact_payload

__all__ = [
    "AuthMethod",
    "AuthMode",
    "CloudSQLAdmin",
    "CloudSqlExecuteError",
    "ConfigurationError",
    "ENV_VARS",
    "MASK",
    "MissingUserError",
    "MultipleAuthMethodsError",
    "ProjectResolutionError",
    "RawOptions",
    "ResolvedOptions",
    "TransportError",
    "build_environment",
    "build_payload",
    "format_response",
    "get_env_bool",
    "get_env_int",
    "get_env_value",
    "log_metadata",
    "main",
    "merge_options",
    "redact_payload",
    "validate_auth",
]
