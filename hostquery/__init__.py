"""Asynchronous host name to address resolution."""

from .backend import (
    AddressRecord,
    HostHandle,
    HostInfoType,
    ResolverBackend,
    SystemResolverBackend,
)
from .config import HostQueryConfig, load_config
from .dns import resolve
from .errors import (
    ErrorDomain,
    HostQueryError,
    IllegalStateError,
    NetworkError,
    NetworkServiceError,
    OSStatusError,
    POSIXError,
    StreamError,
    UnknownHostError,
    UserCancelledError,
    translate_stream_error,
)
from .executor import run_in_executor, shutdown_executor
from .query import HostAddressQuery, HostAddressQueryDelegate, QueryState

__all__ = [
    "AddressRecord",
    "HostHandle",
    "HostInfoType",
    "ResolverBackend",
    "SystemResolverBackend",
    "HostQueryConfig",
    "load_config",
    "resolve",
    "ErrorDomain",
    "HostQueryError",
    "IllegalStateError",
    "NetworkError",
    "NetworkServiceError",
    "OSStatusError",
    "POSIXError",
    "StreamError",
    "UnknownHostError",
    "UserCancelledError",
    "translate_stream_error",
    "run_in_executor",
    "shutdown_executor",
    "HostAddressQuery",
    "HostAddressQueryDelegate",
    "QueryState",
]
