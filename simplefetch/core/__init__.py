"""Core primitives of the raw-socket request engine."""

from .cache import FileCache, ResponseCache
from .dispatcher import Dispatcher
from .errors import ConnectError, FetchError, InvalidURL, TLSError, TransferError
from .executor import FetchOptions, RequestExecutor, RequestOutcome
from .message import HttpRequestSpec, build_request, prepare_post_body
from .response import RawResponse, parse_response
from .transport import SocketTransport, Transport
from .url import ParsedURL, parse_url

__all__ = [
    "ConnectError",
    "Dispatcher",
    "FetchError",
    "FetchOptions",
    "FileCache",
    "HttpRequestSpec",
    "InvalidURL",
    "ParsedURL",
    "RawResponse",
    "RequestExecutor",
    "RequestOutcome",
    "ResponseCache",
    "SocketTransport",
    "TLSError",
    "TransferError",
    "Transport",
    "build_request",
    "parse_response",
    "parse_url",
    "prepare_post_body",
]
