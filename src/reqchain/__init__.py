"""
reqchain - Async HTTP client built around an interceptor pipeline.

Usage:
    from reqchain import HttpClient, ClientOptions, RetryPolicyInterceptor

    async with HttpClient(
        interceptors=[RetryPolicyInterceptor()],
        options=ClientOptions(max_retry_count=3),
    ) as client:
        user = await client.fetch("https://api.example.com/users/1", response_type=User)
"""

__version__ = "1.0.0"

from .client import HttpClient
from .codecs import Codec, CodecRegistry, FormCodec, JsonCodec, TextCodec
from .errors import (
    Canceled,
    ClientError,
    DecodingError,
    EncodingError,
    HttpFailure,
    MaxRetryCountReached,
    PreparationError,
    ProcessingError,
    ServerError,
    StatusFailure,
    TransportError,
    UnexpectedResponse,
    UnexpectedStatus,
)
from .interceptors import (
    AuthenticationScheme,
    AuthInterceptor,
    HeadersInterceptor,
    RetryPolicyInterceptor,
    TrustProvider,
)
from .logging_config import setup_logging, setup_logging_from_options
from .models import (
    ClientOptions,
    Context,
    Evaluation,
    EvaluationKind,
    Header,
    Method,
    MimeType,
    PreparedRequest,
    Request,
    Response,
    Status,
    TransportResponse,
)
from .observers import LoggingObserver
from .payloads import RequestPayload, ResponseParser
from .pipeline import BaseInterceptor, BaseObserver, Interceptor, Observer
from .transport import AiohttpTransport, Transport

__all__ = [
    "__version__",
    # Client
    "HttpClient",
    "ClientOptions",
    # Pipeline
    "Interceptor",
    "BaseInterceptor",
    "Observer",
    "BaseObserver",
    "LoggingObserver",
    # Interceptors
    "AuthenticationScheme",
    "AuthInterceptor",
    "HeadersInterceptor",
    "RetryPolicyInterceptor",
    "TrustProvider",
    # Values
    "Context",
    "Evaluation",
    "EvaluationKind",
    "Header",
    "Method",
    "MimeType",
    "PreparedRequest",
    "Request",
    "Response",
    "Status",
    "TransportResponse",
    # Payloads
    "RequestPayload",
    "ResponseParser",
    "Codec",
    "CodecRegistry",
    "JsonCodec",
    "TextCodec",
    "FormCodec",
    # Transport
    "Transport",
    "AiohttpTransport",
    # Errors
    "HttpFailure",
    "EncodingError",
    "DecodingError",
    "PreparationError",
    "ProcessingError",
    "TransportError",
    "MaxRetryCountReached",
    "Canceled",
    "StatusFailure",
    "ClientError",
    "ServerError",
    "UnexpectedStatus",
    "UnexpectedResponse",
    # Logging
    "setup_logging",
    "setup_logging_from_options",
]
