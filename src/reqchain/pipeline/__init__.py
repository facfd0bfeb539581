"""Request pipeline: interceptor chain, retry engine and classification."""

from .base import BaseInterceptor, BaseObserver, Interceptor, Observer
from .chain import AttemptOutcome, InterceptorChain, raise_if_cancelled
from .classify import StatusClass, classify, classify_status
from .retry import RetryEngine

__all__ = [
    "AttemptOutcome",
    "BaseInterceptor",
    "BaseObserver",
    "Interceptor",
    "InterceptorChain",
    "Observer",
    "RetryEngine",
    "StatusClass",
    "classify",
    "classify_status",
    "raise_if_cancelled",
]
