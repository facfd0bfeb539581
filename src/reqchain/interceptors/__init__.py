"""Ready-made interceptors."""

from .auth import AuthenticationScheme, AuthInterceptor, TrustProvider
from .headers import HeadersInterceptor
from .retry import RETRYABLE_STATUS_CODES, RetryPolicyInterceptor, parse_retry_after

__all__ = [
    "AuthenticationScheme",
    "AuthInterceptor",
    "TrustProvider",
    "HeadersInterceptor",
    "RETRYABLE_STATUS_CODES",
    "RetryPolicyInterceptor",
    "parse_retry_after",
]
