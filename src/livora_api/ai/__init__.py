"""AI client management for the Livora API."""
from .client_factory import AIClientFactory, AIRequestContext
from .retry import is_retryable_error, retry_sync_call

__all__ = [
    "AIClientFactory",
    "AIRequestContext",
    "is_retryable_error",
    "retry_sync_call",
]
