"""
Acuity static webhook middleware for ASGI and WSGI frameworks.

Re-exports middleware classes for convenient imports:
    from acuity_scheduling.middleware import AcuityWebhookASGIMiddleware
    from acuity_scheduling.middleware import AcuityWebhookWSGIMiddleware
"""

from .wsgi import AcuityWebhookWSGIMiddleware

__all__: list[str] = ["AcuityWebhookWSGIMiddleware"]

# ASGI middleware (FastAPI, Starlette)
try:
    from .asgi import AcuityWebhookASGIMiddleware
    __all__.append("AcuityWebhookASGIMiddleware")
except ImportError:
    pass
