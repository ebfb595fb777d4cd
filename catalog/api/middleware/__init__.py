"""FastAPI middleware and exception handlers.

- **RequestContextMiddleware**: Correlation IDs bound to every log line
- **error_handler**: Consistent error envelopes for all exceptions
"""
