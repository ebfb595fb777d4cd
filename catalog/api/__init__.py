"""HTTP API layer built on FastAPI.

- **main**: Application factory and lifecycle management
- **routes**: Product endpoints
- **dependencies**: Per-request wiring of repository, cache and service
- **middleware**: Correlation IDs and centralized error handling
- **schemas**: Request bodies and the standard error envelope
- **utils**: orjson-backed JSON responses
"""
