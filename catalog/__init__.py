"""Catalog - product catalog API with a cache-aside read path.

The catalog service exposes a small read/write HTTP API for products stored
in PostgreSQL. Reads of the full collection go through a Redis cache that is
populated on demand and invalidated on every write.

Architecture Overview:
- **API Layer**: FastAPI routes, middleware and error envelopes
- **Core Layer**: Configuration, logging, request context and exceptions
- **Service Layer**: Write orchestration (persist, commit, invalidate)
- **Infrastructure Layer**: Async SQLAlchemy persistence and cache stores

The cache is strictly an optimisation: when Redis is slow or unreachable the
service keeps answering from the database and only reports degraded health.
"""
