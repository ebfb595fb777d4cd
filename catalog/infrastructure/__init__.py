"""Infrastructure layer for data persistence and caching.

- **database**: Async PostgreSQL with SQLAlchemy 2.0+ and the product repository
- **cache**: Cache stores and the cache-aside coordinator for the product list
"""
