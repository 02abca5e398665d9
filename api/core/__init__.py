"""
Shared, cross-cutting code for the API.

`core/` holds the pieces every feature leans on: settings, logging, the
asyncpg wrapper, the filter builder, SSE progress frames, uploads and mail.
Feature SQL and business rules stay in their own package (e.g. `artisans/`).
"""
