"""External data source integrations.

Each subdirectory is one data source with a consistent structure:

    datasources/{name}/
    ├── __init__.py       # Public API re-exports
    ├── client.py         # API URLs, constants, request parameters
    ├── models.py         # Dataclasses for API responses
    └── {feature}.py      # Fetch functions (one per endpoint/concept)

Fetch functions use the shared session from ``services/http.py`` and return
values rather than raising for per-query failures.
"""
