"""
Shared infrastructure.

- http.py        - requests session with retry and default timeout
- concurrency.py - bounded worker pool preserving input order
"""
