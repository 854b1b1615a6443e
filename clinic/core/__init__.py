"""
Core utilities shared across the clinic package.

This package hosts:
- configuration helpers (env vars, storage paths)
- cross-cutting services such as logging

Services and repositories should depend on these primitives instead of reading
os.environ or configuring handlers themselves.
"""
