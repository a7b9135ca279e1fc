"""
Core utilities shared across kv-rpc.

This package hosts:
- configuration helpers (env vars)
- logging setup and the request logging middleware
- the reader/writer lock guarding the in-memory store

Routers and services depend on these primitives instead of reading
os.environ or configuring logging themselves.
"""
