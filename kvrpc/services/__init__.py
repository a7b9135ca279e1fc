"""
Use cases for kv-rpc.

Routers call these services instead of touching the store, the user map or
the HTTP client directly.
"""
