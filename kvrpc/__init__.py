"""kv-rpc: in-memory key-value store served over JSON-RPC, plus a REST users front end."""

__version__ = "1.0.0"
