"""Entry points for the JSON-RPC and front-end FastAPI apps."""
from kvrpc.app import create_app
from kvrpc.frontend_app import create_frontend_app

__all__ = ["create_app", "create_frontend_app"]
