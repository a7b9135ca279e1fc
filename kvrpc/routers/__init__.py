"""
FastAPI routers grouped by service (rpc, users).

Each module exposes what app.py / frontend_app.py include; services are
looked up on ``request.app.state`` so every app instance owns its own.
"""
