"""
API module - FastAPI routers and endpoint definitions.

Usage:
    from app.api.routes import api_router
    app.include_router(api_router, prefix=settings.api_prefix)
"""
