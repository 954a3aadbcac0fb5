"""
API module - FastAPI routers and endpoint definitions.

Contains:
- api_router: REST routes (mounted under /api)
- realtime_router: the /ws WebSocket channel (mounted at the root)

Usage:
    from placehub.api.routes import api_router, realtime_router
    app.include_router(api_router, prefix="/api")
    app.include_router(realtime_router)
"""
