"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from placehub.api.routes.session_routes import router as session_router
from placehub.api.routes.question_routes import router as question_router
from placehub.api.routes.answer_routes import router as answer_router
from placehub.api.routes.admin_routes import router as admin_router
from placehub.api.routes.realtime_routes import router as realtime_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(session_router)
api_router.include_router(question_router)
api_router.include_router(answer_router)
api_router.include_router(admin_router)
