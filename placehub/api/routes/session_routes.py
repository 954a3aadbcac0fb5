"""
Session Routes

POST /sessions/init - Create (or recall) an anonymous session
GET /sessions/{session_id}/stats - Answer counts by parent question status
"""

from fastapi import APIRouter

from placehub.services.mongo_service import SessionService, SessionStatsService
from placehub.schemas.schemas import SessionInit, SessionResponse, SessionStatsResponse

router = APIRouter(prefix="/sessions", tags=["Sessions"])


@router.post("/init", response_model=SessionResponse)
async def init_session(data: SessionInit):
    """
    Idempotent: the icon chosen on first contact is kept,
    later calls with another icon return the original record.
    """
    session = await SessionService().init_session(data.session_id, data.animal_icon)
    return SessionResponse.model_validate(session)


@router.get("/{session_id}/stats", response_model=SessionStatsResponse)
async def session_stats(session_id: str):
    """Count this session's answers grouped by their question's status."""
    stats = await SessionStatsService().get_session_stats(session_id)
    return SessionStatsResponse(**stats)
