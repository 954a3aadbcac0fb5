"""
Admin Routes

GET /admin/reported - Moderation queue: reported questions and answers (admin only)
"""

from fastapi import APIRouter, Depends

from placehub.core.auth import get_current_admin
from placehub.services.mongo_service import QuestionService, AnswerService
from placehub.schemas.schemas import (
    AnswerResponse, AnswerStatus, QuestionResponse, QuestionStatus, ReportedContentResponse
)

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/reported", response_model=ReportedContentResponse)
async def reported_content(admin: dict = Depends(get_current_admin)):
    """Everything currently flagged as reported, newest first."""
    questions = await QuestionService().list_by_status(QuestionStatus.reported)
    answers = await AnswerService().list_by_status(AnswerStatus.reported)
    return ReportedContentResponse(
        questions=[QuestionResponse.model_validate(q) for q in questions],
        answers=[AnswerResponse.model_validate(a) for a in answers]
    )
