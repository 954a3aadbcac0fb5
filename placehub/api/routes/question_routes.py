"""
Question Routes

POST /questions - Ask an anonymous question
GET /questions - All questions with live answer counts (newest first)
GET /questions/{question_id} - Get one question
PATCH /questions/{question_id}/status - Overwrite status (moderation)
POST /questions/{question_id}/summary - Generate AI summary of the thread
"""

from fastapi import APIRouter, HTTPException
from typing import List

from placehub.core.config import get_settings
from placehub.services.mongo_service import QuestionService
from placehub.services.ai_summary_service import get_summary_service
from placehub.schemas.schemas import (
    QuestionCreate, QuestionResponse, QuestionListItem, QuestionStatusUpdate
)

router = APIRouter(prefix="/questions", tags=["Questions"])


@router.post("", response_model=QuestionResponse, status_code=201)
async def create_question(data: QuestionCreate):
    """Create a question. Starts in status 'open'."""
    question = await QuestionService().create_question(data.text, data.session_id)
    return QuestionResponse.model_validate(question)


@router.get("", response_model=List[QuestionListItem])
async def list_questions():
    """All questions, newest first, each with a freshly computed answerCount."""
    questions = await QuestionService().list_questions()
    return [QuestionListItem.model_validate(q) for q in questions]


@router.get("/{question_id}", response_model=QuestionResponse)
async def get_question(question_id: str):
    question = await QuestionService().get_question(question_id)
    if not question:
        raise HTTPException(status_code=404, detail="Question not found")
    return QuestionResponse.model_validate(question)


@router.patch("/{question_id}/status", response_model=QuestionResponse)
async def update_question_status(question_id: str, data: QuestionStatusUpdate):
    """Any status may be set from any prior status."""
    question = await QuestionService().set_status(question_id, data.status)
    if not question:
        raise HTTPException(status_code=404, detail="Question not found")
    return QuestionResponse.model_validate(question)


@router.post("/{question_id}/summary", response_model=QuestionResponse)
async def summarize_question(question_id: str):
    """
    Generate an AI summary of the thread and store it on the question.

    Process:
    1. Collect the question's text answers
    2. DeepSeek condenses them into a short digest
    3. Digest saved as aiSummary
    """
    question = await QuestionService().get_question(question_id)
    if not question:
        raise HTTPException(status_code=404, detail="Question not found")

    if not get_settings().deepseek_configured:
        raise HTTPException(status_code=503, detail="AI summaries are not configured")

    result = await get_summary_service().summarize_and_store(question)
    if not result["success"]:
        if result["reason"] == "no_answers":
            raise HTTPException(status_code=400, detail=result["error"])
        raise HTTPException(status_code=502, detail=f"Summary failed: {result['error']}")

    return QuestionResponse.model_validate(result["question"])
