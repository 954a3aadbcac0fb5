"""
Answer Routes

POST /answers - Add an answer (pushed to all WebSocket clients)
GET /answers/{question_id} - Thread for a question (oldest first)
POST /answers/{answer_id}/react - Add a reaction (pushed to all WebSocket clients)
POST /answers/{answer_id}/report - Flag an answer for moderation
"""

from fastapi import APIRouter, HTTPException
from typing import List

from placehub.services.mongo_service import AnswerService
from placehub.services.realtime_hub import get_hub, answer_received_event, reaction_updated_event
from placehub.schemas.schemas import AnswerCreate, AnswerResponse, AnswerStatus, ReactionRequest

router = APIRouter(prefix="/answers", tags=["Answers"])


@router.post("", response_model=AnswerResponse, status_code=201)
async def add_answer(data: AnswerCreate):
    """
    Add an answer. Requires text unless imageUrl is given.
    The parent question id must be well-formed; its existence is not checked.
    """
    answer = await AnswerService().create_answer(data)
    await get_hub().broadcast(answer_received_event(answer))
    return AnswerResponse.model_validate(answer)


@router.get("/{question_id}", response_model=List[AnswerResponse])
async def get_answers(question_id: str):
    answers = await AnswerService().list_by_question(question_id)
    return [AnswerResponse.model_validate(a) for a in answers]


@router.post("/{answer_id}/react", response_model=AnswerResponse)
async def react_to_answer(answer_id: str, data: ReactionRequest):
    """Increment a reaction label (new labels start at 0)."""
    answer = await AnswerService().react(answer_id, data.reaction)
    if not answer:
        raise HTTPException(status_code=404, detail="Answer not found")
    await get_hub().broadcast(reaction_updated_event(answer, data.reaction))
    return AnswerResponse.model_validate(answer)


@router.post("/{answer_id}/report", response_model=AnswerResponse)
async def report_answer(answer_id: str):
    answer = await AnswerService().set_status(answer_id, AnswerStatus.reported)
    if not answer:
        raise HTTPException(status_code=404, detail="Answer not found")
    return AnswerResponse.model_validate(answer)
