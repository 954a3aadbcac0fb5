"""
AI Summary Service - Thread summaries using DeepSeek.

PURPOSE:
AI is used ONLY to condense a question's answers into a short digest
that the chat thread shows above the answers.

THREAD → AI DIGEST → STORED ON QUESTION (ai_summary) → SERVED BY REST
"""

import logging
from typing import List

from starlette.concurrency import run_in_threadpool

from placehub.services.deepseek_client import get_deepseek_client, DeepSeekClient
from placehub.services.mongo_service import QuestionService, AnswerService

logger = logging.getLogger(__name__)

MAX_SUMMARY_CHARS = 600
MAX_ANSWERS_IN_PROMPT = 50


def validate_summary(data: dict) -> str:
    """
    Validate and sanitize the model's summary output.
    Raises ValueError when the output has no usable summary.
    """
    if not isinstance(data, dict):
        raise ValueError("Summary output is not a JSON object")
    summary = str(data.get("summary") or "").strip()
    if not summary:
        raise ValueError("Summary output is empty")
    return summary[:MAX_SUMMARY_CHARS]


class ThreadSummaryService:
    """
    Summarizes a Q&A thread and stores the result on the question.

    Process:
    1. Load question + text answers from MongoDB
    2. Ask DeepSeek for a JSON digest (in the threadpool, the client is blocking)
    3. Validate the output
    4. Store it as the question's ai_summary
    """

    def __init__(self, ai_client: DeepSeekClient = None):
        self.ai_client = ai_client or get_deepseek_client()
        self.question_service = QuestionService()
        self.answer_service = AnswerService()

    async def summarize_and_store(self, question: dict) -> dict:
        """
        Returns:
            {
                "success": True/False,
                "question": {...} (updated question, when successful),
                "error": "..." and "reason": "no_answers" | "ai_error" (when not)
            }
        """
        result = {"success": False, "question": None, "error": None, "reason": None}

        answers = await self.answer_service.list_by_question(question["_id"])
        texts: List[str] = [a["text"] for a in answers if a.get("text")][:MAX_ANSWERS_IN_PROMPT]
        if not texts:
            result["error"] = "No text answers to summarize"
            result["reason"] = "no_answers"
            return result

        try:
            raw = await run_in_threadpool(self.ai_client.summarize_thread, question["text"], texts)
            summary = validate_summary(raw)
        except Exception as e:
            logger.error(f"Summary generation failed for question {question['_id']}: {e}")
            result["error"] = str(e)
            result["reason"] = "ai_error"
            return result

        result["question"] = await self.question_service.set_ai_summary(question["_id"], summary)
        result["success"] = True
        return result


def get_summary_service() -> ThreadSummaryService:
    return ThreadSummaryService()
