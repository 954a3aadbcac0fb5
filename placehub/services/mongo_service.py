"""
MongoDB Service - CRUD operations for the anonymous Q&A collections.

Collections in this database:
1. anon_sessions  - Session token -> chosen animal icon
2. anon_questions - Anonymous questions with lifecycle status
3. anon_answers   - Answers (text or image) with embedded reaction tallies

WHY MongoDB for these?
- Reaction tallies are free-form label -> count maps
- Answers are looked up by parent id, no back-reference on the question
- Single-document writes are atomic, which is all this feature relies on
"""

import logging
from datetime import datetime
from typing import Optional, List, Dict, Any
from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from placehub.db.mongodb import get_collection, COLLECTIONS
from placehub.schemas.schemas import (
    AnswerCreate, AnswerStatus, QuestionStatus, default_reaction_tally
)

logger = logging.getLogger(__name__)


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    if isinstance(doc.get("question_id"), ObjectId):
        doc["question_id"] = str(doc["question_id"])
    return doc


def serialize_docs(docs: list) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def to_object_id(value: str) -> Optional[ObjectId]:
    """Parse an id from a URL/payload. Returns None when malformed."""
    if isinstance(value, ObjectId):
        return value
    if not value or not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


# ============================================================
# SESSIONS COLLECTION
# Pseudonymous identity for unauthenticated chat participants
# ============================================================

class SessionService:
    """
    Maps a client-generated session token to an animal icon.
    The first icon chosen for a token is kept forever.
    """

    def __init__(self):
        self.collection = get_collection(COLLECTIONS["sessions"])

    async def init_session(self, session_id: str, animal_icon: str) -> dict:
        """
        Create the session if it does not exist, otherwise return it unchanged.

        Upsert with $setOnInsert instead of find-then-insert, so two first
        contacts with the same token converge on one record. If both upserts
        still race on the unique index, the loser re-reads the winner's record.
        """
        try:
            await self.collection.update_one(
                {"session_id": session_id},
                {"$setOnInsert": {
                    "session_id": session_id,
                    "animal_icon": animal_icon,
                    "created_at": datetime.utcnow()
                }},
                upsert=True
            )
        except DuplicateKeyError:
            logger.info(f"Concurrent init for session {session_id}, using existing record")

        doc = await self.collection.find_one({"session_id": session_id})
        return serialize_doc(doc)

    async def get_session(self, session_id: str) -> Optional[dict]:
        """Fetch a session by its client token."""
        doc = await self.collection.find_one({"session_id": session_id})
        return serialize_doc(doc)


# ============================================================
# QUESTIONS COLLECTION
# ============================================================

class QuestionService:
    """
    Handles anonymous question storage and status changes.
    Answer counts are computed at read time, never stored.
    """

    def __init__(self):
        self.collection = get_collection(COLLECTIONS["questions"])
        self.answers = get_collection(COLLECTIONS["answers"])

    async def create_question(self, text: str, session_id: str) -> dict:
        """
        Insert a new question with status 'open'.

        Returns:
            The stored document (with generated _id and created_at)
        """
        doc = {
            "text": text,
            "session_id": session_id,
            "status": QuestionStatus.open.value,
            "ai_summary": "",
            "created_at": datetime.utcnow()
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    async def list_questions(self) -> List[dict]:
        """All questions newest first, each with a live answer_count."""
        cursor = self.collection.find({}).sort([("created_at", -1), ("_id", -1)])
        questions = [doc async for doc in cursor]

        for doc in questions:
            doc["answer_count"] = await self.answers.count_documents({"question_id": doc["_id"]})

        return serialize_docs(questions)

    async def get_question(self, question_id: str) -> Optional[dict]:
        """Fetch question by id. None if missing or malformed."""
        oid = to_object_id(question_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid})
        return serialize_doc(doc)

    async def set_status(self, question_id: str, status: QuestionStatus) -> Optional[dict]:
        """Overwrite status unconditionally (moderation path)."""
        oid = to_object_id(question_id)
        if oid is None:
            return None
        doc = await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {"status": QuestionStatus(status).value}},
            return_document=ReturnDocument.AFTER
        )
        return serialize_doc(doc)

    async def set_ai_summary(self, question_id: str, summary: str) -> Optional[dict]:
        """Store the AI-generated thread summary."""
        oid = to_object_id(question_id)
        if oid is None:
            return None
        doc = await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {"ai_summary": summary, "summarized_at": datetime.utcnow()}},
            return_document=ReturnDocument.AFTER
        )
        return serialize_doc(doc)

    async def list_by_status(self, status: QuestionStatus) -> List[dict]:
        cursor = self.collection.find({"status": QuestionStatus(status).value}).sort([("created_at", -1), ("_id", -1)])
        return serialize_docs([doc async for doc in cursor])


# ============================================================
# ANSWERS COLLECTION
# ============================================================

class AnswerService:
    """
    Handles answers and their reaction tallies.

    NOTE: react() is a read-modify-write on purpose. Two concurrent
    reactions on the same label can both read the same count and one
    increment is lost. Counts are best-effort, not a ledger.
    """

    def __init__(self):
        self.collection = get_collection(COLLECTIONS["answers"])

    async def create_answer(self, data: AnswerCreate) -> dict:
        """
        Insert an answer. The parent question is NOT checked for existence,
        only the id format (done by AnswerCreate).
        """
        doc = {
            "question_id": ObjectId(data.question_id),
            "text": data.text,
            "image_url": data.image_url,
            "session_id": data.session_id,
            "sender_icon": data.sender_icon,
            "status": AnswerStatus.open.value,
            "reactions": default_reaction_tally(),
            "created_at": datetime.utcnow()
        }
        result = await self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    async def list_by_question(self, question_id: str) -> List[dict]:
        """Answers for a question, oldest first (thread reading order)."""
        oid = to_object_id(question_id)
        if oid is None:
            return []
        cursor = self.collection.find({"question_id": oid}).sort([("created_at", 1), ("_id", 1)])
        return serialize_docs([doc async for doc in cursor])

    async def get_answer(self, answer_id: str) -> Optional[dict]:
        oid = to_object_id(answer_id)
        if oid is None:
            return None
        doc = await self.collection.find_one({"_id": oid})
        return serialize_doc(doc)

    async def react(self, answer_id: str, label: str) -> Optional[dict]:
        """
        Increment one reaction label by 1.

        Returns:
            Updated answer, or None if the answer does not exist
        """
        oid = to_object_id(answer_id)
        if oid is None:
            return None

        doc = await self.collection.find_one({"_id": oid})
        if doc is None:
            return None

        reactions: Dict[str, int] = dict(doc.get("reactions") or {})
        reactions[label] = reactions.get(label, 0) + 1

        # Whole-map write: last writer wins
        await self.collection.update_one(
            {"_id": oid},
            {"$set": {"reactions": reactions}}
        )
        doc["reactions"] = reactions
        return serialize_doc(doc)

    async def set_status(self, answer_id: str, status: AnswerStatus) -> Optional[dict]:
        """Mark an answer reported (moderation path)."""
        oid = to_object_id(answer_id)
        if oid is None:
            return None
        doc = await self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {"status": AnswerStatus(status).value}},
            return_document=ReturnDocument.AFTER
        )
        return serialize_doc(doc)

    async def list_by_status(self, status: AnswerStatus) -> List[dict]:
        cursor = self.collection.find({"status": AnswerStatus(status).value}).sort([("created_at", -1), ("_id", -1)])
        return serialize_docs([doc async for doc in cursor])


# ============================================================
# SESSION STATS
# Read-only join of a session's answers to their questions' status
# ============================================================

class SessionStatsService:
    """
    Counts a session's answers grouped by the parent question's status.
    """

    def __init__(self):
        self.questions = get_collection(COLLECTIONS["questions"])
        self.answers = get_collection(COLLECTIONS["answers"])

    async def get_session_stats(self, session_id: str) -> Dict[str, int]:
        stats = {status.value: 0 for status in QuestionStatus}
        stats["total"] = 0

        cursor = self.answers.find({"session_id": session_id}, {"question_id": 1})
        question_ids = [doc["question_id"] async for doc in cursor]
        if not question_ids:
            return stats

        status_by_question: Dict[Any, str] = {}
        q_cursor = self.questions.find({"_id": {"$in": list(set(question_ids))}}, {"status": 1})
        async for q in q_cursor:
            status_by_question[q["_id"]] = q["status"]

        # Answers whose question is gone are not counted (inner join)
        for qid in question_ids:
            status = status_by_question.get(qid)
            if status is None:
                continue
            stats[status] = stats.get(status, 0) + 1
            stats["total"] += 1

        return stats


# ============================================================
# CONVENIENCE FUNCTION: Get all services
# ============================================================

def get_mongo_services() -> dict:
    """
    Get all MongoDB service instances.

    Usage:
        services = get_mongo_services()
        await services['questions'].create_question(...)
    """
    return {
        "sessions": SessionService(),
        "questions": QuestionService(),
        "answers": AnswerService(),
        "stats": SessionStatsService()
    }
