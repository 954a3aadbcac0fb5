"""
PlaceHub - Anonymous Q&A Service
Real-time anonymous questions and answers for campus placement prep.

Architecture:
- MongoDB: Sessions, questions, answers (reaction tallies embedded)
- WebSocket hub: Pushes new answers and reaction updates to every client
- Archive scheduler: Retires questions older than the archive threshold
- DeepSeek AI: Optional thread summaries only
"""

__version__ = "1.0.0"
__author__ = "PlaceHub"
