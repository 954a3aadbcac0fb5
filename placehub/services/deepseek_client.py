"""
DeepSeek API Client

DeepSeek uses OpenAI-compatible API, so we use the openai library.

COST OPTIMIZATION:
- Use deepseek-chat model (cheapest)
- Keep prompts short and structured
- Summaries are stored on the question, never regenerated per read

AI is used ONLY for thread summaries. Questions and answers in MongoDB
are the source of truth.
"""
import json
import logging

from openai import OpenAI
from placehub.core.config import get_settings

settings = get_settings()
logger = logging.getLogger(__name__)


class DeepSeekClient:
    """
    Wrapper for DeepSeek API with cost-optimized methods.
    """

    def __init__(self):
        self.client = OpenAI(
            api_key=settings.deepseek_api_key,
            base_url=settings.deepseek_base_url
        )
        # Use the cheapest model
        self.model = "deepseek-chat"

    def _call_api(self, system_prompt: str, user_content: str, max_tokens: int = 1000) -> str:
        """
        Internal method to call DeepSeek API.
        Returns raw text response.
        """
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_content}
            ],
            max_tokens=max_tokens,
            temperature=0.3
        )
        return response.choices[0].message.content

    def _extract_json(self, text: str) -> dict:
        """
        Extract JSON from API response.
        Handles cases where model wraps JSON in markdown code blocks.
        """
        text = text.strip()
        if text.startswith("```json"):
            text = text[7:]
        if text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]

        return json.loads(text.strip())

    def summarize_thread(self, question: str, answers: list[str]) -> dict:
        """
        Summarize an anonymous Q&A thread.
        """
        system_prompt = """You summarize anonymous campus placement Q&A threads for students.
Combine the answers into a short neutral digest (max 3 sentences) and return ONLY valid JSON.
Output format:
{
  "summary": "string"
}
Return ONLY the JSON, no explanation."""

        numbered = "\n".join(f"{i}. {a}" for i, a in enumerate(answers, start=1))
        user_content = f"Question: {question}\nAnswers:\n{numbered}"
        response = self._call_api(system_prompt, user_content, max_tokens=300)
        return self._extract_json(response)

    def test_connection(self) -> bool:
        """Test if DeepSeek API is reachable"""
        try:
            response = self._call_api(
                "You are a test assistant.",
                "Reply with exactly: OK",
                max_tokens=10
            )
            return "OK" in response.upper()
        except Exception as e:
            logger.warning(f"DeepSeek connection failed: {e}")
            return False


# Singleton instance
_deepseek_client: DeepSeekClient = None


def get_deepseek_client() -> DeepSeekClient:
    """Get or create DeepSeek client (singleton pattern)"""
    global _deepseek_client
    if _deepseek_client is None:
        _deepseek_client = DeepSeekClient()
    return _deepseek_client
