# tripplanner/agents/trip_planner/gemini_client.py

import logging
from typing import Any, Optional

from google import genai

from tripplanner.agents.trip_planner.errors import ConfigurationError, GenerationError
from tripplanner.utils.config import GEMINI_API_KEY, GEMINI_MODEL

logger = logging.getLogger(__name__)


class GeminiItineraryGenerator:
    """
    Thin wrapper around the Gemini text-generation API.

    The SDK client is created lazily so that a missing API key is reported as a
    configuration error instead of failing at import time.
    """

    def __init__(self, api_key: Optional[str] = GEMINI_API_KEY, model: str = GEMINI_MODEL,
                 client: Any = None):
        self.api_key = api_key
        self.model = model
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def generate(self, prompt: str) -> str:
        if not self.api_key:
            logger.error("Gemini API key is not set (GEMINI_API_KEY); skipping generation.")
            raise ConfigurationError()

        logger.info("[Comm Flow] TripPlanner -> Gemini (%s)", self.model)
        try:
            response = await self._get_client().aio.models.generate_content(
                model=self.model,
                contents=prompt,
            )
        except Exception as exc:
            err = GenerationError(str(exc) or type(exc).__name__)
            logger.error("Gemini request failed (quota=%s): %s", err.is_quota, exc)
            raise err from exc

        text = getattr(response, "text", None)
        if not text or not text.strip():
            raise GenerationError("The model returned an empty response.")
        return text
