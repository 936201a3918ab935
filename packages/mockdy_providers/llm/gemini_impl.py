import warnings
from typing import Any, AsyncIterator, Dict, List

import google.generativeai as genai

from packages.mockdy_core.config import MockdyConfig
from packages.mockdy_core.dto import LLMResponseDTO
from packages.mockdy_core.errors import ConfigurationError
from packages.mockdy_core.logging import get_logger
from packages.mockdy_providers.llm.base import IChatSession, ILLMProvider

# Suppress Google GenAI FutureWarnings
warnings.filterwarnings("ignore", category=FutureWarning, module="google.generativeai")
warnings.filterwarnings("ignore", category=FutureWarning, module="google.api_core")

logger = get_logger("mockdy_providers.llm.gemini")


def _chunk_text(chunk) -> str:
    # Chunks without text parts (safety stops, empty deltas) raise on .text
    try:
        return chunk.text or ""
    except ValueError:
        return ""


class GeminiChatSession(IChatSession):
    """
    Streaming chat over generate_content with a locally kept history, so a
    reply abandoned mid-stream still leaves the conversation consistent.
    """
    def __init__(self, model: "genai.GenerativeModel"):
        self._model = model
        self._history: List[Dict[str, Any]] = []

    async def send_message_stream(self, text: str) -> AsyncIterator[str]:
        self._history.append({"role": "user", "parts": [text]})
        received: List[str] = []
        try:
            response = await self._model.generate_content_async(self._history, stream=True)
            async for chunk in response:
                piece = _chunk_text(chunk)
                if piece:
                    received.append(piece)
                    yield piece
        finally:
            if received:
                self._history.append({"role": "model", "parts": ["".join(received)]})
            else:
                # Keep user/model turns alternating
                self._history.pop()


class GeminiLLMProvider(ILLMProvider):
    def __init__(self, config: MockdyConfig):
        if not config.GOOGLE_API_KEY:
            raise ConfigurationError("GOOGLE_API_KEY is missing. Please set it in .env file.")
        self.config = config
        self.model_name = config.GEMINI_MODEL
        genai.configure(api_key=config.GOOGLE_API_KEY)

    def start_chat(self, system_instruction: str) -> IChatSession:
        model = genai.GenerativeModel(
            self.model_name,
            system_instruction=system_instruction,
            # Balance between creativity and strictness
            generation_config=genai.GenerationConfig(temperature=self.config.CHAT_TEMPERATURE),
        )
        return GeminiChatSession(model)

    async def generate_json(self, prompt: str, schema: Dict[str, Any]) -> LLMResponseDTO:
        model = genai.GenerativeModel(self.model_name)
        response = await model.generate_content_async(
            prompt,
            generation_config=genai.GenerationConfig(
                response_mime_type="application/json",
                response_schema=schema,
            ),
        )
        usage = getattr(response, "usage_metadata", None)
        token_usage = None
        if usage is not None:
            token_usage = {
                "prompt_tokens": usage.prompt_token_count,
                "completion_tokens": usage.candidates_token_count,
                "total_tokens": usage.total_token_count,
            }
        logger.debug(f"Grading call finished. Usage: {token_usage}")
        return LLMResponseDTO(content=_chunk_text(response), token_usage=token_usage)
