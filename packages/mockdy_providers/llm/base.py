from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict

from packages.mockdy_core.dto import LLMResponseDTO


class IChatSession(ABC):
    """
    One multi-turn conversation with the model. Keeps its own history.
    """
    @abstractmethod
    def send_message_stream(self, text: str) -> AsyncIterator[str]:
        """
        Send a user turn and yield the model reply as incremental text deltas.
        Closing the iterator early abandons the rest of the reply.
        """
        pass


class ILLMProvider(ABC):
    @abstractmethod
    def start_chat(self, system_instruction: str) -> IChatSession:
        """
        Open a conversation with a persona-injected system instruction.
        """
        pass

    @abstractmethod
    async def generate_json(self, prompt: str, schema: Dict[str, Any]) -> LLMResponseDTO:
        """
        Single-shot call constrained to a JSON schema.
        Returns:
            LLMResponseDTO whose content is the raw JSON text (may still be invalid)
        """
        pass
