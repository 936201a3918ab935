from .base import IChatSession, ILLMProvider
from .mock import MockLLMProvider

__all__ = ["IChatSession", "ILLMProvider", "MockLLMProvider"]
