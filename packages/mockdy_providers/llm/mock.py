import asyncio
import json
from typing import Any, AsyncIterator, Dict, List, Optional

from packages.mockdy_core.dto import LLMResponseDTO
from packages.mockdy_providers.llm.base import IChatSession, ILLMProvider

DEFAULT_FEEDBACK = {
    "score": 72,
    "summary": "Solid communication with a correct but unoptimized approach.",
    "strengths": ["Clarified constraints", "Explained the plan before coding", "Readable code"],
    "weaknesses": ["Skipped the dry run", "Missed an edge case", "Complexity analysis was late"],
    "optimalSolution": "def solve(nums):\n    seen = set()\n    return any(n in seen or seen.add(n) for n in nums)",
}


class MockChatSession(IChatSession):
    def __init__(self, provider: "MockLLMProvider", system_instruction: str):
        self.provider = provider
        self.system_instruction = system_instruction
        self.received: List[str] = []

    async def send_message_stream(self, text: str) -> AsyncIterator[str]:
        self.received.append(text)
        if self.provider.fail_chat:
            raise ConnectionError("Mock Failure: Intentional chat error")

        reply = self.provider.next_reply()
        for i, word in enumerate(reply.split(" ")):
            if self.provider.latency_ms > 0:
                await asyncio.sleep(self.provider.latency_ms / 1000.0)
            yield word if i == 0 else f" {word}"


class MockLLMProvider(ILLMProvider):
    """
    Scripted provider for local development and tests.
    Replies are served in order; the last one repeats once the script runs out.
    """
    def __init__(
        self,
        replies: Optional[List[str]] = None,
        feedback_json: Optional[str] = None,
        latency_ms: int = 0,
        fail_chat: bool = False,
        fail_grading: bool = False,
    ):
        self.replies = list(replies or ["Hello! I'm your interviewer today. Are you ready to begin?"])
        self.feedback_json = feedback_json if feedback_json is not None else json.dumps(DEFAULT_FEEDBACK)
        self.latency_ms = latency_ms
        self.fail_chat = fail_chat
        self.fail_grading = fail_grading
        self.sessions: List[MockChatSession] = []
        self.prompts: List[str] = []
        self._cursor = 0

    def next_reply(self) -> str:
        reply = self.replies[min(self._cursor, len(self.replies) - 1)]
        self._cursor += 1
        return reply

    def start_chat(self, system_instruction: str) -> IChatSession:
        session = MockChatSession(self, system_instruction)
        self.sessions.append(session)
        return session

    async def generate_json(self, prompt: str, schema: Dict[str, Any]) -> LLMResponseDTO:
        self.prompts.append(prompt)
        if self.latency_ms > 0:
            await asyncio.sleep(self.latency_ms / 1000.0)
        if self.fail_grading:
            raise RuntimeError("Mock Failure: Intentional grading error")
        return LLMResponseDTO(
            content=self.feedback_json,
            token_usage={"prompt_tokens": 10, "completion_tokens": 20, "total_tokens": 30},
            finish_reason="stop",
        )
