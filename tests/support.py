import json
from typing import List, Optional

import httpx

from packages.mockdy_core.config import MockdyConfig
from packages.mockdy_dto.session import FeedbackData, InterviewType, Message, ProblemInfo, StoredSession

CLIENT_ID = "client-123"
CLIENT_SECRET = "secret-xyz"
REDIRECT_URI = "http://localhost:8000/oauth/callback"


def make_config(**overrides) -> MockdyConfig:
    values = dict(
        OAUTH_CLIENT_ID=CLIENT_ID,
        OAUTH_CLIENT_SECRET=CLIENT_SECRET,
        OAUTH_REDIRECT_URI=REDIRECT_URI,
        NOTION_API_BASE="https://notion.test/v1",
        NOTION_TOKEN_URL="https://notion.test/v1/oauth/token",
        NOTION_AUTH_URL="https://notion.test/v1/oauth/authorize",
        GOOGLE_API_KEY=None,
    )
    values.update(overrides)
    return MockdyConfig(_env_file=None, **values)


def make_session(
    session_id: str = "s1",
    interview_type: InterviewType = InterviewType.TECHNICAL,
    timestamp: int = 1_700_000_000_000,
    messages: Optional[List[Message]] = None,
    problem_info: Optional[ProblemInfo] = None,
    score: int = 80,
) -> StoredSession:
    return StoredSession(
        id=session_id,
        timestamp=timestamp,
        type=interview_type,
        messages=messages if messages is not None else [
            Message(role="model", text="Hi, let's solve a problem.", timestamp=timestamp),
            Message(role="user", text="Sure.", timestamp=timestamp + 1),
        ],
        code_or_notes="def solve():\n    return 42",
        feedback=FeedbackData(
            score=score,
            summary="Good job",
            strengths=["Clear"],
            weaknesses=["Slow"],
            optimal_solution="def solve(): ...",
        ),
        problem_info=problem_info,
    )


class RecordingTransport(httpx.MockTransport):
    """
    MockTransport that keeps every request and answers from a list of
    (status, body) pairs, in order.
    """
    def __init__(self, responses):
        self.requests: List[httpx.Request] = []
        self._responses = list(responses)
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status, body = self._responses.pop(0)
        if isinstance(body, (dict, list)):
            return httpx.Response(status, json=body)
        return httpx.Response(status, text=body)

    def json_body(self, index: int) -> dict:
        return json.loads(self.requests[index].content)
