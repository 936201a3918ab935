from typing import Optional, Dict, Any


class MockdyBaseError(Exception):
    """
    Mockdy 프로젝트의 최상위 예외 클래스.
    모든 커스텀 예외는 이 클래스를 상속받아야 합니다.

    Attributes:
        code (str): 에러 식별 코드 (예: 'CONF_Error')
        message (str): 사람용 에러 메시지
        details (Optional[Dict[str, Any]]): 추가 디버깅 정보
        status_code (int): HTTP 경계에서 사용할 상태 코드
    """
    status_code: int = 500

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(f"[{code}] {message}")


class ConfigurationError(MockdyBaseError):
    """환경 설정 로딩/검증 실패 시 발생하는 예외 (서버 secret 누락 등)"""
    status_code = 500

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="CONF_Error", message=message, details=details)


class InputError(MockdyBaseError):
    """Malformed client request (missing code, missing bearer token, ...)."""

    def __init__(self, message: str, status_code: int = 400, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="INPUT_Error", message=message, details=details)
        self.status_code = status_code


class UpstreamError(MockdyBaseError):
    """
    Third-party API (Notion) rejected the call.
    The provider status and body are carried so the HTTP layer can pass them through.
    """

    def __init__(self, status_code: int, body: Any, message: Optional[str] = None):
        if message is None:
            message = _describe_body(body) or f"Upstream request failed with status {status_code}"
        super().__init__(code="UPSTREAM_Error", message=message, details={"status": status_code})
        self.status_code = status_code
        self.body = body


class SessionExpiredError(MockdyBaseError):
    """Refresh token is invalid or absent; the user has to reconnect."""
    status_code = 401

    def __init__(self, message: str = "Session expired. Please reconnect your Notion workspace."):
        super().__init__(code="SESSION_Expired", message=message)


class ParseError(MockdyBaseError):
    """Grading model returned non-JSON or schema-violating output."""
    status_code = 502

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(code="PARSE_Error", message=message, details=details)


class InvalidTransitionError(MockdyBaseError):
    """Raised when an interview event is not allowed in the current phase"""
    status_code = 409

    def __init__(self, phase: str, event: str):
        super().__init__(
            code="STATE_Error",
            message=f"Event {event} is not allowed in phase {phase}",
            details={"phase": phase, "event": event},
        )


class InterviewNotFoundError(MockdyBaseError):
    status_code = 404

    def __init__(self, interview_id: str):
        super().__init__(code="NOT_FOUND", message=f"Interview {interview_id} not found")


class SessionBusyError(MockdyBaseError):
    """FAIL-FAST: a reply is already streaming for this interview."""
    status_code = 423

    def __init__(self, interview_id: str):
        super().__init__(code="BUSY", message=f"Interview {interview_id} is waiting for a model reply")


def _describe_body(body: Any) -> Optional[str]:
    if isinstance(body, dict):
        for key in ("error_description", "message", "error"):
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return None
