from typing import Any
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseDTO(BaseModel):
    """
    Mockdy 프로젝트의 모든 DTO(Data Transfer Object)의 기반 클래스.

    Features:
        - from_attributes=True (ORM/객체 변환 지원)
        - camelCase alias (저장 JSON 및 API 계약과 동일한 키)
        - populate_by_name=True (snake_case 필드명으로도 생성 가능)

    Note:
        문자열 공백 제거는 하지 않습니다. 코드/노트 버퍼의 들여쓰기가 그대로 보존되어야 합니다.
    """
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys, the persisted/wire representation."""
        return self.model_dump(mode="json", by_alias=True)


# -------------------------------------------------------------------------
# LLM Provider DTOs
# -------------------------------------------------------------------------
class LLMResponseDTO(BaseDTO):
    content: str
    token_usage: dict[str, int] | None = None
    finish_reason: str | None = None
