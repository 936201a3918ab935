from typing import Any, Optional

from pydantic import BaseModel, Field

from packages.mockdy_core.dto import BaseDTO


class NotionConnection(BaseDTO):
    """
    Per-profile Notion connection obtained through the OAuth flow.
    Single record, replaced wholesale on (re)connect, refresh or disconnect.
    """
    access_token: str
    refresh_token: Optional[str] = None
    workspace_id: Optional[str] = None
    workspace_name: Optional[str] = None
    workspace_icon: Optional[str] = None
    bot_id: Optional[str] = None
    # Target database for reports. Pasted by the user or taken from the template duplicate.
    database_id: Optional[str] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.access_token and self.database_id)

    @classmethod
    def from_token_payload(cls, payload: dict) -> "NotionConnection":
        """
        Build a connection from the provider's token response.
        If a template was used, duplicated_template_id holds the database ID.
        """
        return cls(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            workspace_id=payload.get("workspace_id"),
            workspace_name=payload.get("workspace_name"),
            workspace_icon=payload.get("workspace_icon"),
            bot_id=payload.get("bot_id"),
            database_id=payload.get("duplicated_template_id"),
        )

    def refreshed(self, payload: dict) -> "NotionConnection":
        """
        Apply a refresh-token response. The refresh response carries no workspace
        info, so the known workspace metadata and database id are kept.
        """
        return self.model_copy(update={
            "access_token": payload["access_token"],
            "refresh_token": payload.get("refresh_token") or self.refresh_token,
            "bot_id": payload.get("bot_id") or self.bot_id,
        })


class ReportResult(BaseModel):
    """
    Outcome of pushing a report to Notion. Failures are values, not exceptions.
    """
    success: bool
    error: Optional[str] = None
    page_id: Optional[str] = None


class ProxyResponse(BaseModel):
    """
    Provider response forwarded verbatim by the resource proxy.
    """
    status_code: int = Field(..., description="Provider HTTP status")
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300
