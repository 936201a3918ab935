import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from packages.mockdy_dto.session import InterviewType, StoredSession

# Notion limit for a single rich_text content
MAX_TEXT_LENGTH = 2000
ELLIPSIS = "..."

_LEETCODE_RE = re.compile(r"(?:LeetCode|Leetcode|LC)\s*#?\s*(\d+)", re.IGNORECASE)
_DESIGN_RE = re.compile(
    r"(?:design|Design|build|Build)\s+(?:a\s+)?(?:system\s+for\s+)?[\"']?([^\"'\n]{1,50})[\"']?",
    re.IGNORECASE,
)
_QUOTED_RE = re.compile(r"[\"']([^\"'\n]{1,50})[\"']")


def truncate(text: Optional[str], limit: int = MAX_TEXT_LENGTH) -> str:
    """
    Shorten text to `limit` characters total, ending with an ellipsis marker.
    Text at or under the limit is returned untouched.
    """
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def format_transcript(session: StoredSession) -> str:
    return "\n\n".join(
        f"{'👤 You' if m.role == 'user' else '🤖 Interviewer'}: {m.text}" for m in session.messages
    )


def _first_model_message(session: StoredSession) -> str:
    for message in session.messages:
        if message.role == "model":
            return message.text
    return ""


def generate_title(session: StoredSession) -> str:
    if session.type == InterviewType.TECHNICAL:
        if session.problem_info:
            return f"Mock Leetcode {session.problem_info.id}. {session.problem_info.name}"
        match = _LEETCODE_RE.search(_first_model_message(session))
        if match:
            return f"Mock Leetcode {match.group(1)}"
        return "Mock Leetcode"

    if session.type == InterviewType.SYSTEM_DESIGN:
        first = _first_model_message(session)
        match = _DESIGN_RE.search(first) or _QUOTED_RE.search(first)
        if match and len(match.group(1)) > 3:
            name = match.group(1).strip()
            return f"Design {name[:1].upper()}{name[1:]}"
        return "Design System"

    return "Mock BQ"


def iso_date(timestamp_ms: int) -> str:
    """Epoch milliseconds -> `2024-01-01T00:00:00.000Z`."""
    dt = datetime.fromtimestamp(timestamp_ms / 1000, tz=timezone.utc)
    return dt.isoformat(timespec="milliseconds").replace("+00:00", "Z")


# -------------------------------------------------------------------------
# Block helpers
# -------------------------------------------------------------------------
def _text(content: str, **annotations) -> Dict[str, Any]:
    item: Dict[str, Any] = {"type": "text", "text": {"content": content}}
    if annotations:
        item["annotations"] = annotations
    return item


def _heading(level: int, content: str) -> Dict[str, Any]:
    key = f"heading_{level}"
    return {"object": "block", "type": key, key: {"rich_text": [_text(content)]}}


def _paragraph(content: str) -> Dict[str, Any]:
    return {"object": "block", "type": "paragraph", "paragraph": {"rich_text": [_text(content)]}}


def _code(content: str, language: str = "python") -> Dict[str, Any]:
    return {"object": "block", "type": "code", "code": {"language": language, "rich_text": [_text(content)]}}


def _bullet(content: str, **annotations) -> Dict[str, Any]:
    return {
        "object": "block",
        "type": "bulleted_list_item",
        "bulleted_list_item": {"rich_text": [_text(truncate(content), **annotations)]},
    }


def _divider() -> Dict[str, Any]:
    return {"object": "block", "type": "divider", "divider": {}}


def _column(children: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {"object": "block", "type": "column", "column": {"children": children}}


class NotionPageBuilder:
    """
    Converts StoredSession -> Notion page creation request.

    Expected Notion Database Schema:
    - Title (title), Type (select), Score (number), Date (date)
    """

    @staticmethod
    def build(session: StoredSession, database_id: str) -> Dict[str, Any]:
        feedback = session.feedback
        is_technical = session.type == InterviewType.TECHNICAL

        summary = truncate(feedback.summary)
        transcript = truncate(format_transcript(session))
        code = truncate(session.code_or_notes)
        optimal = truncate(feedback.optimal_solution)

        children: List[Dict[str, Any]] = [
            # Summary
            _heading(1, "📊 Summary"),
            {
                "object": "block",
                "type": "callout",
                "callout": {
                    "icon": {"emoji": "💡"},
                    "color": "yellow_background",
                    "rich_text": [_text(summary or "No summary available.", bold=True)],
                },
            },
            _divider(),
            # Performance review (2 columns)
            _heading(2, "Performance Review"),
            {
                "object": "block",
                "type": "column_list",
                "column_list": {
                    "children": [
                        _column([_heading(3, "✅ Strengths")] + [_bullet(s) for s in feedback.strengths]),
                        _column(
                            [_heading(3, "⚠️ Areas for Improvement")]
                            + [_bullet(w, color="red", bold=True) for w in feedback.weaknesses]
                        ),
                    ]
                },
            },
            _divider(),
            # Transcript (H2 + toggle)
            _heading(2, "📝 Interview Transcript"),
            {
                "object": "block",
                "type": "toggle",
                "toggle": {
                    "rich_text": [_text("View Transcript")],
                    "children": [_paragraph(transcript or "No transcript recorded.")],
                },
            },
            _divider(),
        ]

        # Code / notes section is hidden for behavioral sessions
        if session.type != InterviewType.BEHAVIORAL:
            children.append(_heading(2, "💻 Code / Notes"))
            if is_technical:
                children.append(_code(code or "// No code recorded"))
            else:
                children.append(_paragraph(code or "No design notes / high-level description provided."))

        if is_technical:
            children.append(_heading(2, "✨ Optimal Solution"))
            children.append(_code(optimal or "// No optimal solution provided."))
        else:
            children.append(_heading(2, "🧭 Recommended Approach / Standard Answer"))
            children.append(_paragraph(optimal or "No recommended approach / standard answer provided."))

        return {
            "parent": {"database_id": database_id},
            "properties": {
                "Title": {"title": [{"text": {"content": truncate(generate_title(session))}}]},
                "Type": {"select": {"name": session.type.value}},
                "Score": {"number": feedback.score},
                "Date": {"date": {"start": iso_date(session.timestamp)}},
            },
            "children": children,
        }
