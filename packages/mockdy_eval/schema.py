from typing import Any, Dict

# JSON schema the grading call is constrained to (Gemini response_schema format)
FEEDBACK_SCHEMA: Dict[str, Any] = {
    "type": "OBJECT",
    "properties": {
        "score": {"type": "INTEGER"},
        "summary": {"type": "STRING"},
        "strengths": {"type": "ARRAY", "items": {"type": "STRING"}},
        "weaknesses": {"type": "ARRAY", "items": {"type": "STRING"}},
        "optimalSolution": {"type": "STRING"},
    },
    "required": ["score", "summary", "strengths", "weaknesses", "optimalSolution"],
}
