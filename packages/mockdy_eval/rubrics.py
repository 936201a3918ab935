from typing import Dict

from packages.mockdy_dto.session import InterviewType


class GradingRubric:
    """
    Evaluation strategy text per interview type, injected into the grading prompt.
    """

    STRATEGIES: Dict[InterviewType, str] = {
        InterviewType.TECHNICAL: """
    Strictly evaluate using the **UMPIRE** strategy:
    1. **Understand**: Did the candidate clarify inputs/outputs/constraints?
    2. **Match**: Did they identify the correct pattern/data structure?
    3. **Plan**: Did they explain their approach/pseudocode BEFORE coding?
    4. **Implement**: Is the code correct, readable, and functional?
    5. **Review**: Did they dry-run/debug their code with examples?
    6. **Evaluate**: Did they correctly analyze Time/Space complexity?

    Mention missed UMPIRE steps in "Weaknesses".
    """,
        InterviewType.BEHAVIORAL: """
    Evaluate adherence to the **STAR** method (Situation, Task, Action, Result).
    Comment on clarity, impact, and ownership.
    """,
        InterviewType.SYSTEM_DESIGN: """
    Evaluate the solution along these axes:
    - Requirements: functional + non-functional clarity
    - High-level architecture and component decomposition
    - Data modeling and choice of storage
    - API & contracts
    - Scalability, reliability, and failure handling
    - Tradeoffs and alternative designs

    Highlight missing or weak sections in "Weaknesses".
    """,
    }

    INSTRUCTIONS = """
    You are an expert Interview Bar Raiser. Analyze the transcript and user's work above.
    {strategy}
    Provide a structured evaluation in JSON format.

    1. Score: 0-100 based on accuracy, communication, efficiency, and adherence to the interview strategy (UMPIRE/STAR).
    2. Summary: A 2-3 sentence overview of performance.
    3. Strengths: 3 key bullet points.
    4. Weaknesses: 3 key bullet points.
    5. OptimalSolution: The standard answer (code for technical, architectural summary for system design, or STAR example for behavioral).
    """

    @classmethod
    def instructions_for(cls, interview_type: InterviewType) -> str:
        return cls.INSTRUCTIONS.format(strategy=cls.STRATEGIES.get(interview_type, ""))
