import unittest

from packages.mockdy_core.errors import InvalidTransitionError
from packages.mockdy_session.state import InterviewEvent, InterviewPhase, InterviewStateMachine


class TestInterviewStateMachine(unittest.TestCase):

    def test_happy_path(self):
        machine = InterviewStateMachine()
        self.assertEqual(machine.phase, InterviewPhase.IDLE)
        self.assertEqual(machine.fire(InterviewEvent.START), InterviewPhase.LOADING)
        self.assertEqual(machine.fire(InterviewEvent.READY), InterviewPhase.ACTIVE)
        self.assertEqual(machine.fire(InterviewEvent.END), InterviewPhase.LOADING)
        self.assertEqual(machine.fire(InterviewEvent.GRADED), InterviewPhase.FEEDBACK)
        self.assertEqual(machine.fire(InterviewEvent.REVIEW), InterviewPhase.REVIEWING)
        self.assertEqual(machine.fire(InterviewEvent.RESET), InterviewPhase.IDLE)

    def test_fail_returns_to_phase_before_loading(self):
        machine = InterviewStateMachine()
        machine.fire(InterviewEvent.START)
        self.assertEqual(machine.fire(InterviewEvent.FAIL), InterviewPhase.IDLE)

        machine = InterviewStateMachine(InterviewPhase.ACTIVE)
        machine.fire(InterviewEvent.END)
        self.assertEqual(machine.fire(InterviewEvent.FAIL), InterviewPhase.ACTIVE)

    def test_invalid_transition_raises(self):
        machine = InterviewStateMachine()
        self.assertFalse(machine.can(InterviewEvent.END))
        with self.assertRaises(InvalidTransitionError) as ctx:
            machine.fire(InterviewEvent.END)
        self.assertEqual(ctx.exception.status_code, 409)
        self.assertEqual(machine.phase, InterviewPhase.IDLE)

    def test_no_send_path_from_feedback(self):
        machine = InterviewStateMachine(InterviewPhase.FEEDBACK)
        self.assertFalse(machine.can(InterviewEvent.START))
        self.assertFalse(machine.can(InterviewEvent.END))
        self.assertTrue(machine.can(InterviewEvent.RESET))


if __name__ == "__main__":
    unittest.main()
