"""Error types for workout plans.

Reason codes:
- empty_plan: plan has no exercises and cannot be started
- invalid_format: model output or stored data is not a workout plan
- malformed_exercise: an exercise entry failed validation
"""

EMPTY_PLAN = "empty_plan"
INVALID_FORMAT = "invalid_format"
MALFORMED_EXERCISE = "malformed_exercise"


class InvalidPlanError(ValueError):
    """Raised when a workout plan cannot be used.

    Attributes:
        reason: Reason code (e.g., "empty_plan", "invalid_format")
        message: Human readable explanation shown to the user
    """

    def __init__(self, reason: str, message: str):
        self.reason = reason
        self.message = message
        super().__init__(f"{reason}: {message}")
