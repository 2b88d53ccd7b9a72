"""
Domain exceptions for trip planning.

Validation errors (everything except PersistenceFailure) are raised inside the
planning engine and handed back to callers as failed OperationResults.
PersistenceFailure always propagates.
"""


class PlannerError(Exception):
    """Base exception for planning errors."""
    code = "planner_error"

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class InvalidParameter(PlannerError):
    """Raised for a non-positive daily distance, malformed date or negative distance."""
    code = "invalid_parameter"


class Conflict(PlannerError):
    """Raised when an edit would give two days the same date."""
    code = "conflict"


class NotFound(PlannerError):
    """Raised when a trip, day plan or expense does not exist."""
    code = "not_found"


class InvalidOperation(PlannerError):
    """Raised for edits the schedule does not allow, e.g. removing the only day."""
    code = "invalid_operation"


class PersistenceFailure(PlannerError):
    """Raised when the storage collaborator fails. Wraps the original error."""
    code = "persistence_failure"
