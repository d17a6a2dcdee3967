"""
Workflow error types.

Each error carries an HTTP-style status code so collaborators (views, API
handlers, admin actions) can map them without inspecting messages.
"""

from __future__ import annotations

from typing import Any, Iterable


class WorkflowError(Exception):
    """Base class for errors surfaced by the application workflow."""

    status_code: int = 400
    kind: str = "workflow_error"

    def to_dict(self) -> dict[str, Any]:
        return {"status": "rejected", "error": self.kind, "reason": str(self)}


class InvalidTransition(WorkflowError):
    """Requested status is not reachable from the application's current status."""

    status_code = 409
    kind = "invalid_transition"

    def __init__(self, current: str, requested: str, allowed: Iterable[str] = ()):
        self.current = str(current)
        self.requested = str(requested)
        self.allowed = [str(status) for status in allowed]
        allowed_str = ", ".join(self.allowed) if self.allowed else "none"
        super().__init__(
            f"Invalid state transition from '{self.current}' to '{self.requested}'. "
            f"Allowed transitions: {allowed_str}"
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data.update(
            {
                "current_status": self.current,
                "requested_status": self.requested,
                "allowed_transitions": list(self.allowed),
            }
        )
        return data


class BusinessRuleViolation(WorkflowError):
    """A precondition unrelated to the state machine failed."""

    status_code = 422
    kind = "business_rule_violation"


class UnauthorizedAction(WorkflowError):
    """The actor may not perform the requested action."""

    status_code = 403
    kind = "unauthorized"

    def __init__(self, action: str, resource: str = ""):
        self.action = action
        self.resource = resource
        message = f"Unauthorized: You do not have permission to {action}"
        if resource:
            message += f" {resource}"
        super().__init__(message)
