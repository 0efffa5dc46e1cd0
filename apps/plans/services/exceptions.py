"""
Domain-specific exceptions for plans app.

These exceptions represent business rule violations and should be
caught in views and converted to appropriate HTTP responses.
"""


class PlansServiceError(Exception):
    """Base exception for all plans service errors."""
    pass


# -- 404 ---------------------------------------------------------------------

class PlanNotFoundError(PlansServiceError):
    """Raised when a plan does not exist or is not visible to the user."""
    pass


# -- 403 ---------------------------------------------------------------------

class InsufficientPermissionsError(PlansServiceError):
    """Raised when an owner-only action is attempted by someone else."""
    pass


class NotParticipantError(PlansServiceError):
    """Raised when the user is neither the owner nor an invitee."""
    pass


class NotInvitedError(PlansServiceError):
    """Raised when a user without an invite tries to RSVP."""
    pass


class OwnerCannotLeaveError(PlansServiceError):
    """Raised when the plan owner tries to leave instead of cancelling."""
    pass


# -- 400 ---------------------------------------------------------------------

class PlanValidationError(PlansServiceError):
    """Raised when plan fields are missing or invalid."""
    pass


class WrongPlanTypeError(PlansServiceError):
    """Raised when an action does not apply to the plan's type."""
    pass


class PlanNotEditableError(PlansServiceError):
    """Raised when mutating a plan that is no longer open for changes."""
    pass


class InvalidStatusTransitionError(PlansServiceError):
    """Raised when a status change is not allowed by the state machine."""
    pass


class AlreadyRespondedError(PlansServiceError):
    """Raised when an invitee RSVPs a second time."""
    pass


class RsvpDeadlinePassedError(PlansServiceError):
    """Raised when an RSVP arrives after the plan's RSVP deadline."""
    pass


class AlreadySubmittedError(PlansServiceError):
    """Raised when a participant submits swipes a second time."""
    pass


class InvalidVoteError(PlansServiceError):
    """Raised when votes reference ids outside the plan's restaurant options."""
    pass


class DelegationNotAllowedError(PlansServiceError):
    """Raised when ownership cannot be delegated to the requested user."""
    pass


# -- 409 ---------------------------------------------------------------------

class PlanConflictError(PlansServiceError):
    """Raised when a conditional update keeps losing to concurrent writers."""
    pass
