"""Services for plans business logic."""

from .exceptions import (
    PlansServiceError,
    PlanNotFoundError,
    InsufficientPermissionsError,
    NotParticipantError,
    NotInvitedError,
    OwnerCannotLeaveError,
    PlanValidationError,
    WrongPlanTypeError,
    PlanNotEditableError,
    InvalidStatusTransitionError,
    AlreadyRespondedError,
    RsvpDeadlinePassedError,
    AlreadySubmittedError,
    InvalidVoteError,
    DelegationNotAllowedError,
    PlanConflictError,
)
from .plan_management import (
    create_plan,
    get_plan_for_user,
    list_plans_for_user,
    update_plan,
    validate_rsvp_deadline,
)
from .invite_management import respond_to_invite, leave_plan
from .swipe_consensus import submit_swipe
from .lifecycle import update_status, cancel_plan, complete_plan
from .ownership import delegate_ownership
from .tally import tally_votes

__all__ = [
    # Exceptions
    'PlansServiceError',
    'PlanNotFoundError',
    'InsufficientPermissionsError',
    'NotParticipantError',
    'NotInvitedError',
    'OwnerCannotLeaveError',
    'PlanValidationError',
    'WrongPlanTypeError',
    'PlanNotEditableError',
    'InvalidStatusTransitionError',
    'AlreadyRespondedError',
    'RsvpDeadlinePassedError',
    'AlreadySubmittedError',
    'InvalidVoteError',
    'DelegationNotAllowedError',
    'PlanConflictError',
    # Plan management
    'create_plan',
    'get_plan_for_user',
    'list_plans_for_user',
    'update_plan',
    'validate_rsvp_deadline',
    # Invites
    'respond_to_invite',
    'leave_plan',
    # Consensus
    'submit_swipe',
    'tally_votes',
    # Lifecycle
    'update_status',
    'cancel_plan',
    'complete_plan',
    # Ownership
    'delegate_ownership',
]
