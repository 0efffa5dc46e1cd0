"""
Invite management service.

Builds invite lists at plan creation and handles RSVPs and participants
leaving a plan. RSVP and leave are conditional updates on the plan.
"""

import logging
from datetime import datetime
from typing import List, Optional, Tuple
from uuid import UUID

from django.utils import timezone

from apps.accounts.models import User
from apps.plans.models import Plan, PlanInvite, PlanStatus, InviteStatus

from . import authorization
from .exceptions import (
    NotInvitedError,
    NotParticipantError,
    OwnerCannotLeaveError,
    WrongPlanTypeError,
    PlanNotEditableError,
    AlreadyRespondedError,
    RsvpDeadlinePassedError,
    PlanValidationError,
)
from .lifecycle import cancel_patch
from .plan_notifications import (
    notify_rsvp_response,
    notify_participant_left,
    notify_plan_auto_cancelled,
    notify_group_swipe_result,
)
from .plan_store import PlanPatch, conditional_update
from .swipe_consensus import apply_completion_check, strip_member

logger = logging.getLogger(__name__)

RSVP_ACTIONS = {
    'accept': InviteStatus.ACCEPTED,
    'decline': InviteStatus.DECLINED,
}


def build_invites(*, owner: User, invitee_ids: List) -> List[PlanInvite]:
    """
    Build unsaved pending invites for a new plan.

    Duplicates and the owner are dropped, as are ids that match no active
    user. The invitee's name and avatar are copied onto the invite.

    Raises:
        PlanValidationError: If an id is not a valid UUID
    """
    try:
        parsed = [str(UUID(str(uid))) for uid in invitee_ids or []]
    except ValueError:
        raise PlanValidationError("inviteeIds must be valid user ids")

    wanted = [uid for uid in dict.fromkeys(parsed) if uid != str(owner.id)]
    if not wanted:
        return []

    users = {
        str(user.id): user
        for user in User.objects.filter(id__in=wanted, is_active=True)
    }

    return [
        PlanInvite(
            user=users[uid],
            name=users[uid].get_display_name(),
            avatar_uri=users[uid].avatar_uri,
            status=InviteStatus.PENDING,
        )
        for uid in wanted
        if uid in users
    ]


def build_rsvp_patch(
    plan: Plan,
    *,
    user_id,
    action: str,
    now: Optional[datetime] = None
) -> PlanPatch:
    now = now or timezone.now()

    if action not in RSVP_ACTIONS:
        raise PlanValidationError("Invalid action. Must be accept or decline")

    invite = authorization.get_invite(plan, user_id)
    if invite is None:
        raise NotInvitedError("You are not invited to this plan")

    if plan.is_group_swipe:
        raise WrongPlanTypeError(
            "Group swipe invites are accepted by submitting swipes"
        )

    if plan.status != PlanStatus.VOTING:
        raise PlanNotEditableError("This plan is no longer accepting RSVPs")

    if plan.rsvp_deadline is not None and now > plan.rsvp_deadline:
        raise RsvpDeadlinePassedError("The RSVP deadline for this plan has passed")

    if invite.status != InviteStatus.PENDING:
        raise AlreadyRespondedError(f"You have already {invite.status} this invite")

    return PlanPatch().change_invite(
        user_id,
        status=RSVP_ACTIONS[action],
        responded_at=now,
    )


def respond_to_invite(*, plan_id: UUID, user: User, action: str) -> str:
    """
    Accept or decline an invite to a planned plan.

    Args:
        plan_id: UUID of the plan
        user: Invited user
        action: 'accept' or 'decline'

    Returns:
        The invite's new status

    Raises:
        PlanNotFoundError: If plan doesn't exist
        NotInvitedError: If user has no invite on the plan
        WrongPlanTypeError: If the plan is a group swipe plan
        PlanNotEditableError: If the plan is no longer voting
        RsvpDeadlinePassedError: If the RSVP deadline has passed
        AlreadyRespondedError: If user already accepted or declined
    """
    now = timezone.now()
    plan, patch = conditional_update(
        plan_id=plan_id,
        build=lambda current: build_rsvp_patch(
            current, user_id=user.id, action=action, now=now
        ),
    )
    status = patch.invite_changes[str(user.id)]['status']
    logger.info("User %s %s invite to plan %s", user.id, status, plan.id)

    notify_rsvp_response(plan, responder=user, action=action)
    return status


def build_leave_patch(
    plan: Plan,
    *,
    user_id,
    now: Optional[datetime] = None
) -> PlanPatch:
    if authorization.is_owner(plan, user_id):
        raise OwnerCannotLeaveError(
            "The plan owner cannot leave. Cancel the plan or delegate ownership"
        )

    invite = authorization.get_invite(plan, user_id)
    if invite is None:
        raise NotParticipantError("You are not a participant in this plan")

    if not authorization.can_leave(plan, user_id):
        raise PlanNotEditableError(f"Cannot leave a {plan.status} plan")

    was_participant = authorization.counts_as_participant(plan, invite.status)

    patch = PlanPatch().remove_invite(user_id)
    strip_member(plan, patch, user_id)

    remaining = [
        status for status in patch.invite_statuses(plan).values()
        if authorization.counts_as_participant(plan, status)
    ]
    if was_participant and not remaining:
        cancel_patch(plan, patch, now or timezone.now())
        patch.meta['auto_cancelled'] = True
        return patch

    return apply_completion_check(plan, patch)


def leave_plan(*, plan_id: UUID, user: User) -> Tuple[Plan, bool]:
    """
    Leave a plan as an invitee.

    The invite is removed and the user's swipe and votes are stripped. If
    the user was the last remaining participant the plan is cancelled
    automatically; otherwise a voting group swipe plan is re-checked for
    completion since everyone left may already have swiped.

    Returns:
        Tuple of (updated Plan, whether the plan was auto-cancelled)

    Raises:
        PlanNotFoundError: If plan doesn't exist
        OwnerCannotLeaveError: If user is the plan owner
        NotParticipantError: If user has no invite on the plan
        PlanNotEditableError: If the plan can no longer be left
    """
    plan, patch = conditional_update(
        plan_id=plan_id,
        build=lambda current: build_leave_patch(current, user_id=user.id),
    )
    auto_cancelled = bool(patch.meta.get('auto_cancelled'))

    if auto_cancelled:
        logger.info("User %s left plan %s, plan auto-cancelled", user.id, plan.id)
        notify_plan_auto_cancelled(plan)
    else:
        logger.info("User %s left plan %s", user.id, plan.id)
        notify_participant_left(plan, leaver=user)
        if patch.meta.get('confirmed'):
            notify_group_swipe_result(plan)

    return plan, auto_cancelled
