"""
Group swipe consensus.

Every participant of a group-swipe plan submits one swipe: the list of
restaurant options they liked. Once the owner and every invitee have
submitted, the votes are tallied and the plan is confirmed with the winner.
Recording a swipe, accepting the swiper's pending invite, the completion
check and the confirmation are one conditional update, so racing swipes by
different users both count and a duplicate swipe by one user loses.
"""

import logging
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from django.utils import timezone

from apps.accounts.models import User
from apps.plans.models import Plan, PlanStatus, InviteStatus

from . import authorization
from .exceptions import (
    NotParticipantError,
    WrongPlanTypeError,
    PlanNotEditableError,
    AlreadySubmittedError,
    InvalidVoteError,
)
from .lifecycle import confirm_patch
from .plan_notifications import notify_swipe_completed, notify_group_swipe_result
from .plan_store import PlanPatch, conditional_update
from .tally import tally_votes

logger = logging.getLogger(__name__)


def strip_member(plan: Plan, patch: PlanPatch, user_id) -> PlanPatch:
    """Remove a user's swipe and every vote they cast."""
    user_id = str(user_id)
    swipes = patch.get(plan, 'swipes_completed')
    votes = patch.get(plan, 'votes')

    if user_id in swipes:
        patch.set(swipes_completed=[uid for uid in swipes if uid != user_id])

    if any(user_id in voters for voters in votes.values()):
        patch.set(votes={
            option_id: [uid for uid in voters if uid != user_id]
            for option_id, voters in votes.items()
        })
    return patch


def apply_completion_check(plan: Plan, patch: PlanPatch) -> PlanPatch:
    """
    Confirm the plan if everyone expected to swipe has done so.

    Evaluated against the plan as it will be after ``patch``. The expected
    set is the owner plus every invitee, whatever their invite status.
    """
    if not plan.is_group_swipe or patch.get(plan, 'status') != PlanStatus.VOTING:
        return patch

    expected = set(patch.member_ids(plan))
    done = set(patch.get(plan, 'swipes_completed'))
    if not expected <= done:
        return patch

    winner = tally_votes(patch.get(plan, 'restaurant_options'), patch.get(plan, 'votes'))
    if winner is None:
        return patch
    return confirm_patch(plan, patch, winner)


def build_swipe_patch(
    plan: Plan,
    *,
    user_id,
    votes: List[str],
    now: Optional[datetime] = None
) -> PlanPatch:
    user_id = str(user_id)

    if not authorization.can_submit_swipe(plan, user_id):
        raise NotParticipantError("You are not a participant in this plan")

    if not plan.is_group_swipe:
        raise WrongPlanTypeError("Swipes can only be submitted on group swipe plans")

    if plan.status != PlanStatus.VOTING:
        raise PlanNotEditableError("This plan is no longer accepting swipes")

    if user_id in plan.swipes_completed:
        raise AlreadySubmittedError("You have already submitted your swipes for this plan")

    option_ids = set(plan.option_ids())
    unknown = [option_id for option_id in votes if option_id not in option_ids]
    if unknown:
        raise InvalidVoteError(
            f"Votes reference options not in restaurantOptions: {', '.join(unknown)}"
        )

    new_votes = {option_id: list(voters) for option_id, voters in plan.votes.items()}
    for option_id in dict.fromkeys(votes):
        voters = new_votes.setdefault(option_id, [])
        if user_id not in voters:
            voters.append(user_id)

    patch = PlanPatch().set(
        swipes_completed=[*plan.swipes_completed, user_id],
        votes=new_votes,
    )

    invite = authorization.get_invite(plan, user_id)
    if invite is not None and invite.status == InviteStatus.PENDING:
        patch.change_invite(
            user_id,
            status=InviteStatus.ACCEPTED,
            responded_at=now or timezone.now(),
        )

    return apply_completion_check(plan, patch)


def submit_swipe(*, plan_id: UUID, user: User, votes: List[str]) -> Plan:
    """
    Record a participant's swipe on a group swipe plan.

    Args:
        plan_id: UUID of the plan
        user: Swiping user (owner or invitee)
        votes: Ids of the restaurant options the user liked (may be empty)

    Returns:
        Updated Plan instance; confirmed with ``restaurant`` set when this
        was the last outstanding swipe

    Raises:
        PlanNotFoundError: If plan doesn't exist
        NotParticipantError: If user is neither the owner nor an invitee
        WrongPlanTypeError: If the plan is not a group swipe plan
        PlanNotEditableError: If the plan is no longer voting
        AlreadySubmittedError: If user has already swiped
        InvalidVoteError: If a vote references an unknown option
    """
    now = timezone.now()
    plan, patch = conditional_update(
        plan_id=plan_id,
        build=lambda current: build_swipe_patch(
            current, user_id=user.id, votes=votes, now=now
        ),
    )
    logger.info("User %s submitted swipes on plan %s", user.id, plan.id)

    notify_swipe_completed(plan, swiper=user)
    if patch.meta.get('confirmed'):
        logger.info(
            "Group swipe plan %s confirmed with restaurant %s",
            plan.id, plan.restaurant['id'],
        )
        notify_group_swipe_result(plan)

    return plan
