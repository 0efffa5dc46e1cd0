"""
Plan lifecycle controller.

Owns the plan status state machine:

    voting    -> confirmed | cancelled
    confirmed -> completed | cancelled

``completed`` and ``cancelled`` are terminal. The ``*_patch`` helpers add a
transition to a PlanPatch so other services (consensus, leave) can combine a
transition with their own changes in one conditional update.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from django.utils import timezone

from apps.accounts.models import User
from apps.plans.models import Plan, PlanStatus

from . import authorization
from .exceptions import (
    InsufficientPermissionsError,
    InvalidStatusTransitionError,
    PlanValidationError,
)
from .plan_notifications import (
    notify_plan_cancelled,
    notify_plan_completed,
    notify_plan_confirmed,
)
from .plan_store import PlanPatch, conditional_update
from .tally import tally_votes

logger = logging.getLogger(__name__)


ALLOWED_TRANSITIONS = {
    PlanStatus.VOTING: (PlanStatus.CONFIRMED, PlanStatus.CANCELLED),
    PlanStatus.CONFIRMED: (PlanStatus.COMPLETED, PlanStatus.CANCELLED),
}


def check_transition(current: str, target: str) -> None:
    if target not in ALLOWED_TRANSITIONS.get(current, ()):
        raise InvalidStatusTransitionError(f"Cannot transition from {current} to {target}")


def confirm_patch(plan: Plan, patch: PlanPatch, restaurant: dict) -> PlanPatch:
    check_transition(patch.get(plan, 'status'), PlanStatus.CONFIRMED)
    patch.set(status=PlanStatus.CONFIRMED, restaurant=restaurant)
    patch.meta['confirmed'] = restaurant
    return patch


def cancel_patch(plan: Plan, patch: PlanPatch, now: datetime) -> PlanPatch:
    check_transition(patch.get(plan, 'status'), PlanStatus.CANCELLED)
    patch.set(status=PlanStatus.CANCELLED, cancelled_at=now, restaurant=None)
    patch.meta['cancelled'] = True
    return patch


def complete_patch(plan: Plan, patch: PlanPatch) -> PlanPatch:
    check_transition(patch.get(plan, 'status'), PlanStatus.COMPLETED)
    patch.set(status=PlanStatus.COMPLETED)
    patch.meta['completed'] = True
    return patch


def build_status_patch(
    plan: Plan,
    *,
    user_id,
    status: str,
    restaurant_id: Optional[str] = None,
    now: Optional[datetime] = None
) -> PlanPatch:
    """
    Owner-requested status change, checked against the state machine.

    A planned plan confirms with the option named by ``restaurant_id``, or
    with the tally winner of its options when the owner names none.
    """
    if not authorization.is_owner(plan, user_id):
        raise InsufficientPermissionsError("Only the plan owner can update status")

    patch = PlanPatch()

    if restaurant_id is not None and status != PlanStatus.CONFIRMED:
        raise PlanValidationError("restaurantId is only accepted when confirming a plan")

    if status == PlanStatus.CANCELLED:
        return cancel_patch(plan, patch, now or timezone.now())

    if status == PlanStatus.COMPLETED:
        return complete_patch(plan, patch)

    if status == PlanStatus.CONFIRMED:
        if plan.is_group_swipe:
            raise InvalidStatusTransitionError(
                "Group swipe plans are confirmed once every participant has swiped"
            )
        check_transition(plan.status, PlanStatus.CONFIRMED)
        if restaurant_id is not None:
            chosen = next(
                (o for o in plan.restaurant_options if o['id'] == str(restaurant_id)),
                None
            )
            if chosen is None:
                raise PlanValidationError("restaurantId must be one of the plan's restaurant options")
            return confirm_patch(plan, patch, chosen)
        winner = tally_votes(plan.restaurant_options, plan.votes)
        if winner is None:
            raise PlanValidationError("Add a restaurant to the plan before confirming it")
        return confirm_patch(plan, patch, winner)

    raise InvalidStatusTransitionError(
        "Invalid status. Must be confirmed, completed, or cancelled"
    )


def update_status(
    *,
    plan_id: UUID,
    user: User,
    status: str,
    restaurant_id: Optional[str] = None
) -> Plan:
    """
    Move a plan to a new status (owner only).

    Args:
        plan_id: UUID of the plan
        user: User requesting the change (must be the owner)
        status: 'confirmed' (planned plans only), 'completed' or 'cancelled'
        restaurant_id: Option to confirm a planned plan with (optional)

    Returns:
        Updated Plan instance

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user is not the owner
        InvalidStatusTransitionError: If the state machine forbids the change
        PlanValidationError: If a planned plan has no restaurant to confirm,
            or restaurant_id is not one of its options
    """
    now = timezone.now()
    plan, patch = conditional_update(
        plan_id=plan_id,
        build=lambda current: build_status_patch(
            current, user_id=user.id, status=status,
            restaurant_id=restaurant_id, now=now
        ),
    )
    logger.info("Plan %s moved to %s by %s", plan.id, plan.status, user.id)

    if patch.meta.get('cancelled'):
        notify_plan_cancelled(plan, cancelled_by=user)
    elif patch.meta.get('completed'):
        notify_plan_completed(plan)
    elif patch.meta.get('confirmed'):
        notify_plan_confirmed(plan, exclude_user_id=user.id)

    return plan


def cancel_plan(*, plan_id: UUID, user: User) -> Plan:
    """Cancel a non-terminal plan (owner only)."""
    return update_status(plan_id=plan_id, user=user, status=PlanStatus.CANCELLED)


def complete_plan(*, plan_id: UUID, user: User) -> Plan:
    """Mark a confirmed plan as completed (owner only)."""
    return update_status(plan_id=plan_id, user=user, status=PlanStatus.COMPLETED)
