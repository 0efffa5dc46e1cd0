"""
Ownership delegation service.

Hands a plan over to one of its accepted invitees. The previous owner
leaves the plan in the same conditional update.
"""

import logging
from uuid import UUID

from django.conf import settings

from apps.accounts.models import User
from apps.plans.models import Plan

from . import authorization
from .exceptions import (
    InsufficientPermissionsError,
    PlanNotEditableError,
    DelegationNotAllowedError,
)
from .plan_notifications import notify_ownership_delegated, notify_group_swipe_result
from .plan_store import PlanPatch, conditional_update
from .swipe_consensus import apply_completion_check, strip_member

logger = logging.getLogger(__name__)


def build_delegation_patch(plan: Plan, *, user_id, new_owner_id) -> PlanPatch:
    if not authorization.is_owner(plan, user_id):
        raise InsufficientPermissionsError("Only the plan owner can delegate ownership")

    if plan.is_terminal:
        raise PlanNotEditableError(f"Cannot delegate a {plan.status} plan")

    minimum = settings.PLANS_MIN_DELEGATION_MEMBERS
    if authorization.member_count(plan) < minimum:
        raise DelegationNotAllowedError(
            f"Ownership can only be delegated on plans with at least {minimum} members"
        )

    if not authorization.is_eligible_for_delegation(plan, new_owner_id):
        raise DelegationNotAllowedError(
            "Ownership can only be delegated to an invitee who has accepted"
        )

    new_owner = authorization.get_invite(plan, new_owner_id).user_id
    patch = PlanPatch().set(owner_id=new_owner)
    patch.remove_invite(new_owner)
    strip_member(plan, patch, plan.owner_id)
    return apply_completion_check(plan, patch)


def delegate_ownership(*, plan_id: UUID, user: User, new_owner_id) -> Plan:
    """
    Transfer plan ownership to an accepted invitee.

    Args:
        plan_id: UUID of the plan
        user: Current owner
        new_owner_id: User id of the invitee taking over

    Returns:
        Updated Plan instance

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user is not the owner
        PlanNotEditableError: If the plan is completed or cancelled
        DelegationNotAllowedError: If the plan is too small or the target
            has not accepted
    """
    plan, patch = conditional_update(
        plan_id=plan_id,
        build=lambda current: build_delegation_patch(
            current, user_id=user.id, new_owner_id=new_owner_id
        ),
    )
    logger.info("Plan %s delegated from %s to %s", plan.id, user.id, plan.owner_id)

    notify_ownership_delegated(plan, previous_owner=user)
    if patch.meta.get('confirmed'):
        notify_group_swipe_result(plan)

    return plan
