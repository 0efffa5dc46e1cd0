"""
Plan store.

Persistence primitives for the Plan aggregate. Every state change goes
through ``conditional_update``: read a snapshot of the plan, let a builder
check its preconditions against that snapshot and describe the change as a
``PlanPatch``, then write the patch only if the plan's ``version`` is still
the one that was read. A writer that lost the race re-reads and re-runs the
builder, so the preconditions are always evaluated against the state the
write actually lands on.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set, Tuple
from uuid import UUID

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import F, Q, QuerySet
from django.utils import timezone

from apps.accounts.models import User
from apps.plans.models import Plan, PlanInvite

from .exceptions import PlanNotFoundError, PlanConflictError

logger = logging.getLogger(__name__)


@dataclass
class PlanPatch:
    """
    Pending change to one plan.

    ``fields`` are Plan column values, ``invite_changes`` maps a user id to
    PlanInvite column values, ``removed_invites`` holds user ids whose invite
    is deleted. ``meta`` carries facts about the change (auto-cancelled,
    confirmed winner, ...) back to the caller.
    """

    fields: Dict[str, Any] = field(default_factory=dict)
    invite_changes: Dict[str, Dict[str, Any]] = field(default_factory=dict)
    removed_invites: Set[str] = field(default_factory=set)
    meta: Dict[str, Any] = field(default_factory=dict)

    def set(self, **fields) -> 'PlanPatch':
        self.fields.update(fields)
        return self

    def change_invite(self, user_id, **changes) -> 'PlanPatch':
        self.invite_changes.setdefault(str(user_id), {}).update(changes)
        return self

    def remove_invite(self, user_id) -> 'PlanPatch':
        user_id = str(user_id)
        self.removed_invites.add(user_id)
        self.invite_changes.pop(user_id, None)
        return self

    def is_empty(self) -> bool:
        return not (self.fields or self.invite_changes or self.removed_invites)

    # Views of the plan as it will be once the patch is applied

    def get(self, plan: Plan, name: str):
        return self.fields.get(name, getattr(plan, name))

    def owner_id(self, plan: Plan) -> str:
        return str(self.get(plan, 'owner_id'))

    def invite_statuses(self, plan: Plan) -> Dict[str, str]:
        """Map of user id to invite status after the patch, in invite order."""
        statuses = {}
        for invite in plan.invites.all():
            user_id = str(invite.user_id)
            if user_id in self.removed_invites:
                continue
            statuses[user_id] = self.invite_changes.get(user_id, {}).get('status', invite.status)
        return statuses

    def member_ids(self, plan: Plan) -> List[str]:
        """Owner followed by every remaining invitee."""
        return [self.owner_id(plan), *self.invite_statuses(plan).keys()]


class _StaleVersion(Exception):
    """The plan changed between read and write."""


def _plan_queryset() -> QuerySet[Plan]:
    return Plan.objects.select_related('owner').prefetch_related('invites')


def get_plan(*, plan_id: UUID) -> Plan:
    """
    Get a plan with its owner and invites loaded.

    Raises:
        PlanNotFoundError: If no plan has this id (or the id is malformed)
    """
    try:
        return _plan_queryset().get(id=plan_id)
    except (Plan.DoesNotExist, ValidationError, ValueError):
        raise PlanNotFoundError(f"Plan with ID {plan_id} not found")


@transaction.atomic
def create_plan(*, invites: List[PlanInvite], **fields) -> Plan:
    """
    Insert a plan and its invites in one transaction.

    Args:
        invites: Unsaved PlanInvite instances (plan is assigned here)
        **fields: Plan column values

    Returns:
        The created Plan
    """
    plan = Plan.objects.create(**fields)
    for invite in invites:
        invite.plan = plan
    PlanInvite.objects.bulk_create(invites)
    return plan


def list_visible_to(*, user: User) -> QuerySet[Plan]:
    """Plans the user owns or has an invite on, newest first."""
    return (
        _plan_queryset()
        .filter(Q(owner=user) | Q(invites__user=user))
        .distinct()
        .order_by('-created_at')
    )


def _write(plan: Plan, patch: PlanPatch) -> None:
    updated = (
        Plan.objects
        .filter(pk=plan.pk, version=plan.version)
        .update(version=F('version') + 1, updated_at=timezone.now(), **patch.fields)
    )
    if updated != 1:
        raise _StaleVersion()

    if patch.removed_invites:
        PlanInvite.objects.filter(
            plan_id=plan.pk,
            user_id__in=list(patch.removed_invites),
        ).delete()

    for user_id, changes in patch.invite_changes.items():
        PlanInvite.objects.filter(plan_id=plan.pk, user_id=user_id).update(**changes)


def conditional_update(
    *,
    plan_id: UUID,
    build: Callable[[Plan], PlanPatch],
    max_retries: Optional[int] = None
) -> Tuple[Plan, PlanPatch]:
    """
    Apply a change to a plan atomically against its current state.

    ``build`` receives a fresh snapshot of the plan, raises a domain error if
    the change is not allowed, and otherwise returns the PlanPatch to write.
    The write is a compare-and-set on ``version``; if another request wrote
    the plan first, the snapshot is re-read and ``build`` runs again.

    Args:
        plan_id: UUID of the plan
        build: Precondition check + patch builder
        max_retries: Attempts before giving up (PLANS_UPDATE_MAX_RETRIES)

    Returns:
        Tuple of (plan reloaded after the write, applied patch)

    Raises:
        PlanNotFoundError: If the plan doesn't exist
        PlanConflictError: If every attempt lost to a concurrent writer
        PlansServiceError: Whatever ``build`` raises; nothing is written
    """
    attempts = max_retries or settings.PLANS_UPDATE_MAX_RETRIES

    for attempt in range(attempts):
        plan = get_plan(plan_id=plan_id)
        patch = build(plan)

        if patch.is_empty():
            return plan, patch

        try:
            with transaction.atomic():
                _write(plan, patch)
        except _StaleVersion:
            logger.warning(
                "Plan %s changed during update (attempt %d/%d), retrying",
                plan_id, attempt + 1, attempts,
            )
            continue

        return get_plan(plan_id=plan_id), patch

    raise PlanConflictError(
        f"Plan {plan_id} is being modified by another request, please retry"
    )
