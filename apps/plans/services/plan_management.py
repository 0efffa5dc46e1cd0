"""
Plan management service.

Create, fetch, list and edit plans. Field validation lives here so that
the same rules apply whichever caller creates or edits a plan.
"""

import logging
from datetime import date as date_type, datetime
from typing import List, Optional
from uuid import UUID

from django.conf import settings
from django.db.models import QuerySet

from apps.accounts.models import User
from apps.plans.models import Plan, PlanType, PlanStatus

from . import authorization, plan_store
from .exceptions import (
    PlanNotFoundError,
    InsufficientPermissionsError,
    PlanValidationError,
    PlanNotEditableError,
    WrongPlanTypeError,
)
from .invite_management import build_invites
from .plan_notifications import notify_plan_created
from .plan_store import PlanPatch, conditional_update

logger = logging.getLogger(__name__)

OPTION_FIELDS = ('id', 'name', 'imageUrl', 'address', 'cuisine', 'priceLevel', 'rating')

EDITABLE_FIELDS = (
    'title', 'date', 'time', 'cuisine', 'budget', 'rsvp_deadline', 'restaurant_options',
)


# Validation rules

def validate_title(title: Optional[str]) -> str:
    title = (title or '').strip()
    if not title:
        raise PlanValidationError("Title is required")
    if len(title) > settings.PLANS_MAX_TITLE_LENGTH:
        raise PlanValidationError(
            f"Title must be at most {settings.PLANS_MAX_TITLE_LENGTH} characters"
        )
    return title


def validate_cuisine(cuisine: Optional[str]) -> str:
    cuisine = (cuisine or '').strip() or 'Any'
    if len(cuisine) > settings.PLANS_MAX_CUISINE_LENGTH:
        raise PlanValidationError(
            f"Cuisine must be at most {settings.PLANS_MAX_CUISINE_LENGTH} characters"
        )
    return cuisine


def validate_rsvp_deadline(rsvp_deadline) -> Optional[datetime]:
    """
    RSVP deadlines are optional for every plan type.

    When one is supplied it must be a datetime; the only effect of a
    deadline is that RSVPs after it are rejected.
    """
    if rsvp_deadline is None:
        return None
    if not isinstance(rsvp_deadline, datetime):
        raise PlanValidationError("rsvpDeadline must be a valid datetime")
    return rsvp_deadline


def validate_schedule(plan_type: str, date: Optional[date_type], time: Optional[str]) -> None:
    if plan_type == PlanType.PLANNED and (not date or not time):
        raise PlanValidationError("Date and time are required for planned plans")


def validate_restaurant_options(options: Optional[List[dict]]) -> List[dict]:
    """
    Normalize restaurant options.

    Each option needs an ``id`` and a ``name``; ids must be unique. Unknown
    keys are dropped.
    """
    options = options or []
    if len(options) > settings.PLANS_MAX_RESTAURANT_OPTIONS:
        raise PlanValidationError(
            f"A plan can have at most {settings.PLANS_MAX_RESTAURANT_OPTIONS} restaurant options"
        )

    cleaned = []
    seen = set()
    for option in options:
        if not isinstance(option, dict) or not option.get('id') or not option.get('name'):
            raise PlanValidationError("Each restaurant option needs an id and a name")

        option_id = str(option['id'])
        if option_id in seen:
            raise PlanValidationError(f"Duplicate restaurant option id: {option_id}")
        seen.add(option_id)

        entry = {key: option[key] for key in OPTION_FIELDS if option.get(key) is not None}
        entry['id'] = option_id
        cleaned.append(entry)

    return cleaned


def validate_invitees(invitee_ids: Optional[List]) -> List:
    invitee_ids = invitee_ids or []
    if len(invitee_ids) > settings.PLANS_MAX_INVITEES:
        raise PlanValidationError(
            f"A plan can have at most {settings.PLANS_MAX_INVITEES} invitees"
        )
    return invitee_ids


# Operations

def create_plan(
    *,
    owner: User,
    title: str,
    type: str = PlanType.PLANNED,
    date: Optional[date_type] = None,
    time: Optional[str] = None,
    cuisine: Optional[str] = None,
    budget: Optional[str] = None,
    invitee_ids: Optional[List] = None,
    restaurant_options: Optional[List[dict]] = None,
    rsvp_deadline: Optional[datetime] = None
) -> Plan:
    """
    Create a plan and invite users to it.

    Args:
        owner: User creating the plan
        title: Plan title
        type: 'planned' or 'group-swipe'
        date: Plan date (required for planned plans)
        time: Plan time (required for planned plans)
        cuisine: Cuisine filter (defaults to 'Any')
        budget: Budget indicator (defaults to '$$')
        invitee_ids: User ids to invite; the owner and unknown ids are ignored
        restaurant_options: Candidate restaurants (at least one for group swipe)
        rsvp_deadline: Optional RSVP deadline

    Returns:
        Created Plan instance with owner and invites loaded

    Raises:
        PlanValidationError: If any field is missing or invalid
    """
    if type not in PlanType.values:
        raise PlanValidationError("Invalid type. Must be planned or group-swipe")

    title = validate_title(title)
    validate_schedule(type, date, time)
    cuisine = validate_cuisine(cuisine)
    options = validate_restaurant_options(restaurant_options)
    invitee_ids = validate_invitees(invitee_ids)
    rsvp_deadline = validate_rsvp_deadline(rsvp_deadline)

    if type == PlanType.GROUP_SWIPE and not options:
        raise PlanValidationError("Group swipe plans need at least one restaurant option")

    plan = plan_store.create_plan(
        invites=build_invites(owner=owner, invitee_ids=invitee_ids),
        owner=owner,
        type=type,
        title=title,
        date=date,
        time=time or '',
        cuisine=cuisine,
        budget=budget or '$$',
        restaurant_options=options,
        rsvp_deadline=rsvp_deadline,
    )
    plan = plan_store.get_plan(plan_id=plan.id)
    logger.info(
        "Plan %s (%s) created by %s with %d invitees",
        plan.id, plan.type, owner.id, len(plan.invites.all()),
    )

    notify_plan_created(plan, owner=owner)
    return plan


def get_plan_for_user(*, plan_id: UUID, user: User) -> Plan:
    """
    Get a plan the user owns or is invited to.

    Raises:
        PlanNotFoundError: If the plan doesn't exist or the user is not a member
    """
    plan = plan_store.get_plan(plan_id=plan_id)
    if not authorization.is_member(plan, user.id):
        raise PlanNotFoundError(f"Plan with ID {plan_id} not found")
    return plan


def list_plans_for_user(*, user: User) -> QuerySet[Plan]:
    return plan_store.list_visible_to(user=user)


def build_update_patch(plan: Plan, *, user_id, changes: dict) -> PlanPatch:
    if not authorization.is_owner(plan, user_id):
        raise InsufficientPermissionsError("Only the plan owner can edit the plan")

    if plan.is_terminal:
        raise PlanNotEditableError(f"Cannot edit a {plan.status} plan")

    patch = PlanPatch()

    if 'title' in changes:
        patch.set(title=validate_title(changes['title']))
    if 'cuisine' in changes:
        patch.set(cuisine=validate_cuisine(changes['cuisine']))
    if 'budget' in changes:
        patch.set(budget=changes['budget'] or '$$')
    if 'date' in changes:
        patch.set(date=changes['date'])
    if 'time' in changes:
        patch.set(time=changes['time'] or '')
    if 'rsvp_deadline' in changes:
        patch.set(rsvp_deadline=validate_rsvp_deadline(changes['rsvp_deadline']))

    if 'restaurant_options' in changes:
        if plan.is_group_swipe:
            raise WrongPlanTypeError(
                "Restaurant options of a group swipe plan are fixed at creation"
            )
        if plan.status != PlanStatus.VOTING:
            raise PlanNotEditableError(
                "Restaurant options can only be changed while the plan is voting"
            )
        patch.set(restaurant_options=validate_restaurant_options(changes['restaurant_options']))

    validate_schedule(plan.type, patch.get(plan, 'date'), patch.get(plan, 'time'))
    return patch


def update_plan(*, plan_id: UUID, user: User, **changes) -> Plan:
    """
    Edit a plan's details (owner only).

    Args:
        plan_id: UUID of the plan
        user: User performing the update (must be the owner)
        **changes: Any of title, date, time, cuisine, budget, rsvp_deadline,
            restaurant_options; omitted fields are left unchanged

    Returns:
        Updated Plan instance

    Raises:
        PlanNotFoundError: If plan doesn't exist
        InsufficientPermissionsError: If user is not the owner
        PlanNotEditableError: If the plan is completed or cancelled
        PlanValidationError: If a new value is invalid
    """
    unknown = set(changes) - set(EDITABLE_FIELDS)
    if unknown:
        raise PlanValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")

    plan, patch = conditional_update(
        plan_id=plan_id,
        build=lambda current: build_update_patch(current, user_id=user.id, changes=changes),
    )
    if not patch.is_empty():
        logger.info("Plan %s updated by %s: %s", plan.id, user.id, ', '.join(sorted(patch.fields)))
    return plan
