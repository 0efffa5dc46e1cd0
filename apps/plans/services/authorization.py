"""
Plan authorization guard.

Pure predicates over a loaded plan (with invites prefetched). They never
touch the database beyond the prefetched invites and never raise; services
turn a False answer into the right domain error.
"""

from typing import Optional

from apps.plans.models import Plan, PlanInvite, PlanStatus, InviteStatus


def is_owner(plan: Plan, user_id) -> bool:
    return str(plan.owner_id) == str(user_id)


def get_invite(plan: Plan, user_id) -> Optional[PlanInvite]:
    user_id = str(user_id)
    for invite in plan.invites.all():
        if str(invite.user_id) == user_id:
            return invite
    return None


def is_invitee(plan: Plan, user_id) -> bool:
    return get_invite(plan, user_id) is not None


def is_member(plan: Plan, user_id) -> bool:
    """Owner or any invitee, whatever the invite status."""
    return is_owner(plan, user_id) or is_invitee(plan, user_id)


def counts_as_participant(plan: Plan, invite_status: str) -> bool:
    """
    Whether an invite with this status makes its user a participant.

    On group-swipe plans a pending invitee is already a participant: their
    first swipe is the acceptance.
    """
    if invite_status == InviteStatus.ACCEPTED:
        return True
    return plan.is_group_swipe and invite_status == InviteStatus.PENDING


def is_accepted_participant(plan: Plan, user_id) -> bool:
    if is_owner(plan, user_id):
        return True
    invite = get_invite(plan, user_id)
    return invite is not None and counts_as_participant(plan, invite.status)


def is_eligible_for_delegation(plan: Plan, user_id) -> bool:
    """Only an explicitly accepted invitee can take over a plan."""
    if is_owner(plan, user_id):
        return False
    invite = get_invite(plan, user_id)
    return invite is not None and invite.status == InviteStatus.ACCEPTED


def can_submit_swipe(plan: Plan, user_id) -> bool:
    """Owner or any invitee who has not declined."""
    if is_owner(plan, user_id):
        return True
    invite = get_invite(plan, user_id)
    return invite is not None and invite.status != InviteStatus.DECLINED


def can_leave(plan: Plan, user_id) -> bool:
    if is_owner(plan, user_id) or not is_invitee(plan, user_id):
        return False
    if plan.is_terminal:
        return False
    if plan.is_group_swipe:
        return plan.status == PlanStatus.VOTING
    return True


def member_count(plan: Plan) -> int:
    """Owner plus every invitee."""
    return 1 + len(plan.invites.all())
