"""
Plan notification side effects.

Called after a plan change has been committed. Delivery is best-effort
(apps.notifications swallows and logs failures), so nothing here can fail
the request that triggered it.
"""

from apps.notifications.models import NotificationType
from apps.notifications.services import notify, notify_many


def _data(plan, **extra):
    return {'planId': str(plan.id), **extra}


def _invitee_ids(plan, exclude=()):
    excluded = {str(uid) for uid in exclude}
    return [
        str(invite.user_id)
        for invite in plan.invites.all()
        if str(invite.user_id) not in excluded
    ]


def _member_ids(plan, exclude=()):
    excluded = {str(uid) for uid in exclude}
    ids = [str(plan.owner_id), *_invitee_ids(plan)]
    return [uid for uid in ids if uid not in excluded]


def notify_plan_created(plan, owner):
    if plan.is_group_swipe:
        notify_many(
            user_ids=_invitee_ids(plan),
            type=NotificationType.GROUP_SWIPE_INVITE,
            title='Group Swipe Started!',
            body=f'{owner.get_display_name()} started a group swipe. Tap to vote!',
            data=_data(plan),
        )
    else:
        notify_many(
            user_ids=_invitee_ids(plan),
            type=NotificationType.PLAN_INVITE,
            title='Dining Plan Invite',
            body=f'{owner.get_display_name()} invited you to "{plan.title}"',
            data=_data(plan),
        )


def notify_rsvp_response(plan, responder, action):
    accepted = action == 'accept'
    notify(
        user_id=plan.owner_id,
        type=NotificationType.RSVP_RESPONSE,
        title='RSVP Accepted' if accepted else 'RSVP Declined',
        body=(
            f'{responder.get_display_name()} '
            f'{"accepted" if accepted else "declined"} your invite to "{plan.title}"'
        ),
        data=_data(plan, action=action),
    )


def notify_swipe_completed(plan, swiper):
    notify_many(
        user_ids=_member_ids(plan, exclude=[swiper.id]),
        type=NotificationType.SWIPE_COMPLETED,
        title='Swipe Update',
        body=f'{swiper.get_display_name()} finished swiping for "{plan.title}"',
        data=_data(plan),
    )


def notify_group_swipe_result(plan, exclude_user_id=None):
    exclude = [exclude_user_id] if exclude_user_id else []
    notify_many(
        user_ids=_member_ids(plan, exclude=exclude),
        type=NotificationType.GROUP_SWIPE_RESULT,
        title='Group Pick Decided!',
        body=f'The group picked {plan.restaurant["name"]} for "{plan.title}"',
        data=_data(plan, restaurantId=plan.restaurant['id']),
    )


def notify_plan_confirmed(plan, exclude_user_id=None):
    exclude = [exclude_user_id] if exclude_user_id else []
    notify_many(
        user_ids=_member_ids(plan, exclude=exclude),
        type=NotificationType.PLAN_CONFIRMED,
        title='Plan Confirmed',
        body=f'"{plan.title}" is confirmed at {plan.restaurant["name"]}',
        data=_data(plan, restaurantId=plan.restaurant['id']),
    )


def notify_plan_completed(plan):
    notify_many(
        user_ids=_invitee_ids(plan),
        type=NotificationType.PLAN_COMPLETED,
        title='Plan Completed',
        body=f'"{plan.title}" is marked as completed',
        data=_data(plan),
    )


def notify_plan_cancelled(plan, cancelled_by):
    notify_many(
        user_ids=_invitee_ids(plan),
        type=NotificationType.PLAN_CANCELLED,
        title='Plan Cancelled',
        body=f'"{plan.title}" has been cancelled by {cancelled_by.get_display_name()}',
        data=_data(plan),
    )


def notify_plan_auto_cancelled(plan):
    notify(
        user_id=plan.owner_id,
        type=NotificationType.PLAN_AUTO_CANCELLED,
        title='Plan Auto-Cancelled',
        body=f'"{plan.title}" was cancelled because no participants are left',
        data=_data(plan),
    )


def notify_participant_left(plan, leaver):
    notify_many(
        user_ids=_member_ids(plan, exclude=[leaver.id]),
        type=NotificationType.PARTICIPANT_LEFT,
        title='Participant Left',
        body=f'{leaver.get_display_name()} has left "{plan.title}"',
        data=_data(plan),
    )


def notify_ownership_delegated(plan, previous_owner):
    new_owner = plan.owner
    notify(
        user_id=new_owner.id,
        type=NotificationType.ORGANIZER_DELEGATED,
        title="You're Now the Organizer",
        body=f'{previous_owner.get_display_name()} made you the organizer of "{plan.title}"',
        data=_data(plan),
    )
    notify_many(
        user_ids=_invitee_ids(plan),
        type=NotificationType.ORGANIZER_CHANGED,
        title='New Organizer',
        body=f'{new_owner.get_display_name()} is now the organizer of "{plan.title}"',
        data=_data(plan),
    )
