# ==========================================
# apps/notifications/models.py
# ==========================================

from django.db import models
import uuid


class NotificationType(models.TextChoices):
    PLAN_INVITE = 'plan_invite', 'Plan invite'
    GROUP_SWIPE_INVITE = 'group_swipe_invite', 'Group swipe invite'
    RSVP_RESPONSE = 'rsvp_response', 'RSVP response'
    SWIPE_COMPLETED = 'swipe_completed', 'Swipe completed'
    GROUP_SWIPE_RESULT = 'group_swipe_result', 'Group swipe result'
    PLAN_CONFIRMED = 'plan_confirmed', 'Plan confirmed'
    PLAN_COMPLETED = 'plan_completed', 'Plan completed'
    PLAN_CANCELLED = 'plan_cancelled', 'Plan cancelled'
    PLAN_AUTO_CANCELLED = 'plan_auto_cancelled', 'Plan auto-cancelled'
    PARTICIPANT_LEFT = 'participant_left', 'Participant left'
    ORGANIZER_DELEGATED = 'organizer_delegated', 'Organizer delegated'
    ORGANIZER_CHANGED = 'organizer_changed', 'Organizer changed'


class Notification(models.Model):
    """In-app notification for a single user."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='notifications')
    type = models.CharField(max_length=40, choices=NotificationType.choices)
    title = models.CharField(max_length=200)
    body = models.TextField()
    data = models.JSONField(default=dict, blank=True)
    read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'notifications'
        indexes = [
            models.Index(fields=['user', 'read'], name='notif_user_read_idx'),
            models.Index(fields=['user', 'created_at'], name='notif_user_created_idx'),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return f"{self.type} for {self.user_id}: {self.title}"
