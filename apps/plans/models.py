# ==========================================
# apps/plans/models.py
# ==========================================

from django.db import models
import uuid


class PlanType(models.TextChoices):
    PLANNED = 'planned', 'Planned'
    GROUP_SWIPE = 'group-swipe', 'Group swipe'


class PlanStatus(models.TextChoices):
    VOTING = 'voting', 'Voting'
    CONFIRMED = 'confirmed', 'Confirmed'
    COMPLETED = 'completed', 'Completed'
    CANCELLED = 'cancelled', 'Cancelled'


class InviteStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    ACCEPTED = 'accepted', 'Accepted'
    DECLINED = 'declined', 'Declined'


TERMINAL_STATUSES = (PlanStatus.COMPLETED, PlanStatus.CANCELLED)


class Plan(models.Model):
    """
    A proposed dining event and its group-decision state.

    Restaurant options, swipe submissions, votes and the selected restaurant
    are stored on the plan row itself so that every state change is a single
    conditional update of one row (see services.plan_store). ``version`` is
    bumped on each of those updates.
    """
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='owned_plans')
    type = models.CharField(max_length=20, choices=PlanType.choices, default=PlanType.PLANNED)
    status = models.CharField(max_length=20, choices=PlanStatus.choices, default=PlanStatus.VOTING)
    
    title = models.CharField(max_length=200)
    date = models.DateField(null=True, blank=True)
    time = models.CharField(max_length=20, blank=True)
    cuisine = models.CharField(max_length=100, default='Any')
    budget = models.CharField(max_length=20, default='$$')
    
    # [{"id", "name", "imageUrl", "address", "cuisine", "priceLevel", "rating"}, ...]
    restaurant_options = models.JSONField(default=list, blank=True)
    # [user_id, ...]
    swipes_completed = models.JSONField(default=list, blank=True)
    # {option_id: [user_id, ...]}
    votes = models.JSONField(default=dict, blank=True)
    restaurant = models.JSONField(null=True, blank=True)
    
    rsvp_deadline = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    
    version = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    
    class Meta:
        db_table = 'plans'
        indexes = [
            models.Index(fields=['owner', 'created_at'], name='plans_owner_created_idx'),
            models.Index(fields=['status'], name='plans_status_idx'),
        ]
        ordering = ['-created_at']
    
    def __str__(self):
        return self.title
    
    @property
    def is_group_swipe(self):
        return self.type == PlanType.GROUP_SWIPE
    
    @property
    def is_terminal(self):
        return self.status in TERMINAL_STATUSES
    
    def option_ids(self):
        return [option['id'] for option in self.restaurant_options]
    
    def get_option(self, option_id):
        for option in self.restaurant_options:
            if option['id'] == option_id:
                return option
        return None


class PlanInvite(models.Model):
    """Per-user participation record on a plan (never the owner)."""
    
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    plan = models.ForeignKey(Plan, on_delete=models.CASCADE, related_name='invites')
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='plan_invites')
    
    # Snapshot of the user's profile at invite time
    name = models.CharField(max_length=100)
    avatar_uri = models.URLField(max_length=500, blank=True)
    
    status = models.CharField(max_length=20, choices=InviteStatus.choices, default=InviteStatus.PENDING)
    responded_at = models.DateTimeField(null=True, blank=True)
    invited_at = models.DateTimeField(auto_now_add=True)
    
    class Meta:
        db_table = 'plan_invites'
        unique_together = [['plan', 'user']]
        indexes = [
            models.Index(fields=['user', 'status'], name='plan_invites_user_status_idx'),
        ]
        ordering = ['invited_at']
    
    def __str__(self):
        return f"{self.name} on {self.plan.title} ({self.status})"
