# ==========================================
# apps/plans/admin.py
# ==========================================

from django.contrib import admin
from apps.plans.models import Plan, PlanInvite


class PlanInviteInline(admin.TabularInline):
    """Inline admin for plan invites."""
    model = PlanInvite
    extra = 0
    fields = ['user', 'name', 'status', 'responded_at', 'invited_at']
    readonly_fields = ['invited_at']


@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    """Admin interface for Plans."""
    
    list_display = [
        'title',
        'type',
        'status',
        'owner',
        'date',
        'created_at'
    ]
    list_filter = ['type', 'status', 'created_at']
    search_fields = ['title', 'owner__email', 'owner__name']
    readonly_fields = ['version', 'cancelled_at', 'created_at', 'updated_at']
    inlines = [PlanInviteInline]
    date_hierarchy = 'created_at'
    ordering = ['-created_at']
    
    fieldsets = (
        ('Basic Information', {
            'fields': ('title', 'type', 'status', 'owner')
        }),
        ('Details', {
            'fields': ('date', 'time', 'cuisine', 'budget', 'rsvp_deadline')
        }),
        ('Decision', {
            'fields': ('restaurant_options', 'swipes_completed', 'votes', 'restaurant'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('version', 'cancelled_at', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(PlanInvite)
class PlanInviteAdmin(admin.ModelAdmin):
    """Admin interface for Plan Invites."""
    
    list_display = ['name', 'plan', 'status', 'responded_at', 'invited_at']
    list_filter = ['status', 'invited_at']
    search_fields = ['name', 'user__email', 'plan__title']
    readonly_fields = ['invited_at']
