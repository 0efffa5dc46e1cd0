from django.conf import settings
from rest_framework import serializers

from .models import Plan, PlanInvite, PlanType, PlanStatus


class RestaurantOptionSerializer(serializers.Serializer):
    """Restaurant record supplied by the client's restaurant search."""

    id = serializers.CharField(max_length=100)
    name = serializers.CharField(max_length=200)
    imageUrl = serializers.CharField(required=False, allow_blank=True)
    address = serializers.CharField(required=False, allow_blank=True)
    cuisine = serializers.CharField(required=False, allow_blank=True)
    priceLevel = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    rating = serializers.FloatField(required=False, allow_null=True)


class InviteSerializer(serializers.ModelSerializer):
    """Invite entry as exposed on a plan."""

    userId = serializers.CharField(source='user_id', read_only=True)
    avatarUri = serializers.CharField(source='avatar_uri', read_only=True)
    respondedAt = serializers.DateTimeField(source='responded_at', read_only=True)

    class Meta:
        model = PlanInvite
        fields = ['userId', 'name', 'avatarUri', 'status', 'respondedAt']
        read_only_fields = fields


class PlanSerializer(serializers.ModelSerializer):
    """
    Plan representation.

    ``swipesCompleted`` and ``votes`` are only present on group swipe plans,
    ``restaurant`` only once a restaurant has been selected.
    """

    id = serializers.CharField(read_only=True)
    ownerId = serializers.CharField(source='owner_id', read_only=True)
    ownerName = serializers.SerializerMethodField()
    ownerAvatarUri = serializers.CharField(source='owner.avatar_uri', read_only=True)
    invites = InviteSerializer(many=True, read_only=True)
    restaurantOptions = serializers.JSONField(source='restaurant_options', read_only=True)
    swipesCompleted = serializers.JSONField(source='swipes_completed', read_only=True)
    votes = serializers.JSONField(read_only=True)
    restaurant = serializers.JSONField(read_only=True)
    rsvpDeadline = serializers.DateTimeField(source='rsvp_deadline', read_only=True)
    cancelledAt = serializers.DateTimeField(source='cancelled_at', read_only=True)
    createdAt = serializers.DateTimeField(source='created_at', read_only=True)
    updatedAt = serializers.DateTimeField(source='updated_at', read_only=True)

    class Meta:
        model = Plan
        fields = [
            'id',
            'type',
            'title',
            'date',
            'time',
            'ownerId',
            'ownerName',
            'ownerAvatarUri',
            'status',
            'cuisine',
            'budget',
            'rsvpDeadline',
            'cancelledAt',
            'invites',
            'restaurantOptions',
            'swipesCompleted',
            'votes',
            'restaurant',
            'createdAt',
            'updatedAt',
        ]
        read_only_fields = fields

    def get_ownerName(self, obj):
        return obj.owner.get_display_name()

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not instance.is_group_swipe:
            data.pop('swipesCompleted')
            data.pop('votes')
        if instance.restaurant is None:
            data.pop('restaurant')
        return data


class PlanWriteSerializer(serializers.Serializer):
    """Shared input fields for creating and editing plans."""

    title = serializers.CharField(max_length=settings.PLANS_MAX_TITLE_LENGTH)
    date = serializers.DateField(required=False, allow_null=True)
    time = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)
    cuisine = serializers.CharField(
        max_length=settings.PLANS_MAX_CUISINE_LENGTH, required=False, allow_blank=True
    )
    budget = serializers.CharField(max_length=20, required=False, allow_blank=True)
    restaurantOptions = RestaurantOptionSerializer(
        many=True, required=False, source='restaurant_options'
    )
    rsvpDeadline = serializers.DateTimeField(
        required=False, allow_null=True, source='rsvp_deadline'
    )


class PlanCreateSerializer(PlanWriteSerializer):
    """Input for POST /plans/."""

    type = serializers.ChoiceField(choices=PlanType.choices, default=PlanType.PLANNED)
    inviteeIds = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        source='invitee_ids',
        max_length=settings.PLANS_MAX_INVITEES,
    )


class PlanUpdateSerializer(PlanWriteSerializer):
    """Input for PUT/PATCH /plans/{id}/, always validated as partial."""

    def validate(self, attrs):
        if 'restaurant' in self.initial_data:
            raise serializers.ValidationError({
                'restaurant': "Pick the restaurant with restaurantId when confirming the plan"
            })
        return attrs


class RsvpSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=['accept', 'decline'])


class SwipeSerializer(serializers.Serializer):
    votes = serializers.ListField(child=serializers.CharField(), allow_empty=True)


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(
        choices=[PlanStatus.CONFIRMED, PlanStatus.COMPLETED, PlanStatus.CANCELLED]
    )
    restaurantId = serializers.CharField(required=False, source='restaurant_id')


class DelegateSerializer(serializers.Serializer):
    newOwnerId = serializers.UUIDField()


class LeaveResponseSerializer(serializers.Serializer):
    ok = serializers.BooleanField()
    autoCancelled = serializers.BooleanField()


class RsvpResponseSerializer(serializers.Serializer):
    ok = serializers.BooleanField()
    status = serializers.CharField()
