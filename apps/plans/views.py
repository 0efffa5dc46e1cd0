from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import (
    PlanSerializer,
    PlanCreateSerializer,
    PlanUpdateSerializer,
    RsvpSerializer,
    RsvpResponseSerializer,
    SwipeSerializer,
    StatusUpdateSerializer,
    DelegateSerializer,
    LeaveResponseSerializer,
)

from apps.plans.services import (
    create_plan,
    get_plan_for_user,
    list_plans_for_user,
    update_plan,
    respond_to_invite,
    leave_plan,
    submit_swipe,
    update_status,
    delegate_ownership,
    # Exceptions
    PlansServiceError,
    PlanNotFoundError,
    InsufficientPermissionsError,
    NotParticipantError,
    NotInvitedError,
    OwnerCannotLeaveError,
    PlanConflictError,
)


FORBIDDEN = (
    InsufficientPermissionsError,
    NotParticipantError,
    NotInvitedError,
    OwnerCannotLeaveError,
)


def error_response(error: PlansServiceError) -> Response:
    """Map a plans service error to its HTTP response."""
    if isinstance(error, PlanNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, FORBIDDEN):
        code = status.HTTP_403_FORBIDDEN
    elif isinstance(error, PlanConflictError):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response({'error': str(error)}, status=code)


class PlanViewSet(viewsets.GenericViewSet):
    """
    ViewSet for dining plans.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Plans the user owns or is invited to
    create: Create a plan and invite users
    retrieve: Get a plan (owner and invitees only)
    update / partial_update: Edit plan details (owner only)
    """

    serializer_class = PlanSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        return list_plans_for_user(user=self.request.user)

    def _plan_response(self, plan, code=status.HTTP_200_OK):
        serializer = PlanSerializer(plan, context={'request': self.request})
        return Response(serializer.data, status=code)

    def list(self, request):
        serializer = PlanSerializer(self.get_queryset(), many=True, context={'request': request})
        return Response(serializer.data)

    @extend_schema(request=PlanCreateSerializer, responses={201: PlanSerializer})
    def create(self, request):
        serializer = PlanCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            plan = create_plan(owner=request.user, **serializer.validated_data)
        except PlansServiceError as e:
            return error_response(e)

        return self._plan_response(plan, status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        try:
            plan = get_plan_for_user(plan_id=pk, user=request.user)
        except PlansServiceError as e:
            return error_response(e)

        return self._plan_response(plan)

    @extend_schema(request=PlanUpdateSerializer, responses={200: PlanSerializer})
    def update(self, request, pk=None, partial=False):
        serializer = PlanUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            plan = update_plan(plan_id=pk, user=request.user, **serializer.validated_data)
        except PlansServiceError as e:
            return error_response(e)

        return self._plan_response(plan)

    @extend_schema(request=PlanUpdateSerializer, responses={200: PlanSerializer})
    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk, partial=True)

    @extend_schema(request=RsvpSerializer, responses={200: RsvpResponseSerializer})
    @action(detail=True, methods=['post'])
    def rsvp(self, request, pk=None):
        """Accept or decline an invite to a planned plan."""
        serializer = RsvpSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            invite_status = respond_to_invite(
                plan_id=pk,
                user=request.user,
                action=serializer.validated_data['action']
            )
        except PlansServiceError as e:
            return error_response(e)

        return Response({'ok': True, 'status': invite_status})

    @extend_schema(request=SwipeSerializer, responses={200: PlanSerializer})
    @action(detail=True, methods=['post'])
    def swipe(self, request, pk=None):
        """Submit the caller's swipes on a group swipe plan."""
        serializer = SwipeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            plan = submit_swipe(
                plan_id=pk,
                user=request.user,
                votes=serializer.validated_data['votes']
            )
        except PlansServiceError as e:
            return error_response(e)

        return self._plan_response(plan)

    @extend_schema(request=StatusUpdateSerializer, responses={200: PlanSerializer})
    @action(detail=True, methods=['put'], url_path='status')
    def update_status(self, request, pk=None):
        """Confirm, complete or cancel a plan (owner only)."""
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            plan = update_status(
                plan_id=pk,
                user=request.user,
                status=serializer.validated_data['status'],
                restaurant_id=serializer.validated_data.get('restaurant_id')
            )
        except PlansServiceError as e:
            return error_response(e)

        return self._plan_response(plan)

    @extend_schema(request=DelegateSerializer, responses={200: PlanSerializer})
    @action(detail=True, methods=['post'])
    def delegate(self, request, pk=None):
        """Hand the plan over to an accepted invitee (owner only)."""
        serializer = DelegateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            plan = delegate_ownership(
                plan_id=pk,
                user=request.user,
                new_owner_id=serializer.validated_data['newOwnerId']
            )
        except PlansServiceError as e:
            return error_response(e)

        return self._plan_response(plan)

    @extend_schema(request=None, responses={200: LeaveResponseSerializer})
    @action(detail=True, methods=['post'])
    def leave(self, request, pk=None):
        """Leave a plan; the plan is cancelled if no participants remain."""
        try:
            _, auto_cancelled = leave_plan(plan_id=pk, user=request.user)
        except PlansServiceError as e:
            return error_response(e)

        return Response({'ok': True, 'autoCancelled': auto_cancelled})
