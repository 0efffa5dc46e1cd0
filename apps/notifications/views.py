from rest_framework import mixins, viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .serializers import NotificationSerializer, UnreadCountSerializer
from .services import (
    get_user_notifications,
    get_unread_count,
    mark_as_read,
    mark_all_as_read,
    delete_notification,
    NotificationNotFoundError,
)


class NotificationPagination(PageNumberPagination):
    """Custom pagination for notifications."""
    page_size = 20
    page_size_query_param = 'limit'
    max_page_size = 100


class NotificationViewSet(mixins.ListModelMixin, viewsets.GenericViewSet):
    """
    Current user's notification inbox.

    list: Paginated notifications, newest first
    destroy: Delete a notification
    """

    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = NotificationPagination

    def get_queryset(self):
        return get_user_notifications(user=self.request.user)

    def destroy(self, request, pk=None):
        """Delete one of the user's notifications."""
        try:
            delete_notification(notification_id=pk, user=request.user)
        except NotificationNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: UnreadCountSerializer})
    @action(detail=False, methods=['get'])
    def unread_count(self, request):
        """Number of unread notifications."""
        return Response({'count': get_unread_count(user=request.user)})

    @action(detail=True, methods=['post'])
    def read(self, request, pk=None):
        """Mark a notification as read."""
        try:
            notification = mark_as_read(notification_id=pk, user=request.user)
        except NotificationNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(NotificationSerializer(notification).data)

    @action(detail=False, methods=['post'])
    def read_all(self, request):
        """Mark all notifications as read."""
        modified = mark_all_as_read(user=request.user)
        return Response({'ok': True, 'modifiedCount': modified})
