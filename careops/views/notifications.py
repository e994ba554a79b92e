from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import IsCustomerRole, IsNotificationReader
from ..services import notifications as feed


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsNotificationReader])
def notifications(request):
    return Response(feed.admin_feed())


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsCustomerRole])
def customer_notifications(request):
    return Response(feed.customer_feed(request.user))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def mark_notification_read(request, notification_id: str):
    # read state is not persisted; feeds are rebuilt on every request
    return Response({'message': 'Notification marked as read'})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def mark_all_notifications_read(request):
    return Response({'message': 'All notifications marked as read'})
