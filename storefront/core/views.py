import logging
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser, AllowAny
from rest_framework_simplejwt.views import TokenObtainPairView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.exceptions import AuthenticationFailed
from django.conf import settings
from django.shortcuts import get_object_or_404
from .models import AuditLog
from .serializers import UserSerializer, AuditLogSerializer

logger = logging.getLogger('storefront.core')


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['is_staff'] = user.is_staff
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Return the authenticated user"""
    serializer = UserSerializer(request.user)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([AllowAny])
def client_config(request):
    """
    Public client configuration.

    Only values that are safe to ship to a browser are exposed; API secrets
    stay on the server.
    """
    return Response({
        'api_base_url': settings.API_BASE_URL,
        'currency': settings.STORE_CURRENCY,
        'weight_unit': settings.STORE_WEIGHT_UNIT,
        'payment': {
            'paypal_client_id': settings.PAYPAL_CLIENT_ID,
        },
        'media': {
            'cloud_name': settings.CLOUDINARY_CLOUD_NAME,
            'upload_preset': settings.CLOUDINARY_UPLOAD_PRESET,
        },
    })


# AuditLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminUser])
def audit_log_list(request):
    """List audit logs, optionally filtered by action or model"""
    logs = AuditLog.objects.select_related('user')
    action = request.query_params.get('action')
    model_name = request.query_params.get('model_name')
    if action:
        logs = logs.filter(action=action)
    if model_name:
        logs = logs.filter(model_name__iexact=model_name)
    logger.debug(f"User {request.user.username} listed audit logs (action={action}, model={model_name})")
    serializer = AuditLogSerializer(logs[:500], many=True)
    return Response(serializer.data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminUser])
def audit_log_detail(request, pk):
    """Retrieve an audit log"""
    log = get_object_or_404(AuditLog, pk=pk)
    serializer = AuditLogSerializer(log)
    return Response(serializer.data)
