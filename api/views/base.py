"""
Helpers shared by the API views
"""
from rest_framework import status
from rest_framework.permissions import SAFE_METHODS, AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.accounts.authentication import OptionalJWTAuthentication
from apps.core.utils import format_response


def validate(serializer_class, data, **kwargs):
    """
    Run a request serializer, raising DRF's ValidationError on bad input.
    """
    serializer = serializer_class(data=data, **kwargs)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


def success(message: str, data=None, meta=None, status_code: int = status.HTTP_200_OK) -> Response:
    return Response(format_response(message, data, meta), status=status_code)


class PublicAPIView(APIView):
    """
    Endpoint open to anonymous shoppers; a valid token still identifies the caller.
    """
    authentication_classes = [OptionalJWTAuthentication]
    permission_classes = [AllowAny]


class PublicReadMixin:
    """
    Reads are open to everyone; other methods use `write_permission_classes`.
    """
    write_permission_classes = [IsAuthenticated]

    def get_permissions(self):
        if self.request.method in SAFE_METHODS:
            return [AllowAny()]
        return [permission() for permission in self.write_permission_classes]
