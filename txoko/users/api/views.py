import logging

from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.mixins import CreateModelMixin
from rest_framework.mixins import ListModelMixin
from rest_framework.mixins import RetrieveModelMixin
from rest_framework.mixins import UpdateModelMixin
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from txoko.core.exceptions import error_response
from txoko.core.society import society_id_for
from txoko.users.access import has_admin_access
from txoko.users.models import User

from .permissions import HasAdminAccess
from .serializers import ChangePasswordSerializer
from .serializers import ProfileSerializer
from .serializers import UserCreateSerializer
from .serializers import UserSerializer

logger = logging.getLogger(__name__)

ADMIN_ACTIONS = {"list", "create", "update", "partial_update", "toggle_active"}


@extend_schema_view(
    list=extend_schema(tags=["Users"]),
    retrieve=extend_schema(tags=["Users"]),
    create=extend_schema(tags=["Users"]),
    partial_update=extend_schema(tags=["Users"]),
    update=extend_schema(tags=["Users"]),
)
class UserViewSet(
    RetrieveModelMixin,
    ListModelMixin,
    CreateModelMixin,
    UpdateModelMixin,
    GenericViewSet,
):
    serializer_class = UserSerializer
    queryset = User.objects.all()
    # Members list is a plain array, as the frontend expects.
    pagination_class = None

    def get_permissions(self):
        if self.action in ADMIN_ACTIONS:
            return [IsAuthenticated(), HasAdminAccess()]
        return [IsAuthenticated()]

    def get_serializer_class(self):
        if self.action == "create":
            return UserCreateSerializer
        return super().get_serializer_class()

    def get_queryset(self, *args, **kwargs):  # type: ignore[override]
        user = self.request.user
        if not getattr(user, "is_authenticated", False):  # pragma: no cover - safety
            return User.objects.none()
        society_id = society_id_for(user)
        qs = User.objects.filter(society_id=society_id).select_related(
            "linked_member"
        )
        # Administrators see the whole society; others only themselves
        if has_admin_access(user):
            return qs.order_by("name")
        return qs.filter(pk=user.pk)

    def perform_create(self, serializer):
        instance = serializer.save(society_id=society_id_for(self.request.user))
        logger.info(
            "User %s created member %s (function=%s)",
            self.request.user.pk,
            instance.pk,
            instance.function,
        )

    def perform_update(self, serializer):  # type: ignore[override]
        instance = serializer.save()
        logger.info("User %s updated member %s", self.request.user.pk, instance.pk)

    @action(detail=False)
    def me(self, request):
        serializer = UserSerializer(request.user, context={"request": request})
        return Response(status=status.HTTP_200_OK, data=serializer.data)

    @action(detail=False)
    def count(self, request):
        total = User.objects.filter(
            society_id=society_id_for(request.user),
            is_active=True,
        ).count()
        return Response({"count": total})

    @action(detail=True, methods=["put", "patch"])
    def profile(self, request, pk=None):
        member = self.get_object()
        if member.pk != request.user.pk and not has_admin_access(request.user):
            return error_response(
                "You can only edit your own profile.",
                status.HTTP_403_FORBIDDEN,
            )
        serializer = ProfileSerializer(member, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(UserSerializer(member, context={"request": request}).data)

    @action(detail=False, methods=["post"], url_path="change-password")
    def change_password(self, request):
        serializer = ChangePasswordSerializer(
            data=request.data,
            context={"request": request},
        )
        serializer.is_valid(raise_exception=True)
        request.user.set_password(serializer.validated_data["newPassword"])
        request.user.save(update_fields=["password", "updated_at"])
        return Response({"message": "Password updated"})

    @action(detail=True, methods=["post"], url_path="toggle-active")
    def toggle_active(self, request, pk=None):
        member = self.get_object()
        if member.pk == request.user.pk:
            return error_response(
                "You cannot deactivate your own account.",
                status.HTTP_400_BAD_REQUEST,
            )
        member.is_active = not member.is_active
        member.save(update_fields=["is_active", "updated_at"])
        logger.info(
            "User %s set member %s active=%s",
            request.user.pk,
            member.pk,
            member.is_active,
        )
        return Response(UserSerializer(member, context={"request": request}).data)
