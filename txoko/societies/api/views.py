from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema
from drf_spectacular.utils import extend_schema_view
from rest_framework import mixins
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from txoko.core.society import society_id_for
from txoko.societies.models import Society
from txoko.users.api.permissions import HasAdminAccess

from .serializers import SocietySerializer


@extend_schema_view(
    list=extend_schema(tags=["Societies"]),
    current=extend_schema(tags=["Societies"]),
)
class SocietyViewSet(mixins.ListModelMixin, GenericViewSet):
    """``current``: the caller's society (administrators may PATCH it).

    ``list`` is restricted to administrators.
    """

    serializer_class = SocietySerializer
    queryset = Society.objects.filter(is_active=True)
    pagination_class = None

    def get_permissions(self):
        if self.action == "list" or (
            self.action == "current" and self.request.method != "GET"
        ):
            return [IsAuthenticated(), HasAdminAccess()]
        return [IsAuthenticated()]

    @action(detail=False, methods=["get", "patch"])
    def current(self, request):
        society = get_object_or_404(Society, pk=society_id_for(request.user))
        if request.method == "GET":
            return Response(self.get_serializer(society).data)
        serializer = self.get_serializer(society, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)
