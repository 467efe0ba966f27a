from rest_framework import serializers

from txoko.societies.models import Society


class SocietySerializer(serializers.ModelSerializer[Society]):
    creditorId = serializers.CharField(  # noqa: N815
        source="creditor_id", required=False, allow_blank=True
    )
    isActive = serializers.BooleanField(source="is_active", read_only=True)  # noqa: N815
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)  # noqa: N815
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)  # noqa: N815

    class Meta:
        model = Society
        fields = [
            "id",
            "name",
            "address",
            "phone",
            "email",
            "iban",
            "creditorId",
            "isActive",
            "createdAt",
            "updatedAt",
        ]
