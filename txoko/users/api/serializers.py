from django.contrib.auth import password_validation
from rest_framework import serializers

from txoko.users.models import User


class UserSerializer(serializers.ModelSerializer[User]):
    id = serializers.IntegerField(read_only=True)
    societyId = serializers.IntegerField(source="society_id", read_only=True)  # noqa: N815
    linkedMemberId = serializers.PrimaryKeyRelatedField(  # noqa: N815
        source="linked_member",
        queryset=User.objects.all(),
        allow_null=True,
        required=False,
    )
    linkedMemberName = serializers.CharField(  # noqa: N815
        source="linked_member_name",
        read_only=True,
    )
    avatarUrl = serializers.URLField(  # noqa: N815
        source="avatar_url",
        required=False,
        allow_blank=True,
    )
    isActive = serializers.BooleanField(source="is_active", read_only=True)  # noqa: N815

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "name",
            "role",
            "function",
            "societyId",
            "linkedMemberId",
            "linkedMemberName",
            "phone",
            "iban",
            "avatarUrl",
            "isActive",
        ]
        read_only_fields = ["username"]

    def validate_linkedMemberId(self, value):  # noqa: N802
        request = self.context.get("request")
        society_id = getattr(getattr(request, "user", None), "society_id", None)
        if value is not None and value.society_id != society_id:
            msg = "Linked member must belong to the same society."
            raise serializers.ValidationError(msg)
        return value


class UserCreateSerializer(UserSerializer):
    password = serializers.CharField(write_only=True, min_length=8)

    class Meta(UserSerializer.Meta):
        fields = [*UserSerializer.Meta.fields, "password"]
        read_only_fields = []
        extra_kwargs = {"username": {"required": False}}

    def create(self, validated_data):
        password = validated_data.pop("password")
        if not validated_data.get("username"):
            validated_data["username"] = validated_data["email"]
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user


class ProfileSerializer(serializers.ModelSerializer[User]):
    """Fields a member may change on their own account."""

    class Meta:
        model = User
        fields = ["name", "phone", "iban"]


class ChangePasswordSerializer(serializers.Serializer):
    currentPassword = serializers.CharField()  # noqa: N815
    newPassword = serializers.CharField()  # noqa: N815

    def validate_currentPassword(self, value):  # noqa: N802
        user = self.context["request"].user
        if not user.check_password(value):
            msg = "Current password is incorrect."
            raise serializers.ValidationError(msg)
        return value

    def validate_newPassword(self, value):  # noqa: N802
        password_validation.validate_password(value, self.context["request"].user)
        return value


class LoginSerializer(serializers.Serializer):
    email = serializers.CharField()
    password = serializers.CharField()
    societyId = serializers.IntegerField(required=False, allow_null=True)  # noqa: N815
