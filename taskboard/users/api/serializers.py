from rest_framework import serializers

from taskboard.users.models import User


class IdentitySerializer(serializers.ModelSerializer[User]):
    """Public view of a user, attached to every event that user relays.

    Field names follow the web client's camelCase payloads. Credentials and
    permission flags are never included.
    """

    id = serializers.CharField(source="pk", read_only=True)
    firstName = serializers.CharField(source="first_name", read_only=True)  # noqa: N815
    lastName = serializers.CharField(source="last_name", read_only=True)  # noqa: N815

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "firstName",
            "lastName",
            "name",
        ]
        read_only_fields = fields
