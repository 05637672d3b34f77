"""Customer DRF serializer for API output.

Business logic lives in the Service Layer, which receives Pydantic DTOs
from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.customers.models import Customer


class CustomerSerializer(serializers.ModelSerializer):
    added_by = serializers.PrimaryKeyRelatedField(read_only=True)
    added_by_username = serializers.CharField(
        source="added_by.username", read_only=True, default=None
    )

    class Meta:
        model = Customer
        fields = [
            "id",
            "name",
            "route",
            "telephone",
            "credit_limit",
            "current_credits",
            "added_by",
            "added_by_username",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields
