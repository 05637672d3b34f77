"""Stock item serializer (output and DRF-side field validation)."""

from __future__ import annotations

from rest_framework import serializers

from modules.stock.models import StockItem


class StockItemSerializer(serializers.ModelSerializer):
    created_by = serializers.PrimaryKeyRelatedField(read_only=True)

    class Meta:
        model = StockItem
        fields = [
            "id",
            "name",
            "barcode",
            "description",
            "category",
            "price",
            "quantity",
            "image_url",
            "created_by",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["id", "created_by", "created_at", "updated_at"]
