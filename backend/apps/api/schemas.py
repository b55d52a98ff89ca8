from typing import Optional

from drf_spectacular.utils import OpenApiParameter, inline_serializer
from rest_framework import serializers


class ErrorDetailSerializer(serializers.Serializer):
    code = serializers.CharField()
    message = serializers.CharField()
    status = serializers.IntegerField()
    details = serializers.JSONField(required=False)
    hint = serializers.CharField(required=False, allow_blank=True)
    extra = serializers.JSONField(required=False)


class ErrorResponseSerializer(serializers.Serializer):
    error = ErrorDetailSerializer()


class PaginationSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    totalPages = serializers.IntegerField()
    currentPage = serializers.IntegerField()
    perPage = serializers.IntegerField()
    hasNext = serializers.BooleanField()
    hasPrevious = serializers.BooleanField()


LIST_QUERY_PARAMETERS = [
    OpenApiParameter("page", int, OpenApiParameter.QUERY, description="1-based page number"),
    OpenApiParameter("size", int, OpenApiParameter.QUERY, description="Page size (max 100)"),
    OpenApiParameter("sort", str, OpenApiParameter.QUERY, description="Sort field"),
    OpenApiParameter("order", str, OpenApiParameter.QUERY, enum=["asc", "desc"]),
    OpenApiParameter("filter", str, OpenApiParameter.QUERY, description="Free text filter"),
]


def paginated_response(
    item_serializer_class: type[serializers.Serializer],
    items_key: str = "results",
    schema_name: Optional[str] = None,
    **extra_fields: serializers.Field,
) -> type[serializers.Serializer]:
    """Inline serializer for list-view payloads: ``{<items_key>: [...], pagination, query}``."""
    name = schema_name or getattr(item_serializer_class, "__name__", "Items")
    fields = {
        items_key: item_serializer_class(many=True),
        "pagination": PaginationSerializer(),
        "query": serializers.DictField(child=serializers.CharField()),
    }
    fields.update(extra_fields)
    return inline_serializer(name=f"Paginated{name}", fields=fields)
