from drf_spectacular.utils import OpenApiParameter, inline_serializer
from rest_framework import serializers


class ErrorDetailSerializer(serializers.Serializer):
    code = serializers.CharField(help_text="Machine readable code, e.g. VALIDATION_ERROR")
    message = serializers.CharField()
    status = serializers.IntegerField()
    details = serializers.JSONField(required=False)


class ErrorResponseSerializer(serializers.Serializer):
    error = ErrorDetailSerializer()


PAGINATION_PARAMETERS = [
    OpenApiParameter(name="page", type=int, required=False, description="1-based page number"),
    OpenApiParameter(name="limit", type=int, required=False, description="Items per page"),
]


def paginated_response(item_serializer_class):
    """OpenAPI shape of a ``PageNumberPagination`` page of ``item_serializer_class``."""
    return inline_serializer(
        name=f"Paginated{item_serializer_class.__name__}",
        fields={
            "count": serializers.IntegerField(),
            "next": serializers.CharField(allow_null=True),
            "previous": serializers.CharField(allow_null=True),
            "results": item_serializer_class(many=True),
        },
    )
