from rest_framework import serializers

from .commands import CATEGORY_MAX_LENGTH, NAME_MAX_LENGTH, parse_price


class ProductReadSerializer(serializers.Serializer):
    # Matches ProductDTO shapes used for responses
    id = serializers.IntegerField()
    name = serializers.CharField()
    price = serializers.CharField()
    description = serializers.CharField()
    image = serializers.CharField()
    category = serializers.CharField()

    def to_representation(self, instance):
        if instance is None:
            return None
        if hasattr(instance, "__dataclass_fields__"):
            return {
                "id": instance.id,
                "name": instance.name,
                "price": instance.price,
                "description": instance.description,
                "image": instance.image,
                "category": instance.category,
            }
        return super().to_representation(instance)


class ProductWriteSerializer(serializers.Serializer):
    # 'id' is server-assigned and never accepted from clients
    name = serializers.CharField(max_length=NAME_MAX_LENGTH)
    # Raw admin input; parse_price does the numeric checks
    price = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True)
    image = serializers.CharField(required=False, allow_blank=True)
    category = serializers.CharField(
        required=False, allow_blank=True, max_length=CATEGORY_MAX_LENGTH
    )

    def validate_price(self, value):
        result = parse_price(value)
        if not result.ok:
            raise serializers.ValidationError(result.error)
        return result.value
