from rest_framework import serializers


class CartItemReadSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    name = serializers.CharField()
    price = serializers.CharField()
    image = serializers.CharField()
    category = serializers.CharField()
    quantity = serializers.IntegerField()
    subtotal = serializers.CharField()


class CartReadSerializer(serializers.Serializer):
    items = CartItemReadSerializer(many=True)
    total = serializers.CharField()
    count = serializers.IntegerField()
    currency = serializers.CharField()


# Request shapes below document the API; parsing happens in commands.py
class CartItemWriteSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)


class CartReplaceSerializer(serializers.Serializer):
    items = CartItemWriteSerializer(many=True)


class CartQuantitySerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
