from rest_framework import serializers

from .models import Order


class OrderSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    user_id = serializers.IntegerField()
    total_amount = serializers.CharField()
    shipping_address = serializers.CharField()
    phone = serializers.CharField()
    email = serializers.CharField()
    payment_method = serializers.CharField()
    status = serializers.CharField()
    created_at = serializers.CharField()
    items = serializers.ListField(child=serializers.DictField())


class CheckoutRequestSerializer(serializers.Serializer):
    # Documents the request; CheckoutCommand does the parsing
    payment_method = serializers.ChoiceField(choices=Order.PaymentMethod.choices)
    email = serializers.EmailField()
    phone = serializers.CharField()
    address = serializers.CharField()
    card_number = serializers.CharField(required=False)
    expiry_date = serializers.CharField(required=False, help_text="MM/YY")
    cvv = serializers.CharField(required=False)
    card_holder = serializers.CharField(required=False)
