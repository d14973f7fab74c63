from rest_framework import serializers


class CommentAuthorSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    first_name = serializers.CharField()
    last_name = serializers.CharField()
    avatar_url = serializers.CharField()


class CommentReplySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    product_id = serializers.IntegerField()
    parent_id = serializers.IntegerField(allow_null=True)
    content = serializers.CharField()
    created_at = serializers.CharField()
    author = CommentAuthorSerializer()


class CommentSerializer(CommentReplySerializer):
    replies = CommentReplySerializer(many=True)


class CommentCreateSerializer(serializers.Serializer):
    content = serializers.CharField(allow_blank=True)
    parent_id = serializers.IntegerField(required=False, allow_null=True)
