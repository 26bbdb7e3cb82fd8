"""
Shared query-string serializers
"""
from rest_framework import serializers


class PageQuerySerializer(serializers.Serializer):
    """
    `page` / `limit` query parameters. Subclasses tighten the limit bounds.
    """
    page = serializers.IntegerField(required=False, min_value=1, default=1)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=100, default=20)

    sort_order = serializers.ChoiceField(choices=['asc', 'desc'], required=False, default='desc')


def page_query(max_limit: int, default_limit: int):
    """
    Build a PageQuerySerializer subclass with its own limit bounds.
    """
    class BoundedPageQuerySerializer(PageQuerySerializer):
        limit = serializers.IntegerField(
            required=False,
            min_value=1,
            max_value=max_limit,
            default=default_limit,
        )

    return BoundedPageQuerySerializer
