import django_filters

from txoko.notifications.models import Notification


class NotificationFilter(django_filters.FilterSet):
    """``?filter=all|unread|read``; anything else lists everything."""

    filter = django_filters.CharFilter(method="filter_read_state")

    class Meta:
        model = Notification
        fields = ["filter"]

    def filter_read_state(self, queryset, name, value):
        if value == "unread":
            return queryset.filter(is_read=False)
        if value == "read":
            return queryset.filter(is_read=True)
        return queryset
