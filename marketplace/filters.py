import django_filters
from django.db.models import Q

from marketplace.domain.state_machine import RequestStatus

from .models import ServiceOffering, ServiceRequest


class ListingFilterMixin:
    def filter_category(self, queryset, name, value):
        if not value or value == "all":
            return queryset
        return queryset.filter(category=value)

    def filter_search(self, queryset, name, value):
        """Case-insensitive match on title or description"""
        if not value:
            return queryset
        return queryset.filter(Q(title__icontains=value) | Q(description__icontains=value))


class ServiceRequestFilter(ListingFilterMixin, django_filters.FilterSet):
    """
    Filter for service requests

    ``status=all`` (or no status) leaves the list unfiltered.
    """

    category = django_filters.CharFilter(method="filter_category")
    status = django_filters.ChoiceFilter(choices=RequestStatus.choices + [("all", "All")], method="filter_status")
    user_id = django_filters.UUIDFilter(field_name="requested_by_id")
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = ServiceRequest
        fields = ["category", "status", "user_id", "search"]

    def filter_status(self, queryset, name, value):
        if not value or value == "all":
            return queryset
        return queryset.filter(status=value)


class ServiceOfferingFilter(ListingFilterMixin, django_filters.FilterSet):
    category = django_filters.CharFilter(method="filter_category")
    provider_id = django_filters.UUIDFilter(field_name="provider_id")
    search = django_filters.CharFilter(method="filter_search")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")

    class Meta:
        model = ServiceOffering
        fields = ["category", "provider_id", "search", "min_price", "max_price"]
