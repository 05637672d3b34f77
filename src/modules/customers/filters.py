import django_filters

from modules.customers.models import Customer


class CustomerFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    route = django_filters.CharFilter(field_name="route", lookup_expr="iexact")
    telephone = django_filters.CharFilter(field_name="telephone", lookup_expr="exact")

    class Meta:
        model = Customer
        fields = ["name", "route", "telephone"]
