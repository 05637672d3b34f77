import django_filters

from modules.stock.models import StockItem


class StockItemFilter(django_filters.FilterSet):
    name = django_filters.CharFilter(field_name="name", lookup_expr="icontains")
    category = django_filters.CharFilter(field_name="category", lookup_expr="iexact")
    barcode = django_filters.CharFilter(field_name="barcode", lookup_expr="exact")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    low_stock = django_filters.NumberFilter(field_name="quantity", lookup_expr="lte")

    class Meta:
        model = StockItem
        fields = ["name", "category", "barcode", "min_price", "max_price", "low_stock"]
