# catalog/filters.py

"""
PUBLIC PRODUCT FILTERS (django-filter)

Query params:
- category=<slug>      (includes child categories)
- brand=<slug>
- subcategory=<text>
- q=<search>           (name / description / tags)
- min_price, max_price
- is_new, is_bestseller, is_on_sale, is_member_exclusive
- in_stock=true|false
"""

import django_filters
from django.db.models import Q

from catalog.models import Category, Product


class ProductFilter(django_filters.FilterSet):
    category = django_filters.CharFilter(method="filter_category")
    brand = django_filters.CharFilter(field_name="brand__slug")
    subcategory = django_filters.CharFilter(field_name="subcategory", lookup_expr="iexact")
    q = django_filters.CharFilter(method="filter_search")
    min_price = django_filters.NumberFilter(field_name="price", lookup_expr="gte")
    max_price = django_filters.NumberFilter(field_name="price", lookup_expr="lte")
    in_stock = django_filters.BooleanFilter(method="filter_in_stock")

    class Meta:
        model = Product
        fields = ["is_new", "is_bestseller", "is_on_sale", "is_member_exclusive"]

    def filter_category(self, queryset, name, value):
        category = Category.objects.filter(slug=value).first()
        if category is None:
            return queryset.none()
        return queryset.filter(category_id__in=category.descendant_ids())

    def filter_search(self, queryset, name, value):
        term = (value or "").strip()
        if not term:
            return queryset
        return queryset.filter(
            Q(name__icontains=term)
            | Q(description__icontains=term)
            | Q(tags__icontains=term)
        )

    def filter_in_stock(self, queryset, name, value):
        if value is True:
            return queryset.filter(stock_quantity__gt=0)
        if value is False:
            return queryset.filter(stock_quantity=0)
        return queryset
