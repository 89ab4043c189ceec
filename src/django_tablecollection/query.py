import logging

from django.db import connections, models

from .table import TableCollection
from .utils import ASCENDING, DESCENDING

logger = logging.getLogger(__name__)

DEFAULT_SORT_FIELD = "created_at"
DEFAULT_SORT_DIRECTION = DESCENDING


def table_columns(queryset) -> list[str]:
    """
    Return the column names of the database table behind queryset.
    The schema is read every time; nothing is cached.
    """
    connection = connections[queryset.db]
    with connection.cursor() as cursor:
        description = connection.introspection.get_table_description(
            cursor, queryset.model._meta.db_table
        )
    return [column.name for column in description]


def column_fields(model) -> dict[str, str]:
    """Map each database column of model to the attribute name order_by() accepts"""
    return {field.column: field.attname for field in model._meta.concrete_fields}


def order_by(queryset, field, direction):
    return queryset.order_by(f"-{field}" if direction == DESCENDING else field)


def sort_queryset(queryset, field=None, sort=None):
    """
    Order queryset by the column field in the direction given by sort ('asc' or 'desc').
    field must be a column of the underlying table that maps to a model field.
    Anything invalid falls back to the default ordering, newest first.
    """
    if field and sort:
        if field in table_columns(queryset):
            attname = column_fields(queryset.model).get(field)
            if attname and sort in (ASCENDING, DESCENDING):
                return order_by(queryset, attname, sort)
    logger.debug(
        "Invalid sort field=%r sort=%r, ordering by %s %s",
        field,
        sort,
        DEFAULT_SORT_FIELD,
        DEFAULT_SORT_DIRECTION,
    )
    return order_by(queryset, DEFAULT_SORT_FIELD, DEFAULT_SORT_DIRECTION)


class TableQuerySet(models.QuerySet):
    """
    Use as a model's manager to sort by request parameters and render tables:

        objects = TableQuerySet.as_manager()
        Book.objects.sort(request.GET.get("field"), request.GET.get("sort")).table()
    """

    collection_class = TableCollection

    def sort(self, field=None, sort=None):
        return sort_queryset(self, field, sort)

    def table(self, settings=None):
        return self.collection_class(self, settings=settings)
