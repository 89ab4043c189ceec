from django import template
from django.utils.safestring import mark_safe

from ..utils import (
    PAGE_PARAM,
    SORT_DIRECTION_PARAM,
    SORT_FIELD_PARAM,
    array_to_html_attributes,
    handle_sort_parameter,
    set_query_parameter,
)

register = template.Library()


def _current_url(context):
    request = getattr(context, "request", None) or context.get("request")
    return request.get_full_path() if request is not None else ""


def _query_value(context, key):
    request = getattr(context, "request", None) or context.get("request")
    return request.GET.get(key, "") if request is not None else ""


@register.simple_tag
def cell_value(collection, column, record):
    """Value modifiers return html so their output is trusted; record values are not"""
    value = collection.get_cell_value(column, record)
    if value is None:
        return ""
    if column in collection.modifications:
        return mark_safe(str(value))
    return str(value)


@register.simple_tag
def cell_attrs(collection, column, record):
    attributes = collection.get_cell_attributes(column, record)
    if attributes is None:
        attributes = collection.get_hidden_column_attributes(column)
    return attributes or ""


@register.simple_tag
def row_attrs(collection, record):
    return collection.get_row_attributes(record)


@register.simple_tag
def header_attrs(collection, column):
    return collection.get_header_attributes(column)


@register.filter
def html_attrs(attributes):
    return array_to_html_attributes(attributes)


@register.simple_tag(takes_context=True)
def sort_url(context, column):
    return handle_sort_parameter(_current_url(context), column)


@register.simple_tag(takes_context=True)
def sort_direction(context, column):
    """Return 'asc' or 'desc' if the table is currently sorted on column"""
    if _query_value(context, SORT_FIELD_PARAM) == column:
        return _query_value(context, SORT_DIRECTION_PARAM)
    return ""


@register.simple_tag(takes_context=True)
def page_url(context, number):
    return set_query_parameter(_current_url(context), PAGE_PARAM, number)
