from collections.abc import Mapping
from urllib.parse import urlsplit, urlunsplit

from django.conf import settings as django_settings
from django.core.exceptions import ImproperlyConfigured
from django.http import QueryDict
from django.utils.safestring import mark_safe

SETTINGS_NAME = "TABLE_COLLECTION"
DEFAULT_APP = "django_tablecollection"
DEFAULT_TEMPLATE = f"{DEFAULT_APP}/table.html"
LEGACY_TEMPLATE = f"{DEFAULT_APP}/legacy_table.html"

DEFAULTS = {
    "DEFAULT_TABLE_ATTRIBUTES": {"class": "table table-striped"},
    "DEFAULT_RENDER_VIEW": "",
    "DEFAULT_HIDDEN_COLUMN_ATTRIBUTES": {"class": "hidden-xs"},
    "LEGACY_TEMPLATE": False,
}

SORT_FIELD_PARAM = "field"
SORT_DIRECTION_PARAM = "sort"
PAGE_PARAM = "page"
ASCENDING = "asc"
DESCENDING = "desc"


class TableSettings:
    """
    Process wide defaults used when rendering a table.
    Precedence, key by key, is explicit argument > settings.TABLE_COLLECTION > DEFAULTS
    """

    def __init__(
        self,
        table_attributes=None,
        render_view=None,
        hidden_column_attributes=None,
        legacy_template=None,
    ):
        values = configured_values()
        if table_attributes is None:
            table_attributes = values["DEFAULT_TABLE_ATTRIBUTES"]
        if render_view is None:
            render_view = values["DEFAULT_RENDER_VIEW"]
        if hidden_column_attributes is None:
            hidden_column_attributes = values["DEFAULT_HIDDEN_COLUMN_ATTRIBUTES"]
        if legacy_template is None:
            legacy_template = values["LEGACY_TEMPLATE"]
        self.table_attributes = check_attributes(
            table_attributes, "DEFAULT_TABLE_ATTRIBUTES"
        )
        self.render_view = render_view or ""
        self.hidden_column_attributes = check_attributes(
            hidden_column_attributes, "DEFAULT_HIDDEN_COLUMN_ATTRIBUTES"
        )
        self.legacy_template = bool(legacy_template)

    @classmethod
    def from_settings(cls, **overrides):
        return cls(**overrides)

    def template_name(self, view=None):
        if view:
            return view
        if self.render_view:
            return self.render_view
        return LEGACY_TEMPLATE if self.legacy_template else DEFAULT_TEMPLATE


def configured_values() -> dict:
    values = dict(DEFAULTS)
    configured = getattr(django_settings, SETTINGS_NAME, None) or {}
    if not isinstance(configured, Mapping):
        raise ImproperlyConfigured(f"{SETTINGS_NAME} must be a dictionary")
    values.update(configured)
    return values


def check_attributes(attributes, name="attributes") -> dict:
    if not isinstance(attributes, Mapping):
        raise ImproperlyConfigured(f"{name} must be a dictionary")
    return dict(attributes)


def array_to_html_attributes(attributes: Mapping | None = None) -> str:
    """
    Convert a dictionary into a string of html attributes, each value single quoted.
    Values are NOT escaped.
    """
    result = ""
    if attributes:
        for key, value in attributes.items():
            result += f" {key}='{'' if value is None else value}'"
    return mark_safe(result)


def lookup(obj, name, default=None):
    """Read a key from a mapping or an attribute from anything else"""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def is_object(value) -> bool:
    return value is not None and not isinstance(
        value, (str, bytes, int, float, bool)
    )


def set_query_parameter(url: str, key: str, value) -> str:
    """Return url with the query parameter key set to value"""
    bits = urlsplit(url)
    query_dict = QueryDict(bits.query, mutable=True)
    query_dict[key] = value
    return urlunsplit(bits._replace(query=query_dict.urlencode()))


def clear_query_parameters(url: str, keys: list) -> str:
    bits = urlsplit(url)
    query_dict = QueryDict(bits.query, mutable=True)
    removed = False
    for key in keys:
        if key in query_dict:
            query_dict.pop(key)
            removed = True
    if not removed:
        return url
    return urlunsplit(bits._replace(query=query_dict.urlencode()))


def next_sort_direction(query_dict, column: str) -> str:
    """
    Clicking the active column toggles its direction; any other column starts ascending
    """
    if query_dict.get(SORT_FIELD_PARAM) == column:
        if query_dict.get(SORT_DIRECTION_PARAM) == ASCENDING:
            return DESCENDING
    return ASCENDING


def handle_sort_parameter(url: str, column: str) -> str:
    """
    Return url with field and sort parameters set to sort on column.
    Paging restarts when the sort order changes.
    """
    bits = urlsplit(url)
    query_dict = QueryDict(bits.query, mutable=True)
    direction = next_sort_direction(query_dict, column)
    query_dict[SORT_FIELD_PARAM] = column
    query_dict[SORT_DIRECTION_PARAM] = direction
    query_dict.pop(PAGE_PARAM, None)
    return urlunsplit(bits._replace(query=query_dict.urlencode()))
