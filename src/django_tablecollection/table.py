import logging
from collections.abc import Mapping

from django.core.exceptions import ImproperlyConfigured
from django.core.paginator import Page
from django.template.loader import render_to_string
from django.utils.safestring import mark_safe
from django_tables2.utils import Accessor

from .columns import Column, SelectionColumn
from .utils import (
    TableSettings,
    array_to_html_attributes,
    check_attributes,
    is_object,
    lookup,
)

logger = logging.getLogger(__name__)


def _check_key(key, what="Column"):
    if not isinstance(key, str):
        raise ImproperlyConfigured(f"{what} key {key!r} must be a string")
    return key


def _check_keys(keys, what="Column keys"):
    if isinstance(keys, str):
        raise ImproperlyConfigured(f"{what} must be a list, not the string {keys!r}")
    return keys or []


def _check_callable(key, fn):
    if not callable(fn):
        raise ImproperlyConfigured(f"Modifier for '{key}' must be callable")
    return fn


class TableCollection:
    """
    Wraps an ordered collection of records (a list, a queryset or a paginator Page)
    and knows how to render it as an html table.

    Configuration methods return self so calls can be chained:

        Book.objects.all().table().set_columns({"title": "Title"}).sortable(["title"]).render()
    """

    def __init__(self, records=None, settings: TableSettings | None = None):
        self.records = records if records is not None else []
        self.settings = settings
        self.columns: dict[str, Column] = {}
        self.hidden_columns: dict[str, dict | None] = {}
        self.modifications = {}
        self.cell_modifications = {}
        self.row_modifications = {}
        self.attributes = {}
        self.relations: dict[str, str] = {}
        self.sort_columns: list[str] = []
        self.pages = False

    # Collection interface

    def __iter__(self):
        return iter(self.records)

    def __len__(self):
        return len(self.records)

    def __getitem__(self, index):
        return self.records[index]

    def __bool__(self):
        return len(self) > 0

    def new_collection(self, records=None):
        """Return an unconfigured collection of the same class around records"""
        return self.__class__(records, settings=self.settings)

    @property
    def page(self) -> Page | None:
        return self.records if isinstance(self.records, Page) else None

    @property
    def paginator(self):
        page = self.page
        return page.paginator if page is not None else None

    @property
    def show_pages_links(self) -> bool:
        return self.pages and self.page is not None

    # Configuration

    def set_columns(self, columns: Mapping):
        if not isinstance(columns, Mapping):
            raise ImproperlyConfigured("Columns must be a dictionary")
        for key, value in columns.items():
            self.columns[key] = Column.coerce(key, value)
        return self

    def remove_columns(self, keys):
        for key in _check_keys(keys):
            self.columns.pop(key, None)
        return self

    def only_columns(self, keys):
        keys = _check_keys(keys)
        if keys:
            keep = set(keys)
            self.columns = {k: v for k, v in self.columns.items() if k in keep}
        return self

    def hidden(self, keys):
        """
        Replace the hidden columns.
        keys can be an iterable of column keys and (key, attrs) pairs, or a dictionary
        mapping keys to custom attributes (None means use the default attributes).
        """
        hidden_columns = {}
        if isinstance(keys, Mapping):
            items = keys.items()
        else:
            items = [
                entry if isinstance(entry, (tuple, list)) else (entry, None)
                for entry in _check_keys(keys, "Hidden columns")
            ]
        for entry in items:
            if len(entry) != 2:
                raise ImproperlyConfigured(f"Invalid hidden column {entry!r}")
            key, attrs = entry
            _check_key(key, "Hidden column")
            hidden_columns[key] = (
                None if attrs is None else check_attributes(attrs, f"Hidden '{key}'")
            )
        self.hidden_columns = hidden_columns
        return self

    def show_pages(self):
        self.pages = True
        return self

    def set_attributes(self, attributes: Mapping):
        self.attributes = check_attributes(attributes, "Table attributes")
        return self

    def sortable(self, keys):
        self.sort_columns = [_check_key(key) for key in _check_keys(keys)]
        return self

    def means(self, column: str, relation: str):
        self.relations[_check_key(column)] = relation
        return self

    def modify(self, columns, fn=None):
        if isinstance(columns, Mapping):
            for column, column_fn in columns.items():
                self.modify(column, column_fn)
            return self
        self.modifications[_check_key(columns)] = _check_callable(columns, fn)
        return self

    def modify_cell(self, column: str, fn):
        self.cell_modifications[_check_key(column)] = _check_callable(column, fn)
        return self

    def modify_row(self, name: str, fn):
        self.row_modifications[_check_key(name, "Row rule")] = _check_callable(
            name, fn
        )
        return self

    def with_mass_actions(self, builder, value="id"):
        """
        Prepend a 'select' column of checkboxes whose header holds the bulk action
        controls returned by builder(). Nothing happens if builder returns no items.
        """
        items = list(builder() or []) if builder else []
        if not items:
            logger.debug("No mass actions, select column not added")
            return self
        column = SelectionColumn(items, value=value)
        self.columns.pop(column.name, None)
        self.columns = {column.name: column, **self.columns}
        self.modify(column.name, column.render)
        self.modify_cell(column.name, column.cell_attributes)
        return self

    # Accessors used by the templates

    def get_cell_attributes(self, column: str, record=None):
        if column not in self.cell_modifications:
            return None
        result = self.cell_modifications[column](record)
        attributes = dict(result) if isinstance(result, Mapping) else {}
        hidden = self._hidden_attributes(column)
        if hidden is not None:
            attributes.update(hidden)
        return array_to_html_attributes(attributes)

    def get_row_attributes(self, record=None):
        attributes = {}
        for fn in self.row_modifications.values():
            result = fn(record)
            if isinstance(result, Mapping):
                attributes.update(result)
        return array_to_html_attributes(attributes)

    def get_hidden_column_attributes(self, column: str):
        attributes = self._hidden_attributes(column)
        if attributes is None:
            return None
        return array_to_html_attributes(attributes)

    def _hidden_attributes(self, column):
        if column not in self.hidden_columns:
            return None
        attributes = self.hidden_columns[column]
        if attributes is None:
            attributes = self.get_settings().hidden_column_attributes
        return attributes

    def get_relationship_property(self, path: str, root=None):
        """
        Resolve a dotted path. Every segment but the last is read directly off root
        (the collection itself by default); the last segment is read off the value
        found so far when that value is an object.
        """
        root = self if root is None else root
        segments = path.split(".")
        value = root
        for segment in segments[:-1]:
            value = lookup(root, segment)
        if is_object(value):
            value = lookup(value, segments[-1])
        return value

    def get_relationship_object(self, path: str, root=None):
        root = self if root is None else root
        segments = path.split(".")
        name = segments[-2] if len(segments) > 1 else segments[-1]
        return lookup(root, name)

    def get_cell_value(self, column: str, record):
        if column in self.modifications:
            return self.modifications[column](record)
        if column in self.relations:
            return self.get_relationship_property(self.relations[column], record)
        return Accessor(column.replace(".", Accessor.SEPARATOR)).resolve(
            record, quiet=True
        )

    def get_header_attributes(self, column: str):
        attributes = {}
        if column in self.columns:
            attributes = self.columns[column].header_attributes()
        hidden = self._hidden_attributes(column)
        if hidden is not None:
            attributes.update(hidden)
        return array_to_html_attributes(attributes)

    def is_sortable(self, column: str) -> bool:
        return column in self.sort_columns

    # Rendering

    def get_settings(self) -> TableSettings:
        if self.settings is None:
            self.settings = TableSettings.from_settings()
        return self.settings

    def render(self, view=None, request=None, settings: TableSettings | None = None):
        if settings is not None:
            self.settings = settings
        settings = self.get_settings()
        # Use the configured defaults unless attributes have been set explicitly
        if not self.attributes:
            self.set_attributes(settings.table_attributes)
        template_name = settings.template_name(view)
        logger.debug("Rendering %d records with %s", len(self), template_name)
        return mark_safe(
            render_to_string(template_name, {"collection": self}, request=request)
        )
