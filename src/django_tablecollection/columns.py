from collections.abc import Mapping

from django.core.exceptions import ImproperlyConfigured
from django.utils.safestring import mark_safe

from .utils import check_attributes


class Column:
    """
    Describes how one column header is rendered.
    content is the header text (or html), css_class the header class and
    attrs any extra attributes for the header cell.
    """

    def __init__(self, content="", css_class="", attrs=None):
        self.content = content
        self.css_class = css_class
        self.attrs = check_attributes(attrs or {}, "Column attrs")

    @classmethod
    def coerce(cls, key, value):
        """Build a Column from a string, a dictionary or an existing Column"""
        if not isinstance(key, str):
            raise ImproperlyConfigured(f"Column key {key!r} must be a string")
        if isinstance(value, Column):
            return value
        if value is None:
            return cls(content=key)
        if isinstance(value, str):
            return cls(content=value)
        if isinstance(value, Mapping):
            attrs = dict(value)
            content = attrs.pop("content", key)
            css_class = attrs.pop("class", "")
            return cls(content=content, css_class=css_class, attrs=attrs)
        raise ImproperlyConfigured(
            f"Column '{key}' must be a string, a dictionary or a Column"
        )

    def header_attributes(self) -> dict:
        result = {}
        if self.css_class:
            result["class"] = self.css_class
        result.update(self.attrs)
        return result

    def __eq__(self, other):
        if not isinstance(other, Column):
            return NotImplemented
        return (self.content, self.css_class, self.attrs) == (
            other.content,
            other.css_class,
            other.attrs,
        )

    def __repr__(self):
        return f"Column({self.content!r}, css_class={self.css_class!r})"


MASS_ACTIONS_HTML = """
<div class="custom-table custom-table__mass-actions">
    <input type="checkbox" data-mass-action='all'>
    <div class="actions">
        <i class="glyphicon glyphicon-chevron-down"></i>
        <div class="actions__items">
            {items}
        </div>
    </div>
</div>"""


class SelectionColumn(Column):
    """
    The pseudo column prepended by TableCollection.with_mass_actions().
    The header holds a master checkbox and a dropdown of bulk action controls.
    """

    name = "select"

    def __init__(self, items, value="id"):
        self.value = value
        super().__init__(
            content=mark_safe(MASS_ACTIONS_HTML.format(items="\n".join(items))),
            css_class="select",
        )

    def render(self, record):
        if isinstance(record, Mapping):
            values = record.get(self.value)
            if values is None:
                values = record.get("id")
        else:
            values = getattr(record, self.value, None)
            if values is None:
                values = getattr(record, "id", None)
        if values is None:
            values = ""
        elif isinstance(values, (list, tuple, set)):
            values = ",".join(str(v) for v in values)
        return mark_safe(f"<input type=\"checkbox\" data-mass-action='{values}'>")

    @staticmethod
    def cell_attributes(record=None):
        return {"class": "text-center", "cell-checkbox": None}
