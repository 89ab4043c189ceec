import pytest
from django.core.exceptions import ImproperlyConfigured

from django_tablecollection.columns import Column, SelectionColumn
from django_tablecollection.table import TableCollection


def make_collection():
    return TableCollection([]).set_columns(
        {"id": "ID", "name": "Name", "email": "Email", "age": "Age"}
    )


def test_set_columns_preserves_insertion_order():
    collection = make_collection()
    assert list(collection.columns) == ["id", "name", "email", "age"]


def test_set_columns_merge_is_right_biased():
    collection = TableCollection([]).set_columns({"a": "1"}).set_columns({"a": "2"})
    assert collection.columns["a"].content == "2"


def test_set_columns_appends_new_keys():
    collection = make_collection().set_columns({"name": "Full name", "city": "City"})
    assert list(collection.columns) == ["id", "name", "email", "age", "city"]
    assert collection.columns["name"].content == "Full name"


def test_set_columns_with_dictionary_descriptor():
    collection = TableCollection([]).set_columns(
        {"age": {"content": "Age", "class": "numeric", "data-type": "int"}}
    )
    column = collection.columns["age"]
    assert column == Column("Age", css_class="numeric", attrs={"data-type": "int"})
    assert column.header_attributes() == {"class": "numeric", "data-type": "int"}


def test_set_columns_rejects_bad_descriptors():
    with pytest.raises(ImproperlyConfigured):
        TableCollection([]).set_columns({"age": 42})
    with pytest.raises(ImproperlyConfigured):
        TableCollection([]).set_columns({1: "One"})
    with pytest.raises(ImproperlyConfigured):
        TableCollection([]).set_columns(["age"])


def test_remove_columns():
    collection = make_collection().remove_columns(["email", "missing"])
    assert list(collection.columns) == ["id", "name", "age"]


def test_remove_columns_is_idempotent():
    once = make_collection().remove_columns(["email"])
    twice = make_collection().remove_columns(["email"]).remove_columns(["email"])
    assert list(once.columns) == list(twice.columns)


def test_only_columns_keeps_original_order():
    collection = make_collection().only_columns(["age", "missing", "name"])
    assert list(collection.columns) == ["name", "age"]


def test_only_columns_empty_leaves_columns():
    collection = make_collection().only_columns([])
    assert list(collection.columns) == ["id", "name", "email", "age"]


def test_sortable_replaces_keys():
    collection = make_collection().sortable(["name"]).sortable(["age", "email"])
    assert collection.sort_columns == ["age", "email"]
    assert collection.is_sortable("age")
    assert not collection.is_sortable("name")


def test_modify_requires_callable():
    with pytest.raises(ImproperlyConfigured):
        make_collection().modify("name", "not callable")


def test_modify_with_dictionary():
    collection = make_collection().modify(
        {"name": lambda r: r["name"].upper(), "age": lambda r: r["age"] + 1}
    )
    record = {"name": "ann", "age": 20}
    assert collection.get_cell_value("name", record) == "ANN"
    assert collection.get_cell_value("age", record) == 21


def actions():
    return ['<a href="#" data-action="delete">Delete</a>']


def test_mass_actions_prepends_select_column():
    collection = make_collection().with_mass_actions(actions)
    assert list(collection.columns)[0] == "select"
    column = collection.columns["select"]
    assert column.css_class == "select"
    assert "data-mass-action='all'" in column.content
    assert 'data-action="delete"' in column.content


def test_mass_actions_value_field():
    collection = make_collection().with_mass_actions(actions, value="email")
    html = collection.get_cell_value("select", {"email": "a@b.com", "id": 5})
    assert html.startswith('<input type="checkbox"')
    assert "data-mass-action='a@b.com'" in html


def test_mass_actions_falls_back_to_id():
    collection = make_collection().with_mass_actions(actions, value="email")
    html = collection.get_cell_value("select", {"id": 5})
    assert "data-mass-action='5'" in html


def test_mass_actions_missing_value():
    collection = make_collection().with_mass_actions(actions, value="email")
    html = collection.get_cell_value("select", {"name": "ann"})
    assert "data-mass-action=''" in html


def test_mass_actions_sequence_value():
    collection = make_collection().with_mass_actions(actions, value="ids")
    html = collection.get_cell_value("select", {"ids": [1, 2, 3]})
    assert "data-mass-action='1,2,3'" in html


def test_mass_actions_centers_cell():
    collection = make_collection().with_mass_actions(actions)
    attributes = collection.get_cell_attributes("select", {"id": 1})
    assert attributes == " class='text-center' cell-checkbox=''"


def test_mass_actions_without_items_is_a_no_op():
    collection = make_collection()
    result = collection.with_mass_actions(lambda: [])
    assert result is collection
    assert "select" not in collection.columns
    assert "select" not in collection.modifications


def test_selection_column_reads_model_attributes():
    class Record:
        id = 7
        email = None

    column = SelectionColumn(["x"], value="email")
    assert "data-mass-action='7'" in column.render(Record())


def test_mass_actions_generator_without_items_is_a_no_op():
    def no_actions():
        yield from []

    collection = make_collection().with_mass_actions(no_actions)
    assert "select" not in collection.columns
    assert "select" not in collection.modifications


def test_mass_actions_generator_builder():
    def generated_actions():
        yield "<a>One</a>"
        yield "<a>Two</a>"

    collection = make_collection().with_mass_actions(generated_actions)
    content = collection.columns["select"].content
    assert "<a>One</a>" in content
    assert "<a>Two</a>" in content


def test_second_mass_actions_call_replaces_select_column():
    collection = (
        make_collection()
        .with_mass_actions(lambda: ["<a>Old</a>"], value="email")
        .with_mass_actions(lambda: ["<a>New</a>"], value="name")
    )
    assert list(collection.columns)[0] == "select"
    content = collection.columns["select"].content
    assert "<a>New</a>" in content
    assert "<a>Old</a>" not in content
    html = collection.get_cell_value("select", {"name": "ann", "email": "a@b.com"})
    assert "data-mass-action='ann'" in html


@pytest.mark.parametrize(
    "method", ["remove_columns", "only_columns", "sortable", "hidden"]
)
def test_single_string_keys_are_rejected(method):
    collection = make_collection()
    with pytest.raises(ImproperlyConfigured):
        getattr(collection, method)("name")
    assert list(collection.columns) == ["id", "name", "email", "age"]
