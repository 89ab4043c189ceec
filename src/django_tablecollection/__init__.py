"""
Django tables from any collection
===============
Wrap a queryset, a list or a paginator page in a ``TableCollection`` and render it as an
html table. Columns, hidden columns for responsive layouts, cell and row attributes, value
modifiers, relationship lookups and sort links are all configured with chained calls.

Key features
============
* Choose, remove and reorder the columns to display
* Modify cell values, cell attributes and row attributes with plain functions
* Hide columns on small screens with default or custom attributes
* Display values from related objects
* Sort a queryset from request parameters with a safe fallback ordering
* Bulk action checkboxes through ``with_mass_actions``
* A class-based view that renders, sorts, filters and paginates with htmx
"""
__version__ = "0.1"
