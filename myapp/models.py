from django.db import models

from django_tablecollection.query import TableQuerySet


class Author(models.Model):
    name = models.CharField(max_length=50)
    email = models.CharField(max_length=100, blank=True)


class Book(models.Model):
    title = models.CharField(max_length=100)
    author = models.ForeignKey(Author, null=True, on_delete=models.SET_NULL)
    price = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    isbn = models.CharField(max_length=20, blank=True, db_column="isbn_code")
    created_at = models.DateTimeField(auto_now_add=True)

    objects = TableQuerySet.as_manager()
