from django_tablecollection.views import TableCollectionView

from .models import Book


class BookView(TableCollectionView):
    title = "Books"
    model = Book
    paginate_by = 5
    columns = {"title": "Title", "author": "Author", "price": "Price"}
    hidden_columns = ["price"]
    sortable_columns = ["title", "price"]

    def configure_collection(self, collection):
        return collection.means("author", "author.name").modify_row(
            "expensive", lambda book: {"class": "warning"} if book.price > 10 else {}
        )


class FilteredBookView(TableCollectionView):
    model = Book
    filterset_fields = ["title"]
    columns = {"title": "Title"}

    def configure_collection(self, collection):
        return collection.with_mass_actions(
            lambda: ['<a href="#" data-action="delete">Delete</a>']
        )
