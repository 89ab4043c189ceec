from django.urls import path

from myapp.views import BookView, FilteredBookView

urlpatterns = [
    path("books", BookView.as_view(), name="books"),
    path("filtered", FilteredBookView.as_view(), name="filtered"),
]
