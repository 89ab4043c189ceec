import logging

from django.core.exceptions import ImproperlyConfigured
from django.core.paginator import EmptyPage, PageNotAnInteger, Paginator
from django.http import HttpResponse
from django.views.generic import TemplateView
from django_filters.filterset import filterset_factory
from django_htmx.http import trigger_client_event

from .query import sort_queryset
from .table import TableCollection
from .utils import PAGE_PARAM, SORT_DIRECTION_PARAM, SORT_FIELD_PARAM, TableSettings

logger = logging.getLogger(__name__)


class TableCollectionView(TemplateView):
    """
    Render a queryset as a table. Sorting comes from the 'field' and 'sort' GET
    parameters; htmx requests (sort and page links) get just the table back.
    Override configure_collection() to add modifiers.
    """

    template_name = "django_tablecollection/page.html"
    table_template = None
    collection_class = TableCollection

    model = None
    queryset = None
    filterset_class = None
    filterset_fields = None
    filterset = None
    paginate_by = 0

    columns = {}
    hidden_columns = []
    sortable_columns = []
    table_attributes = {}
    title = ""

    def get(self, request, *args, **kwargs):
        self.collection = self.get_collection()
        if getattr(request, "htmx", False):
            response = HttpResponse(self.render_table())
            return trigger_client_event(response, "table_collection_loaded", after="swap")
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        if self.queryset is not None:
            return self.queryset.all()
        if self.model is not None:
            return self.model._default_manager.all()
        raise ImproperlyConfigured(
            "%(cls)s is missing a QuerySet. Define "
            "%(cls)s.model, %(cls)s.queryset, or override "
            "%(cls)s.get_queryset()." % {"cls": self.__class__.__name__}
        )

    def get_filterset(self, queryset=None):
        filterset_class = self.filterset_class
        if filterset_class is None and self.filterset_fields:
            filterset_class = filterset_factory(
                queryset.model, fields=self.filterset_fields
            )
        if filterset_class is None:
            return None
        return filterset_class(self.request.GET, queryset=queryset, request=self.request)

    def get_sorted_queryset(self):
        queryset = self.get_queryset()
        self.filterset = self.get_filterset(queryset)
        if self.filterset is not None:
            queryset = self.filterset.qs
        return sort_queryset(
            queryset,
            self.request.GET.get(SORT_FIELD_PARAM),
            self.request.GET.get(SORT_DIRECTION_PARAM),
        )

    def paginate(self, queryset):
        if not self.paginate_by:
            return queryset
        paginator = Paginator(queryset, self.paginate_by)
        number = self.request.GET.get(PAGE_PARAM, 1)
        try:
            return paginator.page(number)
        except PageNotAnInteger:
            logger.debug("Page %r is not a number, showing first page", number)
            return paginator.page(1)
        except EmptyPage:
            logger.debug("Page %r is out of range, showing last page", number)
            return paginator.page(paginator.num_pages)

    def get_settings(self):
        return TableSettings.from_settings()

    def get_collection(self):
        records = self.paginate(self.get_sorted_queryset())
        collection = self.collection_class(records, settings=self.get_settings())
        collection.set_columns(self.columns)
        collection.hidden(self.hidden_columns)
        collection.sortable(self.sortable_columns)
        if self.table_attributes:
            collection.set_attributes(self.table_attributes)
        if self.paginate_by:
            collection.show_pages()
        return self.configure_collection(collection)

    def configure_collection(self, collection):
        """
        Override this to add modifiers, mass actions or relationships to the collection
        """
        return collection

    def render_table(self):
        return self.collection.render(self.table_template, request=self.request)

    def get_context_data(self, **kwargs):
        context = super().get_context_data(**kwargs)
        context.update(
            title=self.title,
            collection=self.collection,
            filter=self.filterset,
            table=self.render_table(),
        )
        return context

