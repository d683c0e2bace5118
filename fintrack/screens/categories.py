"""Categories screen."""
import logging

from fintrack.api.errors import FinanceApiError
from fintrack.api.resources import ResourceApi
from fintrack.models.category import Category
from fintrack.screens.base import CrudScreen
from fintrack.screens.forms import CategoryForm

logger = logging.getLogger(__name__)


class CategoriesScreen(CrudScreen[Category, CategoryForm]):
    title = "Categories"
    resource_label = "category"
    
    @property
    def resource(self) -> ResourceApi:
        return self.api.categories
    
    def empty_form(self) -> CategoryForm:
        return CategoryForm()
    
    def form_from(self, record: Category) -> CategoryForm:
        return CategoryForm.from_record(record)
    
    async def fetch_items(self) -> None:
        self.loading = True
        try:
            self.items = await self.api.categories.list()
            self.error = None
        except FinanceApiError as e:
            logger.error("Failed to fetch categories: %s", e)
            self.error = "Failed to load categories. Please try again."
        finally:
            if not self.closed:
                self.loading = False
