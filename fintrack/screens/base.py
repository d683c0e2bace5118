"""Shared view-state for screens: loading, errors, notifications, dialogs."""
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Generic, List, Optional, Set, TypeVar

from pydantic import BaseModel, ValidationError

from fintrack.api.errors import FinanceApiError
from fintrack.api.facade import FinanceApi
from fintrack.api.resources import ResourceApi
from fintrack.config import settings
from fintrack.services.retry import SleepFunc

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=BaseModel)
FormT = TypeVar("FormT", bound=BaseModel)


class Notification(BaseModel):
    """Transient message shown after an action."""

    message: str
    severity: str = "success"


class Screen:
    """
    Base for every screen.

    Fetches run as tracked tasks. :meth:`close` cancels whatever is still in
    flight so no state is written after the screen goes away.
    """

    title: str = ""

    def __init__(self, api: FinanceApi, sleep: SleepFunc = asyncio.sleep):
        self.api = api
        self.sleep = sleep
        self.loading = False
        self.error: Optional[str] = None
        self.notification: Optional[Notification] = None
        self.closed = False
        self._tasks: Set[asyncio.Task] = set()

    def notify(self, message: str, severity: str = "success") -> None:
        self.notification = Notification(message=message, severity=severity)

    def dismiss_notification(self) -> None:
        self.notification = None

    def spawn(self, coro: Awaitable[Any]) -> asyncio.Task:
        """Run ``coro`` as a task owned by this screen."""
        if self.closed:
            if asyncio.iscoroutine(coro):
                coro.close()
            raise RuntimeError(f"{type(self).__name__} is closed")
        task = asyncio.ensure_future(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def load_tasks(self) -> List[Awaitable[Any]]:
        """Fetches started when the screen opens; they run concurrently."""
        return []

    async def load(self) -> None:
        """Run every initial fetch and wait for all of them."""
        tasks = [self.spawn(coro) for coro in self.load_tasks()]
        if not tasks:
            return
        try:
            await asyncio.gather(*tasks)
        except asyncio.CancelledError:
            if not self.closed:
                raise

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def close(self) -> None:
        """Cancel pending fetches and stop accepting new ones."""
        self.closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.debug("Cancelled %d pending task(s) on %s", len(tasks), type(self).__name__)


class CrudScreen(Screen, ABC, Generic[RecordT, FormT]):
    """List screen with a create/edit dialog and a delete confirmation."""

    resource_label: str = "item"

    def __init__(self, api: FinanceApi, sleep: SleepFunc = asyncio.sleep):
        super().__init__(api, sleep)
        self.items: List[RecordT] = []
        self.dialog_open = False
        self.delete_dialog_open = False
        self.selected: Optional[RecordT] = None
        self.form: FormT = self.empty_form()

    @property
    @abstractmethod
    def resource(self) -> ResourceApi:
        ...

    @abstractmethod
    def empty_form(self) -> FormT:
        ...

    @abstractmethod
    def form_from(self, record: RecordT) -> FormT:
        ...

    @abstractmethod
    async def fetch_items(self) -> None:
        ...

    def validate_form(self) -> Optional[str]:
        """Message for an incomplete form, or None when it can be submitted."""
        return None

    def load_tasks(self) -> List[Awaitable[Any]]:
        return [self.fetch_items()]

    # Dialog

    def open_dialog(self, record: Optional[RecordT] = None) -> None:
        """Open the edit dialog for ``record``, or an empty create dialog."""
        self.selected = record
        self.form = self.form_from(record) if record is not None else self.empty_form()
        self.dialog_open = True

    def close_dialog(self) -> None:
        self.dialog_open = False

    def update_form(self, **fields: Any) -> None:
        self.form = self.form.model_copy(update=fields)

    @property
    def editing(self) -> bool:
        return self.selected is not None

    def save_error_message(self, error: Exception) -> str:
        return f"Failed to save {self.resource_label}. Please try again."

    def delete_error_message(self, error: Exception) -> str:
        return f"Failed to delete {self.resource_label}. Please try again."

    async def submit(self) -> bool:
        """Create or update from the form, then refetch the list."""
        problem = self.validate_form()
        if problem:
            self.notify(problem, "error")
            return False

        try:
            payload = self.form.to_payload()
        except (ValidationError, ValueError) as e:
            logger.error("Invalid %s form: %s", self.resource_label, e)
            self.notify(self.save_error_message(e), "error")
            return False

        label = self.resource_label.capitalize()
        try:
            if self.selected is not None:
                await self.resource.update(self.selected.id, payload)
                self.notify(f"{label} updated successfully")
            else:
                await self.resource.create(payload)
                self.notify(f"{label} created successfully")
        except FinanceApiError as e:
            logger.error("Failed to save %s: %s", self.resource_label, e)
            self.notify(self.save_error_message(e), "error")
            return False

        self.close_dialog()
        await self.refresh_after_write()
        return True

    # Delete

    def request_delete(self, record: RecordT) -> None:
        self.selected = record
        self.delete_dialog_open = True

    def cancel_delete(self) -> None:
        self.delete_dialog_open = False

    async def confirm_delete(self) -> bool:
        if self.selected is None:
            return False
        try:
            await self.resource.delete(self.selected.id)
        except FinanceApiError as e:
            logger.error("Failed to delete %s: %s", self.resource_label, e)
            self.notify(self.delete_error_message(e), "error")
            return False

        self.delete_dialog_open = False
        self.notify(f"{self.resource_label.capitalize()} deleted successfully")
        await self.refresh_after_write()
        return True

    async def refresh_after_write(self) -> None:
        if settings.refetch_delay > 0:
            await self.sleep(settings.refetch_delay)
        await self.spawn(self.fetch_items())


def category_name(categories: List[Any], category_id: Optional[int]) -> str:
    """Resolve a category id against a fetched list; stale ids read "Unknown"."""
    for category in categories:
        if category.id == category_id:
            return category.name
    return "Unknown"
