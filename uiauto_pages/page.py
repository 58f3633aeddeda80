# uiauto_pages/page.py
"""
@file page.py
@brief Base class for page objects.

Subclasses create their nodes through the store and decide what "open"
means for the page:

    class LoginPage(Page):
        @property
        def username(self):
            return self.store.input("//input[@name='user']")

        def is_open(self):
            return self.username.currently.is_visible()

        def is_closed(self):
            return not self.username.currently.exists()

    LoginPage(store).wait.is_open()
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Callable, Optional

from .config import TimeConfig
from .waits import WaitResult, poll

if TYPE_CHECKING:
    from .store import PageNodeStore


class Page(ABC):

    def __init__(self, store: PageNodeStore, timeout: Optional[float] = None, interval: Optional[float] = None):
        settings = TimeConfig.current().page_wait
        self._store = store
        self._timeout = timeout if timeout is not None else settings.timeout
        self._interval = interval if interval is not None else settings.interval
        self.wait = PageWait(self)
        self.eventually = PageEventually(self)

    @property
    def store(self) -> PageNodeStore:
        return self._store

    @property
    def timeout(self) -> float:
        return self._timeout

    @property
    def interval(self) -> float:
        return self._interval

    @abstractmethod
    def is_open(self) -> bool:
        ...

    @abstractmethod
    def is_closed(self) -> bool:
        ...


class PageWait:

    def __init__(self, page: Page):
        self._page = page

    def _poll(
        self,
        condition: Callable[[], bool],
        description: str,
        timeout: Optional[float],
        interval: Optional[float],
    ) -> WaitResult:
        page = self._page
        timeout = timeout if timeout is not None else page.timeout
        interval = interval if interval is not None else page.interval
        return poll(
            condition,
            timeout,
            interval,
            description=f"page {type(page).__name__} {description}",
            stage="page",
            message=lambda: f"Waiting for page {type(page).__name__} {description} within {timeout}s failed.",
        )

    def is_open(self, timeout: Optional[float] = None, interval: Optional[float] = None) -> Page:
        self._poll(self._page.is_open, "to be open", timeout, interval).unwrap()
        return self._page

    def is_closed(self, timeout: Optional[float] = None, interval: Optional[float] = None) -> Page:
        self._poll(self._page.is_closed, "to be closed", timeout, interval).unwrap()
        return self._page


class PageEventually(PageWait):

    def is_open(self, timeout: Optional[float] = None, interval: Optional[float] = None) -> bool:
        return self._poll(self._page.is_open, "to be open", timeout, interval).to_bool()

    def is_closed(self, timeout: Optional[float] = None, interval: Optional[float] = None) -> bool:
        return self._poll(self._page.is_closed, "to be closed", timeout, interval).to_bool()
