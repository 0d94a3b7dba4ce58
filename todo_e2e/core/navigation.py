# core/navigation.py
"""Page navigation and bounded waits.

The app under test renders on the server and moves between pages with full
page loads, so every state-changing action is followed by a wait on the URL
or an element it should produce. Fixed delays (``settle``) are reserved for
the few places where nothing observable marks completion.
"""
import logging
import time
from contextlib import contextmanager
from typing import List, Optional, Sequence, Tuple

from selenium.common.exceptions import (
    NoSuchElementException,
    StaleElementReferenceException,
    TimeoutException,
    WebDriverException,
)
from selenium.webdriver.common.by import By
from selenium.webdriver.support.ui import WebDriverWait

from todo_e2e.core.exceptions import NavigationError, SuiteTimeoutError, WaitTimeoutError
from todo_e2e.models.scenario import Session, WaitCondition
from todo_e2e.utils.page_utils import SUBMIT_SELECTORS, current_url

logger = logging.getLogger(__name__)

Locator = Tuple[str, str]


# --- Wait conditions ---

def url_contains(fragment: str) -> WaitCondition:
    return WaitCondition(f"url to contain '{fragment}'", lambda d: fragment in d.current_url)


def element_present(by: str, value: str) -> WaitCondition:
    return WaitCondition(
        f"element {by}={value!r} to be present",
        lambda d: _first_or_false(d.find_elements(by, value)),
    )


def element_count_at_least(by: str, value: str, count: int = 1) -> WaitCondition:
    return WaitCondition(
        f"at least {count} element(s) {by}={value!r}",
        lambda d: len(d.find_elements(by, value)) >= count,
    )


def text_present(text: str) -> WaitCondition:
    return WaitCondition(f"text '{text}' to appear on the page", lambda d: text in d.page_source)


def title_contains_any(*fragments: str) -> WaitCondition:
    return WaitCondition(
        f"title to contain any of {list(fragments)}",
        lambda d: any(fragment in (d.title or '') for fragment in fragments),
    )


def any_of(*conditions: WaitCondition) -> WaitCondition:
    """Holds as soon as one alternative holds; returns that alternative."""
    def check(driver):
        for condition in conditions:
            try:
                if condition(driver):
                    return condition
            except (NoSuchElementException, StaleElementReferenceException):
                continue
        return False
    return WaitCondition(' or '.join(c.description for c in conditions), check)


def _first_or_false(elements):
    return elements[0] if elements else False


# --- Primitives ---

def go_to(session: Session, path: str = '') -> None:
    url = session.url_for(path)
    logger.info(f"Navigating to {url}")
    try:
        session.driver.get(url)
    except TimeoutException as e:
        raise NavigationError(url, f"page load exceeded {session.timeouts.get('pageLoad')}ms") from e
    except WebDriverException as e:
        raise NavigationError(url, e.msg or str(e)) from e


@contextmanager
def implicit_wait_suspended(session: Session):
    """Empty lookups return at once instead of blocking for the implicit wait."""
    session.driver.implicitly_wait(0)
    try:
        yield
    finally:
        session.driver.implicitly_wait(session.timeouts.get('implicit', 0) / 1000)


def remaining_ms(session: Session) -> Optional[int]:
    if session.deadline is None:
        return None
    return max(0, int((session.deadline - time.monotonic()) * 1000))


def wait_for(session: Session, condition: WaitCondition, timeout_ms: Optional[int] = None):
    """Poll ``condition`` until it holds; returns the condition's truthy value."""
    timeout_ms = session.timeouts.get('wait', 10000) if timeout_ms is None else timeout_ms
    budget = remaining_ms(session)
    clamped = budget is not None and budget < timeout_ms
    effective_ms = budget if clamped else timeout_ms
    if clamped and effective_ms <= 0:
        raise SuiteTimeoutError(f"Suite time budget exhausted before waiting for {condition}")
    wait = WebDriverWait(
        session.driver,
        effective_ms / 1000,
        poll_frequency=session.poll_interval_ms / 1000,
        ignored_exceptions=(NoSuchElementException, StaleElementReferenceException),
    )
    try:
        with implicit_wait_suspended(session):
            return wait.until(condition)
    except TimeoutException:
        if clamped:
            raise SuiteTimeoutError(f"Suite time budget ran out while waiting for {condition}")
        raise WaitTimeoutError(str(condition), timeout_ms, current_url(session.driver))


def locate(session: Session, by: str, value: str) -> List:
    """All elements matching the locator; an empty list when there are none."""
    with implicit_wait_suspended(session):
        return session.driver.find_elements(by, value)


def locate_first(session: Session, locators: Sequence[Locator]):
    """First displayed element found by trying each locator in order."""
    for by, value in locators:
        try:
            for element in locate(session, by, value):
                if element.is_displayed():
                    logger.debug(f"Located element by {by}: {value}")
                    return element
        except StaleElementReferenceException:
            logger.debug(f"Stale element while trying {by}: {value}")
        except WebDriverException as e:
            logger.debug(f"Failed to locate by {by}: {value} ({e})")
    return None


def require(session: Session, by: str, value: str, timeout_ms: Optional[int] = None):
    return wait_for(session, element_present(by, value), timeout_ms)


# --- Actions ---

def fill(session: Session, field_name: str, text: str) -> None:
    field = require(session, By.NAME, field_name)
    field.clear()
    if text:
        field.send_keys(text)


def submit(session: Session, locators: Sequence[Locator] = SUBMIT_SELECTORS) -> None:
    button = locate_first(session, locators)
    if button is None:
        button = require(session, *locators[0])
    button.click()


def click_link(session: Session, text: str) -> None:
    link = locate_first(session, [(By.LINK_TEXT, text), (By.PARTIAL_LINK_TEXT, text)])
    if link is None:
        link = require(session, By.LINK_TEXT, text)
    link.click()


def settle(seconds: float = 1.0) -> None:
    """Fixed delay for outcomes that leave no observable marker."""
    time.sleep(seconds)
