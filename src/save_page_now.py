"""
Save Page Now Module
Logs into archive.org and submits URLs to the Wayback Machine save form,
reading the outcome of each request back from the page.
"""
import sys
import time
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from selenium.webdriver.common.by import By
from selenium.common.exceptions import (
    StaleElementReferenceException,
    WebDriverException
)

from common.credentials import Credentials
from common.errors import LoginError
from common.url_sources import filter_valid_urls
from config import settings

logger = logging.getLogger(__name__)

# archive.org login form
LOGIN_USERNAME_INPUT = (By.NAME, 'username')
LOGIN_PASSWORD_INPUT = (By.NAME, 'password')
LOGIN_SUBMIT = (By.NAME, 'submit-to-login')
LOGIN_ERROR = (By.CSS_SELECTOR, 'span.login-error')

# web.archive.org/save form
SAVE_URL_INPUT = (By.ID, 'web-save-url-input')
CAPTURE_OUTLINKS = (By.ID, 'capture_outlinks')
CAPTURE_SCREENSHOT = (By.ID, 'capture_screenshot')
SAVE_BUTTON = (By.CLASS_NAME, 'web-save-button')

# Outcome signals, in check order
SAVING_INDICATOR = (By.ID, 'saving-msg')
SUCCESS_LABEL = (By.CSS_SELECTOR, 'span.label-success:nth-child(2) > span:nth-child(1)')
CAPTURE_LIMIT_MESSAGE = (By.CSS_SELECTOR, '.col-md-offset-4 > p:nth-child(2)')
BEING_CAPTURED_MESSAGE = (By.CSS_SELECTOR, '.col-md-8 > p:nth-child(2)')
DUPLICATE_SNAPSHOT_MESSAGE = (By.XPATH, "//p[contains(text(), 'The same snapshot had been made')]")


class Outcome(str, Enum):
    """Classified result of one save request."""
    SAVED = 'saved'
    ALREADY_CAPTURED_TEN_TIMES = 'already_captured_ten_times'
    BEING_CAPTURED = 'being_captured'
    DUPLICATE_SNAPSHOT = 'duplicate_snapshot'
    TIMED_OUT = 'timed_out'
    UNKNOWN = 'unknown'


def timeout_message(url: str) -> str:
    return f"Wayback Machine has timed out while opening the save page for {url}, please try again"


@dataclass
class SaveResult:
    """Outcome of one save request; never persisted."""
    url: str
    outcome: Outcome
    elapsed: Optional[float] = None
    timed_out: bool = False
    detail: Optional[str] = None

    def message(self) -> str:
        """Human-readable status line for this result."""
        if self.outcome == Outcome.SAVED:
            if self.elapsed is not None:
                return f"Saved: {self.url} in {self.elapsed:.2f} seconds"
            return f"Saved: {self.url}"
        if self.outcome == Outcome.ALREADY_CAPTURED_TEN_TIMES:
            return f"URL: {self.url} has already been captured 10 times"
        if self.outcome == Outcome.BEING_CAPTURED:
            return f"URL: {self.url} is being captured"
        if self.outcome == Outcome.DUPLICATE_SNAPSHOT:
            return f"Already existing snapshot: {self.url}"
        if self.outcome == Outcome.TIMED_OUT:
            return timeout_message(self.url)
        return f"Could not submit {self.url}: {self.detail or 'unknown error'}"


def _error_summary(error: WebDriverException) -> str:
    """First line of a WebDriver error message (the rest is session noise)."""
    text = (error.msg or '').strip()
    if not text:
        return type(error).__name__
    return text.splitlines()[0]


def _is_displayed(element) -> bool:
    try:
        return element.is_displayed()
    except StaleElementReferenceException:
        # Re-rendered since lookup
        return False


def _is_hidden(element) -> bool:
    try:
        return not element.is_displayed()
    except StaleElementReferenceException:
        # Removed from the DOM
        return True


def login(browser, credentials: Credentials, login_url: Optional[str] = None,
          settle_seconds: Optional[float] = None) -> bool:
    """
    Log into archive.org.

    Args:
        browser: SeleniumDriver (or anything with the same surface)
        credentials: Validated email and password
        login_url: Login page (default: settings.ARCHIVE_LOGIN_URL)
        settle_seconds: Pause after submitting the form (default: settings.LOGIN_SETTLE_SECONDS)

    Returns:
        True if logged in, False if archive.org rejected the credentials

    Raises:
        LoginError: if the login page or its form cannot be reached
    """
    login_url = login_url or settings.ARCHIVE_LOGIN_URL
    if settle_seconds is None:
        settle_seconds = settings.LOGIN_SETTLE_SECONDS

    logger.info(f"Logging in as {credentials.email}")
    if not browser.navigate(login_url):
        raise LoginError(f"Could not load the login page at {login_url}")

    try:
        browser.find(LOGIN_USERNAME_INPUT).send_keys(credentials.email)
        browser.find(LOGIN_PASSWORD_INPUT).send_keys(credentials.password)
        browser.find(LOGIN_SUBMIT).click()
    except WebDriverException as e:
        raise LoginError(f"Login form not found at {login_url}: {_error_summary(e)}") from e

    time.sleep(settle_seconds)

    if browser.try_find(LOGIN_ERROR) is not None:
        print("❌ Invalid Email or Password", file=sys.stderr)
        logger.info(f"archive.org rejected the credentials for {credentials.email}")
        return False

    logger.info("✓ Logged in to archive.org")
    return True


def _submit(browser, url: str) -> None:
    browser.find(SAVE_URL_INPUT).send_keys(url)
    browser.find(CAPTURE_OUTLINKS).click()
    browser.find(CAPTURE_SCREENSHOT).click()
    browser.find(SAVE_BUTTON).click()


def _wait_for_saving(browser, url: str, timeout: float) -> Optional[float]:
    """
    Wait for the saving indicator to go away.

    Returns:
        Seconds spent saving, or None if the indicator was never displayed
        or was still displayed when the wait ran out
    """
    indicator = browser.try_find(SAVING_INDICATOR)
    if indicator is None:
        return None

    started = None
    if _is_displayed(indicator):
        started = time.monotonic()
        print(f"Saving URL: {url}")
        logger.info(f"Saving URL: {url}")

    if not browser.wait_until(lambda: _is_hidden(indicator), timeout):
        logger.warning(f"Saving indicator still shown after {timeout:.0f}s for {url}")
        return None

    if started is None:
        return None
    return time.monotonic() - started


def classify_outcome(browser, url: str, elapsed: Optional[float] = None) -> SaveResult:
    """
    Read the outcome of a submitted save request from the page.

    Checks run in a fixed priority order and the first match wins. Absent
    elements just move on to the next check. When nothing matches the request
    is reported as saved.

    Args:
        browser: SeleniumDriver (or anything with the same surface)
        url: URL that was submitted
        elapsed: Seconds spent saving, if timing was captured

    Returns:
        SaveResult for the first matching signal
    """
    label = browser.try_find(SUCCESS_LABEL)
    if label is not None and _is_displayed(label):
        return SaveResult(url, Outcome.SAVED, elapsed=elapsed)

    limit = browser.try_find(CAPTURE_LIMIT_MESSAGE)
    if limit is not None and _is_displayed(limit):
        return SaveResult(url, Outcome.ALREADY_CAPTURED_TEN_TIMES)

    capturing = browser.try_find(BEING_CAPTURED_MESSAGE)
    if capturing is not None and _is_displayed(capturing):
        return SaveResult(url, Outcome.BEING_CAPTURED)

    # Unlike the checks above, any WebDriver error here counts as "not found"
    try:
        duplicates = browser.find_all(DUPLICATE_SNAPSHOT_MESSAGE)
    except WebDriverException as e:
        logger.debug(f"Duplicate snapshot check failed for {url}: {_error_summary(e)}")
        duplicates = []
    if duplicates:
        return SaveResult(url, Outcome.DUPLICATE_SNAPSHOT)

    return SaveResult(url, Outcome.SAVED)


def save_url(browser, url: str, save_page_url: Optional[str] = None,
             saving_timeout: Optional[float] = None) -> SaveResult:
    """
    Submit one URL to the save form and report the outcome.

    A navigation timeout is reported but the attempt still goes on against
    whatever page loaded. Any WebDriver error while filling the form or
    probing the page ends this URL only.

    Args:
        browser: SeleniumDriver (or anything with the same surface)
        url: URL to save
        save_page_url: Save form page (default: settings.WAYBACK_SAVE_URL)
        saving_timeout: Upper bound for the saving wait (capped at 60s)

    Returns:
        SaveResult, after its status line has been printed
    """
    save_page_url = save_page_url or settings.WAYBACK_SAVE_URL
    if saving_timeout is None:
        saving_timeout = settings.SAVING_TIMEOUT_SECONDS
    saving_timeout = min(saving_timeout, settings.MAX_SAVING_TIMEOUT_SECONDS)

    timed_out = not browser.navigate(save_page_url)
    if timed_out:
        print(timeout_message(url))
        logger.info(f"Save page timed out for {url}, trying anyway")

    try:
        _submit(browser, url)
        elapsed = _wait_for_saving(browser, url, saving_timeout)
        result = classify_outcome(browser, url, elapsed=elapsed)
    except WebDriverException as e:
        outcome = Outcome.TIMED_OUT if timed_out else Outcome.UNKNOWN
        result = SaveResult(url, outcome, detail=_error_summary(e))
        logger.info(f"Save request failed for {url}: {result.detail}")

    result.timed_out = timed_out
    if result.outcome != Outcome.TIMED_OUT:
        print(result.message())
    logger.info(f"{result.outcome.value}: {url}")
    return result


def save_urls(browser, urls: Iterable[str], delay: Optional[float] = None,
              save_page_url: Optional[str] = None, saving_timeout: Optional[float] = None,
              sleep: Optional[Callable[[float], None]] = None) -> List[SaveResult]:
    """
    Submit each URL in order, one at a time.

    Args:
        browser: Logged-in SeleniumDriver (or anything with the same surface)
        urls: URLs to save; invalid ones are dropped with a warning
        delay: Pause before each attempt (default: settings.SAVE_DELAY_SECONDS)
        save_page_url: Save form page (default: settings.WAYBACK_SAVE_URL)
        saving_timeout: Upper bound for each saving wait (capped at 60s)
        sleep: Sleep function used for the pause (default: time.sleep)

    Returns:
        One SaveResult per submitted URL, in input order
    """
    if delay is None:
        delay = settings.SAVE_DELAY_SECONDS
    sleep = sleep or time.sleep

    urls = filter_valid_urls(urls)
    total = len(urls)
    results = []
    start_time = time.monotonic()

    for index, url in enumerate(urls, 1):
        sleep(delay)
        logger.info(f"[{index}/{total}] Submitting {url}")
        results.append(save_url(browser, url, save_page_url=save_page_url,
                                saving_timeout=saving_timeout))

    duration = time.monotonic() - start_time
    counts: Dict[str, int] = {}
    for result in results:
        counts[result.outcome.value] = counts.get(result.outcome.value, 0) + 1

    logger.info("=" * 60)
    logger.info(f"Save Page Now - Completed {total} URLs in {duration:.2f}s")
    for outcome, count in sorted(counts.items()):
        logger.info(f"  {outcome}: {count}")
    logger.info("=" * 60)

    return results
