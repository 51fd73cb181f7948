"""
Selenium utilities for driving the archive.org pages.
Provides a wrapper for Selenium WebDriver covering Chrome, Chromium, Firefox and Edge.
"""

import logging
import subprocess
from enum import Enum
from typing import Callable, List, Optional, Tuple

from selenium import webdriver
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support.ui import WebDriverWait
from selenium.common.exceptions import (
    TimeoutException,
    NoSuchElementException,
    WebDriverException
)

from common.errors import BrowserError

logger = logging.getLogger(__name__)

Locator = Tuple[str, str]


class BrowserType(str, Enum):
    """Browsers the saver can drive."""
    CHROME = 'chrome'
    CHROMIUM = 'chromium'
    FIREFOX = 'firefox'
    EDGE = 'edge'

    @classmethod
    def parse(cls, value: Optional[str]) -> 'BrowserType':
        """
        Parse a browser name case-insensitively.

        Raises:
            BrowserError: if the name is empty or unknown
        """
        if not value:
            raise BrowserError("Browser cannot be empty")
        try:
            return cls(value.strip().lower())
        except ValueError:
            names = ', '.join(b.value for b in cls)
            raise BrowserError(f"Browser must be one of: {names}") from None


class SeleniumDriver:
    """Wrapper for Selenium WebDriver with the lookups the save workflow needs."""

    def __init__(self, browser: BrowserType = BrowserType.CHROME, headless: bool = False,
                 timeout: int = 30, chromium_binary: Optional[str] = None):
        """
        Initialize Selenium driver with configuration.

        Args:
            browser: Which browser to start
            headless: Run browser in headless mode
            timeout: Page load timeout in seconds
            chromium_binary: Binary location used when browser is chromium
        """
        self.browser = browser
        self.headless = headless
        self.timeout = timeout
        self.chromium_binary = chromium_binary
        self.driver: Optional[WebDriver] = None

    def __enter__(self):
        """Context manager entry - initialize driver."""
        self.driver = self._create_driver()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - cleanup driver."""
        self.quit()

    def quit(self):
        if self.driver:
            try:
                self.driver.quit()
            except WebDriverException as e:
                logger.warning(f"Error while closing {self.browser.value}: {e}")
            self.driver = None

    def _chrome_options(self, binary: Optional[str] = None) -> webdriver.ChromeOptions:
        options = webdriver.ChromeOptions()
        if binary:
            options.binary_location = binary
        if self.headless:
            options.add_argument('--headless=new')

        # Common arguments for stability
        options.add_argument('--no-sandbox')
        options.add_argument('--disable-dev-shm-usage')
        options.add_argument('--log-level=3')
        options.add_experimental_option("excludeSwitches", ["enable-automation", "enable-logging"])
        return options

    def _create_driver(self) -> WebDriver:
        """
        Create and configure the WebDriver for the selected browser.

        Raises:
            BrowserError: if the browser or its driver cannot be started
        """
        try:
            if self.browser in (BrowserType.CHROME, BrowserType.CHROMIUM):
                binary = self.chromium_binary if self.browser == BrowserType.CHROMIUM else None
                service = webdriver.ChromeService(log_output=subprocess.DEVNULL)
                driver = webdriver.Chrome(service=service, options=self._chrome_options(binary))
            elif self.browser == BrowserType.FIREFOX:
                options = webdriver.FirefoxOptions()
                options.log.level = 'fatal'
                if self.headless:
                    options.add_argument('-headless')
                service = webdriver.FirefoxService(log_output=subprocess.DEVNULL)
                driver = webdriver.Firefox(service=service, options=options)
            elif self.browser == BrowserType.EDGE:
                options = webdriver.EdgeOptions()
                if self.headless:
                    options.add_argument('--headless=new')
                service = webdriver.EdgeService(log_output=subprocess.DEVNULL)
                driver = webdriver.Edge(service=service, options=options)
            else:
                raise BrowserError(f"Unsupported browser: {self.browser}")
        except WebDriverException as e:
            logger.info(f"Failed to initialize {self.browser.value} WebDriver: {e}")
            raise BrowserError(f"Error while creating WebDriver for {self.browser.value}: {e.msg}") from e

        driver.set_page_load_timeout(self.timeout)
        logger.info(f"{self.browser.value.capitalize()} WebDriver initialized successfully")
        return driver

    def navigate(self, url: str) -> bool:
        """
        Navigate to a URL.

        Args:
            url: URL to navigate to

        Returns:
            True if the page loaded, False on a timeout or transport error
        """
        try:
            logger.debug(f"Navigating to: {url}")
            self.driver.get(url)
            return True
        except TimeoutException:
            logger.info(f"Timeout loading page: {url}")
            return False
        except WebDriverException as e:
            logger.info(f"Error loading page {url}: {e.msg}")
            return False

    def find(self, locator: Locator) -> WebElement:
        """Find an element, raising NoSuchElementException when it is absent."""
        return self.driver.find_element(*locator)

    def try_find(self, locator: Locator) -> Optional[WebElement]:
        """
        Find an element, treating absence as a normal result.

        Only NoSuchElementException is swallowed; other WebDriver errors
        propagate to the caller.

        Returns:
            The element, or None if it is not on the page
        """
        try:
            return self.driver.find_element(*locator)
        except NoSuchElementException:
            logger.debug(f"No element for {locator[0]}={locator[1]!r}")
            return None

    def find_all(self, locator: Locator) -> List[WebElement]:
        """Find every element matching a locator (possibly none)."""
        return self.driver.find_elements(*locator)

    def wait_until(self, predicate: Callable[[], bool], timeout: float) -> bool:
        """
        Block until predicate() is truthy or the timeout expires.

        Args:
            predicate: Zero-argument condition polled by WebDriverWait
            timeout: Upper bound in seconds

        Returns:
            True if the condition was met, False if the wait timed out
        """
        try:
            WebDriverWait(self.driver, timeout).until(lambda _driver: predicate())
            return True
        except TimeoutException:
            logger.debug(f"Condition not met within {timeout:.0f}s")
            return False


def create_driver(browser: str, headless: Optional[bool] = None) -> SeleniumDriver:
    """
    Create a SeleniumDriver for a browser name using configured settings.

    The browser is not started until the driver is entered as a context manager.

    Raises:
        BrowserError: if the browser name is invalid
    """
    from config import settings

    return SeleniumDriver(
        browser=BrowserType.parse(browser),
        headless=settings.SELENIUM_HEADLESS if headless is None else headless,
        timeout=settings.SELENIUM_TIMEOUT,
        chromium_binary=settings.CHROMIUM_BINARY,
    )
