# core/session_manager.py
import logging
import os
import time
from contextlib import contextmanager
from typing import Iterator

from selenium import webdriver
from selenium.common.exceptions import WebDriverException
from selenium.webdriver.chrome.options import Options as ChromeOptions
from selenium.webdriver.chrome.service import Service as ChromeService

from todo_e2e.config.settings import Config
from todo_e2e.core.exceptions import SessionStartError, SessionTeardownError
from todo_e2e.models.scenario import Session
from todo_e2e.utils.http_utils import is_reachable

logger = logging.getLogger(__name__)


class SessionManager:
    """Starts and stops the single browser session a suite runs against."""

    def __init__(self, driver_factory=None):
        self.driver_factory = driver_factory or webdriver.Chrome

    def build_options(self, config=Config) -> ChromeOptions:
        chrome_options = ChromeOptions()
        if config.HEADLESS:
            chrome_options.add_argument('--headless')
        for flag in config.LAUNCH_FLAGS:
            chrome_options.add_argument(flag)
        if config.CHROME_BIN and os.path.isfile(config.CHROME_BIN):
            chrome_options.binary_location = config.CHROME_BIN
            logger.info(f"Using Chrome binary: {config.CHROME_BIN}")
        else:
            logger.info("Chrome binary not found at configured path, using default discovery")
        return chrome_options

    def build_service(self, config=Config) -> ChromeService:
        if config.CHROMEDRIVER_PATH and os.path.isfile(config.CHROMEDRIVER_PATH):
            logger.info(f"Using ChromeDriver: {config.CHROMEDRIVER_PATH}")
            return ChromeService(executable_path=config.CHROMEDRIVER_PATH)
        logger.info("ChromeDriver not found at configured path, falling back to PATH lookup")
        return ChromeService()

    def acquire(self, config=Config) -> Session:
        base_url = config.BASE_URL
        logger.info(f"Using base URL: {base_url}")
        if getattr(config, 'PREFLIGHT', False) and not is_reachable(base_url):
            raise SessionStartError(f"System under test is not reachable at {base_url}")
        options = self.build_options(config)
        service = self.build_service(config)
        logger.info("Building Chrome driver...")
        try:
            driver = self.driver_factory(options=options, service=service)
        except WebDriverException as e:
            raise SessionStartError(f"Could not start Chrome driver: {e.msg or e}") from e
        except OSError as e:
            raise SessionStartError(f"Could not launch browser process: {e}") from e
        timeouts = config.timeouts()
        try:
            driver.implicitly_wait(timeouts['implicit'] / 1000)
            driver.set_page_load_timeout(timeouts['pageLoad'] / 1000)
        except WebDriverException as e:
            driver.quit()
            raise SessionStartError(f"Could not configure driver timeouts: {e}") from e
        deadline = None
        if config.SUITE_TIMEOUT_MS:
            deadline = time.monotonic() + config.SUITE_TIMEOUT_MS / 1000
        logger.info("Chrome driver initialized successfully")
        return Session(
            driver=driver,
            base_url=base_url,
            timeouts=timeouts,
            launch_flags=list(options.arguments),
            headless=config.HEADLESS,
            poll_interval_ms=config.POLL_INTERVAL_MS,
            deadline=deadline,
        )

    def release(self, session: Session) -> None:
        if session is None or session.released:
            return
        session.released = True
        try:
            session.driver.quit()
            logger.info("Browser session closed")
        except Exception as e:
            logger.error(f"Error closing browser session: {e}")
            service = getattr(session.driver, 'service', None)
            if service is not None:
                try:
                    service.stop()
                except Exception as stop_error:
                    logger.error(f"Error stopping chromedriver service: {stop_error}")
            raise SessionTeardownError(f"Browser session did not shut down cleanly: {e}") from e

    @contextmanager
    def session_scope(self, config=Config) -> Iterator[Session]:
        session = self.acquire(config)
        try:
            yield session
        finally:
            self.release(session)


def session_scope(config=Config):
    return SessionManager().session_scope(config)
