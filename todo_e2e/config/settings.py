# config/settings.py
import os

DEFAULT_LAUNCH_FLAGS = [
    '--no-sandbox',
    '--disable-dev-shm-usage',
    '--disable-gpu',
    '--disable-software-rasterizer',
    '--disable-extensions',
    '--window-size=1920,1080',
]


def _flags_from_env(value):
    if not value:
        return list(DEFAULT_LAUNCH_FLAGS)
    return [flag.strip() for flag in value.split(',') if flag.strip()]


class Config:
    BASE_URL = os.getenv('TEST_BASE_URL', 'http://localhost:5000')
    HEADLESS = os.getenv('HEADLESS', 'true').lower() == 'true'
    CHROME_BIN = os.getenv('CHROME_BIN', '/usr/bin/chromium-browser')
    CHROMEDRIVER_PATH = os.getenv('CHROMEDRIVER_PATH', '/usr/bin/chromedriver')
    LAUNCH_FLAGS = _flags_from_env(os.getenv('LAUNCH_FLAGS'))
    IMPLICIT_WAIT_MS = int(os.getenv('IMPLICIT_WAIT_MS', 10000))
    PAGE_LOAD_TIMEOUT_MS = int(os.getenv('PAGE_LOAD_TIMEOUT_MS', 30000))
    WAIT_TIMEOUT_MS = int(os.getenv('WAIT_TIMEOUT_MS', 10000))
    POLL_INTERVAL_MS = int(os.getenv('POLL_INTERVAL_MS', 500))
    SUITE_TIMEOUT_MS = int(os.getenv('SUITE_TIMEOUT_MS', 600000))
    PREFLIGHT = os.getenv('PREFLIGHT', 'true').lower() == 'true'
    RESULTS_FILE = os.getenv('RESULTS_FILE', 'e2e_results.json')

    @classmethod
    def timeouts(cls):
        return {
            'implicit': cls.IMPLICIT_WAIT_MS,
            'pageLoad': cls.PAGE_LOAD_TIMEOUT_MS,
            'wait': cls.WAIT_TIMEOUT_MS,
        }

    @classmethod
    def with_overrides(cls, **overrides):
        """Return a Config subclass with the given attributes replaced."""
        return type(cls.__name__, (cls,), {key.upper(): value for key, value in overrides.items()})
