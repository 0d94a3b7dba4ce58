# core/exceptions.py
"""Error taxonomy for the end-to-end harness.

Only session start and teardown failures stop a suite. Everything else is
caught by the scenario runner and turned into a per-scenario result.
"""


class HarnessError(Exception):
    """Base exception for all harness failures."""

    pass


class SessionStartError(HarnessError):
    """Browser session could not be started."""

    pass


class SessionTeardownError(HarnessError):
    """Browser session could not be shut down cleanly."""

    pass


class NavigationError(HarnessError):
    """A page load failed or timed out."""

    def __init__(self, url, reason=''):
        self.url = url
        self.reason = reason
        message = f"Could not load {url}"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class WaitTimeoutError(HarnessError):
    """A wait condition did not hold within its timeout."""

    def __init__(self, condition, timeout_ms, last_url=''):
        self.condition = condition
        self.timeout_ms = timeout_ms
        self.last_url = last_url
        super().__init__(f"Timed out after {timeout_ms}ms waiting for {condition} (last url: {last_url or 'unknown'})")


class SuiteTimeoutError(HarnessError):
    """The suite-level time budget ran out."""

    pass


class AssertionFailure(AssertionError, HarnessError):
    """Expected vs. actual mismatch in a scenario check."""

    def __init__(self, message, expected=None, actual=None):
        self.expected = expected
        self.actual = actual
        super().__init__(message)
