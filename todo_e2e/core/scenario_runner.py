# core/scenario_runner.py
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from todo_e2e.core.exceptions import (
    AssertionFailure,
    NavigationError,
    SuiteTimeoutError,
    WaitTimeoutError,
)
from todo_e2e.core.navigation import go_to, remaining_ms
from todo_e2e.models.scenario import (
    ABORTED,
    ERROR,
    FAILED,
    PASSED,
    SKIPPED,
    ScenarioResult,
    Session,
    SuiteReport,
)
from todo_e2e.utils.fixtures import FixtureGenerator
from todo_e2e.utils.page_utils import snapshot

SETUP = 'setup'
ACT = 'act'
ASSERT = 'assert'


@dataclass
class ScenarioContext:
    session: Session
    fixtures: FixtureGenerator
    data: Dict[str, Any] = field(default_factory=dict)

    @property
    def driver(self):
        return self.session.driver


Step = Callable[[ScenarioContext], None]


@dataclass
class Scenario:
    name: str
    act: Step
    check: Step
    setup: Optional[Step] = None
    description: str = ''


class ScenarioRunner:
    """Runs scenarios one after another against a single borrowed session.

    A failing scenario is recorded and the next one starts from a fresh
    Setup. Only the suite time budget stops the loop early.
    """

    def __init__(self, session: Session, fixtures: Optional[FixtureGenerator] = None):
        self.session = session
        self.fixtures = fixtures or FixtureGenerator()
        self.logger = logging.getLogger(__name__)

    def run(self, scenarios: List[Scenario]) -> SuiteReport:
        self.logger.info(f"Starting suite of {len(scenarios)} scenarios against {self.session.base_url}")
        report = SuiteReport(base_url=self.session.base_url)
        start_time = time.time()
        for index, scenario in enumerate(scenarios):
            if self._budget_exhausted():
                self._skip_remaining(report, scenarios[index:])
                break
            result = self.run_scenario(scenario)
            report.results.append(result)
            if result.status == ABORTED:
                self._skip_remaining(report, scenarios[index + 1:])
                break
        report.total_time = round(time.time() - start_time, 2)
        report.finished_at = datetime.now().isoformat()
        summary = report.summary()
        self.logger.info(f"Suite finished in {report.total_time}s: {summary['passed']}/{summary['total']} passed")
        return report

    def run_scenario(self, scenario: Scenario) -> ScenarioResult:
        self.logger.info(f"Running scenario: {scenario.name}")
        context = ScenarioContext(session=self.session, fixtures=self.fixtures)
        result = ScenarioResult(name=scenario.name, status=PASSED, timestamp=datetime.now().isoformat())
        phase = SETUP
        started = time.monotonic()
        try:
            self.reset_browser()
            if scenario.setup:
                scenario.setup(context)
            phase = ACT
            scenario.act(context)
            phase = ASSERT
            scenario.check(context)
        except SuiteTimeoutError as e:
            self._record(result, ABORTED, phase, str(e))
        except AssertionFailure as e:
            self._record(result, self._failure_status(phase), phase, str(e), e.expected, e.actual)
        except WaitTimeoutError as e:
            self._record(result, self._failure_status(phase), phase, str(e),
                         expected=e.condition, actual=f"not satisfied within {e.timeout_ms}ms")
        except NavigationError as e:
            self._record(result, self._failure_status(phase), phase, str(e), expected=f"{e.url} to load", actual=e.reason)
        except AssertionError as e:
            self._record(result, self._failure_status(phase), phase, str(e) or 'assertion failed')
        except Exception as e:
            self.logger.exception(f"Unexpected error in {scenario.name} during {phase}")
            self._record(result, ERROR, phase, f"{type(e).__name__}: {e}")
        if result.status != PASSED:
            state = snapshot(self.session.driver)
            result.last_url = state['url']
            result.page_title = state['title']
        result.duration = round(time.monotonic() - started, 2)
        self._log_result(result)
        return result

    def reset_browser(self) -> None:
        """Drop any login left over from the previous scenario."""
        go_to(self.session, '')
        self.session.driver.delete_all_cookies()

    def _budget_exhausted(self) -> bool:
        remaining = remaining_ms(self.session)
        return remaining is not None and remaining <= 0

    def _skip_remaining(self, report: SuiteReport, scenarios: List[Scenario]) -> None:
        for scenario in scenarios:
            self.logger.warning(f"Skipping {scenario.name}: suite time budget exhausted")
            report.results.append(ScenarioResult(
                name=scenario.name,
                status=SKIPPED,
                message='suite time budget exhausted',
                timestamp=datetime.now().isoformat(),
            ))

    @staticmethod
    def _failure_status(phase: str) -> str:
        return ERROR if phase == SETUP else FAILED

    @staticmethod
    def _record(result, status, phase, message, expected=None, actual=None) -> None:
        result.status = status
        result.phase = phase
        result.message = message
        result.expected = None if expected is None else str(expected)
        result.actual = None if actual is None else str(actual)

    def _log_result(self, result: ScenarioResult) -> None:
        if result.passed:
            self.logger.info(f"PASSED: {result.name} ({result.duration}s)")
            return
        self.logger.warning(
            f"{result.status.upper()}: {result.name} during {result.phase}: {result.message} "
            f"(expected={result.expected}, actual={result.actual}, url={result.last_url})"
        )
