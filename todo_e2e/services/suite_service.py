# services/suite_service.py
import json
import logging

from todo_e2e.config.settings import Config
from todo_e2e.core.exceptions import SessionStartError, SessionTeardownError
from todo_e2e.core.scenario_runner import ScenarioRunner
from todo_e2e.core.scenarios import select_scenarios
from todo_e2e.core.session_manager import SessionManager
from todo_e2e.models.scenario import SuiteReport
from todo_e2e.utils.fixtures import FixtureGenerator


class SuiteService:
    def __init__(self, config=Config, session_manager=None):
        self.config = config
        self.session_manager = session_manager or SessionManager()
        self.logger = logging.getLogger(__name__)

    def run(self, scenario_names=None, base_url=None) -> SuiteReport:
        scenarios = select_scenarios(scenario_names)
        config = self.config.with_overrides(base_url=base_url) if base_url else self.config
        try:
            session = self.session_manager.acquire(config)
        except SessionStartError as e:
            self.logger.error(f"Could not start browser session: {e}")
            return SuiteReport(base_url=config.BASE_URL, fatal_error=str(e))
        report = None
        try:
            report = ScenarioRunner(session, FixtureGenerator()).run(scenarios)
        finally:
            try:
                self.session_manager.release(session)
            except SessionTeardownError as e:
                self.logger.error(str(e))
                # With no report the runner itself raised; let that error propagate.
                if report is not None:
                    report.fatal_error = str(e)
        return report

    def run_and_report(self, scenario_names=None, base_url=None) -> SuiteReport:
        report = self.run(scenario_names, base_url=base_url)
        self.print_detailed_report(report)
        self.save_results_to_file(report, self.config.RESULTS_FILE)
        return report

    def print_detailed_report(self, report: SuiteReport) -> None:
        summary = report.summary()
        self.logger.info("\n" + "=" * 80)
        self.logger.info("E2E SUITE REPORT")
        self.logger.info("=" * 80)
        self.logger.info(f"Base URL: {report.base_url}")
        if report.fatal_error:
            self.logger.error(f"Suite aborted: {report.fatal_error}")
        self.logger.info(
            f"Passed: {summary['passed']}  Failed: {summary['failed']}  Errors: {summary['error']}  "
            f"Aborted: {summary['aborted']}  Skipped: {summary['skipped']}  Total: {summary['total']}"
        )
        for i, result in enumerate(report.results, 1):
            self.logger.info(f"   [{i}] {result.name}: {result.status} ({result.duration}s)")
            if result.passed:
                continue
            self.logger.info(f"       Phase: {result.phase}")
            self.logger.info(f"       Detail: {result.message}")
            if result.expected is not None:
                self.logger.info(f"       Expected: {result.expected}")
                self.logger.info(f"       Actual: {result.actual}")
            if result.last_url:
                self.logger.info(f"       Last URL: {result.last_url}")

    def save_results_to_file(self, report: SuiteReport, filename: str = None) -> None:
        filename = filename or self.config.RESULTS_FILE
        try:
            with open(filename, 'w', encoding='utf-8') as f:
                json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)
            self.logger.info(f"Results saved to: {filename}")
        except OSError as e:
            self.logger.error(f"Error saving results: {e}")
