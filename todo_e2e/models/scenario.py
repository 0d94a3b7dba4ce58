# models/scenario.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

PASSED = 'passed'
FAILED = 'failed'
ERROR = 'error'
SKIPPED = 'skipped'
ABORTED = 'aborted'
STATUSES = (PASSED, FAILED, ERROR, SKIPPED, ABORTED)


@dataclass
class Session:
    driver: Any
    base_url: str
    timeouts: Dict[str, int]
    launch_flags: List[str] = field(default_factory=list)
    headless: bool = True
    poll_interval_ms: int = 500
    deadline: Optional[float] = None
    released: bool = False

    def url_for(self, path: str) -> str:
        if not path:
            return self.base_url
        return self.base_url.rstrip('/') + '/' + path.lstrip('/')


@dataclass(frozen=True)
class Identity:
    name: str
    email: str
    password: str


@dataclass
class WaitCondition:
    description: str
    predicate: Callable[[Any], Any]

    def __call__(self, driver):
        return self.predicate(driver)

    def __str__(self):
        return self.description


@dataclass
class ScenarioResult:
    name: str
    status: str
    phase: str = ''
    message: str = ''
    expected: Optional[str] = None
    actual: Optional[str] = None
    last_url: str = ''
    page_title: str = ''
    duration: float = 0.0
    timestamp: str = ''

    @property
    def passed(self) -> bool:
        return self.status == PASSED

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass
class SuiteReport:
    base_url: str
    results: List[ScenarioResult] = field(default_factory=list)
    fatal_error: str = ''
    started_at: str = field(default_factory=lambda: datetime.now().isoformat())
    finished_at: str = ''
    total_time: float = 0.0

    def count(self, status: str) -> int:
        return sum(1 for result in self.results if result.status == status)

    @property
    def exit_code(self) -> int:
        if self.fatal_error:
            return 1
        return 0 if all(result.passed for result in self.results) else 1

    def summary(self) -> Dict:
        summary = {status: self.count(status) for status in STATUSES}
        summary['total'] = len(self.results)
        return summary

    def to_dict(self) -> Dict:
        return {
            'base_url': self.base_url,
            'started_at': self.started_at,
            'finished_at': self.finished_at,
            'total_time': self.total_time,
            'fatal_error': self.fatal_error,
            'exit_code': self.exit_code,
            'summary': self.summary(),
            'results': [result.to_dict() for result in self.results],
        }
