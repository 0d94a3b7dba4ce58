# core/assertions.py
from typing import Callable, Iterable, Sequence, Tuple

from todo_e2e.core.exceptions import AssertionFailure


def check(condition, message, expected=None, actual=None) -> None:
    if not condition:
        raise AssertionFailure(message, expected=expected, actual=actual)


def check_contains_any(actual: str, fragments: Sequence[str], what: str = 'text') -> None:
    actual = actual or ''
    check(
        any(fragment in actual for fragment in fragments),
        f"{what} does not mention any of {list(fragments)}",
        expected=f"any of {list(fragments)}",
        actual=actual,
    )


def check_url_contains(url: str, fragment: str) -> None:
    check(fragment in (url or ''), f"url does not contain '{fragment}'", expected=fragment, actual=url)


def check_url_excludes(url: str, fragment: str) -> None:
    check(fragment not in (url or ''), f"url unexpectedly contains '{fragment}'", expected=f"not {fragment}", actual=url)


def check_either(alternatives: Iterable[Tuple[str, Callable[[], bool]]]) -> str:
    """Pass when any named alternative holds; return the name of the one that did.

    Used where the app may legitimately report the same outcome in more than
    one way, e.g. client-side vs. server-side validation.
    """
    names = []
    for name, holds in alternatives:
        names.append(name)
        if holds():
            return name
    raise AssertionFailure(
        'none of the accepted outcomes was observed',
        expected=' or '.join(names),
        actual='none',
    )
