# core/scenarios.py
"""Scenario catalogue for the todo application.

Every scenario that needs an account registers its own fresh identity in
Setup, so scenarios can run in any order and in isolation.
"""
from typing import Iterable, List, Optional

from selenium.webdriver.common.by import By

from todo_e2e.core.assertions import check, check_contains_any, check_either, check_url_contains, check_url_excludes
from todo_e2e.core.navigation import (
    any_of,
    click_link,
    element_present,
    fill,
    go_to,
    locate,
    require,
    settle,
    submit,
    url_contains,
    wait_for,
)
from todo_e2e.core.scenario_runner import Scenario, ScenarioContext
from todo_e2e.models.scenario import WaitCondition
from todo_e2e.utils.page_utils import current_url, element_texts, is_invalid_field, page_source, xpath_literal

PATHS = {
    'home': '',
    'about': '/about',
    'register': '/register',
    'login': '/login',
    'todos': '/todos',
}

SELECTORS = {
    'success_alert': (By.CSS_SELECTOR, '.alert-success'),
    'error_alert': (By.CSS_SELECTOR, '.alert-danger'),
    'field_errors': (By.CSS_SELECTOR, '.alert-danger, .invalid-feedback, .error, .text-danger'),
    'todo_items': [
        (By.CSS_SELECTOR, '.todo-item'),
        (By.CSS_SELECTOR, 'ul.list-group > li'),
        (By.CSS_SELECTOR, 'table tbody tr'),
        (By.CSS_SELECTOR, '.card .card-title'),
    ],
}

FIELDS = {
    'name': 'name',
    'email': 'email',
    'password': 'password',
    'confirm': 'confirmPassword',
    'title': 'title',
}

LINKS = {
    'login': 'Login',
    'register': 'Register',
    'about': 'About',
    'logout': 'Logout',
}


# --- Shared steps ---

def register(ctx: ScenarioContext, identity, confirm: Optional[str] = None) -> None:
    go_to(ctx.session, PATHS['register'])
    fill(ctx.session, FIELDS['name'], identity.name)
    fill(ctx.session, FIELDS['email'], identity.email)
    fill(ctx.session, FIELDS['password'], identity.password)
    fill(ctx.session, FIELDS['confirm'], identity.password if confirm is None else confirm)
    submit(ctx.session)


def login(ctx: ScenarioContext, email: str, password: str) -> None:
    go_to(ctx.session, PATHS['login'])
    fill(ctx.session, FIELDS['email'], email)
    fill(ctx.session, FIELDS['password'], password)
    submit(ctx.session)


def register_fresh_identity(ctx: ScenarioContext) -> None:
    identity = ctx.fixtures.new_identity()
    ctx.data['identity'] = identity
    register(ctx, identity)
    wait_for(ctx.session, url_contains(PATHS['login']))


def authenticate(ctx: ScenarioContext) -> None:
    """Register a fresh identity and log in with it."""
    register_fresh_identity(ctx)
    identity = ctx.data['identity']
    login(ctx, identity.email, identity.password)
    wait_for(ctx.session, url_contains(PATHS['todos']))


def count_todo_items(ctx: ScenarioContext) -> int:
    for by, value in SELECTORS['todo_items']:
        found = locate(ctx.session, by, value)
        if found:
            return len(found)
    return 0


def error_text(ctx: ScenarioContext) -> str:
    return ' '.join(element_texts(locate(ctx.session, *SELECTORS['field_errors'])))


# --- Scenarios ---

def _open_home(ctx):
    go_to(ctx.session, PATHS['home'])


def _check_home(ctx):
    check_contains_any(ctx.driver.title, ['Todo', 'Home'], 'page title')
    wait_for(ctx.session, element_present(By.LINK_TEXT, LINKS['login']))
    wait_for(ctx.session, element_present(By.LINK_TEXT, LINKS['register']))


def _follow_about_link(ctx):
    go_to(ctx.session, PATHS['home'])
    click_link(ctx.session, LINKS['about'])


def _check_about(ctx):
    wait_for(ctx.session, url_contains(PATHS['about']))
    check_url_contains(current_url(ctx.driver), PATHS['about'])


def _register_new_user(ctx):
    identity = ctx.fixtures.new_identity()
    ctx.data['identity'] = identity
    register(ctx, identity)


def _check_registered(ctx):
    wait_for(ctx.session, url_contains(PATHS['login']))
    alert = require(ctx.session, *SELECTORS['success_alert'])
    check_contains_any(alert.text, ['successfully', 'registered'], 'success message')


def _register_mismatched_passwords(ctx):
    register(ctx, ctx.fixtures.new_identity(), confirm='differentpassword')


def _client_side_rejection():
    return WaitCondition(
        'registration form to flag an invalid field',
        lambda d: PATHS['register'] in d.current_url
        and d.execute_script("return document.querySelectorAll('form :invalid').length;") > 0,
    )


def _check_mismatch_rejected(ctx):
    server_side = element_present(*SELECTORS['error_alert'])
    reached_listing = url_contains(PATHS['todos'])
    outcome = wait_for(ctx.session, any_of(server_side, _client_side_rejection(), reached_listing))
    check_url_excludes(current_url(ctx.driver), PATHS['todos'])
    if outcome is server_side:
        alert = require(ctx.session, *SELECTORS['error_alert'])
        check_contains_any(alert.text, ['match', 'Passwords'], 'error message')


def _login_with_registered_identity(ctx):
    identity = ctx.data['identity']
    login(ctx, identity.email, identity.password)


def _check_on_listing(ctx):
    wait_for(ctx.session, url_contains(PATHS['todos']))
    check_url_contains(current_url(ctx.driver), PATHS['todos'])


def _login_with_unknown_identity(ctx):
    login(ctx, ctx.fixtures.new_identity().email, 'wrongpassword')


def _check_login_rejected(ctx):
    alert = require(ctx.session, *SELECTORS['error_alert'])
    check_contains_any(alert.text, ['Invalid', 'incorrect'], 'error message')
    check_url_excludes(current_url(ctx.driver), PATHS['todos'])


def _create_todo(ctx):
    title = ctx.fixtures.new_todo_title()
    ctx.data['title'] = title
    fill(ctx.session, FIELDS['title'], title)
    submit(ctx.session)


def _check_todo_listed(ctx):
    title = ctx.data['title']
    wait_for(ctx.session, element_present(By.XPATH, f"//*[contains(text(), {xpath_literal(title)})]"))
    check(title in page_source(ctx.driver), f"'{title}' is not on the listing page", expected=title, actual='absent')


def _authenticate_and_count(ctx):
    authenticate(ctx)
    ctx.data['items_before'] = count_todo_items(ctx)


def _submit_empty_todo(ctx):
    fill(ctx.session, FIELDS['title'], '')
    submit(ctx.session)


def _check_empty_todo_rejected(ctx):
    # Client-side validation leaves no URL or DOM change to wait on.
    settle(1)

    def client_side():
        fields = locate(ctx.session, By.NAME, FIELDS['title'])
        return bool(fields) and is_invalid_field(ctx.driver, fields[0])

    def server_side():
        text = error_text(ctx)
        return any(word in text for word in ('required', 'Title', 'error'))

    check_either([('client-side validation', client_side), ('server-side error', server_side)])
    before = ctx.data['items_before']
    after = count_todo_items(ctx)
    check(after <= before, 'an item was created without a title', expected=f"<= {before} items", actual=f"{after} items")


def _log_out(ctx):
    click_link(ctx.session, LINKS['logout'])


def _check_logged_out(ctx):
    wait_for(ctx.session, url_contains(PATHS['login']))
    go_to(ctx.session, PATHS['todos'])
    wait_for(ctx.session, url_contains(PATHS['login']))
    check_url_contains(current_url(ctx.driver), PATHS['login'])


def _open_listing(ctx):
    go_to(ctx.session, PATHS['todos'])


def _check_redirected_to_login(ctx):
    wait_for(ctx.session, url_contains(PATHS['login']))
    check_url_contains(current_url(ctx.driver), PATHS['login'])


def build_scenarios() -> List[Scenario]:
    return [
        Scenario('home_page_loads', _open_home, _check_home,
                 description='Home page loads with Login and Register links'),
        Scenario('about_page_navigation', _follow_about_link, _check_about,
                 description='About link leads to the about page'),
        Scenario('register_new_user', _register_new_user, _check_registered,
                 description='Registration redirects to login with a success message'),
        Scenario('register_password_mismatch', _register_mismatched_passwords, _check_mismatch_rejected,
                 description='Mismatched password confirmation is rejected'),
        Scenario('login_valid_credentials', _login_with_registered_identity, _check_on_listing,
                 setup=register_fresh_identity,
                 description='Freshly registered credentials reach the todo listing'),
        Scenario('login_invalid_credentials', _login_with_unknown_identity, _check_login_rejected,
                 description='Unknown credentials show an error'),
        Scenario('create_todo', _create_todo, _check_todo_listed,
                 setup=authenticate,
                 description='A new todo appears on the listing'),
        Scenario('create_todo_without_title', _submit_empty_todo, _check_empty_todo_rejected,
                 setup=_authenticate_and_count,
                 description='A todo without a title is not created'),
        Scenario('logout', _log_out, _check_logged_out,
                 setup=authenticate,
                 description='Logout ends the session'),
        Scenario('protected_route_redirect', _open_listing, _check_redirected_to_login,
                 description='The listing requires a login'),
    ]


def scenario_names() -> List[str]:
    return [scenario.name for scenario in build_scenarios()]


def select_scenarios(names: Optional[Iterable[str]] = None) -> List[Scenario]:
    scenarios = build_scenarios()
    if not names:
        return scenarios
    names = list(names)
    known = {scenario.name for scenario in scenarios}
    unknown = [name for name in names if name not in known]
    if unknown:
        raise ValueError(f"Unknown scenario(s): {', '.join(unknown)}")
    return [scenario for scenario in scenarios if scenario.name in names]
