"""Shared fixtures: a scripted stand-in for the todo app behind a WebDriver API."""
import re

import pytest
from selenium.webdriver.common.by import By

from todo_e2e.config.settings import Config
from todo_e2e.core.scenarios import SELECTORS
from todo_e2e.models.scenario import Session

BASE_URL = 'http://todo.test'

FORM_FIELDS = {
    '/register': ['name', 'email', 'password', 'confirmPassword'],
    '/login': ['email', 'password'],
    '/todos': ['title'],
}

TITLES = {
    '/': 'Todo App - Home',
    '/about': 'About - Todo App',
    '/register': 'Register - Todo App',
    '/login': 'Login - Todo App',
    '/todos': 'My Todos - Todo App',
}


class FakeElement:
    def __init__(self, text='', on_click=None, displayed=True):
        self.text = text
        self.value = ''
        self.validation_message = ''
        self.on_click = on_click
        self.displayed = displayed
        self.clicks = 0

    def is_displayed(self):
        return self.displayed

    def clear(self):
        self.value = ''

    def send_keys(self, text):
        self.value += text

    def click(self):
        self.clicks += 1
        if self.on_click:
            self.on_click()


class FakeTodoApp:
    """Mimics the server-rendered todo app as seen through a WebDriver.

    ``guard_listing=False`` drops the login check on /todos and
    ``client_side_validation=True`` makes the browser block an empty title
    and a mismatched password confirmation before anything is submitted.
    """

    def __init__(self, base_url=BASE_URL, guard_listing=True, client_side_validation=False):
        self.base_url = base_url
        self.guard_listing = guard_listing
        self.client_side_validation = client_side_validation
        self.users = {}
        self.user = None
        self.todos = []
        self.path = 'about:blank'
        self.flash = None
        self.fields = {}
        self.visited = []
        self.implicit_waits = []
        self.page_load_timeouts = []
        self.cookie_resets = 0
        self.quit_calls = 0

    # --- WebDriver surface ---

    @property
    def current_url(self):
        if self.path.startswith('about:'):
            return self.path
        return self.base_url + self.path

    @property
    def title(self):
        return TITLES.get(self.path, '')

    @property
    def page_source(self):
        parts = [self.title]
        if self.flash:
            parts.append(self.flash[1])
        if self.path == '/todos':
            parts.extend(self.todos)
        return '<html>' + ' '.join(parts) + '</html>'

    def get(self, url):
        self.visited.append(url)
        path = url[len(self.base_url):] if url.startswith(self.base_url) else url
        self._render(path or '/')

    def find_elements(self, by, value):
        if by == By.NAME:
            return [self.fields[value]] if value in self.fields else []
        if by in (By.LINK_TEXT, By.PARTIAL_LINK_TEXT):
            return [el for text, el in self._links().items() if text == value or (by == By.PARTIAL_LINK_TEXT and value in text)]
        if by == By.CSS_SELECTOR:
            return self._css(value)
        if by == By.XPATH:
            match = re.search(r"contains\(text\(\), '(.*)'\)", value)
            if match and self.path == '/todos':
                return [FakeElement(text=t) for t in self.todos if match.group(1) in t]
        return []

    def execute_script(self, script, *args):
        if 'validationMessage' in script:
            return args[0].validation_message
        if ':invalid' in script:
            return sum(1 for field in self.fields.values() if field.validation_message)
        return None

    def delete_all_cookies(self):
        self.cookie_resets += 1
        self.user = None

    def implicitly_wait(self, seconds):
        self.implicit_waits.append(seconds)

    def set_page_load_timeout(self, seconds):
        self.page_load_timeouts.append(seconds)

    def quit(self):
        self.quit_calls += 1

    # --- Application behaviour ---

    def _render(self, path, flash=None):
        if path == '/todos' and self.guard_listing and not self.user:
            path = '/login'
        self.path = path
        self.flash = flash
        self.fields = {name: FakeElement() for name in FORM_FIELDS.get(path, [])}

    def _links(self):
        links = {'Home': FakeElement('Home', lambda: self._render('/')),
                 'About': FakeElement('About', lambda: self._render('/about'))}
        if self.user:
            links['Logout'] = FakeElement('Logout', self._logout)
        else:
            links['Login'] = FakeElement('Login', lambda: self._render('/login'))
            links['Register'] = FakeElement('Register', lambda: self._render('/register'))
        return links

    def _css(self, selector):
        if selector == 'button[type="submit"]':
            return [FakeElement('Submit', self._submit)] if self.fields else []
        if selector == '.alert-success':
            return [FakeElement(self.flash[1])] if self.flash and self.flash[0] == 'success' else []
        if selector in ('.alert-danger', SELECTORS['field_errors'][1]):
            return [FakeElement(self.flash[1])] if self.flash and self.flash[0] == 'danger' else []
        if selector == '.todo-item' and self.path == '/todos':
            return [FakeElement(t) for t in self.todos]
        return []

    def _submit(self):
        values = {name: field.value for name, field in self.fields.items()}
        if self.path == '/register':
            if values['password'] != values['confirmPassword']:
                if self.client_side_validation:
                    self.fields['confirmPassword'].validation_message = 'Passwords must match.'
                    return
                self._render('/register', ('danger', 'Passwords do not match'))
            elif values['email'] in self.users:
                self._render('/register', ('danger', 'Email is already registered'))
            else:
                self.users[values['email']] = values['password']
                self._render('/login', ('success', 'You are registered successfully and can log in'))
        elif self.path == '/login':
            if self.users.get(values['email']) == values['password']:
                self.user = values['email']
                self._render('/todos')
            else:
                self._render('/login', ('danger', 'Invalid email or password'))
        elif self.path == '/todos':
            if not values['title']:
                if self.client_side_validation:
                    self.fields['title'].validation_message = 'Please fill out this field.'
                    return
                self._render('/todos', ('danger', 'Title is required'))
            else:
                self.todos.append(values['title'])
                self._render('/todos')

    def _logout(self):
        self.user = None
        self._render('/login', ('success', 'You are logged out'))


def make_session(driver, deadline=None, wait_ms=300):
    return Session(
        driver=driver,
        base_url=BASE_URL,
        timeouts={'implicit': 0, 'pageLoad': 1000, 'wait': wait_ms},
        poll_interval_ms=10,
        deadline=deadline,
    )


@pytest.fixture
def app():
    return FakeTodoApp()


@pytest.fixture
def session(app):
    return make_session(app)


@pytest.fixture
def test_config():
    return Config.with_overrides(
        base_url=BASE_URL,
        headless=True,
        chrome_bin='',
        chromedriver_path='',
        preflight=False,
        suite_timeout_ms=0,
        poll_interval_ms=10,
        results_file='',
    )


@pytest.fixture(autouse=True)
def no_settle(monkeypatch):
    monkeypatch.setattr('todo_e2e.core.scenarios.settle', lambda seconds=1.0: None)
