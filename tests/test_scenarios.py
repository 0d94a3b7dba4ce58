import pytest

from todo_e2e.core.scenario_runner import ScenarioRunner
from todo_e2e.core.scenarios import build_scenarios, scenario_names, select_scenarios
from todo_e2e.models.scenario import FAILED, PASSED

from conftest import FakeTodoApp, make_session


def run(app, *names):
    return ScenarioRunner(make_session(app)).run(select_scenarios(names or None))


def statuses(report):
    return {r.name: r.status for r in report.results}


class TestCatalogue:
    def test_names_are_unique(self):
        names = scenario_names()
        assert len(names) == len(set(names)) == 10

    def test_every_scenario_has_a_description(self):
        assert all(s.description for s in build_scenarios())

    def test_select_keeps_catalogue_order(self):
        selected = select_scenarios(['logout', 'home_page_loads'])
        assert [s.name for s in selected] == ['home_page_loads', 'logout']

    def test_select_rejects_unknown_names(self):
        with pytest.raises(ValueError, match='no_such_scenario'):
            select_scenarios(['logout', 'no_such_scenario'])


class TestAgainstWorkingApp:
    def test_full_suite_passes(self):
        report = run(FakeTodoApp())
        failures = [(r.name, r.message) for r in report.results if r.status != PASSED]
        assert failures == []
        assert report.exit_code == 0

    def test_scenarios_pass_in_isolation(self):
        for name in scenario_names():
            report = run(FakeTodoApp(), name)
            assert report.results[0].status == PASSED, (name, report.results[0].message)

    def test_each_registration_uses_a_fresh_identity(self):
        app = FakeTodoApp()
        run(app, 'register_new_user', 'login_valid_credentials', 'create_todo', 'logout')
        assert len(app.users) == 4

    def test_created_todo_is_listed(self):
        app = FakeTodoApp()
        run(app, 'create_todo')
        assert len(app.todos) == 1
        assert app.todos[0].startswith('Test Todo ')

    def test_empty_title_accepted_when_blocked_client_side(self):
        app = FakeTodoApp(client_side_validation=True)
        report = run(app, 'create_todo_without_title')
        assert report.results[0].status == PASSED
        assert app.todos == []

    def test_mismatch_accepted_when_blocked_client_side(self):
        app = FakeTodoApp(client_side_validation=True)
        report = run(app, 'register_password_mismatch')
        assert report.results[0].status == PASSED, report.results[0].message
        assert app.users == {}
        assert app.flash is None

    def test_logout_leaves_no_session(self):
        app = FakeTodoApp()
        run(app, 'logout')
        assert app.user is None
        assert app.path == '/login'


class TestAgainstBrokenApp:
    def test_unguarded_listing_fails_only_its_scenarios(self):
        report = run(FakeTodoApp(guard_listing=False))
        result = statuses(report)
        assert result['protected_route_redirect'] == FAILED
        assert result['logout'] == FAILED
        assert result['home_page_loads'] == PASSED
        assert result['create_todo'] == PASSED
        assert report.exit_code == 1

    def test_failure_detail_names_unmet_condition(self):
        report = run(FakeTodoApp(guard_listing=False), 'protected_route_redirect')
        result = report.results[0]
        assert result.phase == 'assert'
        assert result.expected == "url to contain '/login'"
        assert result.last_url.endswith('/todos')

    def test_todo_saved_without_title_is_caught(self):
        class LenientApp(FakeTodoApp):
            def _submit(self):
                if self.path == '/todos' and not self.fields['title'].value:
                    self.todos.append('')
                    self._render('/todos', ('danger', 'Saved with error'))
                    return
                super()._submit()

        report = run(LenientApp(), 'create_todo_without_title')
        result = report.results[0]
        assert result.status == FAILED
        assert result.message == 'an item was created without a title'

    def test_mismatch_that_logs_the_user_in_is_caught(self):
        class LenientRegistrationApp(FakeTodoApp):
            def _submit(self):
                if self.path == '/register':
                    email = self.fields['email'].value
                    self.users[email] = self.fields['password'].value
                    self.user = email
                    self._render('/todos')
                    return
                super()._submit()

        report = run(LenientRegistrationApp(), 'register_password_mismatch')
        result = report.results[0]
        assert result.status == FAILED
        assert result.phase == 'assert'
        assert result.expected == 'not /todos'
        assert result.last_url.endswith('/todos')

    def test_mismatch_that_registers_silently_is_caught(self):
        class LenientRegistrationApp(FakeTodoApp):
            def _submit(self):
                if self.path == '/register':
                    self.users[self.fields['email'].value] = self.fields['password'].value
                    self._render('/login', ('success', 'You are registered successfully and can log in'))
                    return
                super()._submit()

        report = run(LenientRegistrationApp(), 'register_password_mismatch')
        result = report.results[0]
        assert result.status == FAILED
        assert result.last_url.endswith('/login')

    def test_login_landing_outside_listing_is_caught(self):
        class HomeLandingApp(FakeTodoApp):
            def _submit(self):
                if self.path == '/login' and self.users.get(self.fields['email'].value) == self.fields['password'].value:
                    self.user = self.fields['email'].value
                    self._render('/')
                    return
                super()._submit()

        report = run(HomeLandingApp(), 'login_valid_credentials')
        result = report.results[0]
        assert result.status == FAILED
        assert result.phase == 'assert'
        assert result.expected == "url to contain '/todos'"
        assert result.last_url == 'http://todo.test/'
