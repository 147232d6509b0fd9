from src.payroll_portal.payroll_portal.auth.client import AuthClient
from src.payroll_portal.payroll_portal.auth.model import UserProfile
from src.payroll_portal.payroll_portal.auth.service import (
    GENERIC_LOGIN_ERROR,
    INVALID_CREDENTIAL_ERROR,
    MISSING_PROFILE_ERROR,
    SessionManager,
)
from src.payroll_portal.payroll_portal.core.enums import Role, Severity
from src.payroll_portal.payroll_portal.status.board import StatusBoard


def _manager(accounts, profiles, state, **kwargs):
    manager = SessionManager(AuthClient(accounts, state, **kwargs), profiles, StatusBoard(state))
    manager.start()
    return manager


def test_login_resolves_team_profile(accounts, profiles):
    accounts.add("u1", "team@example.com", "pw1234")
    profiles.profiles["u1"] = UserProfile(role=Role.TEAM, team_id="3")
    manager = _manager(accounts, profiles, {})

    assert manager.login("team@example.com", "pw1234") is True

    assert manager.current.profile.team_id == "3"
    assert manager.current.principal.uid == "u1"


def test_existing_sign_in_is_resolved_on_start(accounts, profiles):
    accounts.add("u1", "admin@example.com", "pw1234")
    profiles.profiles["u1"] = UserProfile(role=Role.ADMIN)
    state = {}
    _manager(accounts, profiles, state).login("admin@example.com", "pw1234")

    manager = _manager(accounts, profiles, state)

    assert manager.current.profile.is_admin


def test_principal_without_profile_ends_logged_out_with_error(accounts, profiles):
    accounts.add("u1", "ghost@example.com", "pw1234")
    state = {}
    manager = _manager(accounts, profiles, state)
    assert manager.current is None

    assert manager.login("ghost@example.com", "pw1234") is False

    assert manager.current is None
    assert AuthClient(accounts, state).current_principal is None
    assert StatusBoard(state).current.text == MISSING_PROFILE_ERROR
    assert StatusBoard(state).current.severity == Severity.ERROR


def test_profile_read_failure_fails_closed(accounts, profiles):
    accounts.add("u1", "team@example.com", "pw1234")
    profiles.profiles["u1"] = UserProfile(role=Role.TEAM, team_id="3")
    profiles.fail = True
    state = {}
    manager = _manager(accounts, profiles, state)

    assert manager.login("team@example.com", "pw1234") is False
    assert manager.current is None
    assert AuthClient(accounts, state).current_principal is None


def test_invalid_credential_has_its_own_message(accounts, profiles):
    accounts.add("u1", "team@example.com", "pw1234")
    state = {}
    manager = _manager(accounts, profiles, state)

    assert manager.login("team@example.com", "nope") is False
    assert StatusBoard(state).current.text == INVALID_CREDENTIAL_ERROR


def test_other_failures_get_the_generic_message(accounts, profiles):
    state = {}
    manager = _manager(accounts, profiles, state, enumeration_protection=False)

    assert manager.login("nobody@example.com", "nope") is False
    assert StatusBoard(state).current.text == GENERIC_LOGIN_ERROR


def test_start_subscribes_only_once(accounts, profiles):
    accounts.add("u1", "team@example.com", "pw1234")
    profiles.profiles["u1"] = UserProfile(role=Role.TEAM, team_id="3")
    lookups = []
    original_get = profiles.get
    profiles.get = lambda uid: lookups.append(uid) or original_get(uid)
    manager = _manager(accounts, profiles, {})

    manager.start()
    manager.login("team@example.com", "pw1234")

    assert lookups == ["u1"]


def test_logout_clears_session(accounts, profiles):
    accounts.add("u1", "team@example.com", "pw1234")
    profiles.profiles["u1"] = UserProfile(role=Role.TEAM, team_id="3")
    manager = _manager(accounts, profiles, {})
    manager.login("team@example.com", "pw1234")

    manager.logout()

    assert manager.current is None
