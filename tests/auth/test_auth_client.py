import pytest

from src.payroll_portal.payroll_portal.auth.client import AuthClient
from src.payroll_portal.payroll_portal.core.enums import AuthErrorCode
from src.payroll_portal.payroll_portal.core.exceptions import AuthenticationError


def test_listener_gets_current_state_then_transitions(accounts):
    accounts.add("u1", "kim@example.com", "secret1")
    client = AuthClient(accounts, {})
    seen = []

    client.on_auth_state_changed(seen.append)
    client.sign_in("Kim@Example.com ", "secret1")
    client.sign_out()

    assert seen[0] is None
    assert seen[1].uid == "u1"
    assert seen[2] is None


def test_principal_persists_in_state(accounts):
    accounts.add("u1", "kim@example.com", "secret1")
    state = {}
    AuthClient(accounts, state).sign_in("kim@example.com", "secret1")

    assert AuthClient(accounts, state).current_principal.email == "kim@example.com"


@pytest.mark.parametrize("email,password", [("kim@example.com", "wrong"), ("nobody@example.com", "secret1")])
def test_failures_are_invalid_credential_with_enumeration_protection(accounts, email, password):
    accounts.add("u1", "kim@example.com", "secret1")
    client = AuthClient(accounts, {})

    with pytest.raises(AuthenticationError) as exc_info:
        client.sign_in(email, password)

    assert exc_info.value.code == AuthErrorCode.INVALID_CREDENTIAL
    assert client.current_principal is None


def test_failures_report_specific_codes_without_protection(accounts):
    accounts.add("u1", "kim@example.com", "secret1")
    client = AuthClient(accounts, {}, enumeration_protection=False)

    with pytest.raises(AuthenticationError) as wrong:
        client.sign_in("kim@example.com", "wrong")
    with pytest.raises(AuthenticationError) as missing:
        client.sign_in("nobody@example.com", "x")

    assert wrong.value.code == AuthErrorCode.WRONG_PASSWORD
    assert missing.value.code == AuthErrorCode.USER_NOT_FOUND


def test_unsubscribed_listener_is_not_called(accounts):
    accounts.add("u1", "kim@example.com", "secret1")
    client = AuthClient(accounts, {})
    seen = []

    unsubscribe = client.on_auth_state_changed(seen.append)
    unsubscribe()
    client.sign_in("kim@example.com", "secret1")

    assert seen == [None]
