import pytest

from invoice_dashboard.core.errors import InvalidCredentialsError, NotFoundError
from invoice_dashboard.core.security import hash_password, verify_password
from invoice_dashboard.services import auth
from invoice_dashboard.services.auth import CredentialVerifier

ROUNDS = 4


@pytest.fixture
def verifier(repositories, user, settings):
    return CredentialVerifier(repositories.users, rounds=settings.bcrypt_rounds)


class TestVerify:

    def test_correct_password(self, verifier, user):
        signed_in = verifier.verify(user["email"], user["password"])

        assert signed_in.email == user["email"]
        assert signed_in.name == "User"
        assert "password" not in signed_in.model_dump()

    def test_wrong_password_and_unknown_email_fail_alike(self, verifier, user):
        """
        GIVEN: A registered user
        WHEN: Signing in with a wrong password, then with an unknown email
        THEN: Both fail with InvalidCredentialsError and the same message, never NotFoundError
        """
        with pytest.raises(InvalidCredentialsError) as wrong_password:
            verifier.verify(user["email"], "not-the-password")
        with pytest.raises(InvalidCredentialsError) as unknown_email:
            verifier.verify("nobody@nextmail.com", user["password"])

        assert str(wrong_password.value) == str(unknown_email.value)
        assert not isinstance(unknown_email.value, NotFoundError)

    def test_unknown_email_still_runs_a_hash_check(self, verifier, settings, monkeypatch):
        calls = []
        monkeypatch.setattr(auth, "dummy_verify", lambda rounds=None: calls.append(rounds))

        with pytest.raises(InvalidCredentialsError):
            verifier.verify("nobody@nextmail.com", "whatever")

        assert calls == [settings.bcrypt_rounds]

    @pytest.mark.parametrize("email, password", [
        ("not-an-email", "123456"),
        ("user@nextmail.com", "12345"),
        ("", ""),
    ])
    def test_malformed_credentials(self, verifier, email, password):
        with pytest.raises(InvalidCredentialsError):
            verifier.verify(email, password)


class TestPasswordHashing:

    def test_hash_is_salted_and_verifiable(self):
        first = hash_password("123456", ROUNDS)
        second = hash_password("123456", ROUNDS)

        assert first != second
        assert first.startswith("$2")
        assert verify_password("123456", first, ROUNDS)
        assert not verify_password("654321", first, ROUNDS)
