from passkey_client import codec
from passkey_client.errors import AuthenticatorCancelled, AuthenticatorError
from passkey_client.webauthn.classifier import classify_result
from passkey_client.webauthn.models import (
    PasskeyAssertion,
    PasskeyRegistration,
    PasswordCredential,
    Unknown,
    UserCancelled,
)

from .conftest import ASSERTION_CLIENT_DATA, REGISTRATION_CLIENT_DATA


class TestKnownOutcomes:
    def test_outcome_objects_pass_through(self, registration_outcome, assertion_outcome):
        password = PasswordCredential(username="dave", password="hunter2")

        assert classify_result(registration_outcome) is registration_outcome
        assert classify_result(assertion_outcome) is assertion_outcome
        assert classify_result(password) is password

    def test_cancellation_error_becomes_user_cancelled(self):
        outcome = classify_result(AuthenticatorCancelled("dismissed"))

        assert outcome == UserCancelled(reason="dismissed")

    def test_password_mapping(self):
        outcome = classify_result({"type": "password", "username": "dave", "password": "pw"})

        assert outcome == PasswordCredential(username="dave", password="pw")


class TestPublicKeyCredentialJson:
    def test_registration_json(self):
        result = {
            "id": codec.encode(b"\x01\x02"),
            "rawId": codec.encode(b"\x01\x02"),
            "type": "public-key",
            "response": {
                "clientDataJSON": codec.encode(REGISTRATION_CLIENT_DATA),
                "attestationObject": codec.encode(b"\xa3cfmt"),
            },
        }

        outcome = classify_result(result)

        assert outcome == PasskeyRegistration(
            credential_id=b"\x01\x02",
            attestation_object=b"\xa3cfmt",
            client_data_json=REGISTRATION_CLIENT_DATA,
        )

    def test_assertion_json(self):
        result = {
            "id": codec.encode(b"\xfb\xff"),
            "rawId": codec.encode(b"\xfb\xff"),
            "type": "public-key",
            "response": {
                "clientDataJSON": codec.encode(ASSERTION_CLIENT_DATA),
                "authenticatorData": codec.encode(b"\x49\x96"),
                "signature": codec.encode(b"\x30\x45"),
                "userHandle": codec.encode(b"carol-id"),
            },
        }

        outcome = classify_result(result)

        assert isinstance(outcome, PasskeyAssertion)
        assert outcome.credential_id == b"\xfb\xff"
        assert outcome.client_data_json == ASSERTION_CLIENT_DATA
        assert outcome.signature == b"\x30\x45"
        assert outcome.user_handle == b"carol-id"

    def test_assertion_json_without_user_handle(self):
        result = {
            "rawId": "AQI",
            "type": "public-key",
            "response": {
                "clientDataJSON": codec.encode(ASSERTION_CLIENT_DATA),
                "authenticatorData": "SZY",
                "signature": "MEU",
            },
        }

        outcome = classify_result(result)

        assert isinstance(outcome, PasskeyAssertion)
        assert outcome.user_handle is None

    def test_unreadable_credential_is_unknown(self):
        result = {
            "rawId": "AQI",
            "type": "public-key",
            "response": {"clientDataJSON": "not base64!", "attestationObject": "o2Nm"},
        }

        outcome = classify_result(result)

        assert outcome == Unknown(payload=result)


class TestUnknownResults:
    def test_arbitrary_object(self):
        payload = object()

        outcome = classify_result(payload)

        assert isinstance(outcome, Unknown)
        assert outcome.payload is payload

    def test_none(self):
        assert classify_result(None) == Unknown(payload=None)

    def test_unrecognised_mapping(self):
        assert classify_result({"type": "federated"}) == Unknown(payload={"type": "federated"})

    def test_non_cancellation_error_is_not_user_cancelled(self):
        error = AuthenticatorError("hardware fault")

        outcome = classify_result(error)

        assert isinstance(outcome, Unknown)
        assert outcome.payload is error
