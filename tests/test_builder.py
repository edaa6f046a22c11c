import pytest
from webauthn.helpers.structs import (
    AttestationConveyancePreference,
    UserVerificationRequirement,
)

from passkey_client import codec
from passkey_client.errors import DecodeError
from passkey_client.webauthn.builder import (
    build_assertion_request,
    build_registration_request,
)
from passkey_client.webauthn.models import (
    AssertionOptions,
    AssertionRequest,
    RegistrationOptions,
    RegistrationRequest,
)


def registration_options(**overrides):
    values = {
        "challenge": codec.encode(bytes([1, 2, 3])),
        "user_id": codec.encode(b"alice-id"),
        "username": "alice",
        "rp_id": "rp.example.com",
    }
    values.update(overrides)
    return RegistrationOptions(**values)


class TestBuildRegistrationRequest:
    def test_decodes_challenge_and_user_id(self):
        request = build_registration_request(registration_options())

        assert isinstance(request, RegistrationRequest)
        assert request.challenge == bytes([1, 2, 3])
        assert request.user_id == b"alice-id"
        assert request.username == "alice"
        assert request.rp_id == "rp.example.com"

    def test_copies_preferences(self):
        request = build_registration_request(registration_options(
            attestation_preference=AttestationConveyancePreference.DIRECT,
            user_verification_preference=UserVerificationRequirement.REQUIRED,
            use_resident_key=True,
        ))

        assert request.attestation_preference == AttestationConveyancePreference.DIRECT
        assert request.user_verification_preference == UserVerificationRequirement.REQUIRED
        assert request.use_resident_key is True

    def test_absent_preferences_stay_unset(self):
        request = build_registration_request(registration_options())

        assert request.attestation_preference is None
        assert request.user_verification_preference is None

    def test_invalid_challenge_raises(self):
        with pytest.raises(DecodeError):
            build_registration_request(registration_options(challenge="not*base64"))

    def test_invalid_user_id_raises(self):
        with pytest.raises(DecodeError):
            build_registration_request(registration_options(user_id="a+b="))


class TestBuildAssertionRequest:
    def test_decodes_challenge(self):
        options = AssertionOptions(challenge="AAEC", rp_id="rp.example.com")

        request = build_assertion_request(options)

        assert isinstance(request, AssertionRequest)
        assert request.challenge == b"\x00\x01\x02"
        assert request.user_verification_preference is None
        assert request.allowed_credential_ids is None
        assert request.allow_password is False

    def test_copies_preference_and_allowed_credentials(self):
        allowed = frozenset({b"\x01\x02", b"\x03"})
        options = AssertionOptions(
            challenge="AAEC",
            rp_id="rp.example.com",
            user_verification_preference=UserVerificationRequirement.DISCOURAGED,
            allowed_credential_ids=allowed,
        )

        request = build_assertion_request(options, allow_password=True)

        assert request.user_verification_preference == UserVerificationRequirement.DISCOURAGED
        assert request.allowed_credential_ids == allowed
        assert request.allow_password is True

    def test_invalid_challenge_raises(self):
        options = AssertionOptions(challenge="AAEC=", rp_id="rp.example.com")

        with pytest.raises(DecodeError):
            build_assertion_request(options)
