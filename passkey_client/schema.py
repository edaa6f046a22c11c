# (c) Copyright Datacraft, 2026
# Relying-party wire schemas
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from webauthn.helpers.structs import (
    AttestationConveyancePreference,
    UserVerificationRequirement,
)


logger = logging.getLogger(__name__)


def _lenient_enum(enum_cls, value: Any):
    """Treat preference values the client does not know as absent."""
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning(f"Ignoring unsupported {enum_cls.__name__} value: {value!r}")
        return None


class WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# Begin registration

class RegisterRequest(WireModel):
    login: str = Field(min_length=1)
    use_resident_key: bool = Field(alias="useResidentKey")


class RelyingPartyEntity(WireModel):
    id: str | None = None
    name: str | None = None


class UserEntity(WireModel):
    id: str
    name: str | None = None
    display_name: str | None = Field(default=None, alias="displayName")


class AuthenticatorSelection(WireModel):
    user_verification: UserVerificationRequirement | None = Field(
        default=None, alias="userVerification"
    )
    resident_key: str | None = Field(default=None, alias="residentKey")

    @field_validator("user_verification", mode="before")
    @classmethod
    def known_user_verification(cls, v):
        return _lenient_enum(UserVerificationRequirement, v)


class CreationPublicKey(WireModel):
    challenge: str
    user: UserEntity
    rp: RelyingPartyEntity | None = None
    attestation: AttestationConveyancePreference | None = None
    authenticator_selection: AuthenticatorSelection | None = Field(
        default=None, alias="authenticatorSelection"
    )

    @field_validator("attestation", mode="before")
    @classmethod
    def known_attestation(cls, v):
        return _lenient_enum(AttestationConveyancePreference, v)


class CredentialCreation(WireModel):
    public_key: CreationPublicKey = Field(alias="publicKey")


# Begin authentication

class LoginRequest(WireModel):
    login: str


class CredentialDescriptor(WireModel):
    id: str
    type: str = "public-key"
    transports: list[str] | None = None


class AssertionPublicKey(WireModel):
    challenge: str
    rp_id: str | None = Field(default=None, alias="rpId")
    user_verification: UserVerificationRequirement | None = Field(
        default=None, alias="userVerification"
    )
    allow_credentials: list[CredentialDescriptor] | None = Field(
        default=None, alias="allowCredentials"
    )

    @field_validator("user_verification", mode="before")
    @classmethod
    def known_user_verification(cls, v):
        return _lenient_enum(UserVerificationRequirement, v)


class CredentialAssertion(WireModel):
    public_key: AssertionPublicKey = Field(alias="publicKey")


# Finish registration

class AttestationResponse(WireModel):
    attestation_object: str = Field(alias="attestationObject")
    client_data_json: str = Field(alias="clientDataJSON")
    id: str


class MakeCredentialRequest(WireModel):
    id: str
    raw_id: str = Field(alias="rawId")
    type: str = "public-key"
    attestation: AttestationResponse


# Finish authentication

class AssertionResponse(WireModel):
    authenticator_data: str = Field(alias="authenticatorData")
    client_data_json: str = Field(alias="clientDataJSON")
    signature: str
    user_handle: str | None = Field(alias="userHandle")
    id: str
    raw_id: str = Field(alias="rawId")
    type: str = "public-key"


class VerifyAssertionRequest(WireModel):
    assertion: AssertionResponse


class VerificationResponse(WireModel):
    """Body of a successful finish-registration or finish-authentication call."""
    login: str = Field(min_length=1)
