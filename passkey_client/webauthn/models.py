# (c) Copyright Datacraft, 2026
"""WebAuthn ceremony models."""
from dataclasses import dataclass, field
from typing import Any, Protocol, Union

from pydantic import BaseModel, ConfigDict
from webauthn.helpers.structs import (
	AttestationConveyancePreference,
	UserVerificationRequirement,
)


class RegistrationOptions(BaseModel):
	"""Server-issued parameters for passkey registration.

	Binary members stay base64url encoded until the request builder
	decodes them.
	"""
	model_config = ConfigDict(frozen=True)

	challenge: str
	user_id: str
	username: str
	rp_id: str
	attestation_preference: AttestationConveyancePreference | None = None
	user_verification_preference: UserVerificationRequirement | None = None
	use_resident_key: bool = False


class AssertionOptions(BaseModel):
	"""Server-issued parameters for passkey sign in."""
	model_config = ConfigDict(frozen=True)

	challenge: str
	rp_id: str
	user_verification_preference: UserVerificationRequirement | None = None
	allowed_credential_ids: frozenset[bytes] | None = None


@dataclass(frozen=True)
class RegistrationRequest:
	"""Platform-neutral request to create a passkey."""
	challenge: bytes
	user_id: bytes
	username: str
	rp_id: str
	attestation_preference: AttestationConveyancePreference | None = None
	user_verification_preference: UserVerificationRequirement | None = None
	use_resident_key: bool = False


@dataclass(frozen=True)
class AssertionRequest:
	"""Platform-neutral request to sign in with a passkey."""
	challenge: bytes
	rp_id: str
	user_verification_preference: UserVerificationRequirement | None = None
	allowed_credential_ids: frozenset[bytes] | None = None
	allow_password: bool = False


CredentialRequestDescriptor = Union[RegistrationRequest, AssertionRequest]


@dataclass(frozen=True)
class PasswordCredential:
	"""A saved password was chosen instead of a passkey."""
	username: str
	password: str | None = field(default=None, repr=False)


@dataclass(frozen=True)
class PasskeyAssertion:
	"""Raw output of a passkey sign in."""
	credential_id: bytes
	authenticator_data: bytes
	client_data_json: bytes
	signature: bytes = field(repr=False)
	user_handle: bytes | None = None


@dataclass(frozen=True)
class PasskeyRegistration:
	"""Raw output of a passkey creation."""
	credential_id: bytes
	attestation_object: bytes = field(repr=False)
	client_data_json: bytes = field(repr=False)


@dataclass(frozen=True)
class UserCancelled:
	"""The user dismissed the authenticator prompt."""
	reason: str | None = None


@dataclass(frozen=True)
class Unknown:
	"""A result the classifier does not recognise."""
	payload: Any = None


AuthenticatorOutcome = Union[
	PasswordCredential,
	PasskeyAssertion,
	PasskeyRegistration,
	UserCancelled,
	Unknown,
]


class Authenticator(Protocol):
	"""Host capability that creates and exercises passkeys.

	Implementations return an outcome object (or the WebAuthn JSON form of
	a credential), raise ``AuthenticatorCancelled`` when the user dismisses
	the prompt, and ``AuthenticatorError`` for any other failure.
	"""

	async def invoke(self, request: CredentialRequestDescriptor) -> Any:
		...
