# (c) Copyright Datacraft, 2026
"""WebAuthn relying-party client protocol."""

from .builder import build_assertion_request, build_registration_request
from .classifier import classify_result
from .client import RelyingPartyClient
from .models import (
	AssertionOptions,
	AssertionRequest,
	Authenticator,
	AuthenticatorOutcome,
	CredentialRequestDescriptor,
	PasskeyAssertion,
	PasskeyRegistration,
	PasswordCredential,
	RegistrationOptions,
	RegistrationRequest,
	Unknown,
	UserCancelled,
)

__all__ = [
	"RelyingPartyClient",
	"build_registration_request",
	"build_assertion_request",
	"classify_result",
	"RegistrationOptions",
	"AssertionOptions",
	"RegistrationRequest",
	"AssertionRequest",
	"CredentialRequestDescriptor",
	"Authenticator",
	"AuthenticatorOutcome",
	"PasswordCredential",
	"PasskeyAssertion",
	"PasskeyRegistration",
	"UserCancelled",
	"Unknown",
]
