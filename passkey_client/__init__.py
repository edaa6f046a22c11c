# (c) Copyright Datacraft, 2026
"""Client-side WebAuthn ceremonies against a passkey relying party."""

from .errors import (
	AuthenticatorCancelled,
	AuthenticatorError,
	CeremonyError,
	CeremonyInProgress,
	FailureKind,
)
from .services import (
	Anonymous,
	Authenticated,
	CeremonyState,
	Failure,
	PasskeyService,
	SessionState,
	Success,
)

__all__ = [
	"PasskeyService",
	"SessionState",
	"Anonymous",
	"Authenticated",
	"CeremonyState",
	"Success",
	"Failure",
	"FailureKind",
	"CeremonyError",
	"CeremonyInProgress",
	"AuthenticatorError",
	"AuthenticatorCancelled",
]
