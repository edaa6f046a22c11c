# (c) Copyright Datacraft, 2026
"""Ceremony and session services."""
from .session import SessionState, Anonymous, Authenticated, UserIdentity
from .passkey import PasskeyService, CeremonyState, CeremonyOutcome, Success, Failure

__all__ = [
	"SessionState",
	"Anonymous",
	"Authenticated",
	"UserIdentity",
	"PasskeyService",
	"CeremonyState",
	"CeremonyOutcome",
	"Success",
	"Failure",
]
