# (c) Copyright Datacraft, 2026
"""Ceremony error types."""

from enum import Enum
from typing import Any


class FailureKind(str, Enum):
	"""Classification of a failed ceremony."""
	DECODE_ERROR = "decode_error"
	MALFORMED_RESPONSE = "malformed_response"
	SERVER_ERROR = "server_error"
	DUPLICATE_ACCOUNT = "duplicate_account"
	USER_CANCELLED = "user_cancelled"
	UNKNOWN_AUTHENTICATOR_RESULT = "unknown_authenticator_result"
	AUTHENTICATOR_ERROR = "authenticator_error"
	TRANSPORT_ERROR = "transport_error"
	USERNAME_MISMATCH = "username_mismatch"


class CeremonyError(Exception):
	"""Base ceremony error."""

	kind: FailureKind = FailureKind.SERVER_ERROR
	default_message = "Encountered an error handling the authorization result."

	def __init__(self, message: str | None = None):
		self.message = message or self.default_message
		super().__init__(self.message)


class DecodeError(CeremonyError, ValueError):
	"""Malformed base64url data."""
	kind = FailureKind.DECODE_ERROR
	default_message = "Received malformed base64url data."


class MalformedResponse(CeremonyError):
	"""Server response is missing expected fields."""
	kind = FailureKind.MALFORMED_RESPONSE
	default_message = "The relying party returned an unexpected response."


class ServerError(CeremonyError):
	"""Relying party answered with an unexpected HTTP status."""
	kind = FailureKind.SERVER_ERROR

	def __init__(self, status: int, message: str | None = None):
		self.status = status
		super().__init__(message or f"The relying party responded with HTTP {status}.")


class DuplicateAccount(ServerError):
	"""Username is already registered."""
	kind = FailureKind.DUPLICATE_ACCOUNT

	def __init__(self, message: str | None = None):
		super().__init__(409, message or "A user with the same username already exists.")


class TransportError(CeremonyError):
	"""Network failure or timeout."""
	kind = FailureKind.TRANSPORT_ERROR
	default_message = "Could not reach the relying party."


class UnknownAuthenticatorResult(CeremonyError):
	"""Authenticator produced a result that cannot be handled."""
	kind = FailureKind.UNKNOWN_AUTHENTICATOR_RESULT
	default_message = "Received an unknown authorization result."

	def __init__(self, result: Any = None, message: str | None = None):
		self.result = result
		super().__init__(message)


class UsernameMismatch(CeremonyError):
	"""Server confirmed a registration for a different login."""
	kind = FailureKind.USERNAME_MISMATCH

	def __init__(self, expected: str, received: str):
		self.expected = expected
		self.received = received
		super().__init__(
			f"Registration was confirmed for '{received}' instead of '{expected}'."
		)


class AuthenticatorError(CeremonyError):
	"""Raised by an authenticator capability that could not complete a request."""
	kind = FailureKind.AUTHENTICATOR_ERROR
	default_message = "Passkey authorization failed."


class AuthenticatorCancelled(AuthenticatorError):
	"""Raised by an authenticator capability when the user dismisses the prompt."""
	kind = FailureKind.USER_CANCELLED
	default_message = "The user cancelled passkey authorization."


class CeremonyInProgress(RuntimeError):
	"""A ceremony is already running for this session."""
	pass
