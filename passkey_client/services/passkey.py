# (c) Copyright Datacraft, 2026
"""Passkey registration and sign-in ceremonies."""
import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from functools import partial
from typing import Union

import httpx

from passkey_client.config import Settings, get_settings
from passkey_client.errors import (
	AuthenticatorCancelled,
	AuthenticatorError,
	CeremonyError,
	FailureKind,
	UnknownAuthenticatorResult,
	UsernameMismatch,
)
from passkey_client.webauthn.builder import (
	build_assertion_request,
	build_registration_request,
)
from passkey_client.webauthn.classifier import classify_result
from passkey_client.webauthn.client import RelyingPartyClient
from passkey_client.webauthn.models import (
	Authenticator,
	AuthenticatorOutcome,
	CredentialRequestDescriptor,
	PasskeyAssertion,
	PasskeyRegistration,
	PasswordCredential,
	Unknown,
	UserCancelled,
)

from .session import SessionState, UserIdentity

logger = logging.getLogger(__name__)


class CeremonyType(str, Enum):
	REGISTRATION = "registration"
	AUTHENTICATION = "authentication"


class CeremonyState(str, Enum):
	"""Progress of the current ceremony."""
	IDLE = "idle"
	OPTIONS_REQUESTED = "options_requested"
	OPTIONS_RECEIVED = "options_received"
	AUTHENTICATOR_INVOKED = "authenticator_invoked"
	AUTHENTICATOR_SUCCEEDED = "authenticator_succeeded"
	AUTHENTICATOR_CANCELLED = "authenticator_cancelled"
	AUTHENTICATOR_FAILED = "authenticator_failed"
	SERVER_VERIFYING = "server_verifying"
	VERIFICATION_FAILED = "verification_failed"
	SIGNED_IN = "signed_in"


@dataclass(frozen=True)
class Success:
	"""Ceremony finished and the session is signed in."""
	username: str


@dataclass(frozen=True)
class Failure:
	"""Ceremony ended without signing in."""
	kind: FailureKind
	message: str
	status: int | None = None

	@property
	def cancelled(self) -> bool:
		"""True when the user aborted; callers usually don't show an error."""
		return self.kind == FailureKind.USER_CANCELLED


CeremonyOutcome = Union[Success, Failure]

_CANCELLED_MESSAGES = {
	CeremonyType.REGISTRATION: "The user cancelled passkey registration.",
	CeremonyType.AUTHENTICATION: "The user cancelled passkey authorization.",
}


class PasskeyService:
	"""Runs WebAuthn ceremonies against a relying party and updates the session.

	Each ceremony is at most two HTTP round-trips around one authenticator
	invocation. Failures never change the session and always leave the
	service in ``CeremonyState.IDLE``; nothing is retried.
	"""

	def __init__(
		self,
		client: RelyingPartyClient,
		authenticator: Authenticator,
		session: SessionState | None = None,
		use_resident_key: bool = False,
		allow_password_credentials: bool = True,
		require_login_match: bool = True,
	):
		self.client = client
		self.authenticator = authenticator
		self.session = session if session is not None else SessionState()
		self.use_resident_key = use_resident_key
		self.allow_password_credentials = allow_password_credentials
		self.require_login_match = require_login_match
		self._state = CeremonyState.IDLE
		self._history: list[CeremonyState] = []

	@classmethod
	def from_settings(
		cls,
		authenticator: Authenticator,
		settings: Settings | None = None,
		session: SessionState | None = None,
		http_client: httpx.AsyncClient | None = None,
	) -> "PasskeyService":
		settings = settings or get_settings()
		return cls(
			RelyingPartyClient.from_settings(settings, http_client=http_client),
			authenticator,
			session=session,
			use_resident_key=settings.use_resident_key,
			allow_password_credentials=settings.allow_password_credentials,
			require_login_match=settings.require_login_match,
		)

	async def __aenter__(self) -> "PasskeyService":
		return self

	async def __aexit__(self, *exc_info) -> None:
		await self.aclose()

	async def aclose(self) -> None:
		await self.client.aclose()

	@property
	def state(self) -> CeremonyState:
		return self._state

	@property
	def history(self) -> tuple[CeremonyState, ...]:
		"""States visited by the most recent ceremony."""
		return tuple(self._history)

	@property
	def current_user(self) -> UserIdentity:
		return self.session.current_user

	@property
	def is_signed_in(self) -> bool:
		return self.session.is_signed_in

	def sign_out(self) -> None:
		self.session.sign_out()

	async def register(self, username: str) -> CeremonyOutcome:
		"""Create a passkey account for ``username`` and sign in.

		Raises:
			ValueError: if username is empty
			CeremonyInProgress: if another ceremony is running on the session
		"""
		username = (username or "").strip()
		if not username:
			raise ValueError("username is expected to be non-empty")
		return await self._run(CeremonyType.REGISTRATION, partial(self._register, username))

	async def sign_in(self, username: str | None = None) -> CeremonyOutcome:
		"""Sign in with a passkey (or saved password).

		Without a username the authenticator offers discoverable credentials.

		Raises:
			CeremonyInProgress: if another ceremony is running on the session
		"""
		return await self._run(CeremonyType.AUTHENTICATION, partial(self._sign_in, username))

	async def _run(
		self,
		ceremony: CeremonyType,
		perform: Callable[[], Awaitable[str]],
	) -> CeremonyOutcome:
		with self.session.ceremony():
			self._history = []
			self._transition(CeremonyState.IDLE)
			try:
				username = await perform()
			except CeremonyError as e:
				self._transition(CeremonyState.IDLE)
				return self._fail(ceremony, e)
			except asyncio.CancelledError:
				logger.info(f"Passkey {ceremony.value} was cancelled by the caller")
				self._transition(CeremonyState.IDLE)
				raise
			except Exception:
				self._transition(CeremonyState.IDLE)
				raise

			self.session.complete_sign_in(username)
			self._transition(CeremonyState.SIGNED_IN)
			logger.info(f"Passkey {ceremony.value} succeeded for {username}")
			return Success(username=username)

	async def _register(self, username: str) -> str:
		self._transition(CeremonyState.OPTIONS_REQUESTED)
		options = await self.client.begin_registration(username, self.use_resident_key)
		self._transition(CeremonyState.OPTIONS_RECEIVED)

		request = build_registration_request(options)
		outcome = await self._invoke(CeremonyType.REGISTRATION, request)
		if not isinstance(outcome, PasskeyRegistration):
			self._transition(CeremonyState.AUTHENTICATOR_FAILED)
			raise UnknownAuthenticatorResult(outcome)
		self._transition(CeremonyState.AUTHENTICATOR_SUCCEEDED)

		self._transition(CeremonyState.SERVER_VERIFYING)
		try:
			login = await self.client.submit_registration(outcome)
			if login != username:
				if self.require_login_match:
					raise UsernameMismatch(expected=username, received=login)
				logger.warning(f"Registration for {username} was confirmed as {login}")
		except CeremonyError:
			self._transition(CeremonyState.VERIFICATION_FAILED)
			raise
		return login

	async def _sign_in(self, username: str | None) -> str:
		self._transition(CeremonyState.OPTIONS_REQUESTED)
		options = await self.client.begin_authentication(username)
		self._transition(CeremonyState.OPTIONS_RECEIVED)

		request = build_assertion_request(options, allow_password=self.allow_password_credentials)
		outcome = await self._invoke(CeremonyType.AUTHENTICATION, request)

		if isinstance(outcome, PasswordCredential) and self.allow_password_credentials and outcome.username:
			self._transition(CeremonyState.AUTHENTICATOR_SUCCEEDED)
			logger.info(f"Password authorization succeeded for {outcome.username}")
			return outcome.username

		if not isinstance(outcome, PasskeyAssertion):
			self._transition(CeremonyState.AUTHENTICATOR_FAILED)
			raise UnknownAuthenticatorResult(outcome)
		self._transition(CeremonyState.AUTHENTICATOR_SUCCEEDED)

		self._transition(CeremonyState.SERVER_VERIFYING)
		try:
			return await self.client.submit_assertion(outcome)
		except CeremonyError:
			self._transition(CeremonyState.VERIFICATION_FAILED)
			raise

	async def _invoke(
		self,
		ceremony: CeremonyType,
		request: CredentialRequestDescriptor,
	) -> AuthenticatorOutcome:
		self._transition(CeremonyState.AUTHENTICATOR_INVOKED)
		try:
			result = await self.authenticator.invoke(request)
		except AuthenticatorCancelled as e:
			result = e
		except AuthenticatorError:
			self._transition(CeremonyState.AUTHENTICATOR_FAILED)
			raise

		outcome = classify_result(result)
		if isinstance(outcome, UserCancelled):
			self._transition(CeremonyState.AUTHENTICATOR_CANCELLED)
			raise AuthenticatorCancelled(_CANCELLED_MESSAGES[ceremony])
		if isinstance(outcome, Unknown):
			self._transition(CeremonyState.AUTHENTICATOR_FAILED)
			raise UnknownAuthenticatorResult(outcome.payload)
		return outcome

	def _fail(self, ceremony: CeremonyType, error: CeremonyError) -> Failure:
		if error.kind == FailureKind.USER_CANCELLED:
			logger.info(error.message)
		else:
			logger.error(f"Passkey {ceremony.value} failed: {error.message}")
		return Failure(
			kind=error.kind,
			message=error.message,
			status=getattr(error, "status", None),
		)

	def _transition(self, state: CeremonyState) -> None:
		if self._history and self._history[-1] == state:
			return
		logger.debug(f"Ceremony state: {self._state.value} -> {state.value}")
		self._state = state
		self._history.append(state)
