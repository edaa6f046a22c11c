# (c) Copyright Datacraft, 2026
"""Relying-party HTTP client for WebAuthn ceremonies."""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ValidationError

from passkey_client import codec
from passkey_client.config import Settings
from passkey_client.errors import (
	DecodeError,
	DuplicateAccount,
	MalformedResponse,
	ServerError,
	TransportError,
)
from passkey_client.schema import (
	AssertionResponse,
	AttestationResponse,
	CredentialAssertion,
	CredentialCreation,
	LoginRequest,
	MakeCredentialRequest,
	RegisterRequest,
	VerificationResponse,
	VerifyAssertionRequest,
)

from .models import (
	AssertionOptions,
	PasskeyAssertion,
	PasskeyRegistration,
	RegistrationOptions,
)

logger = logging.getLogger(__name__)

REGISTER_PATH = "/api/register"
LOGIN_PATH = "/api/login"
MAKE_CREDENTIAL_PATH = "/api/make-new-credential"
VERIFY_ASSERTION_PATH = "/api/verify-assertion"


def _client_data_text(client_data_json: bytes) -> str:
	try:
		return client_data_json.decode("utf-8")
	except UnicodeDecodeError as e:
		raise DecodeError("clientDataJSON is not valid UTF-8") from e


class RelyingPartyClient:
	"""Talks to the relying party's begin/finish ceremony endpoints.

	The HTTP client can be injected; otherwise one is created on first use
	and closed by ``aclose()``.
	"""

	def __init__(
		self,
		relying_party_host: str,
		scheme: str = "https",
		http_client: httpx.AsyncClient | None = None,
		timeout: float | None = 30.0,
	):
		if not relying_party_host:
			raise ValueError("relying_party_host is expected to be non-empty")
		self.relying_party_host = relying_party_host
		self.base_url = f"{scheme}://{relying_party_host}"
		self.timeout = timeout
		self._http = http_client
		self._owns_http = http_client is None

	@classmethod
	def from_settings(
		cls,
		settings: Settings,
		http_client: httpx.AsyncClient | None = None,
	) -> "RelyingPartyClient":
		return cls(
			settings.relying_party_host,
			scheme=settings.relying_party_scheme.value,
			http_client=http_client,
			timeout=settings.request_timeout,
		)

	async def __aenter__(self) -> "RelyingPartyClient":
		return self

	async def __aexit__(self, *exc_info) -> None:
		await self.aclose()

	async def aclose(self) -> None:
		if self._http is not None and self._owns_http:
			await self._http.aclose()
			self._http = None

	def _get_http(self) -> httpx.AsyncClient:
		if self._http is None:
			self._http = httpx.AsyncClient(timeout=self.timeout)
		return self._http

	# Begin ceremony

	async def begin_registration(
		self,
		username: str,
		use_resident_key: bool = False,
	) -> RegistrationOptions:
		"""Request registration options for a new account.

		Args:
			username: Login to register
			use_resident_key: Ask for a discoverable credential

		Returns:
			RegistrationOptions for the request builder

		Raises:
			DuplicateAccount: if the login is already registered
			ServerError: on any other non-2xx status
			MalformedResponse: if the body does not match the expected shape
			TransportError: on network failure
			ValueError: if username is empty
		"""
		if not username:
			raise ValueError("username is expected to be non-empty")
		body = RegisterRequest(login=username, use_resident_key=use_resident_key)
		response = await self._put(REGISTER_PATH, body)
		self._raise_for_status(response, success=response.is_success, conflict_is_duplicate=True)

		creation = self._parse(response, CredentialCreation)
		public_key = creation.public_key
		user_verification = None
		if public_key.authenticator_selection:
			user_verification = public_key.authenticator_selection.user_verification

		return RegistrationOptions(
			challenge=public_key.challenge,
			user_id=public_key.user.id,
			username=username,
			rp_id=(public_key.rp.id if public_key.rp and public_key.rp.id else self.relying_party_host),
			attestation_preference=public_key.attestation,
			user_verification_preference=user_verification,
			use_resident_key=use_resident_key,
		)

	async def begin_authentication(self, username: str | None = None) -> AssertionOptions:
		"""Request sign-in options.

		An empty or missing username starts a discoverable-credential
		ceremony where the authenticator picks the account.
		"""
		body = LoginRequest(login=username or "")
		response = await self._put(LOGIN_PATH, body)
		self._raise_for_status(response, success=response.is_success)

		assertion = self._parse(response, CredentialAssertion)
		public_key = assertion.public_key

		allowed = None
		if public_key.allow_credentials:
			try:
				allowed = frozenset(codec.decode(c.id) for c in public_key.allow_credentials)
			except DecodeError as e:
				raise MalformedResponse(f"allowCredentials contains an invalid id: {e.message}") from e

		return AssertionOptions(
			challenge=public_key.challenge,
			rp_id=public_key.rp_id or self.relying_party_host,
			user_verification_preference=public_key.user_verification,
			allowed_credential_ids=allowed,
		)

	# Finish ceremony

	async def submit_registration(self, outcome: PasskeyRegistration) -> str:
		"""Send a new credential to the relying party.

		Returns:
			Login the server registered the credential for
		"""
		credential_id = codec.encode(outcome.credential_id)
		body = MakeCredentialRequest(
			id=credential_id,
			raw_id=credential_id,
			attestation=AttestationResponse(
				attestation_object=codec.encode(outcome.attestation_object),
				client_data_json=_client_data_text(outcome.client_data_json),
				id=credential_id,
			),
		)
		response = await self._put(MAKE_CREDENTIAL_PATH, body)
		self._raise_for_status(response, success=response.status_code == 200, conflict_is_duplicate=True)
		return self._parse(response, VerificationResponse).login

	async def submit_assertion(self, outcome: PasskeyAssertion) -> str:
		"""Send a signed assertion to the relying party.

		Returns:
			Login of the authenticated account
		"""
		body = VerifyAssertionRequest(
			assertion=AssertionResponse(
				authenticator_data=codec.encode(outcome.authenticator_data),
				client_data_json=_client_data_text(outcome.client_data_json),
				signature=codec.encode(outcome.signature),
				user_handle=(
					codec.encode(outcome.user_handle)
					if outcome.user_handle is not None else None
				),
				# Padded standard base64 for compatibility with the server
				id=codec.encode_standard(outcome.credential_id),
				raw_id=codec.encode(outcome.credential_id),
			),
		)
		response = await self._put(VERIFY_ASSERTION_PATH, body)
		self._raise_for_status(response, success=response.status_code == 200)
		return self._parse(response, VerificationResponse).login

	# Helpers

	async def _put(self, path: str, body: BaseModel) -> httpx.Response:
		url = f"{self.base_url}{path}"
		try:
			response = await self._get_http().put(
				url,
				json=body.model_dump(by_alias=True),
				headers={"Content-Type": "application/json"},
			)
		except httpx.HTTPError as e:
			logger.error(f"Request to {url} failed: {e}")
			raise TransportError(f"Request to {path} failed: {e}") from e

		logger.debug(f"PUT {url} -> {response.status_code}")
		return response

	def _raise_for_status(
		self,
		response: httpx.Response,
		success: bool,
		conflict_is_duplicate: bool = False,
	) -> None:
		if success:
			return
		status = response.status_code
		path = response.request.url.path
		if conflict_is_duplicate and status == 409:
			logger.warning(f"{path}: account already exists")
			raise DuplicateAccount()
		logger.error(f"{path}: relying party responded with HTTP {status}")
		raise ServerError(status)

	def _parse(self, response: httpx.Response, model: type[BaseModel]) -> Any:
		path = response.request.url.path
		try:
			return model.model_validate(response.json())
		except ValueError as e:
			# ValidationError and JSONDecodeError are both ValueErrors
			kind = "schema" if isinstance(e, ValidationError) else "JSON"
			logger.error(f"{path}: invalid {kind} in response: {e}")
			raise MalformedResponse(f"Unexpected response from {path}") from e
