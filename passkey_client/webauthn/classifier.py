# (c) Copyright Datacraft, 2026
"""Classification of authenticator capability results."""

import logging
from collections.abc import Mapping
from typing import Any

from passkey_client import codec
from passkey_client.errors import AuthenticatorCancelled, DecodeError

from .models import (
	AuthenticatorOutcome,
	PasskeyAssertion,
	PasskeyRegistration,
	PasswordCredential,
	Unknown,
	UserCancelled,
)

logger = logging.getLogger(__name__)

_KNOWN_OUTCOMES = (
	PasswordCredential,
	PasskeyAssertion,
	PasskeyRegistration,
	UserCancelled,
	Unknown,
)


def classify_result(result: Any) -> AuthenticatorOutcome:
	"""Map whatever the authenticator produced onto an outcome variant.

	Recognised inputs are outcome objects, a raised ``AuthenticatorCancelled``,
	the WebAuthn ``PublicKeyCredential`` JSON serialisation, and
	``{"type": "password", "username": ...}``. Anything else becomes
	``Unknown``.
	"""
	if isinstance(result, _KNOWN_OUTCOMES):
		return result

	if isinstance(result, AuthenticatorCancelled):
		return UserCancelled(reason=result.message)

	if isinstance(result, Mapping):
		outcome = _classify_mapping(result)
		if outcome is not None:
			return outcome

	logger.warning(f"Received an unknown authorization result of type {type(result).__name__}")
	return Unknown(payload=result)


def _classify_mapping(data: Mapping) -> AuthenticatorOutcome | None:
	credential_type = data.get("type")

	if credential_type == "password":
		username = data.get("username") or data.get("id")
		if isinstance(username, str) and username:
			return PasswordCredential(username=username, password=data.get("password"))
		return None

	if credential_type != "public-key":
		return None

	response = data.get("response")
	raw_id = data.get("rawId") or data.get("id")
	if not isinstance(response, Mapping) or not isinstance(raw_id, str):
		return None

	try:
		if "attestationObject" in response:
			return PasskeyRegistration(
				credential_id=codec.decode(raw_id),
				attestation_object=codec.decode(response["attestationObject"]),
				client_data_json=codec.decode(response["clientDataJSON"]),
			)
		if "authenticatorData" in response and "signature" in response:
			user_handle = response.get("userHandle")
			return PasskeyAssertion(
				credential_id=codec.decode(raw_id),
				authenticator_data=codec.decode(response["authenticatorData"]),
				client_data_json=codec.decode(response["clientDataJSON"]),
				signature=codec.decode(response["signature"]),
				user_handle=codec.decode(user_handle) if user_handle else None,
			)
	except (KeyError, DecodeError) as e:
		logger.warning(f"Public key credential could not be read: {e}")
		return None

	return None
