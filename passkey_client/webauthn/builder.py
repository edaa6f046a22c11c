# (c) Copyright Datacraft, 2026
"""Turns server options into authenticator requests."""

from passkey_client import codec

from .models import (
	AssertionOptions,
	AssertionRequest,
	RegistrationOptions,
	RegistrationRequest,
)


def build_registration_request(options: RegistrationOptions) -> RegistrationRequest:
	"""Build the request handed to the authenticator for passkey creation.

	Absent preferences stay ``None`` so the platform applies its default.

	Raises:
		DecodeError: if the challenge or user id is not valid base64url
	"""
	return RegistrationRequest(
		challenge=codec.decode(options.challenge),
		user_id=codec.decode(options.user_id),
		username=options.username,
		rp_id=options.rp_id,
		attestation_preference=options.attestation_preference,
		user_verification_preference=options.user_verification_preference,
		use_resident_key=options.use_resident_key,
	)


def build_assertion_request(
	options: AssertionOptions,
	allow_password: bool = False,
) -> AssertionRequest:
	"""Build the request handed to the authenticator for sign in.

	Args:
		options: Options returned by begin-authentication
		allow_password: Also offer saved password credentials

	Raises:
		DecodeError: if the challenge is not valid base64url
	"""
	return AssertionRequest(
		challenge=codec.decode(options.challenge),
		rp_id=options.rp_id,
		user_verification_preference=options.user_verification_preference,
		allowed_credential_ids=options.allowed_credential_ids,
		allow_password=allow_password,
	)
