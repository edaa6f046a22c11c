# (c) Copyright Datacraft, 2026
"""Base64URL helpers for WebAuthn wire data."""

import base64
import binascii
import re

from webauthn.helpers import base64url_to_bytes, bytes_to_base64url

from passkey_client.errors import DecodeError

_ALPHABET = re.compile(r"[A-Za-z0-9_-]*")


def decode(value: str) -> bytes:
	"""Decode an unpadded base64url string.

	Args:
		value: Base64URL text, without ``=`` padding

	Returns:
		Decoded bytes

	Raises:
		DecodeError: if the text is not canonical unpadded base64url
	"""
	if not isinstance(value, str):
		raise DecodeError(f"Expected base64url text, got {type(value).__name__}")
	if not _ALPHABET.fullmatch(value):
		raise DecodeError("Base64URL value contains characters outside the alphabet")
	if len(value) % 4 == 1:
		raise DecodeError(f"Base64URL value has an invalid length ({len(value)})")

	try:
		data = base64url_to_bytes(value)
	except (binascii.Error, ValueError) as e:
		raise DecodeError(f"Invalid base64url value: {e}") from e

	# Reject non-zero trailing bits so encode(decode(s)) == s
	if bytes_to_base64url(data) != value:
		raise DecodeError("Base64URL value is not canonically encoded")

	return data


def encode(data: bytes) -> str:
	"""Encode bytes as unpadded base64url."""
	return bytes_to_base64url(bytes(data))


def encode_standard(data: bytes) -> str:
	"""Encode bytes as padded standard base64.

	Only the assertion ``id`` member uses this form.
	"""
	return base64.b64encode(bytes(data)).decode("ascii")
