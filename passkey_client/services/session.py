# (c) Copyright Datacraft, 2026
"""Signed-in user state for a client session."""
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Union

from passkey_client.errors import CeremonyInProgress

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Anonymous:
	"""Nobody is signed in."""
	pass


@dataclass(frozen=True)
class Authenticated:
	"""A user signed in with the given login."""
	username: str


UserIdentity = Union[Anonymous, Authenticated]

ANONYMOUS = Anonymous()

SessionListener = Callable[[UserIdentity], None]


class SessionState:
	"""Holds the current user and the single in-flight ceremony flag.

	Not thread safe; callers sharing a session across threads must
	synchronise externally.
	"""

	def __init__(self, user: UserIdentity = ANONYMOUS):
		self._user: UserIdentity = user
		self._listeners: list[SessionListener] = []
		self._ceremony_in_flight = False

	@property
	def current_user(self) -> UserIdentity:
		return self._user

	@property
	def is_signed_in(self) -> bool:
		return isinstance(self._user, Authenticated)

	@property
	def username(self) -> str | None:
		if isinstance(self._user, Authenticated):
			return self._user.username
		return None

	@property
	def ceremony_in_flight(self) -> bool:
		return self._ceremony_in_flight

	def complete_sign_in(self, username: str) -> None:
		"""Record a successful ceremony for ``username``."""
		if not username:
			raise ValueError("username is expected to be non-empty")
		self._set_user(Authenticated(username=username))
		logger.info(f"User signed in: {username}")

	def sign_out(self) -> None:
		"""Return to anonymous. Safe to call repeatedly."""
		if isinstance(self._user, Authenticated):
			logger.info(f"User signed out: {self._user.username}")
		self._set_user(ANONYMOUS)

	def subscribe(self, listener: SessionListener) -> Callable[[], None]:
		"""Call ``listener`` with the new identity whenever it changes.

		Returns:
			Function that removes the listener
		"""
		self._listeners.append(listener)

		def unsubscribe() -> None:
			if listener in self._listeners:
				self._listeners.remove(listener)

		return unsubscribe

	@contextmanager
	def ceremony(self) -> Iterator["SessionState"]:
		"""Mark a ceremony as running for the duration of the block."""
		if self._ceremony_in_flight:
			raise CeremonyInProgress("A ceremony is already in progress for this session")
		self._ceremony_in_flight = True
		try:
			yield self
		finally:
			self._ceremony_in_flight = False

	def _set_user(self, user: UserIdentity) -> None:
		if user == self._user:
			return
		self._user = user
		for listener in list(self._listeners):
			try:
				listener(user)
			except Exception:
				logger.exception(f"Session listener {listener!r} failed")
