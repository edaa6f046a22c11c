import json

import httpx
import pytest

from passkey_client.services.session import SessionState
from passkey_client.webauthn.client import RelyingPartyClient
from passkey_client.webauthn.models import PasskeyAssertion, PasskeyRegistration


RP_HOST = "rp.example.com"

REGISTRATION_CLIENT_DATA = (
    b'{"type":"webauthn.create","challenge":"AQID","origin":"https://rp.example.com"}'
)
ASSERTION_CLIENT_DATA = (
    b'{"type":"webauthn.get","challenge":"AAEC","origin":"https://rp.example.com"}'
)


class FakeRelyingParty:
    """Canned relying-party responses served through httpx.MockTransport."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def respond(self, path, status=200, json_body=None, content=None, raises=None):
        self.routes[path] = (status, json_body, content, raises)

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, request.url.path, body, request.headers))
        if request.url.path not in self.routes:
            return httpx.Response(404, json={"error": "not found"})
        status, json_body, content, raises = self.routes[request.url.path]
        if raises is not None:
            raise raises
        if content is not None:
            return httpx.Response(status, content=content)
        return httpx.Response(status, json=json_body)

    def http_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    def paths(self):
        return [path for _, path, _, _ in self.requests]

    def body_for(self, path):
        for _, request_path, body, _ in reversed(self.requests):
            if request_path == path:
                return body
        raise AssertionError(f"No request made to {path}")


class FakeAuthenticator:
    """Authenticator capability returning (or raising) a preset result."""

    def __init__(self, result=None, raises=None):
        self.result = result
        self.raises = raises
        self.requests = []

    async def invoke(self, request):
        self.requests.append(request)
        if self.raises is not None:
            raise self.raises
        return self.result


@pytest.fixture
def relying_party():
    return FakeRelyingParty()


@pytest.fixture
def rp_client(relying_party):
    return RelyingPartyClient(RP_HOST, http_client=relying_party.http_client())


@pytest.fixture
def session():
    return SessionState()


@pytest.fixture
def registration_outcome():
    return PasskeyRegistration(
        credential_id=b"\x01\x02\x03\x04",
        attestation_object=b"\xa3cfmtdnone",
        client_data_json=REGISTRATION_CLIENT_DATA,
    )


@pytest.fixture
def assertion_outcome():
    return PasskeyAssertion(
        credential_id=b"\xfb\xff",
        authenticator_data=b"\x49\x96\x0d\xe5\x88\x0e\x8c\x68",
        client_data_json=ASSERTION_CLIENT_DATA,
        signature=b"\x30\x45\x02\x20",
        user_handle=b"carol-id",
    )
