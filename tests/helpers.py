"""
Test doubles for the fetch capability, uploads and the schema under test.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

SDL = """
scalar Upload

type User {
  id: ID
  name: String
}

type NotFound {
  error: String
}

union UserResult = User | NotFound

type UploadResult {
  url: String
}

input MetaInput {
  source: String
  version: Int
}

input UserInput {
  name: String
  email: String
  role: String
  meta: MetaInput
}

input SearchInput {
  name: String
  limit: Int
  tags: [String]
}

type Query {
  user(id: ID): User
  users: [User]
  usersStrict: [User!]!
  greeting: String
  count: Int
  search(input: SearchInput): [User]
  userOrError(id: ID): UserResult
}

type Mutation {
  createUser(input: UserInput): User
  updateUser(input: UserInput): User
  login(input: UserInput): User
  uploadAvatar(input: Upload): UploadResult
}

type Subscription {
  userUpdated: User
}
"""

BASE_URL = "https://api.example.com"


class FakeHeaders(dict):
    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        for key, value in self.items():
            if key.lower() == name.lower():
                return value
        return default


@dataclass
class FakeResponse:
    status: int = 200
    body: str = "{}"
    status_text: str = "OK"
    headers: FakeHeaders = field(default_factory=FakeHeaders)

    async def text(self) -> str:
        return self.body


@dataclass
class FetchCall:
    url: str
    method: str
    headers: dict[str, str]
    body: Any


class FakeFetch:
    """Fetch capability returning a canned response and recording requests."""

    def __init__(self, response: Optional[FakeResponse] = None):
        self.response = response or FakeResponse()
        self.calls: list[FetchCall] = []

    async def __call__(self, url, *, method, headers, body=None):
        self.calls.append(FetchCall(url=url, method=method, headers=dict(headers), body=body))
        return self.response

    @property
    def last(self) -> FetchCall:
        return self.calls[-1]


class FakeUpload:
    """Mimics starlette's UploadFile: async ``read(size)`` plus ``content_type``."""

    def __init__(self, data: bytes, content_type: str = "image/png", chunk: int = 3):
        self._data = data
        self._chunk = chunk
        self._offset = 0
        self.content_type = content_type

    async def read(self, size: int = -1) -> bytes:
        size = min(size, self._chunk) if size > 0 else self._chunk
        chunk = self._data[self._offset:self._offset + size]
        self._offset += len(chunk)
        return chunk


class FakeBus:
    """Event bus replaying canned payloads on every topic, then ending the stream."""

    def __init__(self, *payloads: Any):
        self.payloads = payloads
        self.topics: list[str] = []

    def async_iterator(self, topic: str):
        self.topics.append(topic)
        return self._iterate()

    async def _iterate(self):
        for payload in self.payloads:
            yield payload
