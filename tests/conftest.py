import pytest

from onetime_secret.backends import MemoryBackend
from onetime_secret.conf import SecretConfig
from onetime_secret.exceptions import BackendError
from onetime_secret.server import create_app
from onetime_secret.store import SecretStore


class FakeClock:
    """Monotonic clock advanced by hand."""
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingBackend(MemoryBackend):
    """Memory backend without atomic get-and-delete, counting calls."""
    supports_get_and_delete = False

    def __init__(self, *args, fail_on=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.calls: list[str] = []
        self.fail_on = set(fail_on)

    async def get(self, key):
        self.calls.append("get")
        if "get" in self.fail_on:
            raise BackendError()
        return await super().get(key)

    async def set(self, key, value, ttl):
        self.calls.append("set")
        if "set" in self.fail_on:
            raise BackendError()
        await super().set(key, value, ttl)

    async def delete(self, key):
        self.calls.append("delete")
        if "delete" in self.fail_on:
            raise BackendError()
        await super().delete(key)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend(clock):
    return MemoryBackend(clock=clock)


@pytest.fixture
def store(backend):
    return SecretStore(backend)


@pytest.fixture
def recording_backend(clock):
    return RecordingBackend(clock=clock)


@pytest.fixture
def app(backend):
    return create_app(SecretConfig(backend="memory"), backend=backend)


@pytest.fixture
async def client(aiohttp_client, app):
    return await aiohttp_client(app)
