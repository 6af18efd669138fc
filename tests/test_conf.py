"""Tests for configuration loading and the application factory."""
import ssl

import pytest
from pydantic import ValidationError

from onetime_secret.backends import MemoryBackend, RedisBackend
from onetime_secret.conf import EXPIRATIONS, MAX_ENVELOPE_SIZE, SecretConfig
from onetime_secret.handlers import SECRET_STORE
from onetime_secret.server import create_app, create_backend, ssl_context


_ENV = (
    "SECRET_BACKEND", "REDIS_URL", "SECRET_KEY_PREFIX", "HOST", "PORT",
    "TLS_CERT", "TLS_KEY", "STATIC_DIR", "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestConstants:

    def test_expirations(self):
        assert EXPIRATIONS == {3600, 86400, 604800}

    def test_max_size(self):
        assert MAX_ENVELOPE_SIZE == 10000


class TestSecretConfig:

    def test_from_env_requires_redis_url(self, clean_env):
        with pytest.raises(RuntimeError):
            SecretConfig.from_env()

    def test_from_env_redis(self, clean_env):
        clean_env.setenv("REDIS_URL", "redis://localhost:6379/1")
        config = SecretConfig.from_env()
        assert config.backend == "redis"
        assert config.redis_url == "redis://localhost:6379/1"
        assert config.port == 1337
        assert config.key_prefix == "secret:"
        assert config.use_tls is False

    def test_from_env_memory(self, clean_env):
        clean_env.setenv("SECRET_BACKEND", "Memory")
        clean_env.setenv("PORT", "8080")
        clean_env.setenv("LOG_LEVEL", "debug")
        config = SecretConfig.from_env()
        assert config.backend == "memory"
        assert config.port == 8080
        assert config.log_level == "DEBUG"

    def test_tls_needs_cert_and_key(self, clean_env):
        clean_env.setenv("SECRET_BACKEND", "memory")
        clean_env.setenv("TLS_CERT", "/tmp/cert.pem")
        assert SecretConfig.from_env().use_tls is False
        clean_env.setenv("TLS_KEY", "/tmp/key.pem")
        assert SecretConfig.from_env().use_tls is True

    def test_unsupported_backend(self):
        with pytest.raises(ValidationError):
            SecretConfig(backend="memcached", redis_url="redis://localhost")

    def test_redis_without_url(self):
        with pytest.raises(ValidationError):
            SecretConfig(backend="redis")

    @pytest.mark.parametrize("port", [0, 70000])
    def test_invalid_port(self, port):
        with pytest.raises(ValidationError):
            SecretConfig(backend="memory", port=port)

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            SecretConfig(backend="memory", log_level="chatty")


class TestServer:

    def test_create_backend(self):
        assert isinstance(create_backend(SecretConfig(backend="memory")), MemoryBackend)
        backend = create_backend(
            SecretConfig(backend="redis", redis_url="redis://localhost:6379/0")
        )
        assert isinstance(backend, RedisBackend)

    def test_create_app_holds_store(self):
        backend = MemoryBackend()
        app = create_app(SecretConfig(backend="memory"), backend=backend)
        assert app[SECRET_STORE].backend is backend

    def test_no_ssl_without_tls(self):
        assert ssl_context(SecretConfig(backend="memory")) is None

    def test_missing_static_dir(self, tmp_path):
        config = SecretConfig(backend="memory", static_dir=str(tmp_path / "missing"))
        with pytest.raises(RuntimeError):
            create_app(config)

    async def test_static_index(self, tmp_path, aiohttp_client):
        (tmp_path / "index.html").write_text("<html>yopass</html>")
        (tmp_path / "js").mkdir()
        (tmp_path / "js" / "app.js").write_text("console.log(1);")
        app = create_app(SecretConfig(backend="memory", static_dir=str(tmp_path)))
        client = await aiohttp_client(app)

        resp = await client.get("/")
        assert resp.status == 200
        assert "yopass" in await resp.text()

        resp = await client.get("/js/app.js")
        assert resp.status == 200

        # API routes still win over static files
        resp = await client.head("/secret/00000000-0000-0000-0000-000000000000")
        assert resp.status == 404

    def test_tls_minimum_version(self, monkeypatch):
        monkeypatch.setattr(ssl.SSLContext, "load_cert_chain", lambda *a, **kw: None)
        config = SecretConfig(
            backend="memory", tls_cert="/tmp/cert.pem", tls_key="/tmp/key.pem",
        )
        context = ssl_context(config)
        assert context.minimum_version == ssl.TLSVersion.TLSv1_2
