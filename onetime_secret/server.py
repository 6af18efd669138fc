"""
Application factory and entry point for the one-time secret service.
"""
import ssl
import logging
from pathlib import Path
from typing import Optional

from aiohttp import web

from .backends import AbstractBackend, MemoryBackend, RedisBackend
from .conf import MAX_REQUEST_SIZE, SecretConfig
from .handlers import SECRET_STORE, routes
from .store import SecretStore

logger = logging.getLogger("onetime.secret")


def create_backend(config: SecretConfig) -> AbstractBackend:
    """Build the key-value backend selected by configuration."""
    if config.backend == "memory":
        logger.warning(
            "Using the in-memory backend; secrets are lost on restart"
        )
        return MemoryBackend()
    return RedisBackend(url=config.redis_url, key_prefix=config.key_prefix)


def ssl_context(config: SecretConfig) -> Optional[ssl.SSLContext]:
    """TLS context (TLS 1.2 minimum) when both TLS_CERT and TLS_KEY are set."""
    if not config.use_tls:
        return None
    context = ssl.create_default_context(ssl.Purpose.CLIENT_AUTH)
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    context.load_cert_chain(config.tls_cert, config.tls_key)
    return context


def _add_static(app: web.Application, static_dir: str) -> None:
    root = Path(static_dir)
    if not root.is_dir():
        raise RuntimeError(f"STATIC_DIR {static_dir} is not a directory")
    index = root / "index.html"

    async def index_handler(request: web.Request) -> web.StreamResponse:
        if not index.is_file():
            raise web.HTTPNotFound()
        return web.FileResponse(index)

    app.router.add_get("/", index_handler)
    app.router.add_static("/", root)


def create_app(
    config: SecretConfig,
    backend: Optional[AbstractBackend] = None,
) -> web.Application:
    """Create the aiohttp application around a SecretStore.

    Args:
        config: validated service configuration.
        backend: backend to use instead of the one configured.

    Returns:
        Configured aiohttp Application.
    """
    if backend is None:
        backend = create_backend(config)
    store = SecretStore(backend)

    app = web.Application(client_max_size=MAX_REQUEST_SIZE)
    app[SECRET_STORE] = store
    app.add_routes(routes)
    if config.static_dir:
        _add_static(app, config.static_dir)

    async def close_backend(app: web.Application) -> None:
        await app[SECRET_STORE].backend.close()

    app.on_cleanup.append(close_backend)
    return app


def main() -> None:
    config = SecretConfig.from_env()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )
    app = create_app(config)
    logger.info(
        "Starting one-time secret service on %s:%d (tls=%s)",
        config.host, config.port, config.use_tls,
    )
    web.run_app(
        app,
        host=config.host,
        port=config.port,
        ssl_context=ssl_context(config),
        print=None,
    )
