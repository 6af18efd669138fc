"""
One-time Secret Configuration: Lifecycle constants and validated settings.

Reads service settings from environment variables:
    SECRET_BACKEND = redis | memory (default: redis)
    REDIS_URL = redis://host:port/db (required by the redis backend)
    SECRET_KEY_PREFIX = namespace for backend keys (default: "secret:")
    HOST / PORT = listening address (default: 0.0.0.0:1337)
    TLS_CERT / TLS_KEY = certificate and key paths, TLS is on when both are set
    STATIC_DIR = directory holding the web client (optional)
    LOG_LEVEL = logging level name (default: INFO)

Security Note:
    Never log secret identifiers; they are the only retrieval credential.
"""
import os
import re
import logging
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

logger = logging.getLogger("onetime.secret")

# Permitted time-to-live values in seconds: 1 hour, 1 day, 1 week.
EXPIRATIONS: frozenset[int] = frozenset({3600, 86400, 604800})

# Upper bound for the serialized envelope, in bytes.
MAX_ENVELOPE_SIZE = 10000

# Request bodies are rejected before parsing past this size; the slack
# covers JSON whitespace and escapes that shrink once decoded.
MAX_REQUEST_SIZE = 32 * 1024

SECRET_ID_PATTERN = r"[0-9a-f]{8}-(?:[0-9a-f]{4}-){3}[0-9a-f]{12}"
SECRET_ID_RE = re.compile(rf"^{SECRET_ID_PATTERN}$")

BACKENDS = ("redis", "memory")


class SecretConfig(BaseModel):
    """Validated service configuration."""

    backend: str = Field(default="redis")
    redis_url: Optional[str] = None
    key_prefix: str = Field(default="secret:")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=1337, ge=1, le=65535)
    tls_cert: Optional[str] = None
    tls_key: Optional[str] = None
    static_dir: Optional[str] = None
    log_level: str = Field(default="INFO")

    @field_validator("backend")
    @classmethod
    def validate_backend(cls, v: str) -> str:
        """Validate the key-value backend is supported."""
        v = v.lower()
        if v not in BACKENDS:
            raise ValueError(f"Unsupported secret backend: {v}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if not isinstance(logging.getLevelName(v), int):
            raise ValueError(f"Unknown log level: {v}")
        return v

    @model_validator(mode="after")
    def validate_redis_url(self) -> "SecretConfig":
        """Ensure the redis backend has an address to connect to."""
        if self.backend == "redis" and not self.redis_url:
            raise ValueError(
                "redis_url is required when using the redis backend"
            )
        return self

    @property
    def use_tls(self) -> bool:
        return bool(self.tls_cert and self.tls_key)

    @classmethod
    def from_env(cls) -> "SecretConfig":
        """Create SecretConfig by loading values from environment.

        Returns:
            Populated SecretConfig instance.

        Raises:
            RuntimeError: If the redis backend is selected and REDIS_URL is unset.
        """
        backend = os.environ.get("SECRET_BACKEND", "redis")
        redis_url = os.environ.get("REDIS_URL") or None
        if backend.lower() == "redis" and redis_url is None:
            raise RuntimeError(
                "REDIS_URL environment variable must be specified. "
                "Set REDIS_URL=redis://localhost:6379/0 or SECRET_BACKEND=memory"
            )
        config = cls(
            backend=backend,
            redis_url=redis_url,
            key_prefix=os.environ.get("SECRET_KEY_PREFIX", "secret:"),
            host=os.environ.get("HOST", "0.0.0.0"),
            port=int(os.environ.get("PORT", "1337")),
            tls_cert=os.environ.get("TLS_CERT") or None,
            tls_key=os.environ.get("TLS_KEY") or None,
            static_dir=os.environ.get("STATIC_DIR") or None,
            log_level=os.environ.get("LOG_LEVEL", "INFO"),
        )
        logger.debug(
            "Loaded configuration: backend=%s port=%d tls=%s",
            config.backend, config.port, config.use_tls,
        )
        return config
