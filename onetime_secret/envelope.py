"""
Secret Envelope: Wire model and serialization of a secret submission.

The envelope is the JSON document kept in the backend:
    {"secret": "<ciphertext>", "nonce": "<nonce>", "expiration": 3600}

Its serialized length is what the size cap is measured against.

Security Note:
    Ciphertext and nonce are opaque client values. Never log them.
"""
from typing import Any

import orjson
from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from .exceptions import CorruptData, MalformedRequest


class Envelope(BaseModel):
    """A secret as submitted by the client and stored in the backend."""

    model_config = ConfigDict(frozen=True)

    ciphertext: StrictStr = Field(alias="secret")
    nonce: StrictStr = ""
    expiration: StrictInt

    def encode(self) -> bytes:
        """Serialize the envelope to its stored form.

        Returns:
            orjson-encoded bytes.

        Raises:
            MalformedRequest: If a value cannot be encoded as JSON
                (e.g. a string holding lone surrogates).
        """
        try:
            return orjson.dumps(self.model_dump(by_alias=True))
        except orjson.JSONEncodeError as err:
            raise MalformedRequest("Unable to encode secret") from err

    @classmethod
    def _load(cls, data: Any) -> "Envelope":
        return cls.model_validate(orjson.loads(data))

    @classmethod
    def parse(cls, data: Any) -> "Envelope":
        """Parse a client request body.

        Args:
            data: raw JSON document (bytes or str).

        Raises:
            MalformedRequest: body is not JSON or lacks the expected shape.
        """
        try:
            return cls._load(data)
        except (orjson.JSONDecodeError, ValidationError) as err:
            raise MalformedRequest() from err

    @classmethod
    def decode(cls, data: Any) -> "Envelope":
        """Deserialize an envelope read back from the backend.

        Raises:
            CorruptData: stored bytes are not a valid envelope.
        """
        try:
            return cls._load(data)
        except (orjson.JSONDecodeError, ValidationError) as err:
            raise CorruptData() from err
