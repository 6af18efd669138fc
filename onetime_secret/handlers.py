"""
HTTP handlers: aiohttp routes adapting requests to the SecretStore.

    POST /secret          store a secret, answers {"key", "message"}
    GET  /secret/{uuid}   read and destroy a secret
    HEAD /secret/{uuid}   200 if the secret is still readable, 404 otherwise

Identifiers that do not look like a UUID never match the routes, so they
get a 404 without reaching the store.
"""
import logging
from typing import Any

import orjson
from aiohttp import web

from .conf import SECRET_ID_PATTERN
from .envelope import Envelope
from .exceptions import PayloadTooLarge, SecretError
from .store import SecretStore

logger = logging.getLogger("onetime.secret")

SECRET_STORE = web.AppKey("secret_store", SecretStore)

SECRET_PATH = f"/secret/{{uuid:{SECRET_ID_PATTERN}}}"

routes = web.RouteTableDef()


def _dumps(obj: Any) -> str:
    return orjson.dumps(obj).decode("utf-8")


def json_response(data: Any, status: int = 200) -> web.Response:
    return web.json_response(data, status=status, dumps=_dumps)


def error_response(err: SecretError) -> web.Response:
    if err.status >= 500:
        logger.warning("Request failed: %s", type(err).__name__)
    return json_response({"message": err.message}, status=err.status)


@routes.post("/secret")
async def save_secret(request: web.Request) -> web.Response:
    store = request.app[SECRET_STORE]
    try:
        body = await request.read()
    except web.HTTPRequestEntityTooLarge:
        return error_response(PayloadTooLarge())
    try:
        envelope = Envelope.parse(body)
        secret_id = await store.submit_envelope(envelope)
    except SecretError as err:
        return error_response(err)
    return json_response({"key": secret_id, "message": "secret stored"})


@routes.get(SECRET_PATH, allow_head=False)
async def get_secret(request: web.Request) -> web.Response:
    store = request.app[SECRET_STORE]
    try:
        ciphertext, nonce = await store.retrieve(request.match_info["uuid"])
    except SecretError as err:
        return error_response(err)
    return json_response({"secret": ciphertext, "nonce": nonce, "message": "OK"})


@routes.head(SECRET_PATH)
async def secret_status(request: web.Request) -> web.Response:
    store = request.app[SECRET_STORE]
    try:
        found = await store.exists(request.match_info["uuid"])
    except SecretError as err:
        logger.warning("Status check failed: %s", type(err).__name__)
        response = web.Response(status=err.status)
    else:
        response = web.Response(status=200 if found else 404)
    response.force_close()
    return response
