"""WebDAV server over an object store."""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Iterator
from typing import Any, BinaryIO
from urllib.parse import unquote, urlparse

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response as StarletteResponse
from starlette.responses import StreamingResponse
from starlette.routing import Route
from starlette.types import Receive, Scope, Send

from .auth import authenticate
from .config import ServerConfig
from .descriptor import describe
from .internal import (
    Depth,
    HTTPError,
    Method,
    MultiStatus,
    format_http_date,
    parse_depth,
    serve_error,
    serve_multistatus,
)
from .resolver import is_directory, is_marker_key, marker_key
from .store import ObjectStore
from .webdav import DEFAULT_CONTENT_TYPE, ResourceDescriptor

logger = logging.getLogger(__name__)

DAV_CAPABILITIES = "1, 2"

CHUNK_SIZE = 64 * 1024


def request_path(request: Request) -> str:
    """Get the decoded request path, which is also the object key."""
    return request.scope["path"] or "/"


def iter_body(body: BinaryIO) -> Iterator[bytes]:
    """Stream an object body in chunks, closing it when done."""
    with body:
        while chunk := body.read(CHUNK_SIZE):
            yield chunk


def put_etag() -> str:
    """Entity tag returned by PUT: the current time in hex milliseconds."""
    return f'"{int(time.time() * 1000):x}"'


class StoreBackend:
    """WebDAV verbs implemented on top of an ObjectStore."""

    def __init__(self, store: ObjectStore, listing_limit: int):
        self.store = store
        self.listing_limit = listing_limit

    async def options(self, request: Request) -> StarletteResponse:
        """Handle OPTIONS request."""
        headers = {
            "Allow": ", ".join(Method.allowed()),
            "DAV": DAV_CAPABILITIES,
            "MS-Author-Via": "DAV",
        }
        return StarletteResponse(status_code=200, headers=headers)

    async def head_get(self, request: Request) -> StarletteResponse:
        """Handle HEAD/GET request.

        Directories are answered with a Depth 1 listing.
        """
        path = request_path(request)
        with_body = request.method != "HEAD"

        if await is_directory(self.store, path):
            ms = await self.propfind(path, Depth.ONE)
            return serve_multistatus(ms, with_body=with_body)

        obj = await self.store.get(path)
        if obj is None:
            raise HTTPError(404, Exception(f"webdav: no object at {path!r}"))

        metadata = obj.metadata
        headers = {
            "Content-Type": metadata.content_type or DEFAULT_CONTENT_TYPE,
            "Content-Length": str(metadata.size),
        }
        if metadata.etag:
            headers["ETag"] = f'"{metadata.etag}"'
        if metadata.uploaded:
            headers["Last-Modified"] = format_http_date(metadata.uploaded)

        if not with_body:
            obj.body.close()
            return StarletteResponse(headers=headers)

        return StreamingResponse(iter_body(obj.body), headers=headers)

    async def propfind(self, path: str, depth: Depth) -> MultiStatus:
        """Build the multistatus for ``path``.

        The requested resource always comes first. Enumeration lists the
        immediate children only, even for ``Depth: infinity``.
        """
        is_dir = await is_directory(self.store, path)
        if is_dir and not path.endswith("/"):
            path += "/"

        ms = MultiStatus()
        ms.add(await describe(self.store, path, is_dir))

        if depth == Depth.ZERO or not is_dir:
            return ms

        # One extra entry leaves room for the directory marker, which is not listed
        listed = await self.store.list(prefix=path, delimiter="/", limit=self.listing_limit + 1)

        children: list[ResourceDescriptor] = []
        for obj in listed.objects:
            if obj.key == path or is_marker_key(obj.key):
                continue
            children.append(await describe(self.store, obj.key, False, metadata=obj))
        for prefix in listed.delimited_prefixes:
            children.append(await describe(self.store, prefix, True))

        children.sort(key=lambda d: d.path)
        if listed.truncated or len(children) > self.listing_limit:
            logger.debug("webdav: listing of %r truncated at %d", path, self.listing_limit)
        for child in children[: self.listing_limit]:
            ms.add(child)
        return ms

    async def handle_propfind(self, request: Request) -> StarletteResponse:
        """Handle PROPFIND request."""
        depth = Depth.INFINITY
        depth_str = request.headers.get("depth", "")
        if depth_str:
            try:
                depth = parse_depth(depth_str)
            except ValueError:
                # Anything but "0" enumerates
                logger.debug("webdav: unrecognized Depth %r, listing children", depth_str)

        ms = await self.propfind(request_path(request), depth)
        return serve_multistatus(ms)

    async def put(self, request: Request) -> StarletteResponse:
        """Handle PUT request."""
        path = request_path(request)
        content_type = request.headers.get("content-type") or DEFAULT_CONTENT_TYPE

        body = await request.body()
        await self.store.put(path, body, content_type=content_type)

        return StarletteResponse(status_code=201, headers={"ETag": put_etag()})

    async def delete(self, request: Request) -> StarletteResponse:
        """Handle DELETE request. Deleting a missing key succeeds."""
        await self.store.delete(request_path(request))
        return StarletteResponse(status_code=204)  # No Content

    async def mkcol(self, request: Request) -> StarletteResponse:
        """Handle MKCOL request by writing an empty directory marker."""
        await self.store.put(marker_key(request_path(request)), b"")
        return StarletteResponse(status_code=201)  # Created

    def _parse_destination(self, request: Request) -> str:
        """Parse Destination header into a decoded path."""
        dest = request.headers.get("destination", "")
        if not dest:
            raise HTTPError(400, Exception("webdav: missing Destination header in request"))

        dest_path = unquote(urlparse(dest).path)
        if not dest_path:
            raise HTTPError(400, Exception(f"webdav: invalid Destination {dest!r}"))
        return dest_path

    async def copy_move(self, request: Request) -> StarletteResponse:
        """Handle COPY/MOVE request.

        The source body streams into the destination with its content type.
        MOVE then deletes the source; the two steps are not atomic.

        A destination equal to the source is refused with 403, since MOVE
        would otherwise delete the object it has just written.
        """
        dest = self._parse_destination(request)
        path = request_path(request)
        if dest == path:
            raise HTTPError(403, Exception("webdav: source and destination are the same"))

        obj = await self.store.get(path)
        if obj is None:
            raise HTTPError(404, Exception(f"webdav: no object at {path!r}"))

        with obj.body:
            await self.store.put(dest, obj.body, content_type=obj.metadata.content_type)

        if Method.parse(request.method) is Method.MOVE:
            await self.store.delete(path)

        return StarletteResponse(status_code=201)  # Created


class Handler:
    """WebDAV HTTP handler: authentication gate and method dispatch."""

    def __init__(
        self,
        store: ObjectStore,
        config: ServerConfig,
        debug: bool = False,
    ):
        """Initialize handler.

        Args:
            store: Object store backing the namespace
            config: Credentials and listing limits
            debug: Enable request/response logging
        """
        self.store = store
        self.config = config
        self.backend = StoreBackend(store, config.listing_limit)
        self.debug = debug

        self._methods: dict[Method, Callable[[Request], Awaitable[StarletteResponse]]] = {
            Method.OPTIONS: self.backend.options,
            Method.GET: self.backend.head_get,
            Method.HEAD: self.backend.head_get,
            Method.PUT: self.backend.put,
            Method.DELETE: self.backend.delete,
            Method.MKCOL: self.backend.mkcol,
            Method.PROPFIND: self.backend.handle_propfind,
            Method.MOVE: self.backend.copy_move,
            Method.COPY: self.backend.copy_move,
            Method.UNSUPPORTED: self._method_not_allowed,
        }

    async def handle(self, request: Request) -> StarletteResponse:
        """Handle WebDAV HTTP request.

        Args:
            request: Starlette request

        Returns:
            Starlette response
        """
        if self.debug:
            request = await self._log_request(request)

        response = await self._dispatch(request)

        if self.debug:
            self._log_response(response)
        return response

    async def _dispatch(self, request: Request) -> StarletteResponse:
        denied = authenticate(request, self.config)
        if denied is not None:
            return denied

        method = Method.parse(request.method)
        try:
            return await self._methods[method](request)
        except Exception as e:
            return serve_error(e)

    async def _method_not_allowed(self, request: Request) -> StarletteResponse:
        raise HTTPError(405, Exception(f"webdav: unsupported method {request.method}"))

    async def _log_request(self, request: Request) -> Request:
        """Log an incoming request and return one with a replayable body."""
        from .debug import log_request

        request_body = await request.body()
        headers = dict(request.headers.items())
        log_request(request.method, request_path(request), headers, request_body)

        # request.body() can only be received once from the server
        async def receive() -> dict[str, Any]:
            return {"type": "http.request", "body": request_body, "more_body": False}

        return Request(scope=request.scope, receive=receive)

    def _log_response(self, response: StarletteResponse) -> None:
        from .debug import log_response

        headers: dict[str, Any] = dict(response.headers.items())

        # Streaming bodies are not captured
        body: bytes | None = None
        if not isinstance(response, StreamingResponse):
            body = response.body

        log_response(response.status_code, headers, body)


class WebDAVEndpoint:
    """ASGI endpoint passing every method through to the handler.

    Registered as an ASGI app so the router does not answer unknown
    methods itself before authentication has run.
    """

    def __init__(self, handler: Handler):
        self.handler = handler

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        request = Request(scope, receive)
        response = await self.handler.handle(request)
        await response(scope, receive, send)


def create_app(store: ObjectStore, config: ServerConfig, debug: bool = False) -> Starlette:
    """Create a Starlette app for WebDAV.

    Args:
        store: Object store backing the namespace
        config: Server configuration
        debug: Enable request/response logging

    Returns:
        Starlette application
    """
    handler = Handler(store, config, debug=debug)
    routes = [Route("/{path:path}", WebDAVEndpoint(handler))]
    return Starlette(routes=routes)
