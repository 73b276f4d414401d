"""Low-level helpers for the WebDAV server."""

from __future__ import annotations

from enum import Enum, IntEnum


class Method(str, Enum):
    """HTTP verbs understood by the server.

    Anything else maps to ``UNSUPPORTED`` so dispatch stays exhaustive.
    """

    OPTIONS = "OPTIONS"
    GET = "GET"
    HEAD = "HEAD"
    PUT = "PUT"
    DELETE = "DELETE"
    MKCOL = "MKCOL"
    PROPFIND = "PROPFIND"
    MOVE = "MOVE"
    COPY = "COPY"
    UNSUPPORTED = ""

    @classmethod
    def parse(cls, s: str) -> Method:
        """Parse a request method, falling back to ``UNSUPPORTED``.

        Method tokens are case-sensitive.
        """
        try:
            method = cls(s)
        except ValueError:
            return cls.UNSUPPORTED
        return method

    @classmethod
    def allowed(cls) -> list[str]:
        """List the verbs advertised in the Allow header."""
        return [m.value for m in cls if m is not cls.UNSUPPORTED]


class Depth(IntEnum):
    """Depth indicates whether a request applies to the resource's members.

    Defined in RFC 4918 section 10.2.
    """

    ZERO = 0  # Request applies only to the resource
    ONE = 1  # Request applies to resource and its internal members only
    INFINITY = -1  # Request applies to resource and all of its members


def parse_depth(s: str) -> Depth:
    """Parse a Depth header."""
    if s == "0":
        return Depth.ZERO
    elif s == "1":
        return Depth.ONE
    elif s.lower() == "infinity":
        return Depth.INFINITY
    else:
        raise ValueError("webdav: invalid Depth value")


class HTTPError(Exception):
    """HTTP error with status code."""

    def __init__(self, code: int, err: Exception | None = None):
        self.code = code
        self.err = err
        super().__init__(str(self))

    def __str__(self) -> str:
        from http import HTTPStatus

        try:
            text = HTTPStatus(self.code).phrase
        except ValueError:
            text = "Unknown"

        s = f"{self.code} {text}"
        if self.err:
            return f"{s}: {self.err}"
        return s
