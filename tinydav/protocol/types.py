"""
Core protocol types for the Sans-I/O WebDAV implementation.

These dataclasses represent HTTP requests and responses at the protocol level,
independent of any I/O implementation, and the values handed back to callers.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class DAVMethod(Enum):
    """WebDAV HTTP methods issued by this library."""

    GET = "GET"
    PUT = "PUT"
    DELETE = "DELETE"
    PROPFIND = "PROPFIND"
    MKCOL = "MKCOL"


@dataclass(frozen=True)
class DAVRequest:
    """
    Represents an HTTP request to be made.

    This is a pure data structure with no I/O. It describes what request
    should be made, but does not make it.

    Attributes:
        method: HTTP method (GET, PUT, PROPFIND, etc.)
        url: Full URL for the request
        headers: HTTP headers as dict
        body: Request body as bytes (optional)
    """

    method: DAVMethod
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes | None = None


@dataclass(frozen=True)
class DAVResponse:
    """
    Represents an HTTP response received.

    This is a pure data structure with no I/O. It contains the response
    data but does not fetch it.

    Attributes:
        status: HTTP status code
        headers: HTTP headers as dict
        body: Response body as bytes
        reason: Reason phrase given by the server, if any
    """

    status: int
    headers: dict[str, str]
    body: bytes
    reason: str = ""

    @property
    def ok(self) -> bool:
        """True if status indicates success (2xx)."""
        return 200 <= self.status < 300

    @property
    def is_multistatus(self) -> bool:
        """True if this is a 207 Multi-Status response."""
        return self.status == 207

    @property
    def text(self) -> str:
        """The body as text, decoded by the charset of the Content-Type header."""
        try:
            return self.body.decode(self.charset, errors="replace")
        except LookupError:
            return self.body.decode("utf-8", errors="replace")

    @property
    def charset(self) -> str:
        content_type = ""
        for name, value in self.headers.items():
            if name.lower() == "content-type":
                content_type = value
        for param in content_type.split(";")[1:]:
            key, _, value = param.strip().partition("=")
            if key.lower() == "charset" and value:
                return value.strip('"')
        return "utf-8"


@dataclass(frozen=True)
class File:
    """A plain resource in a listing.  path is a fully qualified URL."""

    path: str


@dataclass(frozen=True)
class Directory:
    """A collection in a listing.  path is a fully qualified URL."""

    path: str


@dataclass(frozen=True)
class Unknown:
    """
    A listing entry whose response carried no propstat/prop/resourcetype
    chain at all.  Only produced when a listing is interpreted in strict
    mode, otherwise such entries are reported as File.
    """

    path: str


DirectoryEntry = Union[File, Directory, Unknown]


@dataclass(frozen=True)
class Content:
    """
    Result of reading a text file.

    Attributes:
        path: The URL that was requested
        data: The response body as text
    """

    path: str
    data: str
