"""
WebDAV protocol operations combining request building and response parsing.

This class provides a high-level interface to WebDAV operations while
remaining completely I/O-free.
"""

from typing import List, Optional, Union

from tinydav.lib import error
from tinydav.lib.python_utilities import to_wire

from .types import Content, DAVMethod, DAVRequest, DAVResponse, DirectoryEntry
from .xml_builders import build_propfind_body
from .xml_parsers import parse_listing


class WebDAVProtocol:
    """
    Sans-I/O WebDAV protocol handler.

    Builds requests and parses responses without doing any I/O.
    All HTTP communication is delegated to an external I/O implementation.

    Example:
        protocol = WebDAVProtocol()

        # Build request
        request = protocol.list_request("https://dav.example.com/files/")

        # Execute with your I/O (not shown)
        response = io.execute(request)

        # Parse response
        entries = protocol.parse_list_response(request, response)
    """

    def __init__(
        self,
        strict: bool = False,
        resolve_namespaces: bool = False,
        huge_tree: bool = False,
    ):
        """
        Args:
            strict: Report listing entries without resourcetype as Unknown
            resolve_namespaces: Match DAV: elements by namespace, not by prefix
            huge_tree: Allow parsing very large XML documents
        """
        self.strict = strict
        self.resolve_namespaces = resolve_namespaces
        self.huge_tree = huge_tree

    # =========================================================================
    # Request builders
    # =========================================================================

    def list_request(self, url: str) -> DAVRequest:
        """
        Build the PROPFIND request for a directory listing.

        Asks for resourcetype only, one level deep.
        """
        return DAVRequest(
            method=DAVMethod.PROPFIND,
            url=str(url),
            headers={"Depth": "1", "Content-Type": "text/xml"},
            body=build_propfind_body(["resourcetype"]),
        )

    def mkcol_request(self, url: str) -> DAVRequest:
        """Build a MKCOL request creating a collection at url."""
        return DAVRequest(method=DAVMethod.MKCOL, url=str(url))

    def put_request(
        self,
        url: str,
        data: Union[bytes, str],
        content_type: str = "application/octet-stream",
    ) -> DAVRequest:
        """
        Build a PUT request to create/replace a resource.

        Args:
            url: Resource URL
            data: Resource content, str is sent UTF-8 encoded
            content_type: Content-Type header

        Returns:
            DAVRequest ready for execution
        """
        return DAVRequest(
            method=DAVMethod.PUT,
            url=str(url),
            headers={"Content-Type": content_type},
            body=to_wire(data),
        )

    def delete_request(self, url: str) -> DAVRequest:
        """Build a DELETE request."""
        return DAVRequest(method=DAVMethod.DELETE, url=str(url))

    def get_request(self, url: str) -> DAVRequest:
        """Build a GET request."""
        return DAVRequest(method=DAVMethod.GET, url=str(url))

    # =========================================================================
    # Response parsers
    # =========================================================================

    def check_response(
        self,
        request: DAVRequest,
        response: DAVResponse,
        expected_status: Optional[List[int]] = None,
    ) -> None:
        """
        Raise the TransportError subclass for the request method unless
        the response status is acceptable (default: any 2xx).
        """
        if expected_status:
            ok = response.status in expected_status
        else:
            ok = response.ok
        if not ok:
            raise error.exception_by_method[request.method.value.lower()](
                url=request.url,
                reason=("%s %s" % (response.status, response.reason or "")).strip(),
                status=response.status,
            )

    def parse_list_response(
        self, request: DAVRequest, response: DAVResponse
    ) -> list[DirectoryEntry]:
        """
        Check a PROPFIND response and interpret its multistatus body.

        Raises:
            PropfindError: on a non-2xx status
            ParseError: if the body is not well-formed XML
        """
        self.check_response(request, response)
        return parse_listing(
            response.body,
            request.url,
            strict=self.strict,
            resolve_namespaces=self.resolve_namespaces,
            huge_tree=self.huge_tree,
        )

    def parse_read_response(
        self, request: DAVRequest, response: DAVResponse
    ) -> Content:
        """Check a GET response and wrap its body as text."""
        self.check_response(request, response)
        return Content(path=request.url, data=response.text)
