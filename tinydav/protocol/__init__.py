"""
Sans-I/O WebDAV protocol implementation.

This module provides protocol-level operations without any I/O.
It builds requests and parses responses as pure data transformations.

The protocol layer is organized into:
- types: Core data structures (DAVRequest, DAVResponse, listing entries)
- xmltree: Read-only document tree and the accessors used to walk it
- xml_builders: Pure functions to build XML request bodies
- xml_parsers: Pure functions to interpret multistatus bodies
- operations: WebDAVProtocol class combining builders and parsers

Example usage:

    from tinydav.protocol import WebDAVProtocol

    protocol = WebDAVProtocol()

    # Build a request (no I/O)
    request = protocol.list_request("https://dav.example.com/files/")

    # Execute via your preferred I/O (sync, async, or mock)
    response = your_http_client.execute(request)

    # Parse response (no I/O)
    entries = protocol.parse_list_response(request, response)
"""

from .types import (
    # Enums
    DAVMethod,
    # Request/Response
    DAVRequest,
    DAVResponse,
    # Result types
    Content,
    Directory,
    DirectoryEntry,
    File,
    Unknown,
)
from .xmltree import (
    Element,
    Text,
    children_of,
    first_child_by_tag,
    first_text_value,
    parse_document,
)
from .xml_builders import build_propfind_body
from .xml_parsers import (
    interpret_multistatus,
    parse_listing,
    response_to_entry,
)
from .operations import WebDAVProtocol

__all__ = [
    # Enums
    "DAVMethod",
    # Request/Response
    "DAVRequest",
    "DAVResponse",
    # Result types
    "Content",
    "Directory",
    "DirectoryEntry",
    "File",
    "Unknown",
    # Document tree
    "Element",
    "Text",
    "children_of",
    "first_child_by_tag",
    "first_text_value",
    "parse_document",
    # XML Builders
    "build_propfind_body",
    # XML Parsers
    "interpret_multistatus",
    "parse_listing",
    "response_to_entry",
    # Protocol
    "WebDAVProtocol",
]
