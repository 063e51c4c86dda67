"""
Pure functions for interpreting WebDAV multistatus bodies.

All functions in this module are pure - they take XML in and return
directory entries out, with no side effects or I/O.

The general format of a PROPFIND answer with Depth: 1 is:

    <D:multistatus xmlns:D="DAV:">
        <D:response>(the collection itself)</D:response>
        <D:response>(first member)</D:response>
        (...)
    </D:multistatus>

The first child of the multistatus element describes the collection
that was listed and is not part of the listing.  Responses that cannot
be turned into an entry (no href, or a root URL that is not absolute)
are dropped without raising; a listing is never partially failed.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Union

from tinydav.elements import dav
from tinydav.lib.namespace import qualified
from tinydav.lib.url import URL

from .types import Directory, DirectoryEntry, File, Unknown
from .xmltree import (
    Element,
    Node,
    children_of,
    first_child_by_tag,
    first_text_value,
    parse_document,
)

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class DAVTags:
    """The tag strings the interpreter looks for."""

    multistatus: str
    href: str
    propstat: str
    prop: str
    resourcetype: str
    collection: str

    @classmethod
    def literal(cls) -> "DAVTags":
        """Prefixed names, matched exactly as written in the body."""
        return cls(
            multistatus=qualified(dav.MultiStatus.localname()),
            href=qualified(dav.Href.localname()),
            propstat=qualified(dav.PropStat.localname()),
            prop=qualified(dav.Prop.localname()),
            resourcetype=qualified(dav.ResourceType.localname()),
            collection=qualified(dav.Collection.localname()),
        )

    @classmethod
    def resolved(cls) -> "DAVTags":
        """Clark notation names, for documents parsed with resolved namespaces."""
        return cls(
            multistatus=dav.MultiStatus.tag,
            href=dav.Href.tag,
            propstat=dav.PropStat.tag,
            prop=dav.Prop.tag,
            resourcetype=dav.ResourceType.tag,
            collection=dav.Collection.tag,
        )


LITERAL_TAGS = DAVTags.literal()
RESOLVED_TAGS = DAVTags.resolved()


def parse_listing(
    body: Union[bytes, str],
    root_url: Union[str, URL],
    strict: bool = False,
    resolve_namespaces: bool = False,
    huge_tree: bool = False,
) -> list[DirectoryEntry]:
    """
    Parse a PROPFIND multistatus body into a directory listing.

    Args:
        body: Raw XML response bytes
        root_url: The URL that was listed
        strict: Report entries without resourcetype information as Unknown
        resolve_namespaces: Match DAV: elements by namespace instead of
                            by the literal "D:" prefix
        huge_tree: Allow parsing very large XML documents

    Returns:
        Entries in document order, the listed collection itself excluded

    Raises:
        ParseError: If body is not well-formed XML
    """
    document = parse_document(
        body,
        resolve_namespaces=resolve_namespaces,
        huge_tree=huge_tree,
        url=str(root_url),
    )
    tags = RESOLVED_TAGS if resolve_namespaces else LITERAL_TAGS
    return interpret_multistatus(document, root_url, strict=strict, tags=tags)


def interpret_multistatus(
    document: Element,
    root_url: Union[str, URL],
    strict: bool = False,
    tags: DAVTags = LITERAL_TAGS,
) -> list[DirectoryEntry]:
    """
    Turn a parsed multistatus document into directory entries.

    A document without a multistatus element at the top yields an
    empty listing.
    """
    responses = first_child_by_tag(tags.multistatus, [document])
    if responses is None:
        log.debug("no %s element found, listing is empty", tags.multistatus)
        return []

    root = URL.objectify(root_url)
    entries: list[DirectoryEntry] = []
    for node in responses[1:]:
        entry = response_to_entry(node, root, strict=strict, tags=tags)
        if entry is None:
            log.debug("skipping response that could not be interpreted: %r", node)
            continue
        entries.append(entry)
    return entries


def response_to_entry(
    node: Node,
    root_url: Union[str, URL],
    strict: bool = False,
    tags: DAVTags = LITERAL_TAGS,
) -> Optional[DirectoryEntry]:
    """
    Map a single DAV:response node to a directory entry.

    Returns None if the node is not an element, has no href text, or
    if root_url is not an absolute URL.
    """
    children = children_of(node)
    if children is None:
        return None

    href_children = first_child_by_tag(tags.href, children)
    if href_children is None:
        return None
    href = first_text_value(href_children)
    if href is None:
        return None

    root = URL.objectify(root_url)
    if not root.is_absolute():
        return None
    url = str(root.with_path(_href_to_path(href)))

    has_collection = _resourcetype_has_collection(children, tags)
    if has_collection:
        return Directory(url)
    if has_collection is None and strict:
        return Unknown(url)
    return File(url)


def _href_to_path(href: str) -> str:
    """
    Servers may give absolute URLs or paths in href.  An absolute
    URL is reduced to its path, anything else is taken as a path.
    """
    href_url = URL(href)
    if href_url.is_absolute():
        return href_url.path
    return href


def _resourcetype_has_collection(
    children: Sequence[Node], tags: DAVTags
) -> Optional[bool]:
    """
    Follow propstat/prop/resourcetype below a response.  None if any
    step of the way is missing, else whether resourcetype holds a
    collection element.
    """
    nodes: Optional[Sequence[Node]] = children
    for tag in (tags.propstat, tags.prop, tags.resourcetype):
        nodes = first_child_by_tag(tag, nodes)
        if nodes is None:
            return None
    return first_child_by_tag(tags.collection, nodes) is not None
