"""
A small read-only document tree for interpreting response bodies.

The body is parsed with lxml and copied into plain ``Element`` and
``Text`` nodes.  The interpreter only ever looks at direct children of
a node, through ``children_of``, ``first_child_by_tag`` and
``first_text_value``; there is no XPath and no recursive search.

Element tags are kept the way they are written in the document, prefix
included (``"D:response"``), unless the document is parsed with
``resolve_namespaces=True``, in which case tags are in Clark notation
(``"{DAV:}response"``).
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

from lxml import etree
from lxml.etree import _Element

from tinydav.lib import error
from tinydav.lib.error import ParseProblem
from tinydav.lib.python_utilities import to_wire

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Text:
    value: str


@dataclass(frozen=True)
class Element:
    tag: str
    attributes: dict[str, str] = field(default_factory=dict, hash=False)
    children: tuple[Union["Element", Text], ...] = ()


Node = Union[Element, Text]


def children_of(node: Node) -> Optional[Sequence[Node]]:
    """Ordered children of an Element, None for a Text node."""
    if isinstance(node, Element):
        return node.children
    return None


def first_child_by_tag(tag: str, nodes: Sequence[Node]) -> Optional[Sequence[Node]]:
    """
    Children of the first Element in nodes whose tag is exactly tag.

    Returns None if no element matches (also when nodes is empty).
    """
    for node in nodes:
        if isinstance(node, Element) and node.tag == tag:
            return node.children
    return None


def first_text_value(nodes: Sequence[Node]) -> Optional[str]:
    """Value of the first Text node in nodes, None if there is none."""
    for node in nodes:
        if isinstance(node, Text):
            return node.value
    return None


def parse_document(
    body: Union[bytes, str],
    resolve_namespaces: bool = False,
    huge_tree: bool = False,
    url: Optional[str] = None,
) -> Element:
    """
    Parse a response body into an Element tree.

    Args:
        body: Raw response body
        resolve_namespaces: Use Clark notation tags instead of prefixed ones
        huge_tree: Allow parsing very large XML documents
        url: Where the body came from, only used in the error

    Raises:
        ParseError: If body is not well-formed XML
    """
    raw = to_wire(body)
    if not raw or not raw.strip():
        raise error.ParseError(url, [ParseProblem(1, 1, "Document is empty")])

    parser = etree.XMLParser(remove_blank_text=True, huge_tree=huge_tree)
    try:
        root = etree.fromstring(raw, parser)
    except etree.XMLSyntaxError as e:
        problems = [
            ParseProblem(entry.line, entry.column, entry.message)
            for entry in e.error_log
        ]
        if not problems:
            line, column = e.position
            problems = [ParseProblem(line, column, e.msg or str(e))]
        log.debug("body is not well-formed XML: %s", problems)
        raise error.ParseError(url, problems) from e
    return _convert(root, resolve_namespaces)


def _tag_of(elem: _Element, resolve_namespaces: bool) -> str:
    if resolve_namespaces:
        return elem.tag
    localname = etree.QName(elem).localname
    if elem.prefix:
        return "%s:%s" % (elem.prefix, localname)
    return localname


def _convert(elem: _Element, resolve_namespaces: bool) -> Element:
    has_elements = any(isinstance(c.tag, str) for c in elem)
    children: list[Node] = []

    def add_text(text: Optional[str]) -> None:
        ## whitespace between elements is layout, not content
        if text is None or (has_elements and not text.strip()):
            return
        children.append(Text(text))

    add_text(elem.text)
    for child in elem:
        ## comments and processing instructions have a non-str tag
        if isinstance(child.tag, str):
            children.append(_convert(child, resolve_namespaces))
        add_text(child.tail)

    return Element(
        tag=_tag_of(elem, resolve_namespaces),
        attributes=dict(elem.attrib),
        children=tuple(children),
    )
