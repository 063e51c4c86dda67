"""
Pure functions for building WebDAV XML request bodies.

All functions in this module are pure - they take data in and return XML out,
with no side effects or I/O.
"""
from typing import List
from typing import Optional

from lxml import etree

from tinydav.elements import dav
from tinydav.elements.base import BaseElement

XML_DECLARATION = b'<?xml version="1.0"?>'

_PROPS = {
    "resourcetype": dav.ResourceType,
}


def build_propfind_body(props: Optional[List[str]] = None) -> bytes:
    """
    Build PROPFIND request body XML.

    Args:
        props: List of property names to retrieve.  Defaults to
               resourcetype, which is all a directory listing needs.

    Returns:
        UTF-8 encoded XML bytes, for the default:
        <?xml version="1.0"?><a:propfind xmlns:a="DAV:"><a:prop><a:resourcetype/></a:prop></a:propfind>
    """
    if props is None:
        props = ["resourcetype"]
    prop_elements = [_prop_name_to_element(name) for name in props]
    propfind = dav.Propfind() + (dav.Prop() + prop_elements)
    return XML_DECLARATION + etree.tostring(propfind.xmlelement(), encoding="utf-8")


def _prop_name_to_element(name: str) -> BaseElement:
    try:
        return _PROPS[name.lower()]()
    except KeyError:
        raise ValueError("unsupported property %r" % name) from None
