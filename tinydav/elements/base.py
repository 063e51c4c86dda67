#!/usr/bin/env python
import sys
from typing import ClassVar
from typing import List
from typing import Optional
from typing import Union

from lxml import etree
from lxml.etree import _Element

from tinydav.lib.namespace import nsmap

from collections.abc import Iterable

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self


class BaseElement:
    """
    An element of a request body.  Subclasses set tag to the Clark
    name; children are added with append or +.  The listing
    interpreter also reads the tags, through localname.
    """

    tag: ClassVar[Optional[str]] = None

    def __init__(self) -> None:
        self.children: List[BaseElement] = []

    def __add__(self, other: Union[Self, Iterable[Self]]) -> Self:
        return self.append(other)

    @classmethod
    def localname(cls) -> str:
        if cls.tag is None:
            raise ValueError("Unexpected value None for cls.tag")
        return etree.QName(cls.tag).localname

    def xmlelement(self) -> _Element:
        if self.tag is None:
            raise ValueError("Unexpected value None for self.tag")
        root = etree.Element(self.tag, nsmap=nsmap)
        for c in self.children:
            root.append(c.xmlelement())
        return root

    def append(self, element: Union[Self, Iterable[Self]]) -> Self:
        if isinstance(element, Iterable):
            self.children.extend(element)
        else:
            self.children.append(element)
        return self
