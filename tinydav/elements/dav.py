#!/usr/bin/env python
from typing import ClassVar

from .base import BaseElement
from tinydav.lib.namespace import ns


# Operations
class Propfind(BaseElement):
    tag: ClassVar[str] = ns("a", "propfind")


# Components / Data


class Prop(BaseElement):
    tag: ClassVar[str] = ns("a", "prop")


class Collection(BaseElement):
    tag: ClassVar[str] = ns("a", "collection")


# Properties
class ResourceType(BaseElement):
    tag: ClassVar[str] = ns("a", "resourcetype")


class Href(BaseElement):
    tag: ClassVar[str] = ns("a", "href")


class PropStat(BaseElement):
    tag: ClassVar[str] = ns("a", "propstat")


class MultiStatus(BaseElement):
    tag: ClassVar[str] = ns("a", "multistatus")
