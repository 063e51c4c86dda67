#!/usr/bin/env python
from typing import Dict
from typing import Optional

## Prefix used in outgoing request bodies
nsmap: Dict[str, str] = {
    "a": "DAV:",
}

## Prefix the listing interpreter expects in multistatus bodies.  Tags
## are matched on the literal qualified name, so a server answering
## with another prefix for DAV: yields an empty listing unless
## namespaces are resolved.
RESPONSE_PREFIX: str = "D"


def ns(prefix: str, tag: Optional[str] = None) -> str:
    name = "{%s}" % nsmap[prefix]
    if tag is not None:
        name = "%s%s" % (name, tag)
    return name


def qualified(tag: str, prefix: str = RESPONSE_PREFIX) -> str:
    return "%s:%s" % (prefix, tag)
