#!/usr/bin/env python
import logging
import os
from collections import defaultdict
from dataclasses import dataclass
from typing import Dict
from typing import List
from typing import Optional
from typing import Type

from tinydav import __version__

## Environmental variables prepended with "PYTHON_TINYDAV" are used for debug purposes,
## environmental variables prepended with "TINYDAV_" are for connection parameters
debug_dump_communication = os.environ.get("PYTHON_TINYDAV_COMMDUMP", False)
## one of DEBUG_PDB, DEBUG, DEVELOPMENT, PRODUCTION
debugmode = os.environ.get("PYTHON_TINYDAV_DEBUGMODE")
if not debugmode:
    if "dev" in __version__:
        debugmode = "DEVELOPMENT"
    else:
        debugmode = "PRODUCTION"

log = logging.getLogger("tinydav")
if debugmode.startswith("DEBUG"):
    log.setLevel(logging.DEBUG)
else:
    log.setLevel(logging.WARNING)


def weirdness(*reasons):
    from tinydav.lib.debug import xmlstring

    reason = " : ".join([xmlstring(x) for x in reasons])
    log.warning(f"Deviation from expectations found: {reason}")
    if debugmode == "DEBUG_PDB":
        log.error(f"Dropping into debugger due to {reason}")
        import pdb

        pdb.set_trace()


class DAVError(Exception):
    url: Optional[str] = None
    reason: str = "no reason"

    def __init__(self, url: Optional[str] = None, reason: Optional[str] = None) -> None:
        if url:
            self.url = url
        if reason:
            self.reason = reason

    def __str__(self) -> str:
        return "%s at '%s', reason %s" % (
            self.__class__.__name__,
            self.url,
            self.reason,
        )


class TransportError(DAVError):
    """
    The HTTP exchange failed: the connection could not be made, it
    timed out, or the server answered with a non-2xx status.  The
    status property holds the HTTP status when there was one.  The
    underlying requests exception, if any, is chained as __cause__.
    """

    status: Optional[int] = None

    def __init__(
        self,
        url: Optional[str] = None,
        reason: Optional[str] = None,
        status: Optional[int] = None,
    ) -> None:
        super().__init__(url, reason)
        self.status = status


class PropfindError(TransportError):
    pass


class MkcolError(TransportError):
    pass


class PutError(TransportError):
    pass


class DeleteError(TransportError):
    pass


class GetError(TransportError):
    pass


@dataclass(frozen=True)
class ParseProblem:
    """One entry from the XML parser's error log."""

    line: int
    column: int
    message: str

    def __str__(self) -> str:
        return "line %i, column %i: %s" % (self.line, self.column, self.message)


class ParseError(DAVError):
    """
    The server delivered a body that is not well-formed XML.  The
    problems property lists every failure the parser reported.
    """

    problems: List[ParseProblem]

    def __init__(
        self,
        url: Optional[str] = None,
        problems: Optional[List[ParseProblem]] = None,
    ) -> None:
        self.problems = list(problems or [])
        reason = "; ".join(str(p) for p in self.problems) or None
        super().__init__(url, reason)


exception_by_method: Dict[str, Type[TransportError]] = defaultdict(
    lambda: TransportError
)
for method in (
    "delete",
    "put",
    "mkcol",
    "propfind",
    "get",
):
    exception_by_method[method] = locals()[method[0].upper() + method[1:] + "Error"]
