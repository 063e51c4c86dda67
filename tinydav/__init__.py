#!/usr/bin/env python
import logging

__version__ = "0.3.0"

from .davclient import DAVClient
from .davclient import get_davclient
from .davclient import list_directory
from .davclient import make_directory
from .davclient import make_file
from .davclient import read_text_file
from .davclient import remove
from .lib.error import DAVError
from .lib.error import ParseError
from .lib.error import TransportError
from .protocol.types import Content
from .protocol.types import Directory
from .protocol.types import File
from .protocol.types import Unknown

# Silence notification of no default logging handler
log = logging.getLogger("tinydav")


class NullHandler(logging.Handler):
    def emit(self, record) -> None:
        pass


log.addHandler(NullHandler())

__all__ = [
    "__version__",
    "DAVClient",
    "get_davclient",
    "list_directory",
    "make_directory",
    "make_file",
    "remove",
    "read_text_file",
    "File",
    "Directory",
    "Unknown",
    "Content",
    "DAVError",
    "TransportError",
    "ParseError",
]
