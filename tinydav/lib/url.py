#!/usr/bin/env python
import sys
from typing import cast
from typing import Optional
from typing import Union
from urllib.parse import SplitResult
from urllib.parse import urlsplit

from tinydav.lib.python_utilities import to_unicode

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self


class URL:
    """
    This class is for wrapping URLs into objects.  It's used
    internally in the library, end users should not need to know
    anything about this class.  All methods that accept URLs can be
    fed either with a URL object, a string or a urlsplit result.

    The string is only split into components when some component is
    asked for.  Splitting is done with urlsplit rather than urlparse,
    so that a ";" in the last path segment stays part of the path.

    Addresses found in a multistatus body may be one out of two:

    1) a fully qualified URL, i.e.
    "https://dav.example.com/remote.php/dav/files/someuser/notes/"

    2) an absolute path, i.e. "/remote.php/dav/files/someuser/notes/"

    Listings always hand out fully qualified URLs, built by taking
    the URL that was requested and replacing its path, see
    ``with_path``.
    """

    def __init__(self, url: Union[str, SplitResult]) -> None:
        if isinstance(url, SplitResult):
            self.url_parsed: Optional[SplitResult] = url
            self.url_raw = None
        else:
            self.url_raw = url
            self.url_parsed = None

    # Will return url if url is already a URL object, else will
    # instantiate a new URL object
    @classmethod
    def objectify(cls, url: Union[Self, str, SplitResult, None]) -> Optional["URL"]:
        if url is None or isinstance(url, URL):
            return url
        else:
            return URL(url)

    # To deal with the properties of the SplitResult class
    def __getattr__(self, attr: str):
        if "url_parsed" not in vars(self):
            raise AttributeError
        if self.url_parsed is None:
            self.url_parsed = urlsplit(self.url_raw)
        return getattr(self.url_parsed, attr)

    # returns the url in text format
    def __str__(self) -> str:
        return self.__unicode__()

    # returns the url in text format
    def __unicode__(self) -> str:
        if self.url_raw is None:
            if self.url_parsed is None:
                raise ValueError("Unexpected value None for self.url_parsed")

            self.url_raw = self.url_parsed.geturl()
        return to_unicode(self.url_raw)

    def __repr__(self) -> str:
        return "URL(%s)" % str(self)

    def is_absolute(self) -> bool:
        """
        True if the URL could be split and carries both a scheme and a
        network location.  Anything else (a bare path, a relative
        reference, an unparseable string) is not an absolute URL.
        """
        try:
            self.port  # raises ValueError on a malformed port
            return bool(self.scheme and self.netloc)
        except ValueError:
            return False

    def with_path(self, path: str) -> "URL":
        """
        Returns a new URL with the scheme, network location, query and
        fragment of self, and the given path.  The path is put in as
        it is; no quoting, unquoting or joining is done.
        """
        parsed = cast(SplitResult, self.url_parsed or urlsplit(self.url_raw))
        return URL(parsed._replace(path=path))

