#!/usr/bin/env python
import logging
import os
import sys
from types import TracebackType
from typing import Any
from typing import Dict
from typing import Optional
from typing import Tuple
from typing import Union

import requests
from requests.structures import CaseInsensitiveDict

from tinydav import __version__
from tinydav.lib import error
from tinydav.lib.python_utilities import to_normal_str
from tinydav.lib.python_utilities import to_wire
from tinydav.lib.url import URL
from tinydav.protocol.operations import WebDAVProtocol
from tinydav.protocol.types import Content
from tinydav.protocol.types import DAVRequest
from tinydav.protocol.types import DAVResponse
from tinydav.protocol.types import DirectoryEntry

from collections.abc import Mapping

if sys.version_info < (3, 11):
    from typing_extensions import Self
else:
    from typing import Self

"""
The ``DAVClient`` class does the HTTP communication with a WebDAV
server.  Every operation is one request/response exchange; the client
keeps no state between calls besides the requests session and the
connection options.

For one-off calls, the module level functions ``list_directory``,
``make_directory``, ``make_file``, ``remove`` and ``read_text_file``
set up a client, do the exchange and close it again.

``get_davclient`` will return a DAVClient object, with connection
options taken from the parameters given, environmental variables or a
configuration file.
"""

log = logging.getLogger(__name__)

CONNKEYS = set(
    (
        "proxy",
        "timeout",
        "headers",
        "huge_tree",
        "ssl_verify_cert",
        "ssl_cert",
        "strict",
        "resolve_namespaces",
    )
)


class DAVClient:
    """
    Basic client for WebDAV.  Each method takes the full URL of the
    resource to work on, there is no base URL.

    Failures are raised as exceptions: a ``TransportError`` subclass
    (``PropfindError``, ``MkcolError``, ``PutError``, ``DeleteError``,
    ``GetError``) when the request fails or the status is not 2xx, and
    ``ParseError`` when a listing body is not well-formed XML.
    """

    proxy: Optional[str] = None
    huge_tree: bool = False

    def __init__(
        self,
        proxy: Optional[str] = None,
        timeout: Optional[float] = None,
        ssl_verify_cert: Union[bool, str] = True,
        ssl_cert: Union[str, Tuple[str, str], None] = None,
        headers: Optional[Mapping[str, str]] = None,
        huge_tree: bool = False,
        strict: bool = False,
        resolve_namespaces: bool = False,
    ) -> None:
        """
        Sets up a requests session.  No connection is made until the
        first request.

        Args:
          proxy: A string defining a proxy server: `scheme://hostname:port`. Scheme defaults to http, port defaults to 8080.
          timeout: passed to requests.  Without it, the requests default applies.
          ssl_verify_cert: can be the path of a CA-bundle or False.
          ssl_cert: client side certificate, passed to requests.
          headers: extra headers sent with every request.
          huge_tree: boolean, enable XMLParser huge_tree to handle big listings, beware of security issues, see : https://lxml.de/api/lxml.etree.XMLParser-class.html
          strict: listing entries without any resourcetype information are given as Unknown rather than File.
          resolve_namespaces: match DAV: elements in listings by namespace rather than by the literal "D:" prefix.
        """
        self.session = requests.Session()

        if proxy is not None:
            _proxy = proxy
            # requests library expects the proxy url to have a scheme
            if "://" not in proxy:
                _proxy = "http://" + proxy

            # add a port if one is not specified
            p = _proxy.split(":")
            if len(p) == 2:
                _proxy += ":8080"
            log.debug("init - proxy: %s" % (_proxy))

            self.proxy = _proxy

        # Build global headers
        self.headers = CaseInsensitiveDict(
            {
                "User-Agent": "tinydav/" + __version__,
            }
        )
        self.headers.update(headers or {})

        self.timeout = timeout
        self.ssl_verify_cert = ssl_verify_cert
        self.ssl_cert = ssl_cert
        self.huge_tree = huge_tree
        self.protocol = WebDAVProtocol(
            strict=strict,
            resolve_namespaces=resolve_namespaces,
            huge_tree=huge_tree,
        )

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: Optional[BaseException] = None,
        exc_value: Optional[BaseException] = None,
        traceback: Optional[TracebackType] = None,
    ) -> None:
        self.close()

    def close(self) -> None:
        """
        Closes the DAVClient's session object
        """
        self.session.close()

    def list_directory(self, url: Union[str, URL]) -> list[DirectoryEntry]:
        """
        List the members of a collection.

        Sends a PROPFIND with Depth: 1 asking for resourcetype.

        Args:
            url: fully qualified URL of the collection

        Returns:
            File and Directory entries with fully qualified URLs, in
            the order the server gave them.  The collection itself is
            not included.  Responses without an href are left out.
        """
        request = self.protocol.list_request(str(url))
        response = self.request(request)
        if response.ok and not response.is_multistatus:
            error.weirdness(
                f"expected 207 Multi-Status for PROPFIND, got {response.status}"
            )
        content_type = response.headers.get("Content-Type", "")
        if response.ok and content_type and "xml" not in content_type:
            error.weirdness(f"Unexpected content type: {content_type}")
        return self.protocol.parse_list_response(request, response)

    def make_directory(self, url: Union[str, URL]) -> str:
        """
        Send a MKCOL request creating a collection at url.

        Returns:
            url
        """
        request = self.protocol.mkcol_request(str(url))
        self.protocol.check_response(request, self.request(request))
        return str(url)

    def make_file(
        self,
        url: Union[str, URL],
        body: Union[bytes, str],
        content_type: str = "application/octet-stream",
    ) -> str:
        """
        Send a PUT request storing body at url.

        Args:
            url: fully qualified URL of the resource
            body: the content; str is sent UTF-8 encoded
            content_type: Content-Type header for the body

        Returns:
            url
        """
        request = self.protocol.put_request(str(url), body, content_type)
        self.protocol.check_response(request, self.request(request))
        return str(url)

    def remove(self, url: Union[str, URL]) -> str:
        """
        Send a delete request.

        Returns:
            url
        """
        request = self.protocol.delete_request(str(url))
        self.protocol.check_response(request, self.request(request))
        return str(url)

    def read_text_file(self, url: Union[str, URL]) -> Content:
        """
        GET a resource and return its body as text.
        """
        request = self.protocol.get_request(str(url))
        return self.protocol.parse_read_response(request, self.request(request))

    def request(self, dav_request: DAVRequest) -> DAVResponse:
        """
        Actually sends the request.  Anything requests raises is turned
        into the TransportError subclass for the method.  The status is
        not checked here.
        """
        combined_headers = self.headers.copy()
        combined_headers.update(dav_request.headers)
        method = dav_request.method.value
        url = dav_request.url

        log.debug(
            "sending request - method={0}, url={1}, headers={2}\nbody:\n{3}".format(
                method, url, combined_headers, to_normal_str(dav_request.body)
            )
        )

        try:
            ## urlsplit raises ValueError on a malformed URL
            proxies = None
            if self.proxy is not None:
                proxies = {URL(url).scheme: self.proxy}
                log.debug("using proxy - %s" % (proxies))
            r = self.session.request(
                method,
                url,
                data=dav_request.body,
                headers=combined_headers,
                proxies=proxies,
                timeout=self.timeout,
                verify=self.ssl_verify_cert,
                cert=self.ssl_cert,
            )
        except (requests.RequestException, ValueError) as e:
            log.debug("request failed: %s", e)
            raise error.exception_by_method[method.lower()](
                url=url, reason=str(e) or e.__class__.__name__
            ) from e
        log.debug("server responded with %i %s" % (r.status_code, r.reason))

        response = DAVResponse(
            status=r.status_code,
            headers=CaseInsensitiveDict(r.headers),
            body=r.content or b"",
            reason=r.reason or "",
        )
        log.debug("response headers: " + str(response.headers))
        log.debug(response.body)

        if error.debug_dump_communication:
            self._dump_communication(dav_request, combined_headers, response)

        return response

    def _dump_communication(
        self,
        dav_request: DAVRequest,
        headers: Mapping[str, str],
        response: DAVResponse,
    ) -> None:
        import datetime
        from tempfile import NamedTemporaryFile

        with NamedTemporaryFile(prefix="tinydavcomm", delete=False) as commlog:
            commlog.write(b"=" * 80 + b"\n")
            commlog.write(f"{datetime.datetime.now():%FT%H:%M:%S}".encode("utf-8"))
            commlog.write(b"\n====>\n")
            commlog.write(
                f"{dav_request.method.value} {dav_request.url}\n".encode("utf-8")
            )
            commlog.write(b"\n".join(to_wire(f"{x}: {headers[x]}") for x in headers))
            commlog.write(b"\n\n")
            commlog.write(dav_request.body or b"")
            commlog.write(b"\n<====\n")
            commlog.write(f"{response.status} {response.reason}\n".encode("utf-8"))
            commlog.write(
                b"\n".join(
                    to_wire(f"{x}: {response.headers[x]}") for x in response.headers
                )
            )
            commlog.write(b"\n\n")
            commlog.write(response.body)
            commlog.write(b"\n")


def list_directory(url: Union[str, URL], **config_data) -> list[DirectoryEntry]:
    """One-shot DAVClient.list_directory, config_data goes to DAVClient."""
    with DAVClient(**config_data) as client:
        return client.list_directory(url)


def make_directory(url: Union[str, URL], **config_data) -> str:
    """One-shot DAVClient.make_directory."""
    with DAVClient(**config_data) as client:
        return client.make_directory(url)


def make_file(
    url: Union[str, URL],
    body: Union[bytes, str],
    content_type: str = "application/octet-stream",
    **config_data,
) -> str:
    """One-shot DAVClient.make_file."""
    with DAVClient(**config_data) as client:
        return client.make_file(url, body, content_type)


def remove(url: Union[str, URL], **config_data) -> str:
    """One-shot DAVClient.remove."""
    with DAVClient(**config_data) as client:
        return client.remove(url)


def read_text_file(url: Union[str, URL], **config_data) -> Content:
    """One-shot DAVClient.read_text_file."""
    with DAVClient(**config_data) as client:
        return client.read_text_file(url)


def _coerce(key: str, value: Any) -> Any:
    """Environment and config files give strings, DAVClient wants types"""
    if not isinstance(value, str):
        return value
    if key == "timeout":
        return float(value)
    if key in ("huge_tree", "strict", "resolve_namespaces", "ssl_verify_cert"):
        if value.lower() in ("0", "false", "no", "off", ""):
            return False
        if value.lower() in ("1", "true", "yes", "on"):
            return True
        ## ssl_verify_cert may also be the path to a CA bundle
        if key == "ssl_verify_cert":
            return value
        raise ValueError(f"{key} should be a boolean, got {value!r}")
    return value


def _conn_params(source: Mapping[str, Any], prefix: str) -> Dict[str, Any]:
    conf = {}
    for key in source:
        if not key.lower().startswith(prefix):
            continue
        param = key[len(prefix) :].lower()
        if param in CONNKEYS:
            conf[param] = _coerce(param, source[key])
        elif not param.startswith("config"):
            log.warning(f"ignoring unknown connection parameter {key}")
    return conf


def get_davclient(
    check_config_file: bool = True,
    config_file: Optional[str] = None,
    config_section: Optional[str] = None,
    environment: bool = True,
    **config_data,
) -> DAVClient:
    """
    This function will yield a DAVClient object.  It will not try to
    connect.  It will read connection options from various sources,
    dependent on the parameters given, in this order:

    * Data from the parameters given
    * Environment variables prepended with `TINYDAV_`, like `TINYDAV_TIMEOUT`, `TINYDAV_PROXY`, `TINYDAV_SSL_VERIFY_CERT`.
    * Environment variables `TINYDAV_CONFIG_FILE` and `TINYDAV_CONFIG_SECTION` will be honored if environment is set
    * Configuration file, JSON or YAML, see ``tinydav.config``

    The first source giving any options wins.  If none does, a
    DAVClient with default options is returned.
    """
    if config_data:
        return DAVClient(**config_data)

    if environment:
        conf = _conn_params(os.environ, "tinydav_")
        if conf:
            return DAVClient(**conf)
        if not config_file:
            config_file = os.environ.get("TINYDAV_CONFIG_FILE")
        if not config_section:
            config_section = os.environ.get("TINYDAV_CONFIG_SECTION")

    if check_config_file:
        from . import config

        cfg = config.read_config(config_file)
        if cfg:
            section = config.config_section(cfg, config_section or "default")
            conn_params = _conn_params(section, "tinydav_")
            if conn_params:
                return DAVClient(**conn_params)

    return DAVClient()
