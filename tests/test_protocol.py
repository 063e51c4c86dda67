"""
Unit tests for Sans-I/O protocol layer.

These tests verify protocol logic without any HTTP mocking required.
All tests are pure - they test data transformations only.
"""

import pytest

from tinydav.lib import error
from tinydav.protocol import (
    # Types
    DAVMethod,
    DAVRequest,
    DAVResponse,
    Content,
    Directory,
    File,
    Unknown,
    # Builders
    build_propfind_body,
    # Parsers
    interpret_multistatus,
    parse_document,
    parse_listing,
    response_to_entry,
    # Protocol
    WebDAVProtocol,
)
from tinydav.protocol.xml_parsers import LITERAL_TAGS

ROOT = "https://host/dav/"

LISTING = b"""<?xml version="1.0" encoding="utf-8"?>
<D:multistatus xmlns:D="DAV:">
    <D:response>
        <D:href>/dav/</D:href>
        <D:propstat>
            <D:prop><D:resourcetype><D:collection/></D:resourcetype></D:prop>
            <D:status>HTTP/1.1 200 OK</D:status>
        </D:propstat>
    </D:response>
    <D:response>
        <D:href>/dav/sub/</D:href>
        <D:propstat>
            <D:prop><D:resourcetype><D:collection/></D:resourcetype></D:prop>
            <D:status>HTTP/1.1 200 OK</D:status>
        </D:propstat>
    </D:response>
    <D:response>
        <D:href>/dav/notes.txt</D:href>
        <D:propstat>
            <D:prop><D:resourcetype/></D:prop>
            <D:status>HTTP/1.1 200 OK</D:status>
        </D:propstat>
    </D:response>
</D:multistatus>"""


def response(href, collection=False, propstat=True):
    """A D:response element as text, for assembling test bodies"""
    if href is None:
        href_xml = ""
    else:
        href_xml = "<D:href>%s</D:href>" % href
    resourcetype = "<D:collection/>" if collection else ""
    propstat_xml = ""
    if propstat:
        propstat_xml = (
            "<D:propstat><D:prop><D:resourcetype>%s</D:resourcetype></D:prop>"
            "<D:status>HTTP/1.1 200 OK</D:status></D:propstat>" % resourcetype
        )
    return "<D:response>%s%s</D:response>" % (href_xml, propstat_xml)


def multistatus(*responses):
    return (
        '<?xml version="1.0"?><D:multistatus xmlns:D="DAV:">%s</D:multistatus>'
        % "".join(responses)
    ).encode("utf-8")


class TestDAVTypes:
    """Test core DAV types."""

    def test_dav_request_immutable(self):
        """DAVRequest should be immutable (frozen dataclass)."""
        request = DAVRequest(method=DAVMethod.GET, url="https://example.com/")
        with pytest.raises(AttributeError):
            request.url = "https://other.com/"

    def test_dav_response_ok(self):
        """ok property should return True for 2xx status codes."""
        assert DAVResponse(status=200, headers={}, body=b"").ok
        assert DAVResponse(status=201, headers={}, body=b"").ok
        assert DAVResponse(status=207, headers={}, body=b"").ok
        assert not DAVResponse(status=301, headers={}, body=b"").ok
        assert not DAVResponse(status=404, headers={}, body=b"").ok
        assert not DAVResponse(status=500, headers={}, body=b"").ok

    def test_dav_response_text_charset(self):
        body = "blåbærsyltetøy".encode("latin-1")
        resp = DAVResponse(
            status=200,
            headers={"content-type": 'text/plain; charset="iso-8859-1"'},
            body=body,
        )
        assert resp.text == "blåbærsyltetøy"
        assert DAVResponse(status=200, headers={}, body=b"abc").text == "abc"

    def test_entries_compare_by_kind_and_path(self):
        assert File("https://host/a") == File("https://host/a")
        assert File("https://host/a") != Directory("https://host/a")
        assert Unknown("https://host/a") != File("https://host/a")


class TestXMLBuilders:
    """Test XML building functions."""

    def test_build_propfind_body_resourcetype(self):
        """The listing body is sent byte for byte as servers expect it."""
        assert build_propfind_body(["resourcetype"]) == (
            b'<?xml version="1.0"?><a:propfind xmlns:a="DAV:">'
            b"<a:prop><a:resourcetype/></a:prop></a:propfind>"
        )

    def test_build_propfind_body_default(self):
        assert build_propfind_body() == build_propfind_body(["resourcetype"])

    def test_build_propfind_body_unknown_prop(self):
        with pytest.raises(ValueError):
            build_propfind_body(["getetag"])


class TestXMLParsers:
    """Test the multistatus interpreter."""

    def test_parse_listing(self):
        entries = parse_listing(LISTING, ROOT)
        assert entries == [
            Directory("https://host/dav/sub/"),
            File("https://host/dav/notes.txt"),
        ]

    def test_collection_marks_directory(self):
        body = multistatus(
            response("/dav/"),
            response("/dav/a/", collection=True),
            response("/dav/b"),
        )
        assert parse_listing(body, ROOT) == [
            Directory("https://host/dav/a/"),
            File("https://host/dav/b"),
        ]

    def test_order_preserved(self):
        names = ["/dav/%s" % n for n in ("zeta", "alpha", "mid", "beta")]
        body = multistatus(response("/dav/"), *[response(n) for n in names])
        assert [e.path for e in parse_listing(body, ROOT)] == [
            "https://host" + n for n in names
        ]

    def test_first_child_discarded(self):
        """The first child is left out even if it is a good response"""
        body = multistatus(
            response("/dav/x", collection=True),
            response("/a"),
            response("/b"),
        )
        assert parse_listing(body, ROOT) == [
            File("https://host/a"),
            File("https://host/b"),
        ]

    def test_first_child_discarded_when_not_a_response(self):
        body = multistatus(
            "<D:sync-token>abc</D:sync-token>",
            response("/a"),
        )
        assert parse_listing(body, ROOT) == [File("https://host/a")]

    def test_missing_href_skipped(self):
        body = multistatus(
            response("/dav/"),
            response(None),
            response("/dav/after"),
        )
        assert parse_listing(body, ROOT) == [File("https://host/dav/after")]

    def test_empty_href_skipped(self):
        body = multistatus(
            response("/dav/"),
            "<D:response><D:href/></D:response>",
            "<D:response><D:href></D:href></D:response>",
            "<D:response><D:href><D:x>/dav/nested</D:x></D:href></D:response>",
            response("/dav/after"),
        )
        assert parse_listing(body, ROOT) == [File("https://host/dav/after")]

    def test_blank_href_taken_as_path(self):
        body = multistatus(
            response("/dav/"),
            "<D:response><D:href>   </D:href></D:response>",
        )
        assert parse_listing(body, ROOT) == [File("https://host/   ")]

    def test_non_element_children_skipped(self):
        body = multistatus(response("/dav/"), "stray text", response("/dav/a"))
        assert parse_listing(body, ROOT) == [File("https://host/dav/a")]

    def test_duplicates_kept(self):
        body = multistatus(response("/dav/"), response("/dav/a"), response("/dav/a"))
        assert parse_listing(body, ROOT) == [
            File("https://host/dav/a"),
            File("https://host/dav/a"),
        ]

    def test_url_normalization(self):
        body = multistatus(response("/dav/"), response("/dav/sub/", collection=True))
        assert parse_listing(body, "https://host/dav/") == [
            Directory("https://host/dav/sub/")
        ]

    def test_url_normalization_keeps_port_and_scheme(self):
        body = multistatus(response("/"), response("/files/report%20final.pdf"))
        assert parse_listing(body, "http://localhost:8080/files/") == [
            File("http://localhost:8080/files/report%20final.pdf")
        ]

    def test_absolute_href_reduced_to_path(self):
        body = multistatus(
            response("/dav/"),
            response("http://internal.example:81/dav/a.txt"),
        )
        assert parse_listing(body, ROOT) == [File("https://host/dav/a.txt")]

    def test_root_query_is_kept(self):
        body = multistatus(response("/dav/"), response("/dav/a"))
        assert parse_listing(body, "https://host/dav/?token=1") == [
            File("https://host/dav/a?token=1")
        ]

    def test_root_not_absolute(self):
        """Every entry is dropped, no error is raised"""
        body = multistatus(response("/dav/"), response("/dav/a"), response("/dav/b"))
        assert parse_listing(body, "/dav/") == []
        assert parse_listing(body, "http://[::1/dav/") == []

    def test_missing_resourcetype_is_file(self):
        body = multistatus(response("/dav/"), response("/dav/a", propstat=False))
        assert parse_listing(body, ROOT) == [File("https://host/dav/a")]

    def test_strict_mode_unknown(self):
        body = multistatus(
            response("/dav/"),
            response("/dav/a", propstat=False),
            response("/dav/b"),
            response("/dav/c/", collection=True),
        )
        assert parse_listing(body, ROOT, strict=True) == [
            Unknown("https://host/dav/a"),
            File("https://host/dav/b"),
            Directory("https://host/dav/c/"),
        ]

    def test_empty_listing(self):
        assert parse_listing(multistatus(response("/dav/")), ROOT) == []
        assert parse_listing(multistatus(), ROOT) == []

    def test_no_multistatus(self):
        body = b'<?xml version="1.0"?><D:error xmlns:D="DAV:"/>'
        assert parse_listing(body, ROOT) == []

    def test_other_prefix_not_matched(self):
        body = (
            b'<?xml version="1.0"?><d:multistatus xmlns:d="DAV:">'
            b"<d:response><d:href>/dav/</d:href></d:response>"
            b"<d:response><d:href>/dav/a</d:href></d:response>"
            b"</d:multistatus>"
        )
        assert parse_listing(body, ROOT) == []

    def test_other_prefix_with_resolved_namespaces(self):
        body = (
            b'<?xml version="1.0"?><d:multistatus xmlns:d="DAV:">'
            b"<d:response><d:href>/dav/</d:href></d:response>"
            b"<d:response><d:href>/dav/a/</d:href><d:propstat><d:prop>"
            b"<d:resourcetype><d:collection/></d:resourcetype>"
            b"</d:prop></d:propstat></d:response>"
            b"<d:response><d:href>/dav/b</d:href></d:response>"
            b"</d:multistatus>"
        )
        assert parse_listing(body, ROOT, resolve_namespaces=True) == [
            Directory("https://host/dav/a/"),
            File("https://host/dav/b"),
        ]

    def test_malformed_xml(self):
        with pytest.raises(error.ParseError) as exc_info:
            parse_listing(b'<?xml version="1.0"?><D:multistatus xmlns:D="DAV:">', ROOT)
        assert exc_info.value.problems
        assert exc_info.value.url == ROOT

    def test_html_body_is_parse_error(self):
        with pytest.raises(error.ParseError):
            parse_listing(b"<html><body>Bad gateway<br></body></html>", ROOT)

    def test_interpret_multistatus(self):
        document = parse_document(LISTING)
        assert interpret_multistatus(document, ROOT) == parse_listing(LISTING, ROOT)

    def test_response_to_entry(self):
        document = parse_document(LISTING)
        responses = document.children
        assert response_to_entry(responses[0], ROOT) == Directory(ROOT)
        assert response_to_entry(responses[2], ROOT, tags=LITERAL_TAGS) == File(
            "https://host/dav/notes.txt"
        )


class TestWebDAVProtocol:
    """Test request building and response checking."""

    def setup_method(self):
        self.protocol = WebDAVProtocol()

    def test_list_request(self):
        request = self.protocol.list_request(ROOT)
        assert request.method == DAVMethod.PROPFIND
        assert request.url == ROOT
        assert request.headers == {"Depth": "1", "Content-Type": "text/xml"}
        assert request.body == build_propfind_body(["resourcetype"])

    def test_mkcol_and_delete_requests(self):
        for build, method in (
            (self.protocol.mkcol_request, DAVMethod.MKCOL),
            (self.protocol.delete_request, DAVMethod.DELETE),
            (self.protocol.get_request, DAVMethod.GET),
        ):
            request = build(ROOT)
            assert request.method == method
            assert request.headers == {}
            assert request.body is None

    def test_put_request(self):
        request = self.protocol.put_request(ROOT + "a.txt", "blåbær", "text/plain")
        assert request.method == DAVMethod.PUT
        assert request.headers == {"Content-Type": "text/plain"}
        assert request.body == "blåbær".encode("utf-8")

    def test_put_request_bytes_untouched(self):
        request = self.protocol.put_request(ROOT + "a.bin", b"a\nb\r\n")
        assert request.body == b"a\nb\r\n"
        assert request.headers["Content-Type"] == "application/octet-stream"

    def test_check_response_raises_per_method(self):
        request = self.protocol.mkcol_request(ROOT + "new/")
        resp = DAVResponse(status=405, headers={}, body=b"", reason="Method Not Allowed")
        with pytest.raises(error.MkcolError) as exc_info:
            self.protocol.check_response(request, resp)
        assert isinstance(exc_info.value, error.TransportError)
        assert exc_info.value.status == 405
        assert exc_info.value.url == ROOT + "new/"
        assert exc_info.value.reason == "405 Method Not Allowed"

    def test_check_response_expected_status(self):
        request = self.protocol.delete_request(ROOT)
        resp = DAVResponse(status=204, headers={}, body=b"")
        self.protocol.check_response(request, resp)
        with pytest.raises(error.DeleteError):
            self.protocol.check_response(request, resp, expected_status=[200])

    def test_parse_list_response(self):
        request = self.protocol.list_request(ROOT)
        resp = DAVResponse(status=207, headers={}, body=LISTING)
        assert self.protocol.parse_list_response(request, resp) == [
            Directory("https://host/dav/sub/"),
            File("https://host/dav/notes.txt"),
        ]

    def test_parse_list_response_error_status(self):
        """A failed status is a transport error even if the body is XML"""
        request = self.protocol.list_request(ROOT)
        resp = DAVResponse(status=404, headers={}, body=LISTING)
        with pytest.raises(error.PropfindError):
            self.protocol.parse_list_response(request, resp)

    def test_parse_list_response_strict(self):
        protocol = WebDAVProtocol(strict=True)
        request = protocol.list_request(ROOT)
        body = multistatus(response("/dav/"), response("/dav/a", propstat=False))
        resp = DAVResponse(status=207, headers={}, body=body)
        assert protocol.parse_list_response(request, resp) == [
            Unknown("https://host/dav/a")
        ]

    def test_parse_read_response(self):
        request = self.protocol.get_request(ROOT + "notes.txt")
        resp = DAVResponse(status=200, headers={}, body=b"remember the milk\n")
        assert self.protocol.parse_read_response(request, resp) == Content(
            path=ROOT + "notes.txt", data="remember the milk\n"
        )
