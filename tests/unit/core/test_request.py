"""
Unit tests for the fluent request builder.
"""

import io
import json
from urllib.parse import parse_qs, urlsplit

from unittest.mock import patch

import pytest
import requests
from requests.cookies import create_cookie

from reqchain.core.request import Request, encode_values
from reqchain.infrastructure.http import StandardClient
from reqchain.core.sources import NamedReader
from reqchain.exceptions import (
    EmptyFieldListError,
    InvalidRequestError,
    MissingFileIdentityError,
    RequestIOError,
    SerializationError,
    TransportError,
    TypeMismatchError,
)


class FailingReader(io.RawIOBase):
    """Byte source whose reads always fail."""

    def readable(self):
        return True

    def readinto(self, buffer):
        raise OSError("disk went away")


@pytest.mark.unit
class TestQueryAndForm:
    """Test query strings and urlencoded bodies."""

    def test_query_round_trips(self, recording_client):
        params = {"q": ["a b", "c&d"], "page": "2", "emoji": "é"}

        Request(recording_client).with_query(params).get("http://example.test/search")

        query = urlsplit(recording_client.last.url).query
        assert parse_qs(query) == {"q": ["a b", "c&d"], "page": ["2"], "emoji": ["é"]}

    def test_query_pairs_keep_order(self):
        assert encode_values([("b", "1"), ("a", "2"), ("b", "3")]) == "b=1&a=2&b=3"

    def test_query_uses_plus_for_spaces(self):
        assert encode_values({"q": "hello world"}) == "q=hello+world"

    def test_query_replaces_uri_query(self, recording_client):
        Request(recording_client).with_query({"a": "1"}).get("http://example.test/x?old=1")

        assert recording_client.last.url == "http://example.test/x?a=1"

    def test_uri_query_kept_without_with_query(self, recording_client):
        Request(recording_client).get("http://example.test/x?keep=1")

        assert recording_client.last.url == "http://example.test/x?keep=1"

    def test_empty_query_clears_uri_query(self, recording_client):
        Request(recording_client).with_query({}).get("http://example.test/x?old=1")

        assert recording_client.last.url == "http://example.test/x"

    def test_with_form(self, recording_client):
        builder = Request(recording_client).with_form({"name": "Jane Doe", "tag": ["a", "b"]})
        builder.post("http://example.test/form")

        assert builder.content_type == "application/x-www-form-urlencoded"
        assert recording_client.last.headers["Content-Type"] == "application/x-www-form-urlencoded"
        assert recording_client.last_body == b"name=Jane+Doe&tag=a&tag=b"

    def test_with_query_and_form(self, recording_client):
        Request(recording_client).with_query_and_form({"v": "1"}, {"k": "x"}).post(
            "http://example.test/both"
        )

        assert recording_client.last.url == "http://example.test/both?v=1"
        assert recording_client.last_body == b"k=x"


@pytest.mark.unit
class TestJsonBody:
    """Test JSON bodies."""

    def test_with_json(self, recording_client):
        data = {"name": "widget", "tags": ["x", "y"], "price": 9.5, "active": True}

        builder = Request(recording_client).with_json(data)
        builder.put("http://example.test/items/1")

        assert builder.error is None
        assert recording_client.last.headers["Content-Type"] == "application/json"
        assert json.loads(recording_client.last_body) == data

    def test_unserializable_keeps_previous_body(self, recording_client):
        builder = Request(recording_client).with_form({"a": "1"})
        previous_body = builder.body

        builder.with_json({"when": object()})

        assert isinstance(builder.error, SerializationError)
        assert builder.body is previous_body
        assert builder.content_type == "application/x-www-form-urlencoded"

    def test_nan_is_a_serialization_error(self, recording_client):
        builder = Request(recording_client).with_json({"value": float("nan")})

        assert isinstance(builder.error, SerializationError)
        assert builder.body is None
        assert builder.content_type == ""


@pytest.mark.unit
class TestRawFile:
    """Test verbatim file bodies."""

    def test_with_file_sends_bytes_verbatim(self, recording_client, text_file):
        handle = open(text_file, "rb")

        builder = Request(recording_client).with_file(handle)
        builder.post("http://example.test/upload")

        assert builder.content_type == "binary/octet-stream"
        assert recording_client.last.headers["Content-Type"] == "binary/octet-stream"
        assert recording_client.last_body == text_file.read_bytes()
        assert handle.closed

    def test_with_file_accepts_in_memory_stream(self, recording_client):
        stream = io.BytesIO(b"\x00\x01\x02")

        Request(recording_client).with_file(stream).post("http://example.test/upload")

        assert recording_client.last_body == b"\x00\x01\x02"
        assert stream.closed


@pytest.mark.unit
class TestAttachFile:
    """Test single-file multipart uploads."""

    def test_attach_file(self, recording_client, text_file, multipart_parts):
        handle = open(text_file, "rb")

        builder = Request(recording_client).attach_file(handle)

        assert builder.error is None
        assert handle.closed
        assert builder.content_type.startswith("multipart/form-data; boundary=")

        builder.post("http://example.test/upload")
        assert recording_client.last.headers["Content-Type"] == builder.content_type

        parts = multipart_parts(recording_client.last_body, builder.content_type)
        assert len(parts) == 1
        headers, content = parts[0]
        assert 'name="file"; filename="notes.txt"' in headers
        assert "Content-Type: application/octet-stream" in headers
        assert content == text_file.read_bytes()

    def test_attach_file_with_content_type(self, recording_client, text_file, multipart_parts):
        builder = Request(recording_client).attach_file(open(text_file, "rb"), "text/plain")

        headers, _ = multipart_parts(builder.body.getvalue(), builder.content_type)[0]
        assert "Content-Type: text/plain" in headers

    def test_attach_named_reader(self, recording_client, multipart_parts):
        source = NamedReader(io.BytesIO(b"a,b\n1,2\n"), "reports/data.csv")

        builder = Request(recording_client).attach_file(source, "text/csv")

        headers, content = multipart_parts(builder.body.getvalue(), builder.content_type)[0]
        assert 'filename="data.csv"' in headers
        assert content == b"a,b\n1,2\n"
        assert source.closed

    def test_attach_file_requires_a_file_name(self, recording_client):
        builder = Request(recording_client).attach_file(io.BytesIO(b"data"))

        assert isinstance(builder.error, MissingFileIdentityError)
        assert builder.body is None
        assert builder.content_type == ""

    def test_attach_file_copy_failure(self, recording_client):
        source = NamedReader(FailingReader(), "broken.bin")

        builder = Request(recording_client).attach_file(source)

        assert isinstance(builder.error, RequestIOError)
        assert builder.error.field == "file"
        assert builder.body is None
        assert source.closed


@pytest.mark.unit
class TestAttachFiles:
    """Test multi-field multipart uploads."""

    def test_no_fields_builds_empty_envelope(self, recording_client):
        builder = Request(recording_client).attach_files({})

        assert builder.error is None
        assert builder.content_type.startswith("multipart/form-data; boundary=")
        boundary = builder.content_type.split("boundary=", 1)[1]
        assert builder.body.getvalue() == f"--{boundary}--\r\n".encode("ascii")

    def test_empty_values_fail_whole_call(self, recording_client):
        builder = Request(recording_client).attach_files({"f": []})

        assert isinstance(builder.error, EmptyFieldListError)
        assert builder.error.field == "f"
        assert builder.body is None

    def test_none_builds_empty_envelope(self, recording_client):
        builder = Request(recording_client).attach_files(None)

        assert builder.error is None
        boundary = builder.content_type.split("boundary=", 1)[1]
        assert builder.body.getvalue() == f"--{boundary}--\r\n".encode("ascii")

    @pytest.mark.parametrize("fields", [42, "doc", b"doc", object()])
    def test_fields_must_be_mapping_or_pairs(self, recording_client, fields):
        builder = Request(recording_client).attach_files(fields)

        assert isinstance(builder.error, TypeMismatchError)
        assert builder.error.expected == "mapping"
        assert builder.body is None

    def test_field_items_must_be_pairs(self, recording_client):
        builder = Request(recording_client).attach_files([("doc", ["a"]), ("lonely",)])

        assert isinstance(builder.error, TypeMismatchError)
        assert "tuple" in builder.error.message
        assert builder.body is None

        builder.post("http://example.test/upload")
        assert recording_client.sent == []
        assert builder.content_type == ""

    def test_file_and_value_in_order(self, recording_client, text_file, multipart_parts):
        handle = open(text_file, "rb")

        builder = Request(recording_client).attach_files(
            {"document": [handle, "text/plain"], "comment": ["looks good"]}
        )

        assert builder.error is None
        assert handle.closed
        parts = multipart_parts(builder.body.getvalue(), builder.content_type)
        assert len(parts) == 2

        file_headers, file_content = parts[0]
        assert 'name="document"; filename="notes.txt"' in file_headers
        assert "Content-Type: text/plain" in file_headers
        assert file_content == text_file.read_bytes()

        value_headers, value_content = parts[1]
        assert value_headers == 'Content-Disposition: form-data; name="comment"'
        assert value_content == b"looks good"

    def test_plain_byte_source_ignores_content_type(self, recording_client, multipart_parts):
        builder = Request(recording_client).attach_files(
            [("payload", [io.BytesIO(b"raw"), "application/json"])]
        )

        headers, content = multipart_parts(builder.body.getvalue(), builder.content_type)[0]
        assert "filename" not in headers
        assert "Content-Type" not in headers
        assert content == b"raw"

    def test_repeated_field_names_with_pairs(self, recording_client, multipart_parts):
        builder = Request(recording_client).attach_files(
            [("tag", ["a"]), ("tag", [b"b"])]
        )

        parts = multipart_parts(builder.body.getvalue(), builder.content_type)
        assert [content for _, content in parts] == [b"a", b"b"]

    def test_type_mismatch_skips_field_and_continues(self, recording_client, multipart_parts):
        builder = Request(recording_client).attach_files(
            {"count": [42], "name": ["kept"]}
        )

        assert isinstance(builder.error, TypeMismatchError)
        assert builder.error.field == "count"
        parts = multipart_parts(builder.body.getvalue(), builder.content_type)
        assert len(parts) == 1
        assert parts[0][1] == b"kept"

    def test_content_type_must_be_a_string(self, recording_client, text_file):
        handle = open(text_file, "rb")

        builder = Request(recording_client).attach_files({"doc": [handle, 3]})

        assert isinstance(builder.error, TypeMismatchError)
        assert builder.error.expected == "str"
        assert handle.closed

    def test_last_field_error_is_recorded(self, recording_client):
        builder = Request(recording_client).attach_files(
            {"first": [1], "ok": ["value"], "second": [2.5]}
        )

        assert isinstance(builder.error, TypeMismatchError)
        assert builder.error.field == "second"

    def test_copy_failure_continues_with_next_field(self, recording_client, multipart_parts):
        builder = Request(recording_client).attach_files(
            {"broken": [NamedReader(FailingReader(), "x.bin")], "after": ["still here"]}
        )

        assert isinstance(builder.error, RequestIOError)
        parts = multipart_parts(builder.body.getvalue(), builder.content_type)
        assert parts[-1][1] == b"still here"

    def test_errored_builder_is_not_dispatched(self, recording_client):
        builder = Request(recording_client).attach_files({"count": [42]})

        response = builder.post("http://example.test/upload")

        assert response.is_empty
        assert response.error is None
        assert recording_client.sent == []


@pytest.mark.unit
class TestStickyError:
    """Test that the first recorded error freezes the builder."""

    @pytest.fixture
    def errored(self, recording_client):
        return Request(recording_client).attach_file(io.BytesIO(b"no name"))

    def test_configuration_calls_are_no_ops(self, errored, text_file):
        first_error = errored.error

        assert errored.with_form({"a": "1"}) is errored
        assert errored.with_json({"a": 1}) is errored
        assert errored.with_query({"a": "1"}) is errored
        assert errored.with_file(io.BytesIO(b"x")) is errored
        assert errored.attach_files({"f": []}) is errored
        assert errored.set_cookies(create_cookie("a", "b")) is errored

        assert errored.error is first_error
        assert errored.body is None
        assert errored.content_type == ""
        assert errored.query is None

    def test_dispatch_short_circuits(self, errored, recording_client):
        response = errored.get("http://example.test/x")

        assert response.is_empty
        assert response.error is None
        assert response.status_code is None
        assert recording_client.sent == []
        assert errored.headers is None


@pytest.mark.unit
class TestDispatch:
    """Test request construction and sending."""

    def test_no_body_no_content_type(self, recording_client):
        builder = Request(recording_client)

        response = builder.do("GET", "http://example.test/x")

        assert response.status_code == 200
        assert "Content-Type" not in recording_client.last.headers
        assert recording_client.last_body == b""
        assert recording_client.last.method == "GET"

    def test_extra_headers_override_defaults(self, recording_client):
        builder = Request(recording_client).with_json({"a": 1})

        builder.post(
            "http://example.test/x",
            headers={"content-type": "application/vnd.api+json", "X-Trace": "abc"},
        )

        headers = recording_client.last.headers
        assert headers["Content-Type"] == "application/vnd.api+json"
        assert headers["X-Trace"] == "abc"
        assert builder.headers["X-Trace"] == "abc"

    def test_first_value_of_multi_valued_header(self, recording_client):
        Request(recording_client).get("http://example.test/x", headers={"Accept": ["text/html", "*/*"]})

        assert recording_client.last.headers["Accept"] == "text/html"

    def test_cookies_in_insertion_order(self, recording_client):
        builder = Request(recording_client).set_cookies(
            create_cookie("session", "abc"), create_cookie("theme", "dark")
        )

        builder.get("http://example.test/x")

        assert recording_client.last.headers["Cookie"] == "session=abc; theme=dark"
        assert [(c.name, c.value) for c in builder.cookies] == [
            ("session", "abc"),
            ("theme", "dark"),
        ]

    def test_set_cookies_replaces_previous(self, recording_client):
        builder = Request(recording_client).set_cookies(create_cookie("old", "1"))
        builder.set_cookies(create_cookie("new", "2"))

        builder.get("http://example.test/x")

        assert recording_client.last.headers["Cookie"] == "new=2"

    def test_cookies_appended_to_cookie_header(self, recording_client):
        builder = Request(recording_client).set_cookies(create_cookie("b", "2"))

        builder.get("http://example.test/x", headers={"Cookie": "a=1"})

        assert recording_client.last.headers["Cookie"] == "a=1; b=2"

    def test_cookies_empty_before_dispatch(self, recording_client):
        assert Request(recording_client).cookies == []

    def test_transport_error_is_wrapped(self, client_factory):
        error = TransportError("GET", "http://example.test/x", ConnectionError("refused"))
        client = client_factory(error=error)

        response = Request(client).get("http://example.test/x")

        assert response.error is error
        assert response.raw is None
        assert not response.ok

    def test_invalid_method_is_recorded(self, recording_client):
        builder = Request(recording_client)

        response = builder.do("BAD METHOD", "http://example.test/x")

        assert isinstance(builder.error, InvalidRequestError)
        assert response.is_empty
        assert recording_client.sent == []

    def test_empty_uri_is_recorded(self, recording_client):
        builder = Request(recording_client)

        builder.get("")

        assert isinstance(builder.error, InvalidRequestError)
        assert recording_client.sent == []

    def test_body_closed_after_dispatch(self, recording_client):
        builder = Request(recording_client).with_form({"a": "1"})
        body = builder.body

        builder.post("http://example.test/x")

        assert body.closed

    def test_body_closed_when_short_circuited(self, recording_client):
        builder = Request(recording_client).with_form({"a": "1"})
        body = builder.body
        builder.attach_file(io.BytesIO(b"no name"))

        builder.post("http://example.test/x")

        assert body.closed
        assert recording_client.sent == []

    def test_second_dispatch_of_sent_body_fails(self, recording_client):
        builder = Request(recording_client).with_form({"a": "1"})
        builder.post("http://example.test/x")

        response = builder.post("http://example.test/x")

        assert isinstance(builder.error, InvalidRequestError)
        assert response.is_empty
        assert len(recording_client.sent) == 1

    @pytest.mark.parametrize(
        "verb, method",
        [
            ("get", "GET"),
            ("post", "POST"),
            ("put", "PUT"),
            ("patch", "PATCH"),
            ("delete", "DELETE"),
            ("head", "HEAD"),
            ("trace", "TRACE"),
            ("options", "OPTIONS"),
        ],
    )
    def test_verbs(self, recording_client, verb, method):
        getattr(Request(recording_client), verb)("http://example.test/x")

        assert recording_client.sent[-1].method == method

    def test_connect_verb(self, recording_client):
        Request(recording_client).connect("http://example.test:443")

        assert recording_client.sent[-1].method == "CONNECT"

    def test_default_client_is_standard_client(self):
        builder = Request()

        assert isinstance(builder.client, StandardClient)
        builder.client.close()


@pytest.mark.unit
class TestBodyFraming:
    """Test Content-Length framing of bodies prepared by StandardClient."""

    @pytest.fixture
    def sent(self, response_factory):
        """StandardClient over a real session whose send is captured."""
        session = requests.Session()
        with patch.object(session, "send", return_value=response_factory(200)) as send:
            yield StandardClient(session=session), send

    def test_empty_form_has_zero_content_length(self, sent):
        client, send = sent

        Request(client).with_form({}).post("http://example.test/form")

        prepared = send.call_args[0][0]
        assert prepared.headers["Content-Length"] == "0"
        assert "Transfer-Encoding" not in prepared.headers

    def test_none_form_has_zero_content_length(self, sent):
        client, send = sent

        Request(client).with_form(None).post("http://example.test/form")

        prepared = send.call_args[0][0]
        assert prepared.headers["Content-Length"] == "0"
        assert "Transfer-Encoding" not in prepared.headers

    def test_empty_file_has_zero_content_length(self, sent, tmp_path):
        client, send = sent
        empty = tmp_path / "empty.bin"
        empty.write_bytes(b"")

        Request(client).with_file(open(empty, "rb")).put("http://example.test/blob")

        prepared = send.call_args[0][0]
        assert prepared.headers["Content-Length"] == "0"
        assert "Transfer-Encoding" not in prepared.headers

    def test_form_body_has_exact_content_length(self, sent):
        client, send = sent

        Request(client).with_form({"a": "1"}).post("http://example.test/form")

        prepared = send.call_args[0][0]
        assert prepared.body == b"a=1"
        assert prepared.headers["Content-Length"] == "3"

    def test_multipart_body_has_exact_content_length(self, sent):
        client, send = sent

        Request(client).attach_files({"note": ["hi"]}).post("http://example.test/upload")

        prepared = send.call_args[0][0]
        assert prepared.headers["Content-Length"] == str(len(prepared.body))
        assert "Transfer-Encoding" not in prepared.headers

    def test_file_body_has_file_size(self, sent, text_file):
        client, send = sent

        Request(client).with_file(open(text_file, "rb")).post("http://example.test/blob")

        prepared = send.call_args[0][0]
        assert prepared.headers["Content-Length"] == str(text_file.stat().st_size)


@pytest.mark.unit
class TestCookieValues:
    """Test that cookie names and values are reduced to valid octets."""

    def test_semicolon_cannot_inject_cookies(self, recording_client):
        builder = Request(recording_client).set_cookies(create_cookie("sid", "a;admin=1"))

        builder.get("http://example.test/")

        assert recording_client.last.headers["Cookie"] == "sid=aadmin=1"
        assert [(c.name, c.value) for c in builder.cookies] == [("sid", "aadmin=1")]

    def test_value_with_space_is_quoted(self, recording_client):
        builder = Request(recording_client).set_cookies(create_cookie("pref", "dark mode"))

        builder.get("http://example.test/")

        assert recording_client.last.headers["Cookie"] == 'pref="dark mode"'
        assert [(c.name, c.value) for c in builder.cookies] == [("pref", "dark mode")]

    def test_quotes_backslashes_and_controls_dropped(self, recording_client):
        Request(recording_client).set_cookies(
            create_cookie("q", 'x"y\\z\x01\x7f')
        ).get("http://example.test/")

        assert recording_client.last.headers["Cookie"] == "q=xyz"

    def test_newlines_in_name_replaced(self, recording_client):
        Request(recording_client).set_cookies(create_cookie("a\nb", "1")).get("http://example.test/")

        assert recording_client.last.headers["Cookie"] == "a-b=1"
