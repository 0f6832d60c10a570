import pytest
from requests.exceptions import ConnectionError
from tenacity import wait_none

from conftest import FakeResponse, FakeSession, envelope
from gtrends.config import Settings
from gtrends.errors import ParseError, RemoteError, TransientRemoteError
from gtrends.transport import (
    get_json,
    open_session,
    parse_envelope,
    strip_prefix,
)

URL = "https://trends.example.test/trends/api/explore"


class TestStripPrefix:
    def test_prefix_with_newline(self):
        assert strip_prefix(")]}'\n{\"a\": 1}") == "\n{\"a\": 1}"

    def test_prefix_with_comma(self):
        assert strip_prefix(")]}',{\"a\": 1}") == "{\"a\": 1}"

    @pytest.mark.parametrize("text", [
        "{\"a\": 1}",
        ")]}{\"a\": 1}",
        "",
        "<html>Too many requests</html>",
    ])
    def test_missing_prefix_raises(self, text):
        with pytest.raises(ParseError):
            strip_prefix(text)


class TestParseEnvelope:
    def test_decodes_object(self):
        assert parse_envelope(")]}'\n{\"widgets\": []}") == {"widgets": []}

    def test_truncated_json_raises(self):
        with pytest.raises(ParseError, match="Failed to parse"):
            parse_envelope(")]}',{\"widgets\": [")

    def test_non_object_raises(self):
        with pytest.raises(ParseError, match="JSON object"):
            parse_envelope(")]}',[1, 2]")


class TestGetJson:
    def test_success(self, settings):
        session = FakeSession({"explore": envelope({"ok": True})})
        assert get_json(session, URL, {"hl": "en-US"}, settings) == {"ok": True}
        assert session.calls == [(URL, {"hl": "en-US"})]

    def test_client_error_not_retried(self):
        settings = Settings(max_attempts=3)
        session = FakeSession({"explore": FakeResponse("nope", 400)})
        with pytest.raises(RemoteError) as info:
            get_json(session, URL, {}, settings, wait=wait_none())
        assert info.value.status_code == 400
        assert not isinstance(info.value, TransientRemoteError)
        assert len(session.calls) == 1

    def test_transient_error_retried_then_succeeds(self):
        settings = Settings(max_attempts=3)
        session = FakeSession({"explore": [
            FakeResponse("", 429),
            FakeResponse("", 503),
            envelope({"ok": True}),
        ]})
        assert get_json(session, URL, {}, settings, wait=wait_none()) == {"ok": True}
        assert len(session.calls) == 3

    def test_retry_is_logged(self, caplog):
        settings = Settings(max_attempts=2)
        session = FakeSession({"explore": [
            FakeResponse("", 503),
            envelope({"ok": True}),
        ]})
        with caplog.at_level("WARNING", logger="gtrends.transport"):
            get_json(session, URL, {}, settings, wait=wait_none())
        assert "Attempt 1 for" in caplog.text
        assert URL in caplog.text

    def test_transient_error_exhausts_attempts(self):
        settings = Settings(max_attempts=2)
        session = FakeSession({"explore": FakeResponse("", 500)})
        with pytest.raises(TransientRemoteError):
            get_json(session, URL, {}, settings, wait=wait_none())
        assert len(session.calls) == 2

    def test_connection_error_becomes_remote_error(self):
        settings = Settings(max_attempts=2)

        def refuse(url, params):
            raise ConnectionError("refused")

        session = FakeSession({"explore": refuse})
        with pytest.raises(RemoteError, match="refused"):
            get_json(session, URL, {}, settings, wait=wait_none())
        assert len(session.calls) == 2

    def test_parse_error_not_retried(self):
        settings = Settings(max_attempts=3)
        session = FakeSession({"explore": FakeResponse("<html></html>")})
        with pytest.raises(ParseError):
            get_json(session, URL, {}, settings, wait=wait_none())
        assert len(session.calls) == 1


class TestOpenSession:
    def test_primes_home_page_and_sets_headers(self, settings):
        session = FakeSession({"trends/explore": FakeResponse("<html></html>")})
        assert open_session(settings, session=session) is session
        assert session.calls == [
            ("https://trends.example.test/trends/explore", None)]
        assert session.headers["User-Agent"] == settings.user_agent

    def test_rate_limited_home_page_is_retried(self):
        settings = Settings(max_attempts=3)
        session = FakeSession({"trends/explore": [
            FakeResponse("", 429),
            FakeResponse("<html></html>"),
        ]})
        open_session(settings, session=session, wait=wait_none())
        assert len(session.calls) == 2

    def test_rate_limit_exhausts_attempts(self):
        settings = Settings(max_attempts=2)
        session = FakeSession({"trends/explore": FakeResponse("", 429)})
        with pytest.raises(TransientRemoteError) as info:
            open_session(settings, session=session, wait=wait_none())
        assert info.value.status_code == 429
        assert len(session.calls) == 2

    def test_connection_error_becomes_remote_error(self):
        settings = Settings(max_attempts=2)

        def refuse(url, params):
            raise ConnectionError("refused")

        session = FakeSession({"trends/explore": refuse})
        with pytest.raises(RemoteError, match="refused"):
            open_session(settings, session=session, wait=wait_none())
        assert len(session.calls) == 2

    def test_client_error_not_retried(self):
        settings = Settings(max_attempts=3)
        session = FakeSession({"trends/explore": FakeResponse("", 403)})
        with pytest.raises(RemoteError):
            open_session(settings, session=session, wait=wait_none())
        assert len(session.calls) == 1
