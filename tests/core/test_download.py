"""
Unit tests for download module.

Tests download functionality with mocked network requests.
"""

import pytest
import requests
import responses

from rzup.core.download import DownloadProgress, download_file, format_progress
from rzup.core.exceptions import DownloadFailed
from tests.mocks import MockResponse, MockSession

URL = "https://downloads.example.com/toolchain.tar.gz"


class TestDownloadProgress:
    """Test DownloadProgress class."""

    def test_create_progress(self):
        progress = DownloadProgress(
            bytes_downloaded=512,
            total_bytes=1024,
            percentage=50.0,
            speed_bps=256,
            eta_seconds=2,
        )
        assert progress.bytes_downloaded == 512
        assert progress.percentage == 50.0

    def test_progress_to_string(self):
        progress = DownloadProgress(52428800, 104857600, 50.0, 1048576, 50)
        assert str(progress) == "50.0/100.0 MB (50.0%) at 1.0 MB/s ETA: 50s"


class TestFormatProgress:
    """Test format_progress function."""

    def test_format_with_unknown_size(self):
        progress = DownloadProgress(1048576, 0, 0, 1048576, 0)
        assert format_progress(progress) == "1.0 MB at 1.0 MB/s"


class TestDownloadFile:
    """Test download_file function."""

    @responses.activate
    def test_simple_download(self, tmp_path):
        content = b"toolchain archive"
        responses.add(responses.GET, URL, body=content, status=200)

        destination = tmp_path / "scratch" / "toolchain.tar.gz"
        result = download_file(URL, destination)

        assert result == destination
        assert destination.read_bytes() == content

    @responses.activate
    def test_follows_redirects(self, tmp_path):
        """Test release assets served through a redirect are downloaded."""
        target = "https://objects.example.com/blob"
        responses.add(
            responses.GET, URL, status=302, headers={"Location": target}
        )
        responses.add(responses.GET, target, body=b"blob", status=200)

        destination = tmp_path / "toolchain.tar.gz"
        download_file(URL, destination)

        assert destination.read_bytes() == b"blob"

    @responses.activate
    def test_download_with_progress_callback(self, tmp_path):
        content = b"x" * 20000
        responses.add(
            responses.GET,
            URL,
            body=content,
            status=200,
            headers={"Content-Length": str(len(content))},
        )

        updates = []
        download_file(URL, tmp_path / "file", progress_callback=updates.append)

        assert updates
        assert updates[-1].bytes_downloaded == len(content)

    @responses.activate
    def test_uses_given_session(self, tmp_path):
        responses.add(responses.GET, URL, body=b"data", status=200)
        session = requests.Session()
        session.headers["User-Agent"] = "rzup"

        download_file(URL, tmp_path / "file", session=session)

        assert responses.calls[0].request.headers["User-Agent"] == "rzup"

    @responses.activate
    def test_http_error_raises(self, tmp_path):
        responses.add(responses.GET, URL, status=404)

        with pytest.raises(DownloadFailed) as exc_info:
            download_file(URL, tmp_path / "file")

        assert exc_info.value.url == URL
        assert "404" in exc_info.value.detail

    @responses.activate
    def test_no_retry_on_server_error(self, tmp_path):
        responses.add(responses.GET, URL, status=503)

        with pytest.raises(DownloadFailed):
            download_file(URL, tmp_path / "file")

        assert len(responses.calls) == 1

    @responses.activate
    def test_connection_error_raises(self, tmp_path):
        responses.add(
            responses.GET, URL, body=requests.ConnectionError("connection refused")
        )

        with pytest.raises(DownloadFailed, match="connection refused"):
            download_file(URL, tmp_path / "file")

    def test_truncated_body_raises(self, tmp_path):
        """Test a body shorter than Content-Length is reported."""
        session = MockSession()
        session.add_mock_response(
            URL, MockResponse(b"short", headers={"content-length": "100"})
        )

        with pytest.raises(DownloadFailed, match="truncated transfer"):
            download_file(URL, tmp_path / "file", session=session)

    def test_encoded_body_is_not_truncated(self, tmp_path):
        """Test Content-Length of a gzip-encoded body is not compared to decoded bytes."""
        decoded = b"x" * 500
        session = MockSession()
        session.add_mock_response(
            URL,
            MockResponse(
                decoded,
                headers={"content-length": "37", "content-encoding": "gzip"},
            ),
        )

        destination = download_file(URL, tmp_path / "file", session=session)

        assert destination.read_bytes() == decoded

    def test_passes_timeout(self, tmp_path):
        session = MockSession()
        session.add_mock_response(URL, MockResponse(b"data"))

        download_file(URL, tmp_path / "file", session=session, timeout=7)

        request = session.request_history[0]
        assert request["timeout"] == 7
        assert request["stream"] is True

    def test_empty_url_raises(self, tmp_path):
        with pytest.raises(ValueError, match="URL cannot be empty"):
            download_file("", tmp_path / "file")
