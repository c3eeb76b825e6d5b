"""
Tests for shared CLI helpers.
"""

import io

from rzup.cli.utils import print_error, progress_printer
from rzup.core.download import DownloadProgress


class TestProgressPrinter:
    def test_quiet_returns_none(self):
        assert progress_printer(quiet=True) is None

    def test_rewrites_line_until_complete(self):
        out = io.StringIO()
        show = progress_printer(file=out)

        show(DownloadProgress(512, 1024, 50.0, 512, 1))
        assert out.getvalue() == "\r  0.0/0.0 MB (50.0%) at 0.0 MB/s ETA: 1s"

        show(DownloadProgress(1024, 1024, 100.0, 512, 0))
        assert out.getvalue().endswith("(100.0%) at 0.0 MB/s ETA: 0s\n")

    def test_unknown_size_never_ends_line(self):
        out = io.StringIO()
        progress_printer(file=out)(DownloadProgress(2048, 0, 0, 1024, 0))

        assert not out.getvalue().endswith("\n")


def test_print_error(capsys):
    print_error("download failed", "HTTP 404")

    assert capsys.readouterr().err == "ERROR: download failed\n  HTTP 404\n"
