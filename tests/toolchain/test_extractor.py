"""
Tests for archive extraction into per-version directories.
"""

import os
import stat

import pytest

from rzup.core.exceptions import ExtractionFailed
from rzup.core.filesystem import IS_UNIX
from rzup.toolchain.extractor import (
    ArchiveExtractor,
    install_dir_name,
    installed_versions,
    parse_install_dir_name,
    split_install_dir_name,
)
from rzup.toolchain.families import CPP, RUST
from tests.fixtures.archives import build_archive

LINUX = "x86_64-unknown-linux-gnu"


class TestInstallDirName:
    def test_format(self):
        assert install_dir_name(RUST, LINUX, "v1.2.3") == f"rust_{LINUX}_v1.2.3"

    def test_parse(self):
        assert parse_install_dir_name(f"rust_{LINUX}_v1.2.3", RUST, LINUX) == "v1.2.3"
        assert parse_install_dir_name(f"cpp_{LINUX}_v1.2.3", RUST, LINUX) is None
        assert (
            parse_install_dir_name("rust_aarch64-apple-darwin_v1", RUST, LINUX) is None
        )
        assert parse_install_dir_name(f"rust_{LINUX}_", RUST, LINUX) is None

    def test_split_host_with_underscore(self):
        assert split_install_dir_name(f"rust_{LINUX}_v1.2.3") == ("rust", LINUX, "v1.2.3")

    def test_split_tag_with_underscore(self):
        name = install_dir_name(RUST, LINUX, "v1_2")
        assert split_install_dir_name(name) == ("rust", LINUX, "v1_2")

    @pytest.mark.parametrize(
        "name",
        ["rust", "rust_v1", f"_{LINUX}_tag", f"rust_{LINUX}_", "rust_riscv64-linux_v1"],
    )
    def test_split_rejects(self, name):
        assert split_install_dir_name(name) is None


class TestInstalledVersions:
    def test_lists_family_and_host_only(self, tmp_path):
        toolchains = tmp_path / "toolchains"
        for name in (
            f"rust_{LINUX}_v1.0.0",
            f"rust_{LINUX}_v1_2",
            f"cpp_{LINUX}_2024.01.05",
            "rust_aarch64-apple-darwin_v1.0.0",
        ):
            (toolchains / name).mkdir(parents=True)
        (toolchains / f"rust_{LINUX}_stray-file").write_text("x")

        assert sorted(installed_versions(toolchains, RUST, LINUX)) == ["v1.0.0", "v1_2"]

    def test_ordered_by_extraction_time(self, tmp_path):
        toolchains = tmp_path / "toolchains"
        newer = toolchains / f"rust_{LINUX}_v1.0.0"
        older = toolchains / f"rust_{LINUX}_v2.0.0"
        newer.mkdir(parents=True)
        older.mkdir()
        os.utime(older, (1000, 1000))
        os.utime(newer, (2000, 2000))

        assert installed_versions(toolchains, RUST, LINUX) == ["v2.0.0", "v1.0.0"]

    def test_missing_dir(self, tmp_path):
        assert installed_versions(tmp_path / "missing", RUST, LINUX) == []


class TestArchiveExtractor:
    """Test ArchiveExtractor.extract()."""

    def test_extracts_to_deterministic_dir(self, tmp_path, rust_archive):
        toolchains = tmp_path / "toolchains"

        result = ArchiveExtractor().extract(rust_archive, RUST, toolchains, "v1.2.3", LINUX)

        assert result == toolchains / f"rust_{LINUX}_v1.2.3"
        assert (result / "bin" / "rustc").is_file()

    def test_extracts_xz(self, tmp_path, cpp_archive):
        result = ArchiveExtractor().extract(
            cpp_archive, CPP, tmp_path / "toolchains", "2024.01.05", LINUX
        )

        assert (result / "riscv32im-linux-x86_64" / "include" / "stdio.h").is_file()

    @pytest.mark.skipif(not IS_UNIX, reason="permissions are POSIX only")
    def test_marks_binaries_executable(self, tmp_path, rust_archive):
        result = ArchiveExtractor().extract(
            rust_archive, RUST, tmp_path / "toolchains", "v1.2.3", LINUX
        )

        for binary in (
            result / "bin" / "rustc",
            result / "bin" / "cargo",
            result / "lib" / "rustlib" / LINUX / "bin" / "rust-lld",
        ):
            assert stat.S_IMODE(os.stat(binary).st_mode) == 0o755
        assert stat.S_IMODE(os.stat(result / "lib" / "librustc_driver.so").st_mode) == 0o644

    def test_missing_executable_dir_is_skipped(self, tmp_path):
        archive = build_archive(tmp_path / "a.tar.gz", {"bin/rustc": b"rustc"})

        result = ArchiveExtractor().extract(
            archive, RUST, tmp_path / "toolchains", "v1", LINUX
        )

        assert (result / "bin" / "rustc").exists()

    def test_reextract_replaces_stale_files(self, tmp_path, rust_archive):
        """Test extracting the same release twice leaves only the archive's files."""
        toolchains = tmp_path / "toolchains"
        extractor = ArchiveExtractor()

        first = extractor.extract(rust_archive, RUST, toolchains, "v1.2.3", LINUX)
        before = sorted(p.relative_to(first) for p in first.rglob("*"))
        (first / "bin" / "stale-from-partial-run").write_text("stale")

        second = extractor.extract(rust_archive, RUST, toolchains, "v1.2.3", LINUX)

        assert second == first
        assert not (second / "bin" / "stale-from-partial-run").exists()
        assert sorted(p.relative_to(second) for p in second.rglob("*")) == before

    def test_other_versions_untouched(self, tmp_path, rust_archive):
        toolchains = tmp_path / "toolchains"
        older = toolchains / f"rust_{LINUX}_v1.0.0"
        older.mkdir(parents=True)
        (older / "marker").write_text("old")

        ArchiveExtractor().extract(rust_archive, RUST, toolchains, "v1.2.3", LINUX)

        assert (older / "marker").read_text() == "old"

    def test_corrupt_archive(self, tmp_path):
        archive = tmp_path / "broken.tar.gz"
        archive.write_bytes(b"garbage")

        with pytest.raises(ExtractionFailed) as exc_info:
            ArchiveExtractor().extract(archive, RUST, tmp_path / "toolchains", "v1", LINUX)

        assert exc_info.value.archive == archive
