"""
Unit tests for the GNU Wget HSTS line codec.

Covers comment/blank handling, tolerated malformed widths, strict integer
columns, duplicate rejection and the encode/decode round trip.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from adapters.hsts_database import (
    HEADER_LINES,
    decode_database,
    decode_line,
    encode_entry,
    read_database,
)
from core.domain.errors import DatabaseDecodeError, DuplicateKeyError
from core.domain.models import PRELOADED_CREATED, KnownHostEntry


class TestDecodeLine:
    def test_parses_tab_separated_fields(self) -> None:
        entry = decode_line("example.com\t443\t1\t1700000000\t86400")

        assert entry == KnownHostEntry(
            hostname="example.com",
            port=443,
            include_subdomains=True,
            created=1700000000,
            max_age=86400,
        )

    def test_accepts_runs_of_mixed_whitespace(self) -> None:
        entry = decode_line("  example.com \t 0\t\t0   5  6  ")

        assert entry is not None
        assert entry.hostname == "example.com"
        assert entry.include_subdomains is False
        assert (entry.created, entry.max_age) == (5, 6)

    @pytest.mark.parametrize("flag", ["0", "2", "yes", "true"])
    def test_only_one_means_include_subdomains(self, flag: str) -> None:
        entry = decode_line(f"example.com\t0\t{flag}\t1\t1")

        assert entry is not None
        assert entry.include_subdomains is False

    @pytest.mark.parametrize(
        "line",
        [
            "",
            "   ",
            "# HSTS 1.0 Known Hosts database for GNU Wget.",
            "   # indented comment",
        ],
    )
    def test_comments_and_blank_lines_are_ignored(self, line: str) -> None:
        assert decode_line(line) is None

    @pytest.mark.parametrize(
        "line",
        [
            "example.com\t0\t1\t1",
            "example.com\t0\t1\t1\t1\textra",
            "lonely",
        ],
    )
    def test_wrong_field_count_is_skipped(self, line: str) -> None:
        assert decode_line(line) is None

    @pytest.mark.parametrize(
        "line",
        [
            "example.com\tx\t1\t1\t1",
            "example.com\t0\t1\tsoon\t1",
            "example.com\t0\t1\t1\t1.5",
            "example.com\t0\t1\t1\t1_000",
            "example.com\t0\t1\t2147483648\t1",
            "example.com\t-2147483649\t1\t1\t1",
        ],
    )
    def test_non_integer_column_is_fatal(self, line: str) -> None:
        with pytest.raises(DatabaseDecodeError):
            decode_line(line, 7)


class TestDecodeDatabase:
    def test_keeps_file_order_and_skips_noise(self) -> None:
        lines = [
            *HEADER_LINES,
            "b.example\t0\t0\t1\t1",
            "",
            "broken line",
            "a.example\t0\t1\t2\t2",
        ]

        entries = decode_database(lines)

        assert list(entries) == ["b.example", "a.example"]

    def test_duplicate_hostname_is_rejected(self) -> None:
        lines = [
            "dup.example\t0\t0\t1\t1",
            "dup.example\t443\t1\t2\t2",
        ]

        with pytest.raises(DuplicateKeyError) as excinfo:
            decode_database(lines)

        assert excinfo.value.key == "dup.example"

    def test_read_database_from_file(self, write_database) -> None:
        path = write_database(["example.com\t0\t1\t2147483647\t0"])

        entries = read_database(path)

        assert entries["example.com"].is_preloaded

    def test_read_database_rejects_binary_garbage(self, tmp_path: Path) -> None:
        path = tmp_path / "wget-hsts"
        path.write_bytes(b"\xff\xfe\x00garbage")

        with pytest.raises(DatabaseDecodeError):
            read_database(path)


class TestEncodeEntry:
    def test_synthesized_row_layout(self) -> None:
        entry = KnownHostEntry(
            hostname="example.com",
            include_subdomains=True,
            created=PRELOADED_CREATED,
            max_age=0,
        )

        assert encode_entry(entry) == "example.com\t0\t1\t2147483647\t0"

    @pytest.mark.parametrize(
        "entry",
        [
            KnownHostEntry(hostname="a.example", port=0, include_subdomains=True, created=PRELOADED_CREATED, max_age=0),
            KnownHostEntry(hostname="b.example", port=8443, include_subdomains=False, created=1700000000, max_age=86400),
        ],
    )
    def test_round_trip(self, entry: KnownHostEntry) -> None:
        assert decode_line(encode_entry(entry)) == entry
