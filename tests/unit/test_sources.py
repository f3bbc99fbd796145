"""Tests for line-oriented key sources."""

import io
import logging
import math
from unittest.mock import patch

import pytest

from hllcount.sketching import HyperLogLog
from hllcount.sources import DEFAULT_PRECISION, count_distinct, read_lines


class TestReadLines:
    """Tests for read_lines()."""

    def test_strips_unix_terminators(self, write_text):
        """Lines ending in \\n are yielded without it."""
        path = write_text("alpha\nbeta\ngamma\n")

        assert list(read_lines(path)) == ["alpha", "beta", "gamma"]

    def test_strips_windows_and_mac_terminators(self, write_text):
        """\\r\\n and a lone \\r each end exactly one line."""
        path = write_text("one\r\ntwo\rthree\n")

        assert list(read_lines(path)) == ["one", "two", "three"]

    def test_yields_unterminated_last_line(self, write_text):
        """A final line without a terminator is still read."""
        path = write_text("first\nlast")

        assert list(read_lines(path)) == ["first", "last"]

    def test_keeps_empty_lines(self, write_text):
        """Blank lines are keys too (the empty string)."""
        path = write_text("a\n\nb\n")

        assert list(read_lines(path)) == ["a", "", "b"]

    def test_empty_file(self, write_text):
        """An empty file yields nothing."""
        assert list(read_lines(write_text(""))) == []

    def test_preserves_surrounding_whitespace(self, write_text):
        """Only the terminator is removed."""
        path = write_text("  padded \t\n")

        assert list(read_lines(path)) == ["  padded \t"]

    def test_decodes_utf8(self, write_text):
        """Non-ASCII text is decoded as UTF-8."""
        path = write_text("café\n日本\n")

        assert list(read_lines(path)) == ["café", "日本"]

    def test_reads_stdin(self, monkeypatch):
        """'-' reads standard input."""
        monkeypatch.setattr("sys.stdin", io.StringIO("x\ny\n"))

        assert list(read_lines("-")) == ["x", "y"]

    def test_missing_file_raises(self, tmp_path):
        """Missing files surface as OSError."""
        with pytest.raises(OSError):
            list(read_lines(tmp_path / "nope.txt"))

    def test_invalid_encoding_raises(self, tmp_path):
        """Undecodable bytes surface as UnicodeDecodeError."""
        path = tmp_path / "bad.txt"
        path.write_bytes(b"ok\n\xff\xfe\xfa\n")

        with pytest.raises(UnicodeDecodeError):
            list(read_lines(path))

    def test_custom_encoding(self, tmp_path):
        """A different encoding can be requested."""
        path = tmp_path / "latin.txt"
        path.write_bytes("naïve\n".encode("latin-1"))

        assert list(read_lines(path, encoding="latin-1")) == ["naïve"]


class TestCountDistinct:
    """Tests for count_distinct()."""

    def test_default_precision(self):
        """The default precision is 15."""
        hll = count_distinct([])

        assert hll.precision == DEFAULT_PRECISION == 15
        assert hll.estimate() == 0.0

    def test_counts_keys(self):
        """Every key is fed to the estimator."""
        hll = count_distinct(["a", "b", "a"], precision=10)

        assert hll.item_count == 3
        assert 1.5 < hll.estimate() < 2.5

    def test_single_empty_line(self):
        """One empty key at b=4 gives the documented estimate."""
        hll = count_distinct([""], precision=4)

        assert hll.estimate() == pytest.approx(16 * math.log(16 / 15))

    def test_from_file(self, write_text):
        """read_lines and count_distinct compose."""
        lines = "".join(f"word-{i % 300}\n" for i in range(3000))
        hll = count_distinct(read_lines(write_text(lines)))

        assert hll.item_count == 3000
        assert 270 < hll.estimate() < 330

    def test_invalid_precision(self):
        """Precision is validated by the estimator."""
        with pytest.raises(ValueError, match="must be in"):
            count_distinct(["a"], precision=20)

    def test_summary_not_computed_when_debug_disabled(self):
        """The estimate is only computed for the summary when debug is on."""
        logging.getLogger("hllcount").setLevel(logging.INFO)

        with patch.object(HyperLogLog, "estimate", autospec=True) as estimate:
            count_distinct(["a", "b"], precision=4)

        estimate.assert_not_called()

    def test_summary_logged_when_debug_enabled(self, caplog):
        """With debug on, the key count and estimate are logged once."""
        with caplog.at_level(logging.DEBUG, logger="hllcount"):
            count_distinct(["a", "b", "a"], precision=4)

        summaries = [r for r in caplog.records if r.getMessage().startswith("Counted")]
        assert len(summaries) == 1
        assert "Counted 3 keys" in summaries[0].getMessage()
