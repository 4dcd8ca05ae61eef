# test_text.py -- Tests for binary/text classification
# Copyright (C) 2026 The odbfilter contributors
#
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later
# odbfilter is dual-licensed under the Apache License, Version 2.0 and the GNU
# General Public License as published by the Free Software Foundation; version 2.0
# or (at your option) any later version. You can redistribute it and/or
# modify it under the terms of either of these two licenses.
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# You should have received a copy of the licenses; if not, see
# <http://www.gnu.org/licenses/> for a copy of the GNU General Public License
# and <http://www.apache.org/licenses/LICENSE-2.0> for a copy of the Apache
# License, Version 2.0.
#

"""Tests for the binary/text heuristics."""

from odbfilter.buffer import Buffer
from odbfilter.text import TextStats, gather_text_stats, is_binary, text_is_binary

from . import TestCase


class GatherTextStatsTests(TestCase):
    def test_empty(self) -> None:
        self.assertEqual(TextStats(), gather_text_stats(b""))

    def test_printable(self) -> None:
        stats = gather_text_stats(b"hello world")
        self.assertEqual(11, stats.printable)
        self.assertEqual(0, stats.nonprintable)

    def test_line_endings(self) -> None:
        stats = gather_text_stats(b"a\r\nb\nc\rd")
        self.assertEqual(2, stats.cr)
        self.assertEqual(1, stats.crlf)
        self.assertEqual(1, stats.lf)
        self.assertEqual(4, stats.printable)

    def test_cr_at_end(self) -> None:
        stats = gather_text_stats(b"abc\r")
        self.assertEqual(1, stats.cr)
        self.assertEqual(0, stats.crlf)

    def test_crcrlf(self) -> None:
        stats = gather_text_stats(b"\r\r\n")
        self.assertEqual(2, stats.cr)
        self.assertEqual(1, stats.crlf)
        self.assertEqual(0, stats.lf)

    def test_printable_control_bytes(self) -> None:
        stats = gather_text_stats(b"\b\t\x1b\x0c")
        self.assertEqual(4, stats.printable)
        self.assertEqual(0, stats.nonprintable)

    def test_nul(self) -> None:
        stats = gather_text_stats(b"a\x00b")
        self.assertEqual(1, stats.nul)
        self.assertEqual(1, stats.nonprintable)
        self.assertEqual(2, stats.printable)

    def test_del_and_control(self) -> None:
        stats = gather_text_stats(b"\x7f\x01\x1f")
        self.assertEqual(3, stats.nonprintable)
        self.assertEqual(0, stats.nul)

    def test_high_bytes_printable(self) -> None:
        stats = gather_text_stats("héllo".encode())
        self.assertEqual(6, stats.printable)

    def test_trailing_eof_marker(self) -> None:
        without = gather_text_stats(b"text\x01")
        with_marker = gather_text_stats(b"text\x01\x1a")
        self.assertEqual(without.nonprintable, with_marker.nonprintable)
        self.assertEqual(
            gather_text_stats(b"text\x1a\x01").nonprintable - 1,
            with_marker.nonprintable,
        )

    def test_only_eof_marker(self) -> None:
        self.assertEqual(0, gather_text_stats(b"\x1a").nonprintable)

    def test_eof_marker_not_at_end(self) -> None:
        self.assertEqual(1, gather_text_stats(b"\x1aabc").nonprintable)

    def test_buffer(self) -> None:
        self.assertEqual(
            gather_text_stats(b"a\r\nb\x00"), gather_text_stats(Buffer(b"a\r\nb\x00"))
        )

    def test_deterministic(self) -> None:
        data = bytes(range(256)) * 3
        self.assertEqual(gather_text_stats(data), gather_text_stats(data))

    def test_crlf_not_more_than_cr(self) -> None:
        stats = gather_text_stats(b"\r\n\r\r\n\n\r")
        self.assertLessEqual(stats.crlf, stats.cr)


class TextIsBinaryTests(TestCase):
    def test_nul_is_binary(self) -> None:
        self.assertTrue(is_binary(b"\x00"))
        self.assertTrue(is_binary(b"x" * 100000 + b"\x00"))

    def test_plain_text(self) -> None:
        self.assertFalse(is_binary(b"line1\nline2\r\n"))

    def test_empty(self) -> None:
        self.assertFalse(is_binary(b""))

    def test_threshold(self) -> None:
        # 128 printable bytes tolerate a single control byte
        self.assertFalse(is_binary(b"a" * 128 + b"\x01"))
        self.assertTrue(is_binary(b"a" * 127 + b"\x01"))
        self.assertTrue(is_binary(b"a" * 255 + b"\x01\x01"))
        self.assertFalse(is_binary(b"a" * 256 + b"\x01\x01"))

    def test_stats(self) -> None:
        self.assertTrue(text_is_binary(TextStats(nul=1, printable=1 << 20)))
        self.assertFalse(text_is_binary(TextStats(printable=1280, nonprintable=10)))
        self.assertTrue(text_is_binary(TextStats(printable=1280, nonprintable=11)))

    def test_trailing_eof_marker_is_text(self) -> None:
        self.assertTrue(is_binary(b"\x1a\x1a"))
        self.assertFalse(is_binary(b"a" * 128 + b"\x1a"))
