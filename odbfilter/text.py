# text.py -- Binary/text classification of content
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

"""Heuristics for telling binary content apart from text.

The statistics gathered here are the same ones C Git uses to decide whether
line-ending conversion may be applied to a file. Only the NUL count and the
ratio of printable to non-printable bytes feed into the decision; line ending
counts are gathered for the benefit of filters that want them.
"""

__all__ = [
    "TextStats",
    "gather_text_stats",
    "is_binary",
    "text_is_binary",
]

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .buffer import Buffer

CR = 0x0D
LF = 0x0A
DEL = 0x7F
EOF_MARKER = 0x1A

# BS, HT, ESC and FF
PRINTABLE_CONTROL = frozenset([0x08, 0x09, 0x1B, 0x0C])


@dataclass
class TextStats:
    """Byte class counts for a chunk of content."""

    cr: int = 0
    crlf: int = 0
    lf: int = 0
    printable: int = 0
    nonprintable: int = 0
    nul: int = 0


def gather_text_stats(data: "bytes | bytearray | memoryview | Buffer") -> TextStats:
    """Count the classes of bytes in data.

    The ``\\n`` of a ``\\r\\n`` pair is counted as part of the pair, not as a
    separate ``lf``. A trailing EOF marker (0x1A) is not counted as
    non-printable.

    Args:
      data: bytes-like object (or Buffer) to scan
    Returns: A new `TextStats`
    """
    stats = TextStats()
    size = len(data)
    i = 0
    while i < size:
        c = data[i]
        i += 1
        if c == CR:
            stats.cr += 1
            if i < size and data[i] == LF:
                stats.crlf += 1
                i += 1
        elif c == LF:
            stats.lf += 1
        elif c == DEL:
            stats.nonprintable += 1
        elif c < 0x20:
            if c in PRINTABLE_CONTROL:
                stats.printable += 1
            else:
                if c == 0:
                    stats.nul += 1
                stats.nonprintable += 1
        else:
            stats.printable += 1

    if size and data[size - 1] == EOF_MARKER:
        stats.nonprintable -= 1

    return stats


def text_is_binary(stats: TextStats) -> bool:
    """Decide whether content with the given statistics is binary."""
    if stats.nul:
        return True
    # Tolerate roughly one control byte per 128 printable ones.
    if (stats.printable >> 7) < stats.nonprintable:
        return True
    return False


def is_binary(data: "bytes | bytearray | memoryview | Buffer") -> bool:
    """Check whether data looks like binary content.

    Args:
      data: bytes-like object (or Buffer) to check
    """
    return text_is_binary(gather_text_stats(data))
