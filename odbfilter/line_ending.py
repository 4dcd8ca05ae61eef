# line_ending.py -- Line ending normalization when writing to the object store
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

r"""CRLF to LF conversion for content being written to the object store.

When ``core.auto_crlf`` is ``true`` or ``input``, Git converts CRLF line
endings to LF on check-in. It only does so when that is safe to undo:

- content without any CR is left alone, there is nothing to convert;
- content with a bare CR (one not followed by LF) is left alone, since
  dropping CRs would lose information;
- content that looks binary (see `odbfilter.text`) is left alone.

``core.eol`` only decides what line endings are used on checkout, so it does
not change what happens here.
"""

__all__ = [
    "CRLF",
    "LF",
    "CrlfFilter",
    "add_crlf_to_odb",
    "convert_crlf_to_lf",
]

import logging
import os
import posixpath
from typing import TYPE_CHECKING

from .buffer import Buffer
from .filters import FILTER_OK, FILTER_SKIP, Filter, FilterConstructionError
from .settings import AutoCrlfPolicy
from .text import gather_text_stats, text_is_binary

if TYPE_CHECKING:
    from .repo import BaseRepo

CRLF = b"\r\n"
LF = b"\n"

logger = logging.getLogger(__name__)


def convert_crlf_to_lf(text_hunk: bytes) -> bytes:
    """Convert CRLF in text hunk into LF.

    Args:
      text_hunk: A bytes string representing a text hunk
    Returns: The text hunk with CRLF replaced by LF
    """
    return text_hunk.replace(CRLF, LF)


class CrlfFilter:
    """Filter dropping the CR of every CRLF on the way into the object store."""

    def __init__(self, repo: "BaseRepo", path: bytes | str) -> None:
        """Create a CrlfFilter for a path.

        The repository's filter settings must already be loaded.

        Args:
          repo: Repository the content belongs to
          path: Tree path of the content
        Raises:
          FilterConstructionError: if path is not a relative tree path
        """
        if isinstance(path, str):
            path = os.fsencode(path)
        if not path:
            raise FilterConstructionError("empty path")
        if posixpath.isabs(path):
            raise FilterConstructionError(f"path {path!r} is not relative")
        self.path = path
        self.eol = repo.filter_settings.eol
        self.auto_crlf = repo.filter_settings.auto_crlf

    def __repr__(self) -> str:
        """Return string representation of this filter."""
        return (
            f"{self.__class__.__name__}({self.path!r}, "
            f"auto_crlf={self.auto_crlf.name})"
        )

    def apply(self, dest: Buffer, source: Buffer) -> int:
        """Write source with CRLF converted to LF into dest."""
        if self.auto_crlf is AutoCrlfPolicy.FALSE:
            return FILTER_SKIP

        stats = gather_text_stats(source)

        # If there are no CR characters to filter out, then just pass
        if not stats.cr:
            return FILTER_SKIP

        # Bare CRs would be lost
        if stats.cr != stats.crlf:
            return FILTER_SKIP

        if text_is_binary(stats):
            logger.debug("not converting line endings of binary file %r", self.path)
            return FILTER_SKIP

        dest.write(convert_crlf_to_lf(source.getvalue()))
        return FILTER_OK

    def cleanup(self) -> None:
        """Clean up any resources held by this filter."""
        # CrlfFilter doesn't hold any resources that need cleanup


def add_crlf_to_odb(
    filters: list[Filter], repo: "BaseRepo", path: bytes | str
) -> None:
    """Append a `CrlfFilter` for path to filters."""
    filters.append(CrlfFilter(repo, path))
