# filters.py -- Filter chains applied to content entering the object store
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

"""Building, applying and freeing chains of content filters.

A chain is a plain list of filters, applied in list order. Each filter reads
from one buffer and writes into another. A filter that does not want to touch
its input returns a non-zero status; its output is then thrown away and the
next filter sees the same input, so a declining filter never changes the
result.

Typical use::

    filters = []
    load_filters(filters, repo, b"README", FilterMode.TO_ODB)
    try:
        apply_filters(dest, source, filters)
    finally:
        free_filters(filters)
"""

__all__ = [
    "FILTER_OK",
    "FILTER_SKIP",
    "Filter",
    "FilterConstructionError",
    "FilterError",
    "FilterMode",
    "FilterNotImplemented",
    "FilterOutOfMemory",
    "apply_filters",
    "filter_data",
    "free_filters",
    "load_filters",
]

import logging
from enum import Enum
from typing import TYPE_CHECKING, Protocol

from .buffer import Buffer
from .settings import load_filter_settings

if TYPE_CHECKING:
    from .repo import BaseRepo

logger = logging.getLogger(__name__)

FILTER_OK = 0
FILTER_SKIP = -1


class FilterError(Exception):
    """Exception raised when filter operations fail."""


class FilterNotImplemented(FilterError, NotImplementedError):
    """The requested filter direction is not supported."""


class FilterConstructionError(FilterError):
    """A filter could not be created for a path."""


class FilterOutOfMemory(FilterError, MemoryError):
    """A buffer could not grow while applying filters."""


class FilterMode(Enum):
    """Direction content is moving in."""

    TO_ODB = 1
    TO_WORKTREE = 2


class Filter(Protocol):
    """Protocol for filters.

    Filters may also provide a ``cleanup()`` method, which `free_filters`
    calls to release any resources they hold.
    """

    def apply(self, dest: Buffer, source: Buffer) -> int:
        """Write the filtered contents of source into dest.

        Returns: FILTER_OK if dest holds the result, any other value to
            leave the content unchanged
        """
        ...


def load_filters(
    filters: list[Filter],
    repo: "BaseRepo",
    path: bytes | str,
    mode: FilterMode,
) -> int:
    """Append the filters that apply to path when moving it in mode.

    Nothing is appended unless all filters could be created.

    Args:
      filters: List to append the filters to
      repo: Repository the content belongs to
      path: Tree path of the content
      mode: Direction the content is moving in
    Returns: Number of filters appended
    Raises:
      ConfigError: if the repository settings could not be read
      FilterNotImplemented: for FilterMode.TO_WORKTREE
      FilterConstructionError: if a filter could not be created
    """
    # Make sure the relevant settings have been cached on the repository
    load_filter_settings(repo)

    loaded: list[Filter] = []
    if mode is FilterMode.TO_ODB:
        from .line_ending import add_crlf_to_odb

        add_crlf_to_odb(loaded, repo, path)
    else:
        raise FilterNotImplemented("Worktree filters are not implemented yet")

    filters.extend(loaded)
    logger.debug("loaded %d filter(s) for %r", len(loaded), path)
    return len(loaded)


def free_filters(filters: list[Filter]) -> None:
    """Release the filters in a chain and empty it."""
    for f in filters:
        cleanup = getattr(f, "cleanup", None)
        if cleanup is not None:
            cleanup()
    filters.clear()


def apply_filters(dest: Buffer, source: Buffer, filters: list[Filter]) -> None:
    """Run source through a chain of filters, leaving the result in dest.

    Both buffers are used as scratch space; once this returns, the contents
    of source are unspecified.

    Args:
      dest: Buffer to receive the result
      source: Buffer with the content to filter
      filters: Filters to apply, in order
    Raises:
      FilterOutOfMemory: if a buffer could not grow. The contents of both
        buffers are then undefined.
    """
    if dest is source:
        raise ValueError("source and destination buffers must differ")

    if not len(source):
        dest.clear()
        return

    # Pre-grow the destination buffer to more or less the size
    # we expect it to have
    if not dest.grow(len(source)):
        raise FilterOutOfMemory("unable to grow destination buffer")

    buffers = [source, dest]
    current = 0

    for f in filters:
        target = 1 - current
        buffers[target].clear()

        status = f.apply(buffers[target], buffers[current])

        if buffers[target].oom:
            raise FilterOutOfMemory(f"out of memory while applying {f!r}")

        if status == FILTER_OK:
            current = target
        else:
            logger.debug("filter %r declined to run (status %d)", f, status)

    if buffers[current] is not dest:
        dest.swap(source)


def filter_data(
    repo: "BaseRepo",
    path: bytes | str,
    data: bytes,
    mode: FilterMode = FilterMode.TO_ODB,
) -> bytes:
    """Filter a single chunk of content.

    Args:
      repo: Repository the content belongs to
      path: Tree path of the content
      data: The content
      mode: Direction the content is moving in
    Returns: The filtered content
    """
    filters: list[Filter] = []
    load_filters(filters, repo, path, mode)
    try:
        source = Buffer(data)
        dest = Buffer()
        apply_filters(dest, source, filters)
        return dest.getvalue()
    finally:
        free_filters(filters)
