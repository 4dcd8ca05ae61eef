# buffer.py -- Growable byte buffer shared by filters
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

"""Growable byte buffer used as the currency between filters.

A buffer never raises when it runs out of room. Instead it drops the write and
remembers the failure; callers check `Buffer.oom` at the points where they can
act on it. An optional ``max_size`` caps how large the buffer may get.
"""

__all__ = ["Buffer"]

from typing import overload


class Buffer:
    """A mutable sequence of bytes with sticky out-of-memory tracking."""

    def __init__(
        self, data: bytes | bytearray | memoryview = b"", max_size: int | None = None
    ) -> None:
        """Create a new Buffer.

        Args:
          data: Initial contents
          max_size: Maximum number of bytes the buffer may hold, or None
        """
        self.max_size = max_size
        self._data = bytearray()
        self._capacity = 0
        self._oom = False
        self.write(data)

    def __repr__(self) -> str:
        """Return string representation of this buffer."""
        return f"{self.__class__.__name__}({bytes(self._data)!r})"

    @property
    def oom(self) -> bool:
        """Whether an allocation failed since the last clear()."""
        return self._oom

    @property
    def capacity(self) -> int:
        """Number of bytes reserved by grow() or written so far."""
        return max(self._capacity, len(self._data))

    def _fits(self, size: int) -> bool:
        return self.max_size is None or size <= self.max_size

    def grow(self, size: int) -> bool:
        """Make sure the buffer can hold at least size bytes.

        Returns: False if the space could not be reserved; the buffer is then
            marked as out of memory.
        """
        if self._oom:
            return False
        if size <= self.capacity:
            return True
        if not self._fits(size):
            self._oom = True
            return False
        self._capacity = size
        return True

    def write(self, data: bytes | bytearray | memoryview) -> None:
        """Append data to the buffer.

        Writes to a buffer that is out of memory, or that would exceed
        ``max_size``, are dropped.
        """
        if self._oom:
            return
        if not self._fits(len(self._data) + len(data)):
            self._oom = True
            return
        try:
            self._data.extend(data)
        except MemoryError:
            self._oom = True

    def clear(self) -> None:
        """Drop the contents of the buffer, keeping reserved capacity."""
        self._data.clear()
        self._oom = False

    def swap(self, other: "Buffer") -> None:
        """Exchange contents and state with another buffer.

        Each buffer keeps its own ``max_size``.
        """
        self._data, other._data = other._data, self._data
        self._capacity, other._capacity = other._capacity, self._capacity
        self._oom, other._oom = other._oom, self._oom

    def getvalue(self) -> bytes:
        """Return the contents as an immutable bytes object."""
        return bytes(self._data)

    def __bytes__(self) -> bytes:
        return self.getvalue()

    def __len__(self) -> int:
        return len(self._data)

    def __bool__(self) -> bool:
        return bool(self._data)

    @overload
    def __getitem__(self, index: int) -> int: ...

    @overload
    def __getitem__(self, index: slice) -> bytes: ...

    def __getitem__(self, index: int | slice) -> int | bytes:
        if isinstance(index, slice):
            return bytes(self._data[index])
        return self._data[index]

    def __eq__(self, other: object) -> bool:
        """Compare contents with another buffer or bytes-like object."""
        if isinstance(other, Buffer):
            return self._data == other._data
        if isinstance(other, (bytes, bytearray, memoryview)):
            return self._data == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]
