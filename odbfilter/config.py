# config.py -- Reading Git configuration files
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

"""Reading Git configuration files.

Only the subset of the format needed to look up repository settings is
supported: sections, quoted subsections, values with escapes, comments and
backslash line continuations.
Include directives are not followed.
"""

__all__ = [
    "CVAR_FALSE",
    "CVAR_STRING",
    "CVAR_TRUE",
    "Config",
    "ConfigDict",
    "ConfigError",
    "ConfigFile",
    "ConfigMapEntry",
    "parse_boolean",
]

import logging
import os
import sys
from collections.abc import Sequence
from typing import IO, Any, NamedTuple

logger = logging.getLogger(__name__)

Section = tuple[bytes, ...]
SectionLike = bytes | str | tuple[bytes | str, ...]
Name = bytes
NameLike = bytes | str
Value = bytes
ValueLike = bytes | str

CVAR_FALSE = 0
CVAR_TRUE = 1
CVAR_STRING = 2

_TRUE_VALUES = (b"true", b"yes", b"on", b"1")
_FALSE_VALUES = (b"false", b"no", b"off", b"0", b"")


class ConfigError(ValueError):
    """A configuration file or value could not be understood."""


class ConfigMapEntry(NamedTuple):
    """One row of a table mapping configuration values to Python values.

    Attributes:
      kind: One of CVAR_FALSE, CVAR_TRUE or CVAR_STRING
      match: The string to compare against for CVAR_STRING entries
      value: The value a match resolves to
    """

    kind: int
    match: bytes | None
    value: Any


def parse_boolean(value: bytes) -> bool | None:
    """Parse a Git boolean.

    Returns: True or False, or None if value is not a boolean
    """
    value = value.lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


class Config:
    """A Git configuration."""

    def get(self, section: SectionLike, name: NameLike) -> Value:
        """Retrieve the contents of a configuration setting.

        Args:
          section: Tuple with section name and optional subsection name
          name: Variable name
        Returns:
          Contents of the setting
        Raises:
          KeyError: if the value is not set
        """
        raise NotImplementedError(self.get)

    def get_mapped(
        self,
        section: SectionLike,
        name: NameLike,
        mapping: Sequence[ConfigMapEntry],
    ) -> Any:
        """Retrieve a configuration setting and map it through a table.

        Entries are tried in order and the first match wins.

        Args:
          section: Tuple with section name and optional subsection name
          name: Variable name
          mapping: Sequence of `ConfigMapEntry` rows
        Returns:
          The ``value`` of the first matching entry
        Raises:
          KeyError: if the value is not set
          ConfigError: if no entry matches the value
        """
        value = self.get(section, name)
        truth = parse_boolean(value)
        for entry in mapping:
            if entry.kind == CVAR_FALSE:
                if truth is False:
                    return entry.value
            elif entry.kind == CVAR_TRUE:
                if truth is True:
                    return entry.value
            elif entry.kind == CVAR_STRING:
                if entry.match is not None and value.lower() == entry.match.lower():
                    return entry.value
            else:
                raise ValueError(f"unknown mapping kind {entry.kind!r}")
        raise ConfigError(
            f"unable to map {name!r} value {value!r} to a valid setting"
        )


class ConfigDict(Config):
    """Git configuration stored in a dictionary.

    Section and variable names are case-insensitive; subsection names are
    not.
    """

    def __init__(self, encoding: str | None = None) -> None:
        """Create a new ConfigDict."""
        if encoding is None:
            encoding = sys.getdefaultencoding()
        self.encoding = encoding
        self._values: dict[Section, dict[Name, Value]] = {}

    def __repr__(self) -> str:
        """Return string representation of ConfigDict."""
        return f"{self.__class__.__name__}({self._values!r})"

    def __eq__(self, other: object) -> bool:
        """Check equality with another ConfigDict."""
        return isinstance(other, self.__class__) and other._values == self._values

    def _check_section_and_name(
        self, section: SectionLike, name: NameLike
    ) -> tuple[Section, Name]:
        if not isinstance(section, tuple):
            section = (section,)
        checked = [
            part.encode(self.encoding) if isinstance(part, str) else part
            for part in section
        ]
        checked[0] = checked[0].lower()
        if isinstance(name, str):
            name = name.encode(self.encoding)
        return tuple(checked), name.lower()

    def get(self, section: SectionLike, name: NameLike) -> Value:
        """Get a configuration value.

        Raises:
          KeyError: if the value is not set
        """
        section, name = self._check_section_and_name(section, name)
        return self._values[section][name]

    def set(
        self, section: SectionLike, name: NameLike, value: ValueLike | bool
    ) -> None:
        """Set a configuration value.

        Args:
          section: Tuple with section name and optional subsection name
          name: Name of the configuration value
          value: value of the setting
        """
        section, name = self._check_section_and_name(section, name)
        if isinstance(value, bool):
            value = b"true" if value else b"false"
        elif isinstance(value, str):
            value = value.encode(self.encoding)
        self._values.setdefault(section, {})[name] = value


_ESCAPE_TABLE = {
    ord(b"\\"): ord(b"\\"),
    ord(b'"'): ord(b'"'),
    ord(b"n"): ord(b"\n"),
    ord(b"t"): ord(b"\t"),
    ord(b"b"): ord(b"\b"),
}
_COMMENT_CHARS = (ord(b"#"), ord(b";"))
_WHITESPACE_CHARS = (ord(b"\t"), ord(b" "))


def _parse_value(value: bytes) -> bytes:
    ret = bytearray()
    pending_space = bytearray()
    in_quotes = False
    chars = iter(value.strip())
    for c in chars:
        if c == ord(b"\\"):
            escaped = next(chars, None)
            if escaped is None:
                raise ConfigError("escape at end of value")
            try:
                ret.extend(pending_space)
                ret.append(_ESCAPE_TABLE[escaped])
            except KeyError as exc:
                raise ConfigError(f"invalid escape \\{chr(escaped)}") from exc
            pending_space.clear()
        elif c == ord(b'"'):
            in_quotes = not in_quotes
        elif c in _COMMENT_CHARS and not in_quotes:
            break
        elif c in _WHITESPACE_CHARS and not in_quotes:
            pending_space.append(c)
        else:
            ret.extend(pending_space)
            pending_space.clear()
            ret.append(c)
    if in_quotes:
        raise ConfigError("missing end quote")
    return bytes(ret)


def _parse_section_header(line: bytes) -> tuple[Section, bytes]:
    end = line.find(b"]")
    if end == -1:
        raise ConfigError("expected trailing ]")
    header, rest = line[1:end], line[end + 1 :]
    parts = header.split(b" ", 1)
    name = parts[0]
    if not name or not all(
        c.isalnum() or c in "-." for c in name.decode("ascii", "replace")
    ):
        raise ConfigError(f"invalid section name {name!r}")
    if len(parts) == 2:
        subsection = parts[1].strip()
        if subsection[:1] != b'"' or subsection[-1:] != b'"' or len(subsection) < 2:
            raise ConfigError(f"invalid subsection {subsection!r}")
        return (name.lower(), subsection[1:-1]), rest
    if b"." in name:
        section_name, subsection = name.split(b".", 1)
        return (section_name.lower(), subsection), rest
    return (name.lower(),), rest


def _check_variable_name(name: bytes) -> bool:
    return bool(name) and all(
        c.isalnum() or c in "-_" for c in name.decode("ascii", "replace")
    )


def _is_line_continuation(value: bytes) -> bool:
    """Check if a raw line ends with a backslash that continues the value.

    The backslash must come right before the newline and must not itself be
    escaped, i.e. the line ends in an odd number of backslashes.
    """
    if not value.endswith((b"\\\n", b"\\\r\n")):
        return False
    content = value.rstrip(b"\r\n")
    backslash_count = len(content) - len(content.rstrip(b"\\"))
    return backslash_count % 2 == 1


def _strip_continuation(value: bytes) -> bytes:
    return value.rstrip(b"\r\n")[:-1]


def _parse_line_value(value: bytes, lineno: int) -> bytes:
    try:
        return _parse_value(value)
    except ConfigError as exc:
        raise ConfigError(f"line {lineno}: {exc}") from exc


class ConfigFile(ConfigDict):
    """A Git configuration file, like .git/config."""

    def __init__(self, encoding: str | None = None) -> None:
        """Initialize a ConfigFile."""
        super().__init__(encoding=encoding)
        self.path: str | None = None

    @classmethod
    def from_file(cls, f: IO[bytes]) -> "ConfigFile":
        """Read configuration from a file-like object.

        Raises:
          ConfigError: if the file is not valid Git configuration
        """
        ret = cls()
        section: Section | None = None
        # Variable whose value is being continued onto the next line
        setting: Name | None = None
        continuation = b""
        lineno = 0
        for lineno, line in enumerate(f.readlines(), 1):
            if lineno == 1 and line.startswith(b"\xef\xbb\xbf"):
                line = line[3:]
            if setting is not None:
                assert section is not None
                if _is_line_continuation(line):
                    continuation += _strip_continuation(line)
                    continue
                continuation += line
                ret._values[section][setting] = _parse_line_value(
                    continuation, lineno
                )
                setting = None
                continue
            stripped = line.strip()
            if stripped[:1] == b"[":
                try:
                    section, line = _parse_section_header(line.lstrip())
                except ConfigError as exc:
                    raise ConfigError(f"line {lineno}: {exc}") from exc
                ret._values.setdefault(section, {})
                stripped = line.strip()
            if not stripped or stripped[0] in _COMMENT_CHARS:
                continue
            if section is None:
                raise ConfigError(
                    f"line {lineno}: setting {stripped!r} without section"
                )
            name, sep, raw = line.partition(b"=")
            name = name.strip()
            if not _check_variable_name(name):
                raise ConfigError(f"line {lineno}: invalid variable name {name!r}")
            if not sep:
                value = b"true"
            elif _is_line_continuation(raw):
                setting = name.lower()
                continuation = _strip_continuation(raw)
                continue
            else:
                value = _parse_line_value(raw, lineno)
            ret._values[section][name.lower()] = value
        if setting is not None:
            assert section is not None
            ret._values[section][setting] = _parse_line_value(continuation, lineno)
        return ret

    @classmethod
    def from_path(cls, path: str | os.PathLike[str]) -> "ConfigFile":
        """Read configuration from a file on disk."""
        abs_path = os.fspath(path)
        logger.debug("reading configuration from %s", abs_path)
        with open(abs_path, "rb") as f:
            ret = cls.from_file(f)
        ret.path = abs_path
        return ret
