# settings.py -- Line ending settings cached on a repository
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

r"""Line ending settings, read once per repository.

Two configuration variables steer line-ending normalization:

``core.eol``
    ``lf``, ``crlf`` or ``native``; ``false`` or unset leaves it unset.

``core.auto_crlf``
    ``true``, ``false`` (default) or ``input``. When it is not set the
    spelling Git itself writes, ``core.autocrlf``, is consulted instead.

The values are looked up the first time filters are loaded for a repository
and cached on the repository object. Later changes to the configuration are
not picked up by that repository object.
"""

__all__ = [
    "AUTOCRLF_MAP",
    "EOL_MAP",
    "AutoCrlfPolicy",
    "EolPolicy",
    "FilterSettings",
    "load_filter_settings",
]

import logging
from enum import Enum
from typing import TYPE_CHECKING

from .config import CVAR_FALSE, CVAR_STRING, CVAR_TRUE, ConfigDict, ConfigMapEntry

if TYPE_CHECKING:
    from .repo import BaseRepo

logger = logging.getLogger(__name__)


class EolPolicy(Enum):
    """Value of ``core.eol``."""

    UNSET = 0
    LF = 1
    CRLF = 2
    NATIVE = 3


class AutoCrlfPolicy(Enum):
    """Value of ``core.auto_crlf``."""

    FALSE = 0
    TRUE = 1
    INPUT = 2


EOL_DEFAULT = EolPolicy.UNSET
AUTOCRLF_DEFAULT = AutoCrlfPolicy.FALSE

EOL_MAP = (
    ConfigMapEntry(CVAR_FALSE, None, EolPolicy.UNSET),
    ConfigMapEntry(CVAR_STRING, b"lf", EolPolicy.LF),
    ConfigMapEntry(CVAR_STRING, b"crlf", EolPolicy.CRLF),
    ConfigMapEntry(CVAR_STRING, b"native", EolPolicy.NATIVE),
)

AUTOCRLF_MAP = (
    ConfigMapEntry(CVAR_FALSE, None, AutoCrlfPolicy.FALSE),
    ConfigMapEntry(CVAR_TRUE, None, AutoCrlfPolicy.TRUE),
    ConfigMapEntry(CVAR_STRING, b"input", AutoCrlfPolicy.INPUT),
)

AUTOCRLF_NAMES = (b"auto_crlf", b"autocrlf")


class FilterSettings:
    """Filter-related settings of a repository.

    Attributes:
      eol: The configured `EolPolicy`
      auto_crlf: The configured `AutoCrlfPolicy`
      loaded: Whether the values above have been read from configuration
    """

    def __init__(self) -> None:
        """Create settings holding the defaults, not yet loaded."""
        self.eol = EOL_DEFAULT
        self.auto_crlf = AUTOCRLF_DEFAULT
        self.loaded = False

    def __repr__(self) -> str:
        """Return string representation of these settings."""
        return (
            f"{self.__class__.__name__}(eol={self.eol.name}, "
            f"auto_crlf={self.auto_crlf.name}, loaded={self.loaded})"
        )


def _read_auto_crlf(config: ConfigDict) -> AutoCrlfPolicy:
    for name in AUTOCRLF_NAMES:
        try:
            return config.get_mapped(b"core", name, AUTOCRLF_MAP)
        except KeyError:
            continue
    return AUTOCRLF_DEFAULT


def load_filter_settings(repo: "BaseRepo") -> None:
    """Make sure the filter settings of a repository have been read.

    Does nothing once the settings have been loaded. If reading the
    configuration fails the settings are left unloaded, so a later call will
    try again.

    Args:
      repo: Repository whose ``filter_settings`` to populate
    Raises:
      ConfigError: if a value is set but cannot be mapped, or the
        configuration file is malformed
      OSError: if the configuration could not be read
    """
    settings = repo.filter_settings
    if settings.loaded:
        return
    with repo._filter_settings_lock:
        if settings.loaded:
            return

        settings.eol = EOL_DEFAULT
        settings.auto_crlf = AUTOCRLF_DEFAULT

        config = repo.get_config()
        try:
            eol = config.get_mapped(b"core", b"eol", EOL_MAP)
        except KeyError:
            eol = EOL_DEFAULT
        auto_crlf = _read_auto_crlf(config)

        settings.eol = eol
        settings.auto_crlf = auto_crlf
        settings.loaded = True
        logger.debug("loaded filter settings for %r: %r", repo, settings)
