# repo.py -- For dealing with git repositories.
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

"""Repository access.

Only the parts of a repository the filters need are modelled here: where its
configuration lives and the filter settings cached on it.
"""

__all__ = [
    "CONTROLDIR",
    "BaseRepo",
    "MemoryRepo",
    "Repo",
]

import os
import threading

from .config import ConfigDict, ConfigFile
from .errors import NotGitRepository
from .settings import FilterSettings

CONTROLDIR = ".git"
OBJECTDIR = "objects"
REFSDIR = "refs"


class BaseRepo:
    """Base class for a git repository.

    Attributes:
      filter_settings: Filter settings cached on this repository, see
        `odbfilter.settings.load_filter_settings`
    """

    def __init__(self) -> None:
        """Initialize a new repository."""
        self.filter_settings = FilterSettings()
        self._filter_settings_lock = threading.Lock()

    def get_config(self) -> ConfigDict:
        """Retrieve the config object.

        Returns: `ConfigDict` object for the repository configuration.
        """
        raise NotImplementedError(self.get_config)


class Repo(BaseRepo):
    """A git repository backed by local disk.

    Attributes:
      path: Path to the working copy (if it exists) or repository control
        directory (if the repository is bare)
      bare: Whether this is a bare repository
    """

    def __init__(self, root: str | bytes | os.PathLike[str]) -> None:
        """Open a repository on disk.

        Args:
          root: Path to the repository's root.
        Raises:
          NotGitRepository: if no repository is found at root
        """
        super().__init__()
        root = os.fspath(root)
        if isinstance(root, bytes):
            root = os.fsdecode(root)
        hidden_path = os.path.join(root, CONTROLDIR)
        if os.path.isdir(hidden_path):
            self.bare = False
            self._controldir = hidden_path
        elif os.path.isdir(os.path.join(root, OBJECTDIR)) and os.path.isdir(
            os.path.join(root, REFSDIR)
        ):
            self.bare = True
            self._controldir = root
        else:
            raise NotGitRepository(f"No git repository was found at {root}")
        self.path = root

    def __repr__(self) -> str:
        """Return string representation of this repository."""
        return f"<Repo at {self.path!r}>"

    def controldir(self) -> str:
        """Return the path of the control directory."""
        return self._controldir

    def get_config(self) -> ConfigFile:
        """Retrieve the config object.

        The file is read afresh on every call.

        Returns: `ConfigFile` object for the ``.git/config`` file.
        """
        path = os.path.join(self._controldir, "config")
        try:
            return ConfigFile.from_path(path)
        except FileNotFoundError:
            ret = ConfigFile()
            ret.path = path
            return ret


class MemoryRepo(BaseRepo):
    """Repo whose configuration lives in memory."""

    def __init__(self, config: ConfigDict | None = None) -> None:
        """Create a new repository in memory.

        Args:
          config: Configuration to use; an empty one is created if omitted
        """
        super().__init__()
        self._config = ConfigFile() if config is None else config

    def get_config(self) -> ConfigDict:
        """Retrieve the config object."""
        return self._config
