# test_repository.py -- tests for repository.py
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

"""Tests for the repository."""

import os
import shutil
import tempfile

from odbfilter.config import ConfigDict, ConfigFile
from odbfilter.errors import NotGitRepository
from odbfilter.repo import MemoryRepo, Repo
from odbfilter.settings import FilterSettings

from . import TestCase


class RepositoryRootTests(TestCase):
    def setUp(self) -> None:
        super().setUp()
        self.tempdir = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tempdir)

    def test_not_a_repository(self) -> None:
        self.assertRaises(NotGitRepository, Repo, self.tempdir)

    def test_worktree(self) -> None:
        os.mkdir(os.path.join(self.tempdir, ".git"))
        r = Repo(self.tempdir)
        self.assertFalse(r.bare)
        self.assertEqual(os.path.join(self.tempdir, ".git"), r.controldir())
        self.assertEqual(self.tempdir, r.path)

    def test_bare(self) -> None:
        os.mkdir(os.path.join(self.tempdir, "objects"))
        os.mkdir(os.path.join(self.tempdir, "refs"))
        r = Repo(self.tempdir)
        self.assertTrue(r.bare)
        self.assertEqual(self.tempdir, r.controldir())

    def test_bytes_path(self) -> None:
        os.mkdir(os.path.join(self.tempdir, ".git"))
        r = Repo(os.fsencode(self.tempdir))
        self.assertEqual(self.tempdir, r.path)

    def test_get_config(self) -> None:
        os.mkdir(os.path.join(self.tempdir, ".git"))
        path = os.path.join(self.tempdir, ".git", "config")
        with open(path, "wb") as f:
            f.write(b"[core]\n\teol = lf\n")
        config = Repo(self.tempdir).get_config()
        self.assertEqual(b"lf", config.get(b"core", b"eol"))
        self.assertEqual(path, config.path)

    def test_get_config_missing(self) -> None:
        os.mkdir(os.path.join(self.tempdir, ".git"))
        config = Repo(self.tempdir).get_config()
        self.assertEqual(ConfigFile(), config)
        self.assertEqual(os.path.join(self.tempdir, ".git", "config"), config.path)

    def test_filter_settings_not_loaded(self) -> None:
        os.mkdir(os.path.join(self.tempdir, ".git"))
        r = Repo(self.tempdir)
        self.assertIsInstance(r.filter_settings, FilterSettings)
        self.assertFalse(r.filter_settings.loaded)


class MemoryRepoTests(TestCase):
    def test_default_config(self) -> None:
        r = MemoryRepo()
        self.assertEqual(ConfigFile(), r.get_config())

    def test_given_config(self) -> None:
        config = ConfigDict()
        r = MemoryRepo(config)
        self.assertIs(config, r.get_config())
