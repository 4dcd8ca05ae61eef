#!/usr/bin/python3
# Setup file for odbfilter
# Copyright (C) 2026 The odbfilter contributors
# SPDX-License-Identifier: Apache-2.0 OR GPL-2.0-or-later

from setuptools import setup

setup(
    package_data={"": ["py.typed"]},
)
