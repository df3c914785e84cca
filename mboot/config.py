#
# Copyright (C) 2026 The Android Open Source Project
#
# Licensed under the Apache License, Version 2.0(the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#      http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
"""Run configuration shared by the unpack and pack pipelines."""

import collections
import os
import stat

from .errors import ConfigError

DEFAULT_FILENAME = 'boot.img'
DEFAULT_DIRECTORY = './'

Config = collections.namedtuple('Config', ['filename', 'directory', 'unpack'])


def make_config(filename=DEFAULT_FILENAME, directory=DEFAULT_DIRECTORY,
                unpack=False):
    """Builds a Config after checking that directory is usable.

    Raises:
      ConfigError: directory does not exist or is not a directory.
    """
    try:
        st = os.stat(directory)
    except OSError as exc:
        raise ConfigError("cannot access '%s': %s" % (directory, exc.strerror))
    if not stat.S_ISDIR(st.st_mode):
        raise ConfigError("cannot access '%s': Is not a directory" % directory)
    return Config(filename=filename, directory=directory, unpack=unpack)
