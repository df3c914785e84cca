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
"""Named segment files kept in the artifact directory.
"""

import errno
import os

import glog

from .errors import ArtifactMissingError

HEADER = 'hdr'
SIGNATURE = 'sig'
CMDLINE = 'cmdline.txt'
PARAMETER = 'parameter'
BOOTSTUB = 'bootstub'
KERNEL = 'kernel'
RAMDISK = 'ramdisk.cpio.gz'

OPTIONAL_ARTIFACTS = (HEADER, SIGNATURE)
REQUIRED_ARTIFACTS = (CMDLINE, PARAMETER, BOOTSTUB, KERNEL, RAMDISK)


class ArtifactDir(object):
    """ArtifactDir reads and writes the segment files of one boot image.
    """
    def __init__(self, directory):
        self.directory = directory


    @staticmethod
    def for_config(config):
        """Return the artifact directory named by a Config."""
        return ArtifactDir(config.directory)


    def path(self, name):
        return os.path.join(self.directory, name)


    def write(self, name, data):
        """Create or replace an artifact.

        Args:
            name Artifact name, one of the module level constants.
            data Bytes to store.
        """
        path = self.path(name)
        with open(path, 'wb') as out:
            out.write(data)
        glog.info('Wrote %s (%d bytes)', path, len(data))


    def read(self, name):
        """Read a required artifact.

        Raises:
            ArtifactMissingError if the artifact cannot be opened.
        """
        try:
            with open(self.path(name), 'rb') as infile:
                return infile.read()
        except OSError as exc:
            raise ArtifactMissingError(name, exc.strerror)


    def read_optional(self, name):
        """Read an artifact whose absence is valid input.

        Returns:
            artifact bytes, or None if the artifact does not exist.
        """
        try:
            with open(self.path(name), 'rb') as infile:
                return infile.read()
        except OSError as exc:
            if exc.errno != errno.ENOENT:
                raise
            glog.debug('No %s artifact in %s', name, self.directory)
            return None


    def discard(self, name):
        """Remove an optional artifact left over from an earlier unpack."""
        path = self.path(name)
        if os.path.exists(path):
            os.remove(path)
            glog.info('Removed stale %s', path)
