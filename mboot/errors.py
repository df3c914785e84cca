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
"""Errors raised while unpacking or repacking boot images."""


class MbootError(Exception):
    """Base class of every error that ends an mboot operation."""


class ConfigError(MbootError):
    pass


class ArtifactMissingError(MbootError):
    """A required artifact is not present in the artifact directory."""

    def __init__(self, name, reason=None):
        self.name = name
        self.reason = reason
        if reason:
            message = "cannot open input file '%s': %s" % (name, reason)
        else:
            message = "cannot open input file '%s'" % name
        super(ArtifactMissingError, self).__init__(message)


class ImageFormatError(MbootError):
    pass


class SizeRangeError(ImageFormatError):
    """A size field decoded outside of its accepted range."""

    def __init__(self, region, size, size_range):
        self.region = region
        self.size = size
        self.size_range = size_range
        super(SizeRangeError, self).__init__(
            'unpacking error: %s size likely wrong (%d not in [%d, %d])' %
            ((region, size) + tuple(size_range)))


class TruncatedImageError(ImageFormatError):
    """The image ends before a region could be read in full."""

    def __init__(self, region, offset, size, available):
        self.region = region
        self.offset = offset
        self.size = size
        self.available = available
        super(TruncatedImageError, self).__init__(
            'unpacking error: %s needs %d bytes at offset %d, only %d left' %
            (region, size, offset, available))
