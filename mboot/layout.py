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
"""Layout of the Intel legacy boot image.

The image is a fixed sequence of regions:

    [hdr 512][sig 0/480/728/1024][cmdline 1024][sizes 8][parameter ... 4096]
    [bootstub 4096/8192][kernel][ramdisk][0xFF pad to 512]

Only the kernel and ramdisk lengths are stored in the image. Everything
else is either fixed or inferred by probing the content.
"""

import struct

SECTOR_SIZE = 512
HEADER_SIZE = 512

# Candidate steps between the end of the header and the cmdline block.
SIGNATURE_DELTAS = (0, 480, 248, 296)

CMDLINE_SIZE = 1024
SIZE_FIELD_SIZE = 4
PARAMETER_SIZE = 2 * SIZE_FIELD_SIZE
# cmdline, size fields, parameter and padding share one block.
CMDLINE_BLOCK_SIZE = 4096

KERNEL_SIZE_OFFSET = CMDLINE_SIZE
RAMDISK_SIZE_OFFSET = CMDLINE_SIZE + SIZE_FIELD_SIZE
PARAMETER_OFFSET = CMDLINE_SIZE + PARAMETER_SIZE
SIGNED_MARKER_OFFSET = CMDLINE_SIZE + 16
SIGNED_MARKER = b'\xBD\x02\xBD\x02\xBD\x12\xBD\x12'

BOOTSTUB_SIZE = 4096
BOOTSTUB_EXTENSION_SIZE = 4096

KERNEL_SIZE_RANGE = (500000, 15000000)
RAMDISK_SIZE_RANGE = (10000, 300000000)

PAD_BYTE = b'\xFF'

_U32 = struct.Struct('<I')


def read_u32(data, offset):
    """Decodes the little-endian unsigned 32-bit value at offset."""
    return _U32.unpack_from(data, offset)[0]


def write_u32(buf, offset, value):
    _U32.pack_into(buf, offset, value & 0xFFFFFFFF)


def in_range(value, size_range):
    low, high = size_range
    return low <= value <= high


def sector_padding(size):
    """Returns how many bytes bring size up to the next sector boundary."""
    remainder = size % SECTOR_SIZE
    if remainder == 0:
        return 0
    return SECTOR_SIZE - remainder


def xor_checksum(data):
    result = 0
    for value in data:
        result ^= value
    return result


class HeaderView(object):
    """Named accessors over the derived fields of a boot image header.

    The view writes through to the buffer it wraps, so it can be placed
    directly over the start of an image being assembled.
    """

    CHECKSUM_OFFSET = 7
    SECTORS_OFFSET = 48
    IMAGE_TYPE_OFFSET = 52
    CHECKSUM_SPAN = 56

    def __init__(self, buf):
        if len(buf) < self.CHECKSUM_SPAN:
            raise ValueError('header needs at least %d bytes, got %d' %
                             (self.CHECKSUM_SPAN, len(buf)))
        self._buf = buf

    @property
    def checksum(self):
        return self._buf[self.CHECKSUM_OFFSET]

    @checksum.setter
    def checksum(self, value):
        self._buf[self.CHECKSUM_OFFSET] = value & 0xFF

    @property
    def sectors(self):
        return read_u32(self._buf, self.SECTORS_OFFSET)

    @sectors.setter
    def sectors(self, value):
        write_u32(self._buf, self.SECTORS_OFFSET, value)

    @property
    def image_type(self):
        return read_u32(self._buf, self.IMAGE_TYPE_OFFSET)

    @image_type.setter
    def image_type(self, value):
        write_u32(self._buf, self.IMAGE_TYPE_OFFSET, value)

    def compute_checksum(self):
        """XOR of the first 56 header bytes, taking the checksum byte as 0."""
        span = bytearray(self._buf[:self.CHECKSUM_SPAN])
        span[self.CHECKSUM_OFFSET] = 0
        return xor_checksum(span)

    def update_checksum(self):
        self.checksum = self.compute_checksum()
        return self.checksum
