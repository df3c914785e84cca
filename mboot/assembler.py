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
"""Packs segment files back into an Intel boot.img.

The size fields, the sector count and the header checksum are derived
from the segments and always recomputed.
"""

import collections

import glog

from . import artifacts
from . import layout
from .errors import ImageFormatError

Segments = collections.namedtuple(
    'Segments',
    ['header', 'signature', 'cmdline', 'parameter', 'bootstub', 'kernel',
     'ramdisk'])


def load_segments(store):
    """Reads every artifact needed to assemble an image.

    Args:
      store: the ArtifactDir holding the segments.

    Raises:
      ArtifactMissingError: a required artifact could not be opened.
    """
    header = store.read_optional(artifacts.HEADER)
    signature = store.read_optional(artifacts.SIGNATURE)
    required = [store.read(name) for name in artifacts.REQUIRED_ARTIFACTS]
    return Segments(header, signature, *required)


def _check_sizes(segments):
    if len(segments.cmdline) > layout.CMDLINE_SIZE:
        raise ImageFormatError('cmdline is %d bytes, at most %d fit' %
                               (len(segments.cmdline), layout.CMDLINE_SIZE))
    room = layout.CMDLINE_BLOCK_SIZE - layout.PARAMETER_OFFSET
    if len(segments.parameter) - layout.PARAMETER_SIZE > room:
        raise ImageFormatError('parameter is %d bytes, at most %d fit' %
                               (len(segments.parameter),
                                room + layout.PARAMETER_SIZE))
    minimum = layout.HeaderView.CHECKSUM_SPAN
    if segments.header and len(segments.header) < minimum:
        raise ImageFormatError('header is %d bytes, at least %d needed' %
                               (len(segments.header), minimum))

    if len(segments.parameter) >= layout.PARAMETER_SIZE:
        stored = (layout.read_u32(segments.parameter, 0),
                  layout.read_u32(segments.parameter, layout.SIZE_FIELD_SIZE))
        actual = (len(segments.kernel), len(segments.ramdisk))
        if stored != actual:
            glog.warning('parameter sizes %s replaced by actual sizes %s',
                         stored, actual)
    if not layout.in_range(len(segments.kernel), layout.KERNEL_SIZE_RANGE):
        glog.warning('kernel size %d is outside %s; the image will not unpack',
                     len(segments.kernel), layout.KERNEL_SIZE_RANGE)
    if not layout.in_range(len(segments.ramdisk), layout.RAMDISK_SIZE_RANGE):
        glog.warning('ramdisk size %d is outside %s; the image will not unpack',
                     len(segments.ramdisk), layout.RAMDISK_SIZE_RANGE)


def assemble(segments):
    """Lays the segments out into a complete image.

    Returns:
      the image as a bytearray, a multiple of 512 bytes long.
    """
    _check_sizes(segments)
    header = segments.header or b''
    signature = segments.signature or b''

    block = len(header) + len(signature)
    stub = block + layout.CMDLINE_BLOCK_SIZE
    kernel = stub + len(segments.bootstub)
    ramdisk = kernel + len(segments.kernel)
    img_size = ramdisk + len(segments.ramdisk)
    padding = layout.sector_padding(img_size)

    bootimg = bytearray(img_size + padding)
    bootimg[0:len(header)] = header
    bootimg[len(header):block] = signature

    bootimg[block:block + len(segments.cmdline)] = segments.cmdline
    layout.write_u32(bootimg, block + layout.KERNEL_SIZE_OFFSET,
                     len(segments.kernel))
    layout.write_u32(bootimg, block + layout.RAMDISK_SIZE_OFFSET,
                     len(segments.ramdisk))
    extra = segments.parameter[layout.PARAMETER_SIZE:]
    start = block + layout.PARAMETER_OFFSET
    bootimg[start:start + len(extra)] = extra

    bootimg[stub:kernel] = segments.bootstub
    bootimg[kernel:ramdisk] = segments.kernel
    bootimg[ramdisk:img_size] = segments.ramdisk
    bootimg[img_size:] = layout.PAD_BYTE * padding

    if signature:
        start = block + layout.SIGNED_MARKER_OFFSET
        bootimg[start:start + len(layout.SIGNED_MARKER)] = layout.SIGNED_MARKER

    if header:
        view = layout.HeaderView(bootimg)
        if not signature:
            view.image_type += 1
        view.sectors = len(bootimg) // layout.SECTOR_SIZE - 1
        view.update_checksum()
        glog.debug('header: image type %d, %d sectors, checksum 0x%02x',
                   view.image_type, view.sectors, view.checksum)
    return bootimg


def pack_boot_img(config):
    """Packs the artifacts in config.directory into config.filename.

    Returns:
      the image that was written.
    """
    store = artifacts.ArtifactDir.for_config(config)
    bootimg = assemble(load_segments(store))
    with open(config.filename, 'wb') as out:
        out.write(bootimg)
    glog.info('Wrote %s (%d bytes)', config.filename, len(bootimg))
    return bootimg
