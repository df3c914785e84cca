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
"""Splits an Intel boot.img into its segment files.

Only the kernel and ramdisk lengths are stored in the image. The header,
signature and bootstub boundaries are found by probing the content at the
few offsets where each of them may end.
"""

import collections

import glog

from . import artifacts
from . import layout
from .errors import SizeRangeError, TruncatedImageError
from .probe import DEFAULT_PROBE

HEADER_PROBE = (4, 1)
SIGNATURE_PROBE = (4, 1)
BOOTSTUB_PROBE = (2, 0)

Region = collections.namedtuple('Region', ['name', 'offset', 'data'])


def _window(data, offset, size):
    """Returns size bytes at offset, or None when the image is too short."""
    if offset < 0 or offset + size > len(data):
        return None
    return data[offset:offset + size]


def _take(data, region, offset, size):
    available = max(len(data) - offset, 0)
    if size > available:
        raise TruncatedImageError(region, offset, size, available)
    return data[offset:offset + size]


def detect_header(data, probe=DEFAULT_PROBE):
    """Returns the header size, 0 or 512.

    The header is absent only when the first bytes give a negative probe.
    """
    size, min_count = HEADER_PROBE
    window = _window(data, 0, size)
    if window is None:
        glog.debug('header probe unsatisfiable, assuming a header')
        return layout.HEADER_SIZE
    if probe(window, min_count):
        return layout.HEADER_SIZE
    return 0


def detect_signature(data, offset, probe=DEFAULT_PROBE):
    """Returns the size of the signature following the header at offset.

    The deltas are walked in order and accumulate; the scan stops at the
    first positive probe, otherwise after the last delta.
    """
    size, min_count = SIGNATURE_PROBE
    position = offset
    for delta in layout.SIGNATURE_DELTAS:
        position += delta
        window = _window(data, position, size)
        if window is not None and probe(window, min_count):
            break
        glog.debug('no cmdline at offset %d', position)
    return position - offset


def detect_bootstub(data, offset, probe=DEFAULT_PROBE):
    """Returns the bootstub size, 4096 or 8192, for a bootstub at offset."""
    size, min_count = BOOTSTUB_PROBE
    position = offset + layout.BOOTSTUB_SIZE
    window = _window(data, position, size)
    if window is not None and probe(window, min_count):
        position += layout.BOOTSTUB_EXTENSION_SIZE
    return position - offset


def iter_regions(data, probe=DEFAULT_PROBE):
    """Yields the regions of an image in order.

    Each region is fully validated before it is yielded, so a consumer that
    writes regions as they arrive never writes a partial kernel or ramdisk.
    Empty header and signature regions are yielded too.

    Raises:
      TruncatedImageError: the image ends inside a region.
      SizeRangeError: a size field is outside of its accepted range.
    """
    hdr_size = detect_header(data, probe)
    yield Region(artifacts.HEADER, 0, _take(data, 'header', 0, hdr_size))

    sig_size = detect_signature(data, hdr_size, probe)
    yield Region(artifacts.SIGNATURE, hdr_size,
                 _take(data, 'signature', hdr_size, sig_size))

    offset = hdr_size + sig_size
    block = _take(data, 'cmdline block', offset, layout.CMDLINE_BLOCK_SIZE)
    yield Region(artifacts.CMDLINE, offset, block[:layout.CMDLINE_SIZE])

    sizes = block[layout.KERNEL_SIZE_OFFSET:
                  layout.KERNEL_SIZE_OFFSET + layout.PARAMETER_SIZE]
    kernel_size = layout.read_u32(sizes, 0)
    ramdisk_size = layout.read_u32(sizes, layout.SIZE_FIELD_SIZE)
    yield Region(artifacts.PARAMETER, offset + layout.KERNEL_SIZE_OFFSET, sizes)

    offset += layout.CMDLINE_BLOCK_SIZE
    stub_size = detect_bootstub(data, offset, probe)
    yield Region(artifacts.BOOTSTUB, offset,
                 _take(data, 'bootstub', offset, stub_size))

    offset += stub_size
    if not layout.in_range(kernel_size, layout.KERNEL_SIZE_RANGE):
        raise SizeRangeError('kernel', kernel_size, layout.KERNEL_SIZE_RANGE)
    yield Region(artifacts.KERNEL, offset,
                 _take(data, 'kernel', offset, kernel_size))

    offset += kernel_size
    if not layout.in_range(ramdisk_size, layout.RAMDISK_SIZE_RANGE):
        raise SizeRangeError('ramdisk', ramdisk_size, layout.RAMDISK_SIZE_RANGE)
    yield Region(artifacts.RAMDISK, offset,
                 _take(data, 'ramdisk', offset, ramdisk_size))


_PROGRESS_LABELS = {
    artifacts.HEADER: 'header size',
    artifacts.SIGNATURE: 'sig size',
    artifacts.BOOTSTUB: 'bootstub size',
    artifacts.KERNEL: 'kernel size',
    artifacts.RAMDISK: 'ramdisk size',
}


def unpack_boot_img(config, probe=DEFAULT_PROBE):
    """Unpacks config.filename, writing the parts to config.directory.

    Args:
      config: a Config naming the image and the artifact directory.
      probe: the boundary probe to use.

    Returns:
      the list of Regions that were found, in image order.
    """
    with open(config.filename, 'rb') as infile:
        data = infile.read()
    glog.info('Unpacking %s (%d bytes) into %s',
              config.filename, len(data), config.directory)

    out = artifacts.ArtifactDir.for_config(config)
    regions = []
    for region in iter_regions(data, probe):
        label = _PROGRESS_LABELS.get(region.name)
        if label:
            print('%-13s %d' % (label, len(region.data)))
        if region.data or region.name not in artifacts.OPTIONAL_ARTIFACTS:
            out.write(region.name, region.data)
        else:
            out.discard(region.name)
        regions.append(region)
    return regions
