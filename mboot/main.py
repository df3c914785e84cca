#!/usr/bin/env python3
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
"""Unpack an Intel boot image into separate files, or pack a directory
with kernel/ramdisk/bootstub into an Intel boot image.
"""

import argparse
import sys

import glog

from . import assembler
from . import locator
from .config import DEFAULT_DIRECTORY, DEFAULT_FILENAME, make_config
from .errors import MbootError


class _ArgumentParser(argparse.ArgumentParser):
    """Reports usage errors with exit status 1."""

    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(1, '%s: error: %s\n' % (self.prog, message))


def setup_arg_parser():
    """Set up command line argument parser."""
    parser = _ArgumentParser(
        prog='mboot',
        description='Unpack an Intel boot image into separate files, OR, '
                    'pack a directory with kernel/ramdisk/bootstub into an '
                    'Intel boot image.')
    parser.add_argument('-u', '--unpack', action='store_true',
                        help='split boot image into kernel, ramdisk, '
                             'bootstub, etc.')
    parser.add_argument('-f', '--file', type=str, default=DEFAULT_FILENAME,
                        metavar='FILE',
                        help='use FILE to unpack/repack (default: %(default)s)')
    parser.add_argument('-d', '--dir', type=str, default=DEFAULT_DIRECTORY,
                        metavar='DIR',
                        help='use DIR to unpack/repack (default: %(default)s)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='log probe decisions and artifact writes')
    return parser


def run(config):
    """Runs the pipeline selected by config."""
    if config.unpack:
        locator.unpack_boot_img(config)
    else:
        assembler.pack_boot_img(config)


def describe_os_error(exception, filename):
    """Formats an OSError, naming filename when the error carries no path."""
    return "cannot access '%s': %s" % (exception.filename or filename,
                                     exception.strerror or exception)


def main(argv=None):
    """Main entry point; returns the process exit status."""
    args = setup_arg_parser().parse_args(argv)
    glog.setLevel(glog.DEBUG if args.verbose else glog.WARNING)
    try:
        run(make_config(args.file, args.dir, args.unpack))
    except MbootError as exception:
        glog.error('mboot: %s', exception)
        return 1
    except OSError as exception:
        glog.error('mboot: %s', describe_os_error(exception, args.file))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
