#!/usr/bin/python3
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
"""Tests for main.py"""

import contextlib
import errno
import io
import os
import struct
import tempfile
import unittest

from mboot import assembler
from mboot import main
from mboot.artifacts import ArtifactDir
from mboot.config import ConfigError, make_config
from mboot.testing.images import make_segments, write_segments


class TestArguments(unittest.TestCase):

    def _exit_code(self, argv):
        stream = io.StringIO()
        with contextlib.redirect_stdout(stream), \
             contextlib.redirect_stderr(stream):
            with self.assertRaises(SystemExit) as ctx:
                main.main(argv)
        return ctx.exception.code, stream.getvalue()

    def test_help_exits_cleanly(self):
        code, output = self._exit_code(['--help'])
        self.assertEqual(code, 0)
        self.assertIn('--unpack', output)

    def test_unknown_flag(self):
        code, output = self._exit_code(['--bogus'])
        self.assertEqual(code, 1)
        self.assertIn('usage:', output)

    def test_option_without_value(self):
        code, _ = self._exit_code(['-f'])
        self.assertEqual(code, 1)

    def test_os_error_without_path_names_image(self):
        error = OSError(errno.ENOSPC, 'No space left on device')
        message = main.describe_os_error(error, 'out/boot.img')
        self.assertEqual(message,
                         "cannot access 'out/boot.img': No space left on device")

    def test_os_error_keeps_its_own_path(self):
        error = FileNotFoundError(errno.ENOENT, 'No such file or directory',
                                  'missing/boot.img')
        message = main.describe_os_error(error, 'boot.img')
        self.assertIn("'missing/boot.img'", message)

    def test_defaults(self):
        args = main.setup_arg_parser().parse_args([])
        self.assertFalse(args.unpack)
        self.assertEqual(args.file, 'boot.img')
        self.assertEqual(args.dir, './')


class TestConfig(unittest.TestCase):

    def test_missing_directory(self):
        with self.assertRaises(ConfigError):
            make_config('boot.img', '/nonexistent/mboot/dir')

    def test_file_is_not_a_directory(self):
        with tempfile.NamedTemporaryFile() as tmp:
            with self.assertRaises(ConfigError) as ctx:
                make_config('boot.img', tmp.name)
        self.assertIn('Is not a directory', str(ctx.exception))


class TestMain(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.dir = self._tmp.name
        self.img = os.path.join(self.dir, 'boot.img')

    def tearDown(self):
        self._tmp.cleanup()

    def _run(self, *argv):
        with contextlib.redirect_stdout(io.StringIO()):
            return main.main(list(argv))

    def test_pack_then_unpack(self):
        segments = make_segments(signature_size=480)
        write_segments(ArtifactDir(self.dir), segments)
        self.assertEqual(self._run('-f', self.img, '-d', self.dir), 0)

        out_dir = os.path.join(self.dir, 'out')
        os.mkdir(out_dir)
        self.assertEqual(self._run('-u', '--file', self.img, '--dir', out_dir),
                         0)
        store = ArtifactDir(out_dir)
        self.assertEqual(store.read('kernel'), segments.kernel)
        self.assertEqual(store.read('ramdisk.cpio.gz'), segments.ramdisk)
        self.assertEqual(store.read('sig'), segments.signature)

    def test_missing_directory_fails(self):
        self.assertEqual(
            self._run('-f', self.img, '-d', os.path.join(self.dir, 'nope')), 1)

    def test_missing_artifact_fails(self):
        self.assertEqual(self._run('-f', self.img, '-d', self.dir), 1)
        self.assertFalse(os.path.exists(self.img))

    def test_missing_image_fails(self):
        self.assertEqual(self._run('-u', '-f', self.img, '-d', self.dir), 1)

    def test_bad_kernel_size_fails(self):
        img = bytearray(assembler.assemble(make_segments()))
        struct.pack_into('<I', img, 512 + 1024, 16000000)
        with open(self.img, 'wb') as out:
            out.write(img)
        self.assertEqual(self._run('-u', '-f', self.img, '-d', self.dir), 1)
        self.assertFalse(os.path.exists(os.path.join(self.dir, 'kernel')))

    def test_unwritable_destination_fails(self):
        write_segments(ArtifactDir(self.dir), make_segments())
        dest = os.path.join(self.dir, 'missing', 'boot.img')
        self.assertEqual(self._run('-f', dest, '-d', self.dir), 1)


if __name__ == '__main__':
    unittest.main()
