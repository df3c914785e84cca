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
"""Content probes used to find region boundaries that are not stored.

A probe looks at a small window of bytes and answers whether the window
looks like the start of a region. Probes never consume input; the caller
hands them a window and decides what a positive answer means.
"""

import string

_ALNUM = frozenset(string.ascii_letters.encode('ascii') +
                   string.digits.encode('ascii'))


class Probe(object):
    """Interface of a boundary probe.

    Subclasses implement measure(); the threshold logic is shared.
    """

    def measure(self, window):
        raise NotImplementedError

    def __call__(self, window, min_count):
        """Returns True when min_count < measure(window) < len(window).

        Args:
          window: the full candidate window, as bytes.
          min_count: measure values at or below this are negative.
        """
        value = self.measure(window)
        return min_count < value < len(window)


class AlnumProbe(Probe):
    """Counts ASCII alphanumeric bytes in the window.

    A single leading NUL byte is skipped before counting, which keeps
    zero-padded text from reading as binary. The upper bound still uses
    the unshrunk window size.
    """

    def measure(self, window):
        if len(window) > 1 and window[0] == 0:
            window = window[1:]
        return sum(1 for value in window if value in _ALNUM)


DEFAULT_PROBE = AlnumProbe()
