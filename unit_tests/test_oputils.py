#
# Copyright (c) 2023  The opmodels authors.
# All rights reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
""" Tests for the opmodels.oputils size helpers. """

import pytest

from opmodels import oputils


@pytest.mark.parametrize('value,k8s,exp', [
    (0, False, '0.0 B'),
    (1023, False, '1023.0 B'),
    (1024, False, '1.0 KiB'),
    (1536, False, '1.5 KiB'),
    (5 * oputils.GiB, False, '5.0 GiB'),
    (3 * oputils.TiB, True, '3.0 Ti'),
    (1024, True, '1.0 Ki'),
    ('2048', False, '2.0 KiB'),
    ('1536.7', False, '1.5 KiB'),
    (1536.7, False, '1.5 KiB'),
    (' 3072 bytes', False, '3.0 KiB'),
    ('lots', False, '0.0 B'),
    (None, False, '0.0 B'),
    (2 ** 63 - 1, False, '8.0 EiB'),
])
def test_nice_bytes(value, k8s, exp):
    """ Sizes are scaled down to the largest fitting unit. """
    assert oputils.nice_bytes(value, k8s) == exp


def test_get_bytes():
    """ Sizes are converted back from a value and a unit. """
    assert oputils.get_bytes('1.5', 'KiB') == 1536
    assert oputils.get_bytes('2', 'Gi', from_k8s=True) == 2 * oputils.GiB
    assert oputils.get_bytes(7, 'B') == 7
    assert oputils.get_bytes('2', 'Gi') == 0
    assert oputils.get_bytes('2', 'GiB', from_k8s=True) == 0


def test_used_ratio():
    """ The ratio is only defined for drives of a known size. """
    assert oputils.used_ratio(250000, 1000000) == 0.25
    assert oputils.used_ratio(0, 0) is None
    assert oputils.used_ratio(500, 100) == 5.0
