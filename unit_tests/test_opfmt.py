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
""" Tests for the opmodels.opfmt format registry. """

import unittest

import ddt
import mock
import pytest

from opmodels import opfmt


@ddt.ddt
class TestDefaultRegistry(unittest.TestCase):
    # pylint: disable=no-self-use
    """ Test the checkers in the default format registry. """

    @ddt.data(
        ('uuid', '5f8c9a61-2a3b-4c7d-8e9f-0a1b2c3d4e5f', True),
        ('uuid', '5f8c9a612a3b4c7d8e9f0a1b2c3d4e5f', True),
        ('uuid', '5f8c9a61-2a3b-4c7d-8e9f', False),
        ('hostname', 'node1.example.net', True),
        ('hostname', 'node1', True),
        ('hostname', '-node1', False),
        ('hostname', 'node_1.example.net', False),
        ('ipv4', '192.168.1.10', True),
        ('ipv4', '192.168.1.256', False),
        ('ipv6', 'fe80::1', True),
        ('ipv6', '192.168.1.10', False),
        ('date-time', '2023-04-01T12:30:00Z', True),
        ('date-time', '2023-04-01T12:30:00.500+02:00', True),
        ('date-time', '2023-04-01T12:30:00', False),
        ('date-time', '2023-04-01', False),
        ('uri', 'https://node1.example.net:9000/minio', True),
        ('uri', '/mnt/disk1', False),
        ('no-such-format', 'anything at all', True),
    )
    @ddt.unpack
    def test_formats(self, name, value, valid):
        """ Check some valid and invalid values. """
        assert opfmt.DEFAULT.validates(name, value) is valid


def test_registry():
    """ Formats may be added, replaced and listed. """
    reg = opfmt.Registry()
    assert 'even' not in reg
    assert reg.validates('even', 'odd')

    reg.add('even', lambda value: len(value) % 2 == 0)
    assert reg.contains('even')
    assert reg.validates('even', 'ab')
    assert not reg.validates('even', 'abc')

    copied = reg.copy().add('even', lambda value: True)
    assert copied.validates('even', 'abc')
    assert not reg.validates('even', 'abc')

    assert list(opfmt.DEFAULT) == \
        ['date-time', 'hostname', 'ipv4', 'ipv6', 'uri', 'uuid']


def test_context():
    """ A context may be cancelled or time out. """
    ctx = opfmt.ValidationContext()
    assert not ctx.cancelled
    ctx.check()
    ctx.cancel()
    assert ctx.cancelled
    with pytest.raises(opfmt.ContextCancelled):
        ctx.check()

    with mock.patch('time.monotonic', return_value=100.0):
        ctx = opfmt.ValidationContext(timeout=5)
    with mock.patch('time.monotonic', return_value=104.0):
        assert not ctx.cancelled
    with mock.patch('time.monotonic', return_value=105.0):
        assert ctx.cancelled
        with pytest.raises(opfmt.ContextCancelled):
            ctx.check()
