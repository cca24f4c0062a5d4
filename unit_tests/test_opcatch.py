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
""" Tests for the opmodels.opcatch module. """

import pytest

from opmodels import opcatch


def test_simple():
    """ Test the behavior of op_catch() and op_caught(). """

    def return_int():
        """ Return an integer value. """
        return 616

    def raise_value_error():
        """ Raise a ValueError(). """
        raise ValueError('whee')

    def return_partial_int():
        """ Return a partially-constructed integer. """
        opcatch.error('static', 42)

    result = []

    def append_to_result(obj):
        """ Append an item to the result array. """
        result.append(obj)

    exc = opcatch.op_catch(append_to_result, return_int, None)
    assert exc is None
    assert result == [616]

    old_exc = (ValueError, ValueError('foo'), None)
    exc = opcatch.op_catch(append_to_result, return_int, old_exc)
    assert exc is old_exc
    assert result == [616, 616]

    exc = opcatch.op_catch(append_to_result, raise_value_error, None)
    assert exc is not None
    assert exc[0] is ValueError
    assert isinstance(exc[1], ValueError)
    assert exc[1].args == ('whee',)
    assert result == [616, 616]

    exc = opcatch.op_catch(append_to_result, return_partial_int, None)
    assert exc is not None
    assert exc[0] is opcatch.InvalidArgumentError
    assert isinstance(exc[1], opcatch.InvalidArgumentError)
    assert str(exc[1]) == 'static'
    assert exc[1].partial == 42
    assert result == [616, 616, 42]


def test_caught():
    """ Test that op_caught() reraises with the name and partial data. """
    opcatch.op_caught(None, 'nothing', [1])

    exc = opcatch.op_catch(
        lambda _: None, lambda: opcatch.error('bad {what}', what='value'),
        None)
    with pytest.raises(opcatch.InvalidArgumentError) as err:
        opcatch.op_caught(exc, 'Drives', [1, 2])
    assert str(err.value) == 'Drives: bad value'
    assert err.value.partial == [1, 2]
    assert err.value.what == 'value'

    exc = opcatch.op_catch(lambda _: None, lambda: int('meow'), None)
    with pytest.raises(opcatch.InvalidArgumentError) as err:
        opcatch.op_caught(exc, 'Drives', [3])
    assert str(err.value).startswith('Drives: invalid literal')
    assert err.value.partial == [3]


def test_hierarchy():
    """ All the record errors may be caught as InvalidArgumentError. """
    for cls in (opcatch.SerializationError, opcatch.DeserializationError,
                opcatch.ValidationError):
        err = cls('{name} failed', name=cls.__name__, partial='x')
        assert isinstance(err, opcatch.InvalidArgumentError)
        assert str(err) == '{0} failed'.format(cls.__name__)
        assert err.partial == 'x'
