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
""" Tests for the opmodels.opjson encoders and
the opmodels.optype.JsonObject classes. """

import pytest

from opmodels import opcatch
from opmodels import opfmt
from opmodels import opjson
from opmodels import optype


@optype.JsonObject(
    number=int, name=str, flags=[bool]
)  # pylint: disable=too-few-public-methods
class TrivialClass(object):
    """ A trivial class demonstrating member names and types. """


@optype.JsonObject(
    id=optype.formatted('', 'uuid'),
    address=optype.formatted('', 'ipv4'),
    count=0,
)  # pylint: disable=too-few-public-methods
class Leaf(object):
    """ A record with some formatted attributes. """


@optype.JsonObject(
    name='', leaves=[Leaf], byName={str: Leaf}, aliases=[''],
)  # pylint: disable=too-few-public-methods
class Tree(object):
    """ A record containing other records. """


class TestJsonEncoder(object):
    # pylint: disable=no-self-use
    """ Simple tests for the JsonEncoder class. """

    def test_miniscule(self):
        """ Some truly trivial test cases. """
        assert opjson.dumps({}) == '{}'
        assert opjson.dumps([]) == '[]'
        assert opjson.dumps({'a': [{'b': 3}, "c"]}) == '{"a":[{"b":3},"c"]}'
        assert opjson.dumps({'a': [1]}, indent=2) == '{\n  "a": [\n    1\n  ]\n}'

    def test_trivial(self):
        """ Test the interplay between JsonEncoder and JsonObject. """
        obj = TrivialClass(number=3, name='whee', flags=[False, True, False])
        assert opjson.loads(opjson.dumps(obj)) == {
            'number': 3,
            'name': 'whee',
            'flags': [False, True, False],
        }

        obj = TrivialClass({
            'number': 3,
            'name': 'whee',
        })
        assert opjson.loads(opjson.dumps(obj)) == {
            'number': 3,
            'name': 'whee',
            'flags': [],
        }

        with pytest.raises(opcatch.InvalidArgumentError) as err:
            obj = TrivialClass({
                'number': 3,
                'flags': [False, True, False],
            })
        obj = err.value.partial
        assert obj.number == 3
        assert obj.name is None
        assert obj.flags == [False, True, False]


class TestJsonObject(object):
    # pylint: disable=no-self-use
    """ Test the JsonObjectImpl behavior beyond the simple encoding. """

    def test_attributes(self):
        """ Attribute access goes through the type handlers. """
        leaf = Leaf()
        assert leaf.count == 0
        leaf.count = 5
        assert leaf.count == 5

        with pytest.raises(opcatch.InvalidArgumentError):
            leaf.count = 'five'
        assert leaf.count == 5

        with pytest.raises(AttributeError):
            leaf.colour = 'green'
        with pytest.raises(AttributeError):
            assert leaf.colour is None

        assert Leaf(leaf) is leaf
        assert Leaf(count=5) == leaf
        assert Leaf(count=6) != leaf
        assert dict(leaf)['count'] == 5

    def test_wire(self):
        """ Empty values are left out, nested objects are encoded. """
        tree = Tree(
            name='oak',
            leaves=[Leaf(count=1), Leaf()],
            byName={'first': Leaf(id='x')},
        )
        assert tree.to_wire() == {
            'name': 'oak',
            'leaves': [{'count': 1}, {}],
            'byName': {'first': {'id': 'x'}},
        }
        assert Tree().to_binary() == b'{}'
        assert opjson.marshal_binary(None) is None
        assert opjson.marshal_binary(Tree(name='elm')) == b'{"name":"elm"}'

    def test_wire_text(self):
        """ HTML-sensitive characters are escaped, others are UTF-8. """
        tree = Tree(name='<a&b> é')
        assert tree.to_binary() == \
            '{"name":"\\u003ca\\u0026b\\u003e é"}'.encode('UTF-8')

        with pytest.raises(opcatch.SerializationError):
            Tree(name='\ud800').to_binary()

    def test_decode(self):
        """ Decoding replaces the whole object and ignores unknown keys. """
        tree = Tree(name='oak', aliases=['quercus'])
        res = tree.from_binary(
            b'{"leaves":[{"count":2},null],"colour":"green"}')
        assert res is tree
        assert tree.name == ''
        assert tree.aliases == []
        assert tree.leaves == [Leaf(count=2), Leaf()]

        tree = opjson.unmarshal_binary(Tree, '{"NAME":"ash","Name":"elm"}')
        assert tree.name == 'elm'

        tree = opjson.unmarshal_binary(Tree, '{"name":"ash","NAME":"elm"}')
        assert tree.name == 'elm'

        tree = opjson.unmarshal_binary(
            Tree, '{"NAME":"ash","name":"elm","NAME":"oak"}')
        assert tree.name == 'oak'

        assert opjson.unmarshal_binary(Tree, 'null') == Tree()

    @pytest.mark.parametrize('data', [
        b'{"name":',
        b'[]',
        b'"oak"',
        b'\xff{}',
        b'{"name":5}',
        b'{"leaves":{"count":1}}',
        b'{"leaves":[{"count":"one"}]}',
    ])
    def test_decode_fail(self, data):
        """ Decoding errors leave the object untouched. """
        tree = Tree(name='oak', leaves=[Leaf(count=1)])
        with pytest.raises(opcatch.DeserializationError):
            tree.from_binary(data)
        assert tree == Tree(name='oak', leaves=[Leaf(count=1)])

    def test_validate(self):
        """ Formatted attributes are checked, empty ones are skipped. """
        Leaf().validate()
        Leaf(id='0e7f3bb4-8d2a-4a5c-9b4e-37f4d1b0c6a1',
             address='10.1.2.3').validate()

        with pytest.raises(opcatch.ValidationError) as err:
            Leaf(id='not-a-uuid').validate()
        assert str(err.value) == 'Leaf.id: "not-a-uuid" is not a valid uuid'

        lax = opfmt.Registry().add('uuid', lambda value: True)
        Leaf(id='not-a-uuid').validate(lax)

        tree = Tree(leaves=[Leaf(), Leaf(address='300.1.2.3')])
        with pytest.raises(opcatch.ValidationError):
            tree.validate()
        with pytest.raises(opcatch.ValidationError):
            tree.context_validate(opfmt.ValidationContext())
        with pytest.raises(opcatch.ValidationError):
            tree.context_validate(None)

    def test_context_validate(self):
        """ A cancelled context stops the descent into nested objects. """
        tree = Tree(byName={'first': Leaf()})
        ctx = opfmt.ValidationContext()
        tree.context_validate(ctx)

        ctx.cancel()
        with pytest.raises(opfmt.ContextCancelled):
            tree.context_validate(ctx)

        Tree(name='no nested objects').context_validate(ctx)
        Leaf(id='not-a-uuid').context_validate(ctx, opfmt.Registry())
