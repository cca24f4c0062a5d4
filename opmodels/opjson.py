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
""" Low-level helpers for the JsonObject implementation. """

import collections.abc
import logging

import simplejson as js

from . import opcatch
from . import opfmt


LOG = logging.getLogger(__name__)

SORT_KEYS = False
INDENT = None
SEPARATORS = (',', ':')
SEPARATORS_INDENT = (',', ': ')


def _last_key_order(pairs):
    """ Build a dictionary ordered by the last occurrence of each key. """
    res = {}
    for key, val in pairs:
        res.pop(key, None)
        res[key] = val
    return res


def loads(data):
    """ Parse a JSON document, keeping the keys in the order they were
    last seen in. """
    return js.loads(data, object_pairs_hook=_last_key_order)


def dumps(obj, indent=INDENT):
    """ Serialize an object to a string with reasonable default settings. """
    return js.dumps(obj, cls=JsonEncoder, sort_keys=SORT_KEYS,
                    indent=indent,
                    separators=SEPARATORS if indent is None
                    else SEPARATORS_INDENT)


class JsonEncoder(js.JSONEncoder):
    """ Help serialize a JsonObject instance. """

    def default(self, o):
        """ Invoke a suitable serialization function. """
        # pylint: disable=method-hidden
        if isinstance(o, JsonObjectImpl):
            return o.to_json()
        return super(JsonEncoder, self).default(o)


class WireEncoder(js.JSONEncoderForHTML):
    """ Encode records the way the management API puts them on the wire.

    Zero-valued attributes are left out, '<', '>' and '&' are escaped,
    and any other text is output as is, to be encoded as UTF-8.
    An indented encoder only adds whitespace between the tokens. """

    def __init__(self, indent=None):
        super(WireEncoder, self).__init__(
            ensure_ascii=False, indent=indent,
            separators=SEPARATORS if indent is None else SEPARATORS_INDENT,
            sort_keys=False, allow_nan=False)


def is_empty(val):
    """ Check whether a value would be left out of the wire encoding. """
    if val is None:
        return True
    if isinstance(val, JsonObjectImpl):
        return False
    if isinstance(val, (bool, int, float, str, list, tuple, dict)):
        return not val
    return False


def to_wire(val):
    """ Recursively convert a value to its wire representation. """
    if isinstance(val, JsonObjectImpl):
        return val.to_wire()
    if isinstance(val, dict):
        return dict((key, to_wire(item)) for key, item in val.items())
    if isinstance(val, (list, tuple)):
        return [to_wire(item) for item in val]
    return val


def marshal_binary(obj):
    """ Encode a record into bytes; a missing record encodes to None. """
    if obj is None:
        return None
    return obj.to_binary()


def unmarshal_binary(cls, data):
    """ Decode the bytes into a new record of the specified class. """
    return _decode(cls, data)


def _decode(cls, data):
    """ Parse the wire representation of a record into a fresh object. """
    if isinstance(data, (bytes, bytearray)):
        try:
            data = bytes(data).decode('UTF-8')
        except UnicodeDecodeError as err:
            raise opcatch.DeserializationError(
                '{name}: invalid UTF-8 input: {err}',
                name=cls.__name__, err=err)

    try:
        raw = loads(data)
    except (TypeError, ValueError) as err:
        raise opcatch.DeserializationError(
            '{name}: malformed JSON input: {err}',
            name=cls.__name__, err=err)

    if raw is None:
        return cls()
    if not isinstance(raw, dict):
        raise opcatch.DeserializationError(
            '{name}: expected a JSON object, got {tname}',
            name=cls.__name__, tname=type(raw).__name__)

    try:
        return cls(raw)
    except opcatch.InvalidArgumentError as err:
        raise opcatch.DeserializationError(
            '{msg}', msg=err.message, partial=err.partial)


def _visit_nested(val, func):
    """ Invoke a function on each record found within a value. """
    if isinstance(val, JsonObjectImpl):
        func(val)
    elif isinstance(val, dict):
        for item in val.values():
            _visit_nested(item, func)
    elif isinstance(val, (list, tuple)):
        for item in val:
            _visit_nested(item, func)


def _check_format(cls_name, attr, fmt, val, formats):
    """ Check a string value, or a collection of them, against a format. """
    if is_empty(val):
        return
    if isinstance(val, str):
        if not formats.validates(fmt, val):
            raise opcatch.ValidationError(
                '{cls}.{attr}: "{val}" is not a valid {fmt}',
                cls=cls_name, attr=attr, val=val, fmt=fmt)
    elif isinstance(val, (list, tuple)):
        for item in val:
            _check_format(cls_name, attr, fmt, item, formats)


class JsonObjectImpl(object):
    """ Base class for a serializable value object; see JsonObject. """

    def __new__(cls, json=None, **kwargs):
        """ Construct a value object as per its __jsonAttrDefs__. """

        if isinstance(json, cls):
            assert not kwargs, \
                "Unsupported update on already contructed object"
            return json

        if json is not None and \
                not isinstance(json, collections.abc.Mapping):
            opcatch.error('{name}: expected an object, got {tname}',
                          name=cls.__name__, tname=type(json).__name__)

        j = cls._match_keys(json) if json is not None else {}
        j.update(kwargs)

        self = super(JsonObjectImpl, cls).__new__(cls)
        object.__setattr__(self, '__jsonAttrs__', {})

        exc = None
        for attr, attr_def in self.__jsonAttrDefs__.items():
            data = []
            # pylint: disable=cell-var-from-loop
            # (the "handle" and "func" arguments are always
            #  evaluated immediately, never deferred)
            exc = opcatch.op_catch(
                data.append,
                lambda: attr_def.handleVal(j[attr]) if attr in j
                else attr_def.defaultVal(),
                exc)
            if data:
                self.__jsonAttrs__[attr] = data[0]
            else:
                self.__jsonAttrs__[attr] = None
        opcatch.op_caught(exc, self.__class__.__name__, self)

        return self

    @classmethod
    def _match_keys(cls, json):
        """ Map the object's keys onto the attribute names.

        Keys are matched regardless of case, and a later key overrides an
        earlier one mapped onto the same attribute. Keys that match no
        attribute are dropped. """
        folded = dict((attr.lower(), attr) for attr in cls.__jsonAttrDefs__)
        res = {}
        for key, val in json.items():
            if key in cls.__jsonAttrDefs__:
                attr = key
            elif isinstance(key, str):
                attr = folded.get(key.lower())
            else:
                attr = None
            if attr is None:
                LOG.debug('%s: ignoring unknown attribute %r',
                          cls.__name__, key)
            else:
                res[attr] = val
        return res

    def __getattr__(self, attr):
        if attr not in self.__jsonAttrs__:
            error = "'{cls}' has no attribute '{attr}'".format(
                cls=self.__class__.__name__, attr=attr)
            raise AttributeError(error)

        return self.__jsonAttrs__[attr]

    def __setattr__(self, attr, value):
        if attr not in self.__jsonAttrDefs__:
            error = "'{cls}' has no attribute '{attr}'".format(
                cls=self.__class__.__name__, attr=attr)
            raise AttributeError(error)

        self.__jsonAttrs__[attr] = self.__jsonAttrDefs__[attr].handleVal(value)

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return self.__jsonAttrs__ == other.__jsonAttrs__

    def __ne__(self, other):
        res = self.__eq__(other)
        if res is NotImplemented:
            return res
        return not res

    __hash__ = None

    def to_json(self):
        """ Store the member fields into a dictionary. """
        return dict(
            (attr, getattr(self, attr)) for attr in self.__jsonAttrDefs__)

    def to_wire(self):
        """ Store the non-empty member fields into a dictionary. """
        return dict(
            (attr, to_wire(val))
            for attr, val in (
                (attr, self.__jsonAttrs__[attr])
                for attr in self.__jsonAttrDefs__)
            if not is_empty(val))

    def to_binary(self, indent=None):
        """ Encode the non-empty member fields as UTF-8 JSON bytes. """
        try:
            text = WireEncoder(indent=indent).encode(self.to_wire())
            return text.encode('UTF-8')
        except (TypeError, ValueError) as err:
            raise opcatch.SerializationError(
                '{name}: could not encode the object: {err}',
                name=self.__class__.__name__, err=err)

    def from_binary(self, data):
        """ Replace the member fields with those decoded from the bytes.

        The object is left untouched if the decoding fails. """
        res = _decode(type(self), data)
        self.__jsonAttrs__.clear()
        self.__jsonAttrs__.update(res.__jsonAttrs__)
        return self

    def validate(self, formats=None):
        """ Check the formatted member fields and any nested objects. """
        if formats is None:
            formats = opfmt.DEFAULT
        for attr, attr_def in self.__jsonAttrDefs__.items():
            val = self.__jsonAttrs__[attr]
            if attr_def.fmt is not None:
                _check_format(
                    self.__class__.__name__, attr, attr_def.fmt, val, formats)
            _visit_nested(val, lambda obj: obj.validate(formats))

    def context_validate(self, ctx, formats=None):
        """ Validate the object, checking the context on the way down. """
        if formats is None:
            formats = opfmt.DEFAULT

        def descend(obj):
            """ Make sure we may go on, then validate a nested object. """
            if ctx is not None:
                ctx.check()
            obj.context_validate(ctx, formats)

        for attr, attr_def in self.__jsonAttrDefs__.items():
            val = self.__jsonAttrs__[attr]
            if attr_def.fmt is not None:
                _check_format(
                    self.__class__.__name__, attr, attr_def.fmt, val, formats)
            _visit_nested(val, descend)

    def __iter__(self):
        return iter(self.to_json().items())

    _asdict = to_json
    __str__ = __repr__ = lambda self: str(self.to_json())
