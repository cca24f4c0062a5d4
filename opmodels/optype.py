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
""" Type definition and validation functions. """

import collections
import functools
import inspect

from . import opcatch
from . import opdoc as doc
from . import opjson as js


SpType = collections.namedtuple('SpType', [
    'name',
    'handleVal',
    'defaultVal',
    'spDoc',
    'fmt',
], defaults=[None])


INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1


def spList(lst):
    assert len(lst) == 1, "SpList :: [subType]"
    subType = spType(lst[0])
    valT = subType.handleVal
    name = "[{0}]".format(subType.name)
    _doc = doc.ListDoc(subType.spDoc)

    def buildList(xs):
        lst = []
        if xs is None:
            return lst
        if isinstance(xs, (str, bytes, dict)):
            opcatch.error("Expected a list, got {tname}",
                          tname=type(xs).__name__)
        exc = functools.reduce(
            lambda exc, x: opcatch.op_catch(
                lambda tx: lst.append(tx),
                lambda: valT(x),
                exc),
            xs,
            None)
        opcatch.op_caught(exc, name, lst)
        return lst

    return SpType(name, buildList, lambda: [], _doc, subType.fmt)


def spDict(dct):
    assert len(dct) == 1, "SpDict :: {keyType: valueType}"
    firstItem = list(dct.items())[0]
    keySt, valSt = spType(firstItem[0]), spType(firstItem[1])
    keyT, valT = keySt.handleVal, valSt.handleVal
    name = "{{{0}: {1}}}".format(keySt.name, valSt.name)
    _doc = doc.DictDoc(keySt.spDoc, valSt.spDoc)

    def buildDict(xs):
        d = dict()
        if xs is None:
            return d
        if not isinstance(xs, dict):
            opcatch.error("Expected a dict, got {tname}",
                          tname=type(xs).__name__)
        exc = None
        for key, val in xs.items():
            data = []
            exc = opcatch.op_catch(
                lambda tx: data.append(tx),
                lambda: keyT(key),
                exc)
            if len(data) == 1:
                exc = opcatch.op_catch(
                    lambda tx: data.append(tx),
                    lambda: valT(val),
                    exc)
                if len(data) == 2:
                    d[data[0]] = data[1]
                else:
                    d[data[0]] = None
        opcatch.op_caught(exc, name, d)
        return d

    return SpType(name, buildDict, lambda: {}, _doc)


def formatted(val, fmtName):
    """ A string attribute that validate() checks against a named format.

    Records of the management API that carry identifiers or addresses,
    e.g. a drive's UUID or a peer's host name, declare those attributes
    through this function; the format names are looked up in the
    opfmt.Registry passed to validate(), by default opfmt.DEFAULT. """
    subType = spType(val)
    name = "{0}({1})".format(fmtName, subType.name)
    _doc = doc.TypeDoc(
        fmtName,
        "A {0} value in the {1} format, checked when the record is "
        "validated.".format(subType.name, fmtName),
        subType.spDoc.sample)
    return subType._replace(name=name, spDoc=_doc, fmt=fmtName)


def _bool_value(val):
    if not isinstance(val, bool):
        opcatch.error("Expected true or false, got {tname}",
                      tname=type(val).__name__)
    return val


def _int_value(val):
    if isinstance(val, bool) or not isinstance(val, int):
        opcatch.error("Expected an integer, got {tname}",
                      tname=type(val).__name__)
    if val < INT64_MIN or val > INT64_MAX:
        opcatch.error("The value {val} does not fit in 64 bits", val=val)
    return val


def _float_value(val):
    if isinstance(val, bool) or not isinstance(val, (int, float)):
        opcatch.error("Expected a number, got {tname}",
                      tname=type(val).__name__)
    return float(val)


def _str_value(val):
    if not isinstance(val, str):
        opcatch.error("Expected a string, got {tname}",
                      tname=type(val).__name__)
    return val


spTypes = {
    list: spList,
    dict: spDict,
}

spPrimitives = {
    bool: (_bool_value, doc.TypeDoc(
        "bool", "true or false; false is the zero value.", True)),
    int: (_int_value, doc.TypeDoc(
        "int",
        "A signed 64-bit integer, from {0} to {1}; 0 is the zero value."
        .format(INT64_MIN, INT64_MAX),
        1073741824)),
    float: (_float_value, doc.TypeDoc(
        "float", "A floating point number; 0 is the zero value.", 0.5)),
    str: (_str_value, doc.TypeDoc(
        "string",
        "A UTF-8 string; the empty string is the zero value. The "
        "characters '<', '>' and '&' are escaped when encoding.",
        "text")),
}


def spTypeVal(val):
    subType = spType(type(val))
    name = "{0}, default={1}".format(subType.name, js.dumps(val))

    def handleVal(x):
        """ Validate the value; null stands for the default one. """
        if x is None:
            return val
        return subType.handleVal(x)

    return SpType(name, handleVal, lambda: val, subType.spDoc)


def spType(tp):
    if isinstance(tp, SpType):
        return tp
    elif inspect.isclass(tp) and tp in spPrimitives:
        handler, _doc = spPrimitives[tp]
        return SpType(_doc.name, handler,
                      lambda: opcatch.error("No default value for {type}",
                                            type=_doc.name),
                      _doc)
    elif inspect.isclass(tp) or inspect.isfunction(tp):
        return SpType(tp.__name__, tp,
                      lambda: opcatch.error("No default value for {type}",
                                            type=tp.__name__),
                      tp.spDoc)
    else:
        for _type, _spType in spTypes.items():
            if isinstance(tp, _type):
                return _spType(tp)
        else:
            return spTypeVal(tp)


def _zero(attrType):
    """ The value an attribute is left out of the encoding with, if any. """
    try:
        return attrType.defaultVal()
    except opcatch.InvalidArgumentError:
        return None


class JsonObject(object):
    """ Turn a class into a record type with the specified attributes.

    Each keyword argument names an attribute and specifies its type:
    a Python type, another record class, a one-element list or dict
    describing a collection, an SpType built by the helper functions in
    this module, or a plain value that becomes the attribute's default.
    The "name: description" lines in the class docstring document the
    attributes. """

    def __init__(self, **kwargs):
        self.attrDefs = dict(
            (argName, spType(argVal))
            for argName, argVal in kwargs.items())

    def __call__(self, cls):
        if issubclass(cls, js.JsonObjectImpl):
            attrDefs = dict(cls.__jsonAttrDefs__)
            attrDefs.update(self.attrDefs)
            docDescs = collections.defaultdict(lambda: "", dict(
                (field.name, field.desc) for field in cls.spDoc.fields))
        else:
            attrDefs = self.attrDefs
            docDescs = collections.defaultdict(lambda: "")

        _doc = ""
        if cls.__doc__ is not None:
            _doc += cls.__doc__
        else:
            _doc += "{0}.{1}".format(cls.__module__, cls.__name__)
        _doc += "\n\n"
        _doc += "    JSON attributes:\n"
        for attrName, attrType in attrDefs.items():
            _doc += "        {name}: {type}\n".format(
                name=attrName, type=attrType.name)
        _doc += "\n"

        if cls.__doc__ is not None:
            docDescs.update(
                (k.strip(), v.strip())
                for k, v in (
                    m for m in (
                        line.split(':', 1) for line in cls.__doc__.split('\n')
                    ) if len(m) == 2))

        spDoc = doc.RecordDoc(
            cls.__name__,
            cls.__doc__ or "{0}.{1} not documented.".format(
                cls.__module__, cls.__name__),
            [doc.FieldDoc(attrName, attrType.spDoc, _zero(attrType),
                          docDescs[attrName])
             for attrName, attrType in attrDefs.items()])

        return type(cls.__name__, (cls, js.JsonObjectImpl),
                    dict(__jsonAttrDefs__=attrDefs, __module__=cls.__module__,
                         __doc__=_doc, spDoc=spDoc))
