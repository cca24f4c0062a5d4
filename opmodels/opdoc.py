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
""" Building the HTML reference of the record types.

Each record is described by the JSON keys it is encoded with, in the
order they are written out, along with each attribute's type and zero
value. An attribute holding its zero value is left out of the encoded
record, so the reference shows an encoded sample of a fully populated
record next to the attribute table.
"""

import collections

from html import escape

from . import opjson


FieldDoc = collections.namedtuple('FieldDoc', [
    'name',
    'type',
    'zero',
    'desc',
])


class Html(object):
    """ A buffer for building up an HTML document. """

    def __init__(self):
        self.parts = []

    def add(self, fmt, *args, **kwargs):
        """ Escape the arguments, format the string, add it to the buffer. """
        self.parts.append(fmt.format(
            *(escape(str(arg)) for arg in args),
            **dict((key, escape(str(val))) for key, val in kwargs.items())))
        return self

    def __str__(self):
        return ''.join(self.parts)


class TypeDoc(object):
    """ The documentation of a value type.

    The sample is a value of the type, used when building the encoded
    sample of a record. Types without components are also listed in the
    data types section of the reference. """

    types = {}

    def __init__(self, name, desc, sample, listed=True):
        self.name = name
        self.desc = desc
        self.sample = sample

        if listed and name not in TypeDoc.types:
            TypeDoc.types[name] = self

    def link(self, html):
        """ Refer to the type's entry in the data types section. """
        html.add('<a href="#type-{0}">{0}</a>', self.name)

    @classmethod
    def build_types(cls, html):
        """ List the types that record attributes are built from. """
        html.add('<h2 id="types">Data Types</h2>\n<table>\n')
        for name, tdoc in sorted(cls.types.items()):
            html.add('<tr id="type-{0}"><td><code>{0}</code></td>'
                     '<td>{1}</td></tr>\n', name, tdoc.desc)
        html.add('</table>\n')


class ListDoc(TypeDoc):
    """ The documentation of a list of values of a single type. """

    def __init__(self, item):
        super(ListDoc, self).__init__(
            '[{0}]'.format(item.name),
            'A list of {0} values; the empty list is the zero value.'
            .format(item.name),
            [item.sample], listed=False)
        self.item = item

    def link(self, html):
        html.add('[')
        self.item.link(html)
        html.add(']')


class DictDoc(TypeDoc):
    """ The documentation of a dictionary with typed keys and values. """

    def __init__(self, key, value):
        super(DictDoc, self).__init__(
            '{{{0}: {1}}}'.format(key.name, value.name),
            'A dictionary from {0} to {1}; the empty dictionary is the '
            'zero value.'.format(key.name, value.name),
            {key.sample: value.sample}, listed=False)
        self.key = key
        self.value = value

    def link(self, html):
        html.add('{{')
        self.key.link(html)
        html.add(': ')
        self.value.link(html)
        html.add('}}')


class RecordDoc(object):
    """ The documentation of a record type built by optype.JsonObject. """

    def __init__(self, name, desc, fields):
        self.name = name
        self.desc = desc.strip()
        self.fields = list(fields)

    def link(self, html):
        html.add('<a href="#{0}">{0}</a>', self.name)

    @property
    def sample(self):
        """ A record with all of its attributes populated. """
        return dict((field.name, field.type.sample) for field in self.fields)

    def build(self, html):
        """ Describe the record, its attributes and its encoding. """
        html.add('<h2 id="{0}">{0}</h2>\n', self.name)
        for para in self.desc.split('\n\n'):
            if ':' not in para:
                html.add('<p>{0}</p>\n', ' '.join(para.split()))

        html.add('<table>\n<tr><th>Key</th><th>Type</th>'
                 '<th>Zero value</th><th>Description</th></tr>\n')
        for field in self.fields:
            html.add('<tr><td><code>{0}</code></td><td>', field.name)
            field.type.link(html)
            if field.zero is None:
                html.add('</td><td>none</td>')
            else:
                html.add('</td><td><code>{0}</code></td>',
                         opjson.dumps(field.zero))
            html.add('<td>{0}</td></tr>\n', field.desc)
        html.add('</table>\n')

        html.add('<p>The keys are written in the order listed above. '
                 'Keys are matched regardless of case when decoding. An '
                 'attribute holding its zero value is left out, so a {0} '
                 'with all of its attributes at their zero values is '
                 'encoded as <code>{{}}</code>.</p>\n', self.name)
        html.add('<p>A fully populated {0}:</p>\n<pre><code>{1}'
                 '</code></pre>\n',
                 self.name, opjson.WireEncoder(indent=2).encode(self.sample))


class ModelsDoc(object):
    """ The reference documentation of a set of record types. """

    def __init__(self, title, desc):
        self.title = title
        self.desc = desc
        self.models = []

    def add_model(self, model):
        """ Add a record class, or rather its documentation. """
        self.models.append(model.spDoc)
        return self

    def build(self, html):
        """ Build the whole document: an index, the records, the types. """
        html.add('<h1>{0}</h1>\n<p>{1}</p>\n<ol>\n', self.title, self.desc)
        for model in self.models:
            html.add('<li><a href="#{0}">{0}</a></li>\n', model.name)
        html.add('<li><a href="#types">Data Types</a></li>\n</ol>\n')

        for model in self.models:
            model.build(html)

        TypeDoc.build_types(html)
        return html
