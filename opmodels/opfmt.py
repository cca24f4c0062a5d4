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
""" String formats checked by the record validate() methods.

A Registry maps a format name to a checker function that returns True if
a string is in that format. Record attributes declared through
optype.formatted() are looked up in the registry passed to validate();
DEFAULT is used when none is given.

The drive and server records carry no formatted attributes, so validating
them always succeeds. DEFAULT holds the formats the other records of the
management API declare (UUIDs, host names, addresses, timestamps and
URIs), and any registry passed in by a caller is consulted the same way.
"""

import datetime
import ipaddress
import re
import time
import uuid

from .opcatch import InvalidArgumentError


RE_HOSTNAME = re.compile(r'''
    ^
    (?= .{1,253} $ )
    (?! - ) [A-Za-z0-9-]{1,63} (?<! - )
    (?: \. (?! - ) [A-Za-z0-9-]{1,63} (?<! - ) )*
    \.?
    $''', re.X)

RE_URI = re.compile(r'^[A-Za-z][A-Za-z0-9+.-]*:[^\s]*$')


class ContextCancelled(InvalidArgumentError):
    """ Validation was attempted within a cancelled context. """


class ValidationContext(object):
    """ A cancellable scope for validating nested records.

    The context may be cancelled explicitly or expire after the specified
    number of seconds. """

    def __init__(self, timeout=None):
        self._cancelled = False
        if timeout is not None:
            self._deadline = time.monotonic() + timeout
        else:
            self._deadline = None

    def cancel(self):
        """ Mark the context as cancelled. """
        self._cancelled = True

    @property
    def cancelled(self):
        if self._cancelled:
            return True
        return self._deadline is not None and \
            time.monotonic() >= self._deadline

    def check(self):
        """ Raise ContextCancelled if the context is no longer valid. """
        if self.cancelled:
            raise ContextCancelled('The validation context was cancelled')


def is_uuid(value):
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


def is_hostname(value):
    return RE_HOSTNAME.match(value) is not None


def is_ipv4(value):
    try:
        ipaddress.IPv4Address(value)
    except ValueError:
        return False
    return True


def is_ipv6(value):
    try:
        ipaddress.IPv6Address(value)
    except ValueError:
        return False
    return True


def is_date_time(value):
    # RFC 3339 wants a "T" separator and a timezone; accept a trailing "Z"
    if 'T' not in value.upper():
        return False
    if value.endswith(('Z', 'z')):
        value = value[:-1] + '+00:00'
    try:
        parsed = datetime.datetime.fromisoformat(value)
    except ValueError:
        return False
    return parsed.tzinfo is not None


def is_uri(value):
    return RE_URI.match(value) is not None


class Registry(object):
    """ A set of named string format checkers. """

    def __init__(self, formats=None):
        self._formats = dict(formats) if formats is not None else {}

    def add(self, name, checker):
        """ Register a checker, replacing any previous one by that name. """
        self._formats[name] = checker
        return self

    def contains(self, name):
        return name in self._formats

    def validates(self, name, value):
        """ Check a value against a named format.

        Unknown formats are not an error; a value cannot fail a check
        that nobody registered. """
        checker = self._formats.get(name)
        if checker is None:
            return True
        return bool(checker(value))

    def copy(self):
        return Registry(self._formats)

    def __contains__(self, name):
        return self.contains(name)

    def __iter__(self):
        return iter(sorted(self._formats))


DEFAULT = Registry({
    'date-time': is_date_time,
    'hostname': is_hostname,
    'ipv4': is_ipv4,
    'ipv6': is_ipv6,
    'uri': is_uri,
    'uuid': is_uuid,
})
