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
""" Error types and partially-constructed results.

The management API may send records produced by an older or newer version
of the server; these may carry values that this version of the records
cannot handle. The op_catch() and op_caught() functions wrap the value
handlers so that, when one of them fails, the values that could be
converted are still available in the raised exception's "partial" member.
"""

import sys


class InvalidArgumentError(Exception):
    """ An exception object containing a partially-processed value. """

    def __init__(self, fmt, partial=None, **kwargs):
        """ Store the partially-processed value and an error message. """
        super(InvalidArgumentError, self).__init__()
        self.partial = partial
        self.__dict__.update(**kwargs)
        self.message = fmt.format(**kwargs)

    def __str__(self):
        """ Return a human-readable error message. """
        return self.message


class SerializationError(InvalidArgumentError):
    """ A record could not be encoded to the wire format. """


class DeserializationError(InvalidArgumentError):
    """ The input could not be decoded into a record. """


class ValidationError(InvalidArgumentError):
    """ A record field does not satisfy its declared format. """


def error(fmt, partial=None, **kwargs):
    """ Raise an error with the specified partial value and message. """
    raise InvalidArgumentError(fmt, partial, **kwargs)


def op_catch(handle, func, exc):
    """ Invoke a handler and return an exception object if needed. """
    try:
        handle(func())
    except InvalidArgumentError as err:
        if err.partial is not None:
            handle(err.partial)
        if exc is None or not isinstance(exc[1], InvalidArgumentError):
            return sys.exc_info()
    except Exception:  # pylint: disable=broad-except
        if exc is None:
            return sys.exc_info()

    return exc


def op_caught(exc, name, partial):
    """ Reraise a "partially processed data" error if needed. """
    if exc is None:
        return

    if isinstance(exc[1], InvalidArgumentError):
        exc[1].message = '{name}: {msg}'.format(name=name, msg=exc[1].message)
        exc[1].partial = partial
        raise exc[1].with_traceback(exc[2])

    raise InvalidArgumentError(
        fmt='{name}: {msg}', name=name, msg=str(exc[1]), partial=partial)
