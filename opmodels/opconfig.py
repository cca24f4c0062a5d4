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
""" Configuration file parser for the opmodels tools. """

import logging
import os
import platform

import confget


LOG = logging.getLogger(__name__)

DEFAULTS = {
    "OP_LOG_LEVEL": "WARNING",
    "OP_JSON_INDENT": "",
    "OP_SIZE_UNITS": "iec",
}

SIZE_UNITS = ("iec", "k8s")


class OPConfigException(Exception):
    """ An error that occurred during the configuration parsing. """


class OPConfig(object):
    """ A representation of the opmodels configuration settings.

    When constructed, an object of this class will look for the
    configuration files, parse them, and store the obtained variables and
    values into its internal dictionary, on top of the built-in defaults.
    The unnamed section is read first, then the one named after the host
    (or the one explicitly requested).
    The object may later be accessed as a dictionary. """

    PATH_CONFIG = '/etc/opmodels.conf'
    PATH_CONFIG_DIR = '/etc/opmodels.conf.d'

    def __init__(self, section=None, missing_ok=False):
        self._dict = dict()
        self._section = section
        self.run_confget(missing_ok=missing_ok)

    @classmethod
    def get_config_files(cls, missing_ok=False):
        """ Return the configuration files present on the system. """
        to_check = [cls.PATH_CONFIG]
        if os.path.isdir(cls.PATH_CONFIG_DIR):
            to_check.extend([
                os.path.join(cls.PATH_CONFIG_DIR, fname)
                for fname in sorted(os.listdir(cls.PATH_CONFIG_DIR))
                if fname.endswith(".conf") and not fname.startswith(".")
            ])

        if not missing_ok:
            return to_check
        return [path for path in to_check if os.path.isfile(path)]

    def run_confget(self, missing_ok=False):
        """ Parse the configuration files using the confget INI backend. """
        if self._section is not None:
            section = self._section
        else:
            section = platform.node()
        sections = ['', section]
        ini = confget.BACKENDS['ini']
        res = dict(DEFAULTS)

        for fname in self.get_config_files(missing_ok=missing_ok):
            try:
                cfg = confget.Config([], filename=fname)
                raw = ini(cfg).read_file()
            except Exception as exc:
                raise OPConfigException(
                    'Could not parse the {fname} configuration file: {exc}'
                    .format(fname=fname, exc=exc))

            LOG.debug('Read %d section(s) from %s', len(raw), fname)
            for section in sections:
                res.update(raw.get(section, {}))

        self._dict = res

    def __getitem__(self, key):
        return self._dict[key]

    def get(self, key, defval=None):
        """ Return value of the specified configuration variable. """
        return self._dict.get(key, defval)

    def __iter__(self):
        return iter(self._dict)

    def items(self):
        """ Return the configuration var/value pairs. """
        return self._dict.items()

    def keys(self):
        """ Return the configuration variable names. """
        return self._dict.keys()

    def with_overrides(self, environ=None):
        """ Return the settings overridden by same-named environment
        variables. """
        if environ is None:
            environ = os.environ
        res = dict(self._dict)
        res.update(
            (name, environ[name]) for name in DEFAULTS if name in environ)
        return res


def json_indent(cfg):
    """ Parse the OP_JSON_INDENT setting: empty means compact output. """
    value = cfg.get('OP_JSON_INDENT', '').strip()
    if not value:
        return None
    try:
        indent = int(value)
    except ValueError:
        raise OPConfigException(
            'Invalid OP_JSON_INDENT value "{value}"; must be a number'
            .format(value=value))
    if indent < 0:
        raise OPConfigException(
            'Invalid OP_JSON_INDENT value "{value}"; must not be negative'
            .format(value=value))
    return indent


def size_units(cfg):
    """ Parse the OP_SIZE_UNITS setting. """
    value = cfg.get('OP_SIZE_UNITS', 'iec').strip().lower()
    if value not in SIZE_UNITS:
        raise OPConfigException(
            'Invalid OP_SIZE_UNITS value "{value}"; must be one of {units}'
            .format(value=value, units=", ".join(SIZE_UNITS)))
    return value
