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
""" Distribution definitions for the opmodels drive status records. """


import os
import re
import subprocess
import sys

import setuptools

from setuptools.command import build_py


RE_VERSION = r'''^
    \s* VERSION \s* = \s* '
    (?P<version>
           (?: 0 | [1-9][0-9]* )    # major
        \. (?: 0 | [1-9][0-9]* )    # minor
        \. (?: 0 | [1-9][0-9]* )    # patchlevel
    (?: \. [a-zA-Z0-9]+ )?          # optional addendum (dev1, beta3, etc.)
    )
    ' \s*
    $'''

BUILD_DOC = os.environ.get("OP_DOC_BUILD") == "1"


def get_version():
    """ Get the version string from the records module. """
    found = None
    re_semver = re.compile(RE_VERSION, re.X)
    with open('opmodels/optypes.py') as init:
        for line in init.readlines():
            match = re_semver.match(line)
            if not match:
                continue
            assert found is None
            found = match.group('version')

    assert found is not None
    return found


class ModelDocCommand(setuptools.Command):
    """A custom command to generate the record types reference."""

    description = 'Generate the record types reference documentation.'
    user_options = []

    def initialize_options(self):
        """ No options to initialize. """

    def finalize_options(self):
        """ No options to finalize. """

    def run(self):
        """ Autogenerate the reference documentation. """
        command = (sys.executable, '-m', 'opmodels.opreq', '--reference')
        docfile = 'opmodels/modeldoc.html'

        with open(docfile, 'w') as modeldoc:
            try:
                subprocess.check_call(command, stdout=modeldoc)
            except subprocess.CalledProcessError:
                try:
                    os.unlink(docfile)
                except FileNotFoundError:
                    pass
                raise


class BuildPyCommand(build_py.build_py):
    """Custom build command, also invoking 'modeldoc' if requested."""

    def run(self):
        if BUILD_DOC:
            self.run_command('modeldoc')
        build_py.build_py.run(self)


setuptools.setup(
    name='opmodels',
    version=get_version(),
    packages=('opmodels',),

    author='The opmodels authors',
    description='Drive status records for an object-storage cluster '
                'management API',
    license='Apache License 2.0',
    keywords='storage drives cluster json',

    python_requires='>=3.7',
    install_requires=[
        'confget',
        'simplejson',
    ],
    extras_require={
        'test': [
            'ddt',
            'mock',
            'pytest',
        ],
    },

    zip_safe=True,

    cmdclass={
        'modeldoc': ModelDocCommand,
        'build_py': BuildPyCommand,
    },

    entry_points={
        'console_scripts': [
            'opmodels_req=opmodels.opreq:main',
        ],
    },

    data_files=[('share/doc/opmodels', ['opmodels/modeldoc.html'])]
    if BUILD_DOC else [],
)
