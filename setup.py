#
# This source file is part of the docbridge open source project.
#
# Copyright 2024-present MagicStack Inc. and the docbridge authors.
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


import pathlib
import re

import setuptools


ROOT_PATH = pathlib.Path(__file__).parent.resolve()

RUNTIME_DEPS = [
    'immutables>=0.18',
    'click>=8.1.0',
]

TEST_DEPS = [
    'pytest>=7.0',
]


def _version():
    init = (ROOT_PATH / 'docbridge' / '__init__.py').read_text()
    match = re.search(r"^__version__ = '([^']+)'", init, re.M)
    if match is None:
        raise RuntimeError('unable to determine docbridge version')
    return match.group(1)


setuptools.setup(
    name='docbridge',
    version=_version(),
    description='Schema-driven conversion between tabular records '
                'and JSON documents',
    license='Apache-2.0',
    python_requires='>=3.10',
    packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
    install_requires=RUNTIME_DEPS,
    extras_require={
        'test': TEST_DEPS,
    },
    entry_points={
        'console_scripts': [
            'docbridge = docbridge.cli:main',
        ],
    },
)
