#! /usr/bin/python3

import re
from os.path import dirname, join

from setuptools import find_packages, setup

with open(join(dirname(__file__), 'debian', 'changelog')) as changelog:
    name, version = (
        re.compile(r'(\S+) \(([^\)~\s]+)[\)~]').match(changelog.readline()).group(1, 2)
    )

setup(
    name=name,
    version=version,
    packages=find_packages(exclude=['tests', 'tests.*']),
    python_requires='>=3.10',
    install_requires=['click>=8.0'],
    scripts=['bin/fsitem.py'],
    entry_points={
        'console_scripts': ['fsitem=fsitem.cli:main'],
    },
    test_suite='tests',
)
