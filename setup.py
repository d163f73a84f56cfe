#!/usr/bin/env python
# -*- coding: utf-8 -*-


"""Setup script for Featurechart."""

from codecs import open as codecs_open
from os import path

from setuptools import setup

from featurechart import __author__, __version__


HERE = path.abspath(path.dirname(__file__))


# Default long description
LONG_DESCRIPTION = """

Featurechart
============

*Feature Unification Chart Parsing*

""".strip()


# Get the long description from the relevant file. First try README.rst,
# then fall back on the default string defined here in this file.
if path.isfile(path.join(HERE, 'README.rst')):
    with codecs_open(path.join(HERE, 'README.rst'), encoding='utf-8', mode='r') as description_file:
        LONG_DESCRIPTION = description_file.read()


# See https://setuptools.pypa.io/en/latest/references/keywords.html for a full list
# of parameters and their meanings.
setup(
    name='featurechart',
    version=__version__,
    author=__author__,
    author_email='hosford42@gmail.com',
    url='https://github.com/hosford42/featurechart',
    license='MIT',
    platforms=['any'],
    description='Featurechart: Chart Parsing with Feature Unification',
    long_description=LONG_DESCRIPTION,

    # See https://pypi.org/classifiers/
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Science/Research',
        'Topic :: Scientific/Engineering :: Artificial Intelligence',
        'Topic :: Text Processing :: Linguistic',
        'License :: OSI Approved :: MIT License',
        'Programming Language :: Python',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3 :: Only',
    ],

    keywords='parser chart cyk feature unification grammar natural language',
    packages=['featurechart'],
    package_data={'featurechart': ['data/*/*.ini', 'data/*/*.fgr']},
    include_package_data=True,
    install_requires=['sortedcontainers'],
    extras_require={'test': ['pytest']},
)
