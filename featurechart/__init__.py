# -*- coding: utf-8 -*-

"""
Featurechart
============
A chart parser for context-free grammars annotated with feature structures.

MIT License (http://opensource.org/licenses/MIT)

Featurechart builds its parses from the bottom up, the way a CYK parser does: every span of the
input is filled with the constituents that can cover it, shortest spans first, using principles of
dynamic programming. What sets it apart from a plain context-free recognizer is that every
constituent carries a feature structure, a small attribute-value mapping such as
``[ case: nom, num: sg ]``. Grammar rules constrain these structures and share values between a
phrase and its parts through coreference tags, and two constituents are only combined when their
structures unify. This is what lets a handful of rules enforce case, number, and reflexive binding
agreement across a sentence. Sentences that cannot be derived are simply rejected, and the chart
can be inspected to see which parts of the input failed to combine.
"""


__author__ = 'Aaron Hosford'
__copyright__ = "Copyright (c) 2011-2021, Aaron Hosford"
__credits__ = ['Aaron Hosford']
__license__ = 'MIT'
__version__ = '1.0'
__maintainer__ = 'Aaron Hosford'
__email__ = 'hosford42@gmail.com'
__status__ = 'Production'

__all__ = [
    '__author__',
    '__copyright__',
    '__credits__',
    '__license__',
    '__version__',
    '__maintainer__',
    '__email__',
    '__status__',
]
