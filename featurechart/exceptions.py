__author__ = 'Aaron Hosford'
__all__ = [
    'Timeout',
    'UnificationConflict',
    'ValueConflict',
    'AttributeConflict',
    'GrammarModelError',
    'GrammarParserError',
    'GrammarSyntaxError',
]


class Timeout(Exception):
    pass


class UnificationConflict(Exception):
    """Two feature structures could not be unified. Raised and handled inside the parser's search;
    it only ever rules out a single candidate derivation."""


class ValueConflict(UnificationConflict):
    """Two distinct atomic values were required to be the same."""

    def __init__(self, left, right):
        super().__init__(left, right)
        self.left = left
        self.right = right

    def __str__(self):
        return 'unification failure: %s & %s' % (self.left, self.right)


class AttributeConflict(ValueConflict):
    """Two feature structures disagree on the value of an attribute."""

    def __init__(self, key, left, right):
        super().__init__(left, right)
        self.key = key
        self.args = (key, left, right)

    def __str__(self):
        return 'unification failure on %r: %s & %s' % (self.key, self.left, self.right)


class GrammarModelError(Exception):
    """The grammar model is malformed or inconsistent. This is a load-time defect of the grammar,
    reported before any parsing begins."""


class GrammarParserError(GrammarModelError):
    """An error while parsing a grammar file"""

    def __init__(self, msg=None, filename=None, lineno=1, offset=1, text=None):
        super().__init__(msg, (filename, lineno, offset, text))
        self.msg = msg
        self.args = (msg, (filename, lineno, offset, text))

        self.filename = filename
        self.lineno = lineno
        self.offset = offset
        self.text = text

    def __repr__(self):
        return type(self).__name__ + repr((self.msg,
                                           (self.filename, self.lineno, self.offset, self.text)))

    def __str__(self):
        location = '%s, line %s' % (self.filename or '<grammar>', self.lineno)
        if self.msg:
            return '%s (%s)' % (self.msg, location)
        return 'Error in grammar (%s)' % location

    def set_info(self, filename=None, lineno=None, offset=None, text=None):
        """Set additional information on the exception after it has been raised."""
        if filename is not None:
            self.filename = filename
        if lineno is not None:
            self.lineno = lineno
        if offset is not None:
            self.offset = offset
        if text is not None:
            self.text = text
        self.args = (self.msg, (self.filename, self.lineno, self.offset, self.text))


class GrammarSyntaxError(GrammarParserError, SyntaxError):
    """A syntax error detected in a grammar file"""
