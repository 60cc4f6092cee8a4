"""
This file aggregates the constants and exception types which the command parser deals in.

There are exactly two kinds of trouble worth distinguishing:

A user may type something the grammar does not accept. That is ordinary and expected, so
it is NOT an exception at all: it comes back as a CommandResult with parse_error set, and
(optionally) as a failure record in the reply stream.

A grammar may ask for something the machinery cannot honor. That means somebody wrote a
bad grammar, and no amount of re-typing will fix it, so those are exceptions.
"""

INITIAL = 'INITIAL' # The state every parse begins in, and returns to after each complete command.

# The kinds of token a grammar state may list. Literals carry their own text.
LITERAL = 'literal'
NUMBER = 'number'
STRING = 'string'
WORD = 'word'
END = 'end'
TOKEN_KINDS = (LITERAL, NUMBER, STRING, WORD, END)

WHITESPACE = ' \t\r\n'

CAPACITY = 10 # Simultaneous captures per command.

class LanguageError(ValueError):
	""" Base class of the exceptions arising from grammar definitions and tables. """

class CaptureStackFull(SystemExit):
	"""
	Raised if a command tries to capture more values than the capture stack can hold.
	This should not happen: it means either a bug in the parser or a grammar which
	declares a command with too many identified tokens. Continuing would silently
	drop captured data, so this ends the process unless somebody deliberately catches it.
	"""
	def __init__(self, identifier):
		super().__init__(
			"BUG: command parser capture stack full. This means either a bug in the code, "
			"or a new command which contains more than %d identified tokens. "
			"(Could not store %r.)"%(CAPACITY, identifier)
		)
		self.identifier = identifier

class DefinitionError(LanguageError):
	""" Raised for a malformed or inconsistent grammar definition. """
