"""
The grammar table: for each parser state, an ordered list of the tokens acceptable there.

There is exactly zero concern here for where the table comes from. The `specfile` module
reads the human-written definition format; the compact form defined here is a plain
JSON-friendly structure suitable for storing next to the definition.

Order matters. The parser tries each token spec in the order given and takes the first
one which matches. That is neither longest-match nor any sort of ambiguity resolution:
if a literal `'focus'` comes before a `word`, then "focus" is the literal, period.
"""

from typing import NamedTuple, Optional, Iterable, Any

from .interfaces import INITIAL, LITERAL, TOKEN_KINDS, DefinitionError

VERSION = (0, 0, 1)

STRING_ARGUMENT = '$'
INTEGER_ARGUMENT = '&'
CONSTANT_ARGUMENT = ''

class Argument(NamedTuple):
	"""
	One actual parameter to a command handler. The sigil says where the value comes from:
		'$' -> the captured string by that name;
		'&' -> the captured integer by that name (zero if absent);
		''  -> the value itself, a constant given in the grammar.
	"""
	sigil: str
	value: Any

	def __str__(self):
		if self.sigil: return self.sigil + self.value
		return repr(self.value) if isinstance(self.value, str) else str(self.value)

class Call(NamedTuple):
	""" Invoke the named handler; afterwards the parser resumes in `resume` unless the handler says otherwise. """
	handler: str
	arguments: tuple = ()
	resume: str = INITIAL
	line_number: int = 0

	def __str__(self): return "%s(%s)"%(self.handler, ", ".join(map(str, self.arguments)))

class TokenSpec(NamedTuple):
	kind: str
	text: Optional[str] = None
	capture: Optional[str] = None
	target: Optional[str] = None
	call: Optional[Call] = None

	def describe(self) -> str:
		""" The way this token appears in the list of things the parser would have accepted. """
		return "'%s'"%self.text if self.kind == LITERAL else "<%s>"%self.kind

	def is_call(self) -> bool: return self.call is not None

	def successor(self) -> str:
		return self.call.resume if self.is_call() else self.target


class GrammarTable:
	""" Immutable once built: a mapping from state name to a tuple of token specs. """

	def __init__(self, states:dict[str, Iterable[TokenSpec]], source:str=None):
		self.__states = {name: tuple(specs) for name, specs in states.items()}
		self.source = source
		self.__validate()

	def __validate(self):
		if INITIAL not in self.__states:
			raise DefinitionError("The grammar defines no %s state."%INITIAL)
		for name, specs in self.__states.items():
			for spec in specs:
				if spec.kind not in TOKEN_KINDS:
					raise DefinitionError("State %s has a token of unknown kind %r."%(name, spec.kind))
				if (spec.kind == LITERAL) != (spec.text is not None):
					raise DefinitionError("State %s: only literals (and all literals) have text: %r"%(name, spec))
				if (spec.target is None) == (spec.call is None):
					raise DefinitionError("State %s: token %s needs exactly one of a target or a call."%(name, spec.describe()))
				if spec.successor() not in self.__states:
					raise DefinitionError("State %s: token %s leads to undefined state %r."%(name, spec.describe(), spec.successor()))

	def tokens(self, state:str) -> tuple[TokenSpec, ...]: return self.__states[state]
	def state_names(self) -> list[str]: return list(self.__states)
	def __contains__(self, state): return state in self.__states
	def __len__(self): return len(self.__states)

	def each_handler(self):
		""" Yield pairs of <handler name, set of mentioning line numbers>, which is what binding needs. """
		mentions = {}
		for specs in self.__states.values():
			for spec in specs:
				if spec.is_call(): mentions.setdefault(spec.call.handler, set()).add(spec.call.line_number)
		yield from mentions.items()

	def expected(self, state:str) -> str:
		""" The human-readable list of acceptable tokens, in grammar order. """
		return ", ".join(spec.describe() for spec in self.__states[state])

	def as_compact_form(self, *, filename=None) -> dict:
		def encode_call(call:Call):
			if call is None: return None
			return [call.handler, [list(a) for a in call.arguments], call.resume, call.line_number]
		return {
			'description': 'Command Parser Grammar Table',
			'version': VERSION,
			'source': filename or self.source,
			'states': {
				name: [[s.kind, s.text, s.capture, s.target, encode_call(s.call)] for s in specs]
				for name, specs in self.__states.items()
			},
		}

	@staticmethod
	def from_compact_form(tables:dict) -> "GrammarTable":
		def version(): return tuple(tables.get('version', ()))
		if version() != VERSION:
			raise ValueError('Installed package cannot understand table version: ' + repr(version()))
		def decode_call(call):
			if call is None: return None
			handler, arguments, resume, line_number = call
			return Call(handler, tuple(Argument(*a) for a in arguments), resume, line_number)
		states = {
			name: [TokenSpec(kind, text, capture, target, decode_call(call)) for kind, text, capture, target, call in specs]
			for name, specs in tables['states'].items()
		}
		return GrammarTable(states, source=tables.get('source'))
