"""
Read a grammar definition document and build a GrammarTable from it.

The definition format is line-oriented. A state begins with a header line, and each rule
after it lists one or more alternative tokens, an arrow, and what to do about them:

	# The state in which every command begins.
	state INITIAL:
	  end ->
	  'move' -> MOVE

	state MOVE:
	  direction = 'left', 'right', 'up', 'down'
	      -> call move_direction($direction, 10)

Tokens are 'literals' in single quotes, or one of the words number, string, word, end.
A rule may name a capture (`direction = ...`); the captured value is then available to
handler calls as `$direction` (a string) or `&direction` (an integer).

To the right of the arrow is either a state name, nothing at all (which means to stay
in the current state), or `call handler(arguments)`, optionally followed by `; STATE` to
say where to resume after the call. (The default is INITIAL.) Arguments may be captures,
integers, or "double-quoted strings".

A rule may wrap onto following lines: it ends at the end of the line with the arrow.
Lines whose first non-blank character is '#' are comments.
"""

import re, os, json

from .interfaces import INITIAL, LITERAL, TOKEN_KINDS, DefinitionError
from .grammar import GrammarTable, TokenSpec, Call, Argument, CONSTANT_ARGUMENT

STATE_HEADER = re.compile(r'state\s+(\w+)\s*:\s*$')
RULE = re.compile(r'(?:(\w+)\s*=\s*)?(.*?)\s*->\s*(.*)$', re.DOTALL)
TOKEN = re.compile(r"\s*(?:'([^']*)'|([a-z]+))\s*(?:,|$)")
CALL = re.compile(r'call\s+(\w+)\s*\((.*)\)\s*(?:;\s*(\w+))?$')
TARGET = re.compile(r'\w+$')
ARGUMENT = re.compile(r'\s*(?:([$&])(\w+)|(-?[0-9]+)|"((?:[^"\\]|\\.)*)")\s*(?:,|$)')

BUNDLED_GRAMMAR = os.path.join(os.path.dirname(__file__), 'commands.spec')


def _gripe(line_number:int, message:str):
	raise DefinitionError('At line %d: %s'%(line_number, message)) from None

def _each_statement(document:str):
	"""
	Yield (line_number, text) for each state header and each rule, with continued
	rules joined into one line of text. Comments and blank lines disappear.
	"""
	pending, start = [], None
	for line_number, line in enumerate(document.splitlines(), 1):
		stripped = line.strip()
		if not stripped or stripped.startswith('#'): continue
		if not pending and STATE_HEADER.match(stripped):
			yield line_number, stripped
			continue
		if not pending: start = line_number
		pending.append(stripped)
		if '->' in stripped:
			yield start, ' '.join(pending)
			pending = []
	if pending: _gripe(start, "Rule has no arrow (->).")

def _tokens(line_number:int, text:str):
	position, kinds = 0, []
	while position < len(text):
		m = TOKEN.match(text, position)
		if m is None or m.end() == position: _gripe(line_number, "Malformed token list %r."%text)
		literal, kind = m.groups()
		if literal is not None: kinds.append((LITERAL, literal))
		elif kind in TOKEN_KINDS and kind != LITERAL: kinds.append((kind, None))
		else: _gripe(line_number, "Unknown kind of token %r."%kind)
		position = m.end()
	if not kinds: _gripe(line_number, "Rule has no tokens.")
	return kinds

def _unescape_constant(text:str) -> str:
	return re.sub(r'\\(.)', r'\1', text)

def _arguments(line_number:int, text:str) -> tuple:
	position, arguments = 0, []
	text = text.strip()
	while position < len(text):
		m = ARGUMENT.match(text, position)
		if m is None or m.end() == position: _gripe(line_number, "Malformed argument list %r."%text)
		sigil, name, number, quoted = m.groups()
		if sigil: arguments.append(Argument(sigil, name))
		elif number is not None: arguments.append(Argument(CONSTANT_ARGUMENT, int(number)))
		else: arguments.append(Argument(CONSTANT_ARGUMENT, _unescape_constant(quoted)))
		position = m.end()
	return tuple(arguments)

def _transition(line_number:int, text:str, current:str):
	""" Returns a (target, call) pair, exactly one of which is None. """
	if not text: return current, None
	m = CALL.match(text)
	if m:
		handler, arguments, resume = m.groups()
		return None, Call(handler, _arguments(line_number, arguments), resume or INITIAL, line_number)
	if TARGET.match(text): return text, None
	_gripe(line_number, "Cannot make sense of %r after the arrow."%text)


def compile_string(document:str, *, filename:str=None) -> GrammarTable:
	""" This has the job of reading the definition and building the table. """
	states, mentions, current = {}, [], None
	for line_number, text in _each_statement(document):
		header = STATE_HEADER.match(text)
		if header:
			current = header.group(1)
			if current in states: _gripe(line_number, "Re-declared state %r."%current)
			states[current] = []
			continue
		if current is None: _gripe(line_number, "Rule appears before any state.")
		capture, tokens, transition = RULE.match(text).groups()
		target, call = _transition(line_number, transition.strip(), current)
		mentions.append((line_number, target or call.resume))
		for kind, literal in _tokens(line_number, tokens):
			states[current].append(TokenSpec(kind, literal, capture, target, call))
	if INITIAL not in states: _gripe(1, "There is no %s state."%INITIAL)
	for line_number, state in mentions:
		if state not in states: _gripe(line_number, "Undefined state %r."%state)
	return GrammarTable(states, source=filename)

def compile_file(pathname) -> GrammarTable:
	filename = os.path.basename(pathname)
	with open(pathname) as fh: document = fh.read()
	return compile_string(document, filename=filename)

def load_table(pathname) -> GrammarTable:
	""" Either a definition document, or the compact JSON form written by make_tables. """
	if pathname.endswith('.spec'): return compile_file(pathname)
	with open(pathname) as fh: return GrammarTable.from_compact_form(json.load(fh))

def make_tables(source_path, target_path=None) -> GrammarTable:
	"""
	Compile the definition only if the compact form next to it is missing or out of date,
	then load the compact form.
	"""
	stem, extension = os.path.splitext(source_path)
	target_path = target_path or stem+'.automaton'
	if os.path.exists(source_path):
		if (not os.path.exists(target_path)) or (os.stat(target_path).st_mtime < os.stat(source_path).st_mtime):
			tables = compile_file(source_path).as_compact_form()
			with open(target_path, 'w') as ofh:
				json.dump(tables, ofh, separators=(',', ':'), sort_keys=True)
	with open(target_path, "r") as fh:
		return GrammarTable.from_compact_form(json.load(fh))
