"""
Token recognizers for the command parser.

Commands are easy for humans, not for computers, so there is no lexical analysis pass:
the parser state decides which kinds of token are acceptable next, and each of these
recognizers is tried in turn against the same spot in the input.

Every recognizer takes a Cursor. If it recognizes something, it advances the cursor past
the match and returns a value. Otherwise it returns None and leaves the cursor alone,
so that the next candidate gets a fair shot from the same position. None of them skip
whitespace: that is the parser's job, and it happens before each token.
"""

import re
from typing import Optional

# Signed 64-bit range. Anything outside it does not count as a number.
INTEGER_MIN, INTEGER_MAX = -(1 << 63), (1 << 63) - 1

DECIMAL = re.compile(r'[+-]?[0-9]+')
STRING_STOP = frozenset(';,\r\n')
WORD_STOP = frozenset(' \t],;\r\n')

class Cursor:
	""" A position within a text, with just enough operations to scan commands. """
	def __init__(self, text:str, position:int=0):
		self.text = text
		self.position = position

	def peek(self, offset:int=0) -> str:
		""" Return the character at (position + offset), or the empty string past the end. """
		return self.text[self.position + offset:self.position + offset + 1]

	def at_end(self) -> bool: return self.position >= len(self.text)
	def advance(self, nr_chars:int=1): self.position += nr_chars
	def mark(self) -> int: return self.position
	def reset(self, mark:int): self.position = mark
	def rest(self) -> str: return self.text[self.position:]

	def skip(self, characters:str):
		while not self.at_end() and self.peek() in characters: self.advance()

	def __repr__(self): return "<Cursor %d of %r>"%(self.position, self.text)


def scan_literal(cursor:Cursor, literal:str) -> Optional[str]:
	""" Case-insensitive prefix match. Returns the grammar's spelling, not the user's. """
	size = len(literal)
	if cursor.text[cursor.position:cursor.position+size].lower() == literal.lower():
		cursor.advance(size)
		return literal

def scan_number(cursor:Cursor) -> Optional[int]:
	""" Decimal integers only. Something too big to represent is simply not a number. """
	m = DECIMAL.match(cursor.text, cursor.position)
	if m is None: return None
	value = int(m.group())
	if not INTEGER_MIN <= value <= INTEGER_MAX: return None
	cursor.reset(m.end())
	return value

def unescape(raw:str) -> str:
	"""
	Only escaped double quotes and backslashes are interpreted. Everything else goes
	through untouched, so that people can keep writing \\w in their regular expressions.
	"""
	out, i = [], 0
	while i < len(raw):
		if raw[i] == '\\' and raw[i+1:i+2] in ('"', '\\'): i += 1
		out.append(raw[i])
		i += 1
	return ''.join(out)

def scan_string(cursor:Cursor, as_word:bool=False) -> Optional[str]:
	"""
	A double-quoted string runs up to the next unescaped double quote, or the end of input.
	The cursor is left AT the closing quote: skipping it is up to the caller.

	Otherwise a string stops at comma or semicolon (which introduce a new operation or
	command, respectively) or a line break, and a word additionally stops at white space
	and the closing square bracket.

	An empty match is no match.
	"""
	start = cursor.mark()
	if cursor.peek() == '"':
		cursor.advance()
		beginning = cursor.mark()
		while not cursor.at_end() and cursor.peek() != '"':
			if cursor.peek() == '\\' and cursor.peek(1): cursor.advance()
			cursor.advance()
	else:
		beginning = start
		stop = WORD_STOP if as_word else STRING_STOP
		while not cursor.at_end() and cursor.peek() not in stop: cursor.advance()
	if cursor.position == beginning:
		cursor.reset(start)
		return None
	return unescape(cursor.text[beginning:cursor.position])

def scan_word(cursor:Cursor) -> Optional[str]:
	return scan_string(cursor, as_word=True)

def at_end_token(cursor:Cursor) -> bool:
	""" The `end` token matches the end of input or an operation/command separator, without consuming it. """
	return cursor.at_end() or cursor.peek() in (',', ';')

def parse_string(text:str, position:int=0, as_word:bool=False) -> tuple[Optional[str], int]:
	"""
	For applications which want to interpret a string or word the same way the command
	parser does, outside of any grammar: returns the value (or None) and the new position.
	"""
	cursor = Cursor(text, position)
	value = scan_string(cursor, as_word)
	return value, cursor.position
