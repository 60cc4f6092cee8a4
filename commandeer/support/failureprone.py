"""
This module is all about easing over the process to display where things go wrong.

Commands are one-liners typed by humans (or bound to keys by humans, which is worse:
they find out about the typo much later). So a decent report says what the parser would
have accepted, repeats the command, and underlines the part which did not make sense.

The underline is a string exactly as long as the command, with a blank under every
character that parsed and a caret under every character from the failure onward.
That way a client can put it under the original input in whatever font it likes,
without knowing anything about where lines break.
"""

from typing import NamedTuple, Iterable

PREFIX = "Your command: "

def underline(text:str, position:int) -> str:
	"""
	Blanks before the position; carets from there to the end of the text.
	Both count characters of the str, not bytes of its UTF-8 encoding, so for
	non-ASCII input this will not line up with a byte-oriented display.
	"""
	return ''.join(' ' if i < position else '^' for i in range(len(text)))

def expectation(alternatives:Iterable[str]) -> str:
	return "Expected one of these tokens: " + ", ".join(alternatives)

class Failure(NamedTuple):
	"""
	Contain all the information necessary to present a parse failure. As a reply record,
	`success` is false and `parse_error` is true, which lets a client tell syntax errors
	apart from commands that parsed fine but failed to do anything.
	"""
	message: str
	input: str
	errorposition: str

	@staticmethod
	def at(text:str, position:int, alternatives:Iterable[str]) -> "Failure":
		return Failure(expectation(alternatives), text, underline(text, position))

	def as_record(self) -> dict:
		return {
			'success': False,
			'parse_error': True,
			'error': self.message,
			'input': self.input,
			'errorposition': self.errorposition,
		}

	def as_text(self) -> str:
		return "%s\n%s\n%s%s"%(self.message, PREFIX + self.input, ' '*len(PREFIX), self.errorposition)
