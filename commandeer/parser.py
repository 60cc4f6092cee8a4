"""
The command parser itself: a state machine which looks for literals, numbers, strings
or words, and can capture any of them on a small stack. After recognizing a token, it
either moves to another state or calls a command handler (like the one behind `move`).

The grammar table says, for each state, which tokens are acceptable and in what order
to try them. There is no backtracking: the first token which matches is taken, and if
none matches, that's a parse error for the whole input. No further commands in the same
input are attempted after the first error.

Commands are separated by semicolons, and the operations within a command by commas:

	[class="Firefox"] move left, focus; workspace 4

That is two commands, the first consisting of two operations. Match criteria persist
across the operations of one command and start fresh with the next command.

All the mutable state of a parse lives in a ParserSession, created for each call to
CommandParser.parse(...) and discarded afterwards. The parser object itself holds only
the (immutable) grammar table and the bound handlers.
"""

import sys
from typing import NamedTuple, Optional

from .interfaces import INITIAL, LITERAL, NUMBER, STRING, WORD, END, WHITESPACE, LanguageError
from .grammar import GrammarTable, TokenSpec, Call
from .capture import CaptureStack
from .scanning import Cursor, scan_literal, scan_number, scan_string, at_end_token
from .binding import HandlerRegistry, BindErrorListener
from .reply import ReplySink
from .support.failureprone import Failure

VERBOSE = False

class CommandResult(NamedTuple):
	parse_error: bool = False
	error_message: Optional[str] = None
	needs_tree_render: bool = False

class CommandOutput:
	"""
	Where the outcome of a command accumulates: whether the tree must be rendered again,
	and (if anybody asked for one) the reply sink. The client is whoever sent the command;
	the parser never looks at it, but handlers might.
	"""
	def __init__(self, sink:ReplySink=None, client=None):
		self.sink = sink
		self.client = client
		self.needs_tree_render = False

	def reply(self, record:dict):
		if self.sink is not None: self.sink.map(record)

	def reply_success(self, success:bool=True, error:str=None):
		""" The usual shape of a handler's reply. """
		record = {'success': success}
		if error is not None: record['error'] = error
		self.reply(record)

class SubcommandOutput(CommandOutput):
	""" What one handler call gets to work with. It starts out not needing a render. """
	def __init__(self, parent:CommandOutput, next_state:str):
		super().__init__(parent.sink, parent.client)
		self.next_state = next_state


class ParserSession:
	def __init__(self, parser:"CommandParser", text:str, output:CommandOutput):
		self.parser = parser
		self.table = parser.table
		self.cursor = Cursor(text)
		self.state = INITIAL
		self.captures = CaptureStack()
		self.output = output
		self.failure: Optional[Failure] = None
		self.criteria = parser.handlers.init_criteria(output)

	def run(self):
		""" The "<=" is intentional: the end of input gets matched explicitly by an `end` token. """
		while self.cursor.position <= len(self.cursor.text):
			self.cursor.skip(WHITESPACE)
			if not self.step():
				self.fail()
				break

	def step(self) -> bool:
		""" Try each acceptable token in grammar order; take the first which matches. """
		return any(self.attempt(spec) for spec in self.table.tokens(self.state))

	def attempt(self, spec:TokenSpec) -> bool:
		cursor = self.cursor
		if spec.kind == END:
			if not at_end_token(cursor): return False
			at_command_boundary = cursor.peek() in ('', ';')
			self.transition(spec)
			# Commands which do not specify any criteria must start with a clean slate.
			if at_command_boundary: self.criteria = self.parser.handlers.init_criteria(self.output)
			cursor.advance()
			return True
		if spec.kind == LITERAL: value = scan_literal(cursor, spec.text)
		elif spec.kind == NUMBER: value = scan_number(cursor)
		elif spec.kind in (STRING, WORD): value = scan_string(cursor, as_word=spec.kind == WORD)
		else: raise LanguageError("Unknown token kind %r"%spec.kind)
		if value is None: return False
		if spec.capture is not None:
			if isinstance(value, int): self.captures.push_integer(spec.capture, value)
			else: self.captures.push_string(spec.capture, value)
		if spec.kind in (STRING, WORD) and cursor.peek() == '"': cursor.advance()
		self.transition(spec)
		return True

	def transition(self, spec:TokenSpec):
		if spec.is_call():
			self.state = self.call(spec.call)
			return
		self.state = spec.target
		if self.state == INITIAL: self.captures.clear()

	def call(self, call:Call) -> str:
		output = SubcommandOutput(self.output, call.resume)
		try: resume = self.parser.handlers.dispatch(call, self.criteria, self.captures, output)
		except Exception as ex:
			self.parser.log_error("Exception during %s in command: %s"%(call, self.cursor.text))
			raise ex from None # Hide the catch-and-rethrow from the traceback.
		# If any handler requires a render, then so does the whole command.
		if output.needs_tree_render: self.output.needs_tree_render = True
		self.captures.clear()
		state = output.next_state if resume is None else resume
		if state not in self.table:
			raise LanguageError("Handler %r asked to resume in undefined state %r."%(call.handler, state))
		return state

	def fail(self):
		alternatives = [spec.describe() for spec in self.table.tokens(self.state)]
		self.failure = Failure.at(self.cursor.text, self.cursor.position, alternatives)
		self.parser.log_error(self.failure.as_text())
		self.output.reply(self.failure.as_record())
		self.captures.clear()

	def result(self) -> CommandResult:
		if self.failure is None: return CommandResult(needs_tree_render=self.output.needs_tree_render)
		return CommandResult(True, self.failure.message, self.output.needs_tree_render)


class CommandParser:
	"""
	Binds a grammar table to an application driver (see module `binding`) once,
	then parses as many commands as you like.
	"""
	def __init__(self, table:GrammarTable, driver, *, strict=True):
		self.table = table
		on_error = BindErrorListener(table.source, strict=strict)
		self.handlers = HandlerRegistry(driver, table.each_handler(), on_error)

	def parse(self, text:str, sink:ReplySink=None, client=None) -> CommandResult:
		"""
		Parses and executes the given command. If a sink is passed, it receives a reply
		in the shape IPC clients expect: an array with one map per noteworthy outcome.
		"""
		self.log_debug("COMMAND: *%.4000s*"%text)
		output = CommandOutput(sink, client)
		if sink is not None: sink.array_open()
		session = ParserSession(self, text, output)
		try: session.run()
		finally:
			if sink is not None: sink.array_close()
		return session.result()

	@staticmethod
	def log_error(*parts):
		""" Simple place to override if you'd rather use a logging framework. """
		print(*parts, file=sys.stderr)

	@staticmethod
	def log_debug(*parts):
		if VERBOSE: print(*parts, file=sys.stderr)


def parse_command(table:GrammarTable, driver, text:str, sink:ReplySink=None, client=None) -> CommandResult:
	""" One-shot convenience. If you parse more than once, build a CommandParser and keep it. """
	return CommandParser(table, driver).parse(text, sink, client)
