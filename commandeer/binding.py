"""
Bind the command handlers named in a grammar to methods on an application "driver" object.

A grammar says things like `call move_direction($direction, &amount)`. The driver is an
arbitrary Python object; the handler called `move_direction` is its method `cmd_move_direction`,
or failing that its `default_call` method with the handler name as first argument.
Either way, the method receives the current match criteria, the subcommand output,
and then the actual parameters named in the grammar, in order.

Because this checks every handler the grammar mentions when the parser is built, the
lookup can never fail half-way through somebody's command.

The driver may also supply `init_criteria(output)`, which must return a fresh criteria
object; the parser calls it at the beginning of every command.
"""

import functools, warnings
from typing import Iterable

from .interfaces import LanguageError
from .grammar import Call, Argument, STRING_ARGUMENT, INTEGER_ARGUMENT, CONSTANT_ARGUMENT
from .capture import CaptureStack

HANDLER_PREFIX = 'cmd_'
DEFAULT_HANDLER = 'default_call'

class MissingHandlerError(TypeError):
	pass

class BindErrorListener:
	""" Factors out the details concerning how we report binding problems. """
	def __init__(self, source, strict):
		self._source = source
		self._strict = strict

	def _gripe(self, line_number:int, message:str):
		def blame(*args): raise MissingHandlerError(full_message)
		full_message = "For %s line %s: %s"%(self._source, line_number, message)
		if self._strict: raise MissingHandlerError(full_message)
		else:
			warnings.warn(full_message)
			return blame

	def missing_methods(self, line_number:int, chain:Iterable):
		phrase = ' nor '.join(map(repr, chain))
		return self._gripe(line_number, "driver has neither method %s." % phrase)


def evaluate(argument:Argument, captures:CaptureStack):
	if argument.sigil == STRING_ARGUMENT: return captures.get_string(argument.value)
	if argument.sigil == INTEGER_ARGUMENT: return captures.get_integer(argument.value)
	if argument.sigil == CONSTANT_ARGUMENT: return argument.value
	raise LanguageError("Unknown argument sigil %r"%argument.sigil)


class HandlerRegistry:
	""" Maps handler names to bound driver methods. This is the only way the parser reaches a handler. """

	def __init__(self, driver, each_handler:Iterable[tuple[str, set[int]]], on_error:BindErrorListener):
		def bind(name, mentions:set[int]):
			specific = HANDLER_PREFIX + name
			try: return getattr(driver, specific)
			except AttributeError:
				try: method = getattr(driver, DEFAULT_HANDLER)
				except AttributeError: return on_error.missing_methods(min(mentions), (specific, DEFAULT_HANDLER))
				else: return functools.partial(method, name)
		self.__handlers = {name: bind(name, mentions) for name, mentions in each_handler}
		self.__init_criteria = getattr(driver, 'init_criteria', None)

	def init_criteria(self, output):
		""" A fresh criteria object for a new command, or None if the driver does not deal in criteria. """
		if self.__init_criteria is None: return None
		return self.__init_criteria(output)

	def dispatch(self, call:Call, criteria, captures:CaptureStack, output):
		"""
		Invoke the handler for `call`. Returns whatever the handler returns, which should
		be either the name of the state to resume in, or None to go with `output.next_state`.
		"""
		method = self.__handlers[call.handler]
		return method(criteria, output, *[evaluate(a, captures) for a in call.arguments])

	def __contains__(self, name): return name in self.__handlers
