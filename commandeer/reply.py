"""
Reply serialization.

The parser (and the command handlers it calls) describe their outcome as a stream of
events: one array-open, then a map per outcome worth mentioning, then one array-close.
What becomes of those events is up to the sink. The JSON writer here produces the reply
format that IPC clients expect; the recorder just keeps the events, which is handy in tests.
"""

import io, json

ARRAY_OPEN = 'array_open'
MAP = 'map'
ARRAY_CLOSE = 'array_close'

class ReplySink:
	""" Implement this interface to receive the reply events. """
	def array_open(self): raise NotImplementedError(type(self))
	def map(self, record:dict): raise NotImplementedError(type(self))
	def array_close(self): raise NotImplementedError(type(self))

class JsonReplyWriter(ReplySink):
	"""
	Streams JSON text to a file-like object as events arrive.
	Without a file-like object, it buffers the text: see `getvalue()`.
	"""
	def __init__(self, fh=None):
		self.__fh = io.StringIO() if fh is None else fh
		self.__pending_comma = []

	def __write(self, text): self.__fh.write(text)

	def __separate(self):
		if self.__pending_comma:
			if self.__pending_comma[-1]: self.__write(',')
			self.__pending_comma[-1] = True

	def array_open(self):
		self.__separate()
		self.__write('[')
		self.__pending_comma.append(False)

	def map(self, record:dict):
		self.__separate()
		self.__write(json.dumps(record, separators=(',', ':')))

	def array_close(self):
		self.__pending_comma.pop()
		self.__write(']')

	def getvalue(self) -> str:
		return self.__fh.getvalue()

class EventRecorder(ReplySink):
	def __init__(self): self.events = []
	def array_open(self): self.events.append((ARRAY_OPEN,))
	def map(self, record:dict): self.events.append((MAP, dict(record)))
	def array_close(self): self.events.append((ARRAY_CLOSE,))

	def records(self) -> list[dict]:
		return [e[1] for e in self.events if e[0] == MAP]
