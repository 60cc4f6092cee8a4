"""
The (small) stack where identified tokens are stored while parsing a single command,
like the `$workspace` in `workspace $workspace`.

The number of entries is small, so this is a single fixed array of slots searched linearly.
"""

from typing import Optional, Union

from .interfaces import CAPACITY, CaptureStackFull

Value = Union[str, int]

class CaptureStack:
	def __init__(self, capacity:int=CAPACITY):
		self.__slots = [None] * capacity

	def __push(self, identifier:str, value:Value):
		for c, slot in enumerate(self.__slots):
			if slot is None:
				self.__slots[c] = (identifier, value)
				return
		raise CaptureStackFull(identifier)

	def push_string(self, identifier:str, value:str):
		self.__push(identifier, value)

	def push_integer(self, identifier:str, value:int):
		self.__push(identifier, value)

	def __lookup(self, identifier:str, kind:type):
		for slot in self.__slots:
			if slot is None: break
			if slot[0] == identifier:
				return slot[1] if isinstance(slot[1], kind) else None
		return None

	def get_string(self, identifier:str) -> Optional[str]:
		return self.__lookup(identifier, str)

	def get_integer(self, identifier:str) -> int:
		"""
		Note that an absent identifier reads as zero, exactly like a captured zero.
		Handlers which care about the difference should capture a string instead.
		"""
		value = self.__lookup(identifier, int)
		return 0 if value is None else value

	def clear(self):
		for c in range(len(self.__slots)): self.__slots[c] = None

	def __len__(self): return sum(slot is not None for slot in self.__slots)

	def items(self) -> list:
		""" The (identifier, value) pairs currently held, in the order they were pushed. """
		return [slot for slot in self.__slots if slot is not None]
