import unittest
import os
import json
import tempfile

from commandeer.specfile import compile_string, compile_file, load_table, make_tables, BUNDLED_GRAMMAR
from commandeer.grammar import GrammarTable, TokenSpec, Call, Argument, VERSION
from commandeer.interfaces import DefinitionError, INITIAL, LITERAL, NUMBER, STRING, WORD, END

SAMPLE_GRAMMAR = r"""
# Comments and blank lines are fine anywhere.
state INITIAL:
  end ->
  'move' -> MOVE
  'say', 'tell'
      -> SAY

state MOVE:
  direction = 'left', 'right'
      -> call move($direction, &amount, 10, "ten \"px\"")
  amount = number ->

state SAY:
  message = string
      -> call say($message); SAID

state SAID:
  name = word, end
      -> call said($name)
"""

def gripe_about(document):
	try: compile_string(document)
	except DefinitionError as e: return e.args[0]
	raise AssertionError("No complaint about %r"%document)

class TestCompile(unittest.TestCase):
	def setUp(self) -> None:
		self.table = compile_string(SAMPLE_GRAMMAR, filename='sample.spec')

	def test_states_in_order(self):
		self.assertEqual([INITIAL, 'MOVE', 'SAY', 'SAID'], self.table.state_names())
		self.assertIn('SAID', self.table)
		self.assertNotIn('SAD', self.table)
		self.assertEqual(4, len(self.table))

	def test_one_spec_per_alternative(self):
		self.assertEqual([
			TokenSpec(END, target=INITIAL),
			TokenSpec(LITERAL, 'move', target='MOVE'),
			TokenSpec(LITERAL, 'say', target='SAY'),
			TokenSpec(LITERAL, 'tell', target='SAY'),
		], list(self.table.tokens(INITIAL)))
		self.assertEqual("<end>, 'move', 'say', 'tell'", self.table.expected(INITIAL))

	def test_captures_and_calls(self):
		left, right, amount = self.table.tokens('MOVE')
		self.assertEqual('direction', left.capture)
		self.assertEqual(left.call, right.call)
		self.assertEqual(Call('move', (Argument('$', 'direction'), Argument('&', 'amount'), Argument('', 10), Argument('', 'ten "px"')), INITIAL, 10), left.call)
		self.assertEqual("move($direction, &amount, 10, 'ten \"px\"')", str(left.call))
		self.assertEqual(TokenSpec(NUMBER, None, 'amount', 'MOVE'), amount)

	def test_resume_state(self):
		(spec,) = self.table.tokens('SAY')
		self.assertEqual((STRING, 'SAID'), (spec.kind, spec.successor()))
		self.assertEqual([WORD, END], [s.kind for s in self.table.tokens('SAID')])

	def test_each_handler(self):
		self.assertEqual({'move': {10}, 'say': {15}, 'said': {19}}, dict(self.table.each_handler()))

	def test_empty_literal(self):
		table = compile_string("state INITIAL:\n  x = '' -> call nothing($x)\n")
		(spec,) = table.tokens(INITIAL)
		self.assertEqual((LITERAL, ''), (spec.kind, spec.text))
		self.assertEqual("''", spec.describe())

	def test_bundled_grammar(self):
		table = compile_file(BUNDLED_GRAMMAR)
		self.assertEqual('commands.spec', table.source)
		self.assertEqual(END, table.tokens(INITIAL)[0].kind)
		for state in ['CRITERIA', 'MOVE', 'WORKSPACE', 'RESIZE', 'EXEC', 'FOCUS']:
			with self.subTest(state=state):
				self.assertIn(state, table)
		self.assertIn('move_con_to_workspace_name', dict(table.each_handler()))

class TestDefinitionErrors(unittest.TestCase):
	def test_complaints(self):
		for document, complaint in [
			("state MOVE:\n  end ->\n", "At line 1: There is no INITIAL state."),
			("  end ->\nstate INITIAL:\n  end ->\n", "At line 1: Rule appears before any state."),
			("state INITIAL:\n  end ->\nstate INITIAL:\n", "At line 3: Re-declared state 'INITIAL'."),
			("state INITIAL:\n  'a' -> NOWHERE\n", "At line 2: Undefined state 'NOWHERE'."),
			("state INITIAL:\n  'a' -> call x(); NOWHERE\n", "At line 2: Undefined state 'NOWHERE'."),
			("state INITIAL:\n\n  'a', 'b'\n", "At line 3: Rule has no arrow (->)."),
			("state INITIAL:\n  bogus -> INITIAL\n", "At line 2: Unknown kind of token 'bogus'."),
			("state INITIAL:\n  literal -> INITIAL\n", "At line 2: Unknown kind of token 'literal'."),
			("state INITIAL:\n  -> INITIAL\n", "At line 2: Rule has no tokens."),
			("state INITIAL:\n  'a' -> call x(1 2)\n", "At line 2: Malformed argument list '1 2'."),
			("state INITIAL:\n  'a' -> go to INITIAL\n", "At line 2: Cannot make sense of 'go to INITIAL' after the arrow."),
		]:
			with self.subTest(document=document):
				self.assertEqual(complaint, gripe_about(document))

	def test_table_validation(self):
		for states in [
			{'OTHER': []},
			{INITIAL: [TokenSpec('letter', target=INITIAL)]},
			{INITIAL: [TokenSpec(WORD, 'text', target=INITIAL)]},
			{INITIAL: [TokenSpec(LITERAL, target=INITIAL)]},
			{INITIAL: [TokenSpec(END)]},
			{INITIAL: [TokenSpec(END, target=INITIAL, call=Call('x'))]},
			{INITIAL: [TokenSpec(END, call=Call('x', resume='ELSEWHERE'))]},
		]:
			with self.subTest(states=states):
				self.assertRaises(DefinitionError, GrammarTable, states)

class TestCompactForm(unittest.TestCase):
	def test_through_json(self):
		table = compile_string(SAMPLE_GRAMMAR, filename='sample.spec')
		text = json.dumps(table.as_compact_form())
		again = GrammarTable.from_compact_form(json.loads(text))
		self.assertEqual('sample.spec', again.source)
		for state in table.state_names():
			with self.subTest(state=state):
				self.assertEqual(table.tokens(state), again.tokens(state))

	def test_version_check(self):
		tables = compile_string(SAMPLE_GRAMMAR).as_compact_form()
		self.assertEqual(VERSION, tables['version'])
		tables['version'] = [99]
		self.assertRaises(ValueError, GrammarTable.from_compact_form, tables)

	def test_make_tables(self):
		with tempfile.TemporaryDirectory() as folder:
			source = os.path.join(folder, 'sample.spec')
			with open(source, 'w') as fh: fh.write(SAMPLE_GRAMMAR)
			table = make_tables(source)
			target = os.path.join(folder, 'sample.automaton')
			self.assertTrue(os.path.exists(target))
			self.assertEqual(sorted([INITIAL, 'MOVE', 'SAY', 'SAID']), sorted(table.state_names()))
			self.assertEqual(table.tokens('MOVE'), load_table(target).tokens('MOVE'))
			self.assertEqual(table.tokens('MOVE'), load_table(source).tokens('MOVE'))


if __name__ == '__main__':
	unittest.main()
