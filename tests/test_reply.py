import unittest
import argparse
import contextlib
import io
import json
import os
import tempfile

from commandeer.reply import JsonReplyWriter, EventRecorder, ReplySink, ARRAY_OPEN, MAP, ARRAY_CLOSE
from commandeer.specfile import BUNDLED_GRAMMAR
from commandeer.__main__ import main

class TestJsonReplyWriter(unittest.TestCase):
	def test_empty(self):
		writer = JsonReplyWriter()
		writer.array_open()
		writer.array_close()
		self.assertEqual('[]', writer.getvalue())

	def test_commas(self):
		writer = JsonReplyWriter()
		writer.array_open()
		writer.map({'success': True})
		writer.map({'success': False, 'error': 'no "such" thing'})
		writer.array_close()
		self.assertEqual('[{"success":true},{"success":false,"error":"no \\"such\\" thing"}]', writer.getvalue())

	def test_nested(self):
		writer = JsonReplyWriter()
		writer.array_open()
		writer.map({'a': 1})
		writer.array_open()
		writer.array_close()
		writer.array_open()
		writer.map({'b': 2})
		writer.array_close()
		writer.array_close()
		self.assertEqual([{'a': 1}, [], [{'b': 2}]], json.loads(writer.getvalue()))

	def test_streams_to_a_file(self):
		fh = io.StringIO()
		writer = JsonReplyWriter(fh)
		writer.array_open()
		self.assertEqual('[', fh.getvalue())

class TestEventRecorder(unittest.TestCase):
	def test_events(self):
		recorder = EventRecorder()
		record = {'success': True}
		recorder.array_open()
		recorder.map(record)
		record['success'] = False
		recorder.array_close()
		self.assertEqual([(ARRAY_OPEN,), (MAP, {'success': True}), (ARRAY_CLOSE,)], recorder.events)
		self.assertEqual([{'success': True}], recorder.records())

	def test_interface(self):
		self.assertRaises(NotImplementedError, ReplySink().map, {})

class TestCommandLine(unittest.TestCase):
	def run_main(self, command, grammar=BUNDLED_GRAMMAR):
		out, err = io.StringIO(), io.StringIO()
		with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
			main(argparse.Namespace(command=command, grammar=grammar, verbose=False))
		return out.getvalue(), err.getvalue()

	def test_good_command(self):
		out, err = self.run_main('[class="x"] move left; workspace 4')
		self.assertEqual('[]\n', out)
		self.assertEqual('', err)

	def test_bad_command(self):
		out, err = self.run_main('workspace 4; frobnicate')
		(record,) = json.loads(out)
		self.assertTrue(record['parse_error'])
		self.assertEqual(' '*13 + '^'*10, record['errorposition'])
		self.assertIn('Your command: workspace 4; frobnicate', err)

	def test_bad_grammar(self):
		with tempfile.TemporaryDirectory() as folder:
			path = os.path.join(folder, 'broken.spec')
			with open(path, 'w') as fh: fh.write("state INITIAL:\n  'a' -> NOWHERE\n")
			with self.assertRaises(SystemExit) as cm:
				self.run_main('a', path)
		self.assertEqual(1, cm.exception.code)

	def test_bad_table(self):
		with tempfile.TemporaryDirectory() as folder:
			path = os.path.join(folder, 'commands.automaton')
			with open(path, 'w') as fh: json.dump({'version': [9], 'states': {}}, fh)
			with self.assertRaises(SystemExit) as cm:
				self.run_main('a', path)
		self.assertEqual(1, cm.exception.code)

	def test_table_not_json(self):
		with tempfile.TemporaryDirectory() as folder:
			path = os.path.join(folder, 'commands.automaton')
			with open(path, 'w') as fh: fh.write('not json')
			with self.assertRaises(SystemExit) as cm:
				self.run_main('a', path)
		self.assertEqual(1, cm.exception.code)


if __name__ == '__main__':
	unittest.main()
