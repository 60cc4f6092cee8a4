"""
Parse one command against a grammar, without carrying it out, and print the reply
that an IPC client would receive. This is handy for golden-output testing of a grammar
together with the parser: a command that parses fine yields an empty array, and one
that does not yields an array holding the failure record.

With --verbose, the handler calls the command would have made are listed on STDERR.
"""

import sys, argparse

from commandeer import parser as command_parser
from commandeer.interfaces import DefinitionError
from commandeer.reply import JsonReplyWriter
from commandeer.specfile import load_table, BUNDLED_GRAMMAR

class TracingDriver:
	""" Stands in for an application: every handler is accepted, and none does anything. """
	def __init__(self, verbose=False):
		self.verbose = verbose

	def default_call(self, name, criteria, output, *args):
		if self.verbose: print("cmd_%s(%s)"%(name, ", ".join(map(repr, args))), file=sys.stderr)

def parse_arguments():
	parser = argparse.ArgumentParser(prog='py -m commandeer', description=__doc__,)
	parser.add_argument('command', help='the command to parse, e.g. "move left; workspace 2"')
	parser.add_argument('-g', '--grammar', default=BUNDLED_GRAMMAR, help='grammar definition (.spec) or compiled table (JSON); defaults to the bundled grammar')
	parser.add_argument('-v', '--verbose', action='store_true', help="Squawk: echo the command and the handler calls on STDERR.")
	return parser.parse_args()

def main(args):
	if args.verbose: command_parser.VERBOSE = True
	try: table = load_table(args.grammar)
	except (DefinitionError, ValueError) as e:
		print(e.args[0], file=sys.stderr)
		sys.exit(1)
	parser = command_parser.CommandParser(table, TracingDriver(args.verbose))
	parser.parse(args.command, JsonReplyWriter(sys.stdout))
	print()

if __name__ == '__main__': main(parse_arguments())
