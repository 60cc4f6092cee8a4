"""========================================================================================================
This is a toy window manager to demonstrate binding the bundled command grammar to a proper
application. It does not draw anything: windows are just records, and a "render" is just a flag.
But the commands behave plausibly, which makes it good for exercising the parser.

Try it interactively:

	py example/window_manager.py

then type things like `[class="xterm"] move to workspace 2; workspace 2` or `focus left`.
A blank line (or end of input) quits.

"""
import itertools, re, sys

from commandeer.parser import CommandParser
from commandeer.reply import JsonReplyWriter
from commandeer.specfile import compile_file, BUNDLED_GRAMMAR

class Window:
	_ids = itertools.count(1)

	def __init__(self, klass, title='', *, instance=None, role=None, workspace='1'):
		self.id = next(Window._ids)
		self.klass, self.title, self.workspace = klass, title, workspace
		self.instance = klass.lower() if instance is None else instance
		self.role = role
		self.marks = []
		self.floating = False
		self.urgent = False
		self.fullscreen = None
		self.x = self.y = 0
		self.width, self.height = 640, 480

	def __repr__(self): return "<Window %d %s %r on %s>"%(self.id, self.klass, self.title, self.workspace)

class Criteria:
	"""
	Accumulates conditions like class="Firefox" until the closing bracket.
	Window-ish properties are regular expressions; ids and marks match exactly.
	"""
	PATTERNS = {'class': 'klass', 'instance': 'instance', 'title': 'title', 'window_role': 'role', 'workspace': 'workspace'}

	def __init__(self): self.reset()

	def reset(self):
		self.conditions = []
		self.matched = None
		self.broken = False

	def add(self, ctype, value=None):
		""" Raises re.error for a pattern which does not compile. """
		if ctype in self.PATTERNS: value = re.compile(value)
		self.conditions.append((ctype, value))

	def matches(self, window:Window) -> bool:
		return all(self.__test(window, ctype, value) for ctype, value in self.conditions)

	def __test(self, window, ctype, value):
		if ctype in self.PATTERNS:
			subject = getattr(window, self.PATTERNS[ctype])
			return subject is not None and value.search(str(subject)) is not None
		if ctype == 'con_id' or ctype == 'id': return value.isdigit() and int(value) == window.id
		if ctype == 'con_mark': return value in window.marks
		if ctype == 'tiling': return not window.floating
		if ctype == 'floating': return window.floating
		if ctype == 'urgent': return window.urgent
		return False

class WindowManager:
	"""
	The driver. Every `call foo(...)` in the grammar lands on a method `cmd_foo` here.
	"""
	def __init__(self, grammar_path=BUNDLED_GRAMMAR):
		self.windows = []
		self.current_workspace, self.previous_workspace = '1', None
		self.focused = None
		self.mode = 'default'
		self.layout = {}
		self.executed = []
		self.history = []
		self.running = True
		self.parser = CommandParser(compile_file(grammar_path), self)

	def open(self, klass, title='', **kwargs) -> Window:
		window = Window(klass, title, workspace=self.current_workspace, **kwargs)
		self.windows.append(window)
		self.focused = window
		return window

	def command(self, text, sink=None):
		return self.parser.parse(text, sink)

	def visible(self): return [w for w in self.windows if w.workspace == self.current_workspace]

	def targets(self, criteria):
		""" The windows a command applies to: those matched by criteria, or else the focused one. """
		if criteria is None or criteria.matched is None:
			return [] if self.focused is None else [self.focused]
		return list(criteria.matched)

	def note(self, output, handler, *args):
		self.history.append((handler,) + args)
		output.reply_success()

	# Criteria
	def init_criteria(self, output): return Criteria()
	def cmd_criteria_init(self, criteria, output): criteria.reset()
	def cmd_criteria_add(self, criteria, output, ctype, cvalue=None):
		try: criteria.add(ctype, cvalue)
		except re.error as e:
			criteria.broken = True
			output.reply_success(False, "Invalid regular expression %r: %s"%(cvalue, e))
	def cmd_criteria_match_windows(self, criteria, output):
		# A broken criterion matches no window, not even the focused one.
		criteria.matched = [] if criteria.broken else [w for w in self.windows if criteria.matches(w)]

	# Workspaces
	def switch_to(self, name, output):
		if name != self.current_workspace:
			self.previous_workspace, self.current_workspace = self.current_workspace, name
			visible = self.visible()
			self.focused = visible[-1] if visible else None
		output.needs_tree_render = True

	def workspace_names(self):
		return sorted({w.workspace for w in self.windows} | {self.current_workspace}, key=lambda n: (not n.isdigit(), int(n) if n.isdigit() else 0, n))

	def cmd_workspace(self, criteria, output, direction):
		names = self.workspace_names()
		step = -1 if direction.startswith('prev') else 1
		self.switch_to(names[(names.index(self.current_workspace) + step) % len(names)], output)
		self.note(output, 'workspace', direction)

	def cmd_workspace_back_and_forth(self, criteria, output):
		if self.previous_workspace is not None: self.switch_to(self.previous_workspace, output)
		self.note(output, 'workspace_back_and_forth')

	def cmd_workspace_name(self, criteria, output, name, no_auto_back_and_forth=None):
		self.switch_to(name, output)
		self.note(output, 'workspace_name', name)

	def cmd_workspace_number(self, criteria, output, number, no_auto_back_and_forth=None):
		if not number.split(':')[0].isdigit():
			output.reply_success(False, "Could not parse number \"%s\""%number)
			return
		self.cmd_workspace_name(criteria, output, number, no_auto_back_and_forth)

	def cmd_rename_workspace(self, criteria, output, old_name, new_name):
		old_name = self.current_workspace if old_name is None else old_name
		for w in self.windows:
			if w.workspace == old_name: w.workspace = new_name
		if self.current_workspace == old_name: self.current_workspace = new_name
		self.note(output, 'rename_workspace', old_name, new_name)

	# Moving things around
	def cmd_move_direction(self, criteria, output, direction, amount):
		dx, dy = {'left': (-1, 0), 'right': (1, 0), 'up': (0, -1), 'down': (0, 1)}[direction]
		for w in self.targets(criteria):
			w.x += dx * amount
			w.y += dy * amount
		output.needs_tree_render = True
		self.note(output, 'move_direction', direction, amount)

	def cmd_move_con_to_workspace_name(self, criteria, output, name):
		for w in self.targets(criteria): w.workspace = name
		output.needs_tree_render = True
		self.note(output, 'move_con_to_workspace_name', name)

	def cmd_move_con_to_workspace_number(self, criteria, output, number):
		self.cmd_move_con_to_workspace_name(criteria, output, number)

	def cmd_move_con_to_workspace(self, criteria, output, which):
		names = self.workspace_names()
		if which == 'current': name = self.current_workspace
		else: name = names[(names.index(self.current_workspace) + (-1 if which.startswith('prev') else 1)) % len(names)]
		self.cmd_move_con_to_workspace_name(criteria, output, name)

	def cmd_move_con_to_workspace_back_and_forth(self, criteria, output):
		if self.previous_workspace is not None:
			self.cmd_move_con_to_workspace_name(criteria, output, self.previous_workspace)

	def cmd_move_con_to_mark(self, criteria, output, mark):
		hosts = [w for w in self.windows if mark in w.marks]
		if not hosts:
			output.reply_success(False, "No window with mark %r"%mark)
			return
		self.cmd_move_con_to_workspace_name(criteria, output, hosts[0].workspace)

	def cmd_resize(self, criteria, output, way, direction, px, ppt):
		sign = 1 if way == 'grow' else -1
		for w in self.targets(criteria):
			if direction in ('left', 'right', 'width'): w.width += sign * px
			else: w.height += sign * px
		output.needs_tree_render = True
		self.note(output, 'resize', way, direction, px, ppt)

	def cmd_resize_set(self, criteria, output, width, mode_width, height, mode_height):
		for w in self.targets(criteria):
			if width: w.width = width
			if height: w.height = height
		output.needs_tree_render = True
		self.note(output, 'resize_set', width, height)

	# Focus
	def cmd_focus(self, criteria, output):
		targets = self.targets(criteria)
		if targets:
			self.focused = targets[-1]
			self.switch_to(self.focused.workspace, output)
		self.note(output, 'focus')

	def cmd_focus_direction(self, criteria, output, direction):
		visible = self.visible()
		if self.focused in visible:
			step = -1 if direction in ('left', 'up') else 1
			self.focused = visible[(visible.index(self.focused) + step) % len(visible)]
			output.needs_tree_render = True
		self.note(output, 'focus_direction', direction)

	def cmd_focus_window_mode(self, criteria, output, mode): self.note(output, 'focus_window_mode', mode)
	def cmd_focus_level(self, criteria, output, level): self.note(output, 'focus_level', level)

	# Window state
	def cmd_kill(self, criteria, output, kill_mode):
		for w in self.targets(criteria):
			if w not in self.windows: continue
			self.windows.remove(w)
			if self.focused is w: self.focused = None
		output.needs_tree_render = True
		self.note(output, 'kill', kill_mode)

	def cmd_fullscreen(self, criteria, output, action, mode):
		for w in self.targets(criteria):
			if action == 'toggle': w.fullscreen = None if w.fullscreen else mode
			else: w.fullscreen = mode if action == 'enable' else None
		output.needs_tree_render = True
		self.note(output, 'fullscreen', action, mode)

	def cmd_floating(self, criteria, output, floating):
		for w in self.targets(criteria):
			w.floating = (not w.floating) if floating == 'toggle' else floating == 'enable'
		output.needs_tree_render = True
		self.note(output, 'floating', floating)

	def cmd_split(self, criteria, output, direction):
		self.layout[self.current_workspace] = 'splitv' if direction[0] == 'v' else 'splith'
		output.needs_tree_render = True
		self.note(output, 'split', direction)

	def cmd_layout(self, criteria, output, layout_mode):
		self.layout[self.current_workspace] = 'stacked' if layout_mode == 'stacking' else layout_mode
		output.needs_tree_render = True
		self.note(output, 'layout', layout_mode)

	def cmd_layout_toggle(self, criteria, output, toggle_mode):
		cycle = ['stacked', 'tabbed', 'splith', 'splitv'] if toggle_mode == 'all' else ['splith', 'splitv']
		current = self.layout.get(self.current_workspace, cycle[-1])
		self.layout[self.current_workspace] = cycle[(cycle.index(current) + 1) % len(cycle)] if current in cycle else cycle[0]
		output.needs_tree_render = True
		self.note(output, 'layout_toggle', toggle_mode)

	def cmd_mark(self, criteria, output, mark, mode=None, toggle=None):
		targets = self.targets(criteria)
		if len(targets) != 1:
			output.reply_success(False, "A mark must be unique, so it can only be applied to one window.")
			return
		for w in self.windows:
			if w is not targets[0] and mark in w.marks: w.marks.remove(mark)
		window = targets[0]
		if toggle is not None and mark in window.marks: window.marks.remove(mark)
		elif mode == '--add': window.marks.append(mark)
		else: window.marks[:] = [mark]
		output.needs_tree_render = True
		self.note(output, 'mark', mark, mode, toggle)

	def cmd_unmark(self, criteria, output, mark=None):
		for w in self.windows:
			if mark is None: w.marks.clear()
			elif mark in w.marks: w.marks.remove(mark)
		output.needs_tree_render = True
		self.note(output, 'unmark', mark)

	# Everything else
	def cmd_exec(self, criteria, output, nosn, command):
		self.executed.append(command)
		self.note(output, 'exec', nosn is not None, command)

	def cmd_mode(self, criteria, output, mode):
		self.mode = mode
		self.note(output, 'mode', mode)

	def cmd_nop(self, criteria, output, comment=None): self.note(output, 'nop', comment)
	def cmd_reload(self, criteria, output): self.note(output, 'reload')

	def cmd_exit(self, criteria, output):
		self.running = False
		self.note(output, 'exit')


def main():
	wm = WindowManager()
	wm.open('XTerm', 'shell')
	wm.open('Firefox', 'The Web')
	print(__doc__)
	while wm.running:
		try: text = input(wm.current_workspace + '> ')
		except EOFError: break
		if not text.strip(): break
		reply = JsonReplyWriter()
		result = wm.command(text, reply)
		print(reply.getvalue())
		if result.needs_tree_render: print(wm.visible(), file=sys.stderr)

if __name__ == '__main__': main()
