import sys, random
from pathlib import Path
from traceback import TracebackException
from typing import Any

class TooManyIssues(Exception):
	pass

def _outburst():
	particle = ["Oh, ", "Well, ", "Aw, ", "", ""]

	minced_oaths = [
		'Ack', 'ARGH', 'Blargh', 'Brrr', 'Confound it', 'Crud', 'Curses',
		'Drat', 'Fiddlesticks', 'Frostbite', 'Good Grief', 'Great Scott',
		'Heavens', 'Jeepers', 'Nuts', 'Rats', 'Snowballs', 'Woe is me',
	]

	resignations = [
		'I am undone.',
		'I cannot continue.',
		'Something refused to freeze.',
		'The ice is too thin here.',
		'I need to ask for help.',
	]

	return "%s%s! %s"%tuple(map(random.choice, (particle, minced_oaths, resignations)))

class Report:
	""" Collects issues and chatters about progress when asked to. """
	_issues : list["Pic"]

	def __init__(self, *, verbose:int=0, max_issues=3):
		self._verbose = verbose or 0   # Because None is incomparable.
		self._issues = []
		self._max_issues = max_issues

	def sick(self): return bool(self._issues)

	def issue(self, it:Any):
		self._issues.append(it)
		if len(self._issues) == self._max_issues:
			raise TooManyIssues(self)

	def info(self, *args):
		if self._verbose:
			print(*args, file=sys.stderr)

	def complain_to_console(self):
		""" Emit all the issues to the console. """
		_bemoan(self._issues)

	def assert_no_issues(self, message):
		""" Does what it says on the tin """
		if self._issues:
			self.complain_to_console()
			raise AssertionError(_outburst()+" "+message)

	# Methods the command line calls when the driver gives up:

	def bad_plugin(self, spec:str, why:str):
		intro = "I cannot use %r as a plug-in." % spec
		footer = [why, "Plug-ins are written as module:function, like mylang.parser:parse_dir"]
		self.issue(Pic(intro, footer))

	def cannot_freeze(self, directory:Path, ex:Exception):
		intro = "Freezing the tree in %s went pear-shaped." % directory
		footer = [" - %s: %s" % (type(ex).__name__, ex)]
		self.issue(Pic(intro, footer))

	def broken_unit(self, directory:Path, tbx:TracebackException):
		intro = "Something threw an exception while working on %s" % directory
		self.issue(Pic(intro, [''.join(tbx.format())]))

class Pic:
	def __init__(self, intro:str, footer=()):
		self.intro, self._footer = intro, list(footer)
	def as_text(self):
		return '\n'.join([self.intro, "", *self._footer])

def _bemoan(issues):
	""" Emit all the issues to the console. """
	if issues:
		print("*"*60, file=sys.stderr)
		print(_outburst(), file=sys.stderr)
	for i in issues:
		print("  -"*20, file=sys.stderr)
		print(i.as_text(), file=sys.stderr)
	sys.stderr.flush()
