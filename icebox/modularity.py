"""
Here find the directory walk -- such as it is.

Each directory gets handed to the parser plug-in, which answers with a
dictionary from package name to parsed tree. A directory with one package
gets a generated module next to its sources; that module rebuilds the tree
and registers it when imported. Once the walk is done, one more module at
the root imports all the generated ones.
"""
import ast
import dataclasses
import sys
from contextlib import contextmanager
from importlib import import_module
from pathlib import Path
from typing import Any, Callable, Optional

from .diagnostics import Report
from .ontology import FreezeError
from .encoder import encode
from .resolution import type_expression
from .schema import type_of
from .code import File, qual, call

HEADER = "# DO NOT EDIT: This file is autogenerated via the generate command."
TARGET = "pkg_ast"
DEFAULT_REGISTER = "icebox.registry:register"

# Walking a tree takes a handful of frames per level of nesting.
RECURSION_LIMIT = 25000

Parser = Callable[[Path], Optional[dict[str, Any]]]

class MultiplePackages(FreezeError):
	def __init__(self, directory:Path, names):
		super().__init__(directory, sorted(names))
	def __str__(self):
		return "found multiple packages in the same directory: %s packages %s" % self.args

class BadPluginSpec(FreezeError):
	""" Arguments are the spec as given and the reason it won't do. """

def split_plugin(spec:str) -> tuple[str, str]:
	module_name, _, attr = spec.partition(":")
	if not (module_name and attr):
		raise BadPluginSpec(spec, "Expected module:function but got no colon, or nothing on one side of it.")
	return module_name, attr

def load_plugin(spec:str) -> Callable:
	module_name, attr = split_plugin(spec)
	try: it = import_module(module_name)
	except ImportError as ex:
		raise BadPluginSpec(spec, "Importing %s failed: %s" % (module_name, ex)) from ex
	for part in attr.split("."):
		try: it = getattr(it, part)
		except AttributeError:
			raise BadPluginSpec(spec, "There is no %r in %s." % (attr, module_name)) from None
	if not callable(it):
		raise BadPluginSpec(spec, "%r is not callable." % attr)
	return it

def _skip(name:str) -> bool:
	return name.startswith(".") or name == "__pycache__"

def walk_dirs(path:Path, fn:Callable[[Path], None]):
	""" Visit `path` and then its subdirectories depth-first, in sorted order. """
	children = sorted(p for p in path.iterdir() if p.is_dir() and not _skip(p.name))
	fn(path)
	for child in children:
		walk_dirs(child, fn)

def with_path(tree, path:str):
	""" A tree that has a `path` field gets a copy with that field set. Others go as-is. """
	if dataclasses.is_dataclass(tree) and not isinstance(tree, type):
		if any(f.name == "path" and f.init for f in dataclasses.fields(tree)):
			return dataclasses.replace(tree, path=path)
	elif isinstance(tree, tuple) and "path" in getattr(tree, "_fields", ()):
		return tree._replace(path=path)
	return tree

@contextmanager
def _deep_recursion():
	old = sys.getrecursionlimit()
	sys.setrecursionlimit(max(old, RECURSION_LIMIT))
	try: yield
	finally: sys.setrecursionlimit(old)

def freeze(tree, register:str=DEFAULT_REGISTER) -> File:
	""" A module which rebuilds `tree` and hands it to the registration function when imported. """
	module_name, attr = split_plugin(register)
	unit = File(HEADER)
	with _deep_recursion():
		unit.declare(TARGET, type_expression(type_of(type(tree))), encode(tree))
	unit.statement(call(qual(module_name, attr), ast.Name("__name__", ast.Load()), ast.Name(TARGET, ast.Load())))
	return unit

class Generator:
	"""
	One run of the generate command over a directory tree.
	Any exception aborts the run, but never halfway through writing a file.
	"""
	generated: list[str]  # Dotted names of the generated modules, in walk order.
	current: Path  # The directory being worked on, or the root before and after the walk.

	def __init__(
			self,
			report: Report,
			parser: Parser,
			package: str,
			root_dir: Path,
			*,
			import_file: str = "builtin_gen.py",
			unit_file: str = "frozen_gen.py",
			register: str = DEFAULT_REGISTER,
	):
		split_plugin(register)
		self.report = report
		self.parser = parser
		self.package = package
		self.root_dir = Path(root_dir)
		self.import_file = import_file
		self.unit_file = unit_file
		self.register = register
		self.generated = []
		self.current = self.root_dir

	def run(self) -> list[str]:
		self.generated = []
		walk_dirs(self.root_dir, self.freeze_directory)
		self.write_import_file()
		return self.generated

	def module_name(self, relative:Path) -> str:
		parts = [*self.package.split("."), *relative.parts, Path(self.unit_file).stem]
		return ".".join(p for p in parts if p)

	def freeze_directory(self, directory:Path):
		self.current = directory
		packages = self.parser(directory)
		if not packages:
			return
		if len(packages) > 1:
			raise MultiplePackages(directory, packages.keys())
		[(name, tree)] = packages.items()
		relative = directory.relative_to(self.root_dir)
		tree = with_path(tree, relative.as_posix())
		self.report.info("Freezing", name, "from", directory)
		unit = freeze(tree, self.register)
		unit.save(directory / self.unit_file)
		self.generated.append(self.module_name(relative))

	def write_import_file(self):
		self.current = self.root_dir
		index = File(HEADER)
		for name in self.generated:
			index.import_module(name)
		path = self.root_dir / self.import_file
		self.report.info("Writing", path)
		index.save(path)
