"""
Code expressions are plain `ast` nodes, which guarantees that each one
is a complete expression and that the rendered text is valid Python.

A qualified name is a chain of attribute lookups rooted at a module name.
The outermost node remembers which module to import, and the File
collects those when it renders, so nobody has to keep an import list by hand.
"""
import ast
from pathlib import Path

def dotted(text:str) -> ast.expr:
	parts = text.split(".")
	node = ast.Name(parts[0], ast.Load())
	for p in parts[1:]:
		node = ast.Attribute(node, p, ast.Load())
	return node

def qual(path:str, name:str) -> ast.expr:
	""" The thing called `name` in module `path`; an empty path means builtins. """
	if not path:
		return dotted(name)
	node = dotted(path + "." + name)
	node.import_path = path
	return node

def nil() -> ast.expr: return ast.Constant(None)

def call(func:ast.expr, /, *args:ast.expr, **kwargs:ast.expr) -> ast.expr:
	keywords = [ast.keyword(k, v) for k, v in kwargs.items()]
	return ast.Call(func, list(args), keywords)

def imports_of(*nodes:ast.AST) -> list[str]:
	found = set()
	for root in nodes:
		for node in ast.walk(root):
			path = getattr(node, "import_path", None)
			if path: found.add(path)
	return sorted(found)

# The tokenizer gives up at 200 levels of brackets.
NESTING_LIMIT = 50

_BRACKETS = (ast.Call, ast.List, ast.Tuple, ast.Set, ast.Dict, ast.Subscript)

class File:
	"""
	Collects top-level statements and renders them as a module.

	Expressions nested too deep to parse get broken up: the deepest parts
	move into numbered assignments ahead of the statement that uses them.
	"""
	def __init__(self, header:str=""):
		self.header = header
		self.body:list[ast.stmt] = []
		self._temporaries = 0

	def declare(self, name:str, annotation:ast.expr, value:ast.expr):
		value = self._shallow(value)
		target = ast.Name(name, ast.Store())
		self.body.append(ast.AnnAssign(target, annotation, value, simple=1))

	def statement(self, expr:ast.expr):
		self.body.append(ast.Expr(self._shallow(expr)))

	def import_module(self, name:str):
		""" For modules imported only for their side effects. """
		self.body.append(ast.Import([ast.alias(name)]))

	def _shallow(self, expr:ast.expr) -> ast.expr:
		expr, _ = self._settle(expr)
		return expr

	def _settle(self, node:ast.AST) -> tuple[ast.AST, int]:
		""" Answers a replacement for `node` and how deep its brackets nest. """
		deepest = 0
		for field, value in ast.iter_fields(node):
			if isinstance(value, list):
				for i, item in enumerate(value):
					if isinstance(item, ast.AST):
						value[i], depth = self._settle(item)
						deepest = max(deepest, depth)
			elif isinstance(value, ast.AST):
				child, depth = self._settle(value)
				setattr(node, field, child)
				deepest = max(deepest, depth)
		depth = deepest + isinstance(node, _BRACKETS)
		if depth >= NESTING_LIMIT and isinstance(node, ast.expr):
			return self._temporary(node), 0
		return node, depth

	def _temporary(self, expr:ast.expr) -> ast.Name:
		name = "_%d" % self._temporaries
		self._temporaries += 1
		self.body.append(ast.Assign([ast.Name(name, ast.Store())], expr))
		return ast.Name(name, ast.Load())

	def render(self) -> str:
		lines = []
		if self.header:
			lines.extend([self.header, ""])
		names = imports_of(*self.body)
		lines.extend("import " + n for n in names)
		if names: lines.append("")
		if self.body:
			lines.append(ast.unparse(ast.Module(self.body, type_ignores=[])))
		return "\n".join(lines) + "\n"

	def save(self, path:Path):
		# Render first: a failure must not leave a truncated file behind.
		text = self.render()
		with open(path, "w", encoding="utf-8") as fh:
			fh.write(text)
