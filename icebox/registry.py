"""
Where frozen trees go when their generated modules get imported.

Each generated module calls `register(__name__, tree)` as it loads.
Whatever wants a tree back asks for it by that same module name.
"""
from typing import Any

from .ontology import FreezeError

class AlreadyRegistered(FreezeError):
	pass

_trees:dict[str, Any] = {}

def register(name:str, tree:Any):
	if name in _trees:
		raise AlreadyRegistered(name)
	_trees[name] = tree

def lookup(name:str) -> Any:
	""" Raises KeyError for a name nobody registered. """
	return _trees[name]

def registered() -> list[str]:
	return sorted(_trees)

def clear():
	_trees.clear()
