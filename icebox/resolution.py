"""
Resolve type descriptors into type expressions.

Containers resolve structurally, recursing into their parts; everything
else resolves to the qualified name of its Python class. Arrays and slices
come out the same way: their length belongs to the literal, not the type.
"""
import ast

from boozetools.support.foundation import Visitor

from .ontology import (
	FreezeError, TypeDescriptor, namespace_path, local_name,
	ScalarType, ArrayType, SliceType, MapType, SetType,
	PointerType, InterfaceType, StructType, EnumType, UnsupportedType,
)
from .code import qual

class UnnamedType(FreezeError):
	""" A class defined inside some function cannot be named from outside. """

def qualified_name(origin) -> ast.expr:
	name = local_name(origin)
	if "<locals>" in name:
		raise UnnamedType(name)
	return qual(namespace_path(origin), name)

def _generic(head:ast.expr, *params:ast.expr) -> ast.expr:
	index = params[0] if len(params) == 1 else ast.Tuple(list(params), ast.Load())
	return ast.Subscript(head, index, ast.Load())

class TypeResolver(Visitor):
	""" Stateless. One shared instance serves everybody. """

	def visit_MapType(self, typ:MapType) -> ast.expr:
		return _generic(qual("typing", "Mapping"), self.visit(typ.key), self.visit(typ.elem))

	def visit_PointerType(self, typ:PointerType) -> ast.expr:
		return _generic(qual("typing", "Optional"), self.visit(typ.elem))

	def visit_ArrayType(self, typ:ArrayType) -> ast.expr:
		return _generic(qual("typing", "Sequence"), self.visit(typ.elem))

	def visit_SliceType(self, typ:SliceType) -> ast.expr:
		return _generic(qual("typing", "Sequence"), self.visit(typ.elem))

	def visit_SetType(self, typ:SetType) -> ast.expr:
		return _generic(qual("typing", "AbstractSet"), self.visit(typ.elem))

	def visit_ScalarType(self, typ:ScalarType) -> ast.expr: return qualified_name(typ.origin)
	def visit_StructType(self, typ:StructType) -> ast.expr: return qualified_name(typ.origin)
	def visit_InterfaceType(self, typ:InterfaceType) -> ast.expr: return qualified_name(typ.origin)
	def visit_EnumType(self, typ:EnumType) -> ast.expr: return qualified_name(typ.origin)
	def visit_UnsupportedType(self, typ:UnsupportedType) -> ast.expr: return qualified_name(typ.origin)

_resolver = TypeResolver()

def type_expression(typ:TypeDescriptor) -> ast.expr:
	return _resolver.visit(typ)
