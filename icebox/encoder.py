"""
The value encoder: given a run-time value, produce an expression which
rebuilds an equal value when Python evaluates it.

This is a straightforward recursive descent over the closed family of
run-time values. There is no partial result: the first error anywhere
in the tree propagates straight out to the caller.
"""
import ast
from typing import Optional

from boozetools.support.foundation import Visitor

from .ontology import FreezeError, TypeDescriptor
from . import values, primitive
from .resolution import type_expression, qualified_name
from .code import nil, call

class UnsupportedKind(FreezeError):
	""" Arguments are the offending kind and the class that has it. """
	def __str__(self):
		kind, origin = self.args
		return "unsupported value kind %s (%s)" % (kind, getattr(origin, "__qualname__", origin))

def _construct(origin:type, builtin:type, display:ast.expr) -> ast.expr:
	""" Subclasses of the built-in containers get rebuilt by calling the subclass on a display. """
	if origin is builtin: return display
	return call(qualified_name(origin), display)

class Encoder(Visitor):

	def visit_ScalarValue(self, v:values.ScalarValue) -> ast.expr:
		kind, origin = v.typ
		lit = primitive.literal(kind, v.payload)
		if origin is primitive.canonical_type(kind):
			return lit
		return call(type_expression(v.typ), lit)

	def visit_ArrayValue(self, v:values.ArrayValue) -> ast.expr:
		elts = [self.visit(e) for e in v.elements]
		return _construct(v.typ.origin, tuple, ast.Tuple(elts, ast.Load()))

	def visit_SliceValue(self, v:values.SliceValue) -> ast.expr:
		if v.elements is None: return nil()
		elts = [self.visit(e) for e in v.elements]
		return _construct(v.typ.origin, list, ast.List(elts, ast.Load()))

	def visit_InterfaceValue(self, v:values.InterfaceValue) -> ast.expr:
		# The concrete value's own constructor already says what it is.
		if v.held is None: return nil()
		return self.visit(v.held)

	def visit_PointerValue(self, v:values.PointerValue) -> ast.expr:
		# Python names are references already, so taking the address is the identity.
		if v.target is None: return nil()
		return self.visit(v.target)

	def visit_MapValue(self, v:values.MapValue) -> ast.expr:
		if v.entries is None: return nil()
		keys, vals = [], []
		for key, val in v.entries:
			keys.append(self.visit(key))
			vals.append(self.visit(val))
		return _construct(v.typ.origin, dict, ast.Dict(keys, vals))

	def visit_SetValue(self, v:values.SetValue) -> ast.expr:
		if v.members is None: return nil()
		# Set iteration order varies from run to run, so sort by the rendered text.
		members = sorted([self.visit(m) for m in v.members], key=ast.unparse)
		origin = v.typ.origin
		if origin is set and members:
			return ast.Set(members)
		# There is no empty-set display, and no frozenset display at all.
		return call(qualified_name(origin), *([ast.Set(members)] if members else []))

	def visit_StructValue(self, v:values.StructValue) -> ast.expr:
		fields = {f.name: self.visit(f.value) for f in v.fields if f.visible}
		return call(type_expression(v.typ), **fields)

	def visit_EnumValue(self, v:values.EnumValue) -> ast.expr:
		if v.name is None:
			return call(type_expression(v.typ), self.visit(v.value))
		return ast.Attribute(type_expression(v.typ), v.name, ast.Load())

	def visit_UnsupportedValue(self, v:values.UnsupportedValue) -> ast.expr:
		raise UnsupportedKind(v.typ.kind, v.typ.origin)

_encoder = Encoder()

def encode_value(value:values.RuntimeValue) -> ast.expr:
	return _encoder.visit(value)

def encode(obj, typ:Optional[TypeDescriptor]=None) -> ast.expr:
	""" Expression to rebuild `obj`, which is declared as `typ` if that's given. """
	return encode_value(values.reflect(obj, typ))
