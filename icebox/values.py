"""
This module defines the run-time values the encoder operates in terms of.

It's a closed family: one NamedTuple per kind of descriptor, each carrying
its descriptor and its payload. The `Reflector` builds such a tree from an
ordinary Python object, which is the only place where anything looks at
Python objects directly. Past that point, everything is a matter of
walking these values.
"""
from contextlib import contextmanager
from typing import NamedTuple, Optional, Any, Union

from boozetools.support.foundation import Visitor

from .ontology import (
	FreezeError, TypeDescriptor, FieldSpec,
	ScalarType, ArrayType, SliceType, MapType, SetType,
	PointerType, InterfaceType, StructType, EnumType, UnsupportedType, ANY,
)
from .schema import type_of, fields_of

class ScalarValue(NamedTuple):
	typ: ScalarType
	payload: Any

class ArrayValue(NamedTuple):
	typ: ArrayType
	elements: tuple

class SliceValue(NamedTuple):
	typ: SliceType
	elements: Optional[tuple]  # None means absent, which is not the same as empty.

class MapValue(NamedTuple):
	typ: MapType
	entries: Optional[tuple]  # (key, value) pairs in the order the source dict yields them.

class SetValue(NamedTuple):
	typ: SetType
	members: Optional[tuple]

class PointerValue(NamedTuple):
	typ: PointerType
	target: Optional["RuntimeValue"]

class InterfaceValue(NamedTuple):
	typ: InterfaceType
	held: Optional["RuntimeValue"]

class FieldValue(NamedTuple):
	name: str
	visible: bool
	value: Optional["RuntimeValue"]  # Never filled in for invisible fields.

class StructValue(NamedTuple):
	typ: StructType
	fields: tuple[FieldValue, ...]

class EnumValue(NamedTuple):
	typ: EnumType
	name: Optional[str]  # None for a combination of flags, which has no member name of its own.
	value: Optional["RuntimeValue"]  # Only when there is no name.

class UnsupportedValue(NamedTuple):
	typ: UnsupportedType
	payload: Any

RuntimeValue = Union[
	ScalarValue, ArrayValue, SliceValue, MapValue, SetValue,
	PointerValue, InterfaceValue, StructValue, EnumValue, UnsupportedValue,
]

class CyclicValue(FreezeError):
	""" The argument names the class of the object that was reached again while still under way. """

class Reflector(Visitor):
	"""
	Walk an object along its declared descriptor.

	Python does not enforce annotations, so whenever an object fails to
	match the declared descriptor exactly, the slot counts as polymorphic
	and the object's own class decides. That way the result always
	describes the object actually present.

	Objects on the path from the root are remembered by identity,
	so a cycle raises CyclicValue rather than recursing without end.
	Shared but acyclic references are fine: they just get visited again.
	"""
	def __init__(self):
		self._active = set()

	def reflect(self, obj, typ:Optional[TypeDescriptor]=None) -> RuntimeValue:
		if typ is None: typ = type_of(type(obj))
		return self.visit(typ, obj)

	@contextmanager
	def _entering(self, obj):
		key = id(obj)
		if key in self._active:
			raise CyclicValue(type(obj).__qualname__)
		self._active.add(key)
		try: yield
		finally: self._active.discard(key)

	def _dynamic(self, obj) -> RuntimeValue:
		return self.visit_InterfaceType(ANY, obj)

	def visit_ScalarType(self, typ:ScalarType, obj):
		if type(obj) is not typ.origin: return self._dynamic(obj)
		return ScalarValue(typ, obj)

	def visit_ArrayType(self, typ:ArrayType, obj):
		if type(obj) is not typ.origin: return self._dynamic(obj)
		with self._entering(obj):
			return ArrayValue(typ, tuple([self.visit(typ.elem, e) for e in obj]))

	def visit_SliceType(self, typ:SliceType, obj):
		if obj is None: return SliceValue(typ, None)
		if type(obj) is not typ.origin: return self._dynamic(obj)
		with self._entering(obj):
			return SliceValue(typ, tuple([self.visit(typ.elem, e) for e in obj]))

	def visit_MapType(self, typ:MapType, obj):
		if obj is None: return MapValue(typ, None)
		if type(obj) is not typ.origin: return self._dynamic(obj)
		with self._entering(obj):
			entries = tuple([(self.visit(typ.key, k), self.visit(typ.elem, v)) for k, v in obj.items()])
			return MapValue(typ, entries)

	def visit_SetType(self, typ:SetType, obj):
		if obj is None: return SetValue(typ, None)
		if type(obj) is not typ.origin: return self._dynamic(obj)
		return SetValue(typ, tuple([self.visit(typ.elem, m) for m in obj]))

	def visit_PointerType(self, typ:PointerType, obj):
		if obj is None: return PointerValue(typ, None)
		return PointerValue(typ, self.visit(typ.elem, obj))

	def visit_InterfaceType(self, typ:InterfaceType, obj):
		if obj is None: return InterfaceValue(typ, None)
		return InterfaceValue(typ, self.visit(type_of(type(obj)), obj))

	def visit_StructType(self, typ:StructType, obj):
		if type(obj) is not typ.origin: return self._dynamic(obj)
		with self._entering(obj):
			return StructValue(typ, tuple([self._field(spec, obj) for spec in fields_of(typ.origin)]))

	def visit_EnumType(self, typ:EnumType, obj):
		if type(obj) is not typ.origin: return self._dynamic(obj)
		if typ.origin.__members__.get(obj.name) is obj:
			return EnumValue(typ, obj.name, None)
		return EnumValue(typ, None, self._dynamic(obj.value))

	def _field(self, spec:FieldSpec, obj) -> FieldValue:
		if not spec.visible:
			return FieldValue(spec.name, False, None)
		try: attr = getattr(obj, spec.name)
		except AttributeError:
			# Unreadable means not participating.
			return FieldValue(spec.name, False, None)
		return FieldValue(spec.name, True, self.visit(spec.typ, attr))

	def visit_UnsupportedType(self, typ:UnsupportedType, obj):
		actual = type_of(type(obj))
		if isinstance(actual, UnsupportedType):
			return UnsupportedValue(actual, obj)
		return self._dynamic(obj)

def reflect(obj, typ:Optional[TypeDescriptor]=None) -> RuntimeValue:
	""" Snapshot an object (declared as `typ`, if given) as a tree of run-time values. """
	return Reflector().reflect(obj, typ)
