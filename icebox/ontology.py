"""
These most-fundamental classes describe the shape of a type without
regard to any particular value. Everything else in the package works
in terms of them, so they live apart to avoid circular imports.

Descriptors are NamedTuples: two descriptors derived from the same
Python type compare equal, and nobody ever mutates one.
"""
from enum import Enum
from typing import NamedTuple, Union, Any

class FreezeError(Exception):
	""" Root of everything that can go wrong while freezing a tree. """

class Kind(Enum):
	BOOL = "bool"
	INT = "int"
	INT8 = "int8"
	INT16 = "int16"
	INT32 = "int32"
	INT64 = "int64"
	UINT = "uint"
	UINT8 = "uint8"
	UINT16 = "uint16"
	UINT32 = "uint32"
	UINT64 = "uint64"
	UINTPTR = "uintptr"
	FLOAT32 = "float32"
	FLOAT64 = "float64"
	COMPLEX64 = "complex64"
	COMPLEX128 = "complex128"
	STRING = "string"
	BYTES = "bytes"

	ARRAY = "array"
	SLICE = "slice"
	MAP = "map"
	SET = "set"
	POINTER = "pointer"
	INTERFACE = "interface"
	STRUCT = "struct"
	ENUM = "enum"

	# No encoding rule exists for these:
	FUNC = "func"
	MODULE = "module"
	TYPE = "type"
	OBJECT = "object"

	def __str__(self): return self.value

SCALAR_KINDS = frozenset([
	Kind.BOOL, Kind.INT, Kind.INT8, Kind.INT16, Kind.INT32, Kind.INT64,
	Kind.UINT, Kind.UINT8, Kind.UINT16, Kind.UINT32, Kind.UINT64, Kind.UINTPTR,
	Kind.FLOAT32, Kind.FLOAT64, Kind.COMPLEX64, Kind.COMPLEX128,
	Kind.STRING, Kind.BYTES,
])

class ScalarType(NamedTuple):
	kind: Kind
	origin: type
	def __repr__(self): return "<%s %s>" % (self.kind, self.origin.__qualname__)

class ArrayType(NamedTuple):
	elem: "TypeDescriptor"
	origin: type = tuple
	@property
	def kind(self): return Kind.ARRAY

class SliceType(NamedTuple):
	elem: "TypeDescriptor"
	origin: type = list
	@property
	def kind(self): return Kind.SLICE

class MapType(NamedTuple):
	key: "TypeDescriptor"
	elem: "TypeDescriptor"
	origin: type = dict
	@property
	def kind(self): return Kind.MAP

class SetType(NamedTuple):
	elem: "TypeDescriptor"
	origin: type = frozenset
	@property
	def kind(self): return Kind.SET

class PointerType(NamedTuple):
	elem: "TypeDescriptor"
	@property
	def kind(self): return Kind.POINTER
	@property
	def origin(self): return self.elem.origin

class InterfaceType(NamedTuple):
	origin: Any = object
	@property
	def kind(self): return Kind.INTERFACE

class StructType(NamedTuple):
	origin: type
	@property
	def kind(self): return Kind.STRUCT
	def __repr__(self): return "<struct %s>" % self.origin.__qualname__

class EnumType(NamedTuple):
	""" Plain enumerations. Those with a scalar mixin, like IntEnum, are named scalars instead. """
	origin: type
	@property
	def kind(self): return Kind.ENUM

class UnsupportedType(NamedTuple):
	kind: Kind
	origin: Any

TypeDescriptor = Union[
	ScalarType, ArrayType, SliceType, MapType, SetType,
	PointerType, InterfaceType, StructType, EnumType, UnsupportedType,
]

ANY = InterfaceType(object)

def namespace_path(origin) -> str:
	""" Builtins live in the unnamed namespace. """
	module = getattr(origin, "__module__", None) or ""
	return "" if module == "builtins" else module

def local_name(origin) -> str:
	return getattr(origin, "__qualname__", None) or type(origin).__qualname__

class FieldSpec(NamedTuple):
	""" One entry in a record schema. Invisible fields never take part in encoding. """
	name: str
	visible: bool
	typ: TypeDescriptor
