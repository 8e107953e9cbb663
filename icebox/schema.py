"""
Derive type descriptors from Python classes and their annotations.

Python offers no static type for a value, so two sources get combined:
the annotations on record classes describe declared slots, while the
class of an object describes whatever it dynamically happens to be.
Either way the answer is computed once per type and cached, which makes
descriptors for the same type referentially consistent.
"""
import collections
import collections.abc
import dataclasses
import enum
import types
import typing
from functools import lru_cache

import numpy

from .ontology import (
	FreezeError, Kind, TypeDescriptor, FieldSpec, ANY,
	ScalarType, ArrayType, SliceType, MapType, SetType,
	PointerType, InterfaceType, StructType, EnumType, UnsupportedType,
)

# Order matters: numpy types come before the Python types they
# might subclass (numpy.float64 is a float), and bool before int.
_NUMPY_SCALARS = [
	(numpy.bool_, Kind.BOOL),
	(numpy.int8, Kind.INT8),
	(numpy.int16, Kind.INT16),
	(numpy.int32, Kind.INT32),
	(numpy.int64, Kind.INT64),
	(numpy.uint8, Kind.UINT8),
	(numpy.uint16, Kind.UINT16),
	(numpy.uint32, Kind.UINT32),
	(numpy.uint64, Kind.UINT64),
	(numpy.float32, Kind.FLOAT32),
	(numpy.float64, Kind.FLOAT64),
	(numpy.complex64, Kind.COMPLEX64),
	(numpy.complex128, Kind.COMPLEX128),
	(numpy.str_, Kind.STRING),
	(numpy.bytes_, Kind.BYTES),
]
_SCALAR_CLASSES = _NUMPY_SCALARS + [
	(bool, Kind.BOOL),
	(int, Kind.INT),
	(float, Kind.FLOAT64),
	(complex, Kind.COMPLEX128),
	(str, Kind.STRING),
	(bytes, Kind.BYTES),
]

_CALLABLE_CLASSES = (
	types.FunctionType, types.BuiltinFunctionType, types.MethodType,
	types.LambdaType, types.GeneratorType, types.CoroutineType,
)

class HiddenRequiredField(FreezeError):
	"""
	Arguments are the record class and the field. The constructor demands
	the field, but it is private, so the rebuilt record could never get one.
	"""
	def __str__(self):
		cls, name = self.args
		return "%s requires the private field %r, which does not get written down" % (cls.__qualname__, name)

# Container subclasses come back as Cls(display). Those whose constructors
# differ from the built-in one's only qualify if they accept a display anyway.
_REBUILT_FROM_DISPLAY = {collections.OrderedDict, collections.Counter}

def _constructs_like(cls:type, base:type) -> bool:
	if cls in _REBUILT_FROM_DISPLAY: return True
	return cls.__init__ is base.__init__ and cls.__new__ is base.__new__

def is_record_class(cls) -> bool:
	""" Dataclasses and NamedTuples carry enough schema to rebuild them by keyword. """
	if not isinstance(cls, type): return False
	if dataclasses.is_dataclass(cls): return True
	return issubclass(cls, tuple) and hasattr(cls, "_fields") and hasattr(cls, "_make")

def _scalar_kind(cls:type):
	for base, kind in _SCALAR_CLASSES:
		if issubclass(cls, base): return kind
	return None

_CONTAINERS = [
	(list, lambda cls: SliceType(ANY, cls)),
	(tuple, lambda cls: ArrayType(ANY, cls)),
	(dict, lambda cls: MapType(ANY, ANY, cls)),
	(set, lambda cls: SetType(ANY, cls)),
	(frozenset, lambda cls: SetType(ANY, cls)),
]

@lru_cache(maxsize=None)
def type_of(cls:type) -> TypeDescriptor:
	""" Descriptor for the dynamic class of some object. """
	if cls is type(None):
		return PointerType(ANY)
	if is_record_class(cls):
		return StructType(cls)
	if issubclass(cls, numpy.generic) and not any(issubclass(cls, base) for base, _ in _NUMPY_SCALARS):
		# float16, longdouble and friends have no literal form.
		return UnsupportedType(Kind.OBJECT, cls)
	kind = _scalar_kind(cls)
	if kind is not None:
		return ScalarType(kind, cls)
	if issubclass(cls, enum.Enum):
		return EnumType(cls)
	for base, make in _CONTAINERS:
		if issubclass(cls, base):
			if _constructs_like(cls, base): return make(cls)
			# defaultdict, for one, wants a factory first.
			return UnsupportedType(Kind.OBJECT, cls)
	if issubclass(cls, _CALLABLE_CLASSES) or issubclass(cls, (staticmethod, classmethod, property)):
		return UnsupportedType(Kind.FUNC, cls)
	if issubclass(cls, types.ModuleType): return UnsupportedType(Kind.MODULE, cls)
	if issubclass(cls, type): return UnsupportedType(Kind.TYPE, cls)
	return UnsupportedType(Kind.OBJECT, cls)

_SEQUENCE_ORIGINS = {list, collections.abc.Sequence, collections.abc.MutableSequence}
_MAPPING_ORIGINS = {dict, collections.abc.Mapping, collections.abc.MutableMapping}
_SET_ORIGINS = {set, frozenset, collections.abc.Set, collections.abc.MutableSet}

@lru_cache(maxsize=None)
def describe(annotation) -> TypeDescriptor:
	""" Descriptor for a declared slot, given its (already evaluated) annotation. """
	if annotation is typing.Any or annotation is object:
		return ANY
	origin = typing.get_origin(annotation)
	args = typing.get_args(annotation)
	if origin is typing.Union or origin is types.UnionType:
		members = [a for a in args if a is not type(None)]
		if len(members) == 1:
			if len(args) > 1: return PointerType(describe(members[0]))
			return describe(members[0])
		return ANY
	if origin is typing.Annotated:
		return describe(args[0])
	if origin in _SEQUENCE_ORIGINS:
		return SliceType(describe(args[0]) if args else ANY)
	if origin is tuple:
		if len(args) == 2 and args[1] is Ellipsis:
			return ArrayType(describe(args[0]))
		return ArrayType(ANY)
	if origin in _MAPPING_ORIGINS:
		key, elem = args if len(args) == 2 else (typing.Any, typing.Any)
		return MapType(describe(key), describe(elem))
	if origin in _SET_ORIGINS:
		elem = describe(args[0]) if args else ANY
		return SetType(elem, set if origin in (set, collections.abc.MutableSet) else frozenset)
	if origin is collections.abc.Callable:
		return UnsupportedType(Kind.FUNC, annotation)
	if origin is not None:
		# Some other generic: whatever the object turns out to be.
		return InterfaceType(origin) if isinstance(origin, type) else ANY
	if annotation is None:
		return PointerType(ANY)
	if not isinstance(annotation, type):
		return ANY
	if annotation in (list, tuple, dict, set, frozenset):
		return type_of(annotation)
	described = type_of(annotation)
	if isinstance(described, (ScalarType, StructType, EnumType, PointerType)):
		return described
	if described.kind is Kind.FUNC:
		return described
	# Bases, protocols, ABCs, and plain classes: a polymorphic slot.
	return InterfaceType(annotation)

@lru_cache(maxsize=None)
def fields_of(cls:type) -> tuple[FieldSpec, ...]:
	"""
	The explicit schema of a record class: field name, whether it participates, and declared type.
	Names with a leading underscore are private. So are dataclass fields
	the constructor does not accept, since there would be no way to pass them back in.
	"""
	assert is_record_class(cls), cls
	try: hints = typing.get_type_hints(cls)
	except (NameError, TypeError):
		# Unresolvable forward references leave every field polymorphic.
		hints = {}
	if dataclasses.is_dataclass(cls):
		specs = []
		for f in dataclasses.fields(cls):
			visible = f.init and not f.name.startswith("_")
			if f.init and not visible and f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
				raise HiddenRequiredField(cls, f.name)
			specs.append(FieldSpec(f.name, visible, describe(hints.get(f.name, typing.Any))))
		return tuple(specs)
	else:
		# Only namedtuple(..., rename=True) ever makes underscored fields.
		defaults = getattr(cls, "_field_defaults", {})
		for name in cls._fields:
			if name.startswith("_") and name not in defaults:
				raise HiddenRequiredField(cls, name)
		return tuple(
			FieldSpec(name, not name.startswith("_"), describe(hints.get(name, typing.Any)))
			for name in cls._fields
		)
