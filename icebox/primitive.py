"""
Literal forms for the primitive (scalar) kinds.

Each kind has one canonical Python type. A payload is first converted to
that type, so that (for instance) a 32-bit float is a 32-bit float before
anything gets written down, and then the literal carries exactly that value.
Fixed widths are spelled as calls on the corresponding numpy type.
"""
import ast
import math

import numpy

from .ontology import Kind, SCALAR_KINDS
from .code import qual, call

CANONICAL = {
	Kind.BOOL: bool,
	Kind.INT: int,
	Kind.INT8: numpy.int8,
	Kind.INT16: numpy.int16,
	Kind.INT32: numpy.int32,
	Kind.INT64: numpy.int64,
	Kind.UINT: numpy.uint,
	Kind.UINT8: numpy.uint8,
	Kind.UINT16: numpy.uint16,
	Kind.UINT32: numpy.uint32,
	Kind.UINT64: numpy.uint64,
	Kind.UINTPTR: numpy.uintp,
	Kind.FLOAT32: numpy.float32,
	Kind.FLOAT64: float,
	Kind.COMPLEX64: numpy.complex64,
	Kind.COMPLEX128: complex,
	Kind.STRING: str,
	Kind.BYTES: bytes,
}
assert set(CANONICAL) == SCALAR_KINDS

# Spelled out because numpy.uint and numpy.uintp are aliases of some
# other type, whose own name would come out of __name__.
_NUMPY_NAME = {
	Kind.INT8: "int8",
	Kind.INT16: "int16",
	Kind.INT32: "int32",
	Kind.INT64: "int64",
	Kind.UINT: "uint",
	Kind.UINT8: "uint8",
	Kind.UINT16: "uint16",
	Kind.UINT32: "uint32",
	Kind.UINT64: "uint64",
	Kind.UINTPTR: "uintp",
	Kind.FLOAT32: "float32",
	Kind.COMPLEX64: "complex64",
}

def canonical_type(kind:Kind) -> type:
	return CANONICAL[kind]

def _reinterpret(bits:int, uint_name:str, float_name:str) -> ast.expr:
	""" A float spelled by its bit pattern. That keeps the sign and payload of a NaN. """
	pattern = call(qual("numpy", uint_name), ast.Constant(bits))
	return call(ast.Attribute(pattern, "view", ast.Load()), qual("numpy", float_name))

_PLAIN_NAN = int(numpy.float64(math.nan).view(numpy.uint64))

def _float(x:float) -> ast.expr:
	x = float(x)
	if math.isfinite(x): return ast.Constant(x)
	if math.isnan(x):
		bits = int(numpy.float64(x).view(numpy.uint64))
		if bits != _PLAIN_NAN:
			return call(ast.Name("float"), _reinterpret(bits, "uint64", "float64"))
	return call(ast.Name("float"), ast.Constant(repr(x)))

def _complex(z:complex) -> ast.expr:
	z = complex(z)
	return call(ast.Name("complex"), _float(z.real), _float(z.imag))

def _canonical_str(s) -> str:
	# str() on an enum member would give its name, not its value.
	return str.__str__(s)

def literal(kind:Kind, payload) -> ast.expr:
	""" The canonical literal expression for one scalar of the given kind. """
	if kind not in CANONICAL:
		raise ValueError("no literal form for kind %s" % kind)
	if kind in _NUMPY_NAME:
		value = CANONICAL[kind](payload)
		if kind is Kind.FLOAT32 and numpy.isnan(value):
			return _reinterpret(int(value.view(numpy.uint32)), "uint32", "float32")
		if kind is Kind.FLOAT32:
			# Widening to 64 bits is exact, so the narrowing on the way back in is too.
			inner = _float(value)
		elif kind is Kind.COMPLEX64:
			inner = _complex(value)
		else:
			inner = ast.Constant(int(value))
		return call(qual("numpy", _NUMPY_NAME[kind]), inner)
	if kind is Kind.BOOL: return ast.Constant(bool(payload))
	if kind is Kind.INT: return ast.Constant(int(payload))
	if kind is Kind.FLOAT64: return _float(payload)
	if kind is Kind.COMPLEX128: return _complex(payload)
	if kind is Kind.STRING: return ast.Constant(_canonical_str(payload))
	if kind is Kind.BYTES: return ast.Constant(bytes(payload))
	raise AssertionError(kind)
