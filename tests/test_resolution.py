import ast
import collections
import typing
import unittest

import numpy

from icebox.ontology import (
	Kind, ANY, ScalarType, ArrayType, SliceType, MapType, SetType,
	PointerType, InterfaceType, StructType, EnumType, UnsupportedType,
)
from icebox.resolution import type_expression, qualified_name, UnnamedType
from icebox.schema import describe, type_of, fields_of, is_record_class, HiddenRequiredField
from icebox.code import imports_of
import specimens

def _text(typ) -> str:
	return ast.unparse(type_expression(typ))

class Resolver(unittest.TestCase):

	def test_builtins_are_bare(self):
		self.assertEqual("int", _text(ScalarType(Kind.INT, int)))
		self.assertEqual("str", _text(ScalarType(Kind.STRING, str)))
		self.assertEqual("object", _text(ANY))

	def test_named_types_are_qualified(self):
		self.assertEqual("specimens.Op", _text(type_of(specimens.Op)))
		self.assertEqual("specimens.Definition", _text(StructType(specimens.Definition)))
		self.assertEqual("numpy.int16", _text(ScalarType(Kind.INT16, numpy.int16)))
		self.assertEqual("specimens.Expr", _text(InterfaceType(specimens.Expr)))
		self.assertEqual("specimens.Color", _text(type_of(specimens.Color)))
		self.assertEqual("collections.OrderedDict", _text(InterfaceType(collections.OrderedDict)))

	def test_composites(self):
		self.assertEqual("typing.Sequence[int]", _text(SliceType(ScalarType(Kind.INT, int))))
		self.assertEqual("typing.Sequence[str]", _text(ArrayType(ScalarType(Kind.STRING, str))))
		self.assertEqual("typing.Optional[specimens.Position]", _text(PointerType(StructType(specimens.Position))))
		self.assertEqual("typing.AbstractSet[object]", _text(SetType(ANY)))
		self.assertEqual(
			"typing.Mapping[str, typing.Sequence[specimens.Expr]]",
			_text(MapType(ScalarType(Kind.STRING, str), SliceType(InterfaceType(specimens.Expr)))),
		)

	def test_expressions_evaluate(self):
		for typ in [describe(dict[str, list[specimens.Expr]]), describe(typing.Optional[frozenset[int]])]:
			with self.subTest(typ=typ):
				expr = type_expression(typ)
				namespace = {"typing": typing, "specimens": specimens}
				eval(ast.unparse(expr), namespace)

	def test_imports_are_collected(self):
		expr = type_expression(MapType(ScalarType(Kind.INT8, numpy.int8), StructType(specimens.Position)))
		self.assertEqual(["numpy", "specimens", "typing"], imports_of(expr))

	def test_unnamed(self):
		class Hidden: pass
		with self.assertRaises(UnnamedType):
			qualified_name(Hidden)

class Descriptors(unittest.TestCase):

	def test_describe(self):
		cases = [
			(int, ScalarType(Kind.INT, int)),
			(numpy.float32, ScalarType(Kind.FLOAT32, numpy.float32)),
			(typing.Any, ANY),
			(list[int], SliceType(ScalarType(Kind.INT, int))),
			(tuple[str, ...], ArrayType(ScalarType(Kind.STRING, str))),
			(tuple[int, str], ArrayType(ANY)),
			(dict[str, bool], MapType(ScalarType(Kind.STRING, str), ScalarType(Kind.BOOL, bool))),
			(set[int], SetType(ScalarType(Kind.INT, int), set)),
			(frozenset[int], SetType(ScalarType(Kind.INT, int), frozenset)),
			(typing.Optional[specimens.Position], PointerType(StructType(specimens.Position))),
			(specimens.Position | None, PointerType(StructType(specimens.Position))),
			(int | str, ANY),
			(specimens.Expr, StructType(specimens.Expr)),
			(specimens.Bag, InterfaceType(specimens.Bag)),
			(list, SliceType(ANY)),
			(specimens.Color, EnumType(specimens.Color)),
			(typing.Optional[specimens.Perm], PointerType(EnumType(specimens.Perm))),
		]
		for annotation, expect in cases:
			with self.subTest(annotation=annotation):
				self.assertEqual(expect, describe(annotation))

	def test_descriptors_are_shared(self):
		self.assertIs(type_of(specimens.Module), type_of(specimens.Module))
		self.assertIs(describe(list[int]), describe(list[int]))

	def test_type_of_kinds(self):
		self.assertEqual(Kind.BOOL, type_of(bool).kind)
		self.assertEqual(Kind.BOOL, type_of(numpy.bool_).kind)
		self.assertEqual(Kind.FLOAT64, type_of(numpy.float64).kind)
		self.assertEqual(Kind.INT, type_of(specimens.Op).kind)
		self.assertEqual(Kind.SLICE, type_of(specimens.Block).kind)
		self.assertEqual(Kind.STRUCT, type_of(specimens.Position).kind)
		self.assertEqual(Kind.FUNC, type_of(type(len)).kind)
		self.assertEqual(Kind.TYPE, type_of(type).kind)
		self.assertEqual(Kind.OBJECT, type_of(specimens.Bag).kind)
		self.assertIsInstance(type_of(numpy.float16), UnsupportedType)

	def test_containers_must_rebuild_from_a_display(self):
		self.assertEqual(MapType(ANY, ANY, collections.OrderedDict), type_of(collections.OrderedDict))
		self.assertEqual(MapType(ANY, ANY, collections.Counter), type_of(collections.Counter))
		self.assertEqual(SliceType(ANY, specimens.Block), type_of(specimens.Block))
		self.assertEqual(UnsupportedType(Kind.OBJECT, collections.defaultdict), type_of(collections.defaultdict))

	def test_enums(self):
		self.assertEqual(Kind.ENUM, type_of(specimens.Color).kind)
		self.assertEqual(Kind.ENUM, type_of(specimens.Perm).kind)
		self.assertEqual(Kind.INT, type_of(specimens.Op).kind)

	def test_records(self):
		self.assertTrue(is_record_class(specimens.Position))
		self.assertTrue(is_record_class(specimens.Module))
		self.assertFalse(is_record_class(tuple))
		self.assertFalse(is_record_class(specimens.Position(1, 2)))

	def test_fields_in_declaration_order(self):
		names = [f.name for f in fields_of(specimens.Module)]
		self.assertEqual(["package", "path", "imports", "definitions", "constants", "exports"], names)
		self.assertTrue(all(f.visible for f in fields_of(specimens.Module)))

	def test_field_visibility(self):
		self.assertEqual([True, False], [f.visible for f in fields_of(specimens.Pair)])
		self.assertEqual([True, False], [f.visible for f in fields_of(specimens.Cached)])

	def test_private_required_field(self):
		with self.assertRaises(HiddenRequiredField):
			fields_of(specimens.Secret)

	def test_forward_reference(self):
		[label, children] = fields_of(specimens.Node)
		self.assertEqual(SliceType(StructType(specimens.Node)), children.typ)

if __name__ == '__main__':
	unittest.main()
