# python
"""
Field and schema declaration tests.

Scope
- Field metadata sanitization (key, default, required, kind, element, descr).
- Kind resolution from Python types and annotations.
- Schema collection order, inheritance and read-only instances.
"""
import unittest
from unittest import TestCase

from envoke import *


class TestField(TestCase):
    """Field construction and normalization."""

    def testDefaults(self):
        field = Field("NAME")
        self.assertEqual(field.key, "NAME")
        self.assertIs(field.kind, Kind.STRING)
        self.assertEqual(field.default, "")
        self.assertFalse(field.required)
        self.assertIsNone(field.descr)

    def testKeyIsTrimmed(self):
        self.assertEqual(Field("  NAME ").key, "NAME")

    def testKeyRejectsSpacesAndEquals(self):
        for key in ("TWO WORDS", "A=B"):
            with self.subTest(key=key), self.assertRaises(ValueError):
                Field(key)
        with self.assertRaises(TypeError):
            Field(1)

    def testDefaultMustBeLiteral(self):
        with self.assertRaises(TypeError):
            Field("PORT", int, 8080)

    def testRequiredMustBeBoolean(self):
        with self.assertRaises(TypeError):
            Field("PORT", required=1)

    def testDescrCannotBeBlank(self):
        with self.assertRaises(ValueError):
            Field("PORT", descr="  ")

    def testKindsFromTypes(self):
        self.assertIs(Field("A", int).kind, Kind.SIGNED)
        self.assertIs(Field("A", bool).kind, Kind.BOOL)
        self.assertIs(Field("A", float).kind, Kind.FLOAT)
        self.assertIs(Field("A", Kind.UNSIGNED).kind, Kind.UNSIGNED)
        self.assertIsNone(Field("A", complex).kind)

    def testSequenceKinds(self):
        field = Field("A", list[int])
        self.assertIs(field.kind, Kind.SEQUENCE)
        self.assertIs(field.element, Kind.SIGNED)
        self.assertEqual(field.label, "sequence of int")
        self.assertEqual(field.zero, ())
        self.assertIs(Field("A", tuple[str, ...]).element, Kind.STRING)

    def testSequenceByKindNeedsElement(self):
        with self.assertRaises(TypeError):
            Field("A", Kind.SEQUENCE)
        self.assertIs(Field("A", Kind.SEQUENCE, element=float).element, Kind.FLOAT)

    def testElementOnlyForSequences(self):
        with self.assertRaises(TypeError):
            Field("A", int, element=int)

    def testRecordKindRejected(self):
        with self.assertRaises(TypeError):
            Field("A", Kind.RECORD)


class TestSchema(TestCase):
    """Descriptor collection and instances."""

    def testDeclarationOrder(self):
        @schema
        class Settings:
            b = Field("B")
            a = Field("A")

        self.assertEqual(list(descriptors(Settings)), ["b", "a"])
        self.assertEqual(descriptors(Settings)["a"].name, "a")

    def testInheritance(self):
        @schema
        class Base:
            host = Field("HOST")
            port = Field("PORT", int)

        class Derived(Base):
            port = 1
            debug = Field("DEBUG", bool)

        self.assertEqual(list(descriptors(Derived)), ["host", "debug"])

    def testRecordRequiresSchema(self):
        with self.assertRaises(TypeError):
            Record(object)

    def testUnboundInstanceHoldsZeros(self):
        @schema
        class Settings:
            name = Field("NAME")
            hosts = Field("HOSTS", list[str])

        settings = Settings()
        self.assertIsNone(settings.name)
        self.assertEqual(settings.hosts, ())
        with self.assertRaises(AttributeError):
            settings.name = "x"

    def testMethodsAreKept(self):
        @schema
        class Settings:
            """Application settings."""
            port = Field("PORT", int, "80")

            def address(self):
                return "localhost:%d" % self.port

        self.assertEqual(Settings.__doc__, "Application settings.")
        self.assertEqual(bind(Settings, {}).address(), "localhost:80")

    def testDescriptorsRejectsPlainClasses(self):
        with self.assertRaises(TypeError):
            descriptors(object)


if __name__ == '__main__':
    unittest.main()
