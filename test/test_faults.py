# python
"""
Fault and utility tests.

Scope
- Fault construction, options, str() and copy.replace() merging.
- trigger(): raise vs. render + exit, warnings through the warnings module.
- FaultCode normalization and getdoc() lookups.
- Unset/coalesce/ordinal helpers shared by both layers.
"""
import copy
import io
import unittest
import warnings
from unittest import TestCase

from rich.console import Console

from envoke import *
from envoke.utils import coalesce, ordinal, Unset, UnsetType


class TestFaults(TestCase):
    """Exceptions and warnings carrying rendering options."""

    def setUp(self):
        self.output = io.StringIO()
        self.console = Console(file=self.output, width=120, color_system=None)

    def testMessageAndOptions(self):
        fault = TypeMismatchError("invalid value", key="PORT")
        self.assertEqual(str(fault), "invalid value")
        self.assertEqual(fault.options["key"], "PORT")
        with self.assertRaises(TypeError):
            fault.options["key"] = "HOST"  # type: ignore[index]

    def testFamilies(self):
        self.assertTrue(issubclass(MissingRequiredError, BindingError))
        self.assertTrue(issubclass(MalformedSourceError, EnvokeException))
        self.assertTrue(issubclass(UnknownCommandError, CommandException))
        self.assertTrue(issubclass(ContextCancelledError, CommandException))
        self.assertTrue(issubclass(RequiredDefaultWarning, Warning))

    def testReplaceMergesOptions(self):
        fault = UnknownCommandError("unknown command", input="frob")
        replaced = copy.replace(fault, shell=True)
        self.assertIsNot(replaced, fault)
        self.assertEqual(dict(replaced.options), {"input": "frob", "shell": True})
        self.assertEqual(replaced.message, fault.message)

    def testTriggerRaises(self):
        with self.assertRaises(MissingRequiredFlagError) as context:
            trigger(MissingRequiredFlagError("flag missing"), hint="add it")
        self.assertEqual(context.exception.options["hint"], "add it")

    def testTriggerInShellRendersAndExits(self):
        with self.assertRaises(SystemExit) as context:
            trigger(
                UnknownCommandError("unknown command 'frob'"),
                shell=True,
                console=self.console,
                prog="myapp",
                code=FaultCode.UNKNOWN_COMMAND,
                title="unknown command",
                hint="run 'myapp --help'",
            )
        self.assertEqual(context.exception.code, 1)
        rendered = self.output.getvalue()
        self.assertIn("[ myapp — 11101 | Unknown Command ]", rendered)
        self.assertIn("unknown command 'frob'", rendered)
        self.assertIn("→ run 'myapp --help'", rendered)

    def testWarningGoesThroughWarnings(self):
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            trigger(RequiredDefaultWarning("defaulted"))
        self.assertEqual(len(caught), 1)
        self.assertEqual(str(caught[0].message), "defaulted")

    def testWarningInShellRenders(self):
        trigger(RequiredDefaultWarning("defaulted"), shell=True, console=self.console, fancy=True)
        self.assertIn("defaulted", self.output.getvalue())

    def testTriggerRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))

    def testMessageFallsBackToTypeName(self):
        with self.assertRaises(SystemExit):
            trigger(DelegatedCommandError(), shell=True, console=self.console)
        self.assertIn("DelegatedCommandError", self.output.getvalue())

    def testCodes(self):
        self.assertEqual(FaultCode.TYPE_MISMATCH.normalize(), "21102")
        self.assertIsNone(getdoc(FaultCode.TYPE_MISMATCH))
        with self.assertRaises(TypeError):
            getdoc(21102)


class TestUtils(TestCase):
    """Sentinel and small helpers."""

    def testUnsetSentinel(self):
        self.assertIs(UnsetType(), Unset)
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testCoalesce(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertIsNone(coalesce(Unset))

    def testOrdinal(self):
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(113), "113th")
        with self.assertRaises(TypeError):
            ordinal(True)


if __name__ == '__main__':
    unittest.main()
