# python
"""
Source tests (.env file reading and layering over the environment).

Scope
- read(): missing file, KEY=VALUE statements, comments, quoting, malformed lines.
- source(): environment-over-file precedence and the override switch.
- load(): file + environment feeding the binder.
"""
import contextlib
import io
import os
import tempfile
import unittest
from unittest import TestCase

from envoke import *


@schema
class Settings:
    port = Field("APP_PORT", int, "8080")
    dsn = Field("DB_DSN")


class TestRead(TestCase):
    """Parsing a .env file into a read-only mapping."""

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.directory.name, ".env")

    def tearDown(self):
        self.directory.cleanup()

    def write(self, content):
        with open(self.path, "w", encoding="utf-8") as stream:
            stream.write(content)

    def testMissingFileIsEmpty(self):
        self.assertEqual(dict(read(os.path.join(self.directory.name, "absent.env"))), {})

    def testStatementsAndComments(self):
        self.write(
            "# database\n"
            "DB_DSN=postgres://localhost/app\n"
            "\n"
            "APP_PORT=9090  # inline comment\n"
            "GREETING='hello world'\n"
            "export TOKEN=\"abc\"\n"
            "BARE\n"
        )
        values = read(self.path)
        self.assertEqual(values["DB_DSN"], "postgres://localhost/app")
        self.assertEqual(values["APP_PORT"], "9090")
        self.assertEqual(values["GREETING"], "hello world")
        self.assertEqual(values["TOKEN"], "abc")
        self.assertNotIn("BARE", values)

    def testResultIsReadOnly(self):
        self.write("A=1\n")
        with self.assertRaises(TypeError):
            read(self.path)["A"] = "2"  # type: ignore[index]

    def testMalformedLineRaises(self):
        self.write("A=1\n\nB=\"unterminated\n")
        with self.assertRaises(MalformedSourceError) as context:
            read(self.path)
        self.assertEqual(context.exception.options["line"], 3)
        self.assertEqual(context.exception.options["path"], self.path)

    def testUndecodableFileRaises(self):
        with open(self.path, "wb") as stream:
            stream.write(b"A=\xff\n")
        with self.assertRaises(MalformedSourceError) as context:
            read(self.path)
        self.assertEqual(context.exception.options["path"], self.path)
        self.assertEqual(context.exception.options["encoding"], "utf-8")

    def testUndecodableFileExitsInShellMode(self):
        with open(self.path, "wb") as stream:
            stream.write(b"A=\xff\n")
        with self.assertRaises(SystemExit) as context, contextlib.redirect_stderr(io.StringIO()):
            load(Settings, self.path, environ={}, shell=True)
        self.assertEqual(context.exception.code, 1)

    def testOtherEncodings(self):
        with open(self.path, "wb") as stream:
            stream.write("NAME=caf\xe9\n".encode("latin-1"))
        self.assertEqual(read(self.path, encoding="latin-1")["NAME"], "caf\xe9")


class TestSource(TestCase):
    """Layering the process environment over the file."""

    def setUp(self):
        self.directory = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.directory.name, ".env")
        with open(self.path, "w", encoding="utf-8") as stream:
            stream.write("APP_PORT=7000\nDB_DSN=file-dsn\n")

    def tearDown(self):
        self.directory.cleanup()

    def testEnvironmentWins(self):
        lookup = source(self.path, environ={"APP_PORT": "9000"})
        self.assertEqual(lookup["APP_PORT"], "9000")
        self.assertEqual(lookup["DB_DSN"], "file-dsn")

    def testOverridePrefersFile(self):
        lookup = source(self.path, environ={"APP_PORT": "9000"}, override=True)
        self.assertEqual(lookup["APP_PORT"], "7000")

    def testLoadBindsFromBoth(self):
        settings = load(Settings, self.path, environ={"DB_DSN": "env-dsn"})
        self.assertEqual(settings.port, 7000)
        self.assertEqual(settings.dsn, "env-dsn")

    def testLoadWithoutFileUsesDefaults(self):
        settings = load(Settings, os.path.join(self.directory.name, "absent.env"), environ={})
        self.assertEqual(settings.port, 8080)
        self.assertIsNone(settings.dsn)

    def testLoadDoesNotTouchEnvironment(self):
        environ = {}
        load(Settings, self.path, environ=environ)
        self.assertEqual(environ, {})
        self.assertNotEqual(os.environ.get("DB_DSN"), "file-dsn")


if __name__ == '__main__':
    unittest.main()
