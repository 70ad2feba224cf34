"""
Envoke sources: environment lookups layered over an optional .env file.

What this module provides
- read(path): parse a KEY=VALUE file into a read-only mapping. A missing file
  is an empty mapping; a line the parser cannot understand raises
  MalformedSourceError, and so does content that does not decode with the
  given encoding. Comments and lines without '=' are ignored; quoting and
  escapes follow python-dotenv's parser (no variable interpolation).
- source(path, environ=..., override=...): a read-only ChainMap with the
  process environment in front of the file values (unless override=True).
- load(schema, path, ...): read the file, then bind the schema from the
  combined lookup.

Notes
- Nothing here mutates os.environ; the combined lookup is handed to the binder
  explicitly, so tests can pass plain dictionaries.
"""
import io
import os.path
from collections import ChainMap
from types import MappingProxyType

from dotenv.parser import parse_stream

from .binding import bind
from .faults import *
from .utils import *


def read(path=".env", /, *, encoding="utf-8", shell=False):
    """
    Parse a .env file into a read-only mapping.

    Parameters
    - path: str | os.PathLike (positional-only, default ".env").
    - encoding: text encoding used to open the file.
    - shell: bool. Render the malformed-file fault instead of raising it.

    Returns
    - MappingProxyType[str, str]; empty when the file does not exist.

    Raises
    - MalformedSourceError: on undecodable content or the first statement
      the parser rejects.
    """
    try:
        stream = open(path, encoding=encoding)
    except FileNotFoundError:
        return MappingProxyType({})

    with stream:
        try:
            content = stream.read()
        except UnicodeDecodeError:
            return trigger(MalformedSourceError(
                "cannot decode %s as %s" % (os.fspath(path), encoding),
                title="malformed source file",
                code=FaultCode.MALFORMED_SOURCE,
                path=os.fspath(path),
                encoding=encoding,
                hint="save the file as %s or pass encoding= to read it" % encoding,
                docs=getdoc(FaultCode.MALFORMED_SOURCE),
            ), shell=shell)

    values = {}
    for binding in parse_stream(io.StringIO(content)):
        if binding.error:
            original = binding.original.string
            # the parser marks a statement at the first blank line preceding it
            skipped = original[:len(original) - len(original.lstrip())].count("\n")
            line = binding.original.line + skipped
            trigger(MalformedSourceError(
                "cannot parse %s at line %d" % (os.fspath(path), line),
                title="malformed source file",
                code=FaultCode.MALFORMED_SOURCE,
                path=os.fspath(path),
                line=line,
                input=original.strip(),
                hint="use one KEY=VALUE pair per line and close every quote",
                docs=getdoc(FaultCode.MALFORMED_SOURCE),
            ), shell=shell)
        if binding.key is None or binding.value is None:
            continue  # blank lines, comments and bare keys
        values[binding.key] = binding.value

    return MappingProxyType(values)


def source(path=".env", /, *, environ=Unset, override=False, encoding="utf-8", shell=False):
    """
    Build the lookup the binder reads from.

    Parameters
    - path: .env file to layer under the environment (missing file is fine).
    - environ: Mapping[str, str] (default: os.environ).
    - override: when True the file wins over the environment; by default
      variables already present in the environment are kept.

    Returns
    - ChainMap[str, str] over read-only layers.
    """
    environ = coalesce(environ, os.environ)
    file = read(path, encoding=encoding, shell=shell)
    if override:
        return ChainMap(file, environ)
    return ChainMap(environ, file)


def load(schema, path=".env", /, *, environ=Unset, override=False, encoding="utf-8", **options):
    """
    Read the .env file (if any) and bind `schema` from environment + file.

    Keyword options (shell, fancy, colorful, console) are forwarded to bind().
    """
    lookup = source(path, environ=environ, override=override, encoding=encoding, shell=options.get("shell", False))
    return bind(schema, lookup, **options)


__all__ = (
    "read",
    "source",
    "load",
)
