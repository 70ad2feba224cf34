"""
Envoke binding: resolve a schema from an environment-like source.

What this module provides
- bind(schema, source): walk the schema depth-first in declaration order,
  resolve every field from `source` (os.environ by default), coerce it to the
  declared kind, and return a read-only instance. The first fault aborts the
  whole bind; a partially bound instance is never returned.

Resolution (per field)
1. a field without a key is skipped and keeps its zero value.
2. an absent or empty source value falls back to the default literal.
3. a still-empty value on a required field raises MissingRequiredError.
4. a non-empty value is coerced:
   • string: identity
   • signed-int / unsigned-int: base-10, 64-bit range
   • bool: 1 t T TRUE true True / 0 f F FALSE false False
   • float: decimal or scientific notation, inf and nan spellings
   • sequence: split on ',', trim, drop empty parts, coerce every part
   • anything else: UnsupportedTypeError
5. records recurse with the same source; fault messages carry the dotted
   field path ("database.pool").

Required fields with a default
- when the source has no value, the default satisfies the requirement and a
  RequiredDefaultWarning is emitted (warnings module, or rich in shell mode).
"""
import math
import os
import re
from collections.abc import Mapping

from .faults import *
from .fields import Kind, Record, descriptors
from .utils import *

_SIGNED_RANGE = range(-2 ** 63, 2 ** 63)
_UNSIGNED_RANGE = range(0, 2 ** 64)

_TRUTHS = frozenset(("1", "t", "T", "TRUE", "true", "True"))
_FALSITIES = frozenset(("0", "f", "F", "FALSE", "false", "False"))


def _signed(value, /):
    if not re.fullmatch(r"[+-]?[0-9]+", value) or (number := int(value)) not in _SIGNED_RANGE:
        raise ValueError(value)
    return number


def _unsigned(value, /):
    if not re.fullmatch(r"[0-9]+", value) or (number := int(value)) not in _UNSIGNED_RANGE:
        raise ValueError(value)
    return number


def _boolean(value, /):
    if value in _TRUTHS:
        return True
    if value in _FALSITIES:
        return False
    raise ValueError(value)


_FLOAT = re.compile(r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity)|nan", re.IGNORECASE)


def _float(value, /):
    # float() also takes whitespace, '_' separators, non-ASCII digits and signed nan
    if not _FLOAT.fullmatch(value):
        raise ValueError(value)
    number = float(value)
    if math.isinf(number) and "inf" not in value.lower():
        raise ValueError(value)  # out of range, e.g. 1e400
    return number


_converters = {
    Kind.STRING: str,
    Kind.SIGNED: _signed,
    Kind.UNSIGNED: _unsigned,
    Kind.BOOL: _boolean,
    Kind.FLOAT: _float,
}

# element kinds a sequence may carry
_elements = frozenset((Kind.STRING, Kind.SIGNED, Kind.FLOAT))


class Binder:
    """
    Single-use binding pass over one schema and one source.

    Binder carries the per-call context (source mapping and trigger options)
    so the recursive walk does not thread them through every call. A fresh
    Binder is created by bind() for every call; nothing is shared between binds.
    """

    def __init__(self, source, /, **options):
        self._source = source
        self._options = options

    def trigger(self, fault, /):
        trigger(fault, **self._options)

    def bind(self, schema, /, path=()):
        """
        Bind `schema` and return the populated, read-only instance.
        """
        instance = object.__new__(schema)
        for name, descriptor in descriptors(schema).items():
            if isinstance(descriptor, Record):
                value = self.bind(descriptor.schema, path + (name,))
            else:
                value = self.resolve(descriptor, path + (name,))
            object.__setattr__(instance, name, value)
        return instance

    def resolve(self, field, path, /):
        """
        Resolve a single scalar or sequence field (steps 1 to 4).
        """
        if not (key := field.key):
            return field.zero

        dotted = ".".join(path)
        value = self._source.get(key) or ""

        if not value:
            if field.required and field.default:
                self.trigger(RequiredDefaultWarning(
                    "required variable %r is not set, using default value %r" % (key, field.default),
                    title="required variable defaulted",
                    code=FaultCode.REQUIRED_DEFAULT,
                    key=key,
                    field=dotted,
                    default=field.default,
                    hint="set %s in the environment to silence this warning" % key,
                    docs=getdoc(FaultCode.REQUIRED_DEFAULT),
                ))
            value = field.default

        if not value:
            if field.required:
                self.trigger(MissingRequiredError(
                    "variable %r is required by field %r" % (key, dotted),
                    title="missing required variable",
                    code=FaultCode.MISSING_REQUIRED,
                    key=key,
                    field=dotted,
                    hint="set %s in the environment or in the .env file" % key,
                    docs=getdoc(FaultCode.MISSING_REQUIRED),
                ))
            return field.zero

        return self.coerce(field, key, dotted, value)

    def coerce(self, field, key, dotted, value, /):
        """
        Convert a non-empty raw value into the field's declared kind.
        """
        if field.kind is Kind.SEQUENCE:
            if field.element not in _elements:
                return self.trigger(UnsupportedTypeError(
                    "unsupported sequence element type %s for field %r" % (field.element_label, dotted),
                    title="unsupported type",
                    code=FaultCode.UNSUPPORTED_TYPE,
                    key=key,
                    field=dotted,
                    kind=field.label,
                    hint="use string, signed-int or float elements",
                    docs=getdoc(FaultCode.UNSUPPORTED_TYPE),
                ))
            converter = _converters[field.element]
            parts = (part.strip() for part in value.split(","))
            return tuple(self.convert(converter, part, key, dotted, field.element_label) for part in parts if part)

        try:
            converter = _converters[field.kind]
        except KeyError:
            return self.trigger(UnsupportedTypeError(
                "unsupported type %s for field %r" % (field.label, dotted),
                title="unsupported type",
                code=FaultCode.UNSUPPORTED_TYPE,
                key=key,
                field=dotted,
                kind=field.label,
                hint="use str, int, bool, float, an unsigned kind or a list of them",
                docs=getdoc(FaultCode.UNSUPPORTED_TYPE),
            ))
        return self.convert(converter, value, key, dotted, field.label)

    def convert(self, converter, value, key, dotted, label, /):
        try:
            return converter(value)
        except ValueError:
            return self.trigger(TypeMismatchError(
                "invalid %s %r for field %r" % (label, value, dotted),
                title="type mismatch",
                code=FaultCode.TYPE_MISMATCH,
                key=key,
                field=dotted,
                kind=label,
                input=value,
                hint="check the value of %s" % key,
                docs=getdoc(FaultCode.TYPE_MISMATCH),
            ))


def bind(schema, source=Unset, /, *, shell=False, fancy=False, colorful=True, console=Unset):
    """
    Bind a schema class from an environment-like source.

    Parameters
    - schema: a Schema subclass (see envoke.fields.schema).
    - source: Mapping[str, str] (positional-only, default: os.environ). Use
      envoke.sources.source() to layer a .env file under the environment.
    - shell: bool (keyword-only). When True, faults are rendered with rich and
      errors terminate the process with status 1 instead of raising.
    - fancy / colorful / console: rendering options forwarded to the faults.

    Returns
    - a read-only instance of `schema` with every field populated.

    Raises (non-shell mode)
    - MissingRequiredError, TypeMismatchError, UnsupportedTypeError.
    - TypeError: when schema is not a schema class or source is not a mapping.
    """
    if not (isinstance(schema, type) and hasattr(schema, "__fields__")):
        raise TypeError("bind() first argument must be a schema class")
    source = coalesce(source, os.environ)
    if not isinstance(source, Mapping):
        raise TypeError("bind() second argument must be a mapping")

    options = {"shell": shell, "fancy": fancy, "colorful": colorful}
    if console is not Unset:
        options["console"] = console
    return Binder(source, **options).bind(schema)


__all__ = (
    "Binder",
    "bind",
)
