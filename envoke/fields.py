r"""
Envoke field descriptors and schemas.

Overview
- Kind: the closed set of value kinds the binder knows how to coerce
  (string, signed-int, unsigned-int, bool, float, sequence, record).
- Field: a scalar or sequence descriptor bound to one environment key, with an
  optional default literal and a required marker.
- Record: a nested-record descriptor; it has no key of its own and recurses into
  another schema.
- Schema / @schema: a class whose body declares Field and Record descriptors in
  order. Bound instances are read-only snapshots.

Declaration
    >>> from envoke import schema, Field, Record, Kind
    >>> @schema
    ... class Database:
    ...     dsn = Field("DB_DSN")
    ...     pool = Field("DB_POOL", int, "10")
    ...
    >>> @schema
    ... class Config:
    ...     port = Field("APP_PORT", int, "8080")
    ...     hosts = Field("ALLOWED_HOSTS", list[str], "localhost,127.0.0.1")
    ...     workers = Field("WORKERS", Kind.UNSIGNED)
    ...     database = Record(Database)
    ...     secret = Field("API_KEY", required=True)

Metadata (sanitized on construction)
- key: Unset | str. Empty means "no binding requested" (the field keeps its zero value).
  Keys cannot contain whitespace or '='.
- kind: Kind | type. Python types map onto kinds: str, int, bool, float, and
  list[T] / tuple[T, ...] for sequences. Unknown types are accepted here and
  reported as unsupported when the binder reaches a non-empty value for them.
- default: Unset | str. Defaults are literals coerced exactly like source values.
- required: bool.
- element: Unset | Kind | type, only meaningful for Kind.SEQUENCE.
- descr: Unset | str (non-empty when provided).

Zero values
- Fields that are skipped or resolve to an empty string hold None, sequences
  hold an empty tuple.
"""
import builtins
import re
import typing
from collections.abc import Sequence
from enum import Enum
from types import MappingProxyType

from rich.text import Text

from .utils import *


class Kind(Enum):
    """
    value kinds understood by the binder.

    the values double as the human-facing labels used in fault messages.
    """
    STRING = "string"
    SIGNED = "signed-int"
    UNSIGNED = "unsigned-int"
    BOOL = "bool"
    FLOAT = "float"
    SEQUENCE = "sequence"
    RECORD = "record"


_types = MappingProxyType({
    str: Kind.STRING,
    int: Kind.SIGNED,
    bool: Kind.BOOL,
    float: Kind.FLOAT,
})


def _resolve_kind(kind, /):
    """
    Internal: map a declared kind onto (Kind, element) or (None, None).

    - Kind members map onto themselves (element resolved separately).
    - str/int/bool/float map onto their scalar kind.
    - list[T], tuple[T, ...] and Sequence[T] map onto SEQUENCE with element T.
    - everything else is unsupported; the binder reports it lazily.
    """
    if isinstance(kind, Kind):
        return kind, None
    if isinstance(kind, type) and kind in _types:
        return _types[kind], None
    if typing.get_origin(kind) in (list, tuple, Sequence):
        match typing.get_args(kind):
            case (element,) | (element, builtins.Ellipsis):
                return Kind.SEQUENCE, _resolve_kind(element)[0]
            case _:
                return None, None
    return None, None


def _label(kind, /):
    """
    Internal: readable label for a declared kind (Kind member, type or alias).
    """
    if isinstance(kind, Kind):
        return kind.value
    return getattr(kind, "__name__", None) or repr(kind)


class Descriptor:
    """
    Common plumbing for Field and Record.

    Responsibilities
    - capture the attribute name once the descriptor is placed on a schema class.
    - stable __repr__/__rich_repr__ driven by __introspectable__.
    - act as a non-data descriptor: class access yields the descriptor, instance
      access falls back to the zero value when binding never populated it.
    """
    __introspectable__ = ()
    __typename__ = "descriptor"

    _name = Unset

    name = mirror("name")

    def __set_name__(self, owner, name):
        if self._name is not Unset and self._name != name:
            raise TypeError(f"{self.__typename__} is already bound to {self._name!r}")
        self._name = name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self
        return self.zero

    @property
    def zero(self):
        return None

    def __repr__(self):
        return "%s(%s)" % (self.__typename__, ", ".join("%s=%r" % pair for pair in self.__rich_repr__()))

    def __rich_repr__(self):
        for name in self.__introspectable__:
            yield name, getattr(self, name)


class Field(Descriptor):
    """
    Scalar or sequence descriptor bound to a single source key.

    Parameters
    - key: str (positional-only, optional). The environment key to read.
    - kind: Kind | type (positional-only, default: str).
    - default: str (optional). Literal used when the key is absent or empty.
    - required: bool (keyword-only). Fail when nothing resolves.
    - element: Kind | type (keyword-only). Element kind for Kind.SEQUENCE.
    - descr: str (keyword-only). Short description for diagnostics.
    """
    __introspectable__ = ("name", "key", "kind", "element", "default", "required", "descr")
    __typename__ = "field"

    key = mirror("key")
    default = mirror("default")
    required = mirror("required")
    descr = mirror("descr")

    def __init__(self, key=Unset, kind=str, /, default=Unset, *, required=False, element=Unset, descr=Unset):
        if not isinstance(key, str | Unset):
            raise TypeError(f"{self.__typename__} 'key' must be a string")
        elif isinstance(key, str) and (key := key.strip()) and not re.fullmatch(r"[^\s=]+", key):
            raise ValueError(f"{self.__typename__} 'key' cannot contain whitespaces or '='")

        if not isinstance(default, str | Unset):
            raise TypeError(f"{self.__typename__} 'default' must be a string literal")

        if not isinstance(required, bool):
            raise TypeError(f"{self.__typename__} 'required' must be a boolean")

        if not isinstance(descr, str | Text | Unset):
            raise TypeError(f"{self.__typename__} 'descr' must be a string")
        elif isinstance(descr, str) and not (descr := descr.strip()):
            raise ValueError(f"{self.__typename__} 'descr' cannot be empty")

        resolved, inner = _resolve_kind(kind)
        if resolved is Kind.RECORD:
            raise TypeError(f"{self.__typename__} cannot be a record; use Record(...) instead")
        if element is not Unset:
            if resolved is not Kind.SEQUENCE:
                raise TypeError(f"{self.__typename__} 'element' is only allowed for sequences")
            inner = _resolve_kind(element)[0]
        elif resolved is Kind.SEQUENCE and inner is None and isinstance(kind, Kind):
            raise TypeError(f"{self.__typename__} sequences declared by kind must specify an 'element'")

        self._key = coalesce(key, "")
        self._declared = kind
        if element is Unset and resolved is Kind.SEQUENCE and not isinstance(kind, Kind):
            element = typing.get_args(kind)[0]

        self._kind = resolved
        self._element = inner
        self._element_declared = element
        self._default = coalesce(default, "")
        self._required = required
        self._descr = coalesce(descr)

    @property
    def kind(self):
        """
        the resolved Kind, or None when the declared type is not supported.
        """
        return self._kind

    @property
    def element(self):
        """
        the resolved element Kind for sequences (None otherwise or when unsupported).
        """
        return self._element

    @property
    def label(self):
        """
        readable label of the declared kind (for messages).
        """
        if self._kind is Kind.SEQUENCE:
            return "sequence of %s" % _label(coalesce(self._element_declared, self._element))
        return _label(self._declared)

    @property
    def element_label(self):
        return _label(coalesce(self._element_declared, self._element))

    @property
    def zero(self):
        return () if self._kind is Kind.SEQUENCE else None


class Record(Descriptor):
    """
    Nested-record descriptor: recurses into another schema with the same source.
    """
    __introspectable__ = ("name", "schema", "descr")
    __typename__ = "record"

    descr = mirror("descr")

    def __init__(self, schema, /, *, descr=Unset):
        if not (isinstance(schema, type) and issubclass(schema, Schema)):
            raise TypeError(f"{self.__typename__} argument must be a schema class (see @schema)")
        if not isinstance(descr, str | Text | Unset):
            raise TypeError(f"{self.__typename__} 'descr' must be a string")
        elif isinstance(descr, str) and not (descr := descr.strip()):
            raise ValueError(f"{self.__typename__} 'descr' cannot be empty")
        self._schema = schema
        self._descr = coalesce(descr)

    @property
    def schema(self):
        return self._schema

    @property
    def kind(self):
        return Kind.RECORD


class SchemaType(type):
    """
    Metaclass collecting Field/Record descriptors in declaration order.

    - inherited descriptors come first (base order), then the class body.
    - __fields__ is a read-only mapping {attribute name: descriptor}.
    """

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(cls, name, bases, namespace, **options)

        fields = {}
        for base in reversed(self.__mro__[1:]):
            fields.update(getattr(base, "__fields__", {}))
        for attribute, value in namespace.items():
            if isinstance(value, Descriptor):
                fields[attribute] = value
            elif attribute in fields:
                # a plain attribute shadows an inherited descriptor
                del fields[attribute]

        self.__fields__ = MappingProxyType(fields)
        return self


class Schema(metaclass=SchemaType):
    """
    Base class for configuration schemas.

    Instances are produced by the binder (see envoke.binding.bind) and are
    read-only afterwards: attribute assignment and deletion raise AttributeError.
    Unbound instances (Schema()) hold the zero value of every field.
    """

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")

    def __delattr__(self, name):
        raise AttributeError(f"{type(self).__name__!r} object is read-only")

    def __eq__(self, other):
        if type(self) is not type(other):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for name in type(self).__fields__)

    __hash__ = None

    def __rich_repr__(self):
        for name in type(self).__fields__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "%s(%s)" % (type(self).__name__, ", ".join("%s=%r" % pair for pair in self.__rich_repr__()))


def schema(cls, /):
    """
    Turn a plain class into a Schema subclass (decorator form).

    The class body is kept as-is (methods, properties, docstring); only the
    base is swapped so the descriptors are collected and instances become
    read-only once bound.
    """
    if not isinstance(cls, type):
        raise TypeError("@schema must be applied to a class")
    if issubclass(cls, Schema):
        return cls
    namespace = {
        name: value for name, value in cls.__dict__.items()
        if name not in ("__dict__", "__weakref__")
    }
    self = SchemaType(cls.__name__, (Schema, *(base for base in cls.__bases__ if base is not object)), namespace)
    self.__qualname__ = cls.__qualname__
    return self


def descriptors(schema, /):
    """
    Return the ordered, read-only descriptor mapping of a schema class or instance.
    """
    if isinstance(schema, Schema):
        schema = type(schema)
    if not (isinstance(schema, type) and issubclass(schema, Schema)):
        raise TypeError("descriptors() argument must be a schema class or instance")
    return schema.__fields__


__all__ = (
    "Kind",
    "Field",
    "Record",
    "Schema",
    "schema",
    "descriptors",
)
