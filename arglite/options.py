"""
Arglite option resolution.

Overview
- parse_options(args, options, keys) -> dict
  The top-level entry point: tokenize every argument, decide which ones are
  recognized options, and produce their final (optionally coerced) values.

- settle(descriptor, base) -> Settings
  Build an effective, immutable Settings record by overlaying a descriptor
  mapping on top of base settings. Used for the global options and for every
  per-key descriptor.

Options (global, all optional)
- default_value: value used when an argument has no '=value' (default: True).
- coerce: run parse_value() on values (default: True).
- prefix: prefix character, only its first character counts (default: "-").
  An empty prefix switches to catch-all mode: every argument becomes a key,
  spelled with whatever prefix it carries.

Key descriptors (per canonical name, all optional, unset fields inherit)
- aliases: alternative spellings, each written with the descriptor prefix
  once ('-f' for alias 'f' with prefix '-').
- default_value, coerce, prefix: override the global ones for this key.

Resolution of one token (prefix, key, value)
1. an empty key drops the argument.
2. prefix + key is a registered spelling (name with a doubled prefix, or an
   alias with a single prefix) → the canonical name, with its own settings.
3. the global prefix is "" → the key is prefix + key.
4. the prefix is the global prefix doubled → the key is key; when a
   descriptor with that very name exists it was registered under another
   prefix, so the key keeps its prefix (prefix + key) and stays distinct.
5. anything else drops the argument.

Quick examples
    >>> parse_options(["--foo", "--bar=", "--qux=25"])
    {'foo': True, 'bar': '', 'qux': 25}
    >>> parse_options(["-f"], {}, {"foo": {"aliases": ["f", "fo"]}})
    {'foo': True}
"""
import shlex
import sys
from collections.abc import Iterable, Mapping
from typing import NamedTuple

from .faults import AliasConflictWarning, warn
from .tokens import Entry, reduce_arguments
from .utils import Unset
from .values import parse_value


class Settings(NamedTuple):
    """
    effective settings of the global options or of one key.

    - default_value: value for arguments given without '='.
    - coerce: whether values go through parse_value().
    - prefix: a single prefix character, or "".
    - aliases: alternative spellings (always empty for the global settings).
    """
    default_value: object
    coerce: bool
    prefix: str
    aliases: tuple[str, ...]


_BASE = Settings(default_value=True, coerce=True, prefix="-", aliases=())


def settle(descriptor=None, base=Unset, /):
    """
    Overlay a descriptor mapping onto base settings.

    Parameters
    - descriptor: Mapping | Settings | None
      Fields to override: "default_value", "coerce", "prefix" and, for per-key
      descriptors only, "aliases". None means no overrides.
    - base: Settings | Unset
      Settings to inherit from. When Unset, the built-in defaults are used and
      the descriptor is treated as the global options (no "aliases").

    Returns
    - Settings: a new immutable record; the prefix is cut to its first
      character and aliases are always a fresh tuple.

    Raises
    - TypeError: on unknown fields or wrongly typed values.
    """
    allowed = Settings._fields if base is not Unset else ("default_value", "coerce", "prefix")
    if base is Unset:
        base = _BASE
    if descriptor is None:
        descriptor = {}
    elif isinstance(descriptor, Settings):
        descriptor = descriptor._asdict()
    elif not isinstance(descriptor, Mapping):
        raise TypeError("settle() first argument must be a mapping")

    if unknown := [field for field in descriptor if field not in allowed]:
        raise TypeError("settle() got unexpected fields: %s" % ", ".join(map(repr, unknown)))

    prefix = descriptor.get("prefix", base.prefix)
    if not isinstance(prefix, str):
        raise TypeError("settle() prefix must be a string")

    aliases = descriptor.get("aliases", ())
    if isinstance(aliases, str) or not isinstance(aliases, Iterable):
        raise TypeError("settle() aliases must be an iterable of strings")
    aliases = tuple(aliases)
    if not all(isinstance(alias, str) for alias in aliases):
        raise TypeError("settle() aliases must be an iterable of strings")

    return Settings(
        default_value=descriptor.get("default_value", base.default_value),
        coerce=bool(descriptor.get("coerce", base.coerce)),
        prefix=prefix[:1],
        aliases=aliases,
    )


def _arguments(args):
    """
    normalize the args parameter of parse_options() into a list of strings.
    """
    if args is Unset:
        return sys.argv[1:]
    if isinstance(args, str):
        return shlex.split(args)
    if not isinstance(args, Iterable):
        raise TypeError("parse_options() first argument must be a string or an iterable of strings")
    args = list(args)
    if not all(isinstance(arg, str) for arg in args):
        raise TypeError("parse_options() first argument must be a string or an iterable of strings")
    return args


def _register(table, spelling, name):
    """
    add one spelling to the alias table; a later name takes over a spelling.
    """
    if (previous := table.get(spelling, name)) != name:
        warn(AliasConflictWarning(
            "spelling %r of option %r is taken over by option %r" % (spelling, previous, name),
            spelling=spelling,
            previous=previous,
            current=name,
            hint="give %r and %r different aliases or prefixes" % (previous, name)
        ), stacklevel=3)
    table[spelling] = name


def parse_options(args=Unset, options=None, keys=None, /):
    """
    Parse arguments into a dict of recognized options and their values.

    Parameters
    - args: Iterable[str] | str | Unset
      • Unset: the process arguments (sys.argv[1:]).
      • str: a shell-like line, split with shlex.split.
      • Iterable[str]: used as-is.
    - options: Mapping | None
      Global options: default_value, coerce, prefix (see module docstring).
    - keys: Mapping[str, Mapping | None] | None
      Per-key descriptors: aliases, default_value, coerce, prefix.

    Returns
    - dict: recognized keys mapped to their values, in first-seen order; a
      repeated key keeps its last value.

    Notes
    - Unknown shapes are dropped silently and malformed values fall back to
      plain strings: nothing is raised for any argument content.
    - A spelling registered by two descriptors goes to the later one and an
      AliasConflictWarning is issued.
    """
    args = _arguments(args)
    settings = settle(options)

    if keys is None:
        keys = {}
    elif not isinstance(keys, Mapping):
        raise TypeError("parse_options() third argument must be a mapping")

    descriptors = {}
    aliases = {}
    prefixes = {settings.prefix: None}

    for name, descriptor in keys.items():
        if not isinstance(name, str):
            raise TypeError("parse_options() keys must be strings")
        descriptors[name] = effective = settle(descriptor, settings)
        prefixes[effective.prefix] = None
        _register(aliases, effective.prefix * 2 + name, name)
        for alias in effective.aliases:
            _register(aliases, effective.prefix + alias, name)

    def resolve(key, value, prefix, arg, /):
        if not key:
            return None

        spelling = prefix + key
        if spelling in aliases:
            key = aliases[spelling]
            effective = descriptors[key]
        elif not settings.prefix:
            key = spelling
            effective = settings
        elif prefix == settings.prefix * 2:
            if key in descriptors:
                key = spelling
            effective = settings
        else:
            return None

        if value is Unset:
            value = effective.default_value
            if effective.coerce and isinstance(value, str):
                value = parse_value(value)
        elif effective.coerce:
            value = parse_value(value)
        return Entry(key, value)

    return reduce_arguments(args, resolve, tuple(prefixes))


__all__ = (
    "Settings",
    "settle",
    "parse_options",
)
