r"""
argvex schema compiler: flag definitions and the lookup table.

Overview
- Definition: one flag, identified by its canonical name, with an optional
  single-character alias and an arity (how many plain tokens a single
  occurrence may consume). Arity is a non-negative integer or Ellipsis
  (unbounded).
- Lookup: the table the scanner consults, keyed by canonical names *and*
  aliases. A name and its alias hold the very same Definition object, so an
  arity learned through one key is seen through the other.
- lookup(schema): build a Lookup from a declarative schema.

Schema forms
- Mapping (preferred):
    {"size": {"alias": "s", "arity": 1}, "decaf": {"alias": "d", "arity": 0}}
- Iterable of entries:
    [{"name": "size", "alias": "s", "arity": 1}, {"name": "decaf", "arity": 0}]
  Omitted arity means unbounded; "..." is accepted as a spelling of Ellipsis.

Validation highlights (raised before any token is read)
- names are non-empty strings, do not start with '-' and do not contain '='.
- aliases are exactly one character other than '-' and '='.
- arity is an int >= 0 or Ellipsis (bools are rejected).
- a mapping entry's optional 'name' field must equal its key.
- every name and alias is registered once: a second entry reusing a name or
  an alias (including a name equal to another entry's alias) is rejected.

Quick example:
    >>> table = lookup({"size": {"alias": "s", "arity": 1}})
    >>> table["s"] is table["size"]
    True
    >>> table.known
    ('size',)
"""
from collections.abc import Iterable, Mapping
from types import EllipsisType

from .utils import *


class Definition:
    """
    A flag definition shared by every key that names it.

    Attributes
    - name: canonical name, the result key for short aliases and for --name.
    - alias: single-character alias or None.
    - arity: int >= 0, or Ellipsis for unbounded.
    - declared: True for schema entries; False for definitions synthesized
      while scanning an undeclared flag.

    A declared arity is fixed. A synthesized one is narrowed to exactly 1 by
    narrow() the first time the flag is used with an inline value.
    """
    __slots__ = ("name", "alias", "arity", "declared")

    def __init__(self, name, alias=None, arity=..., *, declared=True):
        self.name = name
        self.alias = alias
        self.arity = arity
        self.declared = declared

    def narrow(self):
        """pin a synthesized definition to a single value per occurrence."""
        if not self.declared:
            self.arity = 1

    def __eq__(self, other, /):
        if not isinstance(other, Definition):
            return NotImplemented
        return (
            (self.name, self.alias, self.arity, self.declared) ==
            (other.name, other.alias, other.arity, other.declared)
        )

    __hash__ = None

    def __repr__(self):
        return "definition(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "name", self.name
        yield "alias", self.alias
        yield "arity", self.arity
        yield "declared", self.declared


class Lookup(Mapping):
    """
    Read-mostly table from flag keys (canonical names and aliases) to Definition.

    Entries are added by lookup() from the schema and by synthesize() while
    scanning; none is ever removed. `known` lists the canonical names of the
    schema, in declaration order, excluding aliases and synthesized flags.
    """

    def __init__(self):
        self._definitions = {}
        self._known = []

    @property
    def known(self):
        return tuple(self._known)

    def __getitem__(self, key, /):
        return self._definitions[key]

    def __iter__(self):
        return iter(self._definitions)

    def __len__(self):
        return len(self._definitions)

    def declare(self, definition, /):
        """
        register a schema definition under its name and alias.

        raises ValueError when either key is already taken.
        """
        for key in (definition.name, definition.alias):
            if key is not None and key in self._definitions:
                taken = self._definitions[key]
                raise ValueError(
                    "schema key %r of flag %r is already used by flag %r" % (key, definition.name, taken.name)
                )
        self._definitions[definition.name] = definition
        if definition.alias is not None:
            self._definitions[definition.alias] = definition
        self._known.append(definition.name)
        return definition

    def synthesize(self, key, /):
        """
        return the definition for key, creating an unbounded undeclared one if missing.
        """
        try:
            return self._definitions[key]
        except KeyError:
            definition = self._definitions[key] = Definition(key, declared=False)
            return definition

    def __repr__(self):
        return "lookup(%r)" % self._definitions

    def __rich_repr__(self):
        yield "known", self.known
        yield "definitions", self._definitions


def _sanitize_entry(name, entry, /):
    """
    Internal: validate one schema entry and turn it into a Definition.

    Raises
    - TypeError: when the entry is not a mapping, or a field has the wrong type.
    - ValueError: when a field has the right type but an unusable value.
    """
    if not isinstance(name, str):
        raise TypeError("schema flag names must be strings")
    elif not name:
        raise ValueError("schema flag names cannot be empty-strings")
    elif name.startswith("-"):
        raise ValueError("schema flag name %r must be given without its '-' prefix" % name)
    elif "=" in name:
        raise ValueError("schema flag name %r cannot contain '='" % name)

    if not isinstance(entry, Mapping):
        raise TypeError("schema entry of flag %r must be a mapping" % name)

    if unknown := set(entry) - {"name", "alias", "arity"}:
        raise TypeError("schema entry of flag %r has unexpected fields: %s" % (name, ", ".join(map(repr, sorted(unknown)))))
    elif entry.get("name", name) != name:
        raise ValueError("schema entry of flag %r names a different flag %r" % (name, entry["name"]))

    alias = entry.get("alias")
    if alias is not None:
        if not isinstance(alias, str):
            raise TypeError("schema 'alias' of flag %r must be a string" % name)
        elif len(alias) != 1:
            raise ValueError("schema 'alias' of flag %r must be a single character" % name)
        elif alias in ("-", "="):
            raise ValueError("schema 'alias' of flag %r cannot be %r" % (name, alias))

    arity = entry.get("arity", ...)
    if arity == "...":
        arity = ...
    if isinstance(arity, bool) or not isinstance(arity, int | EllipsisType):
        raise TypeError("schema 'arity' of flag %r must be an integer or ellipsis" % name)
    elif isinstance(arity, int) and arity < 0:
        raise ValueError("schema 'arity' of flag %r must be a non-negative integer" % name)

    return Definition(name, alias, arity)


def _entries(schema, /):
    """
    Internal: yield (name, entry) pairs from either supported schema form.
    """
    if isinstance(schema, Mapping):
        yield from schema.items()
    elif isinstance(schema, Iterable) and not isinstance(schema, str):
        for entry in schema:
            if not isinstance(entry, Mapping):
                raise TypeError("schema entries must be mappings")
            try:
                yield entry["name"], entry
            except KeyError:
                raise TypeError("schema entries must have a 'name' field") from None
    else:
        raise TypeError("schema must be a mapping or an iterable of mappings")


def lookup(schema=Unset, /):
    """
    Compile a declarative schema into a fresh Lookup.

    Parameters
    - schema: Unset | Mapping | Iterable[Mapping]
      Unset (or an empty schema) yields an empty table with no known names.

    Returns
    - Lookup: a new table; callers may let the scanner extend it.

    Raises
    - TypeError / ValueError: see _sanitize_entry() and Lookup.declare().
    """
    table = Lookup()
    if schema is Unset:
        return table
    for name, entry in _entries(schema):
        table.declare(_sanitize_entry(name, entry))
    return table


__all__ = (
    "Definition",
    "Lookup",
    "lookup",
)
