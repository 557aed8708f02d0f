"""
argvex scanner: split, scan, and accumulate argument tokens.

What this module provides
- tokenize(): normalize the input into a list of string tokens (explicit
  tokens, a whitespace-split command string, or the ambient process argv).
- Scanner: the single-pass state machine that classifies each token as the
  end-of-options delimiter, a long flag, a short alias group, or a plain token,
  and decides how many plain tokens each flag occurrence may consume.
- Parsed: the result record (positionals + flags keyed by the name seen:
  the text after '--' for long flags, the canonical name for short aliases).
- parse(): convenience entry point wiring the three together.

Token grammar (checked in this order)
- '--'            → every remaining token is positional, verbatim.
- '--name[=value]'→ long flag; split on the first '=' only, value may be ''.
- '-abc'          → short group; each character is an alias, unless an alias
                    that takes values is followed by more characters, in which
                    case the rest of the group is its single inline value.
- anything else   → value of the current occurrence while its budget lasts,
                    positional otherwise.

Accumulation
- append (default): repeated flags extend the stored list.
- override: each occurrence replaces the stored list.
Either way every occurrence gets its own arity budget, counted separately from
the values carried over from earlier occurrences.

Quick start
    from argvex import parse

    parsed = parse("make latte --size xl -dm oat", schema={
        "size": {"alias": "s", "arity": 1},
        "decaf": {"alias": "d", "arity": 0},
        "milk": {"alias": "m", "arity": 1},
    })
    parsed.positionals  # ['make', 'latte']
    dict(parsed)        # {'size': ['xl'], 'decaf': [], 'milk': ['oat']}
"""
import difflib
from collections.abc import Iterable, Mapping
from types import MappingProxyType

from .faults import InvalidFormatError, UnknownFlagError
from .schema import lookup
from .utils import *


class Occurrence:
    """
    The cursor: one appearance of a flag and what it may still consume.

    - arity: budget of this occurrence (int or Ellipsis), not of the flag.
    - values: the list stored in the result, possibly holding values of
      earlier occurrences in append mode.
    - count: values added by this occurrence only.
    """
    __slots__ = ("definition", "arity", "values", "count")

    def __init__(self, definition, arity, values):
        self.definition = definition
        self.arity = arity
        self.values = values
        self.count = 0

    def accepts(self):
        return self.arity is ... or self.count < self.arity

    def push(self, value, /):
        self.values.append(value)
        self.count += 1

    def __repr__(self):
        return "occurrence(name=%r, arity=%r, count=%r)" % (self.definition.name, self.arity, self.count)


class Parsed(Mapping):
    """
    Result of a parse: positionals plus a read-only mapping of flags.

    Iterating, indexing and len() address the flags, keyed by the name seen
    (long spelling, or canonical name for short aliases) in first-occurrence
    order. `positionals` is always present.

    as_dict() returns the flat form {"_": positionals, **flags}. The "_" key is
    reserved for the positionals; a flag literally named "_" stays reachable
    through parsed["_"] but is left out of the flat form.
    """
    __slots__ = ("_positionals", "_flags")

    def __init__(self, positionals=(), flags=Unset, /):
        self._positionals = list(positionals)
        self._flags = dict(coalesce(flags, {}))

    @property
    def positionals(self):
        return self._positionals

    @property
    def flags(self):
        return MappingProxyType(self._flags)

    def __getitem__(self, name, /):
        return self._flags[name]

    def __iter__(self):
        return iter(self._flags)

    def __len__(self):
        return len(self._flags)

    def __eq__(self, other, /):
        if not isinstance(other, Parsed):
            return NotImplemented
        # Same flags in the same first-occurrence order.
        return self._positionals == other._positionals and list(self._flags.items()) == list(other._flags.items())

    __hash__ = None

    def as_dict(self):
        return {"_": list(self._positionals)} | {name: list(values) for name, values in self._flags.items() if name != "_"}

    def __repr__(self):
        return "parsed(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())

    def __rich_repr__(self):
        yield "positionals", self._positionals
        yield "flags", self._flags


def tokenize(tokens=Unset, /, command=Unset, *, ambient=ambient):
    """
    Normalize the parse input into a list of tokens.

    Parameters
    - tokens: Unset | Iterable[str]
      Explicit tokens; wins over command when both are given. Used verbatim.
    - command: Unset | str
      Split on whitespace, empty fragments dropped. No quoting or escaping.
    - ambient: Callable[[], Iterable[str]]
      Called once, and only when neither tokens nor command is given.

    Raises
    - TypeError: when command is not a string, tokens is a bare string or not
      iterable, or a token is not a string.
    """
    if tokens is not Unset:
        source = tokens
    elif command is not Unset:
        if not isinstance(command, str):
            raise TypeError("tokenize() 'command' must be a string")
        source = command.split()
    else:
        source = ambient()

    if isinstance(source, str) or not isinstance(source, Iterable):
        raise TypeError("tokenize() tokens must be an iterable of strings")

    result = []
    for token in source:
        if not isinstance(token, str):
            raise TypeError("tokenize() tokens must be an iterable of strings")
        result.append(token)
    return result


class Scanner:
    """
    Single-pass state machine over a token list.

    A Scanner is bound to one Lookup (which it extends with synthesized
    definitions) and to the strict/override switches. scan() resets the
    per-run state, so the only thing carried between runs of the same scanner
    is what the lookup learned; parse() builds a fresh scanner per call.
    """

    def __init__(self, table, /, *, strict=False, override=False):
        self.table = table
        self.strict = bool(strict)
        self.override = bool(override)
        self._positionals = []
        self._flags = {}
        self._current = None

    def scan(self, tokens, /):
        """
        classify every token left to right and return the Parsed record.

        raises InvalidFormatError / UnknownFlagError at the offending token;
        nothing is returned in that case.
        """
        tokens = list(tokens)
        self._positionals = []
        self._flags = {}
        self._current = None

        for index, token in enumerate(tokens, start=1):
            if token == "--":
                self._positionals.extend(tokens[index:])
                break
            if token.startswith("--"):
                self._long(token, index)
            elif token.startswith("-"):
                self._short(token, index)
            elif self._current is None or not self._current.accepts():
                self._positionals.append(token)
            else:
                self._current.push(token)

        return Parsed(self._positionals, self._flags)

    def _record(self, definition, arity, value=Unset, *, key=Unset):
        """
        open a new occurrence of definition and make it the cursor.

        values are stored under key when given (the spelling a long flag used),
        else under the canonical name. in append mode the occurrence shares the
        list already stored under that key; in override mode it starts (and
        stores) a fresh list.
        an inline value is consumed right away and counts against the budget.
        """
        name = coalesce(key, definition.name)
        if self.override or name not in self._flags:
            self._flags[name] = []
        self._current = Occurrence(definition, arity, self._flags[name])
        if value is not Unset:
            self._current.push(value)

    def _long(self, token, index):
        name, separator, value = token[2:].partition("=")
        if not name:
            raise InvalidFormatError(
                "bad form of flag %r at %s position" % (token, ordinal(index)),
                title="malformed flag",
                hint="give the flag a name before '=' (for example: --name=value)",
                argument=token,
                known=self.table.known,
                index=index,
            )
        if self.strict and name not in self.table:
            raise self._unknown(token, name, index)

        definition = self.table.synthesize(name)
        if separator:
            definition.narrow()
            self._record(definition, 1, value, key=name)
        else:
            self._record(definition, definition.arity, key=name)

    def _short(self, token, index):
        aliases = token[1:]
        if not aliases:
            raise InvalidFormatError(
                "bad form of flag %r at %s position" % (token, ordinal(index)),
                title="malformed flag",
                hint="follow '-' with one or more aliases (for example: -v), or use '--' to end flags",
                argument=token,
                known=self.table.known,
                index=index,
            )

        for position, alias in enumerate(aliases):
            if self.strict and alias not in self.table:
                raise self._unknown("-" + alias, alias, index)

            rest = aliases[position + 1:]
            definition = self.table.get(alias)
            # a value-taking alias swallows the rest of its group as one inline value
            if definition is not None and definition.arity != 0 and rest:
                definition.narrow()
                self._record(definition, 1, rest)
                break

            definition = self.table.synthesize(alias)
            self._record(definition, 0 if rest else definition.arity)

    def _unknown(self, argument, key, index):
        known = self.table.known
        suggestions = []
        if argument.startswith("--"):
            suggestions = ["--" + name for name in difflib.get_close_matches(key, known, 5)]

        if suggestions:
            hint = "did you mean %r?" % suggestions[0]
        elif known:
            hint = "known flags are %s" % ", ".join("--" + name for name in known)
        else:
            hint = "no flags are accepted in strict mode without a schema"

        return UnknownFlagError(
            "unknown flag %r at %s position" % (argument, ordinal(index)),
            title="unknown flag",
            hint=hint,
            argument=argument,
            known=known,
            index=index,
            suggestions=suggestions,
        )


def parse(tokens=Unset, /, *, command=Unset, schema=Unset, strict=False, override=False, ambient=ambient):
    """
    Parse argument tokens into positionals and flags.

    Parameters
    - tokens: Unset | Iterable[str]
      Explicit tokens; wins over command.
    - command: Unset | str
      Whitespace-split when tokens is not given.
    - schema: Unset | Mapping | Iterable[Mapping]
      Flag declarations (see argvex.schema). Validated before scanning.
    - strict: bool
      Reject any flag key missing from the schema with UnknownFlagError.
    - override: bool
      Keep only the last occurrence of a repeated flag instead of appending.
    - ambient: Callable[[], Iterable[str]]
      Fallback token source when neither tokens nor command is given
      (defaults to sys.argv[1:]).

    Returns
    - Parsed

    Raises
    - InvalidFormatError: a lone '-' or a long flag without a name.
    - UnknownFlagError: strict mode and an undeclared flag key.
    - TypeError / ValueError: invalid input types or schema.
    """
    table = lookup(schema)
    return Scanner(table, strict=strict, override=override).scan(tokenize(tokens, command, ambient=ambient))


__all__ = (
    "Occurrence",
    "Parsed",
    "Scanner",
    "tokenize",
    "parse",
)
