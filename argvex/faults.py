"""
argvex faults (parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for the two parse faults.
  The member name is the fault kind ("UNKNOWN_FLAG", "INVALID_FORMAT").
- ParseError: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- InvalidFormatError / UnknownFlagError: the concrete faults raised by the scanner.
- trigger(): central entry point to surface a fault (respecting shell/fancy/colorful).

UX goals
- Position-first messages: every message includes the ordinal position of the
  offending token (“at third position”).
- Soft but technical language: short titles, one-sentence bodies, a single clear hint.

Integration
- The scanner raises faults directly (no partial result is ever returned).
- The CLI wrapper calls trigger(fault, shell=True, ...) so the fault is rendered
  via rich on stderr and the process exits with status 1.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used by the scanner (stable identifiers).

    - formatting (11111)
      • INVALID_FORMAT: a lone '-' or a long flag with an empty name ('--=value').
    - strict lookup (11112)
      • UNKNOWN_FLAG: strict mode and the flag key is not in the schema.

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    INVALID_FORMAT = 11111
    UNKNOWN_FLAG   = 11112

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ParseError(Exception):
    """
    base class of every fault raised while scanning tokens.

    options (read-only, see .options)
    - code: FaultCode
    - argument: the offending literal token, with its '-' or '--' prefix
    - known: tuple of canonical flag names from the schema (never aliases)
    - index: 1-based position of the offending token in the input
    - title, hint: rendering copy
    - shell, fancy, colorful: runtime rendering switches (set through trigger())
    """
    code = Unset

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({"code": type(self).code} | options)

    @property
    def kind(self):
        return self.options["code"].name

    @property
    def argument(self):
        return self.options.get("argument")

    @property
    def known(self):
        return tuple(self.options.get("known", ()))

    @property
    def index(self):
        return self.options.get("index")

    @property
    def suggestions(self):
        return tuple(self.options.get("suggestions", ()))

    def __str__(self):
        return str(self.message)

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", self.options.get("prog", "argvex")), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.options["code"].normalize(), styler("code")),
            " | ",
            text(self.options.get("title", self.options["code"].name.replace("_", " ").lower()).title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options.get("hint"), styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class InvalidFormatError(ParseError):
    code = FaultCode.INVALID_FORMAT


class UnknownFlagError(ParseError):
    code = FaultCode.UNKNOWN_FLAG


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParseError).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, rendering happens via the stderr rich console; otherwise the fault is raised.

    typical options
    - shell, fancy, colorful, prog.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "FaultCode",
    "ParseError",
    "InvalidFormatError",
    "UnknownFlagError",
    "trigger",
)
