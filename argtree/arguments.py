r"""
argtree argument definitions.

Overview
- Argument: binds one Names set, one action (Flag or Value) and the metadata
  used by the engine and the formatter (help, default, required marker,
  converter, choices, metavar).

Builder
- Every configuration method returns the same Argument so calls can be
  chained right after ArgumentParser.add_argument(...):

    >>> parser.add_argument("-o", "--output").as_value().with_help("write here")
    >>> parser.add_argument("-v", "--verbose").as_flag()
    >>> parser.add_argument("file").with_help("input file")

- Configuration must complete before the owning tree is parsed: the first
  parse freezes every definition and later builder calls raise
  FrozenParserError.

Defaults and requirements
- Positionals are required unless required(False) is called.
- Named arguments are optional unless required() is called.
- A declared default satisfies a requirement: a required argument that is
  not supplied resolves to its default instead of failing the parse.
- An absent optional argument is left out of the parse result, unless it
  declares a default. Flags implicitly default to False.

Destination keys
- dest is derived from the canonical long name (or short/positional name):
  leading dashes stripped, '-' replaced by '_'. "--dry-run" → "dry_run".
"""
import builtins
from collections.abc import Iterable, Set

from rich.text import Text

from . import formatter
from .actions import Flag, Value
from .faults import *
from .names import Names
from .utils import *


class Argument:
    """
    Addressable argument definition (positional, flag, or value option).

    Instances are created by ArgumentParser.add_argument(...) or directly and
    then handed to add_argument(argument). Every public field is a read-only
    property; change them through the builder methods while the owning
    parser is still under construction.
    """

    # Fields exposed read-only and shown by __repr__/__rich_repr__.
    __introspectable__ = (
        "names",
        "action",
        "help",
        "default",
        "type",
        "choices",
        "metavar",
    )

    names = mirror("names")
    action = mirror("action")
    help = mirror("help")
    type = mirror("type")
    choices = mirror("choices")

    def __init__(
            self,
            *names,
            action=Unset,
            help=Unset,
            default=Unset,
            required=Unset,
            type=Unset,
            choices=Unset,
            metavar=Unset
    ):
        """
        Construct a definition from its aliases and optional settings.

        Parameters
        - names: one or more str, or a single iterable of str
          '-x' / '--name' aliases for named arguments, or one bare name for a
          positional. Validated by Names (see argtree.names).
        - action, help, default, required, type, choices, metavar:
          shortcuts for the matching builder methods; Unset leaves the
          built-in default in place (Value(1), no help, no default, str, no
          choices, derived metavar).

        Raises
        - InvalidNameError / DuplicateNameError / NoUsableAliasError for bad
          name sets.
        - TypeError / ValueError for ill-typed settings.
        """
        self._names = names[0] if len(names) == 1 and isinstance(names[0], Names) else Names(*names)
        self._action = Value()
        self._help = None
        self._default = Unset
        self._required = Unset
        self._type = str
        self._choices = ()
        self._metavar = Unset
        self._frozen = False
        self._owner = None

        if action is not Unset:
            self.with_action(action)
        if help is not Unset:
            self.with_help(help)
        if default is not Unset:
            self.with_default(default)
        if required is not Unset:
            self.required(required)
        if type is not Unset:
            self.with_type(type)
        if choices is not Unset:
            self.with_choices(choices)
        if metavar is not Unset:
            self.with_metavar(metavar)

    def _guard(self, method):
        if self._frozen:
            raise FrozenParserError(
                "argument %s cannot be changed with %s() once parsing has begun" % (self.display, method),
                name=self.display
            )

    # ── builder ─────────────────────────────────────────────────────────────

    def with_action(self, action, /):
        """
        Attach a Flag() or Value(arity) action.
        """
        self._guard("with_action")
        if not isinstance(action, Flag | Value):
            raise TypeError("argument action must be a Flag or a Value, not %r" % builtins.type(action).__name__)
        if isinstance(action, Flag) and self.positional:
            raise TypeError("positional argument %r cannot be a flag" % self.display)
        self._action = action
        return self

    def as_flag(self):
        """
        Make this a presence-only flag (consumes no token, records True).
        """
        return self.with_action(Flag())

    def as_value(self, arity=1):
        """
        Make this a value argument consuming exactly `arity` tokens.
        """
        return self.with_action(Value(arity))

    def with_help(self, text, /):
        self._guard("with_help")
        if not isinstance(text, str | Text):
            raise TypeError("argument help must be a string")
        elif isinstance(text, str) and not (text := text.strip()):
            raise ValueError("argument help cannot be empty")
        self._help = text
        return self

    def with_default(self, value, /):
        """
        Declare the value used when the argument is not supplied (any object,
        including None).
        """
        self._guard("with_default")
        self._default = value
        return self

    def required(self, flag=True, /):
        """
        Mark the argument as required (or, with False, optional).
        """
        self._guard("required")
        self._required = bool(flag)
        return self

    def with_type(self, converter, /):
        """
        Convert each consumed token through `converter` (int, float, Path, ...).
        A converter raising TypeError or ValueError yields InvalidValueError.
        """
        self._guard("with_type")
        if not callable(converter):
            raise TypeError("argument type must be callable")
        self._type = converter
        return self

    def with_choices(self, choices, /):
        """
        Restrict converted values to `choices`. Non-set iterables must not
        contain duplicates; they keep their order for display.
        """
        self._guard("with_choices")
        if not isinstance(choices, Iterable) or isinstance(choices, str):
            raise TypeError("argument choices must be a non-string iterable")
        if not isinstance(choices, Set):
            sanitized = []
            for choice in choices:
                if choice in sanitized:
                    raise ValueError("argument choices cannot contain duplicates")
                sanitized.append(choice)
            choices = tuple(sanitized)
        self._choices = choices
        return self

    def with_metavar(self, metavar, /):
        """
        Override the value placeholder shown in usage and help.
        """
        self._guard("with_metavar")
        if not isinstance(metavar, str):
            raise TypeError("argument metavar must be a string")
        elif not (metavar := metavar.strip()):
            raise ValueError("argument metavar cannot be empty")
        self._metavar = metavar
        return self

    def freeze(self):
        """
        Lock the definition; further builder calls raise FrozenParserError.
        """
        self._frozen = True
        return self

    # ── derived, read-only ─────────────────────────────────────────────────

    @property
    def frozen(self):
        return self._frozen

    @property
    def positional(self):
        return self._names.positional

    @property
    def flag(self):
        return isinstance(self._action, Flag)

    @property
    def arity(self):
        return self._action.arity

    @property
    def is_required(self):
        return coalesce(self._required, self.positional)

    @property
    def default(self):
        """
        The declared default, False for flags without one, otherwise Unset.
        """
        if self._default is Unset and self.flag:
            return False
        return self._default

    @property
    def has_default(self):
        """
        True when a default was declared with with_default().
        """
        return self._default is not Unset

    @property
    def dest(self):
        return self._names.dest

    @property
    def display(self):
        """
        Canonical name used in messages and usage: short form first.
        """
        return self._names.short

    @property
    def metavar(self):
        if self._metavar is not Unset:
            return self._metavar
        if self._choices:
            choices = sorted(self._choices, key=str) if isinstance(self._choices, Set) else self._choices
            return "{%s}" % ",".join(map(str, choices))
        if self.positional:
            return self._names.short
        return self.dest.upper()

    def contains(self, token, /):
        return token in self._names

    # ── rendering ──────────────────────────────────────────────────────────

    def format_usage(self):
        """
        Usage fragment: canonical short name (or positional name) plus one
        placeholder per arity slot, bracketed when optional.
        """
        return formatter.render_argument_usage(self).plain

    def format_help(self, width=0):
        """
        One help line: all aliases, value placeholders and the help text,
        with the names column padded to `width`.
        """
        return formatter.render_argument_help(self, width).plain

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "argument(%s)" % ", ".join("%s=%r" % item for item in self.__rich_repr__())


__all__ = (
    "Argument",
)
