"""
argtree parser tree: build, render and run nested command lines.

What this module provides
- ArgumentParser: one node of a parser tree. The root is the program; every
  other node is a subcommand created (and owned) by its parent.
  • Argument registration with alias and destination uniqueness checks.
  • Subcommand registration with unique, bare names.
  • Usage/help rendering (plain strings or rich output on stderr).
  • parse(): returns a ParseResult or a ParseError, never raises on bad input.
  • run(): parse and surface failures (raise, or print and exit in shell mode).

Quick start
    from argtree import ArgumentParser

    parser = ArgumentParser("prog", "a tiny build tool", shell=True)
    parser.add_argument("-v", "--verbose").as_flag().with_help("talk more")
    build = parser.add_subcommand("build", "build the project")
    build.add_argument("-t", "--target").required().with_help("target triple")

    result = parser.run()          # e.g. prog -v build --target x86
    if result.command == "build":
        print(result.subresult.target)

Lifecycle
- Construction phase: add_argument / add_subcommand / builder calls.
- The first parse (or an explicit freeze()) freezes the whole tree; further
  construction calls raise FrozenParserError. A frozen tree is read-only and
  may be parsed any number of times.

Runtime options
- shell:    run() prints usage and the fault on stderr and exits with status 1
            instead of raising.
- colorful: styled rich output (print_usage, print_help, rendered faults).
- fancy:    faults and help are wrapped in panels.
Unset options are inherited from the parent; the root falls back to False.
"""
import os.path
import shlex
import sys
from collections.abc import Iterable

from rich.console import Console
from rich.panel import Panel

from . import engine
from . import formatter
from .arguments import Argument
from .faults import *
from .names import Names, is_dashed
from .utils import *


class ArgumentParser:
    """
    A node of the parser tree (the program itself or one of its subcommands).

    Responsibilities
    - Ownership: keeps its arguments (declaration order) and its children
      (unique names). Children are only created by add_subcommand and keep a
      reference to their parent.
    - Introspection: read-only properties for every field; containers are
      returned as immutable views.
    - Rendering: format_*/print_* delegate to argtree.formatter.
    - Parsing: parse()/run() delegate to argtree.engine.
    """

    # Fields exposed read-only and shown by __repr__/__rich_repr__.
    __introspectable__ = (
        "name",
        "description",
        "epilogue",
        "arguments",
        "children",
        "shell",
        "colorful",
        "fancy",
    )

    name = mirror("name")
    description = mirror("description")
    epilogue = mirror("epilogue")
    arguments = mirror("arguments")
    children = mirror("children")
    parent = mirror("parent")

    def __init__(
            self,
            name=Unset,
            description=Unset,
            epilogue=Unset,
            *,
            shell=Unset,
            colorful=Unset,
            fancy=Unset
    ):
        """
        Create a root parser (or, through add_subcommand, a child node).

        Parameters
        - name: str | Unset
          program name; defaults to the basename of sys.argv[0].
        - description, epilogue: str | Unset
          free text shown around the help output.
        - shell, colorful, fancy: bool | Unset
          runtime options; Unset inherits from the parent (False at the root).

        Raises
        - TypeError when a field has the wrong type.
        - InvalidNameError when the name is empty or contains whitespace.
        """
        if name is Unset:
            name = os.path.basename(sys.argv[0]) or "prog"
        if not isinstance(name, str):
            raise TypeError("parser name must be a string")
        if not name or any(char.isspace() for char in name):
            raise InvalidNameError("parser name %r cannot be empty or contain whitespace" % name, name=name)

        for field, value in (("description", description), ("epilogue", epilogue)):
            if not isinstance(value, str | Unset):
                raise TypeError("parser %s must be a string" % field)
        for field, value in (("shell", shell), ("colorful", colorful), ("fancy", fancy)):
            if not isinstance(value, bool | Unset):
                raise TypeError("parser %s must be a boolean" % field)

        self._name = name
        self._description = coalesce(description, "").strip()
        self._epilogue = coalesce(epilogue, "").strip()
        self._parent = None
        self._shell = shell
        self._colorful = colorful
        self._fancy = fancy
        self._arguments = []
        self._children = {}
        self._frozen = False

    # ── runtime options (inherited) ────────────────────────────────────────

    def _inherit(self, field):
        value = getattr(self, "_" + field)
        if value is Unset:
            return getattr(self._parent, field) if self._parent else False
        return value

    @property
    def shell(self):
        return self._inherit("shell")

    @property
    def colorful(self):
        return self._inherit("colorful")

    @property
    def fancy(self):
        return self._inherit("fancy")

    # ── tree ───────────────────────────────────────────────────────────────

    @property
    def root(self):
        """
        Return the topmost node of the tree this parser belongs to.
        """
        child, parent = self, self._parent
        while parent:
            child, parent = parent, parent.parent
        return child

    @property
    def path(self):
        """
        Return the ancestry from the root to this node as a tuple.
        """
        path = [node := self]
        while node.parent:
            path.append(node := node.parent)
        return tuple(reversed(path))

    @property
    def route(self):
        """
        Space-joined names from the root to this node ('prog build').
        """
        return " ".join(node.name for node in self.path)

    @property
    def frozen(self):
        return self._frozen

    def _guard(self, method):
        if self._frozen:
            raise FrozenParserError(
                "parser '%s' cannot be changed with %s() once parsing has begun" % (self.route, method),
                name=self._name
            )

    def freeze(self):
        """
        Freeze this node, its arguments and every descendant. Idempotent.
        """
        self._frozen = True
        for argument in self._arguments:
            argument.freeze()
        for child in self._children.values():
            child.freeze()
        return self

    # ── construction ───────────────────────────────────────────────────────

    def add_argument(self, *names, **settings):
        """
        Register an argument and return it, ready for builder calls.

        Forms
        - add_argument("-v", "--verbose")            → Argument
        - add_argument(["-v", "--verbose"])          → Argument
        - add_argument("-o", "--output", help="...") → configured Argument
        - add_argument(Argument(...))                → the same Argument

        Raises
        - DuplicateNameError when an alias or the destination key is already
          used by another argument of this node, or when the destination key
          is the name of one of its subcommands.
        - FrozenParserError once the tree has been parsed.
        - The Names/Argument construction errors for malformed input.

        A degraded name set warns through this node's runtime options: printed
        on stderr in shell mode, warnings.warn otherwise.
        """
        self._guard("add_argument")

        if len(names) == 1 and isinstance(names[0], Argument):
            if settings:
                raise TypeError("add_argument() cannot combine a prebuilt argument with settings")
            argument, = names
            if argument.frozen:
                raise FrozenParserError("argument %s already belongs to a parsed tree" % argument.display)
            if argument._owner is not None and argument._owner is not self:
                raise DuplicateNameError(
                    "argument %s already belongs to '%s'" % (argument.display, argument._owner.route),
                    name=argument.display
                )
        else:
            if not (len(names) == 1 and isinstance(names[0], Names)):
                names = (Names(
                    *names,
                    shell=self.shell,
                    colorful=self.colorful,
                    fancy=self.fancy,
                    prog=self.root.name
                ),)
            argument = Argument(*names, **settings)

        for other in self._arguments:
            if other is argument:
                raise DuplicateNameError(
                    "argument %s is already registered in '%s'" % (argument.display, self.route),
                    name=argument.display
                )
            for alias in argument.names:
                if other.contains(alias):
                    raise DuplicateNameError(
                        "argument name %r is already used in '%s'" % (alias, self.route),
                        name=alias
                    )
            if other.dest == argument.dest:
                raise DuplicateNameError(
                    "argument %s would store into %r like %s in '%s'" % (
                        argument.display, argument.dest, other.display, self.route
                    ),
                    name=argument.display
                )
        if argument.dest in self._children:
            raise DuplicateNameError(
                "argument %s would store into %r, the name of a subcommand of '%s'" % (
                    argument.display, argument.dest, self.route
                ),
                name=argument.display
            )

        argument._owner = self
        self._arguments.append(argument)
        return argument

    def add_subcommand(self, name, description=Unset, epilogue=Unset):
        """
        Create, register and return a child node named `name`.

        Raises
        - InvalidNameError when the name is empty, dashed or has whitespace.
        - DuplicateSubCommandError when the name is already taken here, by a
          subcommand or by the destination key of an argument.
        - FrozenParserError once the tree has been parsed.
        """
        self._guard("add_subcommand")
        if not isinstance(name, str):
            raise TypeError("subcommand name must be a string")
        if not name or is_dashed(name) or any(char.isspace() for char in name):
            raise InvalidNameError(
                "subcommand name %r must be a non-empty bare word" % name,
                name=name
            )
        if name in self._children:
            raise DuplicateSubCommandError(
                "subcommand %r is already registered in '%s'" % (name, self.route),
                name=name
            )
        for argument in self._arguments:
            if argument.dest == name:
                raise DuplicateSubCommandError(
                    "subcommand %r would share its result key with argument %s in '%s'" % (
                        name, argument.display, self.route
                    ),
                    name=name
                )
        child = type(self)(name, description, epilogue)
        child._parent = self
        self._children[name] = child
        return child

    # ── rendering ──────────────────────────────────────────────────────────

    def format_usage(self):
        return formatter.format_usage(self)

    def format_help(self):
        return formatter.format_help(self)

    def _print(self, renderable, file):
        console = Console(file=file, no_color=not self.colorful, highlight=False)
        if self.fancy:
            renderable = Panel(renderable, title=self.route, title_align="left")
        console.print(renderable)

    def print_usage(self, file=None):
        """
        Print the usage line to `file` (stdout by default) through rich.
        """
        self._print(formatter.render_usage(self), file)

    def print_help(self, file=None):
        """
        Print the full help to `file` (stdout by default) through rich.
        """
        self._print(formatter.render_help(self), file)

    # ── parsing ────────────────────────────────────────────────────────────

    @staticmethod
    def _tokenize(tokens):
        if tokens is Unset:
            return sys.argv[1:]
        if isinstance(tokens, Iterable):
            tokens = list(tokens)
            for token in tokens:
                if not isinstance(token, str):
                    raise TypeError("parse() argument must be a string or an iterable of strings")
            return tokens
        raise TypeError("parse() argument must be a string or an iterable of strings")

    def parse(self, tokens=Unset):
        """
        Parse a token vector against this node.

        Parameters
        - tokens:
          • Unset: read sys.argv[1:].
          • str: shell-like string, split with shlex.split.
          • Iterable[str]: pre-tokenized vector, used as-is.

        Behavior
        - Freezes the whole tree on first use.
        - Returns a ParseResult, or the first ParseError found. Bad user input
          never raises; a string that shlex cannot split (an unclosed quote)
          yields MalformedInputError. A non-string token is a programming
          error (TypeError).
        """
        self.root.freeze()
        if isinstance(tokens, str):
            try:
                tokens = shlex.split(tokens)
            except ValueError as exception:
                return MalformedInputError(
                    "cannot split the command line: %s" % str(exception).lower(),
                    token=tokens,
                    route=self.route,
                    hint="close every quote and escape stray backslashes",
                )
        return engine.parse(self, self._tokenize(tokens))

    def run(self, tokens=Unset):
        """
        Parse and surface failures.

        Returns the ParseResult on success. On failure, in shell mode the
        usage of the failing node and the rendered fault are printed on
        stderr and the process exits with status 1; otherwise the ParseError
        is raised.
        """
        result = self.parse(tokens)
        if not isinstance(result, ParseError):
            return result
        if self.shell:
            failing = self._locate(result.route)
            failing.print_usage(file=sys.stderr)
        trigger(result, shell=self.shell, colorful=self.colorful, fancy=self.fancy, prog=self.root.name)

    def _locate(self, route):
        node = self
        for name in (route or "").split()[len(self.path):]:
            node = node.children.get(name, node)
        return node

    def __rich_repr__(self):
        for name in type(self).__introspectable__:
            yield name, getattr(self, name)

    def __repr__(self):
        return "parser(%r)" % self.route


__all__ = (
    "ArgumentParser",
)
