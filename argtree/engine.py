r"""
argtree parse engine: token vector → ParseResult | ParseError.

Model
- A parse is a pure function of (node, tokens). Every piece of mutable state
  lives in a fresh ParseState; the parser tree is only read.
- The engine is a small state machine:

      AWAITING_TOKEN ──(named value / positional)──▶ CONSUMING_VALUE
            ▲                                               │
            └───────────────(value recorded)────────────────┘
      AWAITING_TOKEN ──(end of tokens, requirements met)──▶ DONE
      any state      ──(first fault)──────────────────────▶ FAILED

Token rules (left to right, against the current node)
1. a subcommand name, while no positional has been bound in this node:
   descend; the rest of the tokens belong to the child, whose result is
   spliced in as `subresult` (or whose error fails the whole parse).
2. an option token ('-x…' or '--…') naming an argument: flags record
   True, values consume the next `arity` tokens, stopping at any recognized
   option of the node.
3. an option token naming nothing: UnknownArgumentError.
4. any other token ('-' included) while positionals are unfilled: bind
   the next positional in declaration order (multi-arity positionals take
   `arity` tokens).
5. such a token with no positional left: UnknownSubCommandError when the node
   has subcommands, otherwise UnexpectedPositionalError.
6. a named argument supplied twice: DuplicateArgumentError.
7. end of tokens: the first required argument (declaration order) that was
   neither supplied nor declares a default yields MissingRequiredError;
   declared defaults are filled in.

Faults are returned, never raised: the first one stops the machine.
"""
import difflib
from collections import deque
from collections.abc import Mapping
from enum import Enum, auto

from .actions import apply
from .faults import *
from .names import is_short_option, is_long_option
from .utils import *


class State(Enum):
    AWAITING_TOKEN = auto()
    CONSUMING_VALUE = auto()
    DONE = auto()
    FAILED = auto()


class ParseState:
    """
    Mutable bookkeeping for one node of one parse.

    Attributes
    - node:        the ArgumentParser being matched.
    - tokens:      deque of the tokens not yet read.
    - position:    1-based position (in the raw vector) of tokens[0].
    - index:       1-based position of the token being resolved; errors and
                   ordinals refer to it.
    - argument:    the Argument being consumed in CONSUMING_VALUE.
    - input:       the token (alias or positional name) that selected it.
    - values:      dest → recorded value.
    - seen:        arguments already supplied.
    - positionals: positionals still waiting for a value.
    - bound:       True once a positional was bound (closes rule 1).
    """

    def __init__(self, node, tokens, position=1):
        self.node = node
        self.tokens = deque(tokens)
        self.position = position
        self.index = position
        self.state = State.AWAITING_TOKEN
        self.argument = None
        self.input = None
        self.values = {}
        self.seen = set()
        self.positionals = deque(argument for argument in node.arguments if argument.positional)
        self.bound = False
        self.error = None
        self.command = None
        self.subresult = None

    @property
    def route(self):
        return self.node.route

    def ordinal(self):
        return ordinal(self.index)

    def lookup(self, token):
        """
        the argument of the current node that `token` names, or None.
        """
        for argument in self.node.arguments:
            if not argument.positional and argument.contains(token):
                return argument
        return None

    def gather(self, arity):
        """
        up to `arity` leading tokens, stopping at a recognized option.
        """
        gathered = []
        for token in self.tokens:
            if len(gathered) == arity or self.lookup(token) is not None:
                break
            gathered.append(token)
        return gathered

    def advance(self, count=1):
        for _ in range(count):
            self.tokens.popleft()
        self.position += count

    def begin(self, argument, input):
        self.argument = argument
        self.input = input
        self.state = State.CONSUMING_VALUE

    def record(self, argument, value):
        self.values[argument.dest] = value
        self.seen.add(argument)
        self.argument = None
        self.input = None
        self.state = State.AWAITING_TOKEN

    def fail(self, error):
        self.error = error
        self.state = State.FAILED

    def result(self):
        if self.state is State.FAILED:
            return self.error
        return ParseResult(self.values, node=self.node, command=self.command, subresult=self.subresult)


class ParseResult(Mapping):
    """
    Read-only outcome of a successful parse.

    - Mapping from destination key to value: result["dry_run"].
    - Any alias of a declared argument works as a key: result["--dry-run"].
    - Attribute access for identifier-shaped keys: result.dry_run. Keys that
      collide with Mapping methods (keys, items, get, ...) or with `command`,
      `subresult` and `node` must use indexing.
    - command / subresult: the selected subcommand name and its own result,
      both None when no subcommand was given.
    """

    def __init__(self, values, *, node, command=None, subresult=None):
        object.__setattr__(self, "_values", dict(values))
        object.__setattr__(self, "_node", node)
        object.__setattr__(self, "_command", command)
        object.__setattr__(self, "_subresult", subresult)

    def __setattr__(self, name, value, /):
        raise AttributeError("parse results are read-only")

    @property
    def node(self):
        return self._node

    @property
    def command(self):
        return self._command

    @property
    def subresult(self):
        return self._subresult

    def _resolve(self, key):
        if key in self._values:
            return key
        for argument in self._node.arguments:
            if argument.contains(key):
                return argument.dest
        return key

    def __getitem__(self, key, /):
        return self._values[self._resolve(key)]

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return self[name]
        except KeyError:
            raise AttributeError("parse result has no value for %r" % name) from None

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def to_dict(self):
        """
        plain nested dict; the subcommand result is stored under its name,
        which add_subcommand keeps distinct from every destination key.
        """
        values = dict(self._values)
        if self._command is not None:
            values[self._command] = self._subresult.to_dict()
        return values

    def __rich_repr__(self):
        yield from self._values.items()
        if self._command is not None:
            yield "command", self._command
            yield "subresult", self._subresult

    def __repr__(self):
        return "result(%s)" % ", ".join("%s=%r" % item for item in self.__rich_repr__())


def _suggest(token, candidates):
    suggestions = difflib.get_close_matches(token, list(candidates), 3)
    return " did you mean %r?" % suggestions[0] if suggestions else ""


def _awaiting(state):
    node = state.node

    if not state.tokens:
        return _finish(state)

    token = state.tokens[0]
    state.index = state.position

    if not (is_short_option(token) or is_long_option(token)):
        if token in node.children and not state.bound:
            state.advance()
            result = parse(node.children[token], state.tokens, position=state.position)
            state.tokens.clear()
            if isinstance(result, ParseError):
                return state.fail(result)
            state.command = token
            state.subresult = result
            return _finish(state)

        if state.positionals:
            argument = state.positionals.popleft()
            state.bound = True
            return state.begin(argument, argument.display)

        if node.children:
            return state.fail(UnknownSubCommandError(
                "unknown subcommand %r at %s position" % (token, state.ordinal()),
                token=token,
                index=state.index,
                route=state.route,
                hint=("choose one of %s." % ", ".join(sorted(node.children)) + _suggest(token, node.children)).strip(),
            ))
        return state.fail(UnexpectedPositionalError(
            "unexpected positional argument %r at %s position" % (token, state.ordinal()),
            token=token,
            index=state.index,
            route=state.route,
            hint="remove this extra value; '%s' takes no more positionals" % state.route,
        ))

    argument = state.lookup(token)
    if argument is None:
        aliases = [alias for argument in node.arguments if not argument.positional for alias in argument.names]
        return state.fail(UnknownArgumentError(
            "unknown argument %r at %s position" % (token, state.ordinal()),
            token=token,
            index=state.index,
            route=state.route,
            hint=("'%s' does not declare it." % state.route + _suggest(token, aliases)),
        ))

    if argument in state.seen:
        return state.fail(DuplicateArgumentError(
            "argument %r at %s position was already provided" % (token, state.ordinal()),
            token=token,
            name=token,
            argument=argument,
            index=state.index,
            route=state.route,
            hint="keep a single %s; each argument can be given only once" % argument.display,
        ))

    state.advance()
    state.begin(argument, token)


def _consuming(state):
    argument = state.argument
    tokens = state.gather(argument.arity)
    value = apply(argument.action, tokens, state)
    if isinstance(value, ParseError):
        return state.fail(value)
    state.advance(argument.arity)
    state.record(argument, value)


def _finish(state):
    for argument in state.node.arguments:
        if argument.is_required and argument not in state.seen and not argument.has_default:
            return state.fail(MissingRequiredError(
                "missing required argument %s" % argument.display,
                name=argument.display,
                argument=argument,
                route=state.route,
                hint="provide %s when running '%s'" % (argument.format_usage(), state.route),
            ))
    for argument in state.node.arguments:
        if argument not in state.seen and argument.default is not Unset:
            state.values[argument.dest] = argument.default
    state.state = State.DONE


def parse(node, tokens, /, *, position=1):
    """
    Match `tokens` against `node` (and, through rule 1, its descendants).

    Parameters
    - node: ArgumentParser
    - tokens: Iterable[str]
    - position: 1-based position of the first token in the raw vector; used
      by nested calls so that errors keep pointing at the original token.

    Returns
    - ParseResult on success, the first ParseError otherwise.
    """
    state = ParseState(node, tokens, position)
    while state.state not in (State.DONE, State.FAILED):
        match state.state:
            case State.AWAITING_TOKEN:
                _awaiting(state)
            case State.CONSUMING_VALUE:
                _consuming(state)
    return state.result()


__all__ = (
    "State",
    "ParseState",
    "ParseResult",
    "parse",
)
