"""
argtree actions: what an argument does with the tokens that follow it.

The action set is closed and known up front:
- Flag():          presence-only, arity 0, records True.
- Value(arity=1):  consumes exactly `arity` tokens and records them (a single
                   token for arity 1, a tuple otherwise).

Actions are immutable, hashable values. The engine threads all mutable state
through a ParseState; apply() pattern-matches on the variant and returns the
recorded value, or a ParseError describing why the tokens were not enough.
"""
from typing import final

from .faults import *
from .utils import *


@final
class Flag:
    """
    presence-only action (arity 0).
    """
    __slots__ = ()
    __match_args__ = ()

    arity = 0

    def __eq__(self, other):
        if not isinstance(other, Flag):
            return NotImplemented
        return True

    def __hash__(self):
        return hash(Flag)

    def __repr__(self):
        return "flag()"


@final
class Value:
    """
    value-bearing action consuming exactly `arity` (>= 1) tokens.
    """
    __slots__ = ("_arity",)
    __match_args__ = ("arity",)

    def __init__(self, arity=1):
        if not isinstance(arity, int) or isinstance(arity, bool):
            raise TypeError("value 'arity' must be an integer")
        if arity < 1:
            raise ValueError("value 'arity' must be a positive integer")
        object.__setattr__(self, "_arity", arity)

    def __setattr__(self, name, value, /):
        raise AttributeError("actions are immutable")

    @property
    def arity(self):
        return self._arity

    def __eq__(self, other):
        if not isinstance(other, Value):
            return NotImplemented
        return self.arity == other.arity

    def __hash__(self):
        return hash((Value, self.arity))

    def __repr__(self):
        return "value(arity=%d)" % self.arity


def _convert(argument, token, state):
    """
    run the argument's converter and choices check over one raw token.
    """
    try:
        value = argument.type(token)
    except (TypeError, ValueError) as exception:
        name = getattr(argument.type, "__name__", "converter")
        return InvalidValueError(
            "invalid %s value %r for %s at %s position" % (name, token, state.input, state.ordinal()),
            token=token,
            name=state.input,
            argument=argument,
            index=state.index,
            route=state.route,
            hint="pass a value that %s() accepts (%s)" % (name, exception),
        )
    if argument.choices and value not in argument.choices:
        return InvalidChoiceError(
            "invalid choice %r for %s at %s position" % (token, state.input, state.ordinal()),
            token=token,
            name=state.input,
            argument=argument,
            index=state.index,
            route=state.route,
            hint="choose from %s" % ", ".join(map(repr, argument.choices)),
        )
    return value


def apply(action, tokens, state, /):
    """
    apply an action to the value tokens gathered for it.

    parameters
    - action: Flag | Value
    - tokens: Sequence[str]
      candidate value tokens the engine found after the argument (already
      stripped of anything that is a recognized option). flags ignore them.
    - state: ParseState
      supplies the argument being consumed, position and route for messages.

    returns
    - the recorded value: True for flags, the converted token (arity 1) or a
      tuple of converted tokens (arity > 1) for values.
    - a ParseError (MissingValueError, InvalidValueError, InvalidChoiceError)
      when the tokens cannot satisfy the action. nothing is raised.
    """
    argument = state.argument
    match action:
        case Flag():
            return True
        case Value(arity):
            if len(tokens) < arity:
                return MissingValueError(
                    "%s at %s position expects %s but got %d" % (
                        state.input, state.ordinal(), pluralize("value", arity), len(tokens)
                    ),
                    name=state.input,
                    argument=argument,
                    index=state.index,
                    route=state.route,
                    hint="provide %s after %s" % (pluralize("value", arity), state.input),
                )
            values = []
            for token in tokens[:arity]:
                value = _convert(argument, token, state)
                if isinstance(value, ParseError):
                    return value
                values.append(value)
            return values[0] if arity == 1 else tuple(values)
        case _:
            raise TypeError("unexpected action %r" % (action,))


__all__ = (
    "Flag",
    "Value",
    "apply",
)
