"""
argtree name sets and token classification.

Overview
- Names: the ordered alias set of one argument. Answers membership tests and
  picks the canonical short (-x) and long (--xyz) forms used for display.
- is_dashed / is_short_option / is_long_option: bit-exact token classes used by
  the parse engine.

Canonical forms
- A name set whose first alias is bare (no leading '-') is positional; the
  alias is then both its short and its long form and must stand alone.
- Otherwise the short form is the first alias of length 2 whose second
  character is not '-', and the long form is the first alias longer than 2
  whose second character is '-'. First match in declaration order wins.
- A missing form falls back to the first declared alias. Sets that cannot
  produce either form are rejected at construction (NoUsableAliasError); sets
  whose first alias is neither form still work but emit DegradedNameWarning,
  since any fallback will then display a malformed alias.

Quick example
    >>> names = Names("-v", "--verbose", "--loud")
    >>> names.short, names.long, "--loud" in names
    ('-v', '--verbose', True)
"""
from .faults import *


def is_dashed(token, /):
    """
    return True when the token starts with '-'.
    """
    return token.startswith("-")


def is_short_option(token, /):
    """
    return True for '-x' shaped tokens: length >= 2, a single '-' and then a
    character other than '-'.
    """
    return len(token) >= 2 and token[0] == "-" and token[1] != "-"


def is_long_option(token, /):
    """
    return True for tokens starting with '--'.
    """
    return token.startswith("--")


def _is_short_form(name):
    return len(name) == 2 and name[0] == "-" and name[1] != "-"


def _is_long_form(name):
    return len(name) > 2 and name[0] == "-" and name[1] == "-"


class Names:
    """
    Ordered, immutable alias set of a single argument or positional.

    Construction validates the aliases (see module docstring); afterwards the
    set only answers questions: membership, canonical display forms and
    iteration in declaration order.
    """
    __slots__ = ("_aliases",)

    def __init__(self, *aliases, **options):
        """
        Validate `aliases` (several str, or one iterable of str).

        `options` are the runtime options (shell, colorful, fancy, prog) used
        to surface DegradedNameWarning; ArgumentParser.add_argument passes
        its own.
        """
        if len(aliases) == 1 and not isinstance(aliases[0], str):
            aliases = tuple(aliases[0])
        if not aliases:
            raise InvalidNameError("an argument must specify at least one name")

        seen = []
        for alias in aliases:
            if not isinstance(alias, str):
                raise InvalidNameError("argument names must be strings, not %r" % type(alias).__name__)
            elif not alias or alias != alias.strip() or any(char.isspace() for char in alias):
                raise InvalidNameError("argument name %r cannot be empty or contain whitespace" % alias)
            elif alias in seen:
                raise DuplicateNameError("argument name %r is declared twice" % alias, name=alias)
            seen.append(alias)

        if not is_dashed(seen[0]) and len(seen) > 1:
            raise InvalidNameError(
                "positional argument %r cannot have aliases (%s)" % (seen[0], ", ".join(map(repr, seen[1:]))),
                name=seen[0]
            )
        if is_dashed(seen[0]) and any(not is_dashed(alias) for alias in seen):
            raise InvalidNameError("named argument %r cannot mix positional aliases" % seen[0], name=seen[0])

        object.__setattr__(self, "_aliases", tuple(seen))

        if self.positional:
            return

        if not any(_is_short_form(alias) or _is_long_form(alias) for alias in seen):
            raise NoUsableAliasError(
                "argument %s has neither a short (-x) nor a long (--name) form" % " | ".join(seen),
                name=seen[0]
            )

        if not (_is_short_form(seen[0]) or _is_long_form(seen[0])):
            trigger(DegradedNameWarning(
                "argument name %r is neither a short (-x) nor a long (--name) form" % seen[0],
                hint="declare a '-x' or '--name' alias first to keep help output canonical",
            ), **options)

    def __setattr__(self, name, value, /):
        raise AttributeError("name sets are immutable")

    @property
    def positional(self):
        """
        True when the set denotes a positional argument (first alias is bare).
        """
        return not is_dashed(self._aliases[0])

    @property
    def short(self):
        """
        canonical short form ('-x'), the positional name, or the first alias.
        """
        if self.positional:
            return self._aliases[0]
        for alias in self._aliases:
            if _is_short_form(alias):
                return alias
        return self._aliases[0]

    @property
    def long(self):
        """
        canonical long form ('--xyz'), the positional name, or the first alias.
        """
        if self.positional:
            return self._aliases[0]
        for alias in self._aliases:
            if _is_long_form(alias):
                return alias
        return self._aliases[0]

    @property
    def dest(self):
        """
        destination key used in parse results: the long form (or the short form
        when no long form exists) without leading dashes, '-' turned into '_'.
        """
        if self.positional:
            return self._aliases[0].replace("-", "_")
        for alias in self._aliases:
            if _is_long_form(alias):
                return alias.lstrip("-").replace("-", "_")
        return self.short.lstrip("-").replace("-", "_")

    def contains(self, token, /):
        return token in self._aliases

    def __contains__(self, token, /):
        return self.contains(token)

    def __iter__(self):
        return iter(self._aliases)

    def __len__(self):
        return len(self._aliases)

    def __getitem__(self, index, /):
        return self._aliases[index]

    def __eq__(self, other):
        if not isinstance(other, Names):
            return NotImplemented
        return self._aliases == other._aliases

    def __hash__(self):
        return hash(self._aliases)

    def __repr__(self):
        return "names(%s)" % ", ".join(map(repr, self._aliases))


__all__ = (
    "Names",
    "is_dashed",
    "is_short_option",
    "is_long_option",
)
