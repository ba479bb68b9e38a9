"""Version constraint evaluator — pure functions, no DB access.

A catalog entry stores its vulnerable range as a list of expressions that
must all hold, e.g. ``[">= 1.0.0", "< 1.5.0"]``.  Versions follow semantic
versioning as used by Go modules and npm: an optional ``v`` prefix, one to
three numeric segments (missing ones are zero), an optional pre-release
and optional build metadata.  Parsing and precedence go through
:mod:`semantic_version`; build metadata never affects comparison.

Operators: ``=``, ``!=``, ``>``, ``<``, ``>=``, ``<=`` and the pessimistic
``~>``.  Spellings listed in :data:`OPERATOR_ALIASES` are rewritten first.
A pre-release version only satisfies an ordering constraint that itself
names a pre-release of the same ``major.minor.patch``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from semantic_version import Version

# Catalog operator -> canonical operator.  Extend here to accept new spellings.
OPERATOR_ALIASES: dict[str, str] = {
    "==": "=",
    "~=": "~>",
    "≥": ">=",
    "≤": "<=",
    "≠": "!=",
}

_EXPR_RE = re.compile(r"^\s*(?P<op>~>|~=|==|!=|>=|<=|≥|≤|≠|=|>|<)?\s*(?P<version>\S+)\s*$")

_VERSION_RE = re.compile(
    r"^v?(?P<major>\d+)(?:\.(?P<minor>\d+))?(?:\.(?P<patch>\d+))?(?P<rest>[-+A-Za-z].*)?$"
)


@dataclass(frozen=True)
class ParsedVersion:
    """A semver value plus how many numeric segments were written out."""

    value: Version
    precision: int

    @property
    def core(self) -> tuple[int, int, int]:
        return self.value.major, self.value.minor, self.value.patch

    @property
    def is_prerelease(self) -> bool:
        return bool(self.value.prerelease)


def parse_version(raw: str) -> ParsedVersion | None:
    """Parse *raw* as a semantic version, or None if it is not one."""
    m = _VERSION_RE.match(raw.strip())
    if m is None:
        return None
    segments = [m.group("major"), m.group("minor"), m.group("patch")]
    precision = sum(s is not None for s in segments)
    core = ".".join(str(int(s)) if s is not None else "0" for s in segments)

    rest = m.group("rest") or ""
    if rest[:1].isalpha():
        # "1.0.0beta1" is shorthand for "1.0.0-beta1".
        rest = f"-{rest}"
    try:
        value = Version(f"{core}{rest}")
    except ValueError:
        return None
    return ParsedVersion(value.truncate("prerelease"), precision)


def _prerelease_allowed(v: ParsedVersion, c: ParsedVersion) -> bool:
    if v.is_prerelease and c.is_prerelease:
        return v.core == c.core
    return not v.is_prerelease


def _pessimistic(v: ParsedVersion, c: ParsedVersion) -> bool:
    if not _prerelease_allowed(v, c) or (c.is_prerelease and not v.is_prerelease):
        return False
    if v.value < c.value:
        return False
    # Every segment but the last written one is pinned.
    pinned = c.precision - 1
    return v.core[:pinned] == c.core[:pinned]


_CHECKS = {
    "=": lambda v, c: v.value == c.value,
    "!=": lambda v, c: v.value != c.value,
    ">": lambda v, c: _prerelease_allowed(v, c) and v.value > c.value,
    "<": lambda v, c: _prerelease_allowed(v, c) and v.value < c.value,
    ">=": lambda v, c: _prerelease_allowed(v, c) and v.value >= c.value,
    "<=": lambda v, c: _prerelease_allowed(v, c) and v.value <= c.value,
    "~>": _pessimistic,
}


@dataclass(frozen=True)
class Constraint:
    operator: str
    version: ParsedVersion

    def check(self, version: ParsedVersion) -> bool:
        return _CHECKS[self.operator](version, self.version)

    def __str__(self) -> str:
        return f"{self.operator}{self.version.value}"


def parse_expression(expr: str) -> Constraint | None:
    """Parse one range expression; a bare version means equality."""
    m = _EXPR_RE.match(expr)
    if m is None:
        return None
    version = parse_version(m.group("version"))
    if version is None:
        return None
    op = m.group("op") or "="
    return Constraint(OPERATOR_ALIASES.get(op, op), version)


def parse_constraints(constraints: list[str]) -> list[Constraint] | None:
    """Parse *constraints* as one comma-joined conjunction, or None if malformed."""
    if not constraints:
        return None
    parsed = [parse_expression(p) for p in ",".join(constraints).split(",")]
    if any(c is None for c in parsed):
        return None
    return parsed  # type: ignore[return-value]


def version_matches_constraints(version: str, constraints: list[str]) -> tuple[bool, bool]:
    """Return ``(matches, valid)`` for *version* against ANDed *constraints*.

    ``valid`` is False when either side fails to parse; ``matches`` is then
    False as well.  Otherwise ``matches`` is True iff every constraint holds.
    """
    v = parse_version(version)
    if v is None:
        return False, False

    parsed = parse_constraints(constraints)
    if parsed is None:
        return False, False

    return all(c.check(v) for c in parsed), True
