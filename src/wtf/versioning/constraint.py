"""Version constraints such as ``">= 1.0.0, < 2.0.0"`` or ``"~> 1.5"``.

A constraint is a conjunction of clauses. Each clause pairs an operator with
a version. The pessimistic operator ``~>`` keeps the number of segments
written in the clause: ``~> 1.0`` allows anything below 2.0.0, ``~> 1.0.0``
anything below 1.1.0.

Pre-release versions only satisfy a constraint that explicitly names a
pre-release of the same major.minor.patch; ``>= 1.0.0`` never selects
``2.0.0-alpha``.
"""

import operator
import re
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Tuple

from wtf.errors import ConstraintError, VersionParseError
from wtf.versioning.models import Version, is_prerelease, parse_version

_CLAUSE_RE = re.compile(r"^\s*(?P<op>~>|>=|<=|!=|=|>|<)?\s*(?P<version>\S+)\s*$")

_OPERATORS: Dict[str, Callable[[Version, Version], bool]] = {
    "=": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
}


def _core(version: Version) -> Tuple[int, int, int]:
    return (version.major, version.minor, version.patch)


def _segment_count(text: str) -> int:
    core = text.lstrip("v").split("-", 1)[0].split("+", 1)[0]
    return len(core.split("."))


@dataclass(frozen=True)
class Clause:
    """A single ``<operator> <version>`` comparison."""

    op: str
    version: Version
    original: str
    segments: int = 3

    @property
    def upper_bound(self) -> Optional[Version]:
        """Exclusive upper bound of a pessimistic clause, if any."""
        if self.op != "~>" or self.segments < 2:
            return None
        if self.segments == 2:
            return Version(major=self.version.major + 1, minor=0, patch=0)
        return Version(major=self.version.major, minor=self.version.minor + 1, patch=0)

    def check(self, version: Version) -> bool:
        if self.op == "~>":
            if version < self.version:
                return False
            upper = self.upper_bound
            # pre-releases of the bound itself are outside the range
            return upper is None or _core(version) < _core(upper)
        return _OPERATORS[self.op](version, self.version)

    def __str__(self) -> str:
        return f"{self.op} {self.original}"


class Constraint:
    """Immutable conjunction of clauses; the empty constraint matches everything."""

    __slots__ = ("_clauses",)

    def __init__(self, clauses: Iterable[Clause] = ()):
        self._clauses: Tuple[Clause, ...] = tuple(clauses)

    @classmethod
    def parse(cls, text: Optional[str]) -> "Constraint":
        """Parse a comma-separated constraint string.

        Raises:
            ConstraintError: On an unknown operator or malformed version.
        """
        if text is None or not text.strip():
            return cls()
        clauses = []
        for raw in text.split(","):
            m = _CLAUSE_RE.match(raw)
            if not m:
                raise ConstraintError(f"malformed constraint: {text!r}")
            op = m.group("op") or "="
            version_text = m.group("version")
            try:
                version = parse_version(version_text)
            except VersionParseError as exc:
                raise ConstraintError(f"malformed constraint: {raw.strip()!r}") from exc
            clauses.append(Clause(op, version, version_text, _segment_count(version_text)))
        return cls(clauses)

    @property
    def clauses(self) -> Tuple[Clause, ...]:
        return self._clauses

    def is_empty(self) -> bool:
        return not self._clauses

    def _allows_prerelease_of(self, version: Version) -> bool:
        return any(
            is_prerelease(clause.version) and _core(clause.version) == _core(version)
            for clause in self._clauses
        )

    def check(self, version: Version) -> bool:
        """Return True when ``version`` satisfies every clause."""
        if self.is_empty():
            return True
        if is_prerelease(version) and not self._allows_prerelease_of(version):
            return False
        return all(clause.check(version) for clause in self._clauses)

    def __contains__(self, version: Version) -> bool:
        return self.check(version)

    def __str__(self) -> str:
        return ", ".join(str(clause) for clause in self._clauses)

    def __repr__(self) -> str:
        return f"Constraint({str(self)!r})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, Constraint):
            return NotImplemented
        return self._clauses == other._clauses

    def __hash__(self) -> int:
        return hash(self._clauses)
