from collections import Counter
from enum import Enum
from typing import Dict, Iterable, List, Optional

from pydantic import BaseModel, Field

from postlint.schemas.blog import ValidatedPost


class ErrorKind(str, Enum):
    MISSING_FIELD = "MissingField"
    MALFORMED_DATE = "MalformedDate"
    EMPTY_TAXONOMY_ENTRY = "EmptyTaxonomyEntry"
    UNRESOLVED_AUTHOR = "UnresolvedAuthor"
    INVALID_FIELD = "InvalidField"
    MALFORMED_FRONT_MATTER = "MalformedFrontMatter"


class ValidationError(BaseModel):
    """One broken rule in one content file."""

    path: str
    kind: ErrorKind
    field: Optional[str] = None
    message: str

    def __str__(self) -> str:
        location = f"{self.path}:{self.field}" if self.field else self.path
        return f"{location}: [{self.kind.value}] {self.message}"


class ValidationReport(BaseModel):
    checked: int
    valid: int
    errors: List[ValidationError] = Field(default_factory=list)
    counts: Dict[str, int] = Field(default_factory=dict)
    fatal: int = 0
    failed: bool = False


class LoadResult(BaseModel):
    posts: List[ValidatedPost] = Field(default_factory=list)
    errors: List[ValidationError] = Field(default_factory=list)
    checked: int = 0

    @property
    def ok(self) -> bool:
        return not self.errors

    def invalid_paths(self) -> List[str]:
        return list(dict.fromkeys(err.path for err in self.errors))

    def report(self, fail_on: Optional[Iterable[str]] = None) -> ValidationReport:
        """
        Summarize the batch. ``fail_on`` names the error kinds that fail the
        build; by default every kind is fatal.
        """
        fatal_kinds = (
            {ErrorKind(kind) for kind in fail_on}
            if fail_on is not None
            else set(ErrorKind)
        )
        counts = Counter(err.kind.value for err in self.errors)
        fatal = sum(1 for err in self.errors if err.kind in fatal_kinds)
        return ValidationReport(
            checked=self.checked,
            valid=len(self.posts),
            errors=list(self.errors),
            counts=dict(counts),
            fatal=fatal,
            failed=fatal > 0,
        )
