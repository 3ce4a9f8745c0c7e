import datetime
import logging
from typing import Any, List, Mapping, Optional, Tuple

from postlint.schemas.blog import Author, ValidatedPost
from postlint.schemas.validation import ErrorKind, ValidationError
from postlint.services.front_matter import ParsedFrontMatter
from postlint.utils import calculate_reading_time, count_words, normalize_slug

logger = logging.getLogger(__name__)

_MISSING = object()


def coerce_timestamp(value: Any) -> datetime.datetime:
    """
    Turn a YAML/TOML date value into an aware datetime. Naive values are
    taken as UTC so posts with and without offsets sort together.
    """
    if isinstance(value, datetime.datetime):
        parsed = value
    elif isinstance(value, datetime.date):
        parsed = datetime.datetime.combine(value, datetime.time())
    elif isinstance(value, str) and value.strip():
        parsed = datetime.datetime.fromisoformat(value.strip())
    else:
        raise ValueError(f"not a timestamp: {value!r}")

    offset = parsed.utcoffset()
    if offset is None:
        return parsed.replace(tzinfo=datetime.timezone.utc)
    # toml returns its own tzinfo class; pin it to a plain fixed offset
    return parsed.replace(tzinfo=datetime.timezone(offset))


def as_entry_list(value: Any) -> Optional[List[Optional[str]]]:
    """A scalar string is a one-item list; ``None`` members are kept so they can be reported."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, (list, tuple)):
        return [item if item is None or isinstance(item, str) else str(item) for item in value]
    return None


def _error(path: str, kind: ErrorKind, field: Optional[str], message: str):
    return ValidationError(path=path, kind=kind, field=field, message=message)


def check_title(path: str, meta: dict) -> Tuple[Optional[str], List[ValidationError]]:
    title = meta.get("title")
    if title is None or (isinstance(title, str) and not title.strip()):
        return None, [
            _error(path, ErrorKind.MISSING_FIELD, "title", "title is missing or empty")
        ]
    if not isinstance(title, str):
        return None, [
            _error(
                path,
                ErrorKind.INVALID_FIELD,
                "title",
                f"title must be a string, got {type(title).__name__}",
            )
        ]
    return title, []


def check_dates(path: str, meta: dict):
    errors = []
    date = updated = None

    raw_date = meta.get("date", _MISSING)
    if raw_date is _MISSING or raw_date is None:
        errors.append(
            _error(path, ErrorKind.MISSING_FIELD, "date", "date is missing")
        )
    else:
        try:
            date = coerce_timestamp(raw_date)
        except ValueError:
            errors.append(
                _error(
                    path,
                    ErrorKind.MALFORMED_DATE,
                    "date",
                    f"date {raw_date!r} is not a valid timestamp",
                )
            )

    raw_updated = meta.get("updated")
    if raw_updated is not None:
        try:
            updated = coerce_timestamp(raw_updated)
        except ValueError:
            errors.append(
                _error(
                    path,
                    ErrorKind.MALFORMED_DATE,
                    "updated",
                    f"updated {raw_updated!r} is not a valid timestamp",
                )
            )
    return date, updated, errors


def check_taxonomy(path: str, meta: dict, field: str):
    entries = as_entry_list(meta.get(field))
    if entries is None:
        return [], [
            _error(
                path,
                ErrorKind.INVALID_FIELD,
                field,
                f"{field} must be a list of strings",
            )
        ]

    errors = [
        _error(
            path,
            ErrorKind.EMPTY_TAXONOMY_ENTRY,
            field,
            f"{field}[{index}] is an empty string; remove it or use an empty list",
        )
        for index, entry in enumerate(entries)
        if entry is None or not entry.strip()
    ]
    return [entry for entry in entries if entry is not None], errors


def check_authors(path: str, meta: dict, authors: Mapping[str, Author]):
    entries = as_entry_list(meta.get("authors"))
    if entries is None:
        return [], [
            _error(
                path,
                ErrorKind.INVALID_FIELD,
                "authors",
                "authors must be a list of author names",
            )
        ]

    errors = [
        _error(
            path,
            ErrorKind.UNRESOLVED_AUTHOR,
            "authors",
            f"no author record named {name!r}",
        )
        for name in entries
        if name is None or name not in authors
    ]
    return [name for name in entries if name is not None], errors


def check_optional_types(path: str, meta: dict):
    errors = []
    expected = {
        "draft": (bool,),
        "description": (str,),
        "template": (str,),
        "slug": (str,),
        "weight": (int,),
    }
    for field, types in expected.items():
        value = meta.get(field)
        if value is None:
            continue
        # bool is an int subclass; a weight of `true` is still a mistake
        if not isinstance(value, types) or (field == "weight" and isinstance(value, bool)):
            errors.append(
                _error(
                    path,
                    ErrorKind.INVALID_FIELD,
                    field,
                    f"{field} must be {types[0].__name__}, got {type(value).__name__}",
                )
            )
    return errors


def validate_post(
    path: str,
    parsed: ParsedFrontMatter,
    authors: Mapping[str, Author],
    *,
    words_per_minute: int = 200,
) -> Tuple[Optional[ValidatedPost], List[ValidationError]]:
    """
    Apply every rule to one parsed file. All failures are collected; a post is
    only returned when there are none.
    """
    meta = parsed.metadata

    title, errors = check_title(path, meta)
    date, updated, date_errors = check_dates(path, meta)
    errors += date_errors
    tags, tag_errors = check_taxonomy(path, meta, "tags")
    categories, category_errors = check_taxonomy(path, meta, "categories")
    errors += tag_errors + category_errors
    post_authors, author_errors = check_authors(path, meta, authors)
    errors += author_errors
    errors += check_optional_types(path, meta)

    if "draft" not in meta:
        logger.debug(f"{path}: no draft flag, treating as published")

    if errors:
        logger.warning(f"{path}: {len(errors)} validation error(s)")
        return None, errors

    post = ValidatedPost(
        path=path,
        slug=normalize_slug(path, meta.get("slug")),
        title=title,
        description=meta.get("description"),
        date=date,
        updated=updated,
        draft=meta.get("draft") or False,
        authors=post_authors,
        tags=tags,
        categories=categories,
        template=meta.get("template"),
        weight=meta.get("weight"),
        front_matter_format=parsed.format,
        word_count=count_words(parsed.content),
        reading_time=calculate_reading_time(parsed.content, words_per_minute),
        extra=parsed.extra,
        content=parsed.content,
    )
    return post, []
