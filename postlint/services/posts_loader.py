import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import pydantic

from postlint.repos.authors_repo import load_authors
from postlint.repos.content_repo import FileContentRepo
from postlint.schemas.blog import Author, ValidatedPost
from postlint.schemas.validation import ErrorKind, LoadResult, ValidationError
from postlint.services.front_matter import FrontMatterError, parse_front_matter
from postlint.services.validator import validate_post
from postlint.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)

FileResult = Tuple[Optional[ValidatedPost], List[ValidationError]]


class PostsLoader:
    def __init__(
        self,
        repo: FileContentRepo,
        authors: Mapping[str, Author],
        *,
        workers: Optional[int] = None,
        words_per_minute: Optional[int] = None,
    ):
        self.repo = repo
        self.authors = authors
        self.workers = workers or default_settings.SCAN_WORKERS
        self.words_per_minute = words_per_minute or default_settings.WORDS_PER_MINUTE

    def load(self) -> LoadResult:
        """
        Parse and validate every post under the content root. A file that
        fails never stops the scan; its errors are collected instead.
        """
        files = self.repo.list_post_files()

        if self.workers > 1 and len(files) > 1:
            # Each file yields its own result; map() hands them back in file order
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                results = list(executor.map(self.load_file, files))
        else:
            results = [self.load_file(path) for path in files]

        posts: List[ValidatedPost] = []
        errors: List[ValidationError] = []
        for post, file_errors in results:
            if post is not None:
                posts.append(post)
            errors.extend(file_errors)

        posts = sort_posts(posts)
        logger.info(
            f"Checked {len(files)} file(s) in {self.repo.root}: "
            f"{len(posts)} valid, {len(errors)} error(s)"
        )
        return LoadResult(posts=posts, errors=errors, checked=len(files))

    def load_file(self, path: Path) -> FileResult:
        rel_path = self.repo.relative_path(path)
        try:
            text = self.repo.read_text(path)
            parsed = parse_front_matter(text)
        except (FrontMatterError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Failed to parse post {rel_path}: {e}")
            return None, [
                ValidationError(
                    path=rel_path,
                    kind=ErrorKind.MALFORMED_FRONT_MATTER,
                    field=None,
                    message=str(e),
                )
            ]

        try:
            return validate_post(
                rel_path,
                parsed,
                self.authors,
                words_per_minute=self.words_per_minute,
            )
        except pydantic.ValidationError as e:
            logger.warning(f"Post {rel_path} did not fit the post record: {e}")
            first = e.errors()[0]
            return None, [
                ValidationError(
                    path=rel_path,
                    kind=ErrorKind.INVALID_FIELD,
                    field=".".join(str(part) for part in first["loc"]) or None,
                    message=first["msg"],
                )
            ]


def sort_posts(posts: Iterable[ValidatedPost]) -> List[ValidatedPost]:
    """Newest first; ties keep a stable order by path."""
    by_path = sorted(posts, key=lambda p: p.path)
    return sorted(by_path, key=lambda p: p.date, reverse=True)


def production_posts(
    posts: Iterable[ValidatedPost], include_drafts: bool = False
) -> List[ValidatedPost]:
    """The set the generator renders: drafts only when explicitly requested."""
    return [post for post in posts if include_drafts or not post.draft]


def build_loader(
    content_dir: Path | str | None = None,
    authors_dir: Path | str | None = None,
    *,
    workers: Optional[int] = None,
    current_settings: Optional[Settings] = None,
) -> PostsLoader:
    current_settings = current_settings or default_settings
    repo = FileContentRepo(
        content_dir or current_settings.CONTENT_DIR,
        extensions=current_settings.CONTENT_EXTENSIONS,
        section_index_name=current_settings.SECTION_INDEX_NAME,
    )
    authors = load_authors(authors_dir or current_settings.AUTHORS_DIR)
    return PostsLoader(
        repo,
        authors,
        workers=workers or current_settings.SCAN_WORKERS,
        words_per_minute=current_settings.WORDS_PER_MINUTE,
    )


def load(
    content_dir: Path | str,
    authors_dir: Path | str | None = None,
    *,
    workers: Optional[int] = None,
) -> LoadResult:
    """Validate a content directory and return its posts and errors."""
    return build_loader(content_dir, authors_dir, workers=workers).load()


def find_post(posts: Iterable[ValidatedPost], slug: str) -> Optional[ValidatedPost]:
    lookup: Dict[str, ValidatedPost] = {post.slug: post for post in posts}
    return lookup.get(slug.strip("/"))
