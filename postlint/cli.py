"""Command line entry point used by the build step."""

import json
import logging
from pathlib import Path
from typing import List, Optional

import typer

from postlint.schemas.validation import ErrorKind
from postlint.services.posts_loader import build_loader, production_posts
from postlint.settings import settings

app = typer.Typer(
    name="postlint",
    help="Validate static-site front matter before the generator runs.",
    no_args_is_help=True,
)

logger = logging.getLogger(__name__)


def setup_logging(level: Optional[str] = None):
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _require_dir(path: Path):
    if not path.is_dir():
        typer.echo(f"Content directory not found: {path}", err=True)
        raise typer.Exit(2)


@app.command("check")
def check(
    content_dir: Optional[Path] = typer.Argument(
        None, help="Content root (defaults to CONTENT_DIR)"
    ),
    authors_dir: Optional[Path] = typer.Option(
        None, "--authors-dir", help="Author records directory (defaults to AUTHORS_DIR)"
    ),
    fail_on: Optional[List[ErrorKind]] = typer.Option(
        None,
        "--fail-on",
        help="Error kinds that fail the build (repeatable; defaults to FAIL_ON)",
    ),
    workers: Optional[int] = typer.Option(
        None, "--workers", min=1, help="Parallel file readers"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print the report as JSON"),
    log_level: Optional[str] = typer.Option(None, "--log-level"),
):
    """Validate every post and exit non-zero when a fatal error is found."""
    setup_logging(log_level)
    content_dir = content_dir or settings.content_path
    _require_dir(content_dir)

    loader = build_loader(content_dir, authors_dir, workers=workers)
    result = loader.load()
    policy = list(fail_on) if fail_on else settings.FAIL_ON
    report = result.report(policy)

    if as_json:
        typer.echo(report.model_dump_json(indent=2))
    else:
        for error in report.errors:
            typer.echo(str(error))
        counts = ", ".join(f"{kind}={n}" for kind, n in sorted(report.counts.items()))
        typer.echo(
            f"Checked {report.checked} file(s): {report.valid} valid, "
            f"{len(report.errors)} error(s)" + (f" ({counts})" if counts else "")
        )

    if report.failed:
        raise typer.Exit(1)


@app.command("posts")
def list_posts(
    content_dir: Optional[Path] = typer.Argument(
        None, help="Content root (defaults to CONTENT_DIR)"
    ),
    authors_dir: Optional[Path] = typer.Option(None, "--authors-dir"),
    drafts: bool = typer.Option(
        False, "--drafts", "-D", help="Include posts marked as drafts"
    ),
    as_json: bool = typer.Option(False, "--json"),
):
    """List the posts that would be rendered, newest first."""
    setup_logging()
    content_dir = content_dir or settings.content_path
    _require_dir(content_dir)

    result = build_loader(content_dir, authors_dir).load()
    posts = production_posts(result.posts, drafts or settings.INCLUDE_DRAFTS)

    if as_json:
        typer.echo(
            json.dumps([post.summary().model_dump(mode="json") for post in posts], indent=2)
        )
        return

    for post in posts:
        marker = " [draft]" if post.draft else ""
        typer.echo(f"{post.date.date().isoformat()}  {post.slug}  {post.title}{marker}")


if __name__ == "__main__":
    app()
