import json
import textwrap
from pathlib import Path

import pytest

from postlint.schemas.validation import LoadResult


def write_post(root: Path, rel_path: str, text: str) -> Path:
    """Write a content file, dedenting the test literal like real front matter."""
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text).lstrip(), encoding="utf-8")
    return path


def write_author(authors_dir: Path, filename: str, data: dict) -> Path:
    authors_dir.mkdir(parents=True, exist_ok=True)
    path = authors_dir / filename
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


@pytest.fixture
def content_dir(tmp_path) -> Path:
    path = tmp_path / "content"
    path.mkdir()
    return path


@pytest.fixture
def authors_dir(tmp_path) -> Path:
    path = tmp_path / "authors"
    write_author(path, "jane-doe.json", {"name": "Jane Doe", "bio": "Writes about monads"})
    write_author(path, "ada.json", {"name": "Ada", "links": ["https://example.com"]})
    return path


TOML_POST = """
+++
title = "Parser combinators in F#"
description = "Building parsers from small pieces"
date = 2023-03-01
draft = false
template = "post.html"

[taxonomies]
authors = ["Jane Doe"]
tags = ["fsharp", "parsing"]
categories = ["functional"]

[extra]
toc = true
+++
Parsers are functions from input to a result.
"""

YAML_POST = """
---
title: Computation expressions
date: 2023-05-10
draft: false
author: Ada
tags: [fsharp]
categories: [functional, dotnet]
---
A computation expression is syntactic sugar over a builder.
"""


class FakeLoader:
    """
    Minimal PostsLoader stand-in for router tests.
    """

    def __init__(self, result: LoadResult | None = None, exc: Exception | None = None):
        self.result = result or LoadResult()
        self.exc = exc
        self.calls = 0

    def load(self) -> LoadResult:
        self.calls += 1
        if self.exc:
            raise self.exc
        return self.result
