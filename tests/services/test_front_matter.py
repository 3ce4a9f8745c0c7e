import datetime
import textwrap

import pytest

from postlint.services.front_matter import (
    FrontMatterError,
    TomlFrontMatter,
    YamlFrontMatter,
    detect_format,
    parse_front_matter,
)
from tests.conftest import TOML_POST, YAML_POST


def _text(raw: str) -> str:
    return textwrap.dedent(raw).lstrip()


def test_detect_format_picks_strategy_by_delimiter():
    assert isinstance(detect_format(_text(TOML_POST)), TomlFrontMatter)
    assert isinstance(detect_format(_text(YAML_POST)), YamlFrontMatter)
    assert detect_format("# Just a heading\n") is None


def test_toml_taxonomies_are_lifted_to_top_level():
    parsed = parse_front_matter(_text(TOML_POST))

    assert parsed.format == "toml"
    assert parsed.metadata["title"] == "Parser combinators in F#"
    assert parsed.metadata["authors"] == ["Jane Doe"]
    assert parsed.metadata["tags"] == ["fsharp", "parsing"]
    assert parsed.metadata["categories"] == ["functional"]
    assert parsed.extra == {"toc": True}
    assert parsed.content == "Parsers are functions from input to a result."


def test_yaml_author_scalar_maps_to_authors():
    parsed = parse_front_matter(_text(YAML_POST))

    assert parsed.format == "yaml"
    assert parsed.metadata["authors"] == "Ada"
    assert parsed.metadata["categories"] == ["functional", "dotnet"]
    assert parsed.metadata["date"] == datetime.date(2023, 5, 10)


def test_both_notations_normalize_to_the_same_keys():
    toml_text = """
    +++
    title = "Same"
    date = 2024-01-02
    [taxonomies]
    tags = ["a"]
    authors = ["Ada"]
    +++
    body
    """
    yaml_text = """
    ---
    title: Same
    date: 2024-01-02
    tags: [a]
    authors: [Ada]
    ---
    body
    """
    toml_meta = parse_front_matter(_text(toml_text)).metadata
    yaml_meta = parse_front_matter(_text(yaml_text)).metadata

    assert set(toml_meta) == set(yaml_meta)
    assert toml_meta["tags"] == yaml_meta["tags"] == ["a"]
    assert toml_meta["authors"] == yaml_meta["authors"] == ["Ada"]


def test_yaml_prefers_authors_over_author():
    parsed = parse_front_matter(
        _text(
            """
            ---
            title: Both
            author: Solo
            authors: [Ada, Bob]
            ---
            """
        )
    )
    assert parsed.metadata["authors"] == ["Ada", "Bob"]
    assert "author" not in parsed.extra


def test_unknown_yaml_keys_pass_through_as_extra():
    parsed = parse_front_matter(
        _text(
            """
            ---
            title: Extra
            image: /img/cover.png
            extra:
              toc: false
            ---
            """
        )
    )
    assert parsed.extra == {"toc": False, "image": "/img/cover.png"}
    assert "image" not in parsed.metadata


def test_leading_bom_and_blank_lines_are_ignored():
    parsed = parse_front_matter("\ufeff\n\n" + _text(YAML_POST))
    assert parsed.metadata["title"] == "Computation expressions"


def test_empty_block_yields_empty_metadata():
    parsed = parse_front_matter("---\n---\nbody only\n")
    assert parsed.metadata == {}
    assert parsed.content == "body only"


def test_body_horizontal_rule_is_not_a_delimiter():
    parsed = parse_front_matter(
        _text(
            """
            ---
            title: Rules
            ---
            first

            ---

            second
            """
        )
    )
    assert "second" in parsed.content
    assert parsed.metadata["title"] == "Rules"


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ("Just text, no block\n", "no front matter block"),
        ("---\ntitle: never closed\n", "unterminated yaml"),
        ("---\ntitle: [unclosed\n---\nbody\n", "invalid yaml"),
        ('+++\ntitle = "x\n+++\nbody\n', "invalid toml"),
        ("---\n- a\n- b\n---\nbody\n", "must be a mapping"),
        ('+++\ntaxonomies = "tags"\n+++\n', "'taxonomies' must be a table"),
        ("---\nextra: [1, 2]\n---\n", "'extra' must be a table"),
    ],
)
def test_unusable_front_matter_raises(raw, message):
    with pytest.raises(FrontMatterError) as exc:
        parse_front_matter(raw)
    assert message in str(exc.value)


def test_yaml_impossible_date_stays_a_string():
    parsed = parse_front_matter("---\ntitle: Bad\ndate: 2024-13-45\n---\nbody\n")
    assert parsed.metadata["date"] == "2024-13-45"


def test_toml_impossible_date_stays_a_string():
    parsed = parse_front_matter('+++\ntitle = "Bad"\ndate = 2024-13-45\n+++\nbody\n')
    assert parsed.metadata["date"] == "2024-13-45"


def test_toml_valid_dates_still_decode():
    parsed = parse_front_matter('+++\ntitle = "Ok"\ndate = 2024-01-02\n+++\n')
    assert parsed.metadata["date"] in (
        datetime.date(2024, 1, 2),
        datetime.datetime(2024, 1, 2),
    )


def test_non_string_keys_are_stringified_in_extra():
    parsed = parse_front_matter(
        "---\ntitle: Keys\n2024: note\nextra:\n  7: seven\n---\n"
    )
    assert parsed.extra == {"2024": "note", "7": "seven"}
