from pathlib import Path

import pytest

from bibkeep.core.errors import (
    DuplicateFieldError,
    DuplicateKeyError,
    DuplicateMacroError,
    ParseError,
    UnterminatedStringError,
)
from bibkeep.domain.models.bibliography import BibDatabase, Macro
from bibkeep.infrastructure.parsers.bibtex_parser import parse_bibtex, try_parse_bibtex

SAMPLE = Path(__file__).resolve().parents[1] / "fixtures" / "sample.bib"


def test_parse_sample_file() -> None:
    db = parse_bibtex(SAMPLE.read_text(encoding="utf-8"))

    assert db.preamble == [
        ['"\\def\\leftbrace{{\\ifusingtt{\\char123}{\\ensuremath\\lbrace}}}"'],
        ["{\\def\\rightbrace{{\\ifusingtt{\\char125}{\\ensuremath\\rbrace}}}}"],
    ]
    assert list(db.strings) == ["AAp", "AApL", "ApJ", "ApJL", "and", "Foy", "Labeyrie"]
    assert db.strings["and"] == ['" and "']
    assert db.strings["AAp"] == ["{Astronomy \\& Astrophysics}"]
    assert db.strings["AApL"] == [Macro("AAp"), "{ Letters}"]
    assert db.strings["Labeyrie"] == ['"Labeyrie, Antoine"']

    assert list(db.entries) == ["Foy_Labeyrie-1985-LGS", "Labeyrie-1975-Vega", "Goodman2005"]

    entry = db.entries["Foy_Labeyrie-1985-LGS"]
    assert entry.type == "article"
    assert entry.key == "Foy_Labeyrie-1985-LGS"
    assert entry["author"] == [Macro("Foy"), Macro("and"), Macro("Labeyrie")]
    assert entry["journal"] == [Macro("AAp")]
    assert entry["year"] == [1985]

    vega = db.entries["Labeyrie-1975-Vega"]
    assert vega["title"] == ["{Interference fringes obtained on {V}ega with two optical telescopes}"]
    assert vega["volume"] == [196]
    assert vega["number"] == [2]
    assert vega["doi"] == ["{10.1086/181747}"]

    book = db.entries["Goodman2005"]
    assert book.type == "book"
    assert book["title"] == ['"Introduction to {F}ourier Optics"']


def test_example_scenario() -> None:
    db = parse_bibtex('@string{and = " and "}\n@article{k1, author = {A} # and # {B}, year = 1999}')

    assert db.strings == {"and": ['" and "']}
    entry = db.entries["k1"]
    assert entry.type == "article"
    assert entry.fields == {"author": ["{A}", Macro("and"), "{B}"], "year": [1999]}


def test_case_normalization() -> None:
    db = parse_bibtex("@STRING{MyMacro = {x}}\n@InProceedings{CamelKey, TiTlE = MyMacro}")

    assert list(db.strings) == ["MyMacro"]
    entry = db.entries["CamelKey"]
    assert entry.type == "inproceedings"
    assert list(entry.fields) == ["title"]
    assert entry["title"] == [Macro("MyMacro")]


def test_parenthesis_delimiters() -> None:
    db = parse_bibtex("@misc(k, note = {n})\n@misc(bare)\n@string(s = 1)")

    assert db.entries["k"]["note"] == ["{n}"]
    assert db.entries["bare"].fields == {}
    assert db.strings["s"] == [1]


def test_trailing_comma_is_accepted() -> None:
    db = parse_bibtex("@book{k, title = {T},\n}")
    assert db.entries["k"].fields == {"title": ["{T}"]}


def test_text_without_entries_is_ignored() -> None:
    assert parse_bibtex("just some notes, no markers at all") == BibDatabase()
    assert parse_bibtex("") == BibDatabase()


def test_comment_noise_between_entries_is_ignored() -> None:
    db = parse_bibtex(
        "notes\n@ 123 not an entry\n@{no type}\n@comment{skip}\n@article{k, year = 1}\ntrailer"
    )
    assert list(db.entries) == ["k"]


def test_empty_preamble_is_not_stored() -> None:
    db = parse_bibtex("@preamble{ }")
    assert db.preamble == []


def test_duplicate_macro_is_rejected() -> None:
    with pytest.raises(DuplicateMacroError, match='duplicate `@string` name "x"'):
        parse_bibtex("@string{x = 1}\n@string{x = 2}")


def test_duplicate_key_is_rejected() -> None:
    with pytest.raises(DuplicateKeyError, match='duplicate BibTeX key "k"') as excinfo:
        parse_bibtex("@article{k, year = 1}\n\n@book{k, year = 2}")
    assert excinfo.value.line == 3


def test_duplicate_field_is_rejected() -> None:
    with pytest.raises(DuplicateFieldError, match='duplicate field "title" in "k" entry'):
        parse_bibtex("@article{k, title = {a}, TITLE = {b}}")


def test_missing_opening_delimiter() -> None:
    with pytest.raises(ParseError, match="expecting '\\{' or '\\(' after \"@article\""):
        parse_bibtex("@article k, year = 1}")


def test_missing_closing_delimiter() -> None:
    with pytest.raises(ParseError, match="expecting '\\)' in \"k\" entry"):
        parse_bibtex("@article(k, year = 1}")


def test_missing_equals_in_field() -> None:
    with pytest.raises(ParseError, match="expecting '=' after field \"year\""):
        parse_bibtex("@article{k, year 1}")


def test_missing_key() -> None:
    with pytest.raises(ParseError, match="expecting BibTeX key"):
        parse_bibtex("@article{, year = 1}")


def test_string_requires_value() -> None:
    with pytest.raises(ParseError, match="empty value"):
        parse_bibtex("@string{x = }")


def test_dangling_concatenation_is_reported_at_hash() -> None:
    with pytest.raises(ParseError, match="expecting '}'") as excinfo:
        parse_bibtex("@article{k, title = {A} # }")
    assert excinfo.value.snapshot.text[excinfo.value.snapshot.index] == "#"


def test_malformed_field_name_ends_field_loop() -> None:
    # A field whose name cannot be read stops the field loop; the closing
    # delimiter check then reports the problem.
    with pytest.raises(ParseError, match="expecting '}' in \"k\" entry"):
        parse_bibtex("@article{k, 9year = 1}")


@pytest.mark.parametrize(
    "text",
    [
        "@article{k, title = , year = 1}",
        "@article{k, year = 1, title = }",
        "@article{k, year = 1, title = ,}",
    ],
)
def test_field_without_value_is_rejected(text: str) -> None:
    with pytest.raises(ParseError, match='empty value for field "title" in "k" entry'):
        parse_bibtex(text)
    assert try_parse_bibtex(text) is None


def test_unbalanced_quoted_string_is_rejected() -> None:
    with pytest.raises(UnterminatedStringError):
        parse_bibtex('@article{k, title = "a } b"}')


def test_parse_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        parse_bibtex("@string{}")


def test_try_parse_returns_none_on_error() -> None:
    assert try_parse_bibtex("@article{k, title = {a}, title = {b}}") is None
    assert try_parse_bibtex("@article{k}") is not None


def test_sub_range_parsing_uses_line_offset() -> None:
    text = "@article{skipped}\n@article{kept, year = 1}"
    start = text.index("\n") + 1
    db = parse_bibtex(text, start=start, line=2)
    assert list(db.entries) == ["kept"]

    with pytest.raises(ParseError) as excinfo:
        parse_bibtex("@article{k, year 1}", start=0, line=40)
    assert excinfo.value.line == 40


def test_debug_logs_entry_headers(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level("DEBUG", logger="bibkeep.infrastructure.parsers.bibtex_parser"):
        parse_bibtex("@article{k}\n@Book{b}", debug=True)
    assert 'got entry "@article" at line 1' in caplog.text
    assert 'got entry "@book" at line 2' in caplog.text
