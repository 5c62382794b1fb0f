"""
Tests for the atomic output writer.
"""

from __future__ import annotations

import pytest

from model_schema.pipeline.errors import OutputError
from model_schema.pipeline.output import AtomicWriter

MODULE = 'import { z } from "zod";\n\nexport type T = { a: string };\n'


def test_write_creates_parent_directories(tmp_path):
    path = tmp_path / "generated" / "types.ts"
    AtomicWriter().write(path, MODULE, "ts")
    assert path.read_text() == MODULE
    assert list(path.parent.iterdir()) == [path]


def test_write_replaces_existing_file(tmp_path):
    path = tmp_path / "schemas.json"
    path.write_text("old")
    AtomicWriter().write(path, '{"a": 1}', "json")
    assert path.read_text() == '{"a": 1}'


def test_invalid_content_leaves_no_file(tmp_path):
    path = tmp_path / "types.ts"
    with pytest.raises(OutputError):
        AtomicWriter().write(path, "export type T = { a: string;\n", "ts")
    assert list(tmp_path.iterdir()) == []


def test_invalid_content_keeps_previous_file(tmp_path):
    path = tmp_path / "schemas.json"
    path.write_text("{}")
    with pytest.raises(OutputError):
        AtomicWriter().write(path, "{not json", "json")
    assert path.read_text() == "{}"
    assert list(tmp_path.iterdir()) == [path]


def test_validation_can_be_skipped(tmp_path):
    path = tmp_path / "types.ts"
    AtomicWriter().write(path, "no exports here", "ts", validate=False)
    assert path.read_text() == "no exports here"


def test_custom_validator(tmp_path):
    seen = []
    writer = AtomicWriter(validate_typescript=seen.append)
    writer.write(tmp_path / "types.ts", "anything", "ts")
    assert seen == ["anything"]


@pytest.mark.parametrize(
    "content",
    [
        "const x = 1;",
        "export type T = { a: string;",
        "export const T = z.array(z.string();",
        "export type T = Array<string>];",
    ],
)
def test_typescript_validation_failures(content):
    with pytest.raises(OutputError):
        AtomicWriter().validate(content, "ts")


@pytest.mark.parametrize(
    "content",
    [
        MODULE,
        "/**\n * Braces { in docs\n */\nexport type T = never;",
        '// generated {\nexport const S = z.literal("}");',
        'export const S = z.string().regex(/^a$/, { message: "missing ) here" });',
    ],
)
def test_typescript_validation_ignores_comments_and_strings(content):
    AtomicWriter().validate(content, "ts")


def test_unknown_language_is_not_validated():
    AtomicWriter().validate("anything", "txt")


if __name__ == "__main__":
    pytest.main([__file__])
