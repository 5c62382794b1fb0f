"""
Tests for module generation, output writing and the command line.
"""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from model_schema import __version__
from model_schema.model_schema import model_schema
from model_schema.pipeline import CompilerConfig, OutputMode, PipelineGenerator
from model_schema.pipeline.errors import UnsupportedShapeError

DOCUMENT = {
    "declarations": [
        {
            "kind": "struct",
            "name": "UserJson",
            "docs": "A registered user.",
            "attributes": {"rename_all": "camelCase"},
            "fields": [
                {"name": "user_id", "type": "ObjectId", "docs": "Primary key."},
                {"name": "email", "type": "String", "attributes": {"rename": "emailAddress", "minLength": 3}},
                {"name": "age", "type": "Option<u32>"},
                {"name": "secret", "type": "String", "attributes": {"skip": True}},
                {"name": "status", "type": "StatusJson"},
            ],
        },
        {"kind": "enum", "name": "StatusJson", "variants": ["Active", "Banned"]},
    ]
}


class TestPipelineGenerator:
    """Whole module generation"""

    def test_module_layout(self):
        output = PipelineGenerator(DOCUMENT).generate()
        assert output.startswith(f"// Generated by model_schema v{__version__} : model_schema\n// Do not edit by hand.\n\n")
        assert 'import { z } from "zod";\n\n/**\n * Status\n */\nexport type Status = "Active" | "Banned";' in output
        assert "  status: Status$Schema,\n}).transform(" in output
        assert output.endswith("  age: args.age,\n}));\n")

        # User references Status, so Status comes first
        status_schema = output.index("export const Status$Schema")
        user_type = output.index("export type User")
        user_schema = output.index("export const User$Schema")
        assert status_schema < user_type < user_schema

    def test_without_prefix(self):
        config = CompilerConfig(add_generation_comment=False, zod_import="")
        output = PipelineGenerator(DOCUMENT, config).generate()
        assert output.startswith("/**\n * Status\n */\n")

    def test_json_schemas(self):
        schemas = PipelineGenerator(DOCUMENT).generate_json_schemas()
        assert list(schemas) == ["User", "Status"]
        assert schemas["User"]["required"] == ["userId", "emailAddress", "status"]
        assert schemas["User"]["properties"]["status"] == {"type": "string", "enum": ["Active", "Banned"]}
        assert schemas["User"]["properties"]["emailAddress"] == {"type": "string", "minLength": 3}

    def test_compile_is_cached(self):
        generator = PipelineGenerator(DOCUMENT)
        assert generator.compile() is generator.compile()
        assert generator.warnings == []

    def test_warnings(self):
        document = {
            "declarations": [
                {"kind": "struct", "name": "T", "fields": [{"name": "a", "type": "u8", "attributes": {"minLength": "x"}}]}
            ]
        }
        assert PipelineGenerator(document).warnings == ["T.a: 'minLength' must be a non-negative integer, got 'x'"]


class TestEmissionOrder:
    """Validators are defined before they are used"""

    @staticmethod
    def _generate(*declarations):
        config = CompilerConfig(add_generation_comment=False)
        return PipelineGenerator({"declarations": list(declarations)}, config)

    @staticmethod
    def _struct(name, *fields):
        return {"kind": "struct", "name": name, "fields": [{"name": n, "type": t} for n, t in fields]}

    def test_forward_reference(self):
        output = self._generate(
            self._struct("Order", ("customer", "Customer")),
            self._struct("Customer", ("id", "String")),
        ).generate()
        assert output.index("export const Customer$Schema") < output.index("  customer: Customer$Schema,")
        assert "z.lazy" not in output

    def test_document_order_kept_without_references(self):
        generator = self._generate(self._struct("B", ("x", "u8")), self._struct("A", ("y", "u8")))
        assert [(compiled.name, deferred) for compiled, deferred in generator.emission_order()] == [
            ("B", frozenset()),
            ("A", frozenset()),
        ]

    def test_self_reference_is_lazy(self):
        output = self._generate(self._struct("Node", ("children", "Vec<Node>"))).generate()
        assert "  children: z.array(z.lazy(() => Node$Schema)),\n" in output
        assert "  children: Array<Node>;\n" in output

    def test_mutual_references(self):
        generator = self._generate(
            self._struct("Parent", ("child", "Option<Child>")),
            self._struct("Child", ("parent", "Parent"), ("siblings", "HashMap<String, Child>")),
        )
        order = [(compiled.name, deferred) for compiled, deferred in generator.emission_order()]
        assert order == [("Child", frozenset({"Parent", "Child"})), ("Parent", frozenset())]

        output = generator.generate()
        assert "  parent: z.lazy(() => Parent$Schema),\n" in output
        assert "  siblings: z.record(z.string(), z.lazy(() => Child$Schema)),\n" in output
        assert "  child: Child$Schema.or(z.undefined()),\n" in output
        assert output.index("export const Child$Schema") < output.index("export const Parent$Schema")

    def test_references_inside_unions(self):
        output = self._generate(
            {
                "kind": "enum",
                "name": "Expr",
                "variants": [
                    {"name": "Lit", "fields": [{"name": "value", "type": "f64"}]},
                    {"name": "Neg", "fields": [{"name": "inner", "type": "Box<Expr>"}]},
                ],
            }
        ).generate()
        assert "    inner: z.lazy(() => Expr$Schema),\n" in output


class TestWrite:
    """Writing generated files"""

    def test_write_both_outputs(self, tmp_path):
        module, bundle = tmp_path / "types.ts", tmp_path / "schemas.json"
        written = PipelineGenerator(DOCUMENT).write(module, bundle)
        assert written == [module, bundle]
        assert "export type User = {" in module.read_text()
        assert list(json.loads(bundle.read_text())) == ["User", "Status"]

    def test_existing_output_is_an_error(self, tmp_path):
        module, bundle = tmp_path / "types.ts", tmp_path / "schemas.json"
        bundle.write_text("{}")
        with pytest.raises(FileExistsError):
            PipelineGenerator(DOCUMENT).write(module, bundle)
        assert not module.exists()
        assert bundle.read_text() == "{}"

    def test_force_overwrites(self, tmp_path):
        module = tmp_path / "types.ts"
        module.write_text("old")
        config = CompilerConfig()
        config.output.mode = OutputMode.FORCE
        PipelineGenerator(DOCUMENT, config).write(module)
        assert module.read_text().startswith("// Generated by model_schema")

    def test_non_atomic_write(self, tmp_path):
        config = CompilerConfig.from_dict({"output": {"atomic_write": False}})
        module = tmp_path / "out" / "types.ts"
        PipelineGenerator(DOCUMENT, config).write(module)
        assert module.exists()

    def test_failing_declaration_writes_nothing(self, tmp_path):
        document = {
            "declarations": DOCUMENT["declarations"]
            + [{"kind": "struct", "name": "Bad", "fields": [{"name": "f", "type": "Vec<Vec<u8>>"}]}]
        }
        with pytest.raises(UnsupportedShapeError):
            PipelineGenerator(document).write(tmp_path / "types.ts", tmp_path / "schemas.json")
        assert list(tmp_path.iterdir()) == []


class TestConfig:
    """Configuration round trip"""

    def test_from_dict_ignores_unknown_keys(self):
        config = CompilerConfig.from_dict({"default_tag_field": "kind", "nope": 1, "output": {"mode": "force"}})
        assert config.default_tag_field == "kind"
        assert config.output.mode == OutputMode.FORCE
        assert not hasattr(config, "nope")

    def test_to_dict(self):
        data = CompilerConfig(strict_references=True).to_dict()
        assert data["strict_references"] is True
        assert data["output"] == {"mode": "error", "validate_before_write": True, "atomic_write": True}
        assert CompilerConfig.from_dict(data) == CompilerConfig(strict_references=True)


class TestCommandLine:
    """The model_schema command"""

    def _write_document(self, tmp_path, document=DOCUMENT):
        path = tmp_path / "types.json"
        path.write_text(json.dumps(document))
        return path

    def test_generates_module(self, tmp_path):
        path = self._write_document(tmp_path)
        output = tmp_path / "types.ts"
        result = CliRunner().invoke(model_schema, [str(path), str(output), "-j", str(tmp_path / "schemas.json")])
        assert result.exit_code == 0, result.output
        text = output.read_text()
        assert text.startswith(
            f"// Generated by model_schema v{__version__} : model_schema types.json types.ts --json-schema schemas.json\n"
        )
        assert "export const User$Schema" in text
        assert "Status" in json.loads((tmp_path / "schemas.json").read_text())

    def test_existing_output_needs_force(self, tmp_path):
        path = self._write_document(tmp_path)
        output = tmp_path / "types.ts"
        output.write_text("old")

        result = CliRunner().invoke(model_schema, [str(path), str(output)])
        assert result.exit_code != 0
        assert "already exists" in result.output
        assert output.read_text() == "old"

        result = CliRunner().invoke(model_schema, [str(path), str(output), "--force"])
        assert result.exit_code == 0, result.output
        assert "export type User" in output.read_text()

    def test_strict_references(self, tmp_path):
        document = {"declarations": [DOCUMENT["declarations"][0]]}
        path = self._write_document(tmp_path, document)

        result = CliRunner().invoke(model_schema, [str(path), str(tmp_path / "types.ts"), "--strict-references"])
        assert result.exit_code != 0
        assert "User.status -> Status" in result.output

    def test_config_file(self, tmp_path):
        path = self._write_document(tmp_path)
        config = tmp_path / "config.json"
        config.write_text(json.dumps({"add_generation_comment": False, "zod_import": 'import { z } from "zod/v3";'}))
        output = tmp_path / "types.ts"

        result = CliRunner().invoke(model_schema, [str(path), str(output), "--config", str(config)])
        assert result.exit_code == 0, result.output
        assert output.read_text().startswith('import { z } from "zod/v3";\n')

    def test_unsupported_shape_is_reported(self, tmp_path):
        document = {"declarations": [{"kind": "struct", "name": "Bad", "fields": [{"name": "f", "type": "fn()"}]}]}
        path = self._write_document(tmp_path, document)

        result = CliRunner().invoke(model_schema, [str(path), str(tmp_path / "types.ts")])
        assert result.exit_code != 0
        assert "field 'f'" in result.output


if __name__ == "__main__":
    pytest.main([__file__])
