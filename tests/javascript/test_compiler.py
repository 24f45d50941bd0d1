import pytest

from lwcls.javascript.compiler import (
    JavascriptMetadataCompiler,
    compile_source,
    get_methods,
    get_properties,
    get_public_properties,
    to_lsp_range,
)

HELLO_WORLD = """import { LightningElement, api, wire } from 'lwc';
import getRecord from '@salesforce/apex/Records.get';

/**
 * Greets the user.
 */
export default class HelloWorld extends LightningElement {
    /** The greeting text. */
    @api greetingText = 'Hello { world';
    @api
    recordId;
    @wire(getRecord, { recordId: '$recordId' }) record;
    counter = 0;

    @api
    get size() {
        return this._size;
    }
    set size(value) {
        this._size = value;
    }

    // handles the button
    handleClick(event) {
        if (event) {
            this.counter++;
        }
    }
}
"""


def test_compile_class_members():
    result = compile_source(HELLO_WORLD)

    assert result.diagnostics == []
    metadata = result.metadata
    assert metadata.doc == "Greets the user."

    members = {m.name: m for m in metadata.class_members}
    assert set(members) == {"greetingText", "recordId", "record", "counter", "size", "handleClick"}
    assert members["greetingText"].decorator == "api"
    assert members["greetingText"].doc == "The greeting text."
    assert members["recordId"].decorator == "api"
    assert members["record"].decorator == "wire"
    assert members["counter"].decorator is None
    assert members["handleClick"].type == "method"


def test_decorated_accessor_is_public_property():
    metadata = compile_source(HELLO_WORLD).metadata

    size = next(m for m in metadata.class_members if m.name == "size")
    assert size.type == "property"
    assert size.decorator == "api"


def test_accessors():
    metadata = compile_source(HELLO_WORLD).metadata

    assert [m.name for m in get_public_properties(metadata)] == ["greetingText", "recordId", "size"]
    assert "counter" in [m.name for m in get_properties(metadata)]
    assert [m.name for m in get_methods(metadata)] == ["handleClick"]


def test_member_location():
    metadata = compile_source(HELLO_WORLD).metadata

    greeting = next(m for m in metadata.class_members if m.name == "greetingText")
    lsp_range = to_lsp_range(greeting.loc)
    assert lsp_range.start.line == 8
    assert lsp_range.start.character == len("    @api ")
    assert lsp_range.end.character == len("    @api greetingText")


def test_declaration_location():
    metadata = compile_source(HELLO_WORLD).metadata

    assert metadata.declaration_loc.start_line == 6
    assert metadata.declaration_loc.start_column == 0


def test_module_without_class_yields_empty_metadata():
    result = compile_source("export const answer = 42;\n")

    assert result.diagnostics == []
    assert result.metadata is not None
    assert result.metadata.class_members == []
    assert to_lsp_range(result.metadata.declaration_loc).start.line == 0


def test_unbalanced_braces_produce_diagnostic():
    result = compile_source("export default class Broken extends LightningElement {\n")

    assert result.metadata is None
    assert result.diagnostics


def test_unterminated_comment_produces_diagnostic():
    result = compile_source("/* never closed\nexport default class A extends LightningElement {}")

    assert result.metadata is None
    assert result.diagnostics == ["Unterminated comment."]


@pytest.mark.asyncio
async def test_compile_file(tmp_path):
    module = tmp_path / "helloWorld.js"
    module.write_text(HELLO_WORLD)

    result = await JavascriptMetadataCompiler().compile(module)

    assert result.metadata is not None
    assert result.metadata.doc == "Greets the user."


@pytest.mark.asyncio
async def test_compile_missing_file(tmp_path):
    result = await JavascriptMetadataCompiler().compile(tmp_path / "missing.js")

    assert result.metadata is None
    assert "Unable to read" in result.diagnostics[0]
