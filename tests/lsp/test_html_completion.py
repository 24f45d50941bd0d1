import pytest
from lsprotocol.types import CompletionItemKind, InsertTextFormat, Position

from lwcls.config import CompletionConfiguration
from lwcls.javascript.compiler import ClassMember
from lwcls.lsp.html_completion import do_complete, do_tag_complete
from lwcls.lsp.tag_providers import CompletionInfo, HTML5TagProvider, LwcTagProvider, TagProvider
from lwcls.parser.document import TemplateDocument
from lwcls.parser.html_parser import parse
from lwcls.workspace import AttributeInfo, TagInfo, WorkspaceCache

TEMPLATE_URI = "file:///ws/force-app/main/default/lwc/hello/hello.html"


@pytest.fixture
def tags_cache(tmp_path):
    cache = WorkspaceCache(tmp_path).caches["tags"]
    cache.upsert(
        "c-foo",
        TagInfo(
            name="c-foo",
            attributes=[AttributeInfo(name="label", detail="LWC custom attribute")],
            namespace="c",
        ),
    )
    cache.upsert(
        "c-hello",
        TagInfo(
            name="c-hello",
            namespace="c",
            properties=[ClassMember(name="greeting", type="property")],
            methods=[ClassMember(name="handleClick", type="method")],
        ),
    )
    return cache


@pytest.fixture
def providers(tags_cache):
    return [HTML5TagProvider(), LwcTagProvider(tags_cache)]


def complete(text, offset, providers, settings=None):
    document = TemplateDocument(TEMPLATE_URI, text)
    return do_complete(document, offset, parse(text), providers, settings)


def labels(result):
    return [item.label for item in result.items]


def test_attribute_name_end_to_end(tags_cache):
    text = "<c-foo ></c-foo>"
    result = complete(text, 7, [LwcTagProvider(tags_cache)])

    label = next(item for item in result.items if item.label == "label")
    assert label.text_edit.new_text == 'label="$1"'
    assert label.text_edit.range.start == Position(line=0, character=7)
    assert label.text_edit.range.end == Position(line=0, character=7)
    assert label.insert_text_format == InsertTextFormat.Snippet
    assert label.kind == CompletionItemKind.Value


def test_inside_attribute_name_only_offers_attributes(providers):
    text = "<c-foo lab"
    result = complete(text, 9, providers)

    assert "label" in labels(result)
    assert "div" not in labels(result)
    assert not any(lbl.startswith("/") for lbl in labels(result))
    for item in result.items:
        assert item.text_edit.range.start.character == 7
        assert item.text_edit.range.end.character == 10


def test_attribute_followed_by_assign_has_no_value_snippet(tags_cache):
    text = '<c-foo lab="x"></c-foo>'
    result = complete(text, 9, [LwcTagProvider(tags_cache)])

    label = next(item for item in result.items if item.label == "label")
    assert label.text_edit.new_text == "label"


def test_valueless_and_handler_attributes():
    text = "<input >"
    result = complete(text, 7, [HTML5TagProvider()])

    items = {item.label: item for item in result.items}
    assert items["disabled"].text_edit.new_text == "disabled"
    assert items["onclick"].kind == CompletionItemKind.Function
    assert items["name"].text_edit.new_text == 'name="$1"'


def test_mismatched_close_tag_suggests_nearest_unclosed(providers):
    text = "<div><p></div>"
    # cursor right after '</'
    result = complete(text, 10, providers)

    assert labels(result) == ["/p"]
    edit = result.items[0].text_edit
    assert edit.new_text == "/p"
    assert edit.range.start.character == 9
    assert edit.range.end.character == 13


def test_close_tag_adds_bracket_when_missing(providers):
    text = "<div><p></div>"
    result = complete(text, 9, providers)

    assert labels(result) == ["/p"]
    assert result.items[0].text_edit.new_text == "/p>"


def test_close_tag_same_indent_is_plain(providers):
    text = "  <div>\n  </"
    result = complete(text, len(text), providers)

    item = result.items[0]
    assert item.label == "/div"
    assert item.text_edit.new_text == "/div>"
    assert item.text_edit.range.start == Position(line=1, character=3)


def test_close_tag_reindents_to_opening_line(providers):
    text = "<div>\n    </"
    result = complete(text, len(text), providers)

    item = result.items[0]
    assert item.text_edit.new_text == "</div>"
    assert item.text_edit.range.start == Position(line=1, character=0)
    assert item.text_edit.range.end == Position(line=1, character=6)
    assert item.filter_text == "    </div>"


def test_whitespace_after_end_tag_open(providers):
    text = "<div></ "
    result = complete(text, len(text), providers)

    assert labels(result) == ["/div"]
    edit = result.items[0].text_edit
    assert edit.new_text == "/div>"
    assert edit.range.start.character == 6
    assert edit.range.end.character == 8


def test_end_tag_name_after_whitespace_walks_back_to_slash(providers):
    text = "<div><p></ di"
    result = complete(text, len(text), providers)

    assert labels(result) == ["/p"]
    edit = result.items[0].text_edit
    assert edit.new_text == "/p>"
    assert edit.range.start.character == 9
    assert edit.range.end.character == 13


def test_close_tag_without_open_ancestor_offers_all_tags(providers):
    text = "</"
    result = complete(text, 2, providers)

    assert "/div" in labels(result)
    assert "/c-foo" in labels(result)


def test_open_tag_suggestions(providers):
    text = "<div><"
    result = complete(text, 6, providers)

    assert "span" in labels(result)
    assert "c-foo" in labels(result)
    assert "/div" in labels(result)
    c_foo = next(item for item in result.items if item.label == "c-foo")
    assert c_foo.detail == "LWC tag"
    assert c_foo.text_edit.range.start.character == 6


def test_partial_tag_name_is_replaced(providers):
    text = "<c-f"
    result = complete(text, 4, providers)

    c_foo = next(item for item in result.items if item.label == "c-foo")
    assert c_foo.text_edit.range.start.character == 1
    assert c_foo.text_edit.range.end.character == 4


def test_auto_close_suggestion(providers):
    text = "<my-tag>"
    result = complete(text, 8, providers)

    assert len(result.items) == 1
    item = result.items[0]
    assert item.label == "</my-tag>"
    assert item.text_edit.new_text == "$0</my-tag>"
    assert item.insert_text_format == InsertTextFormat.Snippet


@pytest.mark.parametrize("text", ["<br>", "<div><input>", "<img>"])
def test_no_auto_close_for_void_elements(providers, text):
    result = complete(text, len(text), providers)

    assert result.items == []


def test_auto_close_hidden_by_setting(providers):
    settings = CompletionConfiguration(hide_auto_complete_proposals=True)
    result = complete("<div>", 5, providers, settings)

    assert result.items == []


def test_quoted_value_replaces_word_under_cursor(providers):
    text = '<input type="te">'
    result = complete(text, 15, providers)

    assert "text" in labels(result)
    item = next(i for i in result.items if i.label == "text")
    assert item.text_edit.new_text == "text"
    assert item.text_edit.range.start.character == 13
    assert item.text_edit.range.end.character == 15
    assert item.kind == CompletionItemKind.Unit


def test_missing_value_is_quoted(providers):
    text = "<input type=>"
    result = complete(text, 12, providers)

    item = next(i for i in result.items if i.label == "checkbox")
    assert item.text_edit.new_text == '"checkbox"'


def test_whitespace_before_value_offers_values(providers):
    text = "<input type= >"
    result = complete(text, 13, providers)

    item = next(i for i in result.items if i.label == "checkbox")
    assert item.text_edit.new_text == '"checkbox"'
    assert item.text_edit.range.start.character == 13
    assert item.text_edit.range.end.character == 13


def test_directive_values(providers):
    text = "<div lwc:dom=>"
    result = complete(text, 13, providers)

    assert labels(result) == ["manual"]


def test_expression_suggestions(providers):
    text = "<p title={}></p>"
    result = complete(text, 10, providers)

    assert labels(result) == ["greeting", "handleClick"]
    item = result.items[0]
    assert item.kind == CompletionItemKind.Reference
    assert item.text_edit.new_text == "greeting"


def test_expression_appends_closing_brace(providers):
    text = "<p title={gr></p>"
    result = complete(text, 12, providers)

    item = result.items[0]
    assert item.text_edit.new_text == "greeting}"
    assert item.text_edit.range.start.character == 10
    assert item.text_edit.range.end.character == 12


def test_expression_in_text_content(providers):
    text = "<template>{}</template>"
    result = complete(text, 11, providers)

    assert labels(result) == ["greeting", "handleClick"]


def test_position_argument(providers):
    text = "<div>\n  <c-foo ></c-foo>\n</div>"
    document = TemplateDocument(TEMPLATE_URI, text)

    result = do_complete(document, Position(line=1, character=9), parse(text), providers)

    assert "label" in labels(result)


def test_position_after_astral_character(providers):
    text = '<div title="😀"><c-foo ></c-foo></div>'
    document = TemplateDocument(TEMPLATE_URI, text)

    # the emoji counts as two UTF-16 units
    result = do_complete(document, Position(line=0, character=23), parse(text), providers)

    label = next(item for item in result.items if item.label == "label")
    assert label.text_edit.range.start == Position(line=0, character=23)
    assert "/div" not in labels(result)


def test_no_suggestions_in_plain_content(providers):
    text = "<div>hello</div>"
    result = complete(text, 7, providers)

    assert result.items == []


class FailingProvider(TagProvider):
    def get_id(self):
        return "failing"

    def is_applicable(self, language_id):
        return True

    def collect_tags(self, collector):
        raise RuntimeError("broken provider")

    def collect_attributes(self, tag, collector):
        collector("first", CompletionInfo(), None)
        raise RuntimeError("broken provider")

    def collect_values(self, tag, attribute, collector):
        raise RuntimeError("broken provider")


def test_failing_provider_does_not_stop_others(tags_cache):
    providers = [FailingProvider(), LwcTagProvider(tags_cache)]

    result = complete("<c-foo ></c-foo>", 7, providers)
    assert "label" in labels(result)

    result = complete("<", 1, providers)
    assert "c-foo" in labels(result)


def test_tag_complete_after_start_tag():
    text = "<my-tag>"
    document = TemplateDocument(TEMPLATE_URI, text)

    assert do_tag_complete(document, 8, parse(text)) == "$0</my-tag>"


def test_tag_complete_after_end_tag_open():
    text = "<div><span></"
    document = TemplateDocument(TEMPLATE_URI, text)

    assert do_tag_complete(document, len(text), parse(text)) == "span>"


@pytest.mark.parametrize(
    "text, offset",
    [
        ("<br>", 4),
        ("<div></div>", 11),
        ("hello", 5),
        ("<div>", 0),
        ('<div title="a>', 14),
    ],
)
def test_tag_complete_returns_none(text, offset):
    document = TemplateDocument(TEMPLATE_URI, text)

    assert do_tag_complete(document, offset, parse(text)) is None
