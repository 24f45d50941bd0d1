from lwcls.parser.scanner import ScannerState, TokenType, create_scanner


def scan_all(text, **kwargs):
    """Collect (token, text) pairs until EOS."""
    scanner = create_scanner(text, **kwargs)
    tokens = []
    token = scanner.scan()
    while token != TokenType.EOS:
        tokens.append((token, scanner.get_token_text()))
        token = scanner.scan()
    return tokens


def test_scan_element_with_attribute():
    tokens = scan_all('<div class="a">hi</div>')

    assert tokens == [
        (TokenType.StartTagOpen, "<"),
        (TokenType.StartTag, "div"),
        (TokenType.Whitespace, " "),
        (TokenType.AttributeName, "class"),
        (TokenType.DelimiterAssign, "="),
        (TokenType.AttributeValue, '"a"'),
        (TokenType.StartTagClose, ">"),
        (TokenType.Content, "hi"),
        (TokenType.EndTagOpen, "</"),
        (TokenType.EndTag, "div"),
        (TokenType.EndTagClose, ">"),
    ]


def test_scan_comment():
    tokens = scan_all("<!-- note -->")

    assert [t for t, _ in tokens] == [
        TokenType.StartCommentTag,
        TokenType.Comment,
        TokenType.EndCommentTag,
    ]
    assert tokens[1][1] == " note "


def test_scan_self_closing_and_unquoted_value():
    tokens = scan_all("<c-child value={item}/>")

    assert (TokenType.AttributeValue, "{item}") in tokens
    assert tokens[-1] == (TokenType.StartTagSelfClose, "/>")


def test_lwc_directive_is_one_attribute_name():
    tokens = scan_all('<template for:each={items} lwc:if={show}></template>')

    names = [text for token, text in tokens if token == TokenType.AttributeName]
    assert names == ["for:each", "lwc:if"]


def test_token_offsets():
    scanner = create_scanner("<p>text</p>")
    scanner.scan()  # <
    scanner.scan()  # p
    assert scanner.get_token_offset() == 1
    assert scanner.get_token_end() == 2
    assert scanner.get_token_length() == 1


def test_scanner_state_after_whitespace_in_tag():
    scanner = create_scanner("<div >")
    scanner.scan()
    scanner.scan()
    assert scanner.scan() == TokenType.Whitespace
    assert scanner.get_scanner_state() == ScannerState.WithinTag


def test_restart_at_offset_with_state():
    text = '<c-foo label="x">'
    # right after the attribute name
    scanner = create_scanner(text, 12, ScannerState.AfterAttributeName)

    assert scanner.scan() == TokenType.DelimiterAssign
    assert scanner.scan() == TokenType.AttributeValue


def test_end_tag_close_lookahead():
    text = "</div  >"
    scanner = create_scanner(text, 5, ScannerState.WithinEndTag)

    assert scanner.scan() == TokenType.Whitespace
    assert scanner.scan() == TokenType.EndTagClose


def test_pseudo_close_tags():
    text = "<div<p>"

    plain = [t for t, _ in scan_all(text)]
    pseudo = scan_all(text, emit_pseudo_close_tags=True)

    assert TokenType.StartTagClose not in plain[:4]
    assert pseudo[2] == (TokenType.StartTagClose, "")
    assert pseudo[3] == (TokenType.StartTagOpen, "<")
    assert pseudo[4] == (TokenType.StartTag, "p")


def test_script_content_is_one_token():
    tokens = scan_all("<script>if (a < b) {}</script>")

    assert (TokenType.Script, "if (a < b) {}") in tokens
    assert tokens[-2] == (TokenType.EndTag, "script")


def test_unknown_character_always_advances():
    scanner = create_scanner('<div "oops">')
    seen = 0
    while scanner.scan() != TokenType.EOS:
        seen += 1
        assert seen < 20
    assert scanner.get_token_end() == len('<div "oops">')
