"""
HTML5 vocabulary used by the standard tag provider and the parser.

Attributes are written as ``name`` or ``name:valueSet``. The value set ``v``
marks a valueless (boolean) attribute; any other value set names an entry in
VALUE_SETS.
"""

from __future__ import annotations

from dataclasses import dataclass, field

VOID_ELEMENTS = frozenset(
    [
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "keygen",
        "link",
        "menuitem",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    ]
)


def is_void_element(tag: str | None) -> bool:
    """Check if the element can never have an end tag."""
    return bool(tag) and tag.lower() in VOID_ELEMENTS


@dataclass
class HTMLTagDefinition:
    label: str
    attributes: list[str] = field(default_factory=list)


HTML_TAGS: dict[str, HTMLTagDefinition] = {
    # The root element
    "html": HTMLTagDefinition("The html element represents the root of an HTML document.", ["manifest"]),
    # Document metadata
    "head": HTMLTagDefinition("The head element represents a collection of metadata for the Document."),
    "title": HTMLTagDefinition("The title element represents the document's title or name."),
    "base": HTMLTagDefinition(
        "The base element allows authors to specify the document base URL.", ["href", "target:target"]
    ),
    "link": HTMLTagDefinition(
        "The link element allows authors to link their document to other resources.",
        ["href", "crossorigin:xo", "rel", "media", "hreflang", "type", "sizes"],
    ),
    "meta": HTMLTagDefinition(
        "The meta element represents various kinds of metadata.",
        ["name", "http-equiv", "content", "charset"],
    ),
    "style": HTMLTagDefinition(
        "The style element allows authors to embed style information in their documents.",
        ["media", "nonce", "type", "scoped:v"],
    ),
    # Sections
    "body": HTMLTagDefinition("The body element represents the content of the document."),
    "article": HTMLTagDefinition("The article element represents a self-contained composition."),
    "section": HTMLTagDefinition("The section element represents a generic section of a document."),
    "nav": HTMLTagDefinition("The nav element represents a section with navigation links."),
    "aside": HTMLTagDefinition("The aside element represents content tangentially related to its surroundings."),
    "h1": HTMLTagDefinition("The h1 element represents a section heading."),
    "h2": HTMLTagDefinition("The h2 element represents a section heading."),
    "h3": HTMLTagDefinition("The h3 element represents a section heading."),
    "h4": HTMLTagDefinition("The h4 element represents a section heading."),
    "h5": HTMLTagDefinition("The h5 element represents a section heading."),
    "h6": HTMLTagDefinition("The h6 element represents a section heading."),
    "header": HTMLTagDefinition("The header element represents introductory content."),
    "footer": HTMLTagDefinition("The footer element represents a footer for its nearest section."),
    "address": HTMLTagDefinition("The address element represents contact information."),
    # Grouping content
    "p": HTMLTagDefinition("The p element represents a paragraph."),
    "hr": HTMLTagDefinition("The hr element represents a paragraph-level thematic break."),
    "pre": HTMLTagDefinition("The pre element represents a block of preformatted text."),
    "blockquote": HTMLTagDefinition("The blockquote element represents quoted content.", ["cite"]),
    "ol": HTMLTagDefinition(
        "The ol element represents an ordered list of items.", ["reversed:v", "start", "type:lt"]
    ),
    "ul": HTMLTagDefinition("The ul element represents an unordered list of items."),
    "li": HTMLTagDefinition("The li element represents a list item.", ["value"]),
    "dl": HTMLTagDefinition("The dl element represents an association list of name-value groups."),
    "dt": HTMLTagDefinition("The dt element represents the term part of a term-description group."),
    "dd": HTMLTagDefinition("The dd element represents the description part of a term-description group."),
    "figure": HTMLTagDefinition("The figure element represents self-contained flow content."),
    "figcaption": HTMLTagDefinition("The figcaption element represents a caption for its parent figure."),
    "main": HTMLTagDefinition("The main element represents the main content of the body."),
    "div": HTMLTagDefinition("The div element has no special meaning at all."),
    # Text-level semantics
    "a": HTMLTagDefinition(
        "The a element represents a hyperlink.",
        ["href", "target:target", "download", "ping", "rel", "hreflang", "type"],
    ),
    "em": HTMLTagDefinition("The em element represents stress emphasis of its contents."),
    "strong": HTMLTagDefinition("The strong element represents strong importance of its contents."),
    "small": HTMLTagDefinition("The small element represents side comments such as small print."),
    "code": HTMLTagDefinition("The code element represents a fragment of computer code."),
    "abbr": HTMLTagDefinition("The abbr element represents an abbreviation or acronym."),
    "b": HTMLTagDefinition("The b element represents a span of text to which attention is being drawn."),
    "i": HTMLTagDefinition("The i element represents a span of text in an alternate voice or mood."),
    "u": HTMLTagDefinition("The u element represents a span of text with an unarticulated annotation."),
    "span": HTMLTagDefinition("The span element doesn't mean anything on its own."),
    "br": HTMLTagDefinition("The br element represents a line break."),
    "wbr": HTMLTagDefinition("The wbr element represents a line break opportunity."),
    "time": HTMLTagDefinition("The time element represents its contents with a machine-readable form.", ["datetime"]),
    # Embedded content
    "img": HTMLTagDefinition(
        "An img element represents an image.",
        ["alt", "src", "srcset", "crossorigin:xo", "usemap", "ismap:v", "width", "height"],
    ),
    "iframe": HTMLTagDefinition(
        "The iframe element represents a nested browsing context.",
        ["src", "srcdoc", "name", "sandbox:sb", "seamless:v", "allowfullscreen:v", "width", "height"],
    ),
    "embed": HTMLTagDefinition("The embed element provides an integration point for external content.", ["src", "type", "width", "height"]),
    "video": HTMLTagDefinition(
        "A video element is used for playing videos or movies, and audio files with captions.",
        ["src", "crossorigin:xo", "poster", "preload:pl", "autoplay:v", "mediagroup", "loop:v", "muted:v", "controls:v", "width", "height"],
    ),
    "audio": HTMLTagDefinition(
        "An audio element represents a sound or audio stream.",
        ["src", "crossorigin:xo", "preload:pl", "autoplay:v", "mediagroup", "loop:v", "muted:v", "controls:v"],
    ),
    "source": HTMLTagDefinition("The source element allows authors to specify multiple alternative media resources.", ["src", "type", "media"]),
    "track": HTMLTagDefinition(
        "The track element allows authors to specify explicit external timed text tracks.",
        ["default:v", "kind:tk", "label", "src", "srclang"],
    ),
    "canvas": HTMLTagDefinition("The canvas element provides scripts with a resolution-dependent bitmap canvas.", ["width", "height"]),
    # Tabular data
    "table": HTMLTagDefinition("The table element represents data with more than one dimension.", ["sortable:v", "border"]),
    "caption": HTMLTagDefinition("The caption element represents the title of its parent table."),
    "thead": HTMLTagDefinition("The thead element represents the block of rows of column labels."),
    "tbody": HTMLTagDefinition("The tbody element represents a block of rows of data."),
    "tfoot": HTMLTagDefinition("The tfoot element represents the block of rows of column summaries."),
    "tr": HTMLTagDefinition("The tr element represents a row of cells in a table."),
    "td": HTMLTagDefinition("The td element represents a data cell in a table.", ["colspan", "rowspan", "headers"]),
    "th": HTMLTagDefinition(
        "The th element represents a header cell in a table.",
        ["colspan", "rowspan", "headers", "scope:s", "sorted", "abbr"],
    ),
    # Forms
    "form": HTMLTagDefinition(
        "The form element represents a collection of form-associated elements.",
        ["accept-charset", "action", "autocomplete:o", "enctype:et", "method:m", "name", "novalidate:v", "target:target"],
    ),
    "label": HTMLTagDefinition("The label element represents a caption in a user interface.", ["form", "for"]),
    "input": HTMLTagDefinition(
        "The input element represents a typed data field.",
        [
            "accept",
            "alt",
            "autocomplete:inputautocomplete",
            "autofocus:v",
            "checked:v",
            "dirname",
            "disabled:v",
            "form",
            "list",
            "max",
            "maxlength",
            "min",
            "minlength",
            "multiple:v",
            "name",
            "pattern",
            "placeholder",
            "readonly:v",
            "required:v",
            "size",
            "src",
            "step",
            "type:t",
            "value",
        ],
    ),
    "button": HTMLTagDefinition(
        "The button element represents a button labeled by its contents.",
        ["autofocus:v", "disabled:v", "form", "formaction", "formmethod:fm", "formnovalidate:v", "name", "type:bt", "value"],
    ),
    "select": HTMLTagDefinition(
        "The select element represents a control for selecting amongst a set of options.",
        ["autocomplete:inputautocomplete", "autofocus:v", "disabled:v", "form", "multiple:v", "name", "required:v", "size"],
    ),
    "option": HTMLTagDefinition("The option element represents an option in a select element.", ["disabled:v", "label", "selected:v", "value"]),
    "optgroup": HTMLTagDefinition("The optgroup element represents a group of option elements.", ["disabled:v", "label"]),
    "textarea": HTMLTagDefinition(
        "The textarea element represents a multiline plain text edit control.",
        ["autocomplete:inputautocomplete", "autofocus:v", "cols", "dirname", "disabled:v", "form", "maxlength", "minlength", "name", "placeholder", "readonly:v", "required:v", "rows", "wrap:w"],
    ),
    "fieldset": HTMLTagDefinition("The fieldset element represents a set of form controls.", ["disabled:v", "form", "name"]),
    "legend": HTMLTagDefinition("The legend element represents a caption for its parent fieldset."),
    "progress": HTMLTagDefinition("The progress element represents the completion progress of a task.", ["value", "max"]),
    # Interactive elements and templates
    "details": HTMLTagDefinition("The details element represents a disclosure widget.", ["open:v"]),
    "summary": HTMLTagDefinition("The summary element represents a summary of its parent details element."),
    "dialog": HTMLTagDefinition("The dialog element represents a part of an application.", ["open:v"]),
    "script": HTMLTagDefinition(
        "The script element allows authors to include dynamic script.",
        ["src", "type", "charset", "async:v", "defer:v", "crossorigin:xo", "nonce"],
    ),
    "template": HTMLTagDefinition("The template element is used to declare fragments of HTML."),
    "slot": HTMLTagDefinition("The slot element is a placeholder inside a web component.", ["name"]),
}

GLOBAL_ATTRIBUTES: list[str] = [
    "accesskey",
    "class",
    "contenteditable:b",
    "dir:d",
    "draggable:b",
    "hidden:v",
    "id",
    "lang",
    "role:roles",
    "spellcheck:b",
    "style",
    "tabindex",
    "title",
    "translate:y",
]

EVENT_HANDLERS: list[str] = [
    "onblur",
    "onchange",
    "onclick",
    "ondblclick",
    "onfocus",
    "oninput",
    "onkeydown",
    "onkeypress",
    "onkeyup",
    "onload",
    "onmousedown",
    "onmouseenter",
    "onmouseleave",
    "onmousemove",
    "onmouseout",
    "onmouseover",
    "onmouseup",
    "onscroll",
    "onselect",
    "onsubmit",
]

VALUE_SETS: dict[str, list[str]] = {
    "b": ["true", "false"],
    "y": ["yes", "no"],
    "d": ["ltr", "rtl", "auto"],
    "o": ["on", "off"],
    "m": ["get", "post"],
    "fm": ["get", "post"],
    "s": ["row", "col", "rowgroup", "colgroup"],
    "t": [
        "hidden",
        "text",
        "search",
        "tel",
        "url",
        "email",
        "password",
        "datetime",
        "date",
        "month",
        "week",
        "time",
        "datetime-local",
        "number",
        "range",
        "color",
        "checkbox",
        "radio",
        "file",
        "submit",
        "image",
        "reset",
        "button",
    ],
    "bt": ["button", "submit", "reset"],
    "lt": ["1", "a", "A", "i", "I"],
    "et": ["application/x-www-form-urlencoded", "multipart/form-data", "text/plain"],
    "tk": ["subtitles", "captions", "descriptions", "chapters", "metadata"],
    "pl": ["none", "metadata", "auto"],
    "sb": ["allow-forms", "allow-modals", "allow-pointer-lock", "allow-popups", "allow-same-origin", "allow-scripts"],
    "xo": ["anonymous", "use-credentials"],
    "w": ["soft", "hard"],
    "target": ["_self", "_blank", "_parent", "_top"],
    "inputautocomplete": ["on", "off", "name", "email", "username", "new-password", "current-password", "tel", "url"],
    "roles": [
        "alert",
        "button",
        "checkbox",
        "dialog",
        "grid",
        "link",
        "list",
        "listbox",
        "listitem",
        "menu",
        "menuitem",
        "navigation",
        "option",
        "presentation",
        "region",
        "search",
        "tab",
        "tablist",
        "tabpanel",
        "textbox",
    ],
}
