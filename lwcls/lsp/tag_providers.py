"""
Tag providers: pluggable vocabularies for template completion.

Each provider enumerates tags, attributes and attribute values through
callbacks. The completion engine works with any list of providers; the
default registration list is built by all_tag_providers().
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from lwcls.parser.html_tags import EVENT_HANDLERS, GLOBAL_ATTRIBUTES, HTML_TAGS, VALUE_SETS

if TYPE_CHECKING:
    from lwcls.workspace.tags_cache import TagsCache


@dataclass
class CompletionInfo:
    """Documentation attached to a suggested tag or attribute."""

    documentation: str | None = None
    detail: str | None = None


TagCollector = Callable[[str, CompletionInfo], None]
AttributeCollector = Callable[[str, CompletionInfo, "str | None"], None]
ValueCollector = Callable[[str], None]


class TagProvider(ABC):
    """Interface of a completion vocabulary."""

    @abstractmethod
    def get_id(self) -> str:
        pass

    @abstractmethod
    def is_applicable(self, language_id: str) -> bool:
        pass

    @abstractmethod
    def collect_tags(self, collector: TagCollector) -> None:
        pass

    @abstractmethod
    def collect_attributes(self, tag: str, collector: AttributeCollector) -> None:
        """
        Enumerate the attributes valid on a tag.

        The third collector argument is the attribute kind: ``"handler"`` for
        event handlers, ``"v"`` for valueless attributes, or None.
        """
        pass

    @abstractmethod
    def collect_values(self, tag: str, attribute: str, collector: ValueCollector) -> None:
        pass

    def collect_expression_values(self, template_tag: str, collector: ValueCollector) -> None:
        """Enumerate names usable inside {expressions} of a component template."""
        pass


def _split_attribute(attribute: str) -> tuple[str, str | None]:
    name, _, value_set = attribute.partition(":")
    return name, value_set or None


class HTML5TagProvider(TagProvider):
    """Standard HTML elements, global attributes and event handlers."""

    def get_id(self) -> str:
        return "html5"

    def is_applicable(self, language_id: str) -> bool:
        return language_id == "html"

    def collect_tags(self, collector: TagCollector) -> None:
        for tag, definition in HTML_TAGS.items():
            collector(tag, CompletionInfo(documentation=definition.label))

    def collect_attributes(self, tag: str, collector: AttributeCollector) -> None:
        definition = HTML_TAGS.get(tag)
        if definition:
            for attribute in definition.attributes:
                name, value_set = _split_attribute(attribute)
                collector(name, CompletionInfo(), value_set)

        for attribute in GLOBAL_ATTRIBUTES:
            name, value_set = _split_attribute(attribute)
            collector(name, CompletionInfo(), value_set)

        for handler in EVENT_HANDLERS:
            collector(handler, CompletionInfo(), "handler")

    def collect_values(self, tag: str, attribute: str, collector: ValueCollector) -> None:
        candidates = list(GLOBAL_ATTRIBUTES)
        definition = HTML_TAGS.get(tag)
        if definition:
            candidates = definition.attributes + candidates

        for candidate in candidates:
            name, value_set = _split_attribute(candidate)
            if name != attribute or not value_set:
                continue
            for value in VALUE_SETS.get(value_set, []):
                collector(value)
            return


LWC_DIRECTIVES: list[tuple[str, str, str | None]] = [
    ("for:each", "Renders the element once for each item of an array.", None),
    ("for:item", "Names the current item of a for:each iteration.", None),
    ("for:index", "Names the index of the current item of a for:each iteration.", None),
    ("iterator:it", "Applies a special behavior to the first or last item of an array.", None),
    ("if:true", "Renders the element when the expression is truthy.", None),
    ("if:false", "Renders the element when the expression is falsy.", None),
    ("lwc:if", "Renders the element when the expression is truthy.", None),
    ("lwc:elseif", "Renders the element when the previous conditions are false and this one is truthy.", None),
    ("lwc:else", "Renders the element when all previous conditions are false.", "v"),
    ("lwc:dom", "Lets third-party JavaScript manipulate the DOM of the element.", None),
    ("lwc:ref", "Makes the element reachable from this.refs.", None),
    ("key", "Uniquely identifies each item of an iteration.", None),
]

LWC_DIRECTIVE_VALUES: dict[str, list[str]] = {
    "lwc:dom": ["manual"],
}


class LwcTagProvider(TagProvider):
    """Standard and custom LWC components backed by the tags registry."""

    def __init__(self, tags_cache: TagsCache) -> None:
        self.tags_cache = tags_cache

    def get_id(self) -> str:
        return "lwc"

    def is_applicable(self, language_id: str) -> bool:
        return language_id == "html"

    def collect_tags(self, collector: TagCollector) -> None:
        for tag, info in list(self.tags_cache.get_all().items()):
            collector(tag, CompletionInfo(documentation=info.documentation))

    def collect_attributes(self, tag: str, collector: AttributeCollector) -> None:
        for name, documentation, kind in LWC_DIRECTIVES:
            collector(name, CompletionInfo(documentation=documentation, detail="LWC directive"), kind)

        info = self.tags_cache.get(tag)
        if info:
            for attribute in info.attributes:
                collector(
                    attribute.name,
                    CompletionInfo(documentation=attribute.documentation, detail=attribute.detail),
                    None,
                )

    def collect_values(self, tag: str, attribute: str, collector: ValueCollector) -> None:
        for value in LWC_DIRECTIVE_VALUES.get(attribute, []):
            collector(value)

    def collect_expression_values(self, template_tag: str, collector: ValueCollector) -> None:
        info = self.tags_cache.get(template_tag)
        if not info:
            return
        for prop in info.properties:
            collector(prop.name)
        for method in info.methods:
            collector(method.name)


def all_tag_providers(tags_cache: TagsCache | None) -> list[TagProvider]:
    """The registration list of providers, in suggestion order."""
    providers: list[TagProvider] = [HTML5TagProvider()]
    if tags_cache is not None:
        providers.append(LwcTagProvider(tags_cache))
    return providers
