"""
TagsCache: registry of component tags offered in templates.

Holds the bundled lightning-* standard components and every custom component
found in the workspace, keyed by tag name. Entries are always replaced as a
whole, so a completion request never sees a half-built record.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

import yaml
from lsprotocol.types import (
    DidChangeWatchedFilesParams,
    DidSaveTextDocumentParams,
    FileChangeType,
    FileEvent,
    Location,
    MessageType,
)
from pygls.uris import from_fs_path, to_fs_path

from lwcls.javascript.compiler import (
    ClassMember,
    ComponentMetadata,
    get_methods,
    get_properties,
    get_public_properties,
    to_lsp_range,
)
from lwcls.workspace.cache import CachedWorkspace, WorkspaceCache
from lwcls.workspace.utils import (
    camel_to_kebab,
    find_component_modules,
    is_js_component,
    tag_from_file,
)

STANDARD_NAMESPACE = "lightning"
STANDARD_RESOURCE = Path(__file__).parent / "resources" / "lwc_standard.yml"


def _component_module(uri: str) -> Path | None:
    """Path of the component JS module at uri, or None for any other file."""
    fs_path = to_fs_path(uri)
    if not fs_path:
        return None
    file_path = Path(fs_path)
    if "lwc" not in file_path.parts and "modules" not in file_path.parts:
        return None
    if not is_js_component(file_path):
        return None
    return file_path


class StandardTagsError(Exception):
    """The bundled standard component description could not be loaded."""


@dataclass
class AttributeInfo:
    """An attribute offered for a tag."""

    name: str
    documentation: str | None = None
    type: str | None = None
    location: Location | None = None
    detail: str | None = None


@dataclass
class TagInfo:
    """Represents an indexed component tag."""

    name: str
    is_custom: bool = True
    attributes: list[AttributeInfo] = field(default_factory=list)
    location: Location | None = None
    documentation: str | None = None
    namespace: str | None = None
    properties: list[ClassMember] = field(default_factory=list)
    methods: list[ClassMember] = field(default_factory=list)

    def get_attribute(self, name: str) -> AttributeInfo | None:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        return None


class TagsCache(CachedWorkspace):
    """Cache for standard and custom component tags."""

    def __init__(
        self,
        workspace_cache: WorkspaceCache,
        standard_resource: Path = STANDARD_RESOURCE,
    ) -> None:
        super().__init__(workspace_cache)
        self.standard_resource = standard_resource
        self._tags: dict[str, TagInfo] = {}

    async def initialize(self):
        """Bootstrap: standard components first, then the workspace scan."""
        self.initialize_standard()
        await self.scan()

    def initialize_standard(self) -> None:
        """Load the standard components, continuing without them on error."""
        try:
            self.load_standard_components()
        except StandardTagsError as e:
            self.log(str(e), MessageType.Error)

    # ===== Registry operations =====

    def upsert(self, tag: str, info: TagInfo) -> None:
        self._tags[tag] = info

    def remove(self, tag: str) -> None:
        self._tags.pop(tag, None)

    def get(self, id: str) -> TagInfo | None:
        """Get a specific tag by name."""
        return self._tags.get(id)

    def get_all(self) -> dict[str, TagInfo]:
        """Get all tags, in registration order."""
        return self._tags

    def reset(self) -> None:
        self._tags.clear()

    # ===== Standard components =====

    def load_standard_components(self) -> None:
        """
        Register every bundled standard component as lightning-<name>.

        Attribute names are described in camelCase and stored in kebab-case.

        Raises:
            StandardTagsError: if the resource is missing or malformed
        """
        try:
            with open(self.standard_resource, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise StandardTagsError(
                f"Error loading standard components from {self.standard_resource}: {e}"
            ) from e

        if not isinstance(data, dict):
            raise StandardTagsError(
                f"Standard components resource {self.standard_resource} is not a mapping"
            )

        loaded: dict[str, TagInfo] = {}
        for name, description in data.items():
            if not isinstance(name, str) or not isinstance(description, dict):
                raise StandardTagsError(f"Invalid standard component entry: {name!r}")

            attributes = []
            for attribute in description.get("attributes") or []:
                if not isinstance(attribute, dict) or not isinstance(attribute.get("name"), str):
                    raise StandardTagsError(f"Invalid attribute for standard component {name!r}")
                attributes.append(
                    AttributeInfo(
                        name=camel_to_kebab(attribute["name"]),
                        documentation=attribute.get("description"),
                        type=attribute.get("type"),
                        detail="LWC standard attribute",
                    )
                )

            tag = f"{STANDARD_NAMESPACE}-{name}"
            loaded[tag] = TagInfo(
                name=tag,
                is_custom=True,
                attributes=attributes,
                documentation=description.get("description"),
                namespace=STANDARD_NAMESPACE,
            )

        # nothing is registered unless the whole resource is valid
        for tag, info in loaded.items():
            self.upsert(tag, info)

    # ===== Custom components =====

    async def scan(self):
        """
        Index every component module in the workspace.

        Modules compile concurrently; a module that fails is skipped.
        """
        files = find_component_modules(self.workspace_root, self.workspace_type)
        start = time.perf_counter()

        await asyncio.gather(*(self.add_custom_tag_from_file(f) for f in files))

        elapsed = (time.perf_counter() - start) * 1000
        self.log(f"Indexed {len(files)} component modules in {elapsed:.0f} ms", MessageType.Log)

    async def add_custom_tag_from_file(self, file_path: Path) -> TagInfo | None:
        """Compile one component module and register its tag."""
        tag = tag_from_file(file_path, self.workspace_cache.is_sfdx_project)
        if not tag:
            return None

        try:
            result = await self.workspace_cache.compiler.compile(file_path)
        except Exception as e:
            self.log(f"Error compiling {file_path}: {e}", MessageType.Warning)
            return None

        if result.diagnostics:
            self.log(
                f"Error compiling {file_path}: {'; '.join(result.diagnostics)}",
                MessageType.Warning,
            )
        if result.metadata is None:
            return None

        info = self._tag_info_from_metadata(tag, from_fs_path(str(file_path.resolve())), result.metadata)
        self.upsert(tag, info)
        return info

    def remove_custom_tag_from_file(self, file_path: Path) -> None:
        tag = tag_from_file(file_path, self.workspace_cache.is_sfdx_project)
        if tag:
            self.remove(tag)

    def _tag_info_from_metadata(self, tag: str, uri: str, metadata: ComponentMetadata) -> TagInfo:
        attributes = [
            AttributeInfo(
                name=camel_to_kebab(member.name),
                documentation=member.doc,
                location=Location(uri=uri, range=to_lsp_range(member.loc)),
                detail="LWC custom attribute",
            )
            for member in get_public_properties(metadata)
        ]
        return TagInfo(
            name=tag,
            is_custom=True,
            attributes=attributes,
            location=Location(uri=uri, range=to_lsp_range(metadata.declaration_loc)),
            documentation=metadata.doc,
            namespace=tag.split("-")[0],
            properties=get_properties(metadata),
            methods=get_methods(metadata),
        )

    # ===== Incremental updates =====

    def register_text_sync_hooks(self) -> None:
        if not self.server or not getattr(self.server, "text_sync_manager", None):
            return
        text_sync = self.server.text_sync_manager
        text_sync.add_on_save_hook(self._on_component_saved)
        text_sync.add_on_watched_files_hook(self._on_watched_files_changed)

    async def _on_component_saved(self, params: DidSaveTextDocumentParams) -> None:
        file_path = _component_module(params.text_document.uri)
        if file_path is None:
            return
        info = await self.add_custom_tag_from_file(file_path)
        if info:
            self.log(f"Updated tag {info.name} (save): {file_path.name}", MessageType.Log)

    async def _on_watched_files_changed(self, params: DidChangeWatchedFilesParams) -> None:
        await self.handle_file_events(params.changes)

    async def handle_file_events(self, events: Sequence[FileEvent]) -> None:
        """
        Apply created/deleted component modules to the registry.

        Changed events are ignored; saved modules are refreshed by the save hook.
        """
        pending = []
        for event in events:
            file_path = _component_module(event.uri)
            if file_path is None:
                continue

            if event.type == FileChangeType.Created:
                pending.append(self.add_custom_tag_from_file(file_path))
            elif event.type == FileChangeType.Deleted:
                self.remove_custom_tag_from_file(file_path)

        if pending:
            await asyncio.gather(*pending)
