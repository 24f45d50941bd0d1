import logging
from pathlib import Path

from lsprotocol.types import (
    INITIALIZE,
    TEXT_DOCUMENT_COMPLETION,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    DidChangeConfigurationParams,
    InitializeParams,
    LogMessageParams,
    MessageType,
    Position,
    TextDocumentIdentifier,
    TextDocumentPositionParams,
)
from pygls.uris import to_fs_path

from lwcls import __version__
from lwcls.config import CompletionConfiguration
from lwcls.lsp.capabilities.capabilities import CapabilityManager
from lwcls.lsp.lwc_language_server import LwcLanguageServer
from lwcls.lsp.text_sync_manager import TextSyncManager
from lwcls.utils.find_files import WorkspaceType, detect_workspace_type
from lwcls.workspace.cache import WorkspaceCache

TAG_COMPLETE = "lwc/tagComplete"

logger = logging.getLogger(__name__)


def _field(obj, *names):
    for name in names:
        if isinstance(obj, dict):
            if name in obj:
                return obj[name]
        elif hasattr(obj, name):
            return getattr(obj, name)
    return None


def _to_position_params(params) -> TextDocumentPositionParams | None:
    """Read custom request params, which arrive without a registered type."""
    if isinstance(params, TextDocumentPositionParams):
        return params

    text_document = _field(params, "text_document", "textDocument")
    position = _field(params, "position")
    uri = _field(text_document, "uri")
    line = _field(position, "line")
    character = _field(position, "character")
    if not isinstance(uri, str) or not isinstance(line, int) or not isinstance(character, int):
        return None

    return TextDocumentPositionParams(
        text_document=TextDocumentIdentifier(uri=uri),
        position=Position(line=line, character=character),
    )


def apply_log_level(level: str | None) -> None:
    if not level:
        return
    numeric = logging.getLevelName(level.upper())
    if isinstance(numeric, int):
        logging.getLogger("lwcls").setLevel(numeric)


def create_server() -> LwcLanguageServer:
    """
    Creates and returns a configured Language Server instance.

    The LanguageServer class from pygls handles:
    - JSON-RPC communication with clients (editors)
    - Request/response lifecycle
    - Notifications and event handling
    """
    server = LwcLanguageServer("lwcls", __version__)

    # Text sync handlers are registered up front so caches can add hooks
    # while they initialize.
    server.text_sync_manager = TextSyncManager(server)
    server.text_sync_manager.register_handlers()
    server.template_documents.register_text_sync_hooks()

    @server.feature(INITIALIZE)
    async def initialize(ls: LwcLanguageServer, params: InitializeParams):
        """
        Initialize the server and index the workspace.
        """
        ls.config = CompletionConfiguration.from_settings(params.initialization_options)
        apply_log_level(ls.config.log_level)

        root_uri = params.root_uri
        if not root_uri and params.workspace_folders:
            root_uri = params.workspace_folders[0].uri
        root_path = to_fs_path(root_uri) if root_uri else None

        if not root_path:
            ls.window_log_message(
                LogMessageParams(MessageType.Info, "No workspace folder, only standard tags are available")
            )
            workspace_root = Path.cwd()
            ls.workspace_type = WorkspaceType.UNKNOWN
        else:
            workspace_root = Path(root_path)
            ls.workspace_type = detect_workspace_type(workspace_root)

        ls.window_log_message(
            LogMessageParams(
                MessageType.Info,
                f"Workspace root: {workspace_root} ({ls.workspace_type.value})",
            )
        )

        ls.workspace_cache = WorkspaceCache(workspace_root, ls.workspace_type, server=ls)
        if root_path:
            await ls.workspace_cache.initialize()
        else:
            ls.workspace_cache.caches["tags"].initialize_standard()

        count = len(ls.workspace_cache.caches["tags"].get_all())
        ls.window_log_message(LogMessageParams(MessageType.Info, f"Loaded {count} tags"))

        # Initialize capability manager
        ls.capability_manager = CapabilityManager(ls)

    # Register aggregated handlers
    @server.feature(
        TEXT_DOCUMENT_COMPLETION,
        CompletionOptions(trigger_characters=[".", "-", ":", "<", '"', "=", "/", ">", "{"]),
    )
    async def completion(ls: LwcLanguageServer, params: CompletionParams):
        if ls.capability_manager:
            return await ls.capability_manager.handle_completion(params)
        return CompletionList(is_incomplete=False, items=[])

    @server.feature(TAG_COMPLETE)
    async def tag_complete(ls: LwcLanguageServer, params):
        position_params = _to_position_params(params)
        if position_params is None:
            logger.warning("Invalid %s params: %r", TAG_COMPLETE, params)
            return None
        if ls.capability_manager:
            return await ls.capability_manager.handle_tag_complete(position_params)
        return None

    @server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)
    async def did_change_configuration(ls: LwcLanguageServer, params: DidChangeConfigurationParams):
        ls.config = CompletionConfiguration.from_settings(params.settings)
        apply_log_level(ls.config.log_level)
        ls.window_log_message(LogMessageParams(MessageType.Log, "Completion settings updated"))

    return server
