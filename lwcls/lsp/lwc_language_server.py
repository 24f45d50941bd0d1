from pygls.lsp.server import LanguageServer

from lwcls.config import CompletionConfiguration
from lwcls.lsp.capabilities.capabilities import CapabilityManager
from lwcls.lsp.template_documents import TemplateDocuments
from lwcls.lsp.text_sync_manager import TextSyncManager
from lwcls.utils.find_files import WorkspaceType
from lwcls.workspace.cache import WorkspaceCache


class LwcLanguageServer(LanguageServer):
    """
    Custom Language Server with LWC-specific attributes.

    Attributes:
        workspace_cache: Cache for indexed component tags
        template_documents: Parsed templates reused between requests
        config: Completion settings sent by the client
    """

    def __init__(self, name: str, version: str):
        super().__init__(name, version)

        self.workspace_cache: WorkspaceCache | None = None
        self.capability_manager: CapabilityManager | None = None
        self.text_sync_manager: TextSyncManager | None = None
        self.template_documents = TemplateDocuments(self)
        self.config = CompletionConfiguration()
        self.workspace_type: WorkspaceType = WorkspaceType.UNKNOWN
