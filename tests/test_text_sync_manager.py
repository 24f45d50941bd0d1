import pytest
from lsprotocol.types import (
    DidChangeTextDocumentParams,
    DidChangeWatchedFilesParams,
    DidCloseTextDocumentParams,
    DidSaveTextDocumentParams,
    FileChangeType,
    FileEvent,
    LogMessageParams,
    MessageType,
    TextDocumentContentChangeWholeDocument,
    TextDocumentIdentifier,
    VersionedTextDocumentIdentifier,
)

from lwcls.lsp.text_sync_manager import TextSyncManager


@pytest.fixture
def server():
    """Create a mock server for testing."""
    from unittest.mock import Mock

    server = Mock()
    server.window_log_message = Mock()
    return server


@pytest.fixture
def text_sync(server):
    """Create TextSyncManager instance."""
    return TextSyncManager(server)


def change_params(uri="file:///lwc/app/app.html"):
    return DidChangeTextDocumentParams(
        text_document=VersionedTextDocumentIdentifier(uri=uri, version=2),
        content_changes=[TextDocumentContentChangeWholeDocument(text="<div></div>")],
    )


@pytest.mark.asyncio
async def test_hook_registration(text_sync):
    """Test that hooks can be registered."""
    async def test_hook(params):
        pass

    text_sync.add_on_change_hook(test_hook)
    text_sync.add_on_save_hook(test_hook)
    text_sync.add_on_close_hook(test_hook)
    text_sync.add_on_watched_files_hook(test_hook)

    assert text_sync._on_change_hooks == [test_hook]
    assert text_sync._on_save_hooks == [test_hook]
    assert text_sync._on_close_hooks == [test_hook]
    assert text_sync._on_watched_files_hooks == [test_hook]


@pytest.mark.asyncio
async def test_change_hook_execution(text_sync):
    """Test that registered hooks are called."""
    received_uri = None

    async def test_hook(params: DidChangeTextDocumentParams):
        nonlocal received_uri
        received_uri = params.text_document.uri

    text_sync.add_on_change_hook(test_hook)

    await text_sync._broadcast_on_change(change_params())

    assert received_uri == "file:///lwc/app/app.html"


@pytest.mark.asyncio
async def test_save_hook_execution(text_sync):
    saved = []

    async def test_hook(params: DidSaveTextDocumentParams):
        saved.append(params.text_document.uri)

    text_sync.add_on_save_hook(test_hook)

    await text_sync._broadcast_on_save(
        DidSaveTextDocumentParams(text_document=TextDocumentIdentifier(uri="file:///lwc/card/card.js"))
    )

    assert saved == ["file:///lwc/card/card.js"]


@pytest.mark.asyncio
async def test_close_hook_execution(text_sync):
    closed = []

    async def test_hook(params: DidCloseTextDocumentParams):
        closed.append(params.text_document.uri)

    text_sync.add_on_close_hook(test_hook)

    await text_sync._broadcast_on_close(
        DidCloseTextDocumentParams(text_document=TextDocumentIdentifier(uri="file:///a.html"))
    )

    assert closed == ["file:///a.html"]


@pytest.mark.asyncio
async def test_watched_files_hook_execution(text_sync):
    received = []

    async def test_hook(params: DidChangeWatchedFilesParams):
        received.extend(params.changes)

    text_sync.add_on_watched_files_hook(test_hook)

    params = DidChangeWatchedFilesParams(
        changes=[FileEvent(uri="file:///lwc/card/card.js", type=FileChangeType.Created)]
    )
    await text_sync._broadcast_on_watched_files(params)

    assert [e.uri for e in received] == ["file:///lwc/card/card.js"]


@pytest.mark.asyncio
async def test_multiple_hooks_execution_order(text_sync):
    """Test that multiple hooks run in registration order."""
    execution_order = []

    async def hook1(params):
        execution_order.append(1)

    async def hook2(params):
        execution_order.append(2)

    async def hook3(params):
        execution_order.append(3)

    text_sync.add_on_change_hook(hook1)
    text_sync.add_on_change_hook(hook2)
    text_sync.add_on_change_hook(hook3)

    await text_sync._broadcast_on_change(change_params())

    assert execution_order == [1, 2, 3]


@pytest.mark.asyncio
async def test_hook_error_isolation(text_sync, server):
    """Test that hook errors don't prevent other hooks from running."""
    hook2_called = False

    async def failing_hook(params):
        raise ValueError("Test error")

    async def successful_hook(params):
        nonlocal hook2_called
        hook2_called = True

    text_sync.add_on_watched_files_hook(failing_hook)
    text_sync.add_on_watched_files_hook(successful_hook)

    # Should not raise exception
    await text_sync._broadcast_on_watched_files(DidChangeWatchedFilesParams(changes=[]))

    # Second hook should still run
    assert hook2_called

    # Error should be logged
    call_args = server.window_log_message.call_args[0][0]
    assert isinstance(call_args, LogMessageParams)
    assert call_args.type == MessageType.Error
    assert "failing_hook" in call_args.message
