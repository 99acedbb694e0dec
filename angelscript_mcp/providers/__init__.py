"""Symbol providers: language server (live) and cached snapshot (standalone)."""

from angelscript_mcp.core.config import PROVIDER_SNAPSHOT, Config
from angelscript_mcp.providers.interface import ProviderError, SymbolProvider
from angelscript_mcp.providers.language_server import (
    LanguageServerError,
    LanguageServerProvider,
)
from angelscript_mcp.providers.snapshot import SnapshotProvider


def create_provider(cfg: Config) -> SymbolProvider:
    if cfg.provider == PROVIDER_SNAPSHOT:
        if cfg.snapshot_path is None:
            raise ValueError("ANGELSCRIPT_SNAPSHOT_PATH is required for the snapshot provider")
        return SnapshotProvider(cfg.snapshot_path)
    return LanguageServerProvider(cfg.lsp_command, cfg.lsp_args, root=cfg.lsp_root)


__all__ = [
    "LanguageServerError",
    "LanguageServerProvider",
    "ProviderError",
    "SnapshotProvider",
    "SymbolProvider",
    "create_provider",
]
