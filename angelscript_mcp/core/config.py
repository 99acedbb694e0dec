"""Configuration from environment variables (.env)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

PROVIDER_LSP = "lsp"
PROVIDER_SNAPSHOT = "snapshot"


def _optional_float(raw: str | None) -> float | None:
    if raw is None or not raw.strip():
        return None
    return float(raw)


@dataclass
class Config:
    project_root: Path
    logs_dir: Path
    log_events: bool
    log_level: str
    provider: str
    lsp_command: str
    lsp_args: list[str]
    lsp_root: Path
    snapshot_path: Path | None
    detail_concurrency: int
    detail_timeout: float | None  # Seconds per detail fetch; None waits indefinitely

    @classmethod
    def load(cls) -> "Config":
        project_root = Path(__file__).parent.parent.parent
        snapshot = os.getenv("ANGELSCRIPT_SNAPSHOT_PATH", "").strip()
        return cls(
            project_root=project_root,
            logs_dir=project_root / "logs",
            log_events=os.getenv("ANGELSCRIPT_LOG_EVENTS", "").strip().lower() in ("1", "true", "yes"),
            log_level=os.getenv("ANGELSCRIPT_LOG_LEVEL", "INFO").strip().upper() or "INFO",
            provider=os.getenv("ANGELSCRIPT_PROVIDER", PROVIDER_LSP).strip().lower() or PROVIDER_LSP,
            lsp_command=os.getenv("ANGELSCRIPT_LSP_COMMAND", ""),
            lsp_args=[a.strip() for a in os.getenv("ANGELSCRIPT_LSP_ARGS", "").split(",") if a.strip()],
            lsp_root=Path(os.getenv("ANGELSCRIPT_LSP_ROOT", "") or os.getcwd()),
            snapshot_path=Path(snapshot) if snapshot else None,
            detail_concurrency=int(os.getenv("ANGELSCRIPT_DETAIL_CONCURRENCY", "10")),
            detail_timeout=_optional_float(os.getenv("ANGELSCRIPT_DETAIL_TIMEOUT")),
        )

    def validate(self) -> list[str]:
        errors = []
        if self.provider not in (PROVIDER_LSP, PROVIDER_SNAPSHOT):
            errors.append(
                f"Unknown ANGELSCRIPT_PROVIDER '{self.provider}' (expected '{PROVIDER_LSP}' or '{PROVIDER_SNAPSHOT}')"
            )
        elif self.provider == PROVIDER_LSP and not self.lsp_command:
            errors.append("ANGELSCRIPT_LSP_COMMAND is required for the lsp provider")
        elif self.provider == PROVIDER_SNAPSHOT:
            if self.snapshot_path is None:
                errors.append("ANGELSCRIPT_SNAPSHOT_PATH is required for the snapshot provider")
            elif not self.snapshot_path.exists():
                errors.append(f"Snapshot file not found: {self.snapshot_path}")
        if self.detail_concurrency < 1:
            errors.append("ANGELSCRIPT_DETAIL_CONCURRENCY must be at least 1")
        if self.detail_timeout is not None and self.detail_timeout <= 0:
            errors.append("ANGELSCRIPT_DETAIL_TIMEOUT must be positive when set")
        return errors


config = Config.load()
