"""Provider and context wiring at startup."""

from angelscript_mcp.core.config import Config
from angelscript_mcp.core.context import ReadinessGate, SearchContext
from angelscript_mcp.core.logger import logger
from angelscript_mcp.providers import create_provider


def build_context(cfg: Config) -> SearchContext:
    """Validate configuration and build the process-wide search context.

    Raises RuntimeError listing every configuration problem found.
    """
    errors = cfg.validate()
    if errors:
        raise RuntimeError("Invalid configuration: " + "; ".join(errors))

    provider = create_provider(cfg)
    logger.info(
        "Bootstrap complete: provider=%s, detail concurrency=%s, detail timeout=%s",
        cfg.provider,
        cfg.detail_concurrency,
        f"{cfg.detail_timeout}s" if cfg.detail_timeout else "none",
    )
    return SearchContext(
        provider=provider,
        gate=ReadinessGate(),
        detail_concurrency=cfg.detail_concurrency,
        detail_timeout=cfg.detail_timeout,
    )
