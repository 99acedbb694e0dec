"""Entry point: serve | search."""

import asyncio
import sys

from angelscript_mcp.core.logger import logger


def _parse_search_args(argv: list[str]) -> tuple[str, int | None, bool]:
    include_details = True
    limit: int | None = None
    query_parts: list[str] = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--no-details":
            include_details = False
        elif arg == "--limit" and i + 1 < len(argv):
            i += 1
            limit = int(argv[i])
        elif arg.startswith("--limit="):
            limit = int(arg.split("=", 1)[1])
        else:
            query_parts.append(arg)
        i += 1
    if query_parts:
        query = " ".join(query_parts).strip()
    else:
        query = sys.stdin.read().strip()
    return query, limit, include_details


async def _serve() -> None:
    from angelscript_mcp.core.bootstrap import build_context
    from angelscript_mcp.core.config import config
    from angelscript_mcp.server.app import AngelscriptMcpServer

    server = AngelscriptMcpServer(build_context(config))
    await server.serve()


def main():
    mode = "serve"
    if len(sys.argv) > 1:
        mode = sys.argv[1].lower()

    if mode == "serve":
        try:
            asyncio.run(_serve())
        except KeyboardInterrupt:
            pass
        except Exception as e:
            logger.error("Fatal error", exception=e)
            sys.exit(1)

    elif mode == "search":
        from angelscript_mcp.interfaces.oneshot import main as run_oneshot_main

        try:
            query, limit, include_details = _parse_search_args(sys.argv[2:])
            sys.exit(run_oneshot_main(query=query, limit=limit, include_details=include_details))
        except ValueError as e:
            print(f"Invalid arguments: {e}", file=sys.stderr)
            sys.exit(2)
        except Exception as e:
            logger.error("Fatal error", exception=e)
            sys.exit(1)

    else:
        print(f"Unknown mode: {mode}", file=sys.stderr)
        print("Usage: python -m angelscript_mcp.main [serve|search <query> [--limit N] [--no-details]]", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
