"""
godot-bridge Server

This server orchestrates:
1. WebSocket endpoint for the Godot addon (the addon connects as client)
2. HTTP endpoints to list and invoke the Godot tools
3. The command line for installing the addon into a project

Architecture:
┌─────────────────────────────────────────────────────────────┐
│                         server.py                           │
├─────────────────────────────────────────────────────────────┤
│  /tools, /tools/{name}  ←── tool callers                    │
│  /ws/godot              ←── Godot addon connects here       │
│  /godot/status          ←── connection status               │
│                                                             │
│  ┌─────────────────┐      ┌─────────────────┐              │
│  │  Godot Tools    │ ───► │  Godot Manager  │              │
│  │ (input,project) │      │ (send_command)  │              │
│  └─────────────────┘      └─────────────────┘              │
└─────────────────────────────────────────────────────────────┘
"""

import argparse
import json
import logging
import sys
from contextlib import asynccontextmanager
from typing import List, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from godot import GodotManager, BridgeMessage, config, setup_logging
from godot.config import print_startup_banner
from godot.godot_ws import router as godot_router, init_godot_routes
from godot_tools import set_godot_manager
from installer import install_addon, get_addon_status
from routes import tools_router
from version import get_server_version


setup_logging(level=getattr(logging, config.server.log_level.upper(), logging.INFO))
logger = logging.getLogger("godot_bridge.server")


async def handle_godot_domain_event(msg: BridgeMessage) -> None:
    """Handle events pushed by the addon (scene changes, project changes)."""
    logger.debug(f"Godot event: {msg.type}")


godot_manager = GodotManager(
    config=config.godot,
    on_domain_event=handle_godot_domain_event
)


# =============================================================================
# FastAPI Application
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan - startup and shutdown."""
    set_godot_manager(godot_manager)

    print_startup_banner(config.server.host, config.server.port, get_server_version())
    logger.info("Server ready and listening for connections")

    yield

    logger.info("Shutting down...")
    await godot_manager.close_all()
    set_godot_manager(None)


app = FastAPI(
    title="godot-bridge",
    description="Tool server for driving a running Godot editor or game",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.server.cors_origins,
    allow_credentials=config.server.cors_allow_credentials,
    allow_methods=["*"],
    allow_headers=["*"],
)

init_godot_routes(godot_manager)

app.include_router(godot_router)
app.include_router(tools_router)


# =============================================================================
# Health Endpoints
# =============================================================================

@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "godot_connected": godot_manager.is_connected
    }


@app.get("/status")
async def status():
    """Detailed status endpoint."""
    return {
        "status": "running",
        "server_version": get_server_version(),
        "godot": {
            "connected": godot_manager.is_connected,
            "project_path": godot_manager.project_path,
            "project_name": godot_manager.project_name,
            "godot_version": godot_manager.godot_version,
            "addon_version": godot_manager.addon_version,
            "versions_match": godot_manager.versions_match
        }
    }


# =============================================================================
# Main Entry Point
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="godot-bridge",
        description="Expose a running Godot editor or game as remotely invokable tools."
    )
    parser.add_argument(
        "--install-addon",
        metavar="PATH",
        help=(
            "Install or update the addon in a Godot project. The addon files are "
            f"copied from GODOT_ADDON_SOURCE (currently {config.godot.addon_source})"
        )
    )
    parser.add_argument("--addon-status", metavar="PATH", help="Show whether the addon is installed in a Godot project")
    parser.add_argument("--host", default=config.server.host, help=f"Server host (default: {config.server.host})")
    parser.add_argument("--port", type=int, default=config.server.port, help=f"Server port (default: {config.server.port})")
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_server_version()}")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.install_addon:
        result = install_addon(args.install_addon)
        print(result.message)
        return 0 if result.success else 1

    if args.addon_status:
        print(json.dumps(get_addon_status(args.addon_status).to_dict(), indent=2))
        return 0

    import uvicorn

    config.server.host = args.host
    config.server.port = args.port
    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level="warning",  # Reduce Uvicorn noise, our logger handles it
        access_log=False,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
