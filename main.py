# main.py

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from dotenv import load_dotenv
import logging
import uvicorn

# Load environment variables
load_dotenv()

from config.settings import Settings, validate_environment
from connection_hub import ConnectionHub
from connection_registry import ConnectionRegistry
from relay import SignalingRelay
from room_manager import RoomManager
from room_store import RoomStore
from routes.room_management import router as room_router
from signaling import signaling_endpoint

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Handle app startup and shutdown"""
    settings = app.state.settings
    logger.info(
        f"Starting signaling server (max {settings.max_participants} participants per room, "
        f"empty rooms evicted after {settings.room_eviction_delay}s)"
    )

    yield

    logger.info("Shutting down signaling server")
    await app.state.room_manager.shutdown()

def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or validate_environment()

    app = FastAPI(
        title="Call Signaling Relay",
        description="Room membership and WebRTC negotiation relay for peer-to-peer calls",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.environment != "production" else None,
        redoc_url="/redoc" if settings.environment != "production" else None,
    )

    hub = ConnectionHub()
    app.state.settings = settings
    app.state.hub = hub
    app.state.room_manager = RoomManager(
        RoomStore(),
        ConnectionRegistry(),
        hub,
        max_participants=settings.max_participants,
        eviction_delay=settings.room_eviction_delay,
    )
    app.state.relay = SignalingRelay(hub)

    wildcard = "*" in settings.allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=not wildcard,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.include_router(room_router, prefix="/api", tags=["Room Management"])
    app.add_api_websocket_route("/ws", signaling_endpoint)

    @app.get("/")
    async def root():
        return {
            "message": "Call Signaling Relay",
            "status": "running",
            "version": "1.0.0",
            "environment": settings.environment,
            "endpoints": {
                "create_room": "/api/create-room",
                "room_exists": "/api/room/{room_id}",
                "list_rooms": "/api/rooms",
                "participants": "/api/room/{room_id}/participants",
                "signaling": "/ws",
                "health": "/health"
            }
        }

    @app.get("/health")
    async def health_check(request: Request):
        room_manager = request.app.state.room_manager
        return {
            "status": "healthy",
            "rooms": len(room_manager.store),
            "connections": len(request.app.state.hub),
            "boundConnections": len(room_manager.registry),
            "environment": settings.environment,
        }

    @app.exception_handler(500)
    async def internal_server_error_handler(request, exc):
        logger.error(f"Internal server error: {exc}")
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred"
            }
        )

    @app.exception_handler(404)
    async def not_found_handler(request, exc):
        detail = getattr(exc, "detail", None)
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not found",
                "message": detail if detail and detail != "Not Found" else "The requested endpoint does not exist",
                "available_endpoints": [
                    "/api/create-room",
                    "/api/room",
                    "/api/rooms",
                    "/api/room/{room_id}",
                    "/api/room/{room_id}/participants",
                    "/ws",
                    "/health"
                ]
            }
        )

    return app

# Fail on bad settings before logging is configured from them
settings = validate_environment()
logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
app = create_app(settings)

if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
        access_log=True,
        workers=1,  # rooms live in process memory
    )
