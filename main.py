import logging

from fastapi import FastAPI, Request, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware

from broadcaster import ConnectionRegistry
from config import settings
from database import SessionLocal, init_db
from errors import register_error_handlers
from routes import analytics_router, reports_router, zones_router
from seed import seed_database

# Enable logging
logging.basicConfig(
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO)
)

logger = logging.getLogger(__name__)

app = FastAPI(title="HushMap", description="Crowdsourced noise reports and quiet zones")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Open WebSocket subscribers; handlers reach it through get_connection_registry
app.state.connections = ConnectionRegistry()

register_error_handlers(app)

app.include_router(reports_router)
app.include_router(zones_router)
app.include_router(analytics_router)


# Request logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    response = await call_next(request)
    logger.debug("%s %s -> %s", request.method, request.url.path, response.status_code)
    return response


@app.get("/health")
async def health():
    return {"status": "ok", "message": "HushMap API is running"}


@app.websocket("/ws")
async def live_updates(websocket: WebSocket):
    """Live feed of newly submitted reports"""
    registry: ConnectionRegistry = websocket.app.state.connections
    await registry.connect(websocket)
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            logger.debug("Received from WebSocket client: %s", message.get("text") or message.get("bytes"))
    except WebSocketDisconnect:
        pass
    finally:
        registry.disconnect(websocket)


# Initialize application
@app.on_event("startup")
async def startup_event():
    """Initialize application"""
    init_db()
    logger.info("Database tables created successfully")
    if settings.SEED_DATABASE:
        db = SessionLocal()
        try:
            seed_database(db)
        finally:
            db.close()
    logger.info("HushMap application started")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
