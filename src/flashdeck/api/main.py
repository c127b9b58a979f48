"""
FastAPI application for Flashdeck
Vocabulary flashcard decks, study sessions with a retry queue, and AI-assisted card generation.
"""
import os
from dotenv import load_dotenv

# Load env vars immediately
load_dotenv()

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from flashdeck import __version__
from flashdeck.models.database import create_tables
from flashdeck.utils.config_loader import get_setting


# ============= FASTAPI APP SETUP =============
app = FastAPI(
    title="Flashdeck API",
    description="Flashcard decks, study sessions and AI-generated cards",
    version=__version__,
    docs_url="/docs",
    redoc_url="/redoc"
)

cors_origins = get_setting(["server", "cors_origins"], env_var="CORS_ORIGINS", default="*")
if isinstance(cors_origins, str):
    cors_origins = [origin.strip() for origin in cors_origins.split(",") if origin.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=False,  # wildcard origins cannot be combined with credentials
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Log unhandled exceptions and answer with a generic 500"""
    logger.opt(exception=exc).error(f"Unhandled exception on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )

@app.on_event("startup")
async def startup_event():
    """Initialize database on startup"""
    create_tables()
    logger.info("Database tables created/verified")


@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "message": "Flashdeck API",
        "version": __version__,
        "docs": "/docs",
        "endpoints": {
            "auth": {
                "login": "POST /api/auth/login",
                "register": "POST /api/auth/register",
                "me": "GET /api/auth/me"
            },
            "decks": {
                "list": "GET /api/decks",
                "create": "POST /api/decks",
                "detail": "GET /api/decks/{deck_id}",
                "update": "PUT /api/decks/{deck_id}",
                "delete": "DELETE /api/decks/{deck_id}",
                "generate": "POST /api/decks/{deck_id}/generate"
            },
            "cards": {
                "list": "GET /api/decks/{deck_id}/cards",
                "create": "POST /api/decks/{deck_id}/cards",
                "reorder": "PUT /api/decks/{deck_id}/cards/order",
                "clear": "DELETE /api/decks/{deck_id}/cards",
                "update": "PUT /api/cards/{card_id}",
                "delete": "DELETE /api/cards/{card_id}"
            },
            "study": {
                "start": "POST /api/decks/{deck_id}/study",
                "state": "GET /api/study/{session_id}",
                "action": "POST /api/study/{session_id}/{action}",
                "key": "POST /api/study/{session_id}/keys/{signal}",
                "finish": "DELETE /api/study/{session_id}"
            }
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "gemini_api_configured": bool(os.getenv("GEMINI_API_KEY"))
    }


# Import and include routers
from flashdeck.api.routes import auth, decks, cards, study

app.include_router(auth.router)
app.include_router(decks.router)
app.include_router(cards.router)
app.include_router(study.router)
