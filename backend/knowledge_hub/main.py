from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from .core.database import init_db
from .core.logging_config import setup_logging
from .core.telemetry import setup_telemetry
from .core.events.handlers import register_event_handlers
from .api.routes import auth, users, documents, chat
from .api.exceptions import (
    knowledge_hub_exception_handler,
    http_exception_handler,
    validation_exception_handler,
    general_exception_handler
)
from .exceptions import KnowledgeHubException
from .services import get_file_storage
from .config import settings

# Setup logging first
setup_logging()

app = FastAPI(title="AI Knowledge Hub API", version="1.0.0")

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register exception handlers
app.add_exception_handler(KnowledgeHubException, knowledge_hub_exception_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Initialize database
init_db()

# Stored files are removed by the document deletion handler
register_event_handlers(get_file_storage())

if settings.telemetry_enabled:
    setup_telemetry(app)

# Include routers
app.include_router(auth.router, prefix="/api")
app.include_router(users.router, prefix="/api")
app.include_router(documents.router, prefix="/api")
app.include_router(chat.router, prefix="/api")


@app.get("/")
def root():
    return {"message": "AI Knowledge Hub API"}


@app.get("/health")
def health():
    return {"status": "healthy"}
