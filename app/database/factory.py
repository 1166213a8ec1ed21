"""
Builds the handler context for the configured storage backend
"""
import logging

from app.config.database import db_config
from app.config.settings import settings
from app.database.memory_repository import InMemoryFormRepository, InMemorySubmissionRepository
from app.database.mongo_repository import MongoFormRepository, MongoSubmissionRepository
from app.handlers.base import HandlerContext

logger = logging.getLogger(__name__)

MEMORY = "memory"
MONGO = "mongo"


def create_context(backend: str = None) -> HandlerContext:
    backend = (backend or settings.STORAGE_BACKEND).lower()
    if backend == MEMORY:
        return HandlerContext(forms=InMemoryFormRepository(), submissions=InMemorySubmissionRepository())
    if backend == MONGO:
        return HandlerContext(forms=MongoFormRepository(db_config), submissions=MongoSubmissionRepository(db_config))
    raise ValueError(f"Unknown storage backend: {backend}")


async def start_context(backend: str = None) -> HandlerContext:
    """Create the context and open the database connection it needs"""
    backend = (backend or settings.STORAGE_BACKEND).lower()
    ctx = create_context(backend)
    if backend == MONGO:
        await db_config.connect_db()
        await ctx.forms.ensure_indexes()
        await ctx.submissions.ensure_indexes()
    logger.info("Storage backend ready: %s", backend)
    return ctx


async def stop_context(backend: str = None):
    backend = (backend or settings.STORAGE_BACKEND).lower()
    if backend == MONGO:
        await db_config.close_db()
