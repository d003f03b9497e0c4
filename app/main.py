import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.api import api_router
from app.core.config import settings
from app.core.exceptions import (
    AppException,
    app_exception_handler,
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.core.logging import configure_logging
from app.db.chain import chain, connect_to_chain, disconnect_from_chain
from app.services.session_service import ledger_session

logger = logging.getLogger(__name__)


async def start_session():
    """Connect to the chain and load the default account's view of the ledger."""
    configure_logging()
    await connect_to_chain()
    try:
        await ledger_session.on_account_changed(chain.default_account)
    except AppException as e:
        logger.error("Could not load initial session: %s", e.message)


async def stop_session():
    ledger_session.disconnect()
    await disconnect_from_chain()


@asynccontextmanager
async def lifespan(app: FastAPI):
    await start_session()
    yield
    await stop_session()


app = FastAPI(title=settings.PROJECT_NAME, version=settings.PROJECT_VERSION, description=settings.DESCRIPTION, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(AppException, app_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, generic_exception_handler)

@app.get("/")
async def root():
    return {"message": "Welcome to Chainsplit API"}

app.include_router(api_router, prefix=settings.API_V1_STR)
