"""FastAPI application entry point for the RAG vector bridge."""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from shared.logging.logging_setup import setup_logging
from shared.helper.HelperConfig import HelperConfig
from shared.errors import (
    DocumentNotFoundError,
    MisconfigurationError,
    RagQueryError,
    UpstreamUnavailableError,
)
from shared.models.config import AppSettings
from shared.clients.embed.EmbedClientManager import EmbedClientManager
from shared.clients.vector.VectorStoreClientManager import VectorStoreClientManager
from shared.clients.llm.LLMClientManager import LLMClientManager
from server.core.DocumentService import DocumentService
from server.core.RagService import RagService
from server.models.responses import HealthResponse
from server.routers.DocumentRouter import router as document_router
from server.routers.RagRouter import router as rag_router

logging = setup_logging()
helper_config = HelperConfig(logger=logging)
settings = AppSettings.from_helper_config(helper_config)

STATIC_DIR = Path(__file__).parent / "static"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # when the app starts
    app.state.logging = logging
    app.state.helper_config = helper_config
    app.state.settings = settings

    vector_client = VectorStoreClientManager(helper_config=helper_config).get_client()
    embed_client = EmbedClientManager(helper_config=helper_config).get_client()
    llm_clients = LLMClientManager(helper_config=helper_config).get_clients()
    clients = [vector_client, embed_client, *llm_clients.values()]

    logging.info("Booting all clients...")
    for client in clients:
        await client.boot()
    logging.info("All clients booted successfully.")

    try:
        # without its collection the service cannot do anything
        await vector_client.do_ensure_collection()
    except UpstreamUnavailableError as e:
        logging.error("Failed to initialize vector collection: %s", e)
        for client in clients:
            await client.close()
        raise
    await check_connections(embed_client, llm_clients)

    app.state.document_service = DocumentService(
        helper_config=helper_config,
        vector_client=vector_client,
        embed_client=embed_client,
    )
    app.state.rag_service = RagService(
        helper_config=helper_config,
        settings=settings,
        document_service=app.state.document_service,
        llm_clients=llm_clients,
    )
    logging.info("RAG vector bridge ready.", color="green")

    # while the app is running...
    yield

    # when the app shuts down, close all client connections
    logging.info("Shutting down, closing all clients...")
    for client in clients:
        await client.close()
    logging.info("All clients closed.")


async def check_connections(embed_client, llm_clients) -> None:
    """Check connectivity to the embedding service and the LLM providers on startup.

    Failures are logged as warnings only; the affected operations fail on use.
    """
    if not await embed_client.do_healthcheck():
        logging.warning("Embedding service '%s' is not reachable. Adding and searching documents will fail.", embed_client.get_engine_name())

    for provider, client in llm_clients.items():
        try:
            client.check_configuration()
        except MisconfigurationError as e:
            logging.warning("LLM provider '%s' skipped in startup check: %s", provider.value, e)
            continue
        if not await client.do_healthcheck():
            logging.warning("LLM provider '%s' is not reachable. Queries with this provider will fail.", provider.value)


app = FastAPI(
    title="RAG Vector DB API",
    description="API for retrieval-augmented generation with a Chroma vector database.",
    version=settings.app_version,
    lifespan=lifespan,
    docs_url="/api",
    openapi_url="/api-json",
    redoc_url=None,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.cors_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(document_router)
app.include_router(rag_router)


##########################################
########### ERROR HANDLERS ###############
##########################################

@app.exception_handler(DocumentNotFoundError)
async def handle_not_found(request: Request, exc: DocumentNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(MisconfigurationError)
async def handle_misconfiguration(request: Request, exc: MisconfigurationError) -> JSONResponse:
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(UpstreamUnavailableError)
async def handle_upstream(request: Request, exc: UpstreamUnavailableError) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(RagQueryError)
async def handle_rag_query(request: Request, exc: RagQueryError) -> JSONResponse:
    status_code = 503 if isinstance(exc.__cause__, MisconfigurationError) else 502
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


##########################################
############### ROUTES ###################
##########################################

@app.get("/health", tags=["health"])
async def health() -> HealthResponse:
    return HealthResponse(status="ok", version=settings.app_version)


@app.get("/", include_in_schema=False)
async def index() -> FileResponse:
    return FileResponse(STATIC_DIR / "index.html")


if __name__ == "__main__":
    import uvicorn

    logging.info("Starting RAG vector bridge v%s on port %d...", settings.app_version, settings.port)
    logging.info("API Documentation: http://localhost:%d/api", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)
