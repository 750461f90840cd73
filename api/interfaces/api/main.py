# api/interfaces/api/main.py
from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from api.infrastructure.config import get_settings

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    from api.infrastructure.duckdb_connection import get_connection
    get_connection()  # falha no startup se o arquivo do pipeline nao abre
    yield


app = FastAPI(
    title="IGMA Diagnostico API",
    description="Diagnostico territorial: scores por pilar, regras de governanca, "
    "prescricoes e evolucao entre ciclos.",
    debug=settings.debug,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url=None,
)


@app.middleware("http")
async def add_security_headers(request: Request, call_next: object) -> Response:
    response = await call_next(request)  # type: ignore[misc]
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response  # type: ignore[return-value]


# API somente leitura: calcula sob demanda, nunca grava.
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["GET"],
    allow_headers=["*"],
)

from api.interfaces.api.routes.destino_routes import router as destino_router  # noqa: E402
from api.interfaces.api.routes.diagnostico_routes import router as diagnostico_router  # noqa: E402

app.include_router(diagnostico_router, prefix="/api")
app.include_router(destino_router, prefix="/api")
