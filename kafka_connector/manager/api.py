"""
FastAPI application exposing the connector to an external orchestrator.

Payloads travel as YAML text; operations travel as the JSON strings
returned by ``/plan``.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from kafka_connector import setup_logging
from kafka_connector.common.exceptions import (
    ClusterNotFoundError,
    DeserializeError,
    InvalidAddressError,
    InvalidOperationError,
    KafkaConnectorError,
    NoResultReturnedError,
    PlanValidationError,
    RemoteOperationError,
)
from kafka_connector.kafka.executor import OpExecResponse
from kafka_connector.manager.connector import KafkaConnector
from kafka_connector.manager.models import (
    DocstringRequest,
    EqRequest,
    ListRequest,
    OpExecBatchRequest,
    OpExecRequest,
    PathRequest,
    PayloadRequest,
    PlanRequest,
)
from kafka_connector.settings import ConnectorSettings

logger = logging.getLogger(__name__)

connector: Optional[KafkaConnector] = None

_ERROR_STATUS = [
    (InvalidAddressError, status.HTTP_400_BAD_REQUEST, "INVALID_ADDRESS"),
    (InvalidOperationError, status.HTTP_400_BAD_REQUEST, "INVALID_OPERATION"),
    (DeserializeError, status.HTTP_422_UNPROCESSABLE_ENTITY, "DESERIALIZE_FAILURE"),
    (PlanValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY, "PLAN_VALIDATION_FAILURE"),
    (ClusterNotFoundError, status.HTTP_404_NOT_FOUND, "CLUSTER_NOT_FOUND"),
    (RemoteOperationError, status.HTTP_502_BAD_GATEWAY, "REMOTE_OPERATION_FAILURE"),
    (NoResultReturnedError, status.HTTP_502_BAD_GATEWAY, "NO_RESULT_RETURNED"),
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan - startup and shutdown."""
    global connector

    settings = ConnectorSettings()
    setup_logging(settings.log_level)

    # Startup
    logger.info(f"Starting Kafka connector for prefix {settings.prefix}")
    connector = KafkaConnector(prefix=settings.prefix)
    await connector.init()

    yield

    # Shutdown
    logger.info("Shutting down Kafka connector")
    if connector:
        await connector.close()


app = FastAPI(
    title="Kafka Connector API",
    description="Declarative reconciliation of Kafka topics, ACLs and quotas",
    version="0.1.0",
    lifespan=lifespan,
)


def _get_connector() -> KafkaConnector:
    if connector is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Connector not initialized")
    return connector


def _exec_response(response: OpExecResponse) -> dict:
    return {
        "outputs": response.outputs,
        "friendly_message": response.friendly_message,
        "implemented": response.implemented,
    }


@app.exception_handler(KafkaConnectorError)
async def connector_exception_handler(request: Request, exc: KafkaConnectorError):
    """Map connector errors to status codes."""
    status_code, error_code = status.HTTP_500_INTERNAL_SERVER_ERROR, "CONNECTOR_ERROR"
    for error_cls, code, name in _ERROR_STATUS:
        if isinstance(exc, error_cls):
            status_code, error_code = code, name
            break

    logger.warning(f"{request.method} {request.url.path} failed with {error_code}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"error_code": error_code, "message": str(exc), "details": type(exc).__name__},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.error(f"Unhandled exception in {request.method} {request.url}: {exc}", exc_info=True)

    error_response = {
        "error_code": "INTERNAL_ERROR",
        "message": "An internal error occurred while processing the request",
        "details": str(exc),
    }

    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error_response)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "kafka-connector"}


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "service": "Kafka Connector API",
        "version": "0.1.0",
        "endpoints": [
            "/filter",
            "/list",
            "/subpaths",
            "/get",
            "/plan",
            "/op_exec",
            "/op_exec_batch",
            "/diag",
            "/eq",
            "/skeletons",
            "/docstring",
        ],
        "docs": "/docs",
        "health": "/health",
    }


@app.post("/filter")
async def filter_path(request: PathRequest):
    """Classify a path as config, resource or neither."""
    result = await _get_connector().filter(request.path)
    return {"path": request.path, "filter": result.value}


@app.post("/list")
async def list_paths(request: ListRequest):
    """List live resource paths under a subpath."""
    paths = await _get_connector().list(request.subpath)
    return {"total": len(paths), "paths": paths}


@app.get("/subpaths")
async def subpaths():
    return {"subpaths": await _get_connector().subpaths()}


@app.post("/get")
async def get_resource(request: PathRequest):
    """Fetch the live state of one resource."""
    result = await _get_connector().get(request.path)
    if result is None:
        return {"path": request.path, "exists": False, "resource_definition": None, "outputs": None}
    return {
        "path": request.path,
        "exists": True,
        "resource_definition": result.resource_definition.decode("utf-8"),
        "outputs": result.outputs,
    }


@app.post("/plan")
async def plan_resource(request: PlanRequest):
    """Plan the operations that move current state to desired state."""
    ops = await _get_connector().plan(request.path, request.current, request.desired)
    logger.info(f"Planned {len(ops)} operation(s) for {request.path}")
    return {
        "path": request.path,
        "ops": [{"op_definition": op.op_definition, "friendly_message": op.friendly_message} for op in ops],
    }


@app.post("/op_exec")
async def op_exec(request: OpExecRequest):
    """Execute one planned operation."""
    response = await _get_connector().op_exec(request.path, request.op)
    return {"path": request.path, **_exec_response(response)}


@app.post("/op_exec_batch")
async def op_exec_batch(request: OpExecBatchRequest):
    """Execute planned operations for many addresses; failures are reported per item."""
    outcomes = await _get_connector().op_exec_batch([(item.path, item.op) for item in request.items])
    return {
        "total": len(outcomes),
        "failed": sum(1 for outcome in outcomes if not outcome.ok),
        "results": [
            {
                "path": outcome.path,
                "ok": outcome.ok,
                "response": _exec_response(outcome.response) if outcome.response else None,
                "error": outcome.error,
            }
            for outcome in outcomes
        ],
    }


@app.post("/diag")
async def diag(request: PayloadRequest):
    """Report schema problems in a payload."""
    result = await _get_connector().diag(request.path, request.body)
    diagnostics = [] if result is None else [vars(d) for d in result.diagnostics]
    return {"path": request.path, "valid": result is None, "diagnostics": diagnostics}


@app.post("/eq")
async def eq(request: EqRequest):
    """Compare two payloads semantically."""
    return {"path": request.path, "equal": await _get_connector().eq(request.path, request.a, request.b)}


@app.get("/skeletons")
async def skeletons():
    items = await _get_connector().get_skeletons()
    return {"skeletons": [{"addr": item.addr, "body": item.body.decode("utf-8")} for item in items]}


@app.post("/docstring")
async def docstring(request: DocstringRequest):
    """Describe a configuration or resource model field."""
    result = await _get_connector().get_docstring(request.type_name, request.field)
    if result is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"No documentation for {request.type_name}")
    return {"type_name": request.type_name, "field": request.field, "markdown": result.markdown}


if __name__ == "__main__":
    import uvicorn

    settings = ConnectorSettings()
    uvicorn.run(
        "kafka_connector.manager.api:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
