"""FastAPI HTTP transport for the reasoning engine."""
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import Body, FastAPI, Request, Response
from fastapi.responses import JSONResponse

from code_reasoning.config import AppConfig, get_app_config, get_settings
from code_reasoning.core import ReasoningEngine
from code_reasoning.models import ChainSnapshot
from code_reasoning.server import RpcDispatcher, tool_definition
from code_reasoning.utils import setup_logging, get_logger

logger = get_logger(__name__)

STATUS_CODES = {"processed": 200, "failed": 422, "aborted": 409}


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """Build an app with its own engine and chain."""
    config = config or get_app_config()
    engine = ReasoningEngine(config.reasoning)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Manage application lifecycle."""
        logger.info(
            "app_startup",
            server=config.service.server_name,
            tool=config.service.tool_name,
            max_thoughts=config.reasoning.max_thoughts,
        )
        yield
        summary = engine.tracker.summary()
        logger.info("app_shutdown", history_length=summary.thought_history_length)

    app = FastAPI(
        title="Code Reasoning API",
        description="Sequential, branchable and revisable reasoning chains",
        version=config.service.version,
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.dispatcher = RpcDispatcher(engine, config.service)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler."""
        logger.exception("unhandled_error", error=str(exc))
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "message": "Internal server error",
                    "type": type(exc).__name__,
                    "code": "internal_error",
                }
            },
        )

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        summary = engine.tracker.summary()
        return {
            "status": "healthy",
            "version": config.service.version,
            "tool": config.service.tool_name,
            "thought_history_length": summary.thought_history_length,
        }

    @app.get("/v1/tools")
    def list_tools():
        """List the single reasoning tool."""
        return {"tools": [tool_definition(config.service)]}

    @app.post("/v1/thoughts")
    def submit_thought(payload: Any = Body(...)):
        """Process one thought; the body is the raw tool arguments."""
        response = engine.process(payload)
        return JSONResponse(
            status_code=STATUS_CODES[response.status],
            content=response.model_dump(mode="json"),
        )

    @app.get("/v1/chain", response_model=ChainSnapshot)
    def chain_snapshot():
        """Current history and branches."""
        return engine.snapshot()

    @app.post("/rpc")
    def rpc(message: Any = Body(...)):
        """JSON-RPC endpoint sharing the stdio dispatcher."""
        reply = app.state.dispatcher.handle(message)
        if reply is None:
            return Response(status_code=204)
        return JSONResponse(content=reply)

    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)

    uvicorn.run(
        "code_reasoning.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )
