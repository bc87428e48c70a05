"""HTTP surface — thin FastAPI layer over TranscriptionGateway."""
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

from speech_gateway.constants import HEALTH_PATH, TRANSCRIBE_PATH
from speech_gateway.gateway import TranscriptionGateway

# Every method is routed so non-POST calls still get a JSON envelope.
_ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(gateway: TranscriptionGateway) -> FastAPI:
    router = APIRouter()

    @router.api_route(TRANSCRIBE_PATH, methods=_ALL_METHODS)
    async def transcribe(request: Request) -> JSONResponse:
        body = await request.body()
        envelope = await gateway.handle(
            request.method, body, request.headers.get("content-type")
        )
        # Always 200: callers parse the envelope instead of branching on status.
        return JSONResponse(envelope, status_code=200)

    @router.get(HEALTH_PATH)
    async def health() -> dict:
        config = gateway.config
        return {
            "status": "ok",
            "mode": config.mode.value,
            "credential": bool(config.api_key),
        }

    app = FastAPI(title="Speech Gateway")
    app.include_router(router)
    return app
