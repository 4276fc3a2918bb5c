import hashlib

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from hashcalc.config import Settings, load_config
from hashcalc.encoding import from_hex
from hashcalc.errors import InvalidDigestError
from hashcalc.logger import configure_logging, get_logger
from hashcalc.sha256 import digest, hexdigest, sha256_trace

logger = get_logger(__name__)


class HashInput(BaseModel):
    input: str


class HashOutput(BaseModel):
    finalDigest: str
    trace: dict | None = None
    normalHash: str


class VerifyInput(BaseModel):
    input: str
    digest: str


class VerifyOutput(BaseModel):
    match: bool


def _encode(text: str, settings: Settings) -> bytes:
    data = text.encode("utf-8")
    if len(data) > settings.max_input_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"input is {len(data)} bytes, limit is {settings.max_input_bytes}",
        )
    return data


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API. Run standalone with `uvicorn hashcalc.main:create_app --factory`."""
    settings = settings or load_config()
    configure_logging(settings.log_level)
    app = FastAPI(title=settings.app_name)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    async def health():
        return {"status": "ok"}

    @app.post("/api/hash", response_model=HashOutput)
    async def generate_sha256(data: HashInput):
        message = _encode(data.input, settings)
        if settings.enable_trace:
            trace = sha256_trace(message)
            final_digest = trace["finalDigest"]
        else:
            trace = None
            final_digest = hexdigest(message)

        # Built-in SHA-256 alongside, so clients can compare.
        normal_hash = hashlib.sha256(message).hexdigest()
        if normal_hash != final_digest:
            logger.error("Digest mismatch for %d-byte input: %s != %s",
                         len(message), final_digest, normal_hash)

        return HashOutput(finalDigest=final_digest, trace=trace, normalHash=normal_hash)

    @app.post("/api/verify", response_model=VerifyOutput)
    async def verify(data: VerifyInput):
        message = _encode(data.input, settings)
        try:
            expected = from_hex(data.digest)
        except InvalidDigestError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
        return VerifyOutput(match=digest(message) == expected)

    logger.debug("API created (trace=%s, origins=%s)", settings.enable_trace, settings.cors_origins)
    return app