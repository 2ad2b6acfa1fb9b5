import json
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from lecture_notes.config import settings
from lecture_notes.demo import sample_lecture
from lecture_notes.errors import LectureNotesError
from lecture_notes.models import LectureRecord
from lecture_notes.routes import export, notes, study, transcription


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        return json.dumps({
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        })


def configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    if settings.log_format.lower() == "json":
        for handler in logging.root.handlers:
            handler.setFormatter(JSONFormatter())


configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Refuse to start without credentials; make sure the upload dir exists."""
    settings.require_api_key()
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    logger.info("Lecture Voice-to-Notes API starting (model=%s)", settings.default_model)
    yield
    logger.info("Lecture Voice-to-Notes API shutting down")


app = FastAPI(
    title="lecture-notes",
    description="Lecture audio to transcription, study notes, quizzes and flashcards",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ------------------------------------------------------------------
# Error responses: always {"error": message}
# ------------------------------------------------------------------


@app.exception_handler(LectureNotesError)
async def handle_domain_error(request: Request, exc: LectureNotesError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.detail)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("%s %s invalid body: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(Exception)
async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Something went wrong!"})


app.include_router(transcription.router)
app.include_router(notes.router)
app.include_router(study.router)
app.include_router(export.router)


@app.get("/api/health")
async def health() -> dict:
    return {"status": "OK", "message": "Lecture Voice-to-Notes API is running"}


@app.get("/api/demo")
async def demo() -> LectureRecord:
    """Sample lecture for exercising the UI without an API key."""
    return sample_lecture()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("lecture_notes.main:app", host=settings.host, port=settings.port)
