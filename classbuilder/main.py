from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import List, Optional

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .schemas import CourseIn, CourseOut
from .store import CourseNotFound, CourseStore


logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("classbuilder")


HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8080"))
STATIC_DIR = os.environ.get("STATIC_DIR", "frontend/dist")
CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")


def _parse_origins(raw: str) -> list[str]:
    raw = (raw or "").strip()
    if not raw or raw == "*":
        return ["*"]
    return [o.strip() for o in raw.split(",") if o.strip()]


def get_store(request: Request) -> CourseStore:
    return request.app.state.store


def _describe_error(err: dict) -> str:
    loc = [str(p) for p in err.get("loc", ()) if p != "body"]
    return f"{'.'.join(loc) or 'body'}: {err.get('msg', 'invalid')}"


async def bad_request(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if any(e.get("type") == "json_invalid" for e in errors):
        detail = "Invalid JSON body"
    else:
        detail = "; ".join(_describe_error(e) for e in errors)
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, detail)
    return JSONResponse(status_code=400, content={"detail": detail})


def create_app(
    store: Optional[CourseStore] = None,
    static_dir: Optional[str] = STATIC_DIR,
    cors_origins: str = CORS_ORIGINS,
) -> FastAPI:
    app = FastAPI(title="Class Builder")
    app.state.store = store if store is not None else CourseStore()
    # Malformed bodies are 400, not FastAPI's default 422
    app.add_exception_handler(RequestValidationError, bad_request)

    origins = _parse_origins(cors_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Browsers reject "*" with credentials
        allow_credentials=origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health() -> Response:
        return Response(content="OK", media_type="text/plain")

    @app.get("/api/courses", response_model=List[CourseOut], response_model_exclude_none=True)
    async def list_courses(store: CourseStore = Depends(get_store)):
        return [CourseOut.from_course(c) for c in store.list()]

    @app.get("/api/courses/{course_id}", response_model=CourseOut, response_model_exclude_none=True)
    async def get_course(course_id: str, store: CourseStore = Depends(get_store)):
        try:
            course = store.get(course_id)
        except CourseNotFound:
            raise HTTPException(status_code=404, detail="Course not found")
        return CourseOut.from_course(course)

    @app.post(
        "/api/courses",
        status_code=201,
        response_model=CourseOut,
        response_model_exclude_none=True,
    )
    async def create_course(payload: CourseIn, store: CourseStore = Depends(get_store)):
        return CourseOut.from_course(store.create(payload.to_course()))

    @app.put("/api/courses/{course_id}", response_model=CourseOut, response_model_exclude_none=True)
    async def update_course(
        course_id: str, payload: CourseIn, store: CourseStore = Depends(get_store)
    ):
        try:
            course = store.update(course_id, payload.to_course())
        except CourseNotFound:
            raise HTTPException(status_code=404, detail="Course not found")
        return CourseOut.from_course(course)

    @app.delete("/api/courses/{course_id}", status_code=204)
    async def delete_course(course_id: str, store: CourseStore = Depends(get_store)) -> Response:
        try:
            store.delete(course_id)
        except CourseNotFound:
            raise HTTPException(status_code=404, detail="Course not found")
        return Response(status_code=204)

    # Mounted last so the API routes above take precedence
    if static_dir:
        path = Path(static_dir)
        if path.is_dir():
            app.mount("/", StaticFiles(directory=str(path), html=True), name="frontend")
            logger.info("Serving frontend from %s", path.resolve())
        else:
            logger.info("No frontend build at %s, static files disabled", path)

    return app


app = create_app()
