"""FastAPI application factory and HTTP controllers.

Controllers are intentionally thin: they read the request, delegate to
services and shape JSON responses. Business errors (bad input, unknown
user, duplicate username) are returned as normal 200 responses with an
`error` field; store faults and any other unexpected failure become
HTTP 500 with a generic message.

Endpoints implemented:
- GET /
- GET /health
- POST /api/users
- GET /api/users
- POST /api/users/{user_id}/exercises
- GET /api/users/{user_id}/logs
"""

from fastapi import APIRouter, Depends, FastAPI, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from sqlalchemy.engine import Engine
from sqlmodel import Session
from pathlib import Path
from typing import Optional
import json
import logging
import time
import uuid
from .database import make_engine, create_db_and_tables, get_session
from . import services
from .schemas import UserOut, ExerciseOut, LogEntry, LogOut, ErrorOut
from .utils.payload import read_payload
from .config import settings

logger = logging.getLogger("exercise_tracker.api")
if not logging.getLogger().handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

router = APIRouter()
static_dir = Path(__file__).resolve().parent.parent / "static"


def _fault(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content=ErrorOut(error=message).model_dump())


def _business_error(exc: ValueError) -> dict:
    return ErrorOut(error=str(exc)).model_dump()


@router.post('/api/users')
def create_user(payload: dict = Depends(read_payload), db: Session = Depends(get_session)):
    """Create a user from the `username` body field.

    A taken username is reported as `{"error": "Username already taken"}`
    with status 200.
    """
    try:
        user = services.UserService(db).create(payload.get('username'))
    except services.UsernameTaken as e:
        return _business_error(e)
    except Exception:
        logger.exception("could not save user")
        return _fault("Could not save user")
    return UserOut.from_model(user).model_dump()


@router.get('/api/users')
def list_users(db: Session = Depends(get_session)):
    """List all users as `[{id, username}]` in store order."""
    try:
        users = services.UserService(db).list_users()
    except Exception:
        logger.exception("could not retrieve users")
        return _fault("Could not retrieve users")
    return [UserOut.from_model(u).model_dump() for u in users]


@router.post('/api/users/{user_id}/exercises')
def add_exercise(user_id: str, payload: dict = Depends(read_payload), db: Session = Depends(get_session)):
    """Add an exercise for `user_id`.

    Body fields: `description`, `duration` (minutes) and an optional
    `date`. The response merges the user with the stored exercise.
    """
    svc = services.ExerciseService(db)
    try:
        user, exercise = svc.add_exercise(
            user_id,
            payload.get('description'),
            payload.get('duration'),
            payload.get('date'),
        )
    except (services.InvalidInput, services.UserNotFound) as e:
        return _business_error(e)
    except Exception:
        logger.exception("could not add exercise for user %s", user_id)
        return _fault("Could not add exercise")
    return ExerciseOut.from_models(user, exercise).model_dump()


@router.get('/api/users/{user_id}/logs')
def get_log(
    user_id: str,
    date_from: Optional[str] = Query(default=None, alias='from'),
    date_to: Optional[str] = Query(default=None, alias='to'),
    limit: Optional[str] = None,
    db: Session = Depends(get_session),
):
    """Return the exercise log for `user_id`, oldest first.

    `from`/`to` bound the dates inclusively and `limit` caps the entry
    count; values that do not parse are ignored.
    """
    svc = services.ExerciseService(db)
    try:
        user, exercises = svc.get_log(user_id, date_from, date_to, limit)
    except services.UserNotFound as e:
        return _business_error(e)
    except Exception:
        logger.exception("could not retrieve log for user %s", user_id)
        return _fault("Could not retrieve log")
    log = [LogEntry.from_model(ex) for ex in exercises]
    return LogOut(id=user.id, username=user.username, count=len(log), log=log).model_dump()


@router.get("/", response_class=HTMLResponse)
def home():
    """Landing page with forms for the user and exercise endpoints."""
    return """
    <!DOCTYPE html>
    <html>
    <head>
      <meta charset="UTF-8" />
      <title>Exercise Tracker</title>
      <link rel="stylesheet" href="/static/style.css" />
    </head>
    <body>
      <div class="container">
        <h1>Exercise tracker</h1>
        <form action="/api/users" method="post">
          <h2>Create a New User</h2>
          <input name="username" type="text" placeholder="username" />
          <input type="submit" value="Submit" />
        </form>
        <form id="exercise-form" method="post">
          <h2>Add exercises</h2>
          <input id="uid" type="text" placeholder=":_id" />
          <input name="description" type="text" placeholder="description*" />
          <input name="duration" type="text" placeholder="duration* (mins.)" />
          <input name="date" type="text" placeholder="date (yyyy-mm-dd)" />
          <input type="submit" value="Submit" />
        </form>
        <p>
          <code>GET /api/users/:_id/logs?[from][&amp;to][&amp;limit]</code><br />
          <code>[ ]</code> = optional, <code>from, to</code> = dates (yyyy-mm-dd), <code>limit</code> = number
        </p>
      </div>
      <script>
        const exerciseForm = document.getElementById("exercise-form");
        exerciseForm.addEventListener("submit", () => {
          const userId = document.getElementById("uid").value;
          exerciseForm.action = `/api/users/${userId}/exercises`;
        });
      </script>
    </body>
    </html>
    """


@router.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}


def _request_fields(request: Request, req_id: str, started: float) -> dict:
    return {
        "request_id": req_id,
        "method": request.method,
        "path": request.url.path,
        "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
        "client": request.client.host if request.client else "unknown",
    }


async def request_context_middleware(request: Request, call_next):
    """Tag each response with `X-Request-ID` and log API calls as JSON."""
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    logged = request.url.path.startswith("/api")
    try:
        response: Response = await call_next(request)
    except Exception:
        if logged:
            fields = _request_fields(request, req_id, started)
            logger.exception("request_failed %s", json.dumps(fields, ensure_ascii=True))
        raise
    response.headers["X-Request-ID"] = req_id
    if logged:
        fields = _request_fields(request, req_id, started)
        fields["status_code"] = response.status_code
        logger.info("request_done %s", json.dumps(fields, ensure_ascii=True))
    return response


def create_app(engine: Optional[Engine] = None) -> FastAPI:
    """Build the application around `engine`.

    When no engine is given one is created from `DATABASE_URL`. Tables
    are created on the engine before the app is returned.
    """
    if engine is None:
        engine = make_engine(settings.DATABASE_URL, echo=settings.SQL_ECHO)
    create_db_and_tables(engine)

    app = FastAPI(title="Exercise Tracker API")
    app.state.engine = engine

    # Browser test pages call the API from other origins.
    if settings.ALLOW_DEV_CORS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_methods=["*"],
            allow_headers=["*"],
        )
    app.middleware("http")(request_context_middleware)

    if static_dir.exists():
        app.mount("/static", StaticFiles(directory=static_dir), name="static")
    app.include_router(router)
    return app


def run():
    """Serve the API with uvicorn on `HOST`:`PORT`."""
    import uvicorn

    logger.info("Your app is listening on port %s", settings.PORT)
    uvicorn.run(
        "exercise_tracker.main:create_app",
        factory=True,
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    run()
