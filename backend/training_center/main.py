"""FastAPI application and HTTP controllers.

This module defines the HTTP endpoints of the training center backend.
Controllers are intentionally thin: they accept requests, delegate to
services, and return JSON responses.

Endpoints implemented:
- POST /auth/register (always a `student` account)
- POST /auth/login
- GET /auth/verify
- GET/POST /users, PUT /users/{id}/status (admin only)
- GET /dashboard
- GET/POST /courses, GET/PUT/DELETE /courses/{id}
- GET/POST /students, GET/PUT/DELETE /students/{id}
- GET/POST /teachers, GET/PUT/DELETE /teachers/{id}
- GET/POST /classes, GET/PUT/DELETE /classes/{id}
- GET /health

Reads require any authenticated user; writes require the `admin` role.
"""

from fastapi import FastAPI, Depends, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from sqlmodel import Session
from typing import Optional, Type
from pydantic import BaseModel
import json
import logging
import time
import uuid
from .database import create_db_and_tables, get_session
from . import services, repositories, models
from .auth import get_current_user, require_admin
from .schemas import (
    RegisterIn, TokenOut, UserIn, UserStatusIn,
    CourseIn, CourseUpdate, StudentIn, StudentUpdate,
    TeacherIn, TeacherUpdate, ClassIn, ClassUpdate,
)
from .config import settings

app = FastAPI(title="Training Center API")
logger = logging.getLogger("training_center.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    context = {
        "request_id": req_id,
        "path": request.url.path,
        "method": request.method,
        "client": request.client.host if request.client else "unknown",
    }
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        context["duration_ms"] = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception("request_failed %s", json.dumps(context, ensure_ascii=True))
        raise
    response.headers["X-Request-ID"] = req_id
    context["status_code"] = response.status_code
    context["duration_ms"] = round((time.perf_counter() - started) * 1000.0, 2)
    logger.info("request_done %s", json.dumps(context, ensure_ascii=True))
    return response


@app.post('/auth/register')
def register(payload: RegisterIn, db: Session = Depends(get_session)):
    """Register a new user (idempotent).

    Returns the existing user if the username is already taken so the
    operation can be repeated by automation and tests. Self-registered
    accounts are students; other roles are created through `POST /users`.
    """
    existing = repositories.UserRepository(db).get_by_username(payload.username)
    if existing:
        return {'id': existing.id, 'username': existing.username, 'role': existing.role}
    try:
        user = services.AuthService(db).register(payload.username, payload.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {'id': user.id, 'username': user.username, 'role': user.role}


@app.post('/auth/login', response_model=TokenOut)
def login(payload: RegisterIn, db: Session = Depends(get_session)):
    """Authenticate a user and return a short-lived JWT token.

    The returned token contains `user_id`, `username` and `role` and is
    signed using the configured JWT secret.
    """
    token = services.AuthService(db).authenticate(payload.username, payload.password)
    if not token:
        raise HTTPException(status_code=401, detail='invalid credentials')
    return {'access_token': token}


@app.get('/auth/verify')
def verify(user: models.User = Depends(get_current_user)):
    """Confirm the bearer token is valid and describe its owner."""
    return {'valid': True, 'user': _user_out(user)}


def _user_out(user: models.User) -> dict:
    return {
        'id': user.id,
        'username': user.username,
        'role': user.role,
        'related_id': user.related_id,
        'status': models.UserStatus(user.status).value,
        'created_at': user.created_at.isoformat(),
    }


@app.get('/users')
def list_users(db: Session = Depends(get_session), admin: models.User = Depends(require_admin)):
    """List every login account (password hashes are never returned)."""
    return [_user_out(u) for u in repositories.UserRepository(db).list()]


@app.post('/users', status_code=201)
def create_user(payload: UserIn, db: Session = Depends(get_session), admin: models.User = Depends(require_admin)):
    """Create an account with any role; a taken username is a 409."""
    try:
        user = services.AuthService(db).register(payload.username, payload.password,
                                                 payload.role, payload.related_id)
    except services.DuplicateUsernameError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _user_out(user)


@app.put('/users/{user_id}/status')
def set_user_status(user_id: int, payload: UserStatusIn, db: Session = Depends(get_session),
                    admin: models.User = Depends(require_admin)):
    """Enable or disable an account. Disabled accounts cannot log in."""
    repo = repositories.UserRepository(db)
    user = repo.get(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail=f'user not found: {user_id}')
    if user.id == admin.id and payload.status != models.UserStatus.enabled:
        raise HTTPException(status_code=400, detail='cannot disable your own account')
    return _user_out(repo.set_status(user, payload.status))


@app.get('/dashboard')
def dashboard(db: Session = Depends(get_session), user: models.User = Depends(get_current_user)):
    """Record counts per entity kind for the landing page."""
    return services.dashboard_counts(db)


def _register_resource(path: str, kind: str, create_schema: Type[BaseModel], update_schema: Type[BaseModel]):
    """Attach list/get/create/update/delete endpoints for one entity kind."""
    label = kind.capitalize()

    def _get_or_404(svc: services.CatalogService, obj_id: int):
        obj = svc.get(obj_id)
        if obj is None:
            raise HTTPException(status_code=404, detail=f'{kind} not found: {obj_id}')
        return obj

    def list_items(name: Optional[str] = None, db: Session = Depends(get_session),
                   user: models.User = Depends(get_current_user)):
        return services.CatalogService(db, kind).list(name=name)

    def get_item(obj_id: int, db: Session = Depends(get_session),
                 user: models.User = Depends(get_current_user)):
        return _get_or_404(services.CatalogService(db, kind), obj_id)

    def create_item(payload: create_schema, db: Session = Depends(get_session),
                    user: models.User = Depends(require_admin)):
        try:
            return services.CatalogService(db, kind).create(payload.model_dump())
        except services.DuplicateCodeError as e:
            raise HTTPException(status_code=409, detail=str(e))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    def update_item(obj_id: int, payload: update_schema, db: Session = Depends(get_session),
                    user: models.User = Depends(require_admin)):
        svc = services.CatalogService(db, kind)
        obj = _get_or_404(svc, obj_id)
        try:
            return svc.update(obj, payload.model_dump(exclude_unset=True))
        except services.DuplicateCodeError as e:
            raise HTTPException(status_code=409, detail=str(e))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))

    def delete_item(obj_id: int, db: Session = Depends(get_session),
                    user: models.User = Depends(require_admin)):
        svc = services.CatalogService(db, kind)
        svc.delete(_get_or_404(svc, obj_id))
        return {'status': 'deleted', 'id': obj_id}

    app.get(path, summary=f"List {label} records")(list_items)
    app.get(f"{path}/{{obj_id}}", summary=f"Get a {label}")(get_item)
    app.post(path, status_code=201, summary=f"Create a {label}")(create_item)
    app.put(f"{path}/{{obj_id}}", summary=f"Update a {label}")(update_item)
    app.delete(f"{path}/{{obj_id}}", summary=f"Delete a {label}")(delete_item)


_register_resource('/courses', 'course', CourseIn, CourseUpdate)
_register_resource('/students', 'student', StudentIn, StudentUpdate)
_register_resource('/teachers', 'teacher', TeacherIn, TeacherUpdate)
_register_resource('/classes', 'class', ClassIn, ClassUpdate)


@app.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}
