from __future__ import annotations

import json
import logging
from typing import Annotated, Final

from fastapi import Depends, FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from redis import Redis
from starlette.responses import Response

from api.config import Settings
from api.dependencies import (
    get_queue,
    get_redis,
    get_request_logger,
    get_settings,
    get_staff_auth,
    get_table_store,
)
from api.errors import (
    HealthStatusError,
    health_exception_handler,
    http_exception_handler,
    unhandled_exception_handler,
)
from api.health import compute_health
from api.logging import setup_logging
from api.models import (
    ForwardJobResponse,
    ForwardJobStatus,
    HealthResponse,
    ScheduleInserted,
    ScheduleRejected,
    ScheduleRowErrors,
)
from api.pages import login_page, page, portal_content
from api.services import ForwardJobService
from api.types import QueueProtocol, RedirectRecorder
from core.gate import AccessGate
from core.schedules import SCHEDULE_EXAMPLE, normalize_schedule, validate_schedule
from core.staff_auth import StaffSessionAuth
from core.table_store import TRANSPORT_ERRORS, TableStore

STAFF_SESSION_COOKIE: Final[str] = "staff_user"
PORTAL_ROUTE: Final[str] = "/staff-portal"


def _sync_session_cookie(
    resp: Response, auth: StaffSessionAuth, stored: str | None
) -> None:
    value = auth.session_value()
    if value is not None:
        resp.set_cookie(STAFF_SESSION_COOKIE, value, httponly=True, samesite="lax")
    elif stored is not None:
        resp.delete_cookie(STAFF_SESSION_COOKIE)


def create_app() -> FastAPI:
    setup_logging(Settings.from_env().log_level)
    app = FastAPI(title="Shiftlink", version="1.0.0")
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(HealthStatusError, health_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    @app.get("/api/v1/health", response_model=HealthResponse)
    async def health(
        redis: Annotated[Redis, Depends(get_redis)],
        logger: Annotated[logging.Logger, Depends(get_request_logger)],
        settings: Annotated[Settings, Depends(get_settings)],
    ) -> HealthResponse:
        return compute_health(redis, settings, logger)

    @app.post("/api/v1/forwards", response_model=ForwardJobResponse)
    async def create_forward(
        redis: Annotated[Redis, Depends(get_redis)],
        logger: Annotated[logging.Logger, Depends(get_request_logger)],
        queue: Annotated[QueueProtocol, Depends(get_queue)],
    ) -> ForwardJobResponse:
        service = ForwardJobService(redis=redis, logger=logger, queue=queue)
        return await service.create_job()

    @app.get("/api/v1/forwards/{job_id}", response_model=ForwardJobStatus)
    async def get_forward(
        job_id: str,
        redis: Annotated[Redis, Depends(get_redis)],
        logger: Annotated[logging.Logger, Depends(get_request_logger)],
        queue: Annotated[QueueProtocol, Depends(get_queue)],
    ) -> ForwardJobStatus:
        service = ForwardJobService(redis=redis, logger=logger, queue=queue)
        status_obj = service.get_job_status(job_id)
        if status_obj is None:
            raise HTTPException(status_code=404, detail="Forward job not found")
        return status_obj

    @app.post("/webhook")
    async def receive_schedules(
        request: Request,
        store: Annotated[TableStore, Depends(get_table_store)],
        settings: Annotated[Settings, Depends(get_settings)],
        logger: Annotated[logging.Logger, Depends(get_request_logger)],
    ) -> JSONResponse:
        try:
            payload = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise HTTPException(status_code=400, detail="Invalid JSON body") from exc

        items = payload if isinstance(payload, list) else [payload]
        normalized = [
            normalize_schedule(item if isinstance(item, dict) else {}) for item in items
        ]
        errors = [validate_schedule(row) for row in normalized]
        if any(errs for errs in errors):
            rejected = ScheduleRejected(
                message="Invalid payload for schedules",
                errors=[
                    ScheduleRowErrors(index=i, errors=errs)
                    for i, errs in enumerate(errors)
                ],
                example=SCHEDULE_EXAMPLE,
            )
            return JSONResponse(status_code=400, content=rejected.model_dump(mode="json"))

        try:
            result = await store.insert(settings.schedules_table, normalized)
        except TRANSPORT_ERRORS as exc:
            logger.error("Schedule insert failed: %s", exc)
            return JSONResponse(status_code=500, content={"error": str(exc)})
        if result.error is not None:
            logger.error(
                "Table store insert error: %s",
                result.error.message,
                extra={"table": settings.schedules_table},
            )
            return JSONResponse(status_code=500, content={"error": result.error.message})

        logger.info(
            "Inserted schedules",
            extra={"table": settings.schedules_table, "rows": len(result.rows)},
        )
        inserted = ScheduleInserted(
            message="Data inserted successfully",
            inserted=len(result.rows),
            rows=result.rows,
        )
        return JSONResponse(status_code=200, content=inserted.model_dump(mode="json"))

    @app.get("/staff-auth", response_class=HTMLResponse)
    async def staff_login(request: Request) -> HTMLResponse:
        return HTMLResponse(login_page(error=request.query_params.get("error")))

    @app.post("/staff-auth", response_model=None)
    async def staff_login_post(
        auth: Annotated[StaffSessionAuth, Depends(get_staff_auth)],
        email: Annotated[str, Form()] = "",
    ) -> Response:
        if not email.strip():
            return HTMLResponse(
                login_page(error="Please enter your email address"), status_code=400
            )
        result = await auth.sign_in(email)
        if not result.success:
            return HTMLResponse(
                login_page(error=result.error, email=email), status_code=401
            )
        resp = RedirectResponse(url=PORTAL_ROUTE, status_code=303)
        _sync_session_cookie(resp, auth, None)
        return resp

    @app.post("/staff-auth/logout")
    async def staff_logout(
        request: Request,
        auth: Annotated[StaffSessionAuth, Depends(get_staff_auth)],
        settings: Annotated[Settings, Depends(get_settings)],
    ) -> RedirectResponse:
        auth.sign_out()
        resp = RedirectResponse(url=settings.auth_landing_route, status_code=303)
        _sync_session_cookie(resp, auth, request.cookies.get(STAFF_SESSION_COOKIE))
        return resp

    @app.get(PORTAL_ROUTE, response_model=None)
    async def staff_portal(
        request: Request,
        auth: Annotated[StaffSessionAuth, Depends(get_staff_auth)],
        settings: Annotated[Settings, Depends(get_settings)],
    ) -> Response:
        stored = request.cookies.get(STAFF_SESSION_COOKIE)
        await auth.check_session(stored)

        navigator = RedirectRecorder()
        gate = AccessGate(auth, navigator, landing_route=settings.auth_landing_route)
        markup = gate.render(portal_content(auth.staff_user))

        resp: Response
        if navigator.target is None:
            resp = HTMLResponse(page("Staff Portal", markup))
        else:
            # Replace-style navigation answers 303 See Other, push-style 302.
            status = 303 if navigator.replace else 302
            if markup:
                # Errored: the panel travels in the body of the redirect itself.
                resp = HTMLResponse(
                    page("Staff Portal", markup),
                    status_code=status,
                    headers={"Location": navigator.target},
                )
            else:
                resp = RedirectResponse(url=navigator.target, status_code=status)
        _sync_session_cookie(resp, auth, stored)
        return resp

    return app
