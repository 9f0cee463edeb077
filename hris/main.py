import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.cors import CORSMiddleware

from hris.config import settings
from hris.cron_jobs import scheduler
from hris.db import StorageError
from hris.routers import (
    appraisals,
    attendance,
    auth,
    departments,
    documents,
    employees,
    integrations,
    leave_requests,
    notifications,
    onboarding,
    permissions,
    roles,
    system,
    users,
)

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s',
)

logger = logging.getLogger(__name__)

PROD_MODE = settings.PRODUCTION_MODE


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.ENABLE_SCHEDULER:
        scheduler.start()
    yield
    if scheduler.running:
        scheduler.shutdown(wait=False)


app = FastAPI(title=settings.PROJECT_TITLE, lifespan=lifespan)

app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(users.router, prefix="/api/users", tags=["users"])
app.include_router(employees.router, prefix="/api/employees", tags=["employees"])
app.include_router(roles.router, prefix="/api/roles", tags=["roles"])
app.include_router(permissions.router, prefix="/api/permissions", tags=["permissions"])
app.include_router(departments.router, prefix="/api/departments", tags=["departments"])
app.include_router(appraisals.router, prefix="/api/appraisals", tags=["appraisals"])
app.include_router(leave_requests.router, prefix="/api/leave-requests", tags=["leave_requests"])
app.include_router(documents.router, prefix="/api/documents", tags=["documents"])
app.include_router(attendance.router, prefix="/api/attendance-uploads", tags=["attendance"])
app.include_router(onboarding.router, prefix="/api/onboarding", tags=["onboarding"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])
app.include_router(integrations.router, prefix="/api/integrations", tags=["integrations"])
app.include_router(system.router, prefix="/api", tags=["system"])

# Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    # 400 instead of FastAPI's default 422
    errors = [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": errors})


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError):
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Could not persist changes"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong!"})


@app.get("/")
def index():
    return {"message": "HRIS API is running"}


if __name__ == "__main__":
    # Run Uvicorn with reload only outside production
    uvicorn.run("hris.main:app", host="0.0.0.0", port=settings.PORT, reload=not PROD_MODE)
