import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.config import settings
from app.core.exceptions import TodoAppError

from app.api.auth.routes import router as auth_router
from app.api.users.routes import router as users_router
from app.api.settings.routes import router as settings_router

from app.api.todo.item.routes import router as todo_router
from app.api.todo.category.routes import router as category_router
from app.api.todo.tag.routes import router as tag_router
from app.api.todo.comment.routes import router as comment_router
from app.api.todo.sharing.routes import router as sharing_router
from app.api.todo.filter_preset.routes import router as filter_preset_router

# Scheduler for reminders and push delivery
from app.core.scheduler import shutdown_scheduler, start_scheduler

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.SCHEDULER_ENABLED:
        start_scheduler()
    yield
    shutdown_scheduler()

app = FastAPI(lifespan=lifespan)


@app.exception_handler(TodoAppError)
async def todo_app_error_handler(request: Request, exc: TodoAppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Routers
app.include_router(auth_router, prefix="/auth", tags=["Auth"])
app.include_router(users_router, prefix="/users", tags=["Users"])
app.include_router(settings_router, prefix="/settings", tags=["Settings"])

app.include_router(todo_router, prefix="/todos", tags=["Todos"])
app.include_router(category_router, prefix="/categories", tags=["Categories"])
app.include_router(tag_router, prefix="/tags", tags=["Tags"])
app.include_router(comment_router, prefix="/comments", tags=["Comments"])
app.include_router(sharing_router, prefix="/sharing", tags=["Sharing"])
app.include_router(filter_preset_router, prefix="/filter-presets", tags=["Filter Presets"])

@app.get("/ping")
def ping():
    return {"message": "pong"}
