import logging
from contextlib import asynccontextmanager
from typing import Annotated, Iterable

from fastapi import Depends, FastAPI, Path, Request
from sqlalchemy import Engine
from sqlalchemy.orm import Session

from .config import Settings
from .database import init_db, make_engine, make_session_factory
from .errors import NotFoundError, register_error_handlers
from .models import TaskCreate, TaskOut, TaskUpdate
from .repository import TaskRepository

logger = logging.getLogger(__name__)

TAGS = [
    {"name": "Tasks", "description": "General APIs"},
    {"name": "Task", "description": "Specific task API"},
]

SERVER_ERROR = {500: {"description": "Server error"}}

# Ids outside the store's 64-bit integer range never reach the driver.
MAX_ID = 2**63 - 1
TaskId = Annotated[int, Path(ge=-MAX_ID - 1, le=MAX_ID, description="The task id")]


def get_db(request: Request) -> Iterable[Session]:
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_repository(db: Session = Depends(get_db)) -> TaskRepository:
    return TaskRepository(db)


def create_app(settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    """Build the API around one engine, created from ``settings`` unless given."""
    settings = settings or Settings.from_env()
    owns_engine = engine is None
    if engine is None:
        engine = make_engine(settings.database_url, echo=settings.database_echo)
    init_db(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        if owns_engine:
            engine.dispose()

    app = FastAPI(
        title="Swagger API documentation for Todo list API",
        version="1.0.0",
        servers=[{"url": f"http://localhost:{settings.port}"}],
        openapi_tags=TAGS,
        docs_url="/api-docs",
        openapi_url="/api-docs/openapi.json",
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    register_error_handlers(app)

    @app.get(
        "/",
        tags=["Tasks"],
        summary="Lists all the tasks, or an empty array if no tasks were found",
        response_description="The list of the tasks",
        responses=SERVER_ERROR,
    )
    def get_tasks(repo: TaskRepository = Depends(get_repository)) -> list[TaskOut]:
        return [TaskOut(**task.to_dict()) for task in repo.find()]

    @app.post(
        "/",
        tags=["Tasks"],
        summary="Create a new task",
        response_description="The created task.",
        responses=SERVER_ERROR,
    )
    def create_task(task: TaskCreate, repo: TaskRepository = Depends(get_repository)) -> TaskOut:
        record = repo.create(**task.model_dump())
        saved = repo.save(record)
        logger.info("Created task %s", saved.id)
        return TaskOut(**saved.to_dict())

    @app.get(
        "/{task_id}",
        tags=["Task"],
        summary="Get the task by id",
        response_description="The task response by id",
        responses={404: {"description": "Task not found"}, **SERVER_ERROR},
    )
    def get_task(task_id: TaskId, repo: TaskRepository = Depends(get_repository)) -> TaskOut:
        task = repo.find_one(task_id)
        if not task:
            raise NotFoundError("Task not found")
        return TaskOut(**task.to_dict())

    @app.patch(
        "/{task_id}",
        tags=["Task"],
        summary="Update the task by id",
        response_description="Task updated successfully",
        responses={404: {"description": "Task not found"}, **SERVER_ERROR},
    )
    def update_task(task_id: TaskId, task: TaskUpdate, repo: TaskRepository = Depends(get_repository)) -> str:
        # Only keys sent in the body are written.
        affected = repo.update(task_id, task.model_dump(exclude_unset=True))
        if affected == 0:
            raise NotFoundError("Task not found")
        logger.info("Updated task %s", task_id)
        return "Task updated successfully"

    @app.delete(
        "/{task_id}",
        tags=["Task"],
        summary="Remove the task by id",
        response_description="Task deleted successfully",
        responses={404: {"description": "The task was not found"}, **SERVER_ERROR},
    )
    def delete_task(task_id: TaskId, repo: TaskRepository = Depends(get_repository)) -> str:
        affected = repo.delete(task_id)
        if affected == 0:
            raise NotFoundError("The task was not found")
        logger.info("Deleted task %s", task_id)
        return "Task deleted successfully"

    return app
