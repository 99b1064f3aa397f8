"""Task Manager API -- flask-fluxo demo application.

Demonstrates:
- Typed handlers bound from path, query, header and JSON body
- Validation rules with a registered translation
- Auth middleware sharing the current user through the Context
- OpenAPI document at /openapi.json and Swagger UI at /docs

Run:
    flask --app examples/demo/app.py run
    flask --app examples/demo/app.py fluxo openapi --format yaml --dir build
"""

from __future__ import annotations

from typing import Annotated, Optional

from flask import Flask
from pydantic import BaseModel

from flask_fluxo import (
    Bind,
    Context,
    Fluxo,
    created,
    handle,
    middleware,
    no_content,
    not_found,
    register_translation,
    unauthorized,
)


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------


class User(BaseModel):
    id: Annotated[str, Bind(json="id")] = ""
    name: Annotated[str, Bind(json="name")] = ""


class Task(BaseModel):
    id: Annotated[int, Bind(json="id")] = 0
    title: Annotated[str, Bind(json="title")] = ""
    done: Annotated[bool, Bind(json="done")] = False
    owner: Annotated[str, Bind(json="owner")] = ""


class AuthHeader(BaseModel):
    token: Annotated[str, Bind(header="Authorization", validate="required")] = ""


class ListTasks(BaseModel):
    done: Annotated[Optional[bool], Bind(form="done")] = None
    limit: Annotated[int, Bind(form="limit", validate="max=100")] = 20


class TaskID(BaseModel):
    id: Annotated[int, Bind(uri="id")] = 0


class CreateTask(BaseModel):
    title: Annotated[str, Bind(json="title", validate="required,min=3")] = ""


class UpdateTask(BaseModel):
    id: Annotated[int, Bind(uri="id")] = 0
    title: Annotated[Optional[str], Bind(json="title")] = None
    done: Annotated[Optional[bool], Bind(json="done")] = None


# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------

_tasks: dict[int, Task] = {
    1: Task(id=1, title="Write docs", owner="u1"),
    2: Task(id=2, title="Ship release", done=True, owner="u1"),
}
_tokens = {"Bearer demo-token": User(id="u1", name="Demo User")}


def _find(task_id: int) -> Task:
    task = _tasks.get(task_id)
    if task is None:
        raise not_found(f"Task {task_id} not found")
    return task


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


def require_user(ctx: Context, req: AuthHeader) -> None:
    user = _tokens.get(req.token)
    if user is None:
        raise unauthorized("Invalid token")
    ctx.set_authenticated_user(user)


def list_tasks(ctx: Context, req: ListTasks) -> list[Task]:
    tasks = [t for t in _tasks.values() if req.done is None or t.done == req.done]
    return tasks[: req.limit]


def get_task(ctx: Context, req: TaskID) -> Task:
    return _find(req.id)


def create_task(ctx: Context, req: CreateTask) -> Task:
    user = ctx.get_authenticated_user(User)
    task = Task(id=max(_tasks, default=0) + 1, title=req.title, owner=user.id)
    _tasks[task.id] = task
    return created(task)


def update_task(ctx: Context, req: UpdateTask) -> Task:
    task = _find(req.id)
    changes = {k: v for k, v in {"title": req.title, "done": req.done}.items() if v is not None}
    task = task.model_copy(update=changes)
    _tasks[task.id] = task
    return task


def delete_task(ctx: Context, req: TaskID) -> None:
    _find(req.id)
    del _tasks[req.id]
    return no_content()


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------

app = Flask(__name__)
app.config["FLUXO_SWAGGER_ENABLED"] = True
app.config["FLUXO_SWAGGER_TITLE"] = "Task Manager API"
app.config["FLUXO_SWAGGER_VERSION"] = "0.1.0"

fluxo = Fluxo(app)
register_translation("es", "min", "{field} debe tener al menos {param} caracteres")

fluxo.get("/tasks", handle(list_tasks))
fluxo.get("/tasks/:id", handle(get_task))

tasks = fluxo.group("/tasks", middleware(require_user))
tasks.post("", handle(create_task))
tasks.patch("/:id", handle(update_task))
tasks.delete("/:id", handle(delete_task))


if __name__ == "__main__":
    app.run(debug=True)
