"""Task HTTP endpoints served behind API Gateway."""

import logging
from typing import Any, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError

from src.core.config import Constants, settings
from src.core.dependencies import get_dependencies
from src.core.errors import TodoTaskError, error_status_code
from src.domain.task import Task, TaskCreateRequest, TaskStatusUpdate
from src.interface.file_storage import FileStorage
from src.interface.lambda_context import Invocation
from src.services.auth_service import AuthService, Caller
from src.services.task_service import TaskService


router = APIRouter(prefix="/tasks", tags=["tasks"])
logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def get_task_service() -> TaskService:
    return get_dependencies().task_service


def get_auth_service() -> AuthService:
    return get_dependencies().auth_service


def get_file_storage() -> FileStorage:
    return get_dependencies().file_storage


def _aws_event(request: Request) -> dict[str, Any]:
    """The raw API Gateway event Mangum places in the ASGI scope."""
    return request.scope.get("aws.event") or {}


async def get_caller(request: Request, auth_service: AuthService = Depends(get_auth_service)) -> Caller:
    """Resolve the caller from the gateway authorizer context.

    IdentityLookupError is not translated: a caller without a resolvable email
    fails the invocation.
    """
    authorizer = _aws_event(request).get("requestContext", {}).get("authorizer")
    return await auth_service.resolve_caller(authorizer)


def get_invocation(request: Request) -> Invocation:
    """Request and Lambda identifiers stamped on published events."""
    request_id = _aws_event(request).get("requestContext", {}).get("requestId")
    return Invocation.from_context(request.scope.get("aws.context"), request_id=request_id)


async def _parse_body(request: Request, model: type[ModelT]) -> ModelT:
    try:
        payload = await request.json()
    except ValueError as e:
        raise HTTPException(status_code=Constants.HTTP_BAD_REQUEST, detail="Invalid JSON payload") from e

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(status_code=Constants.HTTP_BAD_REQUEST, detail=str(e)) from e


def _http_error(error: TodoTaskError, *, not_found_status: int) -> HTTPException:
    logger.info("Task request failed: %s", error.message, extra={"error_code": error.code})
    return HTTPException(status_code=error_status_code(error, not_found_status=not_found_status), detail=error.message)


def _dump(task: Task) -> dict[str, Any]:
    return task.model_dump(mode="json", by_alias=True)


@router.get("")
async def get_tasks(
    email: str | None = None,
    taskid: str | None = None,
    caller: Caller = Depends(get_caller),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    """List or fetch tasks.

    - ``?email=..&taskid=..``: one task (404 if missing)
    - ``?email=..``: tasks of that owner
    - no parameters: every task (admin only)
    """
    try:
        if email is None:
            tasks = await service.list_all_tasks(caller)
            return JSONResponse(content={"result": [_dump(task) for task in tasks]}, status_code=Constants.HTTP_OK)

        if taskid:
            task = await service.get_task(caller, email=email, task_id=taskid)
            return JSONResponse(content=_dump(task), status_code=Constants.HTTP_OK)

        tasks = await service.list_tasks(caller, email=email)
        return JSONResponse(content=[_dump(task) for task in tasks], status_code=Constants.HTTP_OK)
    except TodoTaskError as e:
        raise _http_error(e, not_found_status=Constants.HTTP_NOT_FOUND) from e


@router.get("/upload-file-url")
async def get_upload_file_url(
    _caller: Caller = Depends(get_caller),
    storage: FileStorage = Depends(get_file_storage),
) -> JSONResponse:
    """Issue a short-lived pre-signed URL for uploading a batch import file."""
    upload = await storage.create_upload_url(expires_in=settings.upload_url_expires_seconds)
    return JSONResponse(content=upload.model_dump(by_alias=True), status_code=Constants.HTTP_OK)


@router.post("")
async def create_task(
    request: Request,
    caller: Caller = Depends(get_caller),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    """Create a task for the caller (or for anyone, if admin)."""
    body = await _parse_body(request, TaskCreateRequest)
    try:
        task = await service.create_task(caller, body, invocation=get_invocation(request))
    except TodoTaskError as e:
        raise _http_error(e, not_found_status=Constants.HTTP_BAD_REQUEST) from e
    return JSONResponse(content=_dump(task), status_code=Constants.HTTP_CREATED)


@router.put("/{email}/{task_id}")
async def update_task(
    email: str,
    task_id: str,
    request: Request,
    caller: Caller = Depends(get_caller),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    """Change a task's status; the task is archived.

    Access is checked against the path owner before the body is read.
    """
    try:
        service.authorize(caller, email=email)
    except TodoTaskError as e:
        raise _http_error(e, not_found_status=Constants.HTTP_BAD_REQUEST) from e

    body = await _parse_body(request, TaskStatusUpdate)
    try:
        task = await service.update_task_status(
            caller,
            email=email,
            task_id=task_id,
            new_status=body.new_status,
            invocation=get_invocation(request),
        )
    except TodoTaskError as e:
        raise _http_error(e, not_found_status=Constants.HTTP_BAD_REQUEST) from e
    return JSONResponse(
        content={"message": f"Updated task successfully. Task ID {task_id}", "body": _dump(task)},
        status_code=Constants.HTTP_NO_CONTENT,
    )


@router.delete("/{email}/{task_id}")
async def delete_task(
    email: str,
    task_id: str,
    request: Request,
    caller: Caller = Depends(get_caller),
    service: TaskService = Depends(get_task_service),
) -> JSONResponse:
    """Delete a task."""
    try:
        task = await service.delete_task(caller, email=email, task_id=task_id, invocation=get_invocation(request))
    except TodoTaskError as e:
        raise _http_error(e, not_found_status=Constants.HTTP_BAD_REQUEST) from e
    return JSONResponse(content=_dump(task), status_code=Constants.HTTP_NO_CONTENT)
