"""Test Projects — CRUD endpoints for the TestProjects table.

Invariants:
    - Missing rows answered locally with 404 {"error": "Project not found"}
      (never routed to the failure interceptor)
    - Every other error propagates unhandled to the global interceptor
    - Responses serialize as {"Id": int, "Name": str}
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from board_api.infrastructure.database import get_db
from board_api.models.test_project import TestProject
from board_api.schemas.test_project import TestProjectResponse, TestProjectWrite

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/test", tags=["test"])


def _not_found() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"error": "Project not found"},
    )


@router.get("", response_model=list[TestProjectResponse])
async def get_all(db: AsyncSession = Depends(get_db)):
    """List all test projects ordered by Id."""
    result = await db.execute(select(TestProject).order_by(TestProject.id))
    return [TestProjectResponse.model_validate(p) for p in result.scalars()]


@router.get(
    "/{project_id}",
    response_model=TestProjectResponse,
    responses={404: {"description": "Project not found"}},
)
async def get_by_id(project_id: int, db: AsyncSession = Depends(get_db)):
    project = await db.get(TestProject, project_id)
    if project is None:
        return _not_found()
    return TestProjectResponse.model_validate(project)


@router.post(
    "",
    response_model=TestProjectResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create(body: TestProjectWrite, db: AsyncSession = Depends(get_db)):
    project = TestProject(name=body.name)
    db.add(project)
    await db.commit()
    await db.refresh(project)
    return TestProjectResponse.model_validate(project)


@router.put(
    "/{project_id}",
    response_model=TestProjectResponse,
    responses={404: {"description": "Project not found"}},
)
async def update(
    project_id: int,
    body: TestProjectWrite,
    db: AsyncSession = Depends(get_db),
):
    project = await db.get(TestProject, project_id)
    if project is None:
        return _not_found()
    project.name = body.name
    await db.commit()
    await db.refresh(project)
    return TestProjectResponse.model_validate(project)


@router.delete(
    "/{project_id}",
    responses={404: {"description": "Project not found"}},
)
async def remove(project_id: int, db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        delete(TestProject).where(TestProject.id == project_id),
    )
    if result.rowcount == 0:
        return _not_found()
    await db.commit()
    return {"message": "Deleted successfully"}
