"""Public manuscript submission router."""

import json
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, File, Form, UploadFile, status

from ictirc.dependencies import (
    CategoryRepoDep,
    ClientIp,
    DbSession,
    NotificationServiceDep,
    SubmissionServiceDep,
)
from ictirc.exceptions import ValidationError
from ictirc.schemas.submissions import (
    CategoryInfo,
    CategoryListResponse,
    PaperSubmission,
    SubmissionResponse,
)
from ictirc.services.submission_service import ManuscriptFile

router = APIRouter()


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(category_repo: CategoryRepoDep) -> CategoryListResponse:
    categories = await category_repo.list_all()
    return CategoryListResponse(
        categories=[CategoryInfo.model_validate(c) for c in categories]
    )


@router.post(
    "/submissions",
    response_model=SubmissionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_paper(
    submission_service: SubmissionServiceDep,
    notification_service: NotificationServiceDep,
    background_tasks: BackgroundTasks,
    db: DbSession,
    ip_address: ClientIp,
    title: str = Form(...),
    abstract: str = Form(...),
    keywords: str = Form(..., description="Comma-separated keywords"),
    category_id: str = Form(...),
    authors: str = Form(..., description="JSON array of {name, email, affiliation}"),
    file: Optional[UploadFile] = File(None),
) -> SubmissionResponse:
    """
    Accept a manuscript with its metadata.

    The confirmation email to the first author is sent after the
    submission has been committed.
    """
    try:
        author_list = json.loads(authors)
    except json.JSONDecodeError:
        raise ValidationError("Authors must be a JSON array")

    data = PaperSubmission.model_validate(
        {
            "title": title,
            "abstract": abstract,
            "keywords": keywords,
            "category_id": category_id,
            "authors": author_list,
        }
    )

    manuscript = None
    if file is not None:
        manuscript = ManuscriptFile(
            filename=file.filename or "manuscript",
            content_type=file.content_type or "",
            content=await file.read(),
        )

    outcome = await submission_service.submit_paper(data, manuscript, ip_address=ip_address)
    await db.commit()

    if outcome.notification is not None:
        background_tasks.add_task(
            notification_service.notify_submission_received, outcome.notification
        )

    return SubmissionResponse(paper_id=outcome.paper.id)
