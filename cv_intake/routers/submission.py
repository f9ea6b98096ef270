import logging

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile

from cv_intake.dependencies import get_submission_service
from cv_intake.models import SubmissionResult
from cv_intake.services.submission import SubmissionService
from cv_intake.services.text_extractor import UnsupportedFormatError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/submit", response_model=SubmissionResult)
async def submit_application(
    cv: UploadFile = File(...),
    name: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    service: SubmissionService = Depends(get_submission_service),
):
    """
    Upload a CV (PDF or DOCX) with the applicant's form fields.
    """
    try:
        content = await cv.read()
        return await service.submit(
            content,
            cv.filename or "",
            content_type=cv.content_type,
            name=name,
            email=email,
            phone=phone,
        )
    except UnsupportedFormatError as e:
        logger.info(f"Rejected upload {cv.filename}: {e}")
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Only PDF and DOCX files are accepted.",
        )
    except HTTPException as e:
        raise e
    except Exception:
        logger.exception(f"Error processing application for {cv.filename}")
        raise HTTPException(status_code=500, detail="Error processing application.")
