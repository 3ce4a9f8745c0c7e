import logging

from fastapi import APIRouter, Depends, HTTPException

from postlint import dependencies as deps
from postlint.schemas.validation import ValidationReport
from postlint.services.posts_loader import PostsLoader
from postlint.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/validation", response_model=ValidationReport)
def get_validation_report(
    loader: PostsLoader = Depends(deps.get_posts_loader),
    current_settings: Settings = Depends(deps.get_settings),
):
    try:
        return loader.load().report(current_settings.FAIL_ON)
    except Exception as e:
        logger.error(f"Unexpected error building validation report: {e}")
        raise HTTPException(status_code=500, detail="Failed to validate content")
