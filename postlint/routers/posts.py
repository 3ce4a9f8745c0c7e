import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from postlint import dependencies as deps
from postlint.schemas.blog import PostSummary, ValidatedPost
from postlint.services.posts_loader import PostsLoader, find_post, production_posts

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/posts", response_model=List[PostSummary])
def list_posts(
    drafts: bool = False,
    loader: PostsLoader = Depends(deps.get_posts_loader),
):
    """Posts the generator would render, newest first."""
    try:
        result = loader.load()
        return [post.summary() for post in production_posts(result.posts, drafts)]
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/posts/{slug:path}", response_model=ValidatedPost)
def get_post(
    slug: str,
    loader: PostsLoader = Depends(deps.get_posts_loader),
):
    """Get a single validated post by slug, drafts included."""
    try:
        post = find_post(loader.load().posts, slug)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        return post
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")
