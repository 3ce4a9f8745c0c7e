import logging

from fastapi import FastAPI

from postlint.routers import posts, validation
from postlint.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="postlint",
    description="Front-matter validation for static-site content",
)

app.include_router(posts.router)
app.include_router(validation.router)


@app.get("/")
async def root():
    return {"message": "postlint is running"}
