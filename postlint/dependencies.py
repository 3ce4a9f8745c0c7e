from fastapi import Depends

from postlint.services.posts_loader import PostsLoader, build_loader
from postlint.settings import Settings, settings


def get_settings() -> Settings:
    """Small wrapper to allow dependency overrides in tests."""
    return settings


def get_posts_loader(current_settings: Settings = Depends(get_settings)) -> PostsLoader:
    return build_loader(current_settings=current_settings)
