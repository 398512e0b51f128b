import random
from typing import Annotated

from fastapi import Depends, Request

from bank import QuestionStore
from config import Settings
from content import ContentStore


def get_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_question_store(settings: SettingsDep) -> QuestionStore:
    # built per request; nothing is cached between requests
    return QuestionStore(settings.data_dir, settings.quiz)


def get_rng() -> random.Random:
    """
    Randomness used to shuffle question selections.
    Tests override this dependency with a seeded generator.
    """
    return random.Random()


def get_ebook_store(settings: SettingsDep) -> ContentStore:
    return ContentStore(settings.data_dir / "ebooks.json")


def get_banner_store(settings: SettingsDep) -> ContentStore:
    return ContentStore(settings.data_dir / "banners.json")
