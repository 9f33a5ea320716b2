"""Shared constants for the test suite."""

from app.core.config import settings

TEST_PASSWORD = "Str0ng!Pass"

DEFAULT_CATEGORY = "Project & Development"
DEFAULT_SUBCATEGORY = "Code Quality & Standards"

API = settings.API_V1_PREFIX
