"""Shared fixtures."""

import copy

import pytest

from implnavi.core.estimation import Pricing
from implnavi.utils.config import Settings


SAMPLE_RESULT = {
    "overall": {
        "stars": 3,
        "cpTotal": 0,
        "hours": 0,
        "costJpyMin": 0,
        "costJpyMax": 0,
        "rationale": "中規模のWebアプリ",
    },
    "breakdown": [
        {
            "category": "フロントエンド",
            "items": [{"name": "ログイン画面", "cp": 40}, {"name": "一覧画面", "cp": 60}],
        },
        {
            "category": "バックエンド",
            "items": [{"name": "REST API", "cp": 100}],
        },
    ],
    "steps": [
        {"title": "設計", "detail": "画面とAPIの設計", "estimateHours": 4},
        {"title": "実装", "detail": "Cloud Run にデプロイ", "estimateHours": 16},
    ],
    "learning": [{"title": "FastAPI 入門", "url": "https://fastapi.tiangolo.com/"}],
}


class FakeModelClient:
    """Stands in for GeminiClient; returns canned text and records prompts."""

    def __init__(self, response="", error=None):
        self.response = response
        self.error = error
        self.prompts = []

    async def generate(self, prompt):
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def sample_result():
    return copy.deepcopy(SAMPLE_RESULT)


@pytest.fixture
def pricing():
    return Pricing()


@pytest.fixture
def settings(tmp_path):
    static_dir = tmp_path / "dist"
    static_dir.mkdir()
    (static_dir / "index.html").write_text("<html>index</html>", encoding="utf-8")
    (static_dir / "app.js").write_text("console.log('app');", encoding="utf-8")
    return Settings(gemini_api_key="test-key", static_dir=str(static_dir))


@pytest.fixture
def model_client():
    return FakeModelClient()
