# ┌───────────────────────────────────────────────────────────────┐
# │  Copyright (c) 2025 Ateet Vatan Bahmani                       │
# │  Project: MASX AI – Strategic Agentic AI System               │
# │  All rights reserved.                                         │
# └───────────────────────────────────────────────────────────────┘
#
# MASX AI is a proprietary software system developed and owned by Ateet Vatan Bahmani.
# The source code, documentation, workflows, designs, and naming (including "MASX AI")
# are protected by applicable copyright and trademark laws.
#
# Redistribution, modification, commercial use, or publication of any portion of this
# project without explicit written consent is strictly prohibited.
#
# This project is not open-source and is intended solely for internal, research,
# or demonstration use by the author.
#
# Contact: ab@masxai.com | MASXAI.com

"""
Tests for the HTTP API, driven through FastAPI's TestClient.
"""

import pytest
from fastapi.testclient import TestClient

from conftest import CARD_PROGRAM, FakeRenderer
from renderlab.api.app import create_app
from renderlab.config import Settings


@pytest.fixture
def client():
    settings = Settings(_env_file=None, enable_api_docs=False)
    app = create_app(renderer_factory=FakeRenderer, settings=settings)
    with TestClient(app) as test_client:
        yield test_client


class TestRenderApi:
    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["name"] == "renderlab API"

    def test_health_reports_ready(self, client):
        body = client.get("/health").json()
        assert body["status"] == "ok"
        assert body["ready"] is True
        assert body["metrics"]["worker"]["state"] == "ready"

    def test_render_returns_result_message(self, client):
        response = client.post("/render", json={"code": CARD_PROGRAM})
        assert response.status_code == 200

        body = response.json()
        assert body["type"] == "render-result"
        assert body["result"]["status"] == "ok"
        assert body["result"]["dataUrl"].startswith("data:image/png;base64,")

    def test_render_error_is_still_200(self, client):
        response = client.post("/render", json={"code": "def broken(:"})
        assert response.status_code == 200
        assert response.json()["result"]["kind"] == "transform"

    def test_render_image_bytes(self, client):
        response = client.post("/render/image", json={"code": CARD_PROGRAM})
        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content == b"div:0"

    def test_render_image_error(self, client):
        response = client.post("/render/image", json={"code": "import os"})
        assert response.status_code == 422
        assert response.json()["detail"]["status"] == "error"

    def test_invalid_body(self, client):
        response = client.post("/render", json={"timeoutMs": 10})
        assert response.status_code == 422
