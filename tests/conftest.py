"""Shared fixtures: src on sys.path, sample plans and a scripted transport."""

import base64
import json
import os
import sys
import tempfile

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

# app_context reads these at import time
_TEST_DIR = tempfile.mkdtemp(prefix="giaoan_tests_")
os.environ.setdefault("OUTPUT_DIR", os.path.join(_TEST_DIR, "outputs"))
os.environ.setdefault("SETTINGS_FILE", os.path.join(_TEST_DIR, "settings.yaml"))

from models.lesson_plan_models import DocumentUpload, LessonConfig  # noqa: E402


SAMPLE_PLAN = {
    "summary": {
        "subject": "Toán",
        "topic": "Phép cộng có nhớ",
        "weakness": "Thiếu hoạt động nhóm",
        "proposal": "Bổ sung trò chơi tiếp sức",
    },
    "methods": [
        {
            "name": "Think-Pair-Share",
            "description": "Suy nghĩ cá nhân rồi chia sẻ theo cặp",
            "steps": ["Suy nghĩ", "Thảo luận cặp", "Chia sẻ"],
        }
    ],
    "games": [
        {
            "name": "Tiếp sức",
            "duration": "5 phút",
            "type": "Vận động",
            "objective": "Luyện phép cộng có nhớ",
            "steps": ["Chia đội", "Lần lượt lên bảng"],
        }
    ],
    "simulation": {
        "title": "Bảng cộng tương tác",
        "description": "Kéo thả que tính",
        "code": "<!DOCTYPE html><html><body><p>$x^2$</p></body></html>",
    },
    "fullPlanHtml": '<div class="change-block type-add"><h4 class="location">Hoạt động 1</h4>'
                    '<div class="content">$\\frac{1}{2}$</div></div>',
}


class FakeTransport:
    """Returns scripted text (or raises scripted errors) per model id."""

    def __init__(self, outcomes):
        self.outcomes = dict(outcomes)
        self.calls = []

    async def generate(self, request, model_id):
        self.calls.append(model_id)
        outcome = self.outcomes[model_id]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


@pytest.fixture
def sample_plan_dict():
    return json.loads(json.dumps(SAMPLE_PLAN))


@pytest.fixture
def sample_plan_json():
    return json.dumps(SAMPLE_PLAN, ensure_ascii=False)


@pytest.fixture
def pdf_bytes():
    return b"%PDF-1.4\n1 0 obj\n<< /Type /Catalog >>\nendobj\n%%EOF\n"


@pytest.fixture
def encoded_document(pdf_bytes):
    return DocumentUpload(
        file_name="giao_an.pdf",
        mime_type="application/pdf",
        data_base64="data:application/pdf;base64," + base64.b64encode(pdf_bytes).decode("ascii"),
    )


@pytest.fixture
def lesson_config():
    return LessonConfig(subject="Toán", school_level="primary", grade="2")
