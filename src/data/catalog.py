"""
Static option lists offered by the lesson configuration form
"""
from typing import Dict, List

SUBJECT_OPTIONS: List[str] = [
    "Toán", "Vật lí", "Hóa học", "Sinh học", "Ngữ văn", "Lịch sử", "Địa lí",
    "Tiếng Anh", "Giáo dục thể chất", "Giáo dục quốc phòng", "Âm nhạc",
    "Thể dục", "Công nghệ", "Giáo dục Kinh tế và Pháp luật", "Hoạt động trải nghiệm, hướng nghiệp"
]

COMPETENCY_OPTIONS: List[Dict[str, str]] = [
    {"id": "problem-solving", "label": "Giải quyết vấn đề"},
    {"id": "digital", "label": "Năng lực số"},
    {"id": "collaboration", "label": "Hợp tác"},
    {"id": "teamwork", "label": "Làm việc nhóm"},
    {"id": "autonomy", "label": "Tự chủ và tự học"},
]

CLASS_SIZE_OPTIONS: List[Dict[str, str]] = [
    {"id": "small", "label": "Nhỏ (< 25 HS)"},
    {"id": "medium", "label": "Trung bình (25-35 HS)"},
    {"id": "large", "label": "Lớn (> 35 HS)"},
]

TIME_OPTIONS: List[Dict[str, str]] = [
    {"id": minutes, "label": f"{minutes} Phút ({int(minutes) // 45} tiết)"}
    for minutes in ("45", "90", "135", "180", "225", "270")
]

# ============= MODELS =============

DEFAULT_MODEL = "gemini-3-flash-preview"

MODEL_CATALOG: List[Dict[str, str]] = [
    {"id": "gemini-3-flash-preview", "name": "Gemini 3 Flash (Preview)", "description": "Nhanh nhất, tiết kiệm (Khuyên dùng)"},
    {"id": "gemini-3-pro-preview", "name": "Gemini 3 Pro (Preview)", "description": "Cân bằng tốc độ và chất lượng"},
    {"id": "gemini-2.5-flash", "name": "Gemini 2.5 Flash", "description": "Ổn định, thế hệ trước"},
]

FALLBACK_MODELS = tuple(m["id"] for m in MODEL_CATALOG)

# ============= DOCUMENTS =============

ACCEPTED_MIME_TYPES = {
    ".pdf": "application/pdf",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
}

MAX_DOCUMENT_BYTES = 10 * 1024 * 1024

# KaTeX auto-render options for fullPlanHtml
MATH_RENDER_OPTIONS: Dict = {
    "delimiters": [
        {"left": "$$", "right": "$$", "display": True},
        {"left": "$", "right": "$", "display": False},
        {"left": "\\(", "right": "\\)", "display": False},
        {"left": "\\[", "right": "\\]", "display": True},
    ],
    "throwOnError": False,
    "strict": False,
    "trust": True,
}
