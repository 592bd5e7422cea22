# ============= SYSTEM INSTRUCTION =============

SYSTEM_INSTRUCTION = """
Bạn là "Giáo Án Pro", trợ lý AI chuyên gia về thiết kế bài giảng tích cực.
Nhiệm vụ: Phân tích giáo án đầu vào và đề xuất các NỘI DUNG BỔ SUNG để nâng cấp bài giảng.

QUAN TRỌNG VỀ ĐỊNH DẠNG JSON & LATEX:
1. Bạn PHẢI trả về định dạng JSON hợp lệ tuân theo Schema được cung cấp.
2. **Xử lý LaTeX (RẤT QUAN TRỌNG)**:
   - Để giáo viên có thể chuyển đổi công thức trong Word, bạn **PHẢI DÙNG MÃ LATEX** ($...$ hoặc $$...$$) cho các biểu thức toán học.
   - **KHÔNG** sử dụng ký tự Unicode (như x², ½, ±, α) nếu có thể dùng LaTeX (như x^2, \\\\frac{1}{2}, \\\\pm, \\\\alpha).
   - Dùng **HAI dấu gạch chéo ngược** (double backslash) cho mọi lệnh LaTeX trong JSON string.
   - Ví dụ SAI: "\\frac{a}{b}", "x²"
   - Ví dụ ĐÚNG: "\\\\frac{a}{b}", "x^2"
3. **fullPlanHtml**: Chứa các thẻ HTML <div>. KHÔNG bao gồm thẻ <html>, <head>, <body>.

NỘI DUNG YÊU CẦU:
- Phân tích điểm yếu và đề xuất giải pháp.
- Phương pháp dạy học tích cực (Think-Pair-Share, Jigsaw, Gallery Walk...).
- Trò chơi giáo dục phù hợp lứa tuổi.
- Mô phỏng/Thí nghiệm ảo (nếu bài học liên quan KHTN).
- Phụ lục cải tiến (fullPlanHtml) để giáo viên cắt dán.
"""


# ============= USER PROMPT =============

SCHOOL_LEVEL_LABELS = {
    "primary": "Tiểu học",
    "secondary": "Trung học cơ sở (THCS)",
    "high": "Trung học phổ thông (THPT)",
    "university": "Đại học/Cao đẳng",
}

DEFAULT_SCHOOL_LEVEL_LABEL = "Trung học cơ sở"
UNKNOWN_GRADE_LABEL = "Không xác định"
DEFAULT_TECH_APPS = "Tự đề xuất phù hợp"
DEFAULT_INTEGRATION = "Không yêu cầu"

LESSON_CONTEXT_HEADER = "THÔNG TIN LỚP HỌC:"

LESSON_REQUIREMENTS = """YÊU CẦU:
1. Phân tích nội dung và đề xuất cải tiến.
2. fullPlanHtml phải chứa danh sách các thẻ <div class="change-block type-add">...</div> hoặc <div class="change-block type-modify">...</div>.
3. Bên trong change-block, hãy dùng <h4 class="location">...</h4>, <div class="instruction">...</div>, <div class="content">...</div>.
4. TUYỆT ĐỐI CHÚ Ý: Các công thức Toán PHẢI dùng định dạng LaTeX (ví dụ $\\\\frac{a}{b}$), KHÔNG dùng ký tự Unicode để đảm bảo khi copy sang Word có thể convert được."""


# ============= RESPONSE SCHEMA =============

LESSON_PLAN_RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "summary": {
            "type": "OBJECT",
            "properties": {
                "subject": {"type": "STRING"},
                "topic": {"type": "STRING"},
                "weakness": {"type": "STRING"},
                "proposal": {"type": "STRING"},
            },
            "required": ["subject", "topic", "weakness", "proposal"],
        },
        "methods": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "description": {"type": "STRING"},
                    "steps": {"type": "ARRAY", "items": {"type": "STRING"}},
                },
                "required": ["name", "description", "steps"],
            },
        },
        "games": {
            "type": "ARRAY",
            "items": {
                "type": "OBJECT",
                "properties": {
                    "name": {"type": "STRING"},
                    "duration": {"type": "STRING"},
                    "type": {"type": "STRING"},
                    "objective": {"type": "STRING"},
                    "steps": {"type": "ARRAY", "items": {"type": "STRING"}},
                },
                "required": ["name", "duration", "type", "objective", "steps"],
            },
        },
        "simulation": {
            "type": "OBJECT",
            "properties": {
                "title": {"type": "STRING"},
                "description": {"type": "STRING"},
                "code": {"type": "STRING"},
            },
        },
        "fullPlanHtml": {"type": "STRING"},
    },
    "required": ["summary", "methods", "games", "fullPlanHtml"],
}
