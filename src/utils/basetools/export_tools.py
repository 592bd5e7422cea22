"""
Export Tools
Export generated lesson plans to a Word-compatible .doc and a standalone simulation .html
"""
import re
import shutil
from pathlib import Path

from models.lesson_plan_models import LessonPlanResponse, Simulation

WORD_MEDIA_TYPE = "application/msword"
HTML_MEDIA_TYPE = "text/html"

WORD_FILENAME_PREFIX = "Cai_Tien_"
WORD_FALLBACK_NAME = "GiaoAn"
SIMULATION_FILENAME_PREFIX = "Mo_phong_"
SIMULATION_FALLBACK_NAME = "Simulation"

# On-disk names; the download name is only sent in Content-Disposition
WORD_EXPORT_FILE = "phu_luc.doc"
SIMULATION_EXPORT_FILE = "simulation.html"

BYTE_ORDER_MARK = "\ufeff"

WORD_HEADER = """
      <html xmlns:o='urn:schemas-microsoft-com:office:office' xmlns:w='urn:schemas-microsoft-com:office:word' xmlns='http://www.w3.org/TR/REC-html40'>
      <head>
          <meta charset='utf-8'>
          <title>Phụ Lục Cải Tiến</title>
          <style>
              body { font-family: 'Times New Roman', serif; font-size: 12pt; line-height: 1.5; } 
              .change-block { margin-bottom: 20px; border: 1px solid #ddd; padding: 15px; } 
              .type-add { background: #e6fffa; border-left: 5px solid #0d9488; } 
              .type-modify { background: #fffaf0; border-left: 5px solid #d97706; }
              /* Ensure LaTeX code is visible and not hidden by styling */
              .content { white-space: pre-wrap; }
          </style>
      </head>
      <body>
      <h1>PHỤ LỤC CẢI TIẾN GIÁO ÁN</h1>
      <p style="color: #666; font-style: italic;">
        Lưu ý: Các công thức toán học được giữ ở định dạng LaTeX (ví dụ: $x^2$) để quý thầy cô dễ dàng chuyển đổi bằng MathType hoặc tính năng Equation trong Word.
      </p>
      <hr/>"""

WORD_FOOTER = "</body></html>"

WHITESPACE_RUN = re.compile(r"\s+")


def safe_filename_part(text: str, fallback: str) -> str:
    """Replace every whitespace run with a single underscore; blank text counts as absent"""
    if not text or not text.strip():
        text = fallback
    return WHITESPACE_RUN.sub("_", text)


def word_export_filename(plan: LessonPlanResponse) -> str:
    return f"{WORD_FILENAME_PREFIX}{safe_filename_part(plan.summary.topic, WORD_FALLBACK_NAME)}.doc"


def simulation_export_filename(simulation: Simulation) -> str:
    return f"{SIMULATION_FILENAME_PREFIX}{safe_filename_part(simulation.title, SIMULATION_FALLBACK_NAME)}.html"


def build_word_document(plan: LessonPlanResponse) -> str:
    """
    Wrap the change-block appendix into an HTML document Word can open

    Args:
        plan: Generated lesson plan

    Returns:
        Document text, starting with a UTF-8 byte order mark
    """
    return BYTE_ORDER_MARK + WORD_HEADER + plan.full_plan_html + WORD_FOOTER


def export_to_word(plan: LessonPlanResponse, output_dir: Path) -> Path:
    """
    Write the .doc export into output_dir under a fixed name

    Returns:
        Path of the written file
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / WORD_EXPORT_FILE
    with open(output_path, 'w', encoding='utf-8', newline='') as f:
        f.write(build_word_document(plan))
    return output_path


def export_simulation(simulation: Simulation, output_dir: Path) -> Path:
    """Save the simulation source verbatim as an HTML file"""
    output_dir.mkdir(parents=True, exist_ok=True)
    output_path = output_dir / SIMULATION_EXPORT_FILE
    with open(output_path, 'w', encoding='utf-8', newline='') as f:
        f.write(simulation.code)
    return output_path


def remove_exports(output_dir: Path) -> bool:
    """Delete every file exported for one result; returns False if nothing was there"""
    if not output_dir.exists():
        return False
    shutil.rmtree(output_dir)
    return True
