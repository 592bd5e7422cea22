# src/api/app_context.py
import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

from models.session_store import DocumentStore, ResultStore
from utils.settings_store import SettingsStore

# ====== OUTPUT DIR ======
OUTPUT_DIR = Path(os.getenv("OUTPUT_DIR", "outputs"))
OUTPUT_DIR.mkdir(parents=True, exist_ok=True)

# ====== SETTINGS ======
settings_store = SettingsStore()

# ====== SESSION STORAGE ======
document_store = DocumentStore()
result_store = ResultStore()

# ====== GEMINI CLIENTS ======
# Keyed by API key; only the current key is kept
gemini_transports = {}
