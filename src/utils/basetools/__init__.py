"""
Base tools for turning generated lesson plans into downloadable files.

- Word-compatible .doc export of the change-block appendix
- Standalone .html export of the interactive simulation
"""

from .export_tools import (
    build_word_document,
    export_simulation,
    export_to_word,
    remove_exports,
    simulation_export_filename,
    word_export_filename,
)
