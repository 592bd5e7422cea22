"""
API Routes package
"""
from . import settings, documents, lesson_plans

__all__ = ['settings', 'documents', 'lesson_plans']
