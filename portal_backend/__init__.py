"""
Portal Backend Package
======================

Assignment evaluation pipeline for the university portal.

Structure:
- services/: Evaluation services (text extraction, heuristic scoring,
  Gemini evaluation, orchestration)
- models.py: Uploaded file and feedback records
- config.py: Configuration management
"""

from .config import config, EvaluationConfig

__version__ = "1.0.0"

__all__ = ['config', 'EvaluationConfig']
