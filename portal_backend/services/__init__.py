"""
Portal Services
===============

Evaluation services for submitted assignments.

Services:
- text_extractor: Plain text from uploaded PDF / text files
- heuristic_scorer: Deterministic local scoring
- gemini_evaluator: Gemini-backed scoring with retry and quota handling
- evaluation_service: Picks a scoring path and always returns feedback
"""

# Services are imported directly when needed
# Example: from portal_backend.services.evaluation_service import evaluate_assignment

__all__ = [
    'text_extractor',
    'heuristic_scorer',
    'gemini_evaluator',
    'evaluation_service'
]
