"""Rule evaluation: apply registered rules to scanned source units."""

from .evaluator import evaluate
from .models import GRAY_AREA, MODULE_SCOPE, VIOLATION, Finding

__all__ = ["evaluate", "Finding", "GRAY_AREA", "MODULE_SCOPE", "VIOLATION"]
