"""Enhancement services: orchestration, threaded runners and engine settings."""

from .settings import Settings
from .enhancement import EnhancementService, ProgressRecorder
from .enhance_runner import EnhanceRunner, EnhanceSignals, EnhanceManager

__all__ = [
    "Settings",
    "EnhancementService",
    "ProgressRecorder",
    "EnhanceRunner",
    "EnhanceSignals",
    "EnhanceManager",
]
