from .manager import ConfigManager
from .models import PredictionConfig

__all__ = ["ConfigManager", "PredictionConfig"]
