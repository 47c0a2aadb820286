import os
from omegaconf import DictConfig, OmegaConf
from omegaconf.errors import OmegaConfBaseException
from pathlib import Path
from typing import List, Optional

from .models import PredictionConfig
from ..exceptions import ConfigurationError

WRITE_MODES = ("strict", "lenient")

class ConfigManager:
    """Centralizes loading and validation of the prediction configuration"""
    
    def __init__(self, config_dir: Path = Path("conf")):
        self.config_dir = config_dir
    
    def load_prediction_config(
        self, profile: str = "default", overrides: Optional[List[str]] = None
    ) -> DictConfig:
        """Loads a profile, merges it over the structured defaults and validates it"""
        config_path = self.config_dir / "prediction" / f"{profile}.yaml"
        
        if not config_path.exists():
            raise ConfigurationError(f"Config not found: {config_path}")
        
        try:
            file_cfg = OmegaConf.load(config_path)
            required_keys = ['database', 'predictor']
            for key in required_keys:
                if key not in file_cfg:
                    raise ConfigurationError(f"Missing required config key: {key}")

            cfg = OmegaConf.merge(OmegaConf.structured(PredictionConfig), file_cfg)
            if overrides:
                cfg = OmegaConf.merge(cfg, OmegaConf.from_dotlist(overrides))
        except OmegaConfBaseException as e:
            raise ConfigurationError(f"Invalid configuration in {config_path}: {e}") from e

        database_url = os.getenv("DATABASE_URL")
        if database_url:
            cfg.database.url = database_url

        return self.validate(cfg)

    @staticmethod
    def validate(cfg: DictConfig) -> DictConfig:
        if cfg.aggregation.write_mode not in WRITE_MODES:
            raise ConfigurationError(
                f"aggregation.write_mode must be one of {WRITE_MODES}, got {cfg.aggregation.write_mode!r}"
            )
        if cfg.calendar.max_iterations < 1:
            raise ConfigurationError("calendar.max_iterations must be positive")
        if cfg.batch.max_workers < 1:
            raise ConfigurationError("batch.max_workers must be positive")
        if cfg.predictor.timeout_seconds <= 0:
            raise ConfigurationError("predictor.timeout_seconds must be positive")
        return cfg
