from dataclasses import dataclass, field
from typing import Optional

@dataclass
class DatabaseConfig:
    url: str = "sqlite:///congestion_forecast.db"
    echo: bool = False

@dataclass
class PredictorConfig:
    model: str = "gemini-2.5-flash"
    base_url: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    api_key_env: str = "GEMINI_API_KEY"
    timeout_seconds: float = 60.0
    temperature: float = 0.2
    max_retries: int = 1

@dataclass
class AggregationConfig:
    write_mode: str = "strict"  # strict | lenient

@dataclass
class SamplingConfig:
    seed: Optional[int] = None
    fallback_offset_days: int = 15

@dataclass
class CalendarConfig:
    max_iterations: int = 400

@dataclass
class BatchConfig:
    max_workers: int = 1

@dataclass
class PredictionConfig:
    timezone: str = "UTC"
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    predictor: PredictorConfig = field(default_factory=PredictorConfig)
    aggregation: AggregationConfig = field(default_factory=AggregationConfig)
    sampling: SamplingConfig = field(default_factory=SamplingConfig)
    calendar: CalendarConfig = field(default_factory=CalendarConfig)
    batch: BatchConfig = field(default_factory=BatchConfig)
