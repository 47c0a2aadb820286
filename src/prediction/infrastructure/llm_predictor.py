from typing import Optional

from openai import APITimeoutError, OpenAI, OpenAIError

from ...common.exceptions import PredictorTimeout, PredictorUnreachable
from ...common.logging import setup_logger

logger = setup_logger(__name__)

class OpenAICompatiblePredictor:
    """
    Sends the analysis request as a single user message and returns the reply text.
    Works with any OpenAI-compatible endpoint (Gemini by default).
    """
    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: Optional[str] = None,
        timeout_seconds: float = 60.0,
        temperature: float = 0.2,
        max_retries: int = 1,
        client: Optional[OpenAI] = None,
    ):
        self.model = model
        self.temperature = temperature
        self.client = client or OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout_seconds,
            max_retries=max_retries,
        )

    def predict(self, prompt: str) -> str:
        try:
            result = self.client.chat.completions.create(
                model=self.model,
                messages=[{"role": "user", "content": prompt}],
                temperature=self.temperature,
            )
        except APITimeoutError as e:
            raise PredictorTimeout(f"Predictor timed out: {e}") from e
        except OpenAIError as e:
            raise PredictorUnreachable(f"Predictor error: {type(e).__name__}: {e}") from e

        content = result.choices[0].message.content if result.choices else ""
        logger.debug(f"Predictor returned {len(content or '')} characters")
        return (content or "").strip()
