"""Processor configuration."""

import os
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError

# Default cap on the number of training samples held in memory.
MAX_TRAINING_SAMPLES = 20000

# Minimum mean R² before an evaluation is flagged as a low score.
MIN_SCORE = 0.7

# Evaluation defaults used by callers that do not pass their own.
ACCEPTED_DEVIATION = 0.05
EVALUATION_ITERATIONS = 10

_ENV_TO_CONFIG: Dict[str, str] = {
    "REGRESSION_BACKEND_MAX_TRAINING_SAMPLES": "max_training_samples",
    "REGRESSION_BACKEND_SEED": "seed",
    "REGRESSION_BACKEND_MIN_SCORE": "min_score",
}


class ProcessorConfig(BaseModel):
    """
    Settings for `LinearRegressionProcessor`.

    Attributes:
        max_training_samples: Keep at most this many of the most recent
            training rows. 0 (or negative) disables the cap.
        test_size: Fraction of rows held out in each evaluation split.
        min_score: Mean R² below which an evaluation is flagged as a low score.
        seed: Seed for the evaluation splits. None draws fresh entropy.
        chunk_size: Number of rows parsed per chunk when reading datasets.
        verbose: Print progress messages.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_training_samples: int = MAX_TRAINING_SAMPLES
    test_size: float = Field(default=0.2, gt=0, lt=1)
    min_score: float = MIN_SCORE
    seed: Optional[int] = None
    chunk_size: int = Field(default=10000, gt=0)
    verbose: bool = False

    @classmethod
    def from_env(cls, overrides: Optional[Dict[str, Any]] = None) -> "ProcessorConfig":
        """
        Build a config from defaults, environment variables and explicit overrides.

        Environment values are passed through as strings and converted by
        the field types. Overrides with a value of None are ignored, so
        argparse namespaces can be passed through directly.

        Args:
            overrides: Field values that take precedence over the environment.

        Returns:
            config: `ProcessorConfig`

        Raises:
            ConfigurationError: A value is invalid or a field is unknown.
        """
        payload: Dict[str, Any] = {}
        env_sources: Dict[str, str] = {}

        for env_key, config_key in _ENV_TO_CONFIG.items():
            env_value = os.getenv(env_key)
            if env_value is None or env_value.strip() == "":
                continue
            payload[config_key] = env_value.strip()
            env_sources[config_key] = env_key

        if overrides:
            for key, value in overrides.items():
                if value is not None:
                    payload[key] = value
                    env_sources.pop(key, None)

        try:
            return cls(**payload)
        except ValidationError as e:
            failed = {str(error["loc"][0]) for error in e.errors() if error["loc"]}
            env_keys = sorted(env_sources[key] for key in failed if key in env_sources)
            source = f" (set by {', '.join(env_keys)})" if env_keys else ""
            raise ConfigurationError(f"Invalid configuration{source}: {e}") from e
