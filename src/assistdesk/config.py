"""assistdesk configuration management."""

from pydantic import BaseModel, Field
from typing import Dict, List, Optional
import yaml
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


# Environment variables holding each provider's API key
API_KEY_ENV_VARS = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
    "google": "GOOGLE_API_KEY",
}


class PathsConfig(BaseModel):
    """Configuration for output paths."""
    output_dir: Path = Field(default=Path("output"))

    def create_dirs(self):
        """Create the output directory."""
        self.output_dir.mkdir(parents=True, exist_ok=True)


class LLMConfig(BaseModel):
    """Configuration for the generative-text fallback of the classifier."""
    # Tried in order; the first one that answers wins
    providers: List[str] = ["anthropic", "openai"]
    models: Dict[str, str] = Field(default_factory=lambda: {
        "anthropic": "claude-3-haiku-20240307",
        "openai": "gpt-4o-mini",
        "google": "gemini-2.0-flash",
    })
    max_tokens: int = 150
    temperature: float = 0.0
    timeout: float = 30.0
    max_budget_usd: Optional[float] = None
    anthropic_api_key: Optional[str] = Field(default=None)
    openai_api_key: Optional[str] = Field(default=None)
    google_api_key: Optional[str] = Field(default=None)

    def __init__(self, **data):
        super().__init__(**data)
        # Load from environment variables if not set
        for name, env_var in API_KEY_ENV_VARS.items():
            field_name = f"{name}_api_key"
            if getattr(self, field_name) is None:
                object.__setattr__(self, field_name, os.environ.get(env_var))

    def api_key_for(self, provider: str) -> Optional[str]:
        """Return the configured API key for a provider, or None."""
        return getattr(self, f"{provider}_api_key", None)

    def model_for(self, provider: str) -> Optional[str]:
        return self.models.get(provider)


class ClassifierConfig(BaseModel):
    """Configuration for the message classifier."""
    batch_size: int = 5
    cache_backend: str = "memory"  # memory or disk
    cache_dir: Path = Field(default=Path("data/cache/classifications"))


class AssistDeskConfig(BaseModel):
    """Main configuration for assistdesk."""
    paths: PathsConfig = Field(default_factory=PathsConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    classifier: ClassifierConfig = Field(default_factory=ClassifierConfig)

    @classmethod
    def load(cls, config_path: str = "configs/default.yaml") -> "AssistDeskConfig":
        """Load configuration from YAML file.

        Args:
            config_path: Path to YAML configuration file.

        Returns:
            Loaded configuration, or defaults if the file does not exist.
        """
        if os.path.exists(config_path):
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()
