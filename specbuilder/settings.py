import os


class Settings:
    # Default LLM endpoint: OpenRouter's public API
    DEFAULT_LLM_BASE_URL = "https://openrouter.ai/api/v1"
    DEFAULT_LLM_MODEL = "openai/gpt-4o-mini"
    DEFAULT_DB_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "../data/specbuilder.db"))

    def __init__(self):
        self._database_url = os.environ.get("DATABASE_URL", f"sqlite:///{self.DEFAULT_DB_PATH}")
        self._llm_base_url = os.environ.get("LLM_BASE_URL", self.DEFAULT_LLM_BASE_URL).rstrip("/")
        self._llm_model = os.environ.get("LLM_MODEL", self.DEFAULT_LLM_MODEL)
        self._llm_timeout = float(os.environ.get("LLM_TIMEOUT_SECONDS", "60"))
        self._log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
        self._seed_templates = os.environ.get("SEED_TEMPLATES", "1").lower() not in ("0", "false", "no")

    def get_database_url(self) -> str:
        return self._database_url

    def get_llm_base_url(self) -> str:
        """Returns the base URL for the LLM API (e.g. 'https://openrouter.ai/api/v1')."""
        return self._llm_base_url

    def get_llm_model(self) -> str:
        return self._llm_model

    def get_llm_timeout(self) -> float:
        """Seconds to wait on a single generation call before giving up."""
        return self._llm_timeout

    def get_log_level(self) -> str:
        return self._log_level

    def should_seed_templates(self) -> bool:
        return self._seed_templates

    def get_api_key(self) -> str:
        """Returns the LLM API key from LLM_API_KEY, or from api_key.txt at the repo root."""
        key = os.environ.get("LLM_API_KEY", "").strip()
        if key:
            return key
        key_path = os.path.abspath(os.path.join(os.path.dirname(__file__), "../api_key.txt"))
        if os.path.exists(key_path):
            with open(key_path, "r") as f:
                return f.read().strip()
        return ""


settings = Settings()
