"""Environment-driven settings and logging setup."""
import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler


@dataclass(frozen=True)
class Settings:
    persona_store: str = "sqlite"
    db_path: str = "persona_quill.db"
    training_data_dir: Path = Path("training-data")
    llm_provider: str = "openai"
    llm_model: str | None = None
    llm_max_retries: int = 4
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            persona_store=os.getenv("PERSONA_STORE", "sqlite").lower(),
            db_path=os.getenv("DB_PATH", "persona_quill.db"),
            training_data_dir=Path(os.getenv("TRAINING_DATA_DIR", "training-data")),
            llm_provider=os.getenv("LLM_PROVIDER", "openai").lower(),
            llm_model=os.getenv("LLM_MODEL") or None,
            llm_max_retries=int(os.getenv("LLM_MAX_RETRIES", "4")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Route persona_quill logs through rich; safe to call more than once."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True, show_path=False)],
        force=True,
    )
