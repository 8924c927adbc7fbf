"""Application settings loaded from environment variables or .env."""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

from ppta.analysis.scoring import Encoding
from ppta.models import NgramMode, PermaVariant


def _find_env_files() -> list[Path]:
    """The nearest .env at or above the working directory, if there is one."""
    cwd = Path.cwd().resolve()
    nearest = next((d / ".env" for d in (cwd, *cwd.parents) if (d / ".env").is_file()), None)
    return [nearest] if nearest is not None else []


class PptaSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PPTA_",
        env_file=_find_env_files(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Lexica
    lexicon_source: str = "json"  # directory, or http(s) base URL
    lexicon_timeout: float = 10.0  # seconds, HTTP sources only

    # Analysis defaults
    variant: PermaVariant = PermaVariant.DATA_DRIVEN
    encoding: Encoding = Encoding.BINARY
    ngrams: NgramMode = NgramMode.NONE
    clean_text: bool = True

    # Output (log file, token exports)
    output_dir: Path = Path("output")


def load_settings(**overrides: object) -> PptaSettings:
    """Load settings, applying CLI overrides that were actually given.

    ``None`` means "flag not passed" and leaves the env/.env value in place.
    """
    given = {key: value for key, value in overrides.items() if value is not None}
    return PptaSettings(**given)  # type: ignore[arg-type]
