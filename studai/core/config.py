from __future__ import annotations

import json
from typing import List, Any
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, AnyUrl, AliasChoices, field_validator

from ..domain.model import QuizRules


class Settings(BaseSettings):
    # Read .env, reject keys we do not know (catches typos)
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="forbid",
    )

    # General
    APP_NAME: str = "StudAI Quiz Backend"
    API_V1_PREFIX: str = "/api/v1"
    APP_ENV: str = Field(
        "dev",
        validation_alias=AliasChoices("APP_ENV", "app_env"),
        description="Application environment: dev|staging|prod",
    )
    LOG_LEVEL: str = Field(
        "INFO",
        validation_alias=AliasChoices("LOG_LEVEL", "log_level"),
    )

    # Supabase. Optional so the app can be imported without credentials;
    # get_supabase() refuses to start a client when they are missing.
    SUPABASE_URL: AnyUrl | None = Field(
        None,
        validation_alias=AliasChoices("SUPABASE_URL", "supabase_url"),
        description="Your Supabase project URL",
    )
    SUPABASE_SERVICE_ROLE_KEY: str | None = Field(
        None,
        validation_alias=AliasChoices("SUPABASE_SERVICE_ROLE_KEY", "supabase_service_role_key"),
        description="Service role key (server-side)",
    )

    # CORS origins
    FRONTEND_ORIGINS: List[str] = [
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
    ]

    # Quiz rules
    QUIZ_POINTS_PER_CORRECT: int = Field(10, ge=0)
    QUIZ_EXP_PER_CORRECT: int = Field(5, ge=0)
    QUIZ_MAX_QUESTIONS: int = Field(50, ge=1)
    QUIZ_LEADERBOARD_SIZE: int = Field(10, ge=1)

    @field_validator("FRONTEND_ORIGINS", mode="before")
    @classmethod
    def _parse_origins(cls, v: Any) -> Any:
        """
        FRONTEND_ORIGINS may be given in .env as:
        - a JSON array: ["http://localhost:5173","http://localhost:3000"]
        - a comma separated string: http://localhost:5173,http://localhost:3000
        - or with ; as the separator
        """
        if isinstance(v, str):
            s = v.strip()
            if s.startswith("[") and s.endswith("]"):
                try:
                    return json.loads(s)
                except ValueError:
                    # malformed JSON, fall back to splitting
                    pass
            return [item.strip() for item in s.replace(";", ",").split(",") if item.strip()]
        return v

    def quiz_rules(self) -> QuizRules:
        return QuizRules(
            points_per_correct=self.QUIZ_POINTS_PER_CORRECT,
            exp_per_correct=self.QUIZ_EXP_PER_CORRECT,
            max_questions=self.QUIZ_MAX_QUESTIONS,
            leaderboard_size=self.QUIZ_LEADERBOARD_SIZE,
        )


settings = Settings()
