# -*- coding: utf-8 -*-
from __future__ import annotations
from typing import List, Any, Union
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):

    # ── Browser ───────────────────────────────────────────────────────────────
    playwright_headless:   bool = True
    navigation_timeout_ms: int  = 25000
    page_timeout_ms:       int  = 20000
    selector_wait_ms:      int  = 7000
    settle_delay_ms:       int  = 2000

    # ── Pacing between searches ──────────────────────────────────────────────
    pause_between_searches_ms: int = 4000
    pause_jitter_ms:           int = 2000

    # ── Extraction / matching ────────────────────────────────────────────────
    max_candidates:    int   = 10
    query_token_limit: int   = 4
    match_threshold:   float = 0.35

    # ── HTTP front end ───────────────────────────────────────────────────────
    host: str = "127.0.0.1"
    port: int = 3030
    # Union so pydantic-settings hands comma-separated values to the validator
    allowed_origins: Union[List[str], str] = ["*"]

    # ── App ───────────────────────────────────────────────────────────────────
    log_level: str  = "INFO"

    # ── Validator: accept both JSON array AND comma-separated string ──────────
    @field_validator("allowed_origins", mode="before")
    @classmethod
    def parse_origins(cls, v: Any) -> List[str]:
        if isinstance(v, list):
            return v
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                import json
                return json.loads(v)
            return [o.strip() for o in v.split(",") if o.strip()]
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_level(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    class Config:
        env_file          = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
