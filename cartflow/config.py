from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_BASE_API_URL = "http://localhost:8000/api"


@dataclass(slots=True)
class Settings:
    base_api_url: str = DEFAULT_BASE_API_URL
    request_timeout_sec: float = 60.0
    request_attempts: int = 2
    distance_rate: int = 1000
    weight_rate: int = 500
    proof_max_bytes: int = 1024 * 1024
    preview_debounce_sec: float = 0.3
    currency: str = "IDR"
    log_dir: Path | None = None

    @classmethod
    def load(cls, base_dir: Path | None = None) -> Settings:
        load_dotenv(override=False)

        log_dir_env = os.getenv("CARTFLOW_LOG_DIR")
        log_dir = None
        if log_dir_env:
            log_dir = Path(log_dir_env).expanduser()
            if not log_dir.is_absolute():
                log_dir = (base_dir or Path.cwd()) / log_dir
            log_dir = log_dir.resolve()

        request_attempts = int(os.getenv("CARTFLOW_REQUEST_ATTEMPTS", "2"))
        if request_attempts < 1:
            raise ValueError("CARTFLOW_REQUEST_ATTEMPTS must be at least 1")

        return cls(
            base_api_url=os.getenv("CARTFLOW_BASE_API_URL", DEFAULT_BASE_API_URL).rstrip("/"),
            request_timeout_sec=float(os.getenv("CARTFLOW_REQUEST_TIMEOUT_SEC", "60")),
            request_attempts=request_attempts,
            distance_rate=int(os.getenv("CARTFLOW_DISTANCE_RATE", "1000")),
            weight_rate=int(os.getenv("CARTFLOW_WEIGHT_RATE", "500")),
            proof_max_bytes=int(os.getenv("CARTFLOW_PROOF_MAX_BYTES", str(1024 * 1024))),
            preview_debounce_sec=float(os.getenv("CARTFLOW_PREVIEW_DEBOUNCE_SEC", "0.3")),
            currency=os.getenv("CARTFLOW_CURRENCY", "IDR"),
            log_dir=log_dir,
        )

    def ensure_directories(self) -> None:
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)
