"""Virtual try-on through the FASHN submit/poll API."""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, List, Optional

import requests
from pydantic import BaseModel, Field, ValidationError

from styleai_app.logging_config import get_logger, log_event
from tools.observability import instrument_tool

LOGGER = get_logger(__name__)

MAX_MULTI_GARMENTS = 2
PENDING_STATUSES = {"starting", "in_queue", "processing"}
# Bottoms go on first so tops layer over them.
GARMENT_ORDER = {"bottoms": 0, "tops": 1, "one-pieces": 2, "auto": 3}


class TryOnError(RuntimeError):
    """Raised when the try-on service rejects or fails a request."""

    def __init__(self, message: str, status_code: int = 502) -> None:
        super().__init__(message)
        self.status_code = status_code


class TryOnConfigurationError(TryOnError):
    """Raised when no FASHN API key is configured."""

    def __init__(self, message: str = "FASHN API key not configured") -> None:
        super().__init__(message, status_code=500)


class Garment(BaseModel):
    image: str = Field(min_length=1)
    category: str = "auto"


class TryOnRequest(BaseModel):
    model_image: str = Field(min_length=1)
    garment_image: str = Field(min_length=1)
    category: str = "auto"
    mode: str = "balanced"


class MultiTryOnRequest(BaseModel):
    model_image: str = Field(min_length=1)
    garments: List[Garment] = Field(min_length=1, max_length=MAX_MULTI_GARMENTS)
    mode: str = "balanced"


class PredictionStatus(BaseModel):
    id: Optional[str] = None
    status: str
    output: List[str] = Field(default_factory=list)
    error: Optional[Dict[str, Any]] = None


class FashnTryOnClient:
    """Submits try-on jobs and polls them to completion."""

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://api.fashn.ai/v1",
        timeout_seconds: float = 30.0,
        poll_interval_seconds: float = 3.0,
        max_attempts: int = 40,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self.poll_interval_seconds = poll_interval_seconds
        self.max_attempts = max_attempts
        self.sleep = sleep

    def _headers(self) -> Dict[str, str]:
        if not self.api_key:
            raise TryOnConfigurationError()
        return {"Content-Type": "application/json", "Authorization": f"Bearer {self.api_key}"}

    def _check(self, response: requests.Response, action: str) -> Dict[str, Any]:
        if not 200 <= response.status_code < 300:
            log_event(
                LOGGER,
                logging.ERROR,
                "fashn_request_failed",
                action=action,
                status_code=response.status_code,
                details=response.text,
            )
            raise TryOnError(f"Failed to {action}", status_code=response.status_code)
        return response.json()

    @instrument_tool("tryon_run")
    def run(
        self, model_image: str, garment_image: str, category: str = "auto", mode: str = "balanced"
    ) -> Dict[str, Any]:
        """Start a try-on job and return the service payload (containing ``id``)."""

        headers = self._headers()
        body = {
            "model_image": model_image,
            "garment_image": garment_image,
            "category": category,
            "mode": mode,
            "output_format": "jpeg",
            "return_base64": False,
            "num_samples": 1,
        }
        try:
            response = requests.post(
                f"{self.base_url}/run", json=body, headers=headers, timeout=self.timeout_seconds
            )
        except requests.RequestException as exc:
            raise TryOnError(f"Try-on service unreachable: {exc}") from exc
        return self._check(response, "start try-on process")

    @instrument_tool("tryon_status")
    def status(self, prediction_id: str) -> Dict[str, Any]:
        if not prediction_id:
            raise TryOnError("Prediction ID is required", status_code=400)
        headers = self._headers()
        try:
            response = requests.get(
                f"{self.base_url}/status/{prediction_id}",
                headers={"Authorization": headers["Authorization"]},
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise TryOnError(f"Try-on service unreachable: {exc}") from exc
        return self._check(response, "check try-on status")

    def wait_for_completion(self, prediction_id: str) -> PredictionStatus:
        """Poll until the job completes; raise :class:`TryOnError` on failure or timeout."""

        for attempt in range(self.max_attempts):
            try:
                payload = PredictionStatus.model_validate(self.status(prediction_id))
            except ValidationError as exc:
                raise TryOnError("Unexpected status payload from try-on service") from exc

            if payload.status == "completed":
                return payload
            if payload.status == "failed":
                message = (payload.error or {}).get("message") or "Processing failed"
                raise TryOnError(message, status_code=500)
            if payload.status not in PENDING_STATUSES:
                raise TryOnError(f"Unknown status: {payload.status}", status_code=500)

            LOGGER.debug("Prediction %s still %s (attempt %d)", prediction_id, payload.status, attempt + 1)
            self.sleep(self.poll_interval_seconds)

        raise TryOnError("Processing timeout", status_code=504)

    def run_multi(self, model_image: str, garments: List[Garment], mode: str = "balanced") -> Dict[str, str]:
        """Layer up to two garments, feeding each finished render into the next job.

        Returns the prediction id of the last job; the caller polls it like a
        single try-on.
        """

        if not garments:
            raise TryOnError("model_image and garments array are required", status_code=400)
        if len(garments) > MAX_MULTI_GARMENTS:
            raise TryOnError(
                f"Maximum {MAX_MULTI_GARMENTS} garments allowed for multi try-on", status_code=400
            )

        ordered = sorted(garments, key=lambda garment: GARMENT_ORDER.get(garment.category, 3))
        current_image = model_image
        prediction_id = ""
        for index, garment in enumerate(ordered, start=1):
            log_event(
                LOGGER,
                logging.INFO,
                "multi_tryon_garment_started",
                garment_index=index,
                garment_count=len(ordered),
                category=garment.category,
            )
            try:
                started = self.run(current_image, garment.image, category=garment.category, mode=mode)
            except TryOnError as exc:
                raise TryOnError(
                    f"Failed to process garment {index}: {garment.category}", status_code=exc.status_code
                ) from exc
            prediction_id = str(started.get("id", ""))

            if index < len(ordered):
                try:
                    result = self.wait_for_completion(prediction_id)
                except TryOnError as exc:
                    raise TryOnError(f"Failed to complete garment {index}: {exc}", status_code=500) from exc
                if not result.output:
                    raise TryOnError(f"Failed to complete garment {index}: no output", status_code=500)
                current_image = result.output[0]

        return {"id": prediction_id}


__all__ = [
    "FashnTryOnClient",
    "Garment",
    "MultiTryOnRequest",
    "PredictionStatus",
    "TryOnConfigurationError",
    "TryOnError",
    "TryOnRequest",
]
