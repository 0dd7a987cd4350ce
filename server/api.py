"""FastAPI server exposing the StyleAI endpoints."""

from __future__ import annotations

from typing import List, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from logic.skin_sampler import ImageDecodeError
from logic.validation import validation_failure
from memory.closet_store import ClosetItem
from models.product import ActiveFilters
from styleai_app.app import StyleAIApp
from styleai_app.logging_config import configure_logging, correlation_context
from tools.catalog_client import CatalogFetchError
from tools.tryon_client import MultiTryOnRequest, TryOnError, TryOnRequest


class SkinToneRequest(BaseModel):
    """A captured photo as a data URL or bare base64 string."""

    image: str = Field(..., min_length=1)


class FilterRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filters: Optional[ActiveFilters] = None
    skin_tone_matching: bool = Field(False, alias="skinToneMatching")


class TranscriptRequest(BaseModel):
    transcript: str = Field(..., min_length=1)
    turns: List[str] = Field(default_factory=list)


def create_app(styleai: StyleAIApp | None = None) -> FastAPI:
    """Build the FastAPI instance around a :class:`StyleAIApp`."""

    configure_logging()
    service = styleai or StyleAIApp()
    api = FastAPI(title="StyleAI", version="0.1.0")
    api.state.styleai = service

    @api.middleware("http")
    async def correlation_middleware(request: Request, call_next):
        with correlation_context(request.headers.get("x-correlation-id")) as correlation_id:
            response = await call_next(request)
            response.headers["x-correlation-id"] = correlation_id
            return response

    @api.exception_handler(TryOnError)
    async def tryon_error_handler(_: Request, exc: TryOnError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc)})

    @api.get("/healthz")
    def healthcheck() -> dict:
        return {
            "status": "ok",
            "service": "styleai",
            "environment": service.config.environment or "local",
            "model": service.config.gemini_model,
        }

    @api.post("/skin-tone")
    def analyze_skin_tone(request: SkinToneRequest) -> dict:
        """Analyse a selfie and make it the active skin tone profile."""

        try:
            profile = service.analyze_skin_tone(request.image)
        except ImageDecodeError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        return {**profile.to_storage(), "description": profile.description}

    @api.get("/skin-tone")
    def get_skin_tone() -> dict:
        profile = service.get_skin_tone()
        if profile is None:
            return {"profile": None}
        return {"profile": {**profile.to_storage(), "description": profile.description}}

    @api.delete("/skin-tone")
    def reset_skin_tone() -> dict:
        service.reset_skin_tone()
        return {"status": "cleared"}

    @api.get("/products/filter-options")
    def filter_options() -> dict:
        try:
            return service.filter_manager.filter_options.to_dict()
        except CatalogFetchError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc

    @api.post("/products/filter")
    def filter_products(request: FilterRequest) -> dict:
        try:
            products = service.filter_catalog(request.filters, request.skin_tone_matching)
        except CatalogFetchError as exc:
            raise HTTPException(status_code=502, detail=str(exc)) from exc
        return {"count": len(products), "products": [product.model_dump() for product in products]}

    @api.post("/voice/filters")
    def voice_filters(request: TranscriptRequest) -> dict:
        reply = service.handle_transcript(request.transcript, request.turns)
        filters = reply.get("filters")
        active = reply.get("active_filters")
        return {
            "response": reply["response"],
            "shouldContinue": reply["should_continue"],
            "filters": filters.model_dump(by_alias=True) if filters else None,
            "activeFilters": active.model_dump(by_alias=True) if active else None,
        }

    @api.get("/closet")
    def list_closet() -> dict:
        items = service.list_closet()
        return {"count": len(items), "items": [item.model_dump() for item in items]}

    @api.post("/closet", status_code=201)
    def add_to_closet(item: ClosetItem) -> dict:
        if not service.add_to_closet(item):
            raise HTTPException(status_code=409, detail=f"Item {item.id} is already in the closet")
        return item.model_dump()

    @api.delete("/closet/{item_id}")
    def remove_from_closet(item_id: str) -> dict:
        if not service.remove_from_closet(item_id):
            raise HTTPException(status_code=404, detail=f"Item {item_id} is not in the closet")
        return {"status": "removed", "id": item_id}

    @api.post("/closet/recommendation")
    def recommend_outfit() -> dict:
        recommendation = service.recommend_outfit()
        if recommendation is None:
            return {"status": "unavailable", "recommendation": None}
        return {
            "status": "ok",
            "recommendation": {
                "shirt": recommendation.shirt.model_dump(),
                "pant": recommendation.pant.model_dump(),
                "reasoning": recommendation.reasoning,
            },
        }

    @api.post("/try-on")
    def start_try_on(payload: dict):
        try:
            request = TryOnRequest.model_validate(payload)
        except ValidationError as exc:
            return JSONResponse(
                status_code=400,
                content=validation_failure("model_image and garment_image are required", exc),
            )
        return service.tryon_client.run(
            request.model_image, request.garment_image, category=request.category, mode=request.mode
        )

    @api.get("/try-on/{prediction_id}")
    def try_on_status(prediction_id: str) -> dict:
        return service.tryon_client.status(prediction_id)

    @api.post("/try-on/multi")
    def start_multi_try_on(payload: dict):
        try:
            request = MultiTryOnRequest.model_validate(payload)
        except ValidationError as exc:
            return JSONResponse(
                status_code=400,
                content=validation_failure("model_image and a garments array of 1-2 items are required", exc),
            )
        return service.tryon_client.run_multi(request.model_image, request.garments, mode=request.mode)

    return api


def get_app() -> FastAPI:
    """Expose a FastAPI instance for ASGI servers (``uvicorn server.api:get_app --factory``)."""

    return create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.api:get_app", factory=True, host="0.0.0.0", port=8080, reload=False)
