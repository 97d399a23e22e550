"""
FridgeChef Backend - FastAPI Application
Main entry point for the fridge ingredient tracker and recipe recommendation API
"""

import logging
from contextlib import asynccontextmanager
from datetime import date
from typing import Optional

from fastapi import FastAPI, HTTPException, Request, Response
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from config import CORS_ORIGINS, LOG_LEVEL, NEARING_EXPIRY_DAYS
from fridge.errors import (
    ConfigurationError,
    EmptyStateError,
    FridgeError,
    ValidationError,
)
from fridge.llm import GenerationClient
from fridge.models import Ingredient
from fridge.persistence import JsonFilePersistence
from fridge.recommend import RecommendationEngine
from fridge.session import FridgeSession
from fridge.store import IngredientStore

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"


# Request/Response Models
class IngredientRequest(BaseModel):
    name: Optional[str] = None
    expiryDate: Optional[str] = None


class SelectRecipeRequest(BaseModel):
    title: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    ingredient_count: int
    ai_configured: bool


def build_session() -> FridgeSession:
    """Wire the default collaborators: JSON file storage and OpenRouter"""
    store = IngredientStore(JsonFilePersistence())
    engine = RecommendationEngine(GenerationClient())
    return FridgeSession(store, engine)


def ingredient_to_response(ingredient: Ingredient, today: date) -> dict:
    data = ingredient.to_dict()
    data["expiryDate"] = data["expirationDate"]
    data["daysLeft"] = ingredient.days_until_expiry(today)
    data["status"] = ingredient.freshness(today, NEARING_EXPIRY_DAYS).value
    return data


def get_session(request: Request) -> FridgeSession:
    return request.app.state.session


def create_app(session: Optional[FridgeSession] = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.session = session or build_session()
        await app.state.session.load()
        logger.info("FridgeChef backend v%s started", VERSION)
        yield
        await app.state.session.store.flush()

    app = FastAPI(
        title="FridgeChef API",
        description="Fridge ingredient tracker with AI recipe recommendations",
        version=VERSION,
        lifespan=lifespan
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        # adding an ingredient reports every malformed body as a plain 400
        if request.method == "POST" and request.url.path == "/api/ingredients":
            return JSONResponse(
                status_code=400,
                content={"detail": "Ingredient name and expiry date are required."}
            )
        return await request_validation_exception_handler(request, exc)

    register_routes(app)
    return app


def register_routes(app: FastAPI) -> None:
    @app.get("/")
    async def root():
        """Root endpoint"""
        return {"message": "FridgeChef API is running", "version": VERSION}

    @app.get("/health", response_model=HealthResponse)
    async def health_check(request: Request):
        """Health check endpoint"""
        session = get_session(request)
        return HealthResponse(
            status="healthy" if session.engine.configured else "ai_unconfigured",
            ingredient_count=len(session.store),
            ai_configured=session.engine.configured
        )

    # --- Ingredients ---

    @app.get("/api/ingredients")
    async def list_ingredients(request: Request):
        """All ingredients, expired first, then soonest to expire"""
        store = get_session(request).store
        today = store.today()
        return [ingredient_to_response(ing, today) for ing in store.list()]

    @app.post("/api/ingredients", status_code=201)
    async def add_ingredient(request: Request, body: Optional[IngredientRequest] = None):
        if body is None or not body.name or not body.expiryDate:
            raise HTTPException(
                status_code=400,
                detail="Ingredient name and expiry date are required."
            )
        session = get_session(request)
        try:
            ingredient = await session.add_ingredient(body.name, body.expiryDate)
        except ValidationError as e:
            raise HTTPException(status_code=400, detail=e.message)
        return ingredient_to_response(ingredient, session.store.today())

    @app.delete("/api/ingredients/{ingredient_id}", status_code=204)
    async def delete_ingredient(ingredient_id: str, request: Request):
        removed = await get_session(request).remove_ingredient(ingredient_id)
        if not removed:
            raise HTTPException(status_code=404, detail="Ingredient not found.")
        return Response(status_code=204)

    # --- One-shot recommendation ---

    @app.post("/api/recommend")
    async def recommend(request: Request):
        """Free-text recipe recommendation for everything in the fridge"""
        session = get_session(request)
        try:
            text = await session.engine.recommend_text(session.ingredients())
        except EmptyStateError as e:
            return JSONResponse(status_code=400, content={"recommendation": e.message})
        except ConfigurationError as e:
            return JSONResponse(status_code=503, content={"error": e.message})
        except FridgeError as e:
            logger.error("Error generating recommendation: %s", e)
            return JSONResponse(
                status_code=500,
                content={"error": f"Failed to get a recipe recommendation: {e.message}"}
            )
        return {"recommendation": text}

    # --- Recommendation workflow state ---

    @app.get("/api/state")
    async def get_state(request: Request):
        return get_session(request).state.to_dict()

    @app.post("/api/recipes")
    async def request_recipes(request: Request):
        """Stage 1: suggest recipes; returns the resulting state"""
        state = await get_session(request).request_recipe_list()
        return state.to_dict()

    @app.post("/api/recipes/select")
    async def select_recipe(body: SelectRecipeRequest, request: Request):
        """Stage 2: detailed recipe for the chosen title"""
        state = await get_session(request).select_recipe(body.title or "")
        return state.to_dict()

    @app.post("/api/state/reset")
    async def reset_state(request: Request):
        return get_session(request).reset_ui_state().to_dict()


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
