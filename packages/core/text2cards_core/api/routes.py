"""Generation routes."""

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import JSONResponse

from text2cards_core.api.schemas import (
    ErrorResponse,
    GenerateFlashcardsRequest,
    HealthResponse,
)
from text2cards_core.errors import SessionExpiredError
from text2cards_core.generation.generator import FlashcardGenerator
from text2cards_core.schemas.generations import GenerationResult
from text2cards_core.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()


def get_generator(request: Request) -> FlashcardGenerator:
    """Dependency that provides the application's generator."""
    return request.app.state.generator


def get_user_id(
    request: Request,
    x_user_id: str | None = Header(default=None),
) -> str:
    """Resolve the requesting user, falling back to the default user."""
    return x_user_id or request.app.state.settings.default_user_id


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(status="ok")


@router.post(
    "/generations",
    response_model=GenerationResult,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_generation(
    payload: GenerateFlashcardsRequest,
    user_id: str = Depends(get_user_id),
    generator: FlashcardGenerator = Depends(get_generator),
) -> GenerationResult | JSONResponse:
    """Generate flashcard proposals from the submitted text."""
    try:
        return await generator.generate(user_id, payload.text, payload.language)
    except SessionExpiredError as e:
        return JSONResponse(
            status_code=401,
            content=ErrorResponse(error=str(e)).model_dump(),
        )
    except Exception as e:
        logger.error(f"Error in generate endpoint: {e}")
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Failed to generate flashcards",
                details=str(e),
            ).model_dump(),
        )
