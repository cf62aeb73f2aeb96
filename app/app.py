import contextlib
import functools
import logging
from typing import Any, Awaitable, Callable

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response, StreamingResponse
from starlette.routing import Route

from app import config
from domain.errors import GenerationError, RenderError, ValidationError
from domain.gemini import GeminiClient
from domain.llm_service import LLMService, RecipeGenerator
from domain.pdf import RecipeDocument
from domain.services import (
    generate_and_render,
    generate_recipe,
    render_existing_recipe,
)


logger = logging.getLogger(__name__)


PDF_MEDIA_TYPE = "application/pdf"

ENDPOINTS = {
    "GET  /": "Health check",
    "POST /api/recipe": "Generate recipe from ingredients",
    "POST /api/recipe/pdf": "Export existing recipe as PDF",
    "POST /api/recipe-pdf": "Generate recipe and return as PDF",
}


Handler = Callable[[Request], Awaitable[Response]]


def aJSONErrors(generic: str) -> Callable[[Handler], Handler]:
    """Map domain errors raised by a route to JSON error responses.

    Upstream error text is logged, never returned.
    """

    def decorator(route: Handler) -> Handler:
        @functools.wraps(route)
        async def wrapper(request: Request) -> Response:
            try:
                return await route(request)
            except ValidationError as e:
                logger.warning("Rejected %s: %s", request.url.path, e)
                return JSONResponse({"error": str(e)}, status_code=400)
            except GenerationError as e:
                logger.exception("Generation failed on %s", request.url.path)
                return JSONResponse(
                    {"error": e.user_message or generic}, status_code=500
                )
            except RenderError:
                logger.exception("Rendering failed on %s", request.url.path)
                return JSONResponse({"error": generic}, status_code=500)
            except Exception:
                logger.exception("Unexpected failure on %s", request.url.path)
                return JSONResponse({"error": generic}, status_code=500)

        return wrapper

    return decorator


async def read_json(request: Request) -> dict[str, Any]:
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        body = await request.json()
    except ValueError as e:
        raise ValidationError("Request body must be valid JSON.") from e
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object.")
    return body


async def pdf_response(doc: RecipeDocument, filename: str) -> StreamingResponse:
    # ReportLab layout is CPU-bound; keep it off the event loop.
    await run_in_threadpool(doc.to_pdf)
    return StreamingResponse(
        doc.stream(),
        media_type=PDF_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


async def homepage(request: Request) -> JSONResponse:
    llm: RecipeGenerator = request.app.state.llm
    return JSONResponse(
        {"message": "Recipe API with Google Gemini is running!", "model": llm.model}
    )


@aJSONErrors("Failed to generate recipe. Please try again.")
async def recipe(request: Request) -> Response:
    body = await read_json(request)
    generated = await generate_recipe(
        body.get("ingredients"), llm=request.app.state.llm
    )
    return JSONResponse(generated.to_dict())


@aJSONErrors("Failed to generate PDF. Please try again.")
async def recipe_pdf(request: Request) -> Response:
    body = await read_json(request)
    doc = render_existing_recipe(body.get("ingredients"), body.get("recipe"))
    return await pdf_response(doc, "recipe.pdf")


@aJSONErrors("Failed to generate recipe and PDF. Please try again.")
async def generated_recipe_pdf(request: Request) -> Response:
    body = await read_json(request)
    doc = await generate_and_render(body.get("ingredients"), llm=request.app.state.llm)
    return await pdf_response(doc, "gemini-recipe.pdf")


def llm_from_config(cfg: config.Config) -> LLMService:
    client = GeminiClient(
        model=cfg.gemini_model,
        token=cfg.gemini_api_key,
        base_url=cfg.gemini_base_url,
        timeout=cfg.gemini_timeout,
    )
    return LLMService(client)


def create_app(
    llm: RecipeGenerator | None = None,
    cfg: config.Config | None = None,
) -> Starlette:
    cfg = config.Config() if cfg is None else cfg
    llm = llm_from_config(cfg) if llm is None else llm

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette):
        yield
        await app.state.llm.aclose()

    app = Starlette(
        debug=cfg.env == config.Env.local,
        routes=[
            Route("/", homepage, methods=["GET"]),
            Route("/api/recipe", recipe, methods=["POST"]),
            Route("/api/recipe/pdf", recipe_pdf, methods=["POST"]),
            Route("/api/recipe-pdf", generated_recipe_pdf, methods=["POST"]),
        ],
        middleware=[
            Middleware(
                CORSMiddleware,
                allow_origins=cfg.cors_origins,
                allow_methods=["*"],
                allow_headers=["*"],
            ),
        ],
        lifespan=lifespan,
    )
    app.state.llm = llm
    app.state.config = cfg
    return app


app = create_app()
