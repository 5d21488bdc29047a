"""
Prompt Pages FastAPI Adapter - HTTP surface for the widget and catalogs.

Usage:
    from promptpages.integration.fastapi import create_app

    app = create_app()
    # uvicorn module:app
"""

import logging
from typing import Any, Dict, List, Literal, Optional

from fastapi import APIRouter, Depends, FastAPI, HTTPException
from pydantic import BaseModel, Field

from promptpages.core.config import PromptPagesSettings, get_settings, setup_logging
from promptpages.core.exceptions import ValidationError
from promptpages.embed.generator import EmbedGenerator
from promptpages.embed.options import DEFAULT_QUESTION, EmbedOptions
from promptpages.features.definitions.sentiment import SENTIMENT_LABELS
from promptpages.features.registry import default_registry
from promptpages.kickstarters.catalog import KickstarterCatalog
from promptpages.kickstarters.models import KickstarterCategory

logger = logging.getLogger(__name__)

_catalog: Optional[KickstarterCatalog] = None


class EmojiEmbedRequest(BaseModel):
    """Body of ``POST /embed/emoji``."""

    slug: str = Field(..., description="Prompt page slug the emojis link to")
    question: str = Field(default=DEFAULT_QUESTION, description="Header question")
    labels: List[str] = Field(default_factory=lambda: list(SENTIMENT_LABELS))
    emoji_size: Optional[str] = Field(default=None, description="xs, sm or md")
    header_size: Optional[str] = Field(default=None, description="sm, md or lg")
    header_color: Optional[str] = Field(default=None, description="Hex colour of the header")
    show_card: bool = True
    target: Literal["email", "website"] = "website"
    destination_base_url: Optional[str] = None


class EmojiEmbedResponse(BaseModel):
    markup: str
    preview: Dict[str, Any]
    links: List[str]
    target: str
    warnings: List[Dict[str, Any]]


def get_promptpages_settings() -> PromptPagesSettings:
    """FastAPI dependency for settings."""
    return get_settings()


async def get_kickstarter_catalog() -> KickstarterCatalog:
    """FastAPI dependency for the shared default kickstarter catalog."""
    global _catalog
    if _catalog is None:
        catalog = KickstarterCatalog()
        await catalog.load()
        _catalog = catalog
    return _catalog


def create_router() -> APIRouter:
    router = APIRouter(tags=["prompt-pages"])

    @router.get("/health")
    async def health():
        """Basic health check."""
        return {"status": "healthy"}

    @router.post("/embed/emoji", response_model=EmojiEmbedResponse)
    async def emoji_embed(
        body: EmojiEmbedRequest,
        settings: PromptPagesSettings = Depends(get_promptpages_settings),
    ):
        """Generate emoji sentiment widget markup and its preview tree."""
        try:
            options = EmbedOptions(
                slug=body.slug,
                question=body.question,
                labels=tuple(body.labels),
                emoji_size=body.emoji_size,
                header_size=body.header_size,
                header_color=body.header_color,
                show_card=body.show_card,
                target=body.target,
                destination_base_url=body.destination_base_url,
            )
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=e.to_dict())
        return EmbedGenerator(settings).generate(options).to_dict()

    @router.get("/features")
    async def list_features():
        """Feature metadata and exclusivity groups."""
        return default_registry().describe()

    @router.get("/kickstarters")
    async def list_kickstarters(
        category: Optional[str] = None,
        search: Optional[str] = None,
        catalog: KickstarterCatalog = Depends(get_kickstarter_catalog),
    ):
        """Default kickstarters, optionally filtered by category and text."""
        if category and category != "ALL" and category not in KickstarterCategory.__members__:
            raise HTTPException(status_code=400, detail=f"Unknown category '{category}'")
        items = catalog.filter(category=category, search=search)
        return {
            "items": [item.to_dict() for item in items],
            "count": len(items),
            "categories": catalog.category_stats(),
        }

    return router


def create_app(settings: Optional[PromptPagesSettings] = None) -> FastAPI:
    """Build a FastAPI app exposing the prompt page router."""
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(title="Prompt Pages", debug=settings.debug)
    app.include_router(create_router())
    app.dependency_overrides[get_promptpages_settings] = lambda: settings
    logger.info(f"Prompt Pages API created ({settings.env})")
    return app
