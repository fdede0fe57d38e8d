"""
Illustrated book generation.

Pipeline:
1. Build the illustrated story prompt and generate the story text
2. Resolve the character tier once for the whole story
3. Split the story into 5-7 scenes with illustration prompts
4. Request one illustration per scene; a failed scene becomes a page
   with an empty illustration_url instead of aborting the book
5. Drop pages without illustrations; fail only if none are left

Illustrations are requested one scene at a time by default. With
max_concurrency > 1 they run concurrently, and pages are still returned
in page order.
"""

import asyncio
import logging
import time
import uuid
from typing import Callable, Optional

from storyweaver.config import STORY_CONSTANTS
from storyweaver.logging import book_logger
from ..errors import BookGenerationError
from ..modules.character_tier import build_appearance_description, determine_character_tier
from ..modules.scene_extractor import KeyMomentExtractor, StyleOverrides, extract_scenes_from_story
from ..modules.story_prompt_builder import build_illustrated_story_prompt, determine_age_group
from ..provider_manager import ProviderManager
from ..types import (
    BookPage,
    CharacterTier,
    IllustratedBookParams,
    IllustratedBookResult,
    ImageGenerationRequest,
    ImageSize,
    Scene,
    TextGenerationRequest,
)

logger = logging.getLogger(__name__)

# on_progress(stage, detail, completed, total)
ProgressCallback = Callable[[str, str, int, int], None]


def resolve_character_description(
    params: IllustratedBookParams,
) -> tuple[CharacterTier, Optional[str]]:
    """
    Pick the character tier and the description that goes with it.

    Photo tier uses the photo description verbatim, appearance tier builds
    one from the chosen attributes, and the none tier has no description.
    """
    tier = determine_character_tier(params.ai_description, params.appearance)

    if tier == CharacterTier.PHOTO:
        return tier, params.ai_description.strip()
    if tier == CharacterTier.APPEARANCE:
        return tier, build_appearance_description(params.appearance, params.child_age)
    return tier, None


class IllustratedBookGenerator:
    """
    Generate an illustrated book: story text plus one illustration per scene.

    Args:
        provider_manager: Shared manager for text and image providers
        max_concurrency: Scene illustrations in flight at once (1 = sequential)
        on_progress: Optional callback(stage, detail, completed, total)
        moment_extractor: Strategy for choosing each scene's key moment
    """

    def __init__(
        self,
        provider_manager: ProviderManager,
        max_concurrency: int = 1,
        on_progress: Optional[ProgressCallback] = None,
        moment_extractor: Optional[KeyMomentExtractor] = None,
    ):
        self.provider_manager = provider_manager
        self.max_concurrency = max(1, max_concurrency)
        self.on_progress = on_progress
        self.moment_extractor = moment_extractor

    def _progress(self, stage: str, detail: str, completed: int, total: int) -> None:
        if self.on_progress:
            self.on_progress(stage, detail, completed, total)

    async def generate(self, params: IllustratedBookParams) -> IllustratedBookResult:
        """
        Generate the book.

        Raises:
            ProviderError: Story text could not be generated by any provider
            BookGenerationError: Every scene illustration failed
        """
        story_id = uuid.uuid4().hex[:12]
        start_time = time.time()
        stage = "story"
        book_logger.generation_started(story_id, params.child_name, params.theme)

        try:
            self._progress("story", "Writing story...", 0, 1)
            stage_start = time.time()
            content = await self._generate_story_text(params)
            book_logger.stage_completed(story_id, "story", time.time() - stage_start)
            self._progress("story", "Story complete", 1, 1)

            stage = "scenes"
            tier, description = resolve_character_description(params)
            logger.info(f"Character tier: {tier.value}", extra={"story_id": story_id})

            overrides: StyleOverrides = {}
            if params.profile_image_url:
                overrides["profile_image_url"] = params.profile_image_url

            scenes = extract_scenes_from_story(
                content,
                params.child_name,
                params.theme,
                character_description=description,
                include_character=tier != CharacterTier.NONE,
                style_overrides=overrides,
                moment_extractor=self.moment_extractor,
            )
            book_logger.stage_completed(story_id, "scenes")

            stage = "illustrations"
            stage_start = time.time()
            pages = await self._illustrate_scenes(story_id, scenes)
            book_logger.stage_completed(story_id, "illustrations", time.time() - stage_start)

            delivered = [page for page in pages if page.has_illustration]
            if not delivered:
                raise BookGenerationError("Failed to generate any illustrations for the story book")

        except Exception as e:
            book_logger.generation_failed(story_id, e, stage)
            raise

        book_logger.generation_completed(story_id, len(delivered), time.time() - start_time)
        return IllustratedBookResult(
            content=content,
            book_pages=delivered,
            scenes=scenes,
            character_tier=tier,
        )

    async def _generate_story_text(self, params: IllustratedBookParams) -> str:
        prompt = build_illustrated_story_prompt(
            child_name=params.child_name,
            adjectives=params.adjectives,
            theme=params.theme,
            moral=params.moral,
            age_group=determine_age_group(params.child_age),
        )
        return await self.provider_manager.generate_text(TextGenerationRequest(
            theme=params.theme,
            child_name=params.child_name,
            adjectives=params.adjectives,
            moral=params.moral,
            template_id=params.template_id,
            custom_prompt=prompt,
        ))

    async def _illustrate_scene(self, story_id: str, scene: Scene, total: int) -> BookPage:
        """Illustrate one scene. Failures become a page with an empty illustration_url."""
        request = ImageGenerationRequest(
            prompt=scene.illustration_prompt,
            count=1,
            size=ImageSize(STORY_CONSTANTS["default_image_size"]),
            style=STORY_CONSTANTS["default_image_style"],
        )

        try:
            urls = await self.provider_manager.generate_images(request)
        except Exception as e:
            book_logger.scene_failed(story_id, scene.scene_number, e)
            return BookPage(page_number=scene.scene_number, text=scene.text)

        if not urls:
            book_logger.scene_failed(story_id, scene.scene_number, ValueError("no images returned"))
            return BookPage(page_number=scene.scene_number, text=scene.text)

        book_logger.scene_illustrated(story_id, scene.scene_number, total)
        return BookPage(page_number=scene.scene_number, text=scene.text, illustration_url=urls[0])

    async def _illustrate_scenes(self, story_id: str, scenes: list[Scene]) -> list[BookPage]:
        total = len(scenes)
        self._progress("illustrations", f"Generating {total} illustrations...", 0, total)

        if self.max_concurrency == 1:
            pages = []
            for scene in scenes:
                pages.append(await self._illustrate_scene(story_id, scene, total))
                self._progress("illustrations", f"Illustrated scene {scene.scene_number}", len(pages), total)
            return pages

        semaphore = asyncio.Semaphore(self.max_concurrency)
        completed = 0

        async def illustrate_one(scene: Scene) -> BookPage:
            nonlocal completed
            async with semaphore:
                page = await self._illustrate_scene(story_id, scene, total)
            completed += 1
            self._progress("illustrations", f"Illustrated scene {scene.scene_number}", completed, total)
            return page

        pages = await asyncio.gather(*(illustrate_one(scene) for scene in scenes))
        return sorted(pages, key=lambda page: page.page_number)


async def generate_illustrated_book(
    params: IllustratedBookParams,
    provider_manager: ProviderManager,
    max_concurrency: int = 1,
    on_progress: Optional[ProgressCallback] = None,
    moment_extractor: Optional[KeyMomentExtractor] = None,
) -> IllustratedBookResult:
    """Generate an illustrated book with the given provider manager."""
    generator = IllustratedBookGenerator(
        provider_manager,
        max_concurrency=max_concurrency,
        on_progress=on_progress,
        moment_extractor=moment_extractor,
    )
    return await generator.generate(params)
