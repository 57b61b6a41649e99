"""
``generate_image`` -- DALL-E image generation exposed as a tool.

The OpenAI key is read from the request variables, the same way the chat
completion obtains it, so each platform agent pays for its own images.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

import openai

from agentrelay.config import ImageConfig
from agentrelay.errors import MissingCredentialError, ToolExecutionError
from agentrelay.tools.base import Tool, ToolContext
from agentrelay.types import ToolResult
from agentrelay.variables import Variables

logger = logging.getLogger(__name__)

SIZES = ["1024x1024", "1792x1024", "1024x1792"]
QUALITIES = ["standard", "hd"]
STYLES = ["vivid", "natural"]


@dataclass(frozen=True)
class ImageMarkers:
    """Platform markers the front end uses to render loading state and images."""

    loading_start: str
    loading_end: str
    image_start: str
    image_end: str

    @classmethod
    def for_prefix(cls, prefix: str) -> ImageMarkers:
        return cls(
            loading_start=f"[{prefix}.loading.image.start]",
            loading_end=f"[{prefix}.loading.image.end]",
            image_start=f"[{prefix}.image.start]",
            image_end=f"[{prefix}.image.end]",
        )


def _default_client(api_key: str) -> Any:
    return openai.AsyncOpenAI(api_key=api_key)


class GenerateImageTool(Tool):
    """
    Parameters
    ----------
    config:
        Model, default size/quality/style and the marker prefix.
    api_key_variable:
        Name of the request variable that holds the OpenAI key.
    client_factory:
        ``api_key -> AsyncOpenAI``-like client.  Tests pass a fake.
    """

    def __init__(
        self,
        config: ImageConfig | None = None,
        api_key_variable: str = "OPENAI_API_KEY",
        client_factory: Callable[[str], Any] | None = None,
    ) -> None:
        self.config = config or ImageConfig()
        self.markers = ImageMarkers.for_prefix(self.config.marker_prefix)
        self.api_key_variable = api_key_variable
        self._client_factory = client_factory or _default_client

    @property
    def name(self) -> str:
        return "generate_image"

    @property
    def description(self) -> str:
        return "Generate an image using DALL-E 3 based on a text description"

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "prompt": {
                    "type": "string",
                    "description": (
                        "A detailed description of the image you want to generate. "
                        "Be specific about style, colors, composition, and mood."
                    ),
                },
                "size": {
                    "type": "string",
                    "enum": SIZES,
                    "description": (
                        "The size of the generated image. 1024x1024 is square, "
                        "1792x1024 is landscape, 1024x1792 is portrait."
                    ),
                },
                "quality": {
                    "type": "string",
                    "enum": QUALITIES,
                    "description": "Image quality. HD is higher quality but costs more.",
                },
                "style": {
                    "type": "string",
                    "enum": STYLES,
                    "description": "Image style. Vivid is more dramatic, natural is more realistic.",
                },
            },
            "required": ["prompt"],
        }

    async def execute(self, context: ToolContext, **kwargs) -> ToolResult:
        prompt = kwargs["prompt"]
        size = kwargs.get("size") or self.config.size
        quality = kwargs.get("quality") or self.config.quality
        style = kwargs.get("style") or self.config.style

        await context.emit(f"\n🚀 **Executing function:** {self.name}")
        await context.emit(self.markers.loading_start)
        image_url = await self._generate(context, prompt, size, quality, style)
        await context.emit(self.markers.loading_end)
        await context.emit(f"\n✅ **Function completed successfully:** {self.name}")

        result_text = (
            "\n\n🎨 **Image Generated Successfully!**\n\n"
            f"**Prompt:** {prompt}\n"
            f"**Image URL:** {self.markers.image_start}{image_url}{self.markers.image_end} \n\n"
            "*Image created with DALL-E 3*"
        )
        await context.emit(result_text)

        return ToolResult(
            success=True,
            content=result_text,
            attachment_url=image_url,
            metadata={"prompt": prompt, "size": size, "quality": quality, "style": style},
        )

    async def _generate(
        self,
        context: ToolContext,
        prompt: str,
        size: str,
        quality: str,
        style: str,
    ) -> str:
        api_key = Variables(context.request.variables).get(self.api_key_variable)
        if not api_key:
            raise MissingCredentialError(self.api_key_variable)

        logger.info("Generating image with %s: %s", self.config.model, prompt)
        client = self._client_factory(api_key)
        response = await client.images.generate(
            model=self.config.model,
            prompt=prompt,
            size=size,
            quality=quality,
            style=style,
            n=1,
        )
        if not response.data or not response.data[0].url:
            raise ToolExecutionError("Image API returned no URL")

        image_url = response.data[0].url
        logger.info("Image generated successfully: %s", image_url)
        return image_url
