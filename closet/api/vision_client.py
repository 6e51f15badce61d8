"""Async client for the image-classification model behind an OpenAI-compatible API."""

from __future__ import annotations

import base64
import logging
from io import BytesIO

from openai import APIError, APITimeoutError, AsyncOpenAI
from PIL import Image

from closet.config.settings import ClosetSettings

logger = logging.getLogger(__name__)

DATA_URL_PREFIX = "data:image/"


class VisionServiceError(RuntimeError):
    """Raised when the vision model cannot be reached or rejects the request."""


def image_to_data_url(image: bytes | str) -> str:
    """Return ``image`` as a ``data:image/...`` URL.

    Strings must already be image data URLs. Raw bytes are decoded with Pillow
    and re-encoded as PNG, which also rejects payloads that are not images.
    """

    if isinstance(image, str):
        if not image.startswith(DATA_URL_PREFIX):
            raise ValueError("Invalid image format")
        return image

    try:
        with Image.open(BytesIO(image)) as img:
            img = img.convert("RGBA")
            buffer = BytesIO()
            img.save(buffer, format="PNG")
    except (OSError, Image.DecompressionBombError) as exc:
        raise ValueError("Payload is not a supported image.") from exc
    encoded = base64.b64encode(buffer.getvalue()).decode("ascii")
    return f"{DATA_URL_PREFIX}png;base64,{encoded}"


class VisionClient:
    """Sends a single image plus instructions and returns the model's free text."""

    def __init__(self, settings: ClosetSettings, *, client: AsyncOpenAI | None = None) -> None:
        if client is None and not settings.vision_api_key:
            raise RuntimeError("Vision API key is not configured.")

        self._settings = settings
        self._client = client or AsyncOpenAI(
            api_key=settings.vision_api_key,
            base_url=settings.vision_base_url.rstrip("/"),
            timeout=settings.vision_timeout,
        )

    async def describe_image(self, image_url: str, prompt: str) -> str:
        """Return the reply text for ``prompt`` about ``image_url`` (may be empty)."""

        try:
            response = await self._client.chat.completions.create(
                model=self._settings.vision_model,
                messages=[
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": prompt},
                            {"type": "image_url", "image_url": {"url": image_url}},
                        ],
                    },
                ],
            )
        except APITimeoutError as exc:
            raise VisionServiceError("Timed out waiting for the vision model.") from exc
        except APIError as exc:
            logger.error("Vision request failed: %s", exc)
            raise VisionServiceError(f"Vision model request failed: {exc}") from exc

        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def ping(self) -> bool:
        """Return ``True`` if the upstream service responds to a model listing call."""

        models = await self._client.models.list()
        return bool(models.data)

    async def close(self) -> None:
        """Release HTTP resources."""

        await self._client.close()


__all__ = ["VisionClient", "VisionServiceError", "image_to_data_url", "DATA_URL_PREFIX"]
