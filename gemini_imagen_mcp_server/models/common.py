# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Common models and enums shared across the Imagen generation services."""

from gemini_imagen_mcp_server.consts import (
    IMAGEN_4_FAST_MODEL_ID,
    IMAGEN_4_MODEL_ID,
    IMAGEN_4_ULTRA_MODEL_ID,
    MAX_PROMPT_LENGTH,
)
from enum import Enum
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional


class OutputMimeType(str, Enum):
    """Supported output formats for generated images.

    Attributes:
        PNG: PNG image format.
        JPEG: JPEG image format.
    """
    PNG = "image/png"
    JPEG = "image/jpeg"

    @property
    def extension(self) -> str:
        """File extension used when persisting an image of this type."""
        return 'jpg' if self is OutputMimeType.JPEG else 'png'

    @classmethod
    def from_format(cls, output_format: str) -> 'OutputMimeType':
        """Resolve a format tag or mime type to an OutputMimeType.

        Args:
            output_format: One of 'png', 'jpeg', 'jpg', 'image/png' or 'image/jpeg'
                (case-insensitive).

        Returns:
            The matching OutputMimeType.

        Raises:
            ValueError: If the format is not supported.
        """
        tag = output_format.strip().lower()
        if tag in ('png', cls.PNG.value):
            return cls.PNG
        if tag in ('jpeg', 'jpg', cls.JPEG.value):
            return cls.JPEG
        raise ValueError(f"Unsupported output format: {output_format}")


class ImagenModelId(str, Enum):
    """Imagen model identifiers accepted by the generation tool.

    Attributes:
        IMAGEN_4: Imagen 4 standard model.
        IMAGEN_4_FAST: Imagen 4 fast model.
        IMAGEN_4_ULTRA: Imagen 4 ultra model.
    """
    IMAGEN_4 = IMAGEN_4_MODEL_ID
    IMAGEN_4_FAST = IMAGEN_4_FAST_MODEL_ID
    IMAGEN_4_ULTRA = IMAGEN_4_ULTRA_MODEL_ID


class AspectRatio(str, Enum):
    """Imagen aspect ratio options.

    Attributes:
        RATIO_1_1: 1:1 square format.
        RATIO_3_4: 3:4 portrait format.
        RATIO_4_3: 4:3 landscape format.
        RATIO_9_16: 9:16 vertical/mobile format.
        RATIO_16_9: 16:9 widescreen landscape format.
    """
    RATIO_1_1 = "1:1"
    RATIO_3_4 = "3:4"
    RATIO_4_3 = "4:3"
    RATIO_9_16 = "9:16"
    RATIO_16_9 = "16:9"


class ImageGenerationParams(BaseModel):
    """Parameters for a single text-to-image request.

    Attributes:
        prompt: Text description of the image to generate.
        model: Imagen model variant to use.
        aspect_ratio: Desired aspect ratio, or None for the provider default.
        output_mime_type: Encoding of the returned image.
    """
    prompt: str = Field(..., min_length=1, max_length=MAX_PROMPT_LENGTH)
    model: ImagenModelId = ImagenModelId.IMAGEN_4
    aspect_ratio: Optional[AspectRatio] = None
    output_mime_type: OutputMimeType = OutputMimeType.PNG


class ImageGenerationResponse(BaseModel):
    """Unified response model for a text-to-image request.

    Attributes:
        status: 'success', 'empty', 'filtered' or 'error'.
        message: Message describing the result or error.
        model_id: The Imagen model ID used for generation.
        prompt: The text prompt used to generate the image.
        uri: Resource URI of the stored artifact, when stored.
        path: Absolute path of the written file, when written.
        image_base64: Base64 image payload, for inline delivery only.
        mime_type: Mime type of the image, when one was generated.
        metadata: Additional metadata (e.g., filter reason, error code).
    """
    status: str
    message: str
    model_id: str
    prompt: Optional[str] = None
    uri: Optional[str] = None
    path: Optional[str] = None
    image_base64: Optional[str] = None
    mime_type: Optional[OutputMimeType] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
