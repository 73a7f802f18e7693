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
"""Pydantic models for generated image artifacts held in the registry."""

from gemini_imagen_mcp_server.consts import RESOURCE_TITLE_PROMPT_LENGTH
from gemini_imagen_mcp_server.models.common import OutputMimeType
from pydantic import BaseModel, ConfigDict
from typing import Optional


class ArtifactSummary(BaseModel):
    """Display metadata for one artifact, as exposed by resource listings.

    Attributes:
        uri: Resource URI of the artifact.
        filename: Derived filename of the artifact.
        title: Human-readable title built from the prompt.
        description: Human-readable description naming the model.
        mime_type: Mime type of the image bytes.
    """
    model_config = ConfigDict(frozen=True)

    uri: str
    filename: str
    title: str
    description: str
    mime_type: OutputMimeType


class GeneratedArtifact(BaseModel):
    """One successfully generated image and its metadata.

    Artifacts are immutable once created; a later generation with the same
    derived URI replaces the registry entry rather than mutating it.

    Attributes:
        uri: Resource URI, unique within a registry scope.
        filename: Derived filename (see services.naming).
        image_bytes: Raw encoded image payload.
        mime_type: Mime type of the payload.
        prompt: Prompt that produced the image.
        model: Imagen model that produced the image.
        timestamp: Epoch seconds at generation time.
        width: Pixel width, if the payload could be probed.
        height: Pixel height, if the payload could be probed.
    """
    model_config = ConfigDict(frozen=True)

    uri: str
    filename: str
    image_bytes: bytes
    mime_type: OutputMimeType
    prompt: str
    model: str
    timestamp: int
    width: Optional[int] = None
    height: Optional[int] = None

    def to_summary(self) -> ArtifactSummary:
        """Build the listing summary for this artifact."""
        description = f'AI-generated image using {self.model}'
        if self.width and self.height:
            description += f' ({self.width}x{self.height})'
        return ArtifactSummary(
            uri=self.uri,
            filename=self.filename,
            title=f'Generated Image: {self.prompt[:RESOURCE_TITLE_PROMPT_LENGTH]}...',
            description=description,
            mime_type=self.mime_type,
        )
