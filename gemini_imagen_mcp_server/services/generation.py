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
"""Text-to-image request handling.

This module drives one generation request end to end: a single provider call,
classification into a GenerationOutcome, and delivery of the result. Images
are delivered inline, or stored in the caller's registry scope and optionally
written to the workspace output directory.
"""

import time
from gemini_imagen_mcp_server.consts import NO_IMAGE_DATA_MESSAGE, NO_IMAGES_MESSAGE
from gemini_imagen_mcp_server.models.artifact_models import GeneratedArtifact
from gemini_imagen_mcp_server.models.common import ImageGenerationParams, ImageGenerationResponse
from gemini_imagen_mcp_server.models.outcome_models import GeneratedOutcome, GenerationOutcome
from gemini_imagen_mcp_server.services.imagen_service import generate_image
from gemini_imagen_mcp_server.services.naming import derive_filename, derive_uri
from gemini_imagen_mcp_server.services.registry import ArtifactScope
from gemini_imagen_mcp_server.utils.image_utils import (
    encode_image_bytes,
    read_image_dimensions,
    save_image,
)
from google import genai
from loguru import logger
from typing import Optional


def build_artifact(outcome: GeneratedOutcome, prompt: str, timestamp: int) -> GeneratedArtifact:
    """Create the registry artifact for a successful generation.

    Args:
        outcome: The generated outcome carrying the image bytes.
        prompt: Prompt that produced the image.
        timestamp: Epoch seconds used for naming.

    Returns:
        A new GeneratedArtifact with a derived filename and URI.
    """
    filename = derive_filename(prompt, timestamp, outcome.mime_type)
    try:
        width, height = read_image_dimensions(outcome.image_bytes)
    except ValueError as e:
        logger.warning(f'Could not read dimensions of generated image: {str(e)}')
        width = height = None

    return GeneratedArtifact(
        uri=derive_uri(filename),
        filename=filename,
        image_bytes=outcome.image_bytes,
        mime_type=outcome.mime_type,
        prompt=prompt,
        model=outcome.model,
        timestamp=timestamp,
        width=width,
        height=height,
    )


def deliver_outcome(
    outcome: GenerationOutcome,
    params: ImageGenerationParams,
    scope: ArtifactScope,
    return_base64: bool = False,
    workspace_dir: Optional[str] = None,
    timestamp: Optional[int] = None,
) -> ImageGenerationResponse:
    """Turn a classified outcome into a response, storing or writing images as needed.

    Args:
        outcome: Classified provider outcome.
        params: The request parameters.
        scope: Registry scope of the requesting session.
        return_base64: Return the image inline instead of storing it.
        workspace_dir: If set, also write the image under this directory.
        timestamp: Epoch seconds for naming. Defaults to now.

    Returns:
        ImageGenerationResponse describing the result.
    """
    model_id = params.model.value
    base = {'model_id': model_id, 'prompt': params.prompt}

    if outcome.kind == 'empty':
        return ImageGenerationResponse(status='empty', message=NO_IMAGES_MESSAGE, **base)

    if outcome.kind == 'filtered':
        return ImageGenerationResponse(
            status='filtered',
            message=f'Image was filtered: {outcome.reason}',
            metadata={'filter_reason': outcome.reason},
            **base,
        )

    if outcome.kind == 'missing_data':
        return ImageGenerationResponse(status='error', message=NO_IMAGE_DATA_MESSAGE, **base)

    if outcome.kind == 'failed':
        return ImageGenerationResponse(
            status='error',
            message=f'Error generating image: {outcome.message}',
            metadata={'error_code': outcome.error_code, 'retryable': outcome.retryable},
            **base,
        )

    if return_base64:
        logger.info(f'Returning generated image inline ({len(outcome.image_bytes)} bytes)')
        return ImageGenerationResponse(
            status='success',
            message=f'Generated image using {model_id}',
            image_base64=encode_image_bytes(outcome.image_bytes),
            mime_type=outcome.mime_type,
            metadata={'size_bytes': len(outcome.image_bytes)},
            **base,
        )

    if timestamp is None:
        timestamp = int(time.time())
    artifact = build_artifact(outcome, params.prompt, timestamp)

    path = None
    if workspace_dir:
        try:
            path = save_image(artifact.image_bytes, artifact.filename, workspace_dir)
        except IOError as e:
            return ImageGenerationResponse(
                status='error',
                message=f'Error saving image: {str(e)}',
                mime_type=artifact.mime_type,
                **base,
            )

    scope.put(artifact.uri, artifact)
    logger.debug(f'[Session {scope.key}] Keys: {scope.keys()}')

    message = f'Generated image using {model_id}\nResource available at: {artifact.uri}'
    if path:
        message += f'\nSaved to: file://{path}'
    message += '\n\nUse MCP resources to view the image.'

    return ImageGenerationResponse(
        status='success',
        message=message,
        uri=artifact.uri,
        path=path,
        mime_type=artifact.mime_type,
        metadata={'filename': artifact.filename, 'size_bytes': len(artifact.image_bytes)},
        **base,
    )


async def generate_image_from_text(
    params: ImageGenerationParams,
    client: genai.Client,
    scope: ArtifactScope,
    return_base64: bool = False,
    workspace_dir: Optional[str] = None,
    timestamp: Optional[int] = None,
) -> ImageGenerationResponse:
    """Generate an image from a prompt and deliver it.

    Exactly one provider call is made. No exception from the provider
    reaches the caller; failures are described in the returned response.

    Args:
        params: Validated generation parameters.
        client: google-genai client.
        scope: Registry scope of the requesting session.
        return_base64: Return the image inline instead of storing it.
        workspace_dir: If set, also write the image under this directory.
        timestamp: Epoch seconds for naming. Defaults to the time the provider responds.

    Returns:
        ImageGenerationResponse describing the result.
    """
    logger.debug(
        f"Generating text-to-image with prompt: '{params.prompt[:30]}...'",
        extra={
            'model': params.model.value,
            'aspect_ratio': params.aspect_ratio.value if params.aspect_ratio else None,
            'output_mime_type': params.output_mime_type.value,
            'return_base64': return_base64,
            'has_workspace_dir': workspace_dir is not None,
        }
    )

    outcome = await generate_image(params, client)
    return deliver_outcome(
        outcome,
        params,
        scope,
        return_base64=return_base64,
        workspace_dir=workspace_dir,
        timestamp=timestamp,
    )
