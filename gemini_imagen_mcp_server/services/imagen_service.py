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
"""Google Imagen service implementation.

This module wraps the google-genai SDK for text-to-image generation. It
issues exactly one provider call per request, classifies provider failures
into ProviderError, and classifies every response into a tagged
GenerationOutcome.
"""

from gemini_imagen_mcp_server.consts import DEFAULT_NUMBER_OF_IMAGES
from gemini_imagen_mcp_server.models.common import ImageGenerationParams
from gemini_imagen_mcp_server.models.outcome_models import (
    EmptyOutcome,
    FailedOutcome,
    FilteredOutcome,
    GeneratedOutcome,
    GenerationOutcome,
    MissingDataOutcome,
)
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from loguru import logger


class ProviderError(Exception):
    """Raised when the Imagen API call fails.

    Attributes:
        error_code: Classified error code (e.g., 'InvalidArgument', 'QuotaExceeded').
        message: Human-readable error message.
        retryable: Whether this error is retryable.
    """
    def __init__(self, message: str, error_code: str = 'Unknown', retryable: bool = False):
        """Initialize ProviderError.

        Args:
            message: Human-readable error message.
            error_code: Classified error code.
            retryable: Whether the request may succeed if issued again.
        """
        self.error_code = error_code
        self.message = message
        self.retryable = retryable
        super().__init__(message)


def create_client(api_key: str) -> genai.Client:
    """Create a google-genai client for the Gemini Developer API."""
    return genai.Client(api_key=api_key)


def build_generation_config(params: ImageGenerationParams) -> types.GenerateImagesConfig:
    """Build the provider config for a validated request.

    Args:
        params: Validated generation parameters.

    Returns:
        GenerateImagesConfig requesting a single image with filter reasons included.
    """
    return types.GenerateImagesConfig(
        number_of_images=DEFAULT_NUMBER_OF_IMAGES,
        aspect_ratio=params.aspect_ratio.value if params.aspect_ratio else None,
        output_mime_type=params.output_mime_type.value,
        include_rai_reason=True,
    )


def _classify_api_error(e: genai_errors.APIError, model_id: str) -> ProviderError:
    code = e.code or 0
    error_message = e.message or str(e)

    if code == 400:
        return ProviderError(
            message=f"Invalid request: {error_message}",
            error_code='InvalidArgument',
            retryable=False
        )
    elif code in (401, 403):
        return ProviderError(
            message=f"Access denied for model {model_id}: {error_message}. "
                    f"Check that GEMINI_API_KEY is valid and has access to Imagen.",
            error_code='PermissionDenied',
            retryable=False
        )
    elif code == 404:
        return ProviderError(
            message=f"Model {model_id} was not found: {error_message}",
            error_code='NotFound',
            retryable=False
        )
    elif code == 429:
        return ProviderError(
            message=f"Quota exceeded: {error_message}",
            error_code='QuotaExceeded',
            retryable=True
        )
    elif code >= 500:
        return ProviderError(
            message=f"Imagen service is temporarily unavailable: {error_message}",
            error_code='ServiceUnavailable',
            retryable=True
        )
    return ProviderError(
        message=f"API call failed: {error_message}",
        error_code=e.status or str(code),
        retryable=False
    )


async def invoke_imagen_model(
    params: ImageGenerationParams,
    client: genai.Client,
) -> types.GenerateImagesResponse:
    """Invoke the Imagen model once with comprehensive error handling.

    No retries are attempted; a failure is reported to the caller immediately.

    Args:
        params: Validated generation parameters.
        client: google-genai client.

    Returns:
        The raw GenerateImagesResponse.

    Raises:
        ProviderError: On any API or transport failure.
    """
    model_id = params.model.value
    logger.debug(
        f'Invoking Imagen model: {model_id}',
        extra={
            'model_id': model_id,
            'aspect_ratio': params.aspect_ratio.value if params.aspect_ratio else None,
            'output_mime_type': params.output_mime_type.value,
            'prompt_length': len(params.prompt),
        }
    )

    try:
        logger.info(f'Sending request to Imagen model: {model_id}')
        response = await client.aio.models.generate_images(
            model=model_id,
            prompt=params.prompt,
            config=build_generation_config(params),
        )
        logger.info(
            f'Imagen API call successful for model: {model_id}',
            extra={'model_id': model_id, 'images_count': len(response.generated_images or [])}
        )
        return response

    except genai_errors.APIError as e:
        logger.error(
            f'Imagen API error: {e.code} {e.status}',
            extra={'model_id': model_id, 'error_code': e.code, 'error_message': e.message}
        )
        raise _classify_api_error(e, model_id)

    except Exception as e:
        logger.exception(
            f'Unexpected error invoking Imagen model: {model_id}',
            extra={'model_id': model_id}
        )
        raise ProviderError(
            message=f"Unexpected error: {str(e)}",
            error_code='UnexpectedError',
            retryable=False
        )


def classify_response(
    response: types.GenerateImagesResponse,
    params: ImageGenerationParams,
) -> GenerationOutcome:
    """Classify a provider response into exactly one outcome.

    Only the first generated image is considered, since requests ask for one.
    """
    generated_images = response.generated_images or []
    if not generated_images:
        logger.warning('No images returned by Imagen', extra={'model_id': params.model.value})
        return EmptyOutcome()

    generated_image = generated_images[0]
    if generated_image.rai_filtered_reason:
        logger.warning(
            f'Content filtered: {generated_image.rai_filtered_reason}',
            extra={'model_id': params.model.value, 'filter_reason': generated_image.rai_filtered_reason}
        )
        return FilteredOutcome(reason=generated_image.rai_filtered_reason)

    if generated_image.image is None or not generated_image.image.image_bytes:
        logger.warning('Imagen returned an image entry without data')
        return MissingDataOutcome()

    return GeneratedOutcome(
        image_bytes=generated_image.image.image_bytes,
        mime_type=params.output_mime_type,
        model=params.model.value,
    )


async def generate_image(
    params: ImageGenerationParams,
    client: genai.Client,
) -> GenerationOutcome:
    """Generate one image and classify the result.

    Provider failures never propagate; they become a FailedOutcome.

    Args:
        params: Validated generation parameters.
        client: google-genai client.

    Returns:
        The classified GenerationOutcome.
    """
    try:
        response = await invoke_imagen_model(params, client)
    except ProviderError as e:
        logger.error(
            f'Image generation failed: {e.message}',
            extra={'model_id': params.model.value, 'error_type': e.error_code}
        )
        return FailedOutcome(message=e.message, error_code=e.error_code, retryable=e.retryable)

    return classify_response(response, params)
