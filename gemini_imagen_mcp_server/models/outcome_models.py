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
"""Tagged outcome models for a single Imagen generation call.

Every provider call is classified exactly once into one of these models.
The ``kind`` field is the discriminator, so handlers dispatch on it instead
of probing optional response fields.
"""

from gemini_imagen_mcp_server.models.common import OutputMimeType
from pydantic import BaseModel, Field
from typing import Annotated, Literal, Union


class EmptyOutcome(BaseModel):
    """The provider returned zero images."""
    kind: Literal['empty'] = 'empty'


class FilteredOutcome(BaseModel):
    """The provider suppressed the image.

    Attributes:
        reason: Filter reason reported by the provider.
    """
    kind: Literal['filtered'] = 'filtered'
    reason: str


class MissingDataOutcome(BaseModel):
    """The provider returned an image entry with neither bytes nor a filter reason."""
    kind: Literal['missing_data'] = 'missing_data'


class GeneratedOutcome(BaseModel):
    """The provider returned image bytes.

    Attributes:
        image_bytes: Raw encoded image payload.
        mime_type: Mime type requested for the payload.
        model: Model that produced the image.
    """
    kind: Literal['generated'] = 'generated'
    image_bytes: bytes
    mime_type: OutputMimeType
    model: str


class FailedOutcome(BaseModel):
    """The provider call raised.

    Attributes:
        message: Human-readable error description.
        error_code: Classified error code.
        retryable: Whether the caller may reasonably try again.
    """
    kind: Literal['failed'] = 'failed'
    message: str
    error_code: str = 'Unknown'
    retryable: bool = False


GenerationOutcome = Annotated[
    Union[EmptyOutcome, FilteredOutcome, MissingDataOutcome, GeneratedOutcome, FailedOutcome],
    Field(discriminator='kind'),
]
