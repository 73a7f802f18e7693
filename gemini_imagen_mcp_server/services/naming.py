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
"""Deterministic filename and resource URI derivation for generated images.

Names have the form ``<timestamp>_<core>.<ext>`` where the core is built from
the first few words of the prompt. The same prompt, timestamp and format
always produce the same name, so two generations of similar prompts within
the same second share a name.
"""

import re
from gemini_imagen_mcp_server.consts import (
    FILENAME_MAX_CORE_LENGTH,
    FILENAME_MAX_WORDS,
    RESOURCE_URI_PREFIX,
)
from gemini_imagen_mcp_server.models.common import OutputMimeType
from typing import Union


_NON_WORD_PATTERN = re.compile(r'[^A-Za-z0-9_\s]')


def sanitize_prompt(prompt: str) -> str:
    """Reduce a prompt to a short, filesystem-safe core.

    Args:
        prompt: Raw prompt text.

    Returns:
        Up to the first four lower-cased words joined by underscores and
        truncated to 30 characters. Empty when the prompt has no words.
    """
    cleaned = _NON_WORD_PATTERN.sub('', prompt.lower())
    words = cleaned.split()[:FILENAME_MAX_WORDS]
    return '_'.join(words)[:FILENAME_MAX_CORE_LENGTH]


def derive_filename(
    prompt: str,
    timestamp: int,
    output_format: Union[str, OutputMimeType] = OutputMimeType.PNG,
) -> str:
    """Derive the filename for a generated image.

    Args:
        prompt: Raw prompt text.
        timestamp: Epoch seconds of the generation.
        output_format: Format tag ('png', 'jpeg', 'jpg') or mime type.

    Returns:
        A name of the form ``<timestamp>_<core>.<ext>``.

    Raises:
        ValueError: If the output format is not supported.
    """
    if not isinstance(output_format, OutputMimeType):
        output_format = OutputMimeType.from_format(output_format)
    return f'{int(timestamp)}_{sanitize_prompt(prompt)}.{output_format.extension}'


def derive_uri(filename: str) -> str:
    """Wrap a derived filename as a generated-image resource URI."""
    return f'{RESOURCE_URI_PREFIX}{filename}'


def filename_from_uri(uri: str) -> str:
    """Extract the filename part of a generated-image resource URI.

    Raises:
        ValueError: If the URI does not use the generated-image scheme.
    """
    if not is_generated_image_uri(uri):
        raise ValueError(f"Not a generated image URI: {uri}")
    return uri[len(RESOURCE_URI_PREFIX):]


def is_generated_image_uri(uri: str) -> bool:
    return str(uri).startswith(RESOURCE_URI_PREFIX)
