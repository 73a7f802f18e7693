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
"""Image processing utilities for encoding, probing, and saving."""

import base64
import os
from gemini_imagen_mcp_server.consts import DEFAULT_OUTPUT_DIR
from io import BytesIO
from loguru import logger
from PIL import Image, UnidentifiedImageError
from typing import Optional, Tuple


def encode_image_bytes(image_bytes: bytes) -> str:
    """Encode raw image bytes as a base64 string for MCP content blocks."""
    return base64.b64encode(image_bytes).decode('utf-8')


def read_image_dimensions(image_data: bytes) -> Tuple[int, int]:
    """Read the pixel dimensions of an encoded image.

    Args:
        image_data: Raw image bytes.

    Returns:
        Tuple of (width, height) in pixels.

    Raises:
        ValueError: If the data is not a decodable image.
    """
    try:
        with Image.open(BytesIO(image_data)) as image:
            return image.size
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Failed to read image dimensions: {str(e)}")


def resolve_output_dir(workspace_dir: Optional[str]) -> str:
    """Directory generated images are written to for a given workspace."""
    if workspace_dir:
        return os.path.join(workspace_dir, DEFAULT_OUTPUT_DIR)
    return DEFAULT_OUTPUT_DIR


def save_image(image_bytes: bytes, filename: str, workspace_dir: Optional[str] = None) -> str:
    """Save image bytes under the workspace output directory.

    Existing files with the same name are overwritten, matching the
    registry's last-write-wins behavior for colliding names.

    Args:
        image_bytes: Raw image bytes.
        filename: Derived filename, including extension.
        workspace_dir: Directory where images should be saved. If None, uses current directory.

    Returns:
        Absolute path of the saved image.

    Raises:
        IOError: If directory creation or file writing fails.
    """
    output_dir = resolve_output_dir(workspace_dir)

    try:
        os.makedirs(output_dir, exist_ok=True)
    except OSError as e:
        raise IOError(f"Failed to create output directory {output_dir}: {str(e)}")

    image_path = os.path.join(output_dir, filename)
    try:
        with open(image_path, 'wb') as file:
            file.write(image_bytes)
    except OSError as e:
        logger.error(f'Failed to save image {filename}: {str(e)}')
        raise IOError(f"Failed to save image {filename}: {str(e)}")

    abs_image_path = os.path.abspath(image_path)
    logger.debug(f'Saved image to: {abs_image_path}')
    return abs_image_path
