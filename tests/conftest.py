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
"""Shared fixtures for the gemini-imagen-mcp-server tests."""

import pytest
from gemini_imagen_mcp_server.config import Settings
from google.genai import types
from io import BytesIO
from PIL import Image
from unittest.mock import AsyncMock, MagicMock


def create_test_image_bytes(width=64, height=48, format='PNG'):
    """Create a valid test image and return its encoded bytes."""
    img = Image.new('RGB', (width, height), color='red')
    buffer = BytesIO()
    img.save(buffer, format=format)
    return buffer.getvalue()


def make_response(image_bytes=None, rai_filtered_reason=None, empty=False, with_image=True):
    """Build a GenerateImagesResponse shaped like the Imagen API's."""
    if empty:
        return types.GenerateImagesResponse(generated_images=[])
    image = types.Image(image_bytes=image_bytes, mime_type='image/png') if with_image else None
    return types.GenerateImagesResponse(
        generated_images=[
            types.GeneratedImage(image=image, rai_filtered_reason=rai_filtered_reason)
        ]
    )


@pytest.fixture
def png_bytes():
    """A small valid PNG image."""
    return create_test_image_bytes()


@pytest.fixture
def image_factory():
    """Builder for encoded test images of a given size and format."""
    return create_test_image_bytes


@pytest.fixture
def response_factory():
    """Builder for provider responses."""
    return make_response


@pytest.fixture
def sample_text_prompt():
    """A sample text prompt."""
    return 'A majestic dragon soaring through a sunset sky'


@pytest.fixture
def temp_workspace_dir(tmp_path):
    """A temporary workspace directory."""
    return str(tmp_path)


@pytest.fixture
def settings():
    """Settings with a test API key and default model."""
    return Settings(api_key='test-key')


@pytest.fixture
def mock_genai_client():
    """A google-genai client whose async generate_images call is mocked."""
    client = MagicMock()
    client.aio.models.generate_images = AsyncMock()
    return client


@pytest.fixture
def server(settings, mock_genai_client):
    """A server wired to the mocked client."""
    from gemini_imagen_mcp_server.server import create_server

    return create_server(settings, genai_client=mock_genai_client)


@pytest.fixture
def mock_context(server):
    """A tool context for a stdio request with no client id."""
    ctx = MagicMock()
    ctx.error = AsyncMock()
    ctx.warning = AsyncMock()
    ctx.info = AsyncMock()
    ctx.request_context.request = None
    ctx.client_id = None
    ctx.fastmcp = server
    return ctx
