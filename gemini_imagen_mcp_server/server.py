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
"""Gemini Imagen MCP Server implementation."""

import argparse
import os
import sys
import weakref
from gemini_imagen_mcp_server.config import (
    ConfigurationError,
    Settings,
    configure_logging,
    load_settings,
)
from gemini_imagen_mcp_server.consts import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_MIME_TYPE,
    DEFAULT_SCOPE_KEY,
    LOG_LEVEL_ENV,
    PROMPT_INSTRUCTIONS,
    RESOURCE_SCHEME,
    RESOURCE_URI_TEMPLATE,
    SERVER_NAME,
    SESSION_ID_HEADER,
    SSE_SESSION_ID_PARAM,
)
from gemini_imagen_mcp_server.models.common import ImageGenerationParams, ImageGenerationResponse
from gemini_imagen_mcp_server.services.generation import generate_image_from_text
from gemini_imagen_mcp_server.services.imagen_service import create_client
from gemini_imagen_mcp_server.services.naming import filename_from_uri, is_generated_image_uri
from gemini_imagen_mcp_server.services.registry import (
    ArtifactNotFoundError,
    ArtifactRegistry,
    ArtifactScope,
)
from google import genai
from loguru import logger
from mcp.server.fastmcp import Context, FastMCP
from mcp.server.fastmcp.exceptions import ResourceError
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.types import ImageContent, TextContent
from mcp.types import Resource as MCPResource
from mcp.types import ResourceTemplate as MCPResourceTemplate
from pydantic import AnyUrl, Field, ValidationError
from typing import Iterable, List, Optional, Union


# Logging
configure_logging(os.getenv(LOG_LEVEL_ENV, DEFAULT_LOG_LEVEL))


INSTRUCTIONS = f"""
# Google Imagen Image Generation

This MCP server generates images from text using Google's Imagen 4 models
through the Gemini API.

## Available Tools

- **generate_image_from_text**: Generate an image from a text description.

## Resources

Generated images are kept for the lifetime of your session and exposed as
resources at `{RESOURCE_URI_TEMPLATE}`. List resources to see every image
generated so far, and read a resource to fetch its bytes. Pass
`return_base64=true` to receive the image inline instead, or `workspace_dir`
to also save it under `<workspace_dir>/output/`.

## Prompt Best Practices

{PROMPT_INSTRUCTIONS}
"""


def transport_session_id(ctx: Context) -> Optional[str]:
    """Session id assigned by the HTTP transport that carried the current request.

    Streamable HTTP sends it in the ``mcp-session-id`` header and SSE in the
    ``session_id`` query parameter of each posted message. None for stdio,
    stateless HTTP and calls made outside a request.
    """
    try:
        request_context = ctx.request_context
    except ValueError:
        return None

    request = getattr(request_context, 'request', None)
    headers = getattr(request, 'headers', None)
    if headers is not None:
        session_id = headers.get(SESSION_ID_HEADER)
        if session_id:
            return session_id

    query_params = getattr(request, 'query_params', None)
    if query_params is not None:
        session_id = query_params.get(SSE_SESSION_ID_PARAM)
        if session_id:
            return session_id

    return None


def resolve_scope_key(ctx: Context) -> str:
    """Registry scope key for the session that issued the current request.

    Uses the transport session id when present, then the client id from
    request metadata, and otherwise the process-wide default scope.
    """
    return transport_session_id(ctx) or ctx.client_id or DEFAULT_SCOPE_KEY


class ImagenMCPServer(FastMCP):
    """FastMCP server that owns the generated-image registry for its sessions.

    Attributes:
        imagen_settings: Process-wide settings.
        genai_client: google-genai client used for every generation.
        artifact_registry: Session-keyed store of generated images.
    """

    def __init__(self, imagen_settings: Settings, genai_client: Optional[genai.Client] = None):
        super().__init__(
            SERVER_NAME,
            instructions=INSTRUCTIONS,
            dependencies=[
                'pydantic',
                'google-genai',
                'loguru',
                'pillow',
            ],
        )
        self.imagen_settings = imagen_settings
        self.genai_client = genai_client or create_client(imagen_settings.api_key)
        self.artifact_registry = ArtifactRegistry()
        self._tracked_sessions: weakref.WeakSet = weakref.WeakSet()
        self.add_tool(mcp_generate_image_from_text, name='generate_image_from_text')

    def scope_for(self, ctx: Context) -> ArtifactScope:
        scope_key = resolve_scope_key(ctx)
        if scope_key == transport_session_id(ctx):
            self._drop_scope_with_session(ctx.session, scope_key)
        return self.artifact_registry.scope(scope_key)

    def _drop_scope_with_session(self, session: object, scope_key: str) -> None:
        """Discard the scope for ``scope_key`` once its transport session is gone."""
        if session in self._tracked_sessions:
            return
        self._tracked_sessions.add(session)
        weakref.finalize(session, self.artifact_registry.drop_scope, scope_key)

    async def list_resources(self) -> List[MCPResource]:
        """List static resources plus the images generated in the caller's session."""
        resources = list(await super().list_resources())
        scope = self.scope_for(self.get_context())
        for summary in scope.list():
            resources.append(
                MCPResource(
                    uri=summary.uri,  # type: ignore[arg-type]
                    name=summary.filename,
                    title=summary.title,
                    description=summary.description,
                    mimeType=summary.mime_type.value,
                )
            )
        return resources

    async def list_resource_templates(self) -> List[MCPResourceTemplate]:
        templates = list(await super().list_resource_templates())
        templates.append(
            MCPResourceTemplate(
                uriTemplate=RESOURCE_URI_TEMPLATE,
                name=RESOURCE_SCHEME,
                title='Generated Image',
                description="AI-generated images using Google's Imagen models",
            )
        )
        return templates

    async def read_resource(self, uri: Union[AnyUrl, str]) -> Iterable[ReadResourceContents]:
        """Read a generated image from the caller's session.

        Raises:
            ResourceError: If the session holds no image at ``uri``.
        """
        uri_str = str(uri)
        if not is_generated_image_uri(uri_str):
            return await super().read_resource(uri)

        scope = self.scope_for(self.get_context())
        logger.debug(f'[Session {scope.key}] Reading image {filename_from_uri(uri_str)}')
        try:
            artifact = scope.get(uri_str)
        except ArtifactNotFoundError as e:
            logger.error(
                f'Resource not found: {uri_str}',
                extra={'scope': scope.key, 'available': scope.keys()}
            )
            raise ResourceError(str(e))

        return [ReadResourceContents(content=artifact.image_bytes, mime_type=artifact.mime_type.value)]


def to_content_blocks(response: ImageGenerationResponse) -> List[Union[TextContent, ImageContent]]:
    """Render a generation response as MCP content blocks."""
    content: List[Union[TextContent, ImageContent]] = []
    if response.image_base64 and response.mime_type:
        content.append(
            ImageContent(type='image', data=response.image_base64, mimeType=response.mime_type.value)
        )
    content.append(TextContent(type='text', text=response.message))
    return content


def _text(message: str) -> List[Union[TextContent, ImageContent]]:
    return [TextContent(type='text', text=message)]


async def mcp_generate_image_from_text(
    ctx: Context,
    prompt: str = Field(description='Text description of the image to generate'),
    model: Optional[str] = Field(
        default=None,
        description='Imagen 4.0 model variant to use: "imagen-4.0-generate-preview-06-06", '
        '"imagen-4.0-fast-generate-preview-06-06" or "imagen-4.0-ultra-generate-preview-06-06". '
        'Defaults to the server\'s configured model.',
    ),
    aspect_ratio: Optional[str] = Field(
        default=None,
        description='Aspect ratio of generated images: "1:1", "3:4", "4:3", "9:16" or "16:9"',
    ),
    output_mime_type: str = Field(
        default=DEFAULT_MIME_TYPE,
        description='Output image format: "image/png" or "image/jpeg"',
    ),
    return_base64: bool = Field(
        default=False,
        description='Return the image inline instead of storing it as a session resource',
    ),
    workspace_dir: Optional[str] = Field(
        default=None,
        description='If provided, also save the image under <workspace_dir>/output/',
    ),
) -> List[Union[TextContent, ImageContent]]:
    """Generate an image from a text description using Google Imagen 4.0 models.

    The image is stored for the rest of the session and exposed as a
    generated-image:// resource whose URI is returned. Set return_base64 to
    receive the image inline instead.

    ## Prompt Best Practices

    - Describe the subject, the context and the style
    - Add lighting, lens or framing details for photographic results
    - Use aspect ratios suited to the use case (16:9 for landscapes, 9:16 for mobile)

    Returns:
        MCP content blocks describing the result. Failures are reported as text.
    """
    logger.debug(
        f"MCP tool generate_image_from_text called with prompt: '{prompt[:30]}...', "
        f"aspect_ratio: {aspect_ratio}"
    )

    try:
        server: ImagenMCPServer = ctx.fastmcp  # type: ignore[assignment]

        try:
            params = ImageGenerationParams(
                prompt=prompt,
                model=model or server.imagen_settings.model_name,
                aspect_ratio=aspect_ratio or None,
                output_mime_type=output_mime_type or DEFAULT_MIME_TYPE,
            )
        except ValidationError as e:
            logger.error(f'Parameter validation failed: {str(e)}')
            await ctx.error(f'Invalid parameters: {str(e)}')
            return _text(f'Invalid parameters: {str(e)}')

        logger.info(
            f'Generating image with model: {params.model.value}, '
            f'format: {params.output_mime_type.value}'
        )
        response = await generate_image_from_text(
            params=params,
            client=server.genai_client,
            scope=server.scope_for(ctx),
            return_base64=return_base64,
            workspace_dir=workspace_dir,
        )

        if response.status == 'error':
            logger.error(f'Image generation returned error status: {response.message}')
            await ctx.error(response.message)
        elif response.status in ('empty', 'filtered'):
            await ctx.warning(response.message)

        return to_content_blocks(response)
    except Exception as e:
        logger.error(f'Error in mcp_generate_image_from_text: {str(e)}')
        await ctx.error(f'Error generating image: {str(e)}')
        return _text(f'Error generating image: {str(e)}')


def create_server(
    settings: Settings, genai_client: Optional[genai.Client] = None
) -> ImagenMCPServer:
    """Build a server for ``settings``, optionally with a preconfigured client."""
    return ImagenMCPServer(settings, genai_client=genai_client)


def main():
    """Run the MCP server with CLI argument support."""
    parser = argparse.ArgumentParser(description='MCP server for Google Imagen image generation')
    parser.add_argument(
        '--transport',
        choices=['stdio', 'sse', 'streamable-http'],
        default='stdio',
        help='Transport to serve on (default: stdio)',
    )
    args = parser.parse_args()

    try:
        settings = load_settings()
    except ConfigurationError as e:
        logger.error(str(e))
        sys.exit(1)

    configure_logging(settings.effective_log_level)
    logger.info(f'Starting {SERVER_NAME} MCP server', extra={'model': settings.model_name.value})
    create_server(settings).run(transport=args.transport)


if __name__ == '__main__':
    main()
