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
# Constants
SERVER_NAME = 'Gemini-Imagegen4'
SERVER_VERSION = '1.0.0'

# Imagen 4 model IDs
IMAGEN_4_MODEL_ID = 'imagen-4.0-generate-preview-06-06'
IMAGEN_4_FAST_MODEL_ID = 'imagen-4.0-fast-generate-preview-06-06'
IMAGEN_4_ULTRA_MODEL_ID = 'imagen-4.0-ultra-generate-preview-06-06'

# Environment variables
API_KEY_ENV = 'GEMINI_API_KEY'
API_KEY_FALLBACK_ENV = 'GOOGLE_API_KEY'
MODEL_NAME_ENV = 'IMAGEN_MODEL_NAME'
DEBUG_ENV = 'IMAGEN_DEBUG'
LOG_LEVEL_ENV = 'FASTMCP_LOG_LEVEL'

# Generation defaults
DEFAULT_MODEL_ID = IMAGEN_4_MODEL_ID
DEFAULT_MIME_TYPE = 'image/png'
DEFAULT_NUMBER_OF_IMAGES = 1
DEFAULT_LOG_LEVEL = 'WARNING'
DEFAULT_OUTPUT_DIR = 'output'  # Default directory inside workspace_dir
MAX_PROMPT_LENGTH = 10000

# Filename derivation
FILENAME_MAX_WORDS = 4
FILENAME_MAX_CORE_LENGTH = 30

# Resources
RESOURCE_SCHEME = 'generated-image'
RESOURCE_URI_PREFIX = f'{RESOURCE_SCHEME}://'
RESOURCE_URI_TEMPLATE = f'{RESOURCE_URI_PREFIX}{{filename}}'
RESOURCE_TITLE_PROMPT_LENGTH = 50

# Registry scopes
DEFAULT_SCOPE_KEY = 'default'
SESSION_ID_HEADER = 'mcp-session-id'
SSE_SESSION_ID_PARAM = 'session_id'

# Outcome messages
NO_IMAGES_MESSAGE = 'No images were generated. This might be due to content filtering.'
NO_IMAGE_DATA_MESSAGE = 'Image generation failed - no image data received'

PROMPT_INSTRUCTIONS = """
An effective prompt often includes short descriptions of:
1. The subject
2. The context and background
3. (optional) The style or medium ("photo", "watercolor", "3D render", etc.)
4. (optional) Lighting, lens and framing details

Keep prompts specific and descriptive. Imagen supports English prompts best.

## Example Prompts

- "A majestic dragon soaring through a sunset sky, digital painting"
- "close-up photo of a cup of coffee on a rustic wooden table, morning light, 35mm"
- "isometric 3D render of a tiny cozy library inside a glass bottle"

## Models

- imagen-4.0-generate-preview-06-06: Balanced quality and speed (default)
- imagen-4.0-fast-generate-preview-06-06: Fastest generation
- imagen-4.0-ultra-generate-preview-06-06: Highest fidelity

## Aspect Ratios

- 1:1 - Square
- 3:4 - Portrait
- 4:3 - Landscape
- 9:16 - Vertical/mobile
- 16:9 - Widescreen landscape
"""
