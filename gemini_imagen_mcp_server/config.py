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
"""Process-wide configuration and logging setup."""

import os
import sys
from gemini_imagen_mcp_server.consts import (
    API_KEY_ENV,
    API_KEY_FALLBACK_ENV,
    DEBUG_ENV,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MODEL_ID,
    LOG_LEVEL_ENV,
    MODEL_NAME_ENV,
)
from gemini_imagen_mcp_server.models.common import ImagenModelId
from loguru import logger
from pydantic import BaseModel, Field, ValidationError
from typing import Mapping, Optional


_TRUTHY = ('1', 'true', 'yes', 'on')


class ConfigurationError(Exception):
    """Raised at startup when required configuration is missing or invalid."""


class Settings(BaseModel):
    """Server settings.

    Attributes:
        api_key: Gemini API key used for every provider call.
        model_name: Default Imagen model when a request names none.
        debug: Enable debug logging.
        log_level: loguru level for stderr output.
    """
    api_key: str = Field(..., min_length=1, repr=False)
    model_name: ImagenModelId = ImagenModelId(DEFAULT_MODEL_ID)
    debug: bool = False
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def effective_log_level(self) -> str:
        return 'DEBUG' if self.debug else self.log_level.upper()


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Load settings from environment variables.

    Args:
        environ: Mapping to read from. Defaults to os.environ.

    Returns:
        Validated Settings.

    Raises:
        ConfigurationError: If the API key is missing or a value is invalid.
    """
    env = os.environ if environ is None else environ

    api_key = env.get(API_KEY_ENV) or env.get(API_KEY_FALLBACK_ENV)
    if not api_key:
        raise ConfigurationError(
            f'Missing API key. Set the {API_KEY_ENV} environment variable.'
        )

    try:
        return Settings(
            api_key=api_key,
            model_name=env.get(MODEL_NAME_ENV) or DEFAULT_MODEL_ID,
            debug=env.get(DEBUG_ENV, '').strip().lower() in _TRUTHY,
            log_level=env.get(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL,
        )
    except ValidationError as e:
        raise ConfigurationError(f'Invalid configuration: {str(e)}')


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Route loguru output to stderr at ``level``; stdout carries the stdio transport."""
    logger.remove()
    logger.add(sys.stderr, level=level)
