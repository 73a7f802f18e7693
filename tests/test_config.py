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
"""Tests for configuration loading."""

import pytest
import sys
from gemini_imagen_mcp_server.config import (
    ConfigurationError,
    Settings,
    configure_logging,
    load_settings,
)
from gemini_imagen_mcp_server.models.common import ImagenModelId
from unittest.mock import patch


class TestLoadSettings:
    """Tests for the load_settings function."""

    def test_defaults(self):
        """Test that only the API key is required."""
        settings = load_settings({'GEMINI_API_KEY': 'secret'})

        assert settings.api_key == 'secret'
        assert settings.model_name == ImagenModelId.IMAGEN_4
        assert settings.debug is False
        assert settings.effective_log_level == 'WARNING'

    def test_missing_api_key(self):
        """Test that a missing key is a startup error."""
        with pytest.raises(ConfigurationError, match='GEMINI_API_KEY'):
            load_settings({})

    def test_empty_api_key(self):
        """Test that an empty key counts as missing."""
        with pytest.raises(ConfigurationError):
            load_settings({'GEMINI_API_KEY': ''})

    def test_google_api_key_fallback(self):
        """Test that GOOGLE_API_KEY is used when GEMINI_API_KEY is unset."""
        assert load_settings({'GOOGLE_API_KEY': 'fallback'}).api_key == 'fallback'

    def test_gemini_api_key_preferred(self):
        """Test that GEMINI_API_KEY wins over GOOGLE_API_KEY."""
        settings = load_settings({'GEMINI_API_KEY': 'primary', 'GOOGLE_API_KEY': 'fallback'})
        assert settings.api_key == 'primary'

    def test_model_name(self):
        """Test that the default model can be configured."""
        settings = load_settings(
            {
                'GEMINI_API_KEY': 'secret',
                'IMAGEN_MODEL_NAME': 'imagen-4.0-fast-generate-preview-06-06',
            }
        )
        assert settings.model_name == ImagenModelId.IMAGEN_4_FAST

    def test_invalid_model_name(self):
        """Test that an unknown model is a configuration error."""
        with pytest.raises(ConfigurationError, match='Invalid configuration'):
            load_settings({'GEMINI_API_KEY': 'secret', 'IMAGEN_MODEL_NAME': 'imagen-2'})

    @pytest.mark.parametrize('value', ['1', 'true', 'TRUE', 'yes', 'on'])
    def test_debug_enables_debug_logging(self, value):
        """Test that truthy debug values switch logging to DEBUG."""
        settings = load_settings({'GEMINI_API_KEY': 'secret', 'IMAGEN_DEBUG': value})

        assert settings.debug is True
        assert settings.effective_log_level == 'DEBUG'

    def test_debug_false(self):
        """Test that other debug values leave debug off."""
        assert load_settings({'GEMINI_API_KEY': 'secret', 'IMAGEN_DEBUG': '0'}).debug is False

    def test_log_level(self):
        """Test that the log level is read and upper-cased."""
        settings = load_settings({'GEMINI_API_KEY': 'secret', 'FASTMCP_LOG_LEVEL': 'info'})
        assert settings.effective_log_level == 'INFO'


class TestSettings:
    """Tests for the Settings model."""

    def test_api_key_hidden_from_repr(self):
        """Test that the API key never appears in the settings repr."""
        assert 'secret' not in repr(Settings(api_key='secret'))


class TestConfigureLogging:
    """Tests for the configure_logging function."""

    def test_logs_to_stderr(self):
        """Test that logging is routed to stderr at the given level."""
        with patch('gemini_imagen_mcp_server.config.logger') as mock_logger:
            configure_logging('DEBUG')

        mock_logger.remove.assert_called_once_with()
        mock_logger.add.assert_called_once_with(sys.stderr, level='DEBUG')
