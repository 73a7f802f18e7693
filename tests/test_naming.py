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
"""Tests for filename and URI derivation."""

import pytest
from gemini_imagen_mcp_server.models.common import OutputMimeType
from gemini_imagen_mcp_server.services.naming import (
    derive_filename,
    derive_uri,
    filename_from_uri,
    is_generated_image_uri,
    sanitize_prompt,
)


class TestSanitizePrompt:
    """Tests for the sanitize_prompt function."""

    def test_first_four_words_joined(self):
        """Test that only the first four words are kept."""
        assert sanitize_prompt('A majestic dragon soaring through a sunset sky') == (
            'a_majestic_dragon_soaring'
        )

    def test_punctuation_stripped(self):
        """Test that punctuation is removed before splitting."""
        assert sanitize_prompt("Hello, World! It's a test.") == 'hello_world_its_a'

    def test_truncated_to_30_characters_after_joining(self):
        """Test that the joined core is cut to 30 characters."""
        core = sanitize_prompt('Supercalifragilistic expialidocious wonderful adventures')
        assert core == 'supercalifragilistic_expialido'
        assert len(core) == 30

    def test_whitespace_runs_collapse(self):
        """Test that leading, trailing and repeated whitespace do not produce empty words."""
        assert sanitize_prompt('  ---  Hello \t\n  there  ') == 'hello_there'

    def test_leading_whitespace_yields_no_empty_word(self):
        """Test that a prompt starting with a space has no leading underscore."""
        assert sanitize_prompt(' a cat') == 'a_cat'

    @pytest.mark.parametrize(
        'prompt,expected',
        [
            ('hello\u00a0world', 'hello_world'),
            ('hello\u3000big world', 'hello_big_world'),
            ('one\u2003two\u2009three', 'one_two_three'),
        ],
    )
    def test_unicode_whitespace_separates_words(self, prompt, expected):
        """Test that non-ASCII whitespace splits words instead of being stripped."""
        assert sanitize_prompt(prompt) == expected

    def test_underscores_are_kept(self):
        """Test that underscores count as word characters."""
        assert sanitize_prompt('snake_case prompt') == 'snake_case_prompt'

    def test_non_ascii_letters_stripped(self):
        """Test that only ASCII word characters survive."""
        assert sanitize_prompt('Café crème brûlée') == 'caf_crme_brle'

    def test_no_words(self):
        """Test that a prompt without word characters yields an empty core."""
        assert sanitize_prompt('!!! ??? ...') == ''


class TestDeriveFilename:
    """Tests for the derive_filename function."""

    def test_dragon_prompt(self, sample_text_prompt):
        """Test the filename for a typical prompt."""
        assert derive_filename(sample_text_prompt, 1754998591, 'image/png') == (
            '1754998591_a_majestic_dragon_soaring.png'
        )

    def test_deterministic(self, sample_text_prompt):
        """Test that identical inputs yield identical names."""
        first = derive_filename(sample_text_prompt, 1700000000, OutputMimeType.JPEG)
        second = derive_filename(sample_text_prompt, 1700000000, OutputMimeType.JPEG)
        assert first == second

    def test_punctuation_only_prompt(self):
        """Test that a prompt with no words still derives a name."""
        assert derive_filename('?!.,;:', 1700000000, 'png') == '1700000000_.png'

    @pytest.mark.parametrize('output_format', ['image/jpeg', 'jpeg', 'jpg', 'JPEG'])
    def test_jpeg_extension(self, output_format):
        """Test that every JPEG spelling maps to the jpg extension."""
        assert derive_filename('a cat', 1, output_format) == '1_a_cat.jpg'

    @pytest.mark.parametrize('output_format', ['image/png', 'png', OutputMimeType.PNG])
    def test_png_extension(self, output_format):
        """Test that PNG spellings map to the png extension."""
        assert derive_filename('a cat', 1, output_format) == '1_a_cat.png'

    def test_default_format_is_png(self):
        """Test that PNG is used when no format is given."""
        assert derive_filename('a cat', 1).endswith('.png')

    def test_unsupported_format(self):
        """Test that an unsupported format is rejected."""
        with pytest.raises(ValueError, match='Unsupported output format'):
            derive_filename('a cat', 1, 'webp')

    def test_different_seconds_do_not_collide(self, sample_text_prompt):
        """Test that the timestamp distinguishes otherwise identical prompts."""
        assert derive_filename(sample_text_prompt, 1, 'png') != derive_filename(
            sample_text_prompt, 2, 'png'
        )

    def test_similar_prompts_in_same_second_collide(self):
        """Test that prompts sharing their first four words share a name."""
        first = derive_filename('A red fox jumps over the fence', 5, 'png')
        second = derive_filename('A red fox jumps into the river', 5, 'png')
        assert first == second


class TestResourceUris:
    """Tests for URI helpers."""

    def test_derive_uri(self):
        """Test that filenames are wrapped in the generated-image scheme."""
        assert derive_uri('1_a_cat.png') == 'generated-image://1_a_cat.png'

    def test_filename_from_uri(self):
        """Test that the filename can be recovered from a URI."""
        assert filename_from_uri('generated-image://1_a_cat.png') == '1_a_cat.png'

    def test_filename_from_foreign_uri(self):
        """Test that other schemes are rejected."""
        with pytest.raises(ValueError, match='Not a generated image URI'):
            filename_from_uri('file:///tmp/1_a_cat.png')

    def test_is_generated_image_uri(self):
        """Test scheme detection."""
        assert is_generated_image_uri('generated-image://1_.png')
        assert not is_generated_image_uri('file:///tmp/x.png')
