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
"""In-memory registry of generated image artifacts.

The registry holds one scope per session key. A scope maps resource URIs to
artifacts and lives until its session is dropped or the process exits. There
is no eviction, expiry or capacity bound.

All access happens on the server's event loop, so single-key inserts and
lookups need no locking. Colliding URIs within a scope overwrite; the last
write wins.
"""

from gemini_imagen_mcp_server.consts import DEFAULT_SCOPE_KEY
from gemini_imagen_mcp_server.models.artifact_models import ArtifactSummary, GeneratedArtifact
from loguru import logger
from typing import Dict, Iterator, List


class ArtifactNotFoundError(KeyError):
    """Raised when a scope has no artifact for the requested URI.

    Attributes:
        uri: The URI that was looked up.
    """
    def __init__(self, uri: str):
        """Initialize ArtifactNotFoundError.

        Args:
            uri: The URI that was looked up.
        """
        self.uri = uri
        super().__init__(uri)

    def __str__(self) -> str:
        return f'Resource not found: {self.uri}'


class ArtifactScope:
    """Artifacts belonging to a single session."""

    def __init__(self, key: str):
        self.key = key
        self._artifacts: Dict[str, GeneratedArtifact] = {}

    def put(self, uri: str, artifact: GeneratedArtifact) -> None:
        """Insert an artifact, replacing any artifact already stored at ``uri``."""
        if uri in self._artifacts:
            logger.warning(
                f'Overwriting existing artifact: {uri}',
                extra={'scope': self.key, 'uri': uri}
            )
        self._artifacts[uri] = artifact
        logger.debug(
            f'[Session {self.key}] Stored image: {uri}',
            extra={'scope': self.key, 'images_count': len(self._artifacts)}
        )

    def get(self, uri: str) -> GeneratedArtifact:
        """Look up an artifact by exact URI.

        Raises:
            ArtifactNotFoundError: If no artifact is stored at ``uri``.
        """
        try:
            return self._artifacts[uri]
        except KeyError:
            raise ArtifactNotFoundError(uri) from None

    def list(self) -> List[ArtifactSummary]:
        """Summaries of every artifact in this scope, in no guaranteed order."""
        return [artifact.to_summary() for artifact in self._artifacts.values()]

    def keys(self) -> List[str]:
        return list(self._artifacts)

    def __contains__(self, uri: object) -> bool:
        return uri in self._artifacts

    def __len__(self) -> int:
        return len(self._artifacts)

    def __iter__(self) -> Iterator[GeneratedArtifact]:
        return iter(list(self._artifacts.values()))


class ArtifactRegistry:
    """Session-keyed collection of artifact scopes.

    A server instance owns one registry. Scopes are created lazily on first
    use and never persisted.
    """

    def __init__(self):
        self._scopes: Dict[str, ArtifactScope] = {}

    def scope(self, scope_key: str = DEFAULT_SCOPE_KEY) -> ArtifactScope:
        """Return the scope for ``scope_key``, creating an empty one if absent."""
        scope = self._scopes.get(scope_key)
        if scope is None:
            scope = self._scopes[scope_key] = ArtifactScope(scope_key)
            logger.debug(f'[Session {scope_key}] Created new image registry')
        else:
            logger.debug(
                f'[Session {scope_key}] Using existing registry with {len(scope)} images'
            )
        return scope

    def drop_scope(self, scope_key: str) -> bool:
        """Discard a scope and its artifacts.

        Returns:
            True if a scope was removed, False if none existed.
        """
        scope = self._scopes.pop(scope_key, None)
        if scope is None:
            return False
        logger.debug(f'[Session {scope_key}] Dropped image registry with {len(scope)} images')
        return True

    def scope_keys(self) -> List[str]:
        return list(self._scopes)

    def __len__(self) -> int:
        return len(self._scopes)
