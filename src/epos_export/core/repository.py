"""
Entity persistence interfaces and a JSON-backed in-memory store.

The export pipeline only needs two things from persistence: per-type
repositories (``retrieve_all`` / ``retrieve_by_uid``) and a resolver that turns
a weak reference into an entity. Both are expressed as Protocols so that a
database-backed implementation can be swapped in without touching the
exporter.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Union

from ..shared.models import Entity, EntityType, entity_from_dict


logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Raised when entities cannot be loaded or retrieved."""
    pass


# ============================================================================
# Protocols
# ============================================================================

class EntityRepository(Protocol):
    """Read access to the entities of a single type."""

    def retrieve_all(self) -> List[Entity]:
        """Return every entity of the repository's type."""
        ...

    def retrieve_by_uid(self, uid: str) -> Optional[Entity]:
        """Return the entity with the given uid, or None."""
        ...


class RepositoryProvider(Protocol):
    """Hands out the repository for an entity type."""

    def repository(self, entity_type: EntityType) -> EntityRepository:
        ...


class ReferenceResolver:
    """
    Resolves weak references (type tag + uid) through a repository provider.

    Unknown type tags, missing entities and repository failures all resolve
    to None; the caller decides how loudly to report them.
    """

    def __init__(self, provider: RepositoryProvider):
        self.provider = provider

    def resolve(self, type_tag: Optional[str], uid: str) -> Optional[Entity]:
        if not type_tag:
            return self._resolve_untyped(uid)
        try:
            entity_type = EntityType.parse(type_tag)
        except ValueError:
            logger.warning(f"Unknown entity type '{type_tag}' for reference {uid}")
            return None
        try:
            return self.provider.repository(entity_type).retrieve_by_uid(uid)
        except Exception as e:
            logger.warning(f"Failed to resolve {entity_type.value} {uid}: {e}")
            return None

    def _resolve_untyped(self, uid: str) -> Optional[Entity]:
        # References without a type tag are looked up across every repository
        for entity_type in EntityType:
            try:
                entity = self.provider.repository(entity_type).retrieve_by_uid(uid)
            except Exception as e:
                logger.debug(f"Lookup of {uid} in {entity_type.value} failed: {e}")
                continue
            if entity is not None:
                return entity
        return None


# ============================================================================
# In-memory implementation
# ============================================================================

class InMemoryRepository:
    """Repository over an ordered uid -> entity dictionary."""

    def __init__(self, entity_type: EntityType, entities: Optional[Iterable[Entity]] = None):
        self.entity_type = entity_type
        self._entities: Dict[str, Entity] = {}
        for entity in entities or ():
            self.add(entity)

    def add(self, entity: Entity) -> None:
        if entity.entity_type is not self.entity_type:
            raise RepositoryError(
                f"Cannot store {entity.entity_type.value} {entity.uid} in the "
                f"{self.entity_type.value} repository"
            )
        self._entities[entity.uid] = entity

    def retrieve_all(self) -> List[Entity]:
        return list(self._entities.values())

    def retrieve_by_uid(self, uid: str) -> Optional[Entity]:
        return self._entities.get(uid)

    def __len__(self) -> int:
        return len(self._entities)


class InMemoryEntityStore:
    """
    Repository provider holding every entity type in memory.

    The JSON layout groups entities by type tag::

        {
            "DataProduct": [{"uid": "...", "title": ["..."]}],
            "Distribution": [...]
        }

    Type tags may be given as values (``DataProduct``) or enum names
    (``DATA_PRODUCT``). Keys are accepted in snake_case or camelCase.
    """

    def __init__(self, entities: Optional[Iterable[Entity]] = None):
        self._repositories: Dict[EntityType, InMemoryRepository] = {
            entity_type: InMemoryRepository(entity_type) for entity_type in EntityType
        }
        for entity in entities or ():
            self.add(entity)

    def add(self, entity: Entity) -> None:
        self._repositories[entity.entity_type].add(entity)

    def repository(self, entity_type: EntityType) -> InMemoryRepository:
        return self._repositories[EntityType.parse(entity_type)]

    def __len__(self) -> int:
        return sum(len(repo) for repo in self._repositories.values())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "InMemoryEntityStore":
        """
        Build a store from a type-grouped dictionary.

        Raises:
            RepositoryError: If a type tag is unknown or an entity is malformed.
        """
        if not isinstance(data, dict):
            raise RepositoryError(f"Entity document must be a JSON object, got {type(data).__name__}")

        store = cls()
        for type_tag, items in data.items():
            try:
                entity_type = EntityType.parse(type_tag)
            except ValueError as e:
                raise RepositoryError(str(e)) from e
            if not isinstance(items, list):
                raise RepositoryError(f"Entities of type {type_tag} must be a list")
            for index, item in enumerate(items):
                try:
                    store.add(entity_from_dict(entity_type, item))
                except (TypeError, ValueError) as e:
                    raise RepositoryError(f"Invalid {entity_type.value} at index {index}: {e}") from e
        logger.info(f"Loaded {len(store)} entities")
        return store

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "InMemoryEntityStore":
        """
        Load a store from a JSON file.

        Raises:
            FileNotFoundError: If the file does not exist.
            RepositoryError: If the file is not valid JSON or holds invalid entities.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Entity file not found: {path}")
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise RepositoryError(f"Invalid JSON in entity file {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise RepositoryError(f"Entity file encoding error: {e}") from e
        return cls.from_dict(data)
