"""Swappable persona stores.

Toggle via PERSONA_STORE env var:
  PERSONA_STORE=sqlite   (default, DB_PATH)
  PERSONA_STORE=memory   (process-local, lost on restart)

Both backends key personas by lower-cased name, replace whole profiles on
save (no field-level merge) and serialize writes per name with an
asyncio.Lock, so concurrent saves of one name are last-writer-wins while
reads and writes to other names proceed freely.
"""

from __future__ import annotations

import asyncio
import json
import logging
import weakref
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

import aiosqlite
from pydantic import ValidationError

from persona_quill.analyzers.profile import BUILT_IN_PERSONAS, ProfileBuilder
from persona_quill.errors import InvalidBackup, MissingContent, NameReserved, PersonaNotFound
from persona_quill.models import ContentType, PersonaBackup, PersonaProfile

_log = logging.getLogger(__name__)

RESERVED_NAMES = frozenset({"bap", "simon"})
BACKUP_VERSION = "1.0"


def _key(name: str) -> str:
    return name.strip().lower()


# ── Backup codec ─────────────────────────────────────────────────────────────

def export_persona(profile: PersonaProfile) -> dict[str, Any]:
    """Serialize a profile to the backup record. Metrics are recomputed on import."""
    backup = PersonaBackup(
        name=profile.name,
        raw_content=profile.raw_training_text,
        instructions=profile.special_instructions,
        created_at=profile.created_at,
        content_type=profile.content_type,
        version=BACKUP_VERSION,
    )
    return backup.model_dump(mode="json", by_alias=True, exclude_none=True)


def import_persona(record: dict[str, Any] | str, builder: Optional[ProfileBuilder] = None) -> PersonaProfile:
    """Rebuild a trained profile from a backup record (dict or JSON text)."""
    try:
        data = json.loads(record) if isinstance(record, str) else record
        backup = PersonaBackup.model_validate(data)
    except (ValueError, TypeError, ValidationError) as exc:
        raise InvalidBackup(f"invalid persona backup: {exc}") from exc
    if not backup.name.strip() or not backup.raw_content.strip():
        raise InvalidBackup("persona backup needs a name and rawContent")

    builder = builder or ProfileBuilder()
    profile = builder.build(backup.name, backup.raw_content, backup.content_type)
    return profile.model_copy(update={
        "special_instructions": backup.instructions,
        "created_at": backup.created_at,
    })


def _check_reserved(profile: PersonaProfile) -> None:
    if _key(profile.name) in RESERVED_NAMES and not profile.is_built_in:
        raise NameReserved(f"{profile.name!r} is reserved for a built-in persona")


# ── Protocol ─────────────────────────────────────────────────────────────────

@runtime_checkable
class PersonaStore(Protocol):
    """Keyed persona storage; any backend implementing this is substitutable."""

    async def save(self, profile: PersonaProfile) -> PersonaProfile: ...

    async def get(self, name: str) -> Optional[PersonaProfile]: ...

    async def list(self) -> list[PersonaProfile]: ...

    async def remove(self, name: str) -> bool: ...

    async def update_instructions(self, name: str, instructions: Optional[str]) -> PersonaProfile: ...

    async def export(self, name: str) -> dict[str, Any]: ...

    async def import_backup(self, record: dict[str, Any] | str) -> PersonaProfile: ...


class _BaseStore:
    """Shared lock bookkeeping plus the operations expressible via get/save."""

    def __init__(self, builder: Optional[ProfileBuilder] = None) -> None:
        self._builder = builder or ProfileBuilder()
        # entries vanish once no coroutine holds or awaits the lock
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def _lock(self, name: str) -> asyncio.Lock:
        lock = self._locks.get(_key(name))
        if lock is None:
            lock = self._locks[_key(name)] = asyncio.Lock()
        return lock

    async def get(self, name: str) -> Optional[PersonaProfile]:
        raise NotImplementedError

    async def save(self, profile: PersonaProfile) -> PersonaProfile:
        _check_reserved(profile)
        if not profile.name.strip():
            raise MissingContent("persona name is required")
        async with self._lock(profile.name):
            await self._write(profile)
        _log.info("saved persona %s (%s, %d words)", profile.name, profile.kind, profile.metrics.word_count)
        return profile

    async def _write(self, profile: PersonaProfile) -> None:
        raise NotImplementedError

    async def update_instructions(self, name: str, instructions: Optional[str]) -> PersonaProfile:
        async with self._lock(name):
            profile = await self.get(name)
            if profile is None:
                raise PersonaNotFound(f"persona {name!r} not found")
            updated = profile.model_copy(update={"special_instructions": instructions or None})
            await self._write(updated)
        return updated

    async def export(self, name: str) -> dict[str, Any]:
        profile = await self.get(name)
        if profile is None:
            raise PersonaNotFound(f"persona {name!r} not found")
        return export_persona(profile)

    async def import_backup(self, record: dict[str, Any] | str) -> PersonaProfile:
        return await self.save(import_persona(record, self._builder))


# ── InMemoryPersonaStore ──────────────────────────────────────────────────────

class InMemoryPersonaStore(_BaseStore):
    """Process-local store. ``list()`` returns save order; re-saving moves a persona last."""

    def __init__(self, builder: Optional[ProfileBuilder] = None) -> None:
        super().__init__(builder)
        self._profiles: dict[str, PersonaProfile] = {}

    async def _write(self, profile: PersonaProfile) -> None:
        self._profiles.pop(_key(profile.name), None)
        self._profiles[_key(profile.name)] = profile

    async def get(self, name: str) -> Optional[PersonaProfile]:
        return self._profiles.get(_key(name))

    async def list(self) -> list[PersonaProfile]:
        return list(self._profiles.values())

    async def remove(self, name: str) -> bool:
        async with self._lock(name):
            return self._profiles.pop(_key(name), None) is not None


# ── SQLitePersonaStore ────────────────────────────────────────────────────────

class SQLitePersonaStore(_BaseStore):
    """Stores full profiles as JSON rows in SQLite. ``list()`` orders by created_at, then name."""

    def __init__(self, db_path: str, builder: Optional[ProfileBuilder] = None) -> None:
        super().__init__(builder)
        self.db_path = db_path
        self._schema_ready = False

    async def _ensure_schema(self, db: aiosqlite.Connection) -> None:
        if self._schema_ready:
            return
        await db.execute("""
            CREATE TABLE IF NOT EXISTS personas (
                name         TEXT PRIMARY KEY,
                kind         TEXT NOT NULL,
                created_at   TEXT NOT NULL,
                profile_json TEXT NOT NULL
            )
        """)
        await db.commit()
        self._schema_ready = True

    async def _write(self, profile: PersonaProfile) -> None:
        async with aiosqlite.connect(self.db_path) as db:
            await self._ensure_schema(db)
            await db.execute(
                """INSERT OR REPLACE INTO personas (name, kind, created_at, profile_json)
                   VALUES (?, ?, ?, ?)""",
                (_key(profile.name), profile.kind, profile.created_at.isoformat(), profile.model_dump_json()),
            )
            await db.commit()

    async def get(self, name: str) -> Optional[PersonaProfile]:
        async with aiosqlite.connect(self.db_path) as db:
            await self._ensure_schema(db)
            async with db.execute(
                "SELECT profile_json FROM personas WHERE name = ?", (_key(name),)
            ) as cursor:
                row = await cursor.fetchone()
        return PersonaProfile.model_validate_json(row[0]) if row else None

    async def list(self) -> list[PersonaProfile]:
        async with aiosqlite.connect(self.db_path) as db:
            await self._ensure_schema(db)
            async with db.execute(
                "SELECT profile_json FROM personas ORDER BY created_at ASC, name ASC"
            ) as cursor:
                rows = await cursor.fetchall()
        return [PersonaProfile.model_validate_json(r[0]) for r in rows]

    async def remove(self, name: str) -> bool:
        async with self._lock(name):
            async with aiosqlite.connect(self.db_path) as db:
                await self._ensure_schema(db)
                cursor = await db.execute("DELETE FROM personas WHERE name = ?", (_key(name),))
                deleted = cursor.rowcount > 0
                await db.commit()
        return deleted


# ── Factory ───────────────────────────────────────────────────────────────────

def make_store(backend: str = "sqlite", *, db_path: str = "persona_quill.db") -> PersonaStore:
    """Return the persona store for ``backend``.

    Raises ValueError for an unknown backend name.
    """
    backend = backend.lower()
    if backend == "sqlite":
        return SQLitePersonaStore(db_path)
    if backend == "memory":
        return InMemoryPersonaStore()
    raise ValueError(f"Unknown PERSONA_STORE={backend!r}. Use 'sqlite' or 'memory'.")


async def seed_built_ins(
    store: PersonaStore,
    data_dir: Path,
    content_type: ContentType = "posts",
    builder: Optional[ProfileBuilder] = None,
) -> list[PersonaProfile]:
    """Build every built-in persona that has training data in ``data_dir`` and save it."""
    builder = builder or ProfileBuilder()
    seeded = []
    for name in BUILT_IN_PERSONAS:
        try:
            profile = builder.load_built_in(name, content_type, data_dir)
        except PersonaNotFound:
            _log.warning("skipping built-in persona %s: no training data in %s", name, data_dir)
            continue
        seeded.append(await store.save(profile))
    return seeded
