"""In-memory generation store for development and tests."""

import itertools
from datetime import datetime

from text2cards_core.persistence.base import (
    NOT_FOUND_CODE,
    GenerationStore,
    PersistenceError,
)
from text2cards_core.schemas.generations import (
    GenerationCreate,
    GenerationErrorLogCreate,
    GenerationRecord,
    GenerationUpdate,
)


class InMemoryGenerationStore(GenerationStore):
    """Keeps generations and error logs in process memory."""

    def __init__(self) -> None:
        self.generations: dict[int, GenerationRecord] = {}
        self.error_logs: list[GenerationErrorLogCreate] = []
        self._ids = itertools.count(1)

    async def insert(self, generation: GenerationCreate) -> GenerationRecord:
        now = datetime.utcnow()
        record = GenerationRecord(
            id=next(self._ids),
            created_at=now,
            updated_at=now,
            **generation.model_dump(),
        )
        self.generations[record.id] = record
        return record

    async def update(
        self,
        generation_id: int,
        changes: GenerationUpdate,
    ) -> GenerationRecord:
        record = self.generations.get(generation_id)
        if record is None:
            raise PersistenceError(
                f"Generation {generation_id} not found", code=NOT_FOUND_CODE
            )
        updated = record.model_copy(
            update={**changes.model_dump(), "updated_at": datetime.utcnow()}
        )
        self.generations[generation_id] = updated
        return updated

    async def insert_error_log(self, entry: GenerationErrorLogCreate) -> None:
        self.error_logs.append(entry)
