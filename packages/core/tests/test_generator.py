"""Tests for the generation workflow."""

import json
from collections.abc import AsyncIterator, Callable

import httpx
import pytest
import pytest_asyncio

from text2cards_core.errors import (
    EmptyModelResponseError,
    GenerationRecordError,
    MissingCredentialError,
    ModelHTTPError,
    NoJsonFoundError,
    SessionExpiredError,
)
from text2cards_core.generation.generator import FlashcardGenerator, generate_flashcards
from text2cards_core.model_adapters import MOCK_MODEL_NAME, MockModelInvoker, OpenRouterInvoker
from text2cards_core.model_adapters.base import BaseModelInvoker, RawModelOutput
from text2cards_core.persistence.base import (
    SESSION_EXPIRED_CODE,
    PersistenceError,
)
from text2cards_core.persistence.memory import InMemoryGenerationStore
from text2cards_core.schemas.flashcards import FlashcardSource
from text2cards_core.schemas.generations import (
    GenerationCreate,
    GenerationErrorLogCreate,
    GenerationRecord,
    GenerationStatus,
    GenerationUpdate,
)
from text2cards_core.schemas.language import Language
from text2cards_core.settings import Settings
from text2cards_core.utils.hashing import content_fingerprint


class RecordingStore(InMemoryGenerationStore):
    """In-memory store that records calls and can be told to fail."""

    def __init__(
        self,
        insert_error: Exception | None = None,
        update_error: Exception | None = None,
        log_error: Exception | None = None,
    ) -> None:
        super().__init__()
        self.insert_error = insert_error
        self.update_error = update_error
        self.log_error = log_error
        self.update_calls = 0
        self.log_attempts: list[GenerationErrorLogCreate] = []

    async def insert(self, generation: GenerationCreate) -> GenerationRecord:
        if self.insert_error:
            raise self.insert_error
        return await super().insert(generation)

    async def update(
        self,
        generation_id: int,
        changes: GenerationUpdate,
    ) -> GenerationRecord:
        self.update_calls += 1
        if self.update_error:
            raise self.update_error
        return await super().update(generation_id, changes)

    async def insert_error_log(self, entry: GenerationErrorLogCreate) -> None:
        self.log_attempts.append(entry)
        if self.log_error:
            raise self.log_error
        await super().insert_error_log(entry)


class ScriptedInvoker(BaseModelInvoker):
    """Invoker returning a fixed completion and remembering the prompt."""

    model_name = "scripted-model"

    def __init__(self, content: object) -> None:
        self.content = content
        self.prompts: list[str] = []

    async def invoke(self, prompt: str, source_text: str) -> RawModelOutput:
        self.prompts.append(prompt)
        return RawModelOutput(content=self.content, model=self.model_name)


@pytest_asyncio.fixture
async def live_invoker() -> AsyncIterator[Callable[..., OpenRouterInvoker]]:
    """Factory for live invokers on a fake transport; closes their clients."""
    invokers: list[OpenRouterInvoker] = []

    def build(handler, api_key: str | None = "test-key") -> OpenRouterInvoker:
        invoker = OpenRouterInvoker(
            api_key=api_key,
            site_url="https://cards.example",
            client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
        )
        invokers.append(invoker)
        return invoker

    yield build

    for invoker in invokers:
        await invoker.aclose()


class TestGenerateWithMock:
    """Scenario: mock mode with a minimum-length text."""

    @pytest.mark.asyncio
    async def test_returns_five_proposals(self, user_id: str, source_text: str) -> None:
        """Test the full happy path on the mock invoker."""
        store = InMemoryGenerationStore()
        generator = FlashcardGenerator(store, MockModelInvoker())

        result = await generator.generate(user_id, source_text)

        assert len(result.flashcards) == 5
        for card in result.flashcards:
            assert card.front and card.back
            assert card.source == FlashcardSource.AI_FULL
            assert card.user_id == user_id

        assert result.generation.generated_count == 5
        assert result.generation.model == MOCK_MODEL_NAME
        assert result.generation.accepted_unedited_count == 0
        assert result.generation.accepted_edited_count == 0

    @pytest.mark.asyncio
    async def test_record_completed(self, user_id: str, source_text: str) -> None:
        """Test the stored record after a successful generation."""
        store = InMemoryGenerationStore()

        result = await FlashcardGenerator(store, MockModelInvoker()).generate(
            user_id, source_text
        )

        record = store.generations[result.generation.id]
        assert record.user_id == user_id
        assert record.status == GenerationStatus.COMPLETED
        assert record.source_text_hash == content_fingerprint(source_text)
        assert record.source_text_length == 1000
        assert record.generation_duration >= 0
        assert store.error_logs == []

    @pytest.mark.asyncio
    async def test_payload_shape(self, user_id: str, source_text: str) -> None:
        """Test the caller-facing serialized payload."""
        result = await FlashcardGenerator(
            InMemoryGenerationStore(), MockModelInvoker()
        ).generate(user_id, source_text)

        payload = result.model_dump(mode="json")

        assert set(payload["generation"]) == {
            "id",
            "generated_count",
            "accepted_unedited_count",
            "accepted_edited_count",
            "created_at",
            "updated_at",
            "model",
        }
        assert payload["flashcards"][0]["source"] == "ai-full"
        assert payload["flashcards"][0]["user_id"] == user_id

    @pytest.mark.asyncio
    async def test_generate_flashcards_helper(self, user_id: str, source_text: str) -> None:
        """Test the settings-driven helper."""
        result = await generate_flashcards(
            InMemoryGenerationStore(),
            Settings(use_ai_mock=True),
            user_id,
            source_text,
        )

        assert result.generation.model == MOCK_MODEL_NAME


class TestLiveScenarios:
    """Scenarios against a fake provider."""

    @pytest.mark.asyncio
    async def test_http_401(
        self, live_invoker, user_id: str, source_text: str
    ) -> None:
        """Test that a provider 401 is logged once and re-raised."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(401, text="Invalid key")

        store = RecordingStore()
        generator = FlashcardGenerator(store, live_invoker(handler))

        with pytest.raises(ModelHTTPError) as exc_info:
            await generator.generate(user_id, source_text)

        assert "401" in str(exc_info.value)
        assert "Invalid key" in str(exc_info.value)

        assert len(store.log_attempts) == 1
        entry = store.log_attempts[0]
        assert entry.error_code == "ModelHTTPError"
        assert entry.error_message == str(exc_info.value)
        assert entry.source_text_length == len(source_text)
        assert entry.source_text_hash == content_fingerprint(source_text)
        assert entry.model == "unknown"
        assert entry.user_id == user_id

    @pytest.mark.asyncio
    async def test_fenced_content(
        self, live_invoker, user_id: str, source_text: str
    ) -> None:
        """Test that prose-wrapped fenced JSON yields one proposal."""

        def handler(request: httpx.Request) -> httpx.Response:
            content = 'Sure! ```json\n[{"front":"Q","back":"A"}]\n```'
            return httpx.Response(
                200, json={"model": "m", "choices": [{"message": {"content": content}}]}
            )

        result = await FlashcardGenerator(
            InMemoryGenerationStore(), live_invoker(handler)
        ).generate(user_id, source_text)

        assert [(c.front, c.back, c.source) for c in result.flashcards] == [
            ("Q", "A", FlashcardSource.AI_FULL)
        ]
        assert result.generation.generated_count == 1
        assert result.generation.model == "m"

    @pytest.mark.asyncio
    async def test_empty_choices(
        self, live_invoker, user_id: str, source_text: str
    ) -> None:
        """Test that a completion without choices is logged and re-raised."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"model": "m", "choices": []})

        store = RecordingStore()

        with pytest.raises(EmptyModelResponseError, match="Brak zawartości"):
            await FlashcardGenerator(store, live_invoker(handler)).generate(
                user_id, source_text
            )

        assert len(store.log_attempts) == 1
        assert store.log_attempts[0].error_code == "EmptyModelResponseError"

    @pytest.mark.asyncio
    async def test_missing_credential_not_logged(
        self, live_invoker, user_id: str, source_text: str
    ) -> None:
        """Test that a missing key fails before the network and the error log."""
        calls = 0

        def handler(request: httpx.Request) -> httpx.Response:
            nonlocal calls
            calls += 1
            return httpx.Response(200, json={})

        invoker = live_invoker(handler, api_key=None)
        store = RecordingStore()

        with pytest.raises(MissingCredentialError):
            await FlashcardGenerator(store, invoker).generate(user_id, source_text)

        assert calls == 0
        assert store.update_calls == 0
        assert store.log_attempts == []

    @pytest.mark.asyncio
    async def test_prompt_language_follows_text(self, live_invoker, user_id: str) -> None:
        """Test that a Polish text gets the Polish prompt."""

        def handler(request: httpx.Request) -> httpx.Response:
            system = json.loads(request.content)["messages"][0]["content"]
            assert "w języku POLSKIM" in system
            return httpx.Response(
                200,
                json={"choices": [{"message": {"content": '[{"front":"P","back":"O"}]'}}]},
            )

        text = "Komórka jest podstawową jednostką życia. " * 30
        result = await FlashcardGenerator(
            InMemoryGenerationStore(), live_invoker(handler)
        ).generate(user_id, text)

        assert result.flashcards[0].front == "P"


class TestLanguageSelection:
    """Tests for the prompt language chosen by the generator."""

    @pytest.mark.asyncio
    async def test_override_used(self, user_id: str, source_text: str) -> None:
        """Test that an explicit language beats detection."""
        invoker = ScriptedInvoker('[{"front": "Q", "back": "A"}]')

        await FlashcardGenerator(InMemoryGenerationStore(), invoker).generate(
            user_id, source_text, Language.POLISH
        )

        assert "w języku POLSKIM" in invoker.prompts[0]

    @pytest.mark.asyncio
    async def test_detection_used(self, user_id: str, source_text: str) -> None:
        """Test that detection picks English for English text."""
        invoker = ScriptedInvoker('[{"front": "Q", "back": "A"}]')

        await FlashcardGenerator(InMemoryGenerationStore(), invoker).generate(
            user_id, source_text
        )

        assert "must be in ENGLISH" in invoker.prompts[0]


class TestFailureHandling:
    """Tests for error logging and persistence failures."""

    @pytest.mark.asyncio
    async def test_parse_failure_logged_with_model(self, user_id: str, source_text: str) -> None:
        """Test that a parse failure records the model that answered."""
        store = RecordingStore()

        with pytest.raises(NoJsonFoundError):
            await FlashcardGenerator(store, ScriptedInvoker("no json here")).generate(
                user_id, source_text
            )

        assert len(store.log_attempts) == 1
        assert store.log_attempts[0].model == "scripted-model"
        assert store.log_attempts[0].error_code == "NoJsonFoundError"

    @pytest.mark.asyncio
    async def test_failed_record_left_pending(self, user_id: str, source_text: str) -> None:
        """Test that a failed attempt never updates its record."""
        store = RecordingStore()

        with pytest.raises(NoJsonFoundError):
            await FlashcardGenerator(store, ScriptedInvoker("nothing")).generate(
                user_id, source_text
            )

        assert store.update_calls == 0
        (record,) = store.generations.values()
        assert record.status == GenerationStatus.PENDING
        assert record.generated_count == 0
        assert record.model == ""

    @pytest.mark.asyncio
    async def test_log_write_failure_does_not_mask(self, user_id: str, source_text: str) -> None:
        """Test that the original error survives a failing log write."""
        store = RecordingStore(log_error=RuntimeError("log table unavailable"))

        with pytest.raises(NoJsonFoundError):
            await FlashcardGenerator(store, ScriptedInvoker("nothing")).generate(
                user_id, source_text
            )

        assert len(store.log_attempts) == 1

    @pytest.mark.asyncio
    async def test_session_expired_on_insert(self, user_id: str, source_text: str) -> None:
        """Test that an expired session on insert asks for re-authentication."""
        store = RecordingStore(
            insert_error=PersistenceError("JWT expired", code=SESSION_EXPIRED_CODE)
        )
        invoker = ScriptedInvoker("[]")

        with pytest.raises(SessionExpiredError, match="log in again"):
            await FlashcardGenerator(store, invoker).generate(user_id, source_text)

        assert invoker.prompts == []
        assert store.log_attempts == []

    @pytest.mark.asyncio
    async def test_generic_insert_failure(self, user_id: str, source_text: str) -> None:
        """Test that other insert failures abort without an error log."""
        store = RecordingStore(insert_error=PersistenceError("connection reset"))
        invoker = ScriptedInvoker("[]")

        with pytest.raises(GenerationRecordError, match="create generation record"):
            await FlashcardGenerator(store, invoker).generate(user_id, source_text)

        assert invoker.prompts == []
        assert store.log_attempts == []

    @pytest.mark.asyncio
    async def test_session_expired_on_update(self, user_id: str, source_text: str) -> None:
        """Test that an expired session on update is not logged as a failure."""
        store = RecordingStore(update_error=PersistenceError("JWT expired"))

        with pytest.raises(SessionExpiredError):
            await FlashcardGenerator(
                store, ScriptedInvoker('[{"front": "Q", "back": "A"}]')
            ).generate(user_id, source_text)

        assert store.log_attempts == []

    @pytest.mark.asyncio
    async def test_generic_update_failure_logged(self, user_id: str, source_text: str) -> None:
        """Test that other update failures are logged and re-raised."""
        store = RecordingStore(update_error=PersistenceError("disk full"))

        with pytest.raises(GenerationRecordError, match="update generation record"):
            await FlashcardGenerator(
                store, ScriptedInvoker('[{"front": "Q", "back": "A"}]')
            ).generate(user_id, source_text)

        assert len(store.log_attempts) == 1
        assert store.log_attempts[0].error_code == "GenerationRecordError"
        assert store.log_attempts[0].model == "scripted-model"

    @pytest.mark.asyncio
    async def test_identical_texts_create_independent_records(
        self, user_id: str, source_text: str
    ) -> None:
        """Test that the fingerprint does not deduplicate generations."""
        store = InMemoryGenerationStore()
        generator = FlashcardGenerator(store, MockModelInvoker())

        first = await generator.generate(user_id, source_text)
        second = await generator.generate(user_id, source_text)

        assert first.generation.id != second.generation.id
        hashes = {record.source_text_hash for record in store.generations.values()}
        assert hashes == {content_fingerprint(source_text)}

    @pytest.mark.asyncio
    async def test_zero_valid_cards_completes(self, user_id: str, source_text: str) -> None:
        """Test that an array of invalid entries completes with zero cards."""
        store = InMemoryGenerationStore()

        result = await FlashcardGenerator(
            store, ScriptedInvoker('[{"question": "Q"}]')
        ).generate(user_id, source_text)

        assert result.flashcards == []
        assert result.generation.generated_count == 0
        assert store.generations[result.generation.id].status == GenerationStatus.COMPLETED
