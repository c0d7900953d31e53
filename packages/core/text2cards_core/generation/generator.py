"""Flashcard generation workflow.

``FlashcardGenerator.generate`` owns one generation attempt end to end:

1. fingerprint the source text
2. insert a pending generation record
3. detect the language, build the prompt, call the model and parse the reply
4. update the record with model, count and duration
5. return the record and the proposals

Failures from step 3 onward are written to the generation error log
(best-effort) and re-raised unchanged. An expired persistence session is
reported as ``SessionExpiredError`` and is not logged; neither is a missing
provider credential.
"""

import time

from text2cards_core.errors import (
    GenerationRecordError,
    MissingCredentialError,
    SessionExpiredError,
    error_code_for,
    error_message_for,
)
from text2cards_core.generation.language import detect_language
from text2cards_core.generation.parser import extract_proposals
from text2cards_core.generation.prompts import FLASHCARD_COUNT, build_system_prompt
from text2cards_core.model_adapters.base import BaseModelInvoker
from text2cards_core.persistence.base import GenerationStore, is_session_expired
from text2cards_core.schemas.flashcards import FlashcardProposal
from text2cards_core.schemas.generations import (
    UNKNOWN_MODEL,
    BasicGeneration,
    GenerationCreate,
    GenerationErrorLogCreate,
    GenerationRecord,
    GenerationResult,
    GenerationUpdate,
)
from text2cards_core.schemas.language import (
    DEFAULT_LANGUAGE,
    Language,
    parse_language,
)
from text2cards_core.settings import Settings
from text2cards_core.utils.hashing import content_fingerprint
from text2cards_core.utils.logging import get_logger

logger = get_logger(__name__)


def resolve_language(text: str, override: str | Language | None = None) -> Language:
    """Pick the prompt language from an override or the text itself."""
    if override is None or (isinstance(override, str) and not override.strip()):
        return detect_language(text)
    language = parse_language(override)
    if language is None:
        logger.warning(
            f"Unsupported language override {override!r}, using {DEFAULT_LANGUAGE.value}"
        )
        return DEFAULT_LANGUAGE
    return language


class FlashcardGenerator:
    """Runs flashcard generation attempts against a store and a model."""

    def __init__(self, store: GenerationStore, invoker: BaseModelInvoker):
        """Initialize the generator.

        Args:
            store: Persistence collaborator for records and error logs
            invoker: Model invoker (live or mock)
        """
        self.store = store
        self.invoker = invoker

    async def generate(
        self,
        user_id: str,
        source_text: str,
        language: str | Language | None = None,
    ) -> GenerationResult:
        """Generate flashcard proposals for a source text.

        The caller is expected to have validated the text length.

        Args:
            user_id: Owner of the generation
            source_text: Text to build flashcards from
            language: Optional language override ("pl" or "en")

        Returns:
            Updated generation record and proposals tagged with the user

        Raises:
            SessionExpiredError: If the store reports an expired credential
            GenerationRecordError: If the record cannot be written
            GenerationError: For invocation and parse failures
        """
        fingerprint = content_fingerprint(source_text)
        generation = await self._create_record(user_id, source_text, fingerprint)
        logger.info(
            f"Generation {generation.id} started for user {user_id} "
            f"({len(source_text)} chars, hash={fingerprint})"
        )

        started = time.monotonic()
        model = UNKNOWN_MODEL
        try:
            prompt_language = resolve_language(source_text, language)
            logger.debug(f"Using prompt language: {prompt_language.value}")
            prompt = build_system_prompt(prompt_language)

            output = await self.invoker.invoke(prompt, source_text)
            model = output.model
            proposals = extract_proposals(output.content)
            if len(proposals) != FLASHCARD_COUNT:
                logger.warning(
                    f"Generation {generation.id} produced {len(proposals)} "
                    f"flashcards, expected {FLASHCARD_COUNT}"
                )

            duration_ms = int((time.monotonic() - started) * 1000)
            updated = await self._complete_record(
                generation.id, model, len(proposals), duration_ms
            )
        except (SessionExpiredError, MissingCredentialError):
            raise
        except Exception as e:
            logger.error(
                f"Generation {generation.id} failed: {type(e).__name__}: {e}"
            )
            await self._log_failure(user_id, source_text, fingerprint, model, e)
            raise

        logger.info(
            f"Generation {generation.id} completed: {len(proposals)} flashcards "
            f"from {model} in {duration_ms}ms"
        )
        return GenerationResult(
            generation=BasicGeneration.model_validate(updated.model_dump()),
            flashcards=[_owned_by(proposal, user_id) for proposal in proposals],
        )

    async def _create_record(
        self,
        user_id: str,
        source_text: str,
        fingerprint: str,
    ) -> GenerationRecord:
        try:
            return await self.store.insert(
                GenerationCreate(
                    user_id=user_id,
                    source_text_hash=fingerprint,
                    source_text_length=len(source_text),
                )
            )
        except Exception as e:
            if is_session_expired(e):
                logger.warning("Session expired while creating generation record")
                raise SessionExpiredError() from e
            logger.error(f"Error creating generation record: {e}")
            raise GenerationRecordError("Failed to create generation record") from e

    async def _complete_record(
        self,
        generation_id: int,
        model: str,
        generated_count: int,
        duration_ms: int,
    ) -> GenerationRecord:
        try:
            return await self.store.update(
                generation_id,
                GenerationUpdate(
                    model=model,
                    generated_count=generated_count,
                    generation_duration=duration_ms,
                ),
            )
        except Exception as e:
            if is_session_expired(e):
                logger.warning("Session expired while updating generation record")
                raise SessionExpiredError() from e
            logger.error(f"Error updating generation record: {e}")
            raise GenerationRecordError("Failed to update generation record") from e

    async def _log_failure(
        self,
        user_id: str,
        source_text: str,
        fingerprint: str,
        model: str,
        error: Exception,
    ) -> None:
        """Write a generation error log entry without masking ``error``."""
        entry = GenerationErrorLogCreate(
            user_id=user_id,
            model=model or UNKNOWN_MODEL,
            error_code=error_code_for(error),
            error_message=error_message_for(error),
            source_text_hash=fingerprint,
            source_text_length=len(source_text),
        )
        try:
            await self.store.insert_error_log(entry)
        except Exception:
            logger.exception("Failed to write generation error log")


def _owned_by(proposal: FlashcardProposal, user_id: str) -> FlashcardProposal:
    return proposal.model_copy(update={"user_id": user_id})


async def generate_flashcards(
    store: GenerationStore,
    settings: Settings,
    user_id: str,
    source_text: str,
    language: str | None = None,
) -> GenerationResult:
    """Run one generation with an invoker built from settings."""
    from text2cards_core.model_adapters import create_invoker

    invoker = create_invoker(settings)
    try:
        return await FlashcardGenerator(store, invoker).generate(
            user_id, source_text, language
        )
    finally:
        await invoker.aclose()
