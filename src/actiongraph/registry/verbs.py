"""Verb registry: seed catalog + store-backed dynamic registration."""

from __future__ import annotations

import logging
import re
from typing import Any, Iterable, Optional

from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError
from ..models import VerbDefinition
from ..store.base import BaseTripleStore
from .cache import SnapshotCache
from .catalog import SEED_VERBS

logger = logging.getLogger(__name__)

_VOWELS = frozenset("aeiou")
_NO_DOUBLE = frozenset("wxy")
_GERUND_RE = re.compile(r"^[a-z]+(?:_[a-z]+)*$")
# Stress-final verbs that double despite having more than one syllable.
_STRESS_FINAL = frozenset(
    {
        "admit", "begin", "commit", "control", "debug", "forget", "occur", "omit",
        "patrol", "permit", "prefer", "refer", "regret", "submit", "transfer",
    }
)


def _is_short_cvc(word: str) -> bool:
    """Single-syllable consonant-vowel-consonant ending (run, stop, ship)."""
    if len(word) < 3:
        return False
    c1, v, c2 = word[-3], word[-2], word[-1]
    if c1 in _VOWELS or v not in _VOWELS or c2 in _VOWELS or c2 in _NO_DOUBLE:
        return False
    vowel_groups = len(re.findall(r"[aeiou]+", word))
    return vowel_groups == 1


def _gerund_word(word: str) -> str:
    if word.endswith("ie"):
        return word[:-2] + "ying"
    if word.endswith(("ee", "ye", "oe")):
        return word + "ing"
    if word.endswith("e") and len(word) > 2:
        return word[:-1] + "ing"
    if word in _STRESS_FINAL or _is_short_cvc(word):
        return word + word[-1] + "ing"
    return word + "ing"


def to_gerund(base_form: str) -> str:
    """Best-effort English gerund for a base verb form.

    Heuristic, not a dictionary: ``die`` → ``dying``, ``code`` → ``coding``,
    ``run`` → ``running``, ``read`` → ``reading``. Consonant doubling is
    applied to one-syllable words and a short list of stress-final ones
    (``debug`` gives ``debugging``); other irregulars are not handled.
    Multi-word forms inflect the last word and join with ``_``:
    ``"cycle count"`` → ``"cycle_counting"``.
    """
    words = re.split(r"[\s_]+", base_form.strip().lower())
    words = [w for w in words if w]
    if not words:
        raise ValueError("base_form must not be empty")
    words[-1] = _gerund_word(words[-1])
    return "_".join(words)


def _validate_verb(definition: VerbDefinition | dict[str, Any]) -> VerbDefinition:
    try:
        verb = VerbDefinition.model_validate(definition)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid verb definition: {e.error_count()} error(s)", errors=e.errors()) from e
    if not _GERUND_RE.match(verb.gerund) or not any(w.endswith("ing") for w in verb.gerund.split("_")):
        raise ValidationError(
            f"Verb gerund must be lowercase snake_case with an -ing word, got {verb.gerund!r}",
            gerund=verb.gerund,
        )
    if verb.required_role is not None and not all(verb.required_role):
        raise ValidationError("required_role entries must be non-empty", gerund=verb.gerund)
    return verb


class VerbRegistry:
    """Catalog of permissible actions keyed by gerund.

    Resolution order: in-memory cache (seeded at construction), then the
    store. Store hits are cached for the registry's lifetime.

    Args:
        store: Optional persistence collaborator. Without it the registry
            serves the seed catalog plus in-process registrations only.
        seed: Definitions to preload; defaults to :data:`SEED_VERBS`.
    """

    def __init__(
        self,
        store: Optional[BaseTripleStore] = None,
        seed: Optional[Iterable[VerbDefinition]] = None,
    ) -> None:
        self._store = store
        verbs = SEED_VERBS if seed is None else tuple(seed)
        self._cache: SnapshotCache[VerbDefinition] = SnapshotCache((v.gerund, v) for v in verbs)

    async def resolve(self, gerund: str) -> Optional[VerbDefinition]:
        """Return the verb definition, or None if unknown.

        Raises:
            StoreUnavailableError: the store failed on a cache miss.
        """
        verb = self._cache.get(gerund)
        if verb is not None:
            return verb
        if self._store is None:
            return None
        verb = await self._store.lookup_verb(gerund)
        if verb is None:
            return None
        self._cache.put(verb.gerund, verb)
        logger.debug("Cached verb %s from store", verb.gerund)
        return verb

    async def list(self, category: Optional[str] = None) -> list[VerbDefinition]:
        """All known verbs (cache ∪ store), optionally filtered by category."""
        merged = dict(self._cache.snapshot())
        if self._store is not None:
            for verb in await self._store.list_verbs():
                merged.setdefault(verb.gerund, verb)
        verbs = merged.values()
        if category is not None:
            verbs = [v for v in verbs if v.category == category]
        return sorted(verbs, key=lambda v: v.gerund)

    async def register(self, definition: VerbDefinition | dict[str, Any]) -> VerbDefinition:
        """Validate, persist, then cache a verb definition.

        The store write happens first; if it fails the error propagates
        and the cache is left untouched.

        Raises:
            ValidationError: malformed definition (nothing is written).
            StoreUnavailableError: persistence failed.
        """
        verb = _validate_verb(definition)
        if self._store is not None:
            await self._store.upsert_verb(verb)
        self._cache.put(verb.gerund, verb)
        logger.info("Registered verb %s (danger=%s)", verb.gerund, verb.danger_level.value)
        return verb


__all__ = ["VerbRegistry", "to_gerund"]
