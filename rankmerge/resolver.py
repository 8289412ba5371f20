"""
Ranked Result Resolver.

Responsibilities:
- Translate external keys of a ranked result into internal identifiers.
- Load the matching records with a single batched call.
- Re-assemble the records in rank order with score fields attached.

Non-Responsibilities:
- No storage or network access (translator and loader are injected).
- No re-sorting of the ranked result.
- No retry or wrapping of translator/loader failures.

Invariant:
Output order is the input order minus entries that could not be resolved.
"""

from typing import Any, Callable, Dict, Hashable, Iterable, List, Mapping, Optional

from .env import ResolverSettings
from .logger import StructuredLogger, get_logger
from .records import RecordShapeError, shape_of

KeyResolver = Callable[[str], Hashable]
ModelResolver = Callable[[List[Hashable]], Iterable[Any]]
ScoreProjection = Callable[[Any], Dict[str, Any]]


class KeyMapping:
    """
    External key <-> internal identifier cache for a single resolve call.

    The reverse direction keeps the last external key written for an
    identifier; collisions are counted, not rejected.
    """

    def __init__(self):
        self._internal: Dict[str, Hashable] = {}
        self._external: Dict[Hashable, str] = {}
        self.collisions: List[Hashable] = []

    def add(self, external_key: str, internal_id: Hashable) -> None:
        if internal_id is None:
            return
        previous = self._external.get(internal_id)
        if previous is not None and previous != external_key:
            self.collisions.append(internal_id)
        self._external[internal_id] = external_key
        self._internal[external_key] = internal_id

    def internal_id(self, external_key: str) -> Optional[Hashable]:
        return self._internal.get(external_key)

    def external_key(self, internal_id: Hashable) -> Optional[str]:
        return self._external.get(internal_id)

    def internal_ids(self) -> List[Hashable]:
        """Distinct internal identifiers in first-seen order."""
        return list(dict.fromkeys(self._internal.values()))

    def __len__(self) -> int:
        return len(self._internal)


class Resolver:
    """
    Resolves a ranked key -> score mapping into score-annotated records.

    Args:
        resolve_key: Translates one external key to an internal identifier
        resolve_models: Loads records for a list of internal identifiers
        model_key: Identifier field on loaded records
        score_field: Field the score is written to
        resolve_score_fields: Optional projection from score to merged fields
        logger: StructuredLogger (default: the global logger)

    Example:
        resolver = Resolver(prefixed_key("job:", int), orm_loader(session, Job))
        jobs = resolver.resolve(ranked_result(redis.zrevrange("trending", 0, 9, withscores=True)))
    """

    def __init__(
        self,
        resolve_key: KeyResolver,
        resolve_models: ModelResolver,
        model_key: str = "id",
        score_field: str = "score",
        resolve_score_fields: Optional[ScoreProjection] = None,
        logger: Optional[StructuredLogger] = None,
    ):
        self._resolve_key = resolve_key
        self._resolve_models = resolve_models
        self.model_key = model_key
        self.score_field = score_field
        self._projection = resolve_score_fields
        self.logger = logger or get_logger()

    @classmethod
    def from_settings(
        cls,
        settings: ResolverSettings,
        resolve_key: KeyResolver,
        resolve_models: ModelResolver,
        **kwargs,
    ) -> "Resolver":
        """Build a resolver whose field names and log level come from ResolverSettings."""
        if kwargs.get("logger") is None:
            kwargs["logger"] = get_logger(level=settings.log_level)
            # The global logger may predate these settings
            kwargs["logger"].set_level(settings.log_level)
        return cls(
            resolve_key,
            resolve_models,
            model_key=settings.model_key,
            score_field=settings.score_field,
            **kwargs,
        )

    def resolve_score_fields(self, score: Any) -> Dict[str, Any]:
        """Fields merged into a record for its score. Override to derive more."""
        if self._projection is not None:
            return self._projection(score)
        return {self.score_field: score}

    def resolve(self, ranked: Mapping[str, Any]) -> List[Any]:
        """
        Resolve a ranked result to records in rank order.

        Args:
            ranked: Ordered mapping of external key -> score

        Returns:
            Records with score fields attached; all objects or all dicts
        """
        if not ranked:
            return []

        self.logger.record_resolve(len(ranked))
        keys = self._map_keys(ranked)
        ids = keys.internal_ids()

        models = list(self._resolve_models(ids))
        self.logger.record_records_loaded(len(models))
        self.logger.debug("Loaded records", requested=len(ids), loaded=len(models))
        shape = shape_of(models[0]) if models else None
        keyed = self._key_models(models, shape) if models else {}

        merged = []
        for external_key, score in ranked.items():
            internal_id = keys.internal_id(external_key)
            if internal_id is None:
                self.logger.record_drop("unresolved_key")
                self.logger.debug("Dropped unresolved key", key=external_key)
                continue

            record = keyed.get(internal_id)
            if record is None:
                self.logger.record_drop("missing_record")
                self.logger.debug("Dropped key with no record", key=external_key, id=internal_id)
                continue

            merged.append(shape.attach(record, self.resolve_score_fields(score)))

        self.logger.record_resolved(len(merged))
        return merged

    def _map_keys(self, ranked: Mapping[str, Any]) -> KeyMapping:
        keys = KeyMapping()
        for external_key in ranked:
            keys.add(external_key, self._resolve_key(external_key))

        for internal_id in keys.collisions:
            self.logger.record_key_collision()
            self.logger.warning(
                "Several ranked keys resolve to one identifier",
                id=internal_id,
                kept=keys.external_key(internal_id),
            )
        return keys

    def _key_models(self, models: List[Any], shape) -> Dict[Hashable, Any]:
        """Key records by the model key field; later duplicates win."""
        keyed = {}
        for model in models:
            try:
                shape.check(model)
            except RecordShapeError:
                self.logger.record_shape_error()
                raise

            identifier = shape.identifier(model, self.model_key)
            if identifier is None:
                self.logger.debug("Skipping record without identifier", field=self.model_key)
                continue
            keyed[identifier] = model
        return keyed
