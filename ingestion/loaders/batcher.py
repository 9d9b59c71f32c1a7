"""
Incremental, atomic ingestion of crawled posts into the document store.

For every post that survives the checkpoint cutoff the batcher stages:

    artists/<owner>                    name (merge)
    artists/<owner>/<albums|tracks>/<work>    name (merge)
    artists/<other>                    name, featured ∪ {work} (merge)
    media/<id>                         type, externalId, url (insert-if-absent)
    posts/<auto-id>                    post body with references

plus the new checkpoint, and commits everything in one transaction.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence
from core.config import settings
from core.exceptions import CheckpointError, EnrichmentError
from core.ids import create_id
from ingestion.loaders.document_store import (
    ArrayUnion,
    DocumentRef,
    DocumentStore,
    WriteBatch,
)
from ingestion.transformers.enricher import MetadataEnricher
from schemas.post import Post
import logging

logger = logging.getLogger(__name__)

CHECKPOINT_PATH = "settings/timestamps"
CHECKPOINT_FIELD = "lastScrape"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_checkpoint(value: Any) -> Optional[datetime]:
    """Parse a stored checkpoint (ISO string or epoch milliseconds)."""
    if value is None or value == "":
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    parsed = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class IngestionBatcher:
    """
    Build and commit the write-set for one sync run.

    Ensures:
    - Posts older than the last successful run are never re-ingested
    - Artists, works and media are keyed deterministically (no duplicates)
    - Featured references are set-unions, never appends
    - Either the whole write-set and the new checkpoint land, or nothing does
    """

    def __init__(
        self,
        store: DocumentStore,
        enricher: Optional[MetadataEnricher] = None,
        clock: Callable[[], datetime] = _utcnow,
        max_concurrent_enrichments: Optional[int] = None,
        abort_on_enrichment_error: Optional[bool] = None
    ):
        self.store = store
        self.enricher = enricher
        self.clock = clock
        self.max_concurrent_enrichments = (
            max_concurrent_enrichments or settings.MAX_CONCURRENT_ENRICHMENTS
        )
        self.abort_on_enrichment_error = (
            settings.ABORT_ON_ENRICHMENT_ERROR
            if abort_on_enrichment_error is None
            else abort_on_enrichment_error
        )

    @property
    def checkpoint_ref(self) -> DocumentRef:
        return self.store.document(CHECKPOINT_PATH)

    async def read_checkpoint(self) -> Optional[datetime]:
        """
        Return the last successful run time, or None.

        Read failures are logged and treated as "no checkpoint", which makes
        the run a full resync instead of aborting it.
        """
        try:
            doc = await self.store.get(self.checkpoint_ref)
            if not doc:
                return None
            try:
                return parse_checkpoint(doc.get(CHECKPOINT_FIELD))
            except (ValueError, TypeError, OverflowError) as e:
                raise CheckpointError(
                    "Stored checkpoint is not a timestamp",
                    context={
                        "path": CHECKPOINT_PATH,
                        "checkpoint_value": doc.get(CHECKPOINT_FIELD)
                    },
                    original_exception=e
                )
        except Exception as e:
            logger.error(f"Error retrieving last scrape timestamp: {str(e)}")
            # a failed statement leaves the transaction unusable for the batch commit
            await self.store.db.rollback()
            return None

    @staticmethod
    def select_posts(
        results_by_source: Mapping[str, Sequence[Post]],
        checkpoint: Optional[datetime]
    ) -> List[Post]:
        """Flatten in roster order and drop undated posts or posts dated before the cutoff."""
        selected = []
        for posts in results_by_source.values():
            for post in posts:
                if checkpoint and (post.date is None or post.date < checkpoint):
                    continue
                selected.append(post)
        return selected

    async def enrich_posts(self, posts: Sequence[Post]) -> List[Dict[str, Any]]:
        """
        Enrich posts concurrently; each post's fetch and classification are
        finished before this returns.

        Returns:
            Error details for posts whose enrichment failed

        Raises:
            EnrichmentError: on the first failure when configured to abort
        """
        if self.enricher is None or not posts:
            return []

        semaphore = asyncio.Semaphore(self.max_concurrent_enrichments)

        async def enrich_one(post: Post) -> None:
            async with semaphore:
                await self.enricher.enrich(post)

        outcomes = await asyncio.gather(
            *(enrich_one(post) for post in posts),
            return_exceptions=True
        )

        error_details = []
        for post, outcome in zip(posts, outcomes):
            if not isinstance(outcome, Exception):
                continue

            if self.abort_on_enrichment_error:
                if isinstance(outcome, EnrichmentError):
                    raise outcome
                raise EnrichmentError(
                    "Enrichment failed",
                    context={"source": post.source.value, "url": post.url},
                    original_exception=outcome
                )

            error_detail = {
                "phase": "enrichment",
                "source": post.source.value,
                "url": post.url,
                "error_type": type(outcome).__name__,
                "error_message": str(outcome)
            }
            error_details.append(error_detail)
            logger.error(
                f"Enrichment failed for {post.url}, ingesting without it: {str(outcome)}",
                extra={"error_context": error_detail}
            )

        return error_details

    def stage_post(self, batch: WriteBatch, post: Post) -> DocumentRef:
        """Stage every write for one post and return its reference."""
        post_ref = self.store.collection("posts").document()
        artists = self.store.collection("artists")

        artist_refs = [artists.document(create_id(name)) for name in post.artists]

        # Pass 1: the first credited artist owns the work
        work_ref: Optional[DocumentRef] = None
        if artist_refs:
            owner_ref = artist_refs[0]
            batch.set(owner_ref, {"name": post.artists[0]}, merge=True)
            work_ref = owner_ref.collection(post.type.collection).document(create_id(post.title))
            batch.set(work_ref, {"name": post.title}, merge=True)

            # Pass 2: everyone else is featured on the owner's work
            for name, artist_ref in zip(post.artists[1:], artist_refs[1:]):
                data: Dict[str, Any] = {"name": name}
                if artist_ref != owner_ref:
                    data["featured"] = ArrayUnion(work_ref)
                batch.set(artist_ref, data, merge=True)

        media_ref: Optional[DocumentRef] = None
        if post.media is not None:
            media_ref = self.store.collection("media").document(post.media.id)
            batch.create(media_ref, post.media.to_document())

        body: Dict[str, Any] = {
            "source": post.source,
            "url": post.url,
            "title": post.title,
            "type": post.type,
            "date": post.date,
            "artists": artist_refs,
            post.type.value: work_ref,
        }
        if media_ref is not None:
            body["media"] = media_ref

        batch.set(post_ref, body)
        return post_ref

    async def submit(self, results_by_source: Mapping[str, Sequence[Post]]) -> Dict[str, Any]:
        """
        Ingest the new posts of one run.

        Args:
            results_by_source: Crawler name to crawled posts, in roster order

        Returns:
            Dictionary with run statistics

        Raises:
            CommitError: The write-set could not be committed; nothing was
                written and the checkpoint did not move
            EnrichmentError: Enrichment failed and the batcher is configured
                to abort
        """
        checkpoint = await self.read_checkpoint()
        posts_received = sum(len(posts) for posts in results_by_source.values())

        posts = self.select_posts(results_by_source, checkpoint)
        posts_skipped = posts_received - len(posts)

        logger.info(
            f"Submitting {len(posts)} of {posts_received} posts "
            f"(checkpoint: {checkpoint.isoformat() if checkpoint else 'none'})"
        )

        error_details = await self.enrich_posts(posts)

        batch = self.store.batch()
        for post in posts:
            self.stage_post(batch, post)

        new_checkpoint = self.clock()
        batch.set(self.checkpoint_ref, {CHECKPOINT_FIELD: new_checkpoint}, merge=True)

        await batch.commit()

        result = {
            "status": "success" if not error_details else "partial_success",
            "posts_received": posts_received,
            "posts_skipped": posts_skipped,
            "posts_ingested": len(posts),
            "enrichment_failures": len(error_details),
            "checkpoint_before": checkpoint.isoformat() if checkpoint else None,
            "checkpoint_after": new_checkpoint.isoformat(),
        }
        if error_details:
            result["error_details"] = error_details

        logger.info(
            f"Ingestion committed: {result['status']} - "
            f"Ingested: {len(posts)}, Skipped: {posts_skipped}, "
            f"Enrichment failures: {len(error_details)}"
        )
        return result
