"""
Sync pipeline components for crawling, enrichment and ingestion.

Modules:
    base: Abstract base class for source crawlers
    runner: SyncOrchestrator, runs the roster and hands results to the batcher
    scheduler: APScheduler integration for periodic sync runs

Subpackages:
    extractors: Crawlers, the crawler roster and the HTML field scraper
    transformers: Media classification, selector profiles and enrichment
    loaders: Document store and the atomic ingestion batcher

Architecture:
    A sync run has three phases:

    1. Crawl - every enabled crawler runs concurrently; any failure aborts
    2. Enrich - new posts get their media embed (and date) from their page
    3. Ingest - artists, works, media and posts are written in one commit
       together with the new checkpoint

Usage:
    from ingestion.extractors.registry import build_roster
    from ingestion.transformers.enricher import MetadataEnricher
    from ingestion.runner import SyncOrchestrator

Example:
    async with async_session_maker() as session:
        orchestrator = SyncOrchestrator(
            session,
            crawlers=build_roster(),
            enricher=MetadataEnricher()
        )
        result = await orchestrator.run()

    print(f"Ingested {result['posts_ingested']} posts")

Error Handling:
    All components raise exceptions from core.exceptions. Nothing is retried
    internally; a failed run is retried by running it again.
"""

__all__ = [
    "Crawler",
    "SyncOrchestrator",
    "SyncScheduler",
    "RSSCrawler",
    "HTMLScraper",
    "MediaClassifier",
    "MetadataEnricher",
    "DocumentStore",
    "IngestionBatcher",
]
