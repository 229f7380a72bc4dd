"""Adaptive semantic chunking.

Groups a document's sentences into contiguous chunks, placing boundaries
where the similarity between neighbouring sentences drops below a cutoff
derived from the document's own similarity distribution.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait

from ...common.cancellation import CancellationToken
from ...common.exception_handler import log_exception
from ..domain import ChunkDraft, ChunkerConfig, ChunkMetadata, DocumentMetadata, SemanticChunk
from ..domain.exceptions import (
    EmbeddingGenerationError,
    EmptyDocumentError,
    OperationCancelledError,
    SemSearchError,
)
from ..ports.embedding_port import EmbeddingPort
from .similarity import mean_similarity, pairwise_similarities, percentile
from .splitter import SentenceSplitter

logger = logging.getLogger(__name__)

KeywordExtractor = Callable[[str], Sequence[str]]


class SemanticChunker:
    """Splits documents into semantically coherent chunks.

    Example:
        chunker = SemanticChunker(ChunkerConfig.technical_docs(), provider)
        chunks = chunker.chunk_document(text, DocumentMetadata(source_file="guide.md"))
    """

    def __init__(
        self,
        config: ChunkerConfig,
        embedding_provider: EmbeddingPort,
        splitter: SentenceSplitter | None = None,
        keyword_extractor: KeywordExtractor | None = None,
    ) -> None:
        """Initialize the chunker.

        Args:
            config: Chunking parameters, validated here.
            embedding_provider: Source of sentence embeddings.
            splitter: Sentence splitter; built from the config when omitted.
            keyword_extractor: Optional callable returning keywords for a
                chunk's content. Without it chunks carry the document keywords.

        Raises:
            InvalidConfigurationError: If the config is invalid.
        """
        config.validate()
        self.config = config
        self.embedding_provider = embedding_provider
        self.splitter = splitter or SentenceSplitter(min_sentence_length=config.min_sentence_length)
        self.keyword_extractor = keyword_extractor

    def chunk_document(
        self,
        text: str | bytes,
        metadata: DocumentMetadata | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> list[SemanticChunk]:
        """Chunk a document.

        Args:
            text: Document text.
            metadata: Document metadata copied onto every chunk.
            cancel_token: Checked between embedding batches.

        Returns:
            Chunks in document order. Their sentence ranges partition the
            retained sentences.

        Raises:
            EmptyDocumentError: If no sentence survives splitting.
            EmbeddingGenerationError: If any embedding batch fails.
            SentenceSplittingError: If the text cannot be decoded.
            OperationCancelledError: If cancelled before completion.
        """
        metadata = metadata or DocumentMetadata()
        sentences = [s.text for s in self.splitter.split_sentences(text)]
        if not sentences:
            raise EmptyDocumentError(
                "Document contains no valid sentences",
                context={"source_file": metadata.source_file},
            )

        if len(sentences) == 1:
            logger.debug(f"Single sentence document '{metadata.source_file}'")
            draft = ChunkDraft(start_sentence=0, end_sentence=0, sentences=list(sentences))
            return self._materialize([draft], metadata)

        try:
            embeddings = self._embed_sentences(sentences, cancel_token)
        except SemSearchError as e:
            if not isinstance(e, OperationCancelledError):
                log_exception(e, logger, extra_context={"source_file": metadata.source_file})
            raise

        similarities = pairwise_similarities(embeddings)
        cutoff = self.boundary_cutoff(similarities)
        drafts = self._segment(sentences, similarities, cutoff)
        chunks = self._materialize(drafts, metadata)
        logger.info(
            f"Chunked '{metadata.source_file}': {len(sentences)} sentences -> "
            f"{len(chunks)} chunks (cutoff {cutoff:.3f})"
        )
        return chunks

    def boundary_cutoff(self, similarities: Sequence[float]) -> float:
        """Similarity below which a sentence gap may become a boundary.

        The adaptive percentile of the document's similarities is capped by
        ``1 - similarity_threshold``, so a higher threshold never yields more
        boundaries.
        """
        fixed = 1.0 - self.config.similarity_threshold
        if not similarities:
            return fixed
        adaptive = percentile(similarities, self.config.similarity_percentile)
        return min(fixed, adaptive)

    def _embed_sentences(
        self,
        sentences: list[str],
        cancel_token: CancellationToken | None,
    ) -> list[list[float]]:
        """Embed sentences batch by batch, reassembled in sentence order."""
        size = self.config.embedding_batch_size
        batches = [sentences[i : i + size] for i in range(0, len(sentences), size)]
        if cancel_token:
            cancel_token.raise_if_cancelled("chunking")

        workers = min(self.config.max_concurrent_batches, len(batches))
        logger.debug(
            f"Embedding {len(sentences)} sentences in {len(batches)} batch(es), "
            f"{workers} concurrent"
        )
        results: list[list[list[float]] | None] = [None] * len(batches)
        executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="semsearch-embed")
        finished = False
        try:
            futures: dict[Future[list[list[float]]], int] = {
                executor.submit(self._embed_batch, index, batch, cancel_token): index
                for index, batch in enumerate(batches)
            }
            pending = set(futures)
            while pending:
                done, pending = wait(pending, return_when=FIRST_COMPLETED)
                failed = [f for f in done if f.exception() is not None]
                if failed:
                    # Report the earliest failing batch when several fail together
                    first = min(failed, key=lambda f: futures[f])
                    raise first.exception()  # type: ignore[misc]
                for future in done:
                    results[futures[future]] = future.result()
                if cancel_token and pending:
                    cancel_token.raise_if_cancelled("chunking")
            finished = True
        finally:
            # On failure, queued batches are dropped and running ones are not awaited
            executor.shutdown(wait=finished, cancel_futures=not finished)

        embeddings = [vector for batch in results if batch is not None for vector in batch]
        if len(embeddings) != len(sentences):
            raise EmbeddingGenerationError(
                "Embedding count does not match sentence count",
                context={"expected": len(sentences), "actual": len(embeddings)},
            )
        return embeddings

    def _embed_batch(
        self,
        batch_index: int,
        batch: list[str],
        cancel_token: CancellationToken | None,
    ) -> list[list[float]]:
        if cancel_token:
            cancel_token.raise_if_cancelled("chunking")
        try:
            vectors = self.embedding_provider.embed_batch(batch)
        except Exception as e:
            raise EmbeddingGenerationError(
                f"Embedding batch {batch_index} failed: {e}",
                cause=e,
                context={"batch_index": batch_index, "batch_size": len(batch)},
            ) from e

        if len(vectors) != len(batch):
            raise EmbeddingGenerationError(
                f"Embedding batch {batch_index} returned {len(vectors)} vectors "
                f"for {len(batch)} sentences",
                context={"batch_index": batch_index, "expected": len(batch), "actual": len(vectors)},
            )
        if any(len(vector) == 0 for vector in vectors):
            raise EmbeddingGenerationError(
                f"Embedding batch {batch_index} returned an empty vector",
                context={"batch_index": batch_index},
            )
        return [list(vector) for vector in vectors]

    def _segment(
        self,
        sentences: list[str],
        similarities: list[float],
        cutoff: float,
    ) -> list[ChunkDraft]:
        """Walk the sentence gaps left to right and close chunks at boundaries."""
        min_size = self.config.min_chunk_sentences
        max_size = self.config.max_chunk_sentences

        drafts: list[ChunkDraft] = []
        start = 0
        for gap, similarity in enumerate(similarities):
            size = gap - start + 1
            if size >= min_size and (similarity < cutoff or size >= max_size):
                drafts.append(self._draft(sentences, similarities, start, gap))
                start = gap + 1
        drafts.append(self._draft(sentences, similarities, start, len(sentences) - 1))
        return drafts

    @staticmethod
    def _draft(
        sentences: list[str],
        similarities: list[float],
        start: int,
        end: int,
    ) -> ChunkDraft:
        # Gaps inside [start, end] are similarities[start:end]
        return ChunkDraft(
            start_sentence=start,
            end_sentence=end,
            sentences=sentences[start : end + 1],
            avg_similarity=mean_similarity(similarities[start:end]),
        )

    def _materialize(
        self,
        drafts: list[ChunkDraft],
        document: DocumentMetadata,
    ) -> list[SemanticChunk]:
        total = len(drafts)
        chunks = []
        for index, draft in enumerate(drafts):
            content = draft.content
            keywords = list(self.keyword_extractor(content)) if self.keyword_extractor else None
            chunk_metadata = ChunkMetadata.for_content(content, document, keywords)
            chunks.append(draft.build(index, total, chunk_metadata))
        return chunks
