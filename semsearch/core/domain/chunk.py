"""Sentence and chunk models produced by the chunking pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Sentence:
    """A retained sentence and its position in the filtered document.

    Attributes:
        text: The sentence text, trimmed.
        index: Position among the retained sentences (0-based, contiguous).
    """

    text: str
    index: int


@dataclass(frozen=True)
class DocumentMetadata:
    """Caller-supplied metadata copied onto every chunk of a document.

    Title, category and keywords are produced by external enrichment and are
    passed through unchanged.
    """

    source_file: str = "unknown"
    title: str | None = None
    category: str | None = None
    keywords: tuple[str, ...] = ()


@dataclass(frozen=True)
class ChunkMetadata:
    """Metadata associated with a semantic chunk.

    Attributes:
        source_file: Path to the source file this chunk originated from.
        title: Optional title of the document or section.
        category: Optional documentation category.
        keywords: Keywords associated with the chunk.
        word_count: Number of whitespace-separated words in the chunk.
        char_count: Number of characters (code points) in the chunk.
    """

    source_file: str
    title: str | None = None
    category: str | None = None
    keywords: tuple[str, ...] = ()
    word_count: int = 0
    char_count: int = 0

    @classmethod
    def for_content(
        cls,
        content: str,
        document: DocumentMetadata | None = None,
        keywords: list[str] | tuple[str, ...] | None = None,
    ) -> ChunkMetadata:
        """Build metadata for a chunk, deriving the counts from its content.

        Args:
            content: The chunk text.
            document: Document-level metadata to pass through.
            keywords: Chunk keywords; defaults to the document keywords.

        Returns:
            ChunkMetadata with word and character counts filled in.
        """
        document = document or DocumentMetadata()
        return cls(
            source_file=document.source_file,
            title=document.title,
            category=document.category,
            keywords=tuple(keywords) if keywords is not None else tuple(document.keywords),
            word_count=len(content.split()),
            char_count=len(content),
        )


@dataclass(frozen=True)
class SemanticChunk:
    """A semantically coherent, contiguous run of sentences.

    Chunks of one document have contiguous, non-overlapping sentence ranges
    and share the same ``total_chunks``.

    Attributes:
        content: Sentences of the chunk joined by single spaces.
        chunk_index: Index of this chunk within the document (0-based).
        total_chunks: Total number of chunks in the document.
        start_sentence: First sentence index (inclusive).
        end_sentence: Last sentence index (inclusive).
        avg_similarity: Mean adjacent-sentence similarity inside the chunk.
        metadata: Source and enrichment metadata.
    """

    content: str
    chunk_index: int
    total_chunks: int
    start_sentence: int
    end_sentence: int
    avg_similarity: float
    metadata: ChunkMetadata

    def __post_init__(self) -> None:
        if self.end_sentence < self.start_sentence:
            raise ValueError("end_sentence must be >= start_sentence")
        if not 0 <= self.chunk_index < self.total_chunks:
            raise ValueError("chunk_index must be within [0, total_chunks)")

    @property
    def sentence_count(self) -> int:
        """Number of sentences covered by the chunk."""
        return self.end_sentence - self.start_sentence + 1


@dataclass
class ChunkDraft:
    """Mutable chunk descriptor used before the chunk count is known.

    The chunker collects drafts while walking the sentences and only turns
    them into immutable ``SemanticChunk`` records once segmentation is done.
    """

    start_sentence: int
    end_sentence: int
    sentences: list[str] = field(default_factory=list)
    avg_similarity: float = 1.0

    @property
    def content(self) -> str:
        return " ".join(self.sentences)

    def build(
        self,
        chunk_index: int,
        total_chunks: int,
        metadata: ChunkMetadata,
    ) -> SemanticChunk:
        """Materialise the immutable chunk record."""
        return SemanticChunk(
            content=self.content,
            chunk_index=chunk_index,
            total_chunks=total_chunks,
            start_sentence=self.start_sentence,
            end_sentence=self.end_sentence,
            avg_similarity=self.avg_similarity,
            metadata=metadata,
        )
