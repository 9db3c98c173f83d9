"""Splitting recordings into engine-sized chunks."""

from chunkscribe.chunking.engine import ChunkingEngine

__all__ = ["ChunkingEngine"]
