from chunkscribe.store.job_store import JobStore, YamlJobStore
from chunkscribe.store.transcripts import TranscriptRepository

__all__ = ["JobStore", "TranscriptRepository", "YamlJobStore"]
