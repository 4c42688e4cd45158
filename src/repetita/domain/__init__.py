from .models import Classification, MasteryLevel, MemoryRecord, ReviewResponse

__all__ = ["Classification", "MasteryLevel", "MemoryRecord", "ReviewResponse"]
