# Domain Stats Package
from .models import CardInsight, SetStatistics
from .ports import RecordRepository, RecordSourceError

__all__ = ["CardInsight", "SetStatistics", "RecordRepository", "RecordSourceError"]
