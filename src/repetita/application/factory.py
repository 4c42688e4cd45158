"""
Record Repository Factory
Centralizes the logic for selecting the record source for a configuration.
"""

from repetita.application.config import AppConfig
from repetita.application.stats.service import StudyStatsService
from repetita.domain.stats.ports import RecordRepository
from repetita.infrastructure.adapters.yaml_records import YamlRecordRepository


def get_record_repository(config: AppConfig) -> RecordRepository:
    """
    Returns the RecordRepository implementation for the configured records path.
    """
    return YamlRecordRepository(config.records_path)


def get_study_service(config: AppConfig) -> StudyStatsService:
    return StudyStatsService(
        get_record_repository(config),
        max_interval_days=config.max_interval_days,
    )
