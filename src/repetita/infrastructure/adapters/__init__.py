from .yaml_records import YamlRecordRepository

__all__ = ["YamlRecordRepository"]
