from .backup import BackupExporter
from .data import DataAggregator, bytes_to_megabytes
from .features import (
    FeatureLifecycleManager,
    decode_feature_payload,
    encode_feature_payload,
)
from .integrity import IntegrityService
from .key_params import KeyParameterResolver, SchemeVersion, key_params

__all__ = [
    "BackupExporter",
    "DataAggregator",
    "FeatureLifecycleManager",
    "IntegrityService",
    "KeyParameterResolver",
    "SchemeVersion",
    "bytes_to_megabytes",
    "decode_feature_payload",
    "encode_feature_payload",
    "key_params",
]
