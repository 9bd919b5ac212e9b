"""Infrastructure layer for the serialization benchmark.

This package provides the codec adapters under test, artifact file
persistence, and the console + file report sink.
"""

from infra.artifacts import artifact_path, read_artifact, write_artifact
from infra.codec import Codec, default_codecs
from infra.json_codec import JsonCodec
from infra.msgpack_codec import MsgpackCodec
from infra.report_sink import ReportSink, configure_report_sink
from infra.xml_codec import XmlCodec, iter_records

__all__: list[str] = [
    "Codec",
    "JsonCodec",
    "MsgpackCodec",
    "ReportSink",
    "XmlCodec",
    "artifact_path",
    "configure_report_sink",
    "default_codecs",
    "iter_records",
    "read_artifact",
    "write_artifact",
]
