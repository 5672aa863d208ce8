"""
Document encoder rendering a record as one compact JSON object.
"""

from typing import Iterable

from es_importer.core.schema.inference import escape_json_string, infer_json_literal


def encode_document(fields: Iterable[tuple[str, str]]) -> str:
    """
    Render (name, raw value) pairs as a JSON object.

    Members keep header order. Duplicate names are emitted as separate
    members; the cluster keeps the last one.

    Args:
        fields: Ordered (name, raw value) pairs from RecordStream

    Returns:
        JSON object text without whitespace, e.g. {"id":1,"name":"Alice"}
    """
    members = ",".join(
        f'"{escape_json_string(name)}":{infer_json_literal(value)}'
        for name, value in fields
    )
    return f"{{{members}}}"
