"""
Scalar type inference for CSV field values.
"""

from .inference import ScalarType, escape_json_string, infer_json_literal, infer_scalar_type

__all__ = [
    "ScalarType",
    "escape_json_string",
    "infer_json_literal",
    "infer_scalar_type",
]
