"""Utility modules for GuestPulse."""

from .data_prep import export_to_json, load_export, prepare_export
from .parser import parse_upload

__all__ = [
    "export_to_json",
    "load_export",
    "prepare_export",
    "parse_upload",
]
