"""User data export."""

from physics_lms.export.formatter import format_export_bundle, SUMMARY_FIELDS

__all__ = ["format_export_bundle", "SUMMARY_FIELDS"]
