"""
Output module.

Report cards (PDF) and parent e-mails.
"""

from .parent_email import ParentEmail, compose_parent_email
from .report_card import default_report_path, format_average, generate_report_card

__all__ = [
    "ParentEmail",
    "compose_parent_email",
    "default_report_path",
    "format_average",
    "generate_report_card",
]
