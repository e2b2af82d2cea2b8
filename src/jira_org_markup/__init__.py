"""
jira-org-markup: convert between JIRA markup and Org markup
"""

from .converter import (OrgConversion, convert_jira_to_org, convert_jira_to_org_document,
                        convert_org_to_jira)
from .headings import HeadingAnnotation

__all__ = [
    "HeadingAnnotation",
    "OrgConversion",
    "convert_jira_to_org",
    "convert_jira_to_org_document",
    "convert_org_to_jira",
]
