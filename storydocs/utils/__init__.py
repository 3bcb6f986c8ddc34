"""
Utility functions for storydocs.
"""

from .source_text import (
    read_source,
    skip_string,
    skip_comment,
    find_closing,
    balanced_block,
    split_top_level,
    object_members,
    statement_end,
    clean_doc_comment,
    doc_comment_before,
    kebab_case,
)

__all__ = [
    'read_source',
    'skip_string',
    'skip_comment',
    'find_closing',
    'balanced_block',
    'split_top_level',
    'object_members',
    'statement_end',
    'clean_doc_comment',
    'doc_comment_before',
    'kebab_case',
]
