"""Vacuum orchestration module.

This module handles:
- Correlating records and workers by build ID
- Creation-order sorting of build records
- Age-based and count-based eviction policies
- Best-effort build deletion
"""

from brigade_vacuum.vacuum.service import Vacuum

__all__ = ["Vacuum"]
