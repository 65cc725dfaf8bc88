"""Brigade Vacuum - retention tooling for Brigade build resources.

This package prunes the Secrets and Pods that Brigade leaves behind for
completed builds, by age and by count, in a single pass per invocation.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
