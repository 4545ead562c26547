"""
Soft Delete Configuration

Environment-driven settings shared by the rewriter and the query filter.
"""

import os

# Execution option that lets a single query see soft-deleted rows
INCLUDE_DELETED_OPTION = os.getenv("SOFT_DELETE_INCLUDE_OPTION", "include_deleted")

# Session.info key holding entries that must be hard deleted on the next flush
PURGE_INFO_KEY = os.getenv("SOFT_DELETE_PURGE_KEY", "soft_delete_purge")
