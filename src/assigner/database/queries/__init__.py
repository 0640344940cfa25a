"""Database query functions for Assigner.

This module provides async query functions for all database entities:
- Team creation with member upsert, and team lookup
- User lookup, activity toggling and reviewer pool loading
- Pull request creation, merge, reviewer replacement and workload reads
"""

from assigner.database.queries.pull_request import (
    count_assignments,
    create_pull_request,
    get_pull_request,
    list_pull_requests_by_reviewer,
    mark_merged,
    replace_reviewer,
)
from assigner.database.queries.team import (
    create_team,
    get_team_by_id,
    get_team_by_name,
)
from assigner.database.queries.user import (
    get_user,
    list_active_teammates,
    set_user_active,
    upsert_members,
)

__all__ = [
    # Team
    "create_team",
    "get_team_by_id",
    "get_team_by_name",
    # User
    "get_user",
    "list_active_teammates",
    "set_user_active",
    "upsert_members",
    # Pull request
    "count_assignments",
    "create_pull_request",
    "get_pull_request",
    "list_pull_requests_by_reviewer",
    "mark_merged",
    "replace_reviewer",
]
