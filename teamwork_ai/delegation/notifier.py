"""
Task comment explaining an automatic assignment.

The body lists every chosen person followed by the reasoning:

    🤖 Assignment of this task was performed by artificial intelligence.

      • Jane Doe
      • John Smith

    <reasoning>
"""

import logging
from typing import Optional

from teamwork_ai.tools.teamwork import ProjectMember, TeamworkClient

logger = logging.getLogger(__name__)

COMMENT_HEADER = "🤖 Assignment of this task was performed by artificial intelligence.\n"


def build_comment_body(
    user_ids: list[int],
    members: dict[int, ProjectMember],
    reasoning: str,
) -> str:
    """
    Render the assignment comment.

    Args:
        user_ids: Chosen users, in bullet order
        members: Project members keyed by user id; users missing here are left out
        reasoning: Final reasoning text

    Returns:
        Comment body
    """
    body = COMMENT_HEADER
    for user_id in user_ids:
        member = members.get(user_id)
        if member is None:
            continue
        body += f"\n  • {member.first_name} {member.last_name}"
    body += "\n\n" + reasoning
    return body


async def post_assignment_comment(
    client: TeamworkClient,
    task_id: int,
    user_ids: list[int],
    members: dict[int, ProjectMember],
    reasoning: str,
) -> tuple[str, Optional[int]]:
    """Post the assignment comment on the task. Returns (body, comment id)."""
    body = build_comment_body(user_ids, members, reasoning)
    comment_id = await client.create_comment(task_id, body)
    logger.info(f"Assignment comment {comment_id} posted on task {task_id}")
    return body, comment_id
