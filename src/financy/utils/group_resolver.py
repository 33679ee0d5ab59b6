"""Utility for resolving group names to IDs."""

from typing import Optional

from financy.domain.entities import TransactionType
from financy.domain.group import GroupService


def resolve_group(
    group_service: GroupService,
    user_id: str,
    group: str,
    tipo: Optional[TransactionType] = None,
) -> str:
    """Resolve group name or ID to group ID.

    Args:
        group_service: GroupService instance
        user_id: Owner of the group
        group: Group ID or exact group name
        tipo: Optional type the group must belong to when matching by name

    Returns:
        Group ID

    Raises:
        ValueError: If group is not found
    """
    # IDs are opaque, so try them first
    group_obj = group_service.get_group(user_id, group)
    if group_obj is not None:
        return group_obj.id

    group_obj = group_service.find_group_by_name(user_id, group, tipo)
    if group_obj is not None:
        return group_obj.id

    raise ValueError(f"Group '{group}' not found")
