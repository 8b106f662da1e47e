"""Discord role service - syncs the unverified role with linked accounts."""
import logging

from ...infrastructure.clients import DiscordClient
from ...infrastructure.repositories import UserRepository

logger = logging.getLogger(__name__)


class DiscordRoleService:

    def __init__(self, user_repository: UserRepository, discord_client: DiscordClient):
        self.user_repo = user_repository
        self.discord = discord_client

    def apply_unverified_role(self, role_id: str) -> list[str]:
        """Give ``role_id`` to Discord members that are not linked to any user.

        Members that already have roles, bots and members linked through a
        user's ``discordId`` are left alone.

        Returns:
            Discord IDs the role was applied to

        Raises:
            DiscordError: The bot could not be reached
        """
        members = self.discord.get_members()
        linked = {user["discordId"] for user in self.user_repo.list_all() if user.get("discordId")}

        targets = [
            member["user"]["id"]
            for member in members
            if member["user"]["id"] not in linked
            and not member["user"].get("bot")
            and not member.get("roles")
        ]

        for discord_id in targets:
            self.discord.add_role(discord_id, role_id)

        logger.info(
            "Applied unverified role",
            extra={"context": {"members": len(members), "applied": len(targets)}}
        )
        return targets
