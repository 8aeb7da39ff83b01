"""User application services: one command or query per operation."""

from application.user.commands.add_friend import AddFriendCommand
from application.user.commands.add_upgrade import AddUpgradeCommand
from application.user.commands.set_clicks import SetClicksCommand
from application.user.queries.get_user import GetUserQuery

__all__ = [
    "AddFriendCommand",
    "AddUpgradeCommand",
    "SetClicksCommand",
    "GetUserQuery",
]
