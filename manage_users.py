#!/usr/bin/env python3
"""
User management CLI for Userbase.
Run this script to add, list or archive users and to issue auth tokens.

Usage:
    python manage_users.py add <username> [--super]
    python manage_users.py list
    python manage_users.py token <username>
    python manage_users.py archive <username>
    python manage_users.py help
"""

import sys

from userbase import config
from userbase.application.services import AuthService
from userbase.database import get_db, init_db
from userbase.infrastructure.repositories import UserRepository


def print_usage():
    print(__doc__)


def cmd_add(args):
    if len(args) < 1:
        print("Error: add requires <username>")
        print("Example: python manage_users.py add ankur --super")
        return 1

    username = args[0].lower()
    users = UserRepository(get_db())

    if not users.is_username_available(username):
        print(f"Error: User '{username}' already exists")
        return 1

    data = {"username": username, "incompleteUserDetails": False}
    if "--super" in args[1:]:
        data["roles"] = {config.SUPERUSER: True}

    result = users.add_or_update(data)
    print(f"User '{username}' created successfully (ID: {result['userId']})")
    return 0


def cmd_list(args):
    users = UserRepository(get_db()).list_all()
    if not users:
        print("No users found. Create one with: python manage_users.py add <username>")
        return 0

    print(f"{'ID':<34} {'Username':<22} {'Roles'}")
    print("-" * 80)
    for user in users:
        roles = ", ".join(sorted(role for role, enabled in (user.get("roles") or {}).items() if enabled))
        print(f"{user['id']:<34} {user.get('username') or '-':<22} {roles}")
    return 0


def cmd_token(args):
    if len(args) < 1:
        print("Error: token requires <username>")
        return 1

    username = args[0]
    user = UserRepository(get_db()).get_by_username(username)
    if not user:
        print(f"Error: User '{username}' not found")
        return 1

    print(f"{config.COOKIE_NAME}={AuthService().generate_token(user['id'])}")
    return 0


def cmd_archive(args):
    if len(args) < 1:
        print("Error: archive requires <username>")
        return 1

    username = args[0]
    users = UserRepository(get_db())
    user = users.get_by_username(username)

    if not user:
        print(f"Error: User '{username}' not found")
        return 1

    # Confirm archiving
    confirm = input(f"Archive user '{username}'? [y/N]: ")
    if confirm.lower() != 'y':
        print("Cancelled")
        return 0

    users.update(user['id'], {"roles": {config.ARCHIVED: True}})
    print(f"User '{username}' archived")
    return 0


def main():
    if len(sys.argv) < 2:
        print_usage()
        return 1

    # Initialize database
    init_db()

    command = sys.argv[1].lower()
    args = sys.argv[2:]

    commands = {
        'add': cmd_add,
        'list': cmd_list,
        'token': cmd_token,
        'archive': cmd_archive,
        'help': lambda _: (print_usage(), 0)[1],
    }

    if command not in commands:
        print(f"Unknown command: {command}")
        print_usage()
        return 1

    return commands[command](args)


if __name__ == "__main__":
    sys.exit(main())
