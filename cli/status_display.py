"""Account display for the CLI"""

import json

from rich.console import Console
from rich.table import Table

from jagex_oauth import Account


def show_account(account: Account, console: Console):
    """
    Display the logged-in account and its characters

    Args:
        account: Account returned by the login pipeline
        console: Rich console for output
    """
    table = Table(title="Jagex Account")
    table.add_column("Property", style="cyan")
    table.add_column("Value")

    table.add_row("Account", account.account_name)
    table.add_row("Login", account.email)
    table.add_row("Characters", str(len(account.characters)))
    console.print(table)

    if not account.characters:
        console.print("[yellow]No characters on this account[/yellow]")
        return

    characters = Table(title="Characters")
    characters.add_column("Name", style="green")
    characters.add_column("Account ID")
    characters.add_column("Members")

    for character in account.characters:
        characters.add_row(
            character.display_name,
            character.account_id,
            "Yes" if character.is_members else "No",
        )

    console.print(characters)


def account_json(account: Account) -> str:
    """Serialize the account for --json output"""
    return json.dumps(account.to_dict(), indent=2)
