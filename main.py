from types import SimpleNamespace

import anyio
from rich.console import Console
from rich.pretty import pprint

from helmsman import *
from helmsman.utils import join

__prog__ = "helmsman-demo"

console = Console()
registry = Registry()


@registry.register
@command("calculate", shortcut="calc", arguments=[Argument("terms", "number", variadic=True)])
async def calculate(message, config, locale, terms):
    await message.reply(locale.format("result", " + ".join(map(str, terms)), sum(terms)))


async def members_only(message, config, locale):
    return not getattr(message.author, "bot", False)


async def add(message, config, locale, member, roles):
    await message.reply(locale.format("added", join(roles, ", ", "<@&{}>".format), member))


registry.register(Command(
    "role",
    guard=members_only,
    subcommands=[
        Command(
            "add",
            permissions=Permissions.MANAGE_ROLES,
            arguments=[Argument("member", "user"), Argument("roles", "role", variadic=True)],
            handler=add,
        ),
    ],
))

locale = Locale({
    "commands": {
        "calculate": {"result": "{0} = {1}"},
        "role": {"subcommands": {"add": {"added": "Gave {0} to <@{1}>."}}},
    },
} | {"common": DEFAULTS["common"]})


def message(content, permissions=0):
    async def reply(text):
        console.print(f"[dim]{content!r}[/dim] → {text}")

    author = SimpleNamespace(id=1, bot=False, guild_permissions=Permissions(permissions))
    channel = SimpleNamespace(name="general", permissions_for=lambda member: author.guild_permissions)
    return SimpleNamespace(content=content, author=author, channel=channel, reply=reply)


async def main():
    config = GuildConfig(shortcuts=True)
    for content, permissions in (
            ("!calc 1 2.5 -3", 0),
            ("!role add <@42> <@&7> 8", Permissions.MANAGE_ROLES),
            ("!role add <@42>", 0),
            ("!role add", Permissions.ADMINISTRATOR),
            ("!role add 42 admins", Permissions.ADMINISTRATOR),
            ("!role", 0),
            ("!unknown", 0),
    ):
        if not await registry.dispatch(message(content, permissions), config, locale):
            console.print(f"[dim]{content!r}[/dim] → no match")


if __name__ == '__main__':
    configure()
    pprint(registry.commands)
    anyio.run(main)
