"""
Helmsman permission gate.

Overview
- Permissions: the chat platform's permission bits as an IntFlag. Keys used in
  locales and reports are the lower-cased member names ("manage_roles").
- resolve(value): normalize anything permission-like into Permissions.
- missing(held, required): which required permissions the holder lacks.
- describe(keys, locale): human-readable, localized enumeration of keys.
- gate(message, locale, required, channel=False): check the author of a message
  and reply with the missing permissions when blocked.

Rules
- Holding ADMINISTRATOR satisfies every requirement.
- When the requirement is exactly ADMINISTRATOR, the only reportable missing
  permission is "administrator" itself, never its constituent bits.
- Scope: the guild scope reads message.author.guild_permissions, the channel
  scope reads message.channel.permissions_for(message.author).
"""
import logging
from collections.abc import Iterable
from enum import KEEP, IntFlag

from .faults import MissingPermissionsError, trigger
from .utils import *

logger = logging.getLogger(__name__)


class Permissions(IntFlag, boundary=KEEP):
    """
    permission bits as laid out by the chat platform (bit positions are stable).

    Bits without a member here are kept as-is, so a requirement on a bit this
    table does not know yet is still enforced.
    """
    CREATE_INSTANT_INVITE = 1 << 0
    KICK_MEMBERS          = 1 << 1
    BAN_MEMBERS           = 1 << 2
    ADMINISTRATOR         = 1 << 3
    MANAGE_CHANNELS       = 1 << 4
    MANAGE_GUILD          = 1 << 5
    ADD_REACTIONS         = 1 << 6
    VIEW_AUDIT_LOG        = 1 << 7
    PRIORITY_SPEAKER      = 1 << 8
    STREAM                = 1 << 9
    VIEW_CHANNEL          = 1 << 10
    SEND_MESSAGES         = 1 << 11
    SEND_TTS_MESSAGES     = 1 << 12
    MANAGE_MESSAGES       = 1 << 13
    EMBED_LINKS           = 1 << 14
    ATTACH_FILES          = 1 << 15
    READ_MESSAGE_HISTORY  = 1 << 16
    MENTION_EVERYONE      = 1 << 17
    USE_EXTERNAL_EMOJIS   = 1 << 18
    VIEW_GUILD_INSIGHTS   = 1 << 19
    CONNECT               = 1 << 20
    SPEAK                 = 1 << 21
    MUTE_MEMBERS          = 1 << 22
    DEAFEN_MEMBERS        = 1 << 23
    MOVE_MEMBERS          = 1 << 24
    USE_VAD               = 1 << 25
    CHANGE_NICKNAME       = 1 << 26
    MANAGE_NICKNAMES      = 1 << 27
    MANAGE_ROLES          = 1 << 28
    MANAGE_WEBHOOKS       = 1 << 29
    MANAGE_EMOJIS         = 1 << 30
    USE_APPLICATION_COMMANDS = 1 << 31
    REQUEST_TO_SPEAK      = 1 << 32
    MANAGE_EVENTS         = 1 << 33
    MANAGE_THREADS        = 1 << 34
    CREATE_PUBLIC_THREADS = 1 << 35
    CREATE_PRIVATE_THREADS = 1 << 36
    USE_EXTERNAL_STICKERS = 1 << 37
    SEND_MESSAGES_IN_THREADS = 1 << 38
    USE_EMBEDDED_ACTIVITIES = 1 << 39
    MODERATE_MEMBERS      = 1 << 40

    @property
    def key(self):
        """
        locale/report key of a single flag ("manage_roles").
        """
        return self.name.lower()

    @classmethod
    def fromkey(cls, key, /):
        try:
            return cls[key.upper()]
        except KeyError:
            raise ValueError(f"unknown permission {key!r}") from None


def resolve(value, /):
    """
    Normalize a permission-like value into Permissions.

    Accepts
    - Permissions / int (bit field)
    - platform permission objects exposing an integer `.value`
    - str: a single permission key ("manage_roles")
    - Iterable of any of the above (combined with bitwise or)

    Raises
    - TypeError for anything else.
    - ValueError for unknown keys and negative bit fields.
    """
    if isinstance(value, int) and not isinstance(value, bool):
        if value < 0:
            raise ValueError(f"permission bit field must not be negative, got {value}")
        return Permissions(value)
    if isinstance(value, str):
        return Permissions.fromkey(value)
    if isinstance(getattr(value, "value", None), int):
        return resolve(value.value)
    if isinstance(value, Iterable):
        combined = Permissions(0)
        for item in value:
            combined |= resolve(item)
        return combined
    raise TypeError("resolve() argument must be permission-like")


_KEYS = {flag.value: flag.key for flag in Permissions}


def missing(held, required, /):
    """
    Return the keys of the required permissions the holder lacks.

    Returns
    - tuple[str, ...] in bit order; empty when nothing is missing. Bits with
      no known name are reported by their decimal value.
    """
    held = resolve(held)
    required = resolve(required)

    if Permissions.ADMINISTRATOR in held:
        return ()
    if required == Permissions.ADMINISTRATOR:
        return (Permissions.ADMINISTRATOR.key,)

    lacking = int(required) & ~int(held)
    keys = []
    while lacking:
        bit = lacking & -lacking
        keys.append(_KEYS.get(bit, str(bit)))
        lacking ^= bit
    return tuple(keys)


def describe(keys, locale, /):
    """
    Render permission keys through "common.permissions", joined by the locale separator.
    """
    return listing(keys, locale, "common.permissions")


async def gate(message, locale, required, /, channel=False):
    """
    Check the author of a message against a permission requirement.

    Parameters
    - message: inbound message (author, channel, reply()).
    - locale: locale view used for the reply.
    - required: permission-like requirement (see resolve()).
    - channel: bool
      True to check the permissions the author has in the message's channel,
      False to check the guild-wide permissions.

    Returns
    - bool: True when the author is blocked (a reply was already sent and the
      caller must stop), False when the author may proceed.
    """
    if channel:
        held = message.channel.permissions_for(message.author)
    else:
        held = message.author.guild_permissions

    if not (keys := missing(held, required)):
        return False

    logger.info("blocked %r, missing %s", getattr(message.author, "id", message.author), ", ".join(keys))
    await trigger(
        MissingPermissionsError("member is missing %s" % ", ".join(keys)),
        message,
        locale,
        missing=keys,
        listing=describe(keys, locale),
        channel=message.channel.name if channel else None,
    )
    return True


__all__ = (
    "Permissions",
    "resolve",
    "missing",
    "describe",
    "gate",
)
