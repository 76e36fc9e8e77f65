from __future__ import annotations

"""Demo dataset and the start-of-session loader.

Nothing but UI preferences survives a restart, so every session starts by
building the entity maps from a :class:`SeedDataset`. The mock message source
serves older history from the same dataset.
"""

import uuid
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Dict, List

import structlog

from .models import (
    Channel,
    ChannelType,
    FileAttachment,
    Guild,
    Member,
    Message,
    PresenceStatus,
    Role,
    User,
    as_utc,
    member_key,
    utcnow,
)
from .source import DEFAULT_PAGE_SIZE
from .store import AppStore

logger = structlog.get_logger(__name__)

_NS = uuid.UUID("6f1c2b1e-8c1a-4d8e-9a57-3f0e2f0c9b10")


def _uid(kind: str, *parts: object) -> str:
    return str(uuid.uuid5(_NS, ":".join([kind, *map(str, parts)])))


@dataclass
class SeedDataset:
    users: List[User] = field(default_factory=list)
    guilds: List[Guild] = field(default_factory=list)
    channels: List[Channel] = field(default_factory=list)
    roles: List[Role] = field(default_factory=list)
    members: List[Member] = field(default_factory=list)
    presence: Dict[str, PresenceStatus] = field(default_factory=dict)
    messages: List[Message] = field(default_factory=list)


USER_NAMES = [
    "Alice Chen",
    "Bob Martinez",
    "Charlie Kim",
    "Diana Okafor",
    "Ethan Nakamura",
    "Fiona Walsh",
    "George Patel",
    "Hannah Berg",
    "Isaac Torres",
    "Julia Sato",
    "Kevin Osei",
    "Lena Volkov",
]

# (name, owner index, channels as (name, type, category))
GUILDS = [
    (
        "OpenConv Dev",
        0,
        [
            ("general", "text", "General"),
            ("announcements", "text", "General"),
            ("frontend", "text", "Development"),
            ("backend", "text", "Development"),
            ("code-review", "text", "Development"),
            ("General Voice", "voice", "Voice"),
            ("Pair Programming", "voice", "Voice"),
        ],
    ),
    (
        "Design Team",
        3,
        [
            ("general", "text", "General"),
            ("inspiration", "text", "General"),
            ("ui-ux", "text", "Design"),
            ("branding", "text", "Design"),
            ("feedback", "text", "Design"),
            ("Design Call", "voice", "Voice"),
        ],
    ),
    (
        "Gaming Lounge",
        6,
        [
            ("general", "text", "Chat"),
            ("lfg", "text", "Chat"),
            ("memes", "text", "Fun"),
            ("clips", "text", "Fun"),
            ("strategy", "text", "Games"),
            ("Game Night", "voice", "Voice"),
        ],
    ),
    (
        "Music Fans",
        9,
        [
            ("general", "text", "Chat"),
            ("recommendations", "text", "Chat"),
            ("production", "text", "Music"),
            ("vinyl-corner", "text", "Music"),
            ("Listening Party", "voice", "Voice"),
        ],
    ),
]

# Per guild: (first user, last user exclusive, admin slot, mods below slot,
# join spacing in days, nicknames by slot)
MEMBERSHIP = [
    (0, 12, 0, 3, 7, {}),
    (0, 8, 3, 2, 5, {}),
    (2, 12, 4, 2, 3, {0: "CharlieGamer"}),
    (4, 12, 5, 2, 4, {}),
]

ROLE_TEMPLATES = [
    ("Admin", "#e74c3c", 2),
    ("Moderator", "#e67e22", 1),
    ("Member", "#3498db", 0),
]

PRESENCE = ["online"] * 5 + ["idle"] * 3 + ["dnd"] + ["offline"] * 3

CONTENT_POOL = [
    "Hey everyone, how's it going?",
    "Just pushed a new commit, can someone review?",
    "Has anyone tried the new API endpoint?",
    "I think we should refactor the auth module",
    "Good morning! Ready for the standup?",
    "The build is passing now, finally!",
    "Can we schedule a call to discuss the design?",
    "I found a bug in the message encryption",
    "Nice work on the PR!",
    "Let me check the logs real quick",
    "Anyone up for a code review session?",
    "The database migration went smoothly",
    "I'll be AFK for about an hour",
    "We need to update the documentation",
    "That's a great idea, let's prototype it",
    "Check out this new library I found",
    "The performance improvements look solid",
    "Can we add more test coverage here?",
    "I'm working on the WebSocket implementation",
    "Let's discuss this in tomorrow's meeting",
    "Just deployed to staging, please test",
    "The CI pipeline is running slow today",
    "I love the new dark mode theme!",
    "We should add error boundaries",
    "The UX flow feels much smoother now",
    "Anyone familiar with signal protocol?",
    "Great catch on that edge case",
    "Let me write up a design doc for this",
    "The mobile layout needs some tweaks",
    "Happy Friday everyone!",
]


def generate_messages(
    channel_id: str,
    count: int,
    sender_ids: List[str],
    now: datetime,
    span: timedelta = timedelta(days=7),
) -> List[Message]:
    """Generate ``count`` messages spread over ``span`` before ``now``.

    The sender rotates every two to four messages so the timeline shows both
    runs and interleavings. Every 14th message carries an attachment and every
    25th one has been edited.
    """
    messages: List[Message] = []
    sender_idx = 0
    from_sender = 0
    for i in range(count):
        if from_sender >= 4 or (from_sender >= 2 and i % 3 == 0):
            sender_idx = (sender_idx + 1) % len(sender_ids)
            from_sender = 0
        from_sender += 1

        offset = span - (span * i) / count
        jitter = timedelta(minutes=((i * 7 + 13) % 30) + 1)
        created_at = now - offset + jitter
        content = CONTENT_POOL[(i * 7 + 3) % len(CONTENT_POOL)]
        msg_id = _uid("message", channel_id, i)

        attachments: List[FileAttachment] = []
        if i % 14 == 0 and i > 0:
            image = i % 28 == 0
            attachments.append(
                FileAttachment(
                    id=_uid("file", channel_id, i),
                    file_name="screenshot.png" if image else "document.pdf",
                    file_size=245760 if image else 102400,
                    mime_type="image/png" if image else "application/pdf",
                    url=(
                        "https://placeholder.test/screenshot.png"
                        if image
                        else "https://placeholder.test/document.pdf"
                    ),
                    thumbnail_url=(
                        "https://placeholder.test/screenshot-thumb.png" if image else None
                    ),
                )
            )

        edited_at = created_at + timedelta(minutes=5) if i % 25 == 0 and i > 0 else None
        messages.append(
            Message(
                id=msg_id,
                channel_id=channel_id,
                sender_id=sender_ids[sender_idx],
                content=content,
                encrypted_content=content,
                nonce=f"mock-nonce-{msg_id}",
                created_at=created_at,
                edited_at=edited_at,
                attachments=attachments,
            )
        )
    return messages


def build_demo_dataset(
    now: datetime | None = None, messages_per_channel: int = 100
) -> SeedDataset:
    now = as_utc(now) if now else utcnow()
    data = SeedDataset()
    data.users = [
        User(
            id=_uid("user", i),
            display_name=name,
            email=f"{name.split()[0].lower()}@example.com",
        )
        for i, name in enumerate(USER_NAMES)
    ]
    user_ids = [u.id for u in data.users]
    data.presence = {
        uid: PresenceStatus(status) for uid, status in zip(user_ids, PRESENCE)
    }

    text_index = 0
    for gi, (guild_name, owner, channels) in enumerate(GUILDS):
        guild = Guild(id=_uid("guild", gi), name=guild_name, owner_id=user_ids[owner])
        data.guilds.append(guild)

        roles = [
            Role(
                id=_uid("role", gi, name),
                guild_id=guild.id,
                name=name,
                color=color,
                position=position,
            )
            for name, color, position in ROLE_TEMPLATES
        ]
        data.roles.extend(roles)
        admin, mod, member = (r.id for r in roles)

        start, stop, admin_slot, mods_below, spacing, nicknames = MEMBERSHIP[gi]
        slots = stop - start
        for slot, uid in enumerate(user_ids[start:stop]):
            if slot == admin_slot:
                role_ids = [admin]
            elif slot < mods_below:
                role_ids = [mod]
            else:
                role_ids = [member]
            data.members.append(
                Member(
                    user_id=uid,
                    guild_id=guild.id,
                    nickname=nicknames.get(slot),
                    roles=role_ids,
                    joined_at=now - timedelta(days=(slots - slot) * spacing),
                )
            )

        for position, (name, kind, category) in enumerate(channels):
            channel = Channel(
                id=_uid("channel", gi, position),
                guild_id=guild.id,
                name=name,
                channel_type=ChannelType(kind),
                position=position,
                category=category,
            )
            data.channels.append(channel)
            if channel.channel_type is ChannelType.TEXT and messages_per_channel > 0:
                senders = [
                    user_ids[(text_index * 3 + k) % len(user_ids)] for k in (0, 1, 2, 4, 7)
                ]
                data.messages.extend(
                    generate_messages(channel.id, messages_per_channel, senders, now)
                )
                text_index += 1
    return data


def seed_store(
    store: AppStore, dataset: SeedDataset, page_size: int = DEFAULT_PAGE_SIZE
) -> None:
    """Load ``dataset`` into ``store`` in a single transition.

    Only the newest ``page_size`` messages of each channel are indexed; the
    rest stays with the message source and is reached through pagination.
    Navigation state already restored from preferences is kept when it still
    points at existing entities.
    """
    guilds_by_id = {g.id: g for g in dataset.guilds}
    guild_ids = [g.id for g in dataset.guilds]

    channels_by_id = {c.id: c for c in dataset.channels}
    channel_ids_by_guild: Dict[str, List[str]] = defaultdict(list)
    for channel in dataset.channels:
        channel_ids_by_guild[channel.guild_id].append(channel.id)
    for ids in channel_ids_by_guild.values():
        ids.sort(key=lambda cid: channels_by_id[cid].position)

    by_channel: Dict[str, List[Message]] = defaultdict(list)
    for msg in dataset.messages:
        by_channel[msg.channel_id].append(msg)
    messages_by_id: Dict[str, Message] = {}
    message_ids_by_channel: Dict[str, List[str]] = {}
    has_more: Dict[str, bool] = {}
    for channel_id, msgs in by_channel.items():
        msgs.sort(key=lambda m: m.created_at)
        recent = msgs[-page_size:]
        for msg in recent:
            messages_by_id[msg.id] = msg
        message_ids_by_channel[channel_id] = [m.id for m in recent]
        has_more[channel_id] = len(msgs) > page_size

    members_by_id: Dict[str, Member] = {}
    member_ids_by_guild: Dict[str, List[str]] = defaultdict(list)
    for member in dataset.members:
        key = member_key(member.guild_id, member.user_id)
        members_by_id[key] = member
        member_ids_by_guild[member.guild_id].append(key)

    roles_by_id: Dict[str, Role] = {}
    role_ids_by_guild: Dict[str, List[str]] = defaultdict(list)
    for role in dataset.roles:
        roles_by_id[role.id] = role
        role_ids_by_guild[role.guild_id].append(role.id)

    state = store.state
    last_channel: Dict[str, str] = {}
    for guild_id in guild_ids:
        restored = state.last_visited_channel_by_guild.get(guild_id)
        if restored in channels_by_id:
            last_channel[guild_id] = restored
            continue
        first_text = next(
            (
                cid
                for cid in channel_ids_by_guild.get(guild_id, [])
                if channels_by_id[cid].channel_type is ChannelType.TEXT
            ),
            None,
        )
        if first_text is not None:
            last_channel[guild_id] = first_text

    last_guild = state.last_visited_guild_id
    if last_guild not in guilds_by_id:
        last_guild = guild_ids[0] if guild_ids else None

    store.hydrate(
        guilds_by_id=guilds_by_id,
        guild_ids=guild_ids,
        users_by_id={u.id: u for u in dataset.users},
        channels_by_id=channels_by_id,
        channel_ids_by_guild=dict(channel_ids_by_guild),
        messages_by_id=messages_by_id,
        message_ids_by_channel=message_ids_by_channel,
        has_more=has_more,
        loading_messages={},
        members_by_id=members_by_id,
        member_ids_by_guild=dict(member_ids_by_guild),
        roles_by_id=roles_by_id,
        role_ids_by_guild=dict(role_ids_by_guild),
        presence_by_user_id=dict(dataset.presence),
        last_visited_guild_id=last_guild,
        last_visited_channel_by_guild=last_channel,
    )
    logger.info(
        "seed.loaded",
        guilds=len(guild_ids),
        channels=len(channels_by_id),
        messages=len(messages_by_id),
        members=len(members_by_id),
    )
