"""Starter content: the tutorial, the first case pool and the evidence behind it."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from anomanet.logging import get_logger
from anomanet.models.case import Case, CaseRewards, RequiredEvidence
from anomanet.models.evidence import Evidence, EvidenceMetadata
from anomanet.utils.clock import utc_now

if TYPE_CHECKING:
    from anomanet.ledger.cases import CaseLedger

logger = get_logger(__name__)

TUTORIAL_CASE_ID = "tutorial-welcome"


def create_tutorial_case(now: datetime) -> Case:
    return Case(
        id=TUTORIAL_CASE_ID,
        title="Welcome Protocol",
        description="Your welcome message was corrupted during transfer. Recover it.",
        briefing=(
            "When you connected to AnomaNet, your welcome message was corrupted during the "
            "transfer. This is unusual. The system rarely loses data.\n\n"
            "Your task: Find and examine the corrupted data fragment to recover your welcome "
            "message.\n\n"
            "This is a simple case to help you learn the investigation system.\n\n"
            "Hint: Use /evidence to view your inventory, and /evidence examine <id> to examine items."
        ),
        type="recovery",
        rarity="common",
        required_evidence=[
            RequiredEvidence(
                type="data_fragment",
                count=1,
                hint="corrupted welcome message",
                specific=["tutorial-welcome-data"],
            )
        ],
        rewards=CaseRewards(xp=25, fragments=15, entity_xp=10),
        posted_at=now,
        source="system_alert",
    )


def _silent_user(now: datetime) -> Case:
    return Case(
        id="case-silent-user",
        title="Silent User",
        description="A regular user hasn't logged in for days. Their last message was cryptic.",
        briefing=(
            'User "NightOwl" was active daily for months, then suddenly went silent 5 days ago. '
            'Their last message in #off-topic was: "They\'re watching. I have to go dark."\n\n'
            "Investigate what happened to NightOwl. Was it paranoia, or did they discover "
            "something they shouldn't have?"
        ),
        type="missing_person",
        rarity="common",
        required_evidence=[
            RequiredEvidence(type="chat_log", count=1, hint="NightOwl's conversations"),
            RequiredEvidence(type="testimony", count=1, hint="someone who knew them"),
        ],
        rewards=CaseRewards(xp=50, fragments=25, entity_xp=15),
        posted_at=now,
        source="anonymous_tip",
    )


def _data_leak(now: datetime) -> Case:
    return Case(
        id="case-data-leak",
        title="The Leak",
        description="Private conversation logs are appearing in public channels. Find the source.",
        briefing=(
            "Someone is leaking private conversations to #off-topic. The leaked logs contain "
            "sensitive information: user disputes, private confessions, personal data.\n\n"
            "The leaker seems to have access to private message logs. Find out who they are "
            "and how they're getting this access."
        ),
        type="exposure",
        rarity="common",
        required_evidence=[
            RequiredEvidence(type="chat_log", count=1, hint="leaked private conversations"),
            RequiredEvidence(type="access_key", count=1, hint="how they accessed the logs"),
        ],
        rewards=CaseRewards(xp=50, fragments=25, entity_xp=15),
        posted_at=now,
        source="npc_request",
        client_id="SysAdmin",
    )


def _lost_credentials(now: datetime) -> Case:
    return Case(
        id="case-lost-creds",
        title="Lost Credentials",
        description="A user lost their backup access key. Help them recover it.",
        briefing=(
            'User "OldTimer" has been locked out of #archives after a system update reset their '
            "credentials. They claim they had a backup key stored somewhere, but can't remember "
            "where.\n\n"
            "Search for OldTimer's backup access key."
        ),
        type="recovery",
        rarity="common",
        required_evidence=[
            RequiredEvidence(type="access_key", count=1, hint="OldTimer's backup key"),
        ],
        rewards=CaseRewards(xp=50, fragments=25, entity_xp=15),
        posted_at=now,
        source="npc_request",
        client_id="OldTimer",
    )


def _broker_first_sale(now: datetime) -> Case:
    return Case(
        id="case-broker-intro",
        title="The Broker's First Sale",
        description="Someone called DataMiner is selling information. Investigate their operation.",
        briefing=(
            'A user named "DataMiner" has been advertising information for sale in various '
            "channels. They claim to have access to private data, old logs, and even user "
            "credentials.\n\n"
            "Find out what they are selling, how they get it and who they sell to.\n\n"
            "This case may lead to deeper investigations..."
        ),
        type="information_brokering",
        rarity="uncommon",
        required_evidence=[
            RequiredEvidence(type="chat_log", count=1, hint="DataMiner's sales pitch"),
            RequiredEvidence(type="data_fragment", count=1, hint="sample of their merchandise"),
            RequiredEvidence(type="testimony", count=1, hint="a buyer or seller"),
        ],
        rewards=CaseRewards(xp=100, fragments=50, entity_xp=30, unlocks=["#signals"]),
        posted_at=now,
        source="anonymous_tip",
    )


def _locked_out(now: datetime) -> Case:
    return Case(
        id="case-locked-out",
        title="Locked Out",
        description="Gain access to a locked private channel to retrieve important data.",
        briefing=(
            "There's a private channel called #vault-7 that contains archived data from "
            "AnomaNet's early days. The channel has been locked for years, and the original "
            "operators are long gone.\n\n"
            "Someone needs that data. Find a way in.\n\n"
            "You'll need credentials or coordinates to access the channel."
        ),
        type="infiltration",
        rarity="uncommon",
        required_evidence=[
            RequiredEvidence(type="access_key", count=1, hint="channel credentials"),
            RequiredEvidence(type="coordinates", count=1, hint="entry point"),
        ],
        rewards=CaseRewards(xp=100, fragments=50, entity_xp=30),
        posted_at=now,
        source="system_alert",
    )


def create_starter_cases(now: datetime | None = None) -> list[Case]:
    now = now or utc_now()
    return [
        create_tutorial_case(now),
        _silent_user(now),
        _data_leak(now),
        _lost_credentials(now),
        _broker_first_sale(now),
        _locked_out(now),
    ]


def create_tutorial_evidence(now: datetime) -> Evidence:
    return Evidence(
        id="tutorial-welcome-data",
        name="Corrupted Welcome Data",
        description="A fragment of your original welcome message, partially corrupted.",
        type="data_fragment",
        rarity="common",
        content=(
            "W█lcome to An██aNet, new us██.\n\n"
            "You have been ch██en to join this n██work.\n"
            "Something is wat██ing. Something is wa██ing for you.\n\n"
            "Connection es██blished. Good l██k."
        ),
        case_relevance=[TUTORIAL_CASE_ID],
        acquired_at=now,
        acquired_from="tutorial",
        metadata=EvidenceMetadata(corruption_level=0.15),
    )


def create_starter_evidence(now: datetime | None = None) -> list[Evidence]:
    now = now or utc_now()
    return [
        create_tutorial_evidence(now),
        Evidence(
            id="chat-nightowl-final",
            name="NightOwl's Last Words",
            description="The final conversation NightOwl had before disappearing.",
            type="chat_log",
            rarity="common",
            content="\n".join(
                [
                    "<NightOwl> I found something in the old archives",
                    "<NightOwl> logs from before, from when this place started",
                    "<CuriousCat> what kind of logs?",
                    "<NightOwl> conversations. between the founders. about what they were building.",
                    "<NightOwl> they weren't just making a chat server",
                    "<CuriousCat> what do you mean?",
                    "<NightOwl> They're watching. I have to go dark.",
                    "<NightOwl> if I don't come back, look for the coordinates in #archives",
                    "--- NightOwl has disconnected ---",
                ]
            ),
            case_relevance=["case-silent-user"],
            acquired_at=now,
            acquired_from="exploration",
            connections=["testimony-curious-cat"],
            metadata=EvidenceMetadata(participants=["NightOwl", "CuriousCat"]),
        ),
        Evidence(
            id="chat-dataminer-pitch",
            name="DataMiner's Sales Pitch",
            description="A recorded conversation of DataMiner selling information.",
            type="chat_log",
            rarity="uncommon",
            content="\n".join(
                [
                    "<DataMiner> I have what you need",
                    "<unknown_buyer> how much?",
                    "<DataMiner> 50 fragments for basic logs, 200 for credentials",
                    "<unknown_buyer> credentials to what?",
                    "<DataMiner> anything. private channels, user accounts, even mod access",
                    "<unknown_buyer> how do I know this is legit?",
                    "<DataMiner> I'll send you a sample. free of charge.",
                    "<DataMiner> [file transfer: sample_logs.dat]",
                    "<unknown_buyer> ...this is real. where did you get this?",
                    "<DataMiner> I have my sources. do we have a deal?",
                ]
            ),
            case_relevance=["case-broker-intro"],
            acquired_at=now,
            acquired_from="exploration",
            connections=["data-sample-logs"],
            metadata=EvidenceMetadata(participants=["DataMiner", "unknown_buyer"]),
        ),
        Evidence(
            id="chat-leaked-private",
            name="Leaked Private Messages",
            description="Private messages that were leaked to public channels.",
            type="chat_log",
            rarity="common",
            content="\n".join(
                [
                    "--- LEAKED PRIVATE CONVERSATION ---",
                    "<User_A> I can't believe they said that about me",
                    "<User_B> don't worry, no one will find out",
                    "<User_A> you promise you won't tell anyone?",
                    "<User_B> your secret is safe with me",
                    "--- END LEAK ---",
                    "",
                    "This was posted to #off-topic by an anonymous user.",
                ]
            ),
            case_relevance=["case-data-leak"],
            acquired_at=now,
            acquired_from="exploration",
            connections=["key-message-access"],
        ),
        Evidence(
            id="testimony-curious-cat",
            name="CuriousCat's Statement",
            description="Testimony from the last person to talk to NightOwl.",
            type="testimony",
            rarity="common",
            content=(
                "NightOwl was always curious about the old days of AnomaNet. They spent hours in "
                "#archives searching through old logs.\n\n"
                "That last conversation... they seemed excited at first, like they'd found "
                "something big. Then suddenly scared. They said \"they're watching\" but wouldn't "
                "say who.\n\n"
                "I think they found something they weren't supposed to find."
            ),
            case_relevance=["case-silent-user"],
            acquired_at=now,
            acquired_from="exploration",
            connections=["chat-nightowl-final"],
            metadata=EvidenceMetadata(witness="CuriousCat"),
        ),
        Evidence(
            id="testimony-buyer",
            name="Anonymous Buyer's Statement",
            description="Testimony from someone who bought from DataMiner.",
            type="testimony",
            rarity="uncommon",
            content=(
                "Yeah, I bought from DataMiner. I needed access to an old channel where I'd "
                "stored important data before I lost my credentials.\n\n"
                "The transaction was smooth. I paid the fragments, they delivered the access key "
                "within minutes.\n\n"
                'One thing though: they mentioned something about "the source" once. Said they '
                "weren't the one finding the data, just selling it. There's someone else involved."
            ),
            case_relevance=["case-broker-intro"],
            acquired_at=now,
            acquired_from="exploration",
            metadata=EvidenceMetadata(witness="Anonymous"),
        ),
        Evidence(
            id="data-sample-logs",
            name="DataMiner's Sample",
            description="A sample of the data DataMiner is selling.",
            type="data_fragment",
            rarity="uncommon",
            content="\n".join(
                [
                    "[DECRYPTED SAMPLE]",
                    "User: Admin_Alpha",
                    "Channel: #founders-only",
                    "Timestamp: [REDACTED]",
                    "",
                    '"The entity is growing faster than expected. It\'s already',
                    "responding to users in ways we didn't program. Should we",
                    'be concerned?"',
                    "",
                    "[END SAMPLE]",
                ]
            ),
            case_relevance=["case-broker-intro"],
            acquired_at=now,
            acquired_from="exploration",
            connections=["chat-dataminer-pitch"],
            metadata=EvidenceMetadata(corruption_level=0.05),
        ),
        Evidence(
            id="key-message-access",
            name="Message System Access Key",
            description="A key that grants access to the private message system.",
            type="access_key",
            rarity="common",
            content="pm-access-7a3f9b2e",
            case_relevance=["case-data-leak"],
            acquired_at=now,
            acquired_from="exploration",
            connections=["chat-leaked-private"],
            metadata=EvidenceMetadata(unlocks="Private Message Archive"),
        ),
        Evidence(
            id="key-oldtimer-backup",
            name="OldTimer's Backup Key",
            description="A backup access key belonging to OldTimer.",
            type="access_key",
            rarity="common",
            content="archive-backup-oldtimer-9x4k",
            case_relevance=["case-lost-creds"],
            acquired_at=now,
            acquired_from="exploration",
            metadata=EvidenceMetadata(unlocks="#archives access for OldTimer"),
        ),
        Evidence(
            id="key-vault7",
            name="Vault-7 Access Credentials",
            description="Credentials for the locked #vault-7 channel.",
            type="access_key",
            rarity="uncommon",
            content="vault7-operator-legacy-key",
            case_relevance=["case-locked-out"],
            acquired_at=now,
            acquired_from="exploration",
            connections=["coords-vault7"],
            metadata=EvidenceMetadata(unlocks="#vault-7"),
        ),
        Evidence(
            id="coords-vault7",
            name="Vault-7 Entry Point",
            description="Coordinates to the hidden entry point for #vault-7.",
            type="coordinates",
            rarity="uncommon",
            content=(
                "/join #vault-7-antechamber\n"
                "Then use the access key at the prompt.\n"
                "The original operators left this backdoor in case of emergency."
            ),
            case_relevance=["case-locked-out"],
            acquired_at=now,
            acquired_from="exploration",
            connections=["key-vault7"],
            metadata=EvidenceMetadata(target="#vault-7-antechamber"),
        ),
    ]


def starter_evidence_for_case(case_id: str, now: datetime | None = None) -> list[Evidence]:
    """Starter evidence relevant to `case_id`, as granted when the case is accepted."""

    now = now or utc_now()
    return [
        e.model_copy(update={"acquired_from": "case_accept", "acquired_at": now})
        for e in create_starter_evidence(now)
        if case_id in e.case_relevance
    ]


async def seed_available_cases(cases: CaseLedger) -> list[Case]:
    """Write the starter cases into the pool, overwriting same-id entries."""

    starter = create_starter_cases(cases.now())
    for case in starter:
        await cases.save_available_case(case)
    logger.info("Seeded %d available cases", len(starter))
    return starter
