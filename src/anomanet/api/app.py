"""FastAPI app exposing the game ledgers over HTTP."""

from __future__ import annotations

from typing import Annotated, Literal

from fastapi import FastAPI, Header, Query, Request
from fastapi.responses import JSONResponse

from anomanet.api.schemas import (
    AcceptResponse,
    ChannelListResponse,
    ConnectRequest,
    ConnectResponse,
    DiscoverResponse,
    EvidenceCreate,
    EvidenceListResponse,
    ExamineResponse,
    InsufficientEvidence,
    InteractionResponse,
    ProgressionResponse,
    Resolved,
    SignalsRequest,
    SolveRequest,
    SolveResponse,
    TheoryRequired,
    UnlockResponse,
)
from anomanet.config import Settings, load_settings
from anomanet.engine import progression
from anomanet.engine.unlocks import (
    check_and_unlock_channels,
    create_discovery_notification,
    create_unlock_notification,
    discover_and_unlock_channel,
    get_unlock_hints,
)
from anomanet.errors import (
    AnomaNetError,
    ConflictError,
    InvalidConnectionError,
    MissingParameterError,
    NotFoundError,
)
from anomanet.formatters import format_evidence_content
from anomanet.game import Game
from anomanet.ledger.channels import get_channel_by_id, get_visible_channels
from anomanet.logging import configure_logging, get_logger, log_exception, request_context
from anomanet.models.case import Case
from anomanet.models.channel import Channel
from anomanet.models.evidence import Evidence
from anomanet.models.relationship import RelationshipState
from anomanet.storage import DocumentStore, create_store
from anomanet.utils.clock import Clock, utc_now
from anomanet.utils.ids import generate_evidence_id

USER_HEADER = "X-User-Id"

# Read from the `X-User-Id` header.
UserHeader = Annotated[str | None, Header()]


def create_app(
    settings: Settings | None = None,
    store: DocumentStore | None = None,
    *,
    clock: Clock = utc_now,
) -> FastAPI:
    """Create FastAPI app."""

    settings = settings or load_settings()
    configure_logging(settings.log_level)
    logger = get_logger(__name__)

    game = Game.create(store or create_store(settings), settings, clock=clock)

    app = FastAPI(title="AnomaNet", version="0.1.0")

    def user_of(x_user_id: str | None) -> str:
        return x_user_id or settings.dev_user_id

    @app.middleware("http")
    async def bind_request_context(request: Request, call_next):  # type: ignore[no-untyped-def]
        user_id = request.headers.get(USER_HEADER) or settings.dev_user_id
        with request_context(user_id=user_id, action=f"{request.method} {request.url.path}"):
            return await call_next(request)

    @app.exception_handler(AnomaNetError)
    async def game_error(request: Request, exc: AnomaNetError) -> JSONResponse:
        logger.info("Request rejected (%d): %s", exc.status_code, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        log_exception(logger, "Unhandled API error", path=request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    @app.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    # Cases

    @app.get("/cases")
    async def list_cases(
        x_user_id: UserHeader = None,
        type: Annotated[Literal["available", "active"], Query()] = "available",  # noqa: A002
    ) -> dict[str, object]:
        if type == "available":
            return {"cases": await game.available_cases()}

        active, history = await game.user_cases(user_of(x_user_id))
        return {"active": active, "history": history, "max_active": game.cases.max_active_cases}

    @app.post("/cases/seed")
    async def seed_cases(x_user_id: UserHeader = None) -> dict[str, object]:
        seeded = await game.seed(user_of(x_user_id))
        return {"seeded": [c.id for c in seeded]}

    @app.get("/cases/{case_id}")
    async def get_case(case_id: str, x_user_id: UserHeader = None) -> Case:
        return await game.find_case(user_of(x_user_id), case_id)

    @app.post("/cases/{case_id}/accept")
    async def accept_case(case_id: str, x_user_id: UserHeader = None) -> AcceptResponse:
        accepted, granted = await game.accept_case(user_of(x_user_id), case_id)
        return AcceptResponse(case=accepted, evidence_granted=[e.id for e in granted])

    @app.post("/cases/{case_id}/abandon")
    async def abandon_case(case_id: str, x_user_id: UserHeader = None) -> Case:
        return await game.cases.abandon_case(user_of(x_user_id), case_id)

    @app.post("/cases/{case_id}/solve", response_model=SolveResponse)
    async def solve_case(
        case_id: str,
        body: SolveRequest | None = None,
        x_user_id: UserHeader = None,
    ) -> InsufficientEvidence | TheoryRequired | Resolved:
        theory = body.theory if body else None
        if theory is not None and not theory.strip():
            raise MissingParameterError("Theory must not be blank")
        attempt = await game.solve_case(user_of(x_user_id), case_id, theory)

        result = attempt.result
        if result is None:
            if attempt.kind == "insufficient_evidence":
                return InsufficientEvidence(completeness=attempt.completeness, hints=attempt.hints)
            return TheoryRequired(completeness=attempt.completeness, case=attempt.case)

        return Resolved(
            outcome=result.outcome,
            description=result.description,
            rewards=result.rewards,
            formatted_rewards=result.formatted_rewards,
            completeness=result.completeness,
            hints=result.missing_hints,
            case=attempt.case,
            unlocked_channels=attempt.unlocked_channels,
            notifications=[create_unlock_notification(c) for c in attempt.unlocked_channels],
        )

    # Evidence

    @app.get("/evidence")
    async def list_evidence(x_user_id: UserHeader = None) -> EvidenceListResponse:
        user_id = user_of(x_user_id)
        items = await game.evidence.get_all_evidence(user_id)
        by_type = await game.evidence.get_evidence_by_type(user_id)
        return EvidenceListResponse(
            items=[e.public_view() for e in items],
            by_type={t: [e.id for e in group] for t, group in by_type.items()},
            unexamined_count=sum(1 for e in items if not e.examined),
            total=len(items),
        )

    @app.post("/evidence")
    async def add_evidence(body: EvidenceCreate, x_user_id: UserHeader = None) -> dict[str, object]:
        payload = body.model_dump()
        payload["id"] = body.id or generate_evidence_id(body.type)
        evidence = Evidence.model_validate(payload)
        await game.evidence.add_evidence(user_of(x_user_id), evidence)
        return evidence.public_view()

    @app.post("/evidence/connect")
    async def connect_evidence(body: ConnectRequest, x_user_id: UserHeader = None) -> ConnectResponse:
        try:
            connection = await game.evidence.connect_evidence(user_of(x_user_id), body.first_id, body.second_id)
        except (InvalidConnectionError, ConflictError) as exc:
            return ConnectResponse(connected=False, insight=exc.message)
        return ConnectResponse(connected=True, insight=connection.insight, connection=connection)

    @app.get("/evidence/{evidence_id}")
    async def get_evidence(evidence_id: str, x_user_id: UserHeader = None) -> dict[str, object]:
        evidence = await game.evidence.get_evidence_by_id(user_of(x_user_id), evidence_id)
        if evidence is None:
            raise NotFoundError(f"Evidence not found: {evidence_id}")
        return evidence.public_view()

    @app.post("/evidence/{evidence_id}/examine")
    async def examine_evidence(evidence_id: str, x_user_id: UserHeader = None) -> ExamineResponse:
        examined = await game.evidence.examine_evidence(user_of(x_user_id), evidence_id)
        return ExamineResponse(evidence=examined, formatted_content=format_evidence_content(examined))

    # Progression

    def progression_view(state: RelationshipState) -> ProgressionResponse:
        return ProgressionResponse(
            state=state,
            display_name=progression.get_display_name(state),
            mode=progression.get_mode_for_level(state.level),
        )

    @app.get("/progression")
    async def get_progression(x_user_id: UserHeader = None) -> ProgressionResponse:
        state = await game.relationships.get_or_create_relationship_state(user_of(x_user_id), game.entity_id)
        return progression_view(state)

    @app.post("/progression/signals")
    async def apply_signals(body: SignalsRequest, x_user_id: UserHeader = None) -> ProgressionResponse:
        state = await game.relationships.apply_signals(user_of(x_user_id), game.entity_id, body.signals)
        return progression_view(state)

    @app.post("/progression/interactions")
    async def record_interaction(x_user_id: UserHeader = None) -> InteractionResponse:
        user_id = user_of(x_user_id)
        state = await game.relationships.record_interaction(user_id, game.entity_id)
        unlocked = await check_and_unlock_channels(
            user_id,
            channels=game.channels,
            relationships=game.relationships,
            cases=game.cases,
            entity_id=game.entity_id,
        )
        return InteractionResponse(
            state=state,
            unlocked_channels=unlocked,
            notifications=[create_unlock_notification(c) for c in unlocked],
        )

    # Channels

    @app.get("/channels")
    async def list_channels(x_user_id: UserHeader = None) -> ChannelListResponse:
        state = await game.channels.get_or_create_channel_state(user_of(x_user_id))
        visible = get_visible_channels(state)
        return ChannelListResponse(
            channels=visible,
            query_windows=state.query_windows,
            unlock_hints={c.id: get_unlock_hints(c.id) for c in visible if c.locked},
        )

    @app.post("/channels/unlocks")
    async def check_unlocks(x_user_id: UserHeader = None) -> UnlockResponse:
        unlocked = await check_and_unlock_channels(
            user_of(x_user_id),
            channels=game.channels,
            relationships=game.relationships,
            cases=game.cases,
            entity_id=game.entity_id,
        )
        return UnlockResponse(unlocked=unlocked, notifications=[create_unlock_notification(c) for c in unlocked])

    @app.post("/channels/{channel_id}/discover")
    async def discover_channel(channel_id: str, x_user_id: UserHeader = None) -> DiscoverResponse:
        if not await discover_and_unlock_channel(user_of(x_user_id), channel_id, channels=game.channels):
            raise NotFoundError(f"Channel not found: {channel_id}")
        return DiscoverResponse(channel_id=channel_id, notification=create_discovery_notification(channel_id))

    @app.post("/channels/{channel_id}/read")
    async def mark_read(channel_id: str, x_user_id: UserHeader = None) -> Channel:
        state = await game.channels.mark_channel_read(user_of(x_user_id), channel_id)
        channel = get_channel_by_id(state, channel_id)
        if channel is None:
            raise NotFoundError(f"Channel not found: {channel_id}")
        return channel

    return app
