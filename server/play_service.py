"""REST service to play Skull matches, optionally against bots."""

from __future__ import annotations

import uuid
from random import Random
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from bots.base import BotStrategy
from bots.bot_arena import BOT_REGISTRY
from skull.discs import Disc
from skull.errors import InvalidMove, InvalidRules, MatchAlreadyOver
from skull.player import PlayerState
from skull.service import MatchService


class StartRequest(BaseModel):
    seats: List[str] = Field(..., min_length=3, max_length=6)
    seed: Optional[int] = None
    bots: Dict[str, str] = Field(default_factory=dict, description="Seat id to bot name.")


class ActionRequest(BaseModel):
    seat: str
    action: Dict[str, Any]


class SessionState:
    def __init__(self, service: MatchService, bots: Dict[str, BotStrategy]) -> None:
        self.service = service
        self.bots = bots


sessions: Dict[str, SessionState] = {}


app = FastAPI(title="Skull Play Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def ensure_session(match_id: str) -> SessionState:
    session = sessions.get(match_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Match not found")
    return session


def build_session_bots(request: StartRequest) -> Dict[str, BotStrategy]:
    bots: Dict[str, BotStrategy] = {}
    for seat, name in request.bots.items():
        if seat not in request.seats:
            raise HTTPException(status_code=400, detail=f"Bot assigned to unknown seat {seat!r}")
        factory = BOT_REGISTRY.get(name)
        if factory is None:
            raise HTTPException(status_code=400, detail=f"Unknown bot {name!r}")
        bots[seat] = factory(seed=request.seed)
    return bots


def run_bots(session: SessionState) -> List[Dict[str, Any]]:
    """Let bot seats act until a human seat is up or the match ends."""
    controller = session.service.controller
    assert controller is not None
    events: List[Dict[str, Any]] = []
    while not controller.is_over:
        seat = controller.current_seat()
        bot = session.bots.get(seat) if seat is not None else None
        if bot is None:
            break
        action = bot.choose_action(controller, seat)
        events.extend(event.to_dict() for event in controller.apply_action(seat, action))
    return events


@app.post("/matches")
def start_match(request: StartRequest) -> Dict[str, object]:
    bots = build_session_bots(request)

    def discard(player: PlayerState, rng: Random) -> Disc:
        bot = bots.get(player.seat_id)
        return bot.choose_discard(player) if bot is not None else rng.choice(player.owned())

    service = MatchService()
    try:
        service.start_match(request.seats, seed=request.seed, discard_strategy=discard)
    except InvalidRules as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    match_id = uuid.uuid4().hex
    session = SessionState(service=service, bots=bots)
    sessions[match_id] = session
    run_bots(session)
    return {
        "match_id": match_id,
        "events": service.events_since(0),
        "state": service.get_view().to_dict(),
    }


@app.get("/matches/{match_id}")
def get_match(match_id: str, seat: Optional[str] = None) -> Dict[str, object]:
    session = ensure_session(match_id)
    try:
        view = session.service.get_view(seat)
    except InvalidMove as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {
        "state": view.to_dict(),
        "legalActions": session.service.legal_actions(seat) if seat is not None else [],
    }


@app.post("/matches/{match_id}/actions")
def take_action(match_id: str, request: ActionRequest) -> Dict[str, object]:
    session = ensure_session(match_id)
    if request.seat in session.bots:
        raise HTTPException(status_code=400, detail=f"Seat {request.seat} is played by a bot")
    try:
        result = session.service.submit(request.seat, request.action)
    except MatchAlreadyOver as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
    except InvalidMove as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    events = result.events + run_bots(session)
    return {
        "events": events,
        "state": session.service.get_view(request.seat).to_dict(),
        "legalActions": session.service.legal_actions(request.seat),
    }


@app.get("/matches/{match_id}/events")
def list_events(match_id: str, since: int = 0) -> Dict[str, object]:
    session = ensure_session(match_id)
    return {"events": session.service.events_since(since)}
