"""Match lifecycle for Skull: rounds, scoring, elimination and match end."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from random import Random
from typing import Callable, Dict, List, Optional, Sequence

from .actions import Action, ChooseFlip, DeclareBid, Pass, Place, Raise
from .challenge import ChallengeOutcome, ChallengeResolver
from .discs import Disc, count_discs, deal_hands
from .errors import InvalidMove, InvalidRules, MatchAlreadyOver, NoValidBidder, SkullError
from .events import EventKind, RoundEvent
from .player import PlayerState
from .round import InputType, Phase, RoundEngine, RoundState
from .rules_schema import RuleSet

logger = logging.getLogger(__name__)

# Picks which of its own discs a losing bidder gives up.
DiscardStrategy = Callable[[PlayerState, Random], Disc]


class StateCorrupted(SkullError):
    """Raised by ``verify_invariants`` when the match state breaks a rule."""


def random_discard(player: PlayerState, rng: Random) -> Disc:
    return rng.choice(player.owned())


@dataclass
class MatchState:
    seat_order: List[str]
    players: List[PlayerState]
    scores: Dict[str, int]
    round_number: int = 0
    round: Optional[RoundState] = None
    starting_seat: Optional[str] = None
    voided_rounds: int = 0
    winner: Optional[str] = None
    finished: bool = False
    events: List[RoundEvent] = field(default_factory=list)

    def player(self, seat: str) -> PlayerState:
        for player in self.players:
            if player.seat_id == seat:
                return player
        raise InvalidMove(f"Unknown seat {seat!r}.")

    def players_by_seat(self) -> Dict[str, PlayerState]:
        return {player.seat_id: player for player in self.players}

    def active_seats(self) -> List[str]:
        return [player.seat_id for player in self.players if not player.eliminated]

    def table_count(self) -> int:
        return sum(player.stack_size() for player in self.players if not player.eliminated)


def deal_match(seat_ids: Sequence[str], rules: RuleSet) -> MatchState:
    seats = list(seat_ids)
    if not rules.min_players <= len(seats) <= rules.max_players:
        raise InvalidRules(
            f"Skull needs {rules.min_players} to {rules.max_players} players, got {len(seats)}."
        )
    if len(set(seats)) != len(seats):
        raise InvalidRules("Seat ids must be unique.")

    hands = deal_hands(seats, flowers=rules.flowers_per_player, skulls=rules.skulls_per_player)
    return MatchState(
        seat_order=seats,
        players=[PlayerState(seat_id=seat, hand=hands[seat]) for seat in seats],
        scores={seat: 0 for seat in seats},
    )


def verify_invariants(state: MatchState, rules: RuleSet) -> None:
    """Raise ``StateCorrupted`` if any disc, score or turn invariant is broken."""
    for player in state.players:
        stacked = [entry.disc for entry in player.stack]
        total = len(player.hand) + len(stacked) + len(player.discarded)
        if total != rules.discs_per_player:
            raise StateCorrupted(f"{player.seat_id} accounts for {total} discs.")
        counts = count_discs(player.hand + stacked + player.discarded)
        if counts[Disc.SKULL] != rules.skulls_per_player:
            raise StateCorrupted(f"{player.seat_id} has {counts[Disc.SKULL]} skulls.")
        if player.eliminated != (player.disc_count() == 0):
            raise StateCorrupted(f"{player.seat_id} elimination flag disagrees with its discs.")
        if player.eliminated and player.stack:
            raise StateCorrupted(f"{player.seat_id} is eliminated but has discs on the table.")

    leaders = [seat for seat, score in state.scores.items() if score >= rules.wins_to_match]
    if any(score > rules.wins_to_match for score in state.scores.values()):
        raise StateCorrupted("A score exceeds the winning total.")
    if leaders and not (state.finished and state.winner == leaders[0] and len(leaders) == 1):
        raise StateCorrupted("A winning score was reached without ending the match.")

    round_state = state.round
    in_challenge = (
        round_state is not None and not state.finished and round_state.phase is Phase.CHALLENGE
    )
    face_up = [entry.disc for player in state.players for entry in player.stack if entry.revealed]
    if face_up and not in_challenge:
        raise StateCorrupted("Discs are face up outside a challenge.")
    if Disc.SKULL in face_up:
        raise StateCorrupted("A revealed skull was left on the table.")

    if round_state is None or state.finished:
        return
    if round_state.phase is Phase.RESOLVED:
        raise StateCorrupted("A resolved round was never replaced.")
    if in_challenge and round_state.current_bid is None:
        raise StateCorrupted("A challenge is running without a bid.")
    eliminated = {player.seat_id for player in state.players if player.eliminated}
    if eliminated & set(round_state.turn_order):
        raise StateCorrupted("An eliminated seat is still in the turn order.")
    if round_state.current_bid is not None:
        if round_state.current_bid.value > state.table_count():
            raise StateCorrupted("The bid exceeds the discs on the table.")
        if round_state.current_bid.holder not in round_state.active_bidders:
            raise StateCorrupted("The bid holder has left the bidding.")
        if in_challenge and len(face_up) >= round_state.current_bid.value:
            raise StateCorrupted("The challenge has already met its bid.")


class MatchController:
    """Top-level driver for one match; the only entry point is ``apply_action``."""

    def __init__(
        self,
        seat_ids: Sequence[str],
        rng_seed: Optional[int] = None,
        *,
        rng: Optional[Random] = None,
        rules: Optional[RuleSet] = None,
        discard_strategy: Optional[DiscardStrategy] = None,
        check_invariants: bool = False,
    ) -> None:
        self._configure(
            rules, rng if rng is not None else Random(rng_seed), discard_strategy, check_invariants
        )
        self.state = deal_match(seat_ids, self.rules)
        logger.info("New match for seats %s.", ", ".join(self.state.seat_order))
        self.start_round()

    @classmethod
    def from_state(
        cls,
        state: MatchState,
        rng_seed: Optional[int] = None,
        *,
        rng: Optional[Random] = None,
        rules: Optional[RuleSet] = None,
        discard_strategy: Optional[DiscardStrategy] = None,
        check_invariants: bool = False,
    ) -> "MatchController":
        """Resume a match from a snapshot such as ``copy.deepcopy(controller.state)``.

        The snapshot is validated with ``verify_invariants`` first and is used
        as is, not copied. Pass the original ``rng`` (or a copy of it) to replay
        random discards exactly.
        """
        controller = cls.__new__(cls)
        controller._configure(
            rules, rng if rng is not None else Random(rng_seed), discard_strategy, check_invariants
        )
        verify_invariants(state, controller.rules)
        controller.state = state
        logger.info("Resuming match for seats %s.", ", ".join(state.seat_order))

        round_state = state.round
        if state.finished:
            return controller
        if round_state is None:
            controller.start_round()
            return controller
        controller.engine = RoundEngine(round_state, state.players_by_seat())
        if round_state.phase is Phase.CHALLENGE:
            assert round_state.current_bid is not None
            controller.resolver = ChallengeResolver.resume(
                round_state.current_bid, controller.engine.players, round_state.turn_order
            )
        return controller

    def _configure(
        self,
        rules: Optional[RuleSet],
        rng: Random,
        discard_strategy: Optional[DiscardStrategy],
        check_invariants: bool,
    ) -> None:
        self.rules = rules or RuleSet()
        self.rng = rng
        self.discard_strategy = discard_strategy or random_discard
        self.check_invariants = check_invariants
        self.engine: Optional[RoundEngine] = None
        self.resolver: Optional[ChallengeResolver] = None

    # Round lifecycle ---------------------------------------------------

    def start_round(self) -> List[RoundEvent]:
        """Deal the next round; only valid before the first round or after one resolved."""
        if self.state.finished:
            raise MatchAlreadyOver("Cannot start a round after the match is over.")
        round_state = self.state.round
        if round_state is not None and round_state.phase is not Phase.RESOLVED:
            raise InvalidMove(f"Round {self.state.round_number} is still in progress.")
        events = self._begin_round(count_round=True)
        self._record(events)
        return events

    def apply_action(self, seat: str, action: Action) -> List[RoundEvent]:
        if self.state.finished:
            raise MatchAlreadyOver(f"The match is over; {self.state.winner or 'nobody'} won.")
        if seat not in self.state.scores:
            raise InvalidMove(f"Unknown seat {seat!r}.")
        engine = self._require_engine()

        try:
            if isinstance(action, ChooseFlip):
                events = self._flip(seat, action.target)
            elif isinstance(action, Place):
                events = engine.place(seat, action.disc)
            elif isinstance(action, DeclareBid):
                events = engine.declare_bid(seat, action.value)
            elif isinstance(action, Raise):
                events = engine.raise_bid(seat, action.value)
            elif isinstance(action, Pass):
                events = engine.pass_turn(seat)
            else:
                raise InvalidMove(f"Unsupported action {action!r}.")
        except NoValidBidder as exc:
            logger.info("Round %s voided: %s", self.state.round_number, exc)
            events = [RoundEvent(EventKind.PASSED, seat=seat)] if isinstance(action, Pass) else []
            events += self._void_round()
        except InvalidMove as exc:
            logger.debug("Rejected %s from %s: %s", type(action).__name__, seat, exc)
            raise
        else:
            logger.debug("Accepted %s from %s.", type(action).__name__, seat)

        if engine.state.phase is Phase.CHALLENGE and self.resolver is None:
            events += self._start_challenge(engine)
        if self.resolver is not None and self.resolver.is_resolved():
            assert self.resolver.outcome is not None
            events += self.on_round_resolved(self.resolver.outcome)

        self._record(events)
        return events

    def on_round_resolved(self, outcome: ChallengeOutcome) -> List[RoundEvent]:
        engine = self._require_engine()
        holder = self.state.player(outcome.holder)
        lost: Optional[Disc] = None
        if not outcome.success:
            lost = self._discard_choice(holder, own_skull=outcome.skull_owner == holder.seat_id)
        engine.finish()
        events: List[RoundEvent] = []

        if outcome.success:
            self.state.scores[holder.seat_id] += 1
            score = self.state.scores[holder.seat_id]
            logger.info("%s won a challenge for %s (score %s).", holder.seat_id, outcome.bid, score)
            events.append(RoundEvent(EventKind.CHALLENGE_WON, seat=holder.seat_id, value=score))
        else:
            logger.info("%s failed a challenge on %s's skull.", holder.seat_id, outcome.skull_owner)
            events.append(
                RoundEvent(EventKind.CHALLENGE_LOST, seat=holder.seat_id, target=outcome.skull_owner)
            )
            assert lost is not None
            events += self._discard_for(holder, lost, own_skull=outcome.skull_owner == holder.seat_id)

        for player in self.state.players:
            player.return_stack()
        self.resolver = None

        if outcome.success and self.state.scores[holder.seat_id] >= self.rules.wins_to_match:
            return events + self._finish(holder.seat_id)

        remaining = self.state.active_seats()
        if len(remaining) == 1:
            return events + self._finish(remaining[0])
        if not remaining:
            return events + self._finish(None)
        return events + self._begin_round(count_round=True)

    # Queries -----------------------------------------------------------

    @property
    def is_over(self) -> bool:
        return self.state.finished

    @property
    def winner(self) -> Optional[str]:
        return self.state.winner

    def current_seat(self) -> Optional[str]:
        if self.state.finished or self.state.round is None:
            return None
        return self.state.round.current_seat

    def expected_input(self) -> Optional[InputType]:
        if self.state.finished or self.state.round is None:
            return None
        return self.state.round.expected_input()

    def table_count(self) -> int:
        return self.state.table_count()

    def legal_actions(self) -> List[Action]:
        """Every action the seat to act may submit right now."""
        expected = self.expected_input()
        seat = self.current_seat()
        if expected is None or seat is None:
            return []
        round_state = self.state.round
        assert round_state is not None
        maximum = self.table_count()

        if expected is InputType.PLACE:
            hand = self.state.player(seat).hand
            return [Place(disc) for disc in Disc if disc in hand]
        if expected is InputType.BID_OR_PASS:
            return [DeclareBid(value) for value in range(1, maximum + 1)] + [Pass()]
        if expected is InputType.RAISE_OR_PASS:
            assert round_state.current_bid is not None
            floor = round_state.current_bid.value + 1
            return [Raise(value) for value in range(floor, maximum + 1)] + [Pass()]
        assert self.resolver is not None
        return [ChooseFlip(target) for target in self.resolver.flippable_targets()]

    # Helpers -----------------------------------------------------------

    def _begin_round(self, *, count_round: bool) -> List[RoundEvent]:
        if self.state.finished:
            raise MatchAlreadyOver("Cannot start a round after the match is over.")
        starter = self._next_starter()
        order = self.state.seat_order
        start = order.index(starter)
        rotated = order[start:] + order[:start]
        turn_order = [seat for seat in rotated if not self.state.player(seat).eliminated]

        if count_round:
            self.state.round_number += 1
        self.state.starting_seat = starter
        self.state.round = RoundState(turn_order=turn_order)
        self.engine = RoundEngine(self.state.round, self.state.players_by_seat())
        self.resolver = None
        logger.info("Round %s starts with %s.", self.state.round_number, starter)
        return [RoundEvent(EventKind.ROUND_STARTED, seat=starter, value=self.state.round_number)]

    def _next_starter(self) -> str:
        order = self.state.seat_order
        previous = self.state.starting_seat
        offset = 0 if previous is None else order.index(previous) + 1
        for step in range(len(order)):
            seat = order[(offset + step) % len(order)]
            if not self.state.player(seat).eliminated:
                return seat
        raise MatchAlreadyOver("No seat is left to start a round.")

    def _flip(self, seat: str, target: str) -> List[RoundEvent]:
        if self.resolver is None:
            raise InvalidMove("No challenge in progress.")
        return self.resolver.flip(seat, target)

    def _start_challenge(self, engine: RoundEngine) -> List[RoundEvent]:
        bid = engine.state.current_bid
        assert bid is not None
        logger.info("%s challenges for %s discs.", bid.holder, bid.value)
        self.resolver = ChallengeResolver(bid, engine.players, engine.state.turn_order)
        return self.resolver.start()

    def _discard_choice(self, holder: PlayerState, *, own_skull: bool) -> Disc:
        if own_skull:
            return Disc.SKULL
        choice = self.discard_strategy(holder, self.rng)
        if not holder.owns(choice):
            logger.warning(
                "Discard strategy picked %s, which %s does not own; choosing at random.",
                choice,
                holder.seat_id,
            )
            choice = random_discard(holder, self.rng)
        return choice

    def _discard_for(self, holder: PlayerState, choice: Disc, *, own_skull: bool) -> List[RoundEvent]:
        lost = holder.discard(lambda owned: choice)
        events = [
            RoundEvent(EventKind.DISC_DISCARDED, seat=holder.seat_id, disc=lost if own_skull else None)
        ]
        if holder.eliminated:
            logger.info("%s has no discs left and is eliminated.", holder.seat_id)
            events.append(RoundEvent(EventKind.PLAYER_ELIMINATED, seat=holder.seat_id))
        return events

    def _void_round(self) -> List[RoundEvent]:
        for player in self.state.players:
            player.return_stack()
        self.state.voided_rounds += 1
        events = [RoundEvent(EventKind.ROUND_VOIDED, value=self.state.round_number)]
        return events + self._begin_round(count_round=False)

    def _finish(self, winner: Optional[str]) -> List[RoundEvent]:
        self.state.finished = True
        self.state.winner = winner
        self.engine = None
        if winner is None:
            logger.info("Match ended with no winner.")
            return [RoundEvent(EventKind.MATCH_DRAWN)]
        logger.info("%s wins the match.", winner)
        return [RoundEvent(EventKind.MATCH_WON, seat=winner)]

    def _record(self, events: List[RoundEvent]) -> None:
        self.state.events.extend(events)
        if self.check_invariants:
            verify_invariants(self.state, self.rules)

    def _require_engine(self) -> RoundEngine:
        if self.engine is None:
            raise MatchAlreadyOver("No round in progress.")
        return self.engine
