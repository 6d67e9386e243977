"""Streamlit hot-seat table for Skull."""

from __future__ import annotations

import streamlit as st

from skull.errors import SkullError
from skull.events import EventKind, RoundEvent
from skull.service import MatchService
from skull.view import MatchView

SEAT_NAMES = ["Ann", "Ben", "Cat", "Dan", "Eve", "Fay"]


def get_service() -> MatchService:
    if "match_service" not in st.session_state:
        st.session_state["match_service"] = MatchService()
    return st.session_state["match_service"]


def rerun() -> None:
    st.rerun()


def submit(service: MatchService, seat: str, payload: dict) -> None:
    try:
        service.submit(seat, payload)
        rerun()
    except SkullError as exc:
        st.error(str(exc))


def render_table(view: MatchView) -> None:
    st.subheader("Table")
    cols = st.columns(len(view.players))
    for col, player in zip(cols, view.players):
        with col:
            marker = " (to act)" if player.seat_id == view.current_seat else ""
            st.markdown(f"**{player.seat_id}**{marker}")
            st.write(f"Score: {player.score}")
            if player.eliminated:
                st.write("Eliminated")
                continue
            st.write(f"Hand: {player.hand_size} disc(s)")
            stack = [name if name is not None else "face-down" for name in player.stack]
            st.write(f"Stack: {', '.join(stack) or 'empty'}")
            st.write(f"Lost: {player.discarded_count}")


def render_private(view: MatchView, seat: str) -> None:
    me = view.player(seat)
    st.subheader(f"{seat}'s discs")
    st.write(f"In hand: {', '.join(me.hand or []) or 'none'}")
    st.write(f"On table (bottom to top): {', '.join(name or '?' for name in me.stack) or 'none'}")


def render_controls(service: MatchService, view: MatchView, seat: str) -> None:
    options = service.legal_actions(seat)
    if not options:
        return
    if view.current_bid is not None:
        st.write(f"Current bid: {view.current_bid.value} by {view.current_bid.holder}")
    st.write(f"Discs on the table: {view.table_count}")

    labels = {option["label"]: option for option in options}
    choice = st.selectbox("Your move", list(labels.keys()))
    if st.button("Submit move"):
        payload = {key: value for key, value in labels[choice].items() if key != "label"}
        submit(service, seat, payload)


def render_log(service: MatchService) -> None:
    controller = service.controller
    assert controller is not None
    with st.expander("Match log", expanded=False):
        for event in reversed(controller.state.events[-40:]):
            st.write(describe(event))


def describe(event: RoundEvent) -> str:
    text = event.describe()
    if event.kind in (EventKind.MATCH_WON, EventKind.MATCH_DRAWN):
        return f"**{text}**"
    return text


def main() -> None:
    st.set_page_config(page_title="Skull", layout="wide")
    st.title("Skull")

    service = get_service()

    st.sidebar.header("Match Controls")
    players = st.sidebar.slider("Players", min_value=3, max_value=6, value=4)
    seed = st.sidebar.number_input("Seed", min_value=0, value=0, step=1)
    if st.sidebar.button("Start new match"):
        service.start_match(SEAT_NAMES[:players], seed=int(seed))
        rerun()

    if service.controller is None:
        st.info("Start a new match to begin.")
        return

    spectator = service.get_view()
    if spectator.finished:
        st.success(f"Match over. Winner: {spectator.winner or 'nobody'}")
        render_table(spectator)
        render_log(service)
        return

    seat = spectator.current_seat
    assert seat is not None
    st.write(f"Round {spectator.round_number}, phase: {spectator.phase}")
    st.warning(f"Pass the device to {seat}. Other players, look away.")
    render_table(spectator)
    view = service.get_view(seat)
    if st.checkbox(f"I am {seat}: show my discs", key=f"reveal-{seat}-{len(view.history)}"):
        render_private(view, seat)
        render_controls(service, view, seat)
    render_log(service)


if __name__ == "__main__":
    main()
