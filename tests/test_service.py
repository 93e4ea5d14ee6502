from truco.actions import Action
from truco.errors import ErrorCode
from truco.service import GameService
from truco.state import TrucoCall


def make_service(scheduler):
    service = GameService.create(
        {"min_players": 2, "max_players": 2, "max_score": 15}, seed=21, scheduler=scheduler
    )
    for player_id in ("p1", "p2"):
        service.submit(Action.join(player_id))
        service.submit(Action.ready(player_id))
    return service


def test_view_hides_other_hands(scheduler):
    service = make_service(scheduler)
    view = service.submit(Action.start("p1"))

    assert view.phase == "playing"
    assert view.round_number == 1
    assert view.truco_value == 1
    assert view.current_player == "p1"
    assert len(view.hand) == 3
    assert len(view.hand_labels) == 3
    assert [seat.cards_in_hand for seat in view.seats] == [3, 3]
    assert view.trick is not None and view.trick.plays == []

    spectator = service.get_table_view()
    assert spectator.hand == []
    service.close()


def test_service_tracks_latest_error(scheduler):
    service = make_service(scheduler)
    service.submit(Action.start("p1"))

    view = service.submit(Action.call_truco("p2", TrucoCall.VALE_CUATRO))
    assert view.last_error == "Invalid truco call"
    assert service.last_error_code == ErrorCode.INVALID_TRUCO_CALL

    hand = service.get_table_view("p1").hand
    view = service.submit(Action.play_card("p1", hand[0]["id"]))
    assert view.last_error is None
    assert len(view.trick.plays) == 1
    assert view.trick.plays[0].player_id == "p1"
    service.close()


def test_view_after_rejected_truco(scheduler):
    service = make_service(scheduler)
    service.submit(Action.start("p1"))
    service.submit(Action.call_truco("p1", TrucoCall.TRUCO))
    view = service.submit(Action.reject_truco("p2"))

    assert view.phase == "round_end"
    assert view.truco_call == "truco"
    assert view.called_by == "p1"
    assert [seat.score for seat in view.seats] == [1, 0]
    assert view.current_player is None
    service.close()
