"""
Tests for the game lifecycle, drawing and turn bookkeeping.
"""

import pytest

from kitten_engine.engine import GameEngine, create_game
from kitten_engine.errors import InvariantViolation
from kitten_engine.models import Card, CardType, CatName, DrawSource
from kitten_engine.rules import create_options
from kitten_engine.shuffle import validate_deck_integrity


def _comparable(engine):
    state = engine.get_debug_state()
    state.pop("id")
    return state


def _first(engine, player_id, card_type):
    return engine.state.get_player(player_id).find_type(card_type).id


def _cat_ids(engine, player_id, name, count):
    hand = engine.state.get_player(player_id).hand
    return [c.id for c in hand if c.name == name][:count]


def _give_cats(name, count):
    return lambda e: [e.debug_give_card("P0", CardType.NORMAL, name) for _ in range(count)]


# Same calls on two engines; touches every consumer of the random stream
MIXED_SCRIPT = [
    lambda e: e.debug_give_card("P0", CardType.SHUFFLE),
    lambda e: e.play_card("P0", _first(e, "P0", CardType.SHUFFLE)),
    lambda e: e.force_resolve(),
    _give_cats(CatName.BOSS_KITTEN, 2),
    lambda e: e.play_combo("P0", _cat_ids(e, "P0", CatName.BOSS_KITTEN, 2)),
    _give_cats(CatName.BUG_KITTEN, 4),
    lambda e: e.play_combo("P0", _cat_ids(e, "P0", CatName.BUG_KITTEN, 4)),
    lambda e: e.debug_give_card("P0", CardType.FAVOR),
    lambda e: e.play_card("P0", _first(e, "P0", CardType.FAVOR)),
    lambda e: e.force_resolve(),
    lambda e: e.auto_resolve_favor(),
    lambda e: e.debug_give_card("P0", CardType.SALVAGE),
    lambda e: e.play_card("P0", _first(e, "P0", CardType.SALVAGE)),
    lambda e: e.debug_put_on_top(CardType.BOMB),
    lambda e: e.draw(e.current_player.id),
    lambda e: e.debug_put_on_top(CardType.IMPLODING),
    lambda e: e.draw(e.current_player.id),
    lambda e: e.draw(e.current_player.id),
    lambda e: e.draw(e.current_player.id),
]


class TestLifecycle:
    """Joining, seating and starting."""

    def test_add_player_rules(self):
        engine = GameEngine(create_options(player_count=3, seed="s"))
        assert engine.add_player("A", "Alice").success
        assert engine.add_player("A", "Alice").code == "DUPLICATE_PLAYER"
        assert engine.add_player("B", "Bob").success
        assert engine.add_player("C", "Carol").success
        assert engine.add_player("D", "Dave").code == "ROOM_FULL"

    def test_start_needs_two_players(self):
        engine = create_game(create_options(player_count=3, seed="s"))
        engine.add_player("A", "Alice")
        result = engine.start()
        assert not result.success
        assert result.code == "NOT_ENOUGH_PLAYERS"
        assert not engine.state.started

    def test_start_locks_player_count(self):
        engine = GameEngine(create_options(player_count=6, seed="s"))
        engine.add_player("A", "Alice")
        engine.add_player("B", "Bob")
        assert engine.start().success
        assert engine.options.player_count == 2
        assert engine.state.current_player_index == 0
        assert all(p.remaining_turns == 1 for p in engine.state.players)

    def test_no_join_or_restart_after_start(self, game):
        assert game.add_player("P9", "Late").code == "ALREADY_STARTED"
        assert game.start().code == "ALREADY_STARTED"
        assert game.move_seat("P0", 1).code == "ALREADY_STARTED"

    def test_move_seat(self, make_game):
        engine = make_game(3, start=False)
        assert engine.move_seat("P2", 0).success
        assert [p.id for p in engine.state.players] == ["P2", "P0", "P1"]
        assert [p.seat for p in engine.state.players] == [0, 1, 2]
        assert engine.move_seat("P0", 5).code == "INVALID_SEAT"
        assert engine.move_seat("nobody", 0).code == "PLAYER_NOT_FOUND"

        engine.start()
        assert engine.current_player.id == "P2"

    def test_actions_before_start(self, make_game):
        engine = make_game(3, start=False)
        assert engine.current_player is None
        assert engine.draw("P0").code == "NOT_STARTED"
        assert engine.force_resolve().code == "NOT_STARTED"


class TestDraw:
    """Drawing cards and what they do."""

    def test_draw_normal_card(self, game, helpers):
        card = helpers.put_safe_top(game)
        before = len(game.state.get_player("P0").hand)

        result = game.draw("P0")

        assert result.success
        assert result.effect_type == "DREW"
        assert result.effect["card"]["id"] == card.id
        assert len(game.state.get_player("P0").hand) == before + 1
        assert game.current_player.id == "P1"

    def test_draw_out_of_turn(self, game):
        assert game.draw("P1").code == "NOT_YOUR_TURN"
        assert game.draw("ghost").code == "PLAYER_NOT_FOUND"

    def test_defuse_safety(self, game):
        """A bomb drawn with a defuse in hand never eliminates."""
        player = game.state.get_player("P0")
        defuses = sum(1 for c in player.hand if c.type == CardType.DEFUSE)
        bomb = game.debug_put_on_top(CardType.BOMB)
        pile_size = len(game.state.draw_pile)

        result = game.draw("P0")

        assert result.effect_type == "DEFUSED"
        assert player.alive
        assert sum(1 for c in player.hand if c.type == CardType.DEFUSE) == defuses - 1
        assert len(game.state.draw_pile) == pile_size
        assert bomb in game.state.draw_pile
        assert game.state.discard_pile[-1].type == CardType.DEFUSE
        assert game.current_player.id == "P1"

    def test_bomb_without_defuse_eliminates(self, game, helpers):
        helpers.discard_type(game, "P0", CardType.DEFUSE)
        bomb = game.debug_put_on_top(CardType.BOMB)
        held = len(game.state.get_player("P0").hand)
        discard_before = len(game.state.discard_pile)

        result = game.draw("P0")

        player = game.state.get_player("P0")
        assert result.effect_type == "EXPLODED"
        assert not player.alive
        assert player.hand == []
        assert player.remaining_turns == 0
        assert bomb in game.state.discard_pile
        assert len(game.state.discard_pile) == discard_before + held + 1
        assert game.state.elimination_order == ["P0"]
        assert game.current_player.id == "P1"
        assert not game.state.finished

    def test_last_survivor_wins(self, make_game, helpers):
        engine = make_game(2)
        helpers.discard_type(engine, "P0", CardType.DEFUSE)
        engine.debug_put_on_top(CardType.BOMB)

        engine.draw("P0")

        assert engine.state.finished
        assert engine.state.winner_id == "P1"

    def test_finished_game_is_read_only(self, make_game, helpers):
        engine = make_game(2)
        helpers.discard_type(engine, "P0", CardType.DEFUSE)
        engine.debug_put_on_top(CardType.BOMB)
        engine.draw("P0")

        card = engine.state.get_player("P1").hand[0]
        assert engine.draw("P1").code == "GAME_FINISHED"
        assert engine.play_card("P1", card.id).code == "GAME_FINISHED"
        assert engine.counter_play("P1").code == "GAME_FINISHED"

        index = engine.state.current_player_index
        assert engine.advance_turn().code == "GAME_FINISHED"
        assert engine.state.current_player_index == index

    def test_eliminated_player_cannot_act(self, game, helpers):
        helpers.discard_type(game, "P0", CardType.DEFUSE)
        game.debug_put_on_top(CardType.BOMB)
        game.draw("P0")

        assert game.draw("P0").code == "PLAYER_ELIMINATED"
        game.debug_give_card("P0", CardType.NOPE)
        skip = game.debug_give_card("P1", CardType.SKIP)
        game.play_card("P1", skip.id)
        assert game.counter_play("P0").code == "PLAYER_ELIMINATED"

    def test_elimination_skips_dead_seats(self, game, helpers):
        helpers.discard_type(game, "P1", CardType.DEFUSE)
        helpers.put_safe_top(game)
        game.draw("P0")
        game.debug_put_on_top(CardType.BOMB)
        game.draw("P1")

        helpers.put_safe_top(game)
        game.draw("P2")
        assert game.current_player.id == "P0"
        helpers.put_safe_top(game)
        game.draw("P0")
        assert game.current_player.id == "P2"

    def test_imploding_exposed_then_fatal(self, game):
        engine = game
        card = engine.debug_put_on_top(CardType.IMPLODING)

        first = engine.draw("P0")
        assert first.effect_type == "IMPLODING_EXPOSED"
        assert card.exposed
        assert card in engine.state.draw_pile
        assert engine.state.get_player("P0").alive
        assert engine.current_player.id == "P1"

        engine.state.draw_pile.remove(card)
        engine.state.draw_pile.insert(0, card)
        second = engine.draw("P1")
        p1 = engine.state.get_player("P1")
        assert second.effect_type == "IMPLODED"
        # A defuse does not help against an exposed imploding card
        assert not p1.alive
        assert engine.state.elimination_order == ["P1"]

    def test_draw_from_bottom(self, make_game):
        engine = make_game(3, expansion_enabled=True)
        card = engine.debug_give_card("P0", CardType.DRAW_BOTTOM)
        bottom = Card(id=engine.state.next_card_id(), type=CardType.NORMAL, name=CatName.BUG_KITTEN)
        engine.state.draw_pile.append(bottom)
        engine.state.total_cards += 1

        played = engine.play_card("P0", card.id)
        assert played.effect_type == "DRAW_BOTTOM"
        assert engine.state.get_player("P0").draw_source == DrawSource.BOTTOM
        assert engine.current_player.id == "P0"

        result = engine.draw("P0")
        assert result.effect["card"]["id"] == bottom.id
        assert engine.state.get_player("P0").draw_source == DrawSource.TOP

    def test_empty_deck(self, game):
        game.state.discard_pile.extend(game.state.draw_pile)
        game.state.draw_pile = []

        result = game.draw("P0")

        assert result.success
        assert result.effect_type == "DECK_EMPTY"
        assert game.current_player.id == "P0"
        assert not game.state.finished

    def test_owed_turns_keep_the_turn(self, game, helpers):
        game.state.get_player("P0").remaining_turns = 2

        helpers.put_safe_top(game)
        game.draw("P0")
        assert game.current_player.id == "P0"
        assert game.state.get_player("P0").remaining_turns == 1

        helpers.put_safe_top(game)
        game.draw("P0")
        assert game.current_player.id == "P1"
        assert game.state.get_player("P0").remaining_turns == 1


class TestSinglePlays:
    """Card plays that are rejected or apply immediately."""

    def test_unplayable_cards(self, game):
        defuse = game.state.get_player("P0").find_type(CardType.DEFUSE)
        assert game.play_card("P0", defuse.id).code == "CARD_NOT_PLAYABLE"
        nope = game.debug_give_card("P0", CardType.NOPE)
        assert game.play_card("P0", nope.id).code == "CARD_NOT_PLAYABLE"
        assert game.play_card("P0", "c_9999").code == "CARD_NOT_IN_HAND"

    def test_cat_card_alone_does_nothing(self, game):
        cat = game.debug_give_card("P0", CardType.NORMAL, CatName.NEZHA_KITTEN)

        result = game.play_card("P0", cat.id)

        assert result.effect_type == "NO_EFFECT"
        assert game.state.discard_pile[-1] is cat
        assert game.current_player.id == "P0"

    def test_bad_params_mutate_nothing(self, game):
        favor = game.debug_give_card("P0", CardType.FAVOR)
        before = game.get_debug_state()

        result = game.play_card("P0", favor.id, {"target_id": "P1", "bogus": True})

        assert result.code == "INVALID_PARAMS"
        assert game.get_debug_state() == before

    def test_failed_action_mutates_nothing(self, game):
        before = game.get_debug_state()
        game.draw("P2")
        game.play_combo("P0", ["nope", "nothing"])
        game.provide_favor_card("P1")
        assert game.get_debug_state() == before

    def test_salvage_returns_discarded_card(self, make_game):
        engine = make_game(3, expansion_enabled=True)
        lost = engine.debug_give_card("P1", CardType.SEE_FUTURE)
        engine.state.get_player("P1").hand.remove(lost)
        engine.state.discard_pile.append(lost)
        salvage = engine.debug_give_card("P0", CardType.SALVAGE)

        result = engine.play_card("P0", salvage.id)

        assert result.effect_type == "SALVAGE"
        assert result.effect["card_id"] == lost.id
        assert engine.state.get_player("P0").find_card(lost.id) is lost
        assert engine.state.discard_pile == [salvage]

    def test_salvage_reburies_bomb(self, make_game):
        engine = make_game(3, expansion_enabled=True)
        bomb = Card(id=engine.state.next_card_id(), type=CardType.BOMB)
        engine.state.discard_pile.append(bomb)
        engine.state.total_cards += 1
        salvage = engine.debug_give_card("P0", CardType.SALVAGE)

        result = engine.play_card("P0", salvage.id)

        assert result.effect_type == "SALVAGE_REBURIED"
        assert bomb in engine.state.draw_pile
        assert engine.state.get_player("P0").find_card(bomb.id) is None

    def test_salvage_with_empty_discard(self, make_game):
        engine = make_game(3, expansion_enabled=True)
        salvage = engine.debug_give_card("P0", CardType.SALVAGE)
        result = engine.play_card("P0", salvage.id)
        assert result.effect_type == "NOTHING_TO_SALVAGE"


class TestIntegrity:
    """Determinism, conservation and halting."""

    def test_same_seed_same_game(self, make_game):
        a = make_game(4, seed="replay")
        b = make_game(4, seed="replay")
        for _ in range(6):
            a.draw(a.current_player.id)
            b.draw(b.current_player.id)
        assert _comparable(a) == _comparable(b)

    def test_same_seed_same_state_at_every_step(self, make_game):
        """Every random consumer replays identically for the same calls."""
        a = make_game(4, seed="mixed", expansion_enabled=True, imploding_enabled=True)
        b = make_game(4, seed="mixed", expansion_enabled=True, imploding_enabled=True)
        assert _comparable(a) == _comparable(b)

        for step in MIXED_SCRIPT:
            result_a = step(a)
            result_b = step(b)
            assert _comparable(a) == _comparable(b)
            if hasattr(result_a, "to_dict"):
                assert result_a.to_dict() == result_b.to_dict()

        assert a.state.game_log == b.state.game_log

    def test_different_seed_different_deck(self, make_game):
        a = make_game(4, seed="one").get_debug_state()["draw_pile"]
        b = make_game(4, seed="two").get_debug_state()["draw_pile"]
        assert a != b

    def test_conservation_through_play(self, make_game):
        engine = make_game(4, seed="conserve", expansion_enabled=True, imploding_enabled=True)
        for _ in range(30):
            if engine.state.finished or not engine.state.draw_pile:
                break
            engine.draw(engine.current_player.id)
            assert engine.state.card_count() == engine.state.total_cards
        assert validate_deck_integrity(engine.state)

    def test_duplicated_card_halts_game(self, game, helpers):
        """A card held twice is caught even when the count still matches."""
        player = game.state.get_player("P0")
        player.hand[1] = player.hand[0]
        helpers.put_safe_top(game)

        with pytest.raises(InvariantViolation):
            game.draw("P0")

        assert game.state.halted

    def test_invariant_violation_halts_game(self, game, helpers):
        helpers.put_safe_top(game)
        game.state.total_cards += 1

        with pytest.raises(InvariantViolation):
            game.draw("P0")

        assert game.state.halted
        result = game.draw(game.current_player.id)
        assert not result.success
        assert result.code == "GAME_HALTED"


    def test_advance_turn_on_halted_game(self, game):
        game.state.halted = True
        assert game.advance_turn().code == "GAME_HALTED"
        assert game.current_player.id == "P0"


class TestAdvanceTurn:
    """Passing the turn without a draw."""

    def test_moves_to_next_alive_player(self, game):
        game.state.get_player("P1").alive = False

        result = game.advance_turn()

        assert result.success
        assert game.current_player.id == "P2"

    def test_refused_while_action_pending(self, game):
        skip = game.debug_give_card("P0", CardType.SKIP)
        game.play_card("P0", skip.id)

        assert game.advance_turn().code == "EFFECT_PENDING"
        assert game.current_player.id == "P0"
        game.force_resolve()
        assert game.current_player.id == "P1"

    def test_refused_while_favor_pending(self, game):
        favor = game.debug_give_card("P0", CardType.FAVOR)
        game.play_card("P0", favor.id, {"target_id": "P1"})
        game.force_resolve()

        assert game.advance_turn().code == "FAVOR_PENDING"
        assert game.current_player.id == "P0"

    def test_refused_before_start(self):
        engine = GameEngine(create_options(seed="empty"))
        assert engine.advance_turn().code == "NOT_STARTED"
        engine.add_player("A", "Alice")
        assert engine.advance_turn().code == "NOT_STARTED"
