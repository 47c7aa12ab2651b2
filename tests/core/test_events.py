"""Tests for the game event emitter."""

from core.game.events import EventEmitter, EventType, GameEvent


class TestEventEmitter:
    def test_typed_and_catch_all_handlers(self):
        emitter = EventEmitter()
        typed, everything = [], []
        emitter.subscribe(typed.append, EventType.GAME_WON)
        emitter.subscribe(everything.append)

        emitter.emit_new(EventType.CARDS_DRAWN, cards=["hearts-A"])
        emitter.emit_new(EventType.GAME_WON)

        assert [e.event_type for e in typed] == [EventType.GAME_WON]
        assert [e.event_type for e in everything] == [EventType.CARDS_DRAWN, EventType.GAME_WON]

    def test_typed_handlers_run_first(self):
        emitter = EventEmitter()
        order = []
        emitter.subscribe(lambda e: order.append("all"))
        emitter.subscribe(lambda e: order.append("typed"), EventType.CARDS_MOVED)

        emitter.emit_new(EventType.CARDS_MOVED)
        assert order == ["typed", "all"]

    def test_unsubscribe(self):
        emitter = EventEmitter()
        seen = []
        emitter.subscribe(seen.append, EventType.GAME_STARTED)
        emitter.unsubscribe(seen.append, EventType.GAME_STARTED)
        emitter.unsubscribe(seen.append)  # never subscribed; ignored

        emitter.emit_new(EventType.GAME_STARTED)
        assert seen == []

    def test_history_is_bounded(self):
        emitter = EventEmitter(history_limit=3)
        for _ in range(5):
            emitter.emit_new(EventType.CARDS_DRAWN)
        emitter.emit_new(EventType.GAME_WON)

        history = emitter.history
        assert len(history) == 3
        assert history[-1].event_type == EventType.GAME_WON

    def test_history_is_a_copy(self):
        emitter = EventEmitter()
        emitter.emit_new(EventType.GAME_STARTED)
        emitter.history.clear()
        assert len(emitter.history) == 1

        emitter.clear_history()
        assert emitter.history == []

    def test_event_str(self):
        event = GameEvent(EventType.CARD_REVEALED, {"card": "clubs-2"})
        assert str(event) == "CARD_REVEALED: {'card': 'clubs-2'}"
