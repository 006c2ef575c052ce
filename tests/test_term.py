"""Tests for the Term aggregate and engine-level operations."""

import threading

import pytest

from karma import Term
from karma.models import User


class TestIdentity:

    def test_terms_equal_on_normalized_name(self, engine):
        assert engine.term("Foo ") == engine.term("foo")
        assert hash(engine.term("Foo ")) == hash(engine.term("foo"))

    def test_terms_usable_as_keys(self, engine):
        seen = {engine.term("foo"), engine.term("FOO"), engine.term("bar")}
        assert {t.name for t in seen} == {"foo", "bar"}

    def test_normalize_can_be_skipped(self, engine):
        assert engine.term("Foo", normalize=False).name == "Foo"

    def test_str_is_name(self, engine):
        assert str(engine.term("foo")) == "foo"


class TestScoring:

    def test_unscored_term(self, engine):
        term = engine.term("never")

        assert term.own_score == 0
        assert term.total_score == 0
        assert term.check() == "never: 0"

    def test_increment_and_decrement(self, engine, alice, bob):
        term = engine.term("foo")

        first = term.increment(alice)
        second = term.increment(bob)

        assert first.applied and second.applied
        assert second.score == 2
        assert second.text == "foo: 2"
        assert engine.term("foo").decrement(User(id="U3")).score == 1

    def test_final_score_is_sum_of_deltas(self, make_engine):
        engine = make_engine(cooldown=None)
        user = User(id="U1")
        deltas = [1, 1, -1, 1, -1, -1, -1, 1, 1, 1]

        for delta in deltas:
            engine.term("foo").modify(user, delta)

        assert engine.term("foo").own_score == sum(deltas)

    def test_instance_sees_its_own_mutation(self, engine, alice):
        term = engine.term("foo")
        assert term.own_score == 0

        term.increment(alice)

        assert term.own_score == 1

    def test_concurrent_increments_all_count(self, make_engine):
        """Increments from many threads sum exactly; none are lost."""
        engine = make_engine(cooldown=None)
        threads, per_thread = 8, 200

        def worker(n):
            user = User(id=f"U{n}")
            for _ in range(per_thread):
                engine.term("foo").increment(user)

        pool = [threading.Thread(target=worker, args=(n,)) for n in range(threads)]
        for thread in pool:
            thread.start()
        for thread in pool:
            thread.join()

        assert engine.term("foo").own_score == threads * per_thread
        assert sum(count for _, count in engine.term("foo").modified()) == threads * per_thread

    def test_modify_reuses_incremented_score(self, make_engine, backend, alice, monkeypatch):
        """The new score comes from the increment, not a second read."""
        engine = make_engine(link_karma_threshold=None, cooldown=None)
        engine.scores.increment("foo", 4)

        reads = []
        original = backend.get_score

        def counting_get_score(key, member):
            reads.append((key, member))
            return original(key, member)

        monkeypatch.setattr(backend, "get_score", counting_get_score)

        result = engine.term("foo").increment(alice)

        assert result.score == 5
        assert result.text == "foo: 5"
        assert reads == []


class TestCooldown:

    def test_same_user_blocked(self, engine, alice):
        engine.term("foo").increment(alice)

        result = engine.term("foo").increment(alice)

        assert not result.applied
        assert result.cooling_down
        assert 0 < result.ttl <= 300
        assert result.message.key == "cooling_down"
        assert result.message.params == {"term": "foo", "ttl": result.ttl, "count": result.ttl}
        assert engine.term("foo").own_score == 1

    def test_blocked_message_renders(self, engine, alice):
        engine.term("foo").increment(alice)
        result = engine.term("foo").decrement(alice)

        assert result.message.render(engine.translate) == "You cannot modify foo for another 300 seconds."

    def test_different_user_allowed(self, engine, alice, bob):
        engine.term("foo").increment(alice)

        assert engine.term("foo").increment(bob).applied

    def test_different_term_allowed(self, engine, alice):
        engine.term("foo").increment(alice)

        assert engine.term("bar").increment(alice).applied

    def test_allowed_after_expiry(self, engine, alice, clock):
        engine.term("foo").increment(alice)
        clock.advance(301)

        assert engine.term("foo").increment(alice).applied
        assert engine.term("foo").own_score == 2

    def test_blocked_attempt_is_not_counted(self, engine, alice):
        engine.term("foo").increment(alice)
        engine.term("foo").increment(alice)

        assert engine.term("foo").modified() == [("U1", 1)]

    def test_disabled_cooldown(self, make_engine, alice):
        engine = make_engine(cooldown=None)

        engine.term("foo").increment(alice)
        assert engine.term("foo").increment(alice).applied


class TestDecayLog:

    def test_actions_recorded_when_enabled(self, make_engine, alice):
        engine = make_engine(decay=True, decay_interval=60)

        engine.term("foo").increment(alice)

        entries = engine.actions.entries()
        assert [(a.term, a.user_id, a.delta) for a in entries] == [("foo", "U1", 1)]

    def test_no_actions_when_disabled(self, engine, alice):
        engine.term("foo").increment(alice)

        assert engine.actions.entries() == []

    def test_no_actions_when_interval_zero(self, make_engine, alice):
        engine = make_engine(decay=True, decay_interval=0)
        engine.term("foo").increment(alice)

        assert engine.actions.entries() == []

    def test_cooled_down_attempt_not_logged(self, make_engine, alice):
        engine = make_engine(decay=True)
        engine.term("foo").increment(alice)
        engine.term("foo").increment(alice)

        assert len(engine.actions.entries()) == 1


class TestLinking:

    def _score(self, engine, name, value):
        engine.scores.increment(name, value)

    def test_end_to_end(self, engine, alice):
        foo = engine.term("foo")
        foo.increment(alice)
        assert foo.own_score == 1
        assert foo.check(True) == "foo: 1"

        self._score(engine, "bar", 2)
        outcome = engine.term("foo").link(engine.term("bar"))

        assert outcome.linked
        assert engine.term("foo").check(True) == "foo: 3 (1), linked to: bar: 2"

    def test_total_is_one_hop(self, engine):
        self._score(engine, "a", 1)
        self._score(engine, "b", 2)
        self._score(engine, "c", 4)
        engine.term("a").link(engine.term("b"))
        engine.term("b").link(engine.term("c"))

        assert engine.term("a").total_score == 3
        assert engine.term("b").total_score == 6

    def test_threshold_refuses(self, make_engine):
        engine = make_engine(link_karma_threshold=5)
        self._score(engine, "a", 3)
        self._score(engine, "b", 50)

        outcome = engine.term("a").link(engine.term("b"))

        assert outcome.refused
        assert outcome.threshold == 5
        assert engine.term("a").links == []
        assert engine.link_graph.linked_to("b") == []

    def test_threshold_satisfied(self, make_engine):
        engine = make_engine(link_karma_threshold=5)
        self._score(engine, "a", -6)
        self._score(engine, "b", 5)

        assert engine.term("a").link(engine.term("b")).linked

    def test_zero_links_hidden_unless_show_all(self, engine):
        self._score(engine, "foo", 1)
        self._score(engine, "bar", 2)
        engine.term("foo").link(engine.term("bar"))
        engine.term("foo").link(engine.term("zero"))

        foo = engine.term("foo")
        assert foo.links_with_scores() == {"bar": 2, "zero": 0}
        assert foo.links_with_non_zero_scores() == {"bar": 2}
        assert foo.check(True) == "foo: 3 (1), linked to: bar: 2, zero: 0"
        assert foo.check(False) == "foo: 3 (1), linked to: bar: 2"

    def test_all_zero_links_not_shown(self, engine):
        self._score(engine, "foo", 1)
        engine.term("foo").link(engine.term("zero"))

        assert engine.term("foo").check(False) == "foo: 1"

    def test_modify_confirmation_includes_links(self, engine, alice):
        self._score(engine, "bar", 2)
        engine.term("foo").link(engine.term("bar"))

        result = engine.term("foo").increment(alice)

        assert result.text == "foo: 3 (1), linked to: bar: 2"

    def test_unlink(self, engine):
        engine.term("a").link(engine.term("b"))

        assert engine.term("a").unlink(engine.term("b")) is True
        assert engine.term("a").links == []
        assert engine.link_graph.linked_to("b") == []

    def test_linked_terms_built_once(self, engine):
        engine.term("a").link(engine.term("b"))
        term = engine.term("a")

        assert term.linked_terms is term.linked_terms
        assert isinstance(term.linked_terms["b"], Term)

    def test_snapshot_is_replaced_not_mutated(self, engine, alice):
        term = engine.term("foo")
        before = term.snapshot

        term.increment(alice)

        assert before.own_score == 0
        assert term.snapshot is not before
        assert term.snapshot.own_score == 1

    def test_custom_translator_for_linked_to(self, backend, config, clock):
        from karma import KarmaEngine

        engine = KarmaEngine(
            backend,
            config,
            clock=clock,
            translate=lambda key, **params: "verknüpft mit" if key == "linked_to" else key,
        )
        engine.scores.increment("b", 1)
        engine.term("a").link(engine.term("b"))

        assert engine.term("a").check() == "a: 1 (0), verknüpft mit: b: 1"


class TestDelete:

    def test_delete_removes_everything(self, engine, alice):
        engine.term("a").increment(alice)
        engine.term("a").link(engine.term("b"))
        engine.term("a").link(engine.term("c"))
        engine.term("b").link(engine.term("a"))
        engine.term("c").link(engine.term("a"))

        engine.term("a").delete()

        assert engine.term("a").own_score == 0
        assert engine.term("a").modified() == []
        assert engine.term("a").links == []
        assert engine.term("b").links == []
        assert engine.term("c").links == []
        assert engine.link_graph.linked_to("b") == []
        assert engine.link_graph.linked_to("c") == []
        assert engine.best_terms(5) == []

    def test_delete_unknown_term(self, engine):
        engine.term("ghost").delete()
        engine.term("ghost").delete()

        assert engine.term("ghost").own_score == 0

    def test_delete_keeps_cooldown(self, engine, alice):
        engine.term("a").increment(alice)
        engine.term("a").delete()

        assert not engine.term("a").increment(alice).applied


class TestModified:

    def test_most_active_first(self, make_engine, alice, bob):
        engine = make_engine(cooldown=None)
        engine.term("foo").increment(alice)
        engine.term("foo").increment(bob)
        engine.term("foo").decrement(bob)

        assert engine.term("foo").modified() == [("U2", 2), ("U1", 1)]

    def test_users_resolved_through_lookup(self, backend, clock, alice):
        from karma import KarmaConfig, KarmaEngine

        users = {"U1": alice}
        engine = KarmaEngine(backend, KarmaConfig(cooldown=None), find_user=users.get, clock=clock)
        engine.term("foo").increment(alice)

        assert engine.term("foo").modified() == [(alice, 1)]


class TestLeaderboards:

    def test_best_and_worst(self, engine):
        for name, score in (("a", 5), ("b", -3), ("c", 1)):
            engine.scores.increment(name, score)

        assert engine.best_terms() == [("a", 5), ("c", 1), ("b", -3)]
        assert engine.worst_terms(1) == [("b", -3)]

    @pytest.mark.parametrize("requested", [24, 25, 100])
    def test_capped(self, engine, requested):
        for i in range(30):
            engine.scores.increment(f"t{i}", i + 1)

        best = engine.best_terms(requested)

        assert len(best) == 24
        assert [s for _, s in best] == sorted((s for _, s in best), reverse=True)
