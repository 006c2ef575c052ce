"""Tests for the bidirectional link graph."""

from karma.links import LinkGraph


class TestLink:

    def test_link_writes_both_directions(self, backend):
        graph = LinkGraph(backend)

        outcome = graph.link("a", "b", 0, 0)

        assert outcome.linked
        assert outcome.created
        assert not outcome.refused
        assert graph.links_of("a") == ["b"]
        assert graph.linked_to("b") == ["a"]

    def test_relink_is_idempotent(self, backend):
        graph = LinkGraph(backend)
        graph.link("a", "b", 0, 0)

        again = graph.link("a", "b", 0, 0)

        assert again.linked
        assert not again.created
        assert graph.links_of("a") == ["b"]
        assert graph.linked_to("b") == ["a"]

    def test_link_is_directed_in_storage(self, backend):
        graph = LinkGraph(backend)
        graph.link("a", "b", 0, 0)

        assert graph.links_of("b") == []
        assert graph.linked_to("a") == []


class TestThreshold:

    def test_low_source_score_refused(self, backend):
        graph = LinkGraph(backend, threshold=5)

        outcome = graph.link("a", "b", 3, 100)

        assert outcome.refused
        assert not outcome.linked
        assert outcome.threshold == 5
        assert graph.links_of("a") == []
        assert graph.linked_to("b") == []

    def test_low_target_score_refused(self, backend):
        graph = LinkGraph(backend, threshold=5)

        assert graph.link("a", "b", 9, 4).refused

    def test_negative_scores_use_absolute_value(self, backend):
        graph = LinkGraph(backend, threshold=5)

        assert graph.link("a", "b", -5, -7).linked

    def test_negative_threshold_uses_absolute_value(self, backend):
        graph = LinkGraph(backend, threshold=-5)

        assert graph.threshold == 5
        assert graph.link("a", "b", 4, 9).refused
        assert graph.link("a", "b", 5, 9).linked

    def test_no_threshold_links_anything(self, backend):
        assert LinkGraph(backend).link("a", "b", 0, 0).linked


class TestUnlink:

    def test_unlink_removes_both_directions(self, backend):
        graph = LinkGraph(backend)
        graph.link("a", "b", 0, 0)

        assert graph.unlink("a", "b") is True
        assert graph.links_of("a") == []
        assert graph.linked_to("b") == []

    def test_unlink_missing_link(self, backend):
        assert LinkGraph(backend).unlink("a", "b") is False

    def test_unlink_wrong_direction(self, backend):
        graph = LinkGraph(backend)
        graph.link("a", "b", 0, 0)

        assert graph.unlink("b", "a") is False
        assert graph.links_of("a") == ["b"]


class TestDeleteAllLinks:

    def test_removes_incoming_links(self, backend):
        graph = LinkGraph(backend)
        graph.link("b", "a", 0, 0)
        graph.link("c", "a", 0, 0)

        graph.delete_all_links_for("a")

        assert graph.links_of("b") == []
        assert graph.links_of("c") == []
        assert graph.linked_to("a") == []

    def test_removes_outgoing_links_and_reverse_entries(self, backend):
        graph = LinkGraph(backend)
        graph.link("a", "b", 0, 0)
        graph.link("a", "c", 0, 0)

        graph.delete_all_links_for("a")

        assert graph.links_of("a") == []
        assert graph.linked_to("b") == []
        assert graph.linked_to("c") == []

    def test_leaves_unrelated_links(self, backend):
        graph = LinkGraph(backend)
        graph.link("a", "b", 0, 0)
        graph.link("b", "c", 0, 0)

        graph.delete_all_links_for("a")

        assert graph.links_of("b") == ["c"]
        assert graph.linked_to("c") == ["b"]

    def test_unknown_term_is_noop(self, backend):
        LinkGraph(backend).delete_all_links_for("ghost")
