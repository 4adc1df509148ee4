"""Tests for bucket classification."""

from trello_collate.bucketing.classifier import BucketClassifier
from trello_collate.core.types import FALLBACK_BUCKET


def _names(cards):
    return [card.name for card in cards]


class TestBucketAssignment:
    """Tests for BucketClassifier.assign."""

    def test_untagged_card_goes_to_fallback(self, service):
        """Test that an untagged card lands in the fallback bucket."""
        board = service.add_board("B")
        card = service.add_card(service.add_list(board, "To Do"), "Plain task")
        buckets = {}

        added = BucketClassifier(service, []).assign(card, {}, buckets)

        assert added == [FALLBACK_BUCKET]
        assert buckets == {FALLBACK_BUCKET: [card]}

    def test_fan_out(self, service, scenario):
        """Test that a card tagged [foo][bar] joins both buckets."""
        card = service.add_card(scenario["todo"], "[foo][bar] Both")
        rollups = {"foo": scenario["foo"], "bar": scenario["foo"]}
        buckets = {}

        BucketClassifier(service, []).assign(card, rollups, buckets)

        assert buckets["foo"] == [card]
        assert buckets["bar"] == [card]
        assert FALLBACK_BUCKET not in buckets

    def test_unmatched_tags_also_go_to_fallback(self, service, scenario):
        """Test that a card whose tags have no rollup card is in fallback and its tag buckets."""
        card = service.add_card(scenario["todo"], "[mystery] Task")
        buckets = {}

        BucketClassifier(service, []).assign(card, {"foo": scenario["foo"]}, buckets)

        assert buckets["mystery"] == [card]
        assert buckets[FALLBACK_BUCKET] == [card]

    def test_one_matching_tag_keeps_card_out_of_fallback(self, service, scenario):
        """Test that any matching tag is enough to skip the fallback bucket."""
        card = service.add_card(scenario["todo"], "[foo][mystery] Task")
        buckets = {}

        BucketClassifier(service, []).assign(card, {"foo": scenario["foo"]}, buckets)

        assert set(buckets) == {"foo", "mystery"}

    def test_none_tag_without_rollup_added_once(self, service, scenario):
        """Test that "[none]" with no rollup card does not double-add the card."""
        card = service.add_card(scenario["todo"], "[none] Task")
        buckets = {}

        added = BucketClassifier(service, []).assign(card, {}, buckets)

        assert added == [FALLBACK_BUCKET]
        assert buckets[FALLBACK_BUCKET] == [card]


class TestBucketClassifier:
    """Tests for BucketClassifier.classify."""

    def test_columns_in_configured_order(self, service):
        """Test that members follow column order, then card order."""
        board = service.add_board("B")
        doing = service.add_list(board, "Doing")
        todo = service.add_list(board, "To Do")
        service.add_card(doing, "[x] D1")
        service.add_card(todo, "[x] T1")
        service.add_card(todo, "[x] T2")
        lists = {"doing": doing, "to do": todo}

        buckets = BucketClassifier(service, ["To Do", "Doing"]).classify(lists, {})

        assert _names(buckets["x"]) == ["[x] T1", "[x] T2", "[x] D1"]

    def test_missing_column_skipped(self, service):
        """Test that a configured column absent from the board is ignored."""
        board = service.add_board("B")
        todo = service.add_list(board, "To Do")
        service.add_card(todo, "Task")

        classifier = BucketClassifier(service, ["Archive", "To Do"])
        buckets = classifier.classify({"to do": todo}, {})

        assert _names(buckets[FALLBACK_BUCKET]) == ["Task"]
        assert ("fetch_cards", todo.id) in service.calls
        assert len([c for c in service.calls if c[0] == "fetch_cards"]) == 1

    def test_column_names_case_insensitive(self, service):
        """Test that configured column names match regardless of case."""
        board = service.add_board("B")
        todo = service.add_list(board, "To Do")
        service.add_card(todo, "[a] Task")

        buckets = BucketClassifier(service, ["TO DO"]).classify({"to do": todo}, {})

        assert "a" in buckets

    def test_unconfigured_lists_ignored(self, service):
        """Test that only configured columns are scanned."""
        board = service.add_board("B")
        todo = service.add_list(board, "To Do")
        done = service.add_list(board, "Done")
        service.add_card(done, "[a] Finished")

        buckets = BucketClassifier(service, ["To Do"]).classify({"to do": todo, "done": done}, {})

        assert buckets == {}
