"""Tests for the rule store."""

import threading

from mockmatch.models import Rule
from mockmatch.store import RuleStore


class TestAdd:
  def test_starts_empty(self, store: RuleStore) -> None:
    assert store.get_all() == []
    assert len(store) == 0

  def test_add_rule(self, store: RuleStore, sample_rule: Rule) -> None:
    stored = store.add(sample_rule)

    assert stored is sample_rule
    assert store.get_all() == [sample_rule]

  def test_add_mapping(self, store: RuleStore) -> None:
    stored = store.add({
      "route": "/foo/bar",
      "responseCode": 404,
      "responseBody": "foo",
    })

    assert isinstance(stored, Rule)
    assert stored.route == "/foo/bar"
    assert stored.response_code == 404
    assert stored.response_body == "foo"

  def test_tolerates_empty_rules(self, store: RuleStore) -> None:
    store.add({})
    store.add({})

    assert len(store.get_all()) == 2
    assert store.get_all()[0].response_code is None

  def test_preserves_insertion_order(self, store: RuleStore) -> None:
    routes = ["/c", "/a", "/b"]
    for route in routes:
      store.add({"route": route})

    assert [r.route for r in store.get_all()] == routes

  def test_initial_rules(self) -> None:
    store = RuleStore([{"route": "/a"}, Rule(route="/b")])

    assert [r.route for r in store.get_all()] == ["/a", "/b"]


class TestGetAll:
  def test_returns_copy(self, store: RuleStore, sample_rule: Rule) -> None:
    store.add(sample_rule)

    snapshot = store.get_all()
    snapshot.clear()

    assert store.get_all() == [sample_rule]


class TestFlush:
  def test_removes_all_rules(self, store: RuleStore) -> None:
    store.add({})
    store.add({})

    store.flush()

    assert store.get_all() == []

  def test_resets_occurrences(self, store: RuleStore) -> None:
    store.add({"route": "/match/me", "responseCode": 200})
    store.match("/match/me")
    store.match("/match/me")
    assert store.occurrences("/match/me") == 2

    store.flush()

    assert store.occurrences("/match/me") == 0

  def test_at_rules_fire_again_after_flush(self, store: RuleStore) -> None:
    rule = Rule(route="/match/me", at=1, response_code=201)
    store.add(rule)
    assert store.match("/match/me") is rule
    assert store.match("/match/me") is rule

    store.flush()
    store.add({"route": "/match/me", "responseCode": 200})
    store.add(rule)

    assert store.match("/match/me").response_code == 201


class TestOccurrences:
  def test_counts_only_matching_routes(self, store: RuleStore) -> None:
    store.add({"route": "/a"})
    store.add({"route": "/b"})

    store.match("/a")
    store.match("/a")

    assert store.occurrences("/a") == 2
    assert store.occurrences("/b") == 0

  def test_counts_once_per_request_per_route(self, store: RuleStore) -> None:
    store.add({"route": "/a", "responseCode": 1})
    store.add({"route": "/a", "responseCode": 2})
    store.add({"route": "/a", "at": 5})

    store.match("/a")

    assert store.occurrences("/a") == 1

  def test_counts_even_when_constraints_fail(self, store: RuleStore) -> None:
    store.add({"route": "/a", "payload": {"id": 1}})

    assert store.match("/a") is None
    assert store.occurrences("/a") == 1

  def test_independent_stores(self) -> None:
    first = RuleStore([{"route": "/a"}])
    second = RuleStore([{"route": "/a"}])

    first.match("/a")

    assert first.occurrences("/a") == 1
    assert second.occurrences("/a") == 0


class TestConcurrency:
  def test_parallel_matches_count_every_request(self, store: RuleStore) -> None:
    store.add({"route": "/a", "responseCode": 200})

    def worker() -> None:
      for _ in range(50):
        store.match("/a")

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
      thread.start()
    for thread in threads:
      thread.join()

    assert store.occurrences("/a") == 200


class TestMatchAndRank:
  def test_match_returns_top_ranked_rule(self) -> None:
    rules = [
      {"route": "/a", "responseCode": 200},
      {"route": "/a", "queryParams": {"q": "1"}, "responseCode": 201},
      {"route": "/a", "at": 3, "responseCode": 204},
    ]
    matching = RuleStore(rules)
    ranking = RuleStore(rules)

    for _ in range(4):
      ranked = ranking.rank("/a?q=1")
      assert matching.match("/a?q=1").response_code == ranked[0].rule.response_code

    assert matching.occurrences("/a") == ranking.occurrences("/a") == 4
