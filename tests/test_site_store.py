"""
Tests for SiteStore.
"""
import pytest

from multisite.multi_site.store import DuplicateDomainError, Site, SiteError, SiteStore
from multisite.resourceful import RecordInvalid


@pytest.fixture
def store(data):
    return SiteStore.from_records(data["sites"])


def names(store):
    return [site.name for site in store.all()]


def test_loaded_in_order_with_ids(store):
    assert [(s.id, s.name, s.position) for s in store.all()] == [(1, "Main", 1), (2, "Docs", 2)]


def test_explicit_positions_are_respected():
    store = SiteStore.from_records([
        {"name": "B", "domain": "b", "position": 2},
        {"name": "A", "domain": "a", "position": 1},
    ])
    assert names(store) == ["A", "B"]


class TestFindForHost:

    def test_base_domain(self, store):
        assert store.find_for_host("docs.example.com").name == "Docs"

    def test_domain_pattern(self, store):
        assert store.find_for_host("www.example.com").name == "Main"

    def test_port_and_case_are_ignored(self, store):
        assert store.find_for_host("DOCS.Example.com:8000").name == "Docs"

    def test_unknown_host_falls_back_to_first_site(self, store):
        assert store.find_for_host("elsewhere.org").name == "Main"

    def test_no_sites(self):
        assert SiteStore().find_for_host("example.com") is None


class TestSave:

    def test_new_site_goes_last(self, store):
        site = store.save(store.build({"name": "Blog", "domain": r"blog\.example\.com"}))
        assert (site.id, site.position) == (3, 3)
        assert store.find("3") is site

    def test_blank_name(self, store):
        with pytest.raises(RecordInvalid) as e:
            store.save(store.build({"domain": "blank.example.com"}))
        assert "name" in e.value.errors
        assert len(store) == 2

    def test_invalid_pattern(self, store):
        with pytest.raises(RecordInvalid) as e:
            store.save(store.build({"name": "Broken", "domain": "(unclosed"}))
        assert "domain" in e.value.errors

    def test_duplicate_domain(self, store):
        with pytest.raises(DuplicateDomainError) as e:
            store.save(store.build({"name": "Again", "domain": r"DOCS\.example\.com"}))
        assert isinstance(e.value, RecordInvalid)
        assert "domain" in e.value.errors

    def test_homepage_id_is_coerced(self, store):
        site = store.save(store.build({"name": "Blog", "domain": "blog", "homepage_id": "10"}))
        assert site.homepage_id == 10

    def test_update(self, store):
        site = store.find(1)
        store.update(site, {"name": "Primary"})
        assert store.find(1).name == "Primary"

    def test_failed_update_leaves_site_untouched(self, store):
        site = store.find(1)
        with pytest.raises(DuplicateDomainError):
            store.update(site, {"name": "Clash", "domain": r"docs\.example\.com"})
        assert (site.name, site.domain) == ("Main", r"(www\.)?example\.com")


class TestOrdering:

    @pytest.fixture
    def store(self):
        return SiteStore.from_records(
            {"name": name, "domain": name.lower()} for name in ("A", "B", "C", "D")
        )

    def test_move_higher(self, store):
        store.move_higher(store.find(3))
        assert names(store) == ["A", "C", "B", "D"]

    def test_move_higher_at_top_is_a_no_op(self, store):
        store.move_higher(store.find(1))
        assert names(store) == ["A", "B", "C", "D"]

    def test_move_lower(self, store):
        store.move_lower(store.find(1))
        assert names(store) == ["B", "A", "C", "D"]

    def test_move_lower_at_bottom_is_a_no_op(self, store):
        store.move_lower(store.find(4))
        assert names(store) == ["A", "B", "C", "D"]

    def test_move_to_top(self, store):
        store.move_to_top(store.find(3))
        assert names(store) == ["C", "A", "B", "D"]

    def test_move_to_bottom(self, store):
        store.move_to_bottom(store.find(2))
        assert names(store) == ["A", "C", "D", "B"]
        assert [s.position for s in store.all()] == [1, 2, 3, 4]

    def test_destroy_closes_the_gap(self, store):
        assert store.destroy(store.find(2))
        assert [(s.name, s.position) for s in store.all()] == [("A", 1), ("C", 2), ("D", 3)]

    def test_destroy_twice(self, store):
        site = store.find(2)
        store.destroy(site)
        assert not store.destroy(site)

    def test_moving_a_removed_site(self, store):
        site = store.find(2)
        store.destroy(site)
        with pytest.raises(SiteError):
            store.move_to_top(site)


def test_site_matches_base_domain_without_pattern():
    site = Site(id=1, name="Main", domain="nothing-matches-this", base_domain="example.com")
    assert site.matches("example.com")
    assert not site.matches("example.org")
