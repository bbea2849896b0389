"""
Tests for the host CMS collaborators.
"""
import pytest

from multisite.cms import AdminUI, ConfigStore, Page, PageTree, ResponseCache, load_data


@pytest.fixture
def tree(data):
    return PageTree.from_records(data["pages"])


class TestPageTree:

    def test_root_is_first_parentless_page(self, tree):
        assert tree.root().title == "Home"

    def test_find_by_url(self, tree):
        assert tree.find_by_url("/about/").title == "About"
        assert tree.find_by_url("/").title == "Home"
        assert tree.find_by_url("/missing") is None

    def test_url_for(self, tree):
        assert tree.url_for(tree.get(2)) == "/about"
        assert tree.url_for(tree.get(1)) == "/"

    def test_tree(self, tree):
        node = tree.tree(tree.root())
        assert [child["title"] for child in node["children"]] == ["About"]

    def test_empty(self):
        assert PageTree().find_by_url("/") is None

    def test_draft_is_not_published(self):
        assert not Page(id=1, title="Draft", slug="/", status="draft").published


class TestResponseCache:

    def test_store_and_get(self, make_request):
        cache = ResponseCache()
        cache.store(make_request("/about"), "<p>about</p>")
        assert cache.get(make_request("/about")).body == "<p>about</p>"
        assert cache.get(make_request("/other")) is None

    def test_expired_entries_are_dropped(self, make_request):
        cache = ResponseCache(ttl_seconds=-1)
        cache.store(make_request("/about"), "<p>about</p>")
        assert cache.get(make_request("/about")) is None
        assert cache.get_entry_count() == 0

    def test_clear(self, make_request):
        cache = ResponseCache()
        cache.store(make_request("/about"), "<p>about</p>")
        cache.clear()
        assert cache.keys() == []


class TestConfigStore:

    def test_missing_table(self):
        config = ConfigStore()
        assert not config.table_exists()
        with pytest.raises(RuntimeError):
            config["dev.host"] = "preview"

    def test_set_and_get(self):
        config = ConfigStore({})
        config["dev.host"] = "preview"
        assert config["dev.host"] == "preview"
        assert config.to_dict() == {"dev.host": "preview"}


class TestAdminUI:

    def test_tabs(self):
        admin = AdminUI()
        admin.tabs.add("Sites", "/admin/sites", visibility=["admin"])
        assert [tab.name for tab in admin.tabs.visible_to("admin")] == ["Pages", "Sites"]
        assert [tab.name for tab in admin.tabs.visible_to("editor")] == ["Pages"]

    def test_duplicate_tab(self):
        admin = AdminUI()
        with pytest.raises(ValueError):
            admin.tabs.add("Pages", "/elsewhere")

    def test_missing_partial_is_skipped(self):
        admin = AdminUI()
        admin.pages.index.add("top", "nowhere")
        admin.register_partial("hello", lambda context: "<p>hello</p>")
        admin.pages.index.add("top", "hello")
        assert admin.render_region(admin.pages.index, "top", {}) == "<p>hello</p>"


def test_load_data(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("pages:\n  - {id: 1, title: Home, slug: /}\n")
    assert load_data(path) == {"pages": [{"id": 1, "title": "Home", "slug": "/"}]}
    assert load_data(tmp_path / "missing.yaml") is None
