"""
HTTP tests for the admin sites resource and site-scoped page serving.
"""
from xml.etree import ElementTree

import yaml
from fastapi.testclient import TestClient

from multisite.config import Settings
from multisite.main import create_app

JSON = {"accept": "application/json"}


def site_names(client):
    return [site["name"] for site in client.get("/admin/sites.json").json()]


class TestAdminSites:

    def test_index_json(self, client):
        response = client.get("/admin/sites.json")
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        assert response.json()[0] == {
            "id": 1,
            "name": "Main",
            "domain": r"(www\.)?example\.com",
            "base_domain": "example.com",
            "homepage_id": 1,
            "position": 1,
        }

    def test_index_yaml_from_accept_header(self, client):
        response = client.get("/admin/sites", headers={"accept": "application/x-yaml"})
        assert response.headers["content-type"].startswith("application/x-yaml")
        assert [site["name"] for site in yaml.safe_load(response.text)] == ["Main", "Docs"]

    def test_index_html(self, client):
        response = client.get("/admin/sites")
        assert response.status_code == 200
        assert 'href="/admin/sites/2"' in response.text

    def test_show_xml(self, client):
        response = client.get("/admin/sites/2.xml")
        element = ElementTree.fromstring(response.text)
        assert element.tag == "site"
        assert element.find("name").text == "Docs"
        assert element.find("base-domain").text == "docs.example.com"

    def test_show_html(self, client):
        response = client.get("/admin/sites/1")
        assert response.status_code == 200
        assert "Main" in response.text

    def test_missing_site(self, client):
        assert client.get("/admin/sites/99.json").status_code == 404

    def test_unsupported_format(self, client):
        assert client.get("/admin/sites/1.txt").status_code == 406

    def test_new_and_edit_forms(self, client):
        assert client.get("/admin/sites/new").status_code == 200
        assert client.get("/admin/sites/1/edit").status_code == 200

    def test_create_from_form(self, client):
        response = client.post(
            "/admin/sites",
            data={"site[name]": "Blog", "site[domain]": r"blog\.example\.com", "site[homepage_id]": "2"},
            follow_redirects=False,
        )
        assert response.status_code == 303
        assert response.headers["location"] == "/admin/sites/3"
        assert client.get("/admin/sites/3.json").json()["homepage_id"] == 2

    def test_create_with_duplicate_domain(self, client):
        response = client.post(
            "/admin/sites",
            data={"site[name]": "Clash", "site[domain]": r"docs\.example\.com"},
            follow_redirects=False,
        )
        assert response.status_code == 422
        assert "already taken" in response.text
        assert site_names(client) == ["Main", "Docs"]

    def test_update_from_json(self, client):
        response = client.put("/admin/sites/1", json={"site": {"name": "Primary"}}, follow_redirects=False)
        assert response.status_code == 303
        assert site_names(client) == ["Primary", "Docs"]

    def test_destroy(self, client):
        response = client.delete("/admin/sites/2", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/admin/sites"
        assert site_names(client) == ["Main"]

    def test_move_lower(self, client):
        response = client.post("/admin/sites/1/move_lower", follow_redirects=False)
        assert response.status_code == 303
        assert response.headers["location"] == "/admin/sites"
        assert site_names(client) == ["Docs", "Main"]

    def test_move_higher(self, client):
        client.post("/admin/sites/2/move_higher")
        assert site_names(client) == ["Docs", "Main"]

    def test_move_to_top_json(self, client):
        response = client.put("/admin/sites/2/move_to_top", headers=JSON)
        assert response.json() == [{"id": 2, "position": 1}, {"id": 1, "position": 2}]

    def test_move_to_bottom(self, client):
        client.put("/admin/sites/1/move_to_bottom")
        assert site_names(client) == ["Docs", "Main"]

    def test_member_actions_need_their_method(self, client):
        assert client.post("/admin/sites/1/move_to_top").status_code == 405


class TestScopedPages:

    def test_home_per_host(self, client):
        assert "<h1>Home</h1>" in client.get("/", headers={"host": "example.com"}).text
        assert "<h1>Docs</h1>" in client.get("/", headers={"host": "docs.example.com"}).text

    def test_page_only_in_its_site(self, client):
        assert client.get("/getting-started", headers={"host": "docs.example.com"}).status_code == 200
        assert client.get("/getting-started", headers={"host": "www.example.com"}).status_code == 404

    def test_unknown_host_gets_default_site(self, client):
        response = client.get("/about", headers={"host": "unknown.org"})
        assert "<h1>About</h1>" in response.text

    def test_cache_is_keyed_by_host(self, client, cms):
        client.get("/", headers={"host": "example.com"})
        client.get("/", headers={"host": "docs.example.com:8000"})
        assert sorted(cms.response_cache.keys()) == ["docs.example.com/", "example.com/"]

    def test_site_changes_expire_the_cache(self, client, cms):
        client.get("/", headers={"host": "docs.example.com"})
        client.put("/admin/sites/2", json={"homepage_id": 1})

        assert cms.response_cache.get_entry_count() == 0
        assert "<h1>Home</h1>" in client.get("/", headers={"host": "docs.example.com"}).text


class TestAdminPages:

    def test_tabs_and_subnav(self, client):
        response = client.get("/admin/pages")
        assert '<a href="/admin/sites">Sites</a>' in response.text
        assert '<ul id="site_subnav">' in response.text
        assert 'href="/admin/pages?site=2"' in response.text

    def test_scoped_to_site(self, client):
        root = client.get("/admin/pages?site=2", headers=JSON).json()["root"]
        assert root["title"] == "Docs"
        assert [child["title"] for child in root["children"]] == ["Getting Started"]

    def test_scoped_to_page(self, client):
        root = client.get("/admin/pages?root=2", headers=JSON).json()["root"]
        assert root["title"] == "About"

    def test_unscoped(self, client):
        root = client.get("/admin/pages", headers=JSON).json()["root"]
        assert root["title"] == "Home"


class TestDisabled:

    def test_sites_are_not_routed(self, tmp_path, data):
        settings = Settings(environment="test", data_path=str(tmp_path / "missing.yaml"))
        client = TestClient(create_app(settings, data=data))

        assert client.get("/admin/sites.json").status_code == 404
        assert "Sites" not in client.get("/admin/pages").text
        assert client.get("/getting-started").status_code == 404
        assert "<h1>Home</h1>" in client.get("/").text
