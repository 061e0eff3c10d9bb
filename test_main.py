"""
Member Directory Service — API Tests
=====================================
Run:  pytest test_main.py -v --cov=app --cov-report=term-missing
"""
import json
import random
import uuid
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings
from app.query import MatchAll
from app.repositories import InMemoryMemberRepository
from app.services.email_client import EmailClient, EmailDeliveryError
from main import create_app

# ── Shared app over an in-process store ──────────────────────────────────
repo = InMemoryMemberRepository()
email_client = MagicMock()
app = create_app(repo, email_client)
client = TestClient(app)

ANNA_ID = str(uuid.uuid4())
RAVI_ID = str(uuid.uuid4())
SITA_ID = str(uuid.uuid4())
PRIYA_ID = str(uuid.uuid4())
BALA_ID = str(uuid.uuid4())
DEVI_ID = str(uuid.uuid4())


def _roster():
    return [
        {"id": ANNA_ID, "first_name": "Annamalai", "last_name": "Kumar",
         "spouse_first_name": "Meena", "spouse_last_name": "Annamalai",
         "email": "annamalai@example.com", "spouse_email": "meena@example.com",
         "mobile": "555-0101", "city": "Chennai", "native_place": "Karaikudi",
         "kovil": "Ilayathangudi", "year_since": "1995"},
        {"id": RAVI_ID, "first_name": "Ravi", "last_name": "Kumar",
         "email": "ravi@example.com", "city": "Chennai", "native_place": "Devakottai",
         "kovil": "Mathur", "year_since": "2001"},
        {"id": SITA_ID, "first_name": "Sita", "last_name": "Raman",
         "spouse_first_name": "Lakshmanan", "spouse_last_name": "Raman",
         "city": "Chennai", "native_place": "Pallathur", "kovil": "Vairavan Kovil",
         "year_since": "1995"},
        {"id": PRIYA_ID, "first_name": "Priya", "last_name": "Subramanian",
         "city": "Dallas", "native_place": "Pannavayal", "kovil": "Ilayathangudi",
         "year_since": "2010"},
        {"id": BALA_ID, "first_name": "Bala", "last_name": "Murugan",
         "city": "Bangalore", "native_place": None, "kovil": "", "year_since": None},
        {"id": DEVI_ID, "first_name": "Devi", "city": "chennai", "native_place": "Karaikudi"},
    ]


@pytest.fixture(autouse=True)
def reset():
    repo.clear()
    repo.insert_many(_roster())
    email_client.reset_mock()
    email_client.send_announcement.side_effect = None
    yield


def _fresh_client(records):
    store = InMemoryMemberRepository()
    store.insert_many(records)
    return TestClient(create_app(store, MagicMock())), store


def _first_names(payload):
    return [m["first_name"] for m in payload]


# ═══════════════════════════════════════════════════════════════════════════
# HEALTH & METRICS
# ═══════════════════════════════════════════════════════════════════════════
class TestHealth:
    def test_health_ok(self):
        r = client.get("/health")
        assert r.status_code == 200
        d = r.json()
        assert d["status"] == "ok"
        assert d["service"] == "member-directory"
        assert d["store"] == "memory"
        assert "timestamp" in d

    def test_readiness_ok(self):
        r = client.get("/health/ready")
        assert r.status_code == 200
        assert r.json()["database"] == "connected"

    def test_readiness_fails_when_store_down(self):
        broken = MagicMock()
        broken.verify_connection.side_effect = Exception("boom")
        r = TestClient(create_app(broken, MagicMock())).get("/health/ready")
        assert r.status_code == 503
        assert "boom" not in r.text

    def test_metrics_endpoint(self):
        client.get("/members")
        r = client.get("/metrics")
        assert r.status_code == 200
        assert "directory_requests_total" in r.text

    def test_request_id_propagated(self):
        r = client.get("/members", headers={"X-Request-ID": "my-req-42"})
        assert r.headers["X-Request-ID"] == "my-req-42"

    def test_request_id_generated(self):
        assert "X-Request-ID" in client.get("/health").headers

    def test_request_id_truncated(self):
        r = client.get("/members", headers={"X-Request-ID": "r" * 500})
        assert r.headers["X-Request-ID"] == "r" * 128

    def test_metrics_labelled_by_route_pattern(self):
        client.get(f"/members/get/{ANNA_ID}")
        client.get("/no/such/page")
        text = client.get("/metrics").text
        assert 'endpoint="/members/get/{member_id}"' in text
        assert 'endpoint="unmatched"' in text
        assert ANNA_ID not in text


# ═══════════════════════════════════════════════════════════════════════════
# POST /check-whitelist
# ═══════════════════════════════════════════════════════════════════════════
class TestWhitelist:
    def test_primary_email_whitelisted(self):
        r = client.post("/check-whitelist", json={"email": "annamalai@example.com"})
        assert r.status_code == 200
        assert r.json() == {"isWhitelisted": True, "message": "Email is whitelisted"}

    def test_spouse_email_whitelisted(self):
        r = client.post("/check-whitelist", json={"email": "meena@example.com"})
        assert r.json()["isWhitelisted"] is True

    def test_unknown_email_denied(self):
        r = client.post("/check-whitelist", json={"email": "stranger@example.com"})
        assert r.status_code == 200
        assert r.json()["isWhitelisted"] is False
        assert "not found" in r.json()["message"]

    def test_match_is_exact(self):
        r = client.post("/check-whitelist", json={"email": "ANNAMALAI@example.com"})
        assert r.json()["isWhitelisted"] is False

    def test_missing_email_400(self):
        r = client.post("/check-whitelist", json={})
        assert r.status_code == 400
        assert r.json() == {"isWhitelisted": False, "message": "Email is required"}


# ═══════════════════════════════════════════════════════════════════════════
# GET /members · SEARCH + PAGINATION
# ═══════════════════════════════════════════════════════════════════════════
class TestSearchMembers:
    def test_empty_search_returns_everyone_sorted(self):
        r = client.get("/members")
        assert r.status_code == 200
        assert _first_names(r.json()) == ["Annamalai", "Bala", "Devi", "Priya", "Ravi", "Sita"]

    def test_list_view_fields_only(self):
        member = client.get("/members").json()[0]
        assert set(member) == {
            "id", "first_name", "last_name", "spouse_first_name",
            "spouse_last_name", "city", "native_place",
        }

    def test_search_matches_names_and_native_village(self):
        r = client.get("/members?search=anna")
        # Annamalai by name, Priya by native village Pannavayal; Chennai does not contain "anna".
        assert _first_names(r.json()) == ["Annamalai", "Priya"]

    def test_search_is_case_insensitive(self):
        assert client.get("/members?search=ANNA").json() == client.get("/members?search=anna").json()

    def test_search_matches_city(self):
        r = client.get("/members?search=chennai")
        assert _first_names(r.json()) == ["Annamalai", "Devi", "Ravi", "Sita"]

    def test_search_term_is_literal(self):
        assert client.get("/members?search=%25").json() == []
        assert client.get("/members?search=.*").json() == []

    def test_identical_queries_identical_output(self):
        assert client.get("/members?search=a").json() == client.get("/members?search=a").json()

    def test_pagination_window(self):
        records = [{"first_name": f"Member {i:02d}", "city": "Chennai"} for i in range(45)]
        random.Random(7).shuffle(records)
        c, _ = _fresh_client(records)
        full = c.get("/members?limit=200").json()
        assert len(full) == 45
        assert c.get("/members?page=2&limit=20").json() == full[20:40]
        assert len(c.get("/members?page=3&limit=20").json()) == 5
        assert c.get("/members?page=4&limit=20").json() == []

    def test_default_limit_is_twenty(self):
        c, _ = _fresh_client([{"first_name": f"M{i:02d}"} for i in range(25)])
        assert len(c.get("/members").json()) == 20

    @pytest.mark.parametrize("qs", ["page=0", "page=-1", "limit=0", "limit=-5", "limit=1000"])
    def test_out_of_range_paging_rejected(self, qs):
        assert client.get(f"/members?{qs}").status_code == 422


# ═══════════════════════════════════════════════════════════════════════════
# GET /members/by-category
# ═══════════════════════════════════════════════════════════════════════════
class TestMembersByCategory:
    def test_category_only(self):
        r = client.get("/members/by-category?category=nativeVillage&value=Karaikudi")
        assert r.status_code == 200
        assert _first_names(r.json()) == ["Annamalai", "Devi"]

    def test_category_and_name_search(self):
        r = client.get("/members/by-category?category=cityResidence&value=Chennai&search=kumar")
        assert _first_names(r.json()) == ["Annamalai", "Ravi"]

    def test_pinned_search_ignores_location_fields(self):
        r = client.get("/members/by-category?category=nativeVillage&value=Karaikudi&search=chennai")
        assert r.json() == []

    def test_blank_search_is_ignored(self):
        r = client.get("/members/by-category?category=cityResidence&value=Chennai&search=%20%20")
        assert _first_names(r.json()) == ["Annamalai", "Ravi", "Sita"]

    def test_value_match_is_exact(self):
        r = client.get("/members/by-category?category=cityResidence&value=chennai")
        assert _first_names(r.json()) == ["Devi"]

    @pytest.mark.parametrize("category,value,expected", [
        ("nagaraKovil", "Ilayathangudi", ["Annamalai", "Priya"]),
        ("yearMoved", "1995", ["Annamalai", "Sita"]),
    ])
    def test_every_category(self, category, value, expected):
        r = client.get(f"/members/by-category?category={category}&value={value}")
        assert _first_names(r.json()) == expected

    def test_no_matches_is_empty_not_error(self):
        r = client.get("/members/by-category?category=cityResidence&value=Atlantis")
        assert r.status_code == 200
        assert r.json() == []

    def test_category_view_fields(self):
        member = client.get("/members/by-category?category=nativeVillage&value=Devakottai").json()[0]
        assert member["email"] == "ravi@example.com"
        assert member["kovil"] == "Mathur"
        assert member["year_since"] == "2001"
        assert "photo_link" not in member

    def test_unknown_category_400_without_store_query(self):
        spy = MagicMock()
        r = TestClient(create_app(spy, MagicMock())).get(
            "/members/by-category?category=foo&value=x")
        assert r.status_code == 400
        assert "Invalid category" in r.json()["detail"]
        spy.find.assert_not_called()

    @pytest.mark.parametrize("qs", ["category=cityResidence", "value=Chennai", ""])
    def test_missing_category_or_value_400(self, qs):
        r = client.get(f"/members/by-category?{qs}")
        assert r.status_code == 400
        assert r.json()["detail"] == "Category and value are required parameters"


# ═══════════════════════════════════════════════════════════════════════════
# GET /members/get/{id}, /members/by-email/{email}
# ═══════════════════════════════════════════════════════════════════════════
class TestGetMember:
    def test_found(self):
        r = client.get(f"/members/get/{ANNA_ID}")
        assert r.status_code == 200
        d = r.json()
        assert d["id"] == ANNA_ID
        assert d["mobile"] == "555-0101"
        assert "photo_link" in d

    def test_invalid_id(self):
        assert client.get("/members/get/bad.id").status_code == 400

    def test_not_found(self):
        assert client.get(f"/members/get/{uuid.uuid4()}").status_code == 404

    @pytest.mark.parametrize("form", [str.upper, lambda s: s.replace("-", "")])
    def test_uuid_spellings_resolve_to_stored_member(self, form):
        r = client.get(f"/members/get/{form(ANNA_ID)}")
        assert r.status_code == 200
        assert r.json()["id"] == ANNA_ID

    def test_imported_ids_are_reachable(self):
        object_id = "64f1a2b3c4d5e6f708091a2b"
        c, store = _fresh_client([{"id": object_id, "first_name": "Kannan", "city": "Madurai"}])
        assert [m["id"] for m in c.get("/members").json()] == [object_id]
        assert c.get(f"/members/get/{object_id}").json()["first_name"] == "Kannan"
        r = c.put(f"/members/{object_id}", json={"city": "Trichy"})
        assert r.status_code == 200
        assert r.json()["member"]["city"] == "Trichy"
        assert c.put(f"/members/{object_id}/photo", json={"photo_link": "p"}).status_code == 200

    def test_by_email(self):
        r = client.get("/members/by-email/meena@example.com")
        assert r.status_code == 200
        assert r.json()["id"] == ANNA_ID

    def test_by_email_not_found(self):
        assert client.get("/members/by-email/nobody@example.com").status_code == 404


# ═══════════════════════════════════════════════════════════════════════════
# PUT /members/{id}, PUT /members/{id}/photo
# ═══════════════════════════════════════════════════════════════════════════
class TestUpdateMember:
    def test_update_profile(self):
        r = client.put(f"/members/{ANNA_ID}", json={
            "city": "Coimbatore", "year_since": 1999, "id": "hijack",
        })
        assert r.status_code == 200
        d = r.json()
        assert d["message"] == "Profile updated successfully"
        assert d["member"]["id"] == ANNA_ID
        assert d["member"]["city"] == "Coimbatore"
        assert d["member"]["year_since"] == "1999"
        assert d["member"]["user_updated"] is not None
        assert d["member"]["first_name"] == "Annamalai"

    def test_update_visible_in_search(self):
        client.put(f"/members/{RAVI_ID}", json={"native_place": "Karaikudi"})
        r = client.get("/members/by-category?category=nativeVillage&value=Karaikudi")
        assert "Ravi" in _first_names(r.json())

    def test_update_unknown_member_leaves_store_unchanged(self):
        before = repo.find(MatchAll())
        r = client.put(f"/members/{uuid.uuid4()}", json={"city": "Nowhere"})
        assert r.status_code == 404
        assert repo.find(MatchAll()) == before

    def test_update_invalid_id(self):
        assert client.put("/members/x.y", json={"city": "X"}).status_code == 400

    def test_update_photo(self):
        r = client.put(f"/members/{SITA_ID}/photo", json={"photo_link": "https://img/sita.jpg"})
        assert r.status_code == 200
        assert r.json()["message"] == "Photo updated successfully"
        assert r.json()["member"]["photo_link"] == "https://img/sita.jpg"
        assert r.json()["member"]["user_updated"] is not None

    def test_update_photo_requires_link(self):
        r = client.put(f"/members/{SITA_ID}/photo", json={})
        assert r.status_code == 400
        assert r.json()["detail"] == "photo_link is required"

    def test_update_photo_unknown_member(self):
        r = client.put(f"/members/{uuid.uuid4()}/photo", json={"photo_link": "x"})
        assert r.status_code == 404


# ═══════════════════════════════════════════════════════════════════════════
# STATISTICS
# ═══════════════════════════════════════════════════════════════════════════
class TestStats:
    def test_native_village_scenario(self):
        records = (
            [{"first_name": "K", "native_place": "Karaikudi"}] * 5
            + [{"first_name": "D", "native_place": "Devakottai"}] * 3
            + [{"first_name": "P", "native_place": "Pallathur"}] * 3
            + [{"first_name": "N", "native_place": None}] * 2
            + [{"first_name": "E", "native_place": ""}]
        )
        c, _ = _fresh_client(records)
        r = c.get("/stats/native-village")
        assert r.status_code == 200
        assert r.json() == [
            {"name": "Karaikudi", "count": 5},
            {"name": "Devakottai", "count": 3},
            {"name": "Pallathur", "count": 3},
        ]

    def test_city_groups_are_not_normalised(self):
        r = client.get("/stats/city").json()
        assert r[0] == {"name": "Chennai", "count": 3}
        assert {"name": "chennai", "count": 1} in r

    def test_counts_sum_to_populated_records(self):
        r = client.get("/stats/kovil").json()
        assert sum(g["count"] for g in r) == 4
        assert all(g["name"] for g in r)

    def test_year_ascending_by_key(self):
        r = client.get("/stats/year").json()
        assert r == [
            {"name": "1995", "count": 2},
            {"name": "2001", "count": 1},
            {"name": "2010", "count": 1},
        ]

    def test_single_field_stats_untruncated(self):
        records = []
        for i in range(12):
            records += [{"first_name": f"C{i}", "city": f"City {i:02d}"}] * (i + 1)
        c, _ = _fresh_client(records)
        assert len(c.get("/stats/city").json()) == 12

    def test_analytics_shape(self):
        r = client.get("/analytics")
        assert r.status_code == 200
        d = r.json()
        assert set(d) == {"nativeVillage", "cityResidence", "nagaraKovil", "yearMoved"}
        assert d["nativeVillage"][0] == {"name": "Karaikudi", "count": 2}

    def test_analytics_truncates_to_top_ten(self):
        records = []
        for i in range(12):
            records += [{"first_name": f"C{i}", "city": f"City {i:02d}",
                         "year_since": str(1990 + i)}] * (i + 1)
        c, _ = _fresh_client(records)
        d = c.get("/analytics").json()
        assert [g["count"] for g in d["cityResidence"]] == list(range(12, 2, -1))
        assert {g["name"] for g in d["cityResidence"]} == {f"City {i:02d}" for i in range(2, 12)}
        assert len(d["yearMoved"]) == 12
        assert [g["name"] for g in d["yearMoved"]] == [str(1990 + i) for i in range(12)]

    def test_empty_store(self):
        c, _ = _fresh_client([])
        assert c.get("/analytics").json() == {
            "nativeVillage": [], "cityResidence": [], "nagaraKovil": [], "yearMoved": [],
        }


# ═══════════════════════════════════════════════════════════════════════════
# POST /send-email
# ═══════════════════════════════════════════════════════════════════════════
class TestSendEmail:
    def test_send_success(self):
        r = client.post("/send-email", json={
            "recipients": "a@example.com, ,b@example.com ", "subject": "Pongal", "body": "Join us",
        })
        assert r.status_code == 200
        assert r.json()["message"] == "Emails sent successfully"
        email_client.send_announcement.assert_called_once_with(
            ["a@example.com", "b@example.com"], "Pongal", "Join us")

    @pytest.mark.parametrize("payload", [
        {"body": "x"}, {"recipients": "a@example.com"}, {"recipients": " , ", "body": "x"},
    ])
    def test_missing_fields_400(self, payload):
        assert client.post("/send-email", json=payload).status_code == 400
        email_client.send_announcement.assert_not_called()

    def test_provider_failure_500(self):
        email_client.send_announcement.side_effect = EmailDeliveryError("403 Forbidden")
        r = client.post("/send-email", json={"recipients": "a@example.com", "body": "x"})
        assert r.status_code == 500
        assert r.json() == {"message": "Failed to send email"}


class TestEmailClient:
    def test_message_shape(self):
        msg = EmailClient(api_key="k", sender="events@example.org").build_message(
            ["a@example.com", "b@example.com"], "Deepavali", "Hello")
        assert msg["personalizations"] == [
            {"to": [{"email": "a@example.com"}]}, {"to": [{"email": "b@example.com"}]},
        ]
        assert msg["from"]["email"] == "events@example.org"
        assert msg["subject"].endswith("Deepavali")
        assert msg["content"][0]["value"] == "<p>Hello</p>"

    def test_missing_api_key(self):
        with pytest.raises(EmailDeliveryError):
            EmailClient(api_key="").send_announcement(["a@example.com"], "s", "b")

    def test_posts_to_provider(self):
        with patch("app.services.email_client.httpx.Client") as http:
            post = http.return_value.__enter__.return_value.post
            EmailClient(api_key="secret", api_url="https://mail.test/send").send_announcement(
                ["a@example.com"], "s", "b")
        args, kwargs = post.call_args
        assert args[0] == "https://mail.test/send"
        assert kwargs["headers"]["Authorization"] == "Bearer secret"


# ═══════════════════════════════════════════════════════════════════════════
# STORE FAILURES
# ═══════════════════════════════════════════════════════════════════════════
class TestStoreFailure:
    def _broken_client(self):
        broken = MagicMock()
        broken.find.side_effect = RuntimeError("connection reset by peer")
        broken.find_one.side_effect = RuntimeError("connection reset by peer")
        broken.aggregate.side_effect = RuntimeError("connection reset by peer")
        return TestClient(create_app(broken, MagicMock()), raise_server_exceptions=False)

    @pytest.mark.parametrize("path", [
        "/members", "/analytics", "/stats/city", f"/members/get/{ANNA_ID}",
        "/members/by-category?category=cityResidence&value=Chennai",
    ])
    def test_generic_500(self, path):
        r = self._broken_client().get(path)
        assert r.status_code == 500
        assert r.json()["detail"] == "Internal server error"
        assert "connection reset" not in r.text


# ═══════════════════════════════════════════════════════════════════════════
# STARTUP SEEDING
# ═══════════════════════════════════════════════════════════════════════════
class TestSeedFile:
    def _write(self, tmp_path, records):
        path = tmp_path / "members.json"
        path.write_text(json.dumps(records), encoding="utf-8")
        return str(path)

    def test_seed_loaded_on_startup(self, tmp_path):
        store = InMemoryMemberRepository()
        seed = self._write(tmp_path, [{"id": "a1", "first_name": "Uma"}, {"first_name": "Vel"}])
        with patch.object(settings, "SEED_FILE", seed):
            with TestClient(create_app(store, MagicMock())) as c:
                assert sorted(_first_names(c.get("/members").json())) == ["Uma", "Vel"]
        assert store.count() == 2

    def test_duplicate_ids_abort_startup_with_nothing_loaded(self, tmp_path):
        store = InMemoryMemberRepository()
        seed = self._write(tmp_path, [{"id": "a"}, {"id": "b"}, {"id": "a"}])
        with patch.object(settings, "SEED_FILE", seed):
            with pytest.raises(Exception):
                with TestClient(create_app(store, MagicMock())):
                    pass
        assert store.count() == 0

    def test_batch_with_duplicate_leaves_store_unchanged(self):
        with pytest.raises(ValueError, match="Duplicate member id"):
            repo.insert_many([{"id": "fresh-1"}, {"id": ANNA_ID}])
        assert repo.count() == 6
        assert "fresh-1" not in [m["id"] for m in repo.find(MatchAll())]
