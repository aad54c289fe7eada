"""Admin app management endpoints and the audit log listing."""

from datetime import UTC, datetime, timedelta

from api_support import ApiTestCase

from app.models import App, AppType, AuditLog, Role


class TestCreateApp(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.login_admin()

    def test_internal_app_without_path_is_400(self) -> None:
        resp = self.client.post(
            "/api/admin/apps", json={"name": "Tablets", "slug": "tablets", "type": "internal"}
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(
            resp.json()["error"]["message"], "Internal path is required for internal apps"
        )

    def test_external_app_without_url_is_400(self) -> None:
        resp = self.client.post(
            "/api/admin/apps", json={"name": "CRM", "slug": "crm", "type": "external"}
        )
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(
            resp.json()["error"]["message"], "External URL is required for external apps"
        )

    def test_missing_required_fields_is_400(self) -> None:
        resp = self.client.post("/api/admin/apps", json={"name": "Tablets"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"]["message"], "Name, slug, and type are required")

    def test_create_internal_app_assigns_every_admin(self) -> None:
        other_admin = self.make_user("second-admin", role=Role.ADMIN)
        plain_user = self.make_user("carol")

        resp = self.client.post(
            "/api/admin/apps",
            json={
                "name": "Tablets",
                "slug": "tablets",
                "type": "internal",
                "internalPath": "/apps/tablets",
                "externalUrl": "https://ignored.example.com",
                "iconKey": "grid",
            },
        )

        self.assertEqual(resp.status_code, 201)
        app = resp.json()["app"]
        self.assertEqual(app["internalPath"], "/apps/tablets")
        self.assertIsNone(app["externalUrl"])
        self.assertEqual(app["version"], "1.0.0")
        self.assertTrue(app["isActive"])
        self.assertEqual(app["iconKey"], "grid")
        self.assertIn(app["id"], self.assigned_app_ids(self.admin.id))
        self.assertIn(app["id"], self.assigned_app_ids(other_admin.id))
        self.assertNotIn(app["id"], self.assigned_app_ids(plain_user.id))

    def test_duplicate_slug_is_409(self) -> None:
        self.make_app("tablets")
        resp = self.client.post(
            "/api/admin/apps",
            json={"name": "Tablets 2", "slug": "tablets", "type": "internal", "internalPath": "/t"},
        )
        self.assertEqual(resp.status_code, 409)
        self.assertEqual(resp.json()["error"]["message"], "Slug already exists")

    def test_invalid_icon_is_400(self) -> None:
        resp = self.client.post(
            "/api/admin/apps",
            json={"name": "X", "slug": "x", "type": "internal", "internalPath": "/x", "iconKey": "rocket"},
        )
        self.assertEqual(resp.status_code, 400)
        self.assertTrue(resp.json()["error"]["message"].startswith("Invalid iconKey"))

    def test_legacy_icon_code_is_translated(self) -> None:
        resp = self.client.post(
            "/api/admin/apps",
            json={"name": "Trade Show", "slug": "trade-show", "type": "internal", "internalPath": "/ts", "icon": "TS"},
        )
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["app"]["icon"], "shop")
        self.assertEqual(resp.json()["app"]["iconKey"], "shop")

    def test_unknown_type_is_400(self) -> None:
        resp = self.client.post(
            "/api/admin/apps", json={"name": "X", "slug": "x", "type": "widget"}
        )
        self.assertEqual(resp.status_code, 400)

    def test_creation_is_audited(self) -> None:
        self.client.post(
            "/api/admin/apps",
            json={"name": "CRM", "slug": "crm", "type": "external", "externalUrl": "https://crm.example.com"},
        )
        self.db.expire_all()
        audit = self.db.query(AuditLog).filter(AuditLog.action == "app_created").one()
        self.assertEqual(audit.user_id, self.admin.id)
        self.assertEqual(audit.metadata_["slug"], "crm")


class TestUpdateApp(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.login_admin()

    def test_switch_to_external_clears_internal_path(self) -> None:
        app = self.make_app("tablets")
        resp = self.client.patch(
            f"/api/admin/apps/{app.id}",
            json={"type": "external", "externalUrl": "https://tablets.example.com"},
        )
        self.assertEqual(resp.status_code, 200)
        body = resp.json()["app"]
        self.assertEqual(body["type"], "external")
        self.assertEqual(body["externalUrl"], "https://tablets.example.com")
        self.assertIsNone(body["internalPath"])

    def test_switch_to_external_without_url_is_400(self) -> None:
        app = self.make_app("tablets")
        resp = self.client.patch(f"/api/admin/apps/{app.id}", json={"type": "external"})
        self.assertEqual(resp.status_code, 400)
        self.db.expire_all()
        self.assertEqual(self.db.get(App, app.id).type, AppType.INTERNAL)

    def test_switch_to_internal_clears_external_url(self) -> None:
        app = self.make_app("crm", app_type=AppType.EXTERNAL)
        resp = self.client.patch(
            f"/api/admin/apps/{app.id}", json={"type": "internal", "internalPath": "/apps/crm"}
        )
        body = resp.json()["app"]
        self.assertEqual(body["internalPath"], "/apps/crm")
        self.assertIsNone(body["externalUrl"])

    def test_path_for_other_type_is_ignored(self) -> None:
        app = self.make_app("tablets")
        resp = self.client.patch(
            f"/api/admin/apps/{app.id}", json={"externalUrl": "https://nope.example.com"}
        )
        self.assertEqual(resp.status_code, 200)
        self.assertIsNone(resp.json()["app"]["externalUrl"])
        self.assertEqual(resp.json()["app"]["internalPath"], "/apps/tablets")

    def test_slug_taken_by_other_app_is_409(self) -> None:
        self.make_app("tablets")
        other = self.make_app("expenses")
        resp = self.client.patch(f"/api/admin/apps/{other.id}", json={"slug": "tablets"})
        self.assertEqual(resp.status_code, 409)

    def test_keeping_own_slug_is_allowed(self) -> None:
        app = self.make_app("tablets")
        resp = self.client.patch(f"/api/admin/apps/{app.id}", json={"slug": "tablets", "name": "Tabs"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["app"]["name"], "Tabs")

    def test_invalid_icon_on_update_is_400(self) -> None:
        app = self.make_app("tablets")
        resp = self.client.patch(f"/api/admin/apps/{app.id}", json={"iconKey": "rocket"})
        self.assertEqual(resp.status_code, 400)

    def test_unknown_app_is_404(self) -> None:
        resp = self.client.patch("/api/admin/apps/missing", json={"name": "X"})
        self.assertEqual(resp.status_code, 404)
        self.assertEqual(resp.json()["error"]["message"], "App not found")


class TestDeactivateApp(ApiTestCase):
    def test_delete_is_soft_and_hides_app_from_users(self) -> None:
        self.login_admin()
        app = self.make_app("tablets")
        carol = self.make_user("carol", apps=[app])

        resp = self.client.delete(f"/api/admin/apps/{app.id}")

        self.assertEqual(resp.status_code, 200)
        self.assertFalse(resp.json()["app"]["isActive"])
        listed = self.client.get("/api/admin/apps").json()["apps"]
        self.assertEqual([a["slug"] for a in listed], ["tablets"])
        self.assertEqual(self.assigned_app_ids(carol.id), {app.id})

        self.client.cookies.clear()
        login = self.login("carol")
        self.assertEqual(login.json()["user"]["assignedApps"], [])


class TestAuditLogListing(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.admin = self.login_admin()
        base = datetime(2026, 1, 1, tzinfo=UTC)
        # Fixed timestamps so ordering does not depend on clock resolution.
        self.db.query(AuditLog).delete()
        for i in range(5):
            self.db.add(
                AuditLog(
                    user_id=self.admin.id if i % 2 == 0 else None,
                    action=f"action_{i}",
                    metadata_={"i": i},
                    created_at=base + timedelta(minutes=i),
                )
            )
        self.db.commit()

    def test_newest_first_with_pagination(self) -> None:
        resp = self.client.get("/api/admin/audit", params={"limit": 2, "offset": 1})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual([log["action"] for log in body["logs"]], ["action_3", "action_2"])
        self.assertEqual(body["pagination"], {"limit": 2, "offset": 1, "total": 5})
        self.assertEqual(body["logs"][1]["username"], "root")
        self.assertIsNone(body["logs"][0]["username"])
        self.assertEqual(body["logs"][0]["metadata"], {"i": 3})

    def test_default_page(self) -> None:
        body = self.client.get("/api/admin/audit").json()
        self.assertEqual(body["pagination"]["limit"], 100)
        self.assertEqual(body["pagination"]["offset"], 0)
        self.assertEqual(len(body["logs"]), 5)

    def test_out_of_range_limit_is_400(self) -> None:
        self.assertEqual(self.client.get("/api/admin/audit", params={"limit": 0}).status_code, 400)
        self.assertEqual(self.client.get("/api/admin/audit", params={"limit": 501}).status_code, 400)
        self.assertEqual(self.client.get("/api/admin/audit", params={"offset": -1}).status_code, 400)
