"""Admin dashboard, user management and analytics recording."""

from coursehub.core.init import init_admin_roles
from coursehub.models.event import PageView
from coursehub.models.payment import Payment
from coursehub.models.user import User


def _payment(user, course, status, order_id, amount=None):
    return Payment(
        user_id=user.id,
        course_id=course.id,
        amount=course.price if amount is None else amount,
        currency="INR",
        status=status,
        razorpay_order_id=order_id,
    )


class TestAdminAccess:
    def test_student_is_forbidden(self, client, auth_headers, student):
        response = client.get("/api/admin/stats", headers=auth_headers(student))

        assert response.status_code == 403
        assert response.json() == {"error": "Admin access required"}

    def test_anonymous_is_unauthorized(self, client):
        assert client.get("/api/admin/users").status_code == 401


class TestStats:
    def test_revenue_counts_successful_payments_only(
        self, client, auth_headers, admin, student, make_course, db
    ):
        first = make_course("first-course", price=1000)
        second = make_course("second-course", price=3000, is_published=False)
        db.add_all(
            [
                _payment(student, first, "success", "order_1"),
                _payment(student, second, "success", "order_2"),
                _payment(student, second, "failed", "order_3"),
                _payment(student, first, "pending", "order_4"),
            ]
        )
        db.commit()

        response = client.get("/api/admin/stats", headers=auth_headers(admin))

        assert response.status_code == 200
        stats = response.json()
        assert stats["totalRevenue"] == 4000
        assert stats["successfulPayments"] == 2
        assert stats["totalCourses"] == 2
        assert stats["publishedCourses"] == 1
        assert stats["totalUsers"] == 2
        assert stats["conversionRate"] == 1.0

    def test_empty_platform(self, client, auth_headers, admin):
        stats = client.get("/api/admin/stats", headers=auth_headers(admin)).json()

        assert stats["totalRevenue"] == 0
        assert stats["conversionRate"] == 0.0


class TestAdminListings:
    def test_courses_include_drafts(self, client, auth_headers, admin, make_course):
        make_course("live-course")
        make_course("draft-course", is_published=False)

        response = client.get(
            "/api/admin/courses", params={"size": 1}, headers=auth_headers(admin)
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert data["totalPages"] == 2
        assert len(data["courses"]) == 1

    def test_users_search(self, client, auth_headers, admin, make_user):
        make_user("alice@example.com", full_name="Alice Doe")
        make_user("bob@example.com", full_name="Bob Roe")

        response = client.get(
            "/api/admin/users", params={"search": "alice"}, headers=auth_headers(admin)
        )

        data = response.json()
        assert data["total"] == 1
        assert data["users"][0]["email"] == "alice@example.com"

    def test_payments_filter_by_status(
        self, client, auth_headers, admin, student, course, db
    ):
        db.add_all(
            [
                _payment(student, course, "success", "order_a"),
                _payment(student, course, "failed", "order_b"),
            ]
        )
        db.commit()

        response = client.get(
            "/api/admin/payments",
            params={"status": "success"},
            headers=auth_headers(admin),
        )

        data = response.json()
        assert data["total"] == 1
        assert data["payments"][0]["razorpayOrderId"] == "order_a"


class TestUserManagement:
    def test_promote_and_deactivate(self, client, auth_headers, admin, student):
        response = client.patch(
            f"/api/admin/users/{student.id}",
            json={"role": "instructor", "isActive": False},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        assert response.json()["role"] == "instructor"
        assert response.json()["isActive"] is False

    def test_unknown_role_is_rejected(self, client, auth_headers, admin, student):
        response = client.patch(
            f"/api/admin/users/{student.id}",
            json={"role": "superuser"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400

    def test_admin_cannot_demote_self(self, client, auth_headers, admin):
        response = client.patch(
            f"/api/admin/users/{admin.id}",
            json={"role": "student"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400

    def test_unknown_user_is_404(self, client, auth_headers, admin):
        response = client.patch(
            "/api/admin/users/999", json={"isActive": False}, headers=auth_headers(admin)
        )
        assert response.status_code == 404


class TestAdminRoles:
    def test_configured_emails_are_promoted(self, db, make_user):
        make_user("admin@example.com")
        make_user("someone@example.com")

        assert init_admin_roles(db) == 1

        roles = {u.email: u.role for u in db.query(User).all()}
        assert roles == {"admin@example.com": "admin", "someone@example.com": "student"}

    def test_running_twice_promotes_nobody_new(self, db, make_user):
        make_user("admin@example.com")
        init_admin_roles(db)

        assert init_admin_roles(db) == 0


class TestAnalytics:
    def test_anonymous_page_view(self, client, db):
        response = client.post(
            "/api/analytics/page-views",
            json={"page": "/courses/python-basics", "metadata": {"ref": "home"}},
        )

        assert response.status_code == 201
        data = response.json()
        assert data["userId"] is None
        assert data["metadata"] == {"ref": "home"}
        assert db.query(PageView).count() == 1

    def test_event_is_attributed_to_caller(
        self, client, auth_headers, admin, student
    ):
        created = client.post(
            "/api/analytics/events",
            json={"eventType": "video_started", "metadata": {"lesson": 3}},
            headers=auth_headers(student),
        )
        assert created.status_code == 201
        assert created.json()["userId"] == student.id

        listing = client.get(
            "/api/admin/events",
            params={"event_type": "video_started"},
            headers=auth_headers(admin),
        )
        assert listing.status_code == 200
        events = listing.json()["events"]
        assert len(events) == 1
        assert events[0]["metadata"] == {"lesson": 3}


class TestHealth:
    def test_root_and_health(self, client):
        assert client.get("/").json()["status"] == "healthy"

        health = client.get("/health").json()
        assert health["database"] == "healthy"
