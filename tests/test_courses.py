"""Catalogue browsing and admin course/content management."""

from coursehub.models.course import Course
from coursehub.models.course_content import CourseContent
from coursehub.models.payment import Payment
from coursehub.models.referral import Referral

NEW_COURSE = {
    "slug": "data-science-101",
    "title": "Data Science 101",
    "description": "Numbers and plots",
    "category": "data",
    "price": 4900,
    "originalPrice": 9900,
    "isFeatured": True,
    "isPublished": True,
}


class TestCatalogue:
    def test_lists_published_courses_featured_first(self, client, make_course):
        make_course("plain-course", is_featured=False)
        make_course("featured-course", is_featured=True)
        make_course("draft-course", is_published=False)

        response = client.get("/api/courses")

        assert response.status_code == 200
        slugs = [c["slug"] for c in response.json()]
        assert slugs == ["featured-course", "plain-course"]

    def test_filter_by_category_and_search(self, client, make_course):
        make_course("python-basics", category="programming")
        make_course("watercolour", category="art", title="Watercolour Painting")

        by_category = client.get("/api/courses", params={"category": "art"}).json()
        everything = client.get("/api/courses", params={"category": "all"}).json()
        searched = client.get("/api/courses", params={"search": "painting"}).json()

        assert [c["slug"] for c in by_category] == ["watercolour"]
        assert len(everything) == 2
        assert [c["slug"] for c in searched] == ["watercolour"]

    def test_featured_endpoint(self, client, make_course):
        make_course("plain-course")
        make_course("featured-course", is_featured=True)

        response = client.get("/api/courses/featured")

        assert [c["slug"] for c in response.json()] == ["featured-course"]

    def test_get_by_slug_uses_camel_case(self, client, make_course):
        make_course("python-basics", original_price=19900)

        response = client.get("/api/courses/python-basics")

        assert response.status_code == 200
        data = response.json()
        assert data["originalPrice"] == 19900
        assert data["isPublished"] is True
        assert "original_price" not in data

    def test_unknown_or_draft_slug_is_404(self, client, make_course):
        make_course("draft-course", is_published=False)

        assert client.get("/api/courses/nope").status_code == 404
        assert client.get("/api/courses/draft-course").status_code == 404

    def test_content_is_ordered(self, client, course, db):
        db.add_all(
            [
                CourseContent(course_id=course.id, title="Second", type="text", order=2),
                CourseContent(course_id=course.id, title="First", type="video", order=1),
            ]
        )
        db.commit()

        response = client.get(f"/api/courses/{course.id}/content")

        assert response.status_code == 200
        assert [c["title"] for c in response.json()] == ["First", "Second"]

    def test_content_of_unknown_course_is_404(self, client):
        assert client.get("/api/courses/999/content").status_code == 404

    def test_single_content_item(self, client, lessons):
        response = client.get(f"/api/courses/content/{lessons[0].id}")

        assert response.status_code == 200
        assert response.json()["title"] == "Lesson 1"


class TestCourseAdmin:
    def test_create_course(self, client, auth_headers, admin):
        response = client.post("/api/courses", json=NEW_COURSE, headers=auth_headers(admin))

        assert response.status_code == 201, response.text
        data = response.json()
        assert data["slug"] == "data-science-101"
        assert data["price"] == 4900

    def test_students_cannot_create(self, client, auth_headers, student):
        response = client.post(
            "/api/courses", json=NEW_COURSE, headers=auth_headers(student)
        )
        assert response.status_code == 403

    def test_duplicate_slug_is_conflict(self, client, auth_headers, admin):
        client.post("/api/courses", json=NEW_COURSE, headers=auth_headers(admin))
        response = client.post(
            "/api/courses", json=NEW_COURSE, headers=auth_headers(admin)
        )
        assert response.status_code == 409

    def test_invalid_payload_is_400(self, client, auth_headers, admin):
        response = client.post(
            "/api/courses",
            json={**NEW_COURSE, "price": -5, "slug": "Not A Slug"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation error"
        assert body["details"]

    def test_update_course(self, client, auth_headers, admin, course):
        response = client.patch(
            f"/api/courses/{course.id}",
            json={"price": 12900, "isFeatured": True},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        data = response.json()
        assert data["price"] == 12900
        assert data["isFeatured"] is True
        assert data["title"] == course.title

    def test_delete_cascades_content_and_referrals(
        self, client, auth_headers, admin, referrer, course, lessons, db
    ):
        db.add(Referral(user_id=referrer.id, course_id=course.id, code="ABCDEFGH"))
        db.commit()

        response = client.delete(f"/api/courses/{course.id}", headers=auth_headers(admin))

        assert response.status_code == 200
        assert db.query(Course).count() == 0
        assert db.query(CourseContent).count() == 0
        assert db.query(Referral).count() == 0

    def test_delete_refused_when_sold(
        self, client, auth_headers, admin, student, course, db
    ):
        db.add(
            Payment(
                user_id=student.id,
                course_id=course.id,
                amount=course.price,
                currency="INR",
                status="success",
                razorpay_order_id="order_sold",
            )
        )
        db.commit()

        response = client.delete(f"/api/courses/{course.id}", headers=auth_headers(admin))

        assert response.status_code == 409
        assert db.query(Course).count() == 1


class TestContentAdmin:
    def test_create_update_delete(self, client, auth_headers, admin, course):
        headers = auth_headers(admin)

        created = client.post(
            "/api/courses/content",
            json={"courseId": course.id, "title": "Intro", "type": "video", "order": 1},
            headers=headers,
        )
        assert created.status_code == 201, created.text
        content_id = created.json()["id"]

        updated = client.patch(
            f"/api/courses/content/{content_id}",
            json={"title": "Introduction", "duration": 12},
            headers=headers,
        )
        assert updated.status_code == 200
        assert updated.json()["title"] == "Introduction"
        assert updated.json()["duration"] == 12

        deleted = client.delete(f"/api/courses/content/{content_id}", headers=headers)
        assert deleted.status_code == 200
        assert client.get(f"/api/courses/content/{content_id}").status_code == 404

    def test_unknown_type_is_rejected(self, client, auth_headers, admin, course):
        response = client.post(
            "/api/courses/content",
            json={"courseId": course.id, "title": "Intro", "type": "podcast"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 400

    def test_content_for_unknown_course_is_404(self, client, auth_headers, admin):
        response = client.post(
            "/api/courses/content",
            json={"courseId": 999, "title": "Intro", "type": "text"},
            headers=auth_headers(admin),
        )
        assert response.status_code == 404
