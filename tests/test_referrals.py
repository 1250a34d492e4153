"""
Referral codes: issuing, validation and redemption, including concurrent
redemptions of one code.
"""

import threading

import pytest

from coursehub.core.database import SessionLocal
from coursehub.core.exceptions import (
    AlreadyEnrolledError,
    InternalError,
    SelfReferralError,
)
from coursehub.models.event import Event
from coursehub.models.referral import Referral
from coursehub.models.user_course import UserCourse
from coursehub.services.referral import (
    CODE_ALPHABET,
    MAX_CODE_ATTEMPTS,
    ReferralService,
    generate_code,
    referral_discount,
)
from coursehub.services.user_course import UserCourseService


def _create_code(client, auth_headers, owner, course) -> str:
    response = client.post(
        "/api/referrals", json={"courseId": course.id}, headers=auth_headers(owner)
    )
    assert response.status_code == 201, response.text
    return response.json()["code"]


class TestCodeGeneration:
    def test_codes_use_unambiguous_alphabet(self):
        code = generate_code(32)
        assert len(code) == 32
        assert set(code) <= set(CODE_ALPHABET)
        assert not set("0O1Il") & set(code)

    def test_discount_is_ten_percent_rounded_down(self):
        assert referral_discount(9900) == 990
        assert referral_discount(999) == 99
        assert referral_discount(0) == 0

    def test_create_returns_unused_code(self, client, auth_headers, referrer, course):
        response = client.post(
            "/api/referrals",
            json={"courseId": course.id},
            headers=auth_headers(referrer),
        )

        assert response.status_code == 201
        data = response.json()
        assert data["userId"] == referrer.id
        assert data["courseId"] == course.id
        assert data["usedCount"] == 0
        assert len(data["code"]) == 8

    def test_create_for_unknown_course_is_404(self, client, auth_headers, referrer):
        response = client.post(
            "/api/referrals", json={"courseId": 999}, headers=auth_headers(referrer)
        )
        assert response.status_code == 404
        assert "error" in response.json()

    def test_create_requires_authentication(self, client, course):
        response = client.post("/api/referrals", json={"courseId": course.id})
        assert response.status_code == 401

    def test_list_returns_only_own_codes(
        self, client, auth_headers, referrer, student, course
    ):
        _create_code(client, auth_headers, referrer, course)
        _create_code(client, auth_headers, student, course)

        response = client.get("/api/referrals", headers=auth_headers(referrer))

        assert response.status_code == 200
        codes = response.json()
        assert len(codes) == 1
        assert codes[0]["userId"] == referrer.id
        assert codes[0]["course"]["slug"] == course.slug


class TestLookup:
    def test_owner_sees_code_with_usage(self, client, auth_headers, referrer, course):
        code = _create_code(client, auth_headers, referrer, course)

        response = client.get(f"/api/referrals/{code}", headers=auth_headers(referrer))

        assert response.status_code == 200
        data = response.json()
        assert data["code"] == code
        assert data["usedCount"] == 0
        assert data["course"]["id"] == course.id

    def test_other_users_are_forbidden(
        self, client, auth_headers, referrer, student, admin, course
    ):
        code = _create_code(client, auth_headers, referrer, course)

        assert (
            client.get(f"/api/referrals/{code}", headers=auth_headers(student)).status_code
            == 403
        )
        assert (
            client.get(f"/api/referrals/{code}", headers=auth_headers(admin)).status_code
            == 200
        )

    def test_unknown_code_is_404(self, client, auth_headers, student):
        response = client.get("/api/referrals/NOPE1234", headers=auth_headers(student))
        assert response.status_code == 404

    def test_user_referrals_listing(
        self, client, auth_headers, referrer, student, admin, course
    ):
        _create_code(client, auth_headers, referrer, course)
        _create_code(client, auth_headers, referrer, course)

        own = client.get(
            f"/api/users/{referrer.id}/referrals", headers=auth_headers(referrer)
        )
        as_admin = client.get(
            f"/api/users/{referrer.id}/referrals", headers=auth_headers(admin)
        )
        other = client.get(
            f"/api/users/{referrer.id}/referrals", headers=auth_headers(student)
        )

        assert own.status_code == 200
        assert len(own.json()) == 2
        assert {r["userId"] for r in own.json()} == {referrer.id}
        assert as_admin.status_code == 200
        assert len(as_admin.json()) == 2
        assert other.status_code == 403


class TestValidate:
    def test_valid_code_shows_course(self, client, auth_headers, referrer, course):
        code = _create_code(client, auth_headers, referrer, course)

        response = client.get(f"/api/referrals/{code}/validate")

        assert response.status_code == 200
        data = response.json()
        assert data["valid"] is True
        assert data["referral"]["code"] == code
        assert data["referral"]["course"]["price"] == course.price

    def test_unknown_code_is_404(self, client):
        response = client.get("/api/referrals/NOPE1234/validate")
        assert response.status_code == 404

    def test_own_code_is_rejected(self, client, auth_headers, referrer, course):
        code = _create_code(client, auth_headers, referrer, course)

        response = client.get(
            f"/api/referrals/{code}/validate", headers=auth_headers(referrer)
        )

        assert response.status_code == 400
        assert response.json()["error"] == "You cannot use your own referral code"

    def test_validate_does_not_change_usage(
        self, client, auth_headers, referrer, course, db
    ):
        code = _create_code(client, auth_headers, referrer, course)

        client.get(f"/api/referrals/{code}/validate")

        referral = db.query(Referral).filter(Referral.code == code).one()
        assert referral.used_count == 0


class TestApply:
    def test_apply_enrolls_with_discount(
        self, client, auth_headers, referrer, student, course, db
    ):
        code = _create_code(client, auth_headers, referrer, course)

        response = client.post(
            f"/api/referrals/{code}/apply", headers=auth_headers(student)
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["success"] is True
        enrollment = data["userCourse"]
        assert enrollment["userId"] == student.id
        assert enrollment["courseId"] == course.id
        assert enrollment["price"] == 9900
        assert enrollment["discount"] == 990
        assert enrollment["finalPrice"] == 8910
        assert enrollment["referralCode"] == code
        assert enrollment["referredBy"] == referrer.id
        assert enrollment["progress"] == 0
        assert enrollment["completedLessons"] == []

        referral = db.query(Referral).filter(Referral.code == code).one()
        assert referral.used_count == 1

        event = db.query(Event).filter(Event.event_type == "referral_used").one()
        assert event.user_id == student.id
        assert event.event_metadata["referrerId"] == referrer.id

    def test_self_referral_is_rejected_without_side_effects(
        self, client, auth_headers, referrer, course, db
    ):
        code = _create_code(client, auth_headers, referrer, course)

        response = client.post(
            f"/api/referrals/{code}/apply", headers=auth_headers(referrer)
        )

        assert response.status_code == 400
        assert db.query(UserCourse).count() == 0
        referral = db.query(Referral).filter(Referral.code == code).one()
        assert referral.used_count == 0

    def test_second_apply_is_conflict_and_counter_unchanged(
        self, client, auth_headers, referrer, student, course, db
    ):
        code = _create_code(client, auth_headers, referrer, course)
        first = client.post(
            f"/api/referrals/{code}/apply", headers=auth_headers(student)
        )
        assert first.status_code == 200

        second = client.post(
            f"/api/referrals/{code}/apply", headers=auth_headers(student)
        )

        assert second.status_code == 409
        assert second.json()["error"] == "You already own this course"
        assert db.query(UserCourse).count() == 1
        referral = db.query(Referral).filter(Referral.code == code).one()
        assert referral.used_count == 1
        assert db.query(Event).filter(Event.event_type == "referral_used").count() == 1

    def test_unknown_code_is_404(self, client, auth_headers, student):
        response = client.post(
            "/api/referrals/NOPE1234/apply", headers=auth_headers(student)
        )
        assert response.status_code == 404

    def test_apply_requires_authentication(self, client, auth_headers, referrer, course):
        code = _create_code(client, auth_headers, referrer, course)
        response = client.post(f"/api/referrals/{code}/apply")
        assert response.status_code == 401


class TestReferralService:
    def test_self_referral_error(self, db, referrer, course):
        service = ReferralService(db)
        referral = service.generate(referrer.id, course.id)

        with pytest.raises(SelfReferralError):
            service.apply(referral.code, referrer.id)

    def test_already_enrolled_error_leaves_counter(self, db, referrer, student, course):
        service = ReferralService(db)
        referral = service.generate(referrer.id, course.id)
        service.apply(referral.code, student.id)

        with pytest.raises(AlreadyEnrolledError):
            service.apply(referral.code, student.id)

        db.expire_all()
        assert db.query(Referral).filter(Referral.id == referral.id).one().used_count == 1

    def test_concurrent_redemptions_count_every_use(self, db, make_user, referrer, course):
        code = ReferralService(db).generate(referrer.id, course.id).code
        buyers = [make_user(f"buyer{i}@example.com").id for i in range(8)]
        errors = []

        def redeem(user_id):
            session = SessionLocal()
            try:
                ReferralService(session).apply(code, user_id)
            except Exception as e:
                errors.append(e)
            finally:
                session.close()

        threads = [threading.Thread(target=redeem, args=(uid,)) for uid in buyers]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert errors == []
        db.expire_all()
        referral = db.query(Referral).filter(Referral.code == code).one()
        assert referral.used_count == len(buyers)
        assert db.query(UserCourse).count() == len(buyers)

    def test_concurrent_redemptions_by_one_user_enroll_once(
        self, db, referrer, student, course
    ):
        code = ReferralService(db).generate(referrer.id, course.id).code
        attempts = 6
        results = []

        def redeem():
            session = SessionLocal()
            try:
                ReferralService(session).apply(code, student.id)
                results.append("enrolled")
            except Exception as e:
                results.append(e)
            finally:
                session.close()

        threads = [threading.Thread(target=redeem) for _ in range(attempts)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert results.count("enrolled") == 1
        rejected = [r for r in results if r != "enrolled"]
        assert len(rejected) == attempts - 1
        assert all(isinstance(r, AlreadyEnrolledError) for r in rejected)

        db.expire_all()
        referral = db.query(Referral).filter(Referral.code == code).one()
        assert referral.used_count == 1
        assert db.query(UserCourse).count() == 1

    def test_unique_constraint_catches_missed_duplicate(
        self, monkeypatch, db, referrer, student, course
    ):
        service = ReferralService(db)
        code = service.generate(referrer.id, course.id).code
        service.apply(code, student.id)

        # Simulate a racing request whose existence check ran before the insert
        monkeypatch.setattr(UserCourseService, "get_enrollment", lambda *args: None)

        with pytest.raises(AlreadyEnrolledError):
            service.apply(code, student.id)

        db.expire_all()
        assert db.query(UserCourse).count() == 1
        assert db.query(Referral).filter(Referral.code == code).one().used_count == 1


class TestCodeCollisions:
    def test_taken_code_is_regenerated(self, monkeypatch, db, referrer, course):
        taken = ReferralService(db).generate(referrer.id, course.id).code
        candidates = iter([taken, taken, "FRESHCDE"])
        monkeypatch.setattr(
            "coursehub.services.referral.generate_code", lambda: next(candidates)
        )

        referral = ReferralService(db).generate(referrer.id, course.id)

        assert referral.code == "FRESHCDE"
        assert db.query(Referral).count() == 2

    def test_gives_up_after_bounded_attempts(self, monkeypatch, db, referrer, course):
        taken = ReferralService(db).generate(referrer.id, course.id).code
        calls = []

        def always_taken():
            calls.append(1)
            return taken

        monkeypatch.setattr("coursehub.services.referral.generate_code", always_taken)

        with pytest.raises(InternalError):
            ReferralService(db).generate(referrer.id, course.id)

        assert len(calls) == MAX_CODE_ATTEMPTS
        assert db.query(Referral).count() == 1
