"""
Unit Tests for the registration workflow
"""
import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.core.exceptions import (
    DuplicateRegistrationError,
    EmptySelectionError,
    ForbiddenError,
    InvalidStatusTransitionError,
    RegistrationNotFoundError,
    ScopeViolationError,
    SportNotFoundError,
    StorageFailureError,
    StudentNotFoundError,
)
from app.models import ActivityLog, Registration
from app.schemas.settings import QuotaConfig
from app.services import quota_service, registration_service

LIMIT_2 = QuotaConfig(max_game_registrations=2, max_athletic_registrations=2)


async def _count_registrations(db) -> int:
    return (await db.execute(select(func.count(Registration.id)))).scalar_one()


class TestRegisterStudents:
    """Tests for registration_service.register_students"""

    @pytest.mark.asyncio
    async def test_registers_pending_by_default(
        self, db_session, second_year_coordinator, second_year_role, make_student, make_sport
    ):
        students = [await make_student("second") for _ in range(3)]
        sport = await make_sport("game")

        result = await registration_service.register_students(
            db_session, second_year_role, second_year_coordinator.id,
            [s.id for s in students], sport.id, False, LIMIT_2,
        )

        assert result.outcome == "registered"
        assert result.initial_status == "pending"
        assert len(result.registration_ids) == 3
        assert result.failures == []
        assert await _count_registrations(db_session) == 3

        log = (await db_session.execute(
            select(ActivityLog).where(ActivityLog.action == "students_registered")
        )).scalar_one()
        assert log.user_id == second_year_coordinator.id
        assert log.details["sport_id"] == sport.id
        assert log.details["student_count"] == 3

    @pytest.mark.asyncio
    async def test_auto_approve(self, db_session, second_year_coordinator, second_year_role, make_student, make_sport):
        student = await make_student("second")
        sport = await make_sport("athletic")
        config = QuotaConfig(max_athletic_registrations=2, auto_approve=True)

        result = await registration_service.register_students(
            db_session, second_year_role, second_year_coordinator.id, [student.id], sport.id, False, config
        )

        assert result.initial_status == "approved"
        registration = await db_session.get(Registration, result.registration_ids[0])
        assert registration.status == "approved"

    @pytest.mark.asyncio
    async def test_empty_selection(self, db_session, second_year_coordinator, second_year_role, make_sport):
        sport = await make_sport()
        with pytest.raises(EmptySelectionError):
            await registration_service.register_students(
                db_session, second_year_role, second_year_coordinator.id, [], sport.id, False, LIMIT_2
            )

    @pytest.mark.asyncio
    async def test_student_outside_year_rejects_whole_request(
        self, db_session, second_year_coordinator, second_year_role, make_student, make_sport
    ):
        own = await make_student("second")
        other = await make_student("third")
        sport = await make_sport()

        with pytest.raises(ScopeViolationError) as exc_info:
            await registration_service.register_students(
                db_session, second_year_role, second_year_coordinator.id,
                [own.id, other.id], sport.id, False, LIMIT_2,
            )
        assert exc_info.value.student_ids == [other.id]
        assert await _count_registrations(db_session) == 0

    @pytest.mark.asyncio
    async def test_admin_cannot_register(self, db_session, admin_user, admin_role, make_student, make_sport):
        student = await make_student("first")
        sport = await make_sport()
        with pytest.raises(ScopeViolationError):
            await registration_service.register_students(
                db_session, admin_role, admin_user.id, [student.id], sport.id, False, LIMIT_2
            )

    @pytest.mark.asyncio
    async def test_unknown_sport(self, db_session, second_year_coordinator, second_year_role, make_student):
        student = await make_student("second")
        with pytest.raises(SportNotFoundError):
            await registration_service.register_students(
                db_session, second_year_role, second_year_coordinator.id, [student.id], 9999, False, LIMIT_2
            )

    @pytest.mark.asyncio
    async def test_inactive_sport(self, db_session, second_year_coordinator, second_year_role, make_student, make_sport):
        student = await make_student("second")
        sport = await make_sport(is_active=False)
        with pytest.raises(SportNotFoundError):
            await registration_service.register_students(
                db_session, second_year_role, second_year_coordinator.id, [student.id], sport.id, False, LIMIT_2
            )

    @pytest.mark.asyncio
    async def test_unknown_student(self, db_session, second_year_coordinator, second_year_role, make_sport):
        sport = await make_sport()
        with pytest.raises(StudentNotFoundError) as exc_info:
            await registration_service.register_students(
                db_session, second_year_role, second_year_coordinator.id, [424242], sport.id, False, LIMIT_2
            )
        assert exc_info.value.student_ids == [424242]

    @pytest.mark.asyncio
    async def test_all_duplicates(
        self, db_session, second_year_coordinator, second_year_role, make_student, make_sport, make_registration
    ):
        student = await make_student("second")
        sport = await make_sport()
        await make_registration(student, sport)

        with pytest.raises(DuplicateRegistrationError) as exc_info:
            await registration_service.register_students(
                db_session, second_year_role, second_year_coordinator.id, [student.id], sport.id, False, LIMIT_2
            )
        assert exc_info.value.student_ids == [student.id]
        assert await _count_registrations(db_session) == 1

    @pytest.mark.asyncio
    async def test_partial_duplicates_reported_as_failures(
        self, db_session, second_year_coordinator, second_year_role, make_student, make_sport, make_registration
    ):
        already = await make_student("second")
        fresh = await make_student("second")
        sport = await make_sport()
        await make_registration(already, sport)

        result = await registration_service.register_students(
            db_session, second_year_role, second_year_coordinator.id,
            [already.id, fresh.id], sport.id, False, LIMIT_2,
        )

        assert result.outcome == "registered"
        assert len(result.registration_ids) == 1
        assert [(f.student_id, f.reason) for f in result.failures] == [(already.id, "duplicate_registration")]
        assert await _count_registrations(db_session) == 2

    @pytest.mark.asyncio
    async def test_quota_warning_then_override(
        self, db_session, second_year_coordinator, second_year_role, make_student, make_sport, make_registration
    ):
        students = [await make_student("second") for _ in range(5)]
        full_a, full_b = students[0], students[1]
        for student in (full_a, full_b):
            await make_registration(student, await make_sport("game"))
            await make_registration(student, await make_sport("game"))
        target = await make_sport("game")
        ids = [s.id for s in students]
        before = await _count_registrations(db_session)

        warning = await registration_service.register_students(
            db_session, second_year_role, second_year_coordinator.id, ids, target.id, False, LIMIT_2
        )

        assert warning.outcome == "quota_warning"
        assert {w.student_id for w in warning.quota_warnings} == {full_a.id, full_b.id}
        assert all(w.current_count == 2 and w.limit == 2 for w in warning.quota_warnings)
        assert warning.registration_ids == []
        assert await _count_registrations(db_session) == before

        confirmed = await registration_service.register_students(
            db_session, second_year_role, second_year_coordinator.id, ids, target.id, True, LIMIT_2
        )

        assert confirmed.outcome == "registered"
        assert len(confirmed.registration_ids) == 5
        assert await _count_registrations(db_session) == before + 5

    @pytest.mark.asyncio
    async def test_below_limit_registers_without_warning(
        self, db_session, second_year_coordinator, second_year_role, make_student, make_sport, make_registration
    ):
        student = await make_student("second")
        await make_registration(student, await make_sport("game"))
        target = await make_sport("game")

        before = await quota_service.evaluate(db_session, [student.id], "game", LIMIT_2)
        assert before[student.id].exceeded is False

        result = await registration_service.register_students(
            db_session, second_year_role, second_year_coordinator.id, [student.id], target.id, False, LIMIT_2
        )
        assert result.outcome == "registered"

        after = await quota_service.evaluate(db_session, [student.id], "game", LIMIT_2)
        assert after[student.id].current_count == 2
        assert after[student.id].exceeded is True

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_rolls_back_batch(
        self, db_session, second_year_coordinator, second_year_role, make_student, make_sport, make_registration,
        monkeypatch,
    ):
        already = await make_student("second")
        fresh = await make_student("second")
        sport = await make_sport()
        await make_registration(already, sport)
        ids = [fresh.id, already.id]
        sport_id = sport.id

        async def stale_check(db, sport_id, student_ids):
            return set()

        monkeypatch.setattr(registration_service, "_existing_student_ids", stale_check)

        with pytest.raises(DuplicateRegistrationError) as exc_info:
            await registration_service.register_students(
                db_session, second_year_role, second_year_coordinator.id, ids, sport_id, False, LIMIT_2
            )
        assert exc_info.value.student_ids == ids
        assert await _count_registrations(db_session) == 1

    @pytest.mark.asyncio
    async def test_storage_failure_on_insert(
        self, db_session, second_year_coordinator, second_year_role, make_student, make_sport, monkeypatch
    ):
        student = await make_student("second")
        sport = await make_sport()
        student_id, sport_id = student.id, sport.id

        async def failing_flush(*args, **kwargs):
            raise OperationalError("INSERT INTO registrations", {}, Exception("disk I/O error"))

        monkeypatch.setattr(db_session, "flush", failing_flush)

        with pytest.raises(StorageFailureError):
            await registration_service.register_students(
                db_session, second_year_role, second_year_coordinator.id, [student_id], sport_id, False, LIMIT_2
            )
        assert await _count_registrations(db_session) == 0

    @pytest.mark.asyncio
    async def test_other_category_does_not_trigger_warning(
        self, db_session, second_year_coordinator, second_year_role, make_student, make_sport, make_registration
    ):
        student = await make_student("second")
        await make_registration(student, await make_sport("game"))
        await make_registration(student, await make_sport("game"))
        athletic = await make_sport("athletic")

        result = await registration_service.register_students(
            db_session, second_year_role, second_year_coordinator.id, [student.id], athletic.id, False, LIMIT_2
        )
        assert result.outcome == "registered"


class TestStatusTransitions:
    """Tests for approve / reject"""

    @pytest.mark.asyncio
    async def test_admin_approves_pending(self, db_session, admin_user, admin_role, make_student, make_sport, make_registration):
        registration = await make_registration(await make_student(), await make_sport())

        updated = await registration_service.update_registration_status(
            db_session, admin_role, admin_user.id, registration.id, "approved"
        )
        assert updated.status == "approved"

    @pytest.mark.asyncio
    async def test_rejected_is_terminal(self, db_session, admin_user, admin_role, make_student, make_sport, make_registration):
        registration = await make_registration(await make_student(), await make_sport(), status="rejected")

        with pytest.raises(InvalidStatusTransitionError):
            await registration_service.update_registration_status(
                db_session, admin_role, admin_user.id, registration.id, "approved"
            )

    @pytest.mark.asyncio
    async def test_coordinator_cannot_approve(
        self, db_session, second_year_coordinator, second_year_role, make_student, make_sport, make_registration
    ):
        registration = await make_registration(await make_student("second"), await make_sport())

        with pytest.raises(ForbiddenError):
            await registration_service.update_registration_status(
                db_session, second_year_role, second_year_coordinator.id, registration.id, "approved"
            )

    @pytest.mark.asyncio
    async def test_missing_registration(self, db_session, admin_user, admin_role):
        with pytest.raises(RegistrationNotFoundError):
            await registration_service.update_registration_status(
                db_session, admin_role, admin_user.id, 777, "rejected"
            )


class TestDeleteRegistration:
    """Tests for registration_service.delete_registration"""

    @pytest.mark.asyncio
    async def test_coordinator_deletes_own_year(
        self, db_session, second_year_coordinator, second_year_role, make_student, make_sport, make_registration
    ):
        registration = await make_registration(await make_student("second"), await make_sport())

        await registration_service.delete_registration(
            db_session, second_year_role, second_year_coordinator.id, registration.id
        )
        assert await _count_registrations(db_session) == 0

    @pytest.mark.asyncio
    async def test_coordinator_cannot_delete_other_year(
        self, db_session, second_year_coordinator, second_year_role, make_student, make_sport, make_registration
    ):
        registration = await make_registration(await make_student("fourth"), await make_sport())

        with pytest.raises(ScopeViolationError):
            await registration_service.delete_registration(
                db_session, second_year_role, second_year_coordinator.id, registration.id
            )
        assert await _count_registrations(db_session) == 1


class TestListRegistrations:
    """Tests for registration_service.list_registrations"""

    @pytest.mark.asyncio
    async def test_scoped_to_coordinator_year(
        self, db_session, admin_role, second_year_role, make_student, make_sport, make_registration
    ):
        sport = await make_sport()
        await make_registration(await make_student("second"), sport)
        await make_registration(await make_student("third"), sport)

        assert len(await registration_service.list_registrations(db_session, admin_role)) == 2
        visible = await registration_service.list_registrations(db_session, second_year_role)
        assert [r.student.year for r in visible] == ["second"]

    @pytest.mark.asyncio
    async def test_filters(self, db_session, admin_role, make_student, make_sport, make_registration):
        game = await make_sport("game", name="Football")
        athletic = await make_sport("athletic", name="Long Jump")
        student = await make_student("first", name="Zara Khan")
        await make_registration(student, game, status="approved")
        await make_registration(student, athletic)

        approved = await registration_service.list_registrations(db_session, admin_role, status="approved")
        assert [r.sport.name for r in approved] == ["Football"]
        athletics = await registration_service.list_registrations(db_session, admin_role, category="athletic")
        assert [r.sport.name for r in athletics] == ["Long Jump"]
        found = await registration_service.list_registrations(db_session, admin_role, search="zara")
        assert len(found) == 2
