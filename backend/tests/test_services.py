import jwt
import pytest

from training_center.config import settings
from training_center import models, repositories
from training_center.services import (
    AuthService, CatalogService, DuplicateCodeError, DuplicateUsernameError, dashboard_counts,
)


def test_unknown_kind_rejected(session):
    with pytest.raises(ValueError):
        CatalogService(session, 'department')


def test_duplicate_code_translated(session):
    svc = CatalogService(session, 'course')
    svc.create({'code': 'SVC-1', 'name': 'Service course'})
    with pytest.raises(DuplicateCodeError) as exc:
        svc.create({'code': 'SVC-1', 'name': 'Again'})
    assert 'SVC-1' in str(exc.value)
    # the session is usable again after the rollback
    assert [c.code for c in svc.list()] == ['SVC-1']


def test_course_code_can_be_renamed_but_not_to_a_taken_one(session):
    svc = CatalogService(session, 'course')
    a = svc.create({'code': 'A-1', 'name': 'A'})
    svc.create({'code': 'B-1', 'name': 'B'})
    assert svc.update(a, {'code': 'A-2'}).code == 'A-2'
    with pytest.raises(DuplicateCodeError):
        svc.update(svc.get(a.id), {'code': 'B-1'})


def test_generated_fields_are_read_only(session):
    svc = CatalogService(session, 'class')
    k = svc.create({'name': 'Weekend Java', 'capacity': 10})
    with pytest.raises(ValueError, match='current_count'):
        svc.update(k, {'current_count': 5})
    with pytest.raises(ValueError, match='code'):
        svc.update(k, {'code': 'CLS1'})


def test_list_filters_by_name(session):
    svc = CatalogService(session, 'teacher')
    svc.create({'name': 'Wang Fang'})
    svc.create({'name': 'Zhang Wei'})
    assert [t.name for t in svc.list(name='WANG')] == ['Wang Fang']
    assert len(svc.list()) == 2


def test_delete_removes_row(session):
    svc = CatalogService(session, 'student')
    s = svc.create({'name': 'Short stay'})
    sid = s.id
    svc.delete(s)
    assert svc.get(sid) is None


def test_authenticate_issues_token_with_role(session):
    auth = AuthService(session)
    user = auth.register('staff', 'pw', 'teacher')
    token = auth.authenticate('staff', 'pw')
    payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    assert payload['user_id'] == user.id
    assert payload['role'] == 'teacher'
    assert auth.authenticate('staff', 'nope') is None
    assert auth.authenticate('ghost', 'pw') is None


def test_register_rejects_unknown_role(session):
    with pytest.raises(ValueError):
        AuthService(session).register('x', 'pw', 'superuser')


def test_lookup_by_generated_code(session):
    svc = CatalogService(session, 'student')
    s = svc.create({'name': 'Found by code'})
    assert svc.repo.get_by_code(s.code).id == s.id
    assert svc.repo.get_by_code('STD0') is None


def test_list_matches_percent_and_underscore_literally(session):
    svc = CatalogService(session, 'course')
    for code, name in [('W-1', 'Pwned'), ('W-2', 'Alpha'), ('W-3', '50% off'), ('W-4', 'data_science')]:
        svc.create({'code': code, 'name': name})
    assert [c.name for c in svc.list(name='%')] == ['50% off']
    assert [c.name for c in svc.list(name='_')] == ['data_science']
    assert svc.list(name='l_h') == []


def test_null_status_rejected_before_database(session):
    svc = CatalogService(session, 'teacher')
    t = svc.create({'name': 'Keeps status'})
    with pytest.raises(ValueError, match='status cannot be null'):
        svc.update(t, {'status': None})
    assert svc.get(t.id).status == models.TeacherStatus.employed


def test_duplicate_username_rejected(session):
    auth = AuthService(session)
    auth.register('same', 'pw')
    with pytest.raises(DuplicateUsernameError):
        auth.register('same', 'pw', 'teacher')
    assert len(repositories.UserRepository(session).list()) == 1


def test_disabled_account_cannot_authenticate(session):
    auth = AuthService(session)
    user = auth.register('paused', 'pw', related_id=3)
    repositories.UserRepository(session).set_status(user, models.UserStatus.disabled)
    assert auth.authenticate('paused', 'pw') is None
    repositories.UserRepository(session).set_status(user, models.UserStatus.enabled)
    token = auth.authenticate('paused', 'pw')
    assert jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])['related_id'] == 3


def test_dashboard_counts_each_kind(session):
    CatalogService(session, 'course').create({'code': 'D-1', 'name': 'One'})
    CatalogService(session, 'student').create({'name': 'S1'})
    CatalogService(session, 'student').create({'name': 'S2'})
    assert dashboard_counts(session) == {
        'course_count': 1, 'student_count': 2, 'teacher_count': 0, 'class_count': 0,
    }
