from datetime import datetime

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.app.models.job import Job
from backend.app.repositories.job_repo import JobRepository
from backend.app.repositories.proposal_repo import ProposalRepository
from backend.app.services import job_lifecycle, proposal_lifecycle, user_service
from backend.app.utils.error_handlers import (
    ConflictError,
    ForbiddenError,
    InvalidStateError,
    NotFoundError,
)


@pytest.fixture()
def people(db_session):
    def make(email):
        return user_service.register_user(db_session, full_name=email.split("@")[0], email=email, password="Testpass123!")

    return {
        "client": make("client@example.com"),
        "ann": make("ann@example.com"),
        "ben": make("ben@example.com"),
        "cat": make("cat@example.com"),
    }


@pytest.fixture()
def job(db_session, people) -> Job:
    client = people["client"]
    return job_lifecycle.create_job(
        db_session,
        client_id=client.id,
        client_name=client.full_name,
        title="Design a logo",
        description="Vector logo, three concepts",
        category="design",
        budget=150,
        deadline=datetime(2030, 6, 1),
        requirements=["Illustrator"],
    )


def _submit(db, job, freelancer, rate=100.0):
    return proposal_lifecycle.submit_proposal(
        db,
        job_id=job.id,
        freelancer_id=freelancer.id,
        freelancer_name=freelancer.full_name,
        rate=rate,
        delivery_time=3,
        cover_letter="Portfolio attached",
    )


def test_submit_appends_to_job(db_session, people, job):
    proposal = _submit(db_session, job, people["ann"])
    db_session.refresh(job)
    assert proposal.status == "pending"
    assert job.proposals == [proposal.id]


def test_duplicate_submit_rolls_back_cleanly(db_session, people, job):
    _submit(db_session, job, people["ann"])
    with pytest.raises(ConflictError):
        _submit(db_session, job, people["ann"], rate=90.0)

    db_session.refresh(job)
    assert len(job.proposals) == 1
    assert len(proposal_lifecycle.list_proposals_for_job(db_session, job.id)) == 1


def test_submit_after_job_vanishes_is_not_found(db_session, people, job, monkeypatch):
    # The job is deleted by another session after the checks pass; the insert then fails.
    def create_after_delete(self, **fields):
        other = Session(bind=db_session.get_bind())
        try:
            other.query(Job).filter(Job.id == job.id).delete()
            other.commit()
        finally:
            other.close()
        raise IntegrityError("INSERT INTO proposals", {}, Exception("FOREIGN KEY constraint failed"))

    monkeypatch.setattr(ProposalRepository, "create", create_after_delete)
    with pytest.raises(NotFoundError):
        _submit(db_session, job, people["ann"])


def test_unexplained_integrity_error_is_not_reported_as_duplicate(db_session, people, job, monkeypatch):
    def failing_create(self, **fields):
        raise IntegrityError("INSERT INTO proposals", {}, Exception("NOT NULL constraint failed"))

    monkeypatch.setattr(ProposalRepository, "create", failing_create)
    with pytest.raises(IntegrityError):
        _submit(db_session, job, people["ann"])


def test_submit_preconditions(db_session, people, job):
    with pytest.raises(ForbiddenError):
        _submit(db_session, job, people["client"])

    job_lifecycle.update_job(db_session, job_id=job.id, patch={"status": "completed"}, client_id=people["client"].id)
    with pytest.raises(InvalidStateError):
        _submit(db_session, job, people["ann"])


def test_accept_scenario_three_bids(db_session, people, job):
    first = _submit(db_session, job, people["ann"], rate=100)
    second = _submit(db_session, job, people["ben"], rate=120)
    third = _submit(db_session, job, people["cat"], rate=140)

    accepted = proposal_lifecycle.accept_proposal(db_session, proposal_id=second.id, client_id=people["client"].id)
    assert accepted.status == "accepted"

    db_session.expire_all()
    assert proposal_lifecycle.get_proposal(db_session, first.id).status == "rejected"
    assert proposal_lifecycle.get_proposal(db_session, third.id).status == "rejected"
    job = job_lifecycle.get_job(db_session, job.id)
    assert job.status == "in-progress"
    assert job.selected_proposal == second.id


def test_accept_leaves_withdrawn_siblings_withdrawn(db_session, people, job):
    chosen = _submit(db_session, job, people["ann"])
    stale = ProposalRepository(db_session).create(
        job_id=job.id,
        freelancer_id=people["ben"].id,
        freelancer_name="ben",
        rate=1.0,
        delivery_time=1,
        cover_letter="old",
        status="withdrawn",
    )
    db_session.commit()

    proposal_lifecycle.accept_proposal(db_session, proposal_id=chosen.id, client_id=people["client"].id)
    db_session.expire_all()
    assert proposal_lifecycle.get_proposal(db_session, stale.id).status == "withdrawn"


def test_accept_by_stranger_changes_nothing(db_session, people, job):
    proposal = _submit(db_session, job, people["ann"])
    with pytest.raises(ForbiddenError):
        proposal_lifecycle.accept_proposal(db_session, proposal_id=proposal.id, client_id=people["ben"].id)

    db_session.expire_all()
    assert proposal_lifecycle.get_proposal(db_session, proposal.id).status == "pending"
    assert job_lifecycle.get_job(db_session, job.id).status == "open"


def test_accept_loses_race_to_concurrent_accept(db_session, people, job):
    mine = _submit(db_session, job, people["ann"])
    _submit(db_session, job, people["ben"])

    # Load the job while it is still open, then let another session take it.
    assert JobRepository(db_session).find_by_id(job.id).status == "open"
    other = Session(bind=db_session.get_bind())
    try:
        other.query(Job).filter(Job.id == job.id).update({"status": "in-progress", "selected_proposal": 999})
        other.commit()
    finally:
        other.close()

    with pytest.raises(InvalidStateError):
        proposal_lifecycle.accept_proposal(db_session, proposal_id=mine.id, client_id=people["client"].id)

    db_session.expire_all()
    assert proposal_lifecycle.get_proposal(db_session, mine.id).status == "pending"
    assert job_lifecycle.get_job(db_session, job.id).selected_proposal == 999


def test_update_only_touches_allowed_fields(db_session, people, job):
    proposal = _submit(db_session, job, people["ann"])
    updated = proposal_lifecycle.update_proposal(
        db_session,
        proposal_id=proposal.id,
        patch={"rate": 75.0, "cover_letter": "  Revised  ", "status": "accepted", "job_id": 12},
        freelancer_id=people["ann"].id,
    )
    assert updated.rate == 75.0
    assert updated.cover_letter == "Revised"
    assert updated.status == "pending"
    assert updated.job_id == job.id


def test_withdraw_then_lookup_is_not_found(db_session, people, job):
    proposal = _submit(db_session, job, people["ann"])
    proposal_id = proposal.id

    assert proposal_lifecycle.withdraw_proposal(db_session, proposal_id=proposal_id, freelancer_id=people["ann"].id)

    with pytest.raises(NotFoundError):
        proposal_lifecycle.get_proposal(db_session, proposal_id)
    assert job_lifecycle.get_job(db_session, job.id).proposals == []


def test_withdraw_accepted_is_invalid_state(db_session, people, job):
    proposal = _submit(db_session, job, people["ann"])
    proposal_lifecycle.accept_proposal(db_session, proposal_id=proposal.id, client_id=people["client"].id)

    with pytest.raises(InvalidStateError):
        proposal_lifecycle.withdraw_proposal(db_session, proposal_id=proposal.id, freelancer_id=people["ann"].id)
    assert proposal_lifecycle.get_proposal(db_session, proposal.id).status == "accepted"


def test_delete_job_removes_proposals(db_session, people, job):
    proposal = _submit(db_session, job, people["ann"])
    proposal_id = proposal.id
    job_lifecycle.delete_job(db_session, job_id=job.id, client_id=people["client"].id)

    with pytest.raises(NotFoundError):
        proposal_lifecycle.get_proposal(db_session, proposal_id)
    assert proposal_lifecycle.list_proposals_for_freelancer(db_session, people["ann"].id) == []


def test_accepted_job_cannot_be_reopened_for_a_second_winner(db_session, people, job):
    first = _submit(db_session, job, people["ann"])
    proposal_lifecycle.accept_proposal(db_session, proposal_id=first.id, client_id=people["client"].id)

    for status in ("open", "in-progress"):
        with pytest.raises(InvalidStateError):
            job_lifecycle.update_job(
                db_session, job_id=job.id, patch={"status": status}, client_id=people["client"].id
            )

    with pytest.raises(InvalidStateError):
        _submit(db_session, job, people["ben"])
    db_session.expire_all()
    accepted = [p for p in proposal_lifecycle.list_proposals_for_job(db_session, job.id) if p.status == "accepted"]
    assert [p.id for p in accepted] == [first.id]
    assert job_lifecycle.get_job(db_session, job.id).selected_proposal == first.id
