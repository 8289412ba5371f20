"""
Tests for loaders.py - batched record loading.
"""

from rankmerge.loaders import memory_loader, orm_loader, row_loader

from conftest import Job, Posting


class TestOrmLoader:
    """ORM instance loading."""

    def test_loads_requested_ids(self, db_session):
        load = orm_loader(db_session, Job)

        jobs = load([3, 1])

        assert sorted(job.id for job in jobs) == [1, 3]
        assert all(isinstance(job, Job) for job in jobs)

    def test_unknown_ids_ignored(self, db_session):
        load = orm_loader(db_session, Job)

        assert [job.id for job in load([2, 99])] == [2]

    def test_empty_ids(self, db_session):
        assert orm_loader(db_session, Job)([]) == []

    def test_custom_key_field(self, db_session):
        load = orm_loader(db_session, Job, key_field="role_id")

        jobs = load(["beta|lever:67890"])

        assert [job.company for job in jobs] == ["beta"]


class TestRowLoader:
    """Row mapping loading."""

    def test_rows_are_dicts(self, db_session):
        rows = row_loader(db_session, Job)([1])

        assert rows == [
            {"id": 1, "role_id": "acme|greenhouse:12345", "company": "acme", "title": "software engineer"}
        ]

    def test_accepts_table(self, db_session):
        rows = row_loader(db_session, Job.__table__, key_field="company")(["gamma", "beta"])

        assert sorted(row["id"] for row in rows) == [2, 3]

    def test_empty_ids(self, db_session):
        assert row_loader(db_session, Job)([]) == []


class TestMemoryLoader:
    """In-memory loading."""

    def test_storage_order(self, job_rows):
        rows = memory_loader(job_rows)([3, 1])

        assert [row["id"] for row in rows] == [1, 3]

    def test_objects(self):
        postings = [Posting(1, "engineer"), Posting(2, "designer")]

        assert memory_loader(postings)([2]) == [postings[1]]

    def test_duplicates_kept(self):
        rows = [{"id": 1, "v": "a"}, {"id": 1, "v": "b"}]

        assert memory_loader(rows)([1]) == rows
