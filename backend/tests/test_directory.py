"""Tests for the public directory query engine."""

import math
from datetime import datetime, timezone

import pytest

from app.errors import InvalidInput, NotFound
from app.lifecycle import ProjectStatus
from app.models.validation_result import ValidationResult
from app.services import directory_service
from app.services.directory_service import DirectoryFilters

STATUSES = [
    ProjectStatus.PENDING,
    ProjectStatus.REJECTED,
    ProjectStatus.CHANGES_REQUESTED,
]


@pytest.fixture
def mixed_directory(make_project):
    """15 approved projects interleaved with 5 unpublished ones."""
    approved = []
    hidden = []
    for i in range(20):
        if i % 4 == 3:
            hidden.append(make_project(status=STATUSES[i % 3], type="bonds", blockchain="Polygon"))
        else:
            approved.append(make_project(
                status=ProjectStatus.APPROVED,
                type="real-estate" if i % 2 else "bonds",
                blockchain="Ethereum" if i % 3 else "Polygon",
                roi=float(i),
            ))
    return approved, hidden


class TestPublishableOnly:
    def test_fifteen_of_twenty(self, db, mixed_directory):
        approved, _ = mixed_directory
        result = directory_service.list_publishable(db, page=1, limit=10)

        assert result.total == 15
        assert len(result.items) == 10
        assert result.total_pages == 2
        assert all(p.status == "approved" for p in result.items)

        second = directory_service.list_publishable(db, page=2, limit=10)
        assert len(second.items) == 5
        seen = {p.id for p in result.items} | {p.id for p in second.items}
        assert seen == {p.id for p in approved}

    @pytest.mark.parametrize("filters", [
        DirectoryFilters(),
        DirectoryFilters(asset_type="bonds"),
        DirectoryFilters(blockchain="Polygon"),
        DirectoryFilters(asset_type="bonds", blockchain="Polygon", min_roi=0, max_roi=100),
        DirectoryFilters(asset_type="all-types", blockchain="all-blockchains"),
    ])
    def test_never_returns_unapproved(self, db, mixed_directory, filters):
        _, hidden = mixed_directory
        hidden_ids = {p.id for p in hidden}
        result = directory_service.list_publishable(db, filters, page=1, limit=100)
        assert not hidden_ids & {p.id for p in result.items}
        assert all(p.status == "approved" for p in result.items)


class TestPagination:
    @pytest.mark.parametrize("limit", [1, 3, 7, 15, 100])
    def test_total_pages(self, db, mixed_directory, limit):
        result = directory_service.list_publishable(db, page=1, limit=limit)
        assert result.total_pages == math.ceil(15 / limit)
        assert len(result.items) == min(limit, 15)

    @pytest.mark.parametrize("limit", [1, 4, 7, 15])
    @pytest.mark.parametrize("filters", [
        DirectoryFilters(),
        DirectoryFilters(asset_type="bonds"),
        DirectoryFilters(blockchain="Ethereum", min_roi=2, max_roi=14),
    ])
    def test_pages_cover_full_set_once(self, db, mixed_directory, limit, filters):
        """Walking pages 1..total_pages yields every match exactly once."""
        everything = directory_service.list_publishable(db, filters, page=1, limit=100)
        expected = [p.id for p in everything.items]

        first = directory_service.list_publishable(db, filters, page=1, limit=limit)
        collected = [p.id for p in first.items]
        for page in range(2, first.total_pages + 1):
            collected += [p.id for p in directory_service.list_publishable(db, filters, page=page, limit=limit).items]

        assert first.total == len(expected)
        assert len(collected) == len(set(collected))
        assert collected == expected

    def test_empty_directory(self, db):
        result = directory_service.list_publishable(db)
        assert result.total == 0
        assert result.total_pages == 0
        assert result.items == []

    def test_page_past_end_is_empty(self, db, mixed_directory):
        result = directory_service.list_publishable(db, page=9, limit=10)
        assert result.items == []
        assert result.total == 15
        assert result.page == 9

    def test_default_limit(self, db, mixed_directory):
        assert directory_service.list_publishable(db).limit == 10

    @pytest.mark.parametrize("page,limit", [(0, 10), (-1, 10), (1, 0), (1, 101)])
    def test_invalid_paging(self, db, page, limit):
        with pytest.raises(InvalidInput):
            directory_service.list_publishable(db, page=page, limit=limit)

    def test_newest_first_stable(self, db, make_project):
        first = make_project(status=ProjectStatus.APPROVED)
        second = make_project(status=ProjectStatus.APPROVED)
        third = make_project(status=ProjectStatus.APPROVED)

        ids = [p.id for p in directory_service.list_publishable(db).items]
        assert ids == [third.id, second.id, first.id]
        assert ids == [p.id for p in directory_service.list_publishable(db).items]

    def test_tie_broken_by_id(self, db, make_project):
        same_time = datetime(2024, 3, 1, tzinfo=timezone.utc)

        a = make_project(status=ProjectStatus.APPROVED, created_at=same_time)
        b = make_project(status=ProjectStatus.APPROVED, created_at=same_time)

        ids = [p.id for p in directory_service.list_publishable(db).items]
        assert ids == sorted([a.id, b.id])


class TestFilters:
    def test_asset_type(self, db, mixed_directory):
        result = directory_service.list_publishable(db, DirectoryFilters(asset_type="real-estate"), limit=100)
        assert result.total > 0
        assert all(p.type == "real-estate" for p in result.items)

    def test_blockchain(self, db, mixed_directory):
        result = directory_service.list_publishable(db, DirectoryFilters(blockchain="Ethereum"), limit=100)
        assert result.total > 0
        assert all(p.blockchain == "Ethereum" for p in result.items)

    @pytest.mark.parametrize("sentinel", ["", "all", "all-types", "ALL"])
    def test_sentinels_mean_no_filter(self, db, mixed_directory, sentinel):
        result = directory_service.list_publishable(
            db, DirectoryFilters(asset_type=sentinel, blockchain=sentinel), limit=100,
        )
        assert result.total == 15

    def test_roi_bounds_inclusive(self, db, mixed_directory):
        result = directory_service.list_publishable(db, DirectoryFilters(min_roi=4, max_roi=9), limit=100)
        rois = sorted(p.roi for p in result.items)
        assert rois == [4.0, 5.0, 6.0, 8.0, 9.0]

    def test_roi_outside_default_range_hidden(self, db, make_project):
        make_project(status=ProjectStatus.APPROVED, roi=150.0)
        assert directory_service.list_publishable(db).total == 0
        widened = directory_service.list_publishable(db, DirectoryFilters(max_roi=200))
        assert widened.total == 1

    def test_min_above_max(self, db):
        with pytest.raises(InvalidInput):
            directory_service.list_publishable(db, DirectoryFilters(min_roi=50, max_roi=10))

    def test_nan_bound(self, db):
        with pytest.raises(InvalidInput):
            directory_service.list_publishable(db, DirectoryFilters(min_roi=float("nan")))

    def test_cleared_only(self, db, make_project):
        cleared = make_project(status=ProjectStatus.APPROVED)
        blocked = make_project(status=ProjectStatus.APPROVED)
        make_project(status=ProjectStatus.APPROVED)  # never screened
        db.add(ValidationResult(project_id=cleared.id, risk_level="low", overall_passed=True))
        db.add(ValidationResult(project_id=blocked.id, risk_level="high", overall_passed=False))
        db.commit()

        assert directory_service.list_publishable(db).total == 3
        result = directory_service.list_publishable(db, DirectoryFilters(cleared_only=True))
        assert [p.id for p in result.items] == [cleared.id]


class TestSingleAndFeatured:
    def test_get_publishable(self, db, make_project):
        project = make_project(status=ProjectStatus.APPROVED)
        assert directory_service.get_publishable(db, project.id).id == project.id

    @pytest.mark.parametrize("status", STATUSES)
    def test_unpublished_is_not_found(self, db, make_project, status):
        project = make_project(status=status)
        with pytest.raises(NotFound):
            directory_service.get_publishable(db, project.id)

    def test_unknown_id(self, db):
        with pytest.raises(NotFound):
            directory_service.get_publishable(db, "does-not-exist")

    def test_featured_only_approved(self, db, make_project):
        shown = make_project(status=ProjectStatus.APPROVED, featured=True)
        make_project(status=ProjectStatus.PENDING, featured=True)
        make_project(status=ProjectStatus.APPROVED, featured=False)

        assert [p.id for p in directory_service.list_featured(db)] == [shown.id]

    def test_featured_limit(self, db, make_project):
        for _ in range(5):
            make_project(status=ProjectStatus.APPROVED, featured=True)
        assert len(directory_service.list_featured(db)) == 3
        assert len(directory_service.list_featured(db, limit=5)) == 5
