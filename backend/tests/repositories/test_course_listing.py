from decimal import Decimal

import pytest

from app.core.enums import CourseStatus, SortOrder
from app.core.exceptions import ValidationException
from app.repositories.course_repository import CourseRepository
from app.repositories.listing import ListingParams, ListingQueryBuilder, Page, escape_like
from app.models.course import Course


@pytest.fixture
def catalogue(make_course, instructor):
    return [
        make_course(instructor, title="Intro to SQL", price=Decimal("10"), rating_average=Decimal("4.1")),
        make_course(instructor, title="Advanced SQL", price=Decimal("80"), level="advanced", rating_average=Decimal("4.8")),
        make_course(instructor, title="Data pipelines", price=Decimal("50"), rating_average=Decimal("3.9")),
        make_course(instructor, title="Hidden draft", price=Decimal("20"), status=CourseStatus.DRAFT),
    ]


class TestPage:
    def test_page_math(self):
        page = Page(items=[], total=25, page=2, limit=10)
        assert page.total_pages == 3
        assert page.has_next is True
        assert page.has_prev is True

    def test_empty_result(self):
        page = Page(items=[], total=0, page=1, limit=10)
        assert page.total_pages == 0
        assert page.has_next is False
        assert page.has_prev is False


def test_escape_like_neutralizes_wildcards():
    assert escape_like("100%_off") == "100\\%\\_off"


def test_builder_rejects_unknown_default_sort():
    with pytest.raises(ValueError):
        ListingQueryBuilder(Course, sortable={"title": Course.title}, default_sort="rating")


class TestCourseListing:
    def test_published_only_sorted_by_rating_desc(self, db, catalogue):
        page = CourseRepository(db).list_published(ListingParams())
        assert [c.title for c in page.items] == ["Advanced SQL", "Intro to SQL", "Data pipelines"]
        assert page.total == 3
        assert page.limit == 12

    def test_price_range_is_inclusive(self, db, catalogue):
        page = CourseRepository(db).list_published(ListingParams(min_price=10, max_price=50))
        assert {c.title for c in page.items} == {"Intro to SQL", "Data pipelines"}

    def test_min_price_above_max_price_is_rejected(self, db, catalogue):
        with pytest.raises(ValidationException):
            CourseRepository(db).list_published(ListingParams(min_price=60, max_price=10))

    def test_search_is_case_insensitive(self, db, catalogue):
        page = CourseRepository(db).list_published(ListingParams(search="sql"))
        assert page.total == 2

    def test_none_filters_are_ignored(self, db, catalogue):
        params = ListingParams(filters={"level": None, "category": None})
        assert CourseRepository(db).list_published(params).total == 3

    def test_equality_filter(self, db, catalogue):
        params = ListingParams(filters={"level": "advanced"})
        page = CourseRepository(db).list_published(params)
        assert [c.title for c in page.items] == ["Advanced SQL"]

    def test_sort_and_paginate(self, db, catalogue):
        params = ListingParams(sort_by="price", sort_order=SortOrder.ASC, page=2, limit=2)
        page = CourseRepository(db).list_published(params)
        assert [c.title for c in page.items] == ["Advanced SQL"]
        assert page.total_pages == 2
        assert page.has_prev and not page.has_next

    def test_unknown_sort_field(self, db, catalogue):
        with pytest.raises(ValidationException):
            CourseRepository(db).list_published(ListingParams(sort_by="popularity"))

    def test_list_any_includes_drafts(self, db, catalogue):
        assert CourseRepository(db).list_any(ListingParams()).total == 4
