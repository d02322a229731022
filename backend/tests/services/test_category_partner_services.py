from datetime import date

import pytest

from app.core.exceptions import BusinessRuleException, ConflictException, NotFoundException
from app.repositories.listing import ListingParams
from app.schemas.category import CategoryCreate, CategoryUpdate
from app.schemas.partner import PartnerCreate, PartnerUpdate
from app.services.category_service import CategoryService, slugify
from app.services.partner_service import PartnerService


@pytest.fixture
def category_service(db):
    return CategoryService(db)


@pytest.fixture
def partner_service(db):
    return PartnerService(db)


@pytest.mark.parametrize(
    "name,slug",
    [
        ("Web Development", "web-development"),
        ("  Data & AI  ", "data-ai"),
        ("C++ / Rust", "c-rust"),
    ],
)
def test_slugify(name, slug):
    assert slugify(name) == slug


class TestCategories:
    def test_create_derives_slug(self, category_service):
        category = category_service.create_category(
            CategoryCreate.model_validate({"name": "Web Development", "type": "course"})
        )
        assert category.slug == "web-development"
        assert category.is_active is True

    def test_duplicate_slug_is_a_conflict(self, category_service):
        category_service.create_category(CategoryCreate.model_validate({"name": "Web Development"}))
        with pytest.raises(ConflictException) as exc_info:
            category_service.create_category(
                CategoryCreate.model_validate({"name": "web   development"})
            )
        assert exc_info.value.code == "DUPLICATE_CATEGORY"

    def test_name_without_letters_rejected(self, category_service):
        with pytest.raises(BusinessRuleException):
            category_service.create_category(CategoryCreate.model_validate({"name": "!!!"}))

    def test_parent_must_exist(self, category_service):
        with pytest.raises(NotFoundException):
            category_service.create_category(
                CategoryCreate.model_validate({"name": "Frontend", "parent": "missing"})
            )

    def test_cannot_parent_itself(self, category_service):
        category = category_service.create_category(CategoryCreate.model_validate({"name": "Design"}))
        with pytest.raises(BusinessRuleException):
            category_service.update_category(
                category.id, CategoryUpdate.model_validate({"parent": category.id})
            )

    def test_rename_updates_slug(self, category_service):
        category = category_service.create_category(CategoryCreate.model_validate({"name": "Design"}))
        renamed = category_service.update_category(
            category.id, CategoryUpdate.model_validate({"name": "Product Design"})
        )
        assert renamed.slug == "product-design"

    def test_delete_is_soft_and_hides_from_listing(self, category_service):
        kept = category_service.create_category(
            CategoryCreate.model_validate({"name": "Marketing", "type": "service"})
        )
        dropped = category_service.create_category(
            CategoryCreate.model_validate({"name": "Sales", "type": "service"})
        )
        category_service.delete_category(dropped.id)

        assert [c.id for c in category_service.list_categories("service")] == [kept.id]
        assert len(category_service.list_categories("service", include_inactive=True)) == 2
        assert category_service.list_categories("course") == []


class TestPartners:
    def _create(self, partner_service, **overrides):
        payload = {"name": "Acme Corp", "type": "corporate", "startDate": "2030-01-01"}
        payload.update(overrides)
        return partner_service.create_partner(PartnerCreate.model_validate(payload))

    def test_create_with_defaults(self, partner_service):
        partner = self._create(partner_service)
        assert partner.partnership_level == "bronze"
        assert partner.start_date == date(2030, 1, 1)
        assert partner.is_active is True

    def test_duplicate_name(self, partner_service):
        self._create(partner_service)
        with pytest.raises(ConflictException) as exc_info:
            self._create(partner_service)
        assert exc_info.value.code == "DUPLICATE_PARTNER"

    def test_update_rejects_end_before_existing_start(self, partner_service):
        partner = self._create(partner_service)
        with pytest.raises(BusinessRuleException) as exc_info:
            partner_service.update_partner(
                partner.id, PartnerUpdate.model_validate({"endDate": "2029-12-31"})
            )
        assert exc_info.value.code == "INVALID_DATE_RANGE"

    def test_soft_delete_hides_from_public(self, partner_service):
        partner = self._create(partner_service)
        partner_service.delete_partner(partner.id)

        assert partner_service.list_partners(ListingParams()).total == 0
        assert partner_service.list_partners(ListingParams(), include_inactive=True).total == 1
        with pytest.raises(NotFoundException):
            partner_service.get_partner(partner.id)
        assert partner_service.get_partner(partner.id, include_inactive=True).is_active is False

    def test_filter_by_level(self, partner_service):
        self._create(partner_service)
        self._create(partner_service, name="Globex", partnershipLevel="gold")
        page = partner_service.list_partners(ListingParams(filters={"level": "gold"}))
        assert [p.name for p in page.items] == ["Globex"]
