"""Tests for the asset type and network catalogs."""

import pytest

from app.errors import CatalogEntryNotFound, Conflict, MissingRequiredField
from app.services import catalog_service
from app.services.catalog_service import ASSET_TYPES, NETWORKS


class TestCreate:
    def test_network_gets_default_description(self, admin_ctx):
        entry = catalog_service.create_entry(admin_ctx, NETWORKS, "  Polygon ")
        assert entry.name == "Polygon"
        assert entry.description == "Polygon blockchain network"

    def test_asset_type_keeps_description(self, admin_ctx):
        entry = catalog_service.create_entry(admin_ctx, ASSET_TYPES, "Bonds", "Fixed income", "bank")
        assert entry.description == "Fixed income"
        assert entry.icon == "bank"

    @pytest.mark.parametrize("duplicate", ["Polygon", "polygon", " POLYGON "])
    def test_duplicate_is_conflict(self, db, admin_ctx, duplicate):
        catalog_service.create_entry(admin_ctx, NETWORKS, "Polygon")
        with pytest.raises(Conflict):
            catalog_service.create_entry(admin_ctx, NETWORKS, duplicate)
        assert len(catalog_service.list_entries(db, NETWORKS)) == 1

    def test_catalogs_are_independent(self, admin_ctx):
        catalog_service.create_entry(admin_ctx, NETWORKS, "Solana")
        catalog_service.create_entry(admin_ctx, ASSET_TYPES, "Solana")

    def test_blank_name(self, admin_ctx):
        with pytest.raises(MissingRequiredField):
            catalog_service.create_entry(admin_ctx, ASSET_TYPES, "   ")

    def test_list_sorted_by_name(self, db, admin_ctx):
        for name in ("Tezos", "Avalanche", "Ethereum"):
            catalog_service.create_entry(admin_ctx, NETWORKS, name)
        names = [e.name for e in catalog_service.list_entries(db, NETWORKS)]
        assert names == ["Avalanche", "Ethereum", "Tezos"]


class TestUpdateAndDelete:
    def test_rename(self, admin_ctx):
        entry = catalog_service.create_entry(admin_ctx, ASSET_TYPES, "Bonds")
        renamed = catalog_service.update_entry(admin_ctx, ASSET_TYPES, entry.id, "Municipal Bonds")
        assert renamed.name == "Municipal Bonds"

    def test_case_only_rename_allowed(self, admin_ctx):
        entry = catalog_service.create_entry(admin_ctx, ASSET_TYPES, "bonds")
        assert catalog_service.update_entry(admin_ctx, ASSET_TYPES, entry.id, "Bonds").name == "Bonds"

    def test_rename_onto_existing(self, admin_ctx):
        catalog_service.create_entry(admin_ctx, ASSET_TYPES, "Bonds")
        other = catalog_service.create_entry(admin_ctx, ASSET_TYPES, "Equity")
        with pytest.raises(Conflict):
            catalog_service.update_entry(admin_ctx, ASSET_TYPES, other.id, "BONDS")

    def test_delete_unused(self, db, admin_ctx):
        entry = catalog_service.create_entry(admin_ctx, NETWORKS, "Tezos")
        catalog_service.delete_entry(admin_ctx, NETWORKS, entry.id)
        with pytest.raises(CatalogEntryNotFound):
            catalog_service.get_entry(db, NETWORKS, entry.id)

    def test_delete_in_use(self, admin_ctx, make_project):
        entry = catalog_service.create_entry(admin_ctx, NETWORKS, "Polygon")
        make_project(blockchain="Polygon")
        with pytest.raises(Conflict):
            catalog_service.delete_entry(admin_ctx, NETWORKS, entry.id)

    def test_rename_carries_projects_along(self, db, admin_ctx, make_project):
        entry = catalog_service.create_entry(admin_ctx, NETWORKS, "Polygon")
        project = make_project(blockchain="Polygon")
        untouched = make_project(blockchain="Ethereum")

        catalog_service.update_entry(admin_ctx, NETWORKS, entry.id, "Polygon PoS")

        db.expire_all()
        assert project.blockchain == "Polygon PoS"
        assert untouched.blockchain == "Ethereum"

    def test_renamed_entry_in_use_cannot_be_deleted(self, db, admin_ctx, make_project):
        entry = catalog_service.create_entry(admin_ctx, ASSET_TYPES, "bonds")
        make_project(type="bonds")

        catalog_service.update_entry(admin_ctx, ASSET_TYPES, entry.id, "Municipal Bonds")
        with pytest.raises(Conflict):
            catalog_service.delete_entry(admin_ctx, ASSET_TYPES, entry.id)
        assert catalog_service.get_entry(db, ASSET_TYPES, entry.id).name == "Municipal Bonds"

    def test_description_can_be_cleared(self, admin_ctx):
        entry = catalog_service.create_entry(admin_ctx, ASSET_TYPES, "Bonds", "Fixed income")
        cleared = catalog_service.update_entry(admin_ctx, ASSET_TYPES, entry.id, "Bonds", description="")
        assert cleared.description == ""

    def test_description_kept_when_omitted(self, admin_ctx):
        entry = catalog_service.create_entry(admin_ctx, ASSET_TYPES, "Bonds", "Fixed income")
        updated = catalog_service.update_entry(admin_ctx, ASSET_TYPES, entry.id, "Bonds")
        assert updated.description == "Fixed income"

    def test_missing_entry(self, admin_ctx):
        with pytest.raises(CatalogEntryNotFound):
            catalog_service.update_entry(admin_ctx, ASSET_TYPES, 999, "Anything")
