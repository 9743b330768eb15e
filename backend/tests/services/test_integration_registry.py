# tests/services/test_integration_registry.py
"""Integration registry: ordering, partial updates, toggles, defaults, batches."""

import pytest

from leadgen_admin.errors import ValidationError
from leadgen_admin.services.integration_registry import DEFAULT_CATALOG, IntegrationRegistry


@pytest.fixture
def registry(db):
    return IntegrationRegistry(db, strict_enable=False)


async def _add(db, make_integration, **kwargs):
    integration = make_integration(**kwargs)
    db.add(integration)
    await db.commit()
    return integration


# ============================================================================
# LISTING
# ============================================================================

class TestListing:
    
    @pytest.mark.asyncio
    async def test_sorted_by_type_then_name(self, db, registry, make_integration):
        await _add(db, make_integration, name="SMTP", type="email")
        await _add(db, make_integration, name="ZoomInfo", type="leadSource")
        await _add(db, make_integration, name="Apollo", type="leadSource")
        await _add(db, make_integration, name="OpenAI", type="enrichment")
        
        integrations = await registry.list_all()
        
        assert [(i.type, i.name) for i in integrations] == [
            ("email", "SMTP"),
            ("enrichment", "OpenAI"),
            ("leadSource", "Apollo"),
            ("leadSource", "ZoomInfo"),
        ]
    
    @pytest.mark.asyncio
    async def test_get_by_id_unknown(self, registry):
        assert await registry.get_by_id("nope") is None


# ============================================================================
# UPDATE
# ============================================================================

class TestUpdate:
    
    @pytest.mark.asyncio
    async def test_credentials_make_lead_source_configured(self, db, registry, make_integration):
        integration = await _add(db, make_integration)
        
        updated = await registry.update(integration.id, {"credentials": {"apiKey": "k"}})
        
        assert updated.is_configured is True
        assert updated.credentials == {"apiKey": "k"}
    
    @pytest.mark.asyncio
    async def test_rename_keeps_configured(self, db, registry, make_integration):
        integration = await _add(db, make_integration)
        await registry.update(integration.id, {"credentials": {"apiKey": "k"}})
        
        renamed = await registry.update(integration.id, {"name": "Apollo.io"})
        
        assert renamed.name == "Apollo.io"
        assert renamed.is_configured is True
        assert renamed.credentials == {"apiKey": "k"}
    
    @pytest.mark.asyncio
    async def test_credentials_are_merged(self, db, registry, make_integration):
        integration = await _add(
            db, make_integration,
            name="SMTP", type="email", credentials={"username": "u"}
        )
        
        updated = await registry.update(integration.id, {"credentials": {"password": "p"}})
        
        assert updated.credentials == {"username": "u", "password": "p"}
        assert updated.is_configured is True
    
    @pytest.mark.asyncio
    async def test_clearing_api_key_unconfigures(self, db, registry, make_integration):
        integration = await _add(db, make_integration, credentials={"apiKey": "k"}, is_configured=True)
        
        updated = await registry.update(integration.id, {"credentials": {"apiKey": ""}})
        
        assert updated.is_configured is False
    
    @pytest.mark.asyncio
    async def test_direct_fields(self, db, registry, make_integration):
        integration = await _add(db, make_integration)
        
        updated = await registry.update(integration.id, {"type": "enrichment", "is_enabled": True})
        
        assert updated.type == "enrichment"
        assert updated.is_enabled is True
        assert updated.is_configured is False
    
    @pytest.mark.asyncio
    async def test_type_change_recomputes_configured(self, db, registry, make_integration):
        """username/password configures an email sender but not a lead source."""
        integration = await _add(
            db, make_integration,
            name="SMTP", type="email",
            credentials={"username": "u", "password": "p"}, is_configured=True
        )
        
        updated = await registry.update(integration.id, {"type": "leadSource"})
        
        assert updated.type == "leadSource"
        assert updated.is_configured is False
        assert updated.credentials == {"username": "u", "password": "p"}
        
        restored = await registry.update(integration.id, {"type": "email"})
        assert restored.is_configured is True
    
    @pytest.mark.asyncio
    async def test_invalid_type_leaves_row_clean(self, db, registry, make_integration):
        integration = await _add(db, make_integration)
        
        with pytest.raises(ValidationError):
            await registry.update(integration.id, {"name": "Renamed", "type": "crm"})
        
        assert integration.name == "Apollo"
    
    @pytest.mark.asyncio
    async def test_unknown_id(self, registry):
        assert await registry.update("nope", {"name": "X"}) is None
    
    @pytest.mark.asyncio
    async def test_update_is_idempotent(self, db, registry, make_integration):
        integration = await _add(db, make_integration)
        
        first = await registry.update(integration.id, {"credentials": {"apiKey": "k"}})
        first_credentials = dict(first.credentials)
        second = await registry.update(integration.id, {"credentials": {"apiKey": "k"}})
        
        assert second.credentials == first_credentials


# ============================================================================
# TOGGLE
# ============================================================================

class TestToggle:
    
    @pytest.mark.asyncio
    async def test_permissive_enable_of_unconfigured(self, db, registry, make_integration):
        """Enabling does not check configuration unless strict mode is on."""
        integration = await _add(db, make_integration)
        
        toggled = await registry.toggle(integration.id, True)
        
        assert toggled.is_enabled is True
        assert toggled.is_configured is False
    
    @pytest.mark.asyncio
    async def test_strict_mode_refuses_unconfigured(self, db, make_integration):
        integration = await _add(db, make_integration)
        strict = IntegrationRegistry(db, strict_enable=True)
        
        with pytest.raises(ValidationError):
            await strict.toggle(integration.id, True)
        
        # Disabling is always allowed
        toggled = await strict.toggle(integration.id, False)
        assert toggled.is_enabled is False
    
    @pytest.mark.asyncio
    async def test_strict_mode_allows_configured(self, db, make_integration):
        integration = await _add(db, make_integration, credentials={"apiKey": "k"}, is_configured=True)
        
        toggled = await IntegrationRegistry(db, strict_enable=True).toggle(integration.id, True)
        
        assert toggled.is_enabled is True
    
    @pytest.mark.asyncio
    async def test_unknown_id(self, registry):
        assert await registry.toggle("nope", True) is None


# ============================================================================
# DEFAULT CATALOG
# ============================================================================

class TestInitializeDefaults:
    
    @pytest.mark.asyncio
    async def test_inserts_catalog_once(self, registry):
        assert await registry.initialize_defaults() == 12
        assert await registry.initialize_defaults() == 0
        
        integrations = await registry.list_all()
        assert len(integrations) == len(DEFAULT_CATALOG) == 12
    
    @pytest.mark.asyncio
    async def test_catalog_shape(self, registry):
        await registry.initialize_defaults()
        integrations = await registry.list_all()
        
        by_type = {}
        for integration in integrations:
            by_type.setdefault(integration.type, []).append(integration.name)
            assert integration.status == "unconfigured"
            assert integration.is_configured is False
            assert integration.is_enabled is False
            assert integration.credentials == {}
        
        assert len(by_type["leadSource"]) == 6
        assert len(by_type["enrichment"]) == 4
        assert sorted(by_type["email"]) == ["SMTP", "SendGrid"]
    
    @pytest.mark.asyncio
    async def test_non_empty_table_untouched(self, db, registry, make_integration):
        await _add(db, make_integration, name="Custom")
        
        assert await registry.initialize_defaults() == 0
        assert [i.name for i in await registry.list_all()] == ["Custom"]


# ============================================================================
# BATCH UPDATE
# ============================================================================

class TestBatchUpdate:
    
    @pytest.mark.asyncio
    async def test_best_effort(self, db, registry, make_integration):
        a = await _add(db, make_integration, name="A")
        
        results = await registry.batch_update([
            {"id": a.id, "name": "X"},
            {},
            {"id": "unknown", "name": "Y"},
        ])
        
        assert len(results) == 1
        assert results[0].id == a.id
        assert results[0].name == "X"
    
    @pytest.mark.asyncio
    async def test_credentials_in_batch(self, db, registry, make_integration):
        a = await _add(db, make_integration, name="Apollo")
        b = await _add(db, make_integration, name="SendGrid", type="email")
        
        results = await registry.batch_update([
            {"id": a.id, "credentials": {"apiKey": "k1"}},
            {"id": b.id, "credentials": {"apiKey": "k2"}, "is_enabled": True},
        ])
        
        assert [r.is_configured for r in results] == [True, True]
        assert results[1].is_enabled is True
    
    @pytest.mark.asyncio
    async def test_rejected_entry_does_not_stop_the_batch(self, db, registry, make_integration):
        a = await _add(db, make_integration, name="A")
        b = await _add(db, make_integration, name="B")
        c = await _add(db, make_integration, name="C")
        a_id, b_id, c_id = a.id, b.id, c.id
        
        results = await registry.batch_update([
            {"id": a_id, "name": "X"},
            {"id": b_id, "name": "Renamed", "type": "bogus"},
            {"id": c_id, "credentials": {"apiKey": "k"}},
        ])
        
        assert [r.id for r in results] == [a_id, c_id]
        assert results[0].name == "X"
        assert results[1].is_configured is True
        
        stored = await registry.get_by_id(b_id)
        assert stored.name == "B"
        assert stored.type == "leadSource"
