"""
SQLAlchemy ORM models.

Integrations and the setup singleton back the admin flows. Leads, lead
sources, segments and the queued generation/enrichment jobs back the lead
endpoints. JSON columns use JSONB on PostgreSQL and plain JSON elsewhere.
"""

from sqlalchemy import (
    Column, String, Boolean, Integer, Text, DateTime, JSON, CheckConstraint
)
from sqlalchemy.dialects.postgresql import JSONB
from datetime import datetime, timezone
from enum import Enum
import uuid

from leadgen_admin.database import Base


JSONType = JSON().with_variant(JSONB(), "postgresql")


def _new_id() -> str:
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class IntegrationType(str, Enum):
    LEAD_SOURCE = "leadSource"
    ENRICHMENT = "enrichment"
    EMAIL = "email"


class IntegrationStatus(str, Enum):
    ACTIVE = "active"
    ERROR = "error"
    UNCONFIGURED = "unconfigured"


class LeadStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    QUALIFIED = "qualified"
    UNQUALIFIED = "unqualified"
    CUSTOMER = "customer"
    ARCHIVED = "archived"


# ============================================================================
# INTEGRATIONS
# ============================================================================

class Integration(Base):
    """Third-party provider configured by the user."""
    __tablename__ = "integrations"
    
    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    type = Column(String(50), nullable=False, index=True)
    is_enabled = Column(Boolean, nullable=False, default=False)
    is_configured = Column(Boolean, nullable=False, default=False)
    credentials = Column(JSONType, nullable=False, default=dict)
    last_tested = Column(DateTime(timezone=True))
    status = Column(String(50), nullable=False, default=IntegrationStatus.UNCONFIGURED.value)
    error_message = Column(Text)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    
    __table_args__ = (
        CheckConstraint(
            "type IN ('leadSource', 'enrichment', 'email')",
            name="chk_integration_type"
        ),
        CheckConstraint(
            "status IN ('active', 'error', 'unconfigured')",
            name="chk_integration_status"
        ),
    )

    def __repr__(self):
        return f"<Integration(id={self.id}, name='{self.name}', type='{self.type}', status='{self.status}')>"


class SystemConfiguration(Base):
    """Setup wizard progress and default integration selections (singleton)."""
    __tablename__ = "system_configuration"
    
    id = Column(String(36), primary_key=True, default=_new_id)
    setup_completed = Column(Boolean, nullable=False, default=False)
    setup_step = Column(Integer, nullable=False, default=0)
    default_data_sources = Column(JSONType, nullable=False, default=list)
    default_enrichment_services = Column(JSONType, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    
    __table_args__ = (
        CheckConstraint("setup_step BETWEEN 0 AND 4", name="chk_setup_step"),
    )


# ============================================================================
# LEADS
# ============================================================================

class Lead(Base):
    """Lead record produced by lead generation."""
    __tablename__ = "leads"
    
    id = Column(String(36), primary_key=True, default=_new_id)
    
    # Contact
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    title = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    email_verified = Column(Boolean, nullable=False, default=False)
    phone = Column(String(50))
    linkedin_url = Column(String(500))
    
    # Company
    company_name = Column(String(255), nullable=False, index=True)
    company_website = Column(String(500))
    company_industry = Column(String(255))
    company_size = Column(String(100))
    company_location = Column(String(255))
    
    # Pipeline
    source = Column(String(255), nullable=False)
    status = Column(String(50), nullable=False, default=LeadStatus.NEW.value, index=True)
    score = Column(Integer)
    tags = Column(JSONType, nullable=False, default=list)
    notes = Column(Text)
    
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
    
    __table_args__ = (
        CheckConstraint(
            "status IN ('new', 'contacted', 'qualified', 'unqualified', 'customer', 'archived')",
            name="chk_lead_status"
        ),
        CheckConstraint("score IS NULL OR (score BETWEEN 0 AND 100)", name="chk_lead_score"),
    )

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Lead(id={self.id}, email='{self.email}', status='{self.status}')>"


class LeadGenerationJob(Base):
    """Request to generate leads. Stays queued; no pipeline consumes it here."""
    __tablename__ = "lead_generation_jobs"
    
    id = Column(String(36), primary_key=True, default=_new_id)
    sources = Column(JSONType, nullable=False, default=list)
    criteria = Column(JSONType, nullable=False, default=dict)
    enrichment = Column(JSONType, nullable=False, default=list)
    limit = Column(Integer)
    status = Column(String(50), nullable=False, default="queued")
    created_at = Column(DateTime(timezone=True), default=utcnow)


class LeadEnrichmentJob(Base):
    """Request to enrich existing leads. Stays queued like generation jobs."""
    __tablename__ = "lead_enrichment_jobs"
    
    id = Column(String(36), primary_key=True, default=_new_id)
    lead_ids = Column(JSONType, nullable=False, default=list)
    enrichment_options = Column(JSONType, nullable=False, default=list)
    status = Column(String(50), nullable=False, default="queued")
    created_at = Column(DateTime(timezone=True), default=utcnow)


class LeadSegment(Base):
    """Named, saved lead filter with the match count at creation time."""
    __tablename__ = "lead_segments"
    
    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    filters = Column(JSONType, nullable=False, default=dict)
    lead_count = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)


# ============================================================================
# LEAD SOURCES
# ============================================================================

class LeadSource(Base):
    """Where leads come from (an API, an upload, a scraper...), with its settings."""
    __tablename__ = "lead_sources"
    
    id = Column(String(36), primary_key=True, default=_new_id)
    name = Column(String(255), nullable=False)
    type = Column(String(50), nullable=False)
    config = Column(JSONType, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<LeadSource(id={self.id}, name='{self.name}', type='{self.type}')>"
