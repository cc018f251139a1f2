"""SQLAlchemy ORM models."""

from datetime import datetime

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """Player profile, keyed by the Clerk user id."""

    __tablename__ = "profiles"
    __table_args__ = (
        CheckConstraint("region IN ('NA', 'EU', 'APAC')", name="ck_profiles_region"),
        CheckConstraint(
            "main_role IN ('Tank', 'DPS', 'Support')",
            name="ck_profiles_main_role",
        ),
        CheckConstraint("length(trim(current_rank)) > 0", name="ck_profiles_current_rank"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    handle: Mapped[str] = mapped_column(String(20), nullable=False)
    display_name: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar_url: Mapped[str | None] = mapped_column(String(500))
    bio: Mapped[str | None] = mapped_column(Text)
    region: Mapped[str] = mapped_column(String(8), nullable=False, default="NA")
    timezone: Mapped[str | None] = mapped_column(String(64))
    current_rank: Mapped[str] = mapped_column(String(50), nullable=False, default="Unranked")
    main_role: Mapped[str] = mapped_column(String(16), nullable=False, default="Support")
    is_lft: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    platforms: Mapped[list["ProfilePlatformModel"]] = relationship(
        "ProfilePlatformModel",
        back_populates="profile",
        cascade="all, delete-orphan",
    )


# Handles are compared case-insensitively, so uniqueness is on lower(handle)
Index("uq_profiles_handle_lower", func.lower(ProfileModel.handle), unique=True)


class ProfilePlatformModel(Base):
    """Platform a profile plays on (composite PK on profile_id + platform)."""

    __tablename__ = "profile_platforms"

    profile_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    )
    platform: Mapped[str] = mapped_column(
        String(16),
        CheckConstraint("platform IN ('PC', 'Console')"),
        primary_key=True,
    )

    # Relationships
    profile: Mapped["ProfileModel"] = relationship(
        "ProfileModel",
        back_populates="platforms",
    )
