from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import ForeignKey, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    __tablename__ = "user"

    id: Mapped[str] = mapped_column(primary_key=True, nullable=False)
    username: Mapped[str] = mapped_column(nullable=False, unique=True)
    password_hash: Mapped[str] = mapped_column(nullable=False)
    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)

    sessions: Mapped[list["UserSession"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )
    oauth_accounts: Mapped[list["OauthAccount"]] = relationship(
        back_populates="user", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"User(id={self.id}, username={self.username})"


class UserSession(Base):
    """A login session. ``expires_at`` is stored in UTC."""

    __tablename__ = "session"

    id: Mapped[str] = mapped_column(primary_key=True, nullable=False)
    user_id: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False)
    expires_at: Mapped[datetime] = mapped_column(nullable=False)

    user: Mapped["User"] = relationship(back_populates="sessions")

    def __repr__(self):
        return f"UserSession(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})"


class OauthAccount(Base):
    """Tokens for an external identity provider linked to a local user."""

    __tablename__ = "oauth_account"
    __table_args__ = (UniqueConstraint("provider", "provider_user_id"),)

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False)
    provider: Mapped[str] = mapped_column(nullable=False)
    provider_user_id: Mapped[str] = mapped_column(nullable=False)
    access_token: Mapped[Optional[str]] = mapped_column(nullable=True)
    refresh_token: Mapped[Optional[str]] = mapped_column(nullable=True)
    token_uri: Mapped[Optional[str]] = mapped_column(nullable=True)
    scopes: Mapped[Optional[str]] = mapped_column(nullable=True)
    token_type: Mapped[Optional[str]] = mapped_column(nullable=True)
    expiry: Mapped[Optional[datetime]] = mapped_column(nullable=True)

    user: Mapped["User"] = relationship(back_populates="oauth_accounts")

    def __repr__(self):
        return f"OauthAccount(id={self.id}, provider={self.provider}, user_id={self.user_id})"
