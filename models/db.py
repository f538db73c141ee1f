"""SQLAlchemy models for the issue snapshot and the generated-text cache."""

from __future__ import annotations

from sqlalchemy import Column, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


class IssueORM(Base):
    __tablename__ = "issues"

    id = Column(Integer, primary_key=True)
    repository_full_name = Column(String(255), nullable=False, default="")
    number = Column(Integer, nullable=False, default=0)
    title = Column(Text, nullable=False)
    body = Column(Text, nullable=True)
    github_updated_at = Column(DateTime(timezone=True), nullable=False)


class CachedTextORM(Base):
    """One generated text per (issue, language, content kind).

    ``cached_at`` is written by the application clock, never by a database
    default.
    """

    __tablename__ = "cached_texts"

    issue_id = Column(Integer, primary_key=True)
    language_id = Column(Integer, primary_key=True)
    text_type_id = Column(Integer, primary_key=True)
    content = Column(Text, nullable=False)
    cached_at = Column(DateTime(timezone=True), nullable=False)
