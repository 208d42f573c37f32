"""Test configuration and fixtures for the case study service."""

from datetime import datetime, timezone
from typing import Generator

import pytest
from flask import Flask
from flask.testing import FlaskClient
from sqlalchemy.pool import StaticPool

from portfolio import create_app
from portfolio.extensions import db
from portfolio.models import CaseStudyRecord, MediaAttachment, STATUS_DRAFT
from portfolio.repositories.case_study import SqlAlchemyCaseStudyRepository


@pytest.fixture
def app(tmp_path) -> Generator[Flask, None, None]:
    """Create and configure a test Flask application."""
    # Use in-memory SQLite for each test
    test_config = {
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SQLALCHEMY_ENGINE_OPTIONS': {
            'poolclass': StaticPool,
            'connect_args': {'check_same_thread': False}
        },
        'SECRET_KEY': 'test-secret-key',
        'SITE_URL': 'https://example.com',
        'API_NAMESPACE': 'portfolio/v1',
        'PERMALINK_BASE': 'portafolio',
        'RATELIMIT_ENABLED': False,  # Disable rate limiting for tests
        'MEDIA_UPLOAD_SUBDIR': 'uploads/case-studies',
    }

    app = create_app(test_config)
    app.static_folder = str(tmp_path / "static")

    with app.app_context():
        # Create all tables
        db.create_all()
        yield app

        # Cleanup
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Create a test client."""
    return app.test_client()


@pytest.fixture
def runner(app: Flask):
    """Create a test CLI runner."""
    return app.test_cli_runner()


@pytest.fixture
def repository(app: Flask) -> SqlAlchemyCaseStudyRepository:
    return SqlAlchemyCaseStudyRepository(db.session)


def make_record(**fields) -> CaseStudyRecord:
    defaults = {
        'title': 'Test Case Study',
        'slug': 'test-case-study',
        'client': 'Test Client',
        'content': '',
        'excerpt': '',
        'problem': '',
        'solution': '',
        'results': '',
        'technologies': '',
        'published_at': datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc),
        'modified_at': datetime(2024, 1, 2, 9, 0, tzinfo=timezone.utc),
    }
    defaults.update(fields)
    record = CaseStudyRecord(**defaults)
    db.session.add(record)
    db.session.commit()
    db.session.refresh(record)
    return record


@pytest.fixture
def aws_case_study(app: Flask) -> CaseStudyRecord:
    """Published case study with a stored excerpt and completion date."""
    return make_record(
        title='Migración a AWS para Startup',
        slug='migracion-a-aws-para-startup',
        client='Tech Startup Inc.',
        content='<p>Infraestructura on-premise costosa y poco escalable.</p>',
        excerpt='Serverless migration for a growing startup',
        solution='Migración completa a AWS con arquitectura serverless',
        results='Reducción de costos del 40%',
        technologies='AWS, Lambda, DynamoDB',
        date_completed='2024-03-15',
        published_at=datetime(2024, 4, 1, 10, 30, tzinfo=timezone.utc),
        modified_at=datetime(2024, 4, 2, 8, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def django_case_study(app: Flask) -> CaseStudyRecord:
    """Published case study relying on derived excerpt and publish-date fallback."""
    body = ' '.join(f'word{i}' for i in range(40))
    return make_record(
        title='Django Platform Rebuild',
        slug='django-platform-rebuild',
        client='Enterprise Corp',
        content=f'<p>{body}</p>',
        technologies='Django, PostgreSQL,  , Docker',
        published_at=datetime(2024, 2, 1, 12, 0, tzinfo=timezone.utc),
        modified_at=datetime(2024, 2, 3, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def draft_case_study(app: Flask) -> CaseStudyRecord:
    return make_record(
        title='Unreleased AWS Work',
        slug='unreleased-aws-work',
        client='Secret Client',
        technologies='AWS, Terraform',
        status=STATUS_DRAFT,
        published_at=datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def media_attachment(app: Flask) -> MediaAttachment:
    media = MediaAttachment(
        alt_text='Architecture diagram',
        sizes={
            'thumbnail': 'uploads/case-studies/abc-thumbnail.png',
            'medium': 'uploads/case-studies/abc-medium.png',
            'large': 'uploads/case-studies/abc-large.png',
            'full': 'uploads/case-studies/abc-full.png',
        },
    )
    db.session.add(media)
    db.session.commit()
    db.session.refresh(media)
    return media


@pytest.fixture
def record_factory(app: Flask):
    """Factory for stored case study records with overridable fields."""
    return make_record
