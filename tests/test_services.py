"""Tests for case study formatting and media services."""

import io
from datetime import datetime

import pytest
from PIL import Image

from portfolio.errors import InvalidMediaError, NotFoundError
from portfolio.models import CaseStudyRecord, MediaAttachment
from portfolio.services.case_studies import (
    ViewSettings,
    format_case_study,
    format_datetime,
    get_available_technologies,
    get_case_study,
    list_case_studies,
    media_url,
    permalink,
)
from portfolio.services.media import attach_featured_image

SETTINGS = ViewSettings(site_url='https://example.com', permalink_base='portafolio', excerpt_words=30)


def transient_record(**fields) -> CaseStudyRecord:
    defaults = {
        'id': 1,
        'title': 'Test Case Study',
        'slug': 'test-case-study',
        'client': 'Test Client',
        'content': '',
        'excerpt': '',
        'problem': '',
        'solution': '',
        'results': '',
        'technologies': '',
        'date_completed': None,
        'published_at': datetime(2024, 1, 1, 9, 0),
        'modified_at': datetime(2024, 1, 2, 9, 0),
    }
    defaults.update(fields)
    return CaseStudyRecord(**defaults)


class TestFormatting:
    """Test cases for the per-item formatting rules."""

    def test_view_settings_from_config(self):
        settings = ViewSettings.from_config({
            'SITE_URL': 'https://example.com/',
            'PERMALINK_BASE': '/work/',
            'EXCERPT_WORDS': '12',
        })
        assert settings == ViewSettings('https://example.com', 'work', 12)

    def test_stored_excerpt_wins(self):
        view = format_case_study(transient_record(excerpt='Stored', content='Body text'), SETTINGS)
        assert view.excerpt == 'Stored'

    def test_excerpt_derived_from_first_30_words(self):
        body = '<p>' + ' '.join(f'word{i}' for i in range(45)) + '</p>'
        view = format_case_study(transient_record(content=body), SETTINGS)
        assert view.excerpt == ' '.join(f'word{i}' for i in range(30)) + '…'

    def test_technologies_parsed(self):
        view = format_case_study(transient_record(technologies='AWS, Lambda'), SETTINGS)
        assert view.technologies == ['AWS', 'Lambda']

    def test_technologies_empty(self):
        assert format_case_study(transient_record(), SETTINGS).technologies == []

    def test_date_completed_falls_back_to_publish_date(self):
        view = format_case_study(transient_record(), SETTINGS)
        assert view.date_completed == '2024-01-01 09:00:00'
        assert view.date_published == '2024-01-01 09:00:00'
        assert view.date_modified == '2024-01-02 09:00:00'

    def test_date_completed_stored(self):
        view = format_case_study(transient_record(date_completed='2023-11-30'), SETTINGS)
        assert view.date_completed == '2023-11-30'

    def test_problem_falls_back_to_content(self):
        view = format_case_study(transient_record(content='<p>Whole story</p>'), SETTINGS)
        assert view.problem == '<p>Whole story</p>'
        assert view.solution == ''

    def test_problem_and_solution_columns(self):
        view = format_case_study(
            transient_record(content='Body', problem='The problem', solution='The fix'), SETTINGS
        )
        assert view.problem == 'The problem'
        assert view.solution == 'The fix'

    def test_url_is_permalink(self):
        view = format_case_study(transient_record(slug='my-case'), SETTINGS)
        assert view.url == 'https://example.com/portafolio/my-case/'
        assert permalink('x', SETTINGS) == 'https://example.com/portafolio/x/'

    def test_featured_image_absent(self):
        assert format_case_study(transient_record(), SETTINGS).featured_image is None

    def test_featured_image_sizes(self):
        media = MediaAttachment(
            alt_text='Diagram',
            sizes={'thumbnail': 'uploads/t.png', 'full': 'uploads/f.png'},
        )
        view = format_case_study(transient_record(featured_image=media), SETTINGS)
        image = view.featured_image
        assert image.url == 'https://example.com/static/uploads/f.png'
        assert image.alt == 'Diagram'
        assert image.sizes.thumbnail == 'https://example.com/static/uploads/t.png'
        # missing variants fall back to the full image
        assert image.sizes.medium == image.url
        assert image.sizes.large == image.url
        assert image.sizes.full == image.url

    def test_media_url(self):
        assert media_url(None, SETTINGS) is None
        assert media_url('https://cdn.example.com/a.png', SETTINGS) == 'https://cdn.example.com/a.png'
        assert media_url('/uploads/a.png', SETTINGS) == 'https://example.com/static/uploads/a.png'

    def test_format_datetime_none(self):
        assert format_datetime(None) == ''

    def test_view_has_fixed_keys(self):
        data = format_case_study(transient_record(), SETTINGS).model_dump()
        assert set(data) == {
            'id', 'title', 'slug', 'excerpt', 'content', 'client', 'problem', 'solution',
            'results', 'technologies', 'date_completed', 'featured_image', 'url',
            'date_published', 'date_modified',
        }


class TestQueries:
    """Test cases for list/detail/technologies over the repository."""

    def test_list_case_studies(self, repository, aws_case_study, django_case_study, draft_case_study):
        views = list_case_studies(repository, SETTINGS)
        assert [v.slug for v in views] == ['migracion-a-aws-para-startup', 'django-platform-rebuild']

    def test_list_filtered(self, repository, aws_case_study, django_case_study):
        views = list_case_studies(repository, SETTINGS, technology='AWS')
        assert [v.slug for v in views] == ['migracion-a-aws-para-startup']

    def test_get_case_study_sanitizes_slug(self, repository, aws_case_study):
        view = get_case_study(repository, SETTINGS, 'Migracion-A-AWS-para-Startup')
        assert view.id == aws_case_study.id

    def test_get_case_study_not_found(self, repository):
        with pytest.raises(NotFoundError) as exc_info:
            get_case_study(repository, SETTINGS, 'nope')
        assert exc_info.value.code == 'case_study_not_found'
        assert exc_info.value.status == 404

    def test_get_case_study_empty_slug(self, repository):
        with pytest.raises(NotFoundError):
            get_case_study(repository, SETTINGS, '---')

    def test_available_technologies(self, repository, aws_case_study, django_case_study, draft_case_study):
        technologies = get_available_technologies(repository)
        assert sorted(technologies) == sorted(['AWS', 'Lambda', 'DynamoDB', 'Django', 'PostgreSQL', 'Docker'])
        assert 'Terraform' not in technologies

    def test_available_technologies_case_sensitive_dedup(self, repository, record_factory):
        record_factory(slug='one-case', technologies='AWS, Docker')
        record_factory(slug='two-case', technologies='Docker, aws')
        assert sorted(get_available_technologies(repository)) == ['AWS', 'Docker', 'aws']


class TestMedia:
    """Test cases for attaching featured images."""

    @staticmethod
    def _png() -> bytes:
        buf = io.BytesIO()
        Image.new('RGB', (640, 480), (10, 120, 200)).save(buf, format='PNG')
        return buf.getvalue()

    def test_attach_featured_image(self, repository, aws_case_study, tmp_path):
        media = attach_featured_image(
            repository, aws_case_study.id, self._png(),
            static_folder=str(tmp_path), alt='  Cloud diagram ',
        )
        assert media.id is not None
        assert media.alt_text == 'Cloud diagram'
        assert set(media.sizes) == {'thumbnail', 'medium', 'large', 'full'}
        for rel in media.sizes.values():
            assert (tmp_path / rel).exists()

        view = format_case_study(repository.get_record(aws_case_study.id), SETTINGS)
        assert view.featured_image.alt == 'Cloud diagram'
        assert view.featured_image.sizes.thumbnail.endswith(media.sizes['thumbnail'])

    def test_attach_to_missing_case_study(self, repository, tmp_path):
        with pytest.raises(NotFoundError):
            attach_featured_image(repository, 999, self._png(), static_folder=str(tmp_path))

    def test_attach_rejects_invalid_image(self, repository, aws_case_study, tmp_path):
        with pytest.raises(InvalidMediaError) as exc_info:
            attach_featured_image(repository, aws_case_study.id, b'not an image', static_folder=str(tmp_path))
        assert exc_info.value.code == 'invalid_image'
