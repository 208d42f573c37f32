"""Operator commands: ``flask case-studies <command>``."""
from __future__ import annotations

import json
from pathlib import Path

import click
from flask import current_app
from flask.cli import AppGroup
from pydantic import ValidationError

from portfolio.entities import CaseStudy
from portfolio.errors import InvalidEntityError, InvalidMediaError, NotFoundError, PersistenceError
from portfolio.extensions import db
from portfolio.models import STATUS_DRAFT, STATUS_PUBLISH
from portfolio.repositories.case_study import SqlAlchemyCaseStudyRepository
from portfolio.schemas.case_studies import CaseStudiesPayload, CaseStudyInput
from portfolio.services.case_studies import get_available_technologies
from portfolio.services.media import attach_featured_image

case_studies_cli = AppGroup("case-studies", help="Manage stored case studies.")


def _repository() -> SqlAlchemyCaseStudyRepository:
    return SqlAlchemyCaseStudyRepository(db.session)


def build_entity(payload: CaseStudyInput) -> CaseStudy:
    return CaseStudy(
        id=payload.id,
        title=payload.title,
        client=payload.client,
        problem=payload.problem,
        solution=payload.solution,
        results=payload.results,
        technologies=tuple(payload.technologies),
        slug=payload.slug or None,
        date_completed=payload.date_completed,
    )


def _save(repository: SqlAlchemyCaseStudyRepository, payload: CaseStudyInput) -> int:
    return repository.save(
        build_entity(payload),
        status=payload.status,
        content=payload.content,
        excerpt=payload.excerpt,
    )


@case_studies_cli.command("create")
@click.option("--title", prompt=True)
@click.option("--client", prompt=True)
@click.option("--problem", default="")
@click.option("--solution", default="")
@click.option("--results", default="")
@click.option("--technologies", default="", help='Comma separated, e.g. "AWS, Lambda"')
@click.option("--slug", default=None)
@click.option("--date-completed", default=None, help="YYYY-MM-DD")
@click.option("--content", default=None)
@click.option("--excerpt", default=None)
@click.option("--draft", is_flag=True, help="Store without publishing")
def create_command(title, client, problem, solution, results, technologies, slug,
                   date_completed, content, excerpt, draft) -> None:
    try:
        payload = CaseStudyInput.model_validate({
            "title": title,
            "client": client,
            "problem": problem,
            "solution": solution,
            "results": results,
            "technologies": technologies,
            "slug": slug,
            "date_completed": date_completed,
            "content": content,
            "excerpt": excerpt,
            "status": STATUS_DRAFT if draft else STATUS_PUBLISH,
        })
        new_id = _save(_repository(), payload)
    except ValidationError as e:
        raise click.ClickException(f"Invalid case study: {e.errors()[0]['msg']}")
    except (InvalidEntityError, PersistenceError) as e:
        raise click.ClickException(str(e))
    click.echo(f"Case study {new_id} saved")


@case_studies_cli.command("import")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
def import_command(path: Path) -> None:
    """Import case studies from a JSON list (or {"case_studies": [...]})."""
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Invalid JSON: {e}")
    if isinstance(raw, list):
        raw = {"case_studies": raw}
    try:
        payload = CaseStudiesPayload.model_validate(raw)
    except ValidationError as e:
        details = "; ".join(f"{'/'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors())
        raise click.ClickException(f"Invalid import file: {details}")

    repository = _repository()
    saved = 0
    for index, item in enumerate(payload.case_studies):
        try:
            _save(repository, item)
        except (InvalidEntityError, PersistenceError) as e:
            raise click.ClickException(f"case_studies/{index}: {e} ({saved} imported before the error)")
        saved += 1
    click.echo(f"Imported {saved} case studies")


@case_studies_cli.command("list")
def list_command() -> None:
    case_studies = _repository().find_all()
    for cs in case_studies:
        techs = ", ".join(cs.technologies)
        click.echo(f"{cs.id}\t{cs.slug}\t{cs.title}\t{cs.client}\t{techs}")
    click.echo(f"{len(case_studies)} case studies")


@case_studies_cli.command("delete")
@click.argument("case_study_id", type=int)
def delete_command(case_study_id: int) -> None:
    if not _repository().delete(case_study_id):
        raise click.ClickException(f"Case study {case_study_id} not found")
    click.echo(f"Case study {case_study_id} deleted")


def _set_status(case_study_id: int, status: str) -> None:
    if not _repository().set_status(case_study_id, status):
        raise click.ClickException(f"Case study {case_study_id} not found")
    click.echo(f"Case study {case_study_id} is now {status}")


@case_studies_cli.command("publish")
@click.argument("case_study_id", type=int)
def publish_command(case_study_id: int) -> None:
    _set_status(case_study_id, STATUS_PUBLISH)


@case_studies_cli.command("unpublish")
@click.argument("case_study_id", type=int)
def unpublish_command(case_study_id: int) -> None:
    _set_status(case_study_id, STATUS_DRAFT)


@case_studies_cli.command("technologies")
def technologies_command() -> None:
    for name in get_available_technologies(_repository()):
        click.echo(name)


@case_studies_cli.command("attach-image")
@click.argument("case_study_id", type=int)
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--alt", default="", help="Alternative text for the image")
def attach_image_command(case_study_id: int, path: Path, alt: str) -> None:
    try:
        media = attach_featured_image(
            _repository(),
            case_study_id,
            path.read_bytes(),
            static_folder=current_app.static_folder,
            alt=alt,
            subdir=current_app.config.get("MEDIA_UPLOAD_SUBDIR", "uploads/case-studies"),
            max_bytes=current_app.config.get("MAX_CONTENT_LENGTH", 5 * 1024 * 1024),
        )
    except NotFoundError as e:
        raise click.ClickException(e.message)
    except InvalidMediaError as e:
        raise click.ClickException(f"Image rejected: {e.code}")
    except PersistenceError as e:
        raise click.ClickException(str(e))
    click.echo(f"Image {media.id} attached to case study {case_study_id}")
