from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from portfolio.content_types import get_registry
from portfolio.extensions import db, limiter
from portfolio.repositories.case_study import SqlAlchemyCaseStudyRepository
from portfolio.schemas.case_studies import CaseStudyListQuery
from portfolio.services.case_studies import (
    ViewSettings,
    get_available_technologies,
    get_case_study,
    list_case_studies,
)

# Mounted under /<API_NAMESPACE> by create_app
bp = Blueprint("case_studies_api", __name__)


def _repository() -> SqlAlchemyCaseStudyRepository:
    return SqlAlchemyCaseStudyRepository(db.session)


def _settings() -> ViewSettings:
    return ViewSettings.from_config(current_app.config)


@bp.get("/case-studies")
@limiter.limit("120 per minute")
def list_case_studies_view():
    try:
        query = CaseStudyListQuery.model_validate(request.args.to_dict())
    except ValidationError as e:
        current_app.logger.info(f"Rejected case study query: {e.errors()}")
        return jsonify({
            "error": "bad_request",
            "details": [{"field": "/".join(map(str, err["loc"])), "message": err["msg"]}
                        for err in e.errors()]
        }), 400

    items = list_case_studies(_repository(), _settings(), technology=query.technology)
    return jsonify({
        "success": True,
        "data": [item.model_dump() for item in items],
        "total": len(items),
    }), 200


@bp.get("/case-studies/<string:slug>")
@limiter.limit("120 per minute")
def case_study_detail_view(slug: str):
    item = get_case_study(_repository(), _settings(), slug)
    return jsonify({"success": True, "data": item.model_dump()}), 200


@bp.get("/technologies")
@limiter.limit("120 per minute")
def technologies_view():
    technologies = get_available_technologies(_repository())
    return jsonify({"success": True, "data": technologies, "total": len(technologies)}), 200


@bp.get("/types/<string:name>")
def content_type_view(name: str):
    content_type = get_registry(current_app).get(name)
    if content_type is None:
        return jsonify({"code": "content_type_not_found", "message": "Content type not found", "status": 404}), 404
    return jsonify({"success": True, "data": content_type.to_dict()}), 200
