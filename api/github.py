from __future__ import annotations

import logging

from flask import Blueprint, request, jsonify

from models.schemas.github import SearchRepositoriesSchema, SearchRepositoriesResponseSchema
from models.user import User
from services import github_service
from utils.decorators import use_guards, jwt_auth

logger = logging.getLogger(__name__)

bp = Blueprint("github", __name__)

search_schema = SearchRepositoriesSchema()
search_response_schema = SearchRepositoriesResponseSchema()


@bp.get("/search")
@use_guards(jwt_auth)
def search(current_user: User):
    """
    Search GitHub repositories, optionally dropping and sorting by name
    ---
    tags:
      - Github
    security:
      - Bearer: []
    parameters:
      - in: query
        name: query
        type: string
        required: true
        description: Search query string for repositories
      - in: query
        name: sort
        type: string
        enum: [asc, desc]
        required: false
        description: Sort repositories by name
      - in: query
        name: ignore
        type: string
        required: false
        description: Ignore repositories whose name includes this string
    responses:
      200:
        description: OK
      401:
        description: Unauthorized
      422:
        description: Validation error
      429:
        description: GitHub rate limit exceeded
      503:
        description: GitHub unavailable
    """
    params = search_schema.load(request.args.to_dict())
    logger.debug("User id=%s searching %r", current_user.id, params["query"])

    result = github_service.search_repositories(params["query"], sort=params["sort"], ignore=params["ignore"])

    return jsonify(search_response_schema.dump(result)), 200
