from marshmallow import Schema, fields, pre_load, validate

SORT_ASC = "asc"
SORT_DESC = "desc"


class SearchRepositoriesSchema(Schema):
    query = fields.String(required=True, validate=validate.Length(min=1))
    sort = fields.String(load_default=None, validate=validate.OneOf([SORT_ASC, SORT_DESC]))
    ignore = fields.String(load_default=None)

    @pre_load
    def drop_blank(self, data, **kwargs):
        # Query strings arrive as '' for "?sort=&ignore="; treat those as absent
        return {k: v for k, v in data.items() if v != ""}


class RepositoryOwnerSchema(Schema):
    login = fields.String()
    id = fields.Integer()
    avatar_url = fields.String()
    html_url = fields.String()


class RepositorySchema(Schema):
    id = fields.Integer()
    name = fields.String()
    full_name = fields.String()
    owner = fields.Nested(RepositoryOwnerSchema)
    html_url = fields.String()
    description = fields.String(allow_none=True)
    stargazers_count = fields.Integer()
    forks_count = fields.Integer()
    open_issues_count = fields.Integer()
    language = fields.String(allow_none=True)
    created_at = fields.String()
    updated_at = fields.String()


class SearchRepositoriesResponseSchema(Schema):
    total_count = fields.Integer()
    incomplete_results = fields.Boolean()
    items = fields.List(fields.Nested(RepositorySchema))
