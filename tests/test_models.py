from api_explorer.parser.base import Param, ApiEndpoint


class TestParam:
    def test_create_required_param(self):
        p = Param(name="id", location="path", required=True, param_type="integer")
        assert p.name == "id"
        assert p.required is True
        assert p.description == ""
        assert p.default is None
        assert p.constraints == {}

    def test_defaults_to_optional_string_query(self):
        p = Param(name="q")
        assert p.location == "query"
        assert p.required is False
        assert p.param_type == "string"


class TestApiEndpoint:
    def test_create_minimal_endpoint(self):
        ep = ApiEndpoint(method="GET", path="/api/users", summary="List users")
        assert ep.parameters == []
        assert ep.request_body is None
        assert ep.content_type == "application/json"

    def test_key_is_method_and_path(self):
        ep = ApiEndpoint(method="DELETE", path="/api/users/{id}", summary="Delete user")
        assert ep.key == "DELETE /api/users/{id}"

    def test_param_lookup(self):
        ep = ApiEndpoint(
            method="GET",
            path="/api/users/{id}",
            summary="",
            parameters=[Param(name="id", location="path", required=True, param_type="integer")],
        )
        assert ep.param("id").param_type == "integer"
        assert ep.param("missing") is None

    def test_equal_endpoints_hash_alike(self):
        a = ApiEndpoint(method="GET", path="/pets", summary="List", tags=["pets"])
        b = ApiEndpoint(method="GET", path="/pets", summary="List", tags=["pets"])
        assert a == b
        assert len({a, b}) == 1

    def test_endpoint_serialization_roundtrip(self):
        ep = ApiEndpoint(
            method="POST",
            path="/api/users",
            summary="Create user",
            parameters=[Param(name="dryRun", param_type="boolean", default=False)],
            request_body={"$ref": "#/components/schemas/User"},
            tags=["users"],
        )
        data = ep.model_dump()
        assert data["key"] == "POST /api/users"
        ep2 = ApiEndpoint(**data)
        assert ep2 == ep
