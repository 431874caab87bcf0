from prism_client.shared.errors import PrismError, SchemaError, SchemaValidationError


class TestSchemaError:
    def test_init_no_path(self):
        error = SchemaError("test message")
        assert str(error) == "test message"
        assert error.schema_path is None

    def test_init_with_path(self):
        error = SchemaError("test message", "metadata/public.yaml")
        assert str(error) == "[metadata/public.yaml] test message"
        assert error.schema_path == "metadata/public.yaml"


class TestSchemaValidationError:
    def test_init_no_field_no_path(self):
        error = SchemaValidationError("validation failed")
        assert str(error) == "validation failed"
        assert error.field is None
        assert error.schema_path is None

    def test_init_with_field(self):
        error = SchemaValidationError("missing type", field="email")
        assert str(error) == "Field 'email': missing type"
        assert error.field == "email"

    def test_init_with_field_and_path(self):
        error = SchemaValidationError("missing type", "public.json", "email")
        assert str(error) == "[public.json] Field 'email': missing type"
        assert error.field == "email"
        assert error.schema_path == "public.json"

    def test_is_schema_error(self):
        assert isinstance(SchemaValidationError("x"), SchemaError)


class TestPrismError:
    def test_init_minimal(self):
        error = PrismError("boom", "NETWORK_ERROR")
        assert str(error) == "boom"
        assert error.code == "NETWORK_ERROR"
        assert error.status is None
        assert error.details is None

    def test_init_full(self):
        error = PrismError("HTTP error 404: Not Found", "HTTP_ERROR", 404, {"detail": "missing"})
        assert error.code == "HTTP_ERROR"
        assert error.status == 404
        assert error.details == {"detail": "missing"}
