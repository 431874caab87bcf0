from unittest.mock import MagicMock

import pytest

from prism_client.client.crud import CrudOperations, FilterOptions
from prism_client.shared.errors import PrismError


@pytest.fixture
def base():
    return MagicMock()


@pytest.fixture
def users(base):
    return CrudOperations(base, "public", "users")


class TestFilterOptions:
    def test_empty(self):
        assert FilterOptions().to_params() == {}

    def test_full(self):
        options = FilterOptions(
            where={"status": "active", "verified": True, "deleted_at": None},
            order_by="created_at",
            order_dir="desc",
            limit=10,
            offset=0,
        )
        assert options.to_params() == {
            "status": "active",
            "verified": "true",
            "order_by": "created_at",
            "order_dir": "desc",
            "limit": "10",
            "offset": "0",
        }


class TestCrudOperations:
    def test_base_path(self, users):
        assert users.base_path == "/public/users"

    def test_find_all(self, users, base):
        base.get.return_value = [{"id": "1"}]

        assert users.find_all(FilterOptions(limit=5)) == [{"id": "1"}]
        base.get.assert_called_once_with("/public/users", params={"limit": "5"})

    def test_find_all_empty_response(self, users, base):
        base.get.return_value = None
        assert users.find_all() == []

    def test_find_many(self, users, base):
        base.get.return_value = [{"id": "1"}, {"id": "2"}]
        assert len(users.find_many(FilterOptions(where={"org_id": "7"}))) == 2
        base.get.assert_called_once_with("/public/users", params={"org_id": "7"})

    def test_find_one(self, users, base):
        base.get.return_value = [{"id": "42", "email": "a@b.c"}]

        assert users.find_one(42) == {"id": "42", "email": "a@b.c"}
        base.get.assert_called_once_with("/public/users", params={"id": "42"})

    def test_find_one_not_found(self, users, base):
        base.get.return_value = []

        with pytest.raises(PrismError) as exc_info:
            users.find_one("missing")
        assert exc_info.value.code == "NOT_FOUND"
        assert exc_info.value.status == 404

    def test_create(self, users, base):
        base.post.return_value = {"id": "1", "email": "a@b.c"}

        assert users.create({"email": "a@b.c"}) == {"id": "1", "email": "a@b.c"}
        base.post.assert_called_once_with("/public/users", {"email": "a@b.c"})

    def test_update(self, users, base):
        base.put.return_value = {"updated_data": [{"id": "1", "email": "new@b.c"}]}

        assert users.update("1", {"email": "new@b.c"}) == {"id": "1", "email": "new@b.c"}
        base.put.assert_called_once_with(
            "/public/users", {"email": "new@b.c"}, params={"id": "1"}
        )

    @pytest.mark.parametrize("response", [None, {}, {"updated_data": []}])
    def test_update_failed(self, users, base, response):
        base.put.return_value = response

        with pytest.raises(PrismError) as exc_info:
            users.update("1", {"email": "x"})
        assert exc_info.value.code == "UPDATE_FAILED"

    def test_delete(self, users, base):
        users.delete(3)
        base.delete.assert_called_once_with("/public/users", params={"id": "3"})

    def test_count(self, users, base):
        base.get.return_value = {"count": 17}

        assert users.count(FilterOptions(where={"status": "active"})) == 17
        base.get.assert_called_once_with("/public/users/count", params={"status": "active"})

    def test_count_missing(self, users, base):
        base.get.return_value = None
        assert users.count() == 0
