from todograph.export_schema import export_schema
from todograph.utils import available_users, format_date, format_datetime


class TestFormatting:
    def test_datetime(self):
        assert format_datetime("2024-03-05T14:07:09.123456+00:00") == "05/03/2024, 14:07"

    def test_zulu_suffix(self):
        assert format_datetime("2024-03-05T14:07:09Z") == "05/03/2024, 14:07"

    def test_date(self):
        assert format_date("2024-12-31T23:59:59+00:00") == "31/12/2024"

    def test_unparseable_is_returned_as_is(self):
        assert format_datetime("yesterday") == "yesterday"


class TestAvailableUsers:
    def test_filters_assigned_users(self):
        users = [{"id": "u1", "name": "Alice"}, {"id": "u2", "name": "Bob"}, {"id": "u3", "name": "Cy"}]
        assert available_users(users, [{"id": "u2", "name": "Bob"}]) == [
            {"id": "u1", "name": "Alice"},
            {"id": "u3", "name": "Cy"},
        ]

    def test_nothing_assigned(self):
        users = [{"id": "u1", "name": "Alice"}]
        assert available_users(users, []) == users


class TestExportSchema:
    def test_writes_sdl(self, tmp_path):
        path = export_schema(str(tmp_path / "out" / "schema.graphql"))
        sdl = open(path, encoding="utf-8").read()
        assert "type Todo" in sdl
        assert "assignedUsers: [User!]!" in sdl
        assert "created_at: String!" in sdl
        assert "assignTodoToUser(todoId: ID!, userId: ID!): Todo!" in sdl
        assert "deleteAllTodos: Boolean!" in sdl
