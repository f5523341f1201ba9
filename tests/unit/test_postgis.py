# Copyright 2024 Michael Maillet, Damien Davison, Sacha Davison
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Unit tests for the PostGIS image.
"""
from pathlib import Path

import pytest
from tcimages import Image, Postgis, Postgres


class TestPostgisIdentity:
    """Tests for the fixed image identity."""

    def test_default_identity(self):
        """Test the default name and tag."""
        image = Postgis()
        assert image.name() == "postgis/postgis"
        assert image.tag() == "17-3.5"
        assert image.identity() == ("postgis/postgis", "17-3.5")
        assert image.image_ref() == "postgis/postgis:17-3.5"

    def test_identity_differs_from_postgres(self):
        """Test that the wrapped image's identity is not exposed."""
        image = Postgis()
        assert image.identity() != image.postgres.identity()

    def test_identity_survives_builder_calls(self):
        """Test that no builder call changes the identity."""
        image = (
            Postgis()
            .with_host_auth()
            .with_db_name("geo")
            .with_user("admin")
            .with_password("secret")
            .with_init_sql(b"SELECT 1;")
            .with_fsync_enabled()
        )
        assert image.identity() == ("postgis/postgis", "17-3.5")

    def test_is_an_image_but_not_a_postgres(self):
        """Test that PostGIS wraps rather than extends Postgres."""
        image = Postgis()
        assert isinstance(image, Image)
        assert not isinstance(image, Postgres)


class TestPostgisForwarding:
    """Tests that capabilities come from the wrapped Postgres."""

    def test_default_matches_postgres(self):
        """Test that a default PostGIS looks like a default Postgres apart from identity."""
        postgis = Postgis()
        postgres = Postgres()
        assert postgis.env_vars() == postgres.env_vars()
        assert postgis.ready_conditions() == postgres.ready_conditions()
        assert postgis.copy_to_sources() == postgres.copy_to_sources()
        assert postgis.cmd() == postgres.cmd()

    def test_credentials(self):
        """Test db name, user and password end up in the environment."""
        image = Postgis().with_db_name("geo").with_user("admin").with_password("secret")
        env = image.environment_variables()
        assert env["POSTGRES_DB"] == "geo"
        assert env["POSTGRES_USER"] == "admin"
        assert env["POSTGRES_PASSWORD"] == "secret"
        assert image.identity() == ("postgis/postgis", "17-3.5")

    def test_host_auth(self):
        """Test that host auth sets trust mode and leaves credentials alone."""
        image = Postgis().with_host_auth()
        env = image.env_vars()
        assert env["POSTGRES_HOST_AUTH_METHOD"] == "trust"
        assert env["POSTGRES_USER"] == "postgres"
        assert env["POSTGRES_PASSWORD"] == "postgres"

    def test_init_sql_order(self):
        """Test that scripts are staged in the order they were added."""
        image = Postgis().with_init_sql(b"CREATE EXTENSION postgis;").with_init_sql(b"CREATE TABLE t (g geometry);")
        staged = image.files_to_stage()
        assert len(staged) == 2
        assert staged[0].source.data == b"CREATE EXTENSION postgis;"
        assert staged[1].source.data == b"CREATE TABLE t (g geometry);"
        assert [s.target for s in staged] == [
            "/docker-entrypoint-initdb.d/init_0.sql",
            "/docker-entrypoint-initdb.d/init_1.sql",
        ]

    def test_init_sql_order_is_observable(self):
        """Test that swapping script order gives a different configuration."""
        a, b = b"SELECT 'a';", b"SELECT 'b';"
        ab = Postgis().with_init_sql(a).with_init_sql(b)
        ba = Postgis().with_init_sql(b).with_init_sql(a)
        assert ab.copy_to_sources() != ba.copy_to_sources()

    def test_init_sql_path_not_read(self, tmp_path):
        """Test that a file reference is kept as a reference."""
        missing = tmp_path / "missing.sql"
        image = Postgis().with_init_sql(missing)
        staged = image.copy_to_sources()
        assert staged[0].source.path == missing
        assert staged[0].source.data is None

    def test_fsync(self):
        """Test the command follows the fsync setting."""
        assert Postgis().startup_command() == ("-c", "fsync=off")
        assert Postgis().with_fsync_enabled().startup_command() == ()

    def test_readiness(self):
        """Test readiness conditions are forwarded unchanged."""
        conditions = Postgis().readiness_conditions()
        assert [c.message for c in conditions] == [
            "database system is ready to accept connections",
            "database system is ready to accept connections",
        ]


class TestPostgisValueSemantics:
    """Tests that builder calls never modify the receiver."""

    @pytest.mark.parametrize("call", [
        lambda i: i.with_host_auth(),
        lambda i: i.with_db_name("geo"),
        lambda i: i.with_user("admin"),
        lambda i: i.with_password("secret"),
        lambda i: i.with_fsync_enabled(),
    ])
    def test_setters_are_idempotent(self, call):
        """Test that repeating a setter is the same as calling it once."""
        once = call(Postgis())
        twice = call(call(Postgis()))
        assert once == twice
        assert once.describe() == twice.describe()

    def test_receiver_unchanged(self):
        """Test that the original value is left as it was."""
        base = Postgis()
        base.with_db_name("geo").with_init_sql(b"SELECT 1;").with_fsync_enabled()
        assert base == Postgis()
        assert base.env_vars()["POSTGRES_DB"] == "postgres"
        assert base.copy_to_sources() == ()

    def test_branching(self):
        """Test that two configurations derived from one base do not interfere."""
        base = Postgis().with_db_name("geo").with_init_sql(b"SELECT 1;")
        first = base.with_user("alice").with_init_sql(b"SELECT 2;")
        second = base.with_user("bob")
        assert first.env_vars()["POSTGRES_USER"] == "alice"
        assert second.env_vars()["POSTGRES_USER"] == "bob"
        assert len(first.copy_to_sources()) == 2
        assert len(second.copy_to_sources()) == 1
        assert len(base.copy_to_sources()) == 1

    def test_env_vars_is_a_copy(self):
        """Test that changing the returned mapping has no effect on the image."""
        image = Postgis()
        env = image.env_vars()
        env["POSTGRES_DB"] = "changed"
        assert image.env_vars()["POSTGRES_DB"] == "postgres"

    def test_no_validation(self):
        """Test that empty values are accepted as-is."""
        image = Postgis().with_db_name("").with_user("").with_password("").with_init_sql(b"")
        assert image.env_vars()["POSTGRES_DB"] == ""
        assert image.copy_to_sources()[0].source.data == b""

    def test_accepts_text_and_path(self):
        """Test that init SQL may be given as text or a path."""
        image = Postgis().with_init_sql("SELECT 1;").with_init_sql(Path("schema.sql"))
        staged = image.copy_to_sources()
        assert staged[0].source.data == b"SELECT 1;"
        assert staged[1].source.path == Path("schema.sql")

    def test_hashable(self):
        """Test that equal descriptions hash equally and can be used in sets."""
        first = Postgis().with_db_name("geo").with_init_sql(b"SELECT 1;")
        second = Postgis().with_db_name("geo").with_init_sql(b"SELECT 1;")
        assert hash(first) == hash(second)
        assert hash(Postgres()) == hash(Postgres())
        assert len({first, second, Postgis()}) == 2

    def test_env_order_does_not_matter(self):
        """Test that setting variables in a different order gives an equal description."""
        first = Postgis().with_user("admin").with_db_name("geo")
        second = Postgis().with_db_name("geo").with_user("admin")
        assert first == second
        assert hash(first) == hash(second)
